from datetime import date
from decimal import Decimal
import logging
from typing import Optional

from sqlalchemy.orm import Session

from cafebooks.accounting.posting import StockMovement, apply_stock_movement
from cafebooks.errors import ValidationError
from cafebooks.models import InventoryItem, InventoryTransaction, PurchaseRequest
from cafebooks.store import atomic, get_record


logger = logging.getLogger(__name__)

# Movements recorded directly against an item rather than posted by a business record.
STANDALONE_TXN_TYPES = {"USAGE", "ADJUSTMENT"}


def list_items(db: Session, search: Optional[str] = None, low_stock: bool = False) -> list[InventoryItem]:
    query = db.query(InventoryItem)
    if search:
        query = query.filter(InventoryItem.name.ilike(f"%{search}%"))
    items = query.order_by(InventoryItem.name.asc()).all()
    if low_stock:
        items = [item for item in items if item.is_low_stock]
    return items


def create_item(db: Session, payload: dict) -> InventoryItem:
    with atomic(db) as batch:
        item = batch.set(
            InventoryItem(
                name=payload["name"],
                unit=payload["unit"],
                category=payload.get("category"),
                min_stock=payload.get("min_stock"),
                current_stock=Decimal("0"),
            )
        )
    return item


def update_item(db: Session, item_id: int, payload: dict) -> InventoryItem:
    """Descriptive fields only; stock moves through purchases, usage and adjustments."""
    item = get_record(db, InventoryItem, item_id, "Inventory item")
    if "current_stock" in payload:
        raise ValidationError("Stock levels change through purchases, usage or adjustments.")
    with atomic(db) as batch:
        batch.update(item, **payload)
    return item


def delete_item(db: Session, item_id: int) -> None:
    item = get_record(db, InventoryItem, item_id, "Inventory item")
    in_use = (
        db.query(InventoryTransaction.id).filter(InventoryTransaction.item_id == item_id).first() is not None
        or db.query(PurchaseRequest.id).filter(PurchaseRequest.inventory_item_id == item_id).first() is not None
    )
    if in_use:
        raise ValidationError("Cannot delete an inventory item that has stock history.")
    with atomic(db) as batch:
        batch.delete(item)


def _record_movement(db: Session, item: InventoryItem, quantity: Decimal, txn_type: str, txn_date: Optional[date], description: Optional[str]) -> InventoryTransaction:
    with atomic(db) as batch:
        txn = apply_stock_movement(
            batch,
            StockMovement(item_id=item.id, quantity=quantity, txn_type=txn_type, description=description),
            txn_date or date.today(),
        )
    logger.info("Inventory %s of %s on item %s", txn_type.lower(), quantity, item.id)
    return txn


def register_usage(
    db: Session,
    item_id: int,
    quantity: Decimal,
    txn_date: Optional[date] = None,
    description: Optional[str] = None,
) -> InventoryTransaction:
    """Consume stock. Usage has no journal; the cost was expensed at purchase."""
    item = get_record(db, InventoryItem, item_id, "Inventory item")
    quantity = Decimal(quantity)
    if quantity <= 0:
        raise ValidationError("Usage quantity must be greater than zero.")
    if quantity > Decimal(item.current_stock or 0):
        raise ValidationError(f"Only {item.current_stock} {item.unit} of {item.name} in stock.")
    return _record_movement(db, item, -quantity, "USAGE", txn_date, description)


def adjust_stock(
    db: Session,
    item_id: int,
    quantity_delta: Decimal,
    txn_date: Optional[date] = None,
    description: Optional[str] = None,
) -> InventoryTransaction:
    item = get_record(db, InventoryItem, item_id, "Inventory item")
    quantity_delta = Decimal(quantity_delta)
    if quantity_delta == 0:
        raise ValidationError("Adjustment quantity cannot be zero.")
    if Decimal(item.current_stock or 0) + quantity_delta < 0:
        raise ValidationError("Adjustment would make stock negative.")
    return _record_movement(db, item, quantity_delta, "ADJUSTMENT", txn_date, description)


def delete_transaction(db: Session, txn_id: int) -> None:
    """Undo a usage or adjustment row; purchase movements go with their purchase."""
    txn = get_record(db, InventoryTransaction, txn_id, "Inventory transaction")
    if txn.txn_type not in STANDALONE_TXN_TYPES or txn.reference_type is not None:
        raise ValidationError("This movement belongs to another record; delete that record instead.")
    with atomic(db) as batch:
        batch.increment(InventoryItem, txn.item_id, "current_stock", -txn.quantity)
        batch.delete(txn)
    logger.info("Inventory transaction %s removed", txn_id)


def list_transactions(db: Session, item_id: Optional[int] = None, limit: int = 100) -> list[InventoryTransaction]:
    query = db.query(InventoryTransaction)
    if item_id is not None:
        query = query.filter(InventoryTransaction.item_id == item_id)
    return query.order_by(InventoryTransaction.txn_date.desc(), InventoryTransaction.id.desc()).limit(limit).all()
