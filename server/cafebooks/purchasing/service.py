from datetime import date
from decimal import Decimal
import logging
from typing import Optional

from sqlalchemy.orm import Session

from cafebooks.accounting.balances import person_delta
from cafebooks.accounting.posting import PostingPlan, post
from cafebooks.accounting.reversal import reverse_source
from cafebooks.chart_of_accounts.codes import ACCOUNTS_PAYABLE, RAW_MATERIALS_EXPENSE
from cafebooks.chart_of_accounts.service import bank_like, by_code, by_id, by_name, by_type, resolve_account
from cafebooks.errors import ValidationError
from cafebooks.models import Account, InventoryItem, PurchaseRequest, Supplier
from cafebooks.store import Batch, atomic, get_record
from cafebooks.utils import quantize_money


logger = logging.getLogger(__name__)

SOURCE_TYPE = "PURCHASE"

EDITABLE_FIELDS = (
    "requester",
    "amount",
    "category",
    "supplier_name",
    "supplier_id",
    "description",
    "txn_date",
    "quantity",
    "unit",
    "payment_account_id",
    "expense_account_id",
    "is_credit",
    "inventory_item_id",
    "inventory_quantity",
    "inventory_unit_price",
)


def _validate(db: Session, data: dict) -> None:
    if quantize_money(data.get("amount") or 0) <= 0:
        raise ValidationError("Purchase amount must be greater than zero.")
    if data.get("supplier_id") is not None:
        supplier = get_record(db, Supplier, data["supplier_id"], "Supplier")
        if not data.get("supplier_name"):
            data["supplier_name"] = supplier.name
    if data.get("payment_account_id") is not None and db.get(Account, data["payment_account_id"]) is None:
        raise ValidationError(f"Payment account {data['payment_account_id']} not found.")
    if data.get("inventory_item_id") is not None:
        get_record(db, InventoryItem, data["inventory_item_id"], "Inventory item")
        if Decimal(data.get("inventory_quantity") or 0) <= 0:
            raise ValidationError("Inventory quantity must be greater than zero.")


def build_purchase_plan(db: Session, purchase: PurchaseRequest) -> PostingPlan:
    """Journal for an approved purchase: expense against payables or the paying account."""
    amount = quantize_money(purchase.amount)
    expense_candidates = [by_id(purchase.expense_account_id), by_name(purchase.category)]
    if purchase.is_inventory_purchase:
        expense_candidates.append(by_code(RAW_MATERIALS_EXPENSE))
    expense_candidates.append(by_type("EXPENSE"))
    expense = resolve_account(db, *expense_candidates, purpose=f"purchase expense '{purchase.category}'")

    plan = PostingPlan(
        source_type=SOURCE_TYPE,
        source_id=purchase.id,
        txn_date=purchase.txn_date or date.today(),
        description=f"خرید: {purchase.category}" + (f" - {purchase.supplier_name}" if purchase.supplier_name else ""),
    )
    plan.debit(expense, amount)

    if purchase.is_credit:
        payable = resolve_account(db, by_code(ACCOUNTS_PAYABLE), by_type("LIABILITY"), purpose="accounts payable")
        plan.credit(payable, amount)
        if purchase.supplier_id is not None:
            plan.adjust("SUPPLIER", purchase.supplier_id, person_delta("SUPPLIER", "CREDIT", amount))
    else:
        if purchase.payment_account_id is not None and db.get(Account, purchase.payment_account_id) is None:
            raise ValidationError(f"Payment account {purchase.payment_account_id} not found.")
        paying = resolve_account(
            db,
            by_id(purchase.payment_account_id),
            bank_like(),
            by_type("ASSET"),
            purpose="purchase payment",
        )
        plan.credit(paying, amount)

    if purchase.is_inventory_purchase:
        plan.move_stock(
            purchase.inventory_item_id,
            Decimal(purchase.inventory_quantity),
            "PURCHASE",
            unit_cost=quantize_money(purchase.inventory_unit_price) if purchase.inventory_unit_price is not None else None,
            description=f"خرید {purchase.category}",
        )
    return plan


def _stage_purchase(batch: Batch, data: dict, status: str) -> PurchaseRequest:
    purchase = batch.set(PurchaseRequest(status=status, **{key: data.get(key) for key in EDITABLE_FIELDS if key in data}))
    if purchase.is_credit is None:
        purchase.is_credit = False
    if purchase.txn_date is None:
        purchase.txn_date = date.today()
    batch.flush()
    return purchase


def _post_approved(batch: Batch, purchase: PurchaseRequest) -> None:
    plan = build_purchase_plan(batch.db, purchase)
    post(batch, plan)


def create_purchase(db: Session, payload: dict) -> PurchaseRequest:
    _validate(db, payload)
    with atomic(db) as batch:
        purchase = _stage_purchase(batch, payload, "PENDING")
    logger.info("Purchase request %s created for %s", purchase.id, purchase.amount)
    return purchase


def approve_purchase(
    db: Session,
    purchase_id: int,
    *,
    payment_account_id: Optional[int] = None,
    is_credit: Optional[bool] = None,
) -> PurchaseRequest:
    purchase = get_record(db, PurchaseRequest, purchase_id, "Purchase")
    if purchase.status != "PENDING":
        raise ValidationError(f"Only pending purchases can be approved (status is {purchase.status}).")
    if payment_account_id is not None and db.get(Account, payment_account_id) is None:
        raise ValidationError(f"Payment account {payment_account_id} not found.")
    changes = {"status": "APPROVED"}
    if payment_account_id is not None:
        changes["payment_account_id"] = payment_account_id
    if is_credit is not None:
        changes["is_credit"] = is_credit
    credit = changes.get("is_credit", purchase.is_credit)
    paying_id = changes.get("payment_account_id", purchase.payment_account_id)
    if not credit and purchase.is_inventory_purchase and paying_id is None:
        raise ValidationError("A cash inventory purchase needs a payment account.")
    with atomic(db) as batch:
        batch.update(purchase, **changes)
        _post_approved(batch, purchase)
    logger.info("Purchase %s approved", purchase_id)
    return purchase


def reject_purchase(db: Session, purchase_id: int) -> PurchaseRequest:
    purchase = get_record(db, PurchaseRequest, purchase_id, "Purchase")
    if purchase.status != "PENDING":
        raise ValidationError(f"Only pending purchases can be rejected (status is {purchase.status}).")
    with atomic(db) as batch:
        batch.update(purchase, status="REJECTED")
    return purchase


def record_inventory_purchase(db: Session, payload: dict) -> PurchaseRequest:
    """Buy stock outright: an approved purchase that also receives the goods."""
    item = get_record(db, InventoryItem, payload["inventory_item_id"], "Inventory item")
    quantity = Decimal(payload.get("inventory_quantity") or 0)
    unit_price = quantize_money(payload.get("inventory_unit_price") or 0)
    if quantity <= 0 or unit_price <= 0:
        raise ValidationError("Inventory purchases need a positive quantity and unit price.")
    if not payload.get("is_credit") and payload.get("payment_account_id") is None:
        raise ValidationError("A cash inventory purchase needs a payment account.")

    data = dict(payload)
    data["amount"] = quantize_money(quantity * unit_price)
    data["category"] = data.get("category") or item.category or item.name
    data["quantity"] = data.get("quantity") or quantity
    data["unit"] = data.get("unit") or item.unit
    _validate(db, data)

    with atomic(db) as batch:
        purchase = _stage_purchase(batch, data, "APPROVED")
        _post_approved(batch, purchase)
    logger.info("Inventory purchase %s: %s x %s of item %s", purchase.id, quantity, unit_price, item.id)
    return purchase


def delete_purchase(db: Session, purchase_id: int) -> None:
    purchase = get_record(db, PurchaseRequest, purchase_id, "Purchase")
    with atomic(db) as batch:
        reverse_source(batch, SOURCE_TYPE, purchase.id)
        batch.delete(purchase)
    logger.info("Purchase %s deleted", purchase_id)


def edit_purchase(db: Session, purchase_id: int, payload: dict) -> PurchaseRequest:
    """Replace a purchase; the replacement gets a new id."""
    old = get_record(db, PurchaseRequest, purchase_id, "Purchase")
    data = {key: getattr(old, key) for key in EDITABLE_FIELDS}
    data.update(payload)
    _validate(db, data)
    if old.status == "APPROVED" and not data.get("is_credit") and data.get("inventory_item_id") is not None:
        if data.get("payment_account_id") is None:
            raise ValidationError("A cash inventory purchase needs a payment account.")
    if data.get("inventory_item_id") is not None and data.get("inventory_unit_price") is not None:
        data["amount"] = quantize_money(Decimal(data["inventory_quantity"]) * Decimal(data["inventory_unit_price"]))

    with atomic(db) as batch:
        reverse_source(batch, SOURCE_TYPE, old.id)
        purchase = _stage_purchase(batch, data, old.status)
        if purchase.status == "APPROVED":
            _post_approved(batch, purchase)
        batch.delete(old)
    logger.info("Purchase %s replaced by %s", purchase_id, purchase.id)
    return purchase


def list_purchases(db: Session, status: Optional[str] = None) -> list[PurchaseRequest]:
    query = db.query(PurchaseRequest)
    if status:
        query = query.filter(PurchaseRequest.status == status)
    return query.order_by(PurchaseRequest.txn_date.desc(), PurchaseRequest.id.desc()).all()
