from typing import List, Optional

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from cafebooks.db import get_db
from cafebooks.inventory import schemas
from cafebooks.inventory.service import (
    adjust_stock,
    create_item,
    delete_item,
    delete_transaction,
    list_items,
    list_transactions,
    register_usage,
    update_item,
)
from cafebooks.models import InventoryItem
from cafebooks.store import get_record

router = APIRouter(prefix="/api/inventory", tags=["inventory"])


@router.get("/items", response_model=List[schemas.InventoryItemResponse])
def list_inventory_items(search: Optional[str] = None, low_stock: bool = False, db: Session = Depends(get_db)):
    return list_items(db, search=search, low_stock=low_stock)


@router.post("/items", response_model=schemas.InventoryItemResponse, status_code=status.HTTP_201_CREATED)
def create_inventory_item(payload: schemas.InventoryItemCreate, db: Session = Depends(get_db)):
    return create_item(db, payload.model_dump())


@router.get("/items/{item_id}", response_model=schemas.InventoryItemResponse)
def get_inventory_item(item_id: int, db: Session = Depends(get_db)):
    return get_record(db, InventoryItem, item_id, "Inventory item")


@router.put("/items/{item_id}", response_model=schemas.InventoryItemResponse)
@router.patch("/items/{item_id}", response_model=schemas.InventoryItemResponse)
def update_inventory_item(item_id: int, payload: schemas.InventoryItemUpdate, db: Session = Depends(get_db)):
    return update_item(db, item_id, payload.model_dump(exclude_unset=True))


@router.delete("/items/{item_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_inventory_item(item_id: int, db: Session = Depends(get_db)):
    delete_item(db, item_id)


@router.get("/transactions", response_model=List[schemas.InventoryTransactionResponse])
def list_inventory_transactions(item_id: Optional[int] = None, db: Session = Depends(get_db)):
    return list_transactions(db, item_id=item_id)


@router.post("/usage", response_model=schemas.InventoryTransactionResponse, status_code=status.HTTP_201_CREATED)
def create_inventory_usage(payload: schemas.InventoryUsageCreate, db: Session = Depends(get_db)):
    return register_usage(db, payload.item_id, payload.quantity, payload.txn_date, payload.description)


@router.post("/adjustments", response_model=schemas.InventoryTransactionResponse, status_code=status.HTTP_201_CREATED)
def create_inventory_adjustment(payload: schemas.InventoryAdjustmentCreate, db: Session = Depends(get_db)):
    return adjust_stock(db, payload.item_id, payload.quantity_delta, payload.txn_date, payload.description)


@router.delete("/transactions/{txn_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_inventory_transaction(txn_id: int, db: Session = Depends(get_db)):
    delete_transaction(db, txn_id)
