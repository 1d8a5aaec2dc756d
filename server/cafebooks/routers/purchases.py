from typing import List, Optional

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from cafebooks.db import get_db
from cafebooks.models import PurchaseRequest
from cafebooks.purchasing import schemas
from cafebooks.purchasing.service import (
    approve_purchase,
    create_purchase,
    delete_purchase,
    edit_purchase,
    list_purchases,
    record_inventory_purchase,
    reject_purchase,
)
from cafebooks.store import get_record

router = APIRouter(prefix="/api/purchases", tags=["purchases"])


@router.get("", response_model=List[schemas.PurchaseResponse])
def list_purchases_endpoint(status: Optional[str] = None, db: Session = Depends(get_db)):
    return list_purchases(db, status=status)


@router.post("", response_model=schemas.PurchaseResponse, status_code=status.HTTP_201_CREATED)
def create_purchase_endpoint(payload: schemas.PurchaseCreate, db: Session = Depends(get_db)):
    return create_purchase(db, payload.model_dump())


@router.post("/inventory", response_model=schemas.PurchaseResponse, status_code=status.HTTP_201_CREATED)
def create_inventory_purchase_endpoint(payload: schemas.InventoryPurchaseCreate, db: Session = Depends(get_db)):
    return record_inventory_purchase(db, payload.model_dump(exclude_none=True))


@router.get("/{purchase_id}", response_model=schemas.PurchaseResponse)
def get_purchase_endpoint(purchase_id: int, db: Session = Depends(get_db)):
    return get_record(db, PurchaseRequest, purchase_id, "Purchase")


@router.post("/{purchase_id}/approve", response_model=schemas.PurchaseResponse)
def approve_purchase_endpoint(purchase_id: int, payload: schemas.PurchaseApprove, db: Session = Depends(get_db)):
    return approve_purchase(db, purchase_id, payment_account_id=payload.payment_account_id, is_credit=payload.is_credit)


@router.post("/{purchase_id}/reject", response_model=schemas.PurchaseResponse)
def reject_purchase_endpoint(purchase_id: int, db: Session = Depends(get_db)):
    return reject_purchase(db, purchase_id)


@router.put("/{purchase_id}", response_model=schemas.PurchaseResponse)
def edit_purchase_endpoint(purchase_id: int, payload: schemas.PurchaseUpdate, db: Session = Depends(get_db)):
    return edit_purchase(db, purchase_id, payload.model_dump(exclude_unset=True))


@router.delete("/{purchase_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_purchase_endpoint(purchase_id: int, db: Session = Depends(get_db)):
    delete_purchase(db, purchase_id)
