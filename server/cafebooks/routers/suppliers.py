from typing import List, Optional

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from cafebooks.accounting.service import balance_history, delete_person
from cafebooks.db import get_db
from cafebooks.models import Supplier
from cafebooks.store import atomic, get_record
from cafebooks.suppliers import schemas
from cafebooks.suppliers.service import pay_supplier
from cafebooks.transfers.schemas import TransferResponse


router = APIRouter(prefix="/api", tags=["suppliers"])


@router.get("/suppliers", response_model=List[schemas.SupplierResponse])
def list_suppliers(search: Optional[str] = None, db: Session = Depends(get_db)):
    query = db.query(Supplier)
    if search:
        like = f"%{search.lower()}%"
        query = query.filter(Supplier.name.ilike(like))
    return query.order_by(Supplier.name).all()


@router.post("/suppliers", response_model=schemas.SupplierResponse, status_code=status.HTTP_201_CREATED)
def create_supplier(payload: schemas.SupplierCreate, db: Session = Depends(get_db)):
    with atomic(db) as batch:
        supplier = batch.set(Supplier(**payload.model_dump()))
    return supplier


@router.get("/suppliers/{supplier_id}", response_model=schemas.SupplierResponse)
def get_supplier(supplier_id: int, db: Session = Depends(get_db)):
    return get_record(db, Supplier, supplier_id, "Supplier")


@router.put("/suppliers/{supplier_id}", response_model=schemas.SupplierResponse)
def update_supplier(supplier_id: int, payload: schemas.SupplierUpdate, db: Session = Depends(get_db)):
    supplier = get_record(db, Supplier, supplier_id, "Supplier")
    with atomic(db) as batch:
        batch.update(supplier, **payload.model_dump(exclude_unset=True))
    return supplier


@router.delete("/suppliers/{supplier_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_supplier(supplier_id: int, db: Session = Depends(get_db)):
    delete_person(db, "SUPPLIER", supplier_id)


@router.get("/suppliers/{supplier_id}/ledger", response_model=List[schemas.BalanceAdjustmentResponse])
def supplier_ledger(supplier_id: int, db: Session = Depends(get_db)):
    get_record(db, Supplier, supplier_id, "Supplier")
    return balance_history(db, "SUPPLIER", supplier_id)


@router.post("/suppliers/{supplier_id}/payments", response_model=TransferResponse, status_code=status.HTTP_201_CREATED)
def pay_supplier_endpoint(supplier_id: int, payload: schemas.SupplierPaymentCreate, db: Session = Depends(get_db)):
    return pay_supplier(
        db,
        supplier_id,
        account_id=payload.account_id,
        amount=payload.amount,
        txn_date=payload.txn_date,
        description=payload.description,
    )
