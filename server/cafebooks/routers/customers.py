from typing import List, Optional

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from cafebooks.accounting.service import balance_history, delete_person
from cafebooks.customers import schemas
from cafebooks.db import get_db
from cafebooks.models import Customer
from cafebooks.store import atomic, get_record
from cafebooks.suppliers.schemas import BalanceAdjustmentResponse


router = APIRouter(prefix="/api", tags=["customers"])


@router.get("/customers", response_model=List[schemas.CustomerResponse])
def list_customers(search: Optional[str] = None, db: Session = Depends(get_db)):
    query = db.query(Customer)
    if search:
        like = f"%{search}%"
        query = query.filter((Customer.name.ilike(like)) | (Customer.phone.ilike(like)))
    return query.order_by(Customer.name).all()


@router.post("/customers", response_model=schemas.CustomerResponse, status_code=status.HTTP_201_CREATED)
def create_customer(payload: schemas.CustomerCreate, db: Session = Depends(get_db)):
    with atomic(db) as batch:
        customer = batch.set(Customer(**payload.model_dump()))
    return customer


@router.get("/customers/{customer_id}", response_model=schemas.CustomerResponse)
def get_customer(customer_id: int, db: Session = Depends(get_db)):
    return get_record(db, Customer, customer_id, "Customer")


@router.put("/customers/{customer_id}", response_model=schemas.CustomerResponse)
def update_customer(customer_id: int, payload: schemas.CustomerUpdate, db: Session = Depends(get_db)):
    customer = get_record(db, Customer, customer_id, "Customer")
    with atomic(db) as batch:
        batch.update(customer, **payload.model_dump(exclude_unset=True))
    return customer


@router.delete("/customers/{customer_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_customer(customer_id: int, db: Session = Depends(get_db)):
    delete_person(db, "CUSTOMER", customer_id)


@router.get("/customers/{customer_id}/ledger", response_model=List[BalanceAdjustmentResponse])
def customer_ledger(customer_id: int, db: Session = Depends(get_db)):
    get_record(db, Customer, customer_id, "Customer")
    return balance_history(db, "CUSTOMER", customer_id)
