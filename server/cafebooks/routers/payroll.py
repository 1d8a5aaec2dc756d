from typing import List, Optional

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from cafebooks.db import get_db
from cafebooks.payroll import schemas
from cafebooks.payroll.service import delete_payment, edit_payment, list_payments, pay_salary

router = APIRouter(prefix="/api/payroll", tags=["payroll"])


@router.get("/payments", response_model=List[schemas.PayrollPaymentResponse])
def list_payments_endpoint(employee_id: Optional[int] = None, db: Session = Depends(get_db)):
    return list_payments(db, employee_id=employee_id)


@router.post("/payments", response_model=schemas.PayrollPaymentResponse, status_code=status.HTTP_201_CREATED)
def pay_salary_endpoint(payload: schemas.PayrollPaymentCreate, db: Session = Depends(get_db)):
    return pay_salary(db, payload.model_dump())


@router.put("/payments/{payment_id}", response_model=schemas.PayrollPaymentResponse)
def edit_payment_endpoint(payment_id: int, payload: schemas.PayrollPaymentUpdate, db: Session = Depends(get_db)):
    return edit_payment(db, payment_id, payload.model_dump(exclude_unset=True))


@router.delete("/payments/{payment_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_payment_endpoint(payment_id: int, db: Session = Depends(get_db)):
    delete_payment(db, payment_id)
