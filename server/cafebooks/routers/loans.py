from typing import List, Optional

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from cafebooks.db import get_db
from cafebooks.loans import schemas
from cafebooks.loans.service import (
    add_repayment,
    create_loan,
    delete_loan,
    delete_repayment,
    edit_loan,
    list_loans,
)
from cafebooks.models import Loan
from cafebooks.store import get_record

router = APIRouter(prefix="/api/loans", tags=["loans"])


@router.get("", response_model=List[schemas.LoanResponse])
def list_loans_endpoint(loan_status: Optional[str] = None, db: Session = Depends(get_db)):
    return list_loans(db, status=loan_status)


@router.post("", response_model=schemas.LoanResponse, status_code=status.HTTP_201_CREATED)
def create_loan_endpoint(payload: schemas.LoanCreate, db: Session = Depends(get_db)):
    return create_loan(db, payload.model_dump())


@router.get("/{loan_id}", response_model=schemas.LoanResponse)
def get_loan(loan_id: int, db: Session = Depends(get_db)):
    return get_record(db, Loan, loan_id, "Loan")


@router.put("/{loan_id}", response_model=schemas.LoanResponse)
def edit_loan_endpoint(loan_id: int, payload: schemas.LoanUpdate, db: Session = Depends(get_db)):
    return edit_loan(db, loan_id, payload.model_dump(exclude_unset=True))


@router.delete("/{loan_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_loan_endpoint(loan_id: int, db: Session = Depends(get_db)):
    delete_loan(db, loan_id)


@router.post("/{loan_id}/repayments", response_model=schemas.RepaymentResponse, status_code=status.HTTP_201_CREATED)
def add_repayment_endpoint(loan_id: int, payload: schemas.RepaymentCreate, db: Session = Depends(get_db)):
    return add_repayment(db, loan_id, payload.model_dump())


@router.delete("/repayments/{repayment_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_repayment_endpoint(repayment_id: int, db: Session = Depends(get_db)):
    delete_repayment(db, repayment_id)
