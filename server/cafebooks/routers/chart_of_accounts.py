from typing import List, Optional

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from cafebooks.chart_of_accounts import schemas
from cafebooks.chart_of_accounts.service import create_account, delete_account, list_accounts, update_account
from cafebooks.db import get_db
from cafebooks.models import Account
from cafebooks.store import get_record

router = APIRouter(prefix="/api", tags=["chart-of-accounts"])


@router.get("/accounts", response_model=List[schemas.AccountResponse])
def list_chart_of_accounts(
    type: Optional[schemas.AccountType] = None,
    q: Optional[str] = None,
    db: Session = Depends(get_db),
):
    return list_accounts(db, account_type=type, q=q)


@router.post("/accounts", response_model=schemas.AccountResponse, status_code=status.HTTP_201_CREATED)
def create_chart_account(payload: schemas.AccountCreate, db: Session = Depends(get_db)):
    return create_account(db, payload.model_dump())


@router.get("/accounts/{account_id}", response_model=schemas.AccountResponse)
def get_chart_account(account_id: int, db: Session = Depends(get_db)):
    return get_record(db, Account, account_id, "Account")


@router.put("/accounts/{account_id}", response_model=schemas.AccountResponse)
@router.patch("/accounts/{account_id}", response_model=schemas.AccountResponse)
def update_chart_account(account_id: int, payload: schemas.AccountUpdate, db: Session = Depends(get_db)):
    account = get_record(db, Account, account_id, "Account")
    data = {key: value for key, value in payload.model_dump(exclude_unset=True).items() if value is not None}
    return update_account(db, account, data)


@router.delete("/accounts/{account_id}", response_model=dict)
def delete_chart_account(account_id: int, db: Session = Depends(get_db)):
    delete_account(db, account_id)
    return {"status": "ok"}
