from datetime import date
from typing import List, Optional

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from cafebooks.checks import schemas
from cafebooks.checks.service import (
    bounce_check,
    cancel_check,
    delete_check,
    issue_check,
    list_checks,
    pass_check,
    update_check,
)
from cafebooks.db import get_db
from cafebooks.models import PayableCheck
from cafebooks.store import get_record

router = APIRouter(prefix="/api/checks", tags=["checks"])


@router.get("", response_model=List[schemas.CheckResponse])
def list_checks_endpoint(
    check_status: Optional[str] = None,
    due_before: Optional[date] = None,
    db: Session = Depends(get_db),
):
    return list_checks(db, status=check_status, due_before=due_before)


@router.post("", response_model=schemas.CheckResponse, status_code=status.HTTP_201_CREATED)
def issue_check_endpoint(payload: schemas.CheckCreate, db: Session = Depends(get_db)):
    return issue_check(db, payload.model_dump())


@router.get("/{check_id}", response_model=schemas.CheckResponse)
def get_check(check_id: int, db: Session = Depends(get_db)):
    return get_record(db, PayableCheck, check_id, "Check")


@router.put("/{check_id}", response_model=schemas.CheckResponse)
def update_check_endpoint(check_id: int, payload: schemas.CheckUpdate, db: Session = Depends(get_db)):
    return update_check(db, check_id, payload.model_dump(exclude_unset=True))


@router.post("/{check_id}/pass", response_model=schemas.CheckResponse)
def pass_check_endpoint(check_id: int, payload: schemas.CheckPass, db: Session = Depends(get_db)):
    return pass_check(db, check_id, account_id=payload.account_id, passed_date=payload.passed_date)


@router.post("/{check_id}/bounce", response_model=schemas.CheckResponse)
def bounce_check_endpoint(check_id: int, db: Session = Depends(get_db)):
    return bounce_check(db, check_id)


@router.post("/{check_id}/cancel", response_model=schemas.CheckResponse)
def cancel_check_endpoint(check_id: int, db: Session = Depends(get_db)):
    return cancel_check(db, check_id)


@router.delete("/{check_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_check_endpoint(check_id: int, db: Session = Depends(get_db)):
    delete_check(db, check_id)
