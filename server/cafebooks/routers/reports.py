from datetime import date
from typing import Optional

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from cafebooks.db import get_db
from cafebooks.reports import schemas
from cafebooks.reports.service import financial_summary, trial_balance

router = APIRouter(prefix="/api/reports", tags=["reports"])


@router.get("/trial-balance", response_model=schemas.TrialBalanceResponse)
def get_trial_balance(db: Session = Depends(get_db)):
    return trial_balance(db)


@router.get("/financial-summary", response_model=schemas.FinancialSummaryResponse)
def get_financial_summary(
    start_date: Optional[date] = None,
    end_date: Optional[date] = None,
    db: Session = Depends(get_db),
):
    return financial_summary(db, start=start_date, end=end_date)
