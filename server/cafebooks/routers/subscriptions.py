from datetime import date
from typing import List, Optional

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from cafebooks.accounting import schemas as accounting_schemas
from cafebooks.db import get_db
from cafebooks.models import Sale
from cafebooks.store import get_record
from cafebooks.subscriptions import schemas
from cafebooks.subscriptions.service import (
    add_subscription,
    deferred_remaining,
    expire_subscriptions,
    list_subscriptions,
    recognize_revenue,
    renew_subscription,
)

router = APIRouter(prefix="/api/subscriptions", tags=["subscriptions"])


@router.get("", response_model=List[schemas.SubscriptionResponse])
def list_subscriptions_endpoint(
    customer_id: Optional[int] = None,
    status: Optional[str] = None,
    db: Session = Depends(get_db),
):
    return list_subscriptions(db, customer_id=customer_id, status=status)


@router.post("", response_model=schemas.SubscriptionSaleResponse, status_code=status.HTTP_201_CREATED)
def add_subscription_endpoint(payload: schemas.SubscriptionCreate, db: Session = Depends(get_db)):
    subscription, sale = add_subscription(db, payload.model_dump())
    return {"subscription": subscription, "sale": sale}


@router.post("/renew", response_model=schemas.SubscriptionSaleResponse, status_code=status.HTTP_201_CREATED)
def renew_subscription_endpoint(payload: schemas.SubscriptionCreate, db: Session = Depends(get_db)):
    subscription, sale = renew_subscription(db, payload.model_dump())
    return {"subscription": subscription, "sale": sale}


@router.post("/expire", response_model=schemas.ExpireResponse)
def expire_subscriptions_endpoint(as_of: Optional[date] = None, db: Session = Depends(get_db)):
    as_of = as_of or date.today()
    return {"expired": expire_subscriptions(db, as_of), "as_of": as_of}


@router.get("/sales/{sale_id}/deferred", response_model=schemas.DeferredBalanceResponse)
def deferred_balance_endpoint(sale_id: int, db: Session = Depends(get_db)):
    sale = get_record(db, Sale, sale_id, "Sale")
    return {"sale_id": sale.id, "remaining": deferred_remaining(db, sale)}


@router.post(
    "/sales/{sale_id}/recognize",
    response_model=accounting_schemas.JournalEntryResponse,
    status_code=status.HTTP_201_CREATED,
)
def recognize_revenue_endpoint(sale_id: int, payload: schemas.RevenueRecognition, db: Session = Depends(get_db)):
    return recognize_revenue(db, sale_id, payload.amount, payload.txn_date)
