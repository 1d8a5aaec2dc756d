from typing import List, Optional

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from cafebooks.db import get_db
from cafebooks.models import Sale
from cafebooks.sales import schemas
from cafebooks.sales.service import delete_sale, edit_sale, list_sales, record_sale
from cafebooks.store import get_record
from cafebooks.subscriptions.service import cancel_subscription

router = APIRouter(prefix="/api/sales", tags=["sales"])


@router.get("", response_model=List[schemas.SaleResponse])
def list_sales_endpoint(stream: Optional[schemas.RevenueStream] = None, db: Session = Depends(get_db)):
    return list_sales(db, stream=stream)


@router.post("", response_model=schemas.SaleResponse, status_code=status.HTTP_201_CREATED)
def create_sale_endpoint(payload: schemas.SaleCreate, db: Session = Depends(get_db)):
    return record_sale(db, payload.model_dump())


@router.get("/{sale_id}", response_model=schemas.SaleResponse)
def get_sale_endpoint(sale_id: int, db: Session = Depends(get_db)):
    return get_record(db, Sale, sale_id, "Sale")


@router.put("/{sale_id}", response_model=schemas.SaleResponse)
def edit_sale_endpoint(sale_id: int, payload: schemas.SaleUpdate, db: Session = Depends(get_db)):
    return edit_sale(db, sale_id, payload.model_dump(exclude_unset=True))


@router.delete("/{sale_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_sale_endpoint(sale_id: int, db: Session = Depends(get_db)):
    delete_sale(db, sale_id)


@router.post("/{sale_id}/cancel-subscription", response_model=schemas.SaleResponse)
def cancel_subscription_endpoint(sale_id: int, payload: schemas.SubscriptionCancel, db: Session = Depends(get_db)):
    return cancel_subscription(db, sale_id, payload.refund_amount)
