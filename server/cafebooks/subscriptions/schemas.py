from datetime import date, datetime
from decimal import Decimal
from typing import Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, condecimal

from cafebooks.sales.schemas import SaleResponse


DecimalValue = condecimal(max_digits=18, decimal_places=2)


class SubscriptionCreate(BaseModel):
    customer_id: int
    plan_name: str = Field(..., max_length=200)
    delivery_days: int = Field(..., gt=0)
    start_date: date
    price: DecimalValue = Field(..., gt=0)
    payment_status: Literal["PAID", "CREDIT"] = "PAID"
    payment_account_id: Optional[int] = None
    txn_date: Optional[date] = None


class RevenueRecognition(BaseModel):
    amount: DecimalValue = Field(..., gt=0)
    txn_date: Optional[date] = None


class SubscriptionResponse(BaseModel):
    id: int
    customer_id: int
    plan_name: str
    delivery_days: int
    start_date: date
    end_date: date
    price: DecimalValue
    payment_status: str
    status: str
    renewed_from_id: Optional[int] = None
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


class SubscriptionSaleResponse(BaseModel):
    subscription: SubscriptionResponse
    sale: SaleResponse


class ExpireResponse(BaseModel):
    expired: int
    as_of: date


class DeferredBalanceResponse(BaseModel):
    sale_id: int
    remaining: Decimal
