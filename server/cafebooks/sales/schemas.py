from datetime import date, datetime
from decimal import Decimal
from typing import List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, condecimal, model_validator


DecimalValue = condecimal(max_digits=18, decimal_places=2)
RevenueStream = Literal["CAFE", "SUBSCRIPTION", "ASSESSMENT"]


class CardTransferCreate(BaseModel):
    sender: Optional[str] = None
    amount: DecimalValue = Field(..., gt=0)
    receiver_account_id: Optional[int] = None


class CardTransferResponse(CardTransferCreate):
    id: int

    model_config = ConfigDict(from_attributes=True)


class SaleCreate(BaseModel):
    stream: RevenueStream
    txn_date: date = Field(default_factory=date.today)
    details: Optional[str] = None
    duration: Optional[str] = None
    amount: Optional[DecimalValue] = None
    gross_amount: Optional[DecimalValue] = None
    discount: DecimalValue = Decimal("0")
    refund: DecimalValue = Decimal("0")
    cash_amount: DecimalValue = Decimal("0")
    pos_amount: DecimalValue = Decimal("0")
    snappfood_amount: DecimalValue = Decimal("0")
    tapsifood_amount: DecimalValue = Decimal("0")
    foodex_amount: DecimalValue = Decimal("0")
    employee_credit_amount: DecimalValue = Decimal("0")
    credit_employee_id: Optional[int] = None
    payment_account_id: Optional[int] = None
    card_transfers: List[CardTransferCreate] = Field(default_factory=list)
    customer_id: Optional[int] = None
    customer_name: Optional[str] = None
    is_credit: bool = False

    @model_validator(mode="after")
    def check_amounts(self):
        if self.stream == "CAFE" and self.gross_amount is None:
            raise ValueError("Cafe sales need a gross amount.")
        if self.stream != "CAFE" and self.amount is None:
            raise ValueError("Subscription and assessment sales need an amount.")
        return self


class SaleUpdate(BaseModel):
    txn_date: Optional[date] = None
    details: Optional[str] = None
    duration: Optional[str] = None
    amount: Optional[DecimalValue] = None
    gross_amount: Optional[DecimalValue] = None
    discount: Optional[DecimalValue] = None
    refund: Optional[DecimalValue] = None
    cash_amount: Optional[DecimalValue] = None
    pos_amount: Optional[DecimalValue] = None
    snappfood_amount: Optional[DecimalValue] = None
    tapsifood_amount: Optional[DecimalValue] = None
    foodex_amount: Optional[DecimalValue] = None
    employee_credit_amount: Optional[DecimalValue] = None
    credit_employee_id: Optional[int] = None
    payment_account_id: Optional[int] = None
    card_transfers: Optional[List[CardTransferCreate]] = None
    customer_id: Optional[int] = None
    customer_name: Optional[str] = None
    is_credit: Optional[bool] = None


class SubscriptionCancel(BaseModel):
    refund_amount: DecimalValue = Decimal("0")


class SaleResponse(BaseModel):
    id: int
    stream: str
    amount: DecimalValue
    txn_date: date
    details: Optional[str] = None
    duration: Optional[str] = None
    gross_amount: Optional[DecimalValue] = None
    discount: DecimalValue
    refund: DecimalValue
    cash_amount: DecimalValue
    pos_amount: DecimalValue
    snappfood_amount: DecimalValue
    tapsifood_amount: DecimalValue
    foodex_amount: DecimalValue
    employee_credit_amount: DecimalValue
    credit_employee_id: Optional[int] = None
    payment_account_id: Optional[int] = None
    customer_id: Optional[int] = None
    customer_name: Optional[str] = None
    subscription_id: Optional[int] = None
    subscription_status: Optional[str] = None
    is_credit: bool
    card_transfers: List[CardTransferResponse] = Field(default_factory=list)
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)
