from datetime import date, datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, condecimal


DecimalValue = condecimal(max_digits=18, decimal_places=2)


class PayrollPaymentCreate(BaseModel):
    employee_id: int
    total_amount: DecimalValue = Field(..., gt=0)
    payment_account_id: int
    txn_date: date = Field(default_factory=date.today)
    notes: Optional[str] = None


class PayrollPaymentUpdate(BaseModel):
    employee_id: Optional[int] = None
    total_amount: Optional[DecimalValue] = Field(None, gt=0)
    payment_account_id: Optional[int] = None
    txn_date: Optional[date] = None
    notes: Optional[str] = None


class PayrollPaymentResponse(BaseModel):
    id: int
    employee_id: int
    employee_name: str
    total_amount: DecimalValue
    payment_account_id: int
    txn_date: date
    notes: Optional[str] = None
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)
