from datetime import date, datetime
from decimal import Decimal
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, condecimal


DecimalValue = condecimal(max_digits=18, decimal_places=2)


class LoanCreate(BaseModel):
    lender: str = Field(..., max_length=200)
    amount: DecimalValue = Field(..., gt=0)
    interest_rate: Decimal = Field(Decimal("0"), ge=0)
    start_date: date
    installments_count: Optional[int] = Field(None, gt=0)
    deposit_account_id: int
    description: Optional[str] = None


class LoanUpdate(BaseModel):
    lender: Optional[str] = None
    amount: Optional[DecimalValue] = Field(None, gt=0)
    interest_rate: Optional[Decimal] = Field(None, ge=0)
    start_date: Optional[date] = None
    installments_count: Optional[int] = Field(None, gt=0)
    deposit_account_id: Optional[int] = None
    description: Optional[str] = None


class RepaymentCreate(BaseModel):
    amount: DecimalValue = Field(..., gt=0)
    interest_amount: DecimalValue = Field(Decimal("0"), ge=0)
    txn_date: date = Field(default_factory=date.today)
    payment_account_id: int


class RepaymentResponse(BaseModel):
    id: int
    loan_id: int
    amount: DecimalValue
    principal_amount: DecimalValue
    interest_amount: DecimalValue
    txn_date: date
    payment_account_id: int
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


class LoanResponse(BaseModel):
    id: int
    lender: str
    amount: DecimalValue
    interest_rate: Decimal
    start_date: date
    installments_count: Optional[int] = None
    remaining_balance: DecimalValue
    status: str
    deposit_account_id: int
    description: Optional[str] = None
    created_at: datetime
    repayments: List[RepaymentResponse] = Field(default_factory=list)

    model_config = ConfigDict(from_attributes=True)
