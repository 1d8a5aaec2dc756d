from datetime import date, datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, condecimal


DecimalValue = condecimal(max_digits=18, decimal_places=2)


class CheckCreate(BaseModel):
    check_number: str = Field(..., max_length=50)
    amount: DecimalValue = Field(..., gt=0)
    payee: str = Field(..., max_length=200)
    supplier_id: Optional[int] = None
    bank_name: Optional[str] = None
    issue_date: date = Field(default_factory=date.today)
    due_date: date
    description: Optional[str] = None
    account_id: Optional[int] = None


class CheckUpdate(BaseModel):
    check_number: Optional[str] = Field(None, max_length=50)
    amount: Optional[DecimalValue] = Field(None, gt=0)
    payee: Optional[str] = None
    supplier_id: Optional[int] = None
    bank_name: Optional[str] = None
    issue_date: Optional[date] = None
    due_date: Optional[date] = None
    description: Optional[str] = None
    account_id: Optional[int] = None


class CheckPass(BaseModel):
    account_id: Optional[int] = None
    passed_date: Optional[date] = None


class CheckResponse(BaseModel):
    id: int
    check_number: str
    amount: DecimalValue
    payee: str
    supplier_id: Optional[int] = None
    bank_name: Optional[str] = None
    issue_date: date
    due_date: date
    description: Optional[str] = None
    status: str
    account_id: Optional[int] = None
    passed_date: Optional[date] = None
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)
