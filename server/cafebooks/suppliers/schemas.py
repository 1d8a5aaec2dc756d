from datetime import date, datetime
from decimal import Decimal
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, condecimal


DecimalValue = condecimal(max_digits=18, decimal_places=2)


class SupplierBase(BaseModel):
    name: str = Field(..., max_length=200)
    phone: Optional[str] = None
    category: Optional[str] = None


class SupplierCreate(SupplierBase):
    pass


class SupplierUpdate(BaseModel):
    name: Optional[str] = None
    phone: Optional[str] = None
    category: Optional[str] = None


class SupplierResponse(SupplierBase):
    id: int
    balance: Decimal
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


class SupplierPaymentCreate(BaseModel):
    account_id: int
    amount: DecimalValue = Field(..., gt=0)
    txn_date: date = Field(default_factory=date.today)
    description: Optional[str] = None


class BalanceAdjustmentResponse(BaseModel):
    id: int
    source_type: str
    source_id: int
    entity_type: str
    entity_id: int
    field: str
    delta: Decimal
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)
