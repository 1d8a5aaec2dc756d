from datetime import datetime
from decimal import Decimal
from typing import Literal, Optional

from pydantic import BaseModel, ConfigDict, Field


AccountType = Literal["ASSET", "LIABILITY", "EQUITY", "REVENUE", "EXPENSE"]


class AccountCreate(BaseModel):
    name: str = Field(..., max_length=200)
    code: Optional[str] = Field(None, max_length=20)
    type: AccountType
    balance: Decimal = Decimal("0")


class AccountUpdate(BaseModel):
    name: Optional[str] = Field(None, max_length=200)
    balance: Optional[Decimal] = None


class AccountResponse(BaseModel):
    id: int
    code: str
    name: str
    type: str
    balance: Decimal
    is_default: bool
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)
