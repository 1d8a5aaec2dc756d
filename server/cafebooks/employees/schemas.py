from datetime import date
from decimal import Decimal
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, condecimal


DecimalValue = condecimal(max_digits=18, decimal_places=2)


class EmployeeBase(BaseModel):
    full_name: str = Field(..., max_length=200)
    role: str = Field(..., max_length=100)
    department: Optional[str] = None
    base_salary: DecimalValue = Field(Decimal("0"), ge=0)
    join_date: Optional[date] = None


class EmployeeCreate(EmployeeBase):
    pass


class EmployeeUpdate(BaseModel):
    full_name: Optional[str] = None
    role: Optional[str] = None
    department: Optional[str] = None
    base_salary: Optional[DecimalValue] = Field(None, ge=0)
    join_date: Optional[date] = None


class EmployeeResponse(EmployeeBase):
    id: int
    balance: Decimal
    is_courier: bool

    model_config = ConfigDict(from_attributes=True)
