from datetime import date, datetime
from typing import Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, condecimal, model_validator


DecimalValue = condecimal(max_digits=18, decimal_places=2)
EndpointType = Literal["ACCOUNT", "SUPPLIER", "CUSTOMER", "EMPLOYEE"]


class TransferCreate(BaseModel):
    from_type: EndpointType
    from_id: int
    to_type: EndpointType
    to_id: int
    amount: DecimalValue = Field(..., gt=0)
    txn_date: date = Field(default_factory=date.today)
    description: Optional[str] = None

    @model_validator(mode="after")
    def check_distinct_endpoints(self):
        if (self.from_type, self.from_id) == (self.to_type, self.to_id):
            raise ValueError("Source and destination must differ.")
        return self


class TransferUpdate(BaseModel):
    from_type: Optional[EndpointType] = None
    from_id: Optional[int] = None
    to_type: Optional[EndpointType] = None
    to_id: Optional[int] = None
    amount: Optional[DecimalValue] = Field(None, gt=0)
    txn_date: Optional[date] = None
    description: Optional[str] = None


class TransferResponse(BaseModel):
    id: int
    from_type: str
    from_id: int
    to_type: str
    to_id: int
    amount: DecimalValue
    txn_date: date
    description: Optional[str] = None
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)
