from datetime import date, datetime
from decimal import Decimal
from typing import Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


JournalDirection = Literal["DEBIT", "CREDIT"]


class JournalLineCreate(BaseModel):
    account_id: int
    direction: JournalDirection
    amount: Decimal = Field(..., gt=Decimal("0"))


class JournalEntryCreate(BaseModel):
    date: date
    memo: Optional[str] = None
    lines: list[JournalLineCreate]

    @field_validator("lines")
    @classmethod
    def validate_lines(cls, value: list[JournalLineCreate]) -> list[JournalLineCreate]:
        directions = {line.direction for line in value}
        if directions != {"DEBIT", "CREDIT"}:
            raise ValueError("Journal entries must include at least one DEBIT line and one CREDIT line.")
        return value


class JournalLineResponse(BaseModel):
    id: int
    account_id: int
    account_name: str
    debit: Decimal
    credit: Decimal

    model_config = ConfigDict(from_attributes=True)


class JournalEntryResponse(BaseModel):
    id: int
    txn_date: date
    description: Optional[str] = None
    source_type: str
    source_id: Optional[int] = None
    posted_at: datetime
    total_debit: Decimal
    total_credit: Decimal
    lines: list[JournalLineResponse]

    model_config = ConfigDict(from_attributes=True)
