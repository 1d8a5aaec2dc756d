from datetime import date, datetime
from decimal import Decimal
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class InventoryItemCreate(BaseModel):
    name: str = Field(..., max_length=200)
    unit: str = Field(..., max_length=50)
    category: Optional[str] = None
    min_stock: Optional[Decimal] = Field(None, ge=0)


class InventoryItemUpdate(BaseModel):
    name: Optional[str] = Field(None, max_length=200)
    unit: Optional[str] = Field(None, max_length=50)
    category: Optional[str] = None
    min_stock: Optional[Decimal] = Field(None, ge=0)


class InventoryItemResponse(BaseModel):
    id: int
    name: str
    unit: str
    category: Optional[str] = None
    current_stock: Decimal
    min_stock: Optional[Decimal] = None
    last_cost: Optional[Decimal] = None
    is_low_stock: bool
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)


class InventoryUsageCreate(BaseModel):
    item_id: int
    quantity: Decimal = Field(..., gt=0)
    txn_date: date = Field(default_factory=date.today)
    description: Optional[str] = None


class InventoryAdjustmentCreate(BaseModel):
    item_id: int
    quantity_delta: Decimal = Field(..., description="Positive or negative adjustment quantity.")
    txn_date: date = Field(default_factory=date.today)
    description: Optional[str] = None


class InventoryTransactionResponse(BaseModel):
    id: int
    item_id: int
    txn_type: str
    quantity: Decimal
    unit_cost: Optional[Decimal] = None
    reference_type: Optional[str] = None
    reference_id: Optional[int] = None
    description: Optional[str] = None
    txn_date: date
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)
