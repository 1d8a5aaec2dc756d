from datetime import date, datetime
from decimal import Decimal
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, condecimal


DecimalValue = condecimal(max_digits=18, decimal_places=2)


class PurchaseCreate(BaseModel):
    requester: Optional[str] = None
    amount: DecimalValue = Field(..., gt=0)
    category: str = Field(..., max_length=200)
    supplier_name: Optional[str] = None
    supplier_id: Optional[int] = None
    description: Optional[str] = None
    txn_date: date = Field(default_factory=date.today)
    quantity: Optional[Decimal] = None
    unit: Optional[str] = None
    payment_account_id: Optional[int] = None
    expense_account_id: Optional[int] = None
    is_credit: bool = False


class PurchaseUpdate(BaseModel):
    requester: Optional[str] = None
    amount: Optional[DecimalValue] = Field(None, gt=0)
    category: Optional[str] = Field(None, max_length=200)
    supplier_name: Optional[str] = None
    supplier_id: Optional[int] = None
    description: Optional[str] = None
    txn_date: Optional[date] = None
    quantity: Optional[Decimal] = None
    unit: Optional[str] = None
    payment_account_id: Optional[int] = None
    expense_account_id: Optional[int] = None
    is_credit: Optional[bool] = None
    inventory_quantity: Optional[Decimal] = Field(None, gt=0)
    inventory_unit_price: Optional[DecimalValue] = Field(None, gt=0)


class PurchaseApprove(BaseModel):
    payment_account_id: Optional[int] = None
    is_credit: Optional[bool] = None


class InventoryPurchaseCreate(BaseModel):
    inventory_item_id: int
    inventory_quantity: Decimal = Field(..., gt=0)
    inventory_unit_price: DecimalValue = Field(..., gt=0)
    requester: Optional[str] = None
    category: Optional[str] = None
    supplier_id: Optional[int] = None
    supplier_name: Optional[str] = None
    description: Optional[str] = None
    txn_date: date = Field(default_factory=date.today)
    payment_account_id: Optional[int] = None
    is_credit: bool = False


class PurchaseResponse(BaseModel):
    id: int
    requester: Optional[str] = None
    amount: DecimalValue
    category: str
    supplier_name: Optional[str] = None
    supplier_id: Optional[int] = None
    description: Optional[str] = None
    status: str
    txn_date: date
    quantity: Optional[Decimal] = None
    unit: Optional[str] = None
    payment_account_id: Optional[int] = None
    expense_account_id: Optional[int] = None
    is_credit: bool
    inventory_item_id: Optional[int] = None
    inventory_quantity: Optional[Decimal] = None
    inventory_unit_price: Optional[DecimalValue] = None
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)
