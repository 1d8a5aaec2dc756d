from decimal import Decimal

from pydantic import BaseModel, ConfigDict


class TrialBalanceRowResponse(BaseModel):
    account_id: int
    code: str
    name: str
    type: str
    debit: Decimal
    credit: Decimal

    model_config = ConfigDict(from_attributes=True)


class TrialBalanceResponse(BaseModel):
    rows: list[TrialBalanceRowResponse]
    total_debit: Decimal
    total_credit: Decimal
    is_balanced: bool

    model_config = ConfigDict(from_attributes=True)


class FinancialSummaryResponse(BaseModel):
    total_revenue: Decimal
    total_expenses: Decimal
    net_profit: Decimal
    cash_balance: Decimal
    revenue_by_stream: dict[str, Decimal]

    model_config = ConfigDict(from_attributes=True)
