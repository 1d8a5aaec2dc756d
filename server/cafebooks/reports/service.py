from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal
from typing import Optional

from sqlalchemy import case, func
from sqlalchemy.orm import Session

from cafebooks.accounting.balances import compute_account_balance, normal_side
from cafebooks.chart_of_accounts.codes import CASH_BALANCE_CODES
from cafebooks.models import Account, JournalEntry, JournalLine, Sale
from cafebooks.utils import ZERO, money_or_zero


@dataclass
class TrialBalanceRow:
    account_id: int
    code: str
    name: str
    type: str
    debit: Decimal
    credit: Decimal


@dataclass
class TrialBalance:
    rows: list[TrialBalanceRow]
    total_debit: Decimal
    total_credit: Decimal

    @property
    def is_balanced(self) -> bool:
        return self.total_debit == self.total_credit


@dataclass
class FinancialSummary:
    total_revenue: Decimal
    total_expenses: Decimal
    net_profit: Decimal
    cash_balance: Decimal
    revenue_by_stream: dict[str, Decimal] = field(default_factory=dict)


def trial_balance(db: Session) -> TrialBalance:
    rows: list[TrialBalanceRow] = []
    for account in db.query(Account).order_by(Account.code.asc()).all():
        balance = money_or_zero(account.balance)
        if normal_side(account.type) == "DEBIT":
            debit, credit = (balance, ZERO) if balance >= 0 else (ZERO, -balance)
        else:
            debit, credit = (ZERO, balance) if balance >= 0 else (-balance, ZERO)
        rows.append(
            TrialBalanceRow(
                account_id=account.id,
                code=account.code,
                name=account.name,
                type=account.type,
                debit=debit,
                credit=credit,
            )
        )
    return TrialBalance(
        rows=rows,
        total_debit=sum((row.debit for row in rows), ZERO),
        total_credit=sum((row.credit for row in rows), ZERO),
    )


def _period_movements(db: Session, start: Optional[date], end: Optional[date]) -> dict[int, Decimal]:
    query = (
        db.query(
            JournalLine.account_id,
            func.coalesce(func.sum(JournalLine.debit), 0),
            func.coalesce(func.sum(JournalLine.credit), 0),
        )
        .join(JournalEntry, JournalLine.journal_entry_id == JournalEntry.id)
        .group_by(JournalLine.account_id)
    )
    if start is not None:
        query = query.filter(JournalEntry.txn_date >= start)
    if end is not None:
        query = query.filter(JournalEntry.txn_date <= end)
    accounts = {account.id: account for account in db.query(Account).all()}
    return {
        account_id: compute_account_balance(accounts[account_id].type, money_or_zero(debit), money_or_zero(credit))
        for account_id, debit, credit in query.all()
        if account_id in accounts
    }


def financial_summary(db: Session, start: Optional[date] = None, end: Optional[date] = None) -> FinancialSummary:
    """Revenue, expenses and profit from balances, or from postings within a date range."""
    accounts = db.query(Account).all()
    if start is None and end is None:
        amounts = {account.id: money_or_zero(account.balance) for account in accounts}
    else:
        amounts = _period_movements(db, start, end)

    total_revenue = sum((amounts.get(a.id, ZERO) for a in accounts if a.type == "REVENUE"), ZERO)
    total_expenses = sum((amounts.get(a.id, ZERO) for a in accounts if a.type == "EXPENSE"), ZERO)
    cash_balance = sum(
        (money_or_zero(a.balance) for a in accounts if a.type == "ASSET" and a.code in CASH_BALANCE_CODES),
        ZERO,
    )

    retained = case(
        (Sale.subscription_status == "CANCELLED", Sale.amount - Sale.refund),
        else_=Sale.amount,
    )
    sales = db.query(Sale.stream, func.coalesce(func.sum(retained), 0)).group_by(Sale.stream)
    if start is not None:
        sales = sales.filter(Sale.txn_date >= start)
    if end is not None:
        sales = sales.filter(Sale.txn_date <= end)
    by_stream = {stream: ZERO for stream in ("CAFE", "SUBSCRIPTION", "ASSESSMENT")}
    for stream, total in sales.all():
        by_stream[stream] = money_or_zero(total)

    return FinancialSummary(
        total_revenue=total_revenue,
        total_expenses=total_expenses,
        net_profit=total_revenue - total_expenses,
        cash_balance=cash_balance,
        revenue_by_stream=by_stream,
    )
