from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal
import logging
from typing import List, Optional

from cafebooks.accounting.balances import compute_account_balance
from cafebooks.errors import UnbalancedEntryError, ValidationError
from cafebooks.models import (
    Account,
    BalanceAdjustment,
    Customer,
    Employee,
    InventoryItem,
    InventoryTransaction,
    JournalEntry,
    JournalLine,
    Loan,
    Supplier,
)
from cafebooks.store import Batch, get_record
from cafebooks.utils import ZERO, quantize_money


logger = logging.getLogger(__name__)

# Entity kinds a posting may adjust outside the chart of accounts.
ENTITY_MODELS = {
    "SUPPLIER": Supplier,
    "CUSTOMER": Customer,
    "EMPLOYEE": Employee,
    "LOAN": Loan,
}


def has_balance_history(db, entity_type: str, entity_id: int) -> bool:
    return (
        db.query(BalanceAdjustment.id)
        .filter(BalanceAdjustment.entity_type == entity_type, BalanceAdjustment.entity_id == entity_id)
        .first()
        is not None
    )


@dataclass(frozen=True)
class JournalLineInput:
    account_id: int
    debit: Decimal = ZERO
    credit: Decimal = ZERO


@dataclass(frozen=True)
class BalanceDelta:
    entity_type: str
    entity_id: int
    delta: Decimal
    field: str = "balance"


@dataclass(frozen=True)
class StockMovement:
    item_id: int
    quantity: Decimal
    txn_type: str
    unit_cost: Optional[Decimal] = None
    description: Optional[str] = None


@dataclass
class PostingPlan:
    """Everything one business event changes, computed before anything is written."""

    source_type: str
    source_id: Optional[int]
    txn_date: date
    description: Optional[str] = None
    lines: List[JournalLineInput] = field(default_factory=list)
    balance_deltas: List[BalanceDelta] = field(default_factory=list)
    stock_movements: List[StockMovement] = field(default_factory=list)

    def debit(self, account: Account, amount: Decimal) -> None:
        amount = quantize_money(amount)
        if amount:
            self.lines.append(JournalLineInput(account_id=account.id, debit=amount))

    def credit(self, account: Account, amount: Decimal) -> None:
        amount = quantize_money(amount)
        if amount:
            self.lines.append(JournalLineInput(account_id=account.id, credit=amount))

    def adjust(self, entity_type: str, entity_id: int, delta: Decimal, field: str = "balance") -> None:
        delta = quantize_money(delta)
        if delta:
            self.balance_deltas.append(BalanceDelta(entity_type, entity_id, delta, field))

    def move_stock(
        self,
        item_id: int,
        quantity: Decimal,
        txn_type: str,
        unit_cost: Optional[Decimal] = None,
        description: Optional[str] = None,
    ) -> None:
        self.stock_movements.append(StockMovement(item_id, Decimal(quantity), txn_type, unit_cost, description))


def ensure_balanced(lines: List[JournalLineInput]) -> None:
    for line in lines:
        if line.debit < 0 or line.credit < 0:
            raise ValidationError("Journal line amounts cannot be negative.")
        if bool(line.debit) == bool(line.credit):
            raise ValidationError("Each journal line must carry exactly one of debit or credit.")
    total_debits = sum((line.debit for line in lines), ZERO)
    total_credits = sum((line.credit for line in lines), ZERO)
    if total_debits != total_credits:
        raise UnbalancedEntryError(
            f"Journal entry is unbalanced: debits={total_debits} credits={total_credits}"
        )


def apply_stock_movement(
    batch: Batch,
    movement: StockMovement,
    txn_date: date,
    reference_type: Optional[str] = None,
    reference_id: Optional[int] = None,
) -> InventoryTransaction:
    item = get_record(batch.db, InventoryItem, movement.item_id, "Inventory item")
    batch.increment(InventoryItem, item.id, "current_stock", movement.quantity)
    if movement.txn_type == "PURCHASE" and movement.unit_cost is not None:
        batch.update(item, last_cost=movement.unit_cost)
    return batch.set(
        InventoryTransaction(
            item_id=item.id,
            txn_type=movement.txn_type,
            quantity=movement.quantity,
            unit_cost=movement.unit_cost,
            reference_type=reference_type,
            reference_id=reference_id,
            description=movement.description,
            txn_date=txn_date,
        )
    )


def post(batch: Batch, plan: PostingPlan) -> Optional[JournalEntry]:
    """Stage a posting plan into ``batch``; the caller commits.

    Returns the staged journal entry, or ``None`` for plans without lines
    (events that only move stock or person balances).
    """
    ensure_balanced(plan.lines)
    db = batch.db

    account_ids = {line.account_id for line in plan.lines}
    accounts = {account.id: account for account in db.query(Account).filter(Account.id.in_(account_ids)).all()}
    missing = account_ids - set(accounts)
    if missing:
        raise ValidationError(f"Accounts not found: {sorted(missing)}")
    for delta in plan.balance_deltas:
        if delta.entity_type not in ENTITY_MODELS:
            raise ValidationError(f"Unknown balance entity type {delta.entity_type}.")

    entry = None
    if plan.lines:
        entry = JournalEntry(
            txn_date=plan.txn_date,
            description=plan.description,
            source_type=plan.source_type,
            source_id=plan.source_id,
        )
        entry.lines = [
            JournalLine(
                account_id=line.account_id,
                account_name=accounts[line.account_id].name,
                debit=line.debit,
                credit=line.credit,
            )
            for line in plan.lines
        ]
        batch.set(entry)
        for line in plan.lines:
            account = accounts[line.account_id]
            batch.increment(Account, account.id, "balance", compute_account_balance(account.type, line.debit, line.credit))

    for delta in plan.balance_deltas:
        batch.increment(ENTITY_MODELS[delta.entity_type], delta.entity_id, delta.field, delta.delta)
        batch.set(
            BalanceAdjustment(
                source_type=plan.source_type,
                source_id=plan.source_id,
                entity_type=delta.entity_type,
                entity_id=delta.entity_id,
                field=delta.field,
                delta=delta.delta,
            )
        )

    for movement in plan.stock_movements:
        apply_stock_movement(batch, movement, plan.txn_date, plan.source_type, plan.source_id)

    batch.flush()
    logger.info(
        "Posted %s %s: %d lines, %d balance adjustments, %d stock movements",
        plan.source_type,
        plan.source_id,
        len(plan.lines),
        len(plan.balance_deltas),
        len(plan.stock_movements),
    )
    return entry
