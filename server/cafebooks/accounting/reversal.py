"""Undo every effect a posting made for one business record.

A record is identified by its ``(source_type, source_id)`` reference. Journal
entries, balance adjustments and inventory transactions written under that
reference are negated and deleted inside the caller's batch, so the deletion
of the record itself commits together with the restored balances.
"""

import logging

from sqlalchemy.orm import selectinload

from cafebooks.accounting.balances import compute_account_balance
from cafebooks.accounting.posting import ENTITY_MODELS
from cafebooks.models import (
    Account,
    BalanceAdjustment,
    InventoryItem,
    InventoryTransaction,
    JournalEntry,
    JournalLine,
)
from cafebooks.store import Batch


logger = logging.getLogger(__name__)


def reverse_source(batch: Batch, source_type: str, source_id: int) -> int:
    """Stage the reversal of everything posted for a reference; returns the number of entries removed."""
    db = batch.db

    entries = (
        db.query(JournalEntry)
        .options(selectinload(JournalEntry.lines).selectinload(JournalLine.account))
        .filter(JournalEntry.source_type == source_type, JournalEntry.source_id == source_id)
        .order_by(JournalEntry.id.asc())
        .all()
    )
    for entry in entries:
        for line in entry.lines:
            applied = compute_account_balance(line.account.type, line.debit, line.credit)
            batch.increment(Account, line.account_id, "balance", -applied)
        batch.delete(entry)

    adjustments = (
        db.query(BalanceAdjustment)
        .filter(BalanceAdjustment.source_type == source_type, BalanceAdjustment.source_id == source_id)
        .all()
    )
    for adjustment in adjustments:
        model = ENTITY_MODELS[adjustment.entity_type]
        batch.increment(model, adjustment.entity_id, adjustment.field, -adjustment.delta)
        batch.delete(adjustment)

    movements = (
        db.query(InventoryTransaction)
        .filter(
            InventoryTransaction.reference_type == source_type,
            InventoryTransaction.reference_id == source_id,
        )
        .all()
    )
    for movement in movements:
        batch.increment(InventoryItem, movement.item_id, "current_stock", -movement.quantity)
        batch.delete(movement)

    if entries or adjustments or movements:
        logger.info(
            "Reversed %s %s: %d entries, %d balance adjustments, %d stock movements",
            source_type,
            source_id,
            len(entries),
            len(adjustments),
            len(movements),
        )
    else:
        logger.info("Nothing posted for %s %s; reversal is a no-op", source_type, source_id)
    return len(entries)
