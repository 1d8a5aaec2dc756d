from datetime import date
import logging
from typing import Optional

from sqlalchemy.orm import Session, selectinload

from cafebooks.accounting.posting import ENTITY_MODELS, JournalLineInput, PostingPlan, has_balance_history, post
from cafebooks.accounting.reversal import reverse_source
from cafebooks.errors import NotFoundError, ValidationError
from cafebooks.models import (
    BalanceAdjustment,
    JournalEntry,
    JournalLine,
    PayableCheck,
    PayrollPayment,
    PurchaseRequest,
    Sale,
)
from cafebooks.store import atomic, get_record
from cafebooks.utils import money_or_zero


logger = logging.getLogger(__name__)

# Business records that keep a person referenced after its balance is settled.
PERSON_REFERENCES = {
    "SUPPLIER": (PurchaseRequest.supplier_id, PayableCheck.supplier_id),
    "CUSTOMER": (Sale.customer_id,),
    "EMPLOYEE": (PayrollPayment.employee_id, Sale.credit_employee_id),
}


def create_manual_entry(
    db: Session,
    *,
    entry_date: date,
    memo: Optional[str],
    lines: list[JournalLineInput],
) -> JournalEntry:
    if len(lines) < 2:
        raise ValidationError("A journal entry needs at least one debit and one credit line.")
    with atomic(db) as batch:
        plan = PostingPlan(source_type="MANUAL", source_id=None, txn_date=entry_date, description=memo, lines=list(lines))
        entry = post(batch, plan)
        # Manual entries are their own source record.
        batch.update(entry, source_id=entry.id)
    return get_journal_entry(db, entry.id)


def delete_manual_entry(db: Session, entry_id: int) -> None:
    entry = get_journal_entry(db, entry_id)
    if entry.source_type != "MANUAL":
        raise ValidationError(f"Entry {entry_id} was posted by {entry.source_type}; delete that record instead.")
    with atomic(db) as batch:
        reverse_source(batch, "MANUAL", entry.source_id)
    logger.info("Manual journal entry %s deleted", entry_id)


def get_journal_entry(db: Session, entry_id: int) -> JournalEntry:
    entry = (
        db.query(JournalEntry)
        .options(selectinload(JournalEntry.lines))
        .filter(JournalEntry.id == entry_id)
        .first()
    )
    if entry is None:
        raise NotFoundError(f"Journal entry {entry_id} not found.")
    return entry


def list_journal_entries(
    db: Session,
    *,
    limit: int = 50,
    source_type: Optional[str] = None,
    source_id: Optional[int] = None,
    account_id: Optional[int] = None,
) -> list[JournalEntry]:
    query = db.query(JournalEntry).options(selectinload(JournalEntry.lines))
    if source_type:
        query = query.filter(JournalEntry.source_type == source_type)
    if source_id is not None:
        query = query.filter(JournalEntry.source_id == source_id)
    if account_id is not None:
        query = query.filter(JournalEntry.lines.any(JournalLine.account_id == account_id))
    return query.order_by(JournalEntry.txn_date.desc(), JournalEntry.id.desc()).limit(limit).all()


def balance_history(db: Session, entity_type: str, entity_id: int) -> list[BalanceAdjustment]:
    """Every posted change to a person's or loan's balance, newest first."""
    return (
        db.query(BalanceAdjustment)
        .filter(BalanceAdjustment.entity_type == entity_type, BalanceAdjustment.entity_id == entity_id)
        .order_by(BalanceAdjustment.id.desc())
        .all()
    )


def delete_person(db: Session, entity_type: str, entity_id: int) -> None:
    """Remove a supplier, customer or employee that no posting ever touched."""
    person = get_record(db, ENTITY_MODELS[entity_type], entity_id, entity_type.title())
    referenced = any(
        db.query(column).filter(column == entity_id).first() is not None
        for column in PERSON_REFERENCES[entity_type]
    )
    if referenced or has_balance_history(db, entity_type, entity_id) or money_or_zero(person.balance) != 0:
        raise ValidationError(f"{entity_type.title()} {entity_id} has ledger history and cannot be deleted.")
    with atomic(db) as batch:
        batch.delete(person)
    logger.info("%s %s deleted", entity_type.title(), entity_id)
