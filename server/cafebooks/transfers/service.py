"""Money moved between accounts and person ledgers.

Each side of a transfer is an explicitly typed endpoint: a chart account, or a
supplier, customer or employee. Person endpoints post against their control
account and move the person's own balance by the same amount, signed by that
ledger's normal side.
"""

from datetime import date
import logging
from typing import Optional

from sqlalchemy.orm import Session

from cafebooks.accounting.balances import PERSON_CONTROL_ACCOUNT_CODES, person_delta
from cafebooks.accounting.posting import ENTITY_MODELS, PostingPlan, post
from cafebooks.accounting.reversal import reverse_source
from cafebooks.chart_of_accounts.service import require_account
from cafebooks.errors import ValidationError
from cafebooks.models import ENDPOINT_TYPES, Account, Transfer
from cafebooks.store import Batch, atomic, get_record
from cafebooks.utils import quantize_money


logger = logging.getLogger(__name__)

SOURCE_TYPE = "TRANSFER"

TRANSFER_FIELDS = ("from_type", "from_id", "to_type", "to_id", "amount", "txn_date", "description")


def _endpoint_account(db: Session, endpoint_type: str, endpoint_id: int) -> Account:
    if endpoint_type not in ENDPOINT_TYPES:
        raise ValidationError(f"Unknown transfer endpoint type {endpoint_type}.")
    if endpoint_type == "ACCOUNT":
        account = db.get(Account, endpoint_id)
        if account is None:
            raise ValidationError(f"Account {endpoint_id} not found.")
        return account
    person = db.get(ENTITY_MODELS[endpoint_type], endpoint_id)
    if person is None:
        raise ValidationError(f"{endpoint_type.title()} {endpoint_id} not found.")
    return require_account(db, PERSON_CONTROL_ACCOUNT_CODES[endpoint_type])


def _endpoint_name(db: Session, endpoint_type: str, endpoint_id: int) -> str:
    if endpoint_type == "ACCOUNT":
        return db.get(Account, endpoint_id).name
    person = db.get(ENTITY_MODELS[endpoint_type], endpoint_id)
    return getattr(person, "name", None) or getattr(person, "full_name", "")


def _validate(db: Session, data: dict) -> None:
    if quantize_money(data.get("amount") or 0) <= 0:
        raise ValidationError("Transfer amount must be greater than zero.")
    if (data["from_type"], data["from_id"]) == (data["to_type"], data["to_id"]):
        raise ValidationError("Source and destination must differ.")
    _endpoint_account(db, data["from_type"], data["from_id"])
    _endpoint_account(db, data["to_type"], data["to_id"])


def build_transfer_plan(db: Session, transfer: Transfer) -> PostingPlan:
    amount = quantize_money(transfer.amount)
    source = _endpoint_account(db, transfer.from_type, transfer.from_id)
    destination = _endpoint_account(db, transfer.to_type, transfer.to_id)
    description = transfer.description or (
        f"انتقال از {_endpoint_name(db, transfer.from_type, transfer.from_id)}"
        f" به {_endpoint_name(db, transfer.to_type, transfer.to_id)}"
    )

    plan = PostingPlan(source_type=SOURCE_TYPE, source_id=transfer.id, txn_date=transfer.txn_date, description=description)
    plan.debit(destination, amount)
    plan.credit(source, amount)
    if transfer.to_type != "ACCOUNT":
        plan.adjust(transfer.to_type, transfer.to_id, person_delta(transfer.to_type, "DEBIT", amount))
    if transfer.from_type != "ACCOUNT":
        plan.adjust(transfer.from_type, transfer.from_id, person_delta(transfer.from_type, "CREDIT", amount))
    return plan


def _stage_transfer(batch: Batch, data: dict) -> Transfer:
    transfer = batch.set(Transfer(**{key: data.get(key) for key in TRANSFER_FIELDS}))
    if transfer.txn_date is None:
        transfer.txn_date = date.today()
    batch.flush()
    post(batch, build_transfer_plan(batch.db, transfer))
    return transfer


def create_transfer(db: Session, payload: dict) -> Transfer:
    _validate(db, payload)
    with atomic(db) as batch:
        transfer = _stage_transfer(batch, payload)
    logger.info(
        "Transfer %s: %s %s -> %s %s amount %s",
        transfer.id,
        transfer.from_type,
        transfer.from_id,
        transfer.to_type,
        transfer.to_id,
        transfer.amount,
    )
    return transfer


def delete_transfer(db: Session, transfer_id: int) -> None:
    transfer = get_record(db, Transfer, transfer_id, "Transfer")
    with atomic(db) as batch:
        reverse_source(batch, SOURCE_TYPE, transfer.id)
        batch.delete(transfer)
    logger.info("Transfer %s deleted", transfer_id)


def edit_transfer(db: Session, transfer_id: int, payload: dict) -> Transfer:
    """Replace a transfer; the replacement gets a new id."""
    old = get_record(db, Transfer, transfer_id, "Transfer")
    data = {key: getattr(old, key) for key in TRANSFER_FIELDS}
    data.update(payload)
    _validate(db, data)
    with atomic(db) as batch:
        reverse_source(batch, SOURCE_TYPE, old.id)
        transfer = _stage_transfer(batch, data)
        batch.delete(old)
    logger.info("Transfer %s replaced by %s", transfer_id, transfer.id)
    return transfer


def list_transfers(db: Session, endpoint_type: Optional[str] = None, endpoint_id: Optional[int] = None) -> list[Transfer]:
    query = db.query(Transfer)
    if endpoint_type and endpoint_id is not None:
        query = query.filter(
            ((Transfer.from_type == endpoint_type) & (Transfer.from_id == endpoint_id))
            | ((Transfer.to_type == endpoint_type) & (Transfer.to_id == endpoint_id))
        )
    return query.order_by(Transfer.txn_date.desc(), Transfer.id.desc()).all()
