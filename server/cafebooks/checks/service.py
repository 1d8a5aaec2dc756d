from datetime import date
import logging
from typing import Optional

from sqlalchemy.orm import Session

from cafebooks.accounting.balances import person_delta
from cafebooks.accounting.posting import PostingPlan, post
from cafebooks.accounting.reversal import reverse_source
from cafebooks.chart_of_accounts.codes import ACCOUNTS_PAYABLE
from cafebooks.chart_of_accounts.service import bank_like, by_id, require_account, resolve_account
from cafebooks.errors import ValidationError
from cafebooks.models import Account, PayableCheck, Supplier
from cafebooks.store import atomic, get_record
from cafebooks.utils import quantize_money


logger = logging.getLogger(__name__)

SOURCE_TYPE = "CHECK"


def _validate(db: Session, data: dict) -> None:
    if quantize_money(data.get("amount") or 0) <= 0:
        raise ValidationError("Check amount must be greater than zero.")
    if data.get("supplier_id") is not None:
        get_record(db, Supplier, data["supplier_id"], "Supplier")
    if data.get("account_id") is not None and db.get(Account, data["account_id"]) is None:
        raise ValidationError(f"Account {data['account_id']} not found.")


def issue_check(db: Session, payload: dict) -> PayableCheck:
    """Record a check we wrote; nothing is posted until it clears."""
    _validate(db, payload)
    with atomic(db) as batch:
        check = batch.set(PayableCheck(status="PENDING", **payload))
    logger.info("Check %s issued for %s due %s", check.check_number, check.amount, check.due_date)
    return check


def update_check(db: Session, check_id: int, payload: dict) -> PayableCheck:
    check = get_record(db, PayableCheck, check_id, "Check")
    if check.status != "PENDING":
        raise ValidationError("Only pending checks can be edited.")
    data = {"amount": check.amount, "supplier_id": check.supplier_id, "account_id": check.account_id}
    data.update(payload)
    _validate(db, data)
    with atomic(db) as batch:
        batch.update(check, **payload)
    return check


def pass_check(
    db: Session,
    check_id: int,
    *,
    account_id: Optional[int] = None,
    passed_date: Optional[date] = None,
) -> PayableCheck:
    check = get_record(db, PayableCheck, check_id, "Check")
    if check.status != "PENDING":
        raise ValidationError(f"Only pending checks can be passed (status is {check.status}).")
    chosen_id = account_id if account_id is not None else check.account_id
    if chosen_id is not None and db.get(Account, chosen_id) is None:
        raise ValidationError(f"Account {chosen_id} not found.")
    bank = resolve_account(db, by_id(chosen_id), bank_like(), purpose="check clearing account")
    payable = require_account(db, ACCOUNTS_PAYABLE)
    amount = quantize_money(check.amount)
    cleared_on = passed_date or date.today()

    with atomic(db) as batch:
        batch.update(check, status="PASSED", passed_date=cleared_on, account_id=bank.id)
        plan = PostingPlan(
            source_type=SOURCE_TYPE,
            source_id=check.id,
            txn_date=cleared_on,
            description=f"پاس شدن چک {check.check_number} - {check.payee}",
        )
        plan.debit(payable, amount)
        plan.credit(bank, amount)
        if check.supplier_id is not None:
            plan.adjust("SUPPLIER", check.supplier_id, person_delta("SUPPLIER", "DEBIT", amount))
        post(batch, plan)
    logger.info("Check %s passed from account %s", check.check_number, bank.code)
    return check


def _close_pending(db: Session, check_id: int, status: str) -> PayableCheck:
    check = get_record(db, PayableCheck, check_id, "Check")
    if check.status != "PENDING":
        raise ValidationError(f"Only pending checks can be marked {status.lower()} (status is {check.status}).")
    with atomic(db) as batch:
        batch.update(check, status=status)
    logger.info("Check %s marked %s", check.check_number, status)
    return check


def bounce_check(db: Session, check_id: int) -> PayableCheck:
    return _close_pending(db, check_id, "BOUNCED")


def cancel_check(db: Session, check_id: int) -> PayableCheck:
    return _close_pending(db, check_id, "CANCELLED")


def delete_check(db: Session, check_id: int) -> None:
    check = get_record(db, PayableCheck, check_id, "Check")
    with atomic(db) as batch:
        reverse_source(batch, SOURCE_TYPE, check.id)
        batch.delete(check)
    logger.info("Check %s deleted", check_id)


def list_checks(db: Session, status: Optional[str] = None, due_before: Optional[date] = None) -> list[PayableCheck]:
    query = db.query(PayableCheck)
    if status:
        query = query.filter(PayableCheck.status == status)
    if due_before is not None:
        query = query.filter(PayableCheck.due_date <= due_before)
    return query.order_by(PayableCheck.due_date.asc(), PayableCheck.id.asc()).all()
