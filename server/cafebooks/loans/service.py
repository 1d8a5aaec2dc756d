from datetime import date
from decimal import Decimal
import logging
from typing import Optional

from sqlalchemy.orm import Session

from cafebooks.accounting.posting import PostingPlan, post
from cafebooks.accounting.reversal import reverse_source
from cafebooks.chart_of_accounts.codes import LOAN_INTEREST_EXPENSE, LOANS_PAYABLE
from cafebooks.chart_of_accounts.service import require_account
from cafebooks.errors import ValidationError
from cafebooks.models import Account, Loan, LoanRepayment
from cafebooks.store import Batch, atomic, get_record
from cafebooks.utils import ZERO, money_or_zero, quantize_money


logger = logging.getLogger(__name__)

LOAN_SOURCE = "LOAN"
REPAYMENT_SOURCE = "LOAN_REPAYMENT"

LOAN_FIELDS = (
    "lender",
    "amount",
    "interest_rate",
    "start_date",
    "installments_count",
    "deposit_account_id",
    "description",
)


def _validate_loan(db: Session, data: dict) -> Account:
    if quantize_money(data.get("amount") or 0) <= 0:
        raise ValidationError("Loan amount must be greater than zero.")
    if Decimal(data.get("interest_rate") or 0) < 0:
        raise ValidationError("Interest rate cannot be negative.")
    deposit = db.get(Account, data["deposit_account_id"]) if data.get("deposit_account_id") is not None else None
    if deposit is None:
        raise ValidationError("A valid deposit account is required.")
    return deposit


def _stage_loan(batch: Batch, data: dict, deposit: Account) -> Loan:
    amount = quantize_money(data["amount"])
    loan = batch.set(Loan(**{key: data.get(key) for key in LOAN_FIELDS}))
    loan.amount = amount
    loan.remaining_balance = amount
    loan.status = "ACTIVE"
    if loan.interest_rate is None:
        loan.interest_rate = Decimal("0")
    batch.flush()

    plan = PostingPlan(
        source_type=LOAN_SOURCE,
        source_id=loan.id,
        txn_date=loan.start_date,
        description=f"دریافت تسهیلات از {loan.lender}",
    )
    plan.debit(deposit, amount)
    plan.credit(require_account(batch.db, LOANS_PAYABLE), amount)
    post(batch, plan)
    return loan


def create_loan(db: Session, payload: dict) -> Loan:
    deposit = _validate_loan(db, payload)
    require_account(db, LOANS_PAYABLE)
    with atomic(db) as batch:
        loan = _stage_loan(batch, payload, deposit)
    logger.info("Loan %s from %s recorded: %s", loan.id, loan.lender, loan.amount)
    return loan


def edit_loan(db: Session, loan_id: int, payload: dict) -> Loan:
    """Replace a loan that has no repayments yet; the replacement gets a new id."""
    old = get_record(db, Loan, loan_id, "Loan")
    if old.repayments:
        raise ValidationError("A loan with repayments cannot be edited; delete the repayments first.")
    data = {key: getattr(old, key) for key in LOAN_FIELDS}
    data.update(payload)
    deposit = _validate_loan(db, data)
    with atomic(db) as batch:
        reverse_source(batch, LOAN_SOURCE, old.id)
        loan = _stage_loan(batch, data, deposit)
        batch.delete(old)
    logger.info("Loan %s replaced by %s", loan_id, loan.id)
    return loan


def delete_loan(db: Session, loan_id: int) -> None:
    """Delete a loan together with every repayment made against it."""
    loan = get_record(db, Loan, loan_id, "Loan")
    with atomic(db) as batch:
        for repayment in list(loan.repayments):
            reverse_source(batch, REPAYMENT_SOURCE, repayment.id)
            batch.delete(repayment)
        reverse_source(batch, LOAN_SOURCE, loan.id)
        batch.delete(loan)
    logger.info("Loan %s deleted", loan_id)


def add_repayment(db: Session, loan_id: int, payload: dict) -> LoanRepayment:
    loan = get_record(db, Loan, loan_id, "Loan")
    if loan.status != "ACTIVE":
        raise ValidationError("This loan is already paid off.")
    amount = money_or_zero(payload.get("amount"))
    interest = money_or_zero(payload.get("interest_amount"))
    if amount <= 0:
        raise ValidationError("Repayment amount must be greater than zero.")
    if interest < 0 or interest > amount:
        raise ValidationError("Interest must be between zero and the installment amount.")
    principal = amount - interest
    remaining = money_or_zero(loan.remaining_balance)
    if principal > remaining:
        raise ValidationError(f"Principal {principal} exceeds the remaining balance {remaining}.")
    paying = db.get(Account, payload["payment_account_id"]) if payload.get("payment_account_id") is not None else None
    if paying is None:
        raise ValidationError("A valid payment account is required.")
    payable = require_account(db, LOANS_PAYABLE)
    interest_account = require_account(db, LOAN_INTEREST_EXPENSE) if interest > 0 else None
    txn_date = payload.get("txn_date") or date.today()

    with atomic(db) as batch:
        repayment = batch.set(
            LoanRepayment(
                loan_id=loan.id,
                amount=amount,
                principal_amount=principal,
                interest_amount=interest,
                txn_date=txn_date,
                payment_account_id=paying.id,
            )
        )
        batch.flush()
        plan = PostingPlan(
            source_type=REPAYMENT_SOURCE,
            source_id=repayment.id,
            txn_date=txn_date,
            description=f"بازپرداخت قسط تسهیلات {loan.lender}",
        )
        plan.debit(payable, principal)
        if interest_account is not None:
            plan.debit(interest_account, interest)
        plan.credit(paying, amount)
        plan.adjust("LOAN", loan.id, -principal, field="remaining_balance")
        post(batch, plan)
        if remaining - principal <= ZERO:
            batch.update(loan, status="PAID_OFF")
    logger.info("Loan %s repayment %s: principal %s interest %s", loan.id, repayment.id, principal, interest)
    return repayment


def delete_repayment(db: Session, repayment_id: int) -> None:
    repayment = get_record(db, LoanRepayment, repayment_id, "Loan repayment")
    loan = repayment.loan
    restored = money_or_zero(loan.remaining_balance) + money_or_zero(repayment.principal_amount)
    with atomic(db) as batch:
        reverse_source(batch, REPAYMENT_SOURCE, repayment.id)
        batch.delete(repayment)
        batch.update(loan, status="PAID_OFF" if restored <= ZERO else "ACTIVE")
    logger.info("Loan repayment %s deleted; loan %s remaining %s", repayment_id, loan.id, restored)


def list_loans(db: Session, status: Optional[str] = None) -> list[Loan]:
    query = db.query(Loan)
    if status:
        query = query.filter(Loan.status == status)
    return query.order_by(Loan.start_date.desc(), Loan.id.desc()).all()
