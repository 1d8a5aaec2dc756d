from datetime import date
import logging
from typing import Optional

from sqlalchemy.orm import Session

from cafebooks.accounting.posting import PostingPlan, post
from cafebooks.accounting.reversal import reverse_source
from cafebooks.chart_of_accounts.codes import COURIER_SALARY_EXPENSE, SALARY_EXPENSE
from cafebooks.chart_of_accounts.service import by_code, require_account, resolve_account
from cafebooks.errors import ValidationError
from cafebooks.models import Account, Employee, PayrollPayment
from cafebooks.store import Batch, atomic, get_record
from cafebooks.utils import quantize_money


logger = logging.getLogger(__name__)

SOURCE_TYPE = "PAYROLL"

PAYMENT_FIELDS = ("employee_id", "total_amount", "payment_account_id", "txn_date", "notes")


def _validate(db: Session, data: dict) -> Employee:
    employee = get_record(db, Employee, data["employee_id"], "Employee")
    if quantize_money(data.get("total_amount") or 0) <= 0:
        raise ValidationError("Salary amount must be greater than zero.")
    if data.get("payment_account_id") is None:
        raise ValidationError("A payment account is required to pay salary.")
    if db.get(Account, data["payment_account_id"]) is None:
        raise ValidationError(f"Payment account {data['payment_account_id']} not found.")
    return employee


def build_payroll_plan(db: Session, payment: PayrollPayment, employee: Employee) -> PostingPlan:
    if employee.is_courier:
        expense = resolve_account(
            db, by_code(COURIER_SALARY_EXPENSE), by_code(SALARY_EXPENSE), purpose="courier salary expense"
        )
    else:
        expense = require_account(db, SALARY_EXPENSE)
    paying = db.get(Account, payment.payment_account_id)

    plan = PostingPlan(
        source_type=SOURCE_TYPE,
        source_id=payment.id,
        txn_date=payment.txn_date,
        description=f"پرداخت حقوق: {payment.employee_name} - {payment.notes or ''}",
    )
    plan.debit(expense, payment.total_amount)
    plan.credit(paying, payment.total_amount)
    return plan


def _stage_payment(batch: Batch, data: dict, employee: Employee) -> PayrollPayment:
    payment = batch.set(
        PayrollPayment(
            employee_name=employee.full_name,
            **{key: data.get(key) for key in PAYMENT_FIELDS},
        )
    )
    if payment.txn_date is None:
        payment.txn_date = date.today()
    batch.flush()
    post(batch, build_payroll_plan(batch.db, payment, employee))
    return payment


def pay_salary(db: Session, payload: dict) -> PayrollPayment:
    employee = _validate(db, payload)
    with atomic(db) as batch:
        payment = _stage_payment(batch, payload, employee)
    logger.info("Salary %s paid to employee %s", payment.total_amount, employee.id)
    return payment


def delete_payment(db: Session, payment_id: int) -> None:
    payment = get_record(db, PayrollPayment, payment_id, "Payroll payment")
    with atomic(db) as batch:
        reverse_source(batch, SOURCE_TYPE, payment.id)
        batch.delete(payment)
    logger.info("Payroll payment %s deleted", payment_id)


def edit_payment(db: Session, payment_id: int, payload: dict) -> PayrollPayment:
    """Replace a salary payment; the replacement gets a new id."""
    old = get_record(db, PayrollPayment, payment_id, "Payroll payment")
    data = {key: getattr(old, key) for key in PAYMENT_FIELDS}
    data.update(payload)
    employee = _validate(db, data)
    with atomic(db) as batch:
        reverse_source(batch, SOURCE_TYPE, old.id)
        payment = _stage_payment(batch, data, employee)
        batch.delete(old)
    logger.info("Payroll payment %s replaced by %s", payment_id, payment.id)
    return payment


def list_payments(db: Session, employee_id: Optional[int] = None) -> list[PayrollPayment]:
    query = db.query(PayrollPayment)
    if employee_id is not None:
        query = query.filter(PayrollPayment.employee_id == employee_id)
    return query.order_by(PayrollPayment.txn_date.desc(), PayrollPayment.id.desc()).all()
