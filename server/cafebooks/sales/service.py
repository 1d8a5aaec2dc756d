from datetime import date
from decimal import Decimal
import logging
from typing import Optional

from sqlalchemy.orm import Session, selectinload

from cafebooks.accounting.balances import person_delta
from cafebooks.accounting.posting import PostingPlan, post
from cafebooks.accounting.reversal import reverse_source
from cafebooks.chart_of_accounts import codes
from cafebooks.chart_of_accounts.service import (
    by_code,
    by_id,
    by_type,
    find_account_by_code,
    require_account,
    resolve_account,
)
from cafebooks.errors import ValidationError
from cafebooks.models import (
    Account,
    Customer,
    Employee,
    JournalEntry,
    JournalLine,
    Sale,
    SaleCardTransfer,
    Subscription,
)
from cafebooks.sales.calculations import CafeReceipts, CardTransferInput, group_card_transfers, validate_cafe_sale
from cafebooks.store import Batch, atomic, get_record
from cafebooks.utils import ZERO, money_or_zero, quantize_money


logger = logging.getLogger(__name__)

SOURCE_TYPE = "SALE"

SALE_FIELDS = (
    "stream",
    "amount",
    "txn_date",
    "details",
    "duration",
    "gross_amount",
    "discount",
    "refund",
    "cash_amount",
    "pos_amount",
    "snappfood_amount",
    "tapsifood_amount",
    "foodex_amount",
    "employee_credit_amount",
    "credit_employee_id",
    "payment_account_id",
    "customer_id",
    "customer_name",
    "subscription_id",
    "subscription_status",
    "is_credit",
)

MONEY_FIELDS = (
    "discount",
    "refund",
    "cash_amount",
    "pos_amount",
    "snappfood_amount",
    "tapsifood_amount",
    "foodex_amount",
    "employee_credit_amount",
)


def _receipts_from(data: dict) -> CafeReceipts:
    return CafeReceipts(
        cash=money_or_zero(data.get("cash_amount")),
        pos=money_or_zero(data.get("pos_amount")),
        snappfood=money_or_zero(data.get("snappfood_amount")),
        tapsifood=money_or_zero(data.get("tapsifood_amount")),
        foodex=money_or_zero(data.get("foodex_amount")),
        employee_credit=money_or_zero(data.get("employee_credit_amount")),
        card_transfers=tuple(
            CardTransferInput(
                amount=money_or_zero(t.get("amount")),
                sender=t.get("sender"),
                receiver_account_id=t.get("receiver_account_id"),
            )
            for t in data.get("card_transfers") or []
        ),
    )


def prepare_sale_data(db: Session, payload: dict) -> dict:
    """Validate a sale payload and fill in derived amounts; nothing is written."""
    data = dict(payload)
    for key in MONEY_FIELDS:
        data[key] = money_or_zero(data.get(key))
    data["is_credit"] = bool(data.get("is_credit"))
    data["txn_date"] = data.get("txn_date") or date.today()

    if data.get("payment_account_id") is not None and db.get(Account, data["payment_account_id"]) is None:
        raise ValidationError(f"Payment account {data['payment_account_id']} not found.")

    if data["stream"] == "CAFE":
        receipts = _receipts_from(data)
        data["amount"] = validate_cafe_sale(data.get("gross_amount"), data["discount"], data["refund"], receipts)
        data["gross_amount"] = money_or_zero(data.get("gross_amount"))
        for transfer in receipts.card_transfers:
            if transfer.receiver_account_id is not None and db.get(Account, transfer.receiver_account_id) is None:
                raise ValidationError(f"Receiving account {transfer.receiver_account_id} not found.")
        if data.get("credit_employee_id") is not None:
            get_record(db, Employee, data["credit_employee_id"], "Employee")
            if receipts.employee_credit <= 0:
                raise ValidationError("An employee was given without an employee credit amount.")
        data["is_credit"] = False
    else:
        data["amount"] = quantize_money(data.get("amount") or 0)
        if data["amount"] <= 0:
            raise ValidationError("Sale amount must be greater than zero.")
        if data["is_credit"] and data.get("customer_id") is None:
            raise ValidationError("A credit sale needs a customer.")

    if data.get("customer_id") is not None:
        customer = get_record(db, Customer, data["customer_id"], "Customer")
        data["customer_name"] = data.get("customer_name") or customer.name
    return data


def _build_cafe_plan(db: Session, sale: Sale, plan: PostingPlan) -> None:
    revenue = require_account(db, codes.CAFE_REVENUE)

    if money_or_zero(sale.cash_amount) > 0:
        plan.debit(require_account(db, codes.CASH_ON_HAND), sale.cash_amount)

    transfers = [
        CardTransferInput(amount=t.amount, sender=t.sender, receiver_account_id=t.receiver_account_id)
        for t in sale.card_transfers
    ]
    if money_or_zero(sale.pos_amount) > 0 or transfers:
        bank = resolve_account(
            db,
            by_id(sale.payment_account_id),
            by_code(codes.BANK),
            by_type("ASSET"),
            purpose="cafe card receipts",
        )
        bank_debits: dict[int, Decimal] = {}
        if money_or_zero(sale.pos_amount) > 0:
            bank_debits[bank.id] = money_or_zero(sale.pos_amount)
        for account_id, amount in group_card_transfers(transfers, bank.id).items():
            bank_debits[account_id] = bank_debits.get(account_id, ZERO) + amount
        for account_id, amount in bank_debits.items():
            plan.debit(db.get(Account, account_id), amount)

    for code, amount in (
        (codes.SNAPPFOOD_RECEIVABLE, sale.snappfood_amount),
        (codes.TAPSIFOOD_RECEIVABLE, sale.tapsifood_amount),
        (codes.FOODEX_RECEIVABLE, sale.foodex_amount),
    ):
        if money_or_zero(amount) > 0:
            plan.debit(require_account(db, code), amount)

    employee_credit = money_or_zero(sale.employee_credit_amount)
    if employee_credit > 0:
        plan.debit(require_account(db, codes.EMPLOYEE_RECEIVABLE), employee_credit)
        if sale.credit_employee_id is not None:
            plan.adjust("EMPLOYEE", sale.credit_employee_id, person_delta("EMPLOYEE", "DEBIT", employee_credit))

    if money_or_zero(sale.discount) > 0:
        plan.debit(require_account(db, codes.SALES_DISCOUNTS), sale.discount)
    if money_or_zero(sale.refund) > 0:
        plan.debit(require_account(db, codes.SALES_RETURNS), sale.refund)

    plan.credit(revenue, sale.gross_amount)


def _build_simple_plan(db: Session, sale: Sale, plan: PostingPlan) -> None:
    amount = money_or_zero(sale.amount)
    if sale.stream == "SUBSCRIPTION":
        revenue = require_account(db, codes.DEFERRED_SUBSCRIPTION_REVENUE)
    else:
        revenue = require_account(db, codes.ASSESSMENT_REVENUE)

    if sale.is_credit:
        plan.debit(require_account(db, codes.ACCOUNTS_RECEIVABLE), amount)
        plan.adjust("CUSTOMER", sale.customer_id, person_delta("CUSTOMER", "DEBIT", amount))
    else:
        receiving = resolve_account(
            db,
            by_id(sale.payment_account_id),
            by_code(codes.CASH_ON_HAND),
            by_type("ASSET"),
            purpose=f"{sale.stream.lower()} sale receipt",
        )
        plan.debit(receiving, amount)
    plan.credit(revenue, amount)


def build_sale_plan(db: Session, sale: Sale) -> PostingPlan:
    plan = PostingPlan(
        source_type=SOURCE_TYPE,
        source_id=sale.id,
        txn_date=sale.txn_date or date.today(),
        description=f"فروش: {sale.details or sale.stream}",
    )
    if sale.stream == "CAFE":
        _build_cafe_plan(db, sale, plan)
    else:
        _build_simple_plan(db, sale, plan)
    return plan


def stage_sale(batch: Batch, data: dict) -> Sale:
    sale = Sale(**{key: data[key] for key in SALE_FIELDS if key in data})
    sale.card_transfers = [
        SaleCardTransfer(
            sender=t.get("sender"),
            amount=money_or_zero(t.get("amount")),
            receiver_account_id=t.get("receiver_account_id"),
        )
        for t in data.get("card_transfers") or []
    ]
    batch.set(sale)
    batch.flush()
    post(batch, build_sale_plan(batch.db, sale))
    return sale


def _unlink_subscription(batch: Batch, subscription: Subscription) -> None:
    """Stage the removal of a subscription, handing the customer back to the plan it renewed."""
    db = batch.db
    customer = subscription.customer
    previous = db.get(Subscription, subscription.renewed_from_id) if subscription.renewed_from_id else None
    if previous is not None and previous.status == "EXPIRED":
        batch.update(previous, status="ACTIVE")
        for previous_sale in db.query(Sale).filter(Sale.subscription_id == previous.id).all():
            if previous_sale.subscription_status == "EXPIRED":
                batch.update(previous_sale, subscription_status="ACTIVE")
    else:
        previous = None

    if customer is not None and customer.active_subscription_id in (subscription.id, None):
        batch.update(customer, active_subscription_id=previous.id if previous is not None else None)

    for successor in db.query(Subscription).filter(Subscription.renewed_from_id == subscription.id).all():
        batch.update(successor, renewed_from_id=None)
    batch.delete(subscription)


def remove_sale(batch: Batch, sale: Sale) -> None:
    """Stage the reversal of a sale together with its subscription."""
    reverse_source(batch, SOURCE_TYPE, sale.id)
    if sale.subscription_id is not None:
        subscription = batch.db.get(Subscription, sale.subscription_id)
        if subscription is not None:
            _unlink_subscription(batch, subscription)
    batch.delete(sale)


def recognized_revenue(db: Session, sale: Sale) -> list[tuple[date, Optional[str], Decimal]]:
    """Revenue recognitions posted under a subscription sale, oldest first."""
    earned = find_account_by_code(db, codes.SUBSCRIPTION_REVENUE)
    if sale.stream != "SUBSCRIPTION" or earned is None:
        return []
    rows = (
        db.query(JournalEntry.txn_date, JournalEntry.description, JournalLine.credit)
        .join(JournalLine, JournalLine.journal_entry_id == JournalEntry.id)
        .filter(
            JournalEntry.source_type == SOURCE_TYPE,
            JournalEntry.source_id == sale.id,
            JournalLine.account_id == earned.id,
            JournalLine.credit > 0,
        )
        .order_by(JournalEntry.id.asc())
        .all()
    )
    return [(txn_date, description, money_or_zero(credit)) for txn_date, description, credit in rows]


def record_sale(db: Session, payload: dict) -> Sale:
    data = prepare_sale_data(db, payload)
    with atomic(db) as batch:
        sale = stage_sale(batch, data)
    logger.info("Sale %s recorded: %s %s", sale.id, sale.stream, sale.amount)
    return sale


def delete_sale(db: Session, sale_id: int) -> None:
    sale = get_record(db, Sale, sale_id, "Sale")
    with atomic(db) as batch:
        remove_sale(batch, sale)
    logger.info("Sale %s deleted", sale_id)


def edit_sale(db: Session, sale_id: int, payload: dict) -> Sale:
    """Replace a sale; the replacement gets a new id.

    Revenue already recognized for a subscription sale is posted again under
    the replacement, so editing never moves earned revenue back to deferred.
    """
    old = get_record(db, Sale, sale_id, "Sale")
    if old.subscription_status == "CANCELLED":
        raise ValidationError("A cancelled subscription sale cannot be edited.")
    data = {key: getattr(old, key) for key in SALE_FIELDS}
    data["card_transfers"] = [
        {"sender": t.sender, "amount": t.amount, "receiver_account_id": t.receiver_account_id}
        for t in old.card_transfers
    ]
    data.update(payload)
    data["stream"] = old.stream
    data = prepare_sale_data(db, data)

    recognitions = recognized_revenue(db, old)
    if recognitions:
        recognized = sum((amount for _, _, amount in recognitions), ZERO)
        if data["amount"] < recognized:
            raise ValidationError(f"{recognized} of this subscription is already recognized as revenue.")
        deferred = require_account(db, codes.DEFERRED_SUBSCRIPTION_REVENUE)
        earned = require_account(db, codes.SUBSCRIPTION_REVENUE)

    with atomic(db) as batch:
        reverse_source(batch, SOURCE_TYPE, old.id)
        sale = stage_sale(batch, data)
        for txn_date, description, amount in recognitions:
            plan = PostingPlan(source_type=SOURCE_TYPE, source_id=sale.id, txn_date=txn_date, description=description)
            plan.debit(deferred, amount)
            plan.credit(earned, amount)
            post(batch, plan)
        if old.subscription_id is not None:
            subscription = db.get(Subscription, old.subscription_id)
            if subscription is not None:
                batch.update(subscription, price=sale.amount)
        batch.delete(old)
    logger.info("Sale %s replaced by %s", sale_id, sale.id)
    return sale


def list_sales(db: Session, stream: Optional[str] = None) -> list[Sale]:
    query = db.query(Sale).options(selectinload(Sale.card_transfers))
    if stream:
        query = query.filter(Sale.stream == stream)
    return query.order_by(Sale.txn_date.desc(), Sale.id.desc()).all()
