from datetime import date, timedelta
from decimal import Decimal
import logging
from typing import Optional

from sqlalchemy import func
from sqlalchemy.orm import Session

from cafebooks.accounting.posting import PostingPlan, post
from cafebooks.chart_of_accounts import codes
from cafebooks.chart_of_accounts.service import require_account
from cafebooks.errors import ValidationError
from cafebooks.models import Customer, JournalEntry, JournalLine, Sale, Subscription
from cafebooks.sales.service import SOURCE_TYPE as SALE_SOURCE_TYPE
from cafebooks.sales.service import prepare_sale_data, stage_sale
from cafebooks.store import atomic, get_record
from cafebooks.utils import ZERO, money_or_zero, quantize_money


logger = logging.getLogger(__name__)

FRIDAY = 4


def is_delivery_day(day: date) -> bool:
    return day.weekday() != FRIDAY


def calculate_subscription_end_date(start_date: date, delivery_days: int) -> date:
    """Date of the last delivery when counting ``delivery_days`` from ``start_date``, skipping Fridays."""
    if delivery_days <= 0:
        raise ValidationError("Delivery days must be greater than zero.")
    current = start_date
    delivered = 0
    while True:
        if is_delivery_day(current):
            delivered += 1
        if delivered >= delivery_days:
            return current
        current += timedelta(days=1)


def _subscription_sale_data(db: Session, customer: Customer, payload: dict) -> dict:
    price = quantize_money(payload.get("price") or 0)
    if price <= 0:
        raise ValidationError("Subscription price must be greater than zero.")
    payment_status = payload.get("payment_status") or "PAID"
    return prepare_sale_data(
        db,
        {
            "stream": "SUBSCRIPTION",
            "amount": price,
            "txn_date": payload.get("txn_date") or payload["start_date"],
            "details": f"اشتراک {payload['plan_name']} - {customer.name}",
            "duration": f"{payload['delivery_days']} روز",
            "payment_account_id": payload.get("payment_account_id"),
            "customer_id": customer.id,
            "customer_name": customer.name,
            "is_credit": payment_status == "CREDIT",
        },
    )


def _create(db: Session, customer: Customer, payload: dict, expire: Optional[Subscription] = None) -> tuple[Subscription, Sale]:
    end_date = calculate_subscription_end_date(payload["start_date"], payload["delivery_days"])
    sale_data = _subscription_sale_data(db, customer, payload)

    with atomic(db) as batch:
        if expire is not None:
            batch.update(expire, status="EXPIRED")
            for old_sale in db.query(Sale).filter(Sale.subscription_id == expire.id).all():
                batch.update(old_sale, subscription_status="EXPIRED")
        subscription = batch.set(
            Subscription(
                customer_id=customer.id,
                plan_name=payload["plan_name"],
                delivery_days=payload["delivery_days"],
                start_date=payload["start_date"],
                end_date=end_date,
                price=sale_data["amount"],
                payment_status=payload.get("payment_status") or "PAID",
                status="ACTIVE",
                renewed_from_id=expire.id if expire is not None else None,
            )
        )
        batch.flush()
        sale_data.update(subscription_id=subscription.id, subscription_status="ACTIVE")
        sale = stage_sale(batch, sale_data)
        batch.update(customer, active_subscription_id=subscription.id)
    logger.info("Subscription %s for customer %s ends %s", subscription.id, customer.id, end_date)
    return subscription, sale


def add_subscription(db: Session, payload: dict) -> tuple[Subscription, Sale]:
    customer = get_record(db, Customer, payload["customer_id"], "Customer")
    return _create(db, customer, payload)


def renew_subscription(db: Session, payload: dict) -> tuple[Subscription, Sale]:
    customer = get_record(db, Customer, payload["customer_id"], "Customer")
    previous = None
    if customer.active_subscription_id is not None:
        previous = db.get(Subscription, customer.active_subscription_id)
        if previous is not None and previous.status != "ACTIVE":
            previous = None
    return _create(db, customer, payload, expire=previous)


def cancel_subscription(db: Session, sale_id: int, refund_amount: Decimal = ZERO) -> Sale:
    sale = get_record(db, Sale, sale_id, "Sale")
    if sale.stream != "SUBSCRIPTION":
        raise ValidationError("Only subscription sales can be cancelled.")
    if sale.subscription_status == "CANCELLED":
        raise ValidationError("Subscription is already cancelled.")
    refund = money_or_zero(refund_amount)
    remaining = deferred_remaining(db, sale)
    if refund < 0 or refund > remaining:
        raise ValidationError(f"Refund must be between zero and the {remaining} still deferred for this subscription.")

    deferred = require_account(db, codes.DEFERRED_SUBSCRIPTION_REVENUE)
    cash = require_account(db, codes.CASH_ON_HAND)
    subscription = db.get(Subscription, sale.subscription_id) if sale.subscription_id else None

    with atomic(db) as batch:
        batch.update(sale, subscription_status="CANCELLED", refund=refund)
        if subscription is not None:
            batch.update(subscription, status="CANCELLED")
            customer = subscription.customer
            if customer is not None and customer.active_subscription_id == subscription.id:
                batch.update(customer, active_subscription_id=None)
        if refund > 0:
            plan = PostingPlan(
                source_type=SALE_SOURCE_TYPE,
                source_id=sale.id,
                txn_date=date.today(),
                description=f"لغو اشتراک و عودت وجه: {sale.details or ''}",
            )
            plan.debit(deferred, refund)
            plan.credit(cash, refund)
            post(batch, plan)
    logger.info("Subscription sale %s cancelled with refund %s", sale_id, refund)
    return sale


def deferred_remaining(db: Session, sale: Sale) -> Decimal:
    """Part of a subscription sale still held as deferred revenue."""
    deferred = require_account(db, codes.DEFERRED_SUBSCRIPTION_REVENUE)
    released = (
        db.query(func.coalesce(func.sum(JournalLine.debit), 0))
        .join(JournalEntry, JournalLine.journal_entry_id == JournalEntry.id)
        .filter(
            JournalEntry.source_type == SALE_SOURCE_TYPE,
            JournalEntry.source_id == sale.id,
            JournalLine.account_id == deferred.id,
        )
        .scalar()
    )
    return money_or_zero(sale.amount) - money_or_zero(released)


def recognize_revenue(db: Session, sale_id: int, amount: Decimal, txn_date: Optional[date] = None) -> JournalEntry:
    """Move earned subscription revenue out of the deferred account."""
    sale = get_record(db, Sale, sale_id, "Sale")
    if sale.stream != "SUBSCRIPTION":
        raise ValidationError("Revenue recognition applies to subscription sales only.")
    if sale.subscription_status == "CANCELLED":
        raise ValidationError("Subscription is cancelled.")
    amount = money_or_zero(amount)
    if amount <= 0:
        raise ValidationError("Recognized amount must be greater than zero.")
    remaining = deferred_remaining(db, sale)
    if amount > remaining:
        raise ValidationError(f"Only {remaining} of this subscription is still deferred.")

    deferred = require_account(db, codes.DEFERRED_SUBSCRIPTION_REVENUE)
    earned = require_account(db, codes.SUBSCRIPTION_REVENUE)
    with atomic(db) as batch:
        plan = PostingPlan(
            source_type=SALE_SOURCE_TYPE,
            source_id=sale.id,
            txn_date=txn_date or date.today(),
            description=f"شناسایی درآمد اشتراک: {sale.details or ''}",
        )
        plan.debit(deferred, amount)
        plan.credit(earned, amount)
        entry = post(batch, plan)
    logger.info("Recognized %s of subscription sale %s, %s still deferred", amount, sale_id, remaining - amount)
    return entry


def expire_subscriptions(db: Session, today: Optional[date] = None) -> int:
    today = today or date.today()
    finished = (
        db.query(Subscription)
        .filter(Subscription.status == "ACTIVE", Subscription.end_date < today)
        .all()
    )
    if not finished:
        return 0
    with atomic(db) as batch:
        for subscription in finished:
            batch.update(subscription, status="EXPIRED")
            for sale in db.query(Sale).filter(Sale.subscription_id == subscription.id).all():
                batch.update(sale, subscription_status="EXPIRED")
            customer = subscription.customer
            if customer is not None and customer.active_subscription_id == subscription.id:
                batch.update(customer, active_subscription_id=None)
    logger.info("Expired %d subscriptions ending before %s", len(finished), today)
    return len(finished)


def list_subscriptions(db: Session, customer_id: Optional[int] = None, status: Optional[str] = None) -> list[Subscription]:
    query = db.query(Subscription)
    if customer_id is not None:
        query = query.filter(Subscription.customer_id == customer_id)
    if status:
        query = query.filter(Subscription.status == status)
    return query.order_by(Subscription.start_date.desc(), Subscription.id.desc()).all()
