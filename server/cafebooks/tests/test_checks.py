from datetime import date
from decimal import Decimal

import pytest

from cafebooks.checks.service import (
    bounce_check,
    cancel_check,
    delete_check,
    issue_check,
    list_checks,
    pass_check,
    update_check,
)
from cafebooks.errors import ValidationError
from cafebooks.models import Account, JournalEntry, Supplier
from cafebooks.purchasing.service import approve_purchase, create_purchase


def account(db, code):
    return db.query(Account).filter(Account.code == code).one()


@pytest.fixture()
def supplier_owed(db):
    supplier = Supplier(name="Meat Market")
    db.add(supplier)
    db.commit()
    purchase = create_purchase(
        db, {"amount": Decimal("3000000"), "category": "هزینه مواد اولیه", "supplier_id": supplier.id, "is_credit": True}
    )
    approve_purchase(db, purchase.id)
    return supplier


def check_payload(supplier, **overrides):
    payload = {
        "check_number": "778812",
        "amount": Decimal("3000000"),
        "payee": supplier.name,
        "supplier_id": supplier.id,
        "issue_date": date(2024, 4, 1),
        "due_date": date(2024, 5, 1),
    }
    payload.update(overrides)
    return payload


def test_issuing_a_check_posts_nothing(db, supplier_owed):
    check = issue_check(db, check_payload(supplier_owed))

    assert check.status == "PENDING"
    assert db.query(JournalEntry).count() == 1
    assert [c.id for c in list_checks(db, status="PENDING", due_before=date(2024, 5, 31))] == [check.id]


def test_passing_a_check_settles_the_supplier_from_the_bank(db, supplier_owed):
    account(db, "1020").balance = Decimal("5000000")
    db.commit()
    check = issue_check(db, check_payload(supplier_owed))

    pass_check(db, check.id, passed_date=date(2024, 5, 1))

    assert check.status == "PASSED"
    assert check.account_id == account(db, "1020").id
    assert account(db, "1020").balance == Decimal("2000000")
    assert account(db, "2010").balance == 0
    assert db.get(Supplier, supplier_owed.id).balance == 0

    with pytest.raises(ValidationError):
        bounce_check(db, check.id)

    delete_check(db, check.id)
    assert account(db, "1020").balance == Decimal("5000000")
    assert account(db, "2010").balance == Decimal("3000000")
    assert db.get(Supplier, supplier_owed.id).balance == Decimal("3000000")


def test_bounced_and_cancelled_checks_stay_off_the_ledger(db, supplier_owed):
    bounced = issue_check(db, check_payload(supplier_owed, check_number="1"))
    cancelled = issue_check(db, check_payload(supplier_owed, check_number="2"))

    bounce_check(db, bounced.id)
    cancel_check(db, cancelled.id)

    assert bounced.status == "BOUNCED"
    assert cancelled.status == "CANCELLED"
    assert db.query(JournalEntry).count() == 1
    with pytest.raises(ValidationError):
        update_check(db, bounced.id, {"amount": Decimal("10")})


def test_update_pending_check(db, supplier_owed):
    check = issue_check(db, check_payload(supplier_owed))

    update_check(db, check.id, {"amount": Decimal("2500000"), "due_date": date(2024, 6, 1)})

    assert check.amount == Decimal("2500000")
    assert check.due_date == date(2024, 6, 1)
    with pytest.raises(ValidationError):
        update_check(db, check.id, {"amount": Decimal("0")})
