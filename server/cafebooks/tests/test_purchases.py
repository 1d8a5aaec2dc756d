from decimal import Decimal

import pytest

from cafebooks.errors import NotFoundError, ValidationError
from cafebooks.models import Account, InventoryItem, JournalEntry, PurchaseRequest, Supplier
from cafebooks.purchasing.service import (
    approve_purchase,
    create_purchase,
    edit_purchase,
    list_purchases,
    reject_purchase,
)


def account(db, code):
    return db.query(Account).filter(Account.code == code).one()


def test_pending_purchase_posts_nothing_until_approved(db):
    purchase = create_purchase(db, {"amount": Decimal("250000"), "category": "ملزومات اداری", "requester": "Mona"})

    assert purchase.status == "PENDING"
    assert db.query(JournalEntry).count() == 0
    assert [p.id for p in list_purchases(db, status="PENDING")] == [purchase.id]

    approve_purchase(db, purchase.id, payment_account_id=account(db, "1020").id)

    assert db.get(PurchaseRequest, purchase.id).status == "APPROVED"
    assert account(db, "5030").balance == Decimal("250000")
    assert account(db, "1020").balance == Decimal("-250000")


def test_cash_purchase_without_account_falls_back_to_bank(db):
    purchase = create_purchase(db, {"amount": Decimal("90000"), "category": "بیمه"})

    approve_purchase(db, purchase.id)

    assert account(db, "5060").balance == Decimal("90000")
    assert account(db, "1020").balance == Decimal("-90000")


def test_explicit_expense_account_wins_over_category(db):
    rent = account(db, "5040")
    purchase = create_purchase(
        db, {"amount": Decimal("100"), "category": "هزینه مواد اولیه", "expense_account_id": rent.id, "is_credit": True}
    )

    approve_purchase(db, purchase.id)

    assert account(db, "5040").balance == Decimal("100")
    assert account(db, "5010").balance == 0


def test_only_pending_purchases_can_be_approved_or_rejected(db):
    purchase = create_purchase(db, {"amount": Decimal("100"), "category": "بیمه"})
    reject_purchase(db, purchase.id)

    assert db.get(PurchaseRequest, purchase.id).status == "REJECTED"
    with pytest.raises(ValidationError):
        approve_purchase(db, purchase.id)
    with pytest.raises(ValidationError):
        reject_purchase(db, purchase.id)
    assert db.query(JournalEntry).count() == 0


def test_approval_rejects_unknown_payment_account(db):
    purchase = create_purchase(db, {"amount": Decimal("100"), "category": "بیمه"})

    with pytest.raises(ValidationError):
        approve_purchase(db, purchase.id, payment_account_id=9999)

    assert db.get(PurchaseRequest, purchase.id).status == "PENDING"


def test_cash_inventory_purchase_approval_needs_payment_account(db):
    item = InventoryItem(name="Coffee beans", unit="kg", current_stock=Decimal("0"))
    db.add(item)
    db.commit()
    purchase = create_purchase(
        db,
        {
            "amount": Decimal("100"),
            "category": "Coffee",
            "inventory_item_id": item.id,
            "inventory_quantity": Decimal("1"),
        },
    )

    with pytest.raises(ValidationError):
        approve_purchase(db, purchase.id)

    approve_purchase(db, purchase.id, is_credit=True)
    assert db.get(InventoryItem, item.id).current_stock == Decimal("1")


def test_create_validations(db):
    with pytest.raises(ValidationError):
        create_purchase(db, {"amount": Decimal("0"), "category": "بیمه"})
    with pytest.raises(NotFoundError):
        create_purchase(db, {"amount": Decimal("10"), "category": "بیمه", "supplier_id": 404})


def test_supplier_name_is_filled_from_supplier(db):
    supplier = Supplier(name="Olive Farm")
    db.add(supplier)
    db.commit()

    purchase = create_purchase(
        db, {"amount": Decimal("10"), "category": "بیمه", "supplier_id": supplier.id, "supplier_name": None}
    )

    assert purchase.supplier_name == "Olive Farm"


def test_editing_a_pending_purchase_stays_pending(db):
    purchase = create_purchase(db, {"amount": Decimal("100"), "category": "بیمه"})

    edited = edit_purchase(db, purchase.id, {"amount": Decimal("150")})

    assert edited.status == "PENDING"
    assert edited.amount == Decimal("150")
    assert db.query(JournalEntry).count() == 0
