from decimal import Decimal

import pytest

from cafebooks.errors import ValidationError
from cafebooks.inventory.service import (
    adjust_stock,
    create_item,
    delete_item,
    delete_transaction,
    list_items,
    register_usage,
    update_item,
)
from cafebooks.models import Account, InventoryItem, InventoryTransaction, JournalEntry
from cafebooks.purchasing.service import delete_purchase, record_inventory_purchase


def account(db, code):
    return db.query(Account).filter(Account.code == code).one()


@pytest.fixture()
def milk(db):
    return create_item(db, {"name": "Milk", "unit": "liter", "category": "Dairy", "min_stock": Decimal("5")})


def test_inventory_purchase_receives_stock_and_books_raw_materials(db, milk):
    cash = account(db, "1010")

    purchase = record_inventory_purchase(
        db,
        {
            "inventory_item_id": milk.id,
            "inventory_quantity": Decimal("10"),
            "inventory_unit_price": Decimal("50000"),
            "payment_account_id": cash.id,
        },
    )

    assert purchase.status == "APPROVED"
    assert purchase.amount == Decimal("500000")
    assert purchase.category == "Dairy"
    item = db.get(InventoryItem, milk.id)
    assert item.current_stock == Decimal("10")
    assert item.last_cost == Decimal("50000")
    assert account(db, "5010").balance == Decimal("500000")
    assert account(db, "1010").balance == Decimal("-500000")

    delete_purchase(db, purchase.id)

    assert db.get(InventoryItem, milk.id).current_stock == 0
    assert db.query(InventoryTransaction).count() == 0
    assert db.query(JournalEntry).count() == 0


def test_cash_inventory_purchase_needs_a_payment_account(db, milk):
    with pytest.raises(ValidationError):
        record_inventory_purchase(
            db, {"inventory_item_id": milk.id, "inventory_quantity": Decimal("1"), "inventory_unit_price": Decimal("10")}
        )


def test_usage_consumes_stock_without_a_journal(db, milk):
    adjust_stock(db, milk.id, Decimal("8"), description="opening count")

    usage = register_usage(db, milk.id, Decimal("3"))

    assert usage.quantity == Decimal("-3")
    assert db.get(InventoryItem, milk.id).current_stock == Decimal("5")
    assert db.get(InventoryItem, milk.id).is_low_stock is True
    assert [item.id for item in list_items(db, low_stock=True)] == [milk.id]
    assert db.query(JournalEntry).count() == 0

    with pytest.raises(ValidationError):
        register_usage(db, milk.id, Decimal("6"))

    delete_transaction(db, usage.id)
    assert db.get(InventoryItem, milk.id).current_stock == Decimal("8")


def test_stock_changes_only_through_movements(db, milk):
    with pytest.raises(ValidationError):
        update_item(db, milk.id, {"current_stock": Decimal("100")})
    with pytest.raises(ValidationError):
        adjust_stock(db, milk.id, Decimal("-1"))

    update_item(db, milk.id, {"name": "Whole milk"})
    assert db.get(InventoryItem, milk.id).name == "Whole milk"


def test_item_with_history_cannot_be_deleted(db, milk):
    adjust_stock(db, milk.id, Decimal("2"))
    with pytest.raises(ValidationError):
        delete_item(db, milk.id)

    empty = create_item(db, {"name": "Cups", "unit": "pcs"})
    delete_item(db, empty.id)
    assert db.get(InventoryItem, empty.id) is None
