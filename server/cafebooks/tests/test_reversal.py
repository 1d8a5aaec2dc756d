from datetime import date
from decimal import Decimal
import logging

import pytest

from cafebooks.errors import ConfigurationError
from cafebooks.models import (
    Account,
    Customer,
    Employee,
    InventoryItem,
    JournalEntry,
    Loan,
    PurchaseRequest,
    Supplier,
)
from cafebooks.payroll.service import delete_payment, edit_payment, pay_salary
from cafebooks.purchasing.service import approve_purchase, create_purchase, delete_purchase, edit_purchase
from cafebooks.sales.service import delete_sale, edit_sale, record_sale
from cafebooks.transfers.service import create_transfer, delete_transfer, edit_transfer


def account(db, code):
    return db.query(Account).filter(Account.code == code).one()


def snapshot(db):
    db.expire_all()
    return {
        "accounts": {a.code: a.balance for a in db.query(Account).all()},
        "suppliers": {s.id: s.balance for s in db.query(Supplier).all()},
        "customers": {c.id: c.balance for c in db.query(Customer).all()},
        "employees": {e.id: e.balance for e in db.query(Employee).all()},
        "loans": {loan.id: loan.remaining_balance for loan in db.query(Loan).all()},
        "stock": {i.id: i.current_stock for i in db.query(InventoryItem).all()},
    }


@pytest.fixture()
def people(db):
    supplier = Supplier(name="Green Grocer")
    customer = Customer(name="Reza")
    employee = Employee(full_name="Ali", role="barista", base_salary=Decimal("15000000"))
    db.add_all([supplier, customer, employee])
    account(db, "1010").balance = Decimal("20000000")
    account(db, "1020").balance = Decimal("20000000")
    db.commit()
    return supplier, customer, employee


def test_credit_purchase_round_trip(db, people):
    supplier, _, _ = people
    before = snapshot(db)

    purchase = create_purchase(
        db, {"amount": Decimal("900000"), "category": "هزینه مواد اولیه", "supplier_id": supplier.id, "is_credit": True}
    )
    approve_purchase(db, purchase.id)
    assert db.get(Supplier, supplier.id).balance == Decimal("900000")

    delete_purchase(db, purchase.id)

    assert snapshot(db) == before
    assert db.query(JournalEntry).count() == 0


def test_split_cafe_sale_round_trip(db, people):
    _, _, employee = people
    card_bank = Account(code="1025", name="بانک ملت", type="ASSET", balance=0)
    db.add(card_bank)
    db.commit()
    before = snapshot(db)

    sale = record_sale(
        db,
        {
            "stream": "CAFE",
            "gross_amount": Decimal("3000000"),
            "cash_amount": Decimal("1000000"),
            "pos_amount": Decimal("800000"),
            "snappfood_amount": Decimal("400000"),
            "employee_credit_amount": Decimal("300000"),
            "credit_employee_id": employee.id,
            "card_transfers": [
                {"sender": "Mina", "amount": Decimal("250000"), "receiver_account_id": card_bank.id},
                {"sender": "Hadi", "amount": Decimal("250000"), "receiver_account_id": card_bank.id},
            ],
        },
    )
    assert account(db, "1020").balance == Decimal("20800000")
    assert account(db, "1025").balance == Decimal("500000")
    assert account(db, "1030").balance == Decimal("400000")
    assert account(db, "1060").balance == Decimal("300000")
    assert db.get(Employee, employee.id).balance == Decimal("300000")

    delete_sale(db, sale.id)

    assert snapshot(db) == before


def test_transfer_to_person_round_trip(db, people):
    supplier, customer, employee = people
    cash = account(db, "1010")
    before = snapshot(db)

    created = [
        create_transfer(db, {"from_type": "ACCOUNT", "from_id": cash.id, "to_type": "SUPPLIER", "to_id": supplier.id, "amount": Decimal("400000")}),
        create_transfer(db, {"from_type": "CUSTOMER", "from_id": customer.id, "to_type": "ACCOUNT", "to_id": cash.id, "amount": Decimal("150000")}),
        create_transfer(db, {"from_type": "ACCOUNT", "from_id": cash.id, "to_type": "EMPLOYEE", "to_id": employee.id, "amount": Decimal("200000")}),
    ]
    assert db.get(Supplier, supplier.id).balance == Decimal("-400000")
    assert db.get(Customer, customer.id).balance == Decimal("150000")
    assert db.get(Employee, employee.id).balance == Decimal("200000")
    assert account(db, "1060").balance == Decimal("200000")

    for transfer in created:
        delete_transfer(db, transfer.id)

    assert snapshot(db) == before


def test_edit_with_identical_data_keeps_balances_but_changes_identity(db, people):
    supplier, _, employee = people
    cash = account(db, "1010")
    purchase = create_purchase(
        db, {"amount": Decimal("640000"), "category": "هزینه آب و برق", "supplier_id": supplier.id, "is_credit": True}
    )
    approve_purchase(db, purchase.id)
    payment = pay_salary(db, {"employee_id": employee.id, "total_amount": Decimal("12000000"), "payment_account_id": cash.id})
    sale = record_sale(db, {"stream": "ASSESSMENT", "amount": Decimal("700000")})
    transfer = create_transfer(
        db, {"from_type": "ACCOUNT", "from_id": cash.id, "to_type": "SUPPLIER", "to_id": supplier.id, "amount": Decimal("100000")}
    )
    before = snapshot(db)

    new_purchase = edit_purchase(db, purchase.id, {})
    new_payment = edit_payment(db, payment.id, {})
    new_sale = edit_sale(db, sale.id, {})
    new_transfer = edit_transfer(db, transfer.id, {})

    assert snapshot(db) == before
    assert new_purchase.id != purchase.id
    assert new_payment.id != payment.id
    assert new_sale.id != sale.id
    assert new_transfer.id != transfer.id
    assert db.get(PurchaseRequest, purchase.id) is None
    assert db.query(JournalEntry).count() == 4


def test_edit_applies_new_amounts(db, people):
    _, _, employee = people
    cash = account(db, "1010")
    payment = pay_salary(db, {"employee_id": employee.id, "total_amount": Decimal("10000000"), "payment_account_id": cash.id})

    edited = edit_payment(db, payment.id, {"total_amount": Decimal("11000000")})

    assert edited.total_amount == Decimal("11000000")
    assert account(db, "5050").balance == Decimal("11000000")
    assert account(db, "1010").balance == Decimal("9000000")

    delete_payment(db, edited.id)
    assert account(db, "1010").balance == Decimal("20000000")


def test_fallback_resolution_is_deterministic_and_logged(db, caplog):
    cash = account(db, "1010")
    caplog.set_level(logging.WARNING, logger="cafebooks.chart_of_accounts.service")

    chosen = []
    for _ in range(2):
        purchase = create_purchase(
            db, {"amount": Decimal("50000"), "category": "Misc supplies", "payment_account_id": cash.id}
        )
        approve_purchase(db, purchase.id)
        entry = db.query(JournalEntry).filter(JournalEntry.source_id == purchase.id).one()
        chosen.append(next(line.account.code for line in entry.lines if line.debit))

    assert chosen[0] == chosen[1] == "5010"
    assert any("fell back" in record.getMessage() for record in caplog.records)


def test_missing_required_account_is_a_configuration_error(db):
    revenue = account(db, "4010")
    db.delete(revenue)
    db.commit()

    with pytest.raises(ConfigurationError):
        record_sale(db, {"stream": "CAFE", "gross_amount": Decimal("100000"), "cash_amount": Decimal("100000")})

    assert db.query(JournalEntry).count() == 0
    assert account(db, "1010").balance == 0
