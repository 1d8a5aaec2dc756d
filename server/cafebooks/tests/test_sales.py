from decimal import Decimal

import pytest

from cafebooks.errors import NotFoundError, ValidationError
from cafebooks.models import Account, Customer, Employee
from cafebooks.sales.calculations import (
    CafeReceipts,
    CardTransferInput,
    calculate_net_amount,
    group_card_transfers,
    validate_cafe_sale,
)
from cafebooks.sales.service import list_sales, record_sale


def account(db, code):
    return db.query(Account).filter(Account.code == code).one()


def test_net_amount_subtracts_discount_and_refund():
    assert calculate_net_amount(Decimal("4800000"), Decimal("300000"), Decimal("100000")) == Decimal("4400000")


def test_receipts_must_match_net_amount():
    receipts = CafeReceipts(cash=Decimal("4000000"))
    with pytest.raises(ValidationError):
        validate_cafe_sale(Decimal("4800000"), Decimal("300000"), Decimal("0"), receipts)

    receipts = CafeReceipts(cash=Decimal("4000000"), pos=Decimal("500000"))
    assert validate_cafe_sale(Decimal("4800000"), Decimal("300000"), Decimal("0"), receipts) == Decimal("4500000")


@pytest.mark.parametrize(
    "gross, discount, refund, receipts",
    [
        (Decimal("0"), Decimal("0"), Decimal("0"), CafeReceipts()),
        (Decimal("100"), Decimal("150"), Decimal("0"), CafeReceipts()),
        (Decimal("100"), Decimal("0"), Decimal("0"), CafeReceipts(cash=Decimal("-100"))),
    ],
)
def test_invalid_cafe_sales(gross, discount, refund, receipts):
    with pytest.raises(ValidationError):
        validate_cafe_sale(gross, discount, refund, receipts)


def test_card_transfers_group_by_receiving_account():
    transfers = [
        CardTransferInput(amount=Decimal("100"), receiver_account_id=7),
        CardTransferInput(amount=Decimal("50")),
        CardTransferInput(amount=Decimal("25"), receiver_account_id=7),
    ]
    assert group_card_transfers(transfers, default_account_id=2) == {7: Decimal("125.00"), 2: Decimal("50.00")}


def test_assessment_sale_books_consultation_revenue(db):
    sale = record_sale(db, {"stream": "ASSESSMENT", "amount": Decimal("700000"), "details": "Initial assessment"})

    assert account(db, "4030").balance == Decimal("700000")
    assert account(db, "1010").balance == Decimal("700000")
    assert [s.id for s in list_sales(db, stream="ASSESSMENT")] == [sale.id]


def test_credit_sale_needs_a_customer(db):
    with pytest.raises(ValidationError):
        record_sale(db, {"stream": "ASSESSMENT", "amount": Decimal("700000"), "is_credit": True})
    with pytest.raises(NotFoundError):
        record_sale(db, {"stream": "ASSESSMENT", "amount": Decimal("700000"), "is_credit": True, "customer_id": 5})


def test_credit_sale_charges_customer_receivable(db):
    customer = Customer(name="Parisa")
    db.add(customer)
    db.commit()

    sale = record_sale(db, {"stream": "ASSESSMENT", "amount": Decimal("700000"), "is_credit": True, "customer_id": customer.id})

    assert sale.customer_name == "Parisa"
    assert account(db, "1070").balance == Decimal("700000")
    assert db.get(Customer, customer.id).balance == Decimal("-700000")


def test_employee_credit_needs_an_amount(db):
    employee = Employee(full_name="Sina", role="barista")
    db.add(employee)
    db.commit()

    with pytest.raises(ValidationError):
        record_sale(
            db,
            {"stream": "CAFE", "gross_amount": Decimal("100"), "cash_amount": Decimal("100"), "credit_employee_id": employee.id},
        )
