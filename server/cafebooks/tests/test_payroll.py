from decimal import Decimal

import pytest

from cafebooks.errors import ValidationError
from cafebooks.models import Account, Employee, PayrollPayment
from cafebooks.payroll.service import list_payments, pay_salary


def account(db, code):
    return db.query(Account).filter(Account.code == code).one()


def test_courier_salary_uses_courier_expense(db):
    courier = Employee(full_name="Hamid", role="پیک", department="COURIER", base_salary=Decimal("9000000"))
    db.add(courier)
    db.commit()
    cash = account(db, "1010")

    payment = pay_salary(db, {"employee_id": courier.id, "total_amount": Decimal("9000000"), "payment_account_id": cash.id})

    assert payment.employee_name == "Hamid"
    assert account(db, "5051").balance == Decimal("9000000")
    assert account(db, "5050").balance == 0
    assert account(db, "1010").balance == Decimal("-9000000")


def test_staff_salary_uses_salary_expense(db):
    barista = Employee(full_name="Leila", role="barista", base_salary=Decimal("14000000"))
    db.add(barista)
    db.commit()
    bank = account(db, "1020")

    pay_salary(db, {"employee_id": barista.id, "total_amount": Decimal("14000000"), "payment_account_id": bank.id})

    assert account(db, "5050").balance == Decimal("14000000")
    assert [p.employee_id for p in list_payments(db, employee_id=barista.id)] == [barista.id]


def test_salary_needs_a_payment_account(db):
    barista = Employee(full_name="Omid", role="barista")
    db.add(barista)
    db.commit()

    with pytest.raises(ValidationError):
        pay_salary(db, {"employee_id": barista.id, "total_amount": Decimal("100")})

    assert db.query(PayrollPayment).count() == 0
