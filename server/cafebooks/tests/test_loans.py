from datetime import date
from decimal import Decimal

import pytest

from cafebooks.errors import ValidationError
from cafebooks.loans.service import add_repayment, create_loan, delete_loan, delete_repayment, edit_loan
from cafebooks.models import Account, BalanceAdjustment, JournalEntry, Loan


def account(db, code):
    return db.query(Account).filter(Account.code == code).one()


@pytest.fixture()
def loan(db):
    bank = account(db, "1020")
    return create_loan(
        db,
        {
            "lender": "Bank Melli",
            "amount": Decimal("10000000"),
            "interest_rate": Decimal("18"),
            "start_date": date(2024, 2, 1),
            "installments_count": 10,
            "deposit_account_id": bank.id,
        },
    )


def test_loan_is_deposited_and_recorded_as_liability(db, loan):
    assert account(db, "1020").balance == Decimal("10000000")
    assert account(db, "2030").balance == Decimal("10000000")
    assert db.get(Loan, loan.id).remaining_balance == Decimal("10000000")


def test_repayment_splits_principal_and_interest(db, loan):
    bank = account(db, "1020")

    repayment = add_repayment(
        db, loan.id, {"amount": Decimal("1200000"), "interest_amount": Decimal("200000"), "payment_account_id": bank.id}
    )

    assert repayment.principal_amount == Decimal("1000000")
    assert account(db, "2030").balance == Decimal("9000000")
    assert account(db, "5070").balance == Decimal("200000")
    assert account(db, "1020").balance == Decimal("8800000")
    assert db.get(Loan, loan.id).remaining_balance == Decimal("9000000")

    delete_repayment(db, repayment.id)

    assert account(db, "2030").balance == Decimal("10000000")
    assert account(db, "5070").balance == 0
    assert db.get(Loan, loan.id).remaining_balance == Decimal("10000000")


def test_full_repayment_pays_off_the_loan(db, loan):
    bank = account(db, "1020")
    repayment = add_repayment(db, loan.id, {"amount": Decimal("10000000"), "payment_account_id": bank.id})

    assert db.get(Loan, loan.id).status == "PAID_OFF"
    with pytest.raises(ValidationError):
        add_repayment(db, loan.id, {"amount": Decimal("1"), "payment_account_id": bank.id})

    delete_repayment(db, repayment.id)
    assert db.get(Loan, loan.id).status == "ACTIVE"


def test_repayment_validations(db, loan):
    bank = account(db, "1020")
    with pytest.raises(ValidationError):
        add_repayment(db, loan.id, {"amount": Decimal("10000001"), "payment_account_id": bank.id})
    with pytest.raises(ValidationError):
        add_repayment(db, loan.id, {"amount": Decimal("100"), "interest_amount": Decimal("101"), "payment_account_id": bank.id})
    with pytest.raises(ValidationError):
        add_repayment(db, loan.id, {"amount": Decimal("100")})


def test_edit_refused_once_repaid_and_delete_unwinds_everything(db, loan):
    bank = account(db, "1020")
    add_repayment(db, loan.id, {"amount": Decimal("600000"), "interest_amount": Decimal("100000"), "payment_account_id": bank.id})

    with pytest.raises(ValidationError):
        edit_loan(db, loan.id, {"amount": Decimal("12000000")})

    delete_loan(db, loan.id)

    for code in ("1020", "2030", "5070"):
        assert account(db, code).balance == 0
    assert db.query(JournalEntry).count() == 0
    assert db.query(BalanceAdjustment).count() == 0


def test_edit_replaces_an_unpaid_loan(db, loan):
    edited = edit_loan(db, loan.id, {"amount": Decimal("12000000")})

    assert edited.id != loan.id
    assert edited.remaining_balance == Decimal("12000000")
    assert account(db, "2030").balance == Decimal("12000000")
