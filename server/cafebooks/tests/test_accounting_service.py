from datetime import date
from decimal import Decimal

import pytest

from cafebooks.accounting.posting import JournalLineInput
from cafebooks.accounting.service import (
    balance_history,
    create_manual_entry,
    delete_manual_entry,
    delete_person,
    list_journal_entries,
)
from cafebooks.errors import UnbalancedEntryError, ValidationError
from cafebooks.models import Account, Customer, JournalEntry, Supplier
from cafebooks.sales.service import record_sale
from cafebooks.transfers.service import create_transfer, delete_transfer


def account(db, code):
    return db.query(Account).filter(Account.code == code).one()


def test_manual_entry_is_its_own_source(db):
    capital = account(db, "3010")
    cash = account(db, "1010")

    entry = create_manual_entry(
        db,
        entry_date=date(2024, 1, 1),
        memo="Owner contribution",
        lines=[
            JournalLineInput(account_id=cash.id, debit=Decimal("50000000")),
            JournalLineInput(account_id=capital.id, credit=Decimal("50000000")),
        ],
    )

    assert entry.source_type == "MANUAL"
    assert entry.source_id == entry.id
    assert account(db, "1010").balance == Decimal("50000000")
    assert account(db, "3010").balance == Decimal("50000000")
    assert [e.id for e in list_journal_entries(db, account_id=capital.id)] == [entry.id]

    delete_manual_entry(db, entry.id)

    assert account(db, "1010").balance == 0
    assert account(db, "3010").balance == 0
    assert db.query(JournalEntry).count() == 0


def test_manual_entry_must_balance(db):
    cash = account(db, "1010")
    capital = account(db, "3010")

    with pytest.raises(UnbalancedEntryError):
        create_manual_entry(
            db,
            entry_date=date(2024, 1, 1),
            memo=None,
            lines=[
                JournalLineInput(account_id=cash.id, debit=Decimal("100")),
                JournalLineInput(account_id=capital.id, credit=Decimal("90")),
            ],
        )
    assert db.query(JournalEntry).count() == 0


def test_posted_entries_are_deleted_through_their_record(db):
    sale = record_sale(db, {"stream": "ASSESSMENT", "amount": Decimal("100")})
    [entry] = list_journal_entries(db, source_type="SALE", source_id=sale.id)

    with pytest.raises(ValidationError):
        delete_manual_entry(db, entry.id)


def test_person_with_ledger_history_cannot_be_deleted(db):
    supplier = Supplier(name="Spice Bazaar")
    customer = Customer(name="Arash")
    db.add_all([supplier, customer])
    db.commit()
    transfer = create_transfer(
        db,
        {"from_type": "ACCOUNT", "from_id": account(db, "1010").id, "to_type": "SUPPLIER", "to_id": supplier.id, "amount": Decimal("1000")},
    )
    assert len(balance_history(db, "SUPPLIER", supplier.id)) == 1

    with pytest.raises(ValidationError):
        delete_person(db, "SUPPLIER", supplier.id)

    delete_transfer(db, transfer.id)
    assert balance_history(db, "SUPPLIER", supplier.id) == []
    delete_person(db, "SUPPLIER", supplier.id)
    delete_person(db, "CUSTOMER", customer.id)
    assert db.query(Supplier).count() == 0
    assert db.query(Customer).count() == 0
