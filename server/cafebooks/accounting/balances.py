from decimal import Decimal
from typing import Literal

Side = Literal["DEBIT", "CREDIT"]

DEBIT_NORMAL_TYPES = {"ASSET", "EXPENSE"}

# Supplier balance > 0: we owe them. Customer balance < 0: they owe us.
# Employee balance > 0: advance receivable, < 0: payable.
PERSON_NORMAL_SIDE: dict[str, Side] = {
    "SUPPLIER": "CREDIT",
    "CUSTOMER": "CREDIT",
    "EMPLOYEE": "DEBIT",
}

PERSON_CONTROL_ACCOUNT_CODES = {
    "SUPPLIER": "2010",
    "CUSTOMER": "1070",
    "EMPLOYEE": "1060",
}


def normal_side(account_type: str) -> Side:
    if (account_type or "").upper() in DEBIT_NORMAL_TYPES:
        return "DEBIT"
    return "CREDIT"


def compute_account_balance(account_type: str, debit: Decimal, credit: Decimal) -> Decimal:
    """Balance change implied by a debit/credit pair for an account of the given type."""
    if normal_side(account_type) == "DEBIT":
        return debit - credit
    return credit - debit


def person_delta(person_type: str, side: Side, amount: Decimal) -> Decimal:
    if PERSON_NORMAL_SIDE[person_type] == side:
        return amount
    return -amount
