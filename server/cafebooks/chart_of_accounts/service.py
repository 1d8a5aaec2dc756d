from dataclasses import dataclass
import logging
from typing import Callable, Optional

from sqlalchemy.orm import Session

from cafebooks.chart_of_accounts.codes import BANK
from cafebooks.errors import ConfigurationError, NotFoundError, ValidationError
from cafebooks.models import Account, JournalLine
from cafebooks.store import atomic


logger = logging.getLogger(__name__)

TYPE_CODE_PREFIX = {
    "ASSET": "1",
    "LIABILITY": "2",
    "EQUITY": "3",
    "REVENUE": "4",
    "EXPENSE": "5",
}

BANK_NAME_HINT = "بانک"


@dataclass(frozen=True)
class AccountCandidate:
    label: str
    find: Callable[[Session], Optional[Account]]


def by_id(account_id: Optional[int]) -> AccountCandidate:
    def find(db: Session) -> Optional[Account]:
        if account_id is None:
            return None
        return db.get(Account, account_id)

    return AccountCandidate(f"id={account_id}", find)


def by_code(code: str) -> AccountCandidate:
    return AccountCandidate(f"code={code}", lambda db: find_account_by_code(db, code))


def by_name(name: Optional[str]) -> AccountCandidate:
    def find(db: Session) -> Optional[Account]:
        if not name:
            return None
        return db.query(Account).filter(Account.name == name).order_by(Account.code.asc()).first()

    return AccountCandidate(f"name={name}", find)


def by_type(account_type: str) -> AccountCandidate:
    return AccountCandidate(
        f"type={account_type}",
        lambda db: db.query(Account).filter(Account.type == account_type).order_by(Account.code.asc()).first(),
    )


def bank_like() -> AccountCandidate:
    def find(db: Session) -> Optional[Account]:
        bank = find_account_by_code(db, BANK)
        if bank and bank.type == "ASSET":
            return bank
        return (
            db.query(Account)
            .filter(Account.type == "ASSET", Account.name.contains(BANK_NAME_HINT))
            .order_by(Account.code.asc())
            .first()
        )

    return AccountCandidate("bank-like asset", find)


def find_account_by_code(db: Session, code: str) -> Optional[Account]:
    return db.query(Account).filter(Account.code == code).first()


def require_account(db: Session, code: str) -> Account:
    account = find_account_by_code(db, code)
    if account is None:
        logger.error("Required account %s is missing from the chart of accounts", code)
        raise ConfigurationError(f"Required account {code} is missing from the chart of accounts.")
    return account


def resolve_account(db: Session, *candidates: AccountCandidate, purpose: str) -> Account:
    """Return the first candidate that matches, logging when a fallback was needed."""
    for position, candidate in enumerate(candidates):
        account = candidate.find(db)
        if account is None:
            continue
        if position > 0:
            logger.warning(
                "Account resolution for %s fell back to %s (%s %s); preferred %s not found",
                purpose,
                candidate.label,
                account.code,
                account.name,
                candidates[0].label,
            )
        return account
    labels = ", ".join(candidate.label for candidate in candidates)
    logger.error("No account found for %s (tried %s)", purpose, labels)
    raise ConfigurationError(f"No account found for {purpose}.")


def list_accounts(db: Session, account_type: Optional[str] = None, q: Optional[str] = None) -> list[Account]:
    query = db.query(Account)
    if account_type:
        query = query.filter(Account.type == account_type.upper())
    if q:
        like = f"%{q}%"
        query = query.filter((Account.name.ilike(like)) | (Account.code.ilike(like)))
    return query.order_by(Account.code.asc()).all()


def _next_code(db: Session, account_type: str) -> str:
    prefix = TYPE_CODE_PREFIX[account_type]
    codes = [code for (code,) in db.query(Account.code).filter(Account.code.like(f"{prefix}%")).all()]
    numeric = [int(code) for code in codes if code.isdigit()]
    return str(max(numeric) + 10) if numeric else f"{prefix}010"


def create_account(db: Session, payload: dict) -> Account:
    account_type = payload["type"].upper()
    code = payload.get("code") or _next_code(db, account_type)
    if find_account_by_code(db, code):
        raise ValidationError(f"Account code {code} already exists.")
    with atomic(db) as batch:
        account = batch.set(
            Account(
                code=code,
                name=payload["name"],
                type=account_type,
                balance=payload.get("balance") or 0,
                is_default=payload.get("is_default", False),
            )
        )
    logger.info("Created account %s %s (%s)", account.code, account.name, account.type)
    return account


def update_account(db: Session, account: Account, payload: dict) -> Account:
    """Manual Settings edit; balance overrides are not journaled and not reversible."""
    with atomic(db) as batch:
        batch.update(account, **payload)
    if "balance" in payload:
        logger.warning("Account %s balance manually set to %s", account.code, payload["balance"])
    return account


def delete_account(db: Session, account_id: int) -> None:
    account = db.get(Account, account_id)
    if account is None:
        raise NotFoundError(f"Account {account_id} not found.")
    in_use = db.query(JournalLine.id).filter(JournalLine.account_id == account_id).first() is not None
    if in_use:
        raise ValidationError("Cannot delete an account that has journal lines.")
    with atomic(db) as batch:
        batch.delete(account)
