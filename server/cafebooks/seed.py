import logging

from sqlalchemy.orm import Session

from .chart_of_accounts.codes import DEFAULT_ACCOUNTS
from .db import Base, SessionLocal, engine
from .models import Account

logger = logging.getLogger(__name__)


def seed_chart_of_accounts(db: Session) -> tuple[int, int]:
    """Insert the default cafe chart of accounts; existing codes keep their balances."""
    inserted = 0
    updated = 0
    for code, name, account_type in DEFAULT_ACCOUNTS:
        existing = db.query(Account).filter(Account.code == code).first()
        if existing:
            existing.name = name
            existing.type = account_type
            existing.is_default = True
            updated += 1
        else:
            db.add(Account(code=code, name=name, type=account_type, balance=0, is_default=True))
            inserted += 1
    db.flush()
    return inserted, updated


def main() -> None:
    Base.metadata.create_all(engine)
    db: Session = SessionLocal()
    try:
        inserted, updated = seed_chart_of_accounts(db)
        db.commit()
        print(f"Chart of Accounts seed complete: inserted={inserted}, updated={updated}")
    except Exception:
        db.rollback()
        logger.exception("Chart of accounts seed failed")
        raise
    finally:
        db.close()


if __name__ == "__main__":
    main()
