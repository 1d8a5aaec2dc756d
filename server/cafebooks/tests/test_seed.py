from decimal import Decimal

from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from cafebooks import seed
from cafebooks.chart_of_accounts.codes import DEFAULT_ACCOUNTS
from cafebooks.db import Base
from cafebooks.models import Account


def _make_session_local():
    engine = create_engine(
        "sqlite+pysqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    TestingSessionLocal = sessionmaker(bind=engine, autoflush=False, autocommit=False)
    Base.metadata.create_all(engine)
    return TestingSessionLocal, engine


def test_seed_is_idempotent_and_keeps_balances():
    TestingSessionLocal, engine = _make_session_local()

    with TestingSessionLocal() as db:
        inserted, updated = seed.seed_chart_of_accounts(db)
        db.commit()
        assert (inserted, updated) == (len(DEFAULT_ACCOUNTS), 0)

        cash = db.query(Account).filter(Account.code == "1010").one()
        cash.balance = Decimal("50000000")
        cash.name = "صندوق قدیمی"
        db.commit()

    with TestingSessionLocal() as db:
        inserted, updated = seed.seed_chart_of_accounts(db)
        db.commit()
        assert (inserted, updated) == (0, len(DEFAULT_ACCOUNTS))

        cash = db.query(Account).filter(Account.code == "1010").one()
        assert cash.balance == Decimal("50000000")
        assert cash.name == "موجودی نقد (صندوق)"
        assert cash.is_default is True
        assert db.query(Account).count() == len(DEFAULT_ACCOUNTS)

    Base.metadata.drop_all(engine)


def test_seed_main_uses_session_local(monkeypatch, capsys):
    TestingSessionLocal, engine = _make_session_local()
    monkeypatch.setattr(seed, "SessionLocal", TestingSessionLocal)
    monkeypatch.setattr(seed, "engine", engine)

    seed.main()

    assert "inserted=" in capsys.readouterr().out
    with TestingSessionLocal() as db:
        assert db.query(Account).count() == len(DEFAULT_ACCOUNTS)

    Base.metadata.drop_all(engine)
