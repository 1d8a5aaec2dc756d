import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from cafebooks.db import Base, get_db
from cafebooks.main import app
from cafebooks.seed import seed_chart_of_accounts


def _make_session_local():
    engine = create_engine(
        "sqlite+pysqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    TestingSessionLocal = sessionmaker(bind=engine, autoflush=False, autocommit=False)
    Base.metadata.create_all(engine)
    return TestingSessionLocal, engine


@pytest.fixture()
def session_factory():
    TestingSessionLocal, engine = _make_session_local()
    with TestingSessionLocal() as db:
        seed_chart_of_accounts(db)
        db.commit()
    yield TestingSessionLocal
    Base.metadata.drop_all(engine)


@pytest.fixture()
def db(session_factory):
    with session_factory() as session:
        yield session


@pytest.fixture()
def client(session_factory):
    def override_get_db():
        session = session_factory()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_db] = override_get_db
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()
