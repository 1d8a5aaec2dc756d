"""Atomic write batches over the injected SQLAlchemy session.

Every money-moving operation stages its writes into one ``Batch`` and commits
once; a failed commit is rolled back and surfaces as ``StoreError``. Balance
fields are changed with SQL-side increments so concurrent operations on the
same row do not lose updates.
"""

from collections import defaultdict
from contextlib import contextmanager
from decimal import Decimal
import logging
from typing import Callable, Iterator

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from .errors import NotFoundError, StoreError


logger = logging.getLogger(__name__)

_subscribers: dict[str, list[Callable[[str], None]]] = defaultdict(list)


def subscribe(collection: str, callback: Callable[[str], None]) -> Callable[[], None]:
    """Register a read-only listener called after each commit touching ``collection``."""
    _subscribers[collection].append(callback)

    def unsubscribe() -> None:
        if callback in _subscribers[collection]:
            _subscribers[collection].remove(callback)

    return unsubscribe


def _notify(collections: set[str]) -> None:
    for collection in sorted(collections):
        for callback in list(_subscribers.get(collection, ())):
            try:
                callback(collection)
            except Exception:
                logger.exception("Subscriber for %s failed", collection)


def get_record(db: Session, model, record_id: int, label: str | None = None):
    record = db.get(model, record_id)
    if record is None:
        raise NotFoundError(f"{label or model.__name__} {record_id} not found.")
    return record


class Batch:
    def __init__(self, db: Session):
        self.db = db
        self.touched: set[str] = set()

    def set(self, record):
        self.db.add(record)
        self.touched.add(record.__tablename__)
        return record

    def update(self, record, **fields):
        for key, value in fields.items():
            setattr(record, key, value)
        self.touched.add(record.__tablename__)
        return record

    def delete(self, record) -> None:
        self.db.delete(record)
        self.touched.add(record.__tablename__)

    def increment(self, model, record_id: int, field: str, delta: Decimal) -> None:
        column = getattr(model, field)
        updated = (
            self.db.query(model)
            .filter(model.id == record_id)
            .update({column: column + delta}, synchronize_session="fetch")
        )
        if not updated:
            raise NotFoundError(f"{model.__name__} {record_id} not found.")
        self.touched.add(model.__tablename__)

    def flush(self) -> None:
        self.db.flush()

    def rollback(self) -> None:
        self.db.rollback()
        self.touched.clear()

    def commit(self) -> None:
        try:
            self.db.commit()
        except SQLAlchemyError as exc:
            self.db.rollback()
            logger.error("Batch commit failed, rolled back: %s", exc)
            raise StoreError("Store commit failed; no changes were applied.") from exc
        touched, self.touched = self.touched, set()
        _notify(touched)


@contextmanager
def atomic(db: Session) -> Iterator[Batch]:
    """Stage writes into a batch; commit on success, roll back on any error."""
    batch = Batch(db)
    try:
        yield batch
    except Exception:
        batch.rollback()
        raise
    batch.commit()
