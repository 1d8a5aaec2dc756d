from typing import Optional

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from cafebooks.accounting import schemas
from cafebooks.accounting.posting import JournalLineInput
from cafebooks.accounting.service import (
    create_manual_entry,
    delete_manual_entry,
    get_journal_entry,
    list_journal_entries,
)
from cafebooks.db import get_db
from cafebooks.utils import ZERO

router = APIRouter(prefix="/api/journal-entries", tags=["journal-entries"])


@router.post("", response_model=schemas.JournalEntryResponse, status_code=status.HTTP_201_CREATED)
def create_journal_entry_endpoint(payload: schemas.JournalEntryCreate, db: Session = Depends(get_db)):
    lines = [
        JournalLineInput(
            account_id=line.account_id,
            debit=line.amount if line.direction == "DEBIT" else ZERO,
            credit=line.amount if line.direction == "CREDIT" else ZERO,
        )
        for line in payload.lines
    ]
    return create_manual_entry(db, entry_date=payload.date, memo=payload.memo, lines=lines)


@router.get("", response_model=list[schemas.JournalEntryResponse])
def list_journal_entries_endpoint(
    limit: int = Query(50, ge=1, le=500),
    source_type: Optional[str] = Query(None),
    source_id: Optional[int] = Query(None),
    account_id: Optional[int] = Query(None),
    db: Session = Depends(get_db),
):
    return list_journal_entries(db, limit=limit, source_type=source_type, source_id=source_id, account_id=account_id)


@router.get("/{entry_id}", response_model=schemas.JournalEntryResponse)
def get_journal_entry_endpoint(entry_id: int, db: Session = Depends(get_db)):
    return get_journal_entry(db, entry_id)


@router.delete("/{entry_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_journal_entry_endpoint(entry_id: int, db: Session = Depends(get_db)):
    delete_manual_entry(db, entry_id)
