from typing import List, Optional

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from cafebooks.db import get_db
from cafebooks.models import Transfer
from cafebooks.store import get_record
from cafebooks.transfers import schemas
from cafebooks.transfers.service import create_transfer, delete_transfer, edit_transfer, list_transfers

router = APIRouter(prefix="/api/transfers", tags=["transfers"])


@router.get("", response_model=List[schemas.TransferResponse])
def list_transfers_endpoint(
    endpoint_type: Optional[str] = None,
    endpoint_id: Optional[int] = None,
    db: Session = Depends(get_db),
):
    return list_transfers(db, endpoint_type=endpoint_type, endpoint_id=endpoint_id)


@router.post("", response_model=schemas.TransferResponse, status_code=status.HTTP_201_CREATED)
def create_transfer_endpoint(payload: schemas.TransferCreate, db: Session = Depends(get_db)):
    return create_transfer(db, payload.model_dump())


@router.get("/{transfer_id}", response_model=schemas.TransferResponse)
def get_transfer(transfer_id: int, db: Session = Depends(get_db)):
    return get_record(db, Transfer, transfer_id, "Transfer")


@router.put("/{transfer_id}", response_model=schemas.TransferResponse)
def edit_transfer_endpoint(transfer_id: int, payload: schemas.TransferUpdate, db: Session = Depends(get_db)):
    return edit_transfer(db, transfer_id, payload.model_dump(exclude_unset=True))


@router.delete("/{transfer_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_transfer_endpoint(transfer_id: int, db: Session = Depends(get_db)):
    delete_transfer(db, transfer_id)
