from datetime import date
from decimal import Decimal
import logging
from typing import Optional

from sqlalchemy.orm import Session

from cafebooks.models import Supplier, Transfer
from cafebooks.store import get_record
from cafebooks.transfers.service import create_transfer


logger = logging.getLogger(__name__)


def pay_supplier(
    db: Session,
    supplier_id: int,
    *,
    account_id: int,
    amount: Decimal,
    txn_date: Optional[date] = None,
    description: Optional[str] = None,
) -> Transfer:
    """Settle part of what we owe a supplier from one of our accounts."""
    supplier = get_record(db, Supplier, supplier_id, "Supplier")
    transfer = create_transfer(
        db,
        {
            "from_type": "ACCOUNT",
            "from_id": account_id,
            "to_type": "SUPPLIER",
            "to_id": supplier.id,
            "amount": amount,
            "txn_date": txn_date or date.today(),
            "description": description or f"پرداخت به تامین‌کننده: {supplier.name}",
        },
    )
    logger.info("Paid supplier %s %s from account %s", supplier_id, amount, account_id)
    return transfer
