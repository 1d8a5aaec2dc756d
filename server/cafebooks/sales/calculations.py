from dataclasses import dataclass, field
from decimal import Decimal
from typing import Iterable, Optional

from cafebooks.errors import ValidationError
from cafebooks.utils import ZERO, money_or_zero


@dataclass(frozen=True)
class CardTransferInput:
    amount: Decimal
    sender: Optional[str] = None
    receiver_account_id: Optional[int] = None


@dataclass(frozen=True)
class CafeReceipts:
    cash: Decimal = ZERO
    pos: Decimal = ZERO
    snappfood: Decimal = ZERO
    tapsifood: Decimal = ZERO
    foodex: Decimal = ZERO
    employee_credit: Decimal = ZERO
    card_transfers: tuple[CardTransferInput, ...] = field(default_factory=tuple)

    @property
    def total(self) -> Decimal:
        transfers = sum((money_or_zero(t.amount) for t in self.card_transfers), ZERO)
        return (
            money_or_zero(self.cash)
            + money_or_zero(self.pos)
            + money_or_zero(self.snappfood)
            + money_or_zero(self.tapsifood)
            + money_or_zero(self.foodex)
            + money_or_zero(self.employee_credit)
            + transfers
        )


def calculate_net_amount(gross: Decimal, discount: Decimal, refund: Decimal) -> Decimal:
    return money_or_zero(gross) - money_or_zero(discount) - money_or_zero(refund)


def validate_cafe_sale(gross: Decimal, discount: Decimal, refund: Decimal, receipts: CafeReceipts) -> Decimal:
    """Check a split cafe sale and return its net amount."""
    amounts = [gross, discount, refund, receipts.cash, receipts.pos, receipts.snappfood,
               receipts.tapsifood, receipts.foodex, receipts.employee_credit]
    amounts.extend(t.amount for t in receipts.card_transfers)
    if any(money_or_zero(amount) < 0 for amount in amounts):
        raise ValidationError("Sale amounts cannot be negative.")
    if money_or_zero(gross) <= 0:
        raise ValidationError("Gross amount must be greater than zero.")
    net = calculate_net_amount(gross, discount, refund)
    if net < 0:
        raise ValidationError("Discount and refund cannot exceed the gross amount.")
    if receipts.total != net:
        raise ValidationError(f"Receipts ({receipts.total}) must equal the net sale amount ({net}).")
    return net


def group_card_transfers(transfers: Iterable[CardTransferInput], default_account_id: int) -> dict[int, Decimal]:
    """Sum card-to-card transfers per receiving account, preserving first-seen order."""
    grouped: dict[int, Decimal] = {}
    for transfer in transfers:
        account_id = transfer.receiver_account_id or default_account_id
        grouped[account_id] = grouped.get(account_id, ZERO) + money_or_zero(transfer.amount)
    return grouped
