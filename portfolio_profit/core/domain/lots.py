"""Open lot state held by the FIFO ledger.

Lots are internal runtime state with no JSON schema. They are copied out of
Buy transactions, and matching never mutates the caller's records.
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal

from portfolio_profit.core.domain.types import Transaction


@dataclass(slots=True)
class Lot:
    """Unsold remainder of one Buy.

    Invariant: 0 <= remaining_fee <= original_fee and remaining_quantity >= 0.
    """

    transaction_id: str
    price: Decimal
    remaining_quantity: int
    remaining_fee: Decimal
    original_fee: Decimal

    @classmethod
    def from_buy(cls, transaction: Transaction) -> Lot:
        return cls(
            transaction_id=transaction.transaction_id,
            price=transaction.price,
            remaining_quantity=transaction.quantity,
            remaining_fee=transaction.fee,
            original_fee=transaction.fee,
        )

    @property
    def is_exhausted(self) -> bool:
        return self.remaining_quantity == 0

    def cost_basis(self) -> Decimal:
        """Price of the remaining units plus the fee still attached to them."""
        return self.price * self.remaining_quantity + self.remaining_fee

    def consume(self, quantity: int, fee_share: Decimal) -> None:
        if quantity > self.remaining_quantity:
            raise ValueError(
                f"lot {self.transaction_id} has {self.remaining_quantity} units, "
                f"cannot consume {quantity}"
            )
        if fee_share > self.remaining_fee:
            raise ValueError(
                f"lot {self.transaction_id} fee share {fee_share} exceeds "
                f"remaining fee {self.remaining_fee}"
            )
        self.remaining_quantity -= quantity
        self.remaining_fee -= fee_share
