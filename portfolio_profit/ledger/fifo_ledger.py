"""FIFO lot-matching ledger.

One ``FifoLedger`` lives for exactly one calculation. It owns the queue of
open lots (oldest first), the realized-profit accumulator and the last
observed trade price. Nothing here outlives the calculation that created it.
"""

from __future__ import annotations

import logging
from collections import deque
from decimal import Decimal
from typing import TYPE_CHECKING

from portfolio_profit.core.domain.decimal_math import ZERO, prorate
from portfolio_profit.core.domain.errors import OverSellError
from portfolio_profit.core.domain.lots import Lot
from portfolio_profit.core.events.events import LotMatchedEvent, LotOpenedEvent

if TYPE_CHECKING:
    from portfolio_profit.core.domain.types import Transaction

LOGGER = logging.getLogger(__name__)


class FifoLedger:
    """Single-pass FIFO matcher.

    Invariant:
    - Lots are consumed strictly oldest-first.
    - A lot's fee is fully allocated by the time its quantity reaches zero.
    - The caller's Transaction records are never mutated.
    """

    def __init__(self, *, scale: int) -> None:
        self._scale = scale
        self._lots: deque[Lot] = deque()
        self._realized = ZERO
        self._last_trade_price = ZERO

    # ------------------------------------------------------------------
    # Read-only views
    # ------------------------------------------------------------------

    @property
    def realized(self) -> Decimal:
        return self._realized

    @property
    def last_trade_price(self) -> Decimal:
        """Price of the latest processed transaction; zero before any."""
        return self._last_trade_price

    @property
    def open_lots(self) -> tuple[Lot, ...]:
        return tuple(self._lots)

    # ------------------------------------------------------------------
    # Transaction handling
    # ------------------------------------------------------------------

    def apply(self, transaction: Transaction) -> list[LotOpenedEvent | LotMatchedEvent]:
        """Process one transaction and return the domain events it produced."""
        events: list[LotOpenedEvent | LotMatchedEvent]
        if transaction.is_buy():
            events = [self._apply_buy(transaction)]
        else:
            events = list(self._apply_sell(transaction))

        self._last_trade_price = transaction.price
        return events

    def _apply_buy(self, transaction: Transaction) -> LotOpenedEvent:
        self._lots.append(Lot.from_buy(transaction))
        LOGGER.debug(
            "Lot opened",
            extra={"transaction_id": transaction.transaction_id, "quantity": transaction.quantity},
        )
        return LotOpenedEvent(
            ts=transaction.timestamp,
            transaction_id=transaction.transaction_id,
            quantity=transaction.quantity,
            price=transaction.price,
            fee=transaction.fee,
        )

    def _apply_sell(self, sell: Transaction) -> list[LotMatchedEvent]:
        still_needed = sell.quantity
        sell_realized = ZERO
        matches: list[LotMatchedEvent] = []

        while still_needed > 0:
            if not self._lots:
                raise OverSellError(
                    transaction_id=sell.transaction_id,
                    requested=sell.quantity,
                    unmatched=still_needed,
                )

            lot = self._lots[0]
            consumed = min(lot.remaining_quantity, still_needed)

            sell_fee_share = prorate(sell.fee, consumed, sell.quantity, self._scale)
            buy_fee_share = self._buy_fee_share(lot, consumed)

            proceeds = sell.price * consumed - sell_fee_share
            cost = lot.price * consumed + buy_fee_share
            delta = proceeds - cost

            lot.consume(consumed, buy_fee_share)
            still_needed -= consumed
            sell_realized += delta
            self._realized += delta

            matches.append(
                LotMatchedEvent(
                    ts=sell.timestamp,
                    sell_transaction_id=sell.transaction_id,
                    buy_transaction_id=lot.transaction_id,
                    consumed_qty=consumed,
                    lot_remaining_qty=lot.remaining_quantity,
                    sell_fee_share=sell_fee_share,
                    buy_fee_share=buy_fee_share,
                    delta_realized=delta,
                    cum_realized=self._realized,
                )
            )

            if lot.is_exhausted:
                self._lots.popleft()

        LOGGER.debug(
            "Sell matched",
            extra={"transaction_id": sell.transaction_id, "realized": sell_realized, "lots_touched": len(matches)},
        )
        return matches

    def _buy_fee_share(self, lot: Lot, consumed: int) -> Decimal:
        """Fee carried out of ``lot`` with ``consumed`` units.

        Prorated against the lot's *remaining* fee and quantity. Closing the
        lot carries out whatever fee is left, so no residual survives
        rounding.
        """
        if consumed == lot.remaining_quantity:
            return lot.remaining_fee
        share = prorate(lot.remaining_fee, consumed, lot.remaining_quantity, self._scale)
        return min(share, lot.remaining_fee)
