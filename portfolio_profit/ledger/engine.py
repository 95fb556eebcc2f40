"""Profit engine: one chronological pass over transactions and dividends.

The engine itself holds only read-only configuration and a reference to the
event bus. Every call to :meth:`ProfitEngine.compute_profit` builds its own
ledger, accumulators and "as of" instant, so a single engine can serve
concurrent calculations over disjoint inputs.
"""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from decimal import Decimal
from typing import TYPE_CHECKING, Any, Iterable, assert_never

from portfolio_profit.core.config.profit_config import ProfitConfig
from portfolio_profit.core.domain.decimal_math import ZERO, decimal_context
from portfolio_profit.core.domain.errors import DegenerateQuantityError, ProfitCalculationError
from portfolio_profit.core.domain.types import DividendEvent, TransactionEvent
from portfolio_profit.core.events.events import ProfitComputedEvent
from portfolio_profit.core.events.sinks.null_event_bus import NullEventBus
from portfolio_profit.ledger.aggregator import aggregate_profit
from portfolio_profit.ledger.dividends import assess_dividend
from portfolio_profit.ledger.event_stream import build_event_stream, sort_dividends, sort_transactions
from portfolio_profit.ledger.fifo_ledger import FifoLedger
from portfolio_profit.ledger.unrealized import unrealized_gains

if TYPE_CHECKING:
    from portfolio_profit.core.domain.types import Dividend, Profit, Transaction
    from portfolio_profit.core.events.event_bus import EventBus

LOGGER = logging.getLogger(__name__)


def _validate_quantities(transactions: Iterable[Transaction]) -> None:
    # Models enforce quantity > 0; records built with model_construct do not.
    for tx in transactions:
        if tx.quantity <= 0:
            raise DegenerateQuantityError(
                f"transaction {tx.transaction_id} has non-positive quantity {tx.quantity}"
            )


class ProfitEngine:
    """Computes realized, dividend and unrealized profit for one instrument."""

    def __init__(self, config: ProfitConfig, event_bus: EventBus | None = None) -> None:
        self._config = config
        self._event_bus = event_bus if event_bus is not None else NullEventBus()

    @property
    def scale(self) -> int:
        return self._config.scale

    def compute_profit(
        self,
        transactions: Iterable[Transaction],
        dividends: Iterable[Dividend],
        *,
        as_of: datetime | None = None,
    ) -> Profit:
        """Run one calculation.

        ``as_of`` gates dividend recognition and defaults to the current UTC
        time, captured once. Either a Profit is returned or an error is
        raised; no partial result or partial event trail escapes.
        """
        if as_of is None:
            as_of = datetime.now(timezone.utc)
        elif as_of.tzinfo is None:
            raise ValueError("as_of must be timezone-aware")

        history = sort_transactions(transactions)
        payouts = sort_dividends(dividends)

        LOGGER.info(
            "Calculating profit",
            extra={"transactions": len(history), "dividends": len(payouts), "as_of": as_of.isoformat()},
        )

        try:
            with decimal_context(self.scale):
                profit, events = self._run(history, payouts, as_of)
        except ProfitCalculationError as exc:
            LOGGER.warning("Profit calculation failed: %s", exc, extra={"kind": exc.kind.value})
            raise

        self._event_bus.publish(events)
        LOGGER.info("Total profit calculated: %s", profit.total)
        return profit

    def _run(
        self,
        history: tuple[Transaction, ...],
        payouts: tuple[Dividend, ...],
        as_of: datetime,
    ) -> tuple[Profit, list[Any]]:
        _validate_quantities(history)

        ledger = FifoLedger(scale=self.scale)
        dividend_income: Decimal = ZERO
        events: list[Any] = []

        for event in build_event_stream(history, payouts):
            match event:
                case TransactionEvent(transaction=tx):
                    events.extend(ledger.apply(tx))
                case DividendEvent(dividend=div):
                    entitlement = assess_dividend(div, history, as_of)
                    dividend_income += entitlement.income
                    events.append(entitlement.to_event())
                case _:
                    assert_never(event)

        profit = aggregate_profit(
            realized=ledger.realized,
            dividend=dividend_income,
            unrealized=unrealized_gains(ledger.open_lots, ledger.last_trade_price),
            scale=self.scale,
        )

        events.append(
            ProfitComputedEvent(
                as_of=as_of,
                transactions=len(history),
                dividends=len(payouts),
                open_lots=len(ledger.open_lots),
                total=profit.total,
                realized=profit.realized,
                dividend=profit.dividend,
                unrealized=profit.unrealized,
            )
        )
        return profit, events


def compute_profit(
    transactions: Iterable[Transaction],
    dividends: Iterable[Dividend],
    scale: int,
    *,
    as_of: datetime | None = None,
) -> Profit:
    """One-shot calculation at ``scale`` without event publishing."""
    return ProfitEngine(ProfitConfig.from_scale(scale)).compute_profit(
        transactions,
        dividends,
        as_of=as_of,
    )
