"""
Semantic test: selling more than was ever bought fails the calculation.

Invariant:
An unmatched sell quantity raises OverSellError. No Profit is produced and
no domain event from the failed calculation reaches the event bus.
"""

from __future__ import annotations

import logging
from datetime import datetime, timedelta, timezone
from decimal import Decimal
from typing import Any

import pytest

from portfolio_profit.core.config.profit_config import ProfitConfig
from portfolio_profit.core.domain.errors import ErrorKind, OverSellError
from portfolio_profit.core.domain.types import Transaction
from portfolio_profit.core.events.event_bus import EventBus
from portfolio_profit.ledger.engine import ProfitEngine, compute_profit

T0 = datetime(2024, 1, 1, tzinfo=timezone.utc)
AS_OF = T0 + timedelta(days=30)


class RecordingSink:
    def __init__(self) -> None:
        self.events: list[Any] = []

    def on_event(self, event: Any) -> None:
        self.events.append(event)


def mk_tx(tx_id: str, side: str, qty: int, price: str, day: int) -> Transaction:
    return Transaction(
        transaction_id=tx_id,
        side=side,
        quantity=qty,
        price=Decimal(price),
        fee=Decimal("0"),
        timestamp=T0 + timedelta(days=day),
    )


def test_sell_beyond_holdings_raises_oversell() -> None:
    transactions = [
        mk_tx("b1", "buy", 10, "100", 0),
        mk_tx("s1", "sell", 20, "110", 1),
    ]

    with pytest.raises(OverSellError) as exc_info:
        compute_profit(transactions, [], scale=2, as_of=AS_OF)

    err = exc_info.value
    assert err.kind == ErrorKind.OVER_SELL
    assert err.transaction_id == "s1"
    assert err.requested == 20
    assert err.unmatched == 10


def test_sell_before_any_buy_raises_oversell() -> None:
    transactions = [
        mk_tx("s1", "sell", 1, "110", 0),
        mk_tx("b1", "buy", 10, "100", 1),
    ]

    with pytest.raises(OverSellError):
        compute_profit(transactions, [], scale=2, as_of=AS_OF)


def test_failed_calculation_publishes_no_events(caplog: pytest.LogCaptureFixture) -> None:
    sink = RecordingSink()
    engine = ProfitEngine(ProfitConfig(scale=2), event_bus=EventBus(sinks=[sink]))

    transactions = [
        mk_tx("b1", "buy", 10, "100", 0),
        mk_tx("s1", "sell", 4, "110", 1),
        mk_tx("s2", "sell", 7, "110", 2),
    ]

    with caplog.at_level(logging.WARNING, logger="portfolio_profit.ledger.engine"):
        with pytest.raises(OverSellError):
            engine.compute_profit(transactions, [], as_of=AS_OF)

    assert sink.events == []
    assert "Profit calculation failed" in caplog.text
