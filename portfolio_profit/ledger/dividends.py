"""Dividend entitlement from historical holdings."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from typing import Sequence

from portfolio_profit.core.domain.decimal_math import ZERO
from portfolio_profit.core.domain.errors import NegativeHoldingsError
from portfolio_profit.core.domain.types import Dividend, Transaction
from portfolio_profit.core.events.events import DividendAssessedEvent


@dataclass(frozen=True, slots=True)
class DividendEntitlement:
    dividend: Dividend
    recognized: bool
    holdings: int | None
    income: Decimal

    def to_event(self) -> DividendAssessedEvent:
        return DividendAssessedEvent(
            ts=self.dividend.payment_date,
            dividend_id=self.dividend.dividend_id,
            recognized=self.recognized,
            holdings=self.holdings,
            income=self.income,
        )


def holdings_at(history: Sequence[Transaction], date: datetime) -> int:
    """Net units held at ``date``, counting transactions at exactly ``date``.

    ``history`` must be sorted ascending by timestamp: the replay stops at the
    first transaction after ``date``.
    """
    holdings = 0
    for tx in history:
        if tx.timestamp > date:
            break
        holdings += tx.signed_quantity()
    return holdings


def is_recognized(dividend: Dividend, as_of: datetime) -> bool:
    """A dividend counts once it has been paid, i.e. payment_date <= as_of."""
    return dividend.payment_date <= as_of


def assess_dividend(
    dividend: Dividend,
    history: Sequence[Transaction],
    as_of: datetime,
) -> DividendEntitlement:
    """Income owed by ``dividend`` given the sorted transaction ``history``.

    Unpaid dividends contribute nothing. Paid ones earn amount_per_unit for
    every unit held at the ex-dividend date, replayed independently of the
    FIFO lot queue.
    """
    if not is_recognized(dividend, as_of):
        return DividendEntitlement(
            dividend=dividend,
            recognized=False,
            holdings=None,
            income=ZERO,
        )

    holdings = holdings_at(history, dividend.ex_dividend_date)
    if holdings < 0:
        raise NegativeHoldingsError(dividend_id=dividend.dividend_id, holdings=holdings)

    return DividendEntitlement(
        dividend=dividend,
        recognized=True,
        holdings=holdings,
        income=dividend.amount_per_unit * holdings,
    )
