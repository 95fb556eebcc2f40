"""Mark-to-market valuation of the lots still open after the last event."""

from __future__ import annotations

from decimal import Decimal
from typing import Iterable

from portfolio_profit.core.domain.decimal_math import ZERO
from portfolio_profit.core.domain.lots import Lot


def unrealized_gains(lots: Iterable[Lot], last_trade_price: Decimal) -> Decimal:
    """Market value of open lots at ``last_trade_price`` minus their cost basis.

    Returns exactly zero when nothing is held.
    """
    open_lots = tuple(lots)
    remaining_holdings = sum(lot.remaining_quantity for lot in open_lots)
    if remaining_holdings <= 0:
        return ZERO

    cost_basis = sum((lot.cost_basis() for lot in open_lots), ZERO)
    return last_trade_price * remaining_holdings - cost_basis
