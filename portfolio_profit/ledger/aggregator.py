from __future__ import annotations

from decimal import Decimal

from portfolio_profit.core.domain.decimal_math import quantize
from portfolio_profit.core.domain.types import Profit


def aggregate_profit(
    *,
    realized: Decimal,
    dividend: Decimal,
    unrealized: Decimal,
    scale: int,
) -> Profit:
    """Round each component half-up to ``scale`` and assemble the Profit.

    total is realized + dividend, summed after rounding so the reported
    figures add up exactly. Unrealized gains stay out of the total.
    """
    realized_r = quantize(realized, scale)
    dividend_r = quantize(dividend, scale)

    return Profit(
        total=quantize(realized_r + dividend_r, scale),
        realized=realized_r,
        dividend=dividend_r,
        unrealized=quantize(unrealized, scale),
    )
