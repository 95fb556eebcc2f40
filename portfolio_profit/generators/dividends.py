"""Quarterly dividend schedule derived from a transaction history."""

from __future__ import annotations

import logging
import random
from datetime import timedelta
from decimal import ROUND_HALF_UP, Decimal
from typing import Sequence

from portfolio_profit.core.config.profit_config import GeneratorConfig
from portfolio_profit.core.domain.types import Dividend, Transaction

LOGGER = logging.getLogger(__name__)


def generate_dividends(
    transactions: Sequence[Transaction],
    config: GeneratorConfig,
    *,
    rng: random.Random | None = None,
) -> list[Dividend]:
    """Generate one dividend per interval across the span of ``transactions``.

    The first ex-dividend date is one interval after the first trade; dates
    repeat every ``dividend_interval_days`` while they precede the last
    trade. Payment follows the ex-date by ``payment_grace_days``.
    """
    rng = rng if rng is not None else random.Random(config.seed)

    if not transactions:
        LOGGER.warning("No transactions provided for dividend generation")
        return []

    start = min(tx.timestamp for tx in transactions)
    end = max(tx.timestamp for tx in transactions)
    interval = timedelta(days=config.dividend_interval_days)
    grace = timedelta(days=config.payment_grace_days)

    low = float(config.min_dividend)
    high = float(config.max_dividend)

    dividends: list[Dividend] = []
    ex_date = start + interval
    while ex_date < end:
        amount = Decimal(repr(rng.uniform(low, high))).quantize(
            Decimal("0.01"), rounding=ROUND_HALF_UP
        )
        dividends.append(
            Dividend(
                dividend_id=f"div-{len(dividends) + 1:04d}",
                amount_per_unit=amount,
                ex_dividend_date=ex_date,
                payment_date=ex_date + grace,
            )
        )
        ex_date += interval

    LOGGER.info(
        "Generated %d dividends between %s and %s",
        len(dividends),
        start.isoformat(),
        end.isoformat(),
    )
    return dividends
