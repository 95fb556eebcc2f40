"""Random single-instrument transaction history.

The simulator never sells more than it holds, so its output is always a
valid ledger input.
"""

from __future__ import annotations

import logging
import random
from datetime import datetime, timedelta, timezone
from decimal import ROUND_HALF_UP, Decimal

from portfolio_profit.core.config.profit_config import GeneratorConfig
from portfolio_profit.core.domain.types import Side, Transaction

LOGGER = logging.getLogger(__name__)

_CENT = Decimal("0.01")


def _normal_price(config: GeneratorConfig, rng: random.Random) -> Decimal:
    price = config.mean_price + config.stddev_price * Decimal(repr(rng.gauss(0.0, 1.0)))
    price = max(price, config.min_price)
    return price.quantize(_CENT, rounding=ROUND_HALF_UP)


def transaction_fee(order_value: Decimal, config: GeneratorConfig) -> Decimal:
    """Commission on ``order_value``, clamped to [min_fee, max_fee]."""
    fee = order_value * config.fee_rate
    fee = min(max(fee, config.min_fee), config.max_fee)
    return fee.quantize(_CENT, rounding=ROUND_HALF_UP)


def generate_transactions(
    config: GeneratorConfig,
    *,
    now: datetime | None = None,
    rng: random.Random | None = None,
) -> list[Transaction]:
    """Generate ``config.num_transactions`` chronologically ordered trades.

    Trades fall between ``now - history_days`` and ``now - end_offset_days``.
    Any trade at zero holdings is a buy; otherwise buy and sell are equally
    likely and a sell takes between one unit and everything held.
    """
    now = now if now is not None else datetime.now(timezone.utc)
    rng = rng if rng is not None else random.Random(config.seed)

    start = now - timedelta(days=config.history_days)
    end = now - timedelta(days=config.end_offset_days)
    total_minutes = int((end - start).total_seconds() // 60)

    transactions: list[Transaction] = []
    holdings = 0
    current = start

    for i in range(config.num_transactions):
        side: Side = "buy" if holdings == 0 or rng.random() < 0.5 else "sell"

        if side == "buy":
            quantity = rng.randint(1, config.max_quantity)
            holdings += quantity
        else:
            quantity = rng.randint(1, holdings)
            holdings -= quantity

        price = _normal_price(config, rng)
        fee = transaction_fee(price * quantity, config)

        elapsed = int((current - start).total_seconds() // 60)
        max_step = (total_minutes - elapsed) // (config.num_transactions - i)
        current += timedelta(minutes=rng.randrange(max_step) if max_step > 0 else 0)

        transactions.append(
            Transaction(
                transaction_id=f"tx-{i + 1:06d}",
                side=side,
                quantity=quantity,
                price=price,
                fee=fee,
                timestamp=current,
            )
        )

    LOGGER.info(
        "Generated %d transactions",
        len(transactions),
        extra={"final_holdings": holdings},
    )
    return transactions
