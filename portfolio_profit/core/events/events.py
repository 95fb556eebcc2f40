"""
Domain event models.

These events represent immutable facts observed while a profit calculation
runs. They are consumed by loggers, recorders, and monitoring pipelines.
"""
from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal


@dataclass(slots=True)
class LotOpenedEvent:
    ts: datetime
    transaction_id: str

    quantity: int
    price: Decimal
    fee: Decimal


@dataclass(slots=True)
class LotMatchedEvent:
    ts: datetime
    sell_transaction_id: str
    buy_transaction_id: str

    consumed_qty: int
    lot_remaining_qty: int

    sell_fee_share: Decimal
    buy_fee_share: Decimal

    delta_realized: Decimal
    cum_realized: Decimal


@dataclass(slots=True)
class DividendAssessedEvent:
    ts: datetime
    dividend_id: str

    recognized: bool
    holdings: int | None
    income: Decimal


@dataclass(slots=True)
class ProfitComputedEvent:
    as_of: datetime

    transactions: int
    dividends: int
    open_lots: int

    total: Decimal
    realized: Decimal
    dividend: Decimal
    unrealized: Decimal
