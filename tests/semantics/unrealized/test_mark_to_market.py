"""
Semantic test: unrealized gains mark open lots to the last trade price.

Invariant:
unrealized = last_trade_price * remaining_holdings - cost_basis, where the
cost basis includes fees still attached to open lots. With nothing held the
result is exactly zero.
"""

from __future__ import annotations

from datetime import datetime, timedelta, timezone
from decimal import Decimal

from portfolio_profit.core.domain.lots import Lot
from portfolio_profit.core.domain.types import Transaction
from portfolio_profit.ledger.engine import compute_profit
from portfolio_profit.ledger.unrealized import unrealized_gains

T0 = datetime(2024, 1, 1, tzinfo=timezone.utc)
AS_OF = T0 + timedelta(days=30)


def mk_tx(tx_id: str, side: str, qty: int, price: str, day: int, fee: str = "0") -> Transaction:
    return Transaction(
        transaction_id=tx_id,
        side=side,
        quantity=qty,
        price=Decimal(price),
        fee=Decimal(fee),
        timestamp=T0 + timedelta(days=day),
    )


def mk_lot(tx_id: str, qty: int, price: str, fee: str = "0") -> Lot:
    return Lot(
        transaction_id=tx_id,
        price=Decimal(price),
        remaining_quantity=qty,
        remaining_fee=Decimal(fee),
        original_fee=Decimal(fee),
    )


def test_open_lots_marked_to_last_price() -> None:
    """5 units remain at cost basis 500; marked at 130 that is 150."""
    lots = [mk_lot("b1", 5, "100")]

    assert unrealized_gains(lots, Decimal("130")) == Decimal("150")


def test_remaining_fee_is_part_of_cost_basis() -> None:
    lots = [mk_lot("b1", 5, "100", fee="2.50"), mk_lot("b2", 1, "90", fee="1.00")]

    # 6 * 110 - (500 + 2.50 + 90 + 1.00)
    assert unrealized_gains(lots, Decimal("110")) == Decimal("66.50")


def test_nothing_held_is_exactly_zero() -> None:
    assert unrealized_gains([], Decimal("130")) == Decimal("0")
    assert unrealized_gains([mk_lot("b1", 0, "100")], Decimal("130")) == Decimal("0")


def test_engine_marks_remainder_after_partial_sell() -> None:
    transactions = [
        mk_tx("b1", "buy", 10, "100", 0),
        mk_tx("s1", "sell", 5, "130", 1),
    ]

    profit = compute_profit(transactions, [], scale=2, as_of=AS_OF)

    assert profit.realized == Decimal("150.00")
    assert profit.unrealized == Decimal("150.00")


def test_no_transactions_means_zero_unrealized() -> None:
    profit = compute_profit([], [], scale=2, as_of=AS_OF)

    assert profit.unrealized == Decimal("0.00")
    assert profit.total == Decimal("0.00")


def test_partially_sold_lot_keeps_unallocated_fee_in_basis() -> None:
    transactions = [
        mk_tx("b1", "buy", 4, "100", 0, fee="4.00"),
        mk_tx("s1", "sell", 1, "100", 1),
    ]

    profit = compute_profit(transactions, [], scale=2, as_of=AS_OF)

    # One unit carried 1.00 of fee out; 3.00 stays on the open lot.
    assert profit.realized == Decimal("-1.00")
    assert profit.unrealized == Decimal("-3.00")
