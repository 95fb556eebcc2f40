"""Chronological merge of transactions and dividends into one event stream."""

from __future__ import annotations

import logging
from datetime import datetime
from typing import Callable, Iterable, Sequence, TypeVar

from portfolio_profit.core.domain.types import (
    Dividend,
    DividendEvent,
    Event,
    Transaction,
    TransactionEvent,
)

LOGGER = logging.getLogger(__name__)

T = TypeVar("T")


def _is_chronological(items: Sequence[T], key: Callable[[T], datetime]) -> bool:
    return all(key(a) <= key(b) for a, b in zip(items, items[1:]))


def _ensure_chronological(
    items: Iterable[T],
    key: Callable[[T], datetime],
    label: str,
) -> tuple[T, ...]:
    """Return ``items`` in ascending order of ``key``.

    Already-ordered input is returned as is. Otherwise it is stable-sorted,
    so records sharing a date keep their original relative order.
    """
    ordered = tuple(items)
    if _is_chronological(ordered, key):
        return ordered

    LOGGER.info("%s are not in chronological order; sorting %d records", label, len(ordered))
    return tuple(sorted(ordered, key=key))


def sort_transactions(transactions: Iterable[Transaction]) -> tuple[Transaction, ...]:
    return _ensure_chronological(transactions, lambda t: t.timestamp, "transactions")


def sort_dividends(dividends: Iterable[Dividend]) -> tuple[Dividend, ...]:
    return _ensure_chronological(dividends, lambda d: d.payment_date, "dividends")


def _event_sort_key(event: Event) -> tuple[datetime, int]:
    return (event.ordering_key, event.sort_rank)


def build_event_stream(
    transactions: Iterable[Transaction],
    dividends: Iterable[Dividend],
) -> tuple[Event, ...]:
    """Merge transactions and dividends into ascending event order.

    Ordering key is the transaction timestamp or the dividend payment date.
    On equal keys transactions come before dividends; events of the same
    kind keep their input order.
    """
    events: list[Event] = [
        TransactionEvent(transaction=tx) for tx in sort_transactions(transactions)
    ]
    events.extend(DividendEvent(dividend=div) for div in sort_dividends(dividends))

    # sorted() is stable: same-kind ties keep the order established above.
    return tuple(sorted(events, key=_event_sort_key))
