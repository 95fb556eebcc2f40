"""
Event sink interfaces.

Sinks consume the ledger's domain events (lot openings, matches, dividend
assessments and final results).
"""
from __future__ import annotations

from typing import Any, Protocol, runtime_checkable


class EventSink(Protocol):
    def on_event(self, event: Any) -> None:
        """Consume a domain event."""


@runtime_checkable
class ClosableEventSink(EventSink, Protocol):
    """Sink holding a resource that must be released when the bus closes."""

    def close(self) -> None:
        ...
