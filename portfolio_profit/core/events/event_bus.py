"""
Synchronous domain event bus.

The profit engine hands over the whole event trail of a calculation in one
``publish`` call once the calculation has succeeded; sinks never observe
events of a failed calculation.
"""
from __future__ import annotations

from types import TracebackType
from typing import Any, Iterable

from portfolio_profit.core.events.event_sink import ClosableEventSink, EventSink


class EventBus:
    """Fans domain events out to sinks, in registration order."""

    def __init__(self, sinks: Iterable[EventSink] | None = None) -> None:
        self._sinks: list[EventSink] = list(sinks) if sinks is not None else []
        self._closed = False

    def __enter__(self) -> EventBus:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.close()

    @property
    def closed(self) -> bool:
        return self._closed

    def register(self, sink: EventSink) -> None:
        self._sinks.append(sink)

    def emit(self, event: Any) -> None:
        """Deliver one event to every sink."""
        for sink in self._sinks:
            sink.on_event(event)

    def publish(self, events: Iterable[Any]) -> None:
        """Deliver a calculation's events; each sink sees them in order."""
        for event in events:
            self.emit(event)

    def close(self) -> None:
        """Release closable sinks. Later calls are no-ops."""
        if self._closed:
            return

        for sink in self._sinks:
            if isinstance(sink, ClosableEventSink):
                sink.close()

        self._closed = True
