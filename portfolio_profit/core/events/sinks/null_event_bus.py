from __future__ import annotations

from portfolio_profit.core.events.event_bus import EventBus


class NullEventBus(EventBus):
    """EventBus without sinks; every emitted event is dropped.

    Used by tests and by the one-shot ``compute_profit`` helper.
    """

    def __init__(self) -> None:
        super().__init__(sinks=())
