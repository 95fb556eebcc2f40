"""Pushgateway export of the profit breakdown of one run.

Environment read by :meth:`PrometheusMetricsClient.from_env`:
- PROMETHEUS_PUSHGATEWAY_URL: Pushgateway URL; export is disabled when unset.
  Example: http://pushgateway.monitoring.svc.cluster.local:9091
- PROMETHEUS_PUSHGATEWAY_GROUPING_KEY_JSON: optional JSON object of string
  labels used as the grouping key, e.g. {"portfolio": "demo"}.

Export is a side-effect of a run. Callers log delivery failures and carry on.
"""

from __future__ import annotations

import json
import logging
import os
from typing import TYPE_CHECKING, Mapping

from prometheus_client import CollectorRegistry, Gauge, push_to_gateway

if TYPE_CHECKING:
    from portfolio_profit.core.domain.types import Profit

LOGGER = logging.getLogger(__name__)

URL_ENV = "PROMETHEUS_PUSHGATEWAY_URL"
GROUPING_KEY_ENV = "PROMETHEUS_PUSHGATEWAY_GROUPING_KEY_JSON"

PROFIT_COMPONENTS = ("total", "realized", "dividend", "unrealized")


def parse_grouping_key(raw: str | None) -> dict[str, str]:
    """Decode a grouping key, keeping only string-to-string entries."""
    if not raw:
        return {}

    try:
        data = json.loads(raw)
    except json.JSONDecodeError:
        LOGGER.warning("Invalid %s; ignoring", GROUPING_KEY_ENV)
        return {}

    if not isinstance(data, dict):
        return {}
    return {k: v for k, v in data.items() if isinstance(k, str) and isinstance(v, str)}


class PrometheusMetricsClient:
    """Holds one registry with a ``portfolio_profit{component=...}`` gauge."""

    def __init__(
        self,
        pushgateway_url: str | None = None,
        grouping_key: Mapping[str, str] | None = None,
    ) -> None:
        self._pushgateway_url = pushgateway_url
        self._grouping_key = dict(grouping_key or {})
        self._registry = CollectorRegistry()
        self._profit = Gauge(
            "portfolio_profit",
            documentation="Profit breakdown of the last calculation, by component.",
            labelnames=["component"],
            registry=self._registry,
        )

    @classmethod
    def from_env(cls) -> PrometheusMetricsClient:
        return cls(
            pushgateway_url=os.environ.get(URL_ENV),
            grouping_key=parse_grouping_key(os.environ.get(GROUPING_KEY_ENV)),
        )

    def is_enabled(self) -> bool:
        return bool(self._pushgateway_url)

    @property
    def registry(self) -> CollectorRegistry:
        return self._registry

    def record_profit(self, profit: Profit) -> None:
        for component in PROFIT_COMPONENTS:
            self._profit.labels(component=component).set(float(getattr(profit, component)))

    def push_all(self, *, job: str) -> None:
        if not self.is_enabled():
            return

        push_to_gateway(
            gateway=self._pushgateway_url,
            job=job,
            registry=self._registry,
            grouping_key=self._grouping_key,
        )
        LOGGER.info(
            "Prometheus metrics pushed",
            extra={"job": job, "grouping_key": self._grouping_key},
        )
