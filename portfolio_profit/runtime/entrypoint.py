from __future__ import annotations

import argparse
import logging
import random
import sys
from datetime import datetime, timezone
from pathlib import Path
from typing import TYPE_CHECKING

from portfolio_profit.core.config.profit_config import AppConfig, load_app_config
from portfolio_profit.core.domain.errors import ProfitCalculationError
from portfolio_profit.core.events.event_bus import EventBus
from portfolio_profit.core.events.event_sink import EventSink
from portfolio_profit.core.events.sinks.file_recorder import FileRecorderSink
from portfolio_profit.core.events.sinks.sink_logging import LoggingEventSink
from portfolio_profit.generators.dividends import generate_dividends
from portfolio_profit.generators.transactions import generate_transactions
from portfolio_profit.ledger.engine import ProfitEngine
from portfolio_profit.runtime.prometheus_metrics import PrometheusMetricsClient
from portfolio_profit.runtime.summary import print_run_summary, summarize_run

if TYPE_CHECKING:
    from portfolio_profit.core.domain.types import Profit

LOGGER = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def _resolve_config(args: argparse.Namespace) -> AppConfig:
    cfg = load_app_config(args.config) if args.config is not None else AppConfig()

    raw = cfg.model_dump()
    if args.transactions is not None:
        raw["generator"]["num_transactions"] = args.transactions
    if args.seed is not None:
        raw["generator"]["seed"] = args.seed
    if args.scale is not None:
        raw["profit"]["scale"] = args.scale

    return AppConfig.from_json_obj(raw)


def _build_event_bus(event_log: Path | None) -> EventBus:
    sinks: list[EventSink] = [LoggingEventSink(logging.getLogger("bus"))]
    if event_log is not None:
        sinks.append(FileRecorderSink(event_log))
    return EventBus(sinks=sinks)


def _push_metrics(profit: Profit) -> None:
    metrics = PrometheusMetricsClient.from_env()
    if not metrics.is_enabled():
        return
    try:
        metrics.record_profit(profit)
        metrics.push_all(job="portfolio_profit")
    except Exception:
        LOGGER.exception("Prometheus push failed")


# ---------------------------------------------------------------------------
# Main
# ---------------------------------------------------------------------------

def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(
        description="Simulate a transaction history and compute its FIFO profit breakdown"
    )

    parser.add_argument(
        "--config",
        type=Path,
        default=None,
        help="Path to a JSON config with 'profit' and 'generator' sections.",
    )
    parser.add_argument(
        "--transactions",
        type=int,
        default=None,
        help="Number of transactions to simulate (overrides config).",
    )
    parser.add_argument(
        "--seed",
        type=int,
        default=None,
        help="Random seed for reproducible histories (overrides config).",
    )
    parser.add_argument(
        "--scale",
        type=int,
        default=None,
        help="Rounding scale for all reported figures (overrides config).",
    )
    parser.add_argument(
        "--event-log",
        type=Path,
        default=None,
        help="Append domain events as JSON lines to this file.",
    )
    parser.add_argument(
        "--log-level",
        default="INFO",
        help="Python logging level.",
    )

    args = parser.parse_args(argv)
    logging.basicConfig(
        level=args.log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    try:
        cfg = _resolve_config(args)
    except (ProfitCalculationError, FileNotFoundError) as exc:
        LOGGER.error("Invalid configuration: %s", exc)
        return 1

    now = datetime.now(timezone.utc)
    rng = random.Random(cfg.generator.seed)
    transactions = generate_transactions(cfg.generator, now=now, rng=rng)
    dividends = generate_dividends(transactions, cfg.generator, rng=rng)

    with _build_event_bus(args.event_log) as event_bus:
        engine = ProfitEngine(cfg.profit, event_bus=event_bus)
        try:
            profit = engine.compute_profit(transactions, dividends, as_of=now)
        except ProfitCalculationError as exc:
            LOGGER.error("Profit calculation failed (%s): %s", exc.kind.value, exc)
            return 1

    print_run_summary(
        summarize_run(
            transactions=transactions,
            dividends=dividends,
            profit=profit,
            scale=cfg.profit.scale,
        )
    )
    _push_metrics(profit)
    return 0


if __name__ == "__main__":
    sys.exit(main())
