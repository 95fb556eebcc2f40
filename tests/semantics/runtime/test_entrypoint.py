"""
Semantic test: command-line runs and metrics delivery.

Invariant:
A successful run prints the profit breakdown and exits 0; configuration or
calculation errors exit 1. Metrics delivery never decides the exit code.
"""

from __future__ import annotations

import json
from decimal import Decimal
from pathlib import Path
from typing import Any

import pytest

from portfolio_profit.core.domain.types import Profit
from portfolio_profit.runtime import prometheus_metrics
from portfolio_profit.runtime.entrypoint import main
from portfolio_profit.runtime.prometheus_metrics import PrometheusMetricsClient, parse_grouping_key
from portfolio_profit.runtime.summary import print_run_summary, summarize_run

PROFIT = Profit(
    total=Decimal("12.50"),
    realized=Decimal("10.00"),
    dividend=Decimal("2.50"),
    unrealized=Decimal("-4.00"),
)


@pytest.fixture(autouse=True)
def _no_pushgateway(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("PROMETHEUS_PUSHGATEWAY_URL", raising=False)
    monkeypatch.delenv("PROMETHEUS_PUSHGATEWAY_GROUPING_KEY_JSON", raising=False)


def test_main_prints_profit_and_records_events(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    event_log = tmp_path / "events.jsonl"

    rc = main(["--transactions", "60", "--seed", "3", "--scale", "2", "--event-log", str(event_log)])

    assert rc == 0
    out = capsys.readouterr().out
    assert "Transactions: 60" in out
    assert "Profit:" in out
    assert "(not in total)" in out

    records = [json.loads(line) for line in event_log.read_text(encoding="utf-8").splitlines()]
    assert records[0]["event_type"] == "LotOpenedEvent"
    assert records[-1]["event_type"] == "ProfitComputedEvent"
    assert records[-1]["transactions"] == 60


def test_main_with_config_file(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    config = tmp_path / "config.json"
    config.write_text(json.dumps({"profit": {"scale": 3}, "generator": {"num_transactions": 20, "seed": 1}}), encoding="utf-8")

    assert main(["--config", str(config)]) == 0
    out = capsys.readouterr().out
    assert "Transactions: 20" in out
    assert "Scale: 3" in out


def test_main_rejects_negative_scale() -> None:
    assert main(["--transactions", "10", "--scale", "-1"]) == 1


def test_main_rejects_missing_config(tmp_path: Path) -> None:
    assert main(["--config", str(tmp_path / "absent.json")]) == 1


def test_summary_warns_about_empty_history(capsys: pytest.CaptureFixture[str]) -> None:
    summary = summarize_run(transactions=[], dividends=[], profit=PROFIT, scale=2)

    assert summary.transactions == 0
    assert "History contains no transactions" in summary.warnings

    print_run_summary(summary)
    out = capsys.readouterr().out
    assert "Profit:" in out
    assert "12.50" in out


def test_metrics_client_records_components(monkeypatch: pytest.MonkeyPatch) -> None:
    pushed: list[dict[str, Any]] = []
    monkeypatch.setattr(prometheus_metrics, "push_to_gateway", lambda **kwargs: pushed.append(kwargs))
    monkeypatch.setenv("PROMETHEUS_PUSHGATEWAY_URL", "http://pushgateway:9091")
    monkeypatch.setenv("PROMETHEUS_PUSHGATEWAY_GROUPING_KEY_JSON", '{"portfolio": "demo", "n": 1}')

    client = PrometheusMetricsClient.from_env()
    client.record_profit(PROFIT)
    client.push_all(job="portfolio_profit")

    assert client.is_enabled()
    assert client.registry.get_sample_value("portfolio_profit", {"component": "total"}) == 12.5
    assert client.registry.get_sample_value("portfolio_profit", {"component": "unrealized"}) == -4.0
    assert len(pushed) == 1
    assert pushed[0]["job"] == "portfolio_profit"
    assert pushed[0]["grouping_key"] == {"portfolio": "demo"}


def test_metrics_disabled_without_gateway(monkeypatch: pytest.MonkeyPatch) -> None:
    pushed: list[dict[str, Any]] = []
    monkeypatch.setattr(prometheus_metrics, "push_to_gateway", lambda **kwargs: pushed.append(kwargs))

    client = PrometheusMetricsClient()
    client.push_all(job="portfolio_profit")

    assert not client.is_enabled()
    assert pushed == []


def test_failed_push_does_not_fail_run(monkeypatch: pytest.MonkeyPatch) -> None:
    def _refuse(**_: Any) -> None:
        raise OSError("connection refused")

    monkeypatch.setattr(prometheus_metrics, "push_to_gateway", _refuse)
    monkeypatch.setenv("PROMETHEUS_PUSHGATEWAY_URL", "http://pushgateway:9091")

    assert main(["--transactions", "10", "--seed", "2"]) == 0


def test_grouping_key_keeps_string_labels_only() -> None:
    assert parse_grouping_key(None) == {}
    assert parse_grouping_key("not json") == {}
    assert parse_grouping_key('["a"]') == {}
    assert parse_grouping_key('{"desk": "alpha", "n": 2}') == {"desk": "alpha"}


def test_main_accepts_large_scale(capsys: pytest.CaptureFixture[str]) -> None:
    assert main(["--transactions", "40", "--seed", "4", "--scale", "60"]) == 0
    assert "Scale: 60" in capsys.readouterr().out
