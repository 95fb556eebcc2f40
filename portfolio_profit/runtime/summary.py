from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, List, Sequence

if TYPE_CHECKING:
    from portfolio_profit.core.domain.types import Dividend, Profit, Transaction


# ---------------------------------------------------------------------------
# Data models
# ---------------------------------------------------------------------------

@dataclass(frozen=True, slots=True)
class RunSummary:
    transactions: int
    buys: int
    sells: int
    dividends: int
    open_quantity: int
    scale: int
    profit: Profit
    warnings: List[str]


# ---------------------------------------------------------------------------
# Summary builder
# ---------------------------------------------------------------------------

def summarize_run(
    *,
    transactions: Sequence[Transaction],
    dividends: Sequence[Dividend],
    profit: Profit,
    scale: int,
) -> RunSummary:
    warnings: list[str] = []

    buys = sum(1 for tx in transactions if tx.is_buy())
    open_quantity = sum(tx.signed_quantity() for tx in transactions)

    if not transactions:
        warnings.append("History contains no transactions")

    if not dividends:
        warnings.append("No dividends in history (dividend income is zero)")

    if open_quantity > 0 and profit.unrealized < 0:
        warnings.append(
            f"Open position of {open_quantity} units is under water "
            f"({profit.unrealized})"
        )

    return RunSummary(
        transactions=len(transactions),
        buys=buys,
        sells=len(transactions) - buys,
        dividends=len(dividends),
        open_quantity=open_quantity,
        scale=scale,
        profit=profit,
        warnings=warnings,
    )


# ---------------------------------------------------------------------------
# Pretty printer
# ---------------------------------------------------------------------------

def print_run_summary(summary: RunSummary) -> None:
    print(f"Transactions: {summary.transactions} ({summary.buys} buys / {summary.sells} sells)")
    print(f"Dividends: {summary.dividends}")
    print(f"Open quantity: {summary.open_quantity}")
    print(f"Scale: {summary.scale}")
    print()

    if summary.warnings:
        print("Warnings:")
        for w in summary.warnings:
            print(f"  - {w}")
        print()

    p = summary.profit
    print("Profit:")
    print(f"  - realized:   {p.realized}")
    print(f"  - dividend:   {p.dividend}")
    print(f"  - total:      {p.total}")
    print(f"  - unrealized: {p.unrealized} (not in total)")
