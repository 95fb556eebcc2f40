"""Core shared data models and schemas.

This module defines the canonical Pydantic models consumed and produced by
the profit ledger: transactions, dividends, the chronological event union
and the profit breakdown. The models are immutable once constructed and
mirror the JSON Schemas under ``portfolio_profit/core/schemas``.
"""

# pylint: disable=missing-class-docstring,missing-function-docstring
from __future__ import annotations

from datetime import datetime
from decimal import Decimal
from typing import Annotated, ClassVar, Literal

from pydantic import AwareDatetime, BaseModel, ConfigDict, Field, model_validator

Side = Literal["buy", "sell"]


# ---------------------------------------------------------------------------
# Input records
# ---------------------------------------------------------------------------


class Transaction(BaseModel):
    """A single buy or sell of the instrument.

    Notes:
    - fee is the total fee for the whole transaction, not per unit.
    - quantity is a whole number of units and must be positive.
    """

    transaction_id: str = Field(..., min_length=1)
    side: Side = Field(..., description="Transaction side.")
    quantity: int = Field(..., gt=0, description="Number of units traded.")
    price: Decimal = Field(..., ge=0, description="Price per unit.")
    fee: Decimal = Field(..., ge=0, description="Total fee for the transaction.")
    timestamp: AwareDatetime = Field(..., description="Execution time.")

    model_config = ConfigDict(extra="forbid", frozen=True)

    def is_buy(self) -> bool:
        return self.side == "buy"

    def signed_quantity(self) -> int:
        """Quantity with the sign of its effect on holdings."""
        return self.quantity if self.is_buy() else -self.quantity


class Dividend(BaseModel):
    """A per-unit cash dividend.

    Entitlement is decided by holdings at ``ex_dividend_date``; recognition
    in a calculation is gated by ``payment_date``.
    """

    dividend_id: str = Field(..., min_length=1)
    amount_per_unit: Decimal = Field(..., ge=0)
    ex_dividend_date: AwareDatetime
    payment_date: AwareDatetime

    model_config = ConfigDict(extra="forbid", frozen=True)

    @model_validator(mode="after")
    def validate_payment_after_ex_date(self) -> Dividend:
        if self.payment_date < self.ex_dividend_date:
            raise ValueError("payment_date must not precede ex_dividend_date")
        return self


# ---------------------------------------------------------------------------
# Chronological event union
# ---------------------------------------------------------------------------


class TransactionEvent(BaseModel):
    kind: Literal["transaction"] = "transaction"
    transaction: Transaction

    # Transactions sort ahead of dividends sharing the same instant.
    sort_rank: ClassVar[int] = 0

    model_config = ConfigDict(extra="forbid", frozen=True)

    @property
    def ordering_key(self) -> datetime:
        return self.transaction.timestamp


class DividendEvent(BaseModel):
    kind: Literal["dividend"] = "dividend"
    dividend: Dividend

    sort_rank: ClassVar[int] = 1

    model_config = ConfigDict(extra="forbid", frozen=True)

    @property
    def ordering_key(self) -> datetime:
        return self.dividend.payment_date


# Discriminated union: Pydantic will select the correct model based on kind.
Event = Annotated[
    TransactionEvent | DividendEvent,
    Field(discriminator="kind"),
]


# ---------------------------------------------------------------------------
# Result
# ---------------------------------------------------------------------------


class Profit(BaseModel):
    """Profit breakdown of one calculation.

    ``total`` is realized plus dividend income. Unrealized gains are
    reported alongside but are not part of the total.
    """

    total: Decimal
    realized: Decimal
    dividend: Decimal
    unrealized: Decimal

    model_config = ConfigDict(extra="forbid", frozen=True)
