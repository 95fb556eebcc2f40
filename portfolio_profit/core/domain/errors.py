"""Error taxonomy for profit calculations.

Every failure detected by the ledger is raised synchronously as a subclass
of :class:`ProfitCalculationError` and tagged with an :class:`ErrorKind`.
A raised error means the whole calculation was discarded.
"""

from __future__ import annotations

from enum import StrEnum


class ErrorKind(StrEnum):
    OVER_SELL = "OVER_SELL"
    NEGATIVE_HOLDINGS = "NEGATIVE_HOLDINGS"
    INVALID_CONFIGURATION = "INVALID_CONFIGURATION"
    DEGENERATE_QUANTITY = "DEGENERATE_QUANTITY"


class ProfitCalculationError(Exception):
    """Base class for all calculation failures."""

    kind: ErrorKind


class OverSellError(ProfitCalculationError):
    """A sell could not be fully matched against open lots."""

    kind = ErrorKind.OVER_SELL

    def __init__(self, *, transaction_id: str, requested: int, unmatched: int) -> None:
        super().__init__(
            f"sell {transaction_id} requested {requested} units but "
            f"{unmatched} could not be matched against open lots"
        )
        self.transaction_id = transaction_id
        self.requested = requested
        self.unmatched = unmatched


class NegativeHoldingsError(ProfitCalculationError):
    """Holdings at an ex-dividend date came out negative."""

    kind = ErrorKind.NEGATIVE_HOLDINGS

    def __init__(self, *, dividend_id: str, holdings: int) -> None:
        super().__init__(
            f"holdings at ex-dividend date of {dividend_id} are {holdings}; "
            "transaction history sells more than it ever held"
        )
        self.dividend_id = dividend_id
        self.holdings = holdings


class InvalidConfigurationError(ProfitCalculationError, ValueError):
    kind = ErrorKind.INVALID_CONFIGURATION


class DegenerateQuantityError(ProfitCalculationError, ValueError):
    kind = ErrorKind.DEGENERATE_QUANTITY
