"""Fixed-scale decimal helpers.

All money arithmetic in the ledger runs on ``decimal.Decimal``. Every
division is rounded explicitly (ROUND_HALF_UP) to the configured scale and
every reported figure is quantized the same way.
"""

from __future__ import annotations

from contextlib import AbstractContextManager
from decimal import ROUND_HALF_UP, Context, Decimal, localcontext

from portfolio_profit.core.domain.errors import DegenerateQuantityError

ZERO = Decimal("0")

# Significant digits kept ahead of the rounding scale for intermediate
# products and quotients.
_WORKING_PRECISION = 50


def decimal_context(scale: int = 0) -> AbstractContextManager[Context]:
    """Return a context manager scoping the ledger's decimal context.

    Precision grows with ``scale`` so quotients keep ``_WORKING_PRECISION``
    digits beyond the last rounded one.

    ``localcontext`` is backed by a context variable, so concurrent
    calculations on different threads do not share arithmetic state.
    """
    return localcontext(prec=_WORKING_PRECISION + scale, rounding=ROUND_HALF_UP)


def quantum(scale: int) -> Decimal:
    """Smallest increment representable at ``scale`` fractional digits."""
    return Decimal(1).scaleb(-scale)


def quantize(value: Decimal, scale: int) -> Decimal:
    """Round ``value`` half-up to ``scale`` fractional digits.

    Runs in a context wide enough for the rounded result, whatever the
    magnitude of ``value`` and the size of ``scale``.
    """
    digits = max(value.adjusted(), 0) + scale + 2
    context = Context(prec=digits, rounding=ROUND_HALF_UP)
    return value.quantize(quantum(scale), rounding=ROUND_HALF_UP, context=context)


def prorate(total: Decimal, part: int, whole: int, scale: int) -> Decimal:
    """Return ``total * part / whole`` rounded half-up to ``scale``.

    Used to split a transaction's total fee across a partial quantity.
    """
    if whole <= 0:
        raise DegenerateQuantityError(
            f"cannot prorate over a non-positive quantity (whole={whole})"
        )
    return quantize(total * part / whole, scale)
