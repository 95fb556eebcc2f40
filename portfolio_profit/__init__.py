"""Public API for the portfolio_profit package.

Only symbols imported here are considered part of the stable,
supported external interface.
"""

from __future__ import annotations

from importlib.metadata import PackageNotFoundError, version

# ----------------------------------------------------------------------
# Config API
# ----------------------------------------------------------------------
from portfolio_profit.core.config.profit_config import (
    AppConfig,
    GeneratorConfig,
    ProfitConfig,
    load_app_config,
)

# ----------------------------------------------------------------------
# Errors
# ----------------------------------------------------------------------
from portfolio_profit.core.domain.errors import (
    DegenerateQuantityError,
    ErrorKind,
    InvalidConfigurationError,
    NegativeHoldingsError,
    OverSellError,
    ProfitCalculationError,
)

# ----------------------------------------------------------------------
# Domain Types
# ----------------------------------------------------------------------
from portfolio_profit.core.domain.types import (
    Dividend,
    DividendEvent,
    Event,
    Profit,
    Transaction,
    TransactionEvent,
)

# ----------------------------------------------------------------------
# Events
# ----------------------------------------------------------------------
from portfolio_profit.core.events.event_bus import EventBus

# ----------------------------------------------------------------------
# History simulators
# ----------------------------------------------------------------------
from portfolio_profit.generators.dividends import generate_dividends
from portfolio_profit.generators.transactions import generate_transactions

# ----------------------------------------------------------------------
# Engine API
# ----------------------------------------------------------------------
from portfolio_profit.ledger.engine import ProfitEngine, compute_profit

# ----------------------------------------------------------------------
# Public API definition
# ----------------------------------------------------------------------

__all__ = [
    # Engine
    "ProfitEngine",
    "compute_profit",

    # Config
    "AppConfig",
    "GeneratorConfig",
    "ProfitConfig",
    "load_app_config",

    # Domain
    "Transaction",
    "Dividend",
    "Event",
    "TransactionEvent",
    "DividendEvent",
    "Profit",

    # Errors
    "ErrorKind",
    "ProfitCalculationError",
    "OverSellError",
    "NegativeHoldingsError",
    "InvalidConfigurationError",
    "DegenerateQuantityError",

    # Events
    "EventBus",

    # Simulators
    "generate_transactions",
    "generate_dividends",

    # Version
    "__version__",
]

# ----------------------------------------------------------------------
# Package version
# ----------------------------------------------------------------------

try:
    __version__ = version("portfolio-profit")
except PackageNotFoundError:
    __version__ = "0.0.0"
