"""Configuration models for the profit ledger and the history simulators.

Configuration is read once at startup, validated into frozen Pydantic
models and shared read-only by every calculation.

JSON example:
    {
      "profit": {"scale": 8},
      "generator": {"num_transactions": 1000, "seed": 7}
    }
"""

from __future__ import annotations

import json
from decimal import Decimal
from pathlib import Path
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, ValidationError, model_validator

from portfolio_profit.core.domain.errors import InvalidConfigurationError

DEFAULT_SCALE = 8


class ProfitConfig(BaseModel):
    """Rounding configuration for profit calculations."""

    scale: int = Field(DEFAULT_SCALE, ge=0, description="Fractional digits of every rounded figure.")

    model_config = ConfigDict(extra="forbid", frozen=True)

    @classmethod
    def from_json_obj(cls, obj: dict[str, Any]) -> ProfitConfig:
        """Create a ProfitConfig, reporting bad input as InvalidConfigurationError."""
        try:
            return cls.model_validate(obj)
        except ValidationError as exc:
            raise InvalidConfigurationError(f"invalid profit config: {exc}") from exc

    @classmethod
    def from_scale(cls, scale: int) -> ProfitConfig:
        return cls.from_json_obj({"scale": scale})


class GeneratorConfig(BaseModel):
    """Parameters of the random transaction and dividend simulators."""

    num_transactions: int = Field(1000, gt=0)
    max_quantity: int = Field(100, gt=0)

    mean_price: Decimal = Field(Decimal("100.00"), gt=0)
    stddev_price: Decimal = Field(Decimal("20.00"), ge=0)
    min_price: Decimal = Field(Decimal("1.00"), gt=0)

    fee_rate: Decimal = Field(Decimal("0.005"), ge=0)
    min_fee: Decimal = Field(Decimal("1.00"), ge=0)
    max_fee: Decimal = Field(Decimal("10.00"), ge=0)

    history_days: int = Field(730, gt=0)
    end_offset_days: int = Field(30, ge=0)

    dividend_interval_days: int = Field(90, gt=0)
    payment_grace_days: int = Field(10, ge=0)
    min_dividend: Decimal = Field(Decimal("0.50"), ge=0)
    max_dividend: Decimal = Field(Decimal("2.00"), ge=0)

    seed: int | None = None

    model_config = ConfigDict(extra="forbid", frozen=True)

    @model_validator(mode="after")
    def validate_ranges(self) -> GeneratorConfig:
        """Validate internal consistency of the generator ranges."""
        if self.min_fee > self.max_fee:
            raise ValueError("min_fee must not exceed max_fee")
        if self.min_dividend > self.max_dividend:
            raise ValueError("min_dividend must not exceed max_dividend")
        if self.end_offset_days >= self.history_days:
            raise ValueError("end_offset_days must be smaller than history_days")
        return self


class AppConfig(BaseModel):
    profit: ProfitConfig = Field(default_factory=ProfitConfig)
    generator: GeneratorConfig = Field(default_factory=GeneratorConfig)

    model_config = ConfigDict(extra="forbid", frozen=True)

    @classmethod
    def from_json_obj(cls, obj: dict[str, Any]) -> AppConfig:
        try:
            return cls.model_validate(obj)
        except ValidationError as exc:
            raise InvalidConfigurationError(f"invalid config: {exc}") from exc


def load_app_config(path: str | Path) -> AppConfig:
    """Load an AppConfig from a JSON file."""
    config_path = Path(path)
    if not config_path.exists():
        raise FileNotFoundError(config_path)

    raw = json.loads(config_path.read_text(encoding="utf-8"))
    if not isinstance(raw, dict):
        raise InvalidConfigurationError(
            f"config file must hold a JSON object, got {type(raw).__name__}"
        )
    return AppConfig.from_json_obj(raw)
