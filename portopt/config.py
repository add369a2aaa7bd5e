"""
Configuration management module for PortOpt.

Purpose
-------
Centralized request and settings models using Pydantic for type-safe
parameter management, validation, and serialization. These models are the
input-validation boundary: the engine only ever sees an AllocationInput
that passed every check here.

Design Principles
-----------------
- Type-safe: Pydantic enforces types and validates ranges
- Immutable: Frozen models prevent accidental mutation
- Serializable: Easy conversion to/from JSON for request files
- Environment-aware: AppSettings reads PORTOPT_* variables and .env files

Example
-------
>>> from portopt.config import AllocationInput, AssetMix
>>> request = AllocationInput(
...     monthly_contribution=1000,
...     horizon_years=30,
...     target_kind="multiplier",
...     target_multiple=10,
...     current_mix=AssetMix(stocks=60, bonds=30, cash=10, crypto=0),
...     risk_tolerance="medium",
... )
>>> request.resolved_target
120000.0
>>>
>>> # Serialize to dict/JSON
>>> data = request.model_dump()
>>> loaded = AllocationInput.model_validate(data)
"""

from __future__ import annotations
from typing import Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from .constants import (
    ALLOCATION_SUM_TOLERANCE,
    DEFAULT_CALCULATION_DELAY,
    DEFAULT_CURRENT_MIX,
    DEFAULT_HORIZON_YEARS,
    DEFAULT_MONTHLY_CONTRIBUTION,
    DEFAULT_RISK_TOLERANCE,
    DEFAULT_TARGET_MULTIPLE,
    MAX_HORIZON_YEARS,
    MIN_HORIZON_YEARS,
    MONTHS_PER_YEAR,
    PERCENT,
)
from .exceptions import AllocationSumError, ContractViolationError

__all__ = [
    "RiskTolerance",
    "TargetKind",
    "AssetMix",
    "AllocationInput",
    "AppSettings",
]

RiskTolerance = Literal["low", "medium", "high"]
TargetKind = Literal["multiplier", "value"]


# ---------------------------------------------------------------------------
# Asset Mix
# ---------------------------------------------------------------------------

class AssetMix(BaseModel):
    """
    Current coarse asset allocation in percent.

    Attributes
    ----------
    stocks, bonds, cash, crypto : float
        Percentages in [0, 100]. Must sum to exactly 100.

    Examples
    --------
    >>> AssetMix(stocks=60, bonds=30, cash=10, crypto=0).total
    100.0
    >>> AssetMix(stocks=60, bonds=30, cash=5, crypto=0)
    Traceback (most recent call last):
    ...
    pydantic_core._pydantic_core.ValidationError: ... Allocation must sum to 100% ...
    """

    model_config = ConfigDict(frozen=True, extra="forbid", allow_inf_nan=False)

    stocks: float = Field(
        default=DEFAULT_CURRENT_MIX["stocks"],
        ge=0,
        le=100,
        description="Stocks percentage"
    )
    bonds: float = Field(
        default=DEFAULT_CURRENT_MIX["bonds"],
        ge=0,
        le=100,
        description="Bonds percentage"
    )
    cash: float = Field(
        default=DEFAULT_CURRENT_MIX["cash"],
        ge=0,
        le=100,
        description="Cash percentage"
    )
    crypto: float = Field(
        default=DEFAULT_CURRENT_MIX["crypto"],
        ge=0,
        le=100,
        description="Crypto percentage"
    )

    @property
    def total(self) -> float:
        return self.stocks + self.bonds + self.cash + self.crypto

    @model_validator(mode="after")
    def validate_sum(self):
        """Ensure the four buckets add up to 100%."""
        if abs(self.total - PERCENT) > ALLOCATION_SUM_TOLERANCE:
            raise AllocationSumError(
                f"Allocation must sum to 100%, got {self.total:g}%"
            )
        return self


# ---------------------------------------------------------------------------
# Allocation Request
# ---------------------------------------------------------------------------

class AllocationInput(BaseModel):
    """
    Validated optimization request.

    Attributes
    ----------
    monthly_contribution : float
        Amount invested every month (>= 1).
    horizon_years : int
        Investment horizon in years (1-50).
    target_kind : {"multiplier", "value"}
        How the wealth goal is expressed.
    target_multiple : float, optional
        Goal as a multiple of the annual contribution. Required when
        target_kind == "multiplier".
    target_value : float, optional
        Absolute goal. Required when target_kind == "value".
    current_mix : AssetMix
        Current coarse allocation.
    risk_tolerance : {"low", "medium", "high"}
        Risk bucket for the recommended allocation.

    Examples
    --------
    >>> AllocationInput(target_kind="value", target_value=500_000).resolved_target
    500000.0
    """

    model_config = ConfigDict(frozen=True, extra="forbid", allow_inf_nan=False)

    monthly_contribution: float = Field(
        default=DEFAULT_MONTHLY_CONTRIBUTION,
        ge=1,
        description="Monthly contribution (must be at least 1)"
    )
    horizon_years: int = Field(
        default=DEFAULT_HORIZON_YEARS,
        ge=MIN_HORIZON_YEARS,
        le=MAX_HORIZON_YEARS,
        description="Investment horizon in years"
    )
    target_kind: TargetKind = Field(
        default="multiplier",
        description="Goal expressed as a multiple of annual contribution or as a value"
    )
    target_multiple: Optional[float] = Field(
        default=DEFAULT_TARGET_MULTIPLE,
        gt=0,
        description="Target as a multiple of the annual contribution"
    )
    target_value: Optional[float] = Field(
        default=None,
        gt=0,
        description="Absolute target portfolio value"
    )
    current_mix: AssetMix = Field(
        default_factory=AssetMix,
        description="Current asset mix"
    )
    risk_tolerance: RiskTolerance = Field(
        default=DEFAULT_RISK_TOLERANCE,
        description="Risk tolerance bucket"
    )

    @model_validator(mode="after")
    def validate_target_field(self):
        """Ensure the field matching target_kind is present."""
        if self.target_kind == "multiplier" and self.target_multiple is None:
            raise ValueError("target_multiple is required when target_kind is 'multiplier'")
        if self.target_kind == "value" and self.target_value is None:
            raise ValueError("target_value is required when target_kind is 'value'")
        return self

    @property
    def annual_contribution(self) -> float:
        return self.monthly_contribution * MONTHS_PER_YEAR

    @property
    def resolved_target(self) -> float:
        """Absolute target value implied by target_kind."""
        if self.target_kind == "multiplier":
            return float(self.annual_contribution * self.target_multiple)
        if self.target_kind == "value":
            return float(self.target_value)
        raise ContractViolationError(
            f"Unknown target kind {self.target_kind!r}. Expected 'multiplier' or 'value'."
        )


# ---------------------------------------------------------------------------
# Application Settings (Environment Variables)
# ---------------------------------------------------------------------------

class AppSettings(BaseSettings):
    """
    Global application settings loaded from environment variables.

    Supports .env files for local development. Environment variables
    should be prefixed with PORTOPT_ (e.g., PORTOPT_LOG_LEVEL=DEBUG).

    Attributes
    ----------
    debug : bool
        Enable debug mode (forces DEBUG logging).
    log_level : str
        Logging level: "DEBUG", "INFO", "WARNING", "ERROR".
    calculation_delay : float
        Seconds the CLI shows its "Optimizing..." state before publishing
        results. 0 disables it.
    seed : int, optional
        Default projection seed. None draws fresh entropy each run.

    Examples
    --------
    >>> settings = AppSettings()
    >>> settings.calculation_delay
    1.5

    # With .env file:
    # PORTOPT_CALCULATION_DELAY=0
    >>> AppSettings(_env_file=".env").calculation_delay
    0.0
    """

    model_config = SettingsConfigDict(
        env_prefix="PORTOPT_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    debug: bool = Field(
        default=False,
        description="Enable debug mode"
    )
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = Field(
        default="WARNING",
        description="Logging level"
    )
    calculation_delay: float = Field(
        default=DEFAULT_CALCULATION_DELAY,
        ge=0,
        le=60,
        description="Artificial delay before results are shown (seconds)"
    )
    seed: Optional[int] = Field(
        default=None,
        description="Default random seed for projections"
    )

    @property
    def effective_log_level(self) -> str:
        return "DEBUG" if self.debug else self.log_level
