"""
Pytest configuration and fixtures for PortOpt test suite.

This module provides reusable fixtures for testing all PortOpt components.
Fixtures follow the principle of "arrange-act-assert" with clear separation.
"""

import numpy as np
import pytest

from portopt.config import AllocationInput, AssetMix
from portopt.instruments import DEFAULT_TABLE, Instrument, InstrumentTable
from portopt.metrics import MetricsSummary


# ---------------------------------------------------------------------------
# Randomness Fixtures
# ---------------------------------------------------------------------------

@pytest.fixture
def seed() -> int:
    """Standard random seed for reproducibility."""
    return 42


@pytest.fixture
def rng(seed) -> np.random.Generator:
    """Seeded generator for projection tests."""
    return np.random.default_rng(seed)


class ConstantUniforms:
    """Generator stand-in returning a fixed uniform and counting draws."""

    def __init__(self, value: float = 0.5):
        self.value = value
        self.calls = 0

    def random(self):
        self.calls += 1
        return self.value


class CountingGenerator:
    """Wraps a real Generator and counts uniform draws."""

    def __init__(self, seed: int = 0):
        self._rng = np.random.default_rng(seed)
        self.calls = 0

    def random(self):
        self.calls += 1
        return self._rng.random()


@pytest.fixture
def constant_uniforms() -> ConstantUniforms:
    """Uniform source that always returns 0.5."""
    return ConstantUniforms(0.5)


@pytest.fixture
def counting_rng() -> CountingGenerator:
    """Seeded uniform source that records how many draws were made."""
    return CountingGenerator(seed=7)


# ---------------------------------------------------------------------------
# Instrument Fixtures
# ---------------------------------------------------------------------------

@pytest.fixture
def table() -> InstrumentTable:
    """Built-in instrument table."""
    return DEFAULT_TABLE


@pytest.fixture
def losing_table() -> InstrumentTable:
    """
    Table with a single instrument whose mean return is negative.

    Used to exercise undefined recovery times.
    """
    return InstrumentTable([
        Instrument("LOSS", "Losing Fund", (-0.05, -0.03), volatility=0.10,
                   max_drawdown=0.50, crisis_shock=-0.30),
    ])


# ---------------------------------------------------------------------------
# Request Fixtures
# ---------------------------------------------------------------------------

@pytest.fixture
def default_mix() -> AssetMix:
    """60/30/10/0 stocks/bonds/cash/crypto."""
    return AssetMix(stocks=60, bonds=30, cash=10, crypto=0)


@pytest.fixture
def request_multiplier(default_mix) -> AllocationInput:
    """
    Standard request with a multiplier target.

    1000/month for 30 years, target 10x annual contribution, medium risk.
    """
    return AllocationInput(
        monthly_contribution=1000,
        horizon_years=30,
        target_kind="multiplier",
        target_multiple=10,
        current_mix=default_mix,
        risk_tolerance="medium",
    )


@pytest.fixture
def request_value(default_mix) -> AllocationInput:
    """Short request with an absolute target."""
    return AllocationInput(
        monthly_contribution=500,
        horizon_years=5,
        target_kind="value",
        target_multiple=None,
        target_value=50_000,
        current_mix=default_mix,
        risk_tolerance="low",
    )


# ---------------------------------------------------------------------------
# Metrics Fixtures
# ---------------------------------------------------------------------------

@pytest.fixture
def medium_metrics() -> MetricsSummary:
    """Metrics of the medium risk bucket."""
    return MetricsSummary(
        expected_return=0.0725,
        volatility=0.1408,
        max_drawdown=0.14,
        crisis_impact=-0.313,
    )


@pytest.fixture
def riskless_metrics() -> MetricsSummary:
    """5% return, zero volatility: the projection becomes deterministic."""
    return MetricsSummary(
        expected_return=0.05,
        volatility=0.0,
        max_drawdown=0.0,
        crisis_impact=0.0,
    )
