"""
Unit tests for allocation.py module.

Tests current-mix mapping and risk-bucket recommendations.
"""

import logging

import pytest

from portopt.allocation import (
    RISK_ALLOCATIONS,
    RISK_TOLERANCES,
    map_current_mix_to_instruments,
    recommend_allocation,
)
from portopt.config import AssetMix
from portopt.exceptions import ContractViolationError, ValidationError
from portopt.instruments import DEFAULT_TABLE
from portopt.utils import weights_total


# ============================================================================
# RECOMMENDED ALLOCATION TESTS
# ============================================================================

class TestRecommendAllocation:
    """Test risk-bucket lookup."""

    @pytest.mark.parametrize("risk", ["low", "medium", "high"])
    def test_sums_to_100(self, risk):
        """Every bucket sums to exactly 100."""
        assert weights_total(recommend_allocation(risk)) == 100.0

    @pytest.mark.parametrize("risk", ["low", "medium", "high"])
    def test_symbols_in_table(self, risk):
        """Buckets only use known instruments."""
        assert set(recommend_allocation(risk)) <= set(DEFAULT_TABLE.symbols)

    def test_medium_bucket(self):
        assert recommend_allocation("medium") == {
            "SWDA": 40, "SPY": 30, "SHY": 15, "TLT": 10, "CASH": 3, "CRYPTO": 2,
        }

    def test_low_bucket(self):
        assert recommend_allocation("low") == {
            "SWDA": 30, "SPY": 20, "SHY": 30, "TLT": 15, "CASH": 5, "CRYPTO": 0,
        }

    def test_high_bucket(self):
        assert recommend_allocation("high") == {
            "SWDA": 45, "SPY": 35, "SHY": 5, "TLT": 5, "CASH": 0, "CRYPTO": 10,
        }

    def test_returns_copy(self):
        """Mutating the result does not change the table."""
        weights = recommend_allocation("low")
        weights["SWDA"] = 99
        assert RISK_ALLOCATIONS["low"]["SWDA"] == 30

    def test_unknown_risk_raises(self):
        """Unknown tolerance is a contract violation, never a default."""
        with pytest.raises(ContractViolationError, match="extreme"):
            recommend_allocation("extreme")

    def test_unhashable_risk_raises(self):
        with pytest.raises(ContractViolationError):
            recommend_allocation(["low"])

    def test_tolerances_cover_table(self):
        assert set(RISK_TOLERANCES) == set(RISK_ALLOCATIONS)


# ============================================================================
# CURRENT MIX MAPPING TESTS
# ============================================================================

class TestMapCurrentMix:
    """Test coarse mix → instrument weights."""

    def test_default_mix(self, default_mix):
        """60/30/10/0 splits into 24/36/15/15/10/0."""
        weights = map_current_mix_to_instruments(default_mix)

        assert weights["SWDA"] == pytest.approx(24.0)
        assert weights["SPY"] == pytest.approx(36.0)
        assert weights["SHY"] == pytest.approx(15.0)
        assert weights["TLT"] == pytest.approx(15.0)
        assert weights["CASH"] == pytest.approx(10.0)
        assert weights["CRYPTO"] == pytest.approx(0.0)

    @pytest.mark.parametrize("mix", [
        (100, 0, 0, 0),
        (0, 100, 0, 0),
        (0, 0, 100, 0),
        (0, 0, 0, 100),
        (33, 33, 33, 1),
        (12.5, 37.5, 25, 25),
        (70, 20, 5, 5),
    ])
    def test_sums_to_100(self, mix):
        """Mixes summing to 100 map to weights summing to 100."""
        stocks, bonds, cash, crypto = mix
        weights = map_current_mix_to_instruments(
            AssetMix(stocks=stocks, bonds=bonds, cash=cash, crypto=crypto)
        )
        assert weights_total(weights) == pytest.approx(100.0)

    def test_accepts_mapping(self):
        """Plain mappings work; missing keys count as zero."""
        weights = map_current_mix_to_instruments({"stocks": 50, "cash": 50})

        assert weights["SWDA"] == pytest.approx(20.0)
        assert weights["SPY"] == pytest.approx(30.0)
        assert weights["SHY"] == 0.0
        assert weights["CASH"] == 50.0

    def test_preserves_total(self):
        """Total follows the input even when it is not 100."""
        weights = map_current_mix_to_instruments({"stocks": 10, "bonds": 10, "cash": 0, "crypto": 0})
        assert weights_total(weights) == pytest.approx(20.0)

    def test_negative_percentage_raises(self):
        with pytest.raises(ValidationError, match="bonds"):
            map_current_mix_to_instruments({"stocks": 110, "bonds": -10})

    def test_logs_mapped_total(self, default_mix, caplog):
        with caplog.at_level(logging.DEBUG, logger="portopt.allocation"):
            map_current_mix_to_instruments(default_mix)
        assert "total 100.00%" in caplog.text

    def test_deterministic(self, default_mix):
        assert map_current_mix_to_instruments(default_mix) == map_current_mix_to_instruments(default_mix)

    def test_symbols_in_table(self, default_mix):
        assert set(map_current_mix_to_instruments(default_mix)) == set(DEFAULT_TABLE.symbols)
