"""
Unit tests for utils.py module.

Tests validation functions, numeric helpers, and formatting utilities.
"""

import math

import pytest

from portopt.exceptions import ValidationError
from portopt.utils import (
    check_non_negative,
    format_currency,
    format_pct,
    is_finite,
    millions_formatter,
    round_half_up,
    weights_total,
)


class TestValidation:
    """Test input validation functions."""

    def test_check_non_negative_valid(self):
        """Valid non-negative values should pass."""
        check_non_negative("test", 0)
        check_non_negative("test", 1.5)
        check_non_negative("test", 1000)

    def test_check_non_negative_invalid(self):
        """Negative values should raise ValidationError (a ValueError)."""
        with pytest.raises(ValidationError, match="test must be non-negative"):
            check_non_negative("test", -0.1)

        with pytest.raises(ValueError, match="test must be non-negative"):
            check_non_negative("test", -100)


class TestNumeric:
    """Test finite checks and rounding."""

    def test_is_finite(self):
        assert is_finite(0.0, 1.5, -3)
        assert not is_finite(1.0, math.nan)
        assert not is_finite(math.inf)
        assert not is_finite(-math.inf, 0.0)

    @pytest.mark.parametrize("value, expected", [
        (0.5, 1),
        (1.5, 2),
        (2.5, 3),
        (2.4999, 2),
        (-0.5, 0),
        (-1.5, -1),
        (-2.6, -3),
        (12600.0000001, 12600),
    ])
    def test_round_half_up(self, value, expected):
        """Halves round towards +inf, unlike round()."""
        assert round_half_up(value) == expected

    def test_round_half_up_returns_int(self):
        assert isinstance(round_half_up(3.7), int)

    def test_weights_total(self):
        assert weights_total({"A": 40, "B": 60.5}) == pytest.approx(100.5)
        assert weights_total({}) == 0.0


class TestFormatting:
    """Test formatting utilities."""

    def test_format_currency(self):
        assert format_currency(120_000) == "$120,000"
        assert format_currency(1234.5, decimals=2) == "$1,234.50"
        assert format_currency(999.6) == "$1,000"

    def test_format_currency_symbol(self):
        assert format_currency(5000, symbol="€") == "€5,000"

    def test_format_pct(self):
        assert format_pct(0.0725) == "7.25%"
        assert format_pct(-0.313, decimals=1) == "-31.3%"

    def test_format_pct_missing(self):
        assert format_pct(None) == "n/a"
        assert format_pct(math.nan) == "n/a"

    def test_millions_formatter(self):
        assert millions_formatter(0, None) == "0"
        assert millions_formatter(25_000_000, None) == "25M"
        assert millions_formatter(1_250_000, None) == "1.2M"
