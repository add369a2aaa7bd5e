"""General utilities for PortOpt

Contents
--------
- Validation helpers
- Numeric helpers (finite checks, JS-compatible rounding)
- Weight helpers (weights_total)
- Matplotlib / text formatters (millions_formatter, format_currency, format_pct)
"""

from __future__ import annotations

import math
from typing import Mapping, Optional

import numpy as np

from .exceptions import ValidationError

__all__ = [
    # Validation
    "check_non_negative",
    # Numeric
    "is_finite",
    "round_half_up",
    # Weights
    "weights_total",
    # Formatters
    "millions_formatter",
    "format_currency",
    "format_pct",
]

# ---------------------------------------------------------------------------
# Validation helpers
# ---------------------------------------------------------------------------

def check_non_negative(name: str, value: float) -> None:
    """Raise if *value* is negative (strict)."""
    if value < 0:
        raise ValidationError(f"{name} must be non-negative (got {value}).")


# ---------------------------------------------------------------------------
# Numeric helpers
# ---------------------------------------------------------------------------

def is_finite(*values: float) -> bool:
    """True if every value is a finite real number."""
    return bool(np.all(np.isfinite(np.asarray(values, dtype=float))))


def round_half_up(x: float) -> int:
    """Round to the nearest integer with .5 going towards +inf.

    Matches the rounding used when the projection figures are displayed
    (Math.round semantics), unlike Python's banker's rounding.
    """
    return int(math.floor(x + 0.5))


# ---------------------------------------------------------------------------
# Weight helpers
# ---------------------------------------------------------------------------

def weights_total(weights: Mapping[str, float]) -> float:
    """Sum of percentage weights."""
    return float(sum(weights.values()))


# ---------------------------------------------------------------------------
# Formatters
# ---------------------------------------------------------------------------

def millions_formatter(x, pos):
    """
    Format axis values as millions for matplotlib FuncFormatter.

    Converts large monetary values to compact millions notation:
    - 25_000_000 → "25M"
    - 1_250_000 → "1.2M"
    - 0 → "0"

    Parameters
    ----------
    x : float
        Value to format (in raw currency units).
    pos : int
        Tick position (unused, required by FuncFormatter signature).

    Returns
    -------
    str
        Formatted string with "M" suffix.

    Examples
    --------
    >>> from matplotlib.ticker import FuncFormatter
    >>> ax.yaxis.set_major_formatter(FuncFormatter(millions_formatter))
    """
    if x == 0:
        return '0'
    val = x / 1e6
    return f'{val:.0f}M' if val == int(val) else f'{val:.1f}M'


def format_currency(value, decimals=0, symbol='$'):
    """
    Format currency values for tables and annotations.

    Examples
    --------
    >>> format_currency(120_000)
    '$120,000'
    >>> format_currency(1234.5, decimals=2)
    '$1,234.50'
    """
    return f'{symbol}{value:,.{decimals}f}'


def format_pct(value: Optional[float], decimals: int = 2) -> str:
    """Format a decimal fraction as a percentage ('n/a' for missing or non-finite)."""
    if value is None or not is_finite(value):
        return 'n/a'
    return f'{value * 100:.{decimals}f}%'
