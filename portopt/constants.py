"""
Global constants for PortOpt.

Purpose
-------
Centralizes default values and magic numbers used throughout the PortOpt
codebase. Using constants instead of hardcoded values keeps the allocator,
projector and CLI consistent with each other.

Usage
-----
>>> from portopt.constants import STUDENT_T_DOF, MONTHS_PER_YEAR
>>>
>>> annual = monthly_contribution * MONTHS_PER_YEAR

Categories
----------
- Time: months per year, horizon bounds
- Allocation: sub-split ratios for coarse asset classes
- Projection: Student-t degrees of freedom, band multipliers
- Request defaults: form defaults for the CLI
- Plotting: figure sizes, colors, line widths
"""

from typing import Dict, Tuple

__all__ = [
    # Time
    "MONTHS_PER_YEAR",
    "MIN_HORIZON_YEARS",
    "MAX_HORIZON_YEARS",
    # Allocation
    "PERCENT",
    "STOCK_SPLIT",
    "BOND_SPLIT",
    "ALLOCATION_SUM_TOLERANCE",
    # Projection
    "STUDENT_T_DOF",
    "OPTIMISTIC_BAND",
    "PESSIMISTIC_BAND",
    "SEVERE_DOWNSIDE_BAND",
    # Request defaults
    "DEFAULT_MONTHLY_CONTRIBUTION",
    "DEFAULT_HORIZON_YEARS",
    "DEFAULT_TARGET_MULTIPLE",
    "DEFAULT_TARGET_VALUE",
    "DEFAULT_CURRENT_MIX",
    "DEFAULT_RISK_TOLERANCE",
    "DEFAULT_CALCULATION_DELAY",
    # Plotting
    "DEFAULT_FIGSIZE_WIDE",
    "DEFAULT_LINEWIDTH",
    "DEFAULT_LINEWIDTH_THICK",
    "DEFAULT_ALPHA_BANDS",
    "BAND_COLORS",
]


# =============================================================================
# Time
# =============================================================================

MONTHS_PER_YEAR: int = 12
"""Number of monthly contributions added per projected year."""

MIN_HORIZON_YEARS: int = 1
"""Shortest investment horizon accepted from user input."""

MAX_HORIZON_YEARS: int = 50
"""Longest investment horizon accepted from user input."""


# =============================================================================
# Allocation
# =============================================================================

PERCENT: float = 100.0
"""Weights are expressed in percent; divide by this to get fractions."""

STOCK_SPLIT: Dict[str, float] = {"SWDA": 0.4, "SPY": 0.6}
"""How the coarse stocks bucket is spread over equity instruments."""

BOND_SPLIT: Dict[str, float] = {"SHY": 0.5, "TLT": 0.5}
"""How the coarse bonds bucket is spread over bond instruments."""

ALLOCATION_SUM_TOLERANCE: float = 1e-9
"""Absolute tolerance when checking that a mix adds up to 100."""


# =============================================================================
# Projection
# =============================================================================

STUDENT_T_DOF: int = 5
"""Degrees of freedom of the fat-tailed annual return shock."""

OPTIMISTIC_BAND: float = 0.5
"""Optimistic value = value * (1 + OPTIMISTIC_BAND * volatility)."""

PESSIMISTIC_BAND: float = 1.5
"""Pessimistic value = value * (1 - PESSIMISTIC_BAND * volatility)."""

SEVERE_DOWNSIDE_BAND: float = 2.5
"""Severe downside value = value * (1 - SEVERE_DOWNSIDE_BAND * volatility)."""


# =============================================================================
# Request Defaults
# =============================================================================

DEFAULT_MONTHLY_CONTRIBUTION: float = 1000.0
"""Default monthly amount set aside for investing."""

DEFAULT_HORIZON_YEARS: int = 30
"""Default investment horizon in years."""

DEFAULT_TARGET_MULTIPLE: float = 10.0
"""Default target as a multiple of the annual contribution."""

DEFAULT_TARGET_VALUE: float = 1_000_000.0
"""Default absolute target portfolio value."""

DEFAULT_CURRENT_MIX: Dict[str, float] = {
    "stocks": 60.0,
    "bonds": 30.0,
    "cash": 10.0,
    "crypto": 0.0,
}
"""Default current asset mix in percent."""

DEFAULT_RISK_TOLERANCE: str = "medium"
"""Default risk bucket."""

DEFAULT_CALCULATION_DELAY: float = 1.5
"""Seconds the CLI shows its "Optimizing..." state before publishing results."""


# =============================================================================
# Plotting Defaults
# =============================================================================

DEFAULT_FIGSIZE_WIDE: Tuple[int, int] = (14, 6)
"""Figure size for side-by-side projection panels."""

DEFAULT_LINEWIDTH: float = 1.0
"""Default line width for band lines."""

DEFAULT_LINEWIDTH_THICK: float = 2.0
"""Line width for emphasized lines (expected value, target)."""

DEFAULT_ALPHA_BANDS: float = 0.2
"""Default alpha for the fill between pessimistic and optimistic bands."""

BAND_COLORS: Dict[str, str] = {
    "expected": "#8884d8",
    "optimistic": "#2ca02c",
    "pessimistic": "#ff7f0e",
    "severe": "#d62728",
    "target": "#82ca9d",
}
"""Line colors per projection series."""
