"""
Stochastic wealth projection for PortOpt.

Mathematical Model
------------------
Starting from V_0 = 0, for each year y = 1..Y:

    V ← V + 12 · c                         (twelve monthly contributions)
    t_y ~ Student-t(ν = 5)                 (fat-tailed shock)
    r_y = μ + σ · t_y
    V ← V · (1 + r_y)

where (μ, σ) are the portfolio expected return and volatility from
metrics.aggregate().

The shock is built from uniforms only:

    z   = Box-Muller(u1, u2)               standard normal
    c   = Σ_{k=1..5} Box-Muller(u, u')²    chi-square with 5 dof
    t   = z · sqrt(5 / c)

so every year consumes 12 uniforms in (0, 1].

Bands
-----
The optimistic / pessimistic / severe-downside values are deterministic
offsets of the single realized path (V · (1 + 0.5σ), V · (1 - 1.5σ),
V · (1 - 2.5σ)). They are not percentiles over many simulated paths.

Design principles
-----------------
- Injectable randomness: pass a numpy Generator or a seed.
- Fresh output every call: without a seed, two calls differ.
- Year 0 is the seed year: all value fields are 0.
"""

from __future__ import annotations

import logging
import math
from dataclasses import asdict, dataclass
from typing import List, Optional, Sequence

import numpy as np
import pandas as pd

from .constants import (
    MONTHS_PER_YEAR,
    OPTIMISTIC_BAND,
    PESSIMISTIC_BAND,
    SEVERE_DOWNSIDE_BAND,
    STUDENT_T_DOF,
)
from .exceptions import DegenerateMetricsError, ValidationError
from .metrics import MetricsSummary
from .types import ProjectionPointDict
from .utils import check_non_negative, is_finite, round_half_up

logger = logging.getLogger(__name__)

__all__ = [
    "ProjectionPoint",
    "box_muller",
    "student_t_shock",
    "project",
    "projection_frame",
    "target_reached_year",
]


@dataclass(frozen=True)
class ProjectionPoint:
    """
    Projected portfolio values for one year.

    Attributes
    ----------
    year : int
        Year offset from today (0 = seed year).
    expected_value : int
        Realized path value.
    optimistic_value : int
    pessimistic_value : int
    severe_downside_value : int
        Deterministic offsets of expected_value.
    target_value : float
        Flat target overlay supplied by the caller.
    """
    year: int
    expected_value: int
    optimistic_value: int
    pessimistic_value: int
    severe_downside_value: int
    target_value: float

    def to_dict(self) -> ProjectionPointDict:
        return ProjectionPointDict(**asdict(self))


# ---------------------------------------------------------------------------
# Random variates
# ---------------------------------------------------------------------------

def _uniform_open(rng: np.random.Generator) -> float:
    """Uniform draw in (0, 1]; Generator.random() can return exactly 0."""
    return 1.0 - rng.random()


def box_muller(rng: np.random.Generator) -> float:
    """Standard normal variate from two independent uniforms (Box-Muller)."""
    u1 = _uniform_open(rng)
    u2 = _uniform_open(rng)
    return math.sqrt(-2.0 * math.log(u1)) * math.cos(2.0 * math.pi * u2)


def student_t_shock(rng: np.random.Generator, dof: int = STUDENT_T_DOF) -> float:
    """
    Draw an approximate Student-t variate.

    Parameters
    ----------
    rng : np.random.Generator
        Uniform source.
    dof : int, default 5
        Degrees of freedom (also the number of squared normals in the
        chi-square denominator).

    Returns
    -------
    float
        z · sqrt(dof / c) with z ~ N(0, 1) and c ~ χ²(dof).
    """
    if dof < 1:
        raise ValidationError(f"dof must be >= 1, got {dof}")
    z = box_muller(rng)
    chi2 = 0.0
    for _ in range(dof):
        chi2 += box_muller(rng) ** 2
    return z * math.sqrt(dof / chi2)


# ---------------------------------------------------------------------------
# Projection
# ---------------------------------------------------------------------------

def _point(year: int, value: float, volatility: float, target_value: float) -> ProjectionPoint:
    return ProjectionPoint(
        year=year,
        expected_value=round_half_up(value),
        optimistic_value=round_half_up(value * (1 + volatility * OPTIMISTIC_BAND)),
        pessimistic_value=round_half_up(value * (1 - volatility * PESSIMISTIC_BAND)),
        severe_downside_value=round_half_up(value * (1 - volatility * SEVERE_DOWNSIDE_BAND)),
        target_value=target_value,
    )


def project(
    metrics: MetricsSummary,
    horizon_years: int,
    periodic_contribution: float,
    target_value: float = 0.0,
    *,
    rng: Optional[np.random.Generator] = None,
    seed: Optional[int] = None,
    dof: int = STUDENT_T_DOF,
) -> List[ProjectionPoint]:
    """
    Project a single stochastic wealth path year by year.

    Parameters
    ----------
    metrics : MetricsSummary
        Portfolio expected return and volatility drive the path.
    horizon_years : int
        Number of projected years (0 gives only the seed year).
    periodic_contribution : float
        Monthly contribution; twelve are added at the start of each year.
    target_value : float, default 0.0
        Flat target copied onto every point.
    rng : np.random.Generator, optional
        Uniform source. Takes precedence over *seed*.
    seed : int, optional
        Seed for a fresh generator when *rng* is None. None means fresh
        OS entropy (non-reproducible).
    dof : int, default 5
        Student-t degrees of freedom.

    Returns
    -------
    List[ProjectionPoint]
        horizon_years + 1 points with years 0..horizon_years.

    Raises
    ------
    DegenerateMetricsError
        If expected_return or volatility is not finite.
    ValidationError
        If horizon_years or periodic_contribution is negative.

    Examples
    --------
    >>> path = project(metrics, horizon_years=3, periodic_contribution=1000, seed=7)
    >>> [p.year for p in path]
    [0, 1, 2, 3]
    >>> path[0].expected_value
    0
    """
    if not is_finite(metrics.expected_return, metrics.volatility):
        raise DegenerateMetricsError(
            f"Cannot project non-finite metrics: expected_return={metrics.expected_return}, "
            f"volatility={metrics.volatility}"
        )
    if int(horizon_years) != horizon_years:
        raise ValidationError(f"horizon_years must be an integer, got {horizon_years}")
    horizon_years = int(horizon_years)
    check_non_negative("horizon_years", horizon_years)
    check_non_negative("periodic_contribution", periodic_contribution)

    if rng is None:
        rng = np.random.default_rng(seed)

    mu = metrics.expected_return
    sigma = metrics.volatility
    annual_contribution = periodic_contribution * MONTHS_PER_YEAR

    points = [ProjectionPoint(0, 0, 0, 0, 0, target_value)]
    value = 0.0
    for year in range(1, horizon_years + 1):
        value += annual_contribution
        shock = student_t_shock(rng, dof)
        value *= 1 + (mu + sigma * shock)
        points.append(_point(year, value, sigma, target_value))

    logger.debug(
        "Projected %d years (μ=%.4f, σ=%.4f): final expected value %s",
        horizon_years, mu, sigma, points[-1].expected_value,
    )
    return points


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def projection_frame(points: Sequence[ProjectionPoint]) -> pd.DataFrame:
    """
    Tabulate a projection.

    Returns
    -------
    pd.DataFrame
        Indexed by year with one column per value field.
    """
    columns = ["expected_value", "optimistic_value", "pessimistic_value",
               "severe_downside_value", "target_value"]
    if not points:
        return pd.DataFrame(columns=columns, index=pd.Index([], name="year"))
    return pd.DataFrame([p.to_dict() for p in points]).set_index("year")[columns]


def target_reached_year(points: Sequence[ProjectionPoint]) -> Optional[int]:
    """First year (>= 1) whose expected value reaches the target, else None."""
    for p in points:
        if p.year > 0 and p.expected_value >= p.target_value:
            return p.year
    return None
