"""
Portfolio metrics and crisis stress test for PortOpt.

Mathematical Model
------------------
For percent weights w_i over instruments i (fractions f_i = w_i / 100):

    expected_return = Σ_i f_i · mean(returns_i)
    volatility      = Σ_i f_i · σ_i
    max_drawdown    = max_{i : w_i ≠ 0} f_i · DD_i
    crisis_impact   = Σ_i f_i · crisis_i        (unknown crisis_i = 0)

Known simplifications
---------------------
- Volatility is additive across instruments. There is no covariance term,
  so it overstates the risk of diversified mixes.
- Max drawdown is the single largest weighted instrument drawdown, not a
  portfolio-level drawdown statistic.

Both are kept as-is: downstream figures (bands, tests) are pinned to them.

Stress test
-----------
    recovery_years = ceil(|crisis_impact| / expected_return)

Undefined (None) when expected_return <= 0 or any input is not finite.
"""

from __future__ import annotations

import logging
import math
from dataclasses import asdict, dataclass
from typing import Mapping, Optional

from .constants import PERCENT
from .exceptions import ValidationError
from .instruments import DEFAULT_TABLE, InstrumentTable
from .types import MetricsDict, StressTestDict
from .utils import is_finite

logger = logging.getLogger(__name__)

__all__ = [
    "MetricsSummary",
    "StressTestResult",
    "aggregate",
    "stress_test",
]


@dataclass(frozen=True)
class MetricsSummary:
    """
    Scalar summary of a weight vector.

    Attributes
    ----------
    expected_return : float
        Weighted mean annual return.
    volatility : float
        Weighted (additive) volatility.
    max_drawdown : float
        Largest weighted single-instrument drawdown.
    crisis_impact : float
        Weighted 2008 crisis return.
    """
    expected_return: float
    volatility: float
    max_drawdown: float
    crisis_impact: float

    @property
    def is_finite(self) -> bool:
        """True when all four figures are finite numbers."""
        return is_finite(self.expected_return, self.volatility,
                         self.max_drawdown, self.crisis_impact)

    def to_dict(self) -> MetricsDict:
        return MetricsDict(**asdict(self))


@dataclass(frozen=True)
class StressTestResult:
    """
    Outcome of replaying the 2008 crisis on a portfolio.

    Attributes
    ----------
    crisis_impact : float
        Crisis-period return of the portfolio.
    recovery_years : int, optional
        Years of expected growth needed to offset the crisis loss.
        None when the recovery time is undefined (non-positive or
        non-finite expected return).

    Examples
    --------
    >>> StressTestResult(-0.3, 4).describe_recovery()
    '4 years'
    >>> StressTestResult(-0.3, None).describe_recovery()
    'recovery time undefined'
    """
    crisis_impact: float
    recovery_years: Optional[int]

    @property
    def recovery_defined(self) -> bool:
        return self.recovery_years is not None

    def describe_recovery(self) -> str:
        if self.recovery_years is None:
            return "recovery time undefined"
        unit = "year" if self.recovery_years == 1 else "years"
        return f"{self.recovery_years} {unit}"

    def to_dict(self) -> StressTestDict:
        return StressTestDict(crisis_impact=self.crisis_impact,
                              recovery_years=self.recovery_years)


def aggregate(
    weights: Mapping[str, float],
    table: InstrumentTable = DEFAULT_TABLE,
) -> MetricsSummary:
    """
    Compute portfolio metrics for a weight vector.

    Parameters
    ----------
    weights : mapping of str to float
        Percent weights keyed by instrument symbol.
    table : InstrumentTable, default DEFAULT_TABLE
        Source of instrument statistics.

    Returns
    -------
    MetricsSummary
        Deterministic given the inputs.

    Raises
    ------
    UnknownInstrumentError
        If a symbol is not in *table*.
    ValidationError
        If a weight is negative or not finite.

    Examples
    --------
    >>> m = aggregate({"SPY": 50, "CASH": 50})
    >>> round(m.expected_return, 4), round(m.max_drawdown, 2)
    (0.055, 0.2)
    """
    expected_return = 0.0
    volatility = 0.0
    crisis_impact = 0.0
    max_drawdown = 0.0

    for symbol, weight in weights.items():
        # Resolve first so unknown symbols fail even with zero weight
        inst = table.get(symbol)
        weight = float(weight)
        if not is_finite(weight) or weight < 0:
            raise ValidationError(
                f"weight for {symbol} must be a non-negative finite number, got {weight}"
            )
        f = weight / PERCENT

        expected_return += inst.mean_return * f
        volatility += inst.volatility * f
        crisis_impact += inst.crisis_contribution * f
        if weight != 0:
            max_drawdown = max(max_drawdown, inst.max_drawdown * f)

    summary = MetricsSummary(
        expected_return=expected_return,
        volatility=volatility,
        max_drawdown=max_drawdown,
        crisis_impact=crisis_impact,
    )
    logger.debug("Aggregated metrics for %s: %s", dict(weights), summary)
    return summary


def stress_test(metrics: MetricsSummary) -> StressTestResult:
    """
    Estimate crisis impact and recovery time.

    Parameters
    ----------
    metrics : MetricsSummary
        Output of aggregate().

    Returns
    -------
    StressTestResult
        recovery_years = ceil(|crisis_impact| / expected_return), or None
        when that quotient is not a finite non-negative number.

    Examples
    --------
    >>> stress_test(MetricsSummary(0.0725, 0.1, 0.12, -0.3)).recovery_years
    5
    """
    impact = metrics.crisis_impact
    er = metrics.expected_return

    ratio = abs(impact) / er if is_finite(impact, er) and er > 0 else math.nan

    if not is_finite(ratio):
        logger.warning(
            "Recovery time undefined: expected_return=%s, crisis_impact=%s", er, impact
        )
        return StressTestResult(crisis_impact=impact, recovery_years=None)

    return StressTestResult(crisis_impact=impact, recovery_years=int(math.ceil(ratio)))
