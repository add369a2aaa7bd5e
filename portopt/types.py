"""
Type definitions for PortOpt.

Purpose
-------
Provides type aliases and TypedDict definitions for the dict-shaped records
that flow between the engine, the serializer and the CLI. Using TypedDicts
documents the expected keys of exported payloads.

Usage
-----
>>> from portopt.types import WeightVector, MetricsDict
>>>
>>> weights: WeightVector = {"SWDA": 40.0, "SPY": 60.0}
>>> metrics: MetricsDict = summary.to_dict()

Type Definitions
----------------
WeightVector
    Instrument symbol -> percentage weight (0-100).

MetricsDict
    Exported MetricsSummary: {"expected_return", "volatility", ...}

ProjectionPointDict
    One projected year: {"year", "expected_value", ...}

StressTestDict
    Exported StressTestResult: {"crisis_impact", "recovery_years"}

OptimizationResultDict
    Full exported response record.
"""

from typing import Dict, List, Optional
from typing_extensions import TypedDict

__all__ = [
    "WeightVector",
    "MetricsDict",
    "ProjectionPointDict",
    "StressTestDict",
    "OptimizationResultDict",
]


WeightVector = Dict[str, float]
"""Mapping from instrument symbol to percentage weight (0-100)."""


class MetricsDict(TypedDict):
    """
    Portfolio metrics in decimal fractions.

    Attributes
    ----------
    expected_return : float
        Weighted mean of instrument mean returns (e.g. 0.0725).
    volatility : float
        Weighted sum of standalone instrument volatilities.
    max_drawdown : float
        Largest single weighted-drawdown contribution.
    crisis_impact : float
        Weighted crisis-period return (negative means a loss).

    Examples
    --------
    >>> metrics: MetricsDict = aggregate(weights).to_dict()
    >>> f"{metrics['expected_return']:.2%}"
    '7.25%'
    """

    expected_return: float
    volatility: float
    max_drawdown: float
    crisis_impact: float


class ProjectionPointDict(TypedDict):
    """
    One year of a projected portfolio path.

    Attributes
    ----------
    year : int
        Year offset (0 is the seed year with zero value).
    expected_value : int
        Realized path value, rounded.
    optimistic_value : int
        Expected value shifted up by half a volatility.
    pessimistic_value : int
        Expected value shifted down by 1.5 volatilities.
    severe_downside_value : int
        Expected value shifted down by 2.5 volatilities.
    target_value : float
        Flat target overlay.
    """

    year: int
    expected_value: int
    optimistic_value: int
    pessimistic_value: int
    severe_downside_value: int
    target_value: float


class StressTestDict(TypedDict):
    """
    Crisis stress test outcome.

    Attributes
    ----------
    crisis_impact : float
        Weighted crisis-period return.
    recovery_years : int or None
        Years to recover the crisis loss at the expected return.
        None when the recovery time is undefined.
    """

    crisis_impact: float
    recovery_years: Optional[int]


class OptimizationResultDict(TypedDict):
    """Exported response record produced by OptimizationResult.to_dict()."""

    schema_version: str
    request: dict
    target_value: float
    current_weights: WeightVector
    optimized_weights: WeightVector
    current_metrics: MetricsDict
    optimized_metrics: MetricsDict
    current_stress: StressTestDict
    optimized_stress: StressTestDict
    current_projection: List[ProjectionPointDict]
    optimized_projection: List[ProjectionPointDict]
