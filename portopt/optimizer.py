"""
Optimization pipeline for PortOpt.

Connects the allocator, the metrics aggregator, the stress test and the
projector into one request → result call:

    AllocationInput
      ├─ map_current_mix_to_instruments ─┐
      └─ recommend_allocation ───────────┤
                                         ├─ aggregate ─ stress_test
                                         └─ project (current, then optimized)
      → OptimizationResult

The whole pipeline is synchronous and runs to completion. Both projections
draw from one generator, current first, so a seed reproduces the pair.

Typical usage
-------------
>>> from portopt.config import AllocationInput
>>> from portopt.optimizer import optimize_portfolio
>>> result = optimize_portfolio(AllocationInput(), seed=42)
>>> result.target_value
120000.0
>>> result.optimized_weights["SWDA"]
40.0
>>> print(result.summary_table())
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import List, Optional

import numpy as np
import pandas as pd

from .allocation import map_current_mix_to_instruments, recommend_allocation
from .config import AllocationInput
from .instruments import DEFAULT_TABLE, InstrumentTable
from .metrics import MetricsSummary, StressTestResult, aggregate, stress_test
from .projection import ProjectionPoint, project
from .types import OptimizationResultDict, WeightVector

logger = logging.getLogger(__name__)

__all__ = [
    "OptimizationResult",
    "optimize_portfolio",
]


@dataclass(frozen=True)
class OptimizationResult:
    """
    Response record handed to the presentation layer.

    Attributes
    ----------
    request : AllocationInput
        The validated request.
    target_value : float
        Resolved absolute target.
    current_weights, optimized_weights : WeightVector
        Instrument weights derived from the current mix and risk tolerance.
    current_metrics, optimized_metrics : MetricsSummary
    current_stress, optimized_stress : StressTestResult
    current_projection, optimized_projection : List[ProjectionPoint]
        horizon_years + 1 points each.
    """
    request: AllocationInput
    target_value: float
    current_weights: WeightVector
    optimized_weights: WeightVector
    current_metrics: MetricsSummary
    optimized_metrics: MetricsSummary
    current_stress: StressTestResult
    optimized_stress: StressTestResult
    current_projection: List[ProjectionPoint]
    optimized_projection: List[ProjectionPoint]

    def summary_table(self) -> pd.DataFrame:
        """
        Side-by-side comparison of current and optimized portfolios.

        Returns
        -------
        pd.DataFrame
            Rows: Expected Return, Volatility, Max Drawdown, Crisis Impact,
            Recovery Years, Final Value. Columns: Current, Optimized.
            Undefined recovery times are NaN.
        """
        def column(metrics, stress, path):
            return {
                "Expected Return": metrics.expected_return,
                "Volatility": metrics.volatility,
                "Max Drawdown": metrics.max_drawdown,
                "Crisis Impact": metrics.crisis_impact,
                "Recovery Years": np.nan if stress.recovery_years is None else stress.recovery_years,
                "Final Value": path[-1].expected_value,
            }

        return pd.DataFrame({
            "Current": column(self.current_metrics, self.current_stress, self.current_projection),
            "Optimized": column(self.optimized_metrics, self.optimized_stress, self.optimized_projection),
        })

    def to_dict(self) -> OptimizationResultDict:
        """Plain JSON-compatible representation (see serialization.result_to_dict)."""
        from .serialization import result_to_dict

        return result_to_dict(self)


def optimize_portfolio(
    request: AllocationInput,
    table: InstrumentTable = DEFAULT_TABLE,
    *,
    rng: Optional[np.random.Generator] = None,
    seed: Optional[int] = None,
) -> OptimizationResult:
    """
    Run the full allocation pipeline for one request.

    Parameters
    ----------
    request : AllocationInput
        Validated user input.
    table : InstrumentTable, default DEFAULT_TABLE
        Instrument statistics.
    rng : np.random.Generator, optional
        Uniform source shared by both projections.
    seed : int, optional
        Seed for a fresh generator when *rng* is None.

    Returns
    -------
    OptimizationResult

    Raises
    ------
    ContractViolationError
        Unknown risk tolerance or target kind (bypassed validation).
    UnknownInstrumentError
        Weight vector symbol missing from *table*.
    """
    if rng is None:
        rng = np.random.default_rng(seed)

    target_value = request.resolved_target
    logger.info(
        "Optimizing: contribution=%s/month, horizon=%d years, risk=%s, target=%s",
        request.monthly_contribution, request.horizon_years,
        request.risk_tolerance, target_value,
    )

    current_weights = map_current_mix_to_instruments(request.current_mix)
    optimized_weights = recommend_allocation(request.risk_tolerance)

    current_metrics = aggregate(current_weights, table)
    optimized_metrics = aggregate(optimized_weights, table)

    current_projection = project(
        current_metrics, request.horizon_years, request.monthly_contribution,
        target_value, rng=rng,
    )
    optimized_projection = project(
        optimized_metrics, request.horizon_years, request.monthly_contribution,
        target_value, rng=rng,
    )

    result = OptimizationResult(
        request=request,
        target_value=target_value,
        current_weights=current_weights,
        optimized_weights=optimized_weights,
        current_metrics=current_metrics,
        optimized_metrics=optimized_metrics,
        current_stress=stress_test(current_metrics),
        optimized_stress=stress_test(optimized_metrics),
        current_projection=current_projection,
        optimized_projection=optimized_projection,
    )
    logger.info(
        "Optimization done: expected return %.4f -> %.4f",
        current_metrics.expected_return, optimized_metrics.expected_return,
    )
    return result
