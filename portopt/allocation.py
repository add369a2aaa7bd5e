"""
Allocation rules for PortOpt.

Purpose
-------
Maps user-level information onto weight vectors over the instrument table.
Two independent, pure mappings are provided:

- map_current_mix_to_instruments:
    Spreads the coarse stocks / bonds / cash / crypto percentages over
    instruments with fixed sub-splits (stocks 40/60 SWDA/SPY, bonds 50/50
    SHY/TLT, cash and crypto one-to-one).

- recommend_allocation:
    Static lookup of a hand-authored weight vector per risk tolerance.
    There is no interpolation between tiers.

Weights are percentages (0-100). Every risk bucket sums to exactly 100;
the mapped current mix sums to whatever the input mix sums to.

Example
-------
>>> from portopt.allocation import recommend_allocation
>>> recommend_allocation("medium")
{'SWDA': 40.0, 'SPY': 30.0, 'SHY': 15.0, 'TLT': 10.0, 'CASH': 3.0, 'CRYPTO': 2.0}
"""

from __future__ import annotations

import logging
from typing import Dict, Mapping, Union

from .constants import BOND_SPLIT, STOCK_SPLIT
from .exceptions import ContractViolationError, ValidationError
from .types import WeightVector
from .utils import weights_total

logger = logging.getLogger(__name__)

__all__ = [
    "RISK_TOLERANCES",
    "RISK_ALLOCATIONS",
    "map_current_mix_to_instruments",
    "recommend_allocation",
]


RISK_TOLERANCES = ("low", "medium", "high")

RISK_ALLOCATIONS: Dict[str, Dict[str, float]] = {
    "low": {"SWDA": 30.0, "SPY": 20.0, "SHY": 30.0, "TLT": 15.0, "CASH": 5.0, "CRYPTO": 0.0},
    "medium": {"SWDA": 40.0, "SPY": 30.0, "SHY": 15.0, "TLT": 10.0, "CASH": 3.0, "CRYPTO": 2.0},
    "high": {"SWDA": 45.0, "SPY": 35.0, "SHY": 5.0, "TLT": 5.0, "CASH": 0.0, "CRYPTO": 10.0},
}


def _mix_value(mix, key: str) -> float:
    """Read *key* from a mapping or an object with attributes."""
    if isinstance(mix, Mapping):
        value = mix.get(key, 0.0)
    else:
        value = getattr(mix, key)
    value = float(value)
    if value < 0:
        raise ValidationError(f"{key} percentage must be non-negative, got {value}")
    return value


def map_current_mix_to_instruments(mix: Union[Mapping[str, float], object]) -> WeightVector:
    """
    Spread a coarse asset mix over the instrument space.

    Parameters
    ----------
    mix : AssetMix or mapping
        Percentages for ``stocks``, ``bonds``, ``cash`` and ``crypto``.
        Either a config.AssetMix (attribute access) or a plain mapping;
        missing mapping keys count as 0.

    Returns
    -------
    WeightVector
        Percent weights over SWDA, SPY, SHY, TLT, CASH, CRYPTO. The total
        equals the total of the input mix.

    Examples
    --------
    >>> map_current_mix_to_instruments({"stocks": 60, "bonds": 30, "cash": 10, "crypto": 0})
    {'SWDA': 24.0, 'SPY': 36.0, 'SHY': 15.0, 'TLT': 15.0, 'CASH': 10.0, 'CRYPTO': 0.0}
    """
    stocks = _mix_value(mix, "stocks")
    bonds = _mix_value(mix, "bonds")

    weights: WeightVector = {}
    for symbol, share in STOCK_SPLIT.items():
        weights[symbol] = stocks * share
    for symbol, share in BOND_SPLIT.items():
        weights[symbol] = bonds * share
    weights["CASH"] = _mix_value(mix, "cash")
    weights["CRYPTO"] = _mix_value(mix, "crypto")

    logger.debug("Mapped current mix to instruments (total %.2f%%): %s",
                 weights_total(weights), weights)
    return weights


def recommend_allocation(risk_tolerance: str) -> WeightVector:
    """
    Return the target weight vector for a risk tolerance.

    Parameters
    ----------
    risk_tolerance : {"low", "medium", "high"}
        Risk bucket. Input validation rejects anything else upstream.

    Returns
    -------
    WeightVector
        A fresh copy of the bucket's weights (sums to 100).

    Raises
    ------
    ContractViolationError
        If *risk_tolerance* is not one of the known buckets.

    Examples
    --------
    >>> recommend_allocation("low")["SHY"]
    30.0
    """
    try:
        bucket = RISK_ALLOCATIONS[risk_tolerance]
    except (KeyError, TypeError):
        raise ContractViolationError(
            f"Unknown risk tolerance {risk_tolerance!r}. "
            f"Expected one of: {', '.join(RISK_TOLERANCES)}."
        ) from None
    return dict(bucket)
