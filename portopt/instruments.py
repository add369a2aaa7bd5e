"""
Instrument reference data for PortOpt.

Purpose
-------
Defines the fixed table of tradable asset proxies (index funds, cash and a
crypto basket) with their historical statistics. The table is the leaf of
the engine: the allocator produces weights over its symbols, and the metrics
aggregator reads its statistics.

Key components
--------------
- Instrument:
    Immutable record of one instrument's statistics (annual historical
    returns, volatility, max drawdown, 2008 crisis shock).

- InstrumentTable:
    Read-only symbol lookup. Unknown symbols raise UnknownInstrumentError.

- DEFAULT_TABLE:
    The six built-in instruments. The figures are static constants standing
    in for a live market-data feed.

Example
-------
>>> from portopt.instruments import DEFAULT_TABLE
>>> DEFAULT_TABLE.get("SPY").mean_return
0.1
>>> print(DEFAULT_TABLE.params_table())
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import Iterable, Iterator, List, Optional, Tuple

import numpy as np
import pandas as pd

from .exceptions import UnknownInstrumentError, ValidationError

__all__ = [
    "Instrument",
    "InstrumentTable",
    "DEFAULT_INSTRUMENTS",
    "DEFAULT_TABLE",
]


# ---------------------------------------------------------------------------
# Instrument (Metadata Container)
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class Instrument:
    """
    Historical statistics for a single instrument.

    Parameters
    ----------
    symbol : str
        Ticker-like identifier (e.g., "SWDA", "SPY").
    name : str
        Display name (e.g., "SWDA - World Stocks").
    historical_returns : tuple of float
        Annual arithmetic returns as decimal fractions, oldest first.
    volatility : float
        Annual volatility as a decimal fraction (non-negative).
    max_drawdown : float
        Worst historical peak-to-trough loss as a positive fraction in [0, 1].
    crisis_shock : float, optional
        Return during the 2008 financial crisis. None when the instrument
        did not exist or its behaviour is unknown; counted as zero.

    Properties
    ----------
    mean_return : float
        Arithmetic mean of historical_returns.

    Examples
    --------
    >>> shy = Instrument("SHY", "SHY - Short-Term Bonds",
    ...                  (0.02, 0.03, 0.02, 0.02, 0.03), 0.03, 0.05, -0.02)
    >>> shy.mean_return
    0.024
    >>> print(shy)
    Instrument('SHY': μ=2.4%, σ=3.0%, maxDD=5.0%, crisis=-2.0%)
    """
    symbol: str
    name: str
    historical_returns: Tuple[float, ...]
    volatility: float
    max_drawdown: float
    crisis_shock: Optional[float] = None

    def __post_init__(self):
        if not self.symbol:
            raise ValidationError("symbol cannot be empty")
        # Accept any sequence but store a tuple so the record stays hashable
        object.__setattr__(self, "historical_returns", tuple(float(r) for r in self.historical_returns))
        if not self.historical_returns:
            raise ValidationError(f"{self.symbol}: historical_returns cannot be empty")
        if self.volatility < 0:
            raise ValidationError(
                f"{self.symbol}: volatility must be non-negative, got {self.volatility}"
            )
        if not 0.0 <= self.max_drawdown <= 1.0:
            raise ValidationError(
                f"{self.symbol}: max_drawdown must be in [0, 1], got {self.max_drawdown}"
            )

    @property
    def mean_return(self) -> float:
        """Arithmetic mean of the historical annual returns."""
        return float(np.mean(self.historical_returns))

    @property
    def crisis_contribution(self) -> float:
        """Crisis shock with an unknown value counted as zero."""
        return 0.0 if self.crisis_shock is None else float(self.crisis_shock)

    def __str__(self) -> str:
        crisis = "n/a" if self.crisis_shock is None else f"{self.crisis_shock:.1%}"
        return (f"Instrument('{self.symbol}': μ={self.mean_return:.1%}, "
                f"σ={self.volatility:.1%}, maxDD={self.max_drawdown:.1%}, "
                f"crisis={crisis})")


# ---------------------------------------------------------------------------
# InstrumentTable (Read-only lookup)
# ---------------------------------------------------------------------------

class InstrumentTable:
    """
    Read-only lookup from symbol to Instrument.

    Parameters
    ----------
    instruments : iterable of Instrument
        Instruments to index. Symbols must be unique.

    Methods
    -------
    get(symbol) -> Instrument
        Lookup; raises UnknownInstrumentError for unknown symbols.
    params_table() -> pd.DataFrame
        Summary of statistics per instrument.

    Examples
    --------
    >>> table = InstrumentTable(DEFAULT_INSTRUMENTS)
    >>> "SPY" in table
    True
    >>> table.symbols
    ['SWDA', 'SPY', 'SHY', 'TLT', 'CASH', 'CRYPTO']
    """

    def __init__(self, instruments: Iterable[Instrument]):
        self._by_symbol = {}
        for inst in instruments:
            if inst.symbol in self._by_symbol:
                raise ValidationError(f"duplicate instrument symbol {inst.symbol!r}")
            self._by_symbol[inst.symbol] = inst
        if not self._by_symbol:
            raise ValidationError("instrument table cannot be empty")

    def get(self, symbol: str) -> Instrument:
        """Return the instrument for *symbol* or raise UnknownInstrumentError."""
        try:
            return self._by_symbol[symbol]
        except KeyError:
            raise UnknownInstrumentError(symbol, known=self.symbols) from None

    @property
    def symbols(self) -> List[str]:
        """Symbols in table order."""
        return list(self._by_symbol)

    def __contains__(self, symbol: object) -> bool:
        return symbol in self._by_symbol

    def __iter__(self) -> Iterator[Instrument]:
        return iter(self._by_symbol.values())

    def __len__(self) -> int:
        return len(self._by_symbol)

    def params_table(self) -> pd.DataFrame:
        """
        Summary table of instrument statistics.

        Returns
        -------
        pd.DataFrame
            Indexed by symbol with columns: Name, Mean Return, Volatility,
            Max Drawdown, Crisis 2008 (NaN when unknown).

        Examples
        --------
        >>> DEFAULT_TABLE.params_table().loc["SPY", "Mean Return"]
        0.1
        """
        rows = []
        for inst in self:
            rows.append({
                "Symbol": inst.symbol,
                "Name": inst.name,
                "Mean Return": inst.mean_return,
                "Volatility": inst.volatility,
                "Max Drawdown": inst.max_drawdown,
                "Crisis 2008": np.nan if inst.crisis_shock is None else inst.crisis_shock,
            })
        return pd.DataFrame(rows).set_index("Symbol")

    def __repr__(self) -> str:
        return f"InstrumentTable(n={len(self)}, symbols={self.symbols})"


# ---------------------------------------------------------------------------
# Built-in instruments
# ---------------------------------------------------------------------------

DEFAULT_INSTRUMENTS: Tuple[Instrument, ...] = (
    Instrument("SWDA", "SWDA - World Stocks",
               (0.08, 0.09, 0.07, 0.10, 0.06), volatility=0.15, max_drawdown=0.35, crisis_shock=-0.45),
    Instrument("SPY", "SPY - US Stocks",
               (0.10, 0.12, 0.09, 0.11, 0.08), volatility=0.18, max_drawdown=0.40, crisis_shock=-0.50),
    Instrument("SHY", "SHY - Short-Term Bonds",
               (0.02, 0.03, 0.02, 0.02, 0.03), volatility=0.03, max_drawdown=0.05, crisis_shock=-0.02),
    Instrument("TLT", "TLT - Long-Term Bonds",
               (0.04, 0.05, 0.03, 0.04, 0.05), volatility=0.10, max_drawdown=0.15, crisis_shock=0.20),
    Instrument("CASH", "Cash",
               (0.01, 0.01, 0.01, 0.01, 0.01), volatility=0.01, max_drawdown=0.00, crisis_shock=0.00),
    Instrument("CRYPTO", "Cryptocurrency",
               (0.25, -0.15, 0.40, -0.20, 0.30), volatility=0.60, max_drawdown=0.70, crisis_shock=None),
)

DEFAULT_TABLE = InstrumentTable(DEFAULT_INSTRUMENTS)
