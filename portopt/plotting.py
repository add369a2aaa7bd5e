"""
Plotting utilities for PortOpt projections.

Purpose
-------
Renders the two projected paths of an OptimizationResult (current and
optimized allocation) side by side. Each panel shows the expected value,
the optimistic / pessimistic / severe-downside bands and the flat target.

The engine never imports this module; it is one of the presentation layers
(the CLI's --plot option uses it).
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Optional, Sequence

import matplotlib.pyplot as plt
from matplotlib.ticker import FuncFormatter

from .constants import (
    BAND_COLORS,
    DEFAULT_ALPHA_BANDS,
    DEFAULT_FIGSIZE_WIDE,
    DEFAULT_LINEWIDTH,
    DEFAULT_LINEWIDTH_THICK,
)
from .utils import format_currency, format_pct, millions_formatter

if TYPE_CHECKING:
    from .optimizer import OptimizationResult
    from .projection import ProjectionPoint

__all__ = ["plot_projections"]


def _plot_path(ax, points: Sequence[ProjectionPoint], title: str, expected_return: float) -> None:
    years = [p.year for p in points]
    expected = [p.expected_value for p in points]
    optimistic = [p.optimistic_value for p in points]
    pessimistic = [p.pessimistic_value for p in points]
    severe = [p.severe_downside_value for p in points]
    target = [p.target_value for p in points]

    ax.fill_between(years, pessimistic, optimistic,
                    color=BAND_COLORS["expected"], alpha=DEFAULT_ALPHA_BANDS,
                    label='_nolegend_')
    ax.plot(years, expected, color=BAND_COLORS["expected"],
            linewidth=DEFAULT_LINEWIDTH_THICK, label="Portfolio Value")
    ax.plot(years, optimistic, color=BAND_COLORS["optimistic"],
            linewidth=DEFAULT_LINEWIDTH, linestyle='--', label="Optimistic")
    ax.plot(years, pessimistic, color=BAND_COLORS["pessimistic"],
            linewidth=DEFAULT_LINEWIDTH, linestyle='--', label="Pessimistic")
    ax.plot(years, severe, color=BAND_COLORS["severe"],
            linewidth=DEFAULT_LINEWIDTH, linestyle=':', label="Severe Downside")
    ax.plot(years, target, color=BAND_COLORS["target"],
            linewidth=DEFAULT_LINEWIDTH_THICK, label="Target Value")

    ax.set_xlabel("Year")
    ax.set_ylabel("Value")
    ax.set_title(f"{title} (μ={format_pct(expected_return)})")
    ax.yaxis.set_major_formatter(FuncFormatter(millions_formatter))
    ax.legend(loc='upper left', fontsize=8)
    ax.grid(True, alpha=0.3)

    final = points[-1]
    ax.text(
        0.98, 0.02,
        f"Year {final.year}: {format_currency(final.expected_value)}",
        transform=ax.transAxes,
        fontsize=9,
        ha='right',
        va='bottom',
        bbox=dict(boxstyle='round', facecolor='white', alpha=0.7)
    )


def plot_projections(
    result: OptimizationResult,
    figsize: tuple = DEFAULT_FIGSIZE_WIDE,
    title: Optional[str] = "Projected Portfolio Value",
    save_path: Optional[str] = None,
    return_fig_ax: bool = False,
):
    """
    Plot current vs optimized projections.

    Parameters
    ----------
    result : OptimizationResult
        Output of optimize_portfolio().
    figsize : tuple, default (14, 6)
        Figure size in inches.
    title : str, optional
        Figure title.
    save_path : str, optional
        Path to save the figure (PNG/PDF/SVG by extension).
    return_fig_ax : bool, default False
        If True, returns (fig, {"current": ax, "optimized": ax}).

    Returns
    -------
    None or (fig, axes_dict)
        The figure stays open either way so it can be shown with plt.show();
        callers that only save it should close it.
    """
    fig, (ax_current, ax_optimized) = plt.subplots(1, 2, figsize=figsize, sharey=True)

    _plot_path(ax_current, result.current_projection, "Current Allocation",
               result.current_metrics.expected_return)
    _plot_path(ax_optimized, result.optimized_projection, "Optimized Allocation",
               result.optimized_metrics.expected_return)

    if title:
        fig.suptitle(title, fontsize=14, fontweight='bold')

    request = result.request
    param_text = (f"contribution={format_currency(request.monthly_contribution)}/month | "
                  f"horizon={request.horizon_years}y | risk={request.risk_tolerance}")
    fig.text(0.99, 0.01, param_text, ha='right', va='bottom', fontsize=8, alpha=0.7)

    if save_path:
        fig.savefig(save_path, bbox_inches='tight', dpi=150)

    if return_fig_ax:
        return fig, {"current": ax_current, "optimized": ax_optimized}
