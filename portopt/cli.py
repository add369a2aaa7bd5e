"""
Command-Line Interface for PortOpt.

Purpose
-------
Provides the presentation layer for the optimization engine: collects a
request from options or a JSON file, runs the pipeline, and renders the
suggested allocation, risk metrics, stress test and projections.

Commands
--------
- optimize: Suggest an allocation and project current vs optimized portfolios
- instruments: Show the instrument reference table
- template: Write a starter request file
- info: Show version and dependency information

Example Usage
-------------
    # Default request (1000/month, 30 years, medium risk, 60/30/10/0 mix)
    $ portopt optimize

    # Custom request with reproducible projections
    $ portopt optimize --contribution 500 --horizon 20 --risk high --seed 42

    # From a request file, exporting results and a chart
    $ portopt optimize --input request.json --output result.json --plot chart.png

    # Show version
    $ portopt --version
"""

from __future__ import annotations

import logging
import sys
import time
from pathlib import Path
from typing import Optional

import click
from pydantic import ValidationError as PydanticValidationError
from rich.console import Console
from rich.table import Table

from .config import AllocationInput, AppSettings, AssetMix
from .constants import (
    DEFAULT_CURRENT_MIX,
    DEFAULT_HORIZON_YEARS,
    DEFAULT_MONTHLY_CONTRIBUTION,
    DEFAULT_RISK_TOLERANCE,
    DEFAULT_TARGET_MULTIPLE,
    DEFAULT_TARGET_VALUE,
)
from .exceptions import PortOptError
from .utils import format_currency, format_pct

# Version
__version__ = "0.1.0"


def _validation_message(error: PydanticValidationError) -> str:
    """Flatten a Pydantic error into one line per field."""
    lines = []
    for err in error.errors():
        loc = ".".join(str(part) for part in err.get("loc", ())) or "request"
        lines.append(f"  {loc}: {err.get('msg')}")
    return "\n".join(lines)


@click.group()
@click.version_option(version=__version__, prog_name="portopt")
@click.option("--quiet", "-q", is_flag=True, help="Suppress non-essential output")
@click.option(
    "--log-level",
    type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR"], case_sensitive=False),
    default=None,
    help="Logging level (default: PORTOPT_LOG_LEVEL or WARNING)"
)
@click.pass_context
def main(ctx: click.Context, quiet: bool, log_level: Optional[str]) -> None:
    """
    PortOpt - Savings Plan Portfolio Optimizer.

    Suggests an instrument allocation for a risk tolerance and projects
    current vs optimized portfolios towards a wealth target.

    Use 'portopt COMMAND --help' for command-specific help.
    """
    try:
        settings = AppSettings()
    except PydanticValidationError as e:
        click.echo(f"Invalid settings:\n{_validation_message(e)}", err=True)
        sys.exit(1)
    level = (log_level or settings.effective_log_level).upper()
    logging.basicConfig(
        level=getattr(logging, level, logging.WARNING),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )

    ctx.ensure_object(dict)
    ctx.obj["quiet"] = quiet
    ctx.obj["console"] = Console()
    ctx.obj["settings"] = settings


def _print_allocation(console: Console, result) -> None:
    from .instruments import DEFAULT_TABLE

    table = Table(title="Optimized Allocation", show_header=True)
    table.add_column("Instrument", style="cyan")
    table.add_column("Current", justify="right")
    table.add_column("Optimized", style="green", justify="right")

    for symbol, weight in result.optimized_weights.items():
        name = DEFAULT_TABLE.get(symbol).name if symbol in DEFAULT_TABLE else symbol
        current = result.current_weights.get(symbol, 0.0)
        table.add_row(name, f"{current:.1f}%", f"{weight:.1f}%")
    console.print(table)


def _print_metrics(console: Console, result) -> None:
    table = Table(title="Risk Metrics & Stress Test", show_header=True)
    table.add_column("Metric", style="cyan")
    table.add_column("Current", justify="right")
    table.add_column("Optimized", style="green", justify="right")

    cm, om = result.current_metrics, result.optimized_metrics
    table.add_row("Expected Return", format_pct(cm.expected_return), format_pct(om.expected_return))
    table.add_row("Volatility", format_pct(cm.volatility), format_pct(om.volatility))
    table.add_row("Max Drawdown", format_pct(cm.max_drawdown), format_pct(om.max_drawdown))
    table.add_row("2008 Crisis Impact", format_pct(cm.crisis_impact), format_pct(om.crisis_impact))
    table.add_row(
        "Recovery Time",
        result.current_stress.describe_recovery(),
        result.optimized_stress.describe_recovery(),
    )
    console.print(table)


def _print_projection(console: Console, result) -> None:
    from .projection import target_reached_year

    table = Table(title=f"Projection (target {format_currency(result.target_value)})", show_header=True)
    table.add_column("Year", justify="right")
    table.add_column("Current", justify="right")
    table.add_column("Optimized", style="green", justify="right")
    table.add_column("Optimistic", justify="right")
    table.add_column("Pessimistic", justify="right")
    table.add_column("Severe Downside", justify="right")

    horizon = result.request.horizon_years
    step = max(1, horizon // 10)
    years = sorted(set(range(0, horizon + 1, step)) | {horizon})
    for year in years:
        cur = result.current_projection[year]
        opt = result.optimized_projection[year]
        table.add_row(
            str(year),
            format_currency(cur.expected_value),
            format_currency(opt.expected_value),
            format_currency(opt.optimistic_value),
            format_currency(opt.pessimistic_value),
            format_currency(opt.severe_downside_value),
        )
    console.print(table)

    for label, path in (("Current", result.current_projection),
                        ("Optimized", result.optimized_projection)):
        reached = target_reached_year(path)
        status = f"year {reached}" if reached is not None else "not reached"
        console.print(f"[bold]{label}[/bold] target: {status}")


@main.command()
@click.option(
    "--input", "-i", "input_file",
    type=click.Path(exists=True, path_type=Path),
    default=None,
    help="Request file (JSON). Overrides the request options below."
)
@click.option(
    "--contribution", "-c",
    type=float,
    default=DEFAULT_MONTHLY_CONTRIBUTION,
    show_default=True,
    help="Monthly contribution"
)
@click.option(
    "--horizon", "-T",
    type=int,
    default=DEFAULT_HORIZON_YEARS,
    show_default=True,
    help="Investment horizon in years (1-50)"
)
@click.option(
    "--target-multiple",
    type=float,
    default=None,
    help=f"Target as a multiple of annual contribution (default: {DEFAULT_TARGET_MULTIPLE:g})"
)
@click.option(
    "--target-value",
    type=float,
    default=None,
    help="Absolute target value (e.g. 1000000); selects the value target"
)
@click.option("--stocks", type=float, default=DEFAULT_CURRENT_MIX["stocks"], show_default=True,
              help="Current stocks percentage")
@click.option("--bonds", type=float, default=DEFAULT_CURRENT_MIX["bonds"], show_default=True,
              help="Current bonds percentage")
@click.option("--cash", type=float, default=DEFAULT_CURRENT_MIX["cash"], show_default=True,
              help="Current cash percentage")
@click.option("--crypto", type=float, default=DEFAULT_CURRENT_MIX["crypto"], show_default=True,
              help="Current crypto percentage")
@click.option(
    "--risk", "-r",
    type=click.Choice(["low", "medium", "high"]),
    default=DEFAULT_RISK_TOLERANCE,
    show_default=True,
    help="Risk tolerance"
)
@click.option(
    "--seed", "-s",
    type=int,
    default=None,
    help="Random seed for reproducible projections (default: PORTOPT_SEED)"
)
@click.option(
    "--delay",
    type=float,
    default=None,
    help="Seconds to show the 'Optimizing...' state (default: PORTOPT_CALCULATION_DELAY)"
)
@click.option(
    "--output", "-o",
    type=click.Path(path_type=Path),
    default=None,
    help="Write the full result to this JSON file"
)
@click.option(
    "--plot", "plot_path",
    type=click.Path(path_type=Path),
    default=None,
    help="Save a projection chart to this image file"
)
@click.pass_context
def optimize(
    ctx: click.Context,
    input_file: Optional[Path],
    contribution: float,
    horizon: int,
    target_multiple: Optional[float],
    target_value: Optional[float],
    stocks: float,
    bonds: float,
    cash: float,
    crypto: float,
    risk: str,
    seed: Optional[int],
    delay: Optional[float],
    output: Optional[Path],
    plot_path: Optional[Path],
) -> None:
    """
    Suggest an allocation and project its growth.

    Example:
        portopt optimize -c 1000 -T 30 --risk medium --seed 42
    """
    console = ctx.obj.get("console")
    quiet = ctx.obj.get("quiet", False)
    settings: AppSettings = ctx.obj["settings"]

    # Import here to avoid slow startup
    from .optimizer import optimize_portfolio
    from .serialization import load_request, save_result

    if target_multiple is not None and target_value is not None:
        click.echo("Error: use either --target-multiple or --target-value, not both", err=True)
        sys.exit(1)

    try:
        if input_file is not None:
            request = load_request(input_file)
        else:
            request = AllocationInput(
                monthly_contribution=contribution,
                horizon_years=horizon,
                target_kind="value" if target_value is not None else "multiplier",
                target_multiple=target_multiple if target_multiple is not None else DEFAULT_TARGET_MULTIPLE,
                target_value=target_value,
                current_mix=AssetMix(stocks=stocks, bonds=bonds, cash=cash, crypto=crypto),
                risk_tolerance=risk,
            )
    except PydanticValidationError as e:
        click.echo(f"Invalid request:\n{_validation_message(e)}", err=True)
        sys.exit(1)
    except PortOptError as e:
        click.echo(f"Error loading request: {e}", err=True)
        sys.exit(1)

    seed = seed if seed is not None else settings.seed
    delay = delay if delay is not None else settings.calculation_delay

    try:
        if delay > 0 and not quiet:
            with console.status("[bold blue]Optimizing...[/bold blue]"):
                time.sleep(delay)
        elif delay > 0:
            time.sleep(delay)
        result = optimize_portfolio(request, seed=seed)
    except PortOptError as e:
        click.echo(f"Error during optimization: {e}", err=True)
        sys.exit(1)

    if not quiet:
        _print_allocation(console, result)
        _print_metrics(console, result)
        _print_projection(console, result)
    else:
        final = result.optimized_projection[-1]
        click.echo(f"Expected Return: {format_pct(result.optimized_metrics.expected_return)}")
        click.echo(f"Final Value: {format_currency(final.expected_value)}")
        click.echo(f"Recovery Time: {result.optimized_stress.describe_recovery()}")

    if output:
        save_result(result, output)
        if not quiet:
            click.echo(f"Results saved to {output}")

    if plot_path:
        import matplotlib
        matplotlib.use("Agg")
        import matplotlib.pyplot as plt
        from .plotting import plot_projections

        plot_path.parent.mkdir(parents=True, exist_ok=True)
        fig, _ = plot_projections(result, save_path=str(plot_path), return_fig_ax=True)
        plt.close(fig)
        if not quiet:
            click.echo(f"Chart saved to {plot_path}")


@main.command()
@click.pass_context
def instruments(ctx: click.Context) -> None:
    """
    Show the instrument reference table.

    Statistics are static figures, not live market data.
    """
    from .instruments import DEFAULT_TABLE

    console = ctx.obj.get("console")
    quiet = ctx.obj.get("quiet", False)

    if quiet:
        click.echo(DEFAULT_TABLE.params_table().to_string())
        return

    table = Table(title="Instruments", show_header=True)
    table.add_column("Symbol", style="cyan")
    table.add_column("Name")
    table.add_column("Mean Return", justify="right")
    table.add_column("Volatility", justify="right")
    table.add_column("Max Drawdown", justify="right")
    table.add_column("2008 Crisis", justify="right")

    for inst in DEFAULT_TABLE:
        table.add_row(
            inst.symbol,
            inst.name,
            format_pct(inst.mean_return),
            format_pct(inst.volatility),
            format_pct(inst.max_drawdown),
            format_pct(inst.crisis_shock),
        )
    console.print(table)


@main.command()
@click.argument("output_file", type=click.Path(path_type=Path))
@click.option(
    "--target", "-t",
    type=click.Choice(["multiplier", "value"]),
    default="multiplier",
    help="Target kind of the template"
)
@click.pass_context
def template(ctx: click.Context, output_file: Path, target: str) -> None:
    """
    Create a starter request file.

    Example:
        portopt template request.json --target value
    """
    from .serialization import save_request

    quiet = ctx.obj.get("quiet", False)

    if target == "value":
        request = AllocationInput(target_kind="value", target_multiple=None,
                                  target_value=DEFAULT_TARGET_VALUE)
    else:
        request = AllocationInput()

    save_request(request, output_file)
    if not quiet:
        click.echo(f"Created request file: {output_file}")


@main.command()
@click.pass_context
def info(ctx: click.Context) -> None:
    """
    Display system and package information.

    Shows version numbers of the package and its dependencies.
    """
    console = ctx.obj.get("console")

    info_lines = [
        f"PortOpt Version: {__version__}",
        f"Python: {sys.version.split()[0]}",
    ]

    dependencies = ["numpy", "pandas", "pydantic", "pydantic_settings",
                    "matplotlib", "rich", "click"]

    for module in dependencies:
        try:
            mod = __import__(module)
            version = getattr(mod, "__version__", "installed")
            info_lines.append(f"{module}: {version}")
        except ImportError:
            info_lines.append(f"{module}: not installed")

    from rich.panel import Panel
    console.print(Panel("\n".join(info_lines), title="System Information"))


if __name__ == "__main__":
    main()
