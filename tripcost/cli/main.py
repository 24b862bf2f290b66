"""CLI entry point for the trip cost report tool.

Usage:
    tripcost report trip.yaml
    tripcost report trip.json --output csv --save results/trip.csv
    tripcost report trip.yaml --preset legacy --notes
    tripcost member trip.yaml m1
"""

import logging
from pathlib import Path
from typing import Optional

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.text import Text

from ..core.config import ReportConfig, parse_enum, preset_policies, reload_config
from ..core.exceptions import TripCostError
from ..core.types import PolicyPreset
from ..orchestrator import CostReportOrchestrator
from ..output.formatters import CSVFormatter, JSONFormatter, TableFormatter, format_amount
from ..output.notes import CalculationNotesFormatter
from ..sources.file_source import FileExpenseSource

# Initialize app
app = typer.Typer(
    name="tripcost",
    help="Shared trip cost allocation and reconciliation report",
    add_completion=False,
)

console = Console()


def setup_logging(verbose: bool = False) -> None:
    """Configure logging."""
    level = logging.DEBUG if verbose else logging.WARNING
    logging.basicConfig(
        level=level,
        format="%(message)s",
        handlers=[RichHandler(console=console, show_time=False, show_path=False)],
        force=True,
    )


def resolve_config(
    config: Optional[Path],
    preset: Optional[str],
    fallback_on_empty: Optional[bool],
) -> ReportConfig:
    """Load configuration and apply command-line overrides."""
    report_config = reload_config(config_path=config)
    if preset:
        report_config.policies = preset_policies(parse_enum("--preset", preset, PolicyPreset))
    if fallback_on_empty is not None:
        report_config.set_fallback_on_empty(fallback_on_empty)
    return report_config


@app.command()
def report(
    trip_file: Path = typer.Argument(..., help="Trip export (.yaml, .yml or .json)"),
    output: str = typer.Option(
        "table",
        "--output", "-o",
        help="Output format: table, json, csv",
    ),
    save: Optional[Path] = typer.Option(
        None,
        "--save", "-s",
        help="Save output to file",
    ),
    config: Optional[Path] = typer.Option(
        None,
        "--config",
        help="Path to report policy YAML file",
    ),
    preset: Optional[str] = typer.Option(
        None,
        "--preset",
        help="Policy preset: uniform, legacy",
    ),
    fallback_on_empty: Optional[bool] = typer.Option(
        None,
        "--fallback-on-empty/--no-fallback-on-empty",
        help="Split items with an empty payer list across the roster",
    ),
    notes: bool = typer.Option(
        False,
        "--notes", "-n",
        help="Show calculation notes",
    ),
    verbose: bool = typer.Option(
        False,
        "--verbose", "-v",
        help="Enable verbose logging",
    ),
) -> None:
    """
    Build the per-member cost report for a trip.

    Examples:
        tripcost report trip.yaml
        tripcost report trip.json --output json
        tripcost report trip.yaml --preset legacy --notes
    """
    setup_logging(verbose)

    output_lower = output.lower()
    if output_lower not in ("table", "json", "csv"):
        console.print(f"[red]Invalid output format: {output}[/]")
        console.print("Valid formats: table, json, csv")
        raise typer.Exit(1)

    try:
        report_config = resolve_config(config, preset, fallback_on_empty)
        orchestrator = CostReportOrchestrator(report_config)
        result = orchestrator.build_report(FileExpenseSource(trip_file))
    except TripCostError as e:
        console.print(f"[red]Error: {escape(str(e))}[/]")
        raise typer.Exit(1)

    # Format output
    if output_lower == "json":
        formatter = JSONFormatter(decimals=report_config.decimals)
    elif output_lower == "csv":
        formatter = CSVFormatter(decimals=report_config.decimals)
    else:
        formatter = TableFormatter(
            width=console.width,
            decimals=report_config.decimals,
            currency_symbol=report_config.currency_symbol,
        )

    formatted = formatter.format(result)

    # Display
    if output_lower == "table":
        console.print(Text.from_ansi(formatted), end="")
    else:
        print(formatted)

    notes_formatter = CalculationNotesFormatter(
        decimals=report_config.decimals,
        currency_symbol=report_config.currency_symbol,
    )
    if notes:
        console.print("")
        console.print(notes_formatter.format_summary(result), markup=False)

    # Save if requested
    if save:
        save.parent.mkdir(parents=True, exist_ok=True)

        if output_lower == "json":
            save_path = save.with_suffix(".json")
        elif output_lower == "csv":
            save_path = save.with_suffix(".csv")
        else:
            save_path = save.with_suffix(".txt")

        formatter.format_to_file(result, str(save_path))
        console.print(f"[green]Saved to {save_path}[/]")

        if notes:
            notes_path = save_path.with_name(f"{save_path.stem}_notes.txt")
            notes_formatter.format_to_file(result, str(notes_path))
            console.print(f"[green]Calculation notes saved to {notes_path}[/]")


@app.command()
def member(
    trip_file: Path = typer.Argument(..., help="Trip export (.yaml, .yml or .json)"),
    member_id: str = typer.Argument(..., help="Member id to break down"),
    config: Optional[Path] = typer.Option(
        None,
        "--config",
        help="Path to report policy YAML file",
    ),
    preset: Optional[str] = typer.Option(
        None,
        "--preset",
        help="Policy preset: uniform, legacy",
    ),
    verbose: bool = typer.Option(
        False,
        "--verbose", "-v",
        help="Enable verbose logging",
    ),
) -> None:
    """Show one member's share of each category and overall."""
    setup_logging(verbose)

    try:
        report_config = resolve_config(config, preset, None)
        orchestrator = CostReportOrchestrator(report_config)
        result = orchestrator.build_report(FileExpenseSource(trip_file))
        breakdown = orchestrator.member_breakdown(result, member_id)
    except TripCostError as e:
        console.print(f"[red]Error: {escape(str(e))}[/]")
        raise typer.Exit(1)

    console.print(f"[bold]{escape(result.member_label(member_id))}[/]")
    for name, amount in breakdown.items():
        value = format_amount(amount, report_config.decimals, report_config.currency_symbol)
        console.print(f"  {name.capitalize():<10} {value:>14}")


@app.command()
def version() -> None:
    """Show version information."""
    from .. import __version__
    console.print(f"tripcost v{__version__}")


def main() -> None:
    """Main entry point."""
    app()


if __name__ == "__main__":
    main()
