"""Output formatters for cost reports.

Provides multiple output formats:
- JSON: Machine-readable, complete report
- CSV: Spreadsheet-compatible matrix
- Table: Human-readable CLI output

Two-decimal display rounding happens here; report values stay unrounded.
"""

import csv
import io
import json
import logging
from abc import ABC, abstractmethod
from typing import Any

from rich.console import Console
from rich.table import Table

from ..core.models import CostReport

logger = logging.getLogger(__name__)


def format_amount(value: float, decimals: int = 2, currency_symbol: str = "") -> str:
    """Format an amount for display, without a negative zero."""
    rounded = round(value, decimals)
    if rounded == 0:
        rounded = 0.0
    sign = "-" if rounded < 0 else ""
    return f"{sign}{currency_symbol}{abs(rounded):,.{decimals}f}"


def report_matrix(report: CostReport) -> tuple[list[str], list[list[Any]]]:
    """
    Return the report as a header plus rows of raw values.

    Rows are the categories followed by Overall; columns are the category
    name, one column per roster member and the Total column.
    """
    header = ["Category"] + [report.member_label(m) for m in report.roster] + ["Total"]
    rows: list[list[Any]] = []
    for row in report.rows:
        rows.append(
            [row.display_name] + [row.cell(m) for m in report.roster] + [row.total]
        )
    rows.append(
        ["Overall"] + [report.overall.get(m, 0.0) for m in report.roster] + [report.grand_total]
    )
    return header, rows


class ReportFormatter(ABC):
    """Abstract base class for report formatters."""

    @abstractmethod
    def format(self, report: CostReport) -> str:
        """Format the report as a string."""
        pass

    @abstractmethod
    def format_to_file(self, report: CostReport, filepath: str) -> None:
        """Write formatted report to a file."""
        pass


class JSONFormatter(ReportFormatter):
    """Formats reports as JSON."""

    def __init__(self, indent: int = 2, decimals: int | None = None):
        """
        Initialize JSON formatter.

        Args:
            indent: JSON indentation level
            decimals: Round amounts to this many places (None keeps raw values)
        """
        self.indent = indent
        self.decimals = decimals

    def _round(self, data: Any) -> Any:
        """Recursively round floats."""
        if isinstance(data, float):
            return round(data, self.decimals) + 0.0
        if isinstance(data, dict):
            return {k: self._round(v) for k, v in data.items()}
        if isinstance(data, list):
            return [self._round(v) for v in data]
        return data

    def format(self, report: CostReport) -> str:
        """Format report as JSON string."""
        data = report.model_dump(mode="json")
        data["overall_unassigned"] = report.overall_unassigned

        if self.decimals is not None:
            data = self._round(data)

        return json.dumps(data, indent=self.indent)

    def format_to_file(self, report: CostReport, filepath: str) -> None:
        """Write JSON to file."""
        with open(filepath, "w", encoding="utf-8") as f:
            f.write(self.format(report))


class CSVFormatter(ReportFormatter):
    """Formats the report matrix as CSV."""

    def __init__(self, delimiter: str = ",", decimals: int = 2, include_unassigned: bool = True):
        """
        Initialize CSV formatter.

        Args:
            delimiter: CSV delimiter
            decimals: Decimal places for amounts
            include_unassigned: Add an Unassigned column
        """
        self.delimiter = delimiter
        self.decimals = decimals
        self.include_unassigned = include_unassigned

    def _number(self, value: float) -> str:
        # Adding 0.0 turns -0.0 into 0.0
        return f"{round(value, self.decimals) + 0.0:.{self.decimals}f}"

    def format(self, report: CostReport) -> str:
        """Format report as CSV string."""
        output = io.StringIO()
        writer = csv.writer(output, delimiter=self.delimiter)

        header, rows = report_matrix(report)
        if self.include_unassigned:
            header.append("Unassigned")
        writer.writerow(header)

        unassigned = [row.unassigned for row in report.rows] + [report.overall_unassigned]
        for values, missing in zip(rows, unassigned):
            line = [values[0]] + [self._number(v) for v in values[1:]]
            if self.include_unassigned:
                line.append(self._number(missing))
            writer.writerow(line)

        return output.getvalue()

    def format_to_file(self, report: CostReport, filepath: str) -> None:
        """Write CSV to file."""
        with open(filepath, "w", encoding="utf-8", newline="") as f:
            f.write(self.format(report))


class TableFormatter(ReportFormatter):
    """Formats reports as human-readable tables for CLI output."""

    def __init__(
        self,
        use_rich: bool = True,
        width: int = 100,
        decimals: int = 2,
        currency_symbol: str = "$",
    ):
        """
        Initialize table formatter.

        Args:
            use_rich: Use rich for colored output
            width: Maximum table width
            decimals: Decimal places for amounts
            currency_symbol: Prefix for amounts
        """
        self.use_rich = use_rich
        self.width = width
        self.decimals = decimals
        self.currency_symbol = currency_symbol

    def _money(self, value: float) -> str:
        return format_amount(value, self.decimals, self.currency_symbol)

    def format(self, report: CostReport) -> str:
        """Format report as readable tables."""
        if self.use_rich:
            return self._format_rich(report)
        return self._format_plain(report)

    def _format_plain(self, report: CostReport) -> str:
        """Plain text formatting without ANSI codes."""
        header, rows = report_matrix(report)
        cells = [header] + [
            [values[0]] + [self._money(v) for v in values[1:]] for values in rows
        ]
        widths = [max(len(str(line[i])) for line in cells) for i in range(len(header))]

        def render(line: list[Any]) -> str:
            first = f"{line[0]:<{widths[0]}}"
            rest = [f"{str(v):>{w}}" for v, w in zip(line[1:], widths[1:])]
            return "  ".join([first] + rest)

        sep = "=" * max(60, sum(widths) + 2 * (len(widths) - 1))
        lines = [sep, f"  COST REPORT: {report.trip_name or 'Trip'}", sep, ""]
        lines.append(render(cells[0]))
        lines.append("-" * len(sep))
        for line in cells[1:-1]:
            lines.append(render(line))
        lines.append("-" * len(sep))
        lines.append(render(cells[-1]))
        lines.append("")

        if abs(report.overall_unassigned) > 0.005:
            lines.append(f"  Unassigned: {self._money(report.overall_unassigned)}")
        if not report.roster:
            lines.append("  No roster members - all cost is unassigned")

        lines.append(sep)
        lines.append(f"  Generated: {report.generated_at.strftime('%Y-%m-%d %H:%M UTC')}")
        lines.append(sep)
        return "\n".join(lines)

    def _format_rich(self, report: CostReport) -> str:
        """Rich library formatting with colors."""
        output = io.StringIO()
        console = Console(file=output, force_terminal=True, width=self.width)

        header, rows = report_matrix(report)
        table = Table(title=f"Cost Report: {report.trip_name or 'Trip'}")
        table.add_column(header[0], style="cyan")
        for name in header[1:-1]:
            table.add_column(name, justify="right", style="green")
        table.add_column(header[-1], justify="right", style="bold")

        category_rows = rows[:-1]
        for index, values in enumerate(category_rows):
            table.add_row(
                values[0],
                *[self._money(v) for v in values[1:]],
                end_section=index == len(category_rows) - 1,
            )
        overall = rows[-1]
        table.add_row(f"[bold]{overall[0]}[/]", *[f"[bold]{self._money(v)}[/]" for v in overall[1:]])

        console.print(table)

        if abs(report.overall_unassigned) > 0.005:
            console.print(f"[yellow]Unassigned: {self._money(report.overall_unassigned)}[/]")
        if not report.roster:
            console.print("[yellow]No roster members - all cost is unassigned[/]")

        return output.getvalue()

    def format_to_file(self, report: CostReport, filepath: str) -> None:
        """Write formatted output to file."""
        # For file output, use plain format (no ANSI codes)
        old_rich = self.use_rich
        self.use_rich = False
        content = self.format(report)
        self.use_rich = old_rich

        with open(filepath, "w", encoding="utf-8") as f:
            f.write(content)
