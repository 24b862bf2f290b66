"""Calculation notes formatter.

Explains how each row of a cost report was derived:
- Policy applied per category
- Cost left unattributed by payers
- Legacy items split across the roster
- Display-only fallbacks
"""

import logging

from ..core.models import CostReport
from .formatters import format_amount

logger = logging.getLogger(__name__)


class CalculationNotesFormatter:
    """Formats calculation notes for transparency."""

    def __init__(self, decimals: int = 2, currency_symbol: str = "$"):
        self.decimals = decimals
        self.currency_symbol = currency_symbol

    def format_summary(self, report: CostReport) -> str:
        """
        Format a summary of how the report was calculated.

        Args:
            report: CostReport with rows and notes

        Returns:
            Formatted string summary
        """
        def money(value: float) -> str:
            return format_amount(value, self.decimals, self.currency_symbol)

        lines = []
        lines.append("=" * 70)
        lines.append("CALCULATION NOTES")
        lines.append("=" * 70)
        lines.append("")
        lines.append(f"Generated: {report.generated_at.isoformat()}")
        lines.append(f"Tool Version: {report.tool_version}")
        lines.append(f"Roster: {', '.join(report.member_label(m) for m in report.roster) or '(empty)'}")
        lines.append("")

        lines.append("CATEGORIES")
        lines.append("-" * 40)
        for row in report.rows:
            lines.append(f"  {row.display_name}: {money(row.total)} across {row.item_count} item(s)")
            lines.append(f"    - Policy: {row.policy.value}")
            lines.append(f"    - Fallback on empty payers: {row.fallback_on_empty}")
            lines.append(f"    - Shown for members: {money(row.assigned)}")
            if abs(row.unassigned) > 10 ** -self.decimals / 2:
                lines.append(f"    - Unassigned: {money(row.unassigned)}")
            for note in report.notes:
                if note.category == row.category:
                    marker = "!" if note.severity == "warning" else "i"
                    lines.append(f"    [{marker}] {note.note}")
        lines.append("")

        general = [n for n in report.notes if n.category is None]
        if general:
            lines.append("GENERAL")
            lines.append("-" * 40)
            for note in general:
                lines.append(f"  [{note.severity.upper()}] {note.note}")
            lines.append("")

        lines.append("TOTALS")
        lines.append("-" * 40)
        lines.append(f"  Grand total: {money(report.grand_total)}")
        lines.append(f"  Shown for members: {money(report.overall_assigned)}")
        lines.append(f"  Unassigned: {money(report.overall_unassigned)}")
        lines.append("=" * 70)

        return "\n".join(lines)

    def format_to_file(self, report: CostReport, filepath: str) -> None:
        """Write notes to file."""
        with open(filepath, "w", encoding="utf-8") as f:
            f.write(self.format_summary(report))
