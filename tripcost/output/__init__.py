"""Output formatting module."""

from .formatters import (
    ReportFormatter,
    JSONFormatter,
    CSVFormatter,
    TableFormatter,
    format_amount,
    report_matrix,
)
from .notes import CalculationNotesFormatter

__all__ = [
    "ReportFormatter",
    "JSONFormatter",
    "CSVFormatter",
    "TableFormatter",
    "CalculationNotesFormatter",
    "format_amount",
    "report_matrix",
]
