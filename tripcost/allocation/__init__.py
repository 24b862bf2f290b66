"""Allocation module.

Splits item costs across payers, reconciles category totals and builds the
combined cost report matrix.
"""

from .allocator import allocate, allocate_items, category_total, effective_payers
from .reconciler import reconcile
from .aggregator import CostReportAggregator, display_cells

__all__ = [
    "allocate",
    "allocate_items",
    "category_total",
    "effective_payers",
    "reconcile",
    "CostReportAggregator",
    "display_cells",
]
