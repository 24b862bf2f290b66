"""Cost report aggregator - builds the category x member matrix.

Each category is allocated independently, then displayed according to its
reconciliation policy:

- reconcile: cells are forced to sum to the category total
- allocated: cells are the allocator output, unattributed cost stays visible
- display_fallback: a zero cell shows an even split of the category total
  (display only, the allocated totals are not changed)

The Overall row is the elementwise sum of the displayed category cells and
the grand total is the sum of the raw category totals.
"""

import logging
from collections.abc import Mapping, Sequence

from ..core.config import CategoryPolicy
from ..core.models import CalculationNote, CategoryRow, CostReport, ExpenseItem
from ..core.numeric import EPSILON, coerce_cost
from ..core.types import ExpenseCategory, MemberId, ReconciliationPolicy
from .allocator import allocate_items, category_total, effective_payers
from .reconciler import reconcile

logger = logging.getLogger(__name__)


def display_cells(
    policy: ReconciliationPolicy,
    allocated: Mapping[MemberId, float],
    total: float,
    roster_ids: Sequence[MemberId],
) -> dict[MemberId, float]:
    """
    Derive the displayed cells for one category.

    Args:
        policy: Reconciliation policy for the category
        allocated: Allocator output keyed by roster id
        total: Raw category total
        roster_ids: Current non-guest member ids

    Returns:
        Fresh mapping keyed by ``roster_ids``
    """
    if policy == ReconciliationPolicy.RECONCILE:
        return reconcile(total, allocated, roster_ids)

    if policy == ReconciliationPolicy.DISPLAY_FALLBACK:
        even_split = total / len(roster_ids) if roster_ids else 0.0
        cells = {}
        for member_id in roster_ids:
            value = allocated.get(member_id, 0.0)
            cells[member_id] = value if value > 0 else even_split
        return cells

    return {member_id: allocated.get(member_id, 0.0) for member_id in roster_ids}


class CostReportAggregator:
    """Builds cost report rows and the combined report."""

    def __init__(
        self,
        policies: Mapping[ExpenseCategory, CategoryPolicy] | None = None,
    ):
        """
        Initialize the aggregator.

        Args:
            policies: Per-category policies. Categories without an entry use
                the default policy (reconcile, no fallback on empty).
        """
        self.policies = dict(policies or {})

    def policy_for(self, category: ExpenseCategory) -> CategoryPolicy:
        return self.policies.get(category, CategoryPolicy())

    def build_row(
        self,
        category: ExpenseCategory,
        items: Sequence[ExpenseItem],
        roster_ids: Sequence[MemberId],
    ) -> tuple[CategoryRow, list[CalculationNote]]:
        """
        Allocate and display one category.

        Args:
            category: Category being built
            items: Normalized items of that category
            roster_ids: Current non-guest member ids

        Returns:
            Tuple of (row, calculation notes)
        """
        policy = self.policy_for(category)

        total = category_total(items, lambda item: item.cost)
        allocated = allocate_items(items, roster_ids, policy.fallback_on_empty)
        cells = display_cells(policy.reconciliation, allocated, total, roster_ids)
        assigned = sum(cells.values(), 0.0)

        row = CategoryRow(
            category=category,
            policy=policy.reconciliation,
            fallback_on_empty=policy.fallback_on_empty,
            total=total,
            cells=cells,
            assigned=assigned,
            unassigned=total - assigned,
            item_count=len(items),
        )
        notes = self._notes_for(row, items, allocated, roster_ids)

        logger.debug(
            f"{category.value}: total={total:.2f} assigned={assigned:.2f} "
            f"policy={policy.reconciliation.value}"
        )
        return row, notes

    def _notes_for(
        self,
        row: CategoryRow,
        items: Sequence[ExpenseItem],
        allocated: Mapping[MemberId, float],
        roster_ids: Sequence[MemberId],
    ) -> list[CalculationNote]:
        """Describe unattributed cost and fallbacks applied to a row."""
        notes = []
        category = row.category

        if not roster_ids:
            if row.total:
                notes.append(CalculationNote(
                    category=category,
                    note=f"No roster members; {row.total:.2f} reported unassigned",
                    severity="warning",
                ))
            return notes

        legacy = [item for item in items if item.is_legacy and coerce_cost(item.cost)]
        if legacy:
            notes.append(CalculationNote(
                category=category,
                note=f"{len(legacy)} item(s) without payer data split evenly across the roster",
            ))

        unpaid = 0.0
        attributable = 0.0
        for item in items:
            if effective_payers(item.payers, roster_ids, row.fallback_on_empty):
                attributable += coerce_cost(item.cost)
            else:
                unpaid += coerce_cost(item.cost)

        if abs(unpaid) > EPSILON:
            notes.append(CalculationNote(
                category=category,
                note=f"{unpaid:.2f} from items with no payers is not attributed by payers",
                severity="warning" if row.policy != ReconciliationPolicy.RECONCILE else "info",
            ))

        dropped = attributable - sum(allocated.values(), 0.0)
        if abs(dropped) > EPSILON:
            notes.append(CalculationNote(
                category=category,
                note=f"{dropped:.2f} paid by guests or former members is outside the roster",
                severity="warning" if row.policy != ReconciliationPolicy.RECONCILE else "info",
            ))

        if row.policy == ReconciliationPolicy.RECONCILE and (abs(unpaid) > EPSILON or abs(dropped) > EPSILON):
            notes.append(CalculationNote(
                category=category,
                note="Unattributed cost spread evenly across the roster",
            ))
        elif row.policy == ReconciliationPolicy.DISPLAY_FALLBACK:
            filled = [m for m in roster_ids if allocated.get(m, 0.0) <= 0]
            if filled and row.total:
                notes.append(CalculationNote(
                    category=category,
                    note=f"Display-only even split shown for {len(filled)} member(s) with no allocated cost",
                    severity="warning",
                ))

        return notes

    def build_report(
        self,
        items_by_category: Mapping[ExpenseCategory, Sequence[ExpenseItem]],
        roster_ids: Sequence[MemberId],
        member_names: Mapping[MemberId, str] | None = None,
        trip_name: str | None = None,
    ) -> CostReport:
        """
        Build the full cost report.

        Args:
            items_by_category: Normalized items per category (missing = none)
            roster_ids: Current non-guest member ids
            member_names: Optional display names for column headers
            trip_name: Optional trip name for the report title

        Returns:
            CostReport with flights, lodging and tours rows plus Overall
        """
        rows = []
        notes: list[CalculationNote] = []
        overall: dict[MemberId, float] = {member_id: 0.0 for member_id in roster_ids}

        for category in ExpenseCategory:
            row, row_notes = self.build_row(
                category, list(items_by_category.get(category, [])), roster_ids
            )
            rows.append(row)
            notes.extend(row_notes)
            for member_id, value in row.cells.items():
                overall[member_id] += value

        grand_total = sum((row.total for row in rows), 0.0)
        overall_assigned = sum(overall.values(), 0.0)

        names = dict(member_names or {})
        report = CostReport(
            trip_name=trip_name,
            roster=list(overall.keys()),
            member_names={m: names[m] for m in overall if m in names},
            rows=rows,
            overall=overall,
            grand_total=grand_total,
            overall_assigned=overall_assigned,
            notes=notes,
        )

        logger.info(
            f"Built cost report: {len(report.roster)} members, "
            f"grand total {grand_total:.2f}, unassigned {report.overall_unassigned:.2f}"
        )
        return report
