"""Main orchestrator for the cost report pipeline.

Coordinates the expense source, normalization, allocation and aggregation
steps to produce a CostReport from a trip's raw records.
"""

import logging
from collections.abc import Mapping, Sequence
from typing import Any

from .allocation.aggregator import CostReportAggregator
from .core.config import ReportConfig
from .core.exceptions import MemberNotFoundError
from .core.models import CostReport
from .core.types import ExpenseCategory, MemberId
from .sources.base import ExpenseSource, InMemoryExpenseSource

logger = logging.getLogger(__name__)


class CostReportOrchestrator:
    """Orchestrates cost report generation for a trip."""

    def __init__(self, config: ReportConfig | None = None):
        """
        Initialize the orchestrator.

        Args:
            config: Report configuration. Defaults to the uniform preset
                (every category reconciled, no fallback on empty payers).
        """
        self.config = config or ReportConfig()
        self.aggregator = CostReportAggregator(self.config.policies)

    def build_report(self, source: ExpenseSource) -> CostReport:
        """
        Build a cost report from an expense source.

        The roster and items are read fresh on every call; nothing from a
        previous report is reused.

        Args:
            source: Supplies members and items per category

        Returns:
            CostReport for the source's trip
        """
        roster = source.get_roster()
        items_by_category = source.get_items_by_category()
        member_names = source.get_member_names()

        item_count = sum(len(items) for items in items_by_category.values())
        logger.info(
            f"Building cost report from {source.SOURCE} source: "
            f"{item_count} items, {len(roster)} roster members"
        )

        return self.aggregator.build_report(
            items_by_category,
            roster,
            member_names=member_names,
            trip_name=source.get_trip_name(),
        )

    def build_report_from_records(
        self,
        members: Sequence[Any],
        items: Mapping[ExpenseCategory | str, Sequence[Any]],
        trip_name: str | None = None,
    ) -> CostReport:
        """
        Build a cost report from raw records (for programmatic use).

        Example:
            ```python
            orchestrator = CostReportOrchestrator()
            report = orchestrator.build_report_from_records(
                members=[{"id": "a"}, {"id": "b"}],
                items={"tours": [{"cost": 40, "paidBy": ["a", "b"]}]},
            )
            ```
        """
        source = InMemoryExpenseSource(members=members, items=items, trip_name=trip_name)
        return self.build_report(source)

    @staticmethod
    def member_breakdown(report: CostReport, member_id: MemberId) -> dict[str, float]:
        """
        Return one member's displayed amount per category plus overall.

        Raises:
            MemberNotFoundError: If the member is not on the report roster
        """
        if member_id not in report.overall:
            raise MemberNotFoundError(member_id, report.roster)

        breakdown = {row.category.value: row.cell(member_id) for row in report.rows}
        breakdown["overall"] = report.overall[member_id]
        return breakdown
