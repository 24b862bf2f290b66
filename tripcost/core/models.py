"""Pydantic data models for the trip cost engine.

All data structures are immutable (frozen) after creation. Reports are
rebuilt from their inputs on every request and never mutated in place.
"""

from datetime import datetime, timezone

from pydantic import BaseModel, Field

from .types import Amount, ExpenseCategory, MemberId, ReconciliationPolicy


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Member(BaseModel):
    """A member of the trip's group."""

    id: MemberId
    is_guest: bool = False
    name: str | None = None

    model_config = {"frozen": True}

    @property
    def display_name(self) -> str:
        """Name to show in report headers."""
        return self.name or self.id


class ExpenseItem(BaseModel):
    """One cost-bearing record (a flight, a lodging stay or a tour).

    ``payers is None`` marks a legacy record created before payer tracking
    existed. ``payers == ()`` means every payer was removed on purpose.
    """

    category: ExpenseCategory
    cost: Amount = 0.0
    payers: tuple[MemberId, ...] | None = None
    item_id: str | None = None
    label: str | None = None

    model_config = {"frozen": True}

    @property
    def is_legacy(self) -> bool:
        """Check if the record predates payer tracking."""
        return self.payers is None


class CalculationNote(BaseModel):
    """Explains something about how a report figure was derived."""

    category: ExpenseCategory | None = None
    note: str
    severity: str = "info"  # "info", "warning"

    model_config = {"frozen": True}


class CategoryRow(BaseModel):
    """One category row of the cost report matrix."""

    category: ExpenseCategory
    policy: ReconciliationPolicy
    fallback_on_empty: bool = False
    total: Amount = 0.0  # Raw category total (Total column)
    cells: dict[MemberId, Amount] = Field(default_factory=dict)
    assigned: Amount = 0.0  # Sum of cells
    unassigned: Amount = 0.0  # total - assigned
    item_count: int = 0

    model_config = {"frozen": True}

    @property
    def display_name(self) -> str:
        return self.category.display_name

    def cell(self, member_id: MemberId) -> Amount:
        """Return a member's displayed amount (0 if not on the roster)."""
        return self.cells.get(member_id, 0.0)


class CostReport(BaseModel):
    """Combined cost report: categories x members plus an Overall row."""

    trip_name: str | None = None
    roster: list[MemberId] = Field(default_factory=list)
    member_names: dict[MemberId, str] = Field(default_factory=dict)
    rows: list[CategoryRow] = Field(default_factory=list)
    overall: dict[MemberId, Amount] = Field(default_factory=dict)
    grand_total: Amount = 0.0
    overall_assigned: Amount = 0.0
    notes: list[CalculationNote] = Field(default_factory=list)

    # Metadata
    generated_at: datetime = Field(default_factory=_utcnow)
    tool_version: str = "0.1.0"

    model_config = {"frozen": True}

    @property
    def overall_unassigned(self) -> Amount:
        return self.grand_total - self.overall_assigned

    def row(self, category: ExpenseCategory) -> CategoryRow | None:
        """Return the row for a category, if present."""
        for row in self.rows:
            if row.category == category:
                return row
        return None

    def member_label(self, member_id: MemberId) -> str:
        """Column header for a member."""
        return self.member_names.get(member_id, member_id)
