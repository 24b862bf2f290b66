"""Base classes for expense sources."""

import logging
from abc import ABC, abstractmethod
from collections.abc import Mapping, Sequence
from typing import Any

from ..core.models import ExpenseItem, Member
from ..core.types import ExpenseCategory, MemberId
from .normalize import build_roster, normalize_expense_items, normalize_members

logger = logging.getLogger(__name__)


class ExpenseSource(ABC):
    """Abstract base class for anything that supplies trip expenses and members."""

    # Subclasses identify themselves in logs and errors
    SOURCE: str = "unknown"

    @abstractmethod
    def get_items(self, category: ExpenseCategory) -> list[ExpenseItem]:
        """Return normalized items for a category, in stored order."""
        pass

    @abstractmethod
    def get_members(self) -> list[Member]:
        """Return every group member, guests included."""
        pass

    def get_trip_name(self) -> str | None:
        """Return the trip name, if the source knows it."""
        return None

    def get_roster(self) -> list[MemberId]:
        """Return the ordered non-guest member ids."""
        return build_roster(self.get_members())

    def get_items_by_category(self) -> dict[ExpenseCategory, list[ExpenseItem]]:
        """Return normalized items for every category."""
        return {category: self.get_items(category) for category in ExpenseCategory}

    def get_member_names(self) -> dict[MemberId, str]:
        """Return display names keyed by member id."""
        return {m.id: m.display_name for m in self.get_members()}


class InMemoryExpenseSource(ExpenseSource):
    """Expense source over records already fetched by the caller."""

    SOURCE = "memory"

    def __init__(
        self,
        members: Sequence[Any] | None = None,
        items: Mapping[ExpenseCategory | str, Sequence[Any]] | None = None,
        trip_name: str | None = None,
    ):
        """
        Initialize from raw or normalized records.

        Args:
            members: Member records (mappings, Member objects or bare ids)
            items: Records per category; keys may be enum members or names
            trip_name: Optional trip name
        """
        self.trip_name = trip_name
        self._members = normalize_members(members)
        self._items: dict[ExpenseCategory, list[ExpenseItem]] = {}

        for key, raws in (items or {}).items():
            try:
                category = ExpenseCategory(key)
            except ValueError:
                logger.warning(f"[{self.SOURCE}] Ignoring unknown category '{key}'")
                continue
            self._items[category] = normalize_expense_items(raws, category)

    def get_items(self, category: ExpenseCategory) -> list[ExpenseItem]:
        return list(self._items.get(category, []))

    def get_members(self) -> list[Member]:
        return list(self._members)

    def get_trip_name(self) -> str | None:
        return self.trip_name
