"""File expense source for trip exports.

Reads a trip export written as YAML or JSON:

    name: Lisbon 2025
    members:
      - {id: m1, name: Ana}
      - {id: m2, name: Ben}
      - {id: g1, guestName: Cousin Leo}
    flights:
      - {cost: 420, paidBy: [m1]}
    lodging:
      - {totalCost: "900.00", paid_by: [m1, m2]}
    tours:
      - {cost: 60}          # legacy item, no payer data
"""

import json
import logging
from pathlib import Path
from typing import Any

import yaml

from ..core.exceptions import ExpenseSourceError
from ..core.models import ExpenseItem, Member
from ..core.types import ExpenseCategory
from .base import ExpenseSource
from .normalize import normalize_expense_items, normalize_members

logger = logging.getLogger(__name__)

# Accepted top-level keys per category
CATEGORY_KEYS: dict[ExpenseCategory, tuple[str, ...]] = {
    ExpenseCategory.FLIGHTS: ("flights",),
    ExpenseCategory.LODGING: ("lodging", "lodgings"),
    ExpenseCategory.TOURS: ("tours",),
}


class FileExpenseSource(ExpenseSource):
    """Loads members and expense items from a YAML/JSON trip export."""

    SOURCE = "file"

    def __init__(self, path: Path | str):
        """
        Initialize file source.

        Args:
            path: Path to a .yaml, .yml or .json trip export
        """
        self.path = Path(path)
        self._data: dict[str, Any] | None = None

    def is_available(self) -> bool:
        """Check if the export file exists."""
        return self.path.exists() and self.path.is_file()

    def _load_file(self) -> dict[str, Any]:
        """Load YAML or JSON file."""
        if not self.is_available():
            raise ExpenseSourceError(self.SOURCE, "Trip export not found", str(self.path))

        try:
            with open(self.path, "r", encoding="utf-8") as f:
                if self.path.suffix.lower() in (".yaml", ".yml"):
                    data = yaml.safe_load(f) or {}
                else:
                    data = json.load(f)
        except (yaml.YAMLError, json.JSONDecodeError, UnicodeDecodeError) as e:
            raise ExpenseSourceError(self.SOURCE, f"Could not parse trip export: {e}", str(self.path))
        except OSError as e:
            raise ExpenseSourceError(self.SOURCE, f"Could not read trip export: {e}", str(self.path))

        if not isinstance(data, dict):
            raise ExpenseSourceError(self.SOURCE, "Trip export must be a mapping", str(self.path))

        logger.info(f"Loaded trip export from {self.path}")
        return data

    @property
    def data(self) -> dict[str, Any]:
        if self._data is None:
            self._data = self._load_file()
        return self._data

    def _raw_records(self, key: str) -> list[Any]:
        records = self.data.get(key)
        if records is None:
            return []
        if not isinstance(records, list):
            raise ExpenseSourceError(self.SOURCE, f"'{key}' must be a list", str(self.path))
        return records

    def get_items(self, category: ExpenseCategory) -> list[ExpenseItem]:
        """Load normalized items for a category."""
        items: list[ExpenseItem] = []
        for key in CATEGORY_KEYS[category]:
            items.extend(normalize_expense_items(self._raw_records(key), category))
        logger.debug(f"[{self.SOURCE}] {len(items)} {category.value} items from {self.path}")
        return items

    def get_members(self) -> list[Member]:
        """Load every member record, guests included."""
        return normalize_members(self._raw_records("members"))

    def get_trip_name(self) -> str | None:
        name = self.data.get("name") or self.data.get("tripName")
        return str(name) if name else None
