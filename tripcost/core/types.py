"""Type definitions and enums for the trip cost engine."""

from enum import Enum


class ExpenseCategory(str, Enum):
    """Expense categories tracked on a trip, in report order."""

    FLIGHTS = "flights"
    LODGING = "lodging"
    TOURS = "tours"

    @property
    def display_name(self) -> str:
        """Human-readable display name."""
        names = {
            self.FLIGHTS: "Flights",
            self.LODGING: "Lodging",
            self.TOURS: "Tours",
        }
        return names.get(self, self.value)


class ReconciliationPolicy(str, Enum):
    """How a category's per-member cells are derived from allocated totals."""

    RECONCILE = "reconcile"                # Force cells to sum to the category total
    ALLOCATED = "allocated"                # Show allocator output as-is
    DISPLAY_FALLBACK = "display_fallback"  # Zero cells show an even split (display only)


class PolicyPreset(str, Enum):
    """Named bundles of per-category policies."""

    UNIFORM = "uniform"  # reconcile every category
    LEGACY = "legacy"    # lodging reconciled, flights display fallback, tours allocated


# Type aliases for common patterns
MemberId = str
Amount = float
