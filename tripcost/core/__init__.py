"""Core module - data models, types, configuration and exceptions."""

from .models import (
    Member,
    ExpenseItem,
    CalculationNote,
    CategoryRow,
    CostReport,
)
from .types import (
    ExpenseCategory,
    ReconciliationPolicy,
    PolicyPreset,
)
from .config import CategoryPolicy, ReportConfig
from .exceptions import (
    TripCostError,
    ExpenseSourceError,
    ValidationError,
    ConfigurationError,
    MemberNotFoundError,
)

__all__ = [
    # Models
    "Member",
    "ExpenseItem",
    "CalculationNote",
    "CategoryRow",
    "CostReport",
    # Types
    "ExpenseCategory",
    "ReconciliationPolicy",
    "PolicyPreset",
    # Config
    "CategoryPolicy",
    "ReportConfig",
    # Exceptions
    "TripCostError",
    "ExpenseSourceError",
    "ValidationError",
    "ConfigurationError",
    "MemberNotFoundError",
]
