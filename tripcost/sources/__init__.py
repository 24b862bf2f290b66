"""Expense sources and boundary normalization.

This module contains:
- ExpenseSource base class and an in-memory implementation
- FileExpenseSource for YAML/JSON trip exports
- Normalizers mapping every known field spelling to canonical models
"""

from .base import ExpenseSource, InMemoryExpenseSource
from .file_source import FileExpenseSource
from .normalize import (
    build_roster,
    normalize_expense_item,
    normalize_expense_items,
    normalize_member,
    normalize_members,
)

__all__ = [
    "ExpenseSource",
    "InMemoryExpenseSource",
    "FileExpenseSource",
    "build_roster",
    "normalize_expense_item",
    "normalize_expense_items",
    "normalize_member",
    "normalize_members",
]
