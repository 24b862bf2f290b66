"""Pytest configuration and fixtures for trip cost tests."""

import json
from pathlib import Path
from typing import Any

import pytest

from tripcost.core.models import ExpenseItem, Member
from tripcost.core.types import ExpenseCategory


@pytest.fixture
def roster() -> list[str]:
    """Three non-guest members."""
    return ["A", "B", "C"]


@pytest.fixture
def members() -> list[Member]:
    """Group members including one guest."""
    return [
        Member(id="A", name="Ana"),
        Member(id="B", name="Ben"),
        Member(id="C", name="Cy"),
        Member(id="G", name="Cousin Leo", is_guest=True),
    ]


@pytest.fixture
def tour_items() -> list[ExpenseItem]:
    """One shared tour and one tour whose payers were all removed."""
    return [
        ExpenseItem(category=ExpenseCategory.TOURS, cost=40, payers=("A", "B")),
        ExpenseItem(category=ExpenseCategory.TOURS, cost=60, payers=()),
    ]


@pytest.fixture
def lodging_items() -> list[ExpenseItem]:
    """Same shape as the tours, routed through lodging."""
    return [
        ExpenseItem(category=ExpenseCategory.LODGING, cost=40, payers=("A", "B")),
        ExpenseItem(category=ExpenseCategory.LODGING, cost=60, payers=()),
    ]


@pytest.fixture
def flight_items() -> list[ExpenseItem]:
    """A flight paid for by a guest."""
    return [
        ExpenseItem(category=ExpenseCategory.FLIGHTS, cost=90, payers=("G",)),
    ]


@pytest.fixture
def trip_export() -> dict[str, Any]:
    """Raw trip export with mixed field spellings."""
    return {
        "name": "Test Trip",
        "members": [
            {"id": "A", "firstName": "Ana", "userId": "u-a"},
            {"id": "B", "firstName": "Ben", "userId": "u-b"},
            {"id": "C", "firstName": "Cy", "userId": "u-c"},
            {"id": "G", "guestName": "Cousin Leo"},
        ],
        "flights": [
            {"id": "f1", "cost": 90, "paidBy": ["G"]},
        ],
        "lodgings": [
            {"id": "l1", "totalCost": "40.00", "paid_by": ["A", "B"]},
            {"id": "l2", "total_cost": 60, "paidBy": []},
        ],
        "tours": [
            {"id": "t1", "cost": 40, "paidBy": ["A", "B"]},
            {"id": "t2", "cost": 60, "paidBy": []},
        ],
    }


@pytest.fixture
def trip_file(tmp_path: Path, trip_export: dict[str, Any]) -> Path:
    """Trip export written as JSON."""
    path = tmp_path / "trip.json"
    path.write_text(json.dumps(trip_export), encoding="utf-8")
    return path


@pytest.fixture
def yaml_trip_file(tmp_path: Path) -> Path:
    """Small trip export written as YAML."""
    path = tmp_path / "trip.yaml"
    path.write_text(
        "name: Weekend\n"
        "members:\n"
        "  - {id: A}\n"
        "  - {id: B}\n"
        "tours:\n"
        "  - {cost: 50}\n",
        encoding="utf-8",
    )
    return path
