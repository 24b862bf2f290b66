"""Tests for the category reconciler."""

import pytest

from tripcost.allocation.allocator import allocate
from tripcost.allocation.reconciler import reconcile


class TestReconcile:
    """Tests for reconcile()."""

    def test_fully_assigned_is_unchanged(self):
        balanced = reconcile(80, {"bryan": 80}, ["bryan", "vicky"])
        assert balanced == {"bryan": 80.0, "vicky": 0.0}

    def test_nothing_assigned_splits_evenly(self):
        balanced = reconcile(90, {}, ["bryan", "vicky"])
        assert balanced == {"bryan": pytest.approx(45), "vicky": pytest.approx(45)}

    def test_partial_assignment_spreads_remainder(self):
        balanced = reconcile(100, {"a": 20}, ["a", "b", "c"])
        assert balanced["a"] == pytest.approx(20 + 80 / 3)
        assert balanced["b"] == pytest.approx(80 / 3)
        assert balanced["c"] == pytest.approx(80 / 3)
        assert sum(balanced.values()) == pytest.approx(100, abs=1e-6)

    def test_tours_shape(self, roster):
        """40 paid by A and B plus 60 unassigned."""
        balanced = reconcile(100, {"A": 20, "B": 20, "C": 0}, roster)
        assert balanced == {
            "A": pytest.approx(40),
            "B": pytest.approx(40),
            "C": pytest.approx(20),
        }

    def test_non_roster_keys_ignored(self):
        balanced = reconcile(60, {"A": 30, "ghost": 30}, ["A", "B"])
        assert set(balanced) == {"A", "B"}
        assert balanced["A"] == pytest.approx(45)
        assert balanced["B"] == pytest.approx(15)

    def test_over_assignment_is_reduced(self):
        balanced = reconcile(50, {"A": 40, "B": 30}, ["A", "B"])
        assert sum(balanced.values()) == pytest.approx(50, abs=1e-6)
        assert balanced["A"] == pytest.approx(30)
        assert balanced["B"] == pytest.approx(20)

    def test_empty_roster(self):
        assert reconcile(100, {}, []) == {}
        assert reconcile(100, {"A": 10}, []) == {}

    def test_input_not_mutated(self):
        totals = {"A": 10.0, "B": 0.0}
        reconcile(30, totals, ["A", "B"])
        assert totals == {"A": 10.0, "B": 0.0}

    def test_invalid_total_treated_as_zero(self):
        balanced = reconcile(float("nan"), {"A": 0, "B": 0}, ["A", "B"])
        assert balanced == {"A": 0.0, "B": 0.0}

    @pytest.mark.parametrize(
        "records,roster_ids",
        [
            ([(100, ["A", "B", "C"])], ["A", "B", "C"]),
            ([(33.33, None), (12.5, []), (7, ["X"])], ["A", "B", "C"]),
            ([(0.01, []), (0.02, ["B"])], ["A", "B", "C", "D", "E", "F", "G"]),
            ([(1e9 / 7, ["A"]), (19.99, ["G", "B"])], ["A", "B"]),
            ([(250, [])], ["solo"]),
        ],
    )
    def test_conservation(self, records, roster_ids):
        """Reconciled cells always sum to the raw total."""
        items = [{"cost": cost, "payers": payers} for cost, payers in records]
        total = sum(cost for cost, _ in records)
        allocated = allocate(
            items,
            get_cost=lambda i: i["cost"],
            get_payers=lambda i: i["payers"],
            roster_ids=roster_ids,
        )

        balanced = reconcile(total, allocated, roster_ids)

        assert list(balanced) == roster_ids
        assert abs(sum(balanced.values()) - total) <= 1e-6 * max(1.0, abs(total))
