"""Tests for report formatters."""

import csv
import io
import json

import pytest

from tripcost.allocation.aggregator import CostReportAggregator
from tripcost.core.config import preset_policies
from tripcost.core.types import ExpenseCategory, PolicyPreset
from tripcost.output.formatters import (
    CSVFormatter,
    JSONFormatter,
    TableFormatter,
    format_amount,
    report_matrix,
)
from tripcost.output.notes import CalculationNotesFormatter


def build(preset, flight_items, lodging_items, tour_items, roster, **kwargs):
    aggregator = CostReportAggregator(preset_policies(preset))
    return aggregator.build_report(
        {
            ExpenseCategory.FLIGHTS: flight_items,
            ExpenseCategory.LODGING: lodging_items,
            ExpenseCategory.TOURS: tour_items,
        },
        roster,
        **kwargs,
    )


@pytest.fixture
def uniform_report(flight_items, lodging_items, tour_items, roster):
    return build(
        PolicyPreset.UNIFORM, flight_items, lodging_items, tour_items, roster,
        member_names={"A": "Ana"}, trip_name="Lisbon",
    )


@pytest.fixture
def legacy_report(flight_items, lodging_items, tour_items, roster):
    return build(PolicyPreset.LEGACY, flight_items, lodging_items, tour_items, roster)


class TestFormatAmount:
    @pytest.mark.parametrize(
        "value,decimals,symbol,expected",
        [
            (1234.5, 2, "$", "$1,234.50"),
            (-5, 2, "$", "-$5.00"),
            (-0.001, 2, "$", "$0.00"),
            (33.333333, 2, "", "33.33"),
            (10, 0, "€", "€10"),
        ],
    )
    def test_values(self, value, decimals, symbol, expected):
        assert format_amount(value, decimals, symbol) == expected


class TestReportMatrix:
    def test_shape(self, uniform_report):
        header, rows = report_matrix(uniform_report)

        assert header == ["Category", "Ana", "B", "C", "Total"]
        assert [row[0] for row in rows] == ["Flights", "Lodging", "Tours", "Overall"]
        assert rows[-1][-1] == pytest.approx(290)
        assert rows[1][1:] == [pytest.approx(40), pytest.approx(40), pytest.approx(20), pytest.approx(100)]


class TestJSONFormatter:
    def test_complete_report(self, uniform_report):
        data = json.loads(JSONFormatter(decimals=2).format(uniform_report))

        assert data["trip_name"] == "Lisbon"
        assert data["roster"] == ["A", "B", "C"]
        assert [row["category"] for row in data["rows"]] == ["flights", "lodging", "tours"]
        assert data["rows"][0]["policy"] == "reconcile"
        assert data["overall"] == {"A": 110.0, "B": 110.0, "C": 70.0}
        assert data["grand_total"] == 290.0
        assert data["overall_unassigned"] == 0.0
        assert "generated_at" in data

    def test_raw_values_without_decimals(self, roster):
        report = CostReportAggregator().build_report(
            {ExpenseCategory.TOURS: []}, roster
        )
        data = json.loads(JSONFormatter().format(report))
        assert data["grand_total"] == 0.0

    def test_to_file(self, uniform_report, tmp_path):
        path = tmp_path / "report.json"
        JSONFormatter().format_to_file(uniform_report, str(path))
        assert json.loads(path.read_text(encoding="utf-8"))["trip_name"] == "Lisbon"


class TestCSVFormatter:
    def test_matrix(self, legacy_report):
        rows = list(csv.reader(io.StringIO(CSVFormatter().format(legacy_report))))

        assert rows[0] == ["Category", "A", "B", "C", "Total", "Unassigned"]
        assert rows[3] == ["Tours", "20.00", "20.00", "0.00", "100.00", "60.00"]
        assert rows[4] == ["Overall", "90.00", "90.00", "50.00", "290.00", "60.00"]

    def test_without_unassigned(self, uniform_report):
        rows = list(csv.reader(io.StringIO(
            CSVFormatter(delimiter=";", include_unassigned=False).format(uniform_report)
        ), delimiter=";"))

        assert rows[0][-1] == "Total"
        assert rows[-1] == ["Overall", "110.00", "110.00", "70.00", "290.00"]

    def test_empty_roster(self, flight_items, lodging_items, tour_items):
        report = build(PolicyPreset.UNIFORM, flight_items, lodging_items, tour_items, [])
        rows = list(csv.reader(io.StringIO(CSVFormatter().format(report))))

        assert rows[0] == ["Category", "Total", "Unassigned"]
        assert rows[-1] == ["Overall", "290.00", "290.00"]


class TestTableFormatter:
    def test_plain(self, uniform_report):
        output = TableFormatter(use_rich=False).format(uniform_report)

        assert "COST REPORT: Lisbon" in output
        assert "Overall" in output
        assert "$110.00" in output
        assert "Unassigned" not in output

    def test_plain_shows_unassigned(self, legacy_report):
        output = TableFormatter(use_rich=False).format(legacy_report)
        assert "Unassigned: $60.00" in output

    def test_rich(self, uniform_report):
        output = TableFormatter(use_rich=True).format(uniform_report)
        assert "Cost Report: Lisbon" in output
        assert "Overall" in output

    def test_to_file_is_plain(self, uniform_report, tmp_path):
        formatter = TableFormatter(use_rich=True)
        path = tmp_path / "report.txt"

        formatter.format_to_file(uniform_report, str(path))

        content = path.read_text(encoding="utf-8")
        assert "\x1b[" not in content
        assert "COST REPORT" in content
        assert formatter.use_rich is True


class TestCalculationNotesFormatter:
    def test_summary(self, legacy_report):
        summary = CalculationNotesFormatter().format_summary(legacy_report)

        assert "CALCULATION NOTES" in summary
        assert "Policy: display_fallback" in summary
        assert "Policy: allocated" in summary
        assert "Unassigned: $60.00" in summary
        assert "Grand total: $290.00" in summary

    def test_empty_roster(self, flight_items):
        report = CostReportAggregator().build_report(
            {ExpenseCategory.FLIGHTS: flight_items}, []
        )
        summary = CalculationNotesFormatter().format_summary(report)
        assert "Roster: (empty)" in summary
        assert "No roster members" in summary

    def test_to_file(self, uniform_report, tmp_path):
        path = tmp_path / "notes.txt"
        CalculationNotesFormatter(currency_symbol="€").format_to_file(uniform_report, str(path))
        assert "Grand total: €290.00" in path.read_text(encoding="utf-8")
