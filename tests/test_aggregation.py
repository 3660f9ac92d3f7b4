"""
Unit tests for per-person stats, the chart pivot and the dashboard summary.
"""

import sys
from datetime import datetime
from pathlib import Path

import pytest

project_root = Path(__file__).resolve().parent.parent
sys.path.insert(0, str(project_root))

from mileage.aggregation import (
    calculate_person_stats,
    generate_dashboard_summary,
    prepare_chart_data,
    unique_people,
)
from mileage.validator import Record


def make_records(*rows):
    return [
        Record(date=day, person=person, distance=distance, source_row_index=i + 1)
        for i, (day, person, distance) in enumerate(rows)
    ]


class TestPersonStats:
    """Tests for calculate_person_stats."""

    def setup_method(self):
        self.records = make_records(
            (datetime(2024, 1, 1), "Alice", 5.2),
            (datetime(2024, 1, 2), "Bob", 3.8),
            (datetime(2024, 1, 2), "Alice", 4.5),
        )

    def test_sorted_by_total_descending(self):
        stats = calculate_person_stats(self.records)
        assert [s.person for s in stats] == ["Alice", "Bob"]
        assert stats[0].metrics.total_distance == pytest.approx(8.7)
        assert stats[0].metrics.run_count == 2
        assert [r.source_row_index for r in stats[0].records] == [1, 3]

    def test_percentages(self):
        stats = calculate_person_stats(self.records)
        assert stats[0].percentage_of_total == pytest.approx(8.7 / 13.5 * 100)
        assert sum(s.percentage_of_total for s in stats) == pytest.approx(100.0)

    def test_partition_sums_to_whole(self):
        summary = generate_dashboard_summary(self.records)
        total = sum(s.metrics.total_distance for s in summary.person_stats)
        assert total == pytest.approx(summary.overall_metrics.total_distance)

    def test_ties_keep_first_occurrence(self):
        records = make_records(
            (datetime(2024, 1, 1), "Zed", 2.0),
            (datetime(2024, 1, 1), "Amy", 2.0),
            (datetime(2024, 1, 1), "Max", 5.0),
        )
        assert [s.person for s in calculate_person_stats(records)] == ["Max", "Zed", "Amy"]

    def test_zero_grand_total(self):
        records = make_records((datetime(2024, 1, 1), "Alice", 0.0), (datetime(2024, 1, 1), "Bob", 0.0))
        stats = calculate_person_stats(records)
        assert [s.percentage_of_total for s in stats] == [0.0, 0.0]

    def test_names_are_case_sensitive(self):
        records = make_records((datetime(2024, 1, 1), "alice", 1.0), (datetime(2024, 1, 1), "Alice", 1.0))
        assert len(calculate_person_stats(records)) == 2

    def test_empty(self):
        assert calculate_person_stats([]) == []


class TestChartData:
    """Tests for prepare_chart_data."""

    def test_one_point_per_date_ascending(self):
        records = make_records(
            (datetime(2024, 1, 3), "Alice", 1.0),
            (datetime(2024, 1, 1), "Bob", 2.0),
            (datetime(2023, 12, 31), "Alice", 3.0),
        )
        chart = prepare_chart_data(records)
        assert [p.iso_date for p in chart] == ["2023-12-31", "2024-01-01", "2024-01-03"]
        assert chart[0].display_date == "Dec 31, 2023"

    def test_same_day_runs_are_summed(self):
        records = make_records(
            (datetime(2024, 1, 1, 6, 0), "Alice", 3.0),
            (datetime(2024, 1, 1, 18, 0), "Alice", 2.5),
            (datetime(2024, 1, 1), "Bob", 1.0),
        )
        chart = prepare_chart_data(records)
        assert len(chart) == 1
        assert chart[0].distances == {"Alice": 5.5, "Bob": 1.0}

    def test_absent_people_have_no_key(self):
        records = make_records(
            (datetime(2024, 1, 1), "Alice", 3.0),
            (datetime(2024, 1, 2), "Bob", 2.0),
        )
        chart = prepare_chart_data(records)
        assert "Bob" not in chart[0].distances
        assert "Alice" not in chart[1].distances

    def test_early_years_zero_padded(self):
        records = make_records(
            (datetime(2024, 1, 1), "Alice", 1.0),
            (datetime(999, 6, 1), "Bob", 2.0),
            (datetime(50, 1, 1), "Alice", 3.0),
        )
        chart = prepare_chart_data(records)
        assert [p.iso_date for p in chart] == ["0050-01-01", "0999-06-01", "2024-01-01"]

    def test_empty(self):
        assert prepare_chart_data([]) == []


def test_unique_people_first_seen_order():
    records = make_records(
        (datetime(2024, 1, 2), "Bob", 1.0),
        (datetime(2024, 1, 1), "Alice", 9.0),
        (datetime(2024, 1, 3), "Bob", 1.0),
    )
    assert unique_people(records) == ["Bob", "Alice"]
    assert unique_people([]) == []


def test_dashboard_summary_end_to_end():
    records = make_records(
        (datetime(2024, 1, 1), "Alice", 5.2),
        (datetime(2024, 1, 2), "Bob", 3.8),
        (datetime(2024, 1, 2), "Alice", 4.5),
    )
    summary = generate_dashboard_summary(records)
    assert summary.overall_metrics.total_runs == 3
    assert summary.overall_metrics.total_distance == pytest.approx(13.5)
    assert summary.unique_people == ["Alice", "Bob"]
    assert summary.person_stats[0].person == "Alice"
    assert summary.total_records == 3
    assert [p.iso_date for p in summary.chart_data] == ["2024-01-01", "2024-01-02"]
    assert summary.chart_data[1].distances == {"Bob": 3.8, "Alice": 4.5}

    payload = summary.to_dict()
    assert payload["chart_data"][0] == {
        "iso_date": "2024-01-01",
        "display_date": "Jan 01, 2024",
        "distances": {"Alice": 5.2},
    }


def test_empty_summary():
    summary = generate_dashboard_summary([])
    assert summary.total_records == 0
    assert summary.person_stats == []
    assert summary.chart_data == []
    assert summary.unique_people == []
    assert summary.overall_metrics.date_range.start is None
