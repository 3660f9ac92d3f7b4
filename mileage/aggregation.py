"""
Per-person statistics and the date-pivoted chart series.

Consumes the validated records from a parse and produces the
DashboardSummary handed to presentation.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

import pandas as pd

from mileage.config import CHART_DISPLAY_FORMAT
from mileage.logger import debug_watcher, get_logger
from mileage.metrics import Metrics, calculate_metrics, records_to_frame

if TYPE_CHECKING:
    from collections.abc import Sequence

    from mileage.validator import Record

logger = get_logger(__name__)


@dataclass(frozen=True)
class PersonStats:
    person: str
    metrics: Metrics
    records: tuple[Record, ...]
    percentage_of_total: float

    def to_dict(self) -> dict[str, Any]:
        return {
            "person": self.person,
            "metrics": self.metrics.to_dict(),
            "records": [r.to_dict() for r in self.records],
            "percentage_of_total": self.percentage_of_total,
        }


@dataclass(frozen=True)
class ChartPoint:
    """
    One calendar date of the time series.

    `distances` only holds people who ran that day. A missing person means
    no data for that date, not zero miles.
    """

    iso_date: str
    display_date: str
    distances: dict[str, float] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        return {
            "iso_date": self.iso_date,
            "display_date": self.display_date,
            "distances": dict(self.distances),
        }


@dataclass(frozen=True)
class DashboardSummary:
    overall_metrics: Metrics
    person_stats: list[PersonStats]
    chart_data: list[ChartPoint]
    unique_people: list[str]
    total_records: int

    def to_dict(self) -> dict[str, Any]:
        return {
            "overall_metrics": self.overall_metrics.to_dict(),
            "person_stats": [p.to_dict() for p in self.person_stats],
            "chart_data": [c.to_dict() for c in self.chart_data],
            "unique_people": list(self.unique_people),
            "total_records": self.total_records,
        }


def unique_people(records: Sequence[Record]) -> list[str]:
    """Distinct person names in first-occurrence order."""
    if not records:
        return []
    return pd.unique(pd.Series([r.person for r in records], dtype="object")).tolist()


def calculate_person_stats(records: Sequence[Record]) -> list[PersonStats]:
    """
    Metrics per person, ordered by total distance (highest first).

    People are grouped by exact name. Ties keep first-occurrence order.
    percentage_of_total is 0 when the grand total is 0.
    """
    if not records:
        return []

    frame = records_to_frame(records)
    grand_total = float(frame["distance"].sum())

    stats = []
    for person, group in frame.groupby("person", sort=False):
        person_records = tuple(records[i] for i in group.index)
        metrics = calculate_metrics(person_records)
        percentage = (metrics.total_distance / grand_total) * 100 if grand_total > 0 else 0.0
        stats.append(
            PersonStats(
                person=person,
                metrics=metrics,
                records=person_records,
                percentage_of_total=percentage,
            )
        )

    # sorted() is stable with reverse=True
    return sorted(stats, key=lambda s: s.metrics.total_distance, reverse=True)


def prepare_chart_data(records: Sequence[Record]) -> list[ChartPoint]:
    """
    Pivot records into one point per calendar date, ascending.

    Multiple runs by the same person on the same date are summed.
    """
    if not records:
        return []

    frame = records_to_frame(records)
    # isoformat zero-pads years below 1000 so keys sort chronologically
    frame["iso_date"] = frame["date"].map(lambda d: d.date().isoformat())
    frame["display_date"] = frame["date"].map(lambda d: d.strftime(CHART_DISPLAY_FORMAT))

    display_dates = frame.groupby("iso_date", sort=True)["display_date"].first()
    totals = frame.groupby(["iso_date", "person"], sort=False)["distance"].sum()

    distances: dict[str, dict[str, float]] = {key: {} for key in display_dates.index}
    for (iso_date, person), total in totals.items():
        distances[iso_date][person] = float(total)

    return [
        ChartPoint(iso_date=key, display_date=display, distances=distances[key])
        for key, display in display_dates.items()
    ]


@debug_watcher
def generate_dashboard_summary(records: Sequence[Record]) -> DashboardSummary:
    """Assemble overall metrics, per-person stats and the chart series."""
    summary = DashboardSummary(
        overall_metrics=calculate_metrics(records),
        person_stats=calculate_person_stats(records),
        chart_data=prepare_chart_data(records),
        unique_people=unique_people(records),
        total_records=len(records),
    )
    logger.info(
        f"Summary: {summary.total_records} records, {len(summary.unique_people)} people, "
        f"{len(summary.chart_data)} dates"
    )
    return summary
