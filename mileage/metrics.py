"""
Aggregate statistics over any collection of validated records.

The same calculation serves the whole dataset and each person's subset.
An empty collection yields zeroed metrics and an open date range.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import TYPE_CHECKING, Any

import pandas as pd

if TYPE_CHECKING:
    from collections.abc import Sequence

    from mileage.validator import Record

RECORD_COLUMNS = ["date", "person", "distance", "source_row_index"]


@dataclass(frozen=True)
class DateRange:
    start: datetime | None = None
    end: datetime | None = None


@dataclass(frozen=True)
class Metrics:
    """Totals and extrema for a set of runs. Distances are in miles."""

    total_distance: float = 0.0
    average_distance: float = 0.0
    min_distance: float = 0.0
    max_distance: float = 0.0
    run_count: int = 0
    date_range: DateRange = field(default_factory=DateRange)

    @property
    def total_runs(self) -> int:
        return self.run_count

    def to_dict(self) -> dict[str, Any]:
        start, end = self.date_range.start, self.date_range.end
        return {
            "total_distance": self.total_distance,
            "average_distance": self.average_distance,
            "min_distance": self.min_distance,
            "max_distance": self.max_distance,
            "run_count": self.run_count,
            "date_range": {
                "start": start.isoformat() if start else None,
                "end": end.isoformat() if end else None,
            },
        }


def records_to_frame(records: Sequence[Record]) -> pd.DataFrame:
    """
    Build a DataFrame with one row per record, index aligned to `records`.

    Dates stay as Python datetimes (object dtype) so any year the date
    parser accepts survives the round trip.

    Returns:
        DataFrame with columns date, person, distance, source_row_index.
    """
    if not records:
        return pd.DataFrame(
            {
                "date": pd.Series(dtype="object"),
                "person": pd.Series(dtype="object"),
                "distance": pd.Series(dtype="float64"),
                "source_row_index": pd.Series(dtype="int64"),
            }
        )
    return pd.DataFrame(
        {
            "date": pd.Series([r.date for r in records], dtype="object"),
            "person": [r.person for r in records],
            "distance": [float(r.distance) for r in records],
            "source_row_index": [r.source_row_index for r in records],
        },
        columns=RECORD_COLUMNS,
    )


def calculate_metrics(records: Sequence[Record]) -> Metrics:
    """
    Calculate totals, average, extrema and date range for `records`.

    Never divides by zero: an empty input returns Metrics() with a
    (None, None) date range.
    """
    if not records:
        return Metrics()

    frame = records_to_frame(records)
    distances = frame["distance"]
    run_count = len(frame)
    total = float(distances.sum())

    return Metrics(
        total_distance=total,
        average_distance=total / run_count,
        min_distance=float(distances.min()),
        max_distance=float(distances.max()),
        run_count=run_count,
        date_range=DateRange(
            start=min(frame["date"]),
            end=max(frame["date"]),
        ),
    )


def format_number(value: float, decimals: int = 2) -> str:
    """Fixed-point rendering, e.g. format_number(5.2) -> "5.20"."""
    return f"{value:.{decimals}f}"


def format_miles(value: float) -> str:
    """Distance with unit, e.g. format_miles(5.2) -> "5.20 mi"."""
    return f"{format_number(value, 2)} mi"
