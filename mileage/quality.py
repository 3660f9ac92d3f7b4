"""
Data-quality warnings for a parsed file.

Warnings are advisory: they never remove records, never become validation
errors and never affect ParseResult.success.
"""

from __future__ import annotations

from datetime import datetime
from typing import TYPE_CHECKING

from mileage.config import STALE_WARNING_THRESHOLD
from mileage.logger import get_logger
from mileage.metrics import records_to_frame

if TYPE_CHECKING:
    from collections.abc import Sequence

    from mileage.validator import Record

logger = get_logger(__name__)

NO_RECORDS_WARNING = "No valid records found in CSV"


def one_year_before(now: datetime) -> datetime:
    """Midnight on the same month/day one year earlier (Feb 29 -> Feb 28)."""
    day = now.day
    if now.month == 2 and day == 29:
        day = 28
    return datetime(now.year - 1, now.month, day)


def count_duplicate_groups(records: Sequence[Record]) -> int:
    """Number of (person, calendar date) pairs that occur more than once."""
    if not records:
        return 0
    frame = records_to_frame(records)
    frame["day"] = frame["date"].map(lambda d: d.date())
    sizes = frame.groupby(["person", "day"], sort=False).size()
    return int((sizes > 1).sum())


def generate_warnings(records: Sequence[Record], now: datetime | None = None) -> list[str]:
    """
    Check validated records for duplicates, future dates and stale dates.

    Args:
        records: Every valid record from the file.
        now: Reference moment; defaults to the current local time.

    Returns:
        Warning strings in a fixed order (duplicates, future, stale).
    """
    if not records:
        logger.warning(NO_RECORDS_WARNING)
        return [NO_RECORDS_WARNING]

    now = now or datetime.now()
    warnings: list[str] = []

    duplicate_groups = count_duplicate_groups(records)
    if duplicate_groups > 0:
        warnings.append(
            f"Found {duplicate_groups} duplicate entries (same person and date). "
            "All records will be included in calculations."
        )

    cutoff = one_year_before(now)
    future_count = sum(1 for r in records if r.date > now)
    stale_count = sum(1 for r in records if r.date < cutoff)

    if future_count > 0:
        warnings.append(f"{future_count} records have future dates")

    if stale_count > STALE_WARNING_THRESHOLD:
        warnings.append(f"{stale_count} records are older than 1 year")

    for warning in warnings:
        logger.warning(warning)
    return warnings
