"""
Multi-format date parsing for the `date` column.

A strict ISO-8601 parse is tried first, then a fixed list of explicit formats
in priority order. The first format that yields a real calendar date wins, so
ambiguous strings such as "03/04/2024" resolve to MM/dd (March 4).
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from datetime import datetime


@dataclass(frozen=True)
class DateFormat:
    """One explicit format: display label, digit-width guard, strptime directive."""

    label: str
    pattern: re.Pattern
    directive: str

    def parse(self, text: str) -> datetime | None:
        if not self.pattern.fullmatch(text):
            return None
        try:
            return datetime.strptime(text, self.directive)
        except ValueError:
            return None


# Order matters: MM/dd must be tried before dd/MM
DATE_FORMATS: tuple[DateFormat, ...] = (
    DateFormat("yyyy-MM-dd", re.compile(r"\d{4}-\d{1,2}-\d{1,2}"), "%Y-%m-%d"),
    DateFormat("MM/dd/yyyy", re.compile(r"\d{2}/\d{2}/\d{4}"), "%m/%d/%Y"),
    DateFormat("dd/MM/yyyy", re.compile(r"\d{2}/\d{2}/\d{4}"), "%d/%m/%Y"),
    DateFormat("yyyy/MM/dd", re.compile(r"\d{4}/\d{1,2}/\d{1,2}"), "%Y/%m/%d"),
    DateFormat("M/d/yyyy", re.compile(r"\d{1,2}/\d{1,2}/\d{4}"), "%m/%d/%Y"),
    DateFormat("d/M/yyyy", re.compile(r"\d{1,2}/\d{1,2}/\d{4}"), "%d/%m/%Y"),
)

_ISO_PREFIX = re.compile(r"\d{4}-?\d{2}-?\d{2}")


def parse_iso_date(text: str) -> datetime | None:
    """
    Strict ISO-8601 parse (calendar date, optionally with a time part).

    Offsets are converted to local time and dropped so every parsed value is
    a naive local datetime.
    """
    if not _ISO_PREFIX.match(text):
        return None
    try:
        parsed = datetime.fromisoformat(text)
    except ValueError:
        return None
    if parsed.tzinfo is not None:
        parsed = parsed.astimezone().replace(tzinfo=None)
    return parsed


def parse_date(text: str) -> datetime | None:
    """
    Parse a date string, returning None when no supported format matches.

    Examples:
        parse_date("2024-01-05")  -> 2024-01-05 00:00
        parse_date("01/05/2024")  -> 2024-01-05 00:00
        parse_date("2024/01/05")  -> 2024-01-05 00:00
        parse_date("13/40/2024")  -> None
    """
    text = text.strip()
    if not text:
        return None

    parsed = parse_iso_date(text)
    if parsed is not None:
        return parsed

    for date_format in DATE_FORMATS:
        parsed = date_format.parse(text)
        if parsed is not None:
            return parsed

    return None


def matching_format(text: str) -> str | None:
    """Return the label of the format that parses `text`, or None."""
    text = text.strip()
    if parse_iso_date(text) is not None:
        return "ISO-8601"
    for date_format in DATE_FORMATS:
        if date_format.parse(text) is not None:
            return date_format.label
    return None
