"""
Header Parser Module - Canonical Column Resolution

Maps the header line of an uploaded file onto the three canonical fields
(`date`, `person`, `miles run`). Matching is case-insensitive and treats the
underscore and the space as interchangeable:

- "Date"       -> date
- " Miles Run " -> miles run
- "miles_run"  -> miles run
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from mileage.config import REQUIRED_HEADERS

if TYPE_CHECKING:
    from collections.abc import Sequence


@dataclass(frozen=True)
class HeaderMap:
    """Original source header for each canonical field (None when absent)."""

    date: str | None = None
    person: str | None = None
    miles_run: str | None = None

    @property
    def is_complete(self) -> bool:
        return None not in (self.date, self.person, self.miles_run)

    def column_for(self, canonical: str) -> str | None:
        """Return the source header for a canonical field name."""
        return getattr(self, _ATTRIBUTE_FOR_FIELD[canonical])


_ATTRIBUTE_FOR_FIELD = {
    "date": "date",
    "person": "person",
    "miles run": "miles_run",
}


@dataclass
class HeaderValidation:
    """Outcome of matching a header line against the column contract."""

    header_map: HeaderMap
    errors: list[str] = field(default_factory=list)

    @property
    def is_valid(self) -> bool:
        return not self.errors and self.header_map.is_complete


def normalize_header(header: str) -> str:
    """Trim and lower-case a raw header for comparison."""
    return header.strip().lower()


def _accepted_spellings(canonical: str) -> tuple[str, str]:
    return canonical, canonical.replace(" ", "_")


def validate_headers(headers: Sequence[str]) -> HeaderValidation:
    """
    Resolve the canonical fields from an ordered list of raw headers.

    The first header (in input order) that matches a field wins. Extra
    headers are ignored.

    Args:
        headers: Header strings exactly as read from the first line.

    Returns:
        HeaderValidation carrying the original header strings, plus one
        "Missing required header" message per unmatched field.
    """
    normalized = [normalize_header(str(h)) for h in headers]
    resolved: dict[str, str] = {}
    errors: list[str] = []

    for canonical in REQUIRED_HEADERS:
        spellings = _accepted_spellings(canonical)
        position = next((i for i, h in enumerate(normalized) if h in spellings), None)
        if position is None:
            errors.append(f'Missing required header: "{canonical}"')
        else:
            resolved[_ATTRIBUTE_FOR_FIELD[canonical]] = headers[position]

    return HeaderValidation(header_map=HeaderMap(**resolved), errors=errors)
