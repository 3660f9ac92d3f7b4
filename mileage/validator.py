"""
Row validation for uploaded mileage files.

Each data row is checked field by field against the resolved HeaderMap. All
problems in a row are collected before returning, and a Record is built only
when the row is completely clean.

Error kinds:
- missing:    required value empty after trimming
- invalid:    value parsed but breaks a format or range rule
- type_error: value could not be coerced to the expected type
"""

from __future__ import annotations

from dataclasses import asdict, dataclass, field
from datetime import datetime
from typing import TYPE_CHECKING, Any, Literal

from mileage.config import MAX_DISTANCE
from mileage.date_parser import parse_date
from mileage.value_parser import parse_distance_value

if TYPE_CHECKING:
    from collections.abc import Iterable, Mapping

    from mileage.header_parser import HeaderMap

ErrorKind = Literal["missing", "invalid", "type_error"]

# Row index reserved for file-level and header-level failures
FILE_LEVEL_ROW = 0


@dataclass(frozen=True)
class Record:
    """One validated observation of a person running a distance on a date."""

    date: datetime
    person: str
    distance: float
    source_row_index: int

    def to_dict(self) -> dict[str, Any]:
        return {
            "date": self.date.isoformat(),
            "person": self.person,
            "distance": self.distance,
            "source_row_index": self.source_row_index,
        }


@dataclass(frozen=True)
class ValidationError:
    """A single field problem; row 0 means the file or its header line."""

    source_row_index: int
    field: str
    value: str
    message: str
    kind: ErrorKind

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


@dataclass
class RowValidation:
    record: Record | None = None
    errors: list[ValidationError] = field(default_factory=list)


def _cell(row: Mapping[str, str | None], column: str | None) -> str:
    if column is None:
        return ""
    value = row.get(column)
    if value is None:
        return ""
    return str(value).strip()


def validate_row(
    row: Mapping[str, str | None],
    row_index: int,
    header_map: HeaderMap,
) -> RowValidation:
    """
    Validate one raw row.

    Args:
        row: Raw column name -> cell text (None when the row was short).
        row_index: 1-based data row number (header line excluded).
        header_map: Complete mapping of canonical fields to source headers.

    Returns:
        RowValidation with a Record and no errors, or no Record and every
        error found in the row.
    """
    if not header_map.is_complete:
        raise ValueError("Row validation requires a complete HeaderMap")

    errors: list[ValidationError] = []

    date_text = _cell(row, header_map.date)
    person = _cell(row, header_map.person)
    miles_text = _cell(row, header_map.miles_run)

    # Date
    parsed_date: datetime | None = None
    if not date_text:
        errors.append(ValidationError(row_index, "date", "", "Date is required", "missing"))
    else:
        parsed_date = parse_date(date_text)
        if parsed_date is None:
            errors.append(
                ValidationError(
                    row_index,
                    "date",
                    date_text,
                    "Invalid date format. Expected: YYYY-MM-DD or MM/DD/YYYY",
                    "invalid",
                )
            )

    # Person
    if not person:
        errors.append(ValidationError(row_index, "person", "", "Person name is required", "missing"))

    # Miles
    distance: float | None = None
    if not miles_text:
        errors.append(ValidationError(row_index, "miles run", "", "Miles run is required", "missing"))
    else:
        distance = parse_distance_value(miles_text)
        if distance is None:
            errors.append(
                ValidationError(row_index, "miles run", miles_text, "Miles must be a valid number", "type_error")
            )
        elif distance < 0:
            errors.append(
                ValidationError(row_index, "miles run", miles_text, "Miles cannot be negative", "invalid")
            )
        elif distance > MAX_DISTANCE:
            # Blocking, not advisory
            errors.append(
                ValidationError(
                    row_index,
                    "miles run",
                    miles_text,
                    f"Miles seems unusually high (>{MAX_DISTANCE:g}). Please verify.",
                    "invalid",
                )
            )

    if errors or parsed_date is None or not person or distance is None:
        return RowValidation(record=None, errors=errors)

    return RowValidation(
        record=Record(date=parsed_date, person=person, distance=distance, source_row_index=row_index)
    )


def format_errors(errors: Iterable[ValidationError]) -> list[str]:
    """
    Group errors by row for display.

    Row 0 (file/header) messages are joined with "; ". Other rows render as
    "Row N: field: message, field: message", ordered by row number.
    """
    by_row: dict[int, list[ValidationError]] = {}
    for error in errors:
        by_row.setdefault(error.source_row_index, []).append(error)

    lines = []
    for row, row_errors in sorted(by_row.items()):
        if row == FILE_LEVEL_ROW:
            lines.append("; ".join(e.message for e in row_errors))
        else:
            details = ", ".join(f"{e.field}: {e.message}" for e in row_errors)
            lines.append(f"Row {row}: {details}")
    return lines
