"""
Data ingestion module.

Runs one uploaded file through header validation, row validation and the
data-quality pass, producing a ParseResult:

    START -> HEADER_CHECK -> (FAILED | ROW_STREAMING) -> DONE

A file that cannot be read or tokenized skips HEADER_CHECK entirely and
returns a single file-level error.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import TYPE_CHECKING, Any

import pandas as pd

from mileage.file_loader import CSVLoadError, load_csv, load_csv_text
from mileage.header_parser import validate_headers
from mileage.logger import debug_watcher, get_logger
from mileage.quality import generate_warnings
from mileage.validator import FILE_LEVEL_ROW, Record, ValidationError, validate_row

if TYPE_CHECKING:
    from collections.abc import Iterator, Sequence
    from datetime import datetime

logger = get_logger(__name__)


class ParseStage(Enum):
    START = "start"
    HEADER_CHECK = "header_check"
    FAILED = "failed"
    ROW_STREAMING = "row_streaming"
    DONE = "done"


@dataclass
class ParseResult:
    success: bool
    data: list[Record] = field(default_factory=list)
    errors: list[ValidationError] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {
            "success": self.success,
            "data": [r.to_dict() for r in self.data],
            "errors": [e.to_dict() for e in self.errors],
            "warnings": list(self.warnings),
        }


def file_error(source: str, reason: str) -> ParseResult:
    """Result for input that never reached header validation."""
    error = ValidationError(
        source_row_index=FILE_LEVEL_ROW,
        field="file",
        value=source,
        message=f"Failed to parse CSV: {reason}",
        kind="invalid",
    )
    return ParseResult(success=False, errors=[error])


def _cell_value(value: Any) -> str | None:
    if value is None or (not isinstance(value, str) and pd.isna(value)):
        return None
    return str(value)


def _iter_raw_rows(frame: pd.DataFrame, headers: Sequence[str]) -> Iterator[dict[str, str | None]]:
    """Yield each data row as raw header -> cell text (first duplicate header wins)."""
    for values in frame.iloc[1:].itertuples(index=False, name=None):
        row: dict[str, str | None] = {}
        for header, value in zip(headers, values):
            row.setdefault(header, _cell_value(value))
        yield row


def _enter(stage: ParseStage) -> None:
    logger.debug(f"Parse stage: {stage.value}")


def parse_frame(frame: pd.DataFrame, now: datetime | None = None) -> ParseResult:
    """
    Validate a tokenized file whose first row holds the header line.

    Args:
        frame: All-string DataFrame from mileage.file_loader (header=None).
        now: Reference moment for date-based warnings.

    Returns:
        ParseResult with records and errors in file order.
    """
    _enter(ParseStage.HEADER_CHECK)
    if frame.empty:
        return file_error("", "File contains no header line")

    headers = [str(_cell_value(h) or "") for h in frame.iloc[0].tolist()]
    header_check = validate_headers(headers)

    if not header_check.is_valid:
        _enter(ParseStage.FAILED)
        joined = ", ".join(headers)
        errors = [
            ValidationError(FILE_LEVEL_ROW, "headers", joined, message, "invalid")
            for message in header_check.errors
        ]
        logger.warning(f"Header check failed: {'; '.join(header_check.errors)}")
        return ParseResult(success=False, errors=errors)

    _enter(ParseStage.ROW_STREAMING)
    records: list[Record] = []
    errors: list[ValidationError] = []
    row_index = 0

    for raw_row in _iter_raw_rows(frame, headers):
        row_index += 1
        validation = validate_row(raw_row, row_index, header_check.header_map)
        if validation.record is not None:
            records.append(validation.record)
        if validation.errors:
            logger.debug(f"Row {row_index}: {len(validation.errors)} error(s)")
            errors.extend(validation.errors)

    warnings = generate_warnings(records, now=now)
    _enter(ParseStage.DONE)
    logger.info(
        f"Parsed {row_index} rows, {len(records)} valid, "
        f"{len(errors)} errors, {len(warnings)} warnings"
    )
    return ParseResult(success=not errors, data=records, errors=errors, warnings=warnings)


def parse_csv_text(text: str, *, source: str = "<text>", now: datetime | None = None) -> ParseResult:
    """Parse already-decoded CSV text."""
    _enter(ParseStage.START)
    try:
        frame = load_csv_text(text)
    except CSVLoadError as exc:
        logger.error(f"Failed to load {source}: {exc}")
        return file_error(source, str(exc))
    return parse_frame(frame, now=now)


@debug_watcher
def parse_csv_file(path: Path | str, *, now: datetime | None = None) -> ParseResult:
    """
    Parse a CSV/TXT file from disk.

    File acceptance (type, size, emptiness) is expected to have been checked
    with mileage.file_loader.validate_file; read and tokenizer failures are
    reported as a single row-0 error rather than raised.
    """
    _enter(ParseStage.START)
    file_path = Path(path)
    try:
        frame = load_csv(file_path)
    except CSVLoadError as exc:
        logger.error(f"Failed to load {file_path}: {exc}")
        return file_error(file_path.name, str(exc))
    return parse_frame(frame, now=now)
