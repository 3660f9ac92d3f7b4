"""
File loader utilities for delimited mileage files.

Reads CSV/TXT uploads into an all-string DataFrame with delimiter sniffing
and encoding fallback. Nothing is type-converted here; validation owns that.
"""

from __future__ import annotations

import csv
import io
import mimetypes
from dataclasses import dataclass
from pathlib import Path

import pandas as pd

from mileage.config import (
    ALLOWED_MIME_TYPES,
    ALLOWED_SUFFIXES,
    CSV_DELIMITERS,
    CSV_ENCODINGS,
    MAX_FILE_SIZE_BYTES,
)
from mileage.logger import get_logger

logger = get_logger(__name__)


class CSVLoadError(ValueError):
    """The input could not be read or tokenized as delimited text."""


@dataclass(frozen=True)
class FileCheck:
    valid: bool
    error: str | None = None


def validate_file(path: Path | str) -> FileCheck:
    """
    Acceptance checks done before parsing: type, size and emptiness.

    A file passes the type check when either its extension or its guessed
    MIME type is accepted.
    """
    file_path = Path(path)
    mime_type, _ = mimetypes.guess_type(file_path.name)
    has_valid_type = mime_type in ALLOWED_MIME_TYPES
    has_valid_extension = file_path.suffix.lower() in ALLOWED_SUFFIXES

    if not has_valid_type and not has_valid_extension:
        return FileCheck(False, "Please upload a CSV file (.csv extension)")

    try:
        size = file_path.stat().st_size
    except OSError as exc:
        return FileCheck(False, f"Cannot read file: {exc}")

    if size > MAX_FILE_SIZE_BYTES:
        return FileCheck(False, f"File size must be less than {MAX_FILE_SIZE_BYTES // (1024 * 1024)}MB")

    if size == 0:
        return FileCheck(False, "File is empty")

    return FileCheck(True)


def decode_bytes(raw: bytes, encodings: list[str] | None = None) -> str:
    """
    Decode with the first encoding that accepts the bytes.

    The default list ends with latin-1, which maps every byte, so invalid
    UTF-8 comes back as latin-1 text instead of an error. CSVLoadError is
    only reachable with a caller-supplied list of strict encodings.
    """
    last_error: Exception | None = None
    for candidate in encodings or CSV_ENCODINGS:
        try:
            return raw.decode(candidate)
        except UnicodeDecodeError as exc:
            last_error = exc
            continue
    raise CSVLoadError("Failed to decode file") from last_error


def sniff_csv_delimiter(sample: str) -> str | None:
    if not sample:
        return None
    try:
        dialect = csv.Sniffer().sniff(sample, delimiters="".join(CSV_DELIMITERS))
        return dialect.delimiter
    except csv.Error:
        return None


def _header_width(text: str, delimiter: str) -> int:
    for fields in csv.reader(io.StringIO(text), delimiter=delimiter):
        if fields:
            return len(fields)
    return 0


def load_csv_text(text: str, *, delimiter: str | None = None) -> pd.DataFrame:
    """
    Tokenize delimited text into a DataFrame of strings.

    The header line is kept as row 0 (header=None) so the original header
    strings, duplicates included, reach header validation untouched. Blank
    lines are skipped, fields beyond the header width are dropped and short
    rows are padded with missing values.

    Raises:
        CSVLoadError: No header line, or the text cannot be tokenized.
    """
    text = text.lstrip("\ufeff")
    if not text.strip():
        raise CSVLoadError("File contains no header line")

    sep = delimiter or sniff_csv_delimiter(text[:8192]) or ","
    width = _header_width(text, sep)

    try:
        return pd.read_csv(
            io.StringIO(text),
            sep=sep,
            header=None,
            dtype=str,
            keep_default_na=False,
            skip_blank_lines=True,
            engine="python",
            on_bad_lines=lambda fields: fields[:width],
        )
    except pd.errors.EmptyDataError as exc:
        raise CSVLoadError("File contains no header line") from exc
    except (pd.errors.ParserError, csv.Error) as exc:
        raise CSVLoadError(str(exc)) from exc


def load_csv(
    path: Path | str,
    *,
    delimiter: str | None = None,
    encoding: str | None = None,
) -> pd.DataFrame:
    """
    Read a file from disk and tokenize it.

    Raises:
        CSVLoadError: The file cannot be read, decoded or tokenized.
    """
    file_path = Path(path)
    try:
        raw = file_path.read_bytes()
    except OSError as exc:
        raise CSVLoadError(f"Cannot read {file_path.name}: {exc}") from exc

    text = decode_bytes(raw, [encoding] if encoding else None)
    logger.debug(f"Read {len(raw)} bytes from {file_path}")
    return load_csv_text(text, delimiter=delimiter)
