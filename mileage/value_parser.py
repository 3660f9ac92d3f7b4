"""
Numeric parsing for the `miles run` column.

Accepts plain decimals plus a few spreadsheet habits: thousands separators,
surrounding whitespace and a trailing unit ("5.2 mi", "3 miles").
Values that do not reduce to a finite number return None.
"""

from __future__ import annotations

import re
from typing import Any

import numpy as np
import pandas as pd

_UNIT_SUFFIX = re.compile(r"\s*(mi|mile|miles)\.?$", flags=re.IGNORECASE)
_THOUSANDS = re.compile(r"(?<=\d),(?=\d{3}(?:\D|$))")
_NUMBER = re.compile(r"[+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?")


def _normalize_number_string(text: str) -> str:
    cleaned = text.replace("\u00a0", " ").strip()
    cleaned = _UNIT_SUFFIX.sub("", cleaned)
    cleaned = _THOUSANDS.sub("", cleaned)
    return cleaned.strip()


def parse_distance_value(value: Any) -> float | None:
    """
    Convert a raw distance cell into a float.

    Returns:
        The parsed value, or None when the cell is empty, non-numeric,
        infinite or NaN.
    """
    if value is None:
        return None

    if isinstance(value, (int, float)) and not isinstance(value, bool):
        numeric = float(value)
        return numeric if np.isfinite(numeric) else None

    if pd.isna(value):
        return None

    cleaned = _normalize_number_string(str(value))
    if not _NUMBER.fullmatch(cleaned):
        return None

    numeric = float(cleaned)
    if not np.isfinite(numeric):
        return None
    return numeric
