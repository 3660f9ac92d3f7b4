"""
Configuration Module - Centralized Configuration Hub

Contains all configurable parameters for the mileage pipeline:
- Directory paths
- Column contract (required canonical headers)
- Validation limits (sanity ceiling, stale-record threshold)
- File acceptance rules
- Chart date formats
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any


# ============================================================================
# DIRECTORY PATHS
# ============================================================================

# Project root directory (parent of mileage/)
PROJECT_ROOT = Path(__file__).resolve().parent.parent

# Configuration file directory
CONFIG_DIR = PROJECT_ROOT / "config"

# Debug log written by mileage.logger
LOG_FILE = PROJECT_ROOT / "system_debug.log"


# ============================================================================
# COLUMN CONTRACT
# ============================================================================
# Canonical field names in the order they are checked. A source header matches
# when, trimmed and lower-cased, it equals the field name or the field name
# with its internal space replaced by an underscore.

REQUIRED_HEADERS = ("date", "person", "miles run")


# ============================================================================
# FILE ACCEPTANCE
# ============================================================================

ALLOWED_SUFFIXES = (".csv", ".txt")
ALLOWED_MIME_TYPES = ("text/csv", "application/vnd.ms-excel", "text/plain")
CSV_ENCODINGS = ["utf-8-sig", "latin-1"]
CSV_DELIMITERS = [",", ";", "\t", "|"]


# ============================================================================
# CHART FORMATS
# ============================================================================

CHART_DISPLAY_FORMAT = "%b %d, %Y"


# ============================================================================
# CONFIG LOADING AND VALIDATION
# ============================================================================

_SETTINGS_DEFAULT: dict[str, Any] = {
    # Distances above this many miles are rejected
    "max_distance": 200.0,
    # Stale-record warning fires only above this many records
    "stale_warning_threshold": 10,
    # 10 MB
    "max_file_size_bytes": 10 * 1024 * 1024,
}


def _load_settings_from_json(defaults: dict[str, Any]) -> dict[str, Any]:
    """Load settings from JSON file, merge with defaults."""
    settings_file = CONFIG_DIR / "settings.json"
    if settings_file.exists():
        try:
            with open(settings_file, "r") as f:
                data = json.load(f)
                if "settings" in data:
                    merged = defaults.copy()
                    merged.update(data["settings"])
                    return merged
        except Exception as e:
            import warnings
            warnings.warn(f"Failed to load settings from JSON: {e}. Using defaults.")
    return defaults


# Load configuration from JSON if available, otherwise use hardcoded defaults
SETTINGS = _load_settings_from_json(_SETTINGS_DEFAULT)

MAX_DISTANCE: float = float(SETTINGS["max_distance"])
STALE_WARNING_THRESHOLD: int = int(SETTINGS["stale_warning_threshold"])
MAX_FILE_SIZE_BYTES: int = int(SETTINGS["max_file_size_bytes"])


def load_config() -> dict[str, Any]:
    """
    Load and return all configuration as a dictionary.

    Returns:
        Dictionary with all configuration values.
    """
    return {
        "project_root": PROJECT_ROOT,
        "config_dir": CONFIG_DIR,
        "log_file": LOG_FILE,
        "required_headers": REQUIRED_HEADERS,
        "allowed_suffixes": ALLOWED_SUFFIXES,
        "allowed_mime_types": ALLOWED_MIME_TYPES,
        "max_distance": MAX_DISTANCE,
        "stale_warning_threshold": STALE_WARNING_THRESHOLD,
        "max_file_size_bytes": MAX_FILE_SIZE_BYTES,
        "chart_display_format": CHART_DISPLAY_FORMAT,
    }


def validate_config() -> tuple[bool, list[str]]:
    """
    Validate configuration settings.

    Returns:
        Tuple of (is_valid, list_of_errors).
    """
    errors = []

    if MAX_DISTANCE <= 0:
        errors.append(f"max_distance must be positive: {MAX_DISTANCE}")

    if STALE_WARNING_THRESHOLD < 0:
        errors.append(f"stale_warning_threshold cannot be negative: {STALE_WARNING_THRESHOLD}")

    if MAX_FILE_SIZE_BYTES <= 0:
        errors.append(f"max_file_size_bytes must be positive: {MAX_FILE_SIZE_BYTES}")

    unknown = set(SETTINGS) - set(_SETTINGS_DEFAULT)
    if unknown:
        errors.append(f"Unknown settings keys: {sorted(unknown)}")

    return len(errors) == 0, errors


if __name__ == "__main__":
    print("=" * 60)
    print("Configuration Validation")
    print("=" * 60)

    is_valid, errors = validate_config()

    if is_valid:
        print("[OK] Configuration is valid")
    else:
        print("[ERROR] Configuration has errors:")
        for error in errors:
            print(f"  - {error}")

    print(f"\nRequired headers: {', '.join(REQUIRED_HEADERS)}")
    print(f"Max distance: {MAX_DISTANCE}")
    print(f"Stale warning threshold: {STALE_WARNING_THRESHOLD}")
    print(f"Max file size: {MAX_FILE_SIZE_BYTES} bytes")
