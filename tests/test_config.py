"""
Tests for configuration defaults and validation.
"""

import sys
from pathlib import Path

project_root = Path(__file__).resolve().parent.parent
sys.path.insert(0, str(project_root))

from mileage.config import REQUIRED_HEADERS, load_config, validate_config


def test_config_validation():
    is_valid, errors = validate_config()
    assert is_valid, f"Configuration errors: {errors}"


def test_defaults():
    config = load_config()
    assert config["required_headers"] == ("date", "person", "miles run")
    assert config["max_distance"] == 200.0
    assert config["stale_warning_threshold"] == 10
    assert config["max_file_size_bytes"] == 10 * 1024 * 1024
    assert REQUIRED_HEADERS == config["required_headers"]
