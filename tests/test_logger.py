"""
Unit tests for the logger tree and the debug_watcher decorator.
"""

import logging
import sys
from pathlib import Path

import pytest

project_root = Path(__file__).resolve().parent.parent
sys.path.insert(0, str(project_root))

from mileage.logger import ROOT_LOGGER_NAME, debug_watcher, get_logger


def test_child_logger_names():
    assert get_logger("ingestion").name == "mileage_dashboard.ingestion"
    assert get_logger().name == ROOT_LOGGER_NAME


def test_handlers_attached_once():
    import importlib

    from mileage import logger as logger_module

    before = len(logging.getLogger(ROOT_LOGGER_NAME).handlers)
    importlib.reload(logger_module)
    assert len(logging.getLogger(ROOT_LOGGER_NAME).handlers) == before


class TestDebugWatcher:
    """Tests for debug_watcher."""

    def test_returns_result_and_keeps_name(self, caplog):
        @debug_watcher
        def add_runs(a, b):
            return a + b

        caplog.set_level(logging.INFO, logger=ROOT_LOGGER_NAME)
        assert add_runs(2, 3) == 5
        assert add_runs.__name__ == "add_runs"
        messages = [r.getMessage() for r in caplog.records]
        assert any("add_runs(2, 3)" in m for m in messages)
        assert any("finished in" in m for m in messages)

    def test_sequences_summarised_by_length(self, caplog):
        @debug_watcher
        def count(records):
            return len(records)

        caplog.set_level(logging.INFO, logger=ROOT_LOGGER_NAME)
        assert count([1, 2, 3]) == 3
        assert any("<3 items>" in r.getMessage() for r in caplog.records)

    def test_exception_logged_and_reraised(self, caplog):
        @debug_watcher
        def explode():
            raise ValueError("bad row")

        caplog.set_level(logging.DEBUG, logger=ROOT_LOGGER_NAME)
        with pytest.raises(ValueError, match="bad row"):
            explode()
        errors = [r for r in caplog.records if r.levelno == logging.ERROR]
        assert len(errors) == 1
        assert "explode failed after" in errors[0].getMessage()
        assert any("Traceback" in r.getMessage() for r in caplog.records if r.levelno == logging.DEBUG)
