"""
Logging setup for the mileage pipeline.

Every module logs through a child of the `mileage_dashboard` logger. The
console shows INFO and up; the debug file (opened on first write) gets
everything. `debug_watcher` wraps the pipeline entry points.
"""

import functools
import logging
import traceback
from time import perf_counter
from typing import Any, Callable, TypeVar

from mileage.config import LOG_FILE

F = TypeVar("F", bound=Callable[..., Any])

ROOT_LOGGER_NAME = "mileage_dashboard"

_FORMATTER = logging.Formatter(
    "[%(asctime)s] [%(levelname)s] [%(module)s]: %(message)s",
    datefmt="%Y-%m-%d %H:%M:%S",
)

_logger = logging.getLogger(ROOT_LOGGER_NAME)
_logger.setLevel(logging.DEBUG)


def _attach(handler: logging.Handler, level: int) -> None:
    handler.setLevel(level)
    handler.setFormatter(_FORMATTER)
    _logger.addHandler(handler)


# Re-imports must not stack handlers
if not _logger.handlers:
    _attach(logging.StreamHandler(), logging.INFO)
    _attach(logging.FileHandler(LOG_FILE, mode="a", encoding="utf-8", delay=True), logging.DEBUG)


def get_logger(name: str | None = None) -> logging.Logger:
    """Child logger `mileage_dashboard.<name>`, or the package logger itself."""
    if name:
        return logging.getLogger(f"{ROOT_LOGGER_NAME}.{name}")
    return _logger


def _describe_call(args: tuple, kwargs: dict) -> str:
    """Short one-line rendering of a call's arguments; paths and counts, not payloads."""
    parts = []
    for arg in args:
        if isinstance(arg, (list, tuple)):
            parts.append(f"<{len(arg)} items>")
        else:
            parts.append(repr(arg)[:80])
    parts.extend(f"{key}={value!r:.40}" for key, value in kwargs.items())
    return ", ".join(parts)


def debug_watcher(func: F) -> F:
    """
    Log a call to `func` with its arguments and how long it took.

    A failure is logged with its elapsed time, the traceback goes to the
    debug file only, and the exception propagates unchanged.
    """
    logger = get_logger(func.__module__)

    @functools.wraps(func)
    def wrapper(*args: Any, **kwargs: Any) -> Any:
        logger.info(f"{func.__qualname__}({_describe_call(args, kwargs)})")
        started = perf_counter()
        try:
            result = func(*args, **kwargs)
        except Exception as exc:
            logger.error(f"{func.__qualname__} failed after {perf_counter() - started:.3f}s: {exc!r}")
            logger.debug(traceback.format_exc())
            raise
        logger.info(f"{func.__qualname__} finished in {perf_counter() - started:.3f}s")
        return result

    return wrapper  # type: ignore[return-value]
