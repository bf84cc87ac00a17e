"""
Logging setup for the web app and the CLI.

Adds a TRACE level below DEBUG, console and file handlers restricted to the
levels listed in ``LOG_LEVELS``, and two helpers that keep database and cache
log lines in a fixed, greppable shape.
"""
from __future__ import annotations

import functools
import logging
import os
import time
from typing import Any, Callable, Iterable, Optional, TypeVar

from patternhub.core.config import settings

F = TypeVar("F", bound=Callable[..., Any])

TRACE_LEVEL = 5
logging.addLevelName(TRACE_LEVEL, "TRACE")

LOG_FORMAT = "%(asctime)s | %(levelname)s | %(name)s | %(message)s"

# Markdown bodies and localized-name dicts can be long
MAX_ARG_REPR = 80

NOISY_LOGGERS = ("passlib", "multipart", "markdown_it", "httpx", "httpcore")


def _trace(self: logging.Logger, message: str, *args, **kwargs) -> None:
    if self.isEnabledFor(TRACE_LEVEL):
        self._log(TRACE_LEVEL, message, args, **kwargs)


logging.Logger.trace = _trace  # type: ignore[attr-defined]


class LogLevelFilter(logging.Filter):
    """Let through only records whose level is in *allowed_levels*."""

    def __init__(self, allowed_levels: set[int]) -> None:
        super().__init__()
        self._allowed_levels = allowed_levels

    def filter(self, record: logging.LogRecord) -> bool:
        return record.levelno in self._allowed_levels


def level_number(name: Optional[str], default: int = logging.INFO) -> int:
    if not name:
        return default
    name = name.strip().upper()
    if name == "TRACE":
        return TRACE_LEVEL
    value = logging.getLevelName(name)
    return value if isinstance(value, int) else default


def allowed_levels(names: Optional[str]) -> set[int]:
    """
    Parse a comma separated level list such as ``"INFO,ERROR"``.

    Unknown names are ignored. CRITICAL is always allowed, and an empty or
    fully unknown list falls back to TRACE, INFO, WARNING and ERROR.
    """
    fallback = {TRACE_LEVEL, logging.INFO, logging.WARNING, logging.ERROR, logging.CRITICAL}
    parsed = {level_number(part, default=-1) for part in (names or "").split(",")}
    parsed.discard(-1)
    if not parsed:
        return fallback
    return parsed | {logging.CRITICAL}


def configure_logging(quiet: Iterable[str] = NOISY_LOGGERS) -> None:
    log_dir = os.path.dirname(settings.LOG_FILE_PATH)
    if log_dir:
        os.makedirs(log_dir, exist_ok=True)

    root = logging.getLogger()
    root.setLevel(level_number(settings.LOG_LEVEL))
    root.handlers.clear()

    formatter = logging.Formatter(LOG_FORMAT)
    level_filter = LogLevelFilter(allowed_levels(settings.LOG_LEVELS))
    for handler in (
        logging.StreamHandler(),
        logging.FileHandler(settings.LOG_FILE_PATH, encoding="utf-8"),
    ):
        handler.setFormatter(formatter)
        handler.addFilter(level_filter)
        root.addHandler(handler)

    for name in quiet:
        logging.getLogger(name).setLevel(logging.WARNING)


def _short_repr(value: Any) -> str:
    text = repr(value) if isinstance(value, (str, bytes)) else str(value)
    if len(text) > MAX_ARG_REPR:
        return f"{text[:MAX_ARG_REPR]}...({len(text)} chars)"
    return text


def log_db_timing(func: F) -> F:
    """
    Log each repository call as ``DB_OP | <qualname> | duration=..ms | args=(..)``.

    Successful calls log at TRACE, failures at ERROR before re-raising.
    """
    logger = logging.getLogger(func.__module__)

    @functools.wraps(func)
    def wrapper(*args, **kwargs):
        shown = [_short_repr(arg) for arg in args[1:]]
        shown.extend(f"{key}={_short_repr(value)}" for key, value in kwargs.items())
        args_str = ", ".join(shown)

        started = time.perf_counter()
        try:
            result = func(*args, **kwargs)
        except Exception as exc:
            logger.error(
                "DB_OP | %s | duration=%.3fms | args=(%s) | error=%s",
                func.__qualname__,
                (time.perf_counter() - started) * 1000,
                args_str,
                exc,
            )
            raise
        logger.trace(  # type: ignore[attr-defined]
            "DB_OP | %s | duration=%.3fms | args=(%s)",
            func.__qualname__,
            (time.perf_counter() - started) * 1000,
            args_str,
        )
        return result

    return wrapper  # type: ignore[return-value]


def log_cache_operation(
    logger: logging.Logger, operation: str, key: str, hit: Optional[bool] = None
) -> None:
    """Log a cache access as ``CACHE | <op> | key=.. [| hit=..]`` at TRACE."""
    if hit is None:
        logger.trace("CACHE | %s | key=%s", operation, key)  # type: ignore[attr-defined]
    else:
        logger.trace("CACHE | %s | key=%s | hit=%s", operation, key, hit)  # type: ignore[attr-defined]
