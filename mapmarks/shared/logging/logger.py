"""Structured logging utilities."""

from __future__ import annotations

import logging
import os
import sys
from contextvars import ContextVar
from typing import Any

from loguru import logger as _logger

from .sensitive_filter import sanitize_record

_FMT = (
    "<green>{time:YYYY-MM-DD HH:mm:ss.SSS}</green> | "
    "<lvl>{level:<8}</lvl> | "
    "<magenta>{extra[correlation_id]}</magenta> | "
    "<cyan>{name}</cyan>:<cyan>{line}</cyan> | "
    "<lvl>{message}</lvl>"
)
_DEFAULT_LOG_FILE = os.path.join("logs", "mapmarks.log")

_CORRELATION_ID: ContextVar[str] = ContextVar("correlation_id", default="-")

_logger.configure(extra={"correlation_id": "-"})


class _InterceptHandler(logging.Handler):
    """Route stdlib records (werkzeug, sqlalchemy) into loguru."""

    def emit(self, record: logging.LogRecord) -> None:
        try:
            level: str | int = _logger.level(record.levelname).name
        except ValueError:
            level = record.levelno
        _logger.bind(correlation_id=_CORRELATION_ID.get()).opt(
            depth=6, exception=record.exc_info
        ).log(level, record.getMessage())


class ContextualLogger:
    """Proxy for loguru that injects correlation ids via ContextVar."""

    def __getattr__(self, name):  # pragma: no cover
        bound = _logger.bind(correlation_id=_CORRELATION_ID.get())
        return getattr(bound, name)


def set_correlation_id(value: str | None) -> None:
    _CORRELATION_ID.set(value or "-")


def get_correlation_id() -> str:
    return _CORRELATION_ID.get()


def clear_correlation_id() -> None:
    _CORRELATION_ID.set("-")


def _sink_options(level: str) -> dict[str, Any]:
    return {
        "level": level,
        "filter": sanitize_record,
        "backtrace": False,
        "diagnose": False,
    }


def setup_logging(level: str | None = None, *, debug_mode: bool = False) -> None:
    """(Re)configure sinks. Safe to call more than once.

    ``LOG_LEVEL`` and ``LOG_FILE`` override the defaults; ``LOG_JSON=1`` makes
    the file sink emit one JSON object per line.
    """

    level = (level or os.getenv("LOG_LEVEL") or ("DEBUG" if debug_mode else "INFO")).upper()
    log_file = os.getenv("LOG_FILE") or _DEFAULT_LOG_FILE
    directory = os.path.dirname(log_file)
    if directory:
        os.makedirs(directory, exist_ok=True)

    _logger.remove()
    _logger.add(sys.stderr, format=_FMT, colorize=True, **_sink_options(level))
    _logger.add(
        log_file,
        format=_FMT,
        colorize=False,
        serialize=os.getenv("LOG_JSON", "").lower() in ("1", "true", "yes"),
        enqueue=True,
        rotation="5 MB",
        retention=5,
        encoding="utf-8",
        **_sink_options(level),
    )

    logging.basicConfig(handlers=[_InterceptHandler()], level=0, force=True)
    logging.getLogger("werkzeug").setLevel(logging.WARNING if not debug_mode else logging.INFO)
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)


logger = ContextualLogger()

__all__ = [
    "logger",
    "setup_logging",
    "set_correlation_id",
    "clear_correlation_id",
    "get_correlation_id",
]
