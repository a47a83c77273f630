# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

"""loguru setup with a per-request correlation id."""

from __future__ import annotations

import logging
import os
import sys
from contextvars import ContextVar
from pathlib import Path

from loguru import logger as _logger

from .sensitive_filter import sanitize_record

_FMT = (
    "<green>{time:YYYY-MM-DD HH:mm:ss.SSS}</green> | "
    "<lvl>{level:<8}</lvl> | "
    "<magenta>{extra[correlation_id]}</magenta> | "
    "<cyan>{name}</cyan>:<cyan>{line}</cyan> | "
    "<lvl>{message}</lvl>"
)

DEFAULT_LOG_FILE = Path(__file__).resolve().parents[2] / "instance" / "inkpress.log"

# Third-party loggers that are too chatty at DEBUG
_QUIET_LOGGERS: dict[str, int] = {
    "werkzeug": logging.INFO,
    "sqlalchemy.engine": logging.WARNING,
    "sqlalchemy.pool": logging.WARNING,
}

_NO_CORRELATION = "-"
_correlation_id: ContextVar[str] = ContextVar("correlation_id", default=_NO_CORRELATION)


class _StdlibBridge(logging.Handler):
    """Forwards stdlib ``logging`` records (flask, werkzeug, sqlalchemy) to loguru."""

    def emit(self, record: logging.LogRecord) -> None:
        try:
            level: str | int = _logger.level(record.levelname).name
        except ValueError:
            level = record.levelno
        _logger.bind(correlation_id=_correlation_id.get()).opt(
            depth=6, exception=record.exc_info
        ).log(level, record.getMessage())


class ContextualLogger:
    """Proxy for loguru that binds the current correlation id on every call."""

    def __getattr__(self, name):  # pragma: no cover
        return getattr(_logger.bind(correlation_id=_correlation_id.get()), name)


def set_correlation_id(value: str | None) -> None:
    _correlation_id.set(value or _NO_CORRELATION)


def get_correlation_id() -> str:
    return _correlation_id.get()


def clear_correlation_id() -> None:
    _correlation_id.set(_NO_CORRELATION)


def _resolve_log_file() -> Path:
    return Path(os.getenv("LOG_FILE") or DEFAULT_LOG_FILE)


def setup_logging(level: str | None = None, *, debug_mode: bool = False) -> None:
    """Install stderr and rotating file sinks. Safe to call more than once."""
    level = (level or ("DEBUG" if debug_mode else os.getenv("LOG_LEVEL", "INFO"))).upper()
    log_file = _resolve_log_file()
    log_file.parent.mkdir(parents=True, exist_ok=True)

    _logger.remove()
    _logger.configure(extra={"correlation_id": _NO_CORRELATION})
    sink_options = {
        "level": level,
        "format": _FMT,
        "filter": sanitize_record,
        "backtrace": False,
        "diagnose": False,
    }
    _logger.add(sys.stderr, colorize=True, **sink_options)
    _logger.add(
        str(log_file),
        colorize=False,
        rotation=os.getenv("LOG_ROTATION", "10 MB"),
        retention=os.getenv("LOG_RETENTION", "14 days"),
        enqueue=True,
        encoding="utf-8",
        **sink_options,
    )

    logging.basicConfig(handlers=[_StdlibBridge()], level=0, force=True)
    for name, quiet_level in _QUIET_LOGGERS.items():
        logging.getLogger(name).setLevel(quiet_level)


logger = ContextualLogger()

__all__ = [
    "DEFAULT_LOG_FILE",
    "clear_correlation_id",
    "get_correlation_id",
    "logger",
    "set_correlation_id",
    "setup_logging",
]
