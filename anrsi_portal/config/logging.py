"""Logging for the ANRSI portal toolkit.

Records carry the request they were emitted for (request id, method,
path) and, inside an editing session, the session id. The service binds
these values per request with ``bind_log_context``; CLI runs have none.
"""

import json
import logging
import sys
from collections.abc import Iterator
from contextlib import contextmanager
from contextvars import ContextVar
from pathlib import Path
from typing import Any

ROOT_LOGGER = "anrsi_portal"

_log_context: ContextVar[dict[str, str] | None] = ContextVar("anrsi_log_context", default=None)


def current_log_context() -> dict[str, str]:
    return dict(_log_context.get() or {})


@contextmanager
def bind_log_context(**values: Any) -> Iterator[dict[str, str]]:
    """Add values (request_id, path, editor_session...) to every record logged inside the block."""
    merged = current_log_context()
    merged.update({name: str(value) for name, value in values.items() if value is not None})
    token = _log_context.set(merged)
    try:
        yield merged
    finally:
        _log_context.reset(token)


class LogContextFilter(logging.Filter):
    """Copy the bound request context onto each record."""

    def filter(self, record: logging.LogRecord) -> bool:
        context = current_log_context()
        record.log_context = context
        record.context_label = (
            "[" + " ".join(f"{name}={value}" for name, value in context.items()) + "] "
            if context
            else ""
        )
        return True


class JSONLineFormatter(logging.Formatter):
    """One JSON object per line, with the request context and portal error code."""

    def format(self, record: logging.LogRecord) -> str:
        log_entry: dict[str, Any] = {
            "timestamp": self.formatTime(record),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "location": {
                "file": record.filename,
                "function": record.funcName,
                "line": record.lineno,
            },
        }

        context = getattr(record, "log_context", None)
        if context:
            log_entry["request"] = context

        error_code = getattr(record, "error_code", None)
        if error_code:
            log_entry["error_code"] = error_code

        if record.exc_info and record.exc_info[0] is not None:
            log_entry["exception"] = {
                "type": record.exc_info[0].__name__,
                "message": str(record.exc_info[1]) if record.exc_info[1] else None,
                "traceback": self.formatException(record.exc_info),
            }

        return json.dumps(log_entry, ensure_ascii=False)


def setup_logging(
    level: str = "INFO",
    log_file: Path | None = None,
    json_format: bool = False,
) -> logging.Logger:
    """Configure the ``anrsi_portal`` logger tree.

    Args:
        level: Logging level (DEBUG, INFO, WARNING, ERROR).
        log_file: Optional file path for log output.
        json_format: If True, output logs in JSON format.

    Returns:
        Configured package logger.
    """
    logger = logging.getLogger(ROOT_LOGGER)
    logger.setLevel(getattr(logging, level.upper(), logging.INFO))
    logger.handlers.clear()

    if json_format:
        formatter: logging.Formatter = JSONLineFormatter()
    else:
        formatter = logging.Formatter(
            "%(asctime)s | %(levelname)-8s | %(name)s | %(context_label)s%(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        )

    handlers: list[logging.Handler] = [logging.StreamHandler(sys.stderr)]
    if log_file:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        handlers.append(logging.FileHandler(log_file, encoding="utf-8"))
    for handler in handlers:
        handler.addFilter(LogContextFilter())
        handler.setFormatter(formatter)
        logger.addHandler(handler)

    return logger


def get_logger(name: str | None = None) -> logging.Logger:
    """Get a logger inside the package namespace."""
    if name:
        return logging.getLogger(f"{ROOT_LOGGER}.{name}")
    return logging.getLogger(ROOT_LOGGER)
