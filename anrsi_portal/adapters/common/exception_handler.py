"""Exception handling utilities for consistent error formatting.

This module formats exceptions as structured JSON, logs them consistently,
maps them to HTTP status codes and turns them into the messages shown to
editors.
"""

import json
import logging
import traceback
from typing import Any

from ...core.domain.exceptions import (
    ApiError,
    AuthenticationError,
    ConfigurationError,
    ContentError,
    ItemNotFoundError,
    PortalError,
    RequestRejectedError,
    ResourceNotFoundError,
    ServerError,
    ServerUnreachableError,
    UnknownLocaleError,
    UnknownPageKindError,
    ValidationError,
)

logger = logging.getLogger(__name__)


def format_exception_json(
    exc: Exception,
    include_trace: bool = False,
    extra_context: dict[str, Any] | None = None,
) -> dict[str, Any]:
    """Format any exception as structured JSON.

    Works with both PortalError and standard Python exceptions.

    Args:
        exc: The exception to format.
        include_trace: If True, include full stack trace.
        extra_context: Additional context to include in output.

    Returns:
        Dictionary with structured error information.
    """
    if isinstance(exc, PortalError):
        result = exc.to_dict(include_trace=include_trace)
        if extra_context:
            result.setdefault("context", {}).update(extra_context)
        return result

    tb = traceback.extract_tb(exc.__traceback__) if exc.__traceback__ else []
    last_frame = tb[-1] if tb else None

    result = {
        "error": {
            "type": type(exc).__name__,
            "code": "PYTHON_ERR",
            "message": str(exc),
        },
        "location": {
            "class": "<unknown>",
            "method": last_frame.name if last_frame else "<unknown>",
            "file": (
                last_frame.filename.split("\\")[-1].split("/")[-1] if last_frame else "<unknown>"
            ),
            "line": last_frame.lineno if last_frame else 0,
        },
    }

    if extra_context:
        result["context"] = extra_context

    if include_trace:
        result["stack_trace"] = [
            line.strip()
            for line in traceback.format_exception(type(exc), exc, exc.__traceback__)
            if line.strip()
        ]

    return result


def log_exception(
    exc: Exception,
    log: logging.Logger | None = None,
    level: int = logging.ERROR,
    extra_context: dict[str, Any] | None = None,
) -> None:
    """Log exception in structured JSON format.

    Args:
        exc: The exception to log.
        log: Logger instance to use (defaults to module logger).
        level: Logging level (default: ERROR).
        extra_context: Additional context to include.
    """
    log_instance = log or logger
    exc_data = format_exception_json(exc, include_trace=True, extra_context=extra_context)
    log_instance.log(
        level,
        json.dumps(exc_data, indent=2, ensure_ascii=False),
        extra={"error_code": get_error_code(exc)},
    )


def get_error_code(exc: Exception) -> str:
    """Get the error code from an exception ("ANR_API_002" or "PYTHON_ERR")."""
    if isinstance(exc, PortalError):
        return exc.error_code
    return "PYTHON_ERR"


def get_http_status_code(exc: Exception) -> int:
    """Map exception type to an HTTP status code for the service's responses.

    Backend failures keep the backend's status where one applies; an
    unreachable backend becomes 503.
    """
    if isinstance(exc, ValidationError):
        return 400
    if isinstance(exc, AuthenticationError):
        return exc.status_code if exc.status_code in (401, 403) else 401
    if isinstance(exc, RequestRejectedError):
        return exc.status_code or 400
    if isinstance(exc, ResourceNotFoundError | ItemNotFoundError | UnknownPageKindError):
        return 404
    if isinstance(exc, UnknownLocaleError):
        return 400
    if isinstance(exc, ServerUnreachableError):
        return 503
    if isinstance(exc, ServerError):
        return 502
    if isinstance(exc, ApiError):
        return exc.status_code or 502
    if isinstance(exc, ContentError):
        return 422
    if isinstance(exc, ConfigurationError):
        return 500
    if isinstance(exc, PortalError):
        return 500

    if isinstance(exc, ValueError):
        return 400
    if isinstance(exc, ConnectionError | TimeoutError):
        return 503

    return 500


def user_message(exc: Exception) -> str:
    """Editor-facing text for a failed operation."""
    if isinstance(exc, ServerUnreachableError):
        return "Cannot connect to server. Please check if the backend is running."
    if isinstance(exc, AuthenticationError):
        if exc.status_code == 403:
            return exc.server_message or "Access denied. You need ADMIN or EDITOR permissions."
        return "Authentication required. Please log in."
    if isinstance(exc, RequestRejectedError):
        if exc.status_code == 413:
            return "File is too large. Please choose a smaller file."
        return exc.server_message or "Invalid data. Please check all fields."
    if isinstance(exc, ResourceNotFoundError):
        return exc.server_message or "The requested content was not found."
    if isinstance(exc, ServerError):
        return "Server error. Please try again later."
    if isinstance(exc, PortalError):
        return exc.message
    return "An unexpected error occurred. Please try again."
