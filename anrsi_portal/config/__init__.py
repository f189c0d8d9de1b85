"""Configuration package."""

from .logging import bind_log_context, current_log_context, get_logger, setup_logging
from .settings import Settings, settings

__all__ = [
    "Settings",
    "settings",
    "bind_log_context",
    "current_log_context",
    "get_logger",
    "setup_logging",
]
