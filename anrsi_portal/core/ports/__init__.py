"""Ports (interfaces) between the core and its adapters."""

from .portal_port import PortalPort
from .session_store_port import SessionStorePort

__all__ = ["PortalPort", "SessionStorePort"]
