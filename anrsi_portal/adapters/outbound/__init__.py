"""Outbound adapters: portal REST client and session storage."""

from .portal_client import PortalClient
from .session_store import FileSessionStore, MemorySessionStore

__all__ = ["PortalClient", "FileSessionStore", "MemorySessionStore"]
