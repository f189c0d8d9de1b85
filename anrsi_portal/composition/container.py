"""Composition root wiring adapters to the core services."""

from __future__ import annotations

import logging
from functools import lru_cache

from ..adapters.outbound.portal_client import PortalClient
from ..adapters.outbound.session_store import FileSessionStore
from ..config import settings
from ..core.domain import get_page_kind
from ..core.services.page_editor import PageEditor
from ..core.services.session import SessionManager

logger = logging.getLogger(__name__)


@lru_cache
def _session_manager() -> SessionManager:
    logger.info("Loading admin session from %s", settings.session_file)
    return SessionManager(FileSessionStore(settings.session_file))


def get_session_manager() -> SessionManager:
    """Get the session manager, with the portal client attached for login."""
    get_portal_client()
    return _session_manager()


@lru_cache
def get_portal_client() -> PortalClient:
    logger.info("Initializing PortalClient for %s", settings.api_base_url)
    session = _session_manager()
    client = PortalClient(
        settings.api_base_url,
        timeout=settings.request_timeout,
        upload_timeout=settings.upload_timeout,
        token_provider=lambda: session.token,
        on_unauthorized=session.force_logout,
    )
    session.attach_portal(client)
    return client


def create_page_editor(kind_name: str) -> PageEditor:
    """Build an editor for one page kind (one per editing session)."""
    return PageEditor(
        get_portal_client(),
        get_page_kind(kind_name),
        max_image_bytes=settings.max_image_bytes,
        max_document_bytes=settings.max_document_bytes,
        upload_workers=settings.upload_workers,
    )
