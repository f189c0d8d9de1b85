"""FastAPI dependency injection for the portal service."""

import logging
import threading
import uuid
from collections.abc import Callable, Iterator
from contextlib import contextmanager
from dataclasses import dataclass, field
from functools import lru_cache

from fastapi import Depends, Header

from ....composition import container
from ....config import bind_log_context
from ....core.domain import Role, User
from ....core.domain.exceptions import AuthenticationError, ItemNotFoundError
from ....core.ports import PortalPort
from ....core.services.page_editor import PageEditor
from ....core.services.session import SessionManager

logger = logging.getLogger(__name__)

EDITOR_ROLES = (Role.ADMIN, Role.EDITOR)


@dataclass
class _OpenEditor:
    editor: PageEditor
    lock: threading.RLock = field(default_factory=threading.RLock)


class EditorSessions:
    """Open editing sessions of the service, by session id.

    Each session has its own lock; requests against one session run one
    at a time.
    """

    def __init__(self, factory: Callable[[str], PageEditor]) -> None:
        self._factory = factory
        self._editors: dict[str, _OpenEditor] = {}
        self._lock = threading.Lock()

    def __len__(self) -> int:
        with self._lock:
            return len(self._editors)

    def open(self, kind: str) -> tuple[str, PageEditor]:
        editor = self._factory(kind)
        editor.open()
        session_id = uuid.uuid4().hex
        with self._lock:
            self._editors[session_id] = _OpenEditor(editor)
        logger.info("Opened editing session %s for '%s'", session_id, editor.kind.slug)
        return session_id, editor

    def _entry(self, session_id: str) -> _OpenEditor:
        with self._lock:
            entry = self._editors.get(session_id)
        if entry is None:
            raise ItemNotFoundError(
                f"No editing session '{session_id}'", context={"session_id": session_id}
            )
        return entry

    def get(self, session_id: str) -> PageEditor:
        return self._entry(session_id).editor

    @contextmanager
    def locked(self, session_id: str) -> Iterator[PageEditor]:
        """Hold the session's lock while its document is read or changed."""
        entry = self._entry(session_id)
        with entry.lock, bind_log_context(editor_session=session_id):
            yield entry.editor

    def close(self, session_id: str) -> None:
        with self._lock:
            self._editors.pop(session_id, None)


@dataclass(frozen=True)
class Caller:
    """Editor calling the service, with the bearer token it presented."""

    user: User
    token: str


@lru_cache
def get_editor_sessions() -> EditorSessions:
    """Get or create the EditorSessions singleton."""
    return EditorSessions(container.create_page_editor)


def get_portal() -> PortalPort:
    return container.get_portal_client()


def get_session() -> SessionManager:
    return container.get_session_manager()


def _bearer_token(authorization: str | None) -> str | None:
    scheme, _, token = (authorization or "").partition(" ")
    if scheme.lower() != "bearer" or not token.strip():
        return None
    return token.strip()


def require_editor(
    authorization: str | None = Header(None),
    portal: PortalPort = Depends(get_portal),
) -> Caller:
    """Allow only callers presenting an editor or admin bearer token.

    The token is checked against the backend (``auth/me``); it is then
    forwarded on every backend call made for the request.
    """
    token = _bearer_token(authorization)
    if token is None:
        raise AuthenticationError("Authentication required. Please log in.", status_code=401)
    with portal.acting_as(token):
        user = portal.me()
    if user.role not in EDITOR_ROLES:
        raise AuthenticationError(
            "Access denied. You need ADMIN or EDITOR permissions.",
            status_code=403,
            context={"username": user.username, "role": str(user.role)},
        )
    return Caller(user=user, token=token)
