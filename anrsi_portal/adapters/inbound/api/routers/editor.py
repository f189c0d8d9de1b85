"""Admin editing sessions over HTTP.

An editing session holds one page's LocalizedDocument in memory between
requests. Page content reaches the backend only when the session is saved,
and a successful save closes the session. Each request forwards the
caller's bearer token to the backend.
"""

import logging
import shutil
import tempfile
from pathlib import Path

from fastapi import APIRouter, Depends, File, Path as PathParam, Query, UploadFile

from .....core.domain import Locale, UploadKind
from .....core.ports import PortalPort
from .....core.services.page_editor import PageEditor
from ..deps import Caller, EditorSessions, get_editor_sessions, get_portal, require_editor
from ..models import (
    AttachmentResponse,
    EditorSessionResponse,
    ErrorResponse,
    FieldUpdate,
    ItemCreate,
    ItemResponse,
    OpenSessionRequest,
    SaveResponse,
)

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/api/v1/editor",
    tags=["editor"],
    dependencies=[Depends(require_editor)],
    responses={
        401: {"model": ErrorResponse, "description": "Not logged in"},
        403: {"model": ErrorResponse, "description": "Editor or admin role required"},
        404: {"model": ErrorResponse, "description": "Unknown session, kind or item"},
    },
)


def _session_response(session_id: str, editor: PageEditor) -> EditorSessionResponse:
    uploads = [
        {
            "locale": key.locale.value,
            "item_id": key.item_id,
            "slot": key.slot,
            "status": state.status.value,
            "progress": state.progress,
            "error": state.error,
        }
        for key, state in editor.synchronizer.uploads.items()
    ]
    return EditorSessionResponse(
        session_id=session_id,
        kind=editor.kind.name,
        slug=editor.kind.slug,
        page_id=editor.page.id if editor.page else None,
        document=editor.document.model_dump(by_alias=True),
        uploads=uploads,
    )


@router.post("/sessions", response_model=EditorSessionResponse, status_code=201)
def open_session(
    request: OpenSessionRequest,
    caller: Caller = Depends(require_editor),
    portal: PortalPort = Depends(get_portal),
    sessions: EditorSessions = Depends(get_editor_sessions),
) -> EditorSessionResponse:
    """Open an editing session for a page kind, loading its current content."""
    with portal.acting_as(caller.token):
        session_id, editor = sessions.open(request.kind)
    return _session_response(session_id, editor)


@router.get("/sessions/{session_id}", response_model=EditorSessionResponse)
def read_session(
    session_id: str, sessions: EditorSessions = Depends(get_editor_sessions)
) -> EditorSessionResponse:
    with sessions.locked(session_id) as editor:
        return _session_response(session_id, editor)


@router.delete("/sessions/{session_id}", status_code=204)
def discard_session(session_id: str, sessions: EditorSessions = Depends(get_editor_sessions)) -> None:
    """Discard a session without saving."""
    sessions.close(session_id)


@router.put("/sessions/{session_id}/fields", response_model=EditorSessionResponse)
def set_field(
    session_id: str,
    update: FieldUpdate,
    sessions: EditorSessions = Depends(get_editor_sessions),
) -> EditorSessionResponse:
    with sessions.locked(session_id) as editor:
        editor.store.set_field(update.locale, update.name, update.value)
        return _session_response(session_id, editor)


@router.post("/sessions/{session_id}/lists/{key}/items", response_model=ItemResponse, status_code=201)
def add_item(
    session_id: str,
    key: str,
    body: ItemCreate,
    sessions: EditorSessions = Depends(get_editor_sessions),
) -> ItemResponse:
    """Append an item to a list in every locale."""
    with sessions.locked(session_id) as editor:
        item = editor.add_item(key, **body.fields)
        index = len(editor.store.items(Locale.FR, key)) - 1
        return ItemResponse(key=key, index=index, item=item.model_dump())


@router.delete("/sessions/{session_id}/lists/{key}/items/{index}", response_model=ItemResponse)
def remove_item(
    session_id: str,
    key: str,
    index: int = PathParam(..., ge=0),
    locale: Locale = Query(Locale.FR),
    sessions: EditorSessions = Depends(get_editor_sessions),
) -> ItemResponse:
    """Remove an item from every locale."""
    with sessions.locked(session_id) as editor:
        removed = editor.remove_item(key, index, locale)
    return ItemResponse(key=key, index=index, item=removed.model_dump())


@router.post(
    "/sessions/{session_id}/lists/{key}/items/{index}/attachments/{slot}",
    response_model=AttachmentResponse,
)
def upload_attachment(
    session_id: str,
    key: str,
    index: int = PathParam(..., ge=0),
    slot: int = PathParam(..., ge=0),
    file: UploadFile = File(...),
    locale: Locale = Query(Locale.FR, description="Locale the upload is made from"),
    kind: UploadKind = Query(UploadKind.DOCUMENT),
    caller: Caller = Depends(require_editor),
    portal: PortalPort = Depends(get_portal),
    sessions: EditorSessions = Depends(get_editor_sessions),
) -> AttachmentResponse:
    """Upload a file and write its URL into every locale."""
    with tempfile.TemporaryDirectory(prefix="anrsi-upload-") as tmp:
        path = Path(tmp) / Path(file.filename or "upload").name
        with path.open("wb") as out:
            shutil.copyfileobj(file.file, out)
        with sessions.locked(session_id) as editor, portal.acting_as(caller.token):
            url = editor.upload(locale, key, index, slot, path, kind)
    return AttachmentResponse(url=url, key=key, index=index, slot=slot, kind=kind)


@router.delete(
    "/sessions/{session_id}/lists/{key}/items/{index}/attachments/{slot}",
    response_model=EditorSessionResponse,
)
def remove_attachment(
    session_id: str,
    key: str,
    index: int = PathParam(..., ge=0),
    slot: int = PathParam(..., ge=0),
    locale: Locale = Query(Locale.FR),
    sessions: EditorSessions = Depends(get_editor_sessions),
) -> EditorSessionResponse:
    """Remove an attachment slot from every locale."""
    with sessions.locked(session_id) as editor:
        editor.remove_attachment(locale, key, index, slot)
        return _session_response(session_id, editor)


@router.post("/sessions/{session_id}/save", response_model=SaveResponse)
def save_session(
    session_id: str,
    publish: bool = Query(True),
    caller: Caller = Depends(require_editor),
    portal: PortalPort = Depends(get_portal),
    sessions: EditorSessions = Depends(get_editor_sessions),
) -> SaveResponse:
    """Save the document to the backend (create or update) and close the session."""
    with sessions.locked(session_id) as editor, portal.acting_as(caller.token):
        page = editor.save(is_published=publish)
    sessions.close(session_id)
    logger.info("Page '%s' saved by %s", page.slug, caller.user.username)
    return SaveResponse(id=page.id, slug=page.slug, is_published=page.is_published)
