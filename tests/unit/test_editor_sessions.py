"""Unit tests for the service's editing session registry."""

import threading

import pytest

from anrsi_portal.adapters.inbound.api.deps import EditorSessions
from anrsi_portal.config import current_log_context
from anrsi_portal.core.domain import get_page_kind
from anrsi_portal.core.domain.exceptions import ItemNotFoundError, ResourceNotFoundError
from anrsi_portal.core.services.page_editor import PageEditor

pytestmark = pytest.mark.unit


@pytest.fixture
def sessions(mock_portal):
    mock_portal.get_page_by_slug.side_effect = ResourceNotFoundError("gone", status_code=404)
    return EditorSessions(lambda kind: PageEditor(mock_portal, get_page_kind(kind)))


class TestEditorSessions:
    """Tests for opening, locking and closing sessions."""

    def test_open_and_close(self, sessions):
        session_id, editor = sessions.open("reports")
        assert sessions.get(session_id) is editor
        assert len(sessions) == 1

        sessions.close(session_id)

        assert len(sessions) == 0
        with pytest.raises(ItemNotFoundError):
            sessions.get(session_id)

    def test_one_request_at_a_time_per_session(self, sessions):
        session_id, _ = sessions.open("reports")
        entered = threading.Event()

        def other_request():
            with sessions.locked(session_id):
                entered.set()

        with sessions.locked(session_id):
            worker = threading.Thread(target=other_request)
            worker.start()
            assert not entered.wait(0.2)
        worker.join(timeout=2)

        assert entered.is_set()

    def test_other_sessions_are_not_blocked(self, sessions):
        first, _ = sessions.open("reports")
        second, _ = sessions.open("partners")
        entered = threading.Event()

        def other_request():
            with sessions.locked(second):
                entered.set()

        with sessions.locked(first):
            worker = threading.Thread(target=other_request)
            worker.start()
            assert entered.wait(2)
        worker.join(timeout=2)

    def test_session_id_is_bound_to_log_records(self, sessions):
        session_id, _ = sessions.open("reports")
        with sessions.locked(session_id):
            assert current_log_context()["editor_session"] == session_id
        assert "editor_session" not in current_log_context()
