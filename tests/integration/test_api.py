"""Integration tests for FastAPI endpoints."""

import json

import pytest
from fastapi.testclient import TestClient

from anrsi_portal.adapters.inbound.api.deps import (
    EditorSessions,
    get_editor_sessions,
    get_portal,
    get_session,
)
from anrsi_portal.adapters.outbound.session_store import MemorySessionStore
from anrsi_portal.core.domain import LoginResponse, Page, User, get_page_kind
from anrsi_portal.core.domain.exceptions import (
    AuthenticationError,
    ResourceNotFoundError,
    ServerUnreachableError,
)
from anrsi_portal.core.services.page_editor import PageEditor
from anrsi_portal.core.services.session import SessionManager


@pytest.fixture
def reports_page():
    """A stored reports page: 23 French reports, 2 Arabic ones."""
    fr = {
        "heroTitle": "Rapports Annuels",
        "rapports": [{"title": f"Rapport {n}"} for n in range(23)],
    }
    ar = {
        "heroTitle": "التقارير السنوية",
        "rapports": [{"title": "تقرير 0"}, {"title": "تقرير 1"}],
    }
    return Page(
        id=11,
        slug="rapports-annuels",
        translations={"fr": {"content": json.dumps(fr)}, "ar": {"content": json.dumps(ar)}},
    )


@pytest.fixture
def session_manager(mock_portal):
    return SessionManager(MemorySessionStore(), mock_portal)


@pytest.fixture
def editor_sessions(mock_portal):
    return EditorSessions(lambda kind: PageEditor(mock_portal, get_page_kind(kind)))


@pytest.fixture
def client(mock_portal, session_manager, editor_sessions, reports_page, editor_user):
    """Create test client with mocked dependencies, sending an editor token."""
    from anrsi_portal.adapters.inbound.api.main import app

    mock_portal.get_page_by_slug.return_value = reports_page
    mock_portal.me.return_value = editor_user
    app.dependency_overrides[get_portal] = lambda: mock_portal
    app.dependency_overrides[get_session] = lambda: session_manager
    app.dependency_overrides[get_editor_sessions] = lambda: editor_sessions
    test_client = TestClient(app)
    test_client.headers["Authorization"] = "Bearer tok"
    yield test_client
    app.dependency_overrides.clear()


def _open(client, kind="reports"):
    response = client.post("/api/v1/editor/sessions", json={"kind": kind})
    assert response.status_code == 201
    return response.json()


class TestHealthEndpoints:
    """Tests for health check endpoints."""

    @pytest.mark.integration
    def test_health_check(self, client):
        response = client.get("/health")

        assert response.status_code == 200
        assert response.json()["status"] == "healthy"

    @pytest.mark.integration
    def test_ready_reports_backend(self, client, mock_portal):
        mock_portal.page_slugs.return_value = ["rapports-annuels", "videos"]
        response = client.get("/ready")
        assert response.json()["backend"] == "connected (2 pages)"

    @pytest.mark.integration
    def test_ready_with_backend_down(self, client, mock_portal):
        mock_portal.page_slugs.side_effect = ServerUnreachableError("Cannot connect", status_code=0)
        response = client.get("/ready")
        assert response.status_code == 200
        assert response.json()["backend"] == "error: Cannot connect"


class TestPublicPages:
    """Tests for the localized public page view."""

    @pytest.mark.integration
    def test_last_page(self, client):
        response = client.get(
            "/api/v1/public/pages/rapports-annuels", params={"lang": "fr", "page": 3, "page_size": 10}
        )

        assert response.status_code == 200
        data = response.json()
        assert data["hero_title"] == "Rapports Annuels"
        assert data["list_key"] == "rapports"
        assert [item["title"] for item in data["items"]] == ["Rapport 20", "Rapport 21", "Rapport 22"]
        assert data["pagination"]["total_pages"] == 3
        assert data["pagination"]["has_next"] is False

    @pytest.mark.integration
    def test_page_is_clamped_for_shorter_locale(self, client):
        response = client.get(
            "/api/v1/public/pages/reports", params={"lang": "ar", "page": 3, "page_size": 10}
        )
        data = response.json()
        assert data["lang"] == "ar"
        assert data["pagination"]["page"] == 1
        assert len(data["items"]) == 2

    @pytest.mark.integration
    def test_default_language_is_public_preference(self, client, session_manager):
        session_manager.set_public_language("ar")
        response = client.get("/api/v1/public/pages/reports")
        assert response.json()["hero_title"] == "التقارير السنوية"

    @pytest.mark.integration
    def test_unsaved_page_renders_defaults(self, client, mock_portal):
        mock_portal.get_page_by_slug.side_effect = ResourceNotFoundError("gone", status_code=404)
        response = client.get("/api/v1/public/pages/partners", params={"lang": "en"})
        assert response.status_code == 200
        assert response.json()["title"] == "Our Partners"

    @pytest.mark.integration
    def test_unknown_kind(self, client):
        response = client.get("/api/v1/public/pages/blog")
        assert response.status_code == 404
        assert response.json()["error"]["code"] == "ANR_CNT_005"

    @pytest.mark.integration
    def test_unknown_language(self, client):
        response = client.get("/api/v1/public/pages/reports", params={"lang": "de"})
        assert response.status_code == 400

    @pytest.mark.integration
    def test_invalid_page_size(self, client):
        response = client.get("/api/v1/public/pages/reports", params={"page_size": 0})
        assert response.status_code == 400
        assert response.json()["error"]["type"] == "InvalidPaginationError"

    @pytest.mark.integration
    def test_unknown_list(self, client):
        response = client.get("/api/v1/public/pages/reports", params={"list": "videos"})
        assert response.status_code == 404


class TestEditorAccess:
    """Tests for editor authorization."""

    @pytest.mark.integration
    def test_requires_bearer_token(self, client, mock_portal):
        del client.headers["Authorization"]
        response = client.post("/api/v1/editor/sessions", json={"kind": "reports"})
        assert response.status_code == 401
        mock_portal.me.assert_not_called()

    @pytest.mark.integration
    def test_stored_login_does_not_authorize_callers(
        self, client, session_manager, mock_portal, admin_user
    ):
        mock_portal.login.return_value = LoginResponse(token="host-token", user=admin_user)
        session_manager.login("admin", "secret")
        del client.headers["Authorization"]

        response = client.get("/api/v1/editor/sessions/anything")

        assert response.status_code == 401

    @pytest.mark.integration
    def test_token_is_checked_against_backend(self, client, mock_portal):
        mock_portal.me.side_effect = AuthenticationError("Authentication required", status_code=401)
        response = client.post("/api/v1/editor/sessions", json={"kind": "reports"})
        assert response.status_code == 401
        mock_portal.acting_as.assert_any_call("tok")

    @pytest.mark.integration
    def test_viewer_is_forbidden(self, client, mock_portal):
        mock_portal.me.return_value = User(id=9, username="guest", role="VIEWER")
        response = client.post("/api/v1/editor/sessions", json={"kind": "reports"})
        assert response.status_code == 403

    @pytest.mark.integration
    def test_public_view_never_reads_drafts(self, client, mock_portal):
        client.get("/api/v1/public/pages/reports")
        mock_portal.get_page_by_slug.assert_called_once_with("rapports-annuels", admin=False)

    @pytest.mark.integration
    def test_request_id_is_returned(self, client):
        response = client.get("/health", headers={"X-Request-ID": "req-42"})
        assert response.headers["X-Request-ID"] == "req-42"


class TestEditorSessions:
    """Tests for the editing workflow."""

    @pytest.mark.integration
    def test_open_session(self, client, mock_portal):
        data = _open(client)
        assert data["slug"] == "rapports-annuels"
        assert data["page_id"] == 11
        assert data["document"]["fr"]["heroTitle"] == "Rapports Annuels"
        assert len(data["document"]["en"]["lists"]["rapports"]) == 0
        mock_portal.get_page_by_slug.assert_called_once_with("rapports-annuels", admin=True)

    @pytest.mark.integration
    def test_unknown_session(self, client):
        response = client.get("/api/v1/editor/sessions/missing")
        assert response.status_code == 404

    @pytest.mark.integration
    def test_set_field(self, client):
        session_id = _open(client)["session_id"]
        response = client.put(
            f"/api/v1/editor/sessions/{session_id}/fields",
            json={"locale": "en", "name": "heroTitle", "value": "Annual Reports"},
        )
        assert response.status_code == 200
        assert response.json()["document"]["en"]["heroTitle"] == "Annual Reports"

    @pytest.mark.integration
    def test_add_and_remove_item(self, client):
        session_id = _open(client)["session_id"]
        response = client.post(
            f"/api/v1/editor/sessions/{session_id}/lists/rapports/items",
            json={"fields": {"title": "Rapport 2024", "year": "2024"}},
        )
        assert response.status_code == 201
        added = response.json()
        assert added["index"] == 23
        assert added["item"]["year"] == "2024"

        response = client.delete(f"/api/v1/editor/sessions/{session_id}/lists/rapports/items/23")
        assert response.json()["item"]["id"] == added["item"]["id"]

    @pytest.mark.integration
    def test_upload_attachment_reaches_every_locale(self, client, mock_portal):
        session_id = _open(client)["session_id"]
        response = client.post(
            f"/api/v1/editor/sessions/{session_id}/lists/rapports/items/2/attachments/0",
            params={"locale": "fr", "kind": "document"},
            files={"file": ("rapport.pdf", b"%PDF-1.4", "application/pdf")},
        )

        assert response.status_code == 200
        assert response.json()["url"] == "/uploads/rapport.pdf"

        document = client.get(f"/api/v1/editor/sessions/{session_id}").json()["document"]
        for code in ("fr", "ar", "en"):
            assert document[code]["lists"]["rapports"][2]["attachments"] == ["/uploads/rapport.pdf"]

    @pytest.mark.integration
    def test_rejected_file_type(self, client, mock_portal):
        session_id = _open(client)["session_id"]
        response = client.post(
            f"/api/v1/editor/sessions/{session_id}/lists/rapports/items/0/attachments/0",
            params={"kind": "image"},
            files={"file": ("rapport.pdf", b"%PDF-1.4", "application/pdf")},
        )
        assert response.status_code == 400
        assert response.json()["error"]["message"] == "Please select an image file"
        mock_portal.upload.assert_not_called()

    @pytest.mark.integration
    def test_save(self, client, mock_portal, reports_page):
        mock_portal.update_page.return_value = reports_page
        session_id = _open(client)["session_id"]

        response = client.post(f"/api/v1/editor/sessions/{session_id}/save", params={"publish": False})

        assert response.status_code == 200
        assert response.json()["id"] == 11
        page_id, payload = mock_portal.update_page.call_args.args
        assert page_id == 11
        assert payload.is_published is False
        assert client.get(f"/api/v1/editor/sessions/{session_id}").status_code == 404

    @pytest.mark.integration
    def test_discard(self, client):
        session_id = _open(client)["session_id"]
        assert client.delete(f"/api/v1/editor/sessions/{session_id}").status_code == 204
        assert client.get(f"/api/v1/editor/sessions/{session_id}").status_code == 404

    @pytest.mark.integration
    def test_negative_attachment_slot_is_rejected(self, client):
        session_id = _open(client)["session_id"]
        before = client.get(f"/api/v1/editor/sessions/{session_id}").json()["document"]

        response = client.delete(
            f"/api/v1/editor/sessions/{session_id}/lists/rapports/items/0/attachments/-1"
        )

        assert response.status_code == 422
        after = client.get(f"/api/v1/editor/sessions/{session_id}").json()["document"]
        assert after == before

    @pytest.mark.integration
    def test_negative_item_index_is_rejected(self, client, mock_portal):
        session_id = _open(client)["session_id"]
        response = client.post(
            f"/api/v1/editor/sessions/{session_id}/lists/rapports/items/-1/attachments/0",
            files={"file": ("rapport.pdf", b"%PDF-1.4", "application/pdf")},
        )
        assert response.status_code == 422
        mock_portal.upload.assert_not_called()
