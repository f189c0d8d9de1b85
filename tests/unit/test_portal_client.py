"""Unit tests for the portal REST client."""

import json
from unittest.mock import MagicMock

import pytest
import requests

from anrsi_portal.adapters.outbound.portal_client import PortalClient
from anrsi_portal.core.domain import PageWritePayload, UploadKind
from anrsi_portal.core.domain.exceptions import (
    ApiError,
    AuthenticationError,
    RequestRejectedError,
    ResourceNotFoundError,
    ServerError,
    ServerUnreachableError,
)

pytestmark = pytest.mark.unit

BASE_URL = "http://portal.test/api"


def _response(status=200, body=None, text=None):
    response = requests.Response()
    response.status_code = status
    if body is not None:
        response._content = json.dumps(body).encode("utf-8")
    else:
        response._content = (text or "").encode("utf-8")
    response.encoding = "utf-8"
    return response


@pytest.fixture
def http():
    session = MagicMock()
    session.headers = {}
    session.request.return_value = _response(200, {})
    return session


@pytest.fixture
def token():
    return {"value": None}


@pytest.fixture
def on_unauthorized():
    return MagicMock()


@pytest.fixture
def client(http, token, on_unauthorized):
    return PortalClient(
        BASE_URL,
        timeout=5,
        upload_timeout=None,
        token_provider=lambda: token["value"],
        on_unauthorized=on_unauthorized,
        session=http,
    )


class TestTransport:
    """Tests for headers, URLs and timeouts."""

    def test_user_agent_is_set(self, client, http):
        assert "ANRSI" in http.headers["User-Agent"]

    def test_bearer_token_is_read_per_request(self, client, http, token):
        client.page_slugs()
        assert "Authorization" not in http.request.call_args.kwargs["headers"]

        token["value"] = "tok-1"
        client.page_slugs()
        assert http.request.call_args.kwargs["headers"]["Authorization"] == "Bearer tok-1"

    def test_url_and_timeout(self, client, http):
        client.page_slugs()
        args, kwargs = http.request.call_args
        assert args == ("GET", f"{BASE_URL}/pages/admin/slugs")
        assert kwargs["timeout"] == 5

    def test_empty_body_returns_none(self, client, http):
        http.request.return_value = _response(204)
        assert client.delete_page(4) is None

    def test_acting_as_sends_caller_token(self, client, http, token):
        token["value"] = "stored"
        with client.acting_as("caller"):
            client.page_slugs()
        assert http.request.call_args.kwargs["headers"]["Authorization"] == "Bearer caller"

        client.page_slugs()
        assert http.request.call_args.kwargs["headers"]["Authorization"] == "Bearer stored"

    def test_context_manager_closes_session(self, http):
        with PortalClient(BASE_URL, session=http):
            pass
        http.close.assert_called_once()


class TestErrorMapping:
    """Tests for mapping HTTP failures to exceptions."""

    def test_connection_failure(self, client, http):
        http.request.side_effect = requests.ConnectionError("refused")
        with pytest.raises(ServerUnreachableError) as exc_info:
            client.page_slugs()
        assert exc_info.value.status_code == 0
        assert isinstance(exc_info.value.cause, requests.ConnectionError)

    @pytest.mark.parametrize("status", [401, 403])
    def test_unauthorized_calls_hook(self, client, http, on_unauthorized, status):
        http.request.return_value = _response(status, {"message": "Token expired"})
        with pytest.raises(AuthenticationError) as exc_info:
            client.me()
        assert exc_info.value.status_code == status
        on_unauthorized.assert_called_once_with("Token expired")

    def test_rejected_caller_token_keeps_stored_session(self, client, http, on_unauthorized):
        http.request.return_value = _response(401, {"message": "Invalid token"})
        with client.acting_as("forged"), pytest.raises(AuthenticationError):
            client.me()
        on_unauthorized.assert_not_called()

    def test_bad_request_joins_field_errors(self, client, http):
        body = {"errors": [{"defaultMessage": "Title is required"}, {"message": "Slug is taken"}]}
        http.request.return_value = _response(400, body)
        with pytest.raises(RequestRejectedError) as exc_info:
            client.create_page(PageWritePayload(title="x"))
        assert exc_info.value.server_message == "Title is required, Slug is taken"

    def test_payload_too_large(self, client, http):
        http.request.return_value = _response(413, text="Request Entity Too Large")
        with pytest.raises(RequestRejectedError) as exc_info:
            client.page_types()
        assert exc_info.value.status_code == 413
        assert exc_info.value.server_message == "Request Entity Too Large"

    def test_not_found(self, client, http):
        http.request.return_value = _response(404, {"error": "Not Found"})
        with pytest.raises(ResourceNotFoundError):
            client.get_page_by_slug("videos")

    def test_server_error(self, client, http, on_unauthorized):
        http.request.return_value = _response(500, {"message": "NullPointerException"})
        with pytest.raises(ServerError) as exc_info:
            client.list_pages()
        assert exc_info.value.server_message == "NullPointerException"
        on_unauthorized.assert_not_called()

    def test_other_status(self, client, http):
        http.request.return_value = _response(409, {"message": "Conflict"})
        with pytest.raises(ApiError) as exc_info:
            client.list_pages()
        assert type(exc_info.value) is ApiError
        assert exc_info.value.status_code == 409


class TestPages:
    """Tests for page endpoints."""

    def test_get_page_by_slug_uses_public_view(self, client, http, token):
        token["value"] = "tok"
        http.request.return_value = _response(200, {"id": 3, "slug": "videos", "isPublished": True})
        page = client.get_page_by_slug("videos")
        assert http.request.call_args.args[1] == f"{BASE_URL}/pages/videos"
        assert page.id == 3
        assert page.is_published is True

    def test_get_page_by_slug_admin_view(self, client, http, token):
        token["value"] = "tok"
        http.request.return_value = _response(200, {"id": 3, "slug": "videos"})
        client.get_page_by_slug("videos", admin=True)
        assert http.request.call_args.args[1] == f"{BASE_URL}/pages/admin/slug/videos"

    def test_update_page_sends_camel_case(self, client, http):
        http.request.return_value = _response(200, {"id": 3, "slug": "videos"})
        client.update_page(3, PageWritePayload(title="Mediatique", hero_title="Mediatique"))
        args, kwargs = http.request.call_args
        assert args == ("PUT", f"{BASE_URL}/pages/3")
        assert kwargs["json"]["heroTitle"] == "Mediatique"
        assert kwargs["json"]["isPublished"] is True


class TestArticles:
    """Tests for article endpoints."""

    def test_toggle_featured_resends_article(self, client, http):
        article = {"id": 9, "title": "Titre", "featured": False}
        http.request.side_effect = [
            _response(200, article),
            _response(200, {**article, "featured": True}),
        ]

        result = client.toggle_featured(9, True)

        assert result["featured"] is True
        put = http.request.call_args_list[1]
        assert put.args == ("PUT", f"{BASE_URL}/articles/9")
        assert put.kwargs["json"] == {"id": 9, "title": "Titre", "featured": True}


class TestUploads:
    """Tests for file uploads and imports."""

    def test_upload_returns_url(self, client, http, tmp_path):
        path = tmp_path / "rapport.pdf"
        path.write_bytes(b"%PDF-1.4")
        http.request.return_value = _response(
            200, {"url": "/uploads/documents/rapport.pdf", "filename": "rapport.pdf"}
        )

        url = client.upload(UploadKind.DOCUMENT, path, "application/pdf")

        assert url == "/uploads/documents/rapport.pdf"
        args, kwargs = http.request.call_args
        assert args == ("POST", f"{BASE_URL}/upload/document")
        name, _, content_type = kwargs["files"]["file"]
        assert (name, content_type) == ("rapport.pdf", "application/pdf")
        assert kwargs["timeout"] is None

    def test_upload_without_url(self, client, http, tmp_path):
        path = tmp_path / "logo.png"
        path.write_bytes(b"\x89PNG")
        http.request.return_value = _response(200, {"filename": "logo.png"})
        with pytest.raises(ApiError):
            client.upload_image(path, "image/png")

    def test_import_page_json(self, client, http, tmp_path):
        path = tmp_path / "appels.json"
        path.write_text("{}", encoding="utf-8")
        http.request.return_value = _response(200, {"message": "Imported 4 calls"})
        assert client.import_page_json(path) == {"message": "Imported 4 calls"}
        assert http.request.call_args.args[1] == f"{BASE_URL}/admin/appels-candidatures/import"

    def test_reorder_websites(self, client, http):
        client.reorder_websites([(4, 0), (2, 1)])
        assert http.request.call_args.kwargs["json"] == {
            "websites": [{"id": 4, "order": 0}, {"id": 2, "order": 1}]
        }

    def test_unread_count(self, client, http):
        http.request.return_value = _response(200, {"count": 3})
        assert client.unread_count() == 3
