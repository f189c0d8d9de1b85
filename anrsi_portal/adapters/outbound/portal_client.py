"""REST client for the ANRSI portal backend."""

import logging
from collections.abc import Callable, Iterable, Iterator
from contextlib import contextmanager
from contextvars import ContextVar
from pathlib import Path
from typing import Any

import requests

from ...core.domain import (
    ArticleWritePayload,
    LoginResponse,
    Page,
    PageWritePayload,
    UploadKind,
    User,
)
from ...core.domain.exceptions import (
    ApiError,
    AuthenticationError,
    RequestRejectedError,
    ResourceNotFoundError,
    ServerError,
    ServerUnreachableError,
)
from ...core.ports import PortalPort

logger = logging.getLogger(__name__)

# Constants
REQUEST_TIMEOUT = 30
USER_AGENT = "ANRSI-Portal-Toolkit/1.0"

# Token of the service caller, set per request by acting_as
_caller_token: ContextVar[str | None] = ContextVar("anrsi_caller_token", default=None)


def _server_message(response: requests.Response) -> str | None:
    """Extract the human-readable message of an error response, if any."""
    try:
        body = response.json()
    except ValueError:
        text = response.text.strip()
        return text[:300] or None

    if not isinstance(body, dict):
        return None
    errors = body.get("errors")
    if isinstance(errors, list) and errors:
        parts = [
            str(e.get("defaultMessage") or e.get("message") or e) if isinstance(e, dict) else str(e)
            for e in errors
        ]
        return ", ".join(parts)
    for key in ("message", "error"):
        if isinstance(body.get(key), str) and body[key]:
            return body[key]
    return None


class PortalClient(PortalPort):
    """Client for the portal REST API.

    The bearer token is read from ``token_provider`` on every request, so a
    login or logout is picked up immediately. Any 401/403 answer calls
    ``on_unauthorized`` before the AuthenticationError is raised.
    """

    def __init__(
        self,
        base_url: str,
        *,
        timeout: float = REQUEST_TIMEOUT,
        upload_timeout: float | None = None,
        token_provider: Callable[[], str | None] | None = None,
        on_unauthorized: Callable[[str], None] | None = None,
        session: requests.Session | None = None,
    ) -> None:
        """Initialize the client.

        Args:
            base_url: API root, e.g. ``http://localhost:8080/api``.
            timeout: Timeout in seconds for regular requests.
            upload_timeout: Timeout for uploads (None waits indefinitely).
            token_provider: Returns the current bearer token, if any.
            on_unauthorized: Called with the server message on 401/403.
            session: Pre-built requests session (tests).
        """
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.upload_timeout = upload_timeout
        self.token_provider = token_provider
        self.on_unauthorized = on_unauthorized
        self.session = session or requests.Session()
        self.session.headers.update({"User-Agent": USER_AGENT, "Accept": "application/json"})

    def __enter__(self) -> "PortalClient":
        """Enter context manager."""
        return self

    def __exit__(self, *args) -> None:
        """Exit context manager and close session."""
        self.close()

    def close(self) -> None:
        """Close the HTTP session."""
        if self.session:
            self.session.close()

    # -- transport -----------------------------------------------------------

    @contextmanager
    def acting_as(self, token: str) -> Iterator[None]:
        """Send ``token`` instead of the stored session token inside the block.

        A 401/403 answer to a caller's token does not log the stored
        session out.
        """
        reset = _caller_token.set(token)
        try:
            yield
        finally:
            _caller_token.reset(reset)

    def _headers(self) -> dict[str, str]:
        token = _caller_token.get()
        if token is None and self.token_provider:
            token = self.token_provider()
        return {"Authorization": f"Bearer {token}"} if token else {}

    def _error(self, response: requests.Response, method: str, path: str) -> ApiError:
        status = response.status_code
        message = _server_message(response)
        context = {"method": method, "path": path, "status": status}

        if status in (401, 403):
            if self.on_unauthorized and _caller_token.get() is None:
                self.on_unauthorized(message or f"HTTP {status}")
            label = "Access denied" if status == 403 else "Authentication required"
            return AuthenticationError(
                label, status_code=status, server_message=message, context=context
            )
        if status in (400, 413, 422):
            return RequestRejectedError(
                message or "Request rejected by the server",
                status_code=status,
                server_message=message,
                context=context,
            )
        if status == 404:
            return ResourceNotFoundError(
                f"Not found: {path}", status_code=status, server_message=message, context=context
            )
        if status >= 500:
            return ServerError(
                "Server error. Please try again later.",
                status_code=status,
                server_message=message,
                context=context,
            )
        return ApiError(
            message or f"HTTP {status}", status_code=status, server_message=message, context=context
        )

    def _request(
        self,
        method: str,
        path: str,
        *,
        json: Any = None,
        params: dict[str, Any] | None = None,
        files: dict[str, Any] | None = None,
        upload: bool = False,
    ) -> Any:
        """Send a request and decode the JSON answer.

        Args:
            method: HTTP method.
            path: Path relative to the API root.
            json: JSON body.
            params: Query parameters.
            files: Multipart files.
            upload: Use the upload timeout instead of the request timeout.

        Returns:
            Decoded JSON, the raw text for non-JSON answers, or None when
            the answer has no body.

        Raises:
            ApiError: Subclass matching the failure (see ``_error``).
        """
        url = f"{self.base_url}/{path.lstrip('/')}"
        try:
            response = self.session.request(
                method,
                url,
                headers=self._headers(),
                json=json,
                params=params,
                files=files,
                timeout=self.upload_timeout if upload else self.timeout,
            )
        except requests.RequestException as e:
            raise ServerUnreachableError(
                "Cannot connect to server. Please check if the backend is running.",
                status_code=0,
                cause=e,
                context={"method": method, "url": url},
            ) from e

        if response.status_code >= 400:
            raise self._error(response, method, path)
        if response.status_code == 204 or not response.content:
            return None
        try:
            return response.json()
        except ValueError:
            return response.text

    def _get(self, path: str, **params: Any) -> Any:
        return self._request("GET", path, params=params or None)

    # -- auth ----------------------------------------------------------------

    def login(self, username: str, password: str) -> LoginResponse:
        data = self._request("POST", "auth/login", json={"username": username, "password": password})
        return LoginResponse.model_validate(data)

    def me(self) -> User:
        return User.model_validate(self._get("auth/me"))

    # -- pages ---------------------------------------------------------------

    def list_pages(self) -> list[Page]:
        return [Page.model_validate(p) for p in self._get("pages/admin/all") or []]

    def list_published_pages(self) -> list[Page]:
        return [Page.model_validate(p) for p in self._get("pages") or []]

    def get_page(self, page_id: int) -> Page:
        return Page.model_validate(self._get(f"pages/admin/{page_id}"))

    def get_page_by_slug(self, slug: str, admin: bool = False) -> Page:
        """Get a page by slug.

        The admin view includes unpublished and inactive pages; the public
        view only serves published ones.
        """
        path = f"pages/admin/slug/{slug}" if admin else f"pages/{slug}"
        return Page.model_validate(self._get(path))

    def create_page(self, payload: PageWritePayload) -> Page:
        return Page.model_validate(self._request("POST", "pages", json=payload.to_wire()))

    def update_page(self, page_id: int, payload: PageWritePayload) -> Page:
        return Page.model_validate(
            self._request("PUT", f"pages/{page_id}", json=payload.to_wire())
        )

    def delete_page(self, page_id: int) -> None:
        self._request("DELETE", f"pages/{page_id}")

    def publish_page(self, page_id: int) -> Page:
        return Page.model_validate(self._request("PUT", f"pages/{page_id}/publish"))

    def unpublish_page(self, page_id: int) -> Page:
        return Page.model_validate(self._request("PUT", f"pages/{page_id}/unpublish"))

    def toggle_page(self, page_id: int) -> Page:
        return Page.model_validate(self._request("PUT", f"pages/{page_id}/toggle"))

    def page_slugs(self) -> list[str]:
        return list(self._get("pages/admin/slugs") or [])

    def page_types(self) -> list[str]:
        return list(self._get("pages/admin/types") or [])

    # -- articles ------------------------------------------------------------

    def list_articles(self) -> list[dict[str, Any]]:
        return list(self._get("articles/admin/all") or [])

    def get_article(self, article_id: int) -> dict[str, Any]:
        return self._get(f"articles/{article_id}")

    def create_article(self, payload: ArticleWritePayload) -> dict[str, Any]:
        return self._request("POST", "articles", json=payload.to_wire())

    def update_article(self, article_id: int, payload: ArticleWritePayload | dict[str, Any]) -> dict[str, Any]:
        body = payload.to_wire() if isinstance(payload, ArticleWritePayload) else payload
        return self._request("PUT", f"articles/{article_id}", json=body)

    def delete_article(self, article_id: int) -> None:
        self._request("DELETE", f"articles/{article_id}")

    def toggle_featured(self, article_id: int, featured: bool) -> dict[str, Any]:
        """Set the featured flag by re-sending the whole article."""
        article = self.get_article(article_id)
        return self.update_article(article_id, {**article, "featured": featured})

    # -- users ---------------------------------------------------------------

    def list_users(self) -> list[User]:
        return [User.model_validate(u) for u in self._get("users") or []]

    def get_user(self, user_id: int) -> User:
        return User.model_validate(self._get(f"users/{user_id}"))

    def create_user(self, data: dict[str, Any]) -> User:
        return User.model_validate(self._request("POST", "users", json=data))

    def update_user(self, user_id: int, data: dict[str, Any]) -> User:
        return User.model_validate(self._request("PUT", f"users/{user_id}", json=data))

    def delete_user(self, user_id: int) -> None:
        self._request("DELETE", f"users/{user_id}")

    # -- statistics ----------------------------------------------------------

    def get_statistics(self) -> dict[str, Any]:
        return self._get("statistics") or {}

    def update_statistics(self, data: dict[str, Any]) -> dict[str, Any]:
        return self._request("PUT", "statistics", json=data)

    # -- contact messages ----------------------------------------------------

    def list_messages(self) -> list[dict[str, Any]]:
        return list(self._get("contact") or [])

    def unread_messages(self) -> list[dict[str, Any]]:
        return list(self._get("contact/unread") or [])

    def unread_count(self) -> int:
        data = self._get("contact/unread/count")
        if isinstance(data, dict):
            data = data.get("count", 0)
        return int(data or 0)

    def get_message(self, message_id: int) -> dict[str, Any]:
        return self._get(f"contact/{message_id}")

    def mark_read(self, message_id: int) -> dict[str, Any]:
        return self._request("PUT", f"contact/{message_id}/read")

    def delete_message(self, message_id: int) -> None:
        self._request("DELETE", f"contact/{message_id}")

    # -- useful websites -----------------------------------------------------

    def list_websites(self) -> list[dict[str, Any]]:
        return list(self._get("useful-websites") or [])

    def get_website(self, website_id: int) -> dict[str, Any]:
        return self._get(f"useful-websites/{website_id}")

    def create_website(self, data: dict[str, Any]) -> dict[str, Any]:
        return self._request("POST", "useful-websites", json=data)

    def update_website(self, website_id: int, data: dict[str, Any]) -> dict[str, Any]:
        return self._request("PUT", f"useful-websites/{website_id}", json=data)

    def delete_website(self, website_id: int) -> None:
        self._request("DELETE", f"useful-websites/{website_id}")

    def reorder_websites(self, order: Iterable[tuple[int, int]]) -> Any:
        """Send the new display order as ``(id, order)`` pairs."""
        websites = [{"id": website_id, "order": position} for website_id, position in order]
        return self._request("PUT", "useful-websites/reorder", json={"websites": websites})

    # -- uploads and imports -------------------------------------------------

    def _post_file(self, path: str, file: Path, content_type: str) -> Any:
        with file.open("rb") as fh:
            return self._request(
                "POST",
                path,
                files={"file": (file.name, fh, content_type)},
                upload=True,
            )

    def upload(self, kind: UploadKind, path: Path, content_type: str) -> str:
        data = self._post_file(f"upload/{kind.value}", path, content_type)
        url = data.get("url") if isinstance(data, dict) else None
        if not url:
            raise ApiError(
                "Upload answer did not include a file URL", context={"file": path.name}
            )
        logger.info("Uploaded %s -> %s", path.name, url)
        return url

    def upload_image(self, path: Path, content_type: str = "image/jpeg") -> str:
        return self.upload(UploadKind.IMAGE, path, content_type)

    def upload_document(self, path: Path, content_type: str = "application/pdf") -> str:
        return self.upload(UploadKind.DOCUMENT, path, content_type)

    def import_page_json(self, path: Path) -> dict[str, Any]:
        """Replace the calls-for-applications content from a JSON file."""
        return self._post_file("admin/appels-candidatures/import", path, "application/json") or {}

    def import_articles(self, path: Path) -> dict[str, Any]:
        return self._post_file("articles/import", path, "application/json") or {}
