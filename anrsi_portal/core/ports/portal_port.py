"""Portal Backend Port Interface."""

from abc import ABC, abstractmethod
from contextlib import AbstractContextManager
from pathlib import Path
from typing import Any

from ..domain import (
    ArticleWritePayload,
    LoginResponse,
    Page,
    PageWritePayload,
    UploadKind,
    User,
)


class PortalPort(ABC):
    """Abstract interface for the portal REST backend."""

    @abstractmethod
    def login(self, username: str, password: str) -> LoginResponse:
        """Exchange credentials for a bearer token."""
        ...

    @abstractmethod
    def me(self) -> User:
        """Return the user owning the current token."""
        ...

    @abstractmethod
    def acting_as(self, token: str) -> AbstractContextManager[None]:
        """Send a caller's own bearer token for the calls made inside the block."""
        ...

    @abstractmethod
    def get_page_by_slug(self, slug: str, admin: bool = False) -> Page:
        """Get a page by slug (raises ResourceNotFoundError when absent).

        The admin view also returns unpublished pages and needs an editor token.
        """
        ...

    @abstractmethod
    def page_slugs(self) -> list[str]:
        """List the slugs of all stored pages."""
        ...

    @abstractmethod
    def create_page(self, payload: PageWritePayload) -> Page:
        """Create a page."""
        ...

    @abstractmethod
    def update_page(self, page_id: int, payload: PageWritePayload) -> Page:
        """Replace a page's metadata and translations."""
        ...

    @abstractmethod
    def get_article(self, article_id: int) -> dict[str, Any]:
        """Get an article with all its translations."""
        ...

    @abstractmethod
    def create_article(self, payload: ArticleWritePayload) -> dict[str, Any]:
        """Create an article."""
        ...

    @abstractmethod
    def update_article(
        self, article_id: int, payload: ArticleWritePayload | dict[str, Any]
    ) -> dict[str, Any]:
        """Replace an article."""
        ...

    @abstractmethod
    def upload(self, kind: UploadKind, path: Path, content_type: str) -> str:
        """Upload a file and return its public URL."""
        ...

    @abstractmethod
    def import_page_json(self, path: Path) -> dict[str, Any]:
        """Replace a page's structured content from a JSON file."""
        ...
