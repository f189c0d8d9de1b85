"""Editing session for one structured page."""

import contextvars
import logging
import mimetypes
from concurrent.futures import ThreadPoolExecutor, as_completed
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from ..domain import ListItem, Locale, LocalizedDocument, Page, PageKind, UploadKind
from ..domain.exceptions import (
    ContentError,
    PortalError,
    ResourceNotFoundError,
    UploadValidationError,
)
from ..ports import PortalPort
from .content_store import LanguageContentStore
from .normalizer import normalize_page
from .serializer import serialize_page
from .synchronizer import SharedAssetSynchronizer

logger = logging.getLogger(__name__)

MB = 1024 * 1024

DOCUMENT_CONTENT_TYPES = {
    "application/pdf",
    "application/msword",
    "application/vnd.openxmlformats-officedocument.wordprocessingml.document",
}
DOCUMENT_EXTENSIONS = (".pdf", ".doc", ".docx")


@dataclass
class UploadOutcome:
    """Result of one file of a multi-file upload."""

    path: Path
    slot: int
    url: str | None = None
    error: PortalError | None = None

    @property
    def ok(self) -> bool:
        return self.error is None


class PageEditor:
    """Opens, edits and saves the content of one page kind.

    Failures are scoped to the operation that raised them: a failed upload
    leaves every other field, item and attachment as it was.
    """

    def __init__(
        self,
        portal: PortalPort,
        kind: PageKind,
        *,
        max_image_bytes: int = 10 * MB,
        max_document_bytes: int = 50 * MB,
        upload_workers: int = 4,
    ) -> None:
        self.portal = portal
        self.kind = kind
        self.max_image_bytes = max_image_bytes
        self.max_document_bytes = max_document_bytes
        self.upload_workers = upload_workers
        self.page: Page | None = None
        self._store: LanguageContentStore | None = None
        self._sync: SharedAssetSynchronizer | None = None

    # -- session -----------------------------------------------------------

    def open(self, admin: bool = True) -> LocalizedDocument:
        """Load the page from the backend, or the kind's defaults if it has no content.

        Args:
            admin: Read the admin view, which includes unpublished pages.
        """
        try:
            self.page = self.portal.get_page_by_slug(self.kind.slug, admin=admin)
        except ResourceNotFoundError:
            logger.info("Page '%s' does not exist yet, starting from defaults", self.kind.slug)
            self.page = None

        document = normalize_page(self.page, self.kind) if self.page else None
        if document is None:
            document = self.kind.default_document()
        return self.load(document)

    def load(self, document: LocalizedDocument) -> LocalizedDocument:
        """Start editing an already built document."""
        self._store = LanguageContentStore(document)
        self._sync = SharedAssetSynchronizer(self._store)
        return document

    @property
    def store(self) -> LanguageContentStore:
        if self._store is None:
            raise ContentError(f"No '{self.kind.name}' document is open")
        return self._store

    @property
    def synchronizer(self) -> SharedAssetSynchronizer:
        if self._sync is None:
            raise ContentError(f"No '{self.kind.name}' document is open")
        return self._sync

    @property
    def document(self) -> LocalizedDocument:
        return self.store.document

    # -- items -------------------------------------------------------------

    def add_item(self, key: str, **fields: Any) -> ListItem:
        return self.store.add_item(key, **fields)

    def remove_item(self, key: str, index: int, locale: Locale | str = Locale.FR) -> ListItem:
        removed = self.store.remove_item(key, index, locale)
        self.synchronizer.clear_item(removed.id)
        return removed

    # -- uploads -----------------------------------------------------------

    def validate_upload(self, path: Path, kind: UploadKind) -> str:
        """Check type and size of a file before uploading it.

        Returns:
            The content type to send.

        Raises:
            UploadValidationError: If the file is missing, of the wrong type
                or too large.
        """
        if not path.is_file():
            raise UploadValidationError(f"File not found: {path}", context={"path": str(path)})

        content_type = mimetypes.guess_type(path.name)[0] or "application/octet-stream"
        size = path.stat().st_size
        if kind == UploadKind.IMAGE:
            if not content_type.startswith("image/"):
                raise UploadValidationError(
                    "Please select an image file", context={"path": str(path), "type": content_type}
                )
            limit = self.max_image_bytes
        else:
            if content_type not in DOCUMENT_CONTENT_TYPES and not path.name.lower().endswith(
                DOCUMENT_EXTENSIONS
            ):
                raise UploadValidationError(
                    "Please select a PDF or Word document (.pdf, .doc, .docx)",
                    context={"path": str(path), "type": content_type},
                )
            limit = self.max_document_bytes
        if size > limit:
            raise UploadValidationError(
                f"File size must be less than {limit // MB}MB",
                context={"path": str(path), "size": size, "limit": limit},
            )
        return content_type

    def upload(
        self,
        locale: Locale | str,
        key: str,
        index: int,
        slot: int,
        path: Path,
        kind: UploadKind = UploadKind.DOCUMENT,
    ) -> str:
        """Upload one file into attachment ``slot`` of item ``index``.

        Returns:
            URL written into every locale.
        """
        content_type = self.validate_upload(path, kind)
        self.synchronizer.begin_upload(locale, key, index, slot)
        try:
            url = self.portal.upload(kind, path, content_type)
        except PortalError as e:
            self.synchronizer.fail_upload(locale, key, index, slot, e.message)
            raise
        self.synchronizer.complete_upload(locale, key, index, slot, url)
        return url

    def upload_many(
        self,
        locale: Locale | str,
        key: str,
        index: int,
        first_slot: int,
        paths: list[Path],
        kind: UploadKind = UploadKind.DOCUMENT,
    ) -> list[UploadOutcome]:
        """Upload several files at once; file ``k`` goes to slot ``first_slot + k``.

        Requests run concurrently in a thread pool. Completions are applied
        one at a time on the calling thread, so the document is only ever
        touched from here.
        """
        sync = self.synchronizer
        outcomes: dict[int, UploadOutcome] = {}
        pending: dict[int, tuple[Path, str]] = {}
        for offset, path in enumerate(paths):
            slot = first_slot + offset
            outcomes[slot] = UploadOutcome(path=path, slot=slot)
            try:
                pending[slot] = (path, self.validate_upload(path, kind))
            except UploadValidationError as e:
                outcomes[slot].error = e
                continue
            sync.begin_upload(locale, key, index, slot)

        if pending:
            with ThreadPoolExecutor(max_workers=self.upload_workers) as pool:
                futures = {
                    pool.submit(
                        contextvars.copy_context().run, self.portal.upload, kind, path, content_type
                    ): slot
                    for slot, (path, content_type) in pending.items()
                }
                for future in as_completed(futures):
                    slot = futures[future]
                    try:
                        url = future.result()
                    except PortalError as e:
                        outcomes[slot].error = e
                        sync.fail_upload(locale, key, index, slot, e.message)
                        continue
                    outcomes[slot].url = url
                    sync.complete_upload(locale, key, index, slot, url)

        failed = sum(1 for outcome in outcomes.values() if not outcome.ok)
        logger.info("Uploaded %d of %d files to %s[%d]", len(paths) - failed, len(paths), key, index)
        return [outcomes[slot] for slot in sorted(outcomes)]

    def remove_attachment(self, locale: Locale | str, key: str, index: int, slot: int) -> str:
        return self.synchronizer.remove_attachment(locale, key, index, slot)

    # -- persistence -------------------------------------------------------

    def save(self, *, is_published: bool = True) -> Page:
        """Serialize the document and create or update the page."""
        payload = serialize_page(
            self.document,
            self.kind,
            slug=self.kind.slug,
            is_published=is_published,
        )
        if self.page is not None and self.page.id is not None:
            self.page = self.portal.update_page(self.page.id, payload)
        else:
            self.page = self.portal.create_page(payload)
        logger.info("Saved page '%s' (id=%s)", self.kind.slug, self.page.id)
        return self.page
