"""Shared-asset synchronization across locales.

Uploaded files are the same for every language, but each locale's content
keeps its own attachment list. When an upload completes, the URL is written
at the same (item, slot) coordinate in all three locales. Upload progress
is tracked only for the locale the editor uploaded from.
"""

import logging

from ..domain import LOCALES, Locale, UploadKey, UploadState, UploadStatus
from ..domain.exceptions import ItemNotFoundError
from .content_store import LanguageContentStore

logger = logging.getLogger(__name__)


class SharedAssetSynchronizer:
    """Keeps attachment URLs identical across locales."""

    def __init__(self, store: LanguageContentStore) -> None:
        self.store = store
        self._uploads: dict[UploadKey, UploadState] = {}

    @staticmethod
    def _check_slot(key: str, index: int, slot: int) -> None:
        if slot < 0:
            raise ItemNotFoundError(
                f"No attachment slot {slot} in {key}[{index}]",
                context={"list": key, "index": index, "slot": slot},
            )

    def _key(self, locale: Locale | str, key: str, index: int, slot: int) -> UploadKey:
        self._check_slot(key, index, slot)
        item = self.store.item(locale, key, index)
        return UploadKey(Locale.parse(locale), item.id, slot)

    @property
    def uploads(self) -> dict[UploadKey, UploadState]:
        """Snapshot of tracked upload states."""
        return dict(self._uploads)

    def status(self, locale: Locale | str, key: str, index: int, slot: int) -> UploadState | None:
        return self._uploads.get(self._key(locale, key, index, slot))

    def has_pending_uploads(self) -> bool:
        return any(state.is_uploading for state in self._uploads.values())

    def begin_upload(self, locale: Locale | str, key: str, index: int, slot: int) -> UploadKey:
        """Mark a slot as uploading."""
        upload_key = self._key(locale, key, index, slot)
        self._uploads[upload_key] = UploadState(status=UploadStatus.UPLOADING)
        return upload_key

    def report_progress(
        self, locale: Locale | str, key: str, index: int, slot: int, progress: int
    ) -> None:
        upload_key = self._key(locale, key, index, slot)
        state = self._uploads.setdefault(upload_key, UploadState(status=UploadStatus.UPLOADING))
        state.progress = max(0, min(100, progress))

    def complete_upload(
        self, locale: Locale | str, key: str, index: int, slot: int, url: str
    ) -> None:
        """Write ``url`` at ``(index, slot)`` in every locale.

        Locales whose list is shorter than ``index`` are padded with
        placeholder items; attachment lists shorter than ``slot`` are
        padded with empty strings.

        Args:
            locale: Locale the upload was started from.
            key: List key.
            index: Item position in ``locale``.
            slot: Attachment slot of the item.
            url: URL returned by the backend.
        """
        self._check_slot(key, index, slot)
        source = self.store.align(key, index, locale)
        for other in LOCALES:
            item = self.store.ensure_item(other, key, index, source.id)
            while len(item.attachments) <= slot:
                item.attachments.append("")
            item.attachments[slot] = url

        upload_key = UploadKey(Locale.parse(locale), source.id, slot)
        self._uploads[upload_key] = UploadState(status=UploadStatus.COMPLETE, progress=100)
        logger.info("Attachment %s[%d] slot %d set to %s", key, index, slot, url)

    def fail_upload(
        self, locale: Locale | str, key: str, index: int, slot: int, error: str
    ) -> None:
        """Record a failed upload; no locale is written."""
        upload_key = self._key(locale, key, index, slot)
        self._uploads[upload_key] = UploadState(status=UploadStatus.FAILED, error=error)
        logger.warning("Upload for %s[%d] slot %d failed: %s", key, index, slot, error)

    def remove_attachment(self, locale: Locale | str, key: str, index: int, slot: int) -> str:
        """Remove attachment ``slot`` of an item in every locale.

        Tracked upload states of later slots move down by one.

        Returns:
            The removed URL as seen from ``locale``.
        """
        self._check_slot(key, index, slot)
        source = self.store.item(locale, key, index)
        removed = source.attachments[slot] if slot < len(source.attachments) else ""
        for other in LOCALES:
            position = self.store.find_index(other, key, source.id)
            if position is None:
                continue
            attachments = self.store.items(other, key)[position].attachments
            if slot < len(attachments):
                del attachments[slot]

        reindexed: dict[UploadKey, UploadState] = {}
        for upload_key, state in self._uploads.items():
            if upload_key.item_id != source.id:
                reindexed[upload_key] = state
            elif upload_key.slot > slot:
                reindexed[upload_key._replace(slot=upload_key.slot - 1)] = state
            elif upload_key.slot < slot:
                reindexed[upload_key] = state
        self._uploads = reindexed
        return removed

    def clear_item(self, item_id: str) -> None:
        """Forget upload states of a removed item."""
        self._uploads = {k: v for k, v in self._uploads.items() if k.item_id != item_id}
