"""Transient upload state for attachment slots.

Upload state lives only for the duration of an editing session and is
never persisted with the document.
"""

from dataclasses import dataclass
from enum import StrEnum
from typing import NamedTuple

from .locales import Locale


class UploadStatus(StrEnum):
    """Lifecycle of one attachment upload."""

    PENDING = "pending"
    UPLOADING = "uploading"
    COMPLETE = "complete"
    FAILED = "failed"


class UploadKey(NamedTuple):
    """Attachment slot of one item, as seen from the locale that uploaded it."""

    locale: Locale
    item_id: str
    slot: int


@dataclass
class UploadState:
    """Progress of an upload into one attachment slot."""

    status: UploadStatus = UploadStatus.PENDING
    progress: int = 0
    error: str | None = None

    @property
    def is_uploading(self) -> bool:
        return self.status == UploadStatus.UPLOADING


class UploadKind(StrEnum):
    """Backend upload endpoint family."""

    IMAGE = "image"
    DOCUMENT = "document"
