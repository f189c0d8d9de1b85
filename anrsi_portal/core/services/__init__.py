"""Core services: content store, synchronization, (de)serialization, sessions."""

from .content_store import LanguageContentStore
from .normalizer import normalize_article, normalize_page
from .page_editor import PageEditor, UploadOutcome
from .pagination import PageWindow, paginate, paginate_items
from .serializer import serialize_article, serialize_locale, serialize_page
from .session import SessionManager
from .synchronizer import SharedAssetSynchronizer

__all__ = [
    "LanguageContentStore",
    "SharedAssetSynchronizer",
    "normalize_page",
    "normalize_article",
    "serialize_page",
    "serialize_locale",
    "serialize_article",
    "PageWindow",
    "paginate",
    "paginate_items",
    "SessionManager",
    "PageEditor",
    "UploadOutcome",
]
