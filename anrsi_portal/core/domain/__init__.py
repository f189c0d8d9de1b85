"""Domain models for the ANRSI portal toolkit.

Models are organized by domain area:

- locales: the three supported content languages
- content: LocalizedDocument, LocaleContent and ListItem
- page_kinds: registry of editable page kinds and their lists
- uploads: transient upload state keyed by UploadKey
- page / article: wire models exchanged with the backend
- session: admin user and session

All models are re-exported here for convenient importing:

    from anrsi_portal.core.domain import LocalizedDocument, Locale
"""

from .article import ArticleDraft, ArticleTranslationPayload, ArticleWritePayload
from .content import ListItem, LocaleContent, LocalizedDocument, new_item_id
from .locales import LANGUAGE_NAMES, LOCALES, Locale
from .page import Page, PageTranslation, PageTranslationPayload, PageWritePayload
from .page_kinds import PAGE_KINDS, ListSpec, PageKind, get_page_kind
from .session import AdminSession, LoginResponse, Role, User
from .uploads import UploadKey, UploadKind, UploadState, UploadStatus

__all__ = [
    # Locales
    "Locale",
    "LOCALES",
    "LANGUAGE_NAMES",
    # Content
    "ListItem",
    "LocaleContent",
    "LocalizedDocument",
    "new_item_id",
    # Page kinds
    "ListSpec",
    "PageKind",
    "PAGE_KINDS",
    "get_page_kind",
    # Uploads
    "UploadKey",
    "UploadKind",
    "UploadState",
    "UploadStatus",
    # Wire models
    "Page",
    "PageTranslation",
    "PageTranslationPayload",
    "PageWritePayload",
    "ArticleDraft",
    "ArticleTranslationPayload",
    "ArticleWritePayload",
    # Session
    "AdminSession",
    "LoginResponse",
    "Role",
    "User",
]
