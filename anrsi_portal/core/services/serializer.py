"""Save-time serialization of localized content into backend payloads."""

import json
import logging
from datetime import date
from typing import Any

from ..domain import (
    LOCALES,
    ArticleDraft,
    ArticleTranslationPayload,
    ArticleWritePayload,
    ListItem,
    ListSpec,
    LocaleContent,
    LocalizedDocument,
    PageKind,
    PageTranslationPayload,
    PageWritePayload,
)
from .normalizer import SCHEMA_VERSION, SCHEMA_VERSION_KEY

logger = logging.getLogger(__name__)


def _keep(item: ListItem, spec: ListSpec) -> bool:
    """Rows the editor started but abandoned are not persisted."""
    if spec.title_only_required:
        return bool(item.title.strip())
    return not item.is_blank()


def item_to_wire(item: ListItem, spec: ListSpec) -> dict[str, Any]:
    data: dict[str, Any] = {"id": item.id, spec.title_field: item.title}
    data.update(item.fields)
    # Mirror attachment slots into the single-URL fields older readers expect
    for slot, name in enumerate(spec.attachment_fields):
        data[name] = item.attachments[slot] if slot < len(item.attachments) else ""
    data["attachments"] = list(item.attachments)
    return data


def serialize_locale(content: LocaleContent, kind: PageKind) -> dict[str, Any]:
    """Render one locale's content as the JSON object stored by the backend."""
    data: dict[str, Any] = {SCHEMA_VERSION_KEY: SCHEMA_VERSION}
    for wire, attr in LocaleContent.SCALAR_FIELDS.items():
        data[wire] = getattr(content, attr)
    data.update(content.extras)
    for key, items in content.lists.items():
        spec = kind.list_spec(key) or ListSpec(key)
        kept = [item for item in items if _keep(item, spec)]
        if len(kept) != len(items):
            logger.debug("Dropped %d empty rows from '%s'", len(items) - len(kept), key)
        data[key] = [item_to_wire(item, spec) for item in kept]
    return data


def _first_non_empty(doc: LocalizedDocument, attr: str) -> str:
    for locale in LOCALES:
        value = getattr(doc[locale], attr)
        if value and value.strip():
            return value
    return ""


def serialize_page(
    doc: LocalizedDocument,
    kind: PageKind,
    *,
    slug: str | None = None,
    is_published: bool = True,
    is_active: bool = True,
) -> PageWritePayload:
    """Build the page write payload for a document.

    Saving never fails on incomplete content: empty locales are sent as
    empty content and the backend decides what is publishable.

    Args:
        doc: Document being saved.
        kind: Page kind of the document.
        slug: Slug to send (creation only).
        is_published: Publication flag.
        is_active: Active flag.

    Returns:
        PageWritePayload whose page-level title and hero fields come from the
        first locale (fr, ar, en) holding a non-empty value, field by field.
    """
    translations = {
        locale.value: PageTranslationPayload(
            title=content.title or content.hero_title,
            hero_title=content.hero_title,
            hero_subtitle=content.hero_subtitle,
            content=json.dumps(serialize_locale(content, kind), ensure_ascii=False),
        )
        for locale, content in doc.locales()
    }
    return PageWritePayload(
        slug=slug,
        title=_first_non_empty(doc, "title") or kind.default_title,
        hero_title=_first_non_empty(doc, "hero_title"),
        hero_subtitle=_first_non_empty(doc, "hero_subtitle"),
        translations=translations,
        page_type=kind.page_type,
        is_published=is_published,
        is_active=is_active,
    )


def format_publish_date(value: str, today: date | None = None) -> str:
    """Format a publish date as the ``YYYY-MM-DDTHH:MM:SS`` the backend expects.

    A bare date gets midnight; a timestamp loses its ``Z`` or UTC offset; an
    empty value means today at midnight.
    """
    value = (value or "").strip()
    if not value:
        return f"{(today or date.today()).isoformat()}T00:00:00"
    if "T" in value:
        return value.split("Z")[0].split("+")[0]
    return f"{value}T00:00:00"


def split_tags(tags: str | list[str]) -> list[str]:
    parts = tags.split(",") if isinstance(tags, str) else tags
    return [tag.strip() for tag in parts if tag and tag.strip()]


def serialize_article(draft: ArticleDraft, today: date | None = None) -> ArticleWritePayload:
    """Build the article write payload.

    Only locales with a title are sent. The main title, content and
    excerpt come from the first of them in fr, ar, en order.
    """
    translations: dict[str, ArticleTranslationPayload] = {}
    for locale, content in draft.body.locales():
        if not content.title.strip():
            continue
        translations[locale.value] = ArticleTranslationPayload(
            title=content.title,
            content=str(content.extras.get("content") or ""),
            excerpt=str(content.extras.get("excerpt") or ""),
        )

    main = next(iter(translations.values()), ArticleTranslationPayload())
    return ArticleWritePayload(
        title=main.title,
        content=main.content,
        excerpt=main.excerpt,
        author=draft.author,
        publish_date=format_publish_date(draft.publish_date, today),
        image_url=draft.image_url,
        category=draft.category,
        tags=split_tags(draft.tags),
        featured=draft.featured,
        published=draft.published,
        translations=translations,
    )
