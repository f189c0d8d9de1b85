"""Load-time normalization of persisted page content.

Pages saved over the years use several JSON shapes:

1. A translations map, one JSON-encoded content blob per locale. Content
   written by this toolkit is tagged with ``schemaVersion``.
2. A single flat content blob with no locale wrapper (oldest format). It
   may itself embed a ``translations`` key.
3. Nothing at all (a page that was never saved).

Every shape is converted into a LocalizedDocument with all three locales
present. A locale whose content cannot be parsed is loaded empty and the
failure is logged; it never prevents editing the other locales.
"""

import json
import logging
from collections.abc import Mapping
from typing import Any

from ..domain import (
    LOCALES,
    ArticleDraft,
    ListItem,
    ListSpec,
    Locale,
    LocaleContent,
    LocalizedDocument,
    Page,
    PageKind,
    PageTranslation,
    new_item_id,
)
from ..domain.article import ARTICLE_TEXT_FIELDS
from ..domain.exceptions import ContentParseError, UnknownLocaleError

logger = logging.getLogger(__name__)

SCHEMA_VERSION = 2
SCHEMA_VERSION_KEY = "schemaVersion"
TRANSLATIONS_KEY = "translations"


def _report(error: ContentParseError) -> None:
    logger.warning("[%s] %s", error.error_code, error.message)


def _decode(raw: str | Mapping[str, Any] | None, where: str) -> dict[str, Any] | None:
    """Decode one content blob into a dict.

    Returns None when the blob is absent or unusable.
    """
    if raw is None:
        return None
    if isinstance(raw, Mapping):
        return dict(raw)
    if not raw.strip():
        return None
    try:
        decoded = json.loads(raw)
    except json.JSONDecodeError as e:
        _report(ContentParseError(f"Malformed {where} content", cause=e, context={"where": where}))
        return None
    if not isinstance(decoded, dict):
        _report(
            ContentParseError(
                f"Unexpected {where} content of type {type(decoded).__name__}",
                context={"where": where},
            )
        )
        return None
    return decoded


def _parse_locale(code: str) -> Locale | None:
    try:
        return Locale.parse(code)
    except UnknownLocaleError as e:
        logger.warning("Ignoring content for unsupported locale '%s': %s", code, e.message)
        return None


def _from_translations(translations: Mapping[str, PageTranslation]) -> dict[Locale, dict[str, Any]]:
    parsed: dict[Locale, dict[str, Any]] = {}
    for code, translation in translations.items():
        locale = _parse_locale(code)
        if locale is None:
            continue
        raw = translation.content
        if raw is None or (isinstance(raw, str) and not raw.strip()):
            # The partners page keeps its structured content in ``extra``
            raw = translation.extra
        data = _decode(raw, f"'{locale}' translation")
        if data is not None:
            parsed[locale] = data
    return parsed


def _from_embedded(translations: Mapping[str, Any]) -> dict[Locale, dict[str, Any]]:
    parsed: dict[Locale, dict[str, Any]] = {}
    for code, raw in translations.items():
        locale = _parse_locale(code)
        if locale is None:
            continue
        if not isinstance(raw, (str, Mapping)):
            continue
        data = _decode(raw, f"embedded '{locale}'")
        if data is not None:
            parsed[locale] = data
    return parsed


def _to_item(entry: Mapping[str, Any], spec: ListSpec) -> ListItem:
    fields = dict(entry)
    item_id = fields.pop("id", None)
    title = fields.pop(spec.title_field, None)
    if spec.title_field != "title":
        legacy_title = fields.pop("title", None)
        if title is None:
            title = legacy_title

    raw_attachments = fields.pop("attachments", None)
    attachments = (
        [str(url) if url else "" for url in raw_attachments]
        if isinstance(raw_attachments, list)
        else []
    )
    # Lift legacy single-URL fields into their attachment slots
    for slot, name in enumerate(spec.attachment_fields):
        url = fields.pop(name, None)
        if not url:
            continue
        while len(attachments) <= slot:
            attachments.append("")
        if not attachments[slot]:
            attachments[slot] = str(url)

    for reserved in ListItem.RESERVED:
        fields.pop(reserved, None)
    return ListItem(
        id=str(item_id) if item_id else "",
        title="" if title is None else str(title),
        attachments=attachments,
        **fields,
    )


def _is_item_list(value: Any) -> bool:
    return isinstance(value, list) and bool(value) and all(isinstance(v, Mapping) for v in value)


def _to_locale_content(data: Mapping[str, Any], kind: PageKind) -> LocaleContent:
    content = LocaleContent()
    for wire, attr in LocaleContent.SCALAR_FIELDS.items():
        value = data.get(wire)
        if isinstance(value, (str, int, float)) and not isinstance(value, bool):
            setattr(content, attr, str(value))

    declared = set(kind.list_keys)
    for key, value in data.items():
        if key in LocaleContent.SCALAR_FIELDS or key == SCHEMA_VERSION_KEY:
            continue
        if key in declared or _is_item_list(value):
            spec = kind.list_spec(key) or ListSpec(key)
            entries = value if isinstance(value, list) else []
            content.lists[key] = [_to_item(e, spec) for e in entries if isinstance(e, Mapping)]
        else:
            content.extras[key] = value
    return content


def _assign_shared_ids(doc: LocalizedDocument) -> None:
    """Give items at the same position in every locale one shared id.

    The first stored id of a row (in fr, ar, en order) wins; ids that
    differ from it are replaced. An id already taken by an earlier row
    is not reused.
    """
    keys = {key for _, content in doc.locales() for key in content.lists}
    for key in keys:
        lists = [doc[locale].items(key) for locale in LOCALES]
        taken: set[str] = set()
        for position in range(max(len(items) for items in lists)):
            row = [items[position] for items in lists if position < len(items)]
            shared = next((item.id for item in row if item.id), None)
            if not shared or shared in taken:
                shared = new_item_id()
            taken.add(shared)
            for item in row:
                if item.id != shared:
                    if item.id:
                        logger.debug("Re-keyed %s item %s to %s", key, item.id, shared)
                    item.id = shared


def _fill_scalars(content: LocaleContent, source: PageTranslation | Page) -> None:
    """Fill empty hero fields from record-level values."""
    for attr in ("title", "hero_title", "hero_subtitle"):
        value = getattr(source, attr, None)
        if value and not getattr(content, attr):
            setattr(content, attr, value)


def normalize_page(page: Page | Mapping[str, Any] | None, kind: PageKind) -> LocalizedDocument | None:
    """Convert a stored page into a LocalizedDocument.

    Args:
        page: Page as returned by the backend (model or raw JSON dict).
        kind: Page kind, giving the list keys and legacy URL fields.

    Returns:
        The normalized document, or None when the page holds no content
        (the caller then loads the kind's defaults).
    """
    if page is None:
        return None
    if not isinstance(page, Page):
        page = Page.model_validate(page)

    parsed = _from_translations(page.translations)
    legacy_flat = False
    if not parsed:
        flat = _decode(page.content, "page")
        if flat is None:
            return None
        embedded = flat.get(TRANSLATIONS_KEY)
        if isinstance(embedded, Mapping) and embedded:
            parsed = _from_embedded(embedded)
        else:
            parsed = {Locale.FR: flat}
            legacy_flat = True
        if not parsed:
            return None

    doc = LocalizedDocument.empty(kind.name, kind.list_keys)
    for locale, data in parsed.items():
        content = _to_locale_content(data, kind)
        tagged = data.get(SCHEMA_VERSION_KEY) is not None
        translation = _translation_for(page, locale)
        if translation is not None and not tagged:
            _fill_scalars(content, translation)
        if legacy_flat and locale == Locale.FR:
            _fill_scalars(content, page)
        doc[locale] = content

    # Every locale carries every list key, even when empty
    keys = set(kind.list_keys) | {key for _, content in doc.locales() for key in content.lists}
    for _, content in doc.locales():
        for key in keys:
            content.items(key)

    _assign_shared_ids(doc)
    return doc


def _translation_for(page: Page, locale: Locale) -> PageTranslation | None:
    for code, translation in page.translations.items():
        if code.lower() == locale.value:
            return translation
    return None


def _fill_article(content: LocaleContent, source: Mapping[str, Any]) -> None:
    content.title = str(source.get("title") or "")
    for name in ARTICLE_TEXT_FIELDS[1:]:
        content.extras[name] = str(source.get(name) or "")


def _date_for_input(value: Any) -> str:
    """Reduce a backend timestamp to the ``YYYY-MM-DD`` date an editor types."""
    if not value:
        return ""
    return str(value)[:10]


def normalize_article(payload: Mapping[str, Any]) -> ArticleDraft:
    """Convert a backend article into an editable draft.

    Articles saved before translations existed carry ``title``, ``content``
    and ``excerpt`` at the top level under ``language`` (French when
    missing).
    """
    body = LocalizedDocument(kind="article")
    translations = payload.get(TRANSLATIONS_KEY)
    if isinstance(translations, Mapping) and translations:
        for code, translation in translations.items():
            locale = _parse_locale(code)
            if locale is not None and isinstance(translation, Mapping):
                _fill_article(body[locale], translation)
    else:
        locale = _parse_locale(payload.get("language") or "fr") or Locale.FR
        _fill_article(body[locale], payload)

    tags = payload.get("tags") or []
    if isinstance(tags, str):
        tags = [tag.strip() for tag in tags.split(",") if tag.strip()]

    return ArticleDraft(
        id=payload.get("id"),
        body=body,
        author=payload.get("author") or "",
        publish_date=_date_for_input(payload.get("publishDate")),
        image_url=payload.get("imageUrl") or "",
        category=payload.get("category") or "",
        tags=list(tags),
        featured=bool(payload.get("featured") or False),
        published=payload.get("published") is not False,
    )
