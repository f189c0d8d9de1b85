"""Multilingual content model.

A ``LocalizedDocument`` holds one ``LocaleContent`` per supported locale.
All three locales are always present: content that has not been authored
yet is represented by empty strings and empty lists, never by a missing
key. Repeatable entries (calls, reports, legal texts, media) are
``ListItem`` objects correlated across locales by their ``id``.
"""

from __future__ import annotations

import uuid
from collections.abc import Iterator
from typing import Any, ClassVar

from pydantic import BaseModel, ConfigDict, Field

from .locales import LOCALES, Locale


def new_item_id() -> str:
    """Generate a stable identifier for a list item."""
    return uuid.uuid4().hex[:12]


class ListItem(BaseModel):
    """One repeatable entry of a list (a call, a report, a video...).

    ``title`` and ``attachments`` are common to every kind; any other
    authored field (``year``, ``description``, ``details``...) is kept as a
    pydantic extra and round-trips untouched.
    """

    model_config = ConfigDict(extra="allow")

    RESERVED: ClassVar[frozenset[str]] = frozenset({"id", "title", "attachments"})

    id: str = Field(default_factory=new_item_id)
    title: str = ""
    attachments: list[str] = Field(default_factory=list)

    @property
    def fields(self) -> dict[str, Any]:
        """Authored fields other than id, title and attachments."""
        return dict(self.model_extra or {})

    def set_field(self, name: str, value: Any) -> None:
        if name == "id":
            raise ValueError("List item ids are immutable")
        setattr(self, name, value)

    def is_blank(self) -> bool:
        """True for a placeholder row nobody has filled in."""
        if self.title.strip() or any(self.attachments):
            return False
        return not any(value not in ("", None, [], {}) for value in self.fields.values())

    @classmethod
    def placeholder(cls, item_id: str | None = None) -> ListItem:
        return cls(id=item_id or new_item_id())


class LocaleContent(BaseModel):
    """Content of one page in one locale."""

    model_config = ConfigDict(populate_by_name=True)

    # wire name -> attribute name
    SCALAR_FIELDS: ClassVar[dict[str, str]] = {
        "title": "title",
        "heroTitle": "hero_title",
        "heroSubtitle": "hero_subtitle",
        "sectionTitle": "section_title",
        "introText": "intro_text",
    }

    title: str = ""
    hero_title: str = Field(default="", alias="heroTitle")
    hero_subtitle: str = Field(default="", alias="heroSubtitle")
    section_title: str = Field(default="", alias="sectionTitle")
    intro_text: str = Field(default="", alias="introText")
    lists: dict[str, list[ListItem]] = Field(default_factory=dict)
    extras: dict[str, Any] = Field(default_factory=dict)

    def items(self, key: str) -> list[ListItem]:
        """Return the list stored under ``key``, creating it when missing."""
        return self.lists.setdefault(key, [])

    def get_field(self, name: str) -> Any:
        """Read a scalar by wire or attribute name, falling back to extras."""
        attr = self.SCALAR_FIELDS.get(name, name)
        if attr in self.SCALAR_FIELDS.values():
            return getattr(self, attr)
        return self.extras.get(name, "")

    def set_field(self, name: str, value: Any) -> None:
        """Write a scalar by wire or attribute name; unknown names go to extras."""
        attr = self.SCALAR_FIELDS.get(name, name)
        if attr in self.SCALAR_FIELDS.values():
            setattr(self, attr, "" if value is None else str(value))
        else:
            self.extras[name] = value

    def is_empty(self) -> bool:
        if any(getattr(self, attr) for attr in self.SCALAR_FIELDS.values()):
            return False
        if any(self.lists.values()):
            return False
        return not self.extras


class LocalizedDocument(BaseModel):
    """Per-locale content of one editable page or article."""

    kind: str = "generic"
    fr: LocaleContent = Field(default_factory=LocaleContent)
    ar: LocaleContent = Field(default_factory=LocaleContent)
    en: LocaleContent = Field(default_factory=LocaleContent)

    def __getitem__(self, locale: Locale | str) -> LocaleContent:
        return getattr(self, Locale.parse(locale).value)

    def __setitem__(self, locale: Locale | str, content: LocaleContent) -> None:
        setattr(self, Locale.parse(locale).value, content)

    def locales(self) -> Iterator[tuple[Locale, LocaleContent]]:
        """Iterate ``(locale, content)`` pairs in editing order."""
        for locale in LOCALES:
            yield locale, self[locale]

    @classmethod
    def empty(cls, kind: str = "generic", list_keys: tuple[str, ...] = ()) -> LocalizedDocument:
        """Build a document with every locale present and every list empty."""
        doc = cls(kind=kind)
        for _, content in doc.locales():
            for key in list_keys:
                content.items(key)
        return doc
