"""Article models.

An article body is a ``LocalizedDocument`` of kind ``article``: each
locale's ``title`` holds the headline and its ``extras`` hold ``content``
and ``excerpt``. Author, date, image, category, tags and flags are shared
by all locales.
"""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from .content import LocalizedDocument

ARTICLE_TEXT_FIELDS = ("title", "content", "excerpt")


def _article_body() -> LocalizedDocument:
    return LocalizedDocument(kind="article")


class ArticleDraft(BaseModel):
    """An article being edited."""

    id: int | None = None
    body: LocalizedDocument = Field(default_factory=_article_body)
    author: str = ""
    publish_date: str = ""
    image_url: str = ""
    category: str = ""
    # Comma-separated text as typed by the editor, or an already split list
    tags: str | list[str] = ""
    featured: bool = False
    published: bool = True


class ArticleTranslationPayload(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    title: str = ""
    content: str = ""
    excerpt: str = ""


class ArticleWritePayload(BaseModel):
    """Body of ``POST /articles`` and ``PUT /articles/{id}``."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    title: str = ""
    content: str = ""
    excerpt: str = ""
    author: str = ""
    publish_date: str | None = None
    image_url: str = ""
    category: str = ""
    tags: list[str] = Field(default_factory=list)
    featured: bool = False
    published: bool = True
    translations: dict[str, ArticleTranslationPayload] = Field(default_factory=dict)

    def to_wire(self) -> dict[str, Any]:
        return self.model_dump(by_alias=True, exclude_none=True)
