"""Wire models for pages as the portal backend stores them."""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

_WIRE = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="ignore")


class PageTranslation(BaseModel):
    """One locale of a stored page.

    ``content`` is usually a JSON string, but older records and some
    backend versions hand back an already decoded object.
    """

    model_config = _WIRE

    id: int | None = None
    language: str | None = None
    title: str | None = None
    hero_title: str | None = None
    hero_subtitle: str | None = None
    content: str | dict[str, Any] | None = None
    extra: str | dict[str, Any] | None = None


class Page(BaseModel):
    """A page record returned by the backend."""

    model_config = _WIRE

    id: int | None = None
    slug: str = ""
    title: str | None = None
    hero_title: str | None = None
    hero_subtitle: str | None = None
    hero_image_url: str | None = None
    content: str | dict[str, Any] | None = None
    page_type: str | None = None
    metadata: str | None = None
    is_published: bool = False
    is_active: bool = True
    translations: dict[str, PageTranslation] = Field(default_factory=dict)
    created_at: str | None = None
    updated_at: str | None = None


class PageTranslationPayload(BaseModel):
    """One locale of a page write request."""

    model_config = _WIRE

    title: str = ""
    hero_title: str = ""
    hero_subtitle: str = ""
    content: str = ""
    extra: str | None = None


class PageWritePayload(BaseModel):
    """Body of ``POST /pages`` and ``PUT /pages/{id}``."""

    model_config = _WIRE

    slug: str | None = None
    title: str
    hero_title: str = ""
    hero_subtitle: str = ""
    translations: dict[str, PageTranslationPayload] = Field(default_factory=dict)
    page_type: str = "STRUCTURED"
    is_published: bool = True
    is_active: bool = True

    def to_wire(self) -> dict[str, Any]:
        """Render the camelCase JSON body sent to the backend."""
        return self.model_dump(by_alias=True, exclude_none=True)
