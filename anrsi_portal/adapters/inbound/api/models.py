"""Pydantic models for API requests and responses."""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from ....core.domain import Locale, UploadKind


class HealthResponse(BaseModel):
    """Response model for health check."""

    status: str = Field(..., description="Health status")
    version: str = Field(..., description="API version")
    backend: str = Field(..., description="Portal backend status")


class PaginationInfo(BaseModel):
    """Page links for a paginated list."""

    page: int = Field(..., description="Current page (1-based, clamped)")
    page_size: int = Field(..., description="Items per page")
    total_items: int = Field(..., description="Length of the whole list")
    total_pages: int = Field(..., description="Number of pages")
    page_numbers: list[int | None] = Field(
        ..., description="Page links to render; null marks an ellipsis"
    )
    has_previous: bool
    has_next: bool


class PublicPageResponse(BaseModel):
    """A page rendered in one language."""

    slug: str = Field(..., description="Backend slug of the page")
    kind: str = Field(..., description="Page kind")
    lang: Locale = Field(..., description="Language of the content")
    title: str = ""
    hero_title: str = ""
    hero_subtitle: str = ""
    section_title: str = ""
    intro_text: str = ""
    extras: dict[str, Any] = Field(default_factory=dict)
    list_key: str | None = Field(None, description="Paginated list")
    items: list[dict[str, Any]] = Field(default_factory=list)
    pagination: PaginationInfo | None = None


class OpenSessionRequest(BaseModel):
    """Request model for opening an editing session."""

    kind: str = Field(
        ...,
        description="Page kind name or slug",
        json_schema_extra={"example": "rapports-annuels"},
    )


class EditorSessionResponse(BaseModel):
    """State of an editing session."""

    session_id: str
    kind: str
    slug: str
    page_id: int | None = None
    document: dict[str, Any] = Field(..., description="Per-locale content (fr, ar, en)")
    uploads: list[dict[str, Any]] = Field(
        default_factory=list, description="Tracked upload states"
    )


class FieldUpdate(BaseModel):
    """Set one scalar field of one locale."""

    locale: Locale
    name: str = Field(..., description="Field name, e.g. heroTitle or partnershipText")
    value: Any = None


class ItemCreate(BaseModel):
    """Add an item to a list in every locale."""

    fields: dict[str, Any] = Field(default_factory=dict)


class ItemResponse(BaseModel):
    key: str
    index: int
    item: dict[str, Any]


class AttachmentResponse(BaseModel):
    """Attachment written into every locale."""

    url: str
    key: str
    index: int
    slot: int
    kind: UploadKind


class SaveResponse(BaseModel):
    id: int | None
    slug: str
    is_published: bool


class ErrorDetail(BaseModel):
    """Structured error detail information."""

    type: str = Field(..., description="Exception type name")
    code: str = Field(..., description="Error code (e.g., ANR_API_002)")
    message: str = Field(..., description="Human-readable error message")


class ErrorLocation(BaseModel):
    """Source location where error occurred."""

    model_config = ConfigDict(populate_by_name=True)

    class_name: str = Field(..., alias="class", description="Class name or <module>")
    method: str = Field(..., description="Method/function name")
    file: str = Field(..., description="Source file name")
    line: int = Field(..., description="Line number")
    timestamp: str | None = Field(None, description="When the error occurred")


class ErrorResponse(BaseModel):
    """Response model for structured errors.

    Example:
        {
            "error": {"type": "ServerUnreachableError", "code": "ANR_API_002", "message": "..."},
            "location": {"class": "PortalClient", "method": "_request", ...},
            "context": {"url": "http://..."},
            "stack_trace": ["Traceback...", ...]  # Only in debug mode
        }
    """

    error: ErrorDetail = Field(..., description="Error details including type, code, and message")
    location: ErrorLocation | None = Field(None, description="Source location of the error")
    context: dict | None = Field(None, description="Additional debugging context")
    cause: dict | None = Field(None, description="Underlying exception that caused this error")
    stack_trace: list[str] | None = Field(None, description="Stack trace (debug mode only)")
