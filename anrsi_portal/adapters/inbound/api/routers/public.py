"""Public, localized read views of portal pages."""

import logging

from fastapi import APIRouter, Depends, Query

from .....config import settings
from .....core.domain import Locale, get_page_kind
from .....core.domain.exceptions import ResourceNotFoundError
from .....core.ports import PortalPort
from .....core.services.normalizer import normalize_page
from .....core.services.pagination import paginate_items
from .....core.services.serializer import item_to_wire
from .....core.services.session import SessionManager
from ..deps import get_portal, get_session
from ..models import ErrorResponse, PaginationInfo, PublicPageResponse

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/v1/public", tags=["public"])


@router.get(
    "/pages/{slug}",
    response_model=PublicPageResponse,
    responses={
        400: {"model": ErrorResponse, "description": "Invalid language or page size"},
        404: {"model": ErrorResponse, "description": "Unknown page kind"},
    },
)
def read_page(
    slug: str,
    lang: str | None = Query(None, description="fr, ar or en (default: public language)"),
    list_key: str | None = Query(None, alias="list", description="List to paginate"),
    page: int = Query(1, description="Page number, clamped to the valid range"),
    page_size: int = Query(settings.default_page_size, description="Items per page"),
    portal: PortalPort = Depends(get_portal),
    session: SessionManager = Depends(get_session),
) -> PublicPageResponse:
    """Render one page in one language with a paginated list.

    Pages that were never saved are rendered from their defaults.
    """
    kind = get_page_kind(slug)
    locale = Locale.parse(lang) if lang else session.session.public_language

    try:
        stored = portal.get_page_by_slug(kind.slug, admin=False)
    except ResourceNotFoundError:
        logger.info("Page '%s' not stored yet, rendering defaults", kind.slug)
        stored = None
    document = normalize_page(stored, kind) if stored else None
    if document is None:
        document = kind.default_document()
    content = document[locale]

    response = PublicPageResponse(
        slug=kind.slug,
        kind=kind.name,
        lang=locale,
        title=content.title,
        hero_title=content.hero_title,
        hero_subtitle=content.hero_subtitle,
        section_title=content.section_title,
        intro_text=content.intro_text,
        extras=content.extras,
    )

    key = list_key or (kind.list_keys[0] if kind.list_keys else None)
    if key is not None:
        spec = kind.list_spec(key)
        if spec is None:
            raise ResourceNotFoundError(
                f"Page '{kind.slug}' has no list '{key}'",
                status_code=404,
                context={"lists": list(kind.list_keys)},
            )
        window, visible = paginate_items(content.lists.get(key, []), page, page_size)
        response.list_key = key
        response.items = [item_to_wire(item, spec) for item in visible]
        response.pagination = PaginationInfo(
            page=window.page,
            page_size=window.page_size,
            total_items=window.total_items,
            total_pages=window.total_pages,
            page_numbers=list(window.page_numbers),
            has_previous=window.has_previous,
            has_next=window.has_next,
        )
    return response
