"""Health check endpoints."""

from fastapi import APIRouter, Depends

from ..... import __version__
from .....core.domain.exceptions import ApiError
from .....core.ports import PortalPort
from ..deps import get_portal
from ..models import HealthResponse

router = APIRouter(tags=["health"])


@router.get("/health", response_model=HealthResponse)
async def health_check() -> HealthResponse:
    """Basic health check endpoint.

    Returns:
        HealthResponse with current status and version.
    """
    return HealthResponse(status="healthy", version=__version__, backend="not_checked")


@router.get("/ready", response_model=HealthResponse)
def readiness_check(portal: PortalPort = Depends(get_portal)) -> HealthResponse:
    """Readiness probe: checks that the portal backend answers.

    Returns:
        HealthResponse with the backend status.
    """
    try:
        slugs = portal.page_slugs()
        backend = f"connected ({len(slugs)} pages)"
    except ApiError as e:
        backend = f"error: {e.message}"
    return HealthResponse(status="ready", version=__version__, backend=backend)
