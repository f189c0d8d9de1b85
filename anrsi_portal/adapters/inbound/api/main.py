"""FastAPI application for the ANRSI portal service."""

import logging
import os
import uuid

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from .... import __version__
from ....config import bind_log_context, settings, setup_logging
from ....core.domain.exceptions import PortalError
from ...common.exception_handler import (
    format_exception_json,
    get_http_status_code,
    log_exception,
)
from .routers import editor, health, public

setup_logging(level=settings.log_level, json_format=settings.log_json)
logger = logging.getLogger(__name__)

# Determine if we're in debug mode (shows full stack traces)
DEBUG_MODE = os.getenv("DEBUG", "false").lower() == "true"

app = FastAPI(
    title="ANRSI Portal API",
    description=(
        "Multilingual content service for the ANRSI research agency portal. "
        "Serves localized page views and admin editing sessions."
    ),
    version=__version__,
    docs_url="/docs",
    redoc_url="/redoc",
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=False,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.middleware("http")
async def request_log_context(request: Request, call_next):
    """Tag every record logged while serving a request with its id and path."""
    request_id = request.headers.get("X-Request-ID") or uuid.uuid4().hex[:12]
    with bind_log_context(request_id=request_id, method=request.method, path=request.url.path):
        response = await call_next(request)
    response.headers["X-Request-ID"] = request_id
    return response


app.include_router(health.router)
app.include_router(public.router)
app.include_router(editor.router)


# =============================================================================
# Global Exception Handlers
# =============================================================================


@app.exception_handler(PortalError)
async def portal_error_handler(request: Request, exc: PortalError) -> JSONResponse:
    """Handle all PortalError exceptions with structured JSON response.

    Args:
        request: The incoming request.
        exc: The PortalError exception.

    Returns:
        JSONResponse with structured error details.
    """
    status_code = get_http_status_code(exc)
    log_exception(
        exc,
        level=logging.WARNING if status_code < 500 else logging.ERROR,
        extra_context={"path": str(request.url.path), "method": request.method},
    )
    return JSONResponse(
        status_code=status_code,
        content=exc.to_dict(include_trace=DEBUG_MODE),
    )


@app.exception_handler(Exception)
async def general_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Handle all unhandled exceptions with structured JSON response.

    Args:
        request: The incoming request.
        exc: The unhandled exception.

    Returns:
        JSONResponse with structured error details.
    """
    log_exception(exc, extra_context={"path": str(request.url.path), "method": request.method})
    return JSONResponse(
        status_code=get_http_status_code(exc),
        content=format_exception_json(exc, include_trace=DEBUG_MODE),
    )


# =============================================================================
# Lifecycle Events
# =============================================================================


@app.on_event("startup")
async def startup_event():
    """Log configuration on startup."""
    logger.info("ANRSI Portal API starting up...")
    logger.info("Portal backend: %s", settings.api_base_url)
    logger.info("API docs available at /docs")
    logger.info("Debug mode: %s", "ENABLED" if DEBUG_MODE else "DISABLED")


@app.on_event("shutdown")
async def shutdown_event():
    """Cleanup resources on shutdown."""
    logger.info("ANRSI Portal API shutting down...")


# Export for uvicorn
__all__ = ["app"]
