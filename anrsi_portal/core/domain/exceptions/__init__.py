"""Custom exception hierarchy for the ANRSI portal toolkit.

Each exception carries an error code, the location it was raised from,
an optional cause and a ``to_dict`` rendering for structured logs and
API responses. Import from this package directly:

    from anrsi_portal.core.domain.exceptions import PortalError, ServerError
"""

# Base classes
from .base import ExceptionContext, PortalError

# Backend API exceptions
from .api import (
    ApiError,
    AuthenticationError,
    RequestRejectedError,
    ResourceNotFoundError,
    ServerError,
    ServerUnreachableError,
)

# Configuration exceptions
from .configuration import ConfigurationError, InvalidConfigurationError

# Content exceptions
from .content import (
    ContentError,
    ContentParseError,
    ItemNotFoundError,
    UnknownLocaleError,
    UnknownPageKindError,
)

# Validation exceptions
from .validation import InvalidPaginationError, UploadValidationError, ValidationError

__all__ = [
    # Base
    "ExceptionContext",
    "PortalError",
    # API
    "ApiError",
    "ServerUnreachableError",
    "AuthenticationError",
    "RequestRejectedError",
    "ResourceNotFoundError",
    "ServerError",
    # Configuration
    "ConfigurationError",
    "InvalidConfigurationError",
    # Content
    "ContentError",
    "ContentParseError",
    "UnknownLocaleError",
    "ItemNotFoundError",
    "UnknownPageKindError",
    # Validation
    "ValidationError",
    "UploadValidationError",
    "InvalidPaginationError",
]
