"""Input validation exceptions."""

from .base import PortalError


class ValidationError(PortalError):
    """Input failed validation before reaching the backend."""

    error_code = "ANR_VAL_001"


class UploadValidationError(ValidationError):
    """Selected file has the wrong type or exceeds the size limit."""

    error_code = "ANR_VAL_002"


class InvalidPaginationError(ValidationError):
    """Page size or page number is invalid."""

    error_code = "ANR_VAL_003"
