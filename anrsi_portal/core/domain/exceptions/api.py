"""Portal backend (REST API) exceptions.

The hierarchy mirrors the failure classes an editor can act on: the
server is unreachable, the session is no longer valid, the request was
rejected, the resource does not exist, or the server failed.
"""

from typing import Any

from .base import PortalError


class ApiError(PortalError):
    """A call to the portal backend failed."""

    error_code = "ANR_API_001"

    def __init__(
        self,
        message: str,
        *,
        status_code: int | None = None,
        server_message: str | None = None,
        cause: Exception | None = None,
        context: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message, cause=cause, context=context)
        self.status_code = status_code
        self.server_message = server_message


class ServerUnreachableError(ApiError):
    """The backend could not be reached (no HTTP status)."""

    error_code = "ANR_API_002"


class AuthenticationError(ApiError):
    """The backend answered 401 or 403; the session is invalid."""

    error_code = "ANR_API_003"


class RequestRejectedError(ApiError):
    """The backend rejected the request as invalid (400) or too large (413)."""

    error_code = "ANR_API_004"


class ResourceNotFoundError(ApiError):
    """The requested resource does not exist (404)."""

    error_code = "ANR_API_005"


class ServerError(ApiError):
    """The backend failed while handling the request (5xx)."""

    error_code = "ANR_API_006"
