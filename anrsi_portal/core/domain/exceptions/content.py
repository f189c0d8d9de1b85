"""Content model exceptions."""

from .base import PortalError


class ContentError(PortalError):
    """Multilingual content could not be read or edited."""

    error_code = "ANR_CNT_001"


class ContentParseError(ContentError):
    """Persisted content JSON for a locale is malformed."""

    error_code = "ANR_CNT_002"


class UnknownLocaleError(ContentError):
    """Locale code outside the supported set."""

    error_code = "ANR_CNT_003"


class ItemNotFoundError(ContentError):
    """No list item at the requested position or with the requested id."""

    error_code = "ANR_CNT_004"


class UnknownPageKindError(ContentError):
    """No editable page kind is registered under the requested name or slug."""

    error_code = "ANR_CNT_005"
