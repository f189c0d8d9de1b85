"""Supported content languages."""

from enum import StrEnum

from .exceptions import UnknownLocaleError


class Locale(StrEnum):
    """Content language of the portal."""

    FR = "fr"
    AR = "ar"
    EN = "en"

    @classmethod
    def parse(cls, code: "str | Locale") -> "Locale":
        """Parse a locale code case-insensitively (the backend stores ``FR``)."""
        if isinstance(code, Locale):
            return code
        try:
            return cls(str(code).strip().lower())
        except ValueError as e:
            raise UnknownLocaleError(
                f"Unsupported locale '{code}'",
                cause=e,
                context={"supported": [loc.value for loc in cls]},
            ) from e


# Editing order, also the fallback order for page-level metadata
LOCALES: tuple[Locale, ...] = (Locale.FR, Locale.AR, Locale.EN)

LANGUAGE_NAMES: dict[Locale, str] = {
    Locale.FR: "Français",
    Locale.AR: "العربية",
    Locale.EN: "English",
}
