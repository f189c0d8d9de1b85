"""Session Store Port Interface."""

from abc import ABC, abstractmethod
from typing import Any


class SessionStorePort(ABC):
    """Abstract key-value storage for the admin session."""

    # Historical storage keys
    TOKEN_KEY = "admin_token"
    USER_KEY = "admin_user"
    ADMIN_LANGUAGE_KEY = "preferred_language"
    PUBLIC_LANGUAGE_KEY = "public_preferred_language"

    @abstractmethod
    def load(self) -> dict[str, Any]:
        """Return all stored keys (empty when nothing was saved)."""
        ...

    @abstractmethod
    def save(self, values: dict[str, Any]) -> None:
        """Persist the given keys, replacing the stored record."""
        ...
