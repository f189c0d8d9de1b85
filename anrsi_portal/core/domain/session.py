"""Admin user and session models."""

from dataclasses import dataclass
from enum import StrEnum

from pydantic import BaseModel, ConfigDict, field_validator
from pydantic.alias_generators import to_camel

from .locales import Locale


class Role(StrEnum):
    """Role of an admin user (the backend sends upper-case names)."""

    ADMIN = "admin"
    EDITOR = "editor"
    VIEWER = "viewer"


class User(BaseModel):
    """Authenticated admin user."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="ignore")

    id: int | str
    username: str
    email: str = ""
    role: Role = Role.VIEWER
    first_name: str | None = None
    last_name: str | None = None
    is_active: bool = True
    created_at: str | None = None
    last_login: str | None = None

    @field_validator("role", mode="before")
    @classmethod
    def normalize_role(cls, value: object) -> object:
        if isinstance(value, str):
            return value.strip().lower()
        return value

    @property
    def display_name(self) -> str:
        full = " ".join(part for part in (self.first_name, self.last_name) if part)
        return full or self.username


class LoginResponse(BaseModel):
    """Answer of ``POST /auth/login``."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="ignore")

    token: str
    user: User
    expires_in: int | None = None


@dataclass
class AdminSession:
    """Explicit admin session: token, user and language preferences.

    Language preferences outlive the login: logging out clears only the
    token and the user.
    """

    token: str | None = None
    user: User | None = None
    admin_language: Locale = Locale.FR
    public_language: Locale = Locale.FR

    @property
    def is_authenticated(self) -> bool:
        return bool(self.token) and self.user is not None

    def clear_credentials(self) -> None:
        self.token = None
        self.user = None
