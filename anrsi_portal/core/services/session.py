"""Admin session lifecycle: login, logout, roles and language preferences."""

import json
import logging
from typing import Any

from pydantic import ValidationError as PydanticValidationError

from ..domain import AdminSession, Locale, Role, User
from ..domain.exceptions import AuthenticationError, UnknownLocaleError
from ..ports import PortalPort, SessionStorePort

logger = logging.getLogger(__name__)


class SessionManager:
    """Owns the admin session and keeps it in a SessionStorePort.

    Created once at the composition root. The REST client reads the token
    from here and calls ``force_logout`` when the backend answers 401/403.
    """

    def __init__(self, store: SessionStorePort, portal: PortalPort | None = None) -> None:
        self._store = store
        self._portal = portal
        self.session = self._load()

    def attach_portal(self, portal: PortalPort) -> None:
        self._portal = portal

    @property
    def token(self) -> str | None:
        return self.session.token

    # -- persistence -----------------------------------------------------

    def _load(self) -> AdminSession:
        values = self._store.load()
        session = AdminSession(
            admin_language=self._language(values.get(SessionStorePort.ADMIN_LANGUAGE_KEY)),
            public_language=self._language(values.get(SessionStorePort.PUBLIC_LANGUAGE_KEY)),
        )

        token = values.get(SessionStorePort.TOKEN_KEY)
        raw_user = values.get(SessionStorePort.USER_KEY)
        if token and raw_user:
            try:
                data = json.loads(raw_user) if isinstance(raw_user, str) else raw_user
                session.user = User.model_validate(data)
                session.token = token
            except (json.JSONDecodeError, PydanticValidationError) as e:
                logger.error("Stored user record is corrupt, logging out: %s", e)
                self.session = session
                self._save()
        return session

    @staticmethod
    def _language(code: Any) -> Locale:
        if not code:
            return Locale.FR
        try:
            return Locale.parse(code)
        except UnknownLocaleError:
            logger.warning("Ignoring stored language '%s'", code)
            return Locale.FR

    def _save(self) -> None:
        session = self.session
        values: dict[str, Any] = {
            SessionStorePort.ADMIN_LANGUAGE_KEY: session.admin_language.value,
            SessionStorePort.PUBLIC_LANGUAGE_KEY: session.public_language.value,
        }
        if session.token and session.user:
            values[SessionStorePort.TOKEN_KEY] = session.token
            values[SessionStorePort.USER_KEY] = session.user.model_dump_json(by_alias=True)
        self._store.save(values)

    # -- authentication --------------------------------------------------

    def login(self, username: str, password: str) -> User:
        """Log in against the backend and persist the token.

        Raises:
            AuthenticationError: If the credentials are refused.
        """
        if self._portal is None:
            raise AuthenticationError("No portal backend is configured for login")
        response = self._portal.login(username, password)
        self.session.token = response.token
        self.session.user = response.user
        self._save()
        logger.info("Logged in as %s (%s)", response.user.username, response.user.role)
        return response.user

    def refresh_user(self) -> User | None:
        """Reload the current user from the backend."""
        if self._portal is None or not self.session.token:
            return None
        self.session.user = self._portal.me()
        self._save()
        return self.session.user

    def logout(self) -> None:
        """Clear token and user; language preferences are kept."""
        self.session.clear_credentials()
        self._save()
        logger.info("Logged out")

    def force_logout(self, reason: str = "") -> None:
        """Logout triggered by the backend refusing the token."""
        if self.session.token is None and self.session.user is None:
            return
        logger.warning("Session rejected by the backend, logging out%s", f": {reason}" if reason else "")
        self.logout()

    def is_authenticated(self) -> bool:
        return self.session.is_authenticated

    def current_user(self) -> User | None:
        return self.session.user

    def has_role(self, role: Role | str) -> bool:
        user = self.session.user
        return user is not None and user.role == Role(str(role).lower())

    def is_admin(self) -> bool:
        return self.has_role(Role.ADMIN)

    def is_editor(self) -> bool:
        return self.has_role(Role.EDITOR) or self.is_admin()

    # -- language preferences --------------------------------------------

    def set_admin_language(self, locale: Locale | str) -> Locale:
        self.session.admin_language = Locale.parse(locale)
        self._save()
        return self.session.admin_language

    def set_public_language(self, locale: Locale | str) -> Locale:
        self.session.public_language = Locale.parse(locale)
        self._save()
        return self.session.public_language
