"""JSON file storage for the admin session."""

import json
import logging
from pathlib import Path
from typing import Any

from ...core.ports import SessionStorePort

logger = logging.getLogger(__name__)


class FileSessionStore(SessionStorePort):
    """Keeps the session keys in one JSON file.

    An unreadable file is treated as an empty session so a damaged file
    never locks the editor out of logging in again.
    """

    def __init__(self, path: Path) -> None:
        self.path = path

    def load(self) -> dict[str, Any]:
        if not self.path.exists():
            return {}
        try:
            data = json.loads(self.path.read_text(encoding="utf-8"))
        except (OSError, json.JSONDecodeError) as e:
            logger.error("Could not read session file %s: %s", self.path, e)
            return {}
        if not isinstance(data, dict):
            logger.error("Session file %s does not hold a JSON object", self.path)
            return {}
        return data

    def save(self, values: dict[str, Any]) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        record = {key: value for key, value in values.items() if value is not None}
        self.path.write_text(json.dumps(record, indent=2, ensure_ascii=False), encoding="utf-8")


class MemorySessionStore(SessionStorePort):
    """Session storage living only as long as the process (HTTP service, tests)."""

    def __init__(self, values: dict[str, Any] | None = None) -> None:
        self.values: dict[str, Any] = dict(values or {})

    def load(self) -> dict[str, Any]:
        return dict(self.values)

    def save(self, values: dict[str, Any]) -> None:
        self.values = {key: value for key, value in values.items() if value is not None}
