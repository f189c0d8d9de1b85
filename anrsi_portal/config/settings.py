"""Configuration management for the ANRSI portal toolkit."""

from pathlib import Path

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


def _sanitize_secret(value: str) -> str:
    """Remove BOM characters and whitespace from secrets and URLs.

    Values pasted from Windows editors or injected by deployment tooling
    may carry a BOM that breaks HTTP headers.
    """
    if not value:
        return value
    return value.lstrip("\ufeff").strip()


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_prefix="ANRSI_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Portal backend
    api_base_url: str = "http://localhost:8080/api"
    request_timeout: float = 30.0
    # Uploads have no timeout policy unless one is configured
    upload_timeout: float | None = None

    @field_validator("api_base_url", mode="after")
    @classmethod
    def sanitize_url(cls, value: str) -> str:
        """Remove BOM and whitespace, drop the trailing slash."""
        return _sanitize_secret(value).rstrip("/")

    # Admin session persistence
    session_file: Path = Path("./data/session.json")

    # Uploads
    max_image_bytes: int = 10 * 1024 * 1024
    max_document_bytes: int = 50 * 1024 * 1024
    upload_workers: int = 4

    # Listing
    default_page_size: int = 10

    # HTTP service
    cors_origins: list[str] = [
        "http://localhost:4200",  # Angular dev server
        "http://localhost:3000",
    ]

    # Logging
    log_level: str = "INFO"
    log_json: bool = False

    @property
    def data_dir(self) -> Path:
        """Directory holding local state (session file)."""
        return self.session_file.parent

    def ensure_directories(self) -> None:
        """Create all required directories if they don't exist."""
        self.data_dir.mkdir(parents=True, exist_ok=True)


# Global settings instance
settings = Settings()
