"""
Application configuration using Pydantic Settings.
All environment variables are loaded here with sensible defaults.

`Settings` mirrors the raw environment. `RelayConfig` is the immutable
snapshot the request handlers actually consume; it is built once when the
application is created and never mutated afterwards.
"""
from dataclasses import dataclass
from typing import Optional, Tuple

from pydantic_settings import BaseSettings, SettingsConfigDict


MAX_UPLOAD_BYTES = 10 * 1024 * 1024  # 10 MiB

DEFAULT_DEVELOPMENT_ORIGINS = (
    "http://localhost:5173",
    "http://127.0.0.1:5173",
    "http://localhost:5174",
    "http://127.0.0.1:5174",
)


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # Environment ("production" selects the production allow-list)
    environment: str = "development"
    port: int = 3001
    log_level: str = "INFO"

    # Google Drive
    google_service_account_key: Optional[str] = None  # JSON string or path to JSON file
    google_drive_folder_id: Optional[str] = None

    # CORS
    frontend_url: Optional[str] = None  # Extra origin allowed in production
    production_origins: str = ""  # Comma separated
    development_origins: str = ",".join(DEFAULT_DEVELOPMENT_ORIGINS)  # Comma separated

    # Uploads
    max_upload_bytes: int = MAX_UPLOAD_BYTES

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore"
    )

    @property
    def is_production(self) -> bool:
        return self.environment.lower() in ("production", "prod")

    def allowed_origins(self) -> Tuple[str, ...]:
        """
        Resolve the origin allow-list for the current runtime mode.

        Production uses PRODUCTION_ORIGINS plus FRONTEND_URL when set;
        every other mode uses DEVELOPMENT_ORIGINS.

        Returns:
            Tuple of exact origin strings (empty entries dropped)
        """
        if self.is_production:
            origins = _split_origins(self.production_origins)
            if self.frontend_url:
                origins.append(self.frontend_url.strip().rstrip("/"))
        else:
            origins = _split_origins(self.development_origins)
        # Keep first occurrence order
        return tuple(dict.fromkeys(o for o in origins if o))


def _split_origins(raw: str) -> list[str]:
    return [item.strip().rstrip("/") for item in raw.split(",") if item.strip()]


@dataclass(frozen=True)
class RelayConfig:
    """Read-only configuration shared by every upload request."""

    environment: str
    folder_id: Optional[str]
    allowed_origins: Tuple[str, ...]
    has_service_account_key: bool
    max_upload_bytes: int = MAX_UPLOAD_BYTES

    @classmethod
    def from_settings(cls, settings: Settings) -> "RelayConfig":
        return cls(
            environment=settings.environment,
            folder_id=settings.google_drive_folder_id or None,
            allowed_origins=settings.allowed_origins(),
            has_service_account_key=bool(settings.google_service_account_key),
            max_upload_bytes=settings.max_upload_bytes,
        )


def get_settings() -> Settings:
    """Load settings from the current environment."""
    return Settings()
