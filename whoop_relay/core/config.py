"""Application settings and environment helpers."""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Optional

from dotenv import load_dotenv

load_dotenv(override=False)


class ConfigurationError(RuntimeError):
    """Raised when a required setting is missing from the environment."""

    def __init__(self, missing: Iterable[str]):
        self.missing = list(missing)
        super().__init__(
            "Missing required environment variables: " + ", ".join(self.missing)
        )


def _env(name: str) -> Optional[str]:
    value = os.getenv(name)
    if value is None:
        return None
    value = value.strip()
    return value or None


def _env_bool(name: str, default: bool = False) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.strip().lower() in {"1", "true", "yes", "on"}


def _split_csv(raw: str | None) -> List[str]:
    if not raw:
        return []
    return [item.strip() for item in raw.split(",") if item.strip()]


def _unique(values: Iterable[str]) -> List[str]:
    seen = set()
    ordered: List[str] = []
    for value in values:
        if value not in seen:
            seen.add(value)
            ordered.append(value)
    return ordered


def _normalize_database_url(url: Optional[str]) -> Optional[str]:
    """Rewrite Heroku/Supabase style ``postgres://`` URLs for SQLAlchemy."""

    if url and url.startswith("postgres://"):
        return url.replace("postgres://", "postgresql://", 1)
    return url


_local_dev_origins = [
    "http://localhost:5173",
    "http://127.0.0.1:5173",
    "http://localhost:3000",
    "http://127.0.0.1:3000",
]


@dataclass(frozen=True)
class Settings:
    """Snapshot of the process configuration."""

    whoop_client_id: Optional[str] = None
    whoop_client_secret: Optional[str] = None
    app_url: Optional[str] = None
    database_url: Optional[str] = None
    app_env: str = "development"
    log_level: str = "INFO"
    additional_origins: List[str] = field(default_factory=list)
    db_create_tables: bool = True

    @classmethod
    def from_env(cls) -> "Settings":
        app_url = _env("APP_URL")
        return cls(
            whoop_client_id=_env("WHOOP_CLIENT_ID"),
            whoop_client_secret=_env("WHOOP_CLIENT_SECRET"),
            app_url=app_url.rstrip("/") if app_url else None,
            database_url=_normalize_database_url(_env("DATABASE_URL")),
            app_env=_env("APP_ENV") or "development",
            log_level=(_env("LOG_LEVEL") or "INFO").upper(),
            additional_origins=_split_csv(os.getenv("ALLOWED_ORIGINS")),
            db_create_tables=_env_bool("DB_CREATE_TABLES", True),
        )

    @property
    def has_whoop_credentials(self) -> bool:
        return bool(self.whoop_client_id and self.whoop_client_secret)

    @property
    def redirect_uri(self) -> Optional[str]:
        if not self.app_url:
            return None
        return f"{self.app_url}/api/oauthcallback"

    @property
    def allowed_origins(self) -> List[str]:
        origins = [self.app_url] if self.app_url else []
        return _unique([*origins, *self.additional_origins, *_local_dev_origins])

    def require_oauth(self) -> None:
        """Raise ``ConfigurationError`` unless the OAuth exchange can run."""

        missing = [
            name
            for name, value in (
                ("WHOOP_CLIENT_ID", self.whoop_client_id),
                ("WHOOP_CLIENT_SECRET", self.whoop_client_secret),
                ("APP_URL", self.app_url),
            )
            if not value
        ]
        if missing:
            raise ConfigurationError(missing)

    def presence(self) -> Dict[str, object]:
        """Report which settings are present without revealing their values."""

        return {
            "hasWhoopClientId": bool(self.whoop_client_id),
            "hasWhoopClientSecret": bool(self.whoop_client_secret),
            "hasAppUrl": bool(self.app_url),
            "hasDatabaseUrl": bool(self.database_url),
            "appEnv": self.app_env,
        }


def get_settings() -> Settings:
    """Read settings fresh from the environment.

    Used as a FastAPI dependency so tests can override it and so that a
    missing variable fails the request that needs it rather than the import.
    """

    return Settings.from_env()


__all__ = ["ConfigurationError", "Settings", "get_settings"]
