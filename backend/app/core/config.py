# backend/app/core/config.py

from __future__ import annotations

from typing import Dict, List, Optional
from urllib.parse import urlsplit, urlunsplit, parse_qsl, urlencode

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from app.core.tenants import TenantConfig


def _strip_asyncpg_unsupported_params(url: str) -> str:
    """
    asyncpg does NOT accept sslmode or channel_binding as connect kwargs.
    If these appear in the URL query, SQLAlchemy can end up passing them to
    asyncpg.connect(), causing:
      TypeError: connect() got an unexpected keyword argument 'sslmode'
    """
    parts = urlsplit(url)
    if not parts.query:
        return url

    params = parse_qsl(parts.query, keep_blank_values=True)
    filtered = [(k, v) for (k, v) in params if k not in {"sslmode", "channel_binding"}]
    new_query = urlencode(filtered, doseq=True)
    return urlunsplit((parts.scheme, parts.netloc, parts.path, new_query, parts.fragment))


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # -----------------------------
    # Environment
    # -----------------------------
    # Use: development | staging | production
    ENVIRONMENT: str = "development"
    LOG_LEVEL: str = "INFO"

    # -----------------------------
    # DB
    # -----------------------------
    DATABASE_URL_ASYNC: str
    # Alembic only; falls back to the async URL (env.py runs migrations async).
    DATABASE_URL_SYNC: Optional[str] = None

    # -----------------------------
    # JWT
    # -----------------------------
    # No default: the process must not start without a signing secret.
    JWT_SECRET: str = Field(repr=False)
    JWT_ALGORITHM: str = "HS256"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 60

    # -----------------------------
    # Tenants (JSON map: slug -> TenantConfig)
    # -----------------------------
    TENANTS: Dict[str, TenantConfig] = Field(default_factory=dict)
    DEFAULT_TENANT: str = "preswylfa"

    # -----------------------------
    # HTTP
    # -----------------------------
    CORS_ORIGINS: List[str] = [
        "http://localhost:3000",
        "http://holidayhomesandlets.co.uk",
        "https://holidayhomesandlets.co.uk",
        "http://www.holidayhomesandlets.co.uk",
        "https://www.holidayhomesandlets.co.uk",
    ]
    # When set, POST /add-event requires a matching X-API-Key header.
    ADD_EVENT_API_KEY: Optional[str] = Field(default=None, repr=False)

    # -----------------------------
    # Google Calendar
    # -----------------------------
    GOOGLE_CALENDAR_URL: str = "https://www.googleapis.com/calendar/v3"
    CALENDAR_TIMEOUT_SECONDS: float = 10.0

    # -----------------------------
    # Mail (default sender; tenants may override)
    # -----------------------------
    MAIL_SERVER: str = "localhost"
    MAIL_PORT: int = 465
    MAIL_USERNAME: Optional[str] = None
    MAIL_PASSWORD: Optional[str] = Field(default=None, repr=False)
    # Defaults to MAIL_USERNAME
    MAIL_FROM: Optional[str] = None
    MAIL_FROM_NAME: str = "Holiday Homes & Lets"
    MAIL_SSL_TLS: bool = True
    MAIL_STARTTLS: bool = False
    MAIL_SUPPRESS_SEND: bool = False

    @property
    def DATABASE_URL_ASYNC_CLEAN(self) -> str:
        return _strip_asyncpg_unsupported_params(self.DATABASE_URL_ASYNC)

    @property
    def is_production_like(self) -> bool:
        return (self.ENVIRONMENT or "").strip().lower() in {"staging", "production"}

    def model_post_init(self, __context) -> None:  # pydantic v2 hook
        secret = (self.JWT_SECRET or "").strip()
        if not secret:
            raise ValueError("JWT_SECRET must be set; refusing to issue unsigned tokens.")

        # Enforce that we never run staging/production with a weak secret.
        if self.is_production_like and len(secret) < 32:
            raise ValueError("JWT_SECRET is too short; use at least 32 characters in staging/production.")

        if self.JWT_ALGORITHM not in {"HS256"}:
            raise ValueError(f"Unsupported JWT_ALGORITHM={self.JWT_ALGORITHM!r}. Allowed: HS256")


# this must exist for: `from app.core.config import settings`
settings = Settings()
