"""
Application configuration.

All settings are read from environment variables (or a local .env file)
once at startup. The storage backend is chosen here and nowhere else.
"""

import enum
from functools import lru_cache
from typing import Annotated, List, Optional

from pydantic import field_validator
from pydantic_settings import BaseSettings, NoDecode, SettingsConfigDict


DEFAULT_SESSION_SECRET = "kriedko-session-secret"
DEFAULT_ADMIN_PASS = "change-me"
DEFAULT_ADMIN_TOKEN = "admin-kriedko"


class StoreBackend(str, enum.Enum):
    """Persistence backends for submissions"""
    FILE = "file"
    KV = "kv"
    SQL = "sql"
    MEMORY = "memory"


class Settings(BaseSettings):
    """
    Application settings with environment variable support.

    Secrets ship with development defaults so the service runs out of the
    box; production startup refuses them (see validate_production_config).
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Environment Settings
    environment: str = "development"
    debug: bool = False
    log_level: str = "INFO"

    # Storage Configuration
    storage_backend: StoreBackend = StoreBackend.FILE
    data_file: str = "data/submissions.json"
    redis_url: Optional[str] = None
    redis_key_prefix: str = "kriedko"
    database_url: str = "sqlite:///./data/kriedko.db"

    # Admin Authentication
    session_secret: str = DEFAULT_SESSION_SECRET
    session_cookie_name: str = "kriedko_admin"
    session_ttl_hours: int = 12
    admin_user: str = "admin"
    admin_pass: str = DEFAULT_ADMIN_PASS
    admin_token: str = DEFAULT_ADMIN_TOKEN

    # Live dashboard stream
    stream_poll_interval_seconds: float = 1.0
    stream_keepalive_seconds: float = 25.0
    stream_max_lifetime_seconds: float = 55.0

    # Secondary aggregation (best effort)
    remote_aggregator_url: Optional[str] = None
    remote_aggregator_key: Optional[str] = None
    remote_aggregator_timeout_seconds: float = 5.0

    # API
    cors_origins: Annotated[List[str], NoDecode] = ["http://localhost:3000"]

    @field_validator("cors_origins", mode="before")
    @classmethod
    def parse_cors_origins(cls, v):
        """Parse CORS origins from string or list."""
        if isinstance(v, str):
            return [origin.strip() for origin in v.split(",") if origin.strip()]
        return v

    @field_validator("storage_backend", mode="before")
    @classmethod
    def parse_storage_backend(cls, v):
        if isinstance(v, str):
            return v.strip().lower()
        return v

    @property
    def is_production(self) -> bool:
        """Check if running in production environment."""
        return self.environment.lower() == "production"

    @property
    def forwarding_enabled(self) -> bool:
        return bool(self.remote_aggregator_url)


@lru_cache()
def get_settings() -> Settings:
    """
    Get application settings (cached).

    Returns:
        Settings instance with environment variables loaded
    """
    return Settings()


def validate_production_config(settings: Settings) -> None:
    """Validate configuration for production deployment."""
    if not settings.is_production:
        return

    security_issues = []

    if settings.session_secret == DEFAULT_SESSION_SECRET:
        security_issues.append("SESSION_SECRET is using default value")

    if settings.admin_pass == DEFAULT_ADMIN_PASS:
        security_issues.append("ADMIN_PASS is using default value")

    if settings.admin_token == DEFAULT_ADMIN_TOKEN:
        security_issues.append("ADMIN_TOKEN is using default value")

    if settings.debug:
        security_issues.append("DEBUG is enabled in production")

    if settings.storage_backend == StoreBackend.MEMORY:
        security_issues.append("In-memory storage does not survive restarts")

    if settings.storage_backend == StoreBackend.KV and not settings.redis_url:
        security_issues.append("REDIS_URL is required for the kv backend")

    if security_issues:
        raise ValueError(
            f"Production security issues detected: {', '.join(security_issues)}"
        )
