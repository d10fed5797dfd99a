import os
import sys
from typing import List

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


def _should_load_env_file() -> str | None:
    """Determine if .env should be loaded.

    For local development, load `.env` automatically so `SUPABASE_JWT_SECRET`
    can be provided from `backend/.env`. **SUPABASE_JWT_SECRET remains
    required** and must be set in production via environment variables.

    Do NOT auto-load `.env` when running under pytest or in CI (so tests
    that validate missing secrets continue to fail fast).
    """
    if any("pytest" in str(x) for x in sys.argv if x):
        return None
    if os.environ.get("CI") in ("1", "true", "True"):
        return None
    return ".env"


class Settings(BaseSettings):
    # Environment configuration
    ENVIRONMENT: str = Field(
        default="development",
        description="Environment: 'development', 'staging', 'production' or 'test'",
    )

    DATABASE_URL: str = "sqlite:///./data/testers_hub.db"

    # Supabase Auth access tokens are HS256 JWTs signed with the project secret
    SUPABASE_JWT_SECRET: str = Field(
        ...,  # Required, no default
        description="Supabase JWT secret - must be set via SUPABASE_JWT_SECRET",
    )
    SUPABASE_JWT_ALGORITHM: str = "HS256"
    SUPABASE_JWT_AUDIENCE: str = Field(
        default="authenticated",
        description="Expected 'aud' claim of Supabase access tokens",
    )
    ACCESS_TOKEN_COOKIE: str = Field(
        default="sb-access-token",
        description="Cookie holding the access token when no Authorization header is sent",
    )

    CORS_ORIGINS: List[str] = Field(
        default=["http://localhost:3000"],
        description="Allowed CORS origins (comma-separated in env var)",
    )

    # Profile promoted to admin by init_db.py
    INITIAL_ADMIN_ID: str | None = Field(
        default=None,
        description="Profile id (auth subject) promoted to admin on init",
    )

    # Database connection pool settings
    DB_POOL_SIZE: int = Field(
        default=5,
        description="Number of persistent connections in pool",
    )
    DB_MAX_OVERFLOW: int = Field(
        default=10,
        description="Extra connections when pool exhausted",
    )
    DB_POOL_TIMEOUT: int = Field(
        default=30,
        description="Seconds to wait for connection from pool",
    )
    DB_POOL_RECYCLE: int = Field(
        default=1800,
        description="Recycle connections after N seconds (30 min default)",
    )

    # Safety: avoid creating DB schema automatically unless explicitly enabled.
    AUTO_CREATE_DB: bool = Field(
        default=False,
        description="When true (development only), call Base.metadata.create_all on startup",
    )

    # Performance settings
    SLOW_REQUEST_THRESHOLD: float = Field(
        default=1.0,
        description="Log warning for requests slower than this (seconds)",
    )

    # Feed and listing settings
    FEED_PAGE_SIZE: int = Field(
        default=10,
        description="Number of posts per page in the public feed",
    )
    MAX_TAGS_PER_POST: int = Field(
        default=8,
        description="Maximum number of tags attached to a post",
    )
    MAX_IMAGES_PER_POST: int = Field(
        default=2,
        description="Maximum number of screenshot URLs attached to a post",
    )

    # Rate limits (slowapi syntax)
    REPORTS_RATE_LIMIT: str = Field(
        default="10/minute",
        description="Rate limit for report submissions per client",
    )
    VERIFICATION_RATE_LIMIT: str = Field(
        default="5/hour",
        description="Rate limit for verification request submissions per client",
    )

    @field_validator("CORS_ORIGINS", mode="before")
    @classmethod
    def parse_cors_origins(cls, v: str | List[str]) -> List[str]:
        """Parse CORS origins from comma-separated string."""
        if isinstance(v, str):
            return [origin.strip() for origin in v.split(",")]
        return v

    model_config = SettingsConfigDict(
        env_file=_should_load_env_file(),
        env_file_encoding="utf-8",
        extra="ignore",  # Allow extra env vars (e.g., SENTRY_DSN) without validation errors
    )


# Instantiating Settings() raises pydantic.ValidationError if SUPABASE_JWT_SECRET isn't set.
settings = Settings()  # type: ignore[call-arg]


def get_settings() -> Settings:
    """Get the settings instance (for dependency injection)."""
    return settings
