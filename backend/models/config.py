import os
import sys
from typing import List

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


def _should_load_env_file() -> str | None:
    """Determine if .env should be loaded.

    Local development reads `backend/.env` so `SECRET_KEY` does not have to be
    exported by hand. Under pytest or in CI the file is skipped so tests run
    against the environment they set up themselves.
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

    DATABASE_URL: str = "sqlite:///./data/wikiprofile.db"

    # Bearer tokens are issued by the external identity provider and only
    # verified here.
    SECRET_KEY: str = Field(
        ...,  # Required, no default
        description="Key used to verify identity provider tokens",
    )
    ALGORITHM: str = "HS256"
    TOKEN_AUDIENCE: str | None = Field(
        default=None,
        description="Expected 'aud' claim of identity provider tokens (unchecked if None)",
    )
    CORS_ORIGINS: List[str] = Field(
        default=["http://localhost:5000"],
        description="Allowed CORS origins (comma-separated in env var)",
    )

    # Promoted to admin by init_db.py once that user has signed in
    BOOTSTRAP_ADMIN_EMAIL: str | None = Field(
        default=None,
        description="Email of the account to promote to admin on init",
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

    AUTO_CREATE_DB: bool = Field(
        default=False,
        description="When true (development only), call Base.metadata.create_all on startup",
    )

    SLOW_REQUEST_THRESHOLD: float = Field(
        default=1.0,
        description="Log warning for requests slower than this (seconds)",
    )

    # Special posts
    SPECIAL_TOKEN_BYTES: int = Field(
        default=32,
        ge=32,
        description="Random bytes per special access token (hex encoded, >= 256 bits)",
    )

    # Rate limits (slowapi syntax)
    RATE_LIMIT_WRITE: str = Field(
        default="30/minute",
        description="Limit for entry, comment and like creation per client",
    )
    RATE_LIMIT_REPORTS: str = Field(
        default="10/minute",
        description="Limit for content report submission per client",
    )

    PROJECT_NAME: str = Field(
        default="WikiProfile",
        description="Project name used for the API title",
    )

    @field_validator("CORS_ORIGINS", mode="before")
    @classmethod
    def parse_cors_origins(cls, v: str | List[str]) -> List[str]:
        """Parse CORS origins from comma-separated string."""
        if isinstance(v, str) and not v.startswith("["):
            return [origin.strip() for origin in v.split(",")]
        return v

    model_config = SettingsConfigDict(
        env_file=_should_load_env_file(),
        env_file_encoding="utf-8",
        extra="ignore",  # Allow extra env vars (e.g., SENTRY_DSN) without validation errors
    )


# Instantiating Settings() raises pydantic.ValidationError when SECRET_KEY is missing.
settings = Settings()  # type: ignore[call-arg]

