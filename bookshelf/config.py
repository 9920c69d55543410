"""
Application Configuration Module

Every tunable of the Bookshelf API lives on one pydantic-settings model.

Values are read from environment variables (case-insensitive) and fall back
to a local .env file. A single Settings instance is cached with @lru_cache,
so the environment is read once and every module sees the same values.

Usage:
    from bookshelf.config import get_settings

    settings = get_settings()
    print(settings.app_name)

SECRET KEY POLICY:
==================
- production: SECRET_KEY must be set, otherwise the application refuses to start
- other environments: if SECRET_KEY is unset, a random per-process secret is
  generated (tokens stop validating after a restart) and a warning is logged
"""

from functools import lru_cache
from typing import List, Optional

from pydantic import Field, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

# Minimum bcrypt cost accepted in production
PRODUCTION_MIN_BCRYPT_ROUNDS = 12


class Settings(BaseSettings):
    """
    Bookshelf API settings (environment variables, then .env).

    SECURITY NOTE:
    ==============
    - secret_key is validated against placeholders and minimum length
    - production refuses to start without a secret key
    - production refuses a bcrypt cost below 12
    """

    # -------------------------------------------------------------------------
    # Application Settings
    # -------------------------------------------------------------------------
    app_name: str = Field(
        default="Bookshelf API",
        description="Name shown in the OpenAPI docs and startup logs"
    )
    debug: bool = Field(
        default=False,
        description="Enable debug mode (SQL echo, detailed errors)"
    )
    host: str = Field(
        default="0.0.0.0",
        description="Interface uvicorn listens on"
    )
    port: int = Field(
        default=3001,
        description="Port uvicorn listens on"
    )
    environment: str = Field(
        default="development",
        description="Environment: development, staging, production"
    )
    api_prefix: str = Field(
        default="/api",
        description="URL prefix for every API router"
    )

    # -------------------------------------------------------------------------
    # Database Settings
    # -------------------------------------------------------------------------
    database_url: str = Field(
        default="sqlite:///./data/bookshelf.db",
        description="SQLAlchemy database URL (SQLite file or PostgreSQL)"
    )
    db_pool_size: int = Field(
        default=5,
        description="Number of permanent database connections (PostgreSQL only)"
    )
    db_max_overflow: int = Field(
        default=10,
        description="Maximum additional connections during high load (PostgreSQL only)"
    )
    auto_create_tables: bool = Field(
        default=True,
        description="Create missing tables at startup instead of relying on Alembic"
    )

    # -------------------------------------------------------------------------
    # Security Settings
    # -------------------------------------------------------------------------
    secret_key: Optional[str] = Field(
        default=None,
        description="Secret used to sign session tokens (HS256)"
    )
    access_token_expire_days: int = Field(
        default=7,
        ge=1,
        description="Session token and cookie lifetime in days"
    )
    auth_cookie_name: str = Field(
        default="auth_token",
        description="Name of the HTTP-only cookie carrying the session token"
    )
    bcrypt_rounds: int = Field(
        default=PRODUCTION_MIN_BCRYPT_ROUNDS,
        ge=4,
        le=31,
        description="bcrypt cost factor (log2 rounds)"
    )
    allowed_origins: str = Field(
        default="http://localhost:5173",
        description="Comma-separated list of allowed CORS origins"
    )

    # -------------------------------------------------------------------------
    # Rate Limiting Settings
    # -------------------------------------------------------------------------
    rate_limit_enabled: bool = Field(
        default=True,
        description="Enable rate limiting on the credential endpoints"
    )
    rate_limit_auth: str = Field(
        default="10 per 15 minutes",
        description="Fixed-window limit for register and login, per client"
    )
    rate_limit_storage_uri: str = Field(
        default="memory://",
        description="Counter store for the limiter (memory://, redis://host:6379, ...)"
    )

    # -------------------------------------------------------------------------
    # Open Library Settings
    # -------------------------------------------------------------------------
    open_library_base_url: str = Field(
        default="https://openlibrary.org",
        description="Open Library API base URL"
    )
    open_library_covers_url: str = Field(
        default="https://covers.openlibrary.org",
        description="Open Library cover image base URL"
    )
    open_library_timeout: float = Field(
        default=10.0,
        gt=0,
        description="Timeout in seconds for catalog requests"
    )

    # -------------------------------------------------------------------------
    # Logging Settings
    # -------------------------------------------------------------------------
    log_level: str = Field(
        default="INFO",
        description="Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)"
    )

    # -------------------------------------------------------------------------
    # Pydantic Settings Configuration
    # -------------------------------------------------------------------------
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # -------------------------------------------------------------------------
    # Computed Properties
    # -------------------------------------------------------------------------
    @property
    def allowed_origins_list(self) -> List[str]:
        """Parse comma-separated CORS origins into a list."""
        return [origin.strip() for origin in self.allowed_origins.split(",") if origin.strip()]

    @property
    def is_production(self) -> bool:
        """Check if running in production environment."""
        return self.environment == "production"

    @property
    def is_sqlite(self) -> bool:
        """Check if the configured database is the embedded SQLite engine."""
        return self.database_url.startswith("sqlite")

    @property
    def access_token_max_age(self) -> int:
        """Token lifetime in seconds (used for the cookie Max-Age)."""
        return self.access_token_expire_days * 24 * 60 * 60

    # -------------------------------------------------------------------------
    # Validators
    # -------------------------------------------------------------------------
    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Validate that log_level is a valid Python logging level."""
        valid_levels = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        if v.upper() not in valid_levels:
            raise ValueError(f"log_level must be one of {valid_levels}")
        return v.upper()

    @field_validator("secret_key")
    @classmethod
    def validate_secret_key(cls, v: Optional[str]) -> Optional[str]:
        """
        Validate that secret_key is not a placeholder value.

        An empty value is treated as unset.

        Raises:
            ValueError: If secret key is a placeholder or too short
        """
        if v is None or not v.strip():
            return None

        placeholder_indicators = [
            "REPLACE_WITH",
            "change-me",
            "change-in-production",
            "your-secret",
            "generate-with",
        ]

        for indicator in placeholder_indicators:
            if indicator.lower() in v.lower():
                raise ValueError(
                    "SECRET_KEY contains a placeholder value. "
                    "Generate a secure key with: openssl rand -hex 32"
                )

        if len(v) < 32:
            raise ValueError(
                "SECRET_KEY must be at least 32 characters long. "
                "Generate a secure key with: openssl rand -hex 32"
            )

        return v

    @field_validator("environment")
    @classmethod
    def validate_environment(cls, v: str) -> str:
        """Validate environment is a known value."""
        valid_envs = {"development", "staging", "production"}
        if v.lower() not in valid_envs:
            raise ValueError(f"environment must be one of {valid_envs}")
        return v.lower()

    @field_validator("api_prefix")
    @classmethod
    def validate_api_prefix(cls, v: str) -> str:
        """Normalise the prefix to a leading slash and no trailing slash."""
        return "/" + v.strip("/") if v.strip("/") else ""

    @model_validator(mode="after")
    def enforce_production_security(self) -> "Settings":
        """
        Fail closed in production.

        Raises:
            ValueError: If production runs without a secret key or with a
                bcrypt cost below PRODUCTION_MIN_BCRYPT_ROUNDS
        """
        if self.is_production:
            if self.secret_key is None:
                raise ValueError("SECRET_KEY is required when ENVIRONMENT=production")
            if self.bcrypt_rounds < PRODUCTION_MIN_BCRYPT_ROUNDS:
                raise ValueError(
                    f"BCRYPT_ROUNDS must be at least {PRODUCTION_MIN_BCRYPT_ROUNDS} in production"
                )
        return self


@lru_cache
def get_settings() -> Settings:
    """
    Return the process-wide Settings instance.

    The first call reads the environment and .env file and validates it;
    every later call returns the same instance.

    Returns:
        Cached Settings instance
    """
    return Settings()
