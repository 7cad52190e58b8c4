"""Application configuration."""

from functools import lru_cache
from typing import Literal

from pydantic import Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

# Minimum entropy for secrets (measured by character diversity)
MIN_SECRET_UNIQUE_CHARS = 16


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Application
    app_name: str = "Workforce Ledger API"
    debug: bool = False
    environment: Literal["development", "staging", "production"] = "development"

    # Database (required - no default)
    database_url: str = Field(
        description="PostgreSQL or SQLite connection URL. Must be set via environment variable."
    )
    database_pool_size: int = 5
    database_max_overflow: int = 10

    # Identity provider tokens
    jwt_secret: str = Field(min_length=32)
    jwt_algorithm: str = "HS256"
    jwt_issuer: str | None = None
    jwt_audience: str | None = None

    # CORS settings
    cors_origins: str = "http://localhost:3000"  # Comma-separated list

    # Rate limiting (requests per minute)
    rate_limit_enabled: bool = True
    rate_limit_default: int = 100
    rate_limit_status_change: int = 20
    rate_limit_bulk_attendance: int = 10
    trusted_proxies: str = ""  # Comma-separated IPs or CIDR ranges

    # Employee numbering
    employee_no_prefix: str = "MSD"

    # Listing
    employee_default_page_size: int = 50

    @model_validator(mode="after")
    def validate_settings(self) -> "Settings":
        """Validate settings for consistency and safety."""
        if self.environment == "production" and self.debug:
            raise ValueError(
                "DEBUG mode cannot be enabled in production environment. "
                "This would expose API documentation and detailed error messages."
            )

        url = self.database_url
        if not url.startswith(("postgresql://", "postgres://", "sqlite://")):
            raise ValueError(
                "DATABASE_URL must be a PostgreSQL URL ('postgresql://', 'postgres://') "
                "or a SQLite URL ('sqlite://')"
            )

        if self.environment == "production" and len(set(self.jwt_secret)) < MIN_SECRET_UNIQUE_CHARS:
            raise ValueError(
                f"JWT_SECRET must contain at least {MIN_SECRET_UNIQUE_CHARS} unique characters "
                "for sufficient entropy. Use a cryptographically random value."
            )

        return self

    @property
    def async_database_url(self) -> str:
        """Get async database URL for SQLAlchemy.

        PostgreSQL URLs are routed to asyncpg (sslmode is renamed to ssl),
        SQLite URLs to aiosqlite.
        """
        url = self.database_url
        if url.startswith("sqlite://"):
            return url.replace("sqlite://", "sqlite+aiosqlite://", 1)
        url = url.replace("postgres://", "postgresql://", 1)
        url = url.replace("postgresql://", "postgresql+asyncpg://", 1)
        return url.replace("sslmode=", "ssl=")

    @property
    def is_sqlite(self) -> bool:
        """Whether the configured database is SQLite."""
        return self.database_url.startswith("sqlite://")

    @property
    def trusted_proxies_list(self) -> list[str]:
        """Get trusted proxies as a list."""
        return [proxy.strip() for proxy in self.trusted_proxies.split(",") if proxy.strip()]

    @property
    def cors_origins_list(self) -> list[str]:
        """Get CORS origins as a list."""
        return [origin.strip() for origin in self.cors_origins.split(",") if origin.strip()]


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
