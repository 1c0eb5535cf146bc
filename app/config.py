# =============================================================================
# app/config.py - Application Settings
# =============================================================================
# This module loads configuration from environment variables using pydantic-settings.
# It provides a single Settings class with all configuration values.
#
# Usage:
#   from app.config import settings
#   print(settings.database_url)
#
# Environment variables are loaded from:
# 1. System environment variables
# 2. .env file in project root (if exists)
#
# Database credentials come from ONE set of DB_* variables. Older deployments
# that exported PG* variables must rename them.
# =============================================================================

from functools import lru_cache
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict
from sqlalchemy.engine import URL


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.

    Uses pydantic-settings to:
    - Automatically load from .env file
    - Validate types and constraints
    - Provide sensible defaults for development

    All settings are accessed via the global `settings` instance.
    """

    # -------------------------------------------------------------------------
    # Database Configuration (PostgreSQL)
    # -------------------------------------------------------------------------

    DB_HOST: str = Field(
        default="localhost",
        description="PostgreSQL host name"
    )

    DB_PORT: int = Field(
        default=5432,
        ge=1,
        le=65535,
        description="PostgreSQL port"
    )

    DB_USER: str = Field(
        default="postgres",
        description="Database user"
    )

    DB_PASSWORD: str = Field(
        default="",
        description="Database password (never logged or echoed)"
    )

    DB_NAME: str = Field(
        default="amc_directory",
        description="Database name"
    )

    DB_SSL_MODE: Literal[
        "disable", "allow", "prefer", "require", "verify-ca", "verify-full"
    ] = Field(
        default="prefer",
        description="libpq sslmode for the connection"
    )

    DB_POOL_SIZE: int = Field(
        default=10,
        ge=1,
        le=100,
        description="Maximum number of pooled connections"
    )

    DB_CONNECT_TIMEOUT_SECONDS: int = Field(
        default=10,
        ge=1,
        le=120,
        description="Seconds to wait for a new connection"
    )

    DB_STATEMENT_TIMEOUT_MS: int = Field(
        default=5000,
        ge=0,
        description="Server-side statement timeout (0 disables it)"
    )

    # -------------------------------------------------------------------------
    # Rate Limiting
    # -------------------------------------------------------------------------

    RATE_LIMIT_WINDOW_SECONDS: int = Field(
        default=60,
        ge=1,
        description="Length of one fixed rate-limit window"
    )

    RATE_LIMIT_MAX_REQUESTS: int = Field(
        default=100,
        ge=1,
        description="Requests allowed per client per window"
    )

    RATE_LIMIT_BACKEND: Literal["memory", "redis"] = Field(
        default="memory",
        description="Where window counters live (memory = this process only)"
    )

    REDIS_URL: str = Field(
        default="redis://localhost:6379/0",
        description="Redis connection URL for the shared rate-limit store"
    )

    # -------------------------------------------------------------------------
    # Application Settings
    # -------------------------------------------------------------------------

    ENVIRONMENT: Literal["development", "staging", "production"] = Field(
        default="development",
        description="Current environment"
    )

    DEBUG: bool = Field(
        default=False,
        description="Enable debug mode (verbose logging, auto-reload)"
    )

    API_HOST: str = Field(
        default="0.0.0.0",
        description="Host to bind the API server to"
    )

    API_PORT: int = Field(
        default=8000,
        ge=1,
        le=65535,
        description="Port for the API server"
    )

    # CORS origins (comma-separated string that gets parsed)
    CORS_ORIGINS: str = Field(
        default="http://localhost:3000",
        description="Allowed CORS origins (comma-separated)"
    )

    # -------------------------------------------------------------------------
    # Pydantic Settings Configuration
    # -------------------------------------------------------------------------

    model_config = SettingsConfigDict(
        # Load from .env file in project root
        env_file=".env",
        env_file_encoding="utf-8",
        # Treat empty values as unset so defaults apply
        env_ignore_empty=True,
        # Case-sensitive environment variable names
        case_sensitive=True,
        extra="ignore",
    )

    # -------------------------------------------------------------------------
    # Computed Properties
    # -------------------------------------------------------------------------

    @property
    def database_url(self) -> URL:
        """
        SQLAlchemy URL for the psycopg2 driver.

        Built with URL.create so special characters in the password are
        escaped rather than spliced into a connection string.
        """
        return URL.create(
            "postgresql+psycopg2",
            username=self.DB_USER,
            password=self.DB_PASSWORD or None,
            host=self.DB_HOST,
            port=self.DB_PORT,
            database=self.DB_NAME,
            query={"sslmode": self.DB_SSL_MODE},
        )

    @property
    def cors_origins_list(self) -> list[str]:
        """
        Parse CORS_ORIGINS string into a list.

        Example: "http://localhost:3000, https://amc.example.com"
              -> ["http://localhost:3000", "https://amc.example.com"]
        """
        return [origin.strip() for origin in self.CORS_ORIGINS.split(",")]

    @property
    def is_development(self) -> bool:
        """Check if running in development mode."""
        return self.ENVIRONMENT == "development"

    @property
    def is_production(self) -> bool:
        """Check if running in production mode."""
        return self.ENVIRONMENT == "production"


@lru_cache
def get_settings() -> Settings:
    """
    Get cached Settings instance.

    Using lru_cache ensures we only parse .env and validate once,
    not on every access.

    Returns:
        Settings: The application settings instance
    """
    return Settings()


# Global settings instance for easy importing
# Usage: from app.config import settings
settings = get_settings()
