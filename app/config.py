# =============================================================================
# app/config.py - Application Settings
# =============================================================================
# This module loads configuration from environment variables using pydantic-settings.
# It provides a single Settings class with all configuration values.
#
# Usage:
#   from app.config import settings
#   print(settings.SUPABASE_URL)
#
# Environment variables are loaded from:
# 1. System environment variables
# 2. .env file in project root (if exists)
#
# The Settings class validates all values at startup, catching configuration
# errors early rather than at runtime.
# =============================================================================

from functools import lru_cache
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.

    All settings are accessed via the global `settings` instance.
    """

    # -------------------------------------------------------------------------
    # Supabase Configuration
    # -------------------------------------------------------------------------
    # These are required - app won't start without them

    SUPABASE_URL: str = Field(
        ...,
        description="Supabase project URL (e.g., https://xxx.supabase.co)"
    )

    SUPABASE_ANON_KEY: str = Field(
        ...,
        description="Supabase anon/public API key"
    )

    SUPABASE_SERVICE_KEY: str = Field(
        ...,
        description="Supabase service_role key (bypasses RLS)"
    )

    SUPABASE_JWT_SECRET: str = Field(
        default="",
        description="Legacy HS256 JWT secret for verifying Supabase access tokens"
    )

    BRANDS_TABLE: str = Field(
        default="brands",
        description="Table generated brands are written to"
    )

    LOGO_BUCKET: str = Field(
        default="logos",
        description="Storage bucket for generated logos"
    )

    # -------------------------------------------------------------------------
    # Redis Configuration (Celery broker + WebSocket pub/sub)
    # -------------------------------------------------------------------------

    REDIS_URL: str = Field(
        default="redis://localhost:6379/0",
        description="Redis connection URL for Celery broker and event pub/sub"
    )

    # -------------------------------------------------------------------------
    # OpenAI Configuration
    # -------------------------------------------------------------------------

    OPENAI_API_KEY: str = Field(
        ...,
        description="OpenAI API key for the generation agents"
    )

    OPENAI_MODEL: str = Field(
        default="gpt-4o-mini",
        description="Chat model for style, visual and document stages (must support JSON mode)"
    )

    OPENAI_IMAGE_MODEL: str = Field(
        default="dall-e-3",
        description="Image model for logo generation"
    )

    OPENAI_TIMEOUT_SECONDS: float = Field(
        default=60.0,
        gt=0,
        description="Timeout for a single OpenAI request"
    )

    STYLE_TEMPERATURE: float = Field(default=0.4, ge=0.0, le=2.0)
    VISUAL_TEMPERATURE: float = Field(default=0.7, ge=0.0, le=2.0)
    DOCUMENT_TEMPERATURE: float = Field(default=0.6, ge=0.0, le=2.0)

    # -------------------------------------------------------------------------
    # Generation Settings
    # -------------------------------------------------------------------------

    MIN_CORPUS_CHARS: int = Field(
        default=50,
        ge=1,
        description="Minimum corpus length (after trimming) for style analysis"
    )

    MAX_CORPUS_CHARS: int = Field(
        default=20000,
        ge=100,
        description="Corpus is truncated to this many characters before analysis"
    )

    LOADING_AUTO_RESET_SECONDS: float = Field(
        default=3.0,
        ge=0.0,
        description="Delay before success/error progress returns to idle (0 disables)"
    )

    CANCEL_POLL_SECONDS: float = Field(
        default=1.0,
        gt=0,
        description="How often workers check for cancellation requests"
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
        default="http://localhost:5173",
        description="Allowed CORS origins (comma-separated)"
    )

    # -------------------------------------------------------------------------
    # Pydantic Settings Configuration
    # -------------------------------------------------------------------------

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_ignore_empty=True,
        case_sensitive=True,
    )

    # -------------------------------------------------------------------------
    # Computed Properties
    # -------------------------------------------------------------------------

    @property
    def cors_origins_list(self) -> list[str]:
        """
        Parse CORS_ORIGINS string into a list.

        Example: "http://localhost:5173, https://app.brandrider.io" -> [...]
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

    Using lru_cache ensures we only parse .env and validate once.

    Returns:
        Settings: The application settings instance
    """
    return Settings()


# Global settings instance for easy importing
# Usage: from app.config import settings
settings = get_settings()
