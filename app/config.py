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
        description="Legacy HS256 JWT secret used to verify access tokens"
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
    # Marketplace Defaults
    # -------------------------------------------------------------------------

    DEFAULT_CURRENCY: str = Field(
        default="AED",
        min_length=3,
        max_length=3,
        description="Currency applied to new gigs that don't specify one"
    )

    DEFAULT_PAGE_SIZE: int = Field(
        default=20,
        ge=1,
        le=100,
        description="Page size used by list endpoints when no limit is given"
    )

    MAX_PAGE_SIZE: int = Field(
        default=100,
        ge=1,
        le=500,
        description="Upper bound for the limit query parameter"
    )

    # -------------------------------------------------------------------------
    # File Upload Settings
    # -------------------------------------------------------------------------

    MAX_PROFILE_PHOTO_MB: int = Field(
        default=2,
        ge=1,
        le=50,
        description="Maximum profile photo / banner size in MB"
    )

    MAX_SLATE_MEDIA_MB: int = Field(
        default=10,
        ge=1,
        le=500,
        description="Maximum slate media upload size in MB"
    )

    MAX_COLLAB_COVER_MB: int = Field(
        default=5,
        ge=1,
        le=50,
        description="Maximum collab cover image size in MB"
    )

    MAX_RESUME_MB: int = Field(
        default=5,
        ge=1,
        le=50,
        description="Maximum resume document size in MB"
    )

    PROFILE_PHOTO_BUCKET: str = Field(
        default="profile-photos",
        description="Public storage bucket for profile photos and banners"
    )

    SLATE_MEDIA_BUCKET: str = Field(
        default="slate-media",
        description="Public storage bucket for slate post media"
    )

    COLLAB_COVER_BUCKET: str = Field(
        default="collab-covers",
        description="Public storage bucket for collab cover images"
    )

    RESUME_BUCKET: str = Field(
        default="resumes",
        description="Storage bucket for resume documents"
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

        Example: "http://localhost:3000, https://myapp.com" -> ["http://localhost:3000", "https://myapp.com"]
        """
        return [origin.strip() for origin in self.CORS_ORIGINS.split(",")]

    @property
    def max_profile_photo_bytes(self) -> int:
        return self.MAX_PROFILE_PHOTO_MB * 1024 * 1024

    @property
    def max_slate_media_bytes(self) -> int:
        return self.MAX_SLATE_MEDIA_MB * 1024 * 1024

    @property
    def max_collab_cover_bytes(self) -> int:
        return self.MAX_COLLAB_COVER_MB * 1024 * 1024

    @property
    def max_resume_bytes(self) -> int:
        return self.MAX_RESUME_MB * 1024 * 1024

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
