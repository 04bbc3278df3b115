"""
Application configuration.

Loads settings from environment variables with sensible defaults.
"""

from __future__ import annotations

from functools import lru_cache

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application settings loaded from environment."""

    # ==========================================================================
    # Environment
    # ==========================================================================

    environment: str = "development"
    debug: bool = True

    # ==========================================================================
    # API Server
    # ==========================================================================

    api_host: str = "0.0.0.0"
    api_port: int = 8000
    cors_origins: str = "http://localhost:5173,http://127.0.0.1:5173"

    # ==========================================================================
    # Authentication
    # ==========================================================================

    jwt_secret_key: str = "dev-jwt-secret-change-in-production"
    jwt_algorithm: str = "HS256"
    jwt_access_token_expire_minutes: int = 60

    # ==========================================================================
    # Keys & Translations
    # ==========================================================================

    keys_default_limit: int = 50
    keys_max_limit: int = 100
    autosave_delay_ms: int = 500

    # ==========================================================================
    # Export
    # ==========================================================================

    export_compression_level: int = 6

    # ==========================================================================
    # Translation Jobs
    # ==========================================================================

    # Backoff schedule for active job polling; the last value repeats
    job_poll_intervals_ms: list[int] = [2000, 2000, 3000, 5000, 5000]
    job_poll_max_attempts: int = 180  # ~15 minutes

    # ==========================================================================
    # Optional Services
    # ==========================================================================

    sentry_dsn: str = ""

    # ==========================================================================
    # Helpers
    # ==========================================================================

    @property
    def cors_origins_list(self) -> list[str]:
        return [o.strip() for o in self.cors_origins.split(",") if o.strip()]

    @property
    def is_production(self) -> bool:
        return self.environment == "production"

    @property
    def autosave_delay(self) -> float:
        """Autosave debounce window in seconds."""
        return self.autosave_delay_ms / 1000

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
