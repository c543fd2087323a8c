"""
Application configuration with environment-driven settings.
"""

import os
from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Application
    app_name: str = "Call and Text Me Maybe"
    agent_name: str = "call-and-text-me-maybe"
    debug: bool = False
    log_level: str = "INFO"

    # Server
    host: str = Field(default="0.0.0.0", description="Interface uvicorn binds to")
    port: int = Field(default=3000, ge=1, le=65535, description="HTTP listen port")

    # CORS
    cors_origins: str = Field(
        default="*",
        description="Comma-separated list of allowed CORS origins",
    )

    # Errors
    expose_error_details: bool = Field(
        default=True,
        description="Return the underlying failure message in 500 responses.",
    )

    @property
    def cors_origins_list(self) -> list[str]:
        """Parse CORS origins into a list."""
        return [origin.strip() for origin in self.cors_origins.split(",") if origin.strip()]


@lru_cache(maxsize=1)
def _get_settings_cached() -> Settings:
    return Settings()


def get_settings() -> Settings:
    # Tests monkeypatch env vars between cases; never hand them a frozen instance.
    if os.environ.get("PYTEST_CURRENT_TEST"):
        return Settings()
    return _get_settings_cached()
