"""
LiveKit media-room configuration.
"""

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class LiveKitConfig(BaseSettings):
    """LiveKit server URL and API credentials (LIVEKIT_* env vars)."""

    model_config = SettingsConfigDict(
        env_prefix="LIVEKIT_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    url: str = Field(default="", description="LiveKit server URL (wss://...)")
    api_key: str = Field(default="")
    api_secret: str = Field(default="")


def get_livekit_config() -> LiveKitConfig:
    return LiveKitConfig()
