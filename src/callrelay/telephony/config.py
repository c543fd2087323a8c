"""
Telephony provider configuration.

Environment names follow the provider's own conventions
(TWILIO_ACCOUNT_SID, TWILIO_AUTH_TOKEN, TWILIO_PHONE_NUMBER) plus BASE_URL,
the public address the provider calls back for voice instructions.
"""

from enum import Enum

from pydantic import AliasChoices, Field
from pydantic_settings import BaseSettings, SettingsConfigDict

VOICE_WEBHOOK_PATH = "/twilio-voice"
SMS_WEBHOOK_PATH = "/twilio-sms"


class ProviderType(str, Enum):
    """Supported telephony provider types."""

    TWILIO = "twilio"
    MOCK = "mock"


class TelephonyConfig(BaseSettings):
    """Telephony provider configuration from environment."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Provider selection
    provider_type: ProviderType = Field(
        default=ProviderType.TWILIO,
        validation_alias=AliasChoices("provider_type", "telephony_provider"),
    )

    # Provider credentials
    twilio_account_sid: str = Field(default="")
    twilio_auth_token: str = Field(default="")
    twilio_phone_number: str = Field(
        default="+1234567890",
        description="Default sender for outbound SMS and calls",
    )

    # Public base URL used for the provider's voice-instructions callback
    base_url: str = Field(default="http://localhost:3000")

    # Outbound REST calls
    request_timeout_seconds: float = Field(
        default=15.0,
        gt=0,
        le=120,
        validation_alias=AliasChoices(
            "request_timeout_seconds",
            "telephony_request_timeout_seconds",
        ),
    )

    def get_webhook_url(self, path: str = VOICE_WEBHOOK_PATH) -> str:
        base = self.base_url.rstrip("/")
        return f"{base}{path}"


def get_telephony_config() -> TelephonyConfig:
    return TelephonyConfig()
