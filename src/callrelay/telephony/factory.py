"""
Telephony provider factory.

Single source of truth for configuration: TelephonyConfig (pydantic
settings), never raw os.getenv("TWILIO_*") here.
"""

from __future__ import annotations

from callrelay.shared.logging import get_logger, mask
from callrelay.telephony.config import ProviderType, TelephonyConfig
from callrelay.telephony.interface import TelephonyProvider
from callrelay.telephony.mock_adapter import MockTelephonyAdapter
from callrelay.telephony.twilio_adapter import TwilioAdapter

logger = get_logger(__name__)


def build_telephony_provider(config: TelephonyConfig) -> TelephonyProvider:
    """Create the telephony provider selected by ``config.provider_type``."""
    logger.info(
        "Telephony config resolved",
        extra={
            "provider_type": config.provider_type.value,
            "twilio_account_sid": mask(config.twilio_account_sid),
            "twilio_phone_number": config.twilio_phone_number,
            "base_url": config.base_url,
            "request_timeout_seconds": config.request_timeout_seconds,
        },
    )

    if config.provider_type == ProviderType.TWILIO:
        return TwilioAdapter(config)

    if config.provider_type == ProviderType.MOCK:
        return MockTelephonyAdapter()

    raise ValueError(f"Unsupported telephony provider_type: {config.provider_type}")
