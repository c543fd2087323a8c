"""
Pytest configuration and fixtures.
"""
from __future__ import annotations

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from callrelay.config import Settings
from callrelay.main import create_app
from callrelay.relay.service import WebhookRelay
from callrelay.rooms.config import LiveKitConfig
from callrelay.telephony.config import ProviderType, TelephonyConfig
from callrelay.telephony.mock_adapter import MockTelephonyAdapter

TEST_API_SECRET = "test-livekit-secret-0123456789abcdef"


class FakeTokenIssuer:
    """Stands in for RoomTokenIssuer; records requests."""

    def __init__(self, token: str = "signed-test-token", error: Exception | None = None) -> None:
        self.token = token
        self.error = error
        self.requests: list[tuple[str, str]] = []

    def issue(self, identity: str, room: str) -> str:
        self.requests.append((identity, room))
        if self.error is not None:
            raise self.error
        return self.token


@pytest.fixture
def test_settings() -> Settings:
    return Settings(
        debug=False,
        log_level="INFO",
        cors_origins="*",
        expose_error_details=True,
    )


@pytest.fixture
def telephony_config() -> TelephonyConfig:
    return TelephonyConfig(
        provider_type=ProviderType.MOCK,
        twilio_account_sid="AC_TEST_ACCOUNT_SID",
        twilio_auth_token="test_auth_token_12345",
        twilio_phone_number="+14155550000",
        base_url="https://relay.example.com",
        request_timeout_seconds=5,
    )


@pytest.fixture
def livekit_config() -> LiveKitConfig:
    return LiveKitConfig(
        url="wss://test.livekit.cloud",
        api_key="APITESTKEY",
        api_secret=TEST_API_SECRET,
    )


@pytest.fixture
def mock_adapter() -> MockTelephonyAdapter:
    return MockTelephonyAdapter()


@pytest.fixture
def token_issuer() -> FakeTokenIssuer:
    return FakeTokenIssuer()


@pytest.fixture
def relay(
    test_settings: Settings,
    telephony_config: TelephonyConfig,
    livekit_config: LiveKitConfig,
    mock_adapter: MockTelephonyAdapter,
    token_issuer: FakeTokenIssuer,
) -> WebhookRelay:
    return WebhookRelay(
        settings=test_settings,
        telephony_config=telephony_config,
        livekit_config=livekit_config,
        provider=mock_adapter,
        token_issuer=token_issuer,
    )


@pytest.fixture
def app(
    test_settings: Settings,
    telephony_config: TelephonyConfig,
    livekit_config: LiveKitConfig,
    mock_adapter: MockTelephonyAdapter,
    token_issuer: FakeTokenIssuer,
) -> FastAPI:
    return create_app(
        settings=test_settings,
        telephony_config=telephony_config,
        livekit_config=livekit_config,
        provider=mock_adapter,
        token_issuer=token_issuer,
    )


@pytest.fixture
def client(app: FastAPI) -> TestClient:
    return TestClient(app)
