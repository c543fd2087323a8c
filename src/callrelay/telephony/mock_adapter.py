"""
Mock telephony provider adapter.

Never touches the network. Used for local development
(TELEPHONY_PROVIDER=mock) and as an injectable fake in tests.
"""

from datetime import datetime, timezone

from callrelay.shared.logging import get_logger
from callrelay.telephony.interface import (
    CallInitiationError,
    CallRequest,
    CallResult,
    MessageRequest,
    MessageResult,
    MessageSendError,
    TelephonyProvider,
)

logger = get_logger(__name__)


class MockTelephonyAdapter(TelephonyProvider):
    """Mock telephony provider that records requests in memory."""

    def __init__(self) -> None:
        self._messages: list[MessageRequest] = []
        self._calls: list[CallRequest] = []
        self._next_id: int = 1
        self._should_fail: bool = False
        self._fail_error: str = "Mock failure"
        self._fail_code: str = "MOCK_ERROR"

    def reset(self) -> None:
        self._messages.clear()
        self._calls.clear()
        self._next_id = 1
        self._should_fail = False
        self._fail_error = "Mock failure"
        self._fail_code = "MOCK_ERROR"

    def configure_failure(
        self,
        should_fail: bool = True,
        error_message: str = "Mock failure",
        error_code: str = "MOCK_ERROR",
    ) -> None:
        self._should_fail = should_fail
        self._fail_error = error_message
        self._fail_code = error_code

    @property
    def messages(self) -> list[MessageRequest]:
        return self._messages.copy()

    @property
    def calls(self) -> list[CallRequest]:
        return self._calls.copy()

    def get_last_message(self) -> MessageRequest | None:
        return self._messages[-1] if self._messages else None

    def get_last_call(self) -> CallRequest | None:
        return self._calls[-1] if self._calls else None

    def _take_id(self, prefix: str) -> str:
        value = f"{prefix}{self._next_id:06d}"
        self._next_id += 1
        return value

    def send_message_sync(self, request: MessageRequest) -> MessageResult:
        logger.info("Mock: Sending message", extra={"to": request.to})

        if self._should_fail:
            raise MessageSendError(message=self._fail_error, error_code=self._fail_code)

        self._messages.append(request)
        message_id = self._take_id("MOCK_SM_")

        return MessageResult(
            provider_message_id=message_id,
            status="queued",
            created_at=datetime.now(timezone.utc),
            raw_response={"mock": True, "sid": message_id, "to": request.to},
        )

    def create_call_sync(self, request: CallRequest) -> CallResult:
        logger.info("Mock: Initiating call", extra={"to": request.to})

        if self._should_fail:
            raise CallInitiationError(message=self._fail_error, error_code=self._fail_code)

        self._calls.append(request)
        call_id = self._take_id("MOCK_CA_")

        return CallResult(
            provider_call_id=call_id,
            status="queued",
            created_at=datetime.now(timezone.utc),
            raw_response={"mock": True, "sid": call_id, "to": request.to},
        )
