"""
Telephony provider interface definition.

The relay needs two outbound operations from a provider: send a text
message and place a call. Providers implement the sync methods; the async
entrypoints run them in a worker thread so the event loop is never blocked.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any

import anyio


@dataclass(frozen=True)
class MessageRequest:
    """Request to send an outbound SMS."""

    to: str
    from_number: str
    body: str


@dataclass(frozen=True)
class MessageResult:
    """Provider response for a queued message."""

    provider_message_id: str
    status: str
    created_at: datetime
    raw_response: dict[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class CallRequest:
    """Request to place an outbound call.

    ``instructions_url`` is fetched by the provider once the call connects.
    """

    to: str
    from_number: str
    instructions_url: str
    method: str = "POST"


@dataclass(frozen=True)
class CallResult:
    """Provider response for an initiated call."""

    provider_call_id: str
    status: str
    created_at: datetime
    raw_response: dict[str, Any] = field(default_factory=dict)


class TelephonyProviderError(Exception):
    """Base exception for telephony provider errors."""

    def __init__(
        self,
        message: str,
        error_code: str | None = None,
        provider_response: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message)
        self.error_code = error_code
        self.provider_response = provider_response or {}


class MessageSendError(TelephonyProviderError):
    """Error while sending a message."""


class CallInitiationError(TelephonyProviderError):
    """Error during call initiation."""


class TelephonyProvider(ABC):
    """Abstract interface for telephony providers."""

    async def send_message(self, request: MessageRequest) -> MessageResult:
        return await anyio.to_thread.run_sync(self.send_message_sync, request)

    async def create_call(self, request: CallRequest) -> CallResult:
        return await anyio.to_thread.run_sync(self.create_call_sync, request)

    @abstractmethod
    def send_message_sync(self, request: MessageRequest) -> MessageResult:
        """Send an SMS through the provider."""
        ...

    @abstractmethod
    def create_call_sync(self, request: CallRequest) -> CallResult:
        """Place an outbound call through the provider."""
        ...

    def close(self) -> None:
        """Release provider resources. No-op by default."""
