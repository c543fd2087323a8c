"""
Twilio telephony provider adapter.

Talks to the Twilio REST API (``Messages.json`` and ``Calls.json``) with
httpx. Every request carries a bounded timeout; transport failures and
API errors are raised as ``TelephonyProviderError`` subclasses.
"""

from __future__ import annotations

import threading
from datetime import datetime, timezone
from email.utils import parsedate_to_datetime
from typing import Any

import httpx

from callrelay.shared.logging import get_logger, mask
from callrelay.telephony.config import TelephonyConfig, get_telephony_config
from callrelay.telephony.interface import (
    CallInitiationError,
    CallRequest,
    CallResult,
    MessageRequest,
    MessageResult,
    MessageSendError,
    TelephonyProvider,
    TelephonyProviderError,
)

logger = get_logger(__name__)

TWILIO_API_BASE = "https://api.twilio.com/2010-04-01"


def _parse_date_created(value: str | None) -> datetime:
    # Twilio returns RFC 2822 dates ("Mon, 15 Jan 2024 10:30:00 +0000").
    if not value:
        return datetime.now(timezone.utc)
    try:
        return parsedate_to_datetime(value)
    except (TypeError, ValueError):
        pass
    try:
        return datetime.fromisoformat(value.replace("Z", "+00:00"))
    except ValueError:
        return datetime.now(timezone.utc)


class TwilioAdapter(TelephonyProvider):
    """Twilio telephony provider adapter.

    Uses a sync httpx client; the async entrypoints inherited from
    ``TelephonyProvider`` run it in a worker thread.
    """

    def __init__(
        self,
        config: TelephonyConfig | None = None,
        http_client: httpx.Client | None = None,
    ) -> None:
        self._config = config or get_telephony_config()
        self._http_client = http_client
        self._owns_client = http_client is None
        # Worker threads share the lazily created client.
        self._client_lock = threading.Lock()

    def _get_client(self) -> httpx.Client:
        with self._client_lock:
            if self._http_client is None:
                self._http_client = httpx.Client(
                    timeout=httpx.Timeout(self._config.request_timeout_seconds)
                )
            return self._http_client

    def close(self) -> None:
        with self._client_lock:
            if self._owns_client and self._http_client is not None:
                self._http_client.close()
                self._http_client = None

    def _get_auth(self) -> tuple[str, str]:
        return (self._config.twilio_account_sid, self._config.twilio_auth_token)

    def _get_api_url(self, endpoint: str) -> str:
        account_sid = self._config.twilio_account_sid
        return f"{TWILIO_API_BASE}/Accounts/{account_sid}{endpoint}"

    def _post(
        self,
        endpoint: str,
        payload: dict[str, Any],
        error_cls: type[TelephonyProviderError],
        default_message: str,
    ) -> dict[str, Any]:
        client = self._get_client()

        try:
            response = client.post(
                self._get_api_url(endpoint),
                data=payload,
                auth=self._get_auth(),
            )
        except httpx.TimeoutException as e:
            logger.error(
                "Twilio request timed out",
                extra={
                    "endpoint": endpoint,
                    "timeout_seconds": self._config.request_timeout_seconds,
                },
            )
            raise error_cls(
                message=f"Request to Twilio timed out after {self._config.request_timeout_seconds:g}s",
                error_code="TIMEOUT",
            ) from e
        except httpx.HTTPError as e:
            logger.exception("HTTP error during Twilio request", extra={"endpoint": endpoint})
            raise error_cls(
                message=f"HTTP error: {e!s}",
                error_code="HTTP_ERROR",
            ) from e

        if response.status_code >= 400:
            try:
                error_data = response.json() if response.content else {}
            except ValueError:
                error_data = {"message": response.text}
            if not isinstance(error_data, dict):
                error_data = {"message": response.text}
            logger.error(
                "Twilio request failed",
                extra={
                    "endpoint": endpoint,
                    "status_code": response.status_code,
                    "error": error_data,
                    "account_sid": mask(self._config.twilio_account_sid),
                },
            )
            raise error_cls(
                message=error_data.get("message", default_message),
                error_code=str(error_data.get("code", response.status_code)),
                provider_response=error_data,
            )

        try:
            data = response.json()
        except ValueError:
            data = None
        if not isinstance(data, dict) or not data.get("sid"):
            logger.error(
                "Twilio response missing resource sid",
                extra={"endpoint": endpoint, "status_code": response.status_code},
            )
            raise error_cls(
                message="Invalid response from Twilio",
                error_code="INVALID_RESPONSE",
                provider_response=data if isinstance(data, dict) else {"body": response.text},
            )
        return data

    def send_message_sync(self, request: MessageRequest) -> MessageResult:
        """Send an SMS via Twilio (sync)."""
        payload = {
            "To": request.to,
            "From": request.from_number,
            "Body": request.body,
        }

        logger.info("Sending Twilio message", extra={"to": request.to})

        data = self._post("/Messages.json", payload, MessageSendError, "Message send failed")

        return MessageResult(
            provider_message_id=data["sid"],
            status=data.get("status", "queued"),
            created_at=_parse_date_created(data.get("date_created")),
            raw_response=data,
        )

    def create_call_sync(self, request: CallRequest) -> CallResult:
        """Initiate an outbound call via Twilio (sync)."""
        payload = {
            "To": request.to,
            "From": request.from_number,
            "Url": request.instructions_url,
            "Method": request.method,
        }

        logger.info(
            "Initiating Twilio call",
            extra={"to": request.to, "instructions_url": request.instructions_url},
        )

        data = self._post("/Calls.json", payload, CallInitiationError, "Call initiation failed")

        return CallResult(
            provider_call_id=data["sid"],
            status=data.get("status", "queued"),
            created_at=_parse_date_created(data.get("date_created")),
            raw_response=data,
        )
