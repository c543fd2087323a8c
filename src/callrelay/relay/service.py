"""
Webhook relay.

Stateless request/response mappings between the telephony provider's
webhooks, the LiveKit token signer and the provider's outbound REST API.
All collaborators are injected at construction time.
"""

from __future__ import annotations

import time
from datetime import datetime, timezone

from callrelay.config import Settings
from callrelay.relay.schemas import (
    AgentStatusResponse,
    HealthResponse,
    MakeCallRequest,
    MakeCallResponse,
    SendSmsRequest,
    SendSmsResponse,
    SmsWebhookEvent,
    TokenRequest,
    TokenResponse,
    VoiceWebhookEvent,
)
from callrelay.relay.sms_rules import generate_sms_reply
from callrelay.rooms.config import LiveKitConfig
from callrelay.rooms.tokens import RoomTokenIssuer
from callrelay.shared.exceptions import InternalError, ValidationError
from callrelay.shared.logging import get_logger
from callrelay.telephony.config import VOICE_WEBHOOK_PATH, TelephonyConfig
from callrelay.telephony.interface import (
    CallRequest,
    MessageRequest,
    TelephonyProvider,
)
from callrelay.telephony.twiml import MessagingResponse, VoiceResponse

logger = get_logger(__name__)

CAPABILITIES = ["voice_calls", "sms_messages", "livekit_integration"]

ROOM_NAME_PREFIX = "call-"
WELCOME_TEXT = "Welcome to Call and Text Me Maybe. Connecting you to our AI agent now."
WELCOME_AUDIO_URL = "https://api.twilio.com/Cowbell.mp3"
VOICE_FALLBACK_TEXT = "Sorry, something went wrong. Please try again."
SMS_FALLBACK_TEXT = "Sorry, I could not process your message. Please try again."
GENERIC_ERROR_MESSAGE = "Internal server error"


def _missing(*values: str | None) -> bool:
    return any(not value for value in values)


def iso_timestamp(moment: datetime | None = None) -> str:
    """UTC ISO-8601 with millisecond precision and a ``Z`` suffix."""
    moment = moment or datetime.now(timezone.utc)
    return moment.astimezone(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


class WebhookRelay:
    """Handlers for every relay operation."""

    def __init__(
        self,
        settings: Settings,
        telephony_config: TelephonyConfig,
        livekit_config: LiveKitConfig,
        provider: TelephonyProvider,
        token_issuer: RoomTokenIssuer,
    ) -> None:
        self._settings = settings
        self._telephony_config = telephony_config
        self._livekit_config = livekit_config
        self._provider = provider
        self._token_issuer = token_issuer

    @property
    def provider(self) -> TelephonyProvider:
        return self._provider

    def _internal_error(self, exc: Exception) -> InternalError:
        if self._settings.expose_error_details:
            return InternalError(str(exc) or exc.__class__.__name__)
        return InternalError(GENERIC_ERROR_MESSAGE)

    # ------------------------------------------------------------------
    # Room tokens
    # ------------------------------------------------------------------

    def issue_room_token(self, request: TokenRequest) -> TokenResponse:
        if _missing(request.identity, request.room):
            raise ValidationError("Missing required fields: identity and room")

        try:
            token = self._token_issuer.issue(request.identity, request.room)
        except Exception as exc:
            logger.exception("Error generating LiveKit token", extra={"room": request.room})
            raise self._internal_error(exc) from exc

        return TokenResponse(token=token)

    # ------------------------------------------------------------------
    # Inbound webhooks (always answer with markup)
    # ------------------------------------------------------------------

    def _build_voice_markup(self, caller_id: str, room_name: str) -> str:
        # TODO: join the caller to room_name over Twilio Media Streams once the
        # LiveKit bridge exists; until then the room name is only logged.
        logger.info(
            "Inbound call",
            extra={"caller_id": caller_id, "room_name": room_name},
        )
        twiml = VoiceResponse()
        twiml.say(WELCOME_TEXT, voice="alice", language="en-US")
        twiml.play(WELCOME_AUDIO_URL)
        return twiml.to_xml()

    def handle_voice_event(self, event: VoiceWebhookEvent) -> str:
        try:
            room_name = f"{ROOM_NAME_PREFIX}{int(time.time() * 1000)}"
            caller_id = event.From or "unknown"
            return self._build_voice_markup(caller_id, room_name)
        except Exception:
            logger.exception("Error handling Twilio voice")
            return VoiceResponse().say(VOICE_FALLBACK_TEXT).to_xml()

    def handle_sms_event(self, event: SmsWebhookEvent) -> str:
        try:
            logger.info("SMS received", extra={"from": event.From, "body": event.Body})
            if event.Body is None:
                raise ValueError("SMS webhook is missing Body")

            reply = generate_sms_reply(event.Body)
            return MessagingResponse().message(reply).to_xml()
        except Exception:
            logger.exception("Error handling Twilio SMS")
            return MessagingResponse().message(SMS_FALLBACK_TEXT).to_xml()

    # ------------------------------------------------------------------
    # Outbound actions
    # ------------------------------------------------------------------

    async def send_sms(self, request: SendSmsRequest) -> SendSmsResponse:
        if _missing(request.to, request.message):
            raise ValidationError("Missing required fields: to and message")

        message_request = MessageRequest(
            to=request.to,
            from_number=self._telephony_config.twilio_phone_number,
            body=request.message,
        )
        try:
            result = await self._provider.send_message(message_request)
        except Exception as exc:
            logger.exception("Error sending SMS", extra={"error_code": getattr(exc, "error_code", None)})
            raise self._internal_error(exc) from exc

        logger.info(
            "SMS sent",
            extra={"to": request.to, "message_id": result.provider_message_id},
        )
        return SendSmsResponse(messageId=result.provider_message_id)

    async def make_call(self, request: MakeCallRequest) -> MakeCallResponse:
        if _missing(request.to):
            raise ValidationError("Missing required field: to")

        call_request = CallRequest(
            to=request.to,
            from_number=request.from_ or self._telephony_config.twilio_phone_number,
            instructions_url=self._telephony_config.get_webhook_url(VOICE_WEBHOOK_PATH),
        )
        try:
            result = await self._provider.create_call(call_request)
        except Exception as exc:
            logger.exception("Error making call", extra={"error_code": getattr(exc, "error_code", None)})
            raise self._internal_error(exc) from exc

        logger.info(
            "Call initiated",
            extra={"to": request.to, "call_id": result.provider_call_id},
        )
        return MakeCallResponse(callId=result.provider_call_id)

    # ------------------------------------------------------------------
    # Status
    # ------------------------------------------------------------------

    def agent_status(self) -> AgentStatusResponse:
        return AgentStatusResponse(
            agent=self._settings.agent_name,
            status="active",
            capabilities=list(CAPABILITIES),
            livekit_url=self._livekit_config.url or None,
            timestamp=iso_timestamp(),
        )

    def health(self) -> HealthResponse:
        return HealthResponse(
            status="ok",
            message=f"{self._settings.app_name} Agent is running",
        )
