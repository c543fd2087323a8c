"""
FastAPI router for the relay endpoints.

POST bodies are accepted as JSON or form-encoded. Provider webhooks
(/twilio-voice, /twilio-sms) always answer 200 with TwiML.
"""

from __future__ import annotations

import json
from typing import Any, TypeVar

import pydantic
from fastapi import APIRouter, Depends, Request, Response
from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette.formparsers import MultiPartException

from callrelay.relay.schemas import (
    AgentStatusResponse,
    ErrorResponse,
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
from callrelay.relay.service import WebhookRelay
from callrelay.shared.exceptions import ValidationError
from callrelay.shared.logging import get_logger
from callrelay.telephony.twiml import TWIML_MEDIA_TYPE

logger = get_logger(__name__)

router = APIRouter(tags=["relay"])

ModelT = TypeVar("ModelT", bound=pydantic.BaseModel)

_FORM_TYPES = ("application/x-www-form-urlencoded", "multipart/form-data")

_ERROR_RESPONSES: dict[int | str, dict[str, Any]] = {
    400: {"model": ErrorResponse},
    500: {"model": ErrorResponse},
}


def get_relay(request: Request) -> WebhookRelay:
    return request.app.state.relay


async def _read_payload(request: Request, strict: bool = True) -> dict[str, Any]:
    """Read a form-encoded or JSON body into a dict.

    With ``strict`` a malformed body is a ValidationError; otherwise it is
    treated as empty (provider webhooks must never fail).
    """
    content_type = request.headers.get("content-type", "")
    if any(form_type in content_type for form_type in _FORM_TYPES):
        try:
            form = await request.form()
        except (StarletteHTTPException, MultiPartException) as exc:
            detail = getattr(exc, "detail", None) or getattr(exc, "message", str(exc))
            if strict:
                raise ValidationError(f"Malformed form body: {detail}") from exc
            logger.warning("Unparseable webhook form ignored", extra={"detail": detail})
            return {}
        return {key: value for key, value in form.items() if isinstance(value, str)}

    raw = await request.body()
    if not raw:
        return {}
    try:
        data = json.loads(raw)
    except ValueError:
        if strict:
            raise ValidationError("Malformed JSON body")
        logger.warning("Unparseable webhook body ignored", extra={"body_length": len(raw)})
        return {}
    return data if isinstance(data, dict) else {}


def _parse(model: type[ModelT], payload: dict[str, Any]) -> ModelT:
    try:
        return model.model_validate(payload)
    except pydantic.ValidationError as exc:
        fields = ", ".join(".".join(str(loc) for loc in err["loc"]) for err in exc.errors())
        raise ValidationError(f"Invalid fields: {fields}") from exc


@router.get("/health", response_model=HealthResponse)
async def health(relay: WebhookRelay = Depends(get_relay)) -> HealthResponse:
    return relay.health()


@router.post("/livekit-token", response_model=TokenResponse, responses=_ERROR_RESPONSES)
async def livekit_token(
    request: Request,
    relay: WebhookRelay = Depends(get_relay),
) -> TokenResponse:
    """Mint a LiveKit access token for ``identity`` in ``room``."""
    payload = await _read_payload(request)
    return relay.issue_room_token(_parse(TokenRequest, payload))


@router.post("/twilio-voice")
async def twilio_voice(
    request: Request,
    relay: WebhookRelay = Depends(get_relay),
) -> Response:
    """Inbound call webhook; answers with voice TwiML."""
    payload = await _read_payload(request, strict=False)
    try:
        event = VoiceWebhookEvent.model_validate(payload)
    except pydantic.ValidationError:
        logger.warning("Voice webhook payload did not validate; using empty event")
        event = VoiceWebhookEvent()
    return Response(content=relay.handle_voice_event(event), media_type=TWIML_MEDIA_TYPE)


@router.post("/twilio-sms")
async def twilio_sms(
    request: Request,
    relay: WebhookRelay = Depends(get_relay),
) -> Response:
    """Inbound SMS webhook; answers with messaging TwiML."""
    payload = await _read_payload(request, strict=False)
    try:
        event = SmsWebhookEvent.model_validate(payload)
    except pydantic.ValidationError:
        logger.warning("SMS webhook payload did not validate; using empty event")
        event = SmsWebhookEvent()
    return Response(content=relay.handle_sms_event(event), media_type=TWIML_MEDIA_TYPE)


@router.post("/send-sms", response_model=SendSmsResponse, responses=_ERROR_RESPONSES)
async def send_sms(
    request: Request,
    relay: WebhookRelay = Depends(get_relay),
) -> SendSmsResponse:
    payload = await _read_payload(request)
    return await relay.send_sms(_parse(SendSmsRequest, payload))


@router.post("/make-call", response_model=MakeCallResponse, responses=_ERROR_RESPONSES)
async def make_call(
    request: Request,
    relay: WebhookRelay = Depends(get_relay),
) -> MakeCallResponse:
    payload = await _read_payload(request)
    return await relay.make_call(_parse(MakeCallRequest, payload))


@router.get("/agent-status", response_model=AgentStatusResponse)
async def agent_status(relay: WebhookRelay = Depends(get_relay)) -> AgentStatusResponse:
    return relay.agent_status()
