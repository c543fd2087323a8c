"""
Pydantic schemas for relay requests and responses.

Request fields are optional at the schema level: presence is checked by the
relay so missing fields produce the relay's own 400 message rather than a
framework validation payload.
"""

from pydantic import BaseModel, ConfigDict, Field


class TokenRequest(BaseModel):
    """Room access token request."""

    model_config = ConfigDict(extra="ignore")

    identity: str | None = None
    room: str | None = None


class TokenResponse(BaseModel):
    token: str


class VoiceWebhookEvent(BaseModel):
    """Inbound call webhook (form-encoded by the provider)."""

    model_config = ConfigDict(extra="allow")

    CallSid: str | None = None
    From: str | None = None
    To: str | None = None


class SmsWebhookEvent(BaseModel):
    """Inbound SMS webhook (form-encoded by the provider)."""

    model_config = ConfigDict(extra="allow")

    MessageSid: str | None = None
    From: str | None = None
    To: str | None = None
    Body: str | None = None


class SendSmsRequest(BaseModel):
    model_config = ConfigDict(extra="ignore")

    to: str | None = None
    message: str | None = None


class SendSmsResponse(BaseModel):
    success: bool = True
    messageId: str
    message: str = "SMS sent successfully"


class MakeCallRequest(BaseModel):
    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    to: str | None = None
    from_: str | None = Field(default=None, alias="from")


class MakeCallResponse(BaseModel):
    success: bool = True
    callId: str
    message: str = "Call initiated"


class AgentStatusResponse(BaseModel):
    agent: str
    status: str = "active"
    capabilities: list[str]
    livekit_url: str | None = None
    timestamp: str


class HealthResponse(BaseModel):
    status: str = "ok"
    message: str


class ErrorResponse(BaseModel):
    """Body of every JSON error response."""

    error: str
