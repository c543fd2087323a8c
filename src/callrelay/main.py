"""
FastAPI application entry point.
"""

from __future__ import annotations

from contextlib import asynccontextmanager
from typing import AsyncGenerator

import uvicorn
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from callrelay.config import Settings, get_settings
from callrelay.relay.router import router as relay_router
from callrelay.relay.service import GENERIC_ERROR_MESSAGE, WebhookRelay
from callrelay.rooms.config import LiveKitConfig, get_livekit_config
from callrelay.rooms.tokens import RoomTokenIssuer
from callrelay.shared.exceptions import RelayError
from callrelay.shared.logging import get_logger, setup_logging
from callrelay.telephony.config import (
    SMS_WEBHOOK_PATH,
    VOICE_WEBHOOK_PATH,
    TelephonyConfig,
    get_telephony_config,
)
from callrelay.telephony.factory import build_telephony_provider
from callrelay.telephony.interface import TelephonyProvider

logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan manager."""
    settings: Settings = app.state.settings
    setup_logging(settings.log_level)

    logger.info(
        f"{settings.app_name} Agent is running on port {settings.port}",
        extra={
            "voice_endpoint": VOICE_WEBHOOK_PATH,
            "sms_endpoint": SMS_WEBHOOK_PATH,
            "livekit_url": app.state.livekit_config.url,
        },
    )

    yield

    logger.info("Shutting down application")
    app.state.relay.provider.close()
    logger.info("Application shutdown complete")


def create_app(
    settings: Settings | None = None,
    telephony_config: TelephonyConfig | None = None,
    livekit_config: LiveKitConfig | None = None,
    provider: TelephonyProvider | None = None,
    token_issuer: RoomTokenIssuer | None = None,
) -> FastAPI:
    """Create and configure the FastAPI application.

    Configuration is resolved once here and injected into the relay; pass
    explicit collaborators to replace the environment-derived ones.
    """
    settings = settings or get_settings()
    telephony_config = telephony_config or get_telephony_config()
    livekit_config = livekit_config or get_livekit_config()

    relay = WebhookRelay(
        settings=settings,
        telephony_config=telephony_config,
        livekit_config=livekit_config,
        provider=provider or build_telephony_provider(telephony_config),
        token_issuer=token_issuer or RoomTokenIssuer(livekit_config),
    )

    app = FastAPI(
        title="Call Relay API",
        description="Telephony webhook relay with LiveKit room tokens",
        version="0.1.0",
        lifespan=lifespan,
        docs_url="/docs" if settings.debug else None,
        redoc_url="/redoc" if settings.debug else None,
        openapi_url="/openapi.json" if settings.debug else None,
    )
    app.state.settings = settings
    app.state.livekit_config = livekit_config
    app.state.relay = relay

    # Map domain exceptions to HTTP responses
    @app.exception_handler(RelayError)
    async def _relay_error(_: Request, exc: RelayError) -> JSONResponse:
        return JSONResponse(status_code=exc.status_code, content={"error": exc.message})

    @app.exception_handler(StarletteHTTPException)
    async def _http_error(_: Request, exc: StarletteHTTPException) -> JSONResponse:
        # Unknown paths and unsupported methods both read as "no such route".
        if exc.status_code in (404, 405):
            return JSONResponse(status_code=404, content={"error": "Not found"})
        return JSONResponse(status_code=exc.status_code, content={"error": str(exc.detail)})

    @app.exception_handler(Exception)
    async def _unhandled(_: Request, exc: Exception) -> JSONResponse:
        logger.error("Unhandled error", exc_info=exc)
        return JSONResponse(status_code=500, content={"error": GENERIC_ERROR_MESSAGE})

    # CORS middleware
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins_list,
        allow_credentials=False,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(relay_router)

    return app


def run() -> None:
    """Console entrypoint: serve the app with uvicorn on HOST:PORT."""
    settings = get_settings()
    uvicorn.run(create_app(settings=settings), host=settings.host, port=settings.port)


app = create_app()


if __name__ == "__main__":
    run()
