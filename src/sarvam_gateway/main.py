"""
FastAPI Application Entry Point.

This module creates and configures the FastAPI application instance for the
sarvam-gateway service. It sets up routing, logging, request IDs, error
handlers and the startup lifespan.

Routers:
    - Service: /, /metrics
    - Document intelligence: /api/document-intelligence/*
    - Text-to-speech: /api/text-to-speech/*

Usage:
    # Run with uvicorn
    uvicorn sarvam_gateway.main:app --host 0.0.0.0 --port 3000

    # Or through the CLI (reads PORT / settings.yaml)
    sarvam-gateway serve
"""

from __future__ import annotations

import uuid
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request

from sarvam_gateway import __version__
from sarvam_gateway.api.dependencies import get_settings, prepare_storage
from sarvam_gateway.api.document_intelligence import router as document_router
from sarvam_gateway.api.errors import install_error_handlers
from sarvam_gateway.api.routes import router
from sarvam_gateway.api.text_to_speech import router as tts_router
from sarvam_gateway.core.logging import configure_logging, get_logger, info, set_request_id, warn

_LOG = get_logger("sarvam-gateway")

REQUEST_ID_HEADER = "X-Request-Id"


def log_startup() -> None:
    settings = get_settings()
    info(_LOG, "server_ready", port=settings.port, environment=settings.environment)
    if not settings.api_key:
        warn(_LOG, "api_key_missing", hint="set SARVAM_API_KEY")


@asynccontextmanager
async def lifespan(app: FastAPI):
    prepare_storage()
    log_startup()
    yield


def create_app() -> FastAPI:
    """
    Create and configure the FastAPI application.

    This factory function:
        1. Configures structured logging based on environment settings
        2. Creates a FastAPI instance with the service title
        3. Tags every request with a request ID (echoed as X-Request-Id)
        4. Registers the service, document and speech routers
        5. Installs the JSON error handlers
        6. Creates the audio directory on startup (lifespan)

    Returns:
        FastAPI: Configured application instance ready to serve requests.
    """
    configure_logging()

    app = FastAPI(title="sarvam-gateway", version=__version__, lifespan=lifespan)

    @app.middleware("http")
    async def request_context(request: Request, call_next):
        request_id = request.headers.get(REQUEST_ID_HEADER) or uuid.uuid4().hex[:12]
        set_request_id(request_id)
        request.state.request_id = request_id
        response = await call_next(request)
        response.headers[REQUEST_ID_HEADER] = request_id
        return response

    app.include_router(router)
    app.include_router(document_router)
    app.include_router(tts_router)

    install_error_handlers(app)

    return app


# Global application instance for ASGI servers (uvicorn, gunicorn, etc.)
app = create_app()
