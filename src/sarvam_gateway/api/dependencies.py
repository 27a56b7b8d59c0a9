"""
FastAPI Dependency Injection Providers.

Hierarchy:
    1. get_settings() - Loads and caches application configuration
    2. get_gateway_provider() - Process-wide provider (one SDK client)
    3. get_document_service() / get_speech_service() - Service singletons

Tests replace the service dependencies through ``app.dependency_overrides``
to run the HTTP layer against a stub provider.

Usage in Route Handlers:
    @router.post("/convert")
    def convert(
        req: TextToSpeechRequest,
        service: SpeechService = Depends(get_speech_service),
    ):
        ...
"""
from __future__ import annotations

import os
import threading
from functools import lru_cache
from typing import Optional

from sarvam_gateway.core.config import Settings, apply_env_overrides, load_settings
from sarvam_gateway.core.logging import get_logger, warn
from sarvam_gateway.providers.base import BaseProvider, get_provider
from sarvam_gateway.services.document_service import DocumentService
from sarvam_gateway.services.speech_service import SpeechService

_LOG = get_logger("sarvam-gateway.deps")


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """
    Load and cache application settings.

    The path comes from SARVAM_GATEWAY_SETTINGS (default
    config/settings.yaml). Without a settings file the built-in defaults
    plus environment overrides are used.
    """
    path = os.getenv("SARVAM_GATEWAY_SETTINGS", "config/settings.yaml")
    try:
        return load_settings(path)
    except FileNotFoundError:
        warn(_LOG, "settings_file_missing", path=path)
        return Settings(raw=apply_env_overrides({}))


def get_gateway_provider() -> BaseProvider:
    return get_provider(get_settings())


_document_service: Optional[DocumentService] = None
_speech_service: Optional[SpeechService] = None
_services_lock = threading.Lock()


def get_document_service() -> DocumentService:
    """Get the singleton DocumentService."""
    global _document_service
    if _document_service is None:
        with _services_lock:
            if _document_service is None:
                _document_service = DocumentService(get_settings(), get_gateway_provider())
    return _document_service


def get_speech_service() -> SpeechService:
    """Get the singleton SpeechService."""
    global _speech_service
    if _speech_service is None:
        with _services_lock:
            if _speech_service is None:
                _speech_service = SpeechService(get_settings(), get_gateway_provider())
    return _speech_service


def prepare_storage() -> None:
    """
    Create the audio directory at startup.

    Called from the app lifespan in main.py so the directory exists
    before the first download request.
    """
    settings = get_settings()
    os.makedirs(settings.get_gateway_config().speech.audio_dir, exist_ok=True)


def reset_dependencies() -> None:
    """Drop cached settings and services (for testing)."""
    global _document_service, _speech_service
    with _services_lock:
        _document_service = None
        _speech_service = None
    get_settings.cache_clear()
