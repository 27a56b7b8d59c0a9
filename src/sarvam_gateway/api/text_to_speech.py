"""
Text-to-Speech Routes.

Endpoints:
    POST /api/text-to-speech/convert              - Synthesize text, store WAV files
    GET  /api/text-to-speech/download/{filename}  - Serve a stored WAV file
    GET  /api/text-to-speech/health               - Route health

Response Format (convert):
    {
        "success": true,
        "message": "Text converted to speech successfully",
        "data": {
            "downloadUrls": [{"filename": "tts_1718000000000_0.wav", "url": "http://..."}],
            "request": {"target_language_code": "en-IN", "speaker": "shubh", ...}
        }
    }

Download URLs point back at this service. They are built from the incoming
request's scheme and host unless ``server.public_base_url`` is configured.
"""
from __future__ import annotations

from typing import Dict, List, Optional

from fastapi import APIRouter, Body, Depends, Request
from fastapi.responses import FileResponse

from sarvam_gateway.api.dependencies import get_settings, get_speech_service
from sarvam_gateway.api.schemas import TextToSpeechRequest
from sarvam_gateway.core.config import Settings
from sarvam_gateway.core.logging import get_logger, verbose
from sarvam_gateway.services.errors import NotFoundError
from sarvam_gateway.services.speech_service import SpeechRequest, SpeechService
from sarvam_gateway.storage.audio_store import AUDIO_MEDIA_TYPE, sanitize_filename

_LOG = get_logger("sarvam-gateway.api.tts")

router = APIRouter(prefix="/api/text-to-speech", tags=["text-to-speech"])


def build_download_url(request: Request, filename: str, public_base_url: Optional[str] = None) -> str:
    """Absolute URL of the download endpoint for one stored file."""
    if public_base_url:
        path = request.app.url_path_for("download_audio", filename=filename)
        return f"{public_base_url.rstrip('/')}{path}"
    return str(request.url_for("download_audio", filename=filename))


@router.post("/convert")
def convert(
    request: Request,
    req: Optional[TextToSpeechRequest] = Body(default=None),
    service: SpeechService = Depends(get_speech_service),
    settings: Settings = Depends(get_settings),
):
    """
    Convert text to speech.

    A missing body is treated like a body without ``text`` (400). Voice
    parameters that are omitted fall back to the configured defaults.
    """
    req = req or TextToSpeechRequest()
    result = service.convert(
        SpeechRequest(
            text=req.text,
            target_language_code=req.target_language_code,
            speaker=req.speaker,
            pace=req.pace,
            speech_sample_rate=req.speech_sample_rate,
            enable_preprocessing=req.enable_preprocessing,
            model=req.model,
        )
    )

    public_base_url = settings.get_gateway_config().server.public_base_url
    download_urls: List[Dict[str, str]] = [
        {"filename": a.filename, "url": build_download_url(request, a.filename, public_base_url)}
        for a in result.artifacts
    ]

    return {
        "success": True,
        "message": "Text converted to speech successfully",
        "data": {
            "downloadUrls": download_urls,
            "request": result.parameters,
        },
    }


@router.get("/download/{filename:path}", name="download_audio")
def download_audio(filename: str, service: SpeechService = Depends(get_speech_service)):
    """Serve a stored WAV file inline. Directory components are ignored."""
    safe_name = sanitize_filename(filename)
    path = service.resolve_audio(filename)
    if path is None:
        verbose(_LOG, "audio_not_found", requested=filename, resolved=safe_name)
        raise NotFoundError(f"Audio file '{safe_name}' not found.")

    return FileResponse(
        path,
        media_type=AUDIO_MEDIA_TYPE,
        filename=path.name,
        content_disposition_type="inline",
    )


@router.get("/health")
def health():
    return {"success": True, "message": "Text-to-Speech route is healthy"}
