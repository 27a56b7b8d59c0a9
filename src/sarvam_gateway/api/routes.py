"""
Service-level Routes.

Endpoints:
    GET /         - Service descriptor listing the public endpoints
    GET /metrics  - Prometheus metrics (requires prometheus_client)
"""
from __future__ import annotations

from fastapi import APIRouter, Response

from sarvam_gateway import __version__
from sarvam_gateway.core.metrics import metrics

router = APIRouter()


@router.get("/")
def root():
    return {
        "success": True,
        "message": "SarvamAI API",
        "version": __version__,
        "endpoints": {
            "documentIntelligence": {
                "health": "GET /api/document-intelligence/health",
                "process": "POST /api/document-intelligence/process",
            },
            "textToSpeech": {
                "health": "GET /api/text-to-speech/health",
                "convert": "POST /api/text-to-speech/convert",
                "download": "GET /api/text-to-speech/download/:filename",
            },
        },
    }


@router.get("/metrics")
def prometheus_metrics():
    """
    Prometheus metrics endpoint.

    Exposes:
        - gateway_requests_total: Requests by flow and status
        - gateway_request_duration_seconds: End-to-end latency by flow
        - gateway_audio_files_total / gateway_audio_bytes_total: Stored audio
        - gateway_document_jobs_total: Terminal document job states

    Returns placeholder text if prometheus_client is unavailable.
    """
    content, content_type = metrics.get_metrics_response()
    return Response(content=content, media_type=content_type)
