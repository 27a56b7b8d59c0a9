"""
Sarvam AI provider, backed by the official ``sarvamai`` Python SDK.

SDK surface used:
    client = SarvamAI(api_subscription_key=..., timeout=...)

    client.text_to_speech.convert(text=..., language_code=..., ...)
        -> response with ``audios``: list of base64 WAV strings

    job = client.document_intelligence.create_job(language=..., output_format=...)
    job.upload_file(path); job.start()
    status = job.wait_until_complete(timeout=...)   # raises TimeoutError
    job.get_page_metrics()                          # from the cached status
    client.document_intelligence.get_download_links(job.job_id)

SDK responses are pydantic models; they are converted to plain JSON data
here so nothing above this module depends on SDK types.

The API key comes from ``provider.api_key`` (normally the SARVAM_API_KEY
environment variable). Without one, every call fails with a RuntimeError
naming the variable; the gateway still starts.
"""
from __future__ import annotations

import threading
from typing import Any, Optional

from pydantic import BaseModel

from sarvam_gateway.core.config import Settings
from sarvam_gateway.core.logging import debug, info
from sarvam_gateway.providers.base import BaseProvider, DocumentJob, JobStatus, SpeechResult


def to_plain(value: Any) -> Any:
    """Convert SDK pydantic models (possibly nested in lists/dicts) to JSON data."""
    if isinstance(value, BaseModel):
        return value.model_dump(mode="json", by_alias=True, exclude_none=True)
    if isinstance(value, dict):
        return {k: to_plain(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [to_plain(v) for v in value]
    return value


class SarvamDocumentJob(DocumentJob):
    """Wraps a ``sarvamai`` document intelligence job and the client that created it."""

    def __init__(self, job: Any, client: Any):
        self._job = job
        self._client = client

    @property
    def job_id(self) -> str:
        return str(self._job.job_id)

    def upload_file(self, path: str) -> None:
        self._job.upload_file(path)

    def start(self) -> None:
        self._job.start()

    def wait_until_complete(self, timeout: Optional[float] = None) -> JobStatus:
        if timeout is None:
            status = self._job.wait_until_complete()
        else:
            status = self._job.wait_until_complete(timeout=timeout)
        raw = to_plain(status)
        state = raw.get("job_state") if isinstance(raw, dict) else None
        return JobStatus(job_state=str(state or "Unknown"), raw=raw if isinstance(raw, dict) else {})

    def get_page_metrics(self) -> Any:
        return to_plain(self._job.get_page_metrics())

    def get_download_links(self) -> Any:
        return to_plain(self._client.document_intelligence.get_download_links(self.job_id))


class SarvamProvider(BaseProvider):
    """
    Sarvam AI hosted provider.

    The SDK client is created lazily on first use and shared by all
    requests.
    """
    name = "sarvam"

    def __init__(self, settings: Settings):
        super().__init__(settings)
        self._client: Optional[Any] = None
        self._client_lock = threading.Lock()

    def _get_client(self) -> Any:
        if self._client is None:
            with self._client_lock:
                if self._client is None:
                    api_key = self.config.provider.api_key
                    if not api_key:
                        raise RuntimeError("SARVAM_API_KEY is not configured")
                    from sarvamai import SarvamAI
                    self._client = SarvamAI(
                        api_subscription_key=api_key,
                        timeout=self.config.provider.timeout_s,
                    )
                    info(self.logger, "client_ready", timeout_s=self.config.provider.timeout_s)
        return self._client

    def create_document_job(self, language: str, output_format: str) -> DocumentJob:
        client = self._get_client()
        job = client.document_intelligence.create_job(
            language=language,
            output_format=output_format,
        )
        return SarvamDocumentJob(job, client)

    def text_to_speech(
        self,
        text: str,
        target_language_code: Any,
        speaker: Any,
        pace: Any,
        speech_sample_rate: Any,
        enable_preprocessing: Any,
        model: Any,
    ) -> SpeechResult:
        client = self._get_client()
        response = client.text_to_speech.convert(
            text=text,
            language_code=target_language_code,
            speaker=speaker,
            pace=pace,
            speech_sample_rate=speech_sample_rate,
            enable_preprocessing=enable_preprocessing,
            model=model,
        )
        audios = list(getattr(response, "audios", None) or [])
        request_id = getattr(response, "request_id", None)
        debug(self.logger, "tts_response", payloads=len(audios), provider_request_id=request_id)
        return SpeechResult(audios=audios, request_id=request_id)
