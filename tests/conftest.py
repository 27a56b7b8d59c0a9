"""
Shared fixtures: a recording stub provider and an app client wired to it.

The stub stands in for the hosted API, so no test needs network access or
an API key. Services are built against tmp_path directories and injected
into the app through ``app.dependency_overrides``.
"""
from __future__ import annotations

import base64
import time
from pathlib import Path
from typing import Any, Dict, List, Optional

import pytest
from fastapi.testclient import TestClient

from sarvam_gateway.api.dependencies import get_document_service, get_settings, get_speech_service
from sarvam_gateway.core.config import Settings
from sarvam_gateway.main import app
from sarvam_gateway.providers.base import BaseProvider, DocumentJob, JobStatus, SpeechResult
from sarvam_gateway.services.document_service import DocumentService
from sarvam_gateway.services.speech_service import SpeechService

# Minimal RIFF header; the gateway never parses audio, only stores it
WAV_BYTES = b"RIFF\x24\x00\x00\x00WAVEfmt \x10\x00\x00\x00\x01\x00\x01\x00" + b"\x00" * 16


def b64(data: bytes) -> str:
    return base64.b64encode(data).decode("ascii")


class StubJob(DocumentJob):
    """Document job that records every call made on it."""

    def __init__(
        self,
        calls: List[tuple],
        job_id: str = "job_123",
        state: str = "Completed",
        fail_on: Optional[str] = None,
        wait_delay: float = 0.0,
    ):
        self._calls = calls
        self._job_id = job_id
        self._state = state
        self._fail_on = fail_on
        self._wait_delay = wait_delay
        self.uploaded_path: Optional[str] = None
        self.uploaded_content: Optional[bytes] = None

    @property
    def job_id(self) -> str:
        return self._job_id

    def _record(self, name: str, **kwargs: Any) -> None:
        self._calls.append((name, kwargs))
        if self._fail_on == name:
            raise RuntimeError(f"{name} failed")

    def upload_file(self, path: str) -> None:
        self.uploaded_path = path
        self.uploaded_content = Path(path).read_bytes()
        self._record("upload_file", path=path)

    def start(self) -> None:
        self._record("start")

    def wait_until_complete(self, timeout: Optional[float] = None) -> JobStatus:
        self._record("wait_until_complete", timeout=timeout)
        if timeout is not None and self._wait_delay > timeout:
            raise TimeoutError(f"Job {self._job_id} did not complete within {timeout} seconds")
        if self._wait_delay:
            time.sleep(self._wait_delay)
        return JobStatus(job_state=self._state, raw={"job_id": self._job_id, "job_state": self._state})

    def get_page_metrics(self) -> Any:
        self._record("get_page_metrics")
        return {"total_pages": 2, "pages_processed": 2, "pages_failed": 0}

    def get_download_links(self) -> Any:
        self._record("get_download_links")
        return {
            "job_id": self._job_id,
            "download_urls": {"output.zip": {"file_url": "https://files.example.com/output.zip"}},
        }


class StubProvider(BaseProvider):
    """Provider double that records calls and returns canned responses."""
    name = "stub"

    def __init__(
        self,
        settings: Settings,
        audios: Optional[List[str]] = None,
        tts_error: Optional[Exception] = None,
        create_error: Optional[Exception] = None,
        job_kwargs: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(settings)
        self.calls: List[tuple] = []
        self.audios = [b64(WAV_BYTES)] if audios is None else audios
        self.tts_error = tts_error
        self.create_error = create_error
        self.job_kwargs = job_kwargs or {}
        self.job: Optional[StubJob] = None

    def create_document_job(self, language: str, output_format: str) -> DocumentJob:
        self.calls.append(("create_document_job", {"language": language, "output_format": output_format}))
        if self.create_error is not None:
            raise self.create_error
        self.job = StubJob(self.calls, **self.job_kwargs)
        return self.job

    def text_to_speech(self, text: str, **params: Any) -> SpeechResult:
        self.calls.append(("text_to_speech", {"text": text, **params}))
        if self.tts_error is not None:
            raise self.tts_error
        return SpeechResult(audios=list(self.audios), request_id="req_stub")

    def call_names(self) -> List[str]:
        return [name for name, _ in self.calls]


def make_settings(tmp_path: Path, **sections: Dict[str, Any]) -> Settings:
    """Settings rooted in tmp_path; extra sections are merged in."""
    raw: Dict[str, Any] = {
        "document": {"temp_dir": str(tmp_path / "uploads")},
        "speech": {"audio_dir": str(tmp_path / "audio")},
    }
    for name, values in sections.items():
        raw.setdefault(name, {}).update(values)
    return Settings(raw=raw)


@pytest.fixture
def settings(tmp_path):
    return make_settings(tmp_path)


@pytest.fixture
def provider(settings):
    return StubProvider(settings)


@pytest.fixture
def make_client():
    """
    Build a TestClient whose services use the given settings and provider.

    Not used as a context manager, so the lifespan startup (which reads the
    real settings file) does not run.
    """
    def _make(settings: Settings, provider: BaseProvider) -> TestClient:
        document_service = DocumentService(settings, provider)
        speech_service = SpeechService(settings, provider)
        app.dependency_overrides[get_settings] = lambda: settings
        app.dependency_overrides[get_document_service] = lambda: document_service
        app.dependency_overrides[get_speech_service] = lambda: speech_service
        return TestClient(app, raise_server_exceptions=False)

    yield _make
    app.dependency_overrides.clear()


@pytest.fixture
def client(make_client, settings, provider):
    return make_client(settings, provider)
