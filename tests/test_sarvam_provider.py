"""
Tests for the Sarvam provider adapter against autospecced SDK objects.

No network access: the SDK's sub-clients and job class are replaced by
``create_autospec`` mocks, so a call that does not match the installed
SDK's signatures fails here instead of at runtime.
"""
from types import SimpleNamespace
from typing import Dict, List, Optional
from unittest.mock import MagicMock, create_autospec, patch

import pytest
from pydantic import BaseModel
from sarvamai.document_intelligence.client import DocumentIntelligenceClient, DocumentIntelligenceJob
from sarvamai.text_to_speech.client import TextToSpeechClient

from sarvam_gateway.core.config import Settings
from sarvam_gateway.providers.base import JobStatus, _create_provider, get_provider, reset_provider
from sarvam_gateway.providers.sarvam import SarvamDocumentJob, SarvamProvider, to_plain


class _Status(BaseModel):
    job_id: str
    job_state: str
    error_message: Optional[str] = None


class _FileLink(BaseModel):
    file_url: str


class _Links(BaseModel):
    job_id: str
    download_urls: Dict[str, _FileLink]
    errors: List[str] = []


def make_sdk_job(job_id: str = "job_9"):
    sdk_job = create_autospec(DocumentIntelligenceJob, instance=True)
    sdk_job.job_id = job_id
    return sdk_job


@pytest.fixture
def sdk_client():
    client = MagicMock()
    client.text_to_speech = create_autospec(TextToSpeechClient, instance=True)
    client.document_intelligence = create_autospec(DocumentIntelligenceClient, instance=True)
    return client


@pytest.fixture
def sarvam(sdk_client):
    provider = SarvamProvider(Settings(raw={"provider": {"api_key": "sk_test"}}))
    provider._client = sdk_client
    return provider


class TestTextToSpeech:
    def test_convert_call(self, sarvam, sdk_client):
        sdk_client.text_to_speech.convert.return_value = SimpleNamespace(audios=["UklGRg=="], request_id="r1")

        result = sarvam.text_to_speech(
            text="Hello",
            target_language_code="en-IN",
            speaker="shubh",
            pace=1.0,
            speech_sample_rate=22050,
            enable_preprocessing=True,
            model="bulbul:v3",
        )

        assert result.audios == ["UklGRg=="]
        assert result.request_id == "r1"
        sdk_client.text_to_speech.convert.assert_called_once_with(
            text="Hello",
            language_code="en-IN",
            speaker="shubh",
            pace=1.0,
            speech_sample_rate=22050,
            enable_preprocessing=True,
            model="bulbul:v3",
        )

    def test_missing_audios(self, sarvam, sdk_client):
        sdk_client.text_to_speech.convert.return_value = SimpleNamespace(audios=None)
        result = sarvam.text_to_speech("Hi", "en-IN", "shubh", 1.0, 22050, True, "bulbul:v3")
        assert result.audios == []
        assert result.request_id is None

    def test_real_client_accepts_call(self):
        """The SDK client built by the provider accepts the convert keywords."""
        from sarvamai import SarvamAI

        provider = SarvamProvider(Settings(raw={"provider": {"api_key": "sk_test"}}))
        provider._client = SarvamAI(api_subscription_key="sk_test")
        response = SimpleNamespace(audios=["UklGRg=="], request_id="r2")
        with patch.object(provider._client.text_to_speech, "convert", autospec=True,
                          return_value=response) as convert:
            result = provider.text_to_speech("Hi", "hi-IN", "shubh", 1.0, 22050, False, "bulbul:v3")

        assert result.request_id == "r2"
        assert convert.call_args.kwargs["language_code"] == "hi-IN"


class TestDocumentJob:
    def test_create_job(self, sarvam, sdk_client):
        sdk_client.document_intelligence.create_job.return_value = make_sdk_job()
        job = sarvam.create_document_job(language="hi-IN", output_format="md")
        assert isinstance(job, SarvamDocumentJob)
        assert job.job_id == "job_9"
        sdk_client.document_intelligence.create_job.assert_called_once_with(language="hi-IN", output_format="md")

    def test_job_methods_delegate(self, sdk_client):
        sdk_job = make_sdk_job()
        sdk_job.wait_until_complete.return_value = _Status(job_id="job_9", job_state="Completed")
        sdk_job.get_page_metrics.return_value = {"total_pages": 3}
        sdk_client.document_intelligence.get_download_links.return_value = _Links(
            job_id="job_9", download_urls={"out.zip": _FileLink(file_url="https://x/out.zip")}
        )
        job = SarvamDocumentJob(sdk_job, sdk_client)

        job.upload_file("/tmp/temp_1_report.pdf")
        job.start()
        status = job.wait_until_complete()

        sdk_job.upload_file.assert_called_once_with("/tmp/temp_1_report.pdf")
        sdk_job.start.assert_called_once_with()
        sdk_job.wait_until_complete.assert_called_once_with()
        assert status == JobStatus(job_state="Completed", raw={"job_id": "job_9", "job_state": "Completed"})
        assert job.get_page_metrics() == {"total_pages": 3}
        assert job.get_download_links() == {
            "job_id": "job_9",
            "download_urls": {"out.zip": {"file_url": "https://x/out.zip"}},
            "errors": [],
        }
        sdk_client.document_intelligence.get_download_links.assert_called_once_with("job_9")

    def test_wait_timeout_forwarded(self, sdk_client):
        sdk_job = make_sdk_job()
        sdk_job.wait_until_complete.return_value = _Status(job_id="job_9", job_state="Completed")
        SarvamDocumentJob(sdk_job, sdk_client).wait_until_complete(timeout=30.0)
        sdk_job.wait_until_complete.assert_called_once_with(timeout=30.0)

    def test_wait_timeout_raises(self, sdk_client):
        sdk_job = make_sdk_job()
        sdk_job.wait_until_complete.side_effect = TimeoutError("Job job_9 did not complete within 1 seconds")
        with pytest.raises(TimeoutError):
            SarvamDocumentJob(sdk_job, sdk_client).wait_until_complete(timeout=1.0)

    def test_unknown_state(self, sdk_client):
        sdk_job = make_sdk_job()
        sdk_job.wait_until_complete.return_value = {"job_id": "job_9"}
        assert SarvamDocumentJob(sdk_job, sdk_client).wait_until_complete().job_state == "Unknown"


class TestClientCreation:
    def test_missing_key(self):
        provider = SarvamProvider(Settings(raw={}))
        with pytest.raises(RuntimeError, match="SARVAM_API_KEY"):
            provider.create_document_job("en-IN", "html")

    def test_client_created_once(self):
        provider = SarvamProvider(Settings(raw={"provider": {"api_key": "sk_test", "timeout_s": 30}}))
        with patch("sarvamai.SarvamAI") as sdk_cls:
            first = provider._get_client()
            second = provider._get_client()
        assert first is second
        sdk_cls.assert_called_once_with(api_subscription_key="sk_test", timeout=30.0)


class TestFactory:
    def setup_method(self):
        reset_provider()

    def teardown_method(self):
        reset_provider()

    def test_singleton(self):
        settings = Settings(raw={})
        provider = get_provider(settings)
        assert isinstance(provider, SarvamProvider)
        assert get_provider(settings) is provider

    def test_unknown_provider(self):
        with pytest.raises(ValueError, match="Unknown provider"):
            _create_provider("nope", Settings(raw={}))


class TestToPlain:
    def test_nested(self):
        value = {"status": _Status(job_id="j", job_state="Failed"), "items": (1, _FileLink(file_url="u"))}
        assert to_plain(value) == {
            "status": {"job_id": "j", "job_state": "Failed"},
            "items": [1, {"file_url": "u"}],
        }

    def test_passthrough(self):
        assert to_plain("text") == "text"
        assert to_plain(None) is None
