"""
DocumentService - Document Intelligence Pipeline.

Architecture:
    Validate -> Create job -> Stage upload -> Upload -> Start -> Wait
             -> Page metrics -> Download links -> Result

The sequence is fixed and all-or-nothing: the first failing step aborts
the request, nothing is retried, and no partial result is returned. The
staged temp file is removed as soon as the upload step finishes, whether
it succeeded or not.

Waiting:
    ``wait_until_complete`` blocks until the provider reports a terminal
    state. By default there is no gateway-side limit. With
    ``document.wait_timeout_s > 0`` the limit is passed to the job, which
    stops polling and raises TimeoutError. The request then fails with
    JobTimeoutError; the remote job itself is not cancelled.

Example:
    >>> service = DocumentService(settings, provider)
    >>> with open("report.pdf", "rb") as f:
    ...     result = service.process(DocumentUpload("report.pdf", f, size_bytes=1024))
    >>> result.to_dict()["jobState"]
    'Completed'
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, BinaryIO, Dict, Optional

from sarvam_gateway.core.config import GatewayConfig, Settings
from sarvam_gateway.core.logging import fail, get_logger, info, success, verbose, warn
from sarvam_gateway.core.metrics import metrics
from sarvam_gateway.providers.base import BaseProvider, DocumentJob, JobStatus
from sarvam_gateway.services.errors import GatewayError, InvalidInputError, JobTimeoutError, ProviderError
from sarvam_gateway.services.validators import ValidationError, validate_document_upload
from sarvam_gateway.storage.uploads import staged_upload
from sarvam_gateway.utils.timeit import timeit

_LOG = get_logger("sarvam-gateway.document")

FAILURE_MESSAGE = "Failed to process document"
COMPLETED_STATE = "Completed"


@dataclass
class DocumentUpload:
    """
    An uploaded document.

    Attributes:
        filename: Client-supplied filename (None when no file was sent).
        stream: Readable binary stream with the file contents.
        size_bytes: Size in bytes, if known before reading.
    """
    filename: Optional[str]
    stream: Optional[BinaryIO]
    size_bytes: Optional[int] = None


@dataclass
class DocumentResult:
    """Outcome of a completed document job."""
    job_id: str
    job_state: str
    page_metrics: Any
    download_links: Any

    def to_dict(self) -> Dict[str, Any]:
        """Response ``data`` payload (camelCase keys)."""
        return {
            "jobId": self.job_id,
            "jobState": self.job_state,
            "pageMetrics": self.page_metrics,
            "downloadLinks": self.download_links,
        }


class DocumentService:
    """
    Runs the document intelligence job sequence against the provider.

    Usage:
        service = DocumentService(settings, get_provider(settings))
        result = service.process(upload, language="hi-IN")
    """

    def __init__(self, settings: Settings, provider: BaseProvider):
        self._settings = settings
        self._config: GatewayConfig = settings.get_gateway_config()
        self._provider = provider

        doc = self._config.document
        self._allowed_extensions = doc.allowed_extensions
        self._max_upload_bytes = doc.max_upload_bytes
        self._default_language = doc.default_language
        self._default_output_format = doc.default_output_format
        self._temp_dir = doc.temp_dir
        self._wait_timeout_s = doc.wait_timeout_s

    @property
    def allowed_extensions(self) -> tuple[str, ...]:
        return self._allowed_extensions

    def validate(self, upload: DocumentUpload) -> None:
        """
        Reject a bad upload before any provider call.

        Raises:
            InvalidInputError: Missing file, disallowed type, or too large.
        """
        try:
            validate_document_upload(
                upload.filename if upload.stream is not None else None,
                upload.size_bytes,
                self._allowed_extensions,
                self._max_upload_bytes,
            )
        except ValidationError as e:
            raise InvalidInputError(e.message, e.code)

    def _wait(self, job: DocumentJob) -> JobStatus:
        try:
            return job.wait_until_complete(timeout=self._wait_timeout_s or None)
        except TimeoutError:
            raise JobTimeoutError(
                FAILURE_MESSAGE,
                error=f"Job {job.job_id} did not complete within {self._wait_timeout_s}s",
            )

    def process(
        self,
        upload: DocumentUpload,
        language: Optional[str] = None,
        output_format: Optional[str] = None,
    ) -> DocumentResult:
        """
        Process a document end to end.

        Args:
            upload: The uploaded document.
            language: Document language; empty or None uses the default.
            output_format: Output format; empty or None uses the default.

        Returns:
            DocumentResult with job ID, terminal state, metrics and links.

        Raises:
            InvalidInputError: Upload rejected (no provider call was made).
            ProviderError: Any later step failed.
            JobTimeoutError: The configured wait limit passed.
        """
        self.validate(upload)

        language = language or self._default_language
        output_format = output_format or self._default_output_format
        info(_LOG, "document_request", filename=upload.filename,
             language=language, output_format=output_format)

        try:
            with timeit("document_total") as total_t:
                job = self._provider.create_document_job(language=language, output_format=output_format)
                info(_LOG, "job_created", job_id=job.job_id)

                with timeit("upload") as t:
                    with staged_upload(self._temp_dir, upload.filename, upload.stream) as temp_path:
                        job.upload_file(str(temp_path))
                verbose(_LOG, "step", event="upload", seconds=round(t.seconds, 3))

                job.start()
                info(_LOG, "job_started", job_id=job.job_id)

                with timeit("wait") as t:
                    status = self._wait(job)
                info(_LOG, "job_finished", job_id=job.job_id, job_state=status.job_state,
                     seconds=round(t.seconds, 3))
                metrics.record_document_job(status.job_state)
                if status.job_state != COMPLETED_STATE:
                    warn(_LOG, "job_not_completed", job_id=job.job_id, job_state=status.job_state)

                page_metrics = job.get_page_metrics()
                verbose(_LOG, "page_metrics", job_id=job.job_id, metrics=page_metrics)

                download_links = job.get_download_links()
                verbose(_LOG, "download_links_ready", job_id=job.job_id)

        except GatewayError:
            metrics.record_request("document", "error", -1)
            raise
        except Exception as e:
            fail(_LOG, "document_failed", error=str(e), error_type=type(e).__name__)
            metrics.record_request("document", "error", -1)
            raise ProviderError(FAILURE_MESSAGE, error=str(e))

        success(_LOG, "document_done", job_id=job.job_id, seconds=round(total_t.seconds, 3))
        metrics.record_request("document", "success", total_t.seconds)

        return DocumentResult(
            job_id=job.job_id,
            job_state=status.job_state,
            page_metrics=page_metrics,
            download_links=download_links,
        )
