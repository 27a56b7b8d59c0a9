"""
Provider Port and Factory.

This module provides:
    - BaseProvider: what the gateway needs from a hosted AI provider
    - DocumentJob: handle on a remote document-processing job
    - JobStatus / SpeechResult: provider-neutral results
    - get_provider(): Factory returning the process-wide provider instance

The gateway never inspects a job's intermediate states. It drives the
fixed sequence upload -> start -> wait, then reads the cached metrics and
the output download links.

Provider Selection:
    ``provider.name`` in settings.yaml (default "sarvam").

Implementing a New Provider:
    1. Create providers/<name>.py
    2. Inherit from BaseProvider and DocumentJob
    3. Implement create_document_job() and text_to_speech()
    4. Register in _create_provider()
"""
from __future__ import annotations

import threading
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from sarvam_gateway.core.config import GatewayConfig, Settings
from sarvam_gateway.core.logging import get_logger


@dataclass
class JobStatus:
    """
    Terminal status of a document job.

    Attributes:
        job_state: Provider's terminal state name (e.g. "Completed", "Failed").
        raw: Full status payload as plain JSON data.
    """
    job_state: str
    raw: Dict[str, Any] = field(default_factory=dict)


@dataclass
class SpeechResult:
    """
    Result of one synchronous synthesis call.

    Attributes:
        audios: Base64-encoded audio payloads, in response order.
        request_id: Provider's request identifier, when returned.
    """
    audios: List[str]
    request_id: Optional[str] = None


class DocumentJob:
    """
    Handle on a remote document-processing job.

    Methods are called in order: upload_file, start, wait_until_complete,
    get_page_metrics, get_download_links.
    """

    @property
    def job_id(self) -> str:
        raise NotImplementedError

    def upload_file(self, path: str) -> None:
        """Upload the staged local file to the job."""
        raise NotImplementedError

    def start(self) -> None:
        raise NotImplementedError

    def wait_until_complete(self, timeout: Optional[float] = None) -> JobStatus:
        """
        Block until the provider reports a terminal state.

        Raises:
            TimeoutError: ``timeout`` seconds passed first (None waits forever).
        """
        raise NotImplementedError

    def get_page_metrics(self) -> Any:
        """Page metrics from the last observed status (no remote call)."""
        raise NotImplementedError

    def get_download_links(self) -> Any:
        """Download links for the job's output archive."""
        raise NotImplementedError


class BaseProvider:
    """
    Base class for hosted AI providers.

    Attributes:
        name: Provider identifier (e.g. "sarvam").
        config: Validated gateway configuration.
        logger: Logger for this provider.
    """
    name: str = "base"

    def __init__(self, settings: Settings):
        self.settings = settings
        self.config: GatewayConfig = settings.get_gateway_config()
        self.logger = get_logger(f"sarvam-gateway.provider.{self.name}")

    def create_document_job(self, language: str, output_format: str) -> DocumentJob:
        """
        Create a document intelligence job.

        Args:
            language: BCP-47 language code of the document (e.g. "en-IN").
            output_format: Output format of the processed document (e.g. "html").
        """
        raise NotImplementedError

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
        """
        Synthesize text in one synchronous call.

        Voice parameters are forwarded as received; the provider is the
        one that validates them.
        """
        raise NotImplementedError


# =============================================================================
# Provider Factory (Singleton Pattern)
# =============================================================================

_PROVIDER: Optional[BaseProvider] = None
_PROVIDER_LOCK = threading.Lock()


def _create_provider(name: str, settings: Settings) -> BaseProvider:
    """
    Create a provider instance.

    Raises:
        ValueError: If the provider name is unknown.
    """
    if name == "sarvam":
        from sarvam_gateway.providers.sarvam import SarvamProvider
        return SarvamProvider(settings)

    raise ValueError(f"Unknown provider: {name}")


def get_provider(settings: Settings) -> BaseProvider:
    """
    Get or create the global provider instance.

    The provider holds one SDK client (and its HTTP connection pool) for
    the whole process.
    """
    global _PROVIDER

    if _PROVIDER is None:
        with _PROVIDER_LOCK:
            if _PROVIDER is None:
                name = settings.get_gateway_config().provider.name
                _PROVIDER = _create_provider(name, settings)
    return _PROVIDER


def reset_provider() -> None:
    """Reset the global provider (for testing)."""
    global _PROVIDER
    with _PROVIDER_LOCK:
        _PROVIDER = None
