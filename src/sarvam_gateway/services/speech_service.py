"""
SpeechService - Text-to-Speech Convert-and-Persist Pipeline.

Architecture:
    Validate text -> Resolve defaults -> Provider convert (one call)
                  -> Decode each payload -> Write file -> Artifacts

Only ``text`` is validated. The voice parameters are filled from the
configured defaults when absent and otherwise forwarded untouched; the
provider rejects values it does not accept.

The provider returns zero or more base64 payloads. Each one becomes its
own file named ``tts_<epoch-ms>_<index>.wav``; the timestamp is taken once
per request so the files of one response share it.
"""
from __future__ import annotations

import base64
import binascii
import time
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional

from sarvam_gateway.core.config import GatewayConfig, Settings
from sarvam_gateway.core.logging import debug, fail, get_logger, info, success
from sarvam_gateway.core.metrics import metrics
from sarvam_gateway.providers.base import BaseProvider
from sarvam_gateway.services.errors import GatewayError, InvalidInputError, ProviderError
from sarvam_gateway.services.validators import ValidationError, validate_text
from sarvam_gateway.storage.audio_store import AudioArtifact, AudioRetentionManager, AudioStore
from sarvam_gateway.utils.timeit import timeit

_LOG = get_logger("sarvam-gateway.speech")

FAILURE_MESSAGE = "Failed to convert text to speech"


@dataclass
class SpeechRequest:
    """
    Request for speech synthesis.

    Attributes:
        text: Text to synthesize (required, validated).
        target_language_code: BCP-47 code, e.g. "hi-IN".
        speaker: Voice name.
        pace: Speech pace multiplier.
        speech_sample_rate: Output sample rate in Hz.
        enable_preprocessing: Provider-side text normalisation.
        model: Provider model, e.g. "bulbul:v3".

    None means "use the configured default" for every voice parameter.
    """
    text: Any
    target_language_code: Any = None
    speaker: Any = None
    pace: Any = None
    speech_sample_rate: Any = None
    enable_preprocessing: Any = None
    model: Any = None


@dataclass
class ConversionResult:
    """
    Result of a conversion.

    Attributes:
        artifacts: One stored file per provider payload, in order.
        parameters: The voice parameters actually sent to the provider.
        total_seconds: Wall time of the whole conversion.
    """
    artifacts: List[AudioArtifact]
    parameters: Dict[str, Any] = field(default_factory=dict)
    total_seconds: float = -1.0


def decode_audio_payload(payload: str) -> bytes:
    """
    Decode one base64 audio payload from the provider.

    Raises:
        ValueError: If the payload is not valid base64.
    """
    try:
        return base64.b64decode(payload)
    except (binascii.Error, TypeError) as e:
        raise ValueError(f"Invalid base64 audio payload: {e}")


class SpeechService:
    """
    Converts text to speech and persists the audio locally.

    Usage:
        service = SpeechService(settings, get_provider(settings))
        result = service.convert(SpeechRequest(text="Namaste"))
        for artifact in result.artifacts:
            print(artifact.filename)
    """

    def __init__(self, settings: Settings, provider: BaseProvider):
        self._settings = settings
        self._config: GatewayConfig = settings.get_gateway_config()
        self._provider = provider

        speech = self._config.speech
        retention = None
        if speech.ttl_seconds > 0:
            retention = AudioRetentionManager(
                base_dir=speech.audio_dir,
                ttl_seconds=speech.ttl_seconds,
                cleanup_interval_seconds=speech.cleanup_interval_seconds,
            )
        self._store = AudioStore(speech.audio_dir, retention=retention)
        self._text_preview_chars = self._config.logging.text_preview_chars

    @property
    def store(self) -> AudioStore:
        return self._store

    def resolve_parameters(self, request: SpeechRequest) -> Dict[str, Any]:
        """Fill absent voice parameters from the configured defaults."""
        speech = self._config.speech

        def pick(value: Any, default: Any) -> Any:
            return default if value is None else value

        return {
            "target_language_code": pick(request.target_language_code, speech.default_target_language_code),
            "speaker": pick(request.speaker, speech.default_speaker),
            "pace": pick(request.pace, speech.default_pace),
            "speech_sample_rate": pick(request.speech_sample_rate, speech.default_speech_sample_rate),
            "enable_preprocessing": pick(request.enable_preprocessing, speech.default_enable_preprocessing),
            "model": pick(request.model, speech.default_model),
        }

    def convert(self, request: SpeechRequest) -> ConversionResult:
        """
        Synthesize text and store every returned payload.

        Args:
            request: SpeechRequest with text and optional voice parameters.

        Returns:
            ConversionResult with one artifact per payload.

        Raises:
            InvalidInputError: Text missing or blank (no provider call was made).
            ProviderError: Synthesis, decoding or writing failed.
        """
        try:
            text = validate_text(request.text)
        except ValidationError as e:
            raise InvalidInputError(e.message, e.code)

        params = self.resolve_parameters(request)
        preview = text[:self._text_preview_chars] if self._text_preview_chars > 0 else ""
        info(_LOG, "speech_request", chars=len(text), text_preview=preview,
             lang=params["target_language_code"], speaker=params["speaker"], model=params["model"])

        try:
            with timeit("speech_total") as total_t:
                response = self._provider.text_to_speech(text=text, **params)
                debug(_LOG, "provider_response", payloads=len(response.audios),
                      provider_request_id=response.request_id)

                timestamp_ms = int(time.time() * 1000)
                artifacts: List[AudioArtifact] = []
                for index, payload in enumerate(response.audios):
                    audio = decode_audio_payload(payload)
                    artifact = self._store.save(self._store.make_filename(index, timestamp_ms), audio)
                    metrics.record_audio_file(artifact.size_bytes)
                    artifacts.append(artifact)

        except GatewayError:
            metrics.record_request("speech", "error", -1)
            raise
        except Exception as e:
            fail(_LOG, "speech_failed", error=str(e), error_type=type(e).__name__)
            metrics.record_request("speech", "error", -1)
            raise ProviderError(FAILURE_MESSAGE, error=str(e))

        success(_LOG, "speech_done", files=len(artifacts),
                bytes=sum(a.size_bytes for a in artifacts), seconds=round(total_t.seconds, 3))
        metrics.record_request("speech", "success", total_t.seconds)

        return ConversionResult(artifacts=artifacts, parameters=params, total_seconds=total_t.seconds)

    def resolve_audio(self, filename: str) -> Optional[Path]:
        """Path of a stored audio file, or None if it does not exist."""
        return self._store.resolve(filename)
