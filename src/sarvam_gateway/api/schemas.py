"""
API Request Schemas.

Example Request (POST /api/text-to-speech/convert):
    {
        "text": "Namaste, aap kaise hain?",
        "target_language_code": "hi-IN",
        "speaker": "shubh",
        "pace": 1.0,
        "speech_sample_rate": 22050,
        "enable_preprocessing": true,
        "model": "bulbul:v3"
    }

Every field is typed ``Any`` on purpose: ``text`` is validated by the
service so that a missing or non-string value gets the gateway's own 400
message, and the voice parameters are forwarded to the provider exactly
as the client sent them.
"""
from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class TextToSpeechRequest(BaseModel):
    """
    Text-to-speech conversion request.

    Attributes:
        text: Text to synthesize. Required, non-empty after stripping.
        target_language_code: BCP-47 language code (default "en-IN").
        speaker: Voice name (default "shubh").
        pace: Speech pace multiplier (default 1.0).
        speech_sample_rate: Output sample rate in Hz (default 22050).
        enable_preprocessing: Provider-side text normalisation (default true).
        model: Provider TTS model (default "bulbul:v3").

    Omitted parameters use the defaults from settings.yaml.
    """
    model_config = ConfigDict(extra="ignore", protected_namespaces=())

    text: Any = Field(default=None, description="Text to synthesize")
    target_language_code: Any = Field(default=None, description="BCP-47 language code, e.g. 'hi-IN'")
    speaker: Any = Field(default=None, description="Voice name")
    pace: Any = Field(default=None, description="Speech pace multiplier")
    speech_sample_rate: Any = Field(default=None, description="Audio sample rate in Hz")
    enable_preprocessing: Any = Field(default=None, description="Enable provider text preprocessing")
    model: Any = Field(default=None, description="Provider TTS model, e.g. 'bulbul:v3'")
