"""
sarvam-gateway: HTTP gateway for Sarvam AI document intelligence and speech.

A small FastAPI service that exposes two hosted capabilities through REST:

    - Document Intelligence: upload a PDF or ZIP, run a provider job, and
      return page metrics and download links for the processed output
    - Text-to-Speech: synthesize text, store the returned WAV payloads on
      local disk, and return download URLs for them

Example Usage:
    >>> from sarvam_gateway.core.config import Settings
    >>> from sarvam_gateway.providers import get_provider
    >>> from sarvam_gateway.services import SpeechRequest, SpeechService
    >>>
    >>> settings = Settings(raw={"speech": {"audio_dir": "./audio"}})
    >>> service = SpeechService(settings, get_provider(settings))
    >>> result = service.convert(SpeechRequest(text="Hello"))
    >>> [a.filename for a in result.artifacts]
    ['tts_1760000000000_0.wav']
"""

__version__ = "1.0.0"
__all__ = ["__version__"]
