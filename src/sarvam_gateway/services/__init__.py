"""
sarvam-gateway Services Layer.

Business logic between the HTTP layer and the provider/storage layers:
    - document_service.py: Document intelligence job sequence
    - speech_service.py: Text-to-speech convert-and-persist flow
    - validators.py: Input validation
    - errors.py: Error codes and exception hierarchy
"""
from .document_service import DocumentResult, DocumentService, DocumentUpload
from .errors import (
    ErrorCode,
    GatewayError,
    InvalidInputError,
    JobTimeoutError,
    NotFoundError,
    ProviderError,
)
from .speech_service import SpeechRequest, ConversionResult, SpeechService

__all__ = [
    "DocumentService",
    "DocumentUpload",
    "DocumentResult",
    "SpeechService",
    "SpeechRequest",
    "ConversionResult",
    "GatewayError",
    "InvalidInputError",
    "NotFoundError",
    "ProviderError",
    "JobTimeoutError",
    "ErrorCode",
]
