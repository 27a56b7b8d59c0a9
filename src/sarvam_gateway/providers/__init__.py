"""
Hosted AI provider adapters.

    - base.py: Provider port (BaseProvider, DocumentJob) and factory
    - sarvam.py: Sarvam AI implementation using the sarvamai SDK
"""
from .base import (
    BaseProvider,
    DocumentJob,
    JobStatus,
    SpeechResult,
    get_provider,
    reset_provider,
)

__all__ = [
    "BaseProvider",
    "DocumentJob",
    "JobStatus",
    "SpeechResult",
    "get_provider",
    "reset_provider",
]
