"""
Input Validation for the Gateway.

Validation runs before any provider call so that rejected requests never
reach the hosted API.

Validation Rules:
    - Text: required, must be a string that is non-empty after stripping
    - Document upload: required, extension in the allowed set, size capped

Only the text field of a speech request is validated. Voice parameters
(speaker, pace, model, ...) pass through to the provider unchecked.

Error Codes:
    - TEXT_REQUIRED
    - FILE_REQUIRED
    - FILE_TYPE_NOT_ALLOWED
    - FILE_TOO_LARGE
"""
from __future__ import annotations

from pathlib import PurePosixPath
from typing import Any, Iterable, Optional

from sarvam_gateway.core.logging import get_logger, verbose

_LOG = get_logger("sarvam-gateway.validators")

TEXT_REQUIRED_MESSAGE = "The 'text' field is required and must be a non-empty string."


class ValidationError(Exception):
    """
    Exception raised when input validation fails.

    Attributes:
        message: Human-readable error description.
        code: Machine-readable error code.
    """

    def __init__(self, message: str, code: str = "VALIDATION_ERROR"):
        self.message = message
        self.code = code
        super().__init__(message)


def validate_text(text: Any) -> str:
    """
    Validate speech text.

    Args:
        text: Raw value of the ``text`` field.

    Returns:
        The stripped text.

    Raises:
        ValidationError: If text is missing, not a string, or blank.
    """
    if not isinstance(text, str) or not text.strip():
        raise ValidationError(TEXT_REQUIRED_MESSAGE, "TEXT_REQUIRED")
    return text.strip()


def describe_extensions(allowed: Iterable[str]) -> str:
    """
    Build the human-readable list used in upload error messages.

    Example:
        >>> describe_extensions([".pdf", ".zip"])
        'PDF (.pdf) or ZIP (.zip)'
    """
    return " or ".join(f"{ext.lstrip('.').upper()} ({ext})" for ext in allowed)


def file_extension(filename: str) -> str:
    """Lower-cased extension of a filename, including the dot ("" if none)."""
    return PurePosixPath(filename.replace("\\", "/")).suffix.lower()


def validate_document_upload(
    filename: Optional[str],
    size_bytes: Optional[int],
    allowed_extensions: Iterable[str],
    max_bytes: int,
) -> str:
    """
    Validate an uploaded document before any provider call.

    Args:
        filename: Client-supplied filename (None when no file was sent).
        size_bytes: Upload size in bytes, if known.
        allowed_extensions: Accepted extensions, lower-case with dots.
        max_bytes: Maximum upload size.

    Returns:
        The accepted extension.

    Raises:
        ValidationError: If the file is missing, of a disallowed type, or too large.
    """
    allowed = tuple(allowed_extensions)

    if not filename:
        raise ValidationError(
            f"No file uploaded. Please upload a {describe_extensions(allowed)} file.",
            "FILE_REQUIRED",
        )

    ext = file_extension(filename)
    if ext not in allowed:
        verbose(_LOG, "upload_rejected", filename=filename, extension=ext or "-")
        raise ValidationError(
            f"Only {describe_extensions(allowed)} files are allowed",
            "FILE_TYPE_NOT_ALLOWED",
        )

    if size_bytes is not None and size_bytes > max_bytes:
        raise ValidationError(
            f"File exceeds maximum upload size ({size_bytes} > {max_bytes} bytes)",
            "FILE_TOO_LARGE",
        )

    return ext
