"""
Gateway Error Codes and Exceptions.

Every failure that reaches a client is a GatewayError (or is converted to
one by the app-level exception handlers), serialised as:

    {
        "success": false,
        "message": "<human readable message>",
        "code": "<ERROR_CODE>",
        "error": "<underlying error text, when there is one>"
    }

HTTP status mapping:
    - InvalidInputError -> 400
    - NotFoundError     -> 404
    - ProviderError     -> 500
    - JobTimeoutError   -> 500
"""
from __future__ import annotations

from typing import Any, Dict, Optional


class ErrorCode:
    """Standardized error codes for API responses."""
    INVALID_INPUT = "INVALID_INPUT"       # Bad request data
    NOT_FOUND = "NOT_FOUND"               # Unknown route or missing file
    PROVIDER_ERROR = "PROVIDER_ERROR"     # Provider call or local step failed
    JOB_TIMEOUT = "JOB_TIMEOUT"           # Document job wait exceeded
    INTERNAL_ERROR = "INTERNAL_ERROR"     # Unexpected error


class GatewayError(Exception):
    """
    Base exception for gateway errors.

    Attributes:
        message: Human-readable error message returned to the client.
        code: Error code from ErrorCode.
        status_code: HTTP status the error maps to.
        error: Optional underlying error text (e.g. the provider's message).
    """
    status_code: int = 500

    def __init__(
        self,
        message: str,
        code: str = ErrorCode.INTERNAL_ERROR,
        status_code: Optional[int] = None,
        error: Optional[str] = None,
    ):
        self.message = message
        self.code = code
        if status_code is not None:
            self.status_code = status_code
        self.error = error
        super().__init__(message)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to the standard error response body."""
        result: Dict[str, Any] = {
            "success": False,
            "message": self.message,
            "code": self.code,
        }
        if self.error:
            result["error"] = self.error
        return result


class InvalidInputError(GatewayError):
    """Raised when a request fails validation (missing text, bad upload)."""
    status_code = 400

    def __init__(self, message: str, code: str = ErrorCode.INVALID_INPUT):
        super().__init__(message, code)


class NotFoundError(GatewayError):
    """Raised for unknown routes and missing audio files."""
    status_code = 404

    def __init__(self, message: str):
        super().__init__(message, ErrorCode.NOT_FOUND)


class ProviderError(GatewayError):
    """Raised when any step of a flow fails after validation."""
    status_code = 500

    def __init__(self, message: str, error: Optional[str] = None, code: str = ErrorCode.PROVIDER_ERROR):
        super().__init__(message, code, error=error or "Internal server error")


class JobTimeoutError(ProviderError):
    """Raised when a document job does not reach a terminal state in time."""

    def __init__(self, message: str, error: Optional[str] = None):
        super().__init__(message, error=error, code=ErrorCode.JOB_TIMEOUT)
