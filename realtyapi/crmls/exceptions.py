"""
Exceptions raised by the CRMLS proxy.

Every error knows the HTTP status it is reported with and renders itself as
the JSON body the frontend expects: ``error``, ``message``, ``raw_error`` and,
for some failures, ``debug_info``.
"""
from typing import Any, Dict, Optional


class CRMLSError(Exception):
    """Base exception for all CRMLS proxy errors."""

    status_code: int = 500
    error: str = "Internal server error"

    def __init__(
        self,
        message: str,
        *,
        error: Optional[str] = None,
        status_code: Optional[int] = None,
        raw_error: Optional[str] = None,
        debug_info: Optional[Dict[str, Any]] = None,
        body: Optional[Dict[str, Any]] = None,
    ) -> None:
        """Initialize the exception.

        Args:
            message: Human-readable error message
            error: Short error title, defaults to the class title
            status_code: HTTP status to report, defaults to the class status
            raw_error: Raw upstream text or traceback
            debug_info: Extra diagnostic fields
            body: A complete JSON body to report instead of the built one
        """
        super().__init__(message)
        self.message = message
        if error is not None:
            self.error = error
        if status_code is not None:
            self.status_code = status_code
        self.raw_error = raw_error
        self.debug_info = debug_info
        self.body = body

    def to_dict(self) -> Dict[str, Any]:
        if self.body is not None:
            return self.body
        payload: Dict[str, Any] = {"error": self.error, "message": self.message}
        if self.raw_error is not None:
            payload["raw_error"] = self.raw_error
        if self.debug_info:
            payload["debug_info"] = self.debug_info
        return payload


class ConfigurationError(CRMLSError):
    """Raised when CRMLS credentials are missing from the environment."""
    status_code = 500
    error = "Server configuration error"


class UpstreamError(CRMLSError):
    """Raised when the CRMLS API answers with a non-2xx status."""
    error = "Upstream error"


class InvalidResponseError(CRMLSError):
    """Raised when the CRMLS API answers with a body we cannot use."""
    status_code = 500
    error = "Invalid response format"


class RequestTimeoutError(CRMLSError):
    """Raised when a request to the CRMLS API times out."""
    status_code = 408
    error = "Request timeout"


class NetworkError(CRMLSError):
    """Raised when the CRMLS API cannot be reached."""
    status_code = 503
    error = "Network error"


__all__ = [
    "CRMLSError", "ConfigurationError", "UpstreamError",
    "InvalidResponseError", "RequestTimeoutError", "NetworkError",
]
