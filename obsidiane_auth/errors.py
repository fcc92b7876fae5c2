"""
Obsidiane Auth SDK Error Classes

Structured error hierarchy. Every failure surfaced by the SDK is an
ObsidianeAuthError carrying a machine-readable code, so callers can branch
without parsing messages.
"""

from datetime import datetime, timezone
from typing import Any, Dict, Mapping, Optional


UNKNOWN_ERROR_CODE = "unknown_error"


class ObsidianeAuthError(Exception):
    """Base error class for Obsidiane Auth SDK."""

    def __init__(
        self,
        code: str,
        message: str,
        status_code: int = 0,
        details: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message)
        self.code = code
        self.message = message
        self.status_code = status_code
        self.details = details
        self.timestamp = datetime.now(timezone.utc).isoformat().replace("+00:00", "Z")

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for logging/serialization."""
        return {
            "name": self.__class__.__name__,
            "code": self.code,
            "message": self.message,
            "status_code": self.status_code,
            "details": self.details,
            "timestamp": self.timestamp,
        }

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(code={self.code!r}, message={self.message!r})"


class ApiError(ObsidianeAuthError):
    """
    HTTP error returned by the Auth API (status >= 400).

    The decoded response body is kept untouched in ``payload`` for
    diagnostics; ``details`` is only set when the body's ``details``
    field is itself a mapping.
    """

    def __init__(
        self,
        status_code: int,
        code: str = UNKNOWN_ERROR_CODE,
        details: Optional[Dict[str, Any]] = None,
        payload: Optional[Dict[str, Any]] = None,
        message: str = "",
    ):
        super().__init__(code, message or code, status_code, details)
        self.payload: Dict[str, Any] = payload if payload is not None else {}

    @classmethod
    def from_payload(
        cls, status_code: int, payload: Optional[Mapping[str, Any]] = None
    ) -> "ApiError":
        """Create error from a decoded API response body."""
        body = dict(payload or {})
        code = _error_code(body.get("error"))
        details = body.get("details")
        return cls(
            status_code=status_code,
            code=code,
            details=dict(details) if isinstance(details, Mapping) else None,
            payload=body,
            message=f"{code} [{status_code}]",
        )

    @property
    def error_code(self) -> str:
        return self.code

    def to_dict(self) -> Dict[str, Any]:
        result = super().to_dict()
        result["payload"] = self.payload
        return result


class NetworkError(ObsidianeAuthError):
    """Network error (connection issues, timeouts)."""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__("NETWORK_ERROR", message, 0, details)


class ConfigurationError(ObsidianeAuthError):
    """Configuration error."""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__("CONFIGURATION_ERROR", message, 0, details)


class SerializationError(ObsidianeAuthError):
    """Request body could not be encoded as JSON."""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__("SERIALIZATION_ERROR", message, 0, details)


def _error_code(value: Any) -> str:
    if value is None or isinstance(value, (dict, list)):
        return UNKNOWN_ERROR_CODE
    code = str(value)
    return code if code else UNKNOWN_ERROR_CODE


def is_obsidiane_error(error: Any) -> bool:
    """Check if error is an ObsidianeAuthError."""
    return isinstance(error, ObsidianeAuthError)


def is_api_error(error: Any, code: Optional[str] = None) -> bool:
    """Check if error is an ApiError, optionally with a specific error code."""
    if not isinstance(error, ApiError):
        return False
    return code is None or error.code == code
