"""Error taxonomy for the fetch pipeline.

Every failure on the network path is expressed as a ``FetchError`` subclass so
the orchestrator can classify it into a user-facing message without string
matching on exception text.
"""

from __future__ import annotations

from enum import Enum
from typing import Optional


class FetchErrorKind(str, Enum):
    """Categories of fetch failures."""
    TIMEOUT = "timeout"
    HTTP_STATUS = "http_status"
    NETWORK = "network"
    FORMAT = "format"
    CIRCUIT_OPEN = "circuit_open"
    UNKNOWN = "unknown"


USER_MESSAGES = {
    FetchErrorKind.TIMEOUT: "request timed out. please try again.",
    FetchErrorKind.HTTP_STATUS: "server error. please try later.",
    FetchErrorKind.NETWORK: "network error. check your connection.",
    FetchErrorKind.FORMAT: "unable to load movies.",
    FetchErrorKind.CIRCUIT_OPEN: "service temporarily unavailable. please try again later.",
    FetchErrorKind.UNKNOWN: "unable to load movies.",
}


class FetchError(Exception):
    """Base class for failures on the fetch path."""

    kind: FetchErrorKind = FetchErrorKind.UNKNOWN

    def __init__(self, message: str, original_error: Optional[BaseException] = None):
        super().__init__(message)
        self.message = message
        self.original_error = original_error

    @property
    def user_message(self) -> str:
        """Human-readable message shown to the user."""
        return USER_MESSAGES[self.kind]

    def to_dict(self) -> dict:
        """Convert error to a JSON-serializable dictionary."""
        return {
            "kind": self.kind.value,
            "message": self.message,
            "user_message": self.user_message,
            "original_error": str(self.original_error) if self.original_error else None,
        }


class FetchTimeoutError(FetchError):
    """A single attempt exceeded its deadline and was cancelled."""

    kind = FetchErrorKind.TIMEOUT

    def __init__(self, timeout: Optional[float] = None, original_error: Optional[BaseException] = None):
        message = f"request timed out after {timeout}s" if timeout else "request timed out"
        super().__init__(message, original_error)
        self.timeout = timeout


class HttpStatusError(FetchError):
    """A response arrived with a non-2xx status."""

    kind = FetchErrorKind.HTTP_STATUS

    def __init__(self, status_code: int, response_text: Optional[str] = None):
        super().__init__(f"HTTP {status_code}")
        self.status_code = status_code
        self.response_text = response_text

    def to_dict(self) -> dict:
        data = super().to_dict()
        data["status_code"] = self.status_code
        return data


class NetworkError(FetchError):
    """Transport-level failure, no response was received."""

    kind = FetchErrorKind.NETWORK


class FormatError(FetchError):
    """Response body (or payload to cache) is not a JSON array."""

    kind = FetchErrorKind.FORMAT


class CircuitOpenError(FetchError):
    """Raised when the circuit breaker refuses an attempt."""

    kind = FetchErrorKind.CIRCUIT_OPEN

    def __init__(self, message: str = "Circuit breaker is open"):
        super().__init__(message)


def classify_error(error: BaseException) -> FetchErrorKind:
    """Map any exception to a FetchErrorKind."""
    if isinstance(error, FetchError):
        return error.kind
    return FetchErrorKind.UNKNOWN


def user_message_for(error: BaseException) -> str:
    """Return the user-facing message for an exception."""
    return USER_MESSAGES[classify_error(error)]
