"""Type definitions and enumerations for cinefetch."""

from .resilience_types import CircuitState, FetchSource
from .resilience_models import RetryConfig, CircuitBreakerConfig, RetryContext
from .error_types import (
    FetchErrorKind,
    FetchError,
    FetchTimeoutError,
    HttpStatusError,
    NetworkError,
    FormatError,
    CircuitOpenError,
    USER_MESSAGES,
    classify_error,
    user_message_for,
)
from .fetch_result import FetchResult

__all__ = [
    "CircuitState",
    "FetchSource",
    "RetryConfig",
    "CircuitBreakerConfig",
    "RetryContext",
    "FetchErrorKind",
    "FetchError",
    "FetchTimeoutError",
    "HttpStatusError",
    "NetworkError",
    "FormatError",
    "CircuitOpenError",
    "USER_MESSAGES",
    "classify_error",
    "user_message_for",
    "FetchResult",
]
