"""cinefetch: resilient movies client with circuit breaker, retry and stale cache."""

__version__ = "0.1.0"

from .core.orchestrator import MovieFetchOrchestrator
from .core.factory import build_orchestrator
from .core import CacheEntry, MovieCache, InMemoryStore, FileStore, SystemClock
from .client import MoviesAPIClient
from .resilience import CircuitBreaker, RetryPolicy, TimeoutGuard
from .types import (
    CircuitState,
    FetchResult,
    FetchSource,
    FetchError,
    FetchErrorKind,
    FetchTimeoutError,
    HttpStatusError,
    NetworkError,
    FormatError,
    CircuitOpenError,
)

__all__ = [
    "__version__",
    "MovieFetchOrchestrator",
    "build_orchestrator",
    "CacheEntry",
    "MovieCache",
    "InMemoryStore",
    "FileStore",
    "SystemClock",
    "MoviesAPIClient",
    "CircuitBreaker",
    "RetryPolicy",
    "TimeoutGuard",
    "CircuitState",
    "FetchResult",
    "FetchSource",
    "FetchError",
    "FetchErrorKind",
    "FetchTimeoutError",
    "HttpStatusError",
    "NetworkError",
    "FormatError",
    "CircuitOpenError",
]
