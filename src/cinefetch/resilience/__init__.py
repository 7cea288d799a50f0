"""
Resilience patterns for cinefetch.

- Circuit breaker around the movies endpoint
- Bounded retry with exponential backoff
- Per-attempt timeout with cancellation
"""

from .circuit_breaker import CircuitBreaker
from .retry_policy import RetryPolicy
from .timeout_guard import TimeoutGuard

__all__ = [
    "CircuitBreaker",
    "RetryPolicy",
    "TimeoutGuard",
]
