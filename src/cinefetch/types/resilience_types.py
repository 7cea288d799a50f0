"""
Type definitions for resilience patterns.
"""

from enum import Enum


class CircuitState(str, Enum):
    """Circuit breaker states."""

    CLOSED = "closed"      # Normal operation
    OPEN = "open"          # Failing, rejecting calls
    HALF_OPEN = "half_open"  # Probing recovery


class FetchSource(str, Enum):
    """Where the payload delivered by a fetch came from."""

    CACHE = "cache"
    NETWORK = "network"
    ERROR = "error"
