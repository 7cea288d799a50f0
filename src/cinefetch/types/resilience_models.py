"""
Pydantic models for resilience patterns.
"""

from typing import Optional

from pydantic import BaseModel, Field


class RetryConfig(BaseModel):
    """Configuration for retry behavior."""

    max_retries: int = Field(default=3, ge=0, le=10)
    initial_delay: float = Field(default=1.0, ge=0.0)
    backoff_multiplier: float = Field(default=2.0, ge=1.0)
    # None keeps the delay growing without bound
    max_delay: Optional[float] = Field(default=None, gt=0.0)


class CircuitBreakerConfig(BaseModel):
    """Configuration for circuit breaker behavior."""

    failure_threshold: int = Field(default=3, ge=1)
    open_duration: float = Field(default=10.0, gt=0.0)


class RetryContext(BaseModel):
    """Mutable bookkeeping for a single execute_with_retry call."""

    attempts_remaining: int = Field(ge=0)
    current_delay: float = Field(ge=0.0)
    attempt: int = Field(default=0, ge=0)

    def advance(self, multiplier: float, max_delay: Optional[float] = None) -> None:
        """Consume one retry and grow the delay for the next one."""
        self.attempts_remaining -= 1
        self.attempt += 1
        next_delay = self.current_delay * multiplier
        if max_delay is not None:
            next_delay = min(next_delay, max_delay)
        self.current_delay = next_delay
