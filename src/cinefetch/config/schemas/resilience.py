"""Resilience configuration schemas for cinefetch."""

from typing import Optional

from pydantic.dataclasses import dataclass
from pydantic import field_validator, model_validator

from cinefetch.types.resilience_models import CircuitBreakerConfig, RetryConfig


@dataclass
class ResilienceConfig:
    """Configuration for retry and circuit breaker behavior."""

    # Circuit breaker configuration
    failure_threshold: int = 3
    open_duration: float = 10.0

    # Retry configuration
    max_retries: int = 3
    initial_delay: float = 1.0
    backoff_multiplier: float = 2.0
    max_delay: Optional[float] = None

    @field_validator("failure_threshold")
    @classmethod
    def validate_failure_threshold(cls, v: int) -> int:
        """Validate failure_threshold is within valid range."""
        if not (1 <= v <= 100):
            raise ValueError(f"Failure threshold must be between 1 and 100, got {v}")
        return v

    @field_validator("open_duration")
    @classmethod
    def validate_open_duration(cls, v: float) -> float:
        """Validate open_duration is within valid range."""
        if not (0.1 <= v <= 3600.0):
            raise ValueError(f"Open duration must be between 0.1 and 3600.0 seconds, got {v}")
        return v

    @field_validator("max_retries")
    @classmethod
    def validate_max_retries(cls, v: int) -> int:
        """Validate max_retries is within valid range."""
        if not (0 <= v <= 10):
            raise ValueError(f"Max retries must be between 0 and 10, got {v}")
        return v

    @field_validator("initial_delay")
    @classmethod
    def validate_initial_delay(cls, v: float) -> float:
        """Validate initial_delay is within valid range."""
        if not (0.0 <= v <= 60.0):
            raise ValueError(f"Initial delay must be between 0.0 and 60.0 seconds, got {v}")
        return v

    @field_validator("backoff_multiplier")
    @classmethod
    def validate_backoff_multiplier(cls, v: float) -> float:
        if v < 1.0:
            raise ValueError(f"Backoff multiplier must be at least 1.0, got {v}")
        return v

    @model_validator(mode="after")
    def validate_max_delay(self):
        """max_delay, when set, cannot be below initial_delay."""
        if self.max_delay is not None and self.max_delay < self.initial_delay:
            raise ValueError(
                f"max_delay ({self.max_delay}) must be >= initial_delay ({self.initial_delay})"
            )
        return self

    def to_retry_config(self) -> RetryConfig:
        return RetryConfig(
            max_retries=self.max_retries,
            initial_delay=self.initial_delay,
            backoff_multiplier=self.backoff_multiplier,
            max_delay=self.max_delay,
        )

    def to_breaker_config(self) -> CircuitBreakerConfig:
        return CircuitBreakerConfig(
            failure_threshold=self.failure_threshold,
            open_duration=self.open_duration,
        )
