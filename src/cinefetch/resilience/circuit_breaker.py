"""
Circuit breaker for the movies endpoint.

Counts consecutive failed fetch operations and refuses new attempts for a
cool-down period once the threshold is reached.
"""

from typing import Any, Dict, Optional

from loguru import logger

from cinefetch.core.clock import Clock, SystemClock
from cinefetch.types.resilience_models import CircuitBreakerConfig
from cinefetch.types.resilience_types import CircuitState


class CircuitBreaker:
    """
    Circuit breaker guarding a single remote endpoint.

    Implements three states:
    - CLOSED: Normal operation, counting failures
    - OPEN: Rejecting attempts until next_attempt_at has passed
    - HALF_OPEN: Cool-down elapsed, probing recovery

    The breaker only answers and records; callers decide what an attempt is.
    A whole retried operation should be recorded as one failure.
    """

    def __init__(
        self,
        config: Optional[CircuitBreakerConfig] = None,
        clock: Optional[Clock] = None,
    ):
        """Initialize circuit breaker with configuration."""
        self.config = config or CircuitBreakerConfig()
        self.clock = clock or SystemClock()
        self.state = CircuitState.CLOSED
        self.failure_count = 0
        self.next_attempt_at: float = self.clock.now()

    @property
    def failure_threshold(self) -> int:
        return self.config.failure_threshold

    @property
    def open_duration(self) -> float:
        return self.config.open_duration

    def can_attempt(self) -> bool:
        """Return True if a new attempt is allowed.

        An OPEN breaker whose cool-down has elapsed moves to HALF_OPEN here.
        """
        if self.state == CircuitState.OPEN:
            if self.clock.now() > self.next_attempt_at:
                self._transition_to(CircuitState.HALF_OPEN)
                return True
            return False
        return True

    def record_success(self) -> None:
        """Record a successful operation; always closes the breaker."""
        if self.state != CircuitState.CLOSED:
            logger.info(f"Circuit breaker closing after success (was {self.state.value})")
        self.failure_count = 0
        self._transition_to(CircuitState.CLOSED)

    def record_failure(self) -> None:
        """Record a failed operation and trip the breaker at the threshold."""
        self.failure_count += 1

        if self.state == CircuitState.OPEN:
            # Still cooling down, keep the original deadline
            return

        if self.failure_count >= self.config.failure_threshold:
            self.next_attempt_at = self.clock.now() + self.config.open_duration
            self._transition_to(CircuitState.OPEN)
            logger.warning(
                f"Circuit breaker opened | failures={self.failure_count} "
                f"| retry_in={self.config.open_duration:.1f}s"
            )

    def _transition_to(self, new_state: CircuitState) -> None:
        if new_state != self.state:
            logger.debug(f"Circuit breaker {self.state.value} -> {new_state.value}")
        self.state = new_state

    def get_status(self) -> Dict[str, Any]:
        """Get current circuit breaker status."""
        now = self.clock.now()
        until_retry = 0.0
        if self.state == CircuitState.OPEN:
            until_retry = max(0.0, self.next_attempt_at - now)
        return {
            "state": self.state.value,
            "failure_count": self.failure_count,
            "failure_threshold": self.config.failure_threshold,
            "next_attempt_at": self.next_attempt_at if self.state == CircuitState.OPEN else None,
            "seconds_until_retry": until_retry,
        }

    def reset(self) -> None:
        """Manually reset circuit breaker to CLOSED state."""
        self.failure_count = 0
        self._transition_to(CircuitState.CLOSED)
