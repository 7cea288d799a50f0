"""Per-attempt deadline with cancellation of the in-flight call."""

import asyncio
from typing import Any, Awaitable, Callable

from loguru import logger

from cinefetch.types.error_types import FetchTimeoutError


class TimeoutGuard:
    """Bound one attempt's duration.

    The attempt runs as a task raced against the deadline. When the deadline
    wins the task is cancelled, so the coroutine (and the HTTP request inside
    it) is torn down rather than left running, and FetchTimeoutError is raised.
    Each call gets a fresh deadline.
    """

    def __init__(self, timeout: float = 8.0):
        if timeout <= 0:
            raise ValueError(f"Timeout must be positive, got {timeout}")
        self.timeout = timeout

    async def run(self, operation: Callable[[], Awaitable[Any]]) -> Any:
        """Run operation under the deadline."""
        try:
            return await asyncio.wait_for(operation(), timeout=self.timeout)
        except asyncio.TimeoutError as e:
            logger.warning(f"Attempt cancelled after {self.timeout}s deadline")
            raise FetchTimeoutError(self.timeout, original_error=e) from e

    def wrap(self, operation: Callable[[], Awaitable[Any]]) -> Callable[[], Awaitable[Any]]:
        """Return a zero-argument callable that runs operation under the guard."""

        async def guarded() -> Any:
            return await self.run(operation)

        return guarded
