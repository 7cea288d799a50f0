"""
Bounded retry with exponential backoff for single network operations.
"""

import asyncio
from typing import Any, Awaitable, Callable, Optional

from loguru import logger

from cinefetch.types.error_types import CircuitOpenError
from cinefetch.types.resilience_models import RetryConfig, RetryContext

Sleep = Callable[[float], Awaitable[Any]]


class RetryPolicy:
    """
    Retries an async operation with exponential backoff and no jitter.

    With ``max_retries=3`` and ``initial_delay=1.0`` an always-failing
    operation runs four times with 1s, 2s and 4s pauses in between, then the
    last exception is re-raised as is.
    """

    def __init__(self, config: Optional[RetryConfig] = None, sleep: Optional[Sleep] = None):
        """Initialize retry policy with configuration.

        Args:
            config: Retry configuration
            sleep: Awaitable sleep used between attempts (asyncio.sleep by default)
        """
        self.config = config or RetryConfig()
        self._sleep = sleep or asyncio.sleep

    def new_context(
        self,
        max_retries: Optional[int] = None,
        initial_delay: Optional[float] = None,
    ) -> RetryContext:
        """Create the bookkeeping for one execute_with_retry call."""
        return RetryContext(
            attempts_remaining=self.config.max_retries if max_retries is None else max_retries,
            current_delay=self.config.initial_delay if initial_delay is None else initial_delay,
        )

    async def execute_with_retry(
        self,
        operation: Callable[[], Awaitable[Any]],
        max_retries: Optional[int] = None,
        initial_delay: Optional[float] = None,
    ) -> Any:
        """
        Execute operation, retrying on failure.

        Args:
            operation: Zero-argument coroutine function
            max_retries: Retries after the first attempt (config default if None)
            initial_delay: Seconds to wait before the first retry (config default if None)

        Returns:
            Result of the first successful attempt

        Raises:
            Exception: The last failure once retries are exhausted
        """
        context = self.new_context(max_retries, initial_delay)

        while True:
            try:
                return await operation()
            except (CircuitOpenError, asyncio.CancelledError):
                raise
            except Exception as e:
                if context.attempts_remaining == 0:
                    logger.debug(f"Retries exhausted after {context.attempt + 1} attempts: {e}")
                    raise

                logger.warning(
                    f"retry... attempts remaining: {context.attempts_remaining} "
                    f"| delay={context.current_delay:.2f}s | error={e}"
                )
                await self._sleep(context.current_delay)
                context.advance(self.config.backoff_multiplier, self.config.max_delay)
