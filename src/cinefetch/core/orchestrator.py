"""
Fetch orchestration: cache first, then breaker, retry and timeout.

``get_movies()`` is the single public entry point. It always serves the cached
snapshot when one exists and only goes to the network when the snapshot is
stale or missing.
"""

from __future__ import annotations

import asyncio
from typing import Any, Dict, List, Optional
from uuid import uuid4

from loguru import logger

from cinefetch.client.http_client import MoviesAPIClient
from cinefetch.core.cache import MovieCache
from cinefetch.core.clock import Clock, SystemClock
from cinefetch.logging_config import fetch_context_manager
from cinefetch.presentation.base import ErrorPresenter, Renderer
from cinefetch.resilience.circuit_breaker import CircuitBreaker
from cinefetch.resilience.retry_policy import RetryPolicy
from cinefetch.resilience.timeout_guard import TimeoutGuard
from cinefetch.types.error_types import (
    CircuitOpenError,
    FormatError,
    classify_error,
    user_message_for,
)
from cinefetch.types.fetch_result import FetchResult
from cinefetch.types.resilience_types import FetchSource


class MovieFetchOrchestrator:
    """
    Composes cache, circuit breaker, retry policy and timeout guard.

    Flow of ``get_movies()``:
    1. Cached snapshot present -> render it immediately.
    2. Snapshot stale -> refresh in the background; missing -> refresh and wait.
    3. Refresh is gated by the breaker; a refused attempt is presented as
       "service unavailable" and is not recorded as a failure.
    4. The network call runs under RetryPolicy(TimeoutGuard(fetch)).
    5. A JSON array is cached, recorded as a success and rendered.
    6. Anything else is recorded as ONE breaker failure and presented with a
       retry trigger.

    Only one refresh runs at a time; callers that need a refresh while one is
    in flight join it.
    """

    def __init__(
        self,
        client: MoviesAPIClient,
        cache: MovieCache,
        renderer: Renderer,
        error_presenter: ErrorPresenter,
        breaker: Optional[CircuitBreaker] = None,
        retry_policy: Optional[RetryPolicy] = None,
        timeout_guard: Optional[TimeoutGuard] = None,
        clock: Optional[Clock] = None,
        cache_ttl: float = 300.0,
        max_retries: Optional[int] = None,
        initial_delay: Optional[float] = None,
    ):
        self.client = client
        self.cache = cache
        self.renderer = renderer
        self.error_presenter = error_presenter
        self.clock = clock or SystemClock()
        self.breaker = breaker or CircuitBreaker(clock=self.clock)
        self.retry_policy = retry_policy or RetryPolicy()
        self.timeout_guard = timeout_guard or TimeoutGuard()
        self.cache_ttl = cache_ttl
        self.max_retries = max_retries
        self.initial_delay = initial_delay

        self._refresh_task: Optional[asyncio.Task] = None

    async def get_movies(self) -> FetchResult:
        """Deliver movies to the renderer (or an error to the presenter)."""
        with fetch_context_manager(uuid4().hex[:8]):
            entry = self.cache.read()

            if entry is not None:
                stale = entry.is_stale(self.clock.now(), self.cache_ttl)
                logger.debug(
                    f"Serving {len(entry.payload)} cached movies "
                    f"(age={entry.age(self.clock.now()):.1f}s, stale={stale})"
                )
                self.renderer.render(entry.payload)
                if stale:
                    self._start_refresh()
                return FetchResult(
                    source=FetchSource.CACHE,
                    movies=entry.payload,
                    stale=stale,
                    refresh_scheduled=stale,
                )

            logger.debug("Cache miss, fetching from network")
            return await asyncio.shield(self._start_refresh())

    @property
    def refresh_in_flight(self) -> bool:
        return self._refresh_task is not None and not self._refresh_task.done()

    def _start_refresh(self) -> asyncio.Task:
        if self.refresh_in_flight:
            logger.debug("Joining in-flight refresh")
            return self._refresh_task

        self._refresh_task = asyncio.create_task(self.refresh())
        self._refresh_task.add_done_callback(self._on_refresh_done)
        return self._refresh_task

    @staticmethod
    def _on_refresh_done(task: asyncio.Task) -> None:
        if task.cancelled():
            logger.debug("Refresh cancelled")
            return
        error = task.exception()
        if error is not None:
            logger.opt(exception=error).error(f"Refresh crashed: {error}")

    async def refresh(self) -> FetchResult:
        """Fetch from the network and deliver the outcome.

        Prefer ``get_movies()``; this bypasses the cache read and the
        single-flight guard.
        """
        if not self.breaker.can_attempt():
            logger.warning("Circuit breaker open, skipping network fetch")
            return self._present_error(CircuitOpenError())

        try:
            response = await self.retry_policy.execute_with_retry(
                self.timeout_guard.wrap(self.client.fetch),
                max_retries=self.max_retries,
                initial_delay=self.initial_delay,
            )
            movies = self.client.decode(response)
            if not isinstance(movies, list):
                raise FormatError(
                    f"invalid api response format: expected array, got {type(movies).__name__}"
                )
            self.cache.write(movies, self.clock.now())
        except Exception as e:
            self.breaker.record_failure()
            logger.error(f"error fetching movies: {e!r}")
            return self._present_error(e)

        self.breaker.record_success()
        logger.info(f"Fetched {len(movies)} movies")
        self.renderer.render(movies)
        return FetchResult(source=FetchSource.NETWORK, movies=movies)

    def _present_error(self, error: BaseException) -> FetchResult:
        message = user_message_for(error)
        self.error_presenter.show_error(message, self.get_movies)
        return FetchResult(
            source=FetchSource.ERROR,
            error_kind=classify_error(error),
            message=message,
        )

    async def wait_for_refresh(self) -> Optional[FetchResult]:
        """Wait for the background refresh, if any, and return its result."""
        task = self._refresh_task
        if task is None:
            return None
        return await task

    def get_status(self) -> Dict[str, Any]:
        entry = self.cache.read()
        cache_status: Dict[str, Any] = {"present": entry is not None}
        if entry is not None:
            now = self.clock.now()
            cache_status.update(
                count=len(entry.payload),
                age=entry.age(now),
                stale=entry.is_stale(now, self.cache_ttl),
            )
        return {
            "breaker": self.breaker.get_status(),
            "cache": cache_status,
            "refresh_in_flight": self.refresh_in_flight,
        }

    async def aclose(self) -> None:
        """Let any refresh finish, then release the HTTP client."""
        if self.refresh_in_flight:
            await self.wait_for_refresh()
        await self.client.close()

    async def __aenter__(self) -> MovieFetchOrchestrator:
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.aclose()
