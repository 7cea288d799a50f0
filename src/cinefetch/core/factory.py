"""Build a ready-to-use orchestrator from configuration."""

from typing import Optional

import httpx
from loguru import logger

from cinefetch.client.http_client import MoviesAPIClient
from cinefetch.config.schemas.root import CineFetchConfig
from cinefetch.config.schemas.storage import StorageConfig
from cinefetch.core.cache import MovieCache
from cinefetch.core.clock import Clock, SystemClock
from cinefetch.core.orchestrator import MovieFetchOrchestrator
from cinefetch.core.storage import FileStore, InMemoryStore, KeyValueStore
from cinefetch.presentation.base import ErrorPresenter, Renderer
from cinefetch.resilience.circuit_breaker import CircuitBreaker
from cinefetch.resilience.retry_policy import RetryPolicy, Sleep
from cinefetch.resilience.timeout_guard import TimeoutGuard


def create_store(config: StorageConfig) -> KeyValueStore:
    """Instantiate the configured key-value store."""
    if config.backend == "file":
        return FileStore(config.path)
    return InMemoryStore()


def build_orchestrator(
    config: CineFetchConfig,
    renderer: Renderer,
    error_presenter: ErrorPresenter,
    store: Optional[KeyValueStore] = None,
    clock: Optional[Clock] = None,
    transport: Optional[httpx.AsyncBaseTransport] = None,
    sleep: Optional[Sleep] = None,
) -> MovieFetchOrchestrator:
    """Wire client, cache, breaker, retry policy and timeout guard.

    Args:
        config: Validated configuration
        renderer: Receives movie arrays
        error_presenter: Receives user-facing failures
        store: Overrides the configured storage backend
        clock: Overrides the system clock
        transport: httpx transport for the API client
        sleep: Overrides asyncio.sleep for backoff waits
    """
    clock = clock or SystemClock()
    store = store if store is not None else create_store(config.storage)

    orchestrator = MovieFetchOrchestrator(
        client=MoviesAPIClient(config.fetch.api_url, transport=transport),
        cache=MovieCache(store, key=config.fetch.cache_key),
        renderer=renderer,
        error_presenter=error_presenter,
        breaker=CircuitBreaker(config.resilience.to_breaker_config(), clock=clock),
        retry_policy=RetryPolicy(config.resilience.to_retry_config(), sleep=sleep),
        timeout_guard=TimeoutGuard(config.fetch.request_timeout),
        clock=clock,
        cache_ttl=config.fetch.cache_ttl,
    )
    logger.debug(
        f"Built orchestrator | url={config.fetch.api_url} | storage={config.storage.backend}"
    )
    return orchestrator
