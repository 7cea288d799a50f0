"""Pytest configuration and helpers for cinefetch tests."""

from __future__ import annotations

import asyncio
import json
import sys
from typing import Any, Callable, List, Optional

import httpx
import pytest
from loguru import logger

from cinefetch.core.cache import MovieCache
from cinefetch.core.orchestrator import MovieFetchOrchestrator
from cinefetch.core.storage import InMemoryStore
from cinefetch.client.http_client import MoviesAPIClient
from cinefetch.resilience import CircuitBreaker, RetryPolicy, TimeoutGuard
from cinefetch.types import CircuitBreakerConfig, RetryConfig

API_URL = "https://movies.test/api-movies"

SAMPLE_MOVIES = [
    {
        "id": 1,
        "title": "The Matrix",
        "description": "A hacker learns the truth.",
        "year": 1999,
        "image_url": "https://images.test/matrix.jpg",
        "genre": "Sci-Fi",
        "stars": 5,
    },
    {
        "id": 2,
        "title": "Amélie",
        "description": "A shy waitress in Paris.",
        "year": 2001,
        "image_url": "https://images.test/amelie.jpg",
        "genre": "Comedy",
        "stars": 4,
    },
]


class ManualClock:
    """Clock that only moves when told to."""

    def __init__(self, start: float = 1_700_000_000.0):
        self.current = start

    def now(self) -> float:
        return self.current

    def advance(self, seconds: float) -> None:
        self.current += seconds


class RecordingSleep:
    """Stands in for asyncio.sleep; records delays and yields once."""

    def __init__(self) -> None:
        self.delays: List[float] = []

    async def __call__(self, delay: float) -> None:
        self.delays.append(delay)
        await asyncio.sleep(0)


class RecordingRenderer:
    def __init__(self) -> None:
        self.calls: List[List[Any]] = []

    def render(self, movies) -> None:
        self.calls.append(list(movies))


class RecordingPresenter:
    def __init__(self) -> None:
        self.messages: List[str] = []
        self.retries: List[Callable] = []

    def show_error(self, message: str, retry) -> None:
        self.messages.append(message)
        self.retries.append(retry)


class CountingHandler:
    """httpx.MockTransport handler that counts requests.

    ``respond`` is a callable (request -> Response) or an async one.
    """

    def __init__(self, respond: Callable):
        self.respond = respond
        self.calls = 0

    async def __call__(self, request: httpx.Request) -> httpx.Response:
        self.calls += 1
        result = self.respond(request)
        if asyncio.iscoroutine(result):
            result = await result
        return result


def json_response(payload: Any, status_code: int = 200) -> Callable:
    return lambda request: httpx.Response(status_code, json=payload)


def seed_cache(store: InMemoryStore, payload: Any, timestamp: float, key: str = "movies-cache") -> None:
    store.set(key, json.dumps({"data": payload, "timestamp": timestamp}).encode())


@pytest.fixture
def clock() -> ManualClock:
    return ManualClock()


@pytest.fixture
def recording_sleep() -> RecordingSleep:
    return RecordingSleep()


@pytest.fixture
def store() -> InMemoryStore:
    return InMemoryStore()


@pytest.fixture
def renderer() -> RecordingRenderer:
    return RecordingRenderer()


@pytest.fixture
def presenter() -> RecordingPresenter:
    return RecordingPresenter()


@pytest.fixture
def make_orchestrator(clock, recording_sleep, store, renderer, presenter):
    """Factory building an orchestrator around a CountingHandler."""

    def _make(
        handler: CountingHandler,
        timeout: float = 8.0,
        max_retries: int = 3,
        failure_threshold: int = 3,
        open_duration: float = 10.0,
        cache_ttl: float = 300.0,
        breaker: Optional[CircuitBreaker] = None,
    ) -> MovieFetchOrchestrator:
        return MovieFetchOrchestrator(
            client=MoviesAPIClient(API_URL, transport=httpx.MockTransport(handler)),
            cache=MovieCache(store),
            renderer=renderer,
            error_presenter=presenter,
            breaker=breaker or CircuitBreaker(
                CircuitBreakerConfig(failure_threshold=failure_threshold, open_duration=open_duration),
                clock=clock,
            ),
            retry_policy=RetryPolicy(
                RetryConfig(max_retries=max_retries, initial_delay=1.0),
                sleep=recording_sleep,
            ),
            timeout_guard=TimeoutGuard(timeout),
            clock=clock,
            cache_ttl=cache_ttl,
        )

    return _make


@pytest.fixture
def clean_loguru():
    """Remove loguru sinks for the test and restore a stderr sink afterwards."""
    logger.remove()
    yield
    logger.remove()
    logger.add(sys.stderr, level="WARNING")


@pytest.fixture(autouse=True)
def restore_loguru():
    """CLI runs reconfigure loguru against captured streams; undo that."""
    yield
    logger.remove()
    logger.add(sys.stderr, level="WARNING")


@pytest.fixture
def sample_movies() -> List[dict]:
    return [dict(movie) for movie in SAMPLE_MOVIES]


@pytest.fixture
def handler_factory():
    """Build a CountingHandler from a callable, a status code or a JSON payload."""

    def _factory(respond: Any = None, status_code: int = 200) -> CountingHandler:
        if callable(respond):
            return CountingHandler(respond)
        return CountingHandler(json_response(respond, status_code))

    return _factory


@pytest.fixture
def seed(store):
    """Write a cache entry straight into the store."""

    def _seed(payload: Any, timestamp: float, key: str = "movies-cache") -> None:
        seed_cache(store, payload, timestamp, key)

    return _seed
