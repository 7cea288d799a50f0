"""End-to-end fetch scenarios through MovieFetchOrchestrator."""

import asyncio

import httpx
import pytest

from cinefetch.core import MovieCache
from cinefetch.types import CircuitState, FetchErrorKind, FetchSource

pytestmark = pytest.mark.integration

TIMEOUT_MESSAGE = "request timed out. please try again."
SERVER_MESSAGE = "server error. please try later."
NETWORK_MESSAGE = "network error. check your connection."
FORMAT_MESSAGE = "unable to load movies."
UNAVAILABLE_MESSAGE = "service temporarily unavailable. please try again later."


async def never_responds(request):
    await asyncio.sleep(10)
    return httpx.Response(200, json=[])


class TestCacheFirst:
    """Serving from the cached snapshot."""

    @pytest.mark.asyncio
    async def test_cold_start_fetches_and_caches(
        self, make_orchestrator, handler_factory, renderer, presenter, store, clock, sample_movies
    ):
        handler = handler_factory(sample_movies)
        orchestrator = make_orchestrator(handler)

        result = await orchestrator.get_movies()
        await orchestrator.aclose()

        assert result.source == FetchSource.NETWORK
        assert result.ok
        assert result.movies == sample_movies
        assert handler.calls == 1
        assert renderer.calls == [sample_movies]
        assert presenter.messages == []
        entry = MovieCache(store).read()
        assert entry.payload == sample_movies
        assert entry.stored_at == clock.now()

    @pytest.mark.asyncio
    async def test_fresh_cache_skips_network(
        self, make_orchestrator, handler_factory, renderer, seed, clock, sample_movies
    ):
        seed(sample_movies, clock.now() - 60)
        handler = handler_factory([])
        orchestrator = make_orchestrator(handler)

        result = await orchestrator.get_movies()
        await orchestrator.aclose()

        assert result.source == FetchSource.CACHE
        assert result.stale is False
        assert result.refresh_scheduled is False
        assert handler.calls == 0
        assert renderer.calls == [sample_movies]

    @pytest.mark.asyncio
    async def test_stale_cache_renders_then_refreshes_once(
        self, make_orchestrator, handler_factory, renderer, seed, store, clock, sample_movies
    ):
        stale = [{"title": "Old"}]
        seed(stale, clock.now() - 360)
        handler = handler_factory(sample_movies)
        orchestrator = make_orchestrator(handler)

        result = await orchestrator.get_movies()

        # Delivered from cache before any network activity
        assert result.source == FetchSource.CACHE
        assert result.stale is True
        assert result.refresh_scheduled is True
        assert renderer.calls == [stale]
        assert handler.calls == 0
        assert orchestrator.refresh_in_flight

        refreshed = await orchestrator.wait_for_refresh()
        await orchestrator.aclose()

        assert refreshed.source == FetchSource.NETWORK
        assert handler.calls == 1
        assert renderer.calls == [stale, sample_movies]
        assert MovieCache(store).read().payload == sample_movies

    @pytest.mark.asyncio
    async def test_stale_cache_refresh_failure_keeps_snapshot(
        self, make_orchestrator, handler_factory, renderer, presenter, seed, store, clock
    ):
        stale = [{"title": "Old"}]
        seed(stale, clock.now() - 360)
        orchestrator = make_orchestrator(handler_factory(None, status_code=500), max_retries=0)

        await orchestrator.get_movies()
        refreshed = await orchestrator.wait_for_refresh()
        await orchestrator.aclose()

        assert refreshed.source == FetchSource.ERROR
        assert presenter.messages == [SERVER_MESSAGE]
        assert renderer.calls == [stale]
        assert MovieCache(store).read().payload == stale

    @pytest.mark.asyncio
    async def test_corrupt_cache_is_a_miss(
        self, make_orchestrator, handler_factory, store, sample_movies
    ):
        store.set("movies-cache", b"{broken")
        handler = handler_factory(sample_movies)
        orchestrator = make_orchestrator(handler)

        result = await orchestrator.get_movies()
        await orchestrator.aclose()

        assert result.source == FetchSource.NETWORK
        assert handler.calls == 1

    @pytest.mark.asyncio
    @pytest.mark.parametrize("literal", [b"NaN", b"Infinity"])
    async def test_non_finite_timestamp_is_a_miss(
        self, make_orchestrator, handler_factory, store, clock, literal, sample_movies
    ):
        store.set("movies-cache", b'{"data": [{"title": "x"}], "timestamp": ' + literal + b"}")
        handler = handler_factory(sample_movies)
        orchestrator = make_orchestrator(handler)
        clock.advance(1e9)

        result = await orchestrator.get_movies()
        await orchestrator.aclose()

        assert result.source == FetchSource.NETWORK
        assert handler.calls == 1
        assert MovieCache(store).read().stored_at == clock.now()


class TestFailures:
    """Network failures are retried, classified and recorded once."""

    @pytest.mark.asyncio
    async def test_all_attempts_time_out(
        self, make_orchestrator, handler_factory, presenter, renderer, recording_sleep
    ):
        handler = handler_factory(never_responds)
        orchestrator = make_orchestrator(handler, timeout=0.01)

        result = await orchestrator.get_movies()
        await orchestrator.aclose()

        assert result.source == FetchSource.ERROR
        assert result.error_kind == FetchErrorKind.TIMEOUT
        assert presenter.messages == [TIMEOUT_MESSAGE]
        assert handler.calls == 4
        assert recording_sleep.delays == [1.0, 2.0, 4.0]
        assert orchestrator.breaker.failure_count == 1
        assert orchestrator.breaker.state == CircuitState.CLOSED
        assert renderer.calls == []

    @pytest.mark.asyncio
    async def test_server_error(self, make_orchestrator, handler_factory, presenter):
        handler = handler_factory({"error": "boom"}, status_code=500)
        orchestrator = make_orchestrator(handler)

        result = await orchestrator.get_movies()
        await orchestrator.aclose()

        assert result.error_kind == FetchErrorKind.HTTP_STATUS
        assert result.message == SERVER_MESSAGE
        assert presenter.messages == [SERVER_MESSAGE]
        assert handler.calls == 4
        assert orchestrator.breaker.failure_count == 1

    @pytest.mark.asyncio
    async def test_network_error(self, make_orchestrator, handler_factory, presenter):
        def refuse(request):
            raise httpx.ConnectError("refused", request=request)

        orchestrator = make_orchestrator(handler_factory(refuse))

        result = await orchestrator.get_movies()
        await orchestrator.aclose()

        assert result.error_kind == FetchErrorKind.NETWORK
        assert presenter.messages == [NETWORK_MESSAGE]

    @pytest.mark.asyncio
    async def test_non_array_payload(
        self, make_orchestrator, handler_factory, presenter, store, recording_sleep
    ):
        handler = handler_factory({"movies": []})
        orchestrator = make_orchestrator(handler)

        result = await orchestrator.get_movies()
        await orchestrator.aclose()

        assert result.error_kind == FetchErrorKind.FORMAT
        assert presenter.messages == [FORMAT_MESSAGE]
        assert handler.calls == 1
        assert recording_sleep.delays == []
        assert orchestrator.breaker.failure_count == 1
        assert store.get("movies-cache") is None

    @pytest.mark.asyncio
    async def test_invalid_json(self, make_orchestrator, handler_factory, presenter):
        handler = handler_factory(lambda request: httpx.Response(200, content=b"<html>"))
        orchestrator = make_orchestrator(handler)

        result = await orchestrator.get_movies()
        await orchestrator.aclose()

        assert result.error_kind == FetchErrorKind.FORMAT
        assert presenter.messages == [FORMAT_MESSAGE]

    @pytest.mark.asyncio
    async def test_recovers_within_retries(
        self, make_orchestrator, handler_factory, presenter, sample_movies
    ):
        responses = [httpx.Response(503), httpx.Response(200, json=sample_movies)]
        handler = handler_factory(lambda request: responses.pop(0))
        orchestrator = make_orchestrator(handler)

        result = await orchestrator.get_movies()
        await orchestrator.aclose()

        assert result.source == FetchSource.NETWORK
        assert handler.calls == 2
        assert presenter.messages == []
        assert orchestrator.breaker.failure_count == 0


class TestCircuitBreaking:
    """Breaker gating of network refreshes."""

    @pytest.mark.asyncio
    async def test_open_breaker_without_cache(self, make_orchestrator, handler_factory, presenter):
        handler = handler_factory([])
        orchestrator = make_orchestrator(handler)
        for _ in range(3):
            orchestrator.breaker.record_failure()

        result = await orchestrator.get_movies()
        await orchestrator.aclose()

        assert result.error_kind == FetchErrorKind.CIRCUIT_OPEN
        assert presenter.messages == [UNAVAILABLE_MESSAGE]
        assert handler.calls == 0
        assert orchestrator.breaker.failure_count == 3

    @pytest.mark.asyncio
    async def test_repeated_failures_open_breaker(
        self, make_orchestrator, handler_factory, presenter
    ):
        handler = handler_factory(None, status_code=500)
        orchestrator = make_orchestrator(handler, max_retries=0)

        for _ in range(3):
            await orchestrator.get_movies()
        assert orchestrator.breaker.state == CircuitState.OPEN
        assert handler.calls == 3

        result = await orchestrator.get_movies()
        await orchestrator.aclose()

        assert result.error_kind == FetchErrorKind.CIRCUIT_OPEN
        assert handler.calls == 3
        assert presenter.messages[-1] == UNAVAILABLE_MESSAGE

    @pytest.mark.asyncio
    async def test_half_open_probe_closes_on_success(
        self, make_orchestrator, handler_factory, clock, sample_movies
    ):
        handler = handler_factory(sample_movies)
        orchestrator = make_orchestrator(handler)
        for _ in range(3):
            orchestrator.breaker.record_failure()

        clock.advance(10.5)
        result = await orchestrator.get_movies()
        await orchestrator.aclose()

        assert result.source == FetchSource.NETWORK
        assert orchestrator.breaker.state == CircuitState.CLOSED
        assert orchestrator.breaker.failure_count == 0

    @pytest.mark.asyncio
    async def test_half_open_probe_failure_reopens(
        self, make_orchestrator, handler_factory, clock
    ):
        handler = handler_factory(None, status_code=502)
        orchestrator = make_orchestrator(handler, max_retries=0)
        for _ in range(3):
            orchestrator.breaker.record_failure()

        clock.advance(10.5)
        await orchestrator.get_movies()
        await orchestrator.aclose()

        assert handler.calls == 1
        assert orchestrator.breaker.state == CircuitState.OPEN
        assert orchestrator.breaker.next_attempt_at == clock.now() + 10.0


class TestRefreshCoordination:
    """Single-flight refresh and the retry trigger."""

    @pytest.mark.asyncio
    async def test_concurrent_misses_share_one_request(
        self, make_orchestrator, handler_factory, renderer, sample_movies
    ):
        async def slow(request):
            await asyncio.sleep(0.01)
            return httpx.Response(200, json=sample_movies)

        handler = handler_factory(slow)
        orchestrator = make_orchestrator(handler)

        first, second = await asyncio.gather(orchestrator.get_movies(), orchestrator.get_movies())
        await orchestrator.aclose()

        assert handler.calls == 1
        assert first.source == second.source == FetchSource.NETWORK
        assert len(renderer.calls) == 1

    @pytest.mark.asyncio
    async def test_stale_reads_do_not_stack_refreshes(
        self, make_orchestrator, handler_factory, seed, clock, sample_movies
    ):
        seed(sample_movies, clock.now() - 1000)
        handler = handler_factory(sample_movies)
        orchestrator = make_orchestrator(handler)

        await orchestrator.get_movies()
        await orchestrator.get_movies()
        await orchestrator.wait_for_refresh()
        await orchestrator.aclose()

        assert handler.calls == 1

    @pytest.mark.asyncio
    async def test_retry_trigger_runs_get_movies_again(
        self, make_orchestrator, handler_factory, presenter, renderer, sample_movies
    ):
        state = {"up": False}

        def flaky(request):
            if state["up"]:
                return httpx.Response(200, json=sample_movies)
            return httpx.Response(500)

        handler = handler_factory(flaky)
        orchestrator = make_orchestrator(handler, max_retries=0)

        failed = await orchestrator.get_movies()
        assert failed.source == FetchSource.ERROR
        assert len(presenter.retries) == 1

        state["up"] = True
        retried = await presenter.retries[0]()
        await orchestrator.aclose()

        assert retried.source == FetchSource.NETWORK
        assert renderer.calls == [sample_movies]
        assert handler.calls == 2

    @pytest.mark.asyncio
    async def test_status_report(self, make_orchestrator, handler_factory, sample_movies):
        orchestrator = make_orchestrator(handler_factory(sample_movies))
        await orchestrator.get_movies()
        status = orchestrator.get_status()
        await orchestrator.aclose()

        assert status["breaker"]["state"] == "closed"
        assert status["cache"] == {"present": True, "count": 2, "age": 0.0, "stale": False}
        assert status["refresh_in_flight"] is False

    @pytest.mark.asyncio
    async def test_context_manager_waits_for_refresh(
        self, make_orchestrator, handler_factory, seed, clock, sample_movies
    ):
        seed(sample_movies, clock.now() - 1000)
        handler = handler_factory(sample_movies)

        async with make_orchestrator(handler) as orchestrator:
            await orchestrator.get_movies()

        assert handler.calls == 1
        assert not orchestrator.refresh_in_flight
