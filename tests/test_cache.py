"""Tests for the content cache layer."""

import asyncio

import pytest

from heritage_content.errors import ResolutionTimeoutError
from heritage_content.services.cache import CacheLayer, ResourceKind, make_cache_key


class FakeClock:
    def __init__(self):
        self.now = 1000.0

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float):
        self.now += seconds


class CountingResolver:
    """Resolver returning a fixed value, counting its calls."""

    def __init__(self, value="value", gate: asyncio.Event | None = None, error: Exception | None = None):
        self.value = value
        self.gate = gate
        self.error = error
        self.calls = 0

    async def __call__(self):
        self.calls += 1
        if self.gate is not None:
            await self.gate.wait()
        if self.error is not None:
            raise self.error
        return self.value


def make_cache(clock=None, **kwargs) -> CacheLayer:
    options = dict(
        stale_times={"cities": 300, "heritage_images": 1800},
        timeout=1.0,
        max_retries=0,
        retry_backoff=0.0,
        clock=clock or FakeClock(),
    )
    options.update(kwargs)
    return CacheLayer(**options)


CITIES_EN = make_cache_key(ResourceKind.CITIES, {}, "en")


# ============== Keys ==============


def test_cache_key_ignores_filter_order_and_empty_values():
    """Equal filter sets give equal keys."""
    a = make_cache_key("cities", {"state": "Maharashtra", "region": "West", "search": None}, "en")
    b = make_cache_key("cities", {"region": "West", "state": "Maharashtra", "search": ""}, "en")
    assert a == b
    assert a == "cities:en:region=West&state=Maharashtra"


def test_cache_key_varies_by_language():
    assert make_cache_key("cities", {}, "en") != make_cache_key("cities", {}, "hi")


def test_cache_key_encodes_separators_in_values():
    key = make_cache_key("cities", {"search": "a&state=b"}, "en")
    assert "state=b" not in key


def test_cache_key_rejects_unknown_kind():
    with pytest.raises(ValueError):
        make_cache_key("unknown", {}, "en")


# ============== Staleness ==============


@pytest.mark.asyncio
async def test_hit_within_stale_window():
    """Requests inside the stale window do not re-resolve."""
    clock = FakeClock()
    cache = make_cache(clock)
    resolver = CountingResolver()

    assert await cache.get(CITIES_EN, resolver) == "value"
    clock.advance(299)
    assert await cache.get(CITIES_EN, resolver) == "value"

    assert resolver.calls == 1


@pytest.mark.asyncio
async def test_expired_entry_resolves_once_more():
    clock = FakeClock()
    cache = make_cache(clock)
    resolver = CountingResolver()

    await cache.get(CITIES_EN, resolver)
    clock.advance(300)
    await cache.get(CITIES_EN, resolver)
    await cache.get(CITIES_EN, resolver)

    assert resolver.calls == 2


@pytest.mark.asyncio
async def test_stale_time_depends_on_resource_kind():
    clock = FakeClock()
    cache = make_cache(clock)
    images_key = make_cache_key(ResourceKind.HERITAGE_IMAGES, {"heritage_id": "h1"}, "en")
    resolver = CountingResolver()

    await cache.get(images_key, resolver)
    clock.advance(1000)
    await cache.get(images_key, resolver)

    assert resolver.calls == 1
    assert cache.stale_time_for(images_key) == 1800


# ============== Coalescing ==============


@pytest.mark.asyncio
async def test_concurrent_requests_share_one_resolution():
    cache = make_cache()
    gate = asyncio.Event()
    resolver = CountingResolver(gate=gate)

    waiters = [asyncio.ensure_future(cache.get(CITIES_EN, resolver)) for _ in range(5)]
    await asyncio.sleep(0)
    assert cache.is_in_flight(CITIES_EN)

    gate.set()
    results = await asyncio.gather(*waiters)

    assert results == ["value"] * 5
    assert resolver.calls == 1
    assert not cache.is_in_flight(CITIES_EN)


@pytest.mark.asyncio
async def test_failure_reaches_all_waiters_and_is_not_cached():
    cache = make_cache()
    gate = asyncio.Event()
    failing = CountingResolver(gate=gate, error=RuntimeError("database down"))

    waiters = [asyncio.ensure_future(cache.get(CITIES_EN, failing)) for _ in range(3)]
    await asyncio.sleep(0)
    gate.set()
    results = await asyncio.gather(*waiters, return_exceptions=True)

    assert all(isinstance(r, RuntimeError) for r in results)
    assert failing.calls == 1
    assert cache.peek(CITIES_EN) is None
    assert not cache.is_in_flight(CITIES_EN)

    # The next request starts a fresh resolution
    assert await cache.get(CITIES_EN, CountingResolver("recovered")) == "recovered"


@pytest.mark.asyncio
async def test_failed_refresh_drops_stale_value():
    clock = FakeClock()
    cache = make_cache(clock)
    await cache.get(CITIES_EN, CountingResolver("old"))

    clock.advance(301)
    with pytest.raises(RuntimeError):
        await cache.get(CITIES_EN, CountingResolver(error=RuntimeError("boom")))

    assert cache.peek(CITIES_EN) is None


@pytest.mark.asyncio
async def test_cancelled_waiter_does_not_cancel_shared_resolution():
    cache = make_cache()
    gate = asyncio.Event()
    resolver = CountingResolver(gate=gate)

    first = asyncio.ensure_future(cache.get(CITIES_EN, resolver))
    second = asyncio.ensure_future(cache.get(CITIES_EN, resolver))
    await asyncio.sleep(0)

    first.cancel()
    await asyncio.sleep(0)
    gate.set()

    assert await second == "value"
    assert first.cancelled()
    assert resolver.calls == 1
    assert cache.peek(CITIES_EN).value == "value"


# ============== Timeouts ==============


@pytest.mark.asyncio
async def test_timeout_is_retried_then_raised():
    cache = make_cache(timeout=0.05, max_retries=2)
    calls = 0

    async def slow():
        nonlocal calls
        calls += 1
        await asyncio.sleep(1)

    with pytest.raises(ResolutionTimeoutError) as exc_info:
        await cache.get(CITIES_EN, slow)

    assert calls == 3
    assert exc_info.value.code == "RESOLUTION_TIMEOUT"
    assert exc_info.value.status_code == 504
    assert cache.peek(CITIES_EN) is None


@pytest.mark.asyncio
async def test_retry_after_timeout_can_succeed():
    cache = make_cache(timeout=0.05, max_retries=1)
    calls = 0

    async def flaky():
        nonlocal calls
        calls += 1
        if calls == 1:
            await asyncio.sleep(1)
        return "late"

    assert await cache.get(CITIES_EN, flaky) == "late"
    assert calls == 2


def test_timeout_override_per_kind():
    cache = make_cache(timeout=10.0, timeout_overrides={"cities": 2.0})
    assert cache.timeout_for(CITIES_EN) == 2.0
    assert cache.timeout_for(make_cache_key("languages", {}, "*")) == 10.0


# ============== Isolation & invalidation ==============


@pytest.mark.asyncio
async def test_languages_are_cached_separately():
    cache = make_cache()
    english = CountingResolver("Mumbai")
    hindi = CountingResolver("मुंबई")

    assert await cache.get(make_cache_key("cities", {}, "en"), english) == "Mumbai"
    assert await cache.get(make_cache_key("cities", {}, "hi"), hindi) == "मुंबई"
    assert await cache.get(make_cache_key("cities", {}, "en"), english) == "Mumbai"

    assert english.calls == 1
    assert hindi.calls == 1


@pytest.mark.asyncio
async def test_invalidate_by_prefix():
    cache = make_cache()
    events = []
    unsubscribe = cache.subscribe(lambda event, key: events.append((event, key)))

    images_key = make_cache_key("heritage_images", {"heritage_id": "h1"}, "en")
    await cache.get(CITIES_EN, CountingResolver())
    await cache.get(images_key, CountingResolver())

    assert cache.invalidate("cities") == 1
    assert cache.peek(CITIES_EN) is None
    assert cache.peek(images_key) is not None
    assert ("invalidated", CITIES_EN) in events

    unsubscribe()
    cache.invalidate()
    assert len(cache) == 0
    assert ("invalidated", images_key) not in events


@pytest.mark.asyncio
async def test_invalidated_resolution_does_not_repopulate():
    cache = make_cache()
    gate = asyncio.Event()
    old = CountingResolver("old", gate=gate)

    pending = asyncio.ensure_future(cache.get(CITIES_EN, old))
    await asyncio.sleep(0)
    cache.invalidate("cities")
    gate.set()

    # The superseded resolution still answers its waiter
    assert await pending == "old"
    assert cache.peek(CITIES_EN) is None

    fresh = CountingResolver("new")
    assert await cache.get(CITIES_EN, fresh) == "new"
    assert fresh.calls == 1


@pytest.mark.asyncio
async def test_failing_listener_does_not_break_cache():
    cache = make_cache()

    def broken(event, key):
        raise RuntimeError("listener failed")

    cache.subscribe(broken)
    assert await cache.get(CITIES_EN, CountingResolver()) == "value"
