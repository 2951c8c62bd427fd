"""In-process cache with per-kind staleness and request coalescing."""

import asyncio
import enum
import logging
import time
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Mapping, Optional
from urllib.parse import urlencode

from heritage_content.config import Settings, get_settings
from heritage_content.errors import ResolutionTimeoutError

logger = logging.getLogger(__name__)


class ResourceKind(str, enum.Enum):
    """Cacheable resource kinds. Values prefix every cache key."""

    CITIES = "cities"
    CITY_HERITAGE = "city_heritage"
    HERITAGE_DETAIL = "heritage_detail"
    HERITAGE_IMAGES = "heritage_images"
    LANGUAGES = "languages"


# Language slot for resources that do not vary by language
ANY_LANGUAGE = "*"


def make_cache_key(
    resource_kind: ResourceKind | str,
    filters: Optional[Mapping[str, Any]] = None,
    language_code: str = ANY_LANGUAGE,
) -> str:
    """
    Build the cache key of a request.

    Filters with a None or empty value are dropped and the rest sorted by
    name, so equal filter sets give equal keys whatever their order. Values
    are URL-encoded so no filter value can forge a separator.
    """
    kind = ResourceKind(resource_kind).value
    normalized = sorted(
        (str(name), str(value))
        for name, value in (filters or {}).items()
        if value is not None and value != ""
    )
    return f"{kind}:{language_code}:{urlencode(normalized)}"


@dataclass
class CacheEntry:
    """A stored resolution result."""

    value: Any
    fetched_at: float
    stale_time: float

    def is_fresh(self, now: float) -> bool:
        return now - self.fetched_at < self.stale_time


Listener = Callable[[str, str], None]


class CacheLayer:
    """
    Cache of resolved content keyed by resource kind, filters and language.

    All state lives on the instance and is touched only from the event loop
    thread; there is no await between checking and claiming a key, so entry
    creation and eviction are atomic with respect to concurrent ``get`` calls.
    """

    def __init__(
        self,
        stale_times: Mapping[str, float],
        default_stale_time: float = 300.0,
        timeout: float = 10.0,
        timeout_overrides: Optional[Mapping[str, float]] = None,
        max_retries: int = 2,
        retry_backoff: float = 0.2,
        clock: Callable[[], float] = time.monotonic,
    ):
        self._stale_times = dict(stale_times)
        self._default_stale_time = default_stale_time
        self._timeout = timeout
        self._timeout_overrides = dict(timeout_overrides or {})
        self._max_retries = max_retries
        self._retry_backoff = retry_backoff
        self._clock = clock

        self._entries: dict[str, CacheEntry] = {}
        self._in_flight: dict[str, asyncio.Task] = {}
        self._listeners: list[Listener] = []

    @classmethod
    def from_settings(cls, settings: Optional[Settings] = None) -> "CacheLayer":
        settings = settings or get_settings()
        return cls(
            stale_times=settings.stale_times,
            default_stale_time=settings.cities_stale_seconds,
            timeout=settings.resolver_timeout_seconds,
            timeout_overrides=settings.resolver_timeout_overrides,
            max_retries=settings.cache_max_retries,
            retry_backoff=settings.cache_retry_backoff_seconds,
        )

    @staticmethod
    def _kind_of(key: str) -> str:
        return key.split(":", 1)[0]

    def stale_time_for(self, key: str) -> float:
        return self._stale_times.get(self._kind_of(key), self._default_stale_time)

    def timeout_for(self, key: str) -> float:
        return self._timeout_overrides.get(self._kind_of(key), self._timeout)

    async def get(self, key: str, resolver: Callable[[], Awaitable[Any]]) -> Any:
        """
        Return the cached value for key, resolving it on miss or staleness.

        Concurrent calls for a key share one resolution. Abandoning the wait
        does not cancel the shared resolution. Failures are never cached and
        reach every waiter of the failed resolution.
        """
        entry = self._entries.get(key)
        if entry is not None and entry.is_fresh(self._clock()):
            logger.debug("Cache hit: %s", key)
            return entry.value

        task = self._in_flight.get(key)
        if task is None:
            logger.debug("Cache miss: %s", key)
            task = asyncio.ensure_future(self._resolve(key, resolver))
            self._in_flight[key] = task
            task.add_done_callback(lambda t, key=key: self._finish(key, t))
        else:
            logger.debug("Joining in-flight resolution: %s", key)

        return await asyncio.shield(task)

    async def _resolve(self, key: str, resolver: Callable[[], Awaitable[Any]]) -> Any:
        timeout = self.timeout_for(key)
        attempts = self._max_retries + 1

        for attempt in range(attempts):
            try:
                value = await asyncio.wait_for(resolver(), timeout)
            except asyncio.TimeoutError:
                if attempt + 1 >= attempts:
                    logger.warning("Resolution of %s timed out, giving up after %d attempts", key, attempts)
                    raise ResolutionTimeoutError(key, timeout, attempts)
                delay = self._retry_backoff * (2 ** attempt)
                logger.warning(
                    "Resolution of %s timed out (attempt %d/%d), retrying in %.2fs",
                    key, attempt + 1, attempts, delay,
                )
                await asyncio.sleep(delay)
                continue

            # A resolution superseded by invalidate() still answers its
            # waiters but must not repopulate the cache
            if self._in_flight.get(key) is asyncio.current_task():
                self._entries[key] = CacheEntry(
                    value=value,
                    fetched_at=self._clock(),
                    stale_time=self.stale_time_for(key),
                )
                self._notify("stored", key)
            return value

    def _finish(self, key: str, task: asyncio.Task) -> None:
        current = self._in_flight.get(key) is task
        if current:
            del self._in_flight[key]

        if task.cancelled():
            return
        error = task.exception()
        if error is not None:
            logger.debug("Resolution of %s failed: %r", key, error)
            # Never keep a value whose refresh failed
            if current and self._entries.pop(key, None) is not None:
                self._notify("evicted", key)

    def invalidate(self, prefix: str = "") -> int:
        """
        Evict every entry whose key starts with prefix.

        In-flight resolutions under the prefix keep serving their current
        waiters, but later calls start a fresh resolution.

        Returns:
            Number of stored entries evicted
        """
        prefix = prefix.value if isinstance(prefix, ResourceKind) else prefix
        keys = [key for key in self._entries if key.startswith(prefix)]
        for key in keys:
            del self._entries[key]
            self._notify("invalidated", key)
        for key in [key for key in self._in_flight if key.startswith(prefix)]:
            del self._in_flight[key]

        if keys:
            logger.info("Cache invalidated %d keys matching prefix %r", len(keys), prefix)
        return len(keys)

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """
        Register ``listener(event, key)`` for stored/evicted/invalidated events.

        Returns a function that removes the listener.
        """
        self._listeners.append(listener)

        def unsubscribe():
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _notify(self, event: str, key: str) -> None:
        for listener in list(self._listeners):
            try:
                listener(event, key)
            except Exception:
                logger.exception("Cache listener failed on %s %s", event, key)

    def peek(self, key: str) -> Optional[CacheEntry]:
        return self._entries.get(key)

    def is_in_flight(self, key: str) -> bool:
        return key in self._in_flight

    def __len__(self) -> int:
        return len(self._entries)
