"""Keyed cache of resolved source queries with namespace invalidation."""

import asyncio
import time
from collections.abc import Awaitable, Callable, Hashable, Mapping
from typing import Any, TypeVar

from billing_recon.infrastructure.logging.logger import get_app_logger

REPORTS = "reports"
BILLINGS = "billings"
COSTS = "costs"
WORKSPACES = "workspaces"
EXCHANGE_RATES = "exchange_rates"

T = TypeVar("T")
CacheKey = tuple[str, Hashable]


class QueryCache:
    """Cache of query results keyed by ``(namespace, params)``.

    Concurrent callers of the same key share one in-flight fetch. Results
    that resolve after their namespace was invalidated are handed to the
    callers that awaited them but are not stored. Namespaces given a time to
    live refetch entries older than that on the next lookup.
    """

    def __init__(
        self,
        logger=None,
        ttls: Mapping[str, float] | None = None,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        """Initialize an empty cache.

        Args:
            logger: Optional logger compatible with logging.Logger-like API.
            ttls: Optional time to live in seconds per namespace; entries of
                other namespaces live until invalidated.
            clock: Monotonic time source in seconds.
        """
        self._logger = logger or get_app_logger()
        self._ttls = dict(ttls or {})
        self._clock = clock
        self._entries: dict[CacheKey, Any] = {}
        self._stored_at: dict[CacheKey, float] = {}
        self._in_flight: dict[CacheKey, asyncio.Task] = {}
        self._generations: dict[str, int] = {}
        self._subscribers: dict[str, list[Callable[[str], None]]] = {}

    async def get_or_fetch(
        self,
        key: CacheKey,
        fetcher: Callable[[], Awaitable[T]],
    ) -> T:
        """Return the cached value for a key, fetching it when absent.

        Args:
            key: ``(namespace, params)`` tuple; params must be hashable.
            fetcher: Zero-argument coroutine function producing the value.

        Returns:
            T: Cached or freshly fetched value.
        """
        if key in self._entries:
            if not self._expired(key):
                return self._entries[key]
            self._logger.debug(f"Cache entry expired: {key!r}")
            del self._entries[key]
            del self._stored_at[key]
        task = self._in_flight.get(key)
        if task is None:
            task = asyncio.ensure_future(
                self._resolve(key, fetcher, self.generation(key[0]))
            )
            self._in_flight[key] = task
        return await asyncio.shield(task)

    def get(self, key: CacheKey, default: Any = None) -> Any:
        """Return a stored, unexpired value without fetching."""
        if key not in self._entries or self._expired(key):
            return default
        return self._entries[key]

    def generation(self, namespace: str) -> int:
        """Return the invalidation counter of a namespace."""
        return self._generations.get(namespace, 0)

    def invalidate(self, namespace: str) -> None:
        """Drop every entry of a namespace and notify its subscribers.

        Args:
            namespace: Namespace to invalidate, for example ``reports``.
        """
        self._generations[namespace] = self.generation(namespace) + 1
        for store in (self._entries, self._stored_at, self._in_flight):
            for key in [key for key in store if key[0] == namespace]:
                del store[key]
        self._logger.debug(f"Cache namespace invalidated: {namespace}")
        for callback in list(self._subscribers.get(namespace, ())):
            callback(namespace)

    def subscribe(
        self,
        namespace: str,
        callback: Callable[[str], None],
    ) -> Callable[[], None]:
        """Register a callback run after each invalidation of a namespace.

        Args:
            namespace: Namespace to watch.
            callback: Called with the namespace name.

        Returns:
            Callable[[], None]: Function removing the subscription.
        """
        self._subscribers.setdefault(namespace, []).append(callback)

        def unsubscribe() -> None:
            callbacks = self._subscribers.get(namespace, [])
            if callback in callbacks:
                callbacks.remove(callback)

        return unsubscribe

    def _expired(self, key: CacheKey) -> bool:
        ttl = self._ttls.get(key[0])
        if ttl is None:
            return False
        return self._clock() - self._stored_at[key] >= ttl

    async def _resolve(
        self,
        key: CacheKey,
        fetcher: Callable[[], Awaitable[T]],
        generation: int,
    ) -> T:
        try:
            value = await fetcher()
        finally:
            if self._in_flight.get(key) is asyncio.current_task():
                del self._in_flight[key]
        if self.generation(key[0]) == generation:
            self._entries[key] = value
            self._stored_at[key] = self._clock()
        else:
            self._logger.debug(f"Discarding stale cache result for {key!r}")
        return value


__all__ = [
    "QueryCache",
    "CacheKey",
    "REPORTS",
    "BILLINGS",
    "COSTS",
    "WORKSPACES",
    "EXCHANGE_RATES",
]
