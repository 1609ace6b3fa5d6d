"""Stale-while-revalidate wrapper that binds an async producer to a MemoryCache.

Typical use from a request handler:

    query = CachedData(cache, "skills", load_skills, CachedDataOptions(stale_time=60))
    async with query:
        return query.data

A cache hit is published straight away. If the entry is older than
``stale_time`` the producer runs again in the background and the fresh value
replaces the cached one when it lands. A miss runs the producer and writes the
result (plus a ``meta:<key>`` timestamp entry) through to the store.
"""
import asyncio
import logging
import math
from dataclasses import dataclass, replace
from typing import Any, Awaitable, Callable, Generic, TypeVar

from portfolio.core.cache import DEFAULT_EXPIRY, MemoryCache
from portfolio.core.errors import FetchError

logger = logging.getLogger(__name__)

T = TypeVar("T")

META_PREFIX = "meta:"


def meta_key(key: str) -> str:
    return f"{META_PREFIX}{key}"


@dataclass(frozen=True)
class CachedDataOptions:
    initial_data: Any = None
    cache_time: float = DEFAULT_EXPIRY
    stale_time: float = 0  # 0 = revalidate on every hit
    on_success: Callable[[Any], None] | None = None
    on_error: Callable[[FetchError], None] | None = None


@dataclass(frozen=True)
class CachedDataState:
    data: Any = None
    is_loading: bool = True
    error: FetchError | None = None


class CachedData(Generic[T]):
    def __init__(
        self,
        cache: MemoryCache,
        key: str,
        fetch_fn: Callable[[], Awaitable[T]],
        options: CachedDataOptions | None = None,
    ):
        self.cache = cache
        self.key = key
        self.fetch_fn = fetch_fn
        self.options = options or CachedDataOptions()
        self._state = CachedDataState(data=self.options.initial_data)
        self._listeners: list[Callable[[CachedDataState], None]] = []
        self._generation = 0
        self._subscribed = False
        self._tasks: set[asyncio.Task] = set()

    # --- State ---

    @property
    def state(self) -> CachedDataState:
        return self._state

    @property
    def data(self) -> T | None:
        return self._state.data

    @property
    def is_loading(self) -> bool:
        return self._state.is_loading

    @property
    def error(self) -> FetchError | None:
        return self._state.error

    @property
    def subscribed(self) -> bool:
        return self._subscribed

    @property
    def pending_tasks(self) -> set[asyncio.Task]:
        """Fetches scheduled by subscribe() that have not settled yet."""
        return set(self._tasks)

    def add_listener(self, listener: Callable[[CachedDataState], None]) -> None:
        self._listeners.append(listener)

    def remove_listener(self, listener: Callable[[CachedDataState], None]) -> None:
        if listener in self._listeners:
            self._listeners.remove(listener)

    # --- Subscription ---

    def subscribe(self) -> asyncio.Task | None:
        """Publish the cached value if there is one and schedule a fetch when needed.

        Returns the scheduled fetch task, or None when a fresh hit needs no fetch.
        Must be called from a running event loop.
        """
        self._generation += 1
        self._subscribed = True
        generation = self._generation

        cached = self.cache.get(self.key)
        if cached is not None:
            self._publish(data=cached, is_loading=False)
            age = self._entry_age()
            if self.options.stale_time <= 0 or age > self.options.stale_time:
                logger.debug("Revalidating %s in background (age %.1fs)", self.key, age)
                return self._schedule(generation)
            return None

        logger.debug("Cache miss for %s", self.key)
        self._publish(is_loading=True)
        return self._schedule(generation)

    def unsubscribe(self) -> None:
        """End the current subscription. In-flight fetches keep running but their
        results no longer touch this object's state."""
        self._generation += 1
        self._subscribed = False

    async def refetch(self) -> T:
        """Run the producer regardless of the cache and return its value.

        Raises FetchError after publishing it. Concurrent calls are not merged;
        whichever settles last leaves its result in the state.
        """
        self._publish(is_loading=True)
        try:
            fresh = await self._call_producer()
        except FetchError as error:
            self._publish(error=error, is_loading=False)
            self._notify(self.options.on_error, error)
            raise
        self._write_through(fresh)
        self._publish(data=fresh, is_loading=False, error=None)
        self._notify(self.options.on_success, fresh)
        return fresh

    async def __aenter__(self) -> "CachedData[T]":
        task = self.subscribe()
        # Only a miss blocks; a stale hit revalidates behind the cached value.
        if task is not None and self._state.is_loading:
            await task
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        self.unsubscribe()

    # --- Internals ---

    def _entry_age(self) -> float:
        meta = self.cache.get(meta_key(self.key))
        if not isinstance(meta, dict) or meta.get("timestamp") is None:
            return math.inf
        return self.cache.now() - meta["timestamp"]

    def _schedule(self, generation: int) -> asyncio.Task:
        task = asyncio.create_task(self._fetch_data(generation))
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)
        return task

    def _is_live(self, generation: int) -> bool:
        return self._subscribed and generation == self._generation

    async def _fetch_data(self, generation: int) -> None:
        try:
            fresh = await self._call_producer()
        except FetchError as error:
            if self._is_live(generation):
                self._publish(error=error, is_loading=False)
                self._notify(self.options.on_error, error)
            return

        self._write_through(fresh)
        if self._is_live(generation):
            self._publish(data=fresh, is_loading=False, error=None)
            self._notify(self.options.on_success, fresh)
        else:
            logger.debug("Dropping result for %s from an ended subscription", self.key)

    async def _call_producer(self) -> T:
        try:
            return await self.fetch_fn()
        except FetchError as e:
            logger.warning(f"Fetch for {self.key} failed: {e}")
            if e.key is None:
                e.key = self.key
            raise
        except Exception as e:
            logger.warning(f"Fetch for {self.key} failed: {e}")
            raise FetchError(str(e) or type(e).__name__, key=self.key) from e

    def _write_through(self, fresh: T) -> None:
        self.cache.set(self.key, fresh, self.options.cache_time)
        self.cache.set(meta_key(self.key), {"timestamp": self.cache.now()}, self.options.cache_time)

    def _publish(self, **changes) -> None:
        self._state = replace(self._state, **changes)
        for listener in list(self._listeners):
            self._notify(listener, self._state)

    def _notify(self, callback: Callable[[Any], None] | None, value: Any) -> None:
        if callback is None:
            return
        try:
            callback(value)
        except Exception:
            logger.exception("Callback for %s raised", self.key)
