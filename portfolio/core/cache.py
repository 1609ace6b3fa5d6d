"""In-memory TTL cache, created once per app instance and passed to its consumers."""
import threading
import time
from dataclasses import dataclass
from typing import Any, Callable

DEFAULT_EXPIRY = 5 * 60  # seconds


@dataclass
class CacheEntry:
    data: Any
    timestamp: float
    expiry: float

    def is_expired(self, now: float) -> bool:
        return now > self.timestamp + self.expiry


class MemoryCache:
    """Key/value store with a per-entry TTL.

    Expired entries are not swept; the first read that finds one deletes it.
    Handlers may run on FastAPI's thread pool, so every operation holds a lock.
    """

    def __init__(self, clock: Callable[[], float] = time.time):
        self._clock = clock
        self._store: dict[str, CacheEntry] = {}
        self._lock = threading.Lock()

    def now(self) -> float:
        return self._clock()

    def get(self, key: str) -> Any | None:
        """Return cached value if not expired, else None."""
        with self._lock:
            entry = self._store.get(key)
            if entry is None:
                return None
            if entry.is_expired(self._clock()):
                del self._store[key]
                return None
            return entry.data

    def set(self, key: str, value: Any, expiry: float = DEFAULT_EXPIRY) -> None:
        """Store a value, replacing any previous entry. Expiry is in seconds."""
        with self._lock:
            self._store[key] = CacheEntry(data=value, timestamp=self._clock(), expiry=expiry)

    def clear(self, key: str) -> None:
        with self._lock:
            self._store.pop(key, None)

    def clear_all(self) -> None:
        with self._lock:
            self._store.clear()

    def stats(self) -> dict:
        """Entry counts for the health endpoint. Nothing is evicted here."""
        with self._lock:
            now = self._clock()
            valid = sum(1 for entry in self._store.values() if not entry.is_expired(now))
            return {"total_items": len(self._store), "valid_items": valid}

    def __len__(self) -> int:
        with self._lock:
            return len(self._store)

    def __contains__(self, key: str) -> bool:
        return self.get(key) is not None
