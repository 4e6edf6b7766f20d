"""Timed key/value cache for detection results"""
import time
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Dict, List, Optional, TypeVar

from .constants import DEFAULT_CACHE_TIMEOUT

T = TypeVar("T")


def _now_ms() -> int:
    return int(time.time() * 1000)


@dataclass
class CacheEntry:
    """A cached value with its creation time and lifetime, both in milliseconds"""
    value: Any
    timestamp: int
    ttl: int

    def is_expired(self, now: Optional[int] = None) -> bool:
        now = _now_ms() if now is None else now
        return now - self.timestamp > self.ttl


class TimedCache:
    """Key/value store with per-entry expiry and a global on/off switch

    Expired entries are evicted lazily, on the next get() or has() for
    their key. There is no size limit: the key space is one entry per
    detector.
    """

    def __init__(self, enabled: bool = True):
        self._store: Dict[str, CacheEntry] = {}
        self._enabled = enabled

    def get(self, key: str) -> Optional[Any]:
        """Return the live value for key, or None"""
        entry = self._live_entry(key)
        return entry.value if entry is not None else None

    def set(self, key: str, value: Any, ttl: int = DEFAULT_CACHE_TIMEOUT) -> None:
        """Store value under key for ttl milliseconds (no-op while disabled)"""
        if not self._enabled:
            return
        self._store[key] = CacheEntry(value=value, timestamp=_now_ms(), ttl=ttl)

    def has(self, key: str) -> bool:
        return self._live_entry(key) is not None

    def get_entry(self, key: str) -> Optional[CacheEntry]:
        """Return the live entry for key, or None"""
        return self._live_entry(key)

    def delete(self, key: str) -> bool:
        """Remove key; works whether or not the cache is enabled"""
        return self._store.pop(key, None) is not None

    def clear(self) -> None:
        self._store.clear()

    def enable(self) -> None:
        self._enabled = True

    def disable(self) -> None:
        """Disable caching and drop every entry"""
        self._enabled = False
        self.clear()

    def is_enabled(self) -> bool:
        return self._enabled

    def size(self) -> int:
        return len(self._store)

    def keys(self) -> List[str]:
        return list(self._store.keys())

    def _live_entry(self, key: str) -> Optional[CacheEntry]:
        if not self._enabled:
            return None

        entry = self._store.get(key)
        if entry is None:
            return None

        if entry.is_expired():
            del self._store[key]
            return None

        return entry


def cache_or_compute(cache: TimedCache, key: str, ttl: int, enabled: bool,
                     compute: Callable[[], T]) -> T:
    """Return the cached value for key, computing and storing it on a miss"""
    if enabled:
        entry = cache.get_entry(key)
        if entry is not None:
            return entry.value

    result = compute()

    if enabled:
        cache.set(key, result, ttl)

    return result


async def cache_or_compute_async(cache: TimedCache, key: str, ttl: int, enabled: bool,
                                 compute: Callable[[], Awaitable[T]]) -> T:
    """Async counterpart of cache_or_compute; compute may suspend"""
    if enabled:
        entry = cache.get_entry(key)
        if entry is not None:
            return entry.value

    result = await compute()

    if enabled:
        cache.set(key, result, ttl)

    return result
