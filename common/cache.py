"""TTL cache used for the review listing."""
from __future__ import annotations

import time
from threading import Lock
from typing import Callable, Generic, Optional, TypeVar

from cachetools import TTLCache

T = TypeVar("T")


class SimpleTTLCache(Generic[T]):
    """Thread-safe wrapper around :class:`cachetools.TTLCache`.

    Sync routes run in the threadpool, so every access goes through ``_lock``.
    """

    def __init__(self, ttl: int, maxsize: int = 128, timer: Callable[[], float] = time.monotonic) -> None:
        self._cache: TTLCache[str, T] = TTLCache(maxsize=maxsize, ttl=ttl, timer=timer)
        self._lock = Lock()

    def get(self, key: str) -> Optional[T]:
        with self._lock:
            try:
                return self._cache[key]
            except KeyError:
                return None

    def set(self, key: str, value: T) -> None:
        with self._lock:
            self._cache[key] = value

    def get_or_set(self, key: str, loader: Callable[[], T]) -> T:
        """Return the cached value for ``key``, calling ``loader`` on a miss."""
        with self._lock:
            try:
                return self._cache[key]
            except KeyError:
                # missing or expired since the last access
                pass
        value = loader()
        with self._lock:
            self._cache[key] = value
        return value

    def pop(self, key: str) -> None:
        with self._lock:
            self._cache.pop(key, None)

    def clear(self) -> None:
        with self._lock:
            self._cache.clear()

    def __len__(self) -> int:
        with self._lock:
            return len(self._cache)
