# cache_utils.py - small LRU/TTL result cache and timing helper

import threading
import time
from collections import OrderedDict
from functools import wraps
from typing import Any, Callable, Hashable, Optional


def timed(func: Callable) -> Callable:
    """Decorator returns tuple: (result, elapsed)"""
    @wraps(func)
    def _wrap(*a, **kw):
        t0 = time.perf_counter()
        res = func(*a, **kw)
        t1 = time.perf_counter()
        return res, (t1 - t0)
    return _wrap


class ResultCache:
    """
    OrderedDict-backed LRU with an optional time-to-live per item.
    The only invalidation entry point is invalidate_all(); the engine calls it
    on every index swap and every frequency update.
    """

    def __init__(self, maxsize: int = 256, ttl: Optional[float] = 30.0,
                 clock: Callable[[], float] = time.monotonic):
        self.maxsize = max(1, int(maxsize))
        self.ttl = ttl if ttl and ttl > 0 else None
        self._clock = clock
        self._data: "OrderedDict[Hashable, tuple]" = OrderedDict()
        self._lock = threading.Lock()
        self.hits = 0
        self.misses = 0

    def get(self, key: Hashable) -> Optional[Any]:
        with self._lock:
            item = self._data.get(key)
            if item is None:
                self.misses += 1
                return None
            stored_at, value = item
            if self.ttl is not None and self._clock() - stored_at > self.ttl:
                del self._data[key]
                self.misses += 1
                return None
            self._data.move_to_end(key)
            self.hits += 1
            return value

    def put(self, key: Hashable, value: Any) -> None:
        with self._lock:
            self._data[key] = (self._clock(), value)
            self._data.move_to_end(key)
            while len(self._data) > self.maxsize:
                self._data.popitem(last=False)

    def invalidate_all(self) -> None:
        with self._lock:
            self._data.clear()

    def __len__(self) -> int:
        return len(self._data)

    def __contains__(self, key: Hashable) -> bool:
        return key in self._data

    def stats(self) -> dict:
        return {"size": len(self._data), "hits": self.hits, "misses": self.misses}
