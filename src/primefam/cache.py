# src/primefam/cache.py
from __future__ import annotations

import threading
from collections import OrderedDict
from collections.abc import Callable
from dataclasses import dataclass

from primefam.oracle import is_prime
from primefam.runtime import CFG


@dataclass(frozen=True)
class CacheInfo:
    hits: int
    misses: int
    size: int
    max_entries: int  # 0 = unbounded


class PrimalityCache:
    """
    Memo of value -> primality, shared by every scan in the process.

    All access goes through one lock. The oracle call itself runs outside
    the lock, so a concurrent stats() never waits on a long trial division;
    two threads racing on the same value both compute the same answer and
    the first store wins. Failed tests (overflow) are never stored.
    """

    def __init__(self, max_entries: int = 0, compute: Callable[[int], bool] = is_prime):
        self._lock = threading.Lock()
        self._data: OrderedDict[int, bool] = OrderedDict()
        self._compute = compute
        self._max = max(0, int(max_entries))
        self._hits = 0
        self._misses = 0

    def lookup_or_compute(self, n: int) -> bool:
        with self._lock:
            hit = self._data.get(n)
            if hit is not None:
                self._hits += 1
                if self._max:
                    self._data.move_to_end(n)
                return hit
            self._misses += 1

        result = self._compute(n)

        with self._lock:
            self._data.setdefault(n, result)
            if self._max:
                self._data.move_to_end(n)
                while len(self._data) > self._max:
                    self._data.popitem(last=False)
        return result

    def peek(self, n: int) -> bool | None:
        with self._lock:
            return self._data.get(n)

    def stats(self) -> int:
        with self._lock:
            return len(self._data)

    def info(self) -> CacheInfo:
        with self._lock:
            return CacheInfo(self._hits, self._misses, len(self._data), self._max)

    def resize(self, max_entries: int) -> None:
        """Set the LRU bound (0 = unbounded), evicting oldest entries if needed."""
        with self._lock:
            self._max = max(0, int(max_entries))
            if self._max:
                while len(self._data) > self._max:
                    self._data.popitem(last=False)

    def clear(self) -> None:
        with self._lock:
            self._data.clear()
            self._hits = 0
            self._misses = 0

    def __len__(self) -> int:
        return self.stats()


PRIME_CACHE = PrimalityCache()


def cached_isprime(n: int) -> bool:
    """Primality through the process-wide cache."""
    return PRIME_CACHE.lookup_or_compute(n)


def cache_stats() -> int:
    return PRIME_CACHE.stats()


def configure_cache() -> None:
    """Apply CACHE.MAX_ENTRIES from the active profile to the shared cache."""
    PRIME_CACHE.resize(int(CFG("CACHE.MAX_ENTRIES", 0) or 0))
