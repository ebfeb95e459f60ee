# tests/test_cache.py
from __future__ import annotations

import threading

from sympy import isprime

from primefam.cache import PRIME_CACHE, PrimalityCache, cache_stats, cached_isprime, configure_cache
from primefam.runtime import APPLY


def test_cached_result_equals_fresh_result():
    for n in range(0, 3000):
        assert cached_isprime(n) == isprime(n)
    # second pass is served from the memo
    for n in range(0, 3000):
        assert cached_isprime(n) == isprime(n)
    info = PRIME_CACHE.info()
    assert info.size == 3000
    assert info.hits == 3000
    assert info.misses == 3000


def test_each_value_is_computed_once():
    calls = []

    def oracle(n):
        calls.append(n)
        return n % 2 == 1

    cache = PrimalityCache(compute=oracle)
    for _ in range(3):
        for n in (5, 6, 7):
            cache.lookup_or_compute(n)
    assert sorted(calls) == [5, 6, 7]
    assert cache.stats() == 3
    assert len(cache) == 3


def test_stats_counts_distinct_entries():
    assert cache_stats() == 0
    cached_isprime(11)
    cached_isprime(11)
    cached_isprime(12)
    assert cache_stats() == 2


def test_concurrent_lookups_stay_consistent():
    errors = []

    def worker(offset):
        for n in range(offset, 4000, 3):
            if cached_isprime(n) != isprime(n):
                errors.append(n)
        cache_stats()

    threads = [threading.Thread(target=worker, args=(i % 3,)) for i in range(8)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    assert errors == []
    assert cache_stats() == 4000
    for n in range(4000):
        assert PRIME_CACHE.peek(n) == isprime(n)


def test_lru_bound_evicts_oldest():
    cache = PrimalityCache(max_entries=3)
    for n in (2, 3, 4, 5, 7):
        cache.lookup_or_compute(n)
    assert cache.stats() == 3
    assert cache.peek(2) is None
    assert cache.peek(3) is None
    assert cache.peek(7) is True


def test_lru_touch_keeps_recent_entry():
    cache = PrimalityCache(max_entries=2)
    cache.lookup_or_compute(2)
    cache.lookup_or_compute(3)
    cache.lookup_or_compute(2)   # 2 is now most recent
    cache.lookup_or_compute(4)
    assert cache.peek(2) is True
    assert cache.peek(3) is None


def test_configure_cache_applies_profile_bound():
    for n in range(100):
        cached_isprime(n)
    APPLY({"CACHE": {"MAX_ENTRIES": 10}})
    configure_cache()
    assert cache_stats() == 10
    assert PRIME_CACHE.info().max_entries == 10


def test_clear_resets_counters():
    cached_isprime(13)
    cached_isprime(13)
    PRIME_CACHE.clear()
    info = PRIME_CACHE.info()
    assert (info.hits, info.misses, info.size) == (0, 0, 0)
