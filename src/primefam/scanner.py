# src/primefam/scanner.py
from __future__ import annotations

import threading
import time
from collections.abc import Callable
from dataclasses import dataclass, field

from primefam.cache import PRIME_CACHE
from primefam.classify import classify
from primefam.registry import Family, discover
from primefam.utility import U64_MAX, PrimeError, UserInputError, debug_line

# --- Range result cache (per process, in-memory) ------------------------------
# Keyed by (family, start, end). Only complete, uncancelled scans are stored.

_SCAN_CACHE: dict[tuple[Family, int, int], tuple[str, ...]] = {}
_SCAN_CACHE_LOCK = threading.Lock()


def set_scan_cache(key: tuple[Family, int, int], matches: list[str]) -> None:
    with _SCAN_CACHE_LOCK:
        _SCAN_CACHE[key] = tuple(matches)


def get_scan_cache(key: tuple[Family, int, int]) -> tuple[str, ...] | None:
    with _SCAN_CACHE_LOCK:
        return _SCAN_CACHE.get(key)


def clear_caches() -> None:
    """Empty both the range result cache and the primality cache."""
    with _SCAN_CACHE_LOCK:
        _SCAN_CACHE.clear()
    PRIME_CACHE.clear()


@dataclass
class ScanResult:
    family: Family
    start: int
    end: int
    matches: list[str] = field(default_factory=list)
    scanned: int = 0          # candidates fully classified
    cancelled: bool = False

    @property
    def total(self) -> int:
        return self.end - self.start + 1


def normalize_range(start: int, end: int) -> tuple[int, int]:
    """Validate bounds as 64-bit candidates; an inverted range is swapped."""
    for name, v in (("start", start), ("end", end)):
        if isinstance(v, bool) or not isinstance(v, int):
            raise UserInputError(f"{name} must be an integer, got {type(v).__name__}")
        if v < 0 or v > U64_MAX:
            raise UserInputError(f"{name} must be between 0 and {U64_MAX}, got {v}")
    if start > end:
        start, end = end, start
    return start, end


def scan(
    family: Family | str,
    start: int,
    end: int,
    *,
    cancel: threading.Event | None = None,
    on_match: Callable[[str], object] | None = None,
    on_progress: Callable[[int, int], object] | None = None,
) -> ScanResult:
    """
    Classify every candidate of [start, end] in ascending order.

    `cancel` is polled once before each candidate; a set flag ends the scan
    with cancelled=True and the matches found so far. `on_match` receives
    each match text as it is found, `on_progress(done, total)` is called
    after each candidate. The first PrimeError aborts the scan and
    propagates.
    """
    fam = Family.coerce(family)
    start, end = normalize_range(start, end)
    index = discover()
    result = ScanResult(fam, start, end)
    total = result.total

    debug_line(f"scan {fam.name} [{start}, {end}] ({total} candidates)")
    t0 = time.perf_counter()

    for p in range(start, end + 1):
        if cancel is not None and cancel.is_set():
            result.cancelled = True
            break
        try:
            text = classify(fam, p, index=index)
        except PrimeError as e:
            debug_line(f"{fam.name} failed at p={p}: {e}", status="ERR")
            raise
        result.scanned += 1
        if text is not None:
            result.matches.append(text)
            if on_match is not None:
                on_match(text)
        if on_progress is not None:
            on_progress(result.scanned, total)

    dt = (time.perf_counter() - t0) * 1000.0
    debug_line(
        f"{fam.name}: {len(result.matches)} match(es), {result.scanned}/{total} scanned "
        f"in {dt:.2f} ms, cache size {PRIME_CACHE.stats()}",
        status="STOP" if result.cancelled else "OK",
    )
    return result


def compute(family: Family | str, start: int, end: int, *, use_cache: bool = True) -> list[str]:
    """Synchronous scan: every match text of [start, end], ascending."""
    fam = Family.coerce(family)
    start, end = normalize_range(start, end)
    key = (fam, start, end)
    if use_cache:
        hit = get_scan_cache(key)
        if hit is not None:
            return list(hit)
    matches = scan(fam, start, end).matches
    if use_cache:
        set_scan_cache(key, matches)
    return matches
