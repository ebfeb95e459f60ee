# tests/test_scanner.py
from __future__ import annotations

import threading

import pytest

from primefam.cache import cache_stats
from primefam.registry import Family
from primefam.scanner import clear_caches, compute, get_scan_cache, normalize_range, scan
from primefam.utility import U64_MAX, PrimeOverflow, UserInputError


def test_compute_reference_ranges():
    assert compute(Family.MERSENNE, 2, 10) == ["3", "7", "31", "127"]
    assert compute(Family.TWIN, 2, 20) == ["(3,5)", "(5,7)", "(11,13)", "(17,19)"]
    assert compute(Family.PALINDROMIC, 2, 10) == ["2", "3", "5", "7"]


def test_compute_is_idempotent():
    first = compute("sexy", 1, 500)
    second = compute("sexy", 1, 500)
    assert first == second
    assert first == compute("sexy", 1, 500, use_cache=False)


def test_memo_returns_independent_lists():
    first = compute(Family.TWIN, 2, 20)
    first.append("junk")
    assert compute(Family.TWIN, 2, 20) == ["(3,5)", "(5,7)", "(11,13)", "(17,19)"]


def test_inverted_range_is_swapped():
    assert compute(Family.TWIN, 20, 2) == compute(Family.TWIN, 2, 20)
    assert normalize_range(9, 3) == (3, 9)


def test_single_candidate_range():
    assert compute(Family.TWIN, 11, 11) == ["(11,13)"]
    assert compute(Family.TWIN, 12, 12) == []


@pytest.mark.parametrize("start, end", [(-1, 10), (0, U64_MAX + 1), (True, 5), (1, 2.5)])
def test_bad_bounds_are_user_errors(start, end):
    with pytest.raises(UserInputError):
        compute(Family.TWIN, start, end)


def test_results_are_ascending():
    matches = compute(Family.SOPHIE_GERMAIN, 1, 2000)
    values = [int(m) for m in matches]
    assert values == sorted(values)


def test_first_error_aborts_and_is_not_memoized():
    seen = []
    with pytest.raises(PrimeOverflow) as exc:
        scan(Family.FERMAT, 0, 10, on_match=seen.append)
    assert exc.value.label == "fermat exponent 2^p"
    assert seen == ["3", "5", "17", "257", "65537"]
    with pytest.raises(PrimeOverflow):
        compute(Family.FERMAT, 0, 10)
    assert get_scan_cache((Family.FERMAT, 0, 10)) is None


def test_range_crossing_family_cap_fails():
    with pytest.raises(PrimeOverflow) as exc:
        compute(Family.PALINDROMIC, 999_990, 1_000_001)
    assert exc.value.label == "prime family check"


def test_preset_cancel_scans_nothing():
    stop = threading.Event()
    stop.set()
    res = scan(Family.TWIN, 2, 1000, cancel=stop)
    assert res.cancelled
    assert res.scanned == 0
    assert res.matches == []


def test_cancel_is_polled_between_candidates():
    stop = threading.Event()

    def on_progress(done, total):
        if done == 10:
            stop.set()

    res = scan(Family.TWIN, 2, 1000, cancel=stop, on_progress=on_progress)
    assert res.cancelled
    assert res.scanned == 10
    assert res.matches == ["(3,5)", "(5,7)", "(11,13)"]


def test_progress_callback_counts_every_candidate():
    ticks = []
    res = scan(Family.CUBAN, 0, 9, on_progress=lambda done, total: ticks.append((done, total)))
    assert ticks == [(i, 10) for i in range(1, 11)]
    assert res.total == 10
    assert not res.cancelled


def test_clear_caches_empties_primality_memo():
    compute(Family.TWIN, 2, 200)
    assert cache_stats() > 0
    clear_caches()
    assert cache_stats() == 0
    assert get_scan_cache((Family.TWIN, 2, 200)) is None
