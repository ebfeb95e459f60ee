# tests/test_oracle.py
"""
Primality oracle: small-n rules, both strategies against sympy, backends, overflow.

Run: pytest -v tests/test_oracle.py
"""

from __future__ import annotations

from math import isqrt

import pytest
from sympy import isprime, nextprime

from primefam.oracle import ITERATIVE_LIMIT, _divisor_walk, _trial_loop, is_prime
from primefam.runtime import APPLY
from primefam.utility import HALF_MAX, PrimeOverflow, UserInputError


@pytest.mark.parametrize("n, expected", [
    (0, False),
    (1, False),
    (2, True),
    (3, True),
    (4, False),
    (9, False),
    (25, False),
    (97, True),
    (100, False),
    (7919, True),
    (999_983, True),       # largest prime below the strategy switch
    (1_000_001, False),    # 101 * 9901
    (1_000_003, True),
])
def test_known_values(n, expected):
    assert is_prime(n) is expected


def test_even_numbers_above_two_are_composite():
    assert not any(is_prime(n) for n in range(4, 2000, 2))


def test_agrees_with_sympy_below_switch():
    for n in range(0, 5000):
        assert is_prime(n) == isprime(n), n


def test_agrees_with_sympy_above_switch():
    p = nextprime(ITERATIVE_LIMIT)
    q = nextprime(p)
    values = [p, q, p * q, p * p, q * q, 10**9 + 7, 10**9 + 9, (10**9 + 7) * 3, HALF_MAX]
    values += list(range(ITERATIVE_LIMIT - 50, ITERATIVE_LIMIT + 50))
    for n in values:
        assert is_prime(n) == isprime(n), n


def test_strategies_agree_on_odd_numbers():
    for n in range(3, 20_000, 2):
        limit = isqrt(n)
        assert _trial_loop(n, limit) == _divisor_walk(n, limit), n


def test_sympy_backend_matches_trial():
    sample = list(range(0, 3000)) + [nextprime(10**12), 10**12 + 1]
    trial = [is_prime(n) for n in sample]
    APPLY({"ENGINE": {"BACKEND": "sympy"}})
    assert [is_prime(n) for n in sample] == trial


def test_unknown_backend_is_rejected():
    APPLY({"ENGINE": {"BACKEND": "abacus"}})
    with pytest.raises(UserInputError):
        is_prime(101)


def test_half_max_is_the_last_testable_value():
    # 2^63 - 1 = 7^2 * 73 * 127 * ...
    assert is_prime(HALF_MAX) is False
    with pytest.raises(PrimeOverflow) as exc:
        is_prime(HALF_MAX + 1)
    assert exc.value.label == "primality test"
    assert exc.value.value == HALF_MAX + 1
    assert isinstance(exc.value, OverflowError)
