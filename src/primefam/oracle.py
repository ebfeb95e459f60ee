# -----------------------------------------------------------------------------
#  oracle.py
#  Trial-division primality test for 64-bit candidates
# -----------------------------------------------------------------------------

from __future__ import annotations

from math import isqrt

from sympy import isprime as _sympy_isprime

from primefam.runtime import CFG
from primefam.utility import HALF_MAX, PrimeOverflow, UserInputError

ITERATIVE_LIMIT = 1_000_000
BACKENDS = ("trial", "sympy")


def _trial_loop(n: int, limit: int) -> bool:
    for d in range(3, limit + 1, 2):
        if n % d == 0:
            return False
    return True


def _divisor_walk(n: int, limit: int) -> bool:
    """
    Divisor walk for large n: 3 first, then the 6k±1 wheel up to limit.
    Written as the unrolled form of a tail-recursive walk(n, d), which
    Python would run out of stack on.
    """
    if n % 3 == 0:
        return n == 3
    d = 5
    while d <= limit:
        # d + 2 may pass limit; a hit there would imply a cofactor below d.
        if n % d == 0 or n % (d + 2) == 0:
            return False
        d += 6
    return True


def is_prime(n: int) -> bool:
    """
    Return True when n is prime.

    Raises PrimeOverflow above U64_MAX // 2 so that no intermediate bound
    computed from n can leave the 64-bit range.
    """
    if n > HALF_MAX:
        raise PrimeOverflow("primality test", n)
    if n < 2:
        return False
    if n == 2:
        return True
    if n % 2 == 0:
        return False

    backend = CFG("ENGINE.BACKEND", "trial")
    if backend == "sympy":
        return bool(_sympy_isprime(n))
    if backend != "trial":
        raise UserInputError(f"unknown primality backend {backend!r}; use one of {', '.join(BACKENDS)}")

    limit = isqrt(n)
    if n < ITERATIVE_LIMIT:
        return _trial_loop(n, limit)
    return _divisor_walk(n, limit)
