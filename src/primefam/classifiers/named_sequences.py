# -----------------------------------------------------------------------------
#  named_sequences.py
#  Primes that are members of a named recurrence
# -----------------------------------------------------------------------------

from __future__ import annotations

from math import isqrt

from primefam.cache import cached_isprime
from primefam.registry import Family, classifier

CATEGORY = "Sequence primes"


def is_fibonacci_value(n: int) -> bool:
    """n is Fibonacci iff 5n² + 4 or 5n² - 4 is a perfect square."""
    if n < 0:
        return False
    for t in (5 * n * n + 4, 5 * n * n - 4):
        if t >= 0:
            r = isqrt(t)
            if r * r == t:
                return True
    return False


def perrin_upto(limit: int) -> list[int]:
    """Perrin terms (3, 0, 2, ...) that do not exceed limit, in sequence order."""
    seq = [3, 0, 2]
    # once three consecutive terms pass limit, every later term does too
    while min(seq[-3:]) <= limit:
        seq.append(seq[-2] + seq[-3])
    return [x for x in seq if x <= limit]


@classifier(
    family=Family.FIBONACCI,
    label="Fibonacci prime",
    description="Fibonacci number that is prime.",
    oeis="A005478",
    category=CATEGORY,
)
def is_fibonacci_prime(p: int) -> tuple[bool, str | None]:
    if p < 2 or not is_fibonacci_value(p):
        return False, None
    if cached_isprime(p):
        return True, str(p)
    return False, None


@classifier(
    family=Family.PERRIN,
    label="Perrin prime",
    description="Perrin number (3, 0, 2, 3, 2, 5, 5, 7, ...) that is prime.",
    oeis="A074788",
    category=CATEGORY,
)
def is_perrin_prime(p: int) -> tuple[bool, str | None]:
    """
    The Perrin sequence is not monotone at the start, so membership is
    checked against every term up to the point where three consecutive
    terms exceed p.
    """
    if p < 2 or p not in perrin_upto(p):
        return False, None
    if cached_isprime(p):
        return True, str(p)
    return False, None
