# -----------------------------------------------------------------------------
#  prime.py
#  Prime pairs and derived-partner prime families
# -----------------------------------------------------------------------------

from __future__ import annotations

from math import isqrt

from primefam.cache import cached_isprime
from primefam.registry import Family, classifier
from primefam.utility import HALF_MAX, U64_MAX, PrimeOverflow

CATEGORY = "Prime pairs and partners"

WILSON_LIMIT = 10_000


def _offset_pair(p: int, k: int, label: str) -> tuple[bool, str | None]:
    """p and p+k both prime; the pair is the match text."""
    if p > U64_MAX - k:
        raise PrimeOverflow(label, p)
    if cached_isprime(p) and cached_isprime(p + k):
        return True, f"({p},{p + k})"
    return False, None


@classifier(
    family=Family.TWIN,
    label="Twin prime",
    description="Prime p with p+2 also prime.",
    oeis="A001097",
    category=CATEGORY,
)
def is_twin_prime(p: int) -> tuple[bool, str | None]:
    return _offset_pair(p, 2, "twin prime partner")


@classifier(
    family=Family.COUSIN,
    label="Cousin prime",
    description="Prime p with p+4 also prime.",
    oeis="A023200",
    category=CATEGORY,
)
def is_cousin_prime(p: int) -> tuple[bool, str | None]:
    return _offset_pair(p, 4, "cousin prime partner")


@classifier(
    family=Family.SEXY,
    label="Sexy prime",
    description="Prime p with p+6 also prime.",
    oeis="A023201",
    category=CATEGORY,
)
def is_sexy_prime(p: int) -> tuple[bool, str | None]:
    return _offset_pair(p, 6, "sexy prime partner")


def is_semiprime(q: int) -> bool:
    """
    q is a product of exactly two primes (counted with multiplicity).
    The smallest divisor found is prime by construction; q is semiprime
    iff the cofactor is prime as well.
    """
    if q < 4:
        return False
    for d in range(2, isqrt(q) + 1):
        if q % d == 0:
            return cached_isprime(d) and cached_isprime(q // d)
    return False


@classifier(
    family=Family.CHEN,
    label="Chen prime",
    description="Prime p where p+2 is prime or semiprime.",
    oeis="A109611",
    category=CATEGORY,
)
def is_chen_prime(p: int) -> tuple[bool, str | None]:
    """
    Chen prime: p is prime and p+2 is either prime or semiprime.
    """
    if p > U64_MAX - 2:
        raise PrimeOverflow("chen prime partner", p)
    if not cached_isprime(p):
        return False, None
    q = p + 2
    if cached_isprime(q) or is_semiprime(q):
        return True, str(p)
    return False, None


@classifier(
    family=Family.SOPHIE_GERMAIN,
    label="Sophie Germain prime",
    description="Prime p with 2p+1 also prime.",
    oeis="A005384",
    category=CATEGORY,
)
def is_sophie_germain_prime(p: int) -> tuple[bool, str | None]:
    if p > HALF_MAX - 1:
        raise PrimeOverflow("sophie germain 2p+1", p)
    if cached_isprime(p) and cached_isprime(2 * p + 1):
        return True, str(p)
    return False, None


@classifier(
    family=Family.SAFE,
    label="Safe prime",
    description="Prime p where (p-1)/2 is also prime.",
    oeis="A005385",
    category=CATEGORY,
)
def is_safe_prime(p: int) -> tuple[bool, str | None]:
    if p < 3 or p % 2 == 0:
        return False, None
    if cached_isprime(p) and cached_isprime((p - 1) // 2):
        return True, str(p)
    return False, None


@classifier(
    family=Family.WILSON,
    label="Wilson prime",
    description="Prime p with (p-1)! ≡ -1 (mod p²).",
    oeis="A007540",
    category=CATEGORY,
)
def is_wilson_prime(p: int) -> tuple[bool, str | None]:
    """
    Wilson prime: the Wilson quotient ((p-1)! + 1) / p is itself divisible by p.
    Only 5, 13 and 563 are known; the factorial walk is O(p), so it is
    only attempted up to WILSON_LIMIT.
    """
    if p < 2 or p > WILSON_LIMIT or not cached_isprime(p):
        return False, None
    mod = p * p
    fact = 1
    for i in range(2, p):
        fact = fact * i % mod
    if (fact + 1) % mod == 0:
        return True, str(p)
    return False, None
