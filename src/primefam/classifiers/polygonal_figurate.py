# -----------------------------------------------------------------------------
#  polygonal_figurate.py
#  Figurate-number prime families
# -----------------------------------------------------------------------------

from __future__ import annotations

from math import isqrt

from primefam.cache import cached_isprime
from primefam.registry import Family, classifier

CATEGORY = "Figurate primes"


@classifier(
    family=Family.CENTERED_HEX,
    label="Centered hexagonal prime",
    description="Prime of the form 3n(n-1) + 1 (hex number).",
    oeis="A002407",
    category=CATEGORY,
)
def is_centered_hexagonal_prime(p: int) -> tuple[bool, str | None]:
    """
    p = 3n(n-1) + 1  <=>  12p - 3 = (6n - 3)^2, so 12p - 3 must be an odd
    square whose root s satisfies s ≡ 3 (mod 6).
    """
    if p < 7:
        return False, None
    t = 12 * p - 3
    s = isqrt(t)
    if s * s != t or s % 6 != 3:
        return False, None
    if cached_isprime(p):
        return True, str(p)
    return False, None
