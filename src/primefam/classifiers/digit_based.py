# -----------------------------------------------------------------------------
#  digit_based.py
#  Prime families defined by decimal digits
# -----------------------------------------------------------------------------

from __future__ import annotations

from primefam.cache import cached_isprime
from primefam.registry import Family, classifier
from primefam.runtime import CFG
from primefam.utility import digit_rotations, digit_square_sum, is_palindrome, reverse_digits

CATEGORY = "Digit-based primes"


@classifier(
    family=Family.PALINDROMIC,
    label="Palindromic prime",
    description="Prime that reads the same backwards in base 10.",
    oeis="A002385",
    category=CATEGORY,
)
def is_palindromic_prime(p: int) -> tuple[bool, str | None]:
    if is_palindrome(p) and cached_isprime(p):
        return True, str(p)
    return False, None


@classifier(
    family=Family.EMIRP,
    label="Emirp",
    description="Prime that is a different prime when its digits are reversed.",
    oeis="A006567",
    category=CATEGORY,
)
def is_emirp(p: int) -> tuple[bool, str | None]:
    """
    Palindromes are excluded by r != p. The reversal is parsed back as a
    candidate and raises ExecutionError if it does not fit.
    """
    r = reverse_digits(p)
    if r != p and cached_isprime(p) and cached_isprime(r):
        return True, str(p)
    return False, None


@classifier(
    family=Family.CIRCULAR,
    label="Circular prime",
    description="Every cyclic rotation of the digits is prime.",
    oeis="A068652",
    category=CATEGORY,
)
def is_circular_prime(p: int) -> tuple[bool, str | None]:
    """
    Rotation 0 is p itself and is not re-tested. Rotations with a leading
    zero follow CIRCULAR.LEADING_ZERO: "parse" tests them as the shorter
    integer (103 -> 031 -> 31), "reject" disqualifies p.
    """
    mode = CFG("CIRCULAR.LEADING_ZERO", "parse")
    rotations = digit_rotations(p, leading_zero=mode)
    if rotations is None or not cached_isprime(p):
        return False, None
    if all(cached_isprime(r) for r in rotations):
        return True, str(p)
    return False, None


@classifier(
    family=Family.HAPPY,
    label="Happy prime",
    description="Prime whose digit-square-sum iteration reaches 1.",
    oeis="A035497",
    category=CATEGORY,
)
def is_happy_prime(p: int) -> tuple[bool, str | None]:
    if p < 2:
        return False, None
    seen = set()
    n = p
    while n != 1 and n not in seen:
        seen.add(n)
        n = digit_square_sum(n)
    if n == 1 and cached_isprime(p):
        return True, str(p)
    return False, None
