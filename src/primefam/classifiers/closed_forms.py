# -----------------------------------------------------------------------------
#  closed_forms.py
#  Prime families given by a closed-form expression in p or n
# -----------------------------------------------------------------------------

from __future__ import annotations

from primefam.cache import cached_isprime
from primefam.registry import Family, classifier
from primefam.utility import U64_MAX, PrimeOverflow

CATEGORY = "Closed-form primes"

MERSENNE_MAX_EXPONENT = 63
FERMAT_MAX_INDEX = 6
FERMAT_MAX_EXPONENT = 63


@classifier(
    family=Family.MERSENNE,
    label="Mersenne prime",
    description="2^p - 1 is prime (candidate is the exponent p, match is the Mersenne number).",
    oeis="A000668",
    category=CATEGORY,
)
def is_mersenne_exponent(p: int) -> tuple[bool, str | None]:
    """
    Exponents above 63 cannot produce a 64-bit Mersenne number and are
    simply not members; no error is raised.
    """
    if p > MERSENNE_MAX_EXPONENT:
        return False, None
    m = (1 << p) - 1
    if cached_isprime(m):
        return True, str(m)
    return False, None


@classifier(
    family=Family.FERMAT,
    label="Fermat prime",
    description="F_p = 2^(2^p) + 1 is prime (candidate is the index p).",
    oeis="A019434",
    category=CATEGORY,
)
def is_fermat_index(p: int) -> tuple[bool, str | None]:
    """
    Indices above 6 are not members. F_6 needs the exponent 2^6 = 64,
    which is past the largest 64-bit shift (63) and raises PrimeOverflow.
    """
    if p > FERMAT_MAX_INDEX:
        return False, None
    exponent = 1 << p
    if exponent > FERMAT_MAX_EXPONENT:
        raise PrimeOverflow("fermat exponent 2^p", exponent)
    f = (1 << exponent) + 1
    if cached_isprime(f):
        return True, str(f)
    return False, None


@classifier(
    family=Family.CUBAN,
    label="Cuban prime",
    description="3p² + 3p + 1 is prime (difference of consecutive cubes).",
    oeis="A002407",
    category=CATEGORY,
)
def is_cuban_index(p: int) -> tuple[bool, str | None]:
    three_sq = 3 * p * p
    if three_sq > U64_MAX:
        raise PrimeOverflow("cuban 3p²", p)
    v = three_sq + 3 * p + 1
    if v > U64_MAX:
        raise PrimeOverflow("cuban 3p²+3p+1", p)
    if cached_isprime(v):
        return True, str(v)
    return False, None


@classifier(
    family=Family.EBL,
    label="Euler prime (p² + p + 41)",
    description="Euler's prime-generating polynomial p² + p + 41 gives a prime.",
    oeis="A005846",
    category=CATEGORY,
)
def is_euler_index(p: int) -> tuple[bool, str | None]:
    if p > U64_MAX - 41:
        raise PrimeOverflow("euler p²+p+41", p)
    v = p * p + p + 41
    if v > U64_MAX:
        raise PrimeOverflow("euler p²+p+41", p)
    if cached_isprime(v):
        return True, str(v)
    return False, None


@classifier(
    family=Family.PROTH,
    label="Proth prime",
    description="Prime of the form k·2^n + 1 with k odd and k < 2^n.",
    oeis="A080076",
    category=CATEGORY,
)
def is_proth_prime(p: int) -> tuple[bool, str | None]:
    if p < 3:
        return False, None
    m = p - 1
    n = (m & -m).bit_length() - 1   # exponent of 2 in p-1
    k = m >> n
    if n >= 1 and k < (1 << n) and cached_isprime(p):
        return True, str(p)
    return False, None


def _matches_form(p: int, form) -> bool:
    """True when form(n) == p for some n >= 1; form must be increasing in n."""
    n = 1
    while True:
        v = form(n)
        if v >= p:
            return v == p
        n += 1


@classifier(
    family=Family.CULLEN,
    label="Cullen prime",
    description="Prime of the form n·2^n + 1.",
    oeis="A050920",
    category=CATEGORY,
)
def is_cullen_prime(p: int) -> tuple[bool, str | None]:
    if p < 3 or not _matches_form(p, lambda n: n * (1 << n) + 1):
        return False, None
    if cached_isprime(p):
        return True, str(p)
    return False, None


@classifier(
    family=Family.WOODALL,
    label="Woodall prime",
    description="Prime of the form n·2^n - 1.",
    oeis="A050918",
    category=CATEGORY,
)
def is_woodall_prime(p: int) -> tuple[bool, str | None]:
    if p < 1 or not _matches_form(p, lambda n: n * (1 << n) - 1):
        return False, None
    if cached_isprime(p):
        return True, str(p)
    return False, None


@classifier(
    family=Family.THABIT,
    label="Thabit prime",
    description="Prime of the form 3·2^n - 1 (n ≥ 1).",
    oeis="A007505",
    category=CATEGORY,
)
def is_thabit_prime(p: int) -> tuple[bool, str | None]:
    if p < 5 or not _matches_form(p, lambda n: 3 * (1 << n) - 1):
        return False, None
    if cached_isprime(p):
        return True, str(p)
    return False, None


@classifier(
    family=Family.EUCLID,
    label="Euclid prime",
    description="Prime of the form p_k# + 1 (primorial plus one).",
    oeis="A018239",
    category=CATEGORY,
)
def is_euclid_prime(p: int) -> tuple[bool, str | None]:
    if p < 3:
        return False, None
    primorial = 1
    q = 2
    while primorial + 1 < p:
        if cached_isprime(q):
            primorial *= q
        q += 1
    if primorial + 1 == p and cached_isprime(p):
        return True, str(p)
    return False, None
