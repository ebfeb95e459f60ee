from __future__ import annotations

from typing import Any

from primefam.registry import Family, Index, discover
from primefam.utility import PrimeOverflow, UserInputError

FAMILY_CHECK_LIMIT = 1_000_000


def _coerce_result(res: Any) -> str | None:
    """Normalize classifier return (ok, detail) into match text or None."""
    if isinstance(res, tuple):
        if not res:
            return None
        ok, *rest = res
        detail = rest[0] if rest else None
        return str(detail) if ok and detail is not None else None
    return str(res) if res else None


def classify(family: Family | str, p: int, index: Index | None = None) -> str | None:
    """
    Return the match text for candidate p in `family`, or None.

    Candidates above FAMILY_CHECK_LIMIT are rejected with PrimeOverflow for
    every family, before any family-specific arithmetic runs. Family rules
    may raise their own PrimeOverflow / ExecutionError; nothing is caught here.
    """
    fam = Family.coerce(family)
    if isinstance(p, bool) or not isinstance(p, int):
        raise UserInputError(f"candidate must be an integer, got {type(p).__name__}")
    if p > FAMILY_CHECK_LIMIT:
        raise PrimeOverflow("prime family check", p)
    if p < 0:
        raise UserInputError(f"candidate must be non-negative, got {p}")

    idx = index or discover()
    fn = idx.funcs[fam]
    return _coerce_result(fn(p))
