# -----------------------------------------------------------------------------
#  utility.py
#  Shared constants, error types and digit helpers
# -----------------------------------------------------------------------------

from __future__ import annotations

import re
import shutil
import sys

from colorama import Fore, Style

from primefam.runtime import current as _rt_current

# Fixed-width model: every candidate and derived value must fit an unsigned 64-bit word.
U64_MAX = 2**64 - 1
HALF_MAX = U64_MAX // 2


class UserInputError(Exception):
    pass


class PrimeError(Exception):
    """Base class for deterministic arithmetic failures inside the engine."""


class PrimeOverflow(PrimeError, OverflowError):
    """An arithmetic step would leave the representable range."""

    def __init__(self, label: str, value: int | None = None):
        self.label = label
        self.value = value
        if value is None:
            super().__init__(f"overflow in {label}")
        else:
            super().__init__(f"overflow in {label} (value {value})")


class ExecutionError(PrimeError, ValueError):
    """A derived digit string did not parse back into a valid candidate."""


def _token(name: str) -> str:
    return re.sub(r"[^A-Za-z0-9]+", "_", name).upper().strip("_")


def parse_candidate(text: str, label: str = "derived value") -> int:
    """Parse a decimal digit string back into a candidate or raise ExecutionError."""
    try:
        value = int(text, 10)
    except ValueError:
        raise ExecutionError(f"{label}: {text!r} is not a decimal integer") from None
    if value < 0 or value > U64_MAX:
        raise ExecutionError(f"{label}: {text} does not fit in 64 bits")
    return value


def reverse_digits(n: int) -> int:
    return parse_candidate(str(n)[::-1], "digit reversal")


def is_palindrome(n: int) -> bool:
    s = str(n)
    return s == s[::-1]


def digit_rotations(n: int, *, leading_zero: str = "parse") -> list[int] | None:
    """
    Non-trivial cyclic rotations of the decimal digits of n, in order.

    Rotation 0 (n itself) is not included. A rotation starting with '0'
    parses as the shorter integer in "parse" mode; in "reject" mode the
    whole rotation set is refused and None is returned.
    """
    if leading_zero not in ("parse", "reject"):
        raise UserInputError(f"unknown leading-zero mode: {leading_zero!r}")
    s = str(n)
    out: list[int] = []
    for i in range(1, len(s)):
        rot = s[i:] + s[:i]
        if rot[0] == "0" and leading_zero == "reject":
            return None
        out.append(parse_candidate(rot, "digit rotation"))
    return out


def digit_square_sum(n: int) -> int:
    total = 0
    while n > 0:
        n, d = divmod(n, 10)
        total += d * d
    return total


def get_terminal_width(default=80):
    try:
        return shutil.get_terminal_size((default, 24)).columns
    except Exception:
        return default


# --- Debug output -------------------------------------------------------------

def debug_enabled() -> bool:
    return bool(getattr(_rt_current(), "debug", False))


def debug_line(msg: str, *, status: str | None = None) -> None:
    """Emit one colour-coded [debug] line to STDERR (only in debug mode)."""
    if not debug_enabled():
        return
    if status == "OK":
        stat = f"{Fore.GREEN}{Style.BRIGHT}OK  {Style.RESET_ALL} "
    elif status == "STOP":
        stat = f"{Fore.YELLOW}{Style.BRIGHT}STOP{Style.RESET_ALL} "
    elif status == "ERR":
        stat = f"{Fore.RED}{Style.BRIGHT}ERR {Style.RESET_ALL} "
    else:
        stat = ""
    sys.stderr.write(f"{Style.DIM}[debug]{Style.RESET_ALL} {stat}{msg}\n")
    sys.stderr.flush()
