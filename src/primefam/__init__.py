from __future__ import annotations

from importlib.metadata import PackageNotFoundError
from importlib.metadata import version as _pkg_version

# Version
try:
    __version__ = _pkg_version("primefam")
except PackageNotFoundError:
    __version__ = "0+unknown"

# Public API re-exports
from .cache import cache_stats
from .classify import classify
from .config import has_profile, load_settings, read_current_profile
from .oracle import is_prime
from .registry import Family, discover
from .runtime import APPLY, CFG
from .scanner import ScanResult, clear_caches, compute, scan
from .session import ScanSession, start_scan
from .utility import ExecutionError, PrimeError, PrimeOverflow, UserInputError
from .workspace import workspace_dir

__all__ = [
    "APPLY",
    "CFG",
    "ExecutionError",
    "Family",
    "PrimeError",
    "PrimeOverflow",
    "ScanResult",
    "ScanSession",
    "UserInputError",
    "__version__",
    "cache_stats",
    "classify",
    "clear_caches",
    "compute",
    "discover",
    "has_profile",
    "is_prime",
    "load_settings",
    "read_current_profile",
    "scan",
    "start_scan",
    "workspace_dir"
]
