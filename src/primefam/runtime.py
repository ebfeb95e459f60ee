# src/primefam/runtime.py
from __future__ import annotations

from collections.abc import Mapping
from contextvars import ContextVar
from dataclasses import dataclass, field
from importlib.util import find_spec
from typing import Any

from colorama import Fore, Style

_MISSING = object()


@dataclass
class Runtime:
    """Active profile for the current context: its settings plus the debug switch."""
    profile_name: str = "default"
    settings: dict[str, Any] = field(default_factory=dict)
    debug: bool = False  # [debug] lines and full tracebacks

    def apply(self, settings: Any) -> None:
        """
        Install a profile. Accepts config.Settings or a plain nested mapping
        ({"ENGINE": {"BACKEND": "sympy"}}). BEHAVIOUR.DEBUG, when present,
        switches debug output on or off.
        """
        if isinstance(settings, Mapping):
            self.profile_name = "custom"
            data = settings
        else:
            self.profile_name = str(getattr(settings, "name", None) or "default")
            data = settings.as_dict()
        self.settings = {k: dict(v) if isinstance(v, Mapping) else v for k, v in data.items()}

        dbg = self.get("BEHAVIOUR.DEBUG")
        if isinstance(dbg, bool):
            self.debug = dbg

    def get(self, key: str, default: Any = None) -> Any:
        """Dotted lookup, e.g. 'CIRCULAR.LEADING_ZERO'; default when any part is missing."""
        node: Any = self.settings
        for part in key.split(".") if key else ():
            node = node.get(part, _MISSING) if isinstance(node, Mapping) else _MISSING
            if node is _MISSING:
                return default
        return node if key else default


# --- Context management ---

_current_runtime: ContextVar[Runtime | None] = ContextVar("primefam_runtime", default=None)


def current() -> Runtime:
    rt = _current_runtime.get()
    if rt is None:
        rt = Runtime()
        _current_runtime.set(rt)
    return rt


def reset() -> None:
    """Drop the active runtime; the next current() starts from defaults."""
    _current_runtime.set(None)


def APPLY(settings: Any) -> None:
    current().apply(settings)


def CFG(key: str, default: Any = None) -> Any:
    return current().get(key, default)


# ---- Dependency check --------------------------------------------------------

REQUIRED = ("colorama", "sympy")


def ensure_runtime_deps(strict: bool = True) -> bool:
    """
    True when every REQUIRED module can be found (find_spec, no import).
    Otherwise print the pip command to fix it and return `not strict`.
    """
    missing = [name for name in REQUIRED if find_spec(name) is None]
    if not missing:
        return True
    print(
        f"{Fore.RED}{Style.BRIGHT}Missing dependencies:{Style.RESET_ALL} {', '.join(missing)}\n"
        f"Install with: {Fore.YELLOW}pip install {' '.join(missing)}{Style.RESET_ALL}"
    )
    return not strict
