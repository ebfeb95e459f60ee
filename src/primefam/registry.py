# src/primefam/registry.py
from __future__ import annotations

import inspect
import pkgutil
from collections import OrderedDict
from collections.abc import Callable
from dataclasses import dataclass, field
from enum import Enum
from functools import lru_cache
from importlib import import_module

from primefam.utility import UserInputError, _token


class Family(Enum):
    MERSENNE = "Mersenne"
    SOPHIE_GERMAIN = "Sophie Germain"
    TWIN = "Twin"
    PALINDROMIC = "Palindromic"
    SEXY = "Sexy"
    COUSIN = "Cousin"
    EMIRP = "Emirp"
    SAFE = "Safe"
    CHEN = "Chen"
    CIRCULAR = "Circular"
    FERMAT = "Fermat"
    CUBAN = "Cuban"
    EBL = "Euler (Ebl)"
    PROTH = "Proth"
    CULLEN = "Cullen"
    WOODALL = "Woodall"
    THABIT = "Thabit"
    EUCLID = "Euclid"
    FIBONACCI = "Fibonacci"
    PERRIN = "Perrin"
    HAPPY = "Happy"
    WILSON = "Wilson"
    CENTERED_HEX = "Centered hexagonal"

    @classmethod
    def coerce(cls, value: Family | str) -> Family:
        """Accept a member or a name such as 'twin', 'SophieGermain', 'sophie-germain', 'euler'."""
        if isinstance(value, cls):
            return value
        if not isinstance(value, str):
            raise UserInputError(f"not a prime family: {value!r}")
        key = _token(value)
        squashed = key.replace("_", "")
        for fam in cls:
            if key in (fam.name, _token(fam.value)) or squashed == fam.name.replace("_", ""):
                return fam
        alias = _ALIASES.get(squashed)
        if alias is not None:
            return cls[alias]
        raise UserInputError(f"unknown prime family: {value!r}")


_ALIASES = {
    "EULER": "EBL",
    "SOPHIE": "SOPHIE_GERMAIN",
    "GERMAIN": "SOPHIE_GERMAIN",
    "HEX": "CENTERED_HEX",
    "CENTEREDHEXAGONAL": "CENTERED_HEX",
    "PALINDROME": "PALINDROMIC",
}


# --------------------- Discovery → Index (immutable) ----------------------

@dataclass
class Index:
    funcs: dict[Family, Callable]             # family -> classifier
    labels: dict[Family, str]                 # family -> display label
    categories: dict[Family, str]             # family -> category
    descriptions: dict[Family, str]           # family -> short description
    oeis: dict[Family, str | None]            # family -> A-code or None
    sources: dict[Family, str] = field(default_factory=dict)  # family -> module


@dataclass
class DiscoveryReport:
    loaded: list[tuple[str, int]] = field(default_factory=list)       # (module.name, count)
    failed: list[tuple[str, str]] = field(default_factory=list)       # (module.name, error)
    duplicates: list[tuple[str, str, str]] = field(default_factory=list)  # (family, module, kept module)
    missing: list[str] = field(default_factory=list)                  # family names without classifier


class RegistryError(RuntimeError):
    pass


def _is_classifier(obj) -> bool:
    return callable(obj) and getattr(obj, "__is_classifier__", False)


def _collect_from_module(mod) -> list[Callable[[int], object]]:
    out = []
    for _, o in inspect.getmembers(mod):
        if _is_classifier(o) and o.__module__ == mod.__name__:
            out.append(o)
    return out


# ---------- Decorator (only tags the function; no side effects) ----------

def classifier(*, family: Family, label: str, category: str = "General",
               description: str = "", oeis: str | None = None):
    def deco(fn: Callable[[int], object]):
        fn.__is_classifier__ = True
        fn.family = family
        fn.label = label
        fn.category = category
        fn.description = description
        fn.oeis = oeis
        return fn
    return deco


def discover_with_report(package: str = "primefam.classifiers") -> tuple[Index, DiscoveryReport]:
    """Import every module of `package` and index its classifiers by family."""
    report = DiscoveryReport()
    funcs: OrderedDict[Family, Callable] = OrderedDict()
    labels: dict[Family, str] = {}
    cats: dict[Family, str] = {}
    desc: dict[Family, str] = {}
    refs: dict[Family, str | None] = {}
    sources: dict[Family, str] = {}

    pkg = import_module(package)
    for info in sorted(pkgutil.iter_modules(pkg.__path__), key=lambda m: m.name):
        modname = f"{package}.{info.name}"
        try:
            mod = import_module(modname)
        except Exception as e:
            report.failed.append((modname, f"{type(e).__name__}: {e}"))
            continue
        found = 0
        for fn in _collect_from_module(mod):
            fam = fn.family
            if fam in funcs:
                report.duplicates.append((fam.name, modname, sources[fam]))
                continue
            funcs[fam] = fn
            labels[fam] = fn.label
            cats[fam] = getattr(fn, "category", "General")
            desc[fam] = fn.description
            refs[fam] = fn.oeis
            sources[fam] = modname
            found += 1
        report.loaded.append((modname, found))

    report.missing = [fam.name for fam in Family if fam not in funcs]

    # keep enum order for listings
    ordered = OrderedDict((fam, funcs[fam]) for fam in Family if fam in funcs)
    idx = Index(funcs=ordered, labels=labels, categories=cats, descriptions=desc, oeis=refs, sources=sources)
    return idx, report


@lru_cache(maxsize=1)
def discover() -> Index:
    """Index of all packaged classifiers; every Family must map to exactly one function."""
    idx, rep = discover_with_report()
    problems = []
    if rep.failed:
        problems.extend(f"{name}: {err}" for name, err in rep.failed)
    if rep.duplicates:
        problems.extend(f"{fam} defined in {mod} and {kept}" for fam, mod, kept in rep.duplicates)
    if rep.missing:
        problems.append("no classifier for " + ", ".join(rep.missing))
    if problems:
        raise RegistryError("classifier discovery failed: " + "; ".join(problems))
    return idx
