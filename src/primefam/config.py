# src/primefam/config.py
from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Any

try:
    import tomllib as toml
except ImportError:
    import tomli as toml  # type: ignore

from primefam.oracle import BACKENDS
from primefam.utility import UserInputError
from primefam.workspace import ensure_workspace_seeded, workspace_dir

META_SECTION = "_PROFILE_"
CURRENT_MARKER = ".current"
LEADING_ZERO_MODES = ("parse", "reject")


@dataclass
class Settings:
    """
    One loaded profile. `data` holds every TOML section except
    [_PROFILE_], whose name/description become attributes.
    """
    data: dict[str, Any]
    name: str
    description: str
    source: Path | None = None

    def as_dict(self) -> dict[str, Any]:
        return self.data


def _profiles_dir() -> Path:
    return workspace_dir() / "profiles"


def _profile_path(name: str) -> Path:
    return _profiles_dir() / f"{_strip_suffix(name)}.toml"


def _strip_suffix(name: str) -> str:
    name = (name or "").strip()
    return name[:-5] if name.lower().endswith(".toml") else name


def _read_profile(path: Path) -> dict[str, Any]:
    """Parse one profile file; a syntax error becomes a one-line UserInputError."""
    try:
        return toml.loads(path.read_text(encoding="utf-8"))
    except toml.TOMLDecodeError as e:
        # tomllib puts "(at line X, column Y)" in the message itself
        raise UserInputError(f"reading {path.name}: {e}") from None


def _split_meta(raw: dict[str, Any], fallback_name: str) -> tuple[dict[str, Any], str, str]:
    meta = raw.get(META_SECTION) or {}
    data = {k: v for k, v in raw.items() if k != META_SECTION}
    name = str(meta.get("name") or fallback_name)
    description = " ".join(str(meta.get("description") or "").split()) or "(no description)"
    return data, name, description


def _check_choice(source: str, key: str, value: Any, allowed: tuple[str, ...]) -> None:
    if value not in allowed:
        raise UserInputError(f"{source}: {key} must be one of {', '.join(allowed)}, got {value!r}.")


def _validate(data: dict[str, Any], source: str) -> None:
    """Reject engine values the scanner cannot honour before they reach it."""
    _check_choice(source, "ENGINE.BACKEND", (data.get("ENGINE") or {}).get("BACKEND", "trial"), BACKENDS)
    _check_choice(source, "CIRCULAR.LEADING_ZERO",
                  (data.get("CIRCULAR") or {}).get("LEADING_ZERO", "parse"), LEADING_ZERO_MODES)

    bound = (data.get("CACHE") or {}).get("MAX_ENTRIES", 0)
    if isinstance(bound, bool) or not isinstance(bound, int) or bound < 0:
        raise UserInputError(f"{source}: CACHE.MAX_ENTRIES must be a non-negative integer, got {bound!r}.")

    sep = (data.get("SESSION") or {}).get("SEPARATOR", ", ")
    if not isinstance(sep, str):
        raise UserInputError(f"{source}: SESSION.SEPARATOR must be a string, got {sep!r}.")


# --- Public API ------------------------------------------------------------

def list_all_profiles() -> list[str]:
    """Profile names (file stems) in the workspace, seeding it first."""
    ensure_workspace_seeded()
    return sorted(p.stem for p in _profiles_dir().glob("*.toml"))


def list_profiles_with_descriptions() -> list[tuple[str, str]]:
    """[(name, description), ...]; a file that does not parse is listed, not raised."""
    out: list[tuple[str, str]] = []
    for stem in list_all_profiles():
        try:
            _, name, desc = _split_meta(_read_profile(_profile_path(stem)), stem)
        except UserInputError:
            name, desc = stem, "(unreadable profile)"
        out.append((name, desc))
    return sorted(out, key=lambda item: item[0].lower())


def has_profile(name: str) -> bool:
    return bool(_strip_suffix(name)) and _profile_path(name).is_file()


def load_settings(name: str | None = None) -> Settings:
    """Load and validate a workspace profile ('default' when no name is given)."""
    name = _strip_suffix(name or "default")
    path = _profile_path(name)
    if not path.is_file():
        raise UserInputError(f"Profile '{name}' not found at {path}")

    data, resolved, description = _split_meta(_read_profile(path), path.stem)
    _validate(data, path.name)
    return Settings(data=data, name=resolved, description=description, source=path)


# --- Last used profile -----------------------------------------------------

def _marker() -> Path:
    pdir = _profiles_dir()
    pdir.mkdir(parents=True, exist_ok=True)
    return pdir / CURRENT_MARKER


def read_current_profile() -> str | None:
    try:
        return _strip_suffix(_marker().read_text(encoding="utf-8")) or None
    except FileNotFoundError:
        return None


def write_current_profile(name: str) -> None:
    _marker().write_text(_strip_suffix(name), encoding="utf-8")
