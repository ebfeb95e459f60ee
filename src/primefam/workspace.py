# src/primefam/workspace.py
from __future__ import annotations

import os
import shutil
from importlib.resources import as_file
from importlib.resources import files as pkg_files
from pathlib import Path

SUBDIRS = ("profiles",)
ENV_HOME = "PRIMEFAM_HOME"


def workspace_dir() -> Path:
    """$PRIMEFAM_HOME if set, else ~/Documents/Primefam."""
    override = os.environ.get(ENV_HOME)
    base = Path(override).expanduser() if override else Path.home() / "Documents" / "Primefam"
    return base.resolve()


def _packaged_profiles(src: Path):
    # user-visible profiles only: *.toml, no editor backups or dotfiles
    for p in sorted(src.glob("*.toml")):
        if p.is_file() and not p.name.startswith("."):
            yield p


def _seed_profiles(dst: Path, *, overwrite: bool) -> int:
    dst.mkdir(parents=True, exist_ok=True)
    copied = 0
    with as_file(pkg_files("primefam") / "profiles") as real:
        for p in _packaged_profiles(Path(real)):
            target = dst / p.name
            if target.exists() and not overwrite:
                continue
            shutil.copy2(p, target)
            copied += 1
    return copied


def seed_workspace(*, overwrite: bool = False) -> tuple[Path, dict[str, int]]:
    """
    Copy the packaged profiles into the workspace.

    overwrite=False keeps files the user already has; overwrite=True
    replaces them (developer use, guarded in the CLI).
    Returns (workspace_path, {"profiles": files_copied}).
    """
    root = workspace_dir()
    return root, {"profiles": _seed_profiles(root / "profiles", overwrite=overwrite)}


def ensure_workspace_seeded() -> tuple[Path, bool, dict[str, int]]:
    """Seed if needed; the bool tells whether anything was copied."""
    root, copied = seed_workspace(overwrite=False)
    return root, any(copied.values()), copied
