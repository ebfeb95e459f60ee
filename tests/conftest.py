# tests/conftest.py
from __future__ import annotations

import pytest

from primefam import runtime
from primefam.cache import PRIME_CACHE
from primefam.scanner import clear_caches


@pytest.fixture(autouse=True)
def isolated_engine(tmp_path, monkeypatch):
    """Private workspace, default runtime and empty caches for every test."""
    monkeypatch.setenv("PRIMEFAM_HOME", str(tmp_path / "workspace"))
    runtime.reset()
    clear_caches()
    PRIME_CACHE.resize(0)
    yield
    runtime.reset()
    clear_caches()
    PRIME_CACHE.resize(0)
