# tests/test_config.py
from __future__ import annotations

import pytest

from primefam import config as CONFIG
from primefam.runtime import APPLY, CFG, current
from primefam.utility import UserInputError
from primefam.workspace import ensure_workspace_seeded, seed_workspace, workspace_dir


def _write_profile(name: str, text: str) -> None:
    ensure_workspace_seeded()
    (workspace_dir() / "profiles" / f"{name}.toml").write_text(text, encoding="utf-8")


def test_workspace_is_seeded_with_packaged_profiles():
    root, seeded, copied = ensure_workspace_seeded()
    assert seeded
    assert copied["profiles"] >= 2
    assert (root / "profiles" / "default.toml").exists()
    # second call copies nothing
    _, seeded_again, _ = ensure_workspace_seeded()
    assert not seeded_again


def test_overwrite_restores_packaged_profile():
    _write_profile("default", "[ENGINE]\nBACKEND = \"sympy\"\n")
    _, copied = seed_workspace(overwrite=True)
    assert copied["profiles"] >= 2
    assert CONFIG.load_settings("default").data["ENGINE"]["BACKEND"] == "trial"


def test_profiles_are_listed_with_descriptions():
    names = CONFIG.list_all_profiles()
    assert "default" in names and "fast" in names
    described = dict(CONFIG.list_profiles_with_descriptions())
    assert described["fast"].startswith("sympy")


def test_load_settings_strips_profile_metadata():
    ensure_workspace_seeded()
    s = CONFIG.load_settings("default")
    assert s.name == "default"
    assert "_PROFILE_" not in s.data
    assert s.data["CIRCULAR"]["LEADING_ZERO"] == "parse"
    assert s.source.name == "default.toml"


def test_apply_makes_keys_visible_through_cfg():
    ensure_workspace_seeded()
    APPLY(CONFIG.load_settings("fast"))
    assert current().profile_name == "fast"
    assert CFG("ENGINE.BACKEND") == "sympy"
    assert CFG("CACHE.MAX_ENTRIES") == 1_000_000
    assert CFG("NO.SUCH.KEY", "fallback") == "fallback"


def test_behaviour_debug_switches_runtime_debug():
    APPLY({"BEHAVIOUR": {"DEBUG": True}})
    assert current().debug is True
    APPLY({"BEHAVIOUR": {"DEBUG": False}})
    assert current().debug is False


def test_missing_profile_is_user_error():
    ensure_workspace_seeded()
    assert not CONFIG.has_profile("nope")
    with pytest.raises(UserInputError):
        CONFIG.load_settings("nope")


@pytest.mark.parametrize("body", [
    "[ENGINE]\nBACKEND = \"abacus\"\n",
    "[CIRCULAR]\nLEADING_ZERO = \"strip\"\n",
    "[CACHE]\nMAX_ENTRIES = -1\n",
    "[CACHE]\nMAX_ENTRIES = \"many\"\n",
])
def test_invalid_values_are_rejected(body):
    _write_profile("broken", body)
    with pytest.raises(UserInputError):
        CONFIG.load_settings("broken")


def test_malformed_toml_reports_location():
    _write_profile("garbled", "[ENGINE\nBACKEND = \n")
    with pytest.raises(UserInputError) as exc:
        CONFIG.load_settings("garbled")
    assert "garbled.toml" in str(exc.value)
    described = dict(CONFIG.list_profiles_with_descriptions())
    assert described["garbled"] == "(unreadable profile)"


def test_profile_without_metadata_uses_file_name():
    _write_profile("bare", "[SESSION]\nSEPARATOR = \"; \"\n")
    s = CONFIG.load_settings("bare")
    assert s.name == "bare"
    assert s.description == "(no description)"


def test_current_profile_round_trip():
    ensure_workspace_seeded()
    assert CONFIG.read_current_profile() is None
    CONFIG.write_current_profile("fast.toml")
    assert CONFIG.read_current_profile() == "fast"
