# tests/test_cli.py
from __future__ import annotations

import pytest

from primefam import cli
from primefam import config as CONFIG


@pytest.fixture(autouse=True)
def plain_console(monkeypatch):
    # keep pytest's capture streams unwrapped
    monkeypatch.setattr(cli, "colorama_init", lambda: None)


def test_sync_scan_prints_matches(capsys):
    assert cli.main(["twin", "2", "20", "--sync", "--quiet"]) == 0
    out = capsys.readouterr().out
    assert out == "(3,5), (5,7), (11,13), (17,19)\n"


def test_streamed_scan_prints_matches(capsys):
    assert cli.main(["twin", "2", "20", "--quiet"]) == 0
    assert capsys.readouterr().out == "(3,5), (5,7), (11,13), (17,19)\n"


def test_separator_and_expression_bounds(capsys):
    assert cli.main(["mersenne", "2", "2**3 + 2", "--sync", "--quiet", "--separator", " "]) == 0
    assert capsys.readouterr().out == "3 7 31 127\n"


def test_summary_goes_to_stderr(capsys):
    assert cli.main(["cousin", "1", "50"]) == 0
    captured = capsys.readouterr()
    assert "(3,7)" in captured.out
    assert "6 matches" in captured.err


def test_zero_matches_prints_nothing(capsys):
    assert cli.main(["mersenne", "64", "100", "--quiet"]) == 0
    assert capsys.readouterr().out == ""


@pytest.mark.parametrize("extra", [[], ["--sync"]])
def test_scan_failure_exits_one(capsys, extra):
    assert cli.main(["fermat", "0", "10", "--quiet", *extra]) == 1
    captured = capsys.readouterr()
    assert "Scan failed (overflow)" in captured.err


def test_family_cap_is_a_scan_failure(capsys):
    assert cli.main(["twin", "999999", "1000001", "--sync", "--quiet"]) == 1
    assert "prime family check" in capsys.readouterr().err


@pytest.mark.parametrize("argv", [
    ["nosuch", "1", "10"],
    ["twin", "1", "x"],
    ["twin", "-3", "10"],
    ["twin", "0", "2**64"],
    ["twin", "1", "10", "--profile", "missing"],
])
def test_bad_input_exits_two(capsys, argv):
    assert cli.main(argv) == 2
    captured = capsys.readouterr()
    assert captured.out == ""
    assert captured.err.strip()


def test_wrong_arity_is_argparse_error():
    with pytest.raises(SystemExit) as exc:
        cli.main(["twin", "1"])
    assert exc.value.code == 2


def test_no_arguments_prints_help(capsys):
    assert cli.main([]) == 2
    assert "usage:" in capsys.readouterr().out


def test_list_shows_every_family(capsys):
    assert cli.main(["list"]) == 0
    out = capsys.readouterr().out
    assert "Available prime families: 23" in out
    for name in ("twin", "sophie-germain", "centered-hex", "ebl"):
        assert name in out


def test_profile_choice_is_remembered(capsys):
    assert cli.main(["twin", "2", "10", "--sync", "--quiet", "--profile", "fast"]) == 0
    assert CONFIG.read_current_profile() == "fast"
    assert cli.main(["profiles"]) == 0
    assert "* " in capsys.readouterr().out


def test_init_and_where(capsys, monkeypatch):
    assert cli.main(["init"]) == 0
    assert "Workspace ready at:" in capsys.readouterr().out
    monkeypatch.delenv("PRIMEFAM_DEV", raising=False)
    assert cli.main(["init", "overwrite"]) == 2
    monkeypatch.setenv("PRIMEFAM_DEV", "1")
    assert cli.main(["init", "overwrite"]) == 0
    assert cli.main(["where"]) == 0
    assert "Workspace:" in capsys.readouterr().out
