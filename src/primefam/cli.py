# src/primefam/cli.py

"""
Prime Families - members of prime families over a range

Description:
    Scans an inclusive range of candidates and prints the members of one
    prime family (twin, Mersenne, Sophie Germain, circular, ...). The scan
    runs in the background with a live progress bar; Ctrl-C stops it at the
    next candidate and keeps what was found.

usage: see primefam -h
"""

from __future__ import annotations

import argparse
import faulthandler
import os
import sys
import textwrap
import threading
import traceback
from importlib.resources import files as pkg_files

from colorama import Fore, Style
from colorama import init as colorama_init

from primefam import __version__ as _ver
from primefam import config as CONFIG
from primefam.cache import PRIME_CACHE, configure_cache
from primefam.expreval import parse_bound
from primefam.progress import Progress
from primefam.registry import Family, discover, discover_with_report
from primefam.runtime import APPLY, CFG, ensure_runtime_deps
from primefam.runtime import current as _rt_current
from primefam.scanner import compute
from primefam.session import start_scan
from primefam.utility import PrimeError, UserInputError, get_terminal_width
from primefam.workspace import ensure_workspace_seeded, seed_workspace, workspace_dir

POLL_INTERVAL = 0.05

EXIT_OK = 0
EXIT_SCAN_FAILED = 1
EXIT_BAD_INPUT = 2


def _dump(title: str, exc_type, exc, tb) -> None:
    sys.stderr.write(f"\n{Fore.RED}[{title}]{Style.RESET_ALL}\n")
    traceback.print_exception(exc_type, exc, tb, file=sys.stderr)
    sys.stderr.flush()


def _install_loud_error_handlers(debug: bool) -> None:
    """Under --debug: faulthandler plus full tracebacks from the main and scan threads."""
    if not debug:
        return
    faulthandler.enable()
    sys.excepthook = lambda t, e, tb: _dump("UNCAUGHT EXCEPTION", t, e, tb)
    threading.excepthook = lambda a: _dump(
        f"UNCAUGHT EXCEPTION in {getattr(a.thread, 'name', 'thread')}", a.exc_type, a.exc_value, a.exc_traceback
    )


def _print_user_error(msg: str) -> None:
    """One red line on stderr; messages from parse_bound already carry their prefix."""
    if not msg.startswith(("Invalid input:", "Error:")):
        msg = f"{Fore.RED}Error:{Style.RESET_ALL} {msg}"
    print(msg, file=sys.stderr)


def _print_scan_failure(e: BaseException) -> None:
    kind = "overflow" if isinstance(e, OverflowError) else "execution error"
    print(f"{Fore.RED}{Style.BRIGHT}Scan failed ({kind}):{Style.RESET_ALL} {e}", file=sys.stderr)


# ---- argparse ----
def _build_parser() -> argparse.ArgumentParser:

    epilog = textwrap.dedent("""\
    commands:
      list
          List all prime families.

      profiles
          List available profiles with their descriptions.

      init
          Create the workspace and copy packaged profiles if missing.

      init overwrite
          Meant for developers. Requires environment variable PRIMEFAM_DEV=1.
          Replaces all profiles in the workspace with the packaged ones.

      where
          Show the workspace and package paths.

    examples:
      primefam twin 2 1000
      primefam mersenne 2 31
      primefam circular 1 1e6 --profile fast
    """)

    p = argparse.ArgumentParser(
        prog="primefam",
        description="Prime families: members of twin, Mersenne, circular, ... families over a range",
        usage=(
            "primefam FAMILY START END [--profile NAME] [--sync] [--separator S] [--quiet] [--debug]\n"
            "       primefam list | profiles | init [overwrite] | where\n"
            "       primefam -h | --help\n"
        ),
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=epilog,
    )
    p.add_argument("items", nargs="*", metavar="FAMILY START END",
                   help="prime family name followed by the inclusive range bounds")
    p.add_argument("--profile", default=None, help="Profile to apply (default: last used, else 'default')")
    p.add_argument("--sync", action="store_true", help="Compute in the foreground without a progress bar")
    p.add_argument("--separator", default=None, help="Separator between matches (profile SESSION.SEPARATOR)")
    p.add_argument("--quiet", action="store_true", help="Suppress progress and summary output")
    p.add_argument("--debug", action="store_true", help="Show scan timings, cache size and tracebacks")
    p.add_argument("--version", action="version", version=f"%(prog)s {_ver}")

    return p


def main(argv=None) -> int:
    """Thin wrapper: catch friendly errors, hide tracebacks unless debug."""
    try:
        return _main_impl(argv)
    except UserInputError as e:
        _print_user_error(str(e))
        return EXIT_BAD_INPUT
    except KeyboardInterrupt:
        print("Aborted by user.", file=sys.stderr)
        return 130
    except Exception as e:
        debug = "--debug" in (argv if argv is not None else sys.argv)
        if debug:
            raise
        print(f"Unexpected error: {e.__class__.__name__}: {e}", file=sys.stderr)
        print("Run with --debug for a full traceback.", file=sys.stderr)
        return EXIT_SCAN_FAILED


def _select_profile_name(explicit: str | None) -> str:
    """
    Precedence:
      1) explicit --profile
      2) last used (from workspace)
      3) 'default'
    """
    if explicit:
        return explicit
    last = CONFIG.read_current_profile()
    if last and CONFIG.has_profile(last):
        return last
    return "default"


def _apply_profile(name: str, *, debug: bool) -> None:
    if not CONFIG.has_profile(name):
        available = ", ".join(CONFIG.list_all_profiles())
        raise UserInputError(f"Unknown profile: '{name}'. Available profiles: {available}")
    selected = CONFIG.load_settings(name)
    APPLY(selected)
    if debug:
        _rt_current().debug = True
    configure_cache()
    CONFIG.write_current_profile(name)
    if _rt_current().debug:
        print(f"[debug] active profile: {selected.name} ({selected.source})", file=sys.stderr)


def _show_family_list() -> None:
    index = discover()
    groups: dict[str, list[Family]] = {}
    for fam in index.funcs:
        groups.setdefault(index.categories.get(fam, "General"), []).append(fam)

    print(f"{Fore.YELLOW}Available prime families: {len(index.funcs)}{Style.RESET_ALL}\n")
    for cat in sorted(groups, key=str.lower):
        print(f"{Fore.CYAN}{cat}:{Style.RESET_ALL}")
        for fam in groups[cat]:
            name = fam.name.lower().replace("_", "-")
            desc = index.descriptions.get(fam, "")
            oeis = index.oeis.get(fam)
            tail = f" ({oeis})" if oeis else ""
            print(f"  {Fore.GREEN}{name:<16}{Style.RESET_ALL} {index.labels[fam]}: {desc}{tail}")
        print()


def _show_profiles() -> None:
    ensure_workspace_seeded()
    current = CONFIG.read_current_profile()
    for name, desc in CONFIG.list_profiles_with_descriptions():
        mark = "*" if name == current else " "
        print(f" {mark} {Fore.GREEN}{name:<12}{Style.RESET_ALL} {desc}")


def _debug_discovery() -> None:
    _, rep = discover_with_report()
    for name, cnt in rep.loaded:
        print(f"[discovery] {Fore.GREEN}OK{Style.RESET_ALL} {name}: {cnt} famil{'y' if cnt == 1 else 'ies'}",
              file=sys.stderr)
    for name, err in rep.failed:
        print(f"[discovery] {Fore.RED}FAIL{Style.RESET_ALL} {name}: {err}", file=sys.stderr)


def _run_streamed(fam: Family, start: int, end: int, *, separator: str | None, quiet: bool) -> int:
    session = start_scan(fam, start, end, separator=separator)
    bar = Progress(enabled=not quiet and bool(CFG("DISPLAY.PROGRESS_BAR", True)) and sys.stdout.isatty())
    label = f"{fam.value} [{session.start}, {session.end}]"
    try:
        while not session.wait(POLL_INTERVAL):
            bar.update(session.progress(), label, found=len(session.matches()))
    except KeyboardInterrupt:
        session.request_stop()
        session.wait()
    finally:
        bar.done()

    err = session.error()
    out = session.output()
    if out:
        print(out)
    if err is not None:
        _print_scan_failure(err)
        return EXIT_SCAN_FAILED

    if not quiet:
        n = len(session.matches())
        status = "stopped" if session.stop_requested() else "done"
        print(f"{Style.DIM}{status}: {n} match{'es' if n != 1 else ''} "
              f"for {fam.value} in [{session.start}, {session.end}]{Style.RESET_ALL}", file=sys.stderr)
    return EXIT_OK


def _run_sync(fam: Family, start: int, end: int, *, separator: str | None, quiet: bool) -> int:
    try:
        matches = compute(fam, start, end)
    except PrimeError as e:
        _print_scan_failure(e)
        return EXIT_SCAN_FAILED
    sep = separator if separator is not None else str(CFG("SESSION.SEPARATOR", ", "))
    if matches:
        print(sep.join(matches))
    if not quiet:
        print(f"{Style.DIM}done: {len(matches)} match{'es' if len(matches) != 1 else ''}{Style.RESET_ALL}",
              file=sys.stderr)
    return EXIT_OK


# ---- main ----
def _main_impl(argv=None) -> int:

    colorama_init()

    parser = _build_parser()
    args = parser.parse_args(argv)
    rt = _rt_current()
    rt.debug = bool(args.debug)

    _install_loud_error_handlers(args.debug)

    if not ensure_runtime_deps(strict=True):
        return EXIT_SCAN_FAILED

    items = list(args.items)
    command = items[0].lower() if items else None

    if command is None:
        parser.print_help()
        return EXIT_BAD_INPUT

    if command == "list":
        _show_family_list()
        return EXIT_OK

    if command == "profiles":
        _show_profiles()
        return EXIT_OK

    if command == "where":
        print(f"Workspace: {workspace_dir()}")
        print(f"Package:   {pkg_files('primefam')}")
        return EXIT_OK

    if command == "init":
        if len(items) == 2 and items[1] == "overwrite":
            if os.environ.get("PRIMEFAM_DEV") != "1":
                print("Refusing to overwrite: set PRIMEFAM_DEV=1 to enable developer overwrite.")
                return EXIT_BAD_INPUT
            ws, copied = seed_workspace(overwrite=True)
            print(f"Workspace ready at: {ws} (overwrote existing files)")
        else:
            ws, _, copied = ensure_workspace_seeded()
            print(f"Workspace ready at: {ws}")
        print(f"Copied -> profiles: {copied.get('profiles', 0)}")
        return EXIT_OK

    if len(items) != 3:
        parser.error("expected FAMILY START END")

    fam = Family.coerce(items[0])
    start = parse_bound(items[1])
    end = parse_bound(items[2])

    ensure_workspace_seeded()
    _apply_profile(_select_profile_name(args.profile), debug=args.debug)

    if _rt_current().debug:
        print(f"[debug] terminal width {get_terminal_width()}", file=sys.stderr)
        _debug_discovery()

    if args.sync:
        code = _run_sync(fam, start, end, separator=args.separator, quiet=args.quiet)
    else:
        code = _run_streamed(fam, start, end, separator=args.separator, quiet=args.quiet)

    if _rt_current().debug:
        info = PRIME_CACHE.info()
        print(f"[debug] primality cache: {info.size} entries, {info.hits} hits, {info.misses} misses",
              file=sys.stderr)
    return code


if __name__ == "__main__":
    raise SystemExit(main())
