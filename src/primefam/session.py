# src/primefam/session.py
from __future__ import annotations

import contextvars
import threading

from primefam.registry import Family
from primefam.runtime import CFG
from primefam.scanner import ScanResult, normalize_range, scan
from primefam.utility import PrimeError, debug_line

DEFAULT_SEPARATOR = ", "


class ScanSession:
    """
    One background scan with pollable progress and output.

    Usage:
        s = start_scan("twin", 2, 10_000)
        while not s.done():
            draw(s.progress(), s.output())
        s.request_stop()    # optional, takes effect at the next candidate

    Each launch owns a fresh session object, so a worker left over from an
    earlier scan can only ever write into its own state.
    """

    def __init__(self, family: Family | str, start: int, end: int, *, separator: str | None = None):
        self.family = Family.coerce(family)
        self.start, self.end = normalize_range(start, end)
        self.separator = separator if separator is not None else str(CFG("SESSION.SEPARATOR", DEFAULT_SEPARATOR))

        self._lock = threading.Lock()
        self._stop = threading.Event()
        self._finished = threading.Event()
        self._matches: list[str] = []
        self._progress = 0.0
        self._error: BaseException | None = None
        self._result: ScanResult | None = None
        self._thread: threading.Thread | None = None

    # ---- lifecycle ----

    def launch(self) -> ScanSession:
        with self._lock:
            if self._thread is not None:
                raise RuntimeError("scan session already started")
            # worker sees the launching thread's profile (contextvars do not cross threads)
            ctx = contextvars.copy_context()
            self._thread = threading.Thread(
                target=ctx.run,
                args=(self._run,),
                name=f"primefam-scan-{self.family.name.lower()}",
                daemon=True,
            )
        self._thread.start()
        return self

    def _run(self) -> None:
        try:
            self._result = scan(
                self.family,
                self.start,
                self.end,
                cancel=self._stop,
                on_match=self._deliver,
                on_progress=self._advance,
            )
        except PrimeError as e:
            # progress stays where it stopped; output keeps the last consistent state
            with self._lock:
                self._error = e
            self._finished.set()
            return
        except Exception as e:
            with self._lock:
                self._error = e
            self._finished.set()
            raise

        with self._lock:
            self._progress = 1.0
        if self._result.cancelled:
            debug_line(f"session {self.family.name} stopped after {self._result.scanned} candidate(s)", status="STOP")
        self._finished.set()

    # ---- worker callbacks ----

    def _deliver(self, text: str) -> None:
        with self._lock:
            if self._stop.is_set():
                return
            self._matches.append(text)

    def _advance(self, done: int, total: int) -> None:
        frac = min(done / total, 1.0) if total else 1.0
        with self._lock:
            if frac > self._progress:
                self._progress = frac

    # ---- consumer side ----

    def progress(self) -> float:
        with self._lock:
            return self._progress

    def output(self) -> str:
        with self._lock:
            return self.separator.join(self._matches)

    def matches(self) -> list[str]:
        with self._lock:
            return list(self._matches)

    def request_stop(self) -> None:
        with self._lock:
            self._stop.set()

    def stop_requested(self) -> bool:
        return self._stop.is_set()

    def done(self) -> bool:
        return self._finished.is_set()

    def error(self) -> BaseException | None:
        with self._lock:
            return self._error

    def result(self) -> ScanResult | None:
        return self._result

    def wait(self, timeout: float | None = None) -> bool:
        """Block until the worker has finished; False on timeout."""
        return self._finished.wait(timeout)


def start_scan(family: Family | str, start: int, end: int, *, separator: str | None = None) -> ScanSession:
    """Launch a scan on a background thread and return its handle."""
    return ScanSession(family, start, end, separator=separator).launch()
