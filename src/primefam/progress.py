# src/primefam/progress.py
from __future__ import annotations

import sys
import time

BAR_WIDTH = 24
REDRAW_EVERY = 0.05  # seconds


class Progress:
    """
    Single-line scan bar: spinner, filled fraction, percent, elapsed time,
    rough time left and the number of matches so far. Draws with '\\r' on one
    terminal line; done() wipes it so the match list prints on a clean line.
    """

    SPINNER = "|/-\\"

    def __init__(self, *, enabled: bool = True, stream=None):
        self.enabled = enabled
        self.stream = stream or sys.stdout
        self.t0 = time.perf_counter()
        self._last = 0.0
        self._tick = 0
        self._width = 0

    def _eta(self, frac: float, elapsed: float) -> str:
        if frac <= 0.0 or frac >= 1.0:
            return "   --"
        return f"{elapsed * (1.0 - frac) / frac:5.0f}s"

    def update(self, frac: float, label: str = "", *, found: int | None = None, force: bool = False) -> None:
        if not self.enabled:
            return
        now = time.perf_counter()
        if not force and now - self._last < REDRAW_EVERY:
            return
        self._last = now
        self._tick += 1

        frac = min(max(frac, 0.0), 1.0)
        filled = int(frac * BAR_WIDTH)
        elapsed = now - self.t0
        spin = self.SPINNER[self._tick % len(self.SPINNER)]
        hits = f"  {found} found" if found is not None else ""
        line = (f"[{spin}] [{'#' * filled}{'-' * (BAR_WIDTH - filled)}] {frac * 100:5.1f}%"
                f"  {elapsed:6.1f}s  eta {self._eta(frac, elapsed)}{hits}  {label[:40]}")
        self._width = max(self._width, len(line))
        self.stream.write("\r" + line)
        self.stream.flush()

    def done(self) -> None:
        if not self.enabled or not self._width:
            return
        self.stream.write("\r" + " " * self._width + "\r")
        self.stream.flush()
