"""
Login attempt throttling.

Fixed window per key (client IP, or the submitted email when the IP is
unknown): at most `max_attempts` login attempts per `window_s` seconds.
Successful attempts count too; a window only clears by running out.
State is in-process and resets on restart; it only slows down password
guessing against a single instance.
"""

from __future__ import annotations

import threading
import time
from collections.abc import Callable
from dataclasses import dataclass


@dataclass
class _Window:
    attempts: int
    reset_at: float


class LoginThrottle:
    def __init__(
        self,
        max_attempts: int,
        window_s: float,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        if max_attempts <= 0:
            raise ValueError("max_attempts must be positive")
        if window_s <= 0:
            raise ValueError("window_s must be positive")
        self.max_attempts = max_attempts
        self.window_s = window_s
        self._clock = clock
        self._windows: dict[str, _Window] = {}
        self._next_prune = clock() + window_s
        self._lock = threading.Lock()

    def __len__(self) -> int:
        with self._lock:
            return len(self._windows)

    def hit(self, key: str) -> tuple[bool, float]:
        """
        Record one attempt for `key`.

        Returns (allowed, retry_after_seconds); retry_after is 0 when allowed.
        """
        with self._lock:
            now = self._clock()
            if now >= self._next_prune:
                self._prune(now)
            w = self._windows.get(key)
            if w is None or now >= w.reset_at:
                self._windows[key] = _Window(attempts=1, reset_at=now + self.window_s)
                return True, 0.0
            if w.attempts >= self.max_attempts:
                return False, w.reset_at - now
            w.attempts += 1
            return True, 0.0

    def _prune(self, now: float) -> None:
        # At most one sweep per window length.
        self._windows = {k: w for k, w in self._windows.items() if now < w.reset_at}
        self._next_prune = now + self.window_s
