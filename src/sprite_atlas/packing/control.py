"""Stop, pause and deadline control for the layout search."""

from __future__ import annotations

import threading
import time
from typing import Optional


class RunControl:
    """Thread-safe run control checked by the search between trials.

    A stopped or expired run finishes the trial in progress and then ends
    the search with the best layout found so far.
    """

    def __init__(self) -> None:
        self._paused = threading.Event()
        self._stopped = threading.Event()
        self._deadline: Optional[float] = None

    def set_timeout(self, seconds: Optional[float]) -> None:
        """Expire the run ``seconds`` from now; None clears the deadline."""

        self._deadline = None if seconds is None else time.perf_counter() + seconds

    def expired(self) -> bool:
        return self._deadline is not None and time.perf_counter() >= self._deadline

    def pause(self) -> None:
        self._paused.set()

    def resume(self) -> None:
        self._paused.clear()

    def stop(self) -> None:
        self._stopped.set()

    def is_paused(self) -> bool:
        return self._paused.is_set()

    def should_stop(self) -> bool:
        return self._stopped.is_set() or self.expired()

    def wait_if_paused(self, interval: float = 0.1) -> None:
        while self._paused.is_set() and not self.should_stop():
            self._stopped.wait(interval)
