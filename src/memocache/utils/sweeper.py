# ./src/memocache/utils/sweeper.py
"""Idle periodic timer that drives the cache's expiration sweep.

Run path: imported by ``memocache.cache``; one ``PeriodicSweeper`` per cache.
Inputs: a zero-argument callback and an interval in seconds.
Outputs: repeated callback invocations until ``cancel`` is called.
Side effects: spawns one daemon ``threading.Timer`` per scheduled run.
Operational notes: daemon timers never hold the interpreter open at exit.
"""

from __future__ import annotations

import threading
from typing import Any, Callable, Optional


class PeriodicSweeper:
    """Reschedule ``callback`` every ``interval`` seconds until cancelled."""

    def __init__(self, callback: Callable[[], Any], interval: float):
        self._callback = callback
        self._interval = interval
        self._timer: Optional[threading.Timer] = None
        self._lock = threading.Lock()
        self._active = False

    @property
    def active(self) -> bool:
        return self._active

    def start(self) -> None:
        """Arm the timer. A non-positive interval leaves the sweeper idle."""
        if self._interval <= 0:
            return
        with self._lock:
            if self._timer is not None:
                self._timer.cancel()
            self._active = True
            self._arm()

    def cancel(self) -> None:
        with self._lock:
            self._active = False
            if self._timer is not None:
                self._timer.cancel()
                self._timer = None

    def _arm(self) -> None:
        timer = threading.Timer(self._interval, self._run)
        timer.daemon = True
        timer.name = "memocache-sweep"
        self._timer = timer
        timer.start()

    def _run(self) -> None:
        if not self._active:
            return
        try:
            self._callback()
        finally:
            with self._lock:
                # a restart during the callback already armed a newer timer
                if self._active and self._timer is threading.current_thread():
                    self._arm()
