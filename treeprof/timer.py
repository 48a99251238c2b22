"""
Timers measuring elapsed time over one or more start/stop segments.
"""

from __future__ import annotations

import time
from collections.abc import Callable
from typing import Any

from . import config
from .errors import TimerStateError

Clock = Callable[[], float]

_CLOCKS: dict[str, Clock] = {
    config.CPU_CLOCK: time.process_time,
    config.WALL_CLOCK: time.perf_counter,
}


def get_clock(name: str) -> Clock:
    """
    Resolve a clock name to a function returning seconds.

    Raises:
        ValueError: If the name is not a supported clock
    """
    try:
        return _CLOCKS[name]
    except KeyError:
        raise ValueError(f"Unsupported clock: {name!r} (expected one of {sorted(_CLOCKS)})") from None


class Timer:
    """
    Measures elapsed time between `start()` and `stop()`.

    Each completed segment is added to `total_ms()` and, when an `on_stopped`
    callback is given, reported to it in milliseconds.
    """

    def __init__(self, id: Any = None, on_stopped: Callable[[float], None] | None = None,
                 clock: Clock | None = None) -> None:
        self.id = id
        self.running = False
        self._on_stopped = on_stopped
        self._clock = clock or get_clock(config.DEFAULT_CLOCK)
        self._start: float | None = None
        self._total_ms = 0.0

    def start(self) -> None:
        if self.running:
            raise TimerStateError(f"can't start a running timer: {self.id}")
        self._start = self._clock()
        self.running = True

    def stop(self) -> float:
        """Stop the timer and return the duration of the segment in milliseconds."""
        if not self.running:
            raise TimerStateError(f"can't stop a stopped timer: {self.id}")

        duration_ms = (self._clock() - self._start) * 1000.0
        self._total_ms += duration_ms
        self._start = None
        self.running = False

        if self._on_stopped is not None:
            self._on_stopped(duration_ms)
        return duration_ms

    def total_ms(self) -> float:
        return self._total_ms

    def __repr__(self) -> str:
        state = "running" if self.running else "stopped"
        return f"Timer(id={self.id!r}, {state}, total_ms={self._total_ms:.3f})"
