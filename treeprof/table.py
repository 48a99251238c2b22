"""
Accumulation table mapping call paths to cumulative milliseconds.
"""

from __future__ import annotations

import threading
from typing import Dict, Iterator, Tuple, Union

CallPath = Tuple[str, ...]


def as_path(entry: Union[str, CallPath, list]) -> CallPath:
    """
    Normalize a bucket name or a sequence of names into a CallPath.

    Raises:
        ValueError: If `entry` is an empty sequence
    """
    if isinstance(entry, str):
        return (entry,)
    path = tuple(entry)
    if not path:
        raise ValueError("call path must contain at least one bucket name")
    return path


class AccumulationTable:
    """
    Thread-safe `CallPath -> ms` totals.

    Keys keep the order in which they were first recorded, which is the order
    used when the report walks siblings.
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._times: Dict[CallPath, float] = {}

    def increase(self, entry: Union[str, CallPath, list], duration_ms: float) -> None:
        path = as_path(entry)
        with self._lock:
            self._times[path] = self._times.get(path, 0.0) + duration_ms

    def get(self, entry: Union[str, CallPath, list], default: float = 0.0) -> float:
        with self._lock:
            return self._times.get(as_path(entry), default)

    def snapshot(self) -> Dict[CallPath, float]:
        """Return an ordered copy of the current totals."""
        with self._lock:
            return dict(self._times)

    def clear(self) -> None:
        with self._lock:
            self._times.clear()

    def __len__(self) -> int:
        with self._lock:
            return len(self._times)

    def __contains__(self, entry) -> bool:
        with self._lock:
            return as_path(entry) in self._times

    def __iter__(self) -> Iterator[CallPath]:
        return iter(self.snapshot())
