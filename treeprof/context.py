"""
Per-logical-thread profiler state.

Each OS thread, asyncio task or the top-level code keeps its own live call
path and its own stack of active timers. Both are stored in context variables
holding immutable tuples, so pushing or popping in one execution context never
affects another, even when a task was spawned while its parent was inside a
profiled call.
"""

from __future__ import annotations

import itertools
import logging
from contextvars import ContextVar
from typing import Tuple

from .errors import UnbalancedStackError
from .table import CallPath
from .timer import Timer

_ids = itertools.count()


class ExecutionContext:
    """Call-path and active-timer stacks for whatever logical thread is current."""

    def __init__(self) -> None:
        self.logger = logging.getLogger(__name__)
        n = next(_ids)
        self._path: ContextVar[CallPath] = ContextVar(f"treeprof_path_{n}", default=())
        self._timers: ContextVar[Tuple[Timer, ...]] = ContextVar(f"treeprof_timers_{n}", default=())

    def push(self, name: str) -> CallPath:
        """Push a bucket name and return the resulting path."""
        path = self._path.get() + (name,)
        self._path.set(path)
        return path

    def pop(self) -> str:
        path = self._path.get()
        if not path:
            raise UnbalancedStackError("pop from an empty call path")
        self._path.set(path[:-1])
        return path[-1]

    def current_path(self) -> CallPath:
        return self._path.get()

    def push_timer(self, timer: Timer) -> None:
        self._timers.set(self._timers.get() + (timer,))

    def pop_timer(self, expected: Timer | None = None) -> Timer:
        """
        Pop the most recently pushed timer.

        Args:
            expected: Timer that must be on top of the stack, if given

        Raises:
            UnbalancedStackError: If the stack is empty or its top is not `expected`
        """
        timers = self._timers.get()
        if not timers:
            self.logger.error(f"timer stack is empty; expected: {getattr(expected, 'id', None)}")
            raise UnbalancedStackError("pop from an empty timer stack")

        popped = timers[-1]
        self._timers.set(timers[:-1])
        if expected is not None and popped is not expected:
            self.logger.error(f"unexpected timer at top of stack: {popped.id}; expected: {expected.id}")
            raise UnbalancedStackError(
                f"unexpected timer at top of stack: {popped.id}; expected: {expected.id}"
            )
        return popped

    def active_timers(self) -> Tuple[Timer, ...]:
        return self._timers.get()

    def depth(self) -> int:
        return len(self._path.get())
