"""
Profiling sessions and the scoped wrapper.

`Session.wrap` wraps an existing function without changing the indentation
of the wrapped code:

    parse = session.wrap("parse", parse)

or, through the module-level API, as a decorator:

    @treeprof.profile("parse")
    def parse(source): ...

When profiling is disabled the original function is returned unchanged.
When it is enabled, calls are only measured while a session is running
(between `start()` and `stop()`/`report()`, or inside `run()`).

The bucket name may be a callable, which is invoked with the call's
arguments to name the bucket dynamically:

    build = session.wrap(lambda target: f"build {target}", build)

A profiled call made while another one is active is recorded under the
nested path, e.g. ``build client : compile js : read source files``.
"""

from __future__ import annotations

import functools
import inspect
import logging
import threading
from collections.abc import Callable
from contextlib import contextmanager
from typing import Any, Iterator, Optional, Union

from .config import ProfilerConfig
from .context import ExecutionContext
from .errors import SessionStateError
from .report import BufferSink, render_report
from .table import AccumulationTable, CallPath
from .timer import Clock, Timer, get_clock
from .tree import ReportTree

Bucket = Union[str, Callable[..., str]]


def resolve_bucket_name(bucket: Bucket, args: tuple, kwargs: dict) -> str:
    """Return a fixed bucket name, or derive it from the call's arguments."""
    if callable(bucket):
        return bucket(*args, **kwargs)
    return bucket


class Session:
    """
    One profiler: configuration, accumulated times and the Idle/Running state.

    Args:
        config: Settings to use; read from the environment when omitted
        clock: Function returning seconds, overriding the configured clock
    """

    def __init__(self, config: Optional[ProfilerConfig] = None, clock: Optional[Clock] = None) -> None:
        self.config = config if config is not None else ProfilerConfig.from_env()
        self.clock = clock or get_clock(self.config.clock)
        self.table = AccumulationTable()
        self.context = ExecutionContext()
        self.running = False
        self.logger = logging.getLogger(__name__)

    @property
    def enabled(self) -> bool:
        return self.config.enabled

    @property
    def filter_ms(self) -> float:
        return self.config.filter_ms

    def start(self) -> None:
        if self.running:
            raise SessionStateError("Already running")
        self.table.clear()
        self.running = True
        self.logger.debug("Profiling session started")

    def increase(self, entry: Union[str, CallPath, list], duration_ms: float) -> None:
        """Add time to a bucket or call path by hand."""
        if not self.enabled:
            return
        self.table.increase(entry, duration_ms)

    def _enter(self, name: str) -> Timer:
        path = self.context.push(name)
        timer = Timer(
            id=path,
            on_stopped=lambda duration_ms: self.increase(path, duration_ms),
            clock=self.clock,
        )
        self.context.push_timer(timer)
        timer.start()
        return timer

    def _exit(self, timer: Timer) -> None:
        try:
            timer.stop()
            self.context.pop_timer(timer)
        finally:
            self.context.pop()

    def wrap(self, bucket: Bucket, func: Callable) -> Callable:
        """
        Wrap `func` so each call made during a session is timed under `bucket`.

        Returns:
            `func` itself when profiling is disabled, otherwise a wrapper with
            the same calling convention
        """
        if not self.enabled:
            return func

        if inspect.iscoroutinefunction(func):
            @functools.wraps(func)
            async def async_wrapper(*args, **kwargs):
                if not self.running:
                    return await func(*args, **kwargs)
                timer = self._enter(resolve_bucket_name(bucket, args, kwargs))
                try:
                    return await func(*args, **kwargs)
                finally:
                    self._exit(timer)

            return async_wrapper

        @functools.wraps(func)
        def wrapper(*args, **kwargs):
            if not self.running:
                return func(*args, **kwargs)
            timer = self._enter(resolve_bucket_name(bucket, args, kwargs))
            try:
                return func(*args, **kwargs)
            finally:
                self._exit(timer)

        return wrapper

    def time(self, bucket: Bucket, func: Callable[[], Any]) -> Any:
        """Call `func` with no arguments, profiled under `bucket`."""
        return self.wrap(bucket, func)()

    @contextmanager
    def track(self, bucket: str) -> Iterator[None]:
        """Profile the body of a `with` block under `bucket`."""
        if not (self.enabled and self.running):
            yield
            return
        timer = self._enter(bucket)
        try:
            yield
        finally:
            self._exit(timer)

    def build_tree(self) -> ReportTree:
        """Reconstruct the call tree from the times accumulated so far."""
        return ReportTree(self.table.snapshot())

    def report(self, sink=None) -> None:
        """
        End the session and write its report to `sink` (the console by default).

        Nothing is written when profiling is disabled.

        Raises:
            SessionStateError: If the session is not running
        """
        if not self.running:
            raise SessionStateError("not running")
        self.running = False
        self.logger.debug(f"Profiling session stopped with {len(self.table)} entries")
        if not self.enabled:
            return
        render_report(self.build_tree(), sink, self.filter_ms, self.config.clock)

    def stop(self) -> str:
        """End the session and return its report as a string."""
        sink = BufferSink()
        self.report(sink)
        return sink.getvalue()

    def run(self, bucket: Bucket, func: Callable[[], Any], sink=None) -> Any:
        """
        Run `func` inside a new session profiled under `bucket`.

        The report is written even when `func` raises; the exception then
        propagates to the caller.
        """
        self.start()
        try:
            return self.time(bucket, func)
        finally:
            self.report(sink)


_default_session: Session | None = None
_default_lock = threading.Lock()


def get_session() -> Session:
    """Get the process-wide Session, creating it from the environment on first use."""
    global _default_session
    if _default_session is None:
        with _default_lock:
            if _default_session is None:
                _default_session = Session()
    return _default_session


def set_session(session: Session | None) -> None:
    """Install `session` as the process-wide Session (None resets it)."""
    global _default_session
    with _default_lock:
        _default_session = session
