"""
treeprof - a tiny in-process call-tree profiler.

Enable it by setting the ``TREEPROF`` environment variable (an integer value
also sets the report threshold in milliseconds). Wrap functions with
`profile` and run the code of interest with `run`:

    import treeprof

    @treeprof.profile("bundle")
    def bundle(): ...

    treeprof.run("build", build_everything)

The module-level functions operate on the process-wide session returned by
`get_session`.
"""

from collections.abc import Callable
from typing import Any, Optional

from .config import ProfilerConfig
from .errors import ProfilerError, SessionStateError, TimerStateError, UnbalancedStackError
from .report import BufferSink, ConsoleSink, format_report, render_report
from .session import Bucket, Session, get_session, set_session
from .table import AccumulationTable, CallPath
from .timer import Timer, get_clock
from .tree import ReportTree

__version__ = "0.1.0"


def wrap(bucket: Bucket, func: Callable) -> Callable:
    return get_session().wrap(bucket, func)


def profile(bucket: Bucket, func: Optional[Callable] = None) -> Callable:
    """
    Profile `func` under `bucket`, or return a decorator when `func` is omitted.
    """
    if func is None:
        return lambda f: get_session().wrap(bucket, f)
    return get_session().wrap(bucket, func)


def time(bucket: Bucket, func: Callable[[], Any]) -> Any:
    return get_session().time(bucket, func)


def track(bucket: str):
    return get_session().track(bucket)


def start() -> None:
    get_session().start()


def stop() -> str:
    return get_session().stop()


def report(sink=None) -> None:
    get_session().report(sink)


def run(bucket: Bucket, func: Callable[[], Any], sink=None) -> Any:
    return get_session().run(bucket, func, sink)


def increase(entry, duration_ms: float) -> None:
    get_session().increase(entry, duration_ms)


__all__ = [
    'wrap', 'profile', 'time', 'track', 'start', 'stop', 'report', 'run', 'increase',
    'Session', 'get_session', 'set_session', 'ProfilerConfig',
    'Timer', 'get_clock', 'AccumulationTable', 'CallPath', 'ReportTree',
    'ConsoleSink', 'BufferSink', 'render_report', 'format_report',
    'ProfilerError', 'SessionStateError', 'TimerStateError', 'UnbalancedStackError',
]
