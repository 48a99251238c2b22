"""
Exceptions raised by the profiler.

All of them signal misuse of the instrumentation rather than a runtime
condition to recover from, so callers are not expected to catch them.
"""


class ProfilerError(RuntimeError):
    """Base class for profiler invariant violations."""
    pass


class TimerStateError(ProfilerError):
    """Raised when a timer is started twice or stopped while not running."""
    pass


class SessionStateError(ProfilerError):
    """Raised when a session is started while running or reported while idle."""
    pass


class UnbalancedStackError(ProfilerError):
    """Raised when the timer popped off a context's stack is not the expected one."""
    pass
