"""
Test helpers package for treeprof.

Provides a controllable clock and helpers for building profiled call trees.
"""

from .profiler_helpers import (
    FakeClock,
    make_session,
    report_lines,
)

__all__ = [
    'FakeClock',
    'make_session',
    'report_lines',
]
