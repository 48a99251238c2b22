"""
Report rendering for a finished profiling session.

Two views are written for every report:

* the hierarchical report, showing each bucket's time inside its parent,
  including the synthetic ``other`` entries:

      | A: 500.0
      |     B: 150.0
      |     other A: 350.0
      | B: 100.0

* the leaf time report, summing leaf buckets by name. Leaf times never
  overlap, so their grand total is the total time profiled:

      | other A: 350.0
      | B: 250.0
      | Measured CPU: 600.0

Entries below the filter threshold are left out of both views.
"""

from __future__ import annotations

import sys
from typing import List, Optional, TextIO

from . import config
from .table import CallPath
from .tree import ReportTree


class ConsoleSink:
    """Writes report lines to a text stream (stdout by default)."""

    def __init__(self, stream: Optional[TextIO] = None) -> None:
        self._stream = stream

    def write_line(self, line: str) -> None:
        print(line, file=self._stream or sys.stdout)


class BufferSink:
    """Collects report lines in memory instead of printing them."""

    def __init__(self) -> None:
        self.lines: List[str] = []

    def write_line(self, line: str) -> None:
        self.lines.append(line)

    def getvalue(self) -> str:
        return "\n".join(self.lines)


def measured_label(clock: str) -> str:
    return "Measured CPU" if clock == config.CPU_CLOCK else "Measured time"


class ReportRenderer:
    """
    Renders a ReportTree into a sink.

    Args:
        tree: Reconstructed tree of the session
        sink: Destination for the report lines
        filter_ms: Entries below this many milliseconds are not printed
        clock: Clock the times were measured with, used for the total's label
    """

    def __init__(self, tree: ReportTree, sink, filter_ms: float = config.DEFAULT_FILTER_MS,
                 clock: str = config.DEFAULT_CLOCK) -> None:
        self.tree = tree
        self.sink = sink
        self.filter_ms = filter_ms
        self.clock = clock

    def _print(self, level: int, text: str) -> None:
        self.sink.write_line(config.REPORT_PREFIX + config.REPORT_INDENT * level + text)

    def _report_on(self, level: int, path: CallPath) -> None:
        ms = self.tree.time(path)
        if ms >= self.filter_ms:
            self._print(level, f"{path[-1]}: {ms:.1f}")
        # A parent below the threshold still gets its children evaluated.
        for child in self.tree.children(path):
            self._report_on(level + 1, child)

    def render_hierarchy(self) -> None:
        for path in self.tree.top_level():
            self._report_on(0, path)

    def render_leaf_totals(self) -> float:
        """Print the leaf time report and return the grand total printed."""
        grand_total = 0.0
        for name, ms in self.tree.leaf_totals():
            if ms < self.filter_ms:
                continue
            self._print(0, f"{name}: {ms:.1f}")
            grand_total += ms
        self._print(0, f"{measured_label(self.clock)}: {grand_total:.1f}")
        return grand_total

    def render(self) -> float:
        """Write the full report and return the measured grand total."""
        self._print(0, "")
        self.render_hierarchy()
        self._print(0, "")
        return self.render_leaf_totals()


def render_report(tree: ReportTree, sink=None, filter_ms: float = config.DEFAULT_FILTER_MS,
                  clock: str = config.DEFAULT_CLOCK) -> float:
    """Render both report views of `tree` to `sink` (the console by default)."""
    return ReportRenderer(tree, sink or ConsoleSink(), filter_ms, clock).render()


def format_report(tree: ReportTree, filter_ms: float = config.DEFAULT_FILTER_MS,
                  clock: str = config.DEFAULT_CLOCK) -> str:
    """Render both report views of `tree` and return them as a string."""
    sink = BufferSink()
    render_report(tree, sink, filter_ms, clock)
    return sink.getvalue()
