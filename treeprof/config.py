"""
Configuration module for treeprof.

This module contains the default configuration values used across the profiler,
the names of the environment variables that control it, and the helper that
turns the environment into a ProfilerConfig. The environment is read once per
session, so enabling or disabling profiling cannot change mid-process.
"""

import logging
import os
from dataclasses import dataclass
from typing import Mapping, Optional, Set

logger = logging.getLogger(__name__)

# Environment variables
ENABLE_ENV_VAR = "TREEPROF"
"""str: Environment variable that enables profiling.

Any non-empty value enables profiling. A non-zero integer value additionally
sets the report filter threshold in milliseconds, e.g. ``TREEPROF=50``.
"""

CLOCK_ENV_VAR = "TREEPROF_CLOCK"
"""str: Environment variable selecting the clock used by every timer."""

# Report defaults
DEFAULT_FILTER_MS = 10
"""int: Default minimum duration (ms) for an entry to appear in a report.

Used when the enable variable holds no usable number.
"""

# Clocks
CPU_CLOCK = "cpu"
"""str: Process CPU time (``time.process_time``)."""

WALL_CLOCK = "wall"
"""str: Monotonic wall time (``time.perf_counter``)."""

DEFAULT_CLOCK = CPU_CLOCK
"""str: Clock used when none is configured."""

SUPPORTED_CLOCKS = {CPU_CLOCK, WALL_CLOCK}
"""Set[str]: Clock names accepted by the configuration."""

# Report layout
REPORT_PREFIX = "| "
"""str: Prefix written at the start of every report line."""

REPORT_INDENT = "    "
"""str: Indentation added per nesting level in the hierarchical report."""

OTHER_PREFIX = "other "
"""str: Prefix of the synthetic entry holding a parent's unaccounted time."""


def get_supported_clocks() -> Set[str]:
    """
    Get the set of clock names that may be configured.

    Returns:
        Set of supported clock names
    """
    return set(SUPPORTED_CLOCKS)


def parse_filter_ms(value: Optional[str], default: int = DEFAULT_FILTER_MS) -> int:
    """
    Parse a filter threshold from an environment value.

    Floats are truncated toward zero. Empty, zero or non-numeric values yield
    the default.

    Args:
        value: Raw environment value
        default: Threshold to use when the value is unusable

    Returns:
        Filter threshold in milliseconds
    """
    if not value:
        return default
    try:
        parsed = int(float(value))
    except (TypeError, ValueError, OverflowError):
        logger.debug(f"Ignoring non-numeric filter value {value!r}, using {default}ms")
        return default
    return parsed or default


@dataclass(frozen=True)
class ProfilerConfig:
    """
    Immutable profiler settings, fixed when a session is created.

    Attributes:
        enabled: Whether wrapped functions are measured at all
        filter_ms: Entries below this many milliseconds are left out of reports
        clock: Name of the clock used by timers ('cpu' or 'wall')
    """
    enabled: bool = False
    filter_ms: float = DEFAULT_FILTER_MS
    clock: str = DEFAULT_CLOCK

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "ProfilerConfig":
        """
        Build a configuration from environment variables.

        Args:
            environ: Mapping to read instead of ``os.environ``

        Returns:
            ProfilerConfig reflecting the environment
        """
        if environ is None:
            environ = os.environ

        raw = environ.get(ENABLE_ENV_VAR, "")
        clock = (environ.get(CLOCK_ENV_VAR) or DEFAULT_CLOCK).strip().lower()
        if clock not in SUPPORTED_CLOCKS:
            logger.warning(f"Unknown clock {clock!r} in {CLOCK_ENV_VAR}, using {DEFAULT_CLOCK!r}")
            clock = DEFAULT_CLOCK

        return cls(enabled=bool(raw), filter_ms=parse_filter_ms(raw), clock=clock)
