"""
Pytest configuration and fixtures for treeprof tests.
"""

import pytest
import sys
from pathlib import Path

# Add project root to path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from tests.helpers import FakeClock, make_session
from treeprof.session import set_session


@pytest.fixture
def clock():
    """Provide a manually advanced clock."""
    return FakeClock()


@pytest.fixture
def session(clock):
    """Provide an enabled session measuring with the fake clock."""
    return make_session(clock)


@pytest.fixture
def disabled_session(clock):
    """Provide a session with profiling disabled."""
    return make_session(clock, enabled=False)


@pytest.fixture
def default_session(session):
    """Install the enabled session as the process-wide session for the test."""
    set_session(session)
    yield session
    set_session(None)


@pytest.fixture
def nested_calls(session, clock):
    """
    Wrapped functions reproducing the A/B example.

    A spends 50ms of its own time and calls B (150ms); a second call to A
    takes 300ms without calling B; B is also called directly for 100ms.
    """
    def b(ms):
        clock.advance(ms)

    b = session.wrap("B", b)

    def a(own_ms, call_b):
        clock.advance(own_ms)
        if call_b:
            b(150)

    a = session.wrap("A", a)

    def workload():
        a(50, True)
        a(300, False)
        b(100)

    return workload
