"""
Unit tests for the module-level API bound to the process-wide session.
"""

import pytest
from unittest.mock import patch

import treeprof
from treeprof.session import Session, get_session, set_session


class TestDefaultSession:
    """Test cases for the process-wide session registry."""

    def teardown_method(self):
        """Cleanup after each test method."""
        set_session(None)

    def test_created_lazily_from_environment(self):
        set_session(None)
        with patch.dict("os.environ", {"TREEPROF": "3"}):
            session = get_session()
        assert session.enabled is True
        assert session.filter_ms == 3
        assert get_session() is session

    def test_disabled_by_default(self):
        set_session(None)
        with patch.dict("os.environ", {}, clear=True):
            assert get_session().enabled is False

    def test_set_session(self):
        session = Session(treeprof.ProfilerConfig(enabled=True))
        set_session(session)
        assert get_session() is session


class TestModuleFunctions:
    """Test cases for the module-level wrappers."""

    def test_profile_decorator(self, default_session, clock):
        @treeprof.profile("work")
        def work(ms):
            clock.advance(ms)
            return ms

        assert work.__name__ == "work"
        treeprof.start()
        assert work(25) == 25
        report = treeprof.stop()
        assert "| work: 25.0" in report

    def test_profile_and_wrap_direct(self, default_session, clock):
        f = treeprof.profile("f", lambda: clock.advance(11))
        g = treeprof.wrap("g", lambda: clock.advance(12))
        treeprof.start()
        f()
        g()
        assert default_session.table.get(("f",)) == pytest.approx(11)
        assert default_session.table.get(("g",)) == pytest.approx(12)
        treeprof.stop()

    def test_run_time_track_increase(self, default_session, clock):
        def job():
            treeprof.time("step", lambda: clock.advance(20))
            with treeprof.track("inline"):
                clock.advance(15)
            treeprof.increase(["job", "external"], 40.0)
            return "done"

        sink = treeprof.BufferSink()
        assert treeprof.run("job", job, sink=sink) == "done"
        assert "|     step: 20.0" in sink.lines
        assert "|     inline: 15.0" in sink.lines
        assert "|     external: 40.0" in sink.lines

    def test_report_to_sink(self, default_session, clock):
        treeprof.start()
        treeprof.time("x", lambda: clock.advance(10))
        sink = treeprof.BufferSink()
        treeprof.report(sink)
        assert sink.lines[-1] == "| Measured CPU: 10.0"

    def test_stop_while_idle(self, default_session):
        with pytest.raises(treeprof.SessionStateError):
            treeprof.stop()
