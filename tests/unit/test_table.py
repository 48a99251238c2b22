"""
Unit tests for the accumulation table.
"""

import threading

import pytest

from treeprof.table import AccumulationTable, as_path


class TestAccumulationTable:
    """Test cases for AccumulationTable class."""

    def setup_method(self):
        """Setup test fixtures before each test method."""
        self.table = AccumulationTable()

    def test_init(self):
        assert len(self.table) == 0
        assert self.table.snapshot() == {}

    def test_increase_creates_entry(self):
        self.table.increase(("A", "B"), 1.5)
        assert self.table.get(("A", "B")) == 1.5
        assert ("A", "B") in self.table

    def test_increase_accumulates(self):
        self.table.increase(("A",), 1.0)
        self.table.increase(("A",), 2.5)
        assert self.table.get(("A",)) == 3.5

    def test_keys_compare_by_value(self):
        """Test lists and tuples with the same names address the same entry."""
        self.table.increase(["A", "B"], 1.0)
        self.table.increase(("A", "B"), 1.0)
        assert len(self.table) == 1
        assert self.table.get(["A", "B"]) == 2.0

    def test_string_is_single_element_path(self):
        self.table.increase("manual", 4.0)
        assert self.table.get(("manual",)) == 4.0

    def test_same_names_different_paths_are_distinct(self):
        self.table.increase(("A", "parse"), 1.0)
        self.table.increase(("B", "parse"), 2.0)
        self.table.increase(("parse",), 3.0)
        assert len(self.table) == 3

    def test_snapshot_is_a_copy_in_insertion_order(self):
        self.table.increase(("B",), 1.0)
        self.table.increase(("A",), 1.0)
        snapshot = self.table.snapshot()
        self.table.increase(("C",), 1.0)

        assert list(snapshot) == [("B",), ("A",)]
        assert list(self.table) == [("B",), ("A",), ("C",)]

    def test_clear(self):
        self.table.increase(("A",), 1.0)
        self.table.clear()
        assert len(self.table) == 0
        assert self.table.get(("A",)) == 0.0

    def test_concurrent_increases_are_not_lost(self):
        """Test many threads adding to the same path."""
        threads_count, per_thread = 8, 2000

        def worker():
            for _ in range(per_thread):
                self.table.increase(("shared",), 1.0)

        threads = [threading.Thread(target=worker) for _ in range(threads_count)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        assert self.table.get(("shared",)) == threads_count * per_thread

    def test_as_path(self):
        assert as_path("x") == ("x",)
        assert as_path(["x", "y"]) == ("x", "y")
        assert as_path(("x",)) == ("x",)

    def test_empty_path_rejected(self):
        """Test an empty path fails at the call instead of at report time."""
        with pytest.raises(ValueError, match="at least one bucket name"):
            self.table.increase([], 20.0)
        with pytest.raises(ValueError):
            as_path(())
        assert len(self.table) == 0
