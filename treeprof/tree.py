"""
Tree reconstruction over a flat accumulation snapshot.

The accumulation table only knows `path -> ms`. This module derives the
parent/child structure from the paths themselves and adds, for every parent,
a synthetic ``other <name>`` child holding the parent's time that none of its
measured children account for, so that every parent's time equals the sum of
its children.
"""

from __future__ import annotations

from typing import Any, Dict, List, Mapping, Optional, Tuple

from . import config
from .table import CallPath


def is_child(parent: CallPath, path: CallPath) -> bool:
    """True if `path` extends `parent` by exactly one trailing name."""
    return len(path) == len(parent) + 1 and path[:len(parent)] == parent


def other_name(path: CallPath) -> str:
    return config.OTHER_PREFIX + path[-1]


class ReportTree:
    """
    Render-ready view of one session's accumulated times.

    The tree copies the snapshot it is given, so building it never changes
    the session's table and building it again yields the same result.
    """

    def __init__(self, snapshot: Mapping[CallPath, float]) -> None:
        self._times: Dict[CallPath, float] = {tuple(path): ms for path, ms in snapshot.items()}
        self._entries: List[CallPath] = list(self._times)
        self._children: Dict[CallPath, List[CallPath]] = {}
        for path in self._entries:
            if len(path) > 1:
                self._children.setdefault(path[:-1], []).append(path)

        # Shallowest first: a merged "other" child must be final before its own
        # other time is computed.
        parents = sorted((path for path in self._entries if path in self._children), key=len)
        for parent in parents:
            self._inject_other(parent)

    def _inject_other(self, parent: CallPath) -> None:
        children = self._children[parent]
        other = parent + (other_name(parent),)
        other_ms = self._times[parent] - sum(self._times[child] for child in children)

        if other in self._times:
            # A measured child already carries the synthetic name.
            self._times[other] += other_ms
            return

        self._times[other] = other_ms
        self._entries.append(other)
        children.append(other)

    @property
    def entries(self) -> List[CallPath]:
        return list(self._entries)

    def time(self, path: CallPath) -> float:
        return self._times[tuple(path)]

    def children(self, path: CallPath) -> List[CallPath]:
        return list(self._children.get(tuple(path), ()))

    def has_children(self, path: CallPath) -> bool:
        return bool(self._children.get(tuple(path)))

    def is_leaf(self, path: CallPath) -> bool:
        return not self.has_children(path)

    def other_time(self, path: CallPath) -> Optional[float]:
        """Unaccounted time of a parent, or None for a leaf."""
        if not self.has_children(path):
            return None
        return self._times[tuple(path) + (other_name(tuple(path)),)]

    def top_level(self) -> List[CallPath]:
        return [path for path in self._entries if len(path) == 1]

    def leaves(self) -> List[CallPath]:
        return [path for path in self._entries if self.is_leaf(path)]

    def leaf_totals(self) -> List[Tuple[str, float]]:
        """
        Sum leaf times per bucket name across every place the name occurs.

        Returns:
            (name, ms) pairs sorted by descending time
        """
        totals: Dict[str, float] = {}
        for leaf in self.leaves():
            totals[leaf[-1]] = totals.get(leaf[-1], 0.0) + self._times[leaf]
        return sorted(totals.items(), key=lambda item: item[1], reverse=True)

    def _node_dict(self, path: CallPath) -> Dict[str, Any]:
        node: Dict[str, Any] = {"name": path[-1], "ms": self._times[path]}
        if self.has_children(path):
            node["children"] = [self._node_dict(child) for child in self._children[path]]
        return node

    def to_dict(self) -> Dict[str, Any]:
        """
        Convert the tree to plain data, suitable for JSON output.

        Unlike the text report no threshold is applied.
        """
        leaf_totals = self.leaf_totals()
        return {
            "hierarchy": [self._node_dict(path) for path in self.top_level()],
            "leaf_totals": [{"name": name, "ms": ms} for name, ms in leaf_totals],
            "measured_ms": sum(ms for _, ms in leaf_totals),
        }

    def __len__(self) -> int:
        return len(self._entries)
