"""
Per-point error bookkeeping for retained working-set entries.
"""
from typing import Optional

from squish.points import TrajectoryPoint
from squish.sed import sed


class Entry:
    """
    A retained point plus its error ledger.

    `pi` is the error already charged to this point by evictions merged into it.
    `priority` is `pi` plus the point's current SED against its neighbors, i.e. the
    error the simplification would carry if this point were evicted next. Anchors
    keep an infinite priority.
    """

    __slots__ = ("point", "pi", "priority")

    def __init__(self, point: TrajectoryPoint, pi: float = 0.0, priority: float = float("inf")):
        self.point = point
        self.pi = pi
        self.priority = priority

    def __repr__(self) -> str:
        return f"Entry(index={self.point.original_index}, pi={self.pi}, priority={self.priority})"


def recompute_priority(prev: Optional[Entry], entry: Entry, next_: Optional[Entry]) -> None:
    if prev is None or next_ is None:
        return
    entry.priority = entry.pi + sed(prev.point, entry.point, next_.point)


def absorb(entry: Entry, incoming_pi: float) -> None:
    """Charge an evicted neighbor's priority to `entry`. Max-based, never additive."""
    entry.pi = max(entry.pi, incoming_pi)
