"""
Ordered, capacity-bounded set of retained entries with pinned anchors.
"""
from typing import Iterator, List, Optional, Tuple

from squish.errors import PreconditionViolation
from squish.ledger import Entry, recompute_priority
from squish.points import TrajectoryPoint


class WorkingSet:
    """
    Entries kept in time order. The first and last entries are anchors and can
    never be removed; everything in between is interior and evictable.
    """

    def __init__(self):
        self._entries: List[Entry] = []

    def __len__(self) -> int:
        return len(self._entries)

    def __getitem__(self, i: int) -> Entry:
        return self._entries[i]

    def __iter__(self) -> Iterator[Entry]:
        return iter(self._entries)

    def append(self, point: TrajectoryPoint) -> Entry:
        entry = Entry(point)
        self._entries.append(entry)
        return entry

    def is_interior(self, i: int) -> bool:
        return 0 < i < len(self._entries) - 1

    def neighbors(self, i: int) -> Tuple[Optional[Entry], Optional[Entry]]:
        if not 0 <= i < len(self._entries):
            raise PreconditionViolation(f"Index {i} out of range for working set of size {len(self)}")
        left = self._entries[i - 1] if i > 0 else None
        right = self._entries[i + 1] if i < len(self._entries) - 1 else None
        return left, right

    def refresh(self, i: int) -> None:
        """Recompute the priority of entry `i` from its current neighbors."""
        left, right = self.neighbors(i)
        recompute_priority(left, self._entries[i], right)

    def remove_interior(self, i: int) -> Entry:
        if not self.is_interior(i):
            raise PreconditionViolation(
                f"Cannot remove index {i}: only interior entries (0 < i < {len(self) - 1}) are evictable"
            )
        return self._entries.pop(i)

    def min_priority_index(self) -> int:
        """Interior index with the lowest priority, ties going to the earliest entry."""
        if len(self._entries) < 3:
            raise PreconditionViolation(f"Working set of size {len(self)} has no interior entries")
        best = 1
        for i in range(2, len(self._entries) - 1):
            if self._entries[i].priority < self._entries[best].priority:
                best = i
        return best

    def points(self) -> List[TrajectoryPoint]:
        return [entry.point for entry in self._entries]
