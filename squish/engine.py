"""
SQUISH-E online trajectory reduction.

Points are ingested one at a time into a capacity-bounded working set. Whenever
the working set reaches capacity, the interior point whose removal adds the least
synchronized error is evicted and its priority is charged to its neighbors. Once
the input is exhausted, a post-pass keeps evicting while the cheapest eviction
stays within the error budget `epsilon`.

Capacity starts at `initial_capacity` and grows by one every `ratio` ingested
points, so the retained size tracks roughly `len(points) / ratio`.
"""
import logging
from enum import Enum
from typing import List, Sequence

from squish.errors import PreconditionViolation
from squish.ledger import absorb
from squish.points import TrajectoryPoint
from squish.working_set import WorkingSet

logger = logging.getLogger(__name__)


class EngineState(Enum):
    INGESTING = "ingesting"
    POST_PASS_COMPACTING = "post_pass_compacting"
    DONE = "done"


def _validate_parameters(initial_capacity: int, ratio: float, epsilon: float = 0.0) -> None:
    if isinstance(initial_capacity, bool) or not isinstance(initial_capacity, int):
        raise ValueError(f"initial_capacity must be an integer, got {initial_capacity!r}")
    if initial_capacity < 3:
        raise ValueError(f"initial_capacity must be >= 3, got {initial_capacity}")
    if not ratio > 0:
        raise ValueError(f"ratio must be positive, got {ratio}")
    if not epsilon >= 0:
        raise ValueError(f"epsilon must be >= 0, got {epsilon}")


class ReductionEngine:
    """
    One reduction run over one trajectory. Not reusable: build a new engine per
    trajectory.

    Usage:
        engine = ReductionEngine(initial_capacity=4, ratio=5)
        for point in points:
            engine.ingest(point)
        engine.compact(epsilon)
        simplified = engine.result()

    `ingest` is the only place where a caller may stop between steps.
    """

    def __init__(self, initial_capacity: int = 4, ratio: float = 5):
        _validate_parameters(initial_capacity, ratio)
        self.initial_capacity = initial_capacity
        self.ratio = ratio
        self.state = EngineState.INGESTING
        self.capacity = initial_capacity
        self.ingested = 0
        self.evictions = 0
        self.post_pass_evictions = 0
        self.post_pass_priorities: List[float] = []
        self._working_set = WorkingSet()

    @property
    def working_set(self) -> WorkingSet:
        return self._working_set

    def _require_state(self, expected: EngineState, operation: str) -> None:
        if self.state is not expected:
            raise PreconditionViolation(
                f"{operation}() requires state {expected.value}, engine is {self.state.value}"
            )

    def ingest(self, point: TrajectoryPoint) -> None:
        self._require_state(EngineState.INGESTING, "ingest")
        ws = self._working_set
        self.capacity = max(self.capacity, self.initial_capacity + int(self.ingested // self.ratio))
        ws.append(point)
        self.ingested += 1
        if len(ws) >= 3:
            ws.refresh(len(ws) - 2)
        if len(ws) == self.capacity:
            self._evict(ws.min_priority_index())
            self.evictions += 1

    def _evict(self, i: int) -> float:
        ws = self._working_set
        if not ws.is_interior(i):
            raise PreconditionViolation(f"Cannot evict index {i} from working set of size {len(ws)}")
        min_p = ws[i].priority
        # The current tail absorbs too: the next ingest turns it into an interior entry.
        if i - 1 > 0:
            absorb(ws[i - 1], min_p)
        absorb(ws[i + 1], min_p)
        removed = ws.remove_interior(i)
        # Only the two entries now flanking the gap saw their neighborhood change.
        ws.refresh(i - 1)
        ws.refresh(i)
        logger.debug(
            f"Evicted point {removed.point.original_index} (priority={min_p:.3e}), "
            f"working set size {len(ws)}, capacity {self.capacity}"
        )
        return min_p

    def compact(self, epsilon: float) -> None:
        """Evict interior points while the cheapest eviction stays within `epsilon`."""
        self._require_state(EngineState.INGESTING, "compact")
        if not epsilon >= 0:
            raise ValueError(f"epsilon must be >= 0, got {epsilon}")
        self.state = EngineState.POST_PASS_COMPACTING
        ws = self._working_set
        while len(ws) >= 3:
            i = ws.min_priority_index()
            if ws[i].priority > epsilon:
                break
            self.post_pass_priorities.append(self._evict(i))
            self.post_pass_evictions += 1
        self.state = EngineState.DONE
        logger.debug(
            f"Post-pass removed {self.post_pass_evictions} points, {len(ws)} of {self.ingested} retained"
        )

    def result(self) -> List[TrajectoryPoint]:
        self._require_state(EngineState.DONE, "result")
        return self._working_set.points()


def reduce(
    points: Sequence[TrajectoryPoint],
    initial_capacity: int = 4,
    ratio: float = 5,
    epsilon: float = 0.0,
) -> List[TrajectoryPoint]:
    """
    Simplify a time-ordered trajectory with SQUISH-E.

    Args:
        points: Trajectory points in non-decreasing time order.
        initial_capacity: Starting working-set capacity, at least 3.
        ratio: Capacity grows by one every `ratio` ingested points.
        epsilon: Post-pass error budget, in the same units as the coordinates.

    Returns:
        The retained points in their original order. Inputs of fewer than three
        points are returned unchanged.
    """
    _validate_parameters(initial_capacity, ratio, epsilon)
    engine = ReductionEngine(initial_capacity=initial_capacity, ratio=ratio)
    for point in points:
        engine.ingest(point)
    engine.compact(epsilon)
    return engine.result()
