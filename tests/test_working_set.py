import math

import pytest

from squish.errors import PreconditionViolation
from squish.ledger import Entry, absorb, recompute_priority
from squish.points import TrajectoryPoint, points_from_rows
from squish.working_set import WorkingSet


def filled(rows):
    ws = WorkingSet()
    for p in points_from_rows(rows):
        ws.append(p)
    return ws


def test_append_creates_fresh_entry_with_infinite_priority():
    ws = WorkingSet()
    entry = ws.append(TrajectoryPoint(0, 1.0, 2.0, 3.0))
    assert len(ws) == 1
    assert entry.pi == 0.0
    assert math.isinf(entry.priority)


def test_neighbors_at_boundaries():
    ws = filled([(0, 0, 0), (1, 0, 1), (2, 0, 2)])
    assert ws.neighbors(0) == (None, ws[1])
    assert ws.neighbors(1) == (ws[0], ws[2])
    assert ws.neighbors(2) == (ws[1], None)
    with pytest.raises(PreconditionViolation):
        ws.neighbors(3)


def test_remove_interior_rejects_anchors_and_out_of_range():
    ws = filled([(0, 0, 0), (1, 0, 1), (2, 0, 2)])
    for bad in (0, 2, 3, -1):
        with pytest.raises(PreconditionViolation):
            ws.remove_interior(bad)
    removed = ws.remove_interior(1)
    assert removed.point.original_index == 1
    assert [e.point.original_index for e in ws] == [0, 2]


def test_min_priority_ties_go_to_earliest_entry():
    ws = filled([(0, 0, 0), (1, 0, 1), (2, 0, 2), (3, 0, 3), (4, 0, 4)])
    ws[1].priority = 0.5
    ws[2].priority = 0.2
    ws[3].priority = 0.2
    assert ws.min_priority_index() == 2


def test_min_priority_needs_an_interior_entry():
    ws = filled([(0, 0, 0), (1, 0, 1)])
    with pytest.raises(PreconditionViolation):
        ws.min_priority_index()


def test_refresh_uses_current_neighbors():
    ws = filled([(0, 0, 0), (1, 0, 1), (0, 0, 2)])
    ws[1].pi = 0.25
    ws.refresh(1)
    assert ws[1].priority == pytest.approx(1.25)
    ws.refresh(0)
    assert math.isinf(ws[0].priority)


def test_recompute_priority_is_noop_for_anchors():
    a, b = (Entry(p) for p in points_from_rows([(0, 0, 0), (1, 1, 1)]))
    recompute_priority(None, a, b)
    recompute_priority(a, b, None)
    assert math.isinf(a.priority) and math.isinf(b.priority)


def test_absorb_keeps_the_maximum():
    entry = Entry(TrajectoryPoint(0, 0.0, 0.0, 0.0))
    absorb(entry, 0.3)
    absorb(entry, 0.1)
    assert entry.pi == 0.3
    absorb(entry, 0.4)
    assert entry.pi == 0.4
