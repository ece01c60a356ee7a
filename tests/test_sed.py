import math

import pytest

from squish.points import TrajectoryPoint
from squish.sed import sed


def pt(lat, lon, time, i=0):
    return TrajectoryPoint(original_index=i, lat=lat, lon=lon, time=time)


def test_point_on_synchronized_position_has_zero_error():
    s, m, e = pt(0.0, 0.0, 0.0), pt(1.0, 2.0, 5.0), pt(2.0, 4.0, 10.0)
    assert sed(s, m, e) == pytest.approx(0.0)


def test_spatially_collinear_but_out_of_sync_point_has_error():
    # On the segment, but reached too early in time.
    s, m, e = pt(0.0, 0.0, 0.0), pt(0.0, 3.0, 1.0), pt(0.0, 4.0, 4.0)
    assert sed(s, m, e) == pytest.approx(2.0)


def test_offset_point_distance():
    s, m, e = pt(0.0, 0.0, 0.0), pt(3.0, 1.0, 5.0), pt(0.0, 2.0, 10.0)
    # Expected position (0, 1); actual (3, 1).
    assert sed(s, m, e) == pytest.approx(3.0)


def test_zero_time_span_compares_against_end_point():
    s, m, e = pt(0.0, 0.0, 7.0), pt(1.0, 1.0, 7.0), pt(4.0, 5.0, 7.0)
    assert sed(s, m, e) == pytest.approx(math.hypot(3.0, 4.0))


def test_sed_is_symmetric_in_lat_lon():
    s, m, e = pt(0.0, 0.0, 0.0), pt(1.0, 0.0, 1.0), pt(0.0, 0.0, 2.0)
    s2, m2, e2 = pt(0.0, 0.0, 0.0), pt(0.0, 1.0, 1.0), pt(0.0, 0.0, 2.0)
    assert sed(s, m, e) == pytest.approx(sed(s2, m2, e2)) == pytest.approx(1.0)
