"""
Synchronized Euclidean Distance (SED).
"""
from math import sqrt


def sed(s, m, e) -> float:
    """
    Distance between `m` and its time-synchronized position on the segment s -> e.

    The expected position of `m` is interpolated linearly along s -> e using the
    fraction of elapsed time t = (m.time - s.time) / (e.time - s.time). A zero
    time span between `s` and `e` gives t = 1, i.e. `m` is compared against `e`.

    The result is in the same units as the lat/lon coordinates.
    """
    span = e.time - s.time
    t = 1.0 if span == 0 else (m.time - s.time) / span
    lat_est = s.lat + (e.lat - s.lat) * t
    lon_est = s.lon + (e.lon - s.lon) * t
    return sqrt((lat_est - m.lat) ** 2 + (lon_est - m.lon) ** 2)
