"""
Error and compression metrics for a simplified trajectory.

The reduction core works in degrees; metrics are reported in meters using a
single local scale factor averaged over the latitude and longitude axes.
"""
from dataclasses import dataclass, asdict
from math import cos, radians
from typing import Any, Dict, Sequence, Tuple

import numpy as np

from squish.points import TrajectoryPoint

METERS_PER_DEGREE_LAT = 111320.0


def meters_per_degree(points: Sequence[TrajectoryPoint]) -> float:
    """Average of the meters-per-degree scale along latitude and longitude at the mean latitude."""
    if not points:
        return METERS_PER_DEGREE_LAT
    mean_lat = sum(p.lat for p in points) / len(points)
    meters_per_degree_lon = METERS_PER_DEGREE_LAT * cos(radians(mean_lat))
    return (METERS_PER_DEGREE_LAT + meters_per_degree_lon) / 2.0


def segment_sed(lats: np.ndarray, lons: np.ndarray, times: np.ndarray) -> np.ndarray:
    """
    SED of every sample in a segment against the line between its first and last sample.

    Same definition as `squish.sed.sed`, vectorised; a zero time span compares
    every sample against the last one.
    """
    span = times[-1] - times[0]
    if span == 0:
        t = np.ones_like(times)
    else:
        t = (times - times[0]) / span
    lat_est = lats[0] + (lats[-1] - lats[0]) * t
    lon_est = lons[0] + (lons[-1] - lons[0]) * t
    return np.hypot(lat_est - lats, lon_est - lons)


def compute_errors(
    points: Sequence[TrajectoryPoint],
    retained: Sequence[TrajectoryPoint],
    conversion_factor: float,
) -> Tuple[float, float]:
    """
    Average and maximum SED error in meters of the original points against the retained ones.

    Every original point between two consecutive retained points (both ends
    included) is measured against the segment joining them, so shared endpoints
    are counted once per segment they bound.

    Returns:
        (average_error_m, max_error_m); both 0 when there is nothing to measure.
    """
    if len(retained) < 2:
        return 0.0, 0.0
    position = {p.original_index: i for i, p in enumerate(points)}
    lats = np.array([p.lat for p in points], dtype=float)
    lons = np.array([p.lon for p in points], dtype=float)
    times = np.array([p.time for p in points], dtype=float)
    kept = sorted(position[p.original_index] for p in retained)

    total = 0.0
    worst = 0.0
    count = 0
    for start, end in zip(kept, kept[1:]):
        errors = segment_sed(lats[start:end + 1], lons[start:end + 1], times[start:end + 1]) * conversion_factor
        total += float(errors.sum())
        worst = max(worst, float(errors.max()))
        count += errors.size
    return (total / count if count else 0.0), worst


@dataclass
class SimplificationReport:
    original_points: int
    retained_points: int
    compression_ratio: float
    total_time_ms: float
    time_per_point_ms: float
    average_error_m: float
    max_error_m: float

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


def build_report(
    points: Sequence[TrajectoryPoint],
    retained: Sequence[TrajectoryPoint],
    elapsed_s: float,
    conversion_factor: float = None,
) -> SimplificationReport:
    """Summarise one reduction run. `elapsed_s` is the wall time of the reduction alone."""
    if conversion_factor is None:
        conversion_factor = meters_per_degree(points)
    n = len(points)
    avg_err, max_err = compute_errors(points, retained, conversion_factor)
    total_ms = elapsed_s * 1000.0
    return SimplificationReport(
        original_points=n,
        retained_points=len(retained),
        compression_ratio=len(retained) / n if n else 0.0,
        total_time_ms=total_ms,
        time_per_point_ms=total_ms / n if n else 0.0,
        average_error_m=avg_err,
        max_error_m=max_err,
    )
