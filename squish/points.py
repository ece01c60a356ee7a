"""
Trajectory points and helpers for building an ordered point store.
"""
from dataclasses import dataclass
from typing import Iterable, List, Sequence, Tuple

import polars as pl

from squish.errors import DataFormatError


@dataclass(frozen=True)
class TrajectoryPoint:
    """A single GPS sample, tagged with its position in the original input."""
    original_index: int
    lat: float
    lon: float
    time: float

    def __str__(self) -> str:
        return f"{self.lat:.6f} {self.lon:.6f} {self.time:.0f}"


def points_from_rows(rows: Iterable[Tuple[float, float, float]]) -> List[TrajectoryPoint]:
    """Build points from (lat, lon, time) tuples, numbering them in input order."""
    return [
        TrajectoryPoint(original_index=i, lat=float(lat), lon=float(lon), time=float(t))
        for i, (lat, lon, t) in enumerate(rows)
    ]


def points_from_frame(
    df: pl.DataFrame,
    lat_col: str = "latitude",
    lon_col: str = "longitude",
    time_col: str = "time",
    index_col: str = None,
) -> List[TrajectoryPoint]:
    """
    Build points from a Polars DataFrame.

    Args:
        df: Frame with one row per GPS sample, already in time order.
        lat_col: Column holding latitudes.
        lon_col: Column holding longitudes.
        time_col: Numeric timestamp column (e.g. epoch milliseconds).
        index_col: Optional column holding original indices. Row order is used when omitted.

    Returns:
        List of TrajectoryPoint in frame order.
    """
    required = {lat_col, lon_col, time_col}
    if index_col:
        required.add(index_col)
    missing = required - set(df.columns)
    if missing:
        raise DataFormatError(f"Columns not found: {sorted(missing)}")
    lats = df[lat_col].cast(pl.Float64).to_list()
    lons = df[lon_col].cast(pl.Float64).to_list()
    times = df[time_col].cast(pl.Float64).to_list()
    indices = df[index_col].to_list() if index_col else range(df.height)
    return [
        TrajectoryPoint(original_index=int(i), lat=lat, lon=lon, time=t)
        for i, lat, lon, t in zip(indices, lats, lons, times)
    ]


def points_to_frame(points: Sequence[TrajectoryPoint]) -> pl.DataFrame:
    return pl.DataFrame(
        {
            "original_index": [p.original_index for p in points],
            "latitude": [p.lat for p in points],
            "longitude": [p.lon for p in points],
            "time": [p.time for p in points],
        },
        schema={
            "original_index": pl.Int64,
            "latitude": pl.Float64,
            "longitude": pl.Float64,
            "time": pl.Float64,
        },
    )


def validate_time_order(points: Sequence[TrajectoryPoint]) -> None:
    """Raise DataFormatError if timestamps ever decrease."""
    for prev, cur in zip(points, points[1:]):
        if cur.time < prev.time:
            raise DataFormatError(
                f"Timestamps must be non-decreasing: point {cur.original_index} "
                f"({cur.time}) precedes point {prev.original_index} ({prev.time})"
            )
