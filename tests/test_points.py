import polars as pl
import pytest

from squish.errors import DataFormatError
from squish.points import (
    TrajectoryPoint,
    points_from_frame,
    points_from_rows,
    points_to_frame,
    validate_time_order,
)


def test_points_from_rows_numbers_in_order():
    pts = points_from_rows([(39.9, 116.4, 0), (39.91, 116.41, 1000)])
    assert [p.original_index for p in pts] == [0, 1]
    assert pts[1] == TrajectoryPoint(1, 39.91, 116.41, 1000.0)


def test_points_are_immutable():
    p = TrajectoryPoint(0, 1.0, 2.0, 3.0)
    with pytest.raises(Exception):
        p.lat = 5.0


def test_points_from_frame_with_index_column():
    df = pl.DataFrame({
        "idx": [10, 11],
        "latitude": [39.9, 39.91],
        "longitude": [116.4, 116.41],
        "time": [0, 1000],
    })
    pts = points_from_frame(df, index_col="idx")
    assert [p.original_index for p in pts] == [10, 11]
    assert pts[0].time == 0.0


def test_points_from_frame_missing_columns():
    df = pl.DataFrame({"latitude": [1.0], "longitude": [2.0]})
    with pytest.raises(DataFormatError, match="time"):
        points_from_frame(df)


def test_points_to_frame_roundtrip_columns():
    pts = points_from_rows([(39.9, 116.4, 0), (39.91, 116.41, 1000)])
    df = points_to_frame(pts)
    assert df.columns == ["original_index", "latitude", "longitude", "time"]
    assert df.height == 2
    assert points_from_frame(df, index_col="original_index") == pts


def test_validate_time_order():
    validate_time_order(points_from_rows([(0, 0, 1), (0, 0, 1), (0, 0, 2)]))
    with pytest.raises(DataFormatError, match="non-decreasing"):
        validate_time_order(points_from_rows([(0, 0, 2), (0, 0, 1)]))


def test_str_matches_output_format():
    assert str(TrajectoryPoint(0, 39.9, 116.4, 1538322843000.0)) == "39.900000 116.400000 1538322843000"
