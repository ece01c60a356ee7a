"""
Reader for timestamped GPS text files.

Three comma-separated layouts are recognised by their column count:

    3 columns   time,lon,lat                        2018-09-30 15:54:03.0,104.09571,30.66221
    4-6 columns id,time,lon,lat (T-Drive)           1,2008-02-02 15:36:08,116.51172,39.92123
    7+ columns  lat,lon,0,alt,days,date,time (Geolife .plt, 6 header lines)
                                                    40.013867,116.306473,0,226,39744.98,2008-10-23,23:41:04

Timestamps are converted to epoch milliseconds.
"""
import io
import logging
from pathlib import Path
from typing import List, Tuple

import polars as pl

from squish.errors import DataFormatError
from squish.points import TrajectoryPoint, points_from_frame, validate_time_order

logger = logging.getLogger(__name__)

GEOLIFE_HEADER_LINES = 6
GEOLIFE_MARKER = "Geolife trajectory"
TIMESTAMP_FORMAT = "%Y-%m-%d %H:%M:%S"

LAYOUT_TIME_LON_LAT = "time_lon_lat"
LAYOUT_TDRIVE = "tdrive"
LAYOUT_GEOLIFE = "geolife"


def validate_input_file(path: str) -> Path:
    """Check if input file exists and return Path object"""
    input_path = Path(path)
    if not input_path.exists():
        raise FileNotFoundError(f"Input file not found: {input_path}")
    return input_path


def _data_lines(path: Path) -> List[str]:
    try:
        text = path.read_text(encoding="utf-8")
    except UnicodeDecodeError as e:
        raise DataFormatError(f"{path} is not valid UTF-8 text: {e}") from e
    lines = [line for line in text.splitlines() if line.strip()]
    if lines and lines[0].startswith(GEOLIFE_MARKER):
        lines = lines[GEOLIFE_HEADER_LINES:]
    return lines


def detect_layout(n_cols: int) -> str:
    if n_cols == 3:
        return LAYOUT_TIME_LON_LAT
    if n_cols >= 7:
        return LAYOUT_GEOLIFE
    if n_cols >= 4:
        return LAYOUT_TDRIVE
    raise DataFormatError(f"Unrecognised GPS layout with {n_cols} columns")


def _to_epoch_ms(expr: pl.Expr) -> pl.Expr:
    # Fractional seconds ("15:54:03.0") are dropped.
    return (
        expr.str.strip_chars()
        .str.slice(0, 19)
        .str.to_datetime(TIMESTAMP_FORMAT, strict=True)
        .dt.epoch("ms")
        .cast(pl.Float64)
    )


def _to_float(expr: pl.Expr) -> pl.Expr:
    return expr.str.strip_chars().cast(pl.Float64, strict=True)


def parse_frame(raw: pl.DataFrame) -> Tuple[pl.DataFrame, str]:
    """
    Turn a raw all-string frame into (original_index, latitude, longitude, time).

    Returns the parsed frame and the detected layout name.
    """
    layout = detect_layout(raw.width)
    c = raw.columns
    if layout == LAYOUT_TIME_LON_LAT:
        exprs = [_to_epoch_ms(pl.col(c[0])), _to_float(pl.col(c[1])), _to_float(pl.col(c[2]))]
        names = ["time", "longitude", "latitude"]
    elif layout == LAYOUT_TDRIVE:
        exprs = [_to_epoch_ms(pl.col(c[1])), _to_float(pl.col(c[2])), _to_float(pl.col(c[3]))]
        names = ["time", "longitude", "latitude"]
    else:
        stamp = pl.concat_str([pl.col(c[5]).str.strip_chars(), pl.col(c[6]).str.strip_chars()], separator=" ")
        exprs = [_to_float(pl.col(c[0])), _to_float(pl.col(c[1])), _to_epoch_ms(stamp)]
        names = ["latitude", "longitude", "time"]
    try:
        df = raw.select([e.alias(n) for e, n in zip(exprs, names)])
    except pl.exceptions.PolarsError as e:
        raise DataFormatError(f"Malformed {layout} rows: {e}") from e
    df = df.with_row_index("original_index").select(["original_index", "latitude", "longitude", "time"])
    return df, layout


def read_frame(path: str) -> pl.DataFrame:
    """Read a GPS file into a Polars DataFrame with one row per sample."""
    input_path = validate_input_file(path)
    lines = _data_lines(input_path)
    if not lines:
        return pl.DataFrame(
            schema={"original_index": pl.UInt32, "latitude": pl.Float64, "longitude": pl.Float64, "time": pl.Float64}
        )
    try:
        raw = pl.read_csv(
            io.BytesIO("\n".join(lines).encode("utf-8")),
            has_header=False,
            infer_schema_length=0,
        )
    except pl.exceptions.PolarsError as e:
        logger.error(f"Error detecting GPS file structure: {e}")
        raise DataFormatError(f"Could not parse {input_path}: {e}") from e
    df, layout = parse_frame(raw)
    logger.info(f"[READ] {input_path}: {df.height} points ({layout})")
    return df


def read_points(path: str, sort_by_time: bool = False) -> List[TrajectoryPoint]:
    """
    Read a GPS file into time-ordered TrajectoryPoints.

    Args:
        path: Input file.
        sort_by_time: Stable-sort rows by timestamp before validation. Original indices
            still refer to file order.

    Raises:
        FileNotFoundError: If the file does not exist.
        DataFormatError: If the layout or a row cannot be parsed, or timestamps decrease.
    """
    df = read_frame(path)
    if sort_by_time:
        df = df.sort("time", maintain_order=True)
    points = points_from_frame(df, time_col="time", index_col="original_index")
    validate_time_order(points)
    return points
