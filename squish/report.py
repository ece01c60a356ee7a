"""
Output writers for simplified trajectories: text file, summary table and plot.
"""
import os
from typing import Dict, List, Sequence

import matplotlib.pyplot as plt
from prettytable import PrettyTable

from squish.metrics import SimplificationReport
from squish.points import TrajectoryPoint


def summary_lines(report: SimplificationReport) -> List[str]:
    return [
        f"Average Compression Ratio (points): {report.compression_ratio:.6f}",
        f"Total Compression Time (ms): {report.total_time_ms:.6f}, "
        f"Average Time per Point (ms): {report.time_per_point_ms:.6f}",
        f"Average Error (m): {report.average_error_m:.6f}, Maximum Error (m): {report.max_error_m:.6f}",
    ]


def write_simplified(path: str, retained: Sequence[TrajectoryPoint], report: SimplificationReport) -> None:
    """Write one "lat lon time" line per retained point followed by the run summary."""
    parent = os.path.dirname(path)
    if parent:
        os.makedirs(parent, exist_ok=True)
    with open(path, "w") as f:
        for point in retained:
            f.write(f"{point}\n")
        for line in summary_lines(report):
            f.write(line + "\n")


def summary_table(reports: Dict[str, SimplificationReport]) -> PrettyTable:
    table = PrettyTable()
    table.field_names = ["file", "original", "retained", "ratio", "time (ms)", "avg err (m)", "max err (m)"]
    for name, r in reports.items():
        table.add_row([
            name,
            r.original_points,
            r.retained_points,
            f"{r.compression_ratio:.4f}",
            f"{r.total_time_ms:.2f}",
            f"{r.average_error_m:.3f}",
            f"{r.max_error_m:.3f}",
        ])
    return table


def plot_simplification(
    points: Sequence[TrajectoryPoint],
    retained: Sequence[TrajectoryPoint],
    title: str = "Trajectory",
) -> "tuple[plt.Figure, plt.Axes]":
    """
    Overlay the original trajectory (grey) and its simplification (red) in lon/lat space.
    """
    if not points:
        raise ValueError("No points to plot")
    lons = [p.lon for p in points]
    lats = [p.lat for p in points]
    fig, ax = plt.subplots()
    ax.plot(lons, lats, color="lightgrey", linewidth=1, label=f"original ({len(points)})")
    ax.plot(
        [p.lon for p in retained],
        [p.lat for p in retained],
        color="red",
        marker="o",
        markersize=2,
        label=f"simplified ({len(retained)})",
    )
    ax.set_facecolor("white")
    ax.set_title(title)
    ax.set_xlabel("Longitude")
    ax.set_ylabel("Latitude")
    ax.set_aspect("equal", adjustable="datalim")
    ax.legend()
    plt.tight_layout()
    return fig, ax


def save_plot(fig, out_path: str) -> None:
    fig.savefig(out_path, dpi=150, bbox_inches="tight")
    plt.close(fig)
