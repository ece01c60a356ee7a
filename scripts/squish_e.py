"""
SQUISH-E simplification of GPS trajectory files.

Each input file is read, simplified and written to `<output-dir>/<name>_squish.txt`
together with its compression ratio, timing and error summary. Run-level
metadata goes to `run_metadata.json` and one record per file to `files.jsonl`.

Example:
    python scripts/squish_e.py data/T-drive/ --ratio 5 --sed-meters 1 --output-dir out/
"""
import argparse
import glob
import logging
import os
import time
from typing import Any, Dict, List, Optional, Tuple

import yaml
from tqdm import tqdm

from squish.engine import reduce
from squish.errors import DataFormatError
from squish.gps_reader import read_points
from squish.metrics import SimplificationReport, build_report, meters_per_degree
from squish.pipeline_helpers import RunMetadataLogger, configure_logging, load_config, log_timing
from squish.report import plot_simplification, save_plot, summary_table, write_simplified

DEFAULTS = {
    "initial_capacity": 4,
    "ratio": 5,
    "sed_meters": 1.0,
    "output_dir": "squish_outputs",
    "plot": False,
    "sort_by_time": False,
}

INPUT_PATTERNS = ("*.txt", "*.csv", "*.plt")


def find_input_files(inputs):
    """Expand globs, directories, or file lists into a list of GPS file paths."""
    files = []
    for inp in inputs:
        if os.path.isdir(inp):
            for pattern in INPUT_PATTERNS:
                files.extend(sorted(glob.glob(os.path.join(inp, pattern))))
        elif '*' in inp or '?' in inp or '[' in inp:
            files.extend(sorted(glob.glob(inp)))
        else:
            files.append(inp)
    # Remove duplicates and non-files
    files = [f for f in sorted(set(files)) if os.path.isfile(f)]
    return files


def output_path_for(input_path: str, output_dir: str) -> str:
    stem = os.path.splitext(os.path.basename(input_path))[0]
    return os.path.join(output_dir, f"{stem}_squish.txt")


def simplify_one_file(input_path: str, settings: Dict[str, Any]) -> Tuple[Dict[str, Any], Optional[SimplificationReport]]:
    output_path = output_path_for(input_path, settings["output_dir"])
    logging.info(f"[START] {input_path} -> {output_path}")
    stats = {"input": input_path, "output": output_path, "ok": False, "error": None}
    try:
        points = read_points(input_path, sort_by_time=settings["sort_by_time"])
    except (DataFormatError, OSError) as e:
        stats["error"] = str(e)
        logging.error(f"[FAIL] {input_path}: {e}")
        return stats, None
    if not points:
        stats["error"] = "no GPS points"
        logging.warning(f"[FAIL] {input_path}: no GPS points read")
        return stats, None

    factor = meters_per_degree(points)
    epsilon = settings["sed_meters"] / factor
    start = time.perf_counter()
    retained = reduce(
        points,
        initial_capacity=settings["initial_capacity"],
        ratio=settings["ratio"],
        epsilon=epsilon,
    )
    elapsed = time.perf_counter() - start
    report = build_report(points, retained, elapsed, conversion_factor=factor)
    write_simplified(output_path, retained, report)

    if settings["plot"]:
        fig, _ = plot_simplification(points, retained, title=os.path.basename(input_path))
        save_plot(fig, os.path.splitext(output_path)[0] + ".png")

    stats.update({"ok": True, "meters_per_degree": factor, "epsilon_deg": epsilon, **report.to_dict()})
    logging.info(
        f"[DONE] {input_path}: {report.original_points} -> {report.retained_points} points "
        f"(ratio {report.compression_ratio:.4f}, max error {report.max_error_m:.3f} m)"
    )
    return stats, report


def validate_settings(settings: Dict[str, Any]) -> None:
    capacity = settings["initial_capacity"]
    if isinstance(capacity, bool) or not isinstance(capacity, int):
        raise ValueError(f"initial_capacity must be an integer, got {capacity!r}")
    if capacity < 3:
        raise ValueError(f"initial_capacity must be >= 3, got {capacity}")
    for key in ("ratio", "sed_meters"):
        value = settings[key]
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            raise ValueError(f"{key} must be a number, got {value!r}")
    if settings["ratio"] <= 0:
        raise ValueError(f"ratio must be positive, got {settings['ratio']}")
    if settings["sed_meters"] < 0:
        raise ValueError(f"sed_meters must be >= 0, got {settings['sed_meters']}")


def resolve_settings(args: argparse.Namespace, parser: argparse.ArgumentParser) -> Dict[str, Any]:
    """Defaults, overlaid by the YAML config, overlaid by explicit flags."""
    settings = dict(DEFAULTS)
    try:
        settings.update(load_config(args.config))
    except (OSError, ValueError, yaml.YAMLError) as e:
        parser.error(f"could not load config {args.config}: {e}")
    for key in DEFAULTS:
        value = getattr(args, key, None)
        if value is not None:
            settings[key] = value
    try:
        validate_settings(settings)
    except ValueError as e:
        parser.error(str(e))
    return settings


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="SQUISH-E simplification of GPS trajectory files.")
    parser.add_argument('inputs', nargs='+', help="Input GPS files, globs, or directories.")
    parser.add_argument('--config', default=None, help="YAML config file; explicit flags take precedence")
    parser.add_argument('--output-dir', '-o', dest='output_dir', default=None, help=f"Output directory (default: {DEFAULTS['output_dir']})")
    parser.add_argument('--initial-capacity', dest='initial_capacity', type=int, default=None, help=f"Starting working-set capacity, >= 3 (default: {DEFAULTS['initial_capacity']})")
    parser.add_argument('--ratio', type=float, default=None, help=f"Capacity grows by one every RATIO points (default: {DEFAULTS['ratio']})")
    parser.add_argument('--sed-meters', dest='sed_meters', type=float, default=None, help=f"Post-pass SED error budget in meters (default: {DEFAULTS['sed_meters']})")
    parser.add_argument('--plot', action='store_true', default=None, help="Save an overlay plot per file")
    parser.add_argument('--sort-by-time', dest='sort_by_time', action='store_true', default=None, help="Sort rows by timestamp before simplifying")
    parser.add_argument('--verbose', action='store_true', help='Enable debug logging')
    return parser


def main(argv: Optional[List[str]] = None) -> List[Dict[str, Any]]:
    parser = build_parser()
    args = parser.parse_args(argv)
    configure_logging(verbose=args.verbose)
    settings = resolve_settings(args, parser)
    logging.info(f"Running SQUISH-E simplification: {settings}")

    files = find_input_files(args.inputs)
    if not files:
        logging.warning("No input files found.")
        return []

    os.makedirs(settings["output_dir"], exist_ok=True)
    metadata_logger = RunMetadataLogger(output_dir=settings["output_dir"])
    metadata_logger.add_stat("settings", settings)

    results = []
    reports = {}
    with log_timing("squish_e"):
        for input_path in tqdm(files, desc="Files"):
            res, report = simplify_one_file(input_path, settings)
            if report is not None:
                reports[os.path.basename(input_path)] = report
            metadata_logger.add_file_record(res)
            results.append(res)

    ok = [r for r in results if r["ok"]]
    total_in = sum(r["original_points"] for r in ok)
    total_out = sum(r["retained_points"] for r in ok)
    metadata_logger.add_stats({
        "files_total": len(results),
        "files_ok": len(ok),
        "points_in": total_in,
        "points_out": total_out,
        "compression_ratio": total_out / total_in if total_in else 0.0,
    })
    metadata_logger.log_stats()
    metadata_logger.save()

    if reports:
        print(summary_table(reports))
    return results


if __name__ == "__main__":
    main()
