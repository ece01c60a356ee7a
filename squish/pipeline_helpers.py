import logging
import sys
import os
import json
import time
from contextlib import contextmanager
from typing import Any, Dict, Optional

import jsonlines
import yaml


def configure_logging(verbose: bool = False):
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(asctime)s - %(levelname)s - %(message)s",
        stream=sys.stdout,
    )


@contextmanager
def log_timing(task_name):
    start = time.perf_counter()
    try:
        yield
    finally:
        elapsed = time.perf_counter() - start
        logging.info(f"[{task_name}] Completed in {elapsed:.2f} seconds.")


def load_config(config_path: Optional[str]) -> Dict[str, Any]:
    """Load a YAML run config. A missing path yields an empty config."""
    if not config_path:
        return {}
    with open(config_path, "r") as f:
        config = yaml.safe_load(f) or {}
    if not isinstance(config, dict):
        raise ValueError(f"Config {config_path} must be a mapping, got {type(config).__name__}")
    return config


class RunMetadataLogger:
    """
    Collects run-level stats for a simplification batch.

    Run-level stats go to `run_metadata.json`; one record per processed file is
    appended to `files.jsonl` as soon as the file is done, so partial batches
    still leave a trace.
    """

    def __init__(self, output_dir: str, filename: str = "run_metadata.json", records_filename: str = "files.jsonl"):
        self.output_dir = output_dir
        self.metadata: Dict[str, Any] = {}
        self.filepath = os.path.join(output_dir, filename)
        self.records_path = os.path.join(output_dir, records_filename)

    def add_stat(self, key: str, value: Any):
        self.metadata[key] = value

    def add_stats(self, stats: Dict[str, Any]):
        self.metadata.update(stats)

    def add_file_record(self, record: Dict[str, Any]):
        os.makedirs(self.output_dir, exist_ok=True)
        with jsonlines.open(self.records_path, mode="a") as writer:
            writer.write(record)

    def log_stats(self, level=logging.INFO):
        for key, value in self.metadata.items():
            logging.log(level, f"[METADATA] {key}: {value}")

    def save(self):
        os.makedirs(self.output_dir, exist_ok=True)
        with open(self.filepath, "w") as f:
            json.dump(self.metadata, f, indent=2)
        logging.info(f"Run metadata saved to {self.filepath}")

    def get(self, key: str, default=None):
        return self.metadata.get(key, default)
