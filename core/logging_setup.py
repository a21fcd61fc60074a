# binpacking/core/logging_setup.py
from __future__ import annotations
import logging
from pathlib import Path
import csv
from datetime import datetime

LOGGER_NAME = "binpacking"

def setup_logging(log_dir: Path, name: str = LOGGER_NAME, level: str = "INFO") -> logging.Logger:
    """
    Configure the package logger with a file handler (<log_dir>/<name>.log) and
    a console handler. Library modules log to children of this logger
    (e.g. 'binpacking.offline'), so their records end up here too.
    """
    log_dir = Path(log_dir)
    log_dir.mkdir(parents=True, exist_ok=True)
    logger = logging.getLogger(name)
    logger.setLevel(level)
    fmt = logging.Formatter("%(asctime)s - %(name)s - %(levelname)s - %(message)s")
    # Avoid duplicate handlers on reruns
    if not logger.handlers:
        fh = logging.FileHandler(log_dir / f"{name}.log")
        fh.setFormatter(fmt)
        ch = logging.StreamHandler()
        ch.setFormatter(fmt)
        logger.addHandler(fh)
        logger.addHandler(ch)
    for handler in logger.handlers:
        handler.setLevel(level)
    return logger

class CSVWriter:
    """
    Minimal CSV writer for experiment rows (e.g., seed, items, l1, ffd, milp).
    """
    def __init__(self, path: Path, headers: list[str]):
        path.parent.mkdir(parents=True, exist_ok=True)
        self.path = path
        self.headers = headers
        if not path.exists():
            with path.open("w", newline="") as f:
                writer = csv.DictWriter(f, fieldnames=headers)
                writer.writeheader()

    def write_row(self, row: dict) -> None:
        with self.path.open("a", newline="") as f:
            writer = csv.DictWriter(f, fieldnames=self.headers)
            writer.writerow(row)

def run_stamp() -> str:
    """
    Timestamp string for run folders.
    """
    return datetime.now().strftime("%Y%m%d_%H%M%S")
