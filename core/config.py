# binpacking/core/config.py
from __future__ import annotations
from dataclasses import dataclass, fields
from typing import Any, Dict, Optional
import math
import yaml
from pathlib import Path

from core.errors import ParseError

BACKENDS = ("gurobi", "ortools")
ORTOOLS_SOLVERS = ("CBC", "SCIP")

@dataclass
class PackingConfig:
    """
    Problem parameters shared by every item list.
    - bin_capacity: uniform capacity of all bins (> 0)
    """
    bin_capacity: float

@dataclass
class SolverConfig:
    """
    MIP backend options.
    - backend: 'gurobi' | 'ortools'
    - time_limit: seconds; None means no limit (a hit limit is reported as NOT_SOLVED)
    - mip_gap: relative gap at which the backend may stop (0.0 = prove optimality)
    - threads: 0 lets the backend decide
    - log_to_console: forward the backend's own search log to stdout
    - tighten_bin_count: use the First-Fit-Decreasing bin count instead of one bin per item
    - ortools_solver: MIP engine behind OR-Tools ('CBC' or 'SCIP')
    """
    backend: str = "gurobi"
    time_limit: Optional[float] = None
    mip_gap: float = 0.0
    threads: int = 0
    log_to_console: bool = False
    tighten_bin_count: bool = False
    ortools_solver: str = "CBC"

@dataclass
class LoggingConfig:
    log_dir: str = "logs"
    level: str = "INFO"

@dataclass
class Config:
    packing: PackingConfig
    solver: SolverConfig
    logging: LoggingConfig

def load_config(path: str | Path) -> Config:
    """
    Load YAML into strongly-typed dataclasses. Fails early (ParseError) on
    missing or unknown keys and on values of the wrong type or range.
    """
    try:
        data = yaml.safe_load(Path(path).read_text())
    except yaml.YAMLError as exc:
        raise ParseError(f"{path}: invalid YAML ({exc})") from exc
    return parse_config(data, source=str(path))

def parse_config(data: Any, source: str = "<config>") -> Config:
    if not isinstance(data, dict):
        raise ParseError(f"{source}: top level must be a mapping")
    _reject_unknown(data, {"packing", "solver", "logging"}, source)
    if "packing" not in data:
        raise ParseError(f"{source}: missing required section 'packing'")

    packing = _section(data, "packing", PackingConfig, source)
    solver = _section(data, "solver", SolverConfig, source)
    logging_cfg = _section(data, "logging", LoggingConfig, source)

    # ---- value checks ----
    packing.bin_capacity = _number(packing.bin_capacity, "packing.bin_capacity", source)
    if packing.bin_capacity <= 0:
        raise ParseError(f"{source}: packing.bin_capacity must be > 0")

    if solver.backend not in BACKENDS:
        raise ParseError(f"{source}: solver.backend must be one of {BACKENDS}, got {solver.backend!r}")
    if solver.ortools_solver not in ORTOOLS_SOLVERS:
        raise ParseError(f"{source}: solver.ortools_solver must be one of {ORTOOLS_SOLVERS}")
    if solver.time_limit is not None:
        solver.time_limit = _number(solver.time_limit, "solver.time_limit", source)
        if solver.time_limit <= 0:
            raise ParseError(f"{source}: solver.time_limit must be > 0 (or null for no limit)")
    solver.mip_gap = _number(solver.mip_gap, "solver.mip_gap", source)
    if not 0.0 <= solver.mip_gap < 1.0:
        raise ParseError(f"{source}: solver.mip_gap must be in [0, 1)")
    if isinstance(solver.threads, bool) or not isinstance(solver.threads, int) or solver.threads < 0:
        raise ParseError(f"{source}: solver.threads must be a non-negative integer")
    for flag in ("log_to_console", "tighten_bin_count"):
        if not isinstance(getattr(solver, flag), bool):
            raise ParseError(f"{source}: solver.{flag} must be true/false")

    if not isinstance(logging_cfg.log_dir, str) or not isinstance(logging_cfg.level, str):
        raise ParseError(f"{source}: logging.log_dir and logging.level must be strings")
    logging_cfg.level = logging_cfg.level.upper()
    if logging_cfg.level not in {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}:
        raise ParseError(f"{source}: unknown logging.level {logging_cfg.level!r}")

    return Config(packing=packing, solver=solver, logging=logging_cfg)

def _section(data: Dict[str, Any], key: str, cls, source: str):
    raw = data.get(key)
    if raw is None:
        raw = {}
    if not isinstance(raw, dict):
        raise ParseError(f"{source}: section '{key}' must be a mapping")
    _reject_unknown(raw, {f.name for f in fields(cls)}, f"{source}: {key}")
    try:
        return cls(**raw)
    except TypeError as exc:
        # missing required field
        raise ParseError(f"{source}: section '{key}': {exc}") from exc

def _reject_unknown(raw: Dict[str, Any], allowed: set, where: str) -> None:
    unknown = sorted(set(raw) - allowed)
    if unknown:
        raise ParseError(f"{where}: unknown key(s) {unknown}")

def _number(value: Any, key: str, source: str) -> float:
    if isinstance(value, bool) or not isinstance(value, (int, float)) or not math.isfinite(value):
        raise ParseError(f"{source}: {key} must be a finite number, got {value!r}")
    return float(value)
