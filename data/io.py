# binpacking/data/io.py
from __future__ import annotations
from dataclasses import dataclass
from pathlib import Path
import json
import math
from typing import Any, Dict, List

import pandas as pd

from core.config import load_config
from core.errors import ParseError
from core.models import PackingInstance
from offline.models import PackingResult

@dataclass(frozen=True)
class ItemRow:
    """One line of the item file: name;quantity;weight"""
    name: str
    quantity: int
    weight: float

def read_items_csv(path: str | Path) -> List[ItemRow]:
    """
    Read a semicolon-separated item file (no header, blank lines and empty
    fields ignored). Malformed lines raise ParseError with their line number;
    a missing file raises the usual OSError (FileNotFoundError, ...).
    """
    path = Path(path)
    text = path.read_text()
    if not text.strip():
        return []
    width = max(len(ln.split(";")) for ln in text.splitlines())
    # raw strings, one column per field; conversion errors are reported per line below
    df = pd.read_csv(
        path,
        sep=";",
        header=None,
        names=list(range(width)),
        dtype=str,
        skip_blank_lines=False,
        keep_default_na=False,
        engine="python",
    )
    rows: List[ItemRow] = []
    for idx, raw in df.iterrows():
        line_no = int(idx) + 1
        fields = [str(v).strip() for v in raw.tolist() if not pd.isna(v) and str(v).strip()]
        if not fields:
            continue
        if len(fields) != 3:
            raise ParseError(f"{path}:{line_no}: expected 'name;quantity;weight', got {len(fields)} field(s)")
        name, qty_raw, weight_raw = fields
        try:
            quantity = int(qty_raw)
        except ValueError as exc:
            raise ParseError(f"{path}:{line_no}: quantity {qty_raw!r} is not an integer") from exc
        try:
            weight = float(weight_raw)
        except ValueError as exc:
            raise ParseError(f"{path}:{line_no}: weight {weight_raw!r} is not a number") from exc
        if not math.isfinite(weight):
            raise ParseError(f"{path}:{line_no}: weight {weight_raw!r} is not a finite number")
        rows.append(ItemRow(name=name, quantity=quantity, weight=weight))
    return rows

def build_instance(bin_capacity: float, rows: List[ItemRow]) -> PackingInstance:
    """
    Populate an instance via add_items. Invalid quantities/weights raise
    InvalidArgumentError from the instance itself.
    """
    inst = PackingInstance(bin_capacity)
    for row in rows:
        inst.add_items(row.name, row.quantity, row.weight)
    return inst

def load_instance(config_path: str | Path, data_path: str | Path) -> PackingInstance:
    """
    Capacity from the YAML config, items from the CSV data file.
    """
    cfg = load_config(config_path)
    return build_instance(cfg.packing.bin_capacity, read_items_csv(data_path))

def result_to_dict(result: PackingResult) -> Dict[str, Any]:
    """
    JSON-safe view of a PackingResult.
    """
    data: Dict[str, Any] = {
        "status": result.status.value,
        "objective": result.objective,
        "lower_bound": result.lower_bound,
        "bins": None,
        "info": None,
    }
    if result.assignment is not None:
        a = result.assignment
        data["bins"] = [
            {
                "bin": j,
                "load": a.loads[j],
                "items": [{"name": it.name, "weight": it.weight} for it in a.bins[j]],
            }
            for j in a.used_bins
        ]
        data["total_weight"] = a.total_weight
    if result.info is not None:
        info = result.info
        data["info"] = {
            "backend": info.backend,
            "runtime": info.runtime,
            "mip_gap": info.mip_gap if math.isfinite(info.mip_gap) else None,
            "num_bins": info.num_bins,
            "num_variables": info.num_variables,
            "num_constraints": info.num_constraints,
        }
    return data

def save_result(result: PackingResult, path: Path) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(result_to_dict(result), indent=2))
