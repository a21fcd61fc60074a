from __future__ import annotations

import sys
from pathlib import Path
sys.path.append(str(Path(__file__).parent.parent))

import argparse
from typing import Any, Dict, List, Optional

import pandas as pd

from core.config import load_config
from core.general_utils import set_global_seed
from core.logging_setup import CSVWriter, run_stamp, setup_logging
from data.generators import generate_random_instance
from offline.bounds import l1_bound
from offline.offline_heuristics.first_fit_decreasing import FirstFitDecreasing
from offline.offline_solver import BinPackingSolver

HEADERS = ["seed", "items", "capacity", "l1", "ffd", "ffd_runtime", "ffd_utilization", "milp", "status", "runtime", "candidate_bins"]


def run_one(cfg, num_items: int, seed: int, item_types: int) -> Dict[str, Any]:
    """Compare L1 bound, FFD and the exact optimum on one random instance."""
    set_global_seed(seed)
    inst = generate_random_instance(cfg.packing.bin_capacity, num_items, seed, item_types=item_types)
    _, ffd = FirstFitDecreasing().solve(inst)
    result = BinPackingSolver(cfg).solve(inst)
    return {
        "seed": seed,
        "items": len(inst),
        "capacity": inst.bin_capacity,
        "l1": l1_bound(inst),
        "ffd": ffd.num_bins,
        "ffd_runtime": ffd.runtime,
        "ffd_utilization": ffd.utilization,
        "milp": result.objective,
        "status": result.status.value,
        "runtime": result.info.runtime if result.info else 0.0,
        "candidate_bins": result.info.num_bins if result.info else 0,
    }


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Measure how far L1 and FFD are from the exact optimum.")
    parser.add_argument("--config", type=Path, default=Path("configs/default.yaml"))
    parser.add_argument("--items", type=int, default=12)
    parser.add_argument("--seeds", type=int, nargs="+", default=[1, 2, 3])
    parser.add_argument("--item-types", type=int, default=0)
    parser.add_argument("--output-dir", type=Path, default=Path("results"))
    return parser.parse_args(argv)


def main(argv: Optional[List[str]] = None) -> pd.DataFrame:
    args = parse_args(argv)
    cfg = load_config(args.config)
    logger = setup_logging(Path(cfg.logging.log_dir), level=cfg.logging.level)

    out = args.output_dir / f"bound_gap_{run_stamp()}.csv"
    writer = CSVWriter(out, HEADERS)
    rows = []
    for seed in args.seeds:
        row = run_one(cfg, args.items, seed, args.item_types)
        writer.write_row(row)
        rows.append(row)
        logger.info("seed=%d: L1=%d FFD=%d MILP=%s (%s)", seed, row["l1"], row["ffd"], row["milp"], row["status"])

    df = pd.DataFrame(rows, columns=HEADERS)
    solved = df[df["status"] == "OPTIMAL"]
    print(df.to_string(index=False))
    if not solved.empty:
        print(f"\nL1 tight on {(solved['l1'] == solved['milp']).mean():.0%} of solved instances, "
              f"FFD optimal on {(solved['ffd'] == solved['milp']).mean():.0%}")
    print(f"FFD mean runtime {df['ffd_runtime'].mean():.4f}s, "
          f"mean utilization {df['ffd_utilization'].mean():.1%}")
    print(f"Results saved to {out}")
    return df


if __name__ == "__main__":
    main()
