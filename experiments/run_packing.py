from __future__ import annotations

import sys
from pathlib import Path
sys.path.append(str(Path(__file__).parent.parent))

import argparse
from datetime import datetime
from typing import List, Optional

from core.config import load_config
from core.errors import InvalidArgumentError, ParseError
from core.logging_setup import setup_logging
from core.models import SolveStatus
from core.offline_utils import print_packing_summary
from data.io import build_instance, read_items_csv, save_result
from offline.bounds import l1_bound
from offline.offline_solver import BinPackingSolver

EXIT_OK = 0
EXIT_BAD_INPUT = 1
EXIT_INFEASIBLE = 2
EXIT_UNSOLVED = 3


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Pack items into the fewest bins (exact MIP).")
    parser.add_argument("--config", type=Path, default=Path("configs/default.yaml"), help="YAML config with the bin capacity.")
    parser.add_argument("--data", type=Path, default=Path("configs/items_example.csv"), help="Item file, one 'name;quantity;weight' per line.")
    parser.add_argument("--bound-only", action="store_true", help="Only print the L1 lower bound, do not solve.")
    parser.add_argument("--backend", choices=["gurobi", "ortools"], help="Override solver.backend.")
    parser.add_argument("--time-limit", type=float, help="Override solver.time_limit (seconds).")
    parser.add_argument("--tighten", action="store_true", help="Use the FFD bin count as the number of candidate bins.")
    parser.add_argument("--output", type=Path, help="Write the result as JSON.")
    parser.add_argument("--plot", type=Path, help="Save a bar chart of the packing.")
    return parser.parse_args(argv)


def main(argv: Optional[List[str]] = None) -> int:
    args = parse_args(argv)
    try:
        cfg = load_config(args.config)
        if args.backend:
            cfg.solver.backend = args.backend
        if args.time_limit is not None:
            if args.time_limit <= 0:
                raise ParseError("--time-limit must be > 0")
            cfg.solver.time_limit = args.time_limit
        if args.tighten:
            cfg.solver.tighten_bin_count = True
        logger = setup_logging(Path(cfg.logging.log_dir), level=cfg.logging.level)
        inst = build_instance(cfg.packing.bin_capacity, read_items_csv(args.data))
    except (ParseError, InvalidArgumentError) as exc:
        print(f"Invalid input: {exc}", file=sys.stderr)
        return EXIT_BAD_INPUT
    except OSError as exc:
        print(f"Cannot read input: {exc}", file=sys.stderr)
        return EXIT_BAD_INPUT

    start_time = datetime.now()
    logger.info("Job started at: %s", start_time.strftime("%Y-%m-%d %H:%M:%S"))
    logger.info("Instance: %d items, capacity %g, total weight %g", len(inst), inst.bin_capacity, inst.total_weight)

    bound = l1_bound(inst)
    print(f"L1 Bound: {bound}")

    exit_code = EXIT_OK
    if not args.bound_only:
        try:
            result = BinPackingSolver(cfg).solve(inst)
        except InvalidArgumentError as exc:
            # e.g. an OR-Tools build without the configured solver
            print(f"Invalid solver setup: {exc}", file=sys.stderr)
            return EXIT_BAD_INPUT
        print_packing_summary(result)
        if args.output:
            save_result(result, args.output)
            logger.info("Result written to %s", args.output)

        if result.status is SolveStatus.OPTIMAL:
            if args.plot:
                from plots.bin_loads import plot_bin_loads
                plot_bin_loads(result, inst.bin_capacity, save_path=args.plot)
                logger.info("Plot written to %s", args.plot)
        elif result.status is SolveStatus.INFEASIBLE:
            print("The problem is infeasible: some item does not fit into a bin.")
            exit_code = EXIT_INFEASIBLE
        elif result.status is SolveStatus.NOT_SOLVED:
            print("The solver stopped before finding a proven optimum; try a larger --time-limit.")
            exit_code = EXIT_UNSOLVED

    end_time = datetime.now()
    duration = end_time - start_time
    logger.info(
        "Job completed at: %s. Took %.3fs",
        end_time.strftime("%Y-%m-%d %H:%M:%S"),
        duration.total_seconds(),
    )
    return exit_code


if __name__ == "__main__":
    sys.exit(main())
