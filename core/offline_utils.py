from typing import List

import numpy as np

from core.errors import InternalInconsistencyError
from core.general_utils import fits


def check_unique_assignment(x: np.ndarray, item_names: List[str]) -> None:
    """Ensure each item is assigned exactly once (x: items x bins, 0/1)."""
    row_sums = x.sum(axis=1) if x.size else np.zeros(len(item_names), dtype=int)
    if not np.all(row_sums == 1):
        bad_rows = np.where(row_sums != 1)[0].tolist()
        bad = [f"{item_names[j]} (in {int(row_sums[j])} bins)" for j in bad_rows[:10]]
        raise InternalInconsistencyError(f"Each item must be assigned exactly once. Violations: {bad}")


def check_capacity_respected(x: np.ndarray, weights: np.ndarray, capacity: float) -> np.ndarray:
    """Ensure no bin exceeds the capacity. Returns the load per bin."""
    loads = weights @ x if x.size else np.zeros(x.shape[1], dtype=float)
    viol = [i for i, load in enumerate(loads) if not fits(float(load), capacity)]
    if viol:
        raise InternalInconsistencyError(
            f"Capacity violation at bins (0-based): {viol[:10]} "
            f"(loads {np.round(loads[viol[:10]], 6).tolist()} > {capacity})"
        )
    return loads


def print_packing_summary(result) -> None:
    """Standardized console report for a packing run."""
    separator = "=" * 20
    print("\n=== BIN PACKING RESULT ===")
    print(f"Status:           {result.status.value}")
    print(f"L1 bound:         {result.lower_bound}")
    if result.info is not None:
        print(f"Backend:          {result.info.backend}")
        print(f"Candidate bins:   {result.info.num_bins}")
        print(f"Runtime (s):      {round(result.info.runtime, 3)}")

    if result.assignment is None:
        print("No packing available.")
        return

    assignment = result.assignment
    print(f"Number of bins used: {assignment.num_bins}\n{separator}")
    for j in assignment.used_bins:
        print(f"Bin {j}")
        for item in assignment.bins[j]:
            print(f"Item {item.name} - Weight {item.weight:g}")
        print(f"Packed bin weight: {assignment.loads[j]:g}\n{separator}")
    print(f"Total packed weight: {assignment.total_weight:g}")

