from __future__ import annotations

import logging

import numpy as np

from core.errors import InternalInconsistencyError
from core.models import Assignment
from core.offline_utils import check_capacity_respected, check_unique_assignment
from offline.engines import SolverEngine
from offline.formulation import Formulation

logger = logging.getLogger("binpacking.extraction")


class SolutionExtractor:
    """
    Reads solved x / y values back into an Assignment and re-checks the
    invariants the formulation is supposed to guarantee. Any violation means a
    bug in the formulation or the engine adapter and is raised, never repaired.
    """

    def __init__(self, tolerance: float = 1e-4) -> None:
        self.tolerance = tolerance

    def _as_binary(self, value: float, name: str) -> int:
        # solvers accept integrality slack (Gurobi IntFeasTol defaults to 1e-5)
        if abs(value) <= self.tolerance:
            return 0
        if abs(value - 1.0) <= self.tolerance:
            return 1
        raise InternalInconsistencyError(f"Binary variable {name} has non-integral value {value!r}")

    def extract(self, form: Formulation, engine: SolverEngine) -> Assignment:
        """Only valid after the engine reported OPTIMAL."""
        instance = form.instance
        items = instance.items
        M, N = len(items), form.num_bins

        x_sol = np.zeros((M, N), dtype=int)
        for (i, j), var in form.x.items():
            x_sol[i, j] = self._as_binary(engine.value(var), f"x_{i}_{j}")
        y_sol = np.array(
            [self._as_binary(engine.value(var), f"y_{j}") for j, var in enumerate(form.y)],
            dtype=int,
        )

        names = [it.name for it in items]
        check_unique_assignment(x_sol, names)
        weights = np.array([it.weight for it in items], dtype=float)
        loads = check_capacity_respected(x_sol, weights, instance.bin_capacity)

        # items may only sit in bins that are marked as used
        unmarked = [j for j in range(N) if x_sol[:, j].any() and not y_sol[j]]
        if unmarked:
            raise InternalInconsistencyError(f"Bins {unmarked[:10]} hold items but y[j] = 0")

        assignment = Assignment()
        for j in range(N):
            if not y_sol[j]:
                continue
            packed = [items[i] for i in range(M) if x_sol[i, j]]
            if not packed:
                # only possible when a non-zero MIP gap let the search stop early
                logger.warning("Bin %d is marked as used but holds no items; dropped", j)
                continue
            assignment.bins[j] = packed
            assignment.loads[j] = float(loads[j])
            for item in packed:
                assignment.item_to_bin[item.name] = j
        return assignment
