from __future__ import annotations

import logging
import math
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Tuple

from core.errors import InvalidArgumentError
from core.models import PackingInstance
from offline.engines import SolverEngine

logger = logging.getLogger("binpacking.formulation")


@dataclass
class Formulation:
    """
    Handles to the variables of one emitted model.
    - x: (item index, bin index) -> assignment variable
    - y: bin index -> usage variable
    """
    instance: PackingInstance
    num_bins: int
    x: Dict[Tuple[int, int], Any] = field(default_factory=dict)
    y: List[Any] = field(default_factory=list)
    num_constraints: int = 0

    @property
    def num_variables(self) -> int:
        return len(self.x) + len(self.y)


class FormulationBuilder:
    """
    Encodes bin packing as a 0/1 program over `num_bins` candidate bins:

        x[i, j] = 1  iff item i is packed into bin j
        y[j]    = 1  iff bin j is used

        sum_j x[i, j] = 1                        for every item i
        C * y[j] - sum_i w_i * x[i, j] >= 0      for every bin j
        minimize sum_j y[j]

    The capacity row also links x to y: with positive weights, any item in
    bin j forces y[j] = 1.
    """

    def __init__(self, engine: SolverEngine) -> None:
        self.engine = engine

    def build(self, instance: PackingInstance, num_bins: Optional[int] = None) -> Formulation:
        """
        Emit variables, constraints and objective to the engine. Does not solve.
        `num_bins` defaults to one candidate bin per item; a tighter value must
        itself be a valid upper bound on the optimum.
        """
        items = instance.items
        if num_bins is None:
            num_bins = instance.max_bins
        if not 0 <= num_bins <= instance.max_bins:
            raise InvalidArgumentError(
                f"num_bins must be in [0, {instance.max_bins}], got {num_bins}"
            )

        form = Formulation(instance=instance, num_bins=num_bins)
        eng = self.engine
        M = len(items)
        N = num_bins

        for i in range(M):
            for j in range(N):
                form.x[(i, j)] = eng.add_binary_var(f"x_{i}_{j}")
        form.y = [eng.add_binary_var(f"y_{j}") for j in range(N)]

        # Each item in exactly one bin
        for i in range(M):
            eng.add_linear_constraint(
                [(1.0, form.x[(i, j)]) for j in range(N)], 1.0, 1.0, name=f"assign_{i}"
            )
            form.num_constraints += 1

        # 0 <= C * y[j] - sum_i w_i * x[i, j]
        for j in range(N):
            terms = [(instance.bin_capacity, form.y[j])]
            terms += [(-items[i].weight, form.x[(i, j)]) for i in range(M)]
            eng.add_linear_constraint(terms, 0.0, math.inf, name=f"cap_{j}")
            form.num_constraints += 1

        eng.set_objective([(1.0, y_j) for y_j in form.y], minimize=True)

        logger.debug(
            "Built model: %d items x %d bins -> %d variables, %d constraints",
            M, N, form.num_variables, form.num_constraints,
        )
        return form
