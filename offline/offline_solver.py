from __future__ import annotations
import logging
from typing import Callable, Optional

from core.config import Config
from core.errors import InternalInconsistencyError
from core.models import Assignment, PackingInstance, SolveStatus
from offline.bounds import ffd_upper_bound, l1_bound
from offline.engines import SolverEngine, make_engine
from offline.extraction import SolutionExtractor
from offline.formulation import FormulationBuilder
from offline.models import PackingResult, SolutionInfo

logger = logging.getLogger("binpacking.offline")

class BinPackingSolver:
    """
    Exact bin packing via MIP.

    Pipeline per call to solve():
    - L1 bound (always, cheap)
    - build x/y model on a fresh engine (one candidate bin per item, or the
      First-Fit-Decreasing bin count if tighten_bin_count is set)
    - blocking solve, optionally under a time limit
    - extract + validate the packing when the status is OPTIMAL
    """

    def __init__(
        self,
        cfg: Config,
        *,
        engine_factory: Optional[Callable[[], SolverEngine]] = None,
        time_limit: Optional[float] = None,
        tighten_bin_count: Optional[bool] = None,
    ) -> None:
        self.cfg = cfg
        self.time_limit = time_limit if time_limit is not None else cfg.solver.time_limit
        self.tighten_bin_count = (
            cfg.solver.tighten_bin_count if tighten_bin_count is None else tighten_bin_count
        )
        self.engine_factory = engine_factory or (
            lambda: make_engine(cfg.solver, time_limit=self.time_limit)
        )
        self.extractor = SolutionExtractor()

    # ---------- Public API ----------

    def solve(self, inst: PackingInstance) -> PackingResult:
        """
        Build the model, solve it and extract the packing.
        """
        bound = l1_bound(inst)

        if len(inst) == 0:
            logger.info("Empty instance: nothing to pack")
            return PackingResult(
                status=SolveStatus.OPTIMAL,
                objective=0,
                lower_bound=0,
                assignment=Assignment(),
            )

        num_bins = inst.max_bins
        if self.tighten_bin_count:
            # at least one bin, so an instance FFD cannot pack still reaches the solver
            num_bins = min(max(ffd_upper_bound(inst), 1), inst.max_bins)

        engine = self.engine_factory()
        form = FormulationBuilder(engine).build(inst, num_bins=num_bins)
        logger.info(
            "Solving %d items on %d candidate bins with %s (L1 bound %d)",
            len(inst), num_bins, engine.name, bound,
        )
        status = engine.solve(self.time_limit)

        info = SolutionInfo(
            backend=engine.name,
            runtime=float(engine.runtime),
            mip_gap=float(engine.mip_gap),
            num_bins=num_bins,
            num_variables=form.num_variables,
            num_constraints=form.num_constraints,
        )

        if status is SolveStatus.OPTIMAL:
            assignment = self.extractor.extract(form, engine)
            objective = int(round(engine.objective_value()))
            if assignment.num_bins > objective:
                raise InternalInconsistencyError(
                    f"Packing uses {assignment.num_bins} bins but the solver reported {objective}"
                )
            if assignment.num_bins < bound:
                raise InternalInconsistencyError(
                    f"Packing uses {assignment.num_bins} bins, below the L1 bound {bound}"
                )
            logger.info("Optimal: %d bins (L1 bound %d) in %.3fs", assignment.num_bins, bound, info.runtime)
            return PackingResult(status, assignment.num_bins, bound, assignment, info)

        if status is SolveStatus.INFEASIBLE:
            logger.warning("Solver proved the instance infeasible (an item may exceed the capacity)")
        elif status is SolveStatus.NOT_SOLVED:
            logger.warning("Solver stopped without a proof after %.3fs (time limit %s)", info.runtime, self.time_limit)
        else:
            raise ValueError(f"Unknown solve status {status!r}")
        return PackingResult(status, None, bound, None, info)
