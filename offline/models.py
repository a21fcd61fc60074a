from __future__ import annotations
from dataclasses import dataclass
from typing import Optional

from core.errors import InfeasibleError, UnsolvedError
from core.models import Assignment, SolveStatus

@dataclass
class SolutionInfo:
    """Lightweight summary of the MIP solve for logging/eval."""
    backend: str
    runtime: float
    mip_gap: float
    num_bins: int          # candidate bins in the model
    num_variables: int
    num_constraints: int


@dataclass
class PackingResult:
    """
    Outcome of one solve.
    - objective: number of bins used (None unless OPTIMAL)
    - lower_bound: L1 bound of the instance
    - assignment: only set for OPTIMAL
    - info: None when no model was built (empty instance)
    """
    status: SolveStatus
    objective: Optional[int]
    lower_bound: int
    assignment: Optional[Assignment]
    info: Optional[SolutionInfo] = None

    @property
    def is_optimal(self) -> bool:
        return self.status is SolveStatus.OPTIMAL

    def raise_for_status(self) -> "PackingResult":
        """Return self if optimal, otherwise raise the error matching the status."""
        if self.status is SolveStatus.OPTIMAL:
            return self
        if self.status is SolveStatus.INFEASIBLE:
            raise InfeasibleError("Solver proved that no packing respects the bin capacity.")
        if self.status is SolveStatus.NOT_SOLVED:
            raise UnsolvedError("Solver stopped before proving optimality or infeasibility; retry with a larger time limit.")
        raise ValueError(f"Unknown solve status {self.status!r}")
