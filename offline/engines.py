from __future__ import annotations

import logging
import math
from typing import Any, Callable, Optional, Protocol, Sequence, Tuple

import gurobipy as gp
from gurobipy import GRB
from ortools.linear_solver import pywraplp

from core.config import SolverConfig
from core.errors import InvalidArgumentError
from core.models import SolveStatus

logger = logging.getLogger("binpacking.engines")

Term = Tuple[float, Any]  # (coefficient, variable)


class SolverEngine(Protocol):
    """
    Narrow interface to an exact MIP backend. The formulation only talks to
    this; it never inspects the backend's search state.
    """

    name: str
    runtime: float
    mip_gap: float

    def add_binary_var(self, name: str) -> Any:
        """Create a 0/1 decision variable (name is for debugging only)."""
        ...

    def add_linear_constraint(
        self,
        terms: Sequence[Term],
        lower: float,
        upper: float,
        name: str = "",
    ) -> Any:
        """
        Add lower <= sum(coef * var) <= upper.

        Parameters
        ----------
        terms:
            (coefficient, variable) pairs.
        lower, upper:
            Bounds of the row; use -math.inf / math.inf for a one-sided row.
        """
        ...

    def set_objective(self, terms: Sequence[Term], minimize: bool = True) -> None:
        ...

    def solve(self, time_limit: Optional[float] = None) -> SolveStatus:
        """
        Run the exact search. Hitting the time limit (or any other abort)
        yields NOT_SOLVED, never INFEASIBLE.
        """
        ...

    def value(self, var: Any) -> float:
        """Solved value of `var`; only meaningful after an OPTIMAL solve."""
        ...

    def objective_value(self) -> float:
        ...

    @property
    def num_variables(self) -> int:
        ...

    @property
    def num_constraints(self) -> int:
        ...


# ---------- Gurobi ----------

def _gurobi_status(code: int) -> SolveStatus:
    """
    Map Gurobi status codes onto the three outcomes we distinguish.
    All our models are bounded (binary variables only), so INF_OR_UNBD
    can only mean infeasible.
    """
    if code == GRB.OPTIMAL:
        return SolveStatus.OPTIMAL
    if code in (GRB.INFEASIBLE, GRB.INF_OR_UNBD):
        return SolveStatus.INFEASIBLE
    # TIME_LIMIT, INTERRUPTED, SUBOPTIMAL, NODE_LIMIT, ...
    return SolveStatus.NOT_SOLVED


class GurobiEngine:
    """SolverEngine backed by gurobipy."""

    name = "gurobi"

    def __init__(
        self,
        *,
        time_limit: Optional[float] = None,
        mip_gap: float = 0.0,
        threads: int = 0,
        log_to_console: bool = False,
        model_name: str = "bin_packing",
    ) -> None:
        self.time_limit = time_limit
        self.gap_limit = mip_gap
        self.mip_gap = math.inf
        self.threads = threads
        self.log_to_console = log_to_console
        self.runtime = 0.0
        self.model = gp.Model(model_name)
        self.model.Params.OutputFlag = 1 if log_to_console else 0

    def add_binary_var(self, name: str) -> gp.Var:
        return self.model.addVar(vtype=GRB.BINARY, name=name)

    def add_linear_constraint(self, terms, lower, upper, name=""):
        if lower > upper:
            raise InvalidArgumentError(f"Constraint '{name}': lower bound {lower} > upper bound {upper}")
        expr = gp.LinExpr([c for c, _ in terms], [v for _, v in terms])
        if lower == upper:
            return self.model.addLConstr(expr, GRB.EQUAL, lower, name=name)
        if math.isinf(upper):
            return self.model.addLConstr(expr, GRB.GREATER_EQUAL, lower, name=name)
        if math.isinf(lower):
            return self.model.addLConstr(expr, GRB.LESS_EQUAL, upper, name=name)
        return self.model.addRange(expr, lower, upper, name=name)

    def set_objective(self, terms, minimize=True) -> None:
        expr = gp.LinExpr([c for c, _ in terms], [v for _, v in terms])
        self.model.setObjective(expr, GRB.MINIMIZE if minimize else GRB.MAXIMIZE)

    def solve(self, time_limit: Optional[float] = None) -> SolveStatus:
        m = self.model
        limit = time_limit if time_limit is not None else self.time_limit
        if limit is not None:
            m.Params.TimeLimit = limit
        m.Params.MIPGap = self.gap_limit
        if self.threads:
            m.Params.Threads = self.threads

        m.optimize()
        self.runtime = float(m.Runtime)
        status = _gurobi_status(m.Status)
        # MIPGap is only readable once an incumbent exists
        self.mip_gap = float(m.MIPGap) if m.SolCount > 0 else math.inf
        logger.debug("Gurobi finished with status code %s -> %s", m.Status, status.value)
        return status

    def value(self, var: gp.Var) -> float:
        return float(var.X)

    def objective_value(self) -> float:
        return float(self.model.ObjVal)

    @property
    def num_variables(self) -> int:
        self.model.update()
        return int(self.model.NumVars)

    @property
    def num_constraints(self) -> int:
        self.model.update()
        return int(self.model.NumConstrs)


# ---------- OR-Tools ----------

def _ortools_status(code: int) -> SolveStatus:
    if code == pywraplp.Solver.OPTIMAL:
        return SolveStatus.OPTIMAL
    if code == pywraplp.Solver.INFEASIBLE:
        return SolveStatus.INFEASIBLE
    # FEASIBLE (limit hit with an incumbent), NOT_SOLVED, ABNORMAL, ...
    return SolveStatus.NOT_SOLVED


class OrToolsEngine:
    """SolverEngine backed by the OR-Tools linear solver wrapper (CBC or SCIP)."""

    name = "ortools"

    def __init__(
        self,
        *,
        solver_id: str = "CBC",
        time_limit: Optional[float] = None,
        mip_gap: float = 0.0,
        threads: int = 0,
        log_to_console: bool = False,
    ) -> None:
        self.solver = pywraplp.Solver.CreateSolver(solver_id)
        if self.solver is None:
            raise InvalidArgumentError(f"OR-Tools solver {solver_id!r} is unavailable in this build.")
        self.solver_id = solver_id
        self.time_limit = time_limit
        self.gap_limit = mip_gap
        self.mip_gap = math.inf
        self.runtime = 0.0
        if threads:
            self.solver.SetNumThreads(threads)
        if log_to_console:
            self.solver.EnableOutput()

    def _bound(self, value: float) -> float:
        if math.isinf(value):
            return self.solver.infinity() if value > 0 else -self.solver.infinity()
        return value

    def add_binary_var(self, name: str):
        return self.solver.BoolVar(name)

    def add_linear_constraint(self, terms, lower, upper, name=""):
        if lower > upper:
            raise InvalidArgumentError(f"Constraint '{name}': lower bound {lower} > upper bound {upper}")
        ct = self.solver.Constraint(self._bound(lower), self._bound(upper), name)
        for coef, var in terms:
            ct.SetCoefficient(var, coef)
        return ct

    def set_objective(self, terms, minimize=True) -> None:
        objective = self.solver.Objective()
        objective.Clear()
        for coef, var in terms:
            objective.SetCoefficient(var, coef)
        if minimize:
            objective.SetMinimization()
        else:
            objective.SetMaximization()

    def solve(self, time_limit: Optional[float] = None) -> SolveStatus:
        limit = time_limit if time_limit is not None else self.time_limit
        if limit is not None:
            self.solver.SetTimeLimit(int(math.ceil(limit * 1000)))
        params = pywraplp.MPSolverParameters()
        params.SetDoubleParam(pywraplp.MPSolverParameters.RELATIVE_MIP_GAP, self.gap_limit)

        code = self.solver.Solve(params)
        self.runtime = self.solver.wall_time() / 1000.0
        status = _ortools_status(code)
        if status is SolveStatus.OPTIMAL:
            obj = self.solver.Objective()
            self.mip_gap = abs(obj.Value() - obj.BestBound()) / max(abs(obj.Value()), 1e-10)
        else:
            self.mip_gap = math.inf
        logger.debug("OR-Tools %s finished with status code %s -> %s", self.solver_id, code, status.value)
        return status

    def value(self, var) -> float:
        return float(var.solution_value())

    def objective_value(self) -> float:
        return float(self.solver.Objective().Value())

    @property
    def num_variables(self) -> int:
        return int(self.solver.NumVariables())

    @property
    def num_constraints(self) -> int:
        return int(self.solver.NumConstraints())


EngineFactory = Callable[[], SolverEngine]


def make_engine(cfg: SolverConfig, *, time_limit: Optional[float] = None) -> SolverEngine:
    """Build a fresh engine for the configured backend (one engine per solve)."""
    limit = time_limit if time_limit is not None else cfg.time_limit
    if cfg.backend == "gurobi":
        return GurobiEngine(
            time_limit=limit,
            mip_gap=cfg.mip_gap,
            threads=cfg.threads,
            log_to_console=cfg.log_to_console,
        )
    if cfg.backend == "ortools":
        return OrToolsEngine(
            solver_id=cfg.ortools_solver,
            time_limit=limit,
            mip_gap=cfg.mip_gap,
            threads=cfg.threads,
            log_to_console=cfg.log_to_console,
        )
    raise InvalidArgumentError(f"Unknown solver backend: {cfg.backend!r}")
