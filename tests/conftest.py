import pytest

from core.config import parse_config
from core.models import SolveStatus


class RecordingEngine:
    """In-memory SolverEngine: records the emitted model, returns canned values."""

    name = "recording"

    def __init__(self, status=SolveStatus.OPTIMAL, values=None, objective=None):
        self.status = status
        self.values = dict(values or {})
        self.canned_objective = objective
        self.vars = []
        self.constraints = []
        self.objective = None
        self.runtime = 0.0
        self.mip_gap = 0.0
        self.time_limit_seen = None

    def add_binary_var(self, name):
        self.vars.append(name)
        return name

    def add_linear_constraint(self, terms, lower, upper, name=""):
        self.constraints.append((name, list(terms), lower, upper))
        return name

    def set_objective(self, terms, minimize=True):
        self.objective = (list(terms), minimize)

    def solve(self, time_limit=None):
        self.time_limit_seen = time_limit
        return self.status

    def value(self, var):
        return self.values.get(var, 0.0)

    def objective_value(self):
        if self.canned_objective is not None:
            return self.canned_objective
        return sum(coef * self.value(var) for coef, var in self.objective[0])

    @property
    def num_variables(self):
        return len(self.vars)

    @property
    def num_constraints(self):
        return len(self.constraints)


def make_config(capacity=10.0, backend="ortools", **solver):
    solver_section = {"backend": backend, "time_limit": 60}
    solver_section.update(solver)
    return parse_config({"packing": {"bin_capacity": capacity}, "solver": solver_section})


@pytest.fixture(params=["gurobi", "ortools"])
def backend(request):
    return request.param


@pytest.fixture
def recording_engine():
    return RecordingEngine


@pytest.fixture
def make_cfg():
    return make_config
