import pytest

from core.errors import InfeasibleError, InternalInconsistencyError, UnsolvedError
from core.models import PackingInstance, SolveStatus
from data.generators import generate_random_instance
from offline.bounds import ffd_upper_bound, l1_bound
from offline.offline_solver import BinPackingSolver


def check_packing(inst, result):
    """Every item in exactly one bin, no bin over capacity."""
    a = result.assignment
    placed = [it.name for j in a.used_bins for it in a.bins[j]]
    assert sorted(placed) == sorted(it.name for it in inst.items)
    assert len(placed) == len(set(placed))
    for j in a.used_bins:
        load = sum(it.weight for it in a.bins[j])
        assert load == pytest.approx(a.loads[j])
        assert load <= inst.bin_capacity + 1e-9
        assert all(a.item_to_bin[it.name] == j for it in a.bins[j])


def test_single_item_filling_one_bin(backend, make_cfg):
    inst = PackingInstance(6000)
    inst.add_items("1S", 1, 6000)
    result = BinPackingSolver(make_cfg(6000, backend)).solve(inst)

    assert result.status is SolveStatus.OPTIMAL
    assert result.objective == 1
    (j,) = result.assignment.used_bins
    assert result.assignment.loads[j] == pytest.approx(6000)
    check_packing(inst, result)


def test_bound_is_not_tight_for_indivisible_items(backend, make_cfg):
    inst = PackingInstance(10)
    inst.add_items("A", 3, 6)
    result = BinPackingSolver(make_cfg(10, backend)).solve(inst)

    assert result.lower_bound == l1_bound(inst) == 2
    assert result.objective == 3
    check_packing(inst, result)


def test_empty_instance(backend, make_cfg):
    result = BinPackingSolver(make_cfg(10, backend)).solve(PackingInstance(10))

    assert result.status is SolveStatus.OPTIMAL
    assert result.objective == 0
    assert result.lower_bound == 0
    assert result.assignment.num_bins == 0
    assert result.info is None
    assert result.raise_for_status() is result


def test_item_heavier_than_capacity_is_infeasible(backend, make_cfg):
    inst = PackingInstance(5)
    inst.add_items("Big", 1, 7)
    result = BinPackingSolver(make_cfg(5, backend)).solve(inst)

    assert result.status is SolveStatus.INFEASIBLE
    assert result.assignment is None
    assert result.objective is None
    with pytest.raises(InfeasibleError):
        result.raise_for_status()


def test_copies_of_one_item_share_a_bin(backend, make_cfg):
    inst = PackingInstance(1000)
    inst.add_items("X", 3, 50)
    result = BinPackingSolver(make_cfg(1000, backend)).solve(inst)

    assert result.objective == 1
    (j,) = result.assignment.used_bins
    assert [it.name for it in result.assignment.bins[j]] == ["X_1", "X_2", "X_3"]
    assert result.assignment.loads[j] == pytest.approx(150)


@pytest.mark.parametrize("seed", [1, 2, 3])
def test_random_instances_respect_bounds(backend, make_cfg, seed):
    inst = generate_random_instance(100, 8, seed, weight_bounds=(0.2, 0.6))
    result = BinPackingSolver(make_cfg(100, backend)).solve(inst)

    assert result.status is SolveStatus.OPTIMAL
    check_packing(inst, result)
    assert l1_bound(inst) <= result.objective <= ffd_upper_bound(inst) <= len(inst.items)
    assert result.info.backend == backend
    assert result.info.num_bins == len(inst.items)
    assert result.info.num_variables == len(inst.items) ** 2 + len(inst.items)


@pytest.mark.parametrize("seed", [4, 5])
def test_tightened_bin_count_gives_same_optimum(backend, make_cfg, seed):
    inst = generate_random_instance(100, 8, seed, weight_bounds=(0.2, 0.6))
    full = BinPackingSolver(make_cfg(100, backend)).solve(inst)
    tight = BinPackingSolver(make_cfg(100, backend, tighten_bin_count=True)).solve(inst)

    assert tight.objective == full.objective
    assert tight.info.num_bins == ffd_upper_bound(inst)
    assert tight.info.num_variables < full.info.num_variables
    check_packing(inst, tight)


def test_tightened_bin_count_still_reports_infeasible(backend, make_cfg):
    inst = PackingInstance(5)
    inst.add_items("Big", 1, 7)
    result = BinPackingSolver(make_cfg(5, backend, tighten_bin_count=True)).solve(inst)
    assert result.status is SolveStatus.INFEASIBLE


def test_budget_exhaustion_is_not_infeasibility(make_cfg, recording_engine):
    engine = recording_engine(status=SolveStatus.NOT_SOLVED)
    inst = PackingInstance(10)
    inst.add_items("A", 4, 3)
    solver = BinPackingSolver(make_cfg(10), engine_factory=lambda: engine, time_limit=0.5)
    result = solver.solve(inst)

    assert engine.time_limit_seen == 0.5
    assert result.status is SolveStatus.NOT_SOLVED
    assert result.assignment is None
    assert result.lower_bound == 2
    with pytest.raises(UnsolvedError):
        result.raise_for_status()


def test_objective_mismatch_is_an_inconsistency(make_cfg, recording_engine):
    # a valid one-bin packing, but the engine claims an objective of 0
    engine = recording_engine(values={"x_0_0": 1.0, "x_1_0": 1.0, "y_0": 1.0}, objective=0.0)
    inst = PackingInstance(10)
    inst.add_items("A", 2, 3)
    with pytest.raises(InternalInconsistencyError):
        BinPackingSolver(make_cfg(10), engine_factory=lambda: engine).solve(inst)


def test_optimal_result_from_recorded_values(make_cfg, recording_engine):
    engine = recording_engine(values={"x_0_1": 1.0, "x_1_1": 1.0, "y_1": 1.0})
    inst = PackingInstance(10)
    inst.add_items("A", 2, 3)
    result = BinPackingSolver(make_cfg(10), engine_factory=lambda: engine).solve(inst)

    assert result.is_optimal
    assert result.objective == 1
    assert result.assignment.used_bins == [1]
    assert result.info.backend == "recording"
