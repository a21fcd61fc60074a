import json

import pytest
import yaml

from core.errors import InvalidArgumentError
from core.models import SolveStatus
from experiments.run_packing import EXIT_BAD_INPUT, EXIT_INFEASIBLE, EXIT_OK, EXIT_UNSOLVED, main


@pytest.fixture
def config_file(tmp_path):
    path = tmp_path / "config.yaml"
    path.write_text(yaml.safe_dump({
        "packing": {"bin_capacity": 10},
        "solver": {"backend": "ortools", "time_limit": 30},
        "logging": {"log_dir": str(tmp_path / "logs"), "level": "WARNING"},
    }))
    return path


def _items(tmp_path, content):
    path = tmp_path / "items.csv"
    path.write_text(content)
    return path


def test_solves_and_writes_result(tmp_path, config_file, capsys):
    data = _items(tmp_path, "A;3;6\nB;2;4\n")
    out = tmp_path / "result.json"
    code = main(["--config", str(config_file), "--data", str(data), "--output", str(out)])

    assert code == EXIT_OK
    printed = capsys.readouterr().out
    assert "L1 Bound: 3" in printed
    assert "Number of bins used: 3" in printed
    result = json.loads(out.read_text())
    assert result["objective"] == 3


def test_bound_only_does_not_solve(tmp_path, config_file, capsys):
    data = _items(tmp_path, "A;3;6\n")
    out = tmp_path / "result.json"
    code = main(["--config", str(config_file), "--data", str(data), "--bound-only", "--output", str(out)])

    assert code == EXIT_OK
    assert "L1 Bound: 2" in capsys.readouterr().out
    assert not out.exists()


def test_infeasible_instance_exit_code(tmp_path, config_file, capsys):
    data = _items(tmp_path, "Big;1;11\n")
    assert main(["--config", str(config_file), "--data", str(data)]) == EXIT_INFEASIBLE
    assert "infeasible" in capsys.readouterr().out


def test_malformed_data_exit_code(tmp_path, config_file, capsys):
    data = _items(tmp_path, "A;x;6\n")
    assert main(["--config", str(config_file), "--data", str(data)]) == EXIT_BAD_INPUT
    assert "Invalid input" in capsys.readouterr().err


def test_negative_quantity_exit_code(tmp_path, config_file):
    data = _items(tmp_path, "A;-2;6\n")
    assert main(["--config", str(config_file), "--data", str(data)]) == EXIT_BAD_INPUT


def test_plot_is_written(tmp_path, config_file):
    data = _items(tmp_path, "A;2;4\nB;1;7\n")
    plot = tmp_path / "plots" / "packing.png"
    assert main(["--config", str(config_file), "--data", str(data), "--plot", str(plot)]) == EXIT_OK
    assert plot.exists()


def test_missing_config_file_exit_code(tmp_path, capsys):
    data = _items(tmp_path, "A;1;6\n")
    code = main(["--config", str(tmp_path / "nope.yaml"), "--data", str(data)])

    assert code == EXIT_BAD_INPUT
    assert "Cannot read input" in capsys.readouterr().err


def test_missing_data_file_exit_code(tmp_path, config_file, capsys):
    code = main(["--config", str(config_file), "--data", str(tmp_path / "missing.csv")])

    assert code == EXIT_BAD_INPUT
    assert "Cannot read input" in capsys.readouterr().err


def test_unavailable_solver_exit_code(tmp_path, config_file, monkeypatch, capsys):
    def unavailable(solver_cfg, *, time_limit=None):
        raise InvalidArgumentError("OR-Tools solver 'SCIP' is unavailable in this build.")

    monkeypatch.setattr("offline.offline_solver.make_engine", unavailable)
    data = _items(tmp_path, "A;1;6\n")

    assert main(["--config", str(config_file), "--data", str(data)]) == EXIT_BAD_INPUT
    assert "SCIP" in capsys.readouterr().err


def test_unsolved_result_exit_code(tmp_path, config_file, monkeypatch, recording_engine, capsys):
    monkeypatch.setattr(
        "offline.offline_solver.make_engine",
        lambda solver_cfg, *, time_limit=None: recording_engine(status=SolveStatus.NOT_SOLVED),
    )
    data = _items(tmp_path, "A;3;6\n")
    out = tmp_path / "result.json"

    code = main(["--config", str(config_file), "--data", str(data), "--output", str(out)])

    assert code == EXIT_UNSOLVED
    assert "proven optimum" in capsys.readouterr().out
    result = json.loads(out.read_text())
    assert result["status"] == "NOT_SOLVED"
    assert result["bins"] is None
