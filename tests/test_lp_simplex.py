import numpy as np
import pytest

from lpviz.errors import InfeasibleError, UnboundedError
from lpviz.lp.simplex import simplex
from lpviz.schemas import SimplexOptions


def test_simplex_solves_unit_square(unit_square):
    result = simplex(unit_square["lines"], unit_square["objective"], SimplexOptions())

    assert result.converged
    assert result.objective_value == pytest.approx(2.0, abs=1e-9)
    assert result.iterates[-1] == pytest.approx([1.0, 1.0], abs=1e-9)
    assert len(result.logs) == 2


def test_simplex_finds_pentagon_vertex(pentagon):
    result = simplex(pentagon["lines"], pentagon["objective"])

    assert result.objective_value == pytest.approx(10.0, abs=1e-9)
    assert result.iterates[-1] == pytest.approx([4.0, 2.0], abs=1e-9)


def test_phase_two_objective_is_non_decreasing(pentagon):
    c = np.array(pentagon["objective"], dtype=float)
    result = simplex(pentagon["lines"], pentagon["objective"])

    values = [float(c @ np.array(x)) for x in result.iterates]
    assert all(later >= earlier - 1e-9 for earlier, later in zip(values, values[1:]))


def test_degenerate_triangle_lands_on_optimal_edge(triangle):
    result = simplex(triangle["lines"], triangle["objective"])

    x, y = result.iterates[-1]
    assert result.objective_value == pytest.approx(2.0, abs=1e-9)
    assert x + y == pytest.approx(2.0, abs=1e-9)
    assert x >= -1e-9 and y >= -1e-9


def test_unbounded_problem_is_reported():
    lines = [[-1, 0, 0], [0, -1, 0]]

    with pytest.raises(UnboundedError) as excinfo:
        simplex(lines, [1, 1])

    assert "unbounded" in str(excinfo.value).lower()
    assert excinfo.value.logs


def test_infeasible_problem_is_reported():
    # x <= 0 and x >= 1
    lines = [[1, 0, 0], [-1, 0, -1]]

    with pytest.raises(InfeasibleError) as excinfo:
        simplex(lines, [1, 1])

    assert "infeasible" in str(excinfo.value).lower()


def test_simplex_handles_single_variable():
    # x <= 2, -x <= 0
    result = simplex([[1, 2], [-1, 0]], [1])

    assert result.iterates[-1] == pytest.approx([2.0])
    assert result.objective_value == pytest.approx(2.0)


def test_simplex_logs_have_header_rows_and_summary(unit_square):
    result = simplex(unit_square["lines"], unit_square["objective"])
    phase1, phase2 = result.logs

    assert phase1[0].split()[:4] == ["Iter", "x", "y", "Obj"]
    assert phase1[-1].startswith("Phase 1 finished")
    assert phase2[-1].startswith("Phase 2 finished")
    # one row per phase-2 iterate between header and summary
    assert len(phase2) == len(result.iterates) + 2


def test_simplex_forwards_log_lines_to_sink(unit_square):
    received = []
    result = simplex(unit_square["lines"], unit_square["objective"], sink=received.append)

    assert received == result.logs[0] + result.logs[1]
