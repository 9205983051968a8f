import numpy as np
import pytest

from lpviz.lp import central_path, ipm, pdhg, simplex
from lpviz.schemas import PDHGOptions


@pytest.mark.parametrize("example", ["unit_square", "triangle", "pentagon"])
def test_solvers_agree_on_optimal_value(example, request):
    problem = request.getfixturevalue(example)
    lines, objective = problem["lines"], problem["objective"]
    c = np.array(objective, dtype=float)

    exact = simplex(lines, objective).objective_value
    values = {
        "ipm": float(c @ np.array(ipm(lines, objective).iterates[-1])),
        "central": float(c @ np.array(central_path(lines, objective).iterates[-1])),
    }
    for solver, value in values.items():
        assert value == pytest.approx(exact, abs=1e-3), solver


def test_pdhg_agrees_with_simplex_on_unit_square(unit_square):
    lines, objective = unit_square["lines"], unit_square["objective"]
    c = np.array(objective, dtype=float)

    exact = simplex(lines, objective).objective_value
    for ineq in (False, True):
        result = pdhg(lines, objective, PDHGOptions(ineq=ineq, maxit=20000))
        assert float(c @ np.array(result.iterates[-1])) == pytest.approx(exact, abs=1e-2)
