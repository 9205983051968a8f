import numpy as np
import pytest

from lpviz.errors import InvalidOptionsError
from lpviz.lp.ipm import alpha_step, ipm
from lpviz.schemas import IPMOptions


def test_ipm_converges_on_unit_square(unit_square):
    result = ipm(unit_square["lines"], unit_square["objective"], IPMOptions())

    assert result.converged
    assert result.iterates[-1] == pytest.approx([1.0, 1.0], abs=1e-3)
    assert result.logs[-1].startswith("Converged")


def test_ipm_keeps_slacks_and_duals_strictly_positive(pentagon):
    result = ipm(pentagon["lines"], pentagon["objective"])

    for s, y in zip(result.solution.s, result.solution.y):
        assert min(s) > 0
        assert min(y) > 0


def test_ipm_series_are_parallel(unit_square):
    result = ipm(unit_square["lines"], unit_square["objective"])
    sol = result.solution

    assert len(sol.x) == len(sol.s) == len(sol.y) == len(sol.mu)
    assert result.iterates == sol.x
    assert sol.x[0] == [0.0, 0.0]
    # one predictor/corrector pair per step taken
    assert len(result.predictor) == len(result.corrector) == len(sol.x) - 1
    # header + one row per recorded iterate + summary
    assert len(result.logs) == len(sol.x) + 2


def test_ipm_corrector_sigma_is_clamped(pentagon):
    result = ipm(pentagon["lines"], pentagon["objective"])

    for step in result.corrector:
        if step.applied:
            assert 1e-8 <= step.sigma <= 1 - 1e-8
        else:
            assert step.sigma is None


def test_ipm_reports_non_convergence_without_raising(unit_square):
    result = ipm(unit_square["lines"], unit_square["objective"], IPMOptions(maxit=2))

    assert not result.converged
    assert len(result.iterates) == 3
    assert result.logs[-1].startswith("Did not converge after 2 iterations")


def test_ipm_lands_on_degenerate_edge(triangle):
    result = ipm(triangle["lines"], triangle["objective"])

    x, y = result.iterates[-1]
    assert result.converged
    assert x + y == pytest.approx(2.0, abs=1e-3)


def test_ipm_rejects_absurd_maxit(unit_square):
    with pytest.raises(InvalidOptionsError):
        ipm(unit_square["lines"], unit_square["objective"], IPMOptions(maxit=2**16 + 1))


def test_alpha_step():
    v = np.array([1.0, 2.0, 3.0])

    assert alpha_step(v, np.array([1.0, 0.0, 2.0])) == 1.0
    assert alpha_step(v, np.array([-4.0, 0.0, 1.0])) == pytest.approx(0.25)
    assert alpha_step(v, np.array([-0.5, -1.0, 0.0])) == 1.0
