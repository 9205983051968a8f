import pytest

from lpviz.errors import InvalidOptionsError
from lpviz.lp.pdhg import pdhg, pdhg_eq, pdhg_ineq
from lpviz.schemas import PDHGOptions


@pytest.mark.parametrize("ineq", [False, True])
def test_pdhg_converges_on_unit_square(unit_square, ineq):
    opts = PDHGOptions(ineq=ineq, maxit=20000)
    result = pdhg(unit_square["lines"], unit_square["objective"], opts)

    assert result.converged
    assert result.eps[-1] <= opts.tol
    assert result.iterates[-1] == pytest.approx([1.0, 1.0], abs=1e-2)
    assert result.logs[-1].startswith("Converged")


@pytest.mark.parametrize("solver", [pdhg_eq, pdhg_ineq])
def test_pdhg_eps_parallels_iterates(unit_square, solver):
    result = solver(unit_square["lines"], unit_square["objective"], PDHGOptions(maxit=50))

    assert len(result.eps) == len(result.iterates)
    # header + one row per iterate + summary
    assert len(result.logs) == len(result.iterates) + 2
    assert result.iterates[0] == [0.0, 0.0]


def test_pdhg_stops_at_maxit_without_raising(unit_square):
    result = pdhg(unit_square["lines"], unit_square["objective"], PDHGOptions(maxit=5))

    assert not result.converged
    assert len(result.iterates) == 6
    assert result.message.startswith("Did not converge after 5 iterations")


def test_pdhg_ineq_tracks_active_set(unit_square):
    opts = PDHGOptions(ineq=True, maxit=20000, track_active_set=True)
    result = pdhg(unit_square["lines"], unit_square["objective"], opts)

    assert len(result.active_sets) == len(result.iterates)
    assert result.active_sets[-1] == [0, 1]
    assert result.logs[0].rstrip().endswith("basis")
    assert result.logs[-2].split()[-1] == "1100"


def test_pdhg_without_tracking_has_no_active_sets(unit_square):
    result = pdhg_ineq(unit_square["lines"], unit_square["objective"], PDHGOptions(maxit=10))
    assert result.active_sets == []


def test_pdhg_rejects_absurd_maxit(unit_square):
    with pytest.raises(InvalidOptionsError):
        pdhg(unit_square["lines"], unit_square["objective"], PDHGOptions(maxit=2**16 + 1))


@pytest.mark.parametrize("ineq", [False, True])
def test_pdhg_converges_with_default_options(unit_square, ineq):
    result = pdhg(unit_square["lines"], unit_square["objective"], PDHGOptions(ineq=ineq))

    assert result.converged
    assert len(result.iterates) <= PDHGOptions().maxit + 1
    assert result.iterates[-1] == pytest.approx([1.0, 1.0], abs=1e-2)


@pytest.mark.parametrize("ineq", [False, True])
def test_pdhg_lands_on_degenerate_edge(triangle, ineq):
    result = pdhg(triangle["lines"], triangle["objective"], PDHGOptions(ineq=ineq))

    x, y = result.iterates[-1]
    assert x + y == pytest.approx(2.0, abs=1e-2)
