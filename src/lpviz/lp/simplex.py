from __future__ import annotations

from typing import Any, Dict, List, Optional, Sequence

import numpy as np

from .. import linalg
from ..errors import InfeasibleError, StalledError, UnboundedError
from ..logging import LogSink, SolveLog, get_logger
from ..problem import LinearProgram
from ..schemas import SimplexOptions, SimplexResult
from .utils import MAX_ITERATIONS_LIMIT, Stopwatch, basis_mask, xy

logger = get_logger(__name__)

MAX_ITERATIONS = MAX_ITERATIONS_LIMIT


def simplex(
    lines: Sequence[Sequence[float]],
    objective: Sequence[float],
    opts: Optional[SimplexOptions] = None,
    sink: Optional[LogSink] = None,
) -> SimplexResult:
    """
    Two-phase primal simplex for ``max c^T x s.t. A x <= b`` with Bland's rule
    on both the entering and the leaving side.

    The free variables are split as ``x = x+ - x-`` and slacks are added;
    phase 1 works on the sign-normalised system ``Gamma A``, ``Gamma b`` with
    one artificial per row. The returned iterates are the phase-2 vertices.
    """

    opts = opts or SimplexOptions()
    watch = Stopwatch()
    lp = LinearProgram.from_lines(lines, objective)
    m, n = lp.m, lp.n
    tol = opts.tol

    # Gamma = diag(sign(b)), sign(0) = +1
    gamma = np.where(lp.b < 0, -1.0, 1.0)
    Gamma = linalg.diag(gamma)
    GA = Gamma @ lp.A
    A1 = linalg.hstack([GA, -GA, Gamma, linalg.eye(m)])
    b1 = linalg.mul(gamma, lp.b)
    c1 = linalg.vstack([linalg.zeros(2 * n + m), -linalg.ones(m)])

    log1 = SolveLog(logger, sink, opts.verbose)
    phase1 = _phase_I(A1, b1, c1, list(range(2 * n + m, 2 * n + 2 * m)), n, tol, log1)

    A2 = linalg.hstack([lp.A, -lp.A, linalg.eye(m)])
    c2 = linalg.vstack([lp.c, -lp.c, linalg.zeros(m)])
    basis2 = _phase_II_basis(A2, phase1["basis"], n, m)

    log2 = SolveLog(logger, sink, opts.verbose)
    phase2 = _run_simplex(A2, lp.b, c2, basis2, n, tol, log2, [log1.lines])
    log2.emit("Phase 2 finished – basis %s\n" % basis_mask(_mask(phase2["basis"], A2.shape[1])))

    iterates = [(point[:n] - point[n : 2 * n]).tolist() for point in phase2["points"]]
    elapsed = watch.ms
    return SimplexResult(
        iterates=iterates,
        logs=[log1.lines, log2.lines],
        elapsed_ms=elapsed,
        converged=True,
        message=f"Optimal after {phase1['iterations']} + {phase2['iterations']} pivots in {elapsed} ms",
        objective_value=phase2["objective"],
        basis=sorted(phase2["basis"]),
    )


def _phase_I(
    A: np.ndarray,
    b: np.ndarray,
    c: np.ndarray,
    basis: List[int],
    n: int,
    tol: float,
    log: SolveLog,
) -> Dict[str, Any]:
    result = _run_simplex(A, b, c, basis, n, tol, log, [])
    if result["objective"] < -tol:
        msg = "Problem infeasible (Phase-1 optimum %.3e < 0, an artificial variable stays positive)\n" % result["objective"]
        log.emit(msg)
        raise InfeasibleError(msg.strip(), logs=log.lines)

    log.emit("Phase 1 finished – basis %s\n" % basis_mask(_mask(result["basis"], A.shape[1])))
    return result


def _phase_II_basis(A: np.ndarray, basis: List[int], n: int, m: int) -> List[int]:
    """Drop artificial columns and pad with slacks that keep the basis nonsingular."""

    kept = [j for j in basis if j < 2 * n + m]
    for j in range(2 * n, 2 * n + m):
        if len(kept) == m:
            break
        if j in kept:
            continue
        candidate = kept + [j]
        if np.linalg.matrix_rank(A[:, candidate]) == len(candidate):
            kept = candidate
    if len(kept) != m:
        logger.warning("Phase 1 left a basis of size %d, expected %d", len(kept), m)
    return kept


def _run_simplex(
    A: np.ndarray,
    b: np.ndarray,
    c: np.ndarray,
    basis: List[int],
    n_orig: int,
    tol: float,
    log: SolveLog,
    earlier_logs: List[List[str]],
) -> Dict[str, Any]:
    """Primal simplex on ``max c^T x s.t. A x = b, x >= 0`` from a feasible basis."""

    basis = basis.copy()
    m, n_cols = A.shape
    points: List[np.ndarray] = []
    iterations = 0

    log.emit("%5s %8s %8s %10s %s\n" % ("Iter", "x", "y", "Obj", "basis".ljust(n_cols)))

    while True:
        if iterations >= MAX_ITERATIONS:
            raise StalledError(f"Simplex stalled after {MAX_ITERATIONS} iterations")
        if len(basis) != m:
            raise StalledError(f"Basis size {len(basis)} does not match number of constraints {m}")

        B = A[:, basis]
        xB = linalg.solve(B, b)
        xB[np.abs(xB) < tol] = 0.0

        x = linalg.zeros(n_cols)
        x[basis] = xB
        points.append(x)

        y = linalg.solve(linalg.transpose(B), c[basis])
        reduced = c - linalg.transpose(A) @ y
        objective = linalg.dot(c, x)

        px, py = xy(x[:n_orig] - x[n_orig : 2 * n_orig])
        log.emit(
            "%5d %+8.2f %+8.2f %+10.1e %s\n"
            % (len(points), px, py, objective, basis_mask(_mask(basis, n_cols)))
        )

        entering = next(
            (j for j in range(n_cols) if j not in basis and reduced[j] > tol),
            None,
        )
        if entering is None:
            return {
                "basis": basis,
                "points": points,
                "objective": objective,
                "iterations": iterations,
            }

        d = linalg.solve(B, A[:, entering])
        pivot_row = None
        best_ratio = np.inf
        for row in range(m):
            if d[row] <= tol:
                continue
            ratio = xB[row] / d[row]
            if ratio < best_ratio - tol:
                best_ratio, pivot_row = ratio, row
            elif abs(ratio - best_ratio) <= tol and basis[row] < basis[pivot_row]:
                best_ratio, pivot_row = ratio, row

        if pivot_row is None:
            msg = "LP is unbounded. No leaving variable found."
            log.emit(msg + "\n")
            raise UnboundedError(msg, logs=[line for lines in earlier_logs for line in lines] + log.lines)

        basis[pivot_row] = entering
        iterations += 1


def _mask(basis: List[int], n_cols: int) -> List[bool]:
    members = set(basis)
    return [j in members for j in range(n_cols)]
