"""
Primal-Dual Hybrid Gradient for the polygon LP ``max c^T x s.t. A x <= b``.

Two variants share the loop skeleton:

* equality form: ``x = x+ - x-`` plus slacks, ``min c_hat^T z s.t. A_hat z = b,
  z >= 0``; the primal step is projected onto ``z >= 0`` and the dual step uses
  the extrapolated primal;
* inequality form: ``min -c^T x s.t. A x <= b`` with ``x`` free; the dual step
  is projected onto ``y >= 0`` and the primal step uses the extrapolated dual.

Step sizes ``eta`` and ``tau`` are fixed; a poor choice shows up as slow
convergence, never as an exception.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Callable, List, Optional, Sequence, Tuple

import numpy as np

from .. import linalg
from ..logging import LogSink, SolveLog, get_logger
from ..problem import LinearProgram
from ..schemas import PDHGOptions, PDHGResult
from .utils import Stopwatch, basis_mask, check_maxit, xy

logger = get_logger(__name__)

ACTIVE_DUAL_THRESHOLD = 1e-10

# (x, y) -> (x_next, y_next)
StepFn = Callable[[np.ndarray, np.ndarray], Tuple[np.ndarray, np.ndarray]]


def pdhg(
    lines: Sequence[Sequence[float]],
    objective: Sequence[float],
    opts: Optional[PDHGOptions] = None,
    sink: Optional[LogSink] = None,
) -> PDHGResult:
    opts = opts or PDHGOptions()
    if opts.ineq:
        return pdhg_ineq(lines, objective, opts, sink)
    return pdhg_eq(lines, objective, opts, sink)


def pdhg_eq(
    lines: Sequence[Sequence[float]],
    objective: Sequence[float],
    opts: Optional[PDHGOptions] = None,
    sink: Optional[LogSink] = None,
) -> PDHGResult:
    opts = opts or PDHGOptions()
    check_maxit(opts.maxit)
    lp = LinearProgram.from_lines(lines, objective)
    m, n = lp.m, lp.n

    A_hat = linalg.hstack([lp.A, -lp.A, linalg.eye(m)])
    c_hat = linalg.vstack([-lp.c, lp.c, linalg.zeros(m)])
    A_hat_T = linalg.transpose(A_hat)
    b = lp.b

    def step(z: np.ndarray, y: np.ndarray) -> Tuple[np.ndarray, np.ndarray]:
        # z+ = [z - eta (c_hat + A_hat^T y)]_+ ; y+ = y + tau (A_hat (2 z+ - z) - b)
        z_next = linalg.project_nonnegative(z - opts.eta * (c_hat + A_hat_T @ y))
        z_bar = linalg.sub(linalg.scale(z_next, 2.0), z)
        y_next = y + opts.tau * (A_hat @ z_bar - b)
        return z_next, y_next

    def epsilon(z: np.ndarray, y: np.ndarray) -> float:
        primal = linalg.norm2(A_hat @ z - b) / (1 + linalg.norm2(b))
        dual = linalg.norm2(linalg.project_nonnegative(-(A_hat_T @ y) - c_hat)) / (1 + linalg.norm2(c_hat))
        c_z, b_y = linalg.dot(c_hat, z), linalg.dot(b, y)
        gap = abs(c_z + b_y) / (1 + abs(c_z) + abs(b_y))
        return primal + dual + gap

    def log_row(k: int, z: np.ndarray, y: np.ndarray, eps: float) -> str:
        x = z[:n] - z[n : 2 * n]
        px, py = xy(x)
        infeas = linalg.vmax(A_hat @ z - b)
        return "%5d %+8.2f %+8.2f %+10.1e %+10.1e %10.1e" % (k, px, py, linalg.dot(lp.c, x), infeas, eps)

    result = _pdhg_loop(
        step,
        epsilon,
        log_row,
        linalg.zeros(2 * n + m),
        linalg.zeros(m),
        opts,
        SolveLog(logger, sink, opts.verbose),
        header="%5s %8s %8s %10s %10s %10s" % ("Iter", "x", "y", " Obj", "Infeas", "eps"),
    )
    result.iterates = [z[:n] - z[n : 2 * n] for z in result.iterates]
    return _to_result(result)


def pdhg_ineq(
    lines: Sequence[Sequence[float]],
    objective: Sequence[float],
    opts: Optional[PDHGOptions] = None,
    sink: Optional[LogSink] = None,
) -> PDHGResult:
    opts = opts or PDHGOptions()
    check_maxit(opts.maxit)
    lp = LinearProgram.from_lines(lines, objective)
    m = lp.m

    A, b = lp.A, lp.b
    AT = linalg.transpose(A)
    c = -lp.c

    def step(x: np.ndarray, y: np.ndarray) -> Tuple[np.ndarray, np.ndarray]:
        # y+ = [y + tau (A x - b)]_+ ; x+ = x - eta (c + A^T (2 y+ - y))
        y_next = linalg.project_nonnegative(y + opts.tau * (A @ x - b))
        y_bar = linalg.sub(linalg.scale(y_next, 2.0), y)
        x_next = x - opts.eta * (c + AT @ y_bar)
        return x_next, y_next

    def epsilon(x: np.ndarray, y: np.ndarray) -> float:
        primal = linalg.norm2(linalg.project_nonnegative(A @ x - b)) / (1 + linalg.norm2(b))
        # stationarity of the free x is checked alongside dual feasibility
        stationarity = linalg.norm2(c + AT @ y) + linalg.norm2(linalg.project_nonnegative(-y))
        dual = stationarity / (1 + linalg.norm2(c))
        c_x, b_y = linalg.dot(c, x), linalg.dot(b, y)
        gap = abs(b_y + c_x) / (1 + abs(c_x) + abs(b_y))
        return primal + dual + gap

    def log_row(k: int, x: np.ndarray, y: np.ndarray, eps: float) -> str:
        px, py = xy(x)
        infeas = linalg.vmax(linalg.project_nonnegative(A @ x - b))
        row = "%5d %+8.2f %+8.2f %+10.1e %+10.1e %10.1e" % (k, px, py, linalg.dot(c, x), infeas, eps)
        if opts.track_active_set:
            row += " " + basis_mask(y > ACTIVE_DUAL_THRESHOLD)
        return row

    header = "%5s %8s %8s %10s %10s %10s" % ("Iter", "x", "y", " Obj", "Infeas", "eps")
    if opts.track_active_set:
        header += " " + "basis".ljust(m)

    result = _pdhg_loop(
        step,
        epsilon,
        log_row,
        linalg.zeros(lp.n),
        linalg.ones(m),
        opts,
        SolveLog(logger, sink, opts.verbose),
        header=header,
    )
    if opts.track_active_set:
        result.active_sets = [np.flatnonzero(y > ACTIVE_DUAL_THRESHOLD).tolist() for y in result.duals]
    return _to_result(result)


@dataclass
class _LoopResult:
    iterates: List[np.ndarray] = field(default_factory=list)
    duals: List[np.ndarray] = field(default_factory=list)
    eps: List[float] = field(default_factory=list)
    active_sets: List[List[int]] = field(default_factory=list)
    logs: List[str] = field(default_factory=list)
    converged: bool = False
    elapsed_ms: float = 0.0
    message: str = ""


def _pdhg_loop(
    step: StepFn,
    epsilon: Callable[[np.ndarray, np.ndarray], float],
    log_row: Callable[[int, np.ndarray, np.ndarray, float], str],
    x0: np.ndarray,
    y0: np.ndarray,
    opts: PDHGOptions,
    log: SolveLog,
    header: str,
) -> _LoopResult:
    watch = Stopwatch()
    out = _LoopResult()
    x, y = x0, y0
    k = 1
    eps_k = epsilon(x, y)

    log.emit(header)
    while k <= opts.maxit and eps_k > opts.tol:
        out.iterates.append(x)
        out.duals.append(y)
        out.eps.append(eps_k)
        log.emit(log_row(k, x, y, eps_k))

        x, y = step(x, y)
        k += 1
        eps_k = epsilon(x, y)

    out.iterates.append(x)
    out.duals.append(y)
    out.eps.append(eps_k)
    log.emit(log_row(k, x, y, eps_k))

    out.elapsed_ms = watch.ms
    out.converged = eps_k <= opts.tol
    if out.converged:
        out.message = f"Converged to primal-dual optimal solution in {out.elapsed_ms}ms"
    else:
        out.message = f"Did not converge after {k - 1} iterations in {out.elapsed_ms}ms"
    log.emit(out.message)
    out.logs = log.lines
    return out


def _to_result(loop: _LoopResult) -> PDHGResult:
    return PDHGResult(
        iterates=[np.asarray(x, dtype=float).tolist() for x in loop.iterates],
        logs=loop.logs,
        elapsed_ms=loop.elapsed_ms,
        converged=loop.converged,
        message=loop.message,
        eps=loop.eps,
        active_sets=loop.active_sets,
    )
