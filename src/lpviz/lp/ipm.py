from __future__ import annotations

from typing import Optional, Sequence

import numpy as np

from .. import linalg
from ..logging import LogSink, SolveLog, get_logger
from ..problem import LinearProgram
from ..schemas import CorrectorStep, IPMOptions, IPMResult, IPMSolution, PredictorStep
from .utils import Stopwatch, check_maxit, xy

logger = get_logger(__name__)

CORRECTOR_THRESHOLD = 0.9
SIGMA_MIN = 1e-8
SIGMA_MAX = 1 - 1e-8
SIGMA_POWER = 3


def ipm(
    lines: Sequence[Sequence[float]],
    objective: Sequence[float],
    opts: Optional[IPMOptions] = None,
    sink: Optional[LogSink] = None,
) -> IPMResult:
    """
    Primal-dual predictor-corrector interior point method.

    ``max c^T x s.t. A x <= b`` is solved as ``min -c^T x s.t. -A x - s = -b,
    s >= 0``. Every iterate keeps ``s > 0`` and ``y > 0``.
    """

    opts = opts or IPMOptions()
    check_maxit(opts.maxit)
    lp = LinearProgram.from_lines(lines, objective)
    return _ipm_core(-lp.A, -lp.b, -lp.c, opts, SolveLog(logger, sink, opts.verbose))


def alpha_step(v: np.ndarray, dv: np.ndarray) -> float:
    """Largest step in [0, 1] keeping ``v + alpha * dv >= 0``."""
    ratios = np.ones_like(v)
    negative = dv < 0
    ratios[negative] = -v[negative] / dv[negative]
    return float(min(1.0, np.min(ratios))) if ratios.size else 1.0


def _ipm_core(A: np.ndarray, b: np.ndarray, c: np.ndarray, opts: IPMOptions, log: SolveLog) -> IPMResult:
    m, n = A.shape
    watch = Stopwatch()

    x = linalg.zeros(n)
    s = linalg.ones(m)
    y = linalg.ones(m)

    solution = IPMSolution()
    predictor = []
    corrector = []
    converged = False
    niter = 0

    log.emit("%5s %8s %8s %10s %10s %10s\n" % ("Iter", "x", "y", "Obj", "Infeas", " µ"))

    I_m = linalg.eye(m)
    AT = linalg.transpose(A)

    while niter <= opts.maxit:
        r_p = b - (A @ x - s)
        r_d = c - AT @ y
        mu = linalg.dot(s, y) / m
        p_obj = linalg.dot(c, x)
        gap = abs(p_obj - linalg.dot(b, y)) / (1 + abs(p_obj))

        px, py = xy(x)
        log.emit(
            "%5d %+8.2f %+8.2f %+10.1e %+10.1e %10.1e\n"
            % (len(solution.x), px, py, -p_obj, linalg.vmax(r_p), mu)
        )
        solution.x.append(x.tolist())
        solution.s.append(s.tolist())
        solution.y.append(y.tolist())
        solution.mu.append(mu)

        if linalg.norm_inf(r_p) <= opts.eps_p and linalg.norm_inf(r_d) <= opts.eps_d and gap <= opts.eps_opt:
            converged = True
            break

        niter += 1
        if niter > opts.maxit:
            break

        # K = [A  -I  0 ]
        #     [0   0  A^T]
        #     [0   Y  S ]
        K = linalg.vstack(
            [
                linalg.hstack([A, -I_m, np.zeros((m, m))]),
                linalg.hstack([np.zeros((n, n)), np.zeros((n, m)), AT]),
                linalg.hstack([np.zeros((m, n)), linalg.diag(y), linalg.diag(s)]),
            ]
        )

        rhs_aff = linalg.vstack([r_p, r_d, -linalg.mul(s, y)])
        delta_aff = linalg.solve(K, rhs_aff)
        dx_aff, ds_aff, dy_aff = delta_aff[:n], delta_aff[n : n + m], delta_aff[n + m :]

        alpha_p = alpha_step(s, ds_aff)
        alpha_d = alpha_step(y, dy_aff)
        mu_aff = linalg.dot(s + alpha_p * ds_aff, y + alpha_d * dy_aff) / m
        predictor.append(PredictorStep(alpha_primal=alpha_p, alpha_dual=alpha_d, mu_aff=mu_aff))

        if alpha_p >= CORRECTOR_THRESHOLD and alpha_d >= CORRECTOR_THRESHOLD:
            dx, ds, dy = dx_aff, ds_aff, dy_aff
            sigma = None
        else:
            sigma = min(SIGMA_MAX, max(SIGMA_MIN, (mu_aff / mu) ** SIGMA_POWER))
            rhs_cor = linalg.vstack(
                [linalg.zeros(m), linalg.zeros(n), -(linalg.mul(ds_aff, dy_aff) - sigma * mu)]
            )
            delta_cor = linalg.solve(K, rhs_cor)
            dx = dx_aff + delta_cor[:n]
            ds = ds_aff + delta_cor[n : n + m]
            dy = dy_aff + delta_cor[n + m :]

        step_p = opts.alpha_max * alpha_step(s, ds)
        step_d = opts.alpha_max * alpha_step(y, dy)
        corrector.append(
            CorrectorStep(applied=sigma is not None, sigma=sigma, alpha_primal=step_p, alpha_dual=step_d)
        )

        x = linalg.add(x, linalg.scale(dx, step_p))
        s = linalg.add(s, linalg.scale(ds, step_p))
        y = linalg.add(y, linalg.scale(dy, step_d))

    elapsed = watch.ms
    if converged:
        message = f"Converged to primal-dual optimal solution in {elapsed} ms"
    else:
        message = f"Did not converge after {len(solution.x) - 1} iterations in {elapsed} ms"
    log.emit(message + "\n")

    return IPMResult(
        iterates=solution.x,
        logs=log.lines,
        elapsed_ms=elapsed,
        converged=converged,
        message=message,
        solution=solution,
        predictor=predictor,
        corrector=corrector,
    )
