from __future__ import annotations

from typing import Callable, List, Optional, Sequence, Tuple

import numpy as np

from .. import linalg
from ..errors import DimensionMismatchError, InvalidOptionsError, SingularSystemError, StalledError
from ..logging import LogSink, SolveLog, get_logger
from ..problem import LinearProgram
from ..schemas import CentralPathOptions, CentralPathResult
from .utils import Stopwatch, check_maxit, check_niter, interior_start, xy

logger = get_logger(__name__)

MIN_STEP_SIZE = 1e-10
LINE_SEARCH_SHRINK_FACTOR = 0.5
LINE_SEARCH_SUFFICIENT_DECREASE = 0.01
MAX_LINE_SEARCH_ITERATIONS = 100
MAX_ARMIJO_RETRIES = 30
BARRIER_PARAM_START = 3.0
BARRIER_PARAM_END = -5.0


def central_path_mu(niter: int) -> List[float]:
    """Barrier weights ``10^3 ... 10^-5``, log-spaced over ``niter`` points."""
    if niter <= 0:
        return []
    if niter == 1:
        return [10.0**BARRIER_PARAM_START]
    return [float(mu) for mu in np.logspace(BARRIER_PARAM_START, BARRIER_PARAM_END, niter)]


def central_path(
    lines: Sequence[Sequence[float]],
    objective: Sequence[float],
    opts: Optional[CentralPathOptions] = None,
    vertices: Optional[Sequence[Sequence[float]]] = None,
    sink: Optional[LogSink] = None,
) -> CentralPathResult:
    """
    Trace the central path of ``max c^T x s.t. A x <= b``.

    For each barrier weight ``mu`` the point maximising
    ``c^T x + mu * sum(w_i * log(b_i - a_i^T x))`` is found by damped Newton,
    warm-started from the previous weight's solution. The first warm start is
    the centroid of ``vertices`` (if interior) or the Chebyshev centre.
    Barrier steps that fail are logged and skipped; if none succeeds the
    solve raises StalledError.
    """

    opts = opts or CentralPathOptions()
    check_niter(opts.niter)
    check_maxit(opts.maxit)
    watch = Stopwatch()

    lp = LinearProgram.from_lines(lines, objective)
    A, b, w = _barrier_rows(lp, opts.weights)
    c = lp.c
    x = interior_start(lp, vertices)
    start = x.tolist()

    log = SolveLog(logger, sink, opts.verbose)
    log.emit("  %-4s %8s %8s %10s %10s  \n" % ("Iter", "x", "y", "Obj", "µ"))

    iterates: List[List[float]] = []
    mus: List[float] = []
    barrier_values: List[float] = []
    skipped = 0

    for mu in central_path_mu(opts.niter):
        try:
            point = _newton(A, b, c, w, mu, x, opts.maxit, opts.epsilon)
        except SingularSystemError as exc:
            logger.warning("Singular Newton system for mu = %g: %s. Skipping.", mu, exc)
            point = None
        if point is None:
            skipped += 1
            logger.warning("Failed to find optimal point for mu = %g. Skipping.", mu)
            continue

        linear = linalg.dot(c, point)
        iterates.append(point.tolist())
        mus.append(mu)
        barrier_values.append(_barrier_objective(A, b, c, w, mu)(point))
        px, py = xy(point)
        log.emit("  %-4d %+8.2f %+8.2f %+10.1e %10.1e  \n" % (len(iterates), px, py, linear, mu))
        x = point

    elapsed = watch.ms
    if not iterates:
        message = f"No barrier step succeeded; all {opts.niter} values of mu were skipped"
        log.emit(message + "\n")
        raise StalledError(message, logs=log.lines)

    converged = skipped == 0
    if converged:
        message = f"Traced central path in {elapsed} ms"
    else:
        message = f"Traced central path in {elapsed} ms, skipped {skipped} of {opts.niter} barrier steps"
    log.emit(message + "\n")

    return CentralPathResult(
        iterates=iterates,
        logs=log.lines,
        elapsed_ms=elapsed,
        converged=converged,
        message=message,
        mu=mus,
        barrier_objective=barrier_values,
        start=start,
        tsolve=elapsed / 1000.0,
    )


def _barrier_rows(
    lp: LinearProgram, weights: Optional[Sequence[float]]
) -> Tuple[np.ndarray, np.ndarray, np.ndarray]:
    """Rows of ``(A, b)`` that enter the barrier, with their weights (zero weights dropped)."""
    if weights is None:
        return lp.A, lp.b, linalg.ones(lp.m)
    w = linalg.column_vector(weights, "weights")
    if w.shape[0] != lp.m:
        raise DimensionMismatchError(f"Length of lines ({lp.m}) and weights ({w.shape[0]}) must match")
    if np.any(w < 0):
        raise InvalidOptionsError("Barrier weights must be non-negative")
    keep = w != 0
    if not np.any(keep):
        raise InvalidOptionsError("At least one barrier weight must be positive")
    return lp.A[keep], lp.b[keep], w[keep]


def _barrier_objective(
    A: np.ndarray, b: np.ndarray, c: np.ndarray, w: np.ndarray, mu: float
) -> Callable[[np.ndarray], float]:
    def value(x: np.ndarray) -> float:
        s = b - A @ x
        if linalg.vmin(s) <= 0:
            return -np.inf
        return linalg.dot(c, x) + mu * linalg.dot(w, np.log(s))

    return value


def _newton(
    A: np.ndarray,
    b: np.ndarray,
    c: np.ndarray,
    w: np.ndarray,
    mu: float,
    x0: np.ndarray,
    maxit: int,
    epsilon: float,
) -> Optional[np.ndarray]:
    """Damped Newton for one barrier weight; ``None`` if no solution was reached."""

    f = _barrier_objective(A, b, c, w, mu)
    AT = linalg.transpose(A)
    x = x0

    for iteration in range(1, maxit + 1):
        s = b - A @ x
        if linalg.vmin(s) <= 0:
            logger.warning("Infeasible point encountered at iteration %d (mu = %g)", iteration, mu)
            return None

        gradient = c - mu * (AT @ (w / s))
        if linalg.norm_inf(gradient) < epsilon:
            logger.debug("Converged in %d iterations with mu = %g", iteration, mu)
            return x

        hessian = mu * (AT @ linalg.diag(w / s**2) @ A)
        dx = linalg.solve(hessian, gradient)

        alpha = _domain_step(A, b, x, dx)
        if alpha is None:
            logger.warning("No feasible Newton step at iteration %d (mu = %g)", iteration, mu)
            return None
        alpha = _armijo_step(f, x, dx, gradient, alpha)
        x = linalg.add(x, linalg.scale(dx, alpha))

    logger.debug("Did not converge after %d iterations for mu = %g", maxit, mu)
    return None


def _domain_step(A: np.ndarray, b: np.ndarray, x: np.ndarray, dx: np.ndarray) -> Optional[float]:
    """Halve the step until ``x + alpha * dx`` is strictly inside ``A x < b``."""
    alpha = 1.0
    for _ in range(MAX_LINE_SEARCH_ITERATIONS):
        if np.all(b - A @ (x + alpha * dx) > 0):
            return alpha
        alpha *= LINE_SEARCH_SHRINK_FACTOR
        if alpha < MIN_STEP_SIZE:
            break
    return None


def _armijo_step(
    f: Callable[[np.ndarray], float],
    x: np.ndarray,
    dx: np.ndarray,
    gradient: np.ndarray,
    alpha: float,
) -> float:
    """Backtrack from ``alpha`` until the barrier objective increases sufficiently.

    If the retry cap is hit, the trial step with the largest objective is used.
    """

    fx = f(x)
    slope = linalg.dot(gradient, dx)
    best_alpha, best_value = alpha, -np.inf
    for _ in range(MAX_ARMIJO_RETRIES):
        value = f(x + alpha * dx)
        if value > best_value:
            best_alpha, best_value = alpha, value
        if value >= fx + LINE_SEARCH_SUFFICIENT_DECREASE * alpha * slope:
            return alpha
        alpha *= LINE_SEARCH_SHRINK_FACTOR
        if alpha < MIN_STEP_SIZE:
            break
    logger.debug("Armijo search stalled; accepting step %g", best_alpha)
    return best_alpha
