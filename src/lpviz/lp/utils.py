from __future__ import annotations

import time
from typing import Optional, Sequence, Tuple

import numpy as np
from scipy.optimize import linprog

from ..errors import InfeasibleError, InvalidOptionsError
from ..problem import LinearProgram, centroid

MAX_ITERATIONS_LIMIT = 2**16
MAX_NITER_LIMIT = 2**10


def check_maxit(maxit: int, name: str = "maxit") -> None:
    if maxit > MAX_ITERATIONS_LIMIT:
        raise InvalidOptionsError(f"{name} > 2^16 not allowed (got {maxit}).")
    if maxit < 1:
        raise InvalidOptionsError(f"{name} must be at least 1 (got {maxit}).")


def check_niter(niter: int) -> None:
    if niter > MAX_NITER_LIMIT:
        raise InvalidOptionsError(f"niter > 2^10 not allowed (got {niter}).")
    if niter < 1:
        raise InvalidOptionsError(f"niter must be at least 1 (got {niter}).")


def xy(x: np.ndarray) -> Tuple[float, float]:
    """First two coordinates of ``x`` for the log columns (0 when missing)."""
    first = float(x[0]) if x.shape[0] > 0 else 0.0
    second = float(x[1]) if x.shape[0] > 1 else 0.0
    return first, second


def basis_mask(flags: Sequence[bool]) -> str:
    return "".join("1" if flag else "0" for flag in flags)


class Stopwatch:
    def __init__(self) -> None:
        self._start = time.perf_counter()

    @property
    def ms(self) -> float:
        return round((time.perf_counter() - self._start) * 1000.0, 2)


def chebyshev_center(lp: LinearProgram, radius_cap: float = 1.0) -> Tuple[np.ndarray, float]:
    """
    Centre and radius of the largest ball (radius at most ``radius_cap``)
    inside ``{x : A x <= b}``, via SciPy's HiGHS.
    """

    m, n = lp.A.shape
    norms = np.linalg.norm(lp.A, axis=1)
    A_ub = np.hstack([lp.A, norms.reshape(-1, 1)])
    c = np.zeros(n + 1)
    c[-1] = -1.0
    bounds = [(None, None)] * n + [(0.0, radius_cap)]
    res = linprog(c, A_ub=A_ub, b_ub=lp.b, bounds=bounds, method="highs")
    if not res.success:
        raise InfeasibleError(f"No interior point found: {res.message}")
    return np.asarray(res.x[:n], dtype=float), float(res.x[-1])


def interior_start(
    lp: LinearProgram,
    vertices: Optional[Sequence[Sequence[float]]] = None,
    margin: float = 1e-9,
) -> np.ndarray:
    """
    Strictly interior starting point: the vertex centroid when it lies in the
    interior, otherwise the Chebyshev centre.
    """

    if vertices is not None and len(vertices) > 0:
        point = centroid(vertices)
        if point.shape[0] == lp.n and np.all(lp.b - lp.A @ point > margin):
            return point

    center, radius = chebyshev_center(lp)
    if radius <= margin or not np.all(lp.b - lp.A @ center > 0.0):
        raise InfeasibleError("Feasible region has no interior; cannot start the central path.")
    return center
