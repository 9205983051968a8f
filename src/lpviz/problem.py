from __future__ import annotations

from dataclasses import dataclass
from typing import List, Sequence, Tuple

import numpy as np

from .errors import DimensionMismatchError, EmptyProblemError
from .linalg import column_vector


def lines_to_ab(lines: Sequence[Sequence[float]]) -> Tuple[np.ndarray, np.ndarray]:
    """
    Convert half-planes ``[a_1, ..., a_n, rhs]`` (meaning ``a . x <= rhs``) into
    the pair ``(A, b)``. Row order follows the order of ``lines``.
    """

    if lines is None or len(lines) == 0:
        raise EmptyProblemError("Problem has no constraints.")

    widths = {len(line) for line in lines}
    if len(widths) != 1:
        raise DimensionMismatchError(f"All lines must have the same length, got lengths {sorted(widths)}.")
    width = widths.pop()
    if width < 2:
        raise DimensionMismatchError(f"A line needs at least one coefficient and a right-hand side, got length {width}.")

    try:
        data = np.array(lines, dtype=float)
    except (TypeError, ValueError) as exc:
        raise DimensionMismatchError(f"Lines must contain numbers only: {exc}") from exc
    if not np.all(np.isfinite(data)):
        raise DimensionMismatchError("Lines contain non-finite values.")

    A = data[:, :-1].copy()
    b = data[:, -1].copy()
    return A, b


def ab_to_lines(A: np.ndarray, b: np.ndarray) -> List[List[float]]:
    A = np.asarray(A, dtype=float)
    b = np.asarray(b, dtype=float).reshape(-1)
    if A.ndim != 2 or A.shape[0] != b.shape[0]:
        raise DimensionMismatchError(f"A has shape {A.shape} but b has length {b.shape[0]}.")
    return [[float(v) for v in row] + [float(rhs)] for row, rhs in zip(A, b)]


def centroid(vertices: Sequence[Sequence[float]]) -> np.ndarray:
    if vertices is None or len(vertices) == 0:
        raise EmptyProblemError("Cannot compute the centroid of an empty vertex list.")
    points = np.array(vertices, dtype=float)
    if points.ndim != 2:
        raise DimensionMismatchError("Vertices must all have the same dimension.")
    return points.mean(axis=0)


@dataclass(frozen=True)
class LinearProgram:
    """
    ``max c^T x`` subject to ``A x <= b``.

    Arrays are stored read-only; a LinearProgram is built once per solve and
    never changes afterwards.
    """

    A: np.ndarray
    b: np.ndarray
    c: np.ndarray

    def __post_init__(self) -> None:
        A = np.array(self.A, dtype=float)
        b = np.array(self.b, dtype=float).reshape(-1)
        c = np.array(self.c, dtype=float).reshape(-1)
        if A.ndim != 2:
            raise DimensionMismatchError(f"A must be a matrix, got shape {A.shape}.")
        m, n = A.shape
        if m < 1 or n < 1:
            raise EmptyProblemError(f"A must be at least 1x1, got shape {A.shape}.")
        if b.shape[0] != m:
            raise DimensionMismatchError(f"A has {m} rows but b has length {b.shape[0]}.")
        if c.shape[0] != n:
            raise DimensionMismatchError(f"A has {n} columns but the objective has length {c.shape[0]}.")
        for name, arr in (("A", A), ("b", b), ("objective", c)):
            if not np.all(np.isfinite(arr)):
                raise DimensionMismatchError(f"{name} contains non-finite values.")
        for arr in (A, b, c):
            arr.setflags(write=False)
        object.__setattr__(self, "A", A)
        object.__setattr__(self, "b", b)
        object.__setattr__(self, "c", c)

    @classmethod
    def from_lines(cls, lines: Sequence[Sequence[float]], objective: Sequence[float]) -> "LinearProgram":
        A, b = lines_to_ab(lines)
        return cls(A=A, b=b, c=column_vector(objective, "objective"))

    @property
    def m(self) -> int:
        return self.A.shape[0]

    @property
    def n(self) -> int:
        return self.A.shape[1]

    def to_lines(self) -> List[List[float]]:
        return ab_to_lines(self.A, self.b)
