"""Dense linear-algebra primitives shared by the solvers.

Every function returns a fresh array so that iterates recorded in a solve
history are never changed by later steps.
"""

from __future__ import annotations

from typing import Iterable, Sequence

import numpy as np

from .errors import DimensionMismatchError, SingularSystemError


def column_vector(values: Iterable[float] | np.ndarray, name: str = "vector") -> np.ndarray:
    out = np.array(values, dtype=float)
    if out.ndim == 2 and 1 in out.shape:
        out = out.reshape(-1)
    if out.ndim != 1:
        raise DimensionMismatchError(f"{name} must be one-dimensional, got shape {out.shape}")
    return out


def solve(matrix: np.ndarray, rhs: np.ndarray) -> np.ndarray:
    """Solve ``matrix @ x = rhs``; raise SingularSystemError if that is not possible."""
    matrix = np.asarray(matrix, dtype=float)
    rhs = np.asarray(rhs, dtype=float)
    if matrix.ndim != 2 or matrix.shape[0] != matrix.shape[1]:
        raise DimensionMismatchError(f"solve needs a square matrix, got shape {matrix.shape}")
    if matrix.shape[0] != rhs.shape[0]:
        raise DimensionMismatchError(
            f"solve: matrix has {matrix.shape[0]} rows but rhs has {rhs.shape[0]}"
        )
    try:
        sol = np.linalg.solve(matrix, rhs)
    except np.linalg.LinAlgError as exc:
        raise SingularSystemError(f"Singular {matrix.shape[0]}x{matrix.shape[1]} system: {exc}") from exc
    if not np.all(np.isfinite(sol)):
        raise SingularSystemError(
            f"Singular {matrix.shape[0]}x{matrix.shape[1]} system: solution is not finite"
        )
    return sol


def transpose(matrix: np.ndarray) -> np.ndarray:
    return np.array(np.transpose(matrix), dtype=float)


def diag(vector: np.ndarray) -> np.ndarray:
    return np.diag(np.asarray(vector, dtype=float).reshape(-1))


def eye(n: int) -> np.ndarray:
    return np.eye(n, dtype=float)


def zeros(n: int) -> np.ndarray:
    return np.zeros(n, dtype=float)


def ones(n: int) -> np.ndarray:
    return np.ones(n, dtype=float)


def add(u: np.ndarray, v: np.ndarray) -> np.ndarray:
    return np.add(u, v)


def sub(u: np.ndarray, v: np.ndarray) -> np.ndarray:
    return np.subtract(u, v)


def mul(u: np.ndarray, v: np.ndarray) -> np.ndarray:
    """Elementwise product."""
    return np.multiply(u, v)


def scale(u: np.ndarray, alpha: float) -> np.ndarray:
    return np.multiply(u, float(alpha))


def dot(u: np.ndarray, v: np.ndarray) -> float:
    return float(np.dot(u, v))


def norm2(u: np.ndarray) -> float:
    return float(np.linalg.norm(u)) if np.size(u) else 0.0


def norm_inf(u: np.ndarray) -> float:
    return float(np.max(np.abs(u))) if np.size(u) else 0.0


def vmin(u: np.ndarray) -> float:
    return float(np.min(u))


def vmax(u: np.ndarray) -> float:
    return float(np.max(u))


def project_nonnegative(u: np.ndarray) -> np.ndarray:
    """``[u]_+``"""
    return np.maximum(u, 0.0)


def hstack(blocks: Sequence[np.ndarray]) -> np.ndarray:
    rows = {np.shape(block)[0] for block in blocks}
    if len(rows) != 1:
        raise DimensionMismatchError(f"hstack: blocks have differing row counts {sorted(rows)}")
    return np.hstack([np.asarray(block, dtype=float) for block in blocks])


def vstack(blocks: Sequence[np.ndarray]) -> np.ndarray:
    """Stack matrices (equal column counts) or concatenate vectors."""
    arrays = [np.asarray(block, dtype=float) for block in blocks]
    if all(arr.ndim == 1 for arr in arrays):
        return np.concatenate(arrays)
    cols = {arr.shape[1] for arr in arrays}
    if len(cols) != 1:
        raise DimensionMismatchError(f"vstack: blocks have differing column counts {sorted(cols)}")
    return np.vstack(arrays)
