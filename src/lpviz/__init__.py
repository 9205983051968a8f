"""Solver core of the LP visualiser: simplex, interior point, PDHG and central path."""

from .errors import (
    DimensionMismatchError,
    EmptyProblemError,
    InfeasibleError,
    InvalidOptionsError,
    LPVizError,
    SingularSystemError,
    StalledError,
    UnboundedError,
)
from .lp import central_path, ipm, pdhg, simplex
from .problem import LinearProgram, ab_to_lines, lines_to_ab

__all__ = [
    "simplex",
    "ipm",
    "pdhg",
    "central_path",
    "LinearProgram",
    "lines_to_ab",
    "ab_to_lines",
    "LPVizError",
    "InfeasibleError",
    "UnboundedError",
    "SingularSystemError",
    "DimensionMismatchError",
    "EmptyProblemError",
    "InvalidOptionsError",
    "StalledError",
]
