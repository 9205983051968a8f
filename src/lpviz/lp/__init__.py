"""The four LP solvers behind the visualiser."""

from .simplex import simplex
from .ipm import ipm
from .pdhg import pdhg, pdhg_eq, pdhg_ineq
from .central_path import central_path

__all__ = ["simplex", "ipm", "pdhg", "pdhg_eq", "pdhg_ineq", "central_path"]
