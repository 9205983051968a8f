import os
from typing import List, Optional

from mcp.server.fastmcp import FastMCP

from .dispatch import SolverDispatch
from .logging import configure_logging
from .problem import lines_to_ab
from .schemas import (
    CentralPathOptions,
    IPMOptions,
    Lines,
    PDHGOptions,
    SimplexOptions,
    SolveRequest,
    Vector,
)

mcp = FastMCP("LP Visualiser Solvers")
dispatch = SolverDispatch()


async def _solve(request: SolveRequest) -> dict:
    response = await dispatch.solve(request)
    if response is None:
        return {"success": False, "error": "Superseded by a newer request.", "error_type": "Stale"}
    return response.model_dump()


@mcp.tool()
async def solve_simplex(lines: Lines, objective: Vector, options: SimplexOptions | None = None) -> dict:
    "Run the two-phase simplex on max c^T x s.t. A x <= b and return both phase logs and the vertex path."
    opts = options or SimplexOptions()
    return await _solve(SolveRequest(solver="simplex", lines=lines, objective=objective, options=opts.model_dump()))


@mcp.tool()
async def solve_ipm(lines: Lines, objective: Vector, options: IPMOptions | None = None) -> dict:
    "Run the predictor-corrector interior point method and return the x/s/y/mu series."
    opts = options or IPMOptions()
    return await _solve(SolveRequest(solver="ipm", lines=lines, objective=objective, options=opts.model_dump()))


@mcp.tool()
async def solve_pdhg(lines: Lines, objective: Vector, options: PDHGOptions | None = None) -> dict:
    "Run PDHG (equality form, or inequality form with ineq=true) and return iterates and eps series."
    opts = options or PDHGOptions()
    return await _solve(SolveRequest(solver="pdhg", lines=lines, objective=objective, options=opts.model_dump()))


@mcp.tool()
async def solve_central_path(
    lines: Lines,
    objective: Vector,
    options: CentralPathOptions | None = None,
    vertices: Optional[List[Vector]] = None,
) -> dict:
    "Trace the log-barrier central path from the polygon centre towards the optimal vertex."
    opts = options or CentralPathOptions()
    return await _solve(
        SolveRequest(
            solver="central",
            lines=lines,
            objective=objective,
            options=opts.model_dump(),
            vertices=vertices,
        )
    )


@mcp.tool()
def lines_to_matrix(lines: Lines) -> dict:
    "Split half-planes [a_1, ..., a_n, rhs] into the constraint matrix A and right-hand side b."
    A, b = lines_to_ab(lines)
    return {"A": A.tolist(), "b": b.tolist()}


def main() -> None:
    configure_logging(os.environ.get("LPVIZ_LOG_LEVEL", "WARNING"))
    mcp.run()


if __name__ == "__main__":
    # Allow: `uv run mcp dev src/lpviz/server.py` or `python -m lpviz.server`
    main()
