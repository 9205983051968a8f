import asyncio

import pytest

from lpviz import server
from lpviz.schemas import IPMOptions


def test_solve_tools_return_responses(unit_square):
    simplex = asyncio.run(server.solve_simplex(lines=unit_square["lines"], objective=unit_square["objective"]))
    assert simplex["success"]
    assert simplex["result"]["objective_value"] == pytest.approx(2.0)

    ipm = asyncio.run(
        server.solve_ipm(lines=unit_square["lines"], objective=unit_square["objective"], options=IPMOptions(maxit=2))
    )
    assert ipm["success"]
    assert not ipm["result"]["converged"]


def test_central_path_tool_uses_vertices(unit_square):
    response = asyncio.run(
        server.solve_central_path(
            lines=unit_square["lines"], objective=unit_square["objective"], vertices=unit_square["vertices"]
        )
    )
    assert response["success"]
    assert response["result"]["start"] == [0.5, 0.5]


def test_solve_tool_reports_solver_errors():
    response = asyncio.run(server.solve_simplex(lines=[[-1, 0, 0], [0, -1, 0]], objective=[1, 1]))
    assert not response["success"]
    assert response["error_type"] == "UnboundedError"


def test_lines_to_matrix(triangle):
    assert server.lines_to_matrix(triangle["lines"]) == {
        "A": [[-1.0, 0.0], [0.0, -1.0], [1.0, 1.0]],
        "b": [0.0, 0.0, 2.0],
    }
