"""
Off-thread solver dispatch.

Requests run one at a time on a single background worker. Every request gets
a monotonically increasing id; a caller that issued a newer request ignores
older responses (last request wins). Running solves are never cancelled.
"""

from __future__ import annotations

import asyncio
import threading
from concurrent.futures import Future, ThreadPoolExecutor
from typing import Any, Callable, Dict, Mapping, Optional, Union

from pydantic import BaseModel, ValidationError

from .errors import LPVizError
from .logging import get_logger
from .lp import central_path, ipm, pdhg, simplex
from .schemas import (
    CentralPathOptions,
    IPMOptions,
    PDHGOptions,
    SimplexOptions,
    SolveRequest,
    SolveResponse,
)

logger = get_logger(__name__)

RequestLike = Union[SolveRequest, Mapping[str, Any]]


def _run_simplex(request: SolveRequest) -> BaseModel:
    return simplex(request.lines, request.objective, SimplexOptions.model_validate(request.options))


def _run_ipm(request: SolveRequest) -> BaseModel:
    return ipm(request.lines, request.objective, IPMOptions.model_validate(request.options))


def _run_pdhg(request: SolveRequest) -> BaseModel:
    return pdhg(request.lines, request.objective, PDHGOptions.model_validate(request.options))


def _run_central(request: SolveRequest) -> BaseModel:
    return central_path(
        request.lines,
        request.objective,
        CentralPathOptions.model_validate(request.options),
        vertices=request.vertices,
    )


SOLVERS: Dict[str, Callable[[SolveRequest], BaseModel]] = {
    "simplex": _run_simplex,
    "ipm": _run_ipm,
    "pdhg": _run_pdhg,
    "central": _run_central,
}


def run_request(request: RequestLike, request_id: int = 0) -> SolveResponse:
    """Run one request synchronously; structural failures become a failed response."""

    solver = request.get("solver") if isinstance(request, Mapping) else request.solver
    try:
        req = request if isinstance(request, SolveRequest) else SolveRequest.model_validate(request)
        logger.debug("Running request %d with solver %s", request_id, req.solver)
        result = SOLVERS[req.solver](req)
    except (LPVizError, ValidationError) as exc:
        logger.info("Request %d (%s) failed: %s", request_id, solver, exc)
        return SolveResponse(
            id=request_id,
            solver=solver if isinstance(solver, str) and solver in SOLVERS else None,
            success=False,
            error=str(exc),
            error_type=type(exc).__name__,
        )

    return SolveResponse(id=request_id, solver=req.solver, success=True, result=result.model_dump())


class SolverDispatch:
    """Single-worker solver queue with last-request-wins semantics."""

    def __init__(self) -> None:
        self._executor = ThreadPoolExecutor(max_workers=1, thread_name_prefix="lpviz-solver")
        self._lock = threading.Lock()
        self._latest_id = 0

    @property
    def latest_id(self) -> int:
        return self._latest_id

    def submit(self, request: RequestLike) -> "Future[SolveResponse]":
        with self._lock:
            self._latest_id += 1
            request_id = self._latest_id
        return self._executor.submit(run_request, request, request_id)

    def is_current(self, response: SolveResponse) -> bool:
        return response.id == self._latest_id

    async def solve(self, request: RequestLike) -> Optional[SolveResponse]:
        """Await a response; ``None`` if a newer request was issued in the meantime."""
        response = await asyncio.wrap_future(self.submit(request))
        if not self.is_current(response):
            logger.debug("Discarding stale response %d (latest is %d)", response.id, self._latest_id)
            return None
        return response

    def shutdown(self, wait: bool = True) -> None:
        self._executor.shutdown(wait=wait)

    def __enter__(self) -> "SolverDispatch":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.shutdown()
