from __future__ import annotations

from typing import Any, Dict, List, Literal, Optional

from pydantic import BaseModel, Field

SolverName = Literal["simplex", "ipm", "pdhg", "central"]

Line = List[float]
Lines = List[Line]
Vector = List[float]


class SimplexOptions(BaseModel):
    tol: float = Field(default=1e-5, gt=0)
    verbose: bool = False


class IPMOptions(BaseModel):
    eps_p: float = Field(default=1e-5, gt=0)
    eps_d: float = Field(default=1e-5, gt=0)
    eps_opt: float = Field(default=1e-5, gt=0)
    maxit: int = Field(default=30, ge=1)
    alpha_max: float = Field(default=0.999, gt=0, le=1)
    verbose: bool = False


class PDHGOptions(BaseModel):
    ineq: bool = False
    maxit: int = Field(default=1000, ge=1)
    eta: float = Field(default=0.25, gt=0)
    tau: float = Field(default=0.25, gt=0)
    tol: float = Field(default=1e-4, gt=0)
    track_active_set: bool = False
    verbose: bool = False


class CentralPathOptions(BaseModel):
    niter: int = 10
    maxit: int = Field(default=2000, ge=1)
    epsilon: float = Field(default=1e-4, gt=0)
    weights: Optional[List[float]] = None
    verbose: bool = False


class SolveResult(BaseModel):
    iterates: List[Vector] = Field(default_factory=list)
    logs: List[str] = Field(default_factory=list)
    elapsed_ms: float = 0.0
    converged: bool = False
    message: str = ""


class SimplexResult(BaseModel):
    iterates: List[Vector] = Field(default_factory=list)
    logs: List[List[str]] = Field(default_factory=list)
    elapsed_ms: float = 0.0
    converged: bool = False
    message: str = ""
    objective_value: Optional[float] = None
    basis: List[int] = Field(default_factory=list)


class IPMSolution(BaseModel):
    x: List[Vector] = Field(default_factory=list)
    s: List[Vector] = Field(default_factory=list)
    y: List[Vector] = Field(default_factory=list)
    mu: List[float] = Field(default_factory=list)


class PredictorStep(BaseModel):
    alpha_primal: float
    alpha_dual: float
    mu_aff: float


class CorrectorStep(BaseModel):
    applied: bool
    sigma: Optional[float] = None
    alpha_primal: float
    alpha_dual: float


class IPMResult(SolveResult):
    solution: IPMSolution = Field(default_factory=IPMSolution)
    predictor: List[PredictorStep] = Field(default_factory=list)
    corrector: List[CorrectorStep] = Field(default_factory=list)


class PDHGResult(SolveResult):
    eps: List[float] = Field(default_factory=list)
    active_sets: List[List[int]] = Field(default_factory=list)


class CentralPathResult(SolveResult):
    mu: List[float] = Field(default_factory=list)
    barrier_objective: List[float] = Field(default_factory=list)
    start: Vector = Field(default_factory=list)
    tsolve: float = 0.0


class SolveRequest(BaseModel):
    solver: SolverName
    lines: Lines
    objective: Vector
    options: Dict[str, Any] = Field(default_factory=dict)
    vertices: Optional[List[Vector]] = None


class SolveResponse(BaseModel):
    id: int
    solver: Optional[SolverName] = None
    success: bool
    result: Optional[Dict[str, Any]] = None
    error: Optional[str] = None
    error_type: Optional[str] = None
