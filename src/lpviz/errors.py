class LPVizError(Exception):
    """Base exception for lpviz solvers."""
    pass


class InfeasibleError(LPVizError):
    """Raised when the feasible region is empty (or has no interior where one is required)."""

    def __init__(self, message: str, logs: list[str] | None = None) -> None:
        super().__init__(message)
        self.logs = list(logs or [])


class UnboundedError(LPVizError):
    """Raised when the objective can be increased without limit."""

    def __init__(self, message: str, logs: list[str] | None = None) -> None:
        super().__init__(message)
        self.logs = list(logs or [])


class SingularSystemError(LPVizError):
    """Raised when a linear solve hits a numerically singular matrix."""
    pass


class DimensionMismatchError(LPVizError, ValueError):
    """Raised when lines, objective or matrices have incompatible shapes."""
    pass


class EmptyProblemError(DimensionMismatchError):
    """Raised when a problem has no constraints or no vertices."""
    pass


class InvalidOptionsError(LPVizError, ValueError):
    """Raised when solver options exceed their hard caps."""
    pass


class StalledError(LPVizError):
    """Raised when a solver exceeds its hard iteration cap or cannot take any step."""

    def __init__(self, message: str, logs: list[str] | None = None) -> None:
        super().__init__(message)
        self.logs = list(logs or [])
