"""Core abstractions: problems, results, configs and the solver base class."""

from .config import SolverConfig
from .problem import Array, Objective, Problem, SolveResult, Status
from .solver import Solver

__all__ = [
    "Array",
    "Objective",
    "Problem",
    "SolveResult",
    "Solver",
    "SolverConfig",
    "Status",
]
