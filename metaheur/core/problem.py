"""Problem and result containers shared by every solver.

A problem is a box ``lb <= x <= ub`` in ``R^n`` with an optional integrality
mask and a scalar objective. The objective may return NaN (or an infinite
value) to flag an invalid point; solvers treat that as a normal stopping
signal rather than an error.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Callable, List, Optional, Tuple

import numpy as np

Array = np.ndarray
Objective = Callable[[Array], float]


class Status(Enum):
    """Termination status of a solver run."""

    NOT_STARTED = "not_started"
    RUNNING = "running"
    BUDGET_EXHAUSTED = "budget_exhausted"
    MAX_ITERATIONS = "max_iterations"
    NON_FINITE = "non_finite"
    DEGENERATE = "degenerate"
    TARGET_REACHED = "target_reached"


@dataclass(frozen=True, eq=False)
class Problem:
    """
    Box-constrained minimization problem.

    Attributes:
        fun: Objective mapping a float vector of shape (n,) to a scalar.
        lb: Lower bounds, shape (n,).
        ub: Upper bounds, shape (n,).
        integer: Boolean mask of shape (n,); True marks an integer variable.
            Defaults to all False.

    Raises:
        ValueError: On length mismatch, ``lb > ub``, non-finite bounds or
            non-integral bounds on an integer variable.
    """

    fun: Objective
    lb: Array
    ub: Array
    integer: Optional[Array] = None

    def __post_init__(self) -> None:
        lb = np.array(self.lb, dtype=float).reshape(-1)
        ub = np.array(self.ub, dtype=float).reshape(-1)
        if self.integer is None:
            integer = np.zeros(lb.shape[0], dtype=bool)
        else:
            integer = np.array(self.integer, dtype=bool).reshape(-1)

        if not callable(self.fun):
            raise ValueError("fun must be callable.")
        if lb.shape[0] == 0:
            raise ValueError("Problem must have at least one variable.")
        if not (lb.shape[0] == ub.shape[0] == integer.shape[0]):
            raise ValueError(
                f"lb, ub and integer must have equal lengths, got "
                f"{lb.shape[0]}, {ub.shape[0]} and {integer.shape[0]}"
            )
        if not (np.all(np.isfinite(lb)) and np.all(np.isfinite(ub))):
            raise ValueError("Bounds must be finite.")
        bad = np.flatnonzero(lb > ub)
        if bad.size:
            raise ValueError(f"lb must not exceed ub; violated at indices {bad.tolist()}")
        int_bounds = np.concatenate([lb[integer], ub[integer]])
        if np.any(int_bounds != np.round(int_bounds)):
            raise ValueError("Integer variables must have integral bounds.")

        lb.setflags(write=False)
        ub.setflags(write=False)
        integer.setflags(write=False)
        object.__setattr__(self, "lb", lb)
        object.__setattr__(self, "ub", ub)
        object.__setattr__(self, "integer", integer)

    @property
    def dim(self) -> int:
        """Number of decision variables."""
        return int(self.lb.shape[0])

    @property
    def span(self) -> Array:
        """Per-variable width ``ub - lb``."""
        return self.ub - self.lb

    @property
    def center(self) -> Array:
        """Centre of the box."""
        return 0.5 * (self.lb + self.ub)


@dataclass
class SolveResult:
    """Standard result object returned by every solver's ``solve``."""

    x: Optional[Array]
    fun: float
    nfev: int
    nit: int
    status: Status
    message: str
    history: List[Tuple[int, float]] = field(default_factory=list)

    @property
    def success(self) -> bool:
        """True if at least one finite evaluation produced a best point."""
        return self.x is not None and bool(np.isfinite(self.fun))


__all__ = ["Array", "Objective", "Problem", "SolveResult", "Status"]
