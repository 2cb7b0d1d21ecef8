"""Rosenbrock's rotating-coordinates search.

Rosenbrock (1960), *An automatic method for finding the greatest or least
value of a function*. The search works in the unit hypercube and cycles
through ``n`` move vectors. A successful trial stretches its move vector by
``alpha``; a failed one reverses and shrinks it by ``beta``. Once every
direction has seen both a success and a failure, the basis is rotated so that
its first axis follows the displacement accumulated since the last rotation.
"""

from __future__ import annotations

from dataclasses import dataclass

import numpy as np

from ..core.config import SolverConfig, check_positive
from ..core.problem import Array, Status
from ..core.solver import Solver
from ..diagnostics import assert_orthogonal
from ..logging import get_logger

logger = get_logger(__name__)


def gram_schmidt(direction: Array, basis: Array, tol: float = 1e-12) -> Array:
    """
    Build an orthonormal basis whose first row is aligned with ``direction``.

    The remaining rows are obtained by orthogonalizing the rows of ``basis``
    (and, if those are not enough, the unit vectors) against the rows already
    accepted. Vectors whose residual norm is negligible are skipped.

    Args:
        direction: Vector of shape (n,). May be zero, in which case the result
            is the orthonormalized ``basis``.
        basis: Matrix of shape (m, n).
        tol: Relative threshold below which a residual counts as zero.

    Returns:
        Array of shape (n, n) with orthonormal rows.
    """
    basis = np.atleast_2d(np.asarray(basis, dtype=float))
    n = basis.shape[1]
    candidates = np.vstack([np.asarray(direction, dtype=float).reshape(1, n), basis, np.eye(n)])
    rows: list[Array] = []
    for v in candidates:
        w = v.copy()
        for q in rows:
            w -= np.dot(w, q) * q
        norm = np.linalg.norm(w)
        if norm > tol * max(1.0, np.linalg.norm(v)):
            rows.append(w / norm)
            if len(rows) == n:
                break
    return np.array(rows)


@dataclass(frozen=True)
class RosenbrockConfig(SolverConfig):
    """
    Settings of :class:`Rosenbrock`.

    Args:
        alpha: Expansion factor after a success. Defaults to 2.0.
        beta: Contraction factor after a failure. Defaults to 0.5.
        stepsize: Initial move length in the unit hypercube (also the spread
            of the random start point). Defaults to 0.125.
    """

    alpha: float = 2.0
    beta: float = 0.5
    stepsize: float = 0.125

    def __post_init__(self) -> None:
        check_positive(self.alpha, "alpha")
        check_positive(self.beta, "beta")
        check_positive(self.stepsize, "stepsize")


class Rosenbrock(Solver):
    """
    Rotating-coordinates direct search.

    Besides :meth:`solve`, the search can be driven manually with
    :meth:`initialize` followed by repeated :meth:`step` calls.

    Attributes:
        moves: Current move vectors, one per row, in unit-hypercube units.
        flag_success: Per direction, True once a trial along it succeeded.
        flag_fail: Per direction, True once a trial along it failed.
        flags_sum: Number of raised flags; the basis rotates at ``2 * n``.
        direction: Index of the move vector tried next.
        origin: Unit-hypercube point where the current basis was set up.
    """

    name = "rosenbrock"
    config_class = RosenbrockConfig

    def __init__(self, *args, **kwargs) -> None:
        super().__init__(*args, **kwargs)
        self.initialized = False

    def _run(self) -> None:
        if not self.initialize():
            return
        while self.step():
            pass

    def initialize(self) -> bool:
        """
        Evaluate the start point and set up the axis-aligned basis.

        Returns:
            False if the run stopped on the first evaluation.

        Raises:
            RuntimeError: If called twice.
        """
        if self.initialized:
            raise RuntimeError("Rosenbrock search is already initialized.")
        if self.status is Status.NOT_STARTED:
            self.status = Status.RUNNING
        self.initialized = True

        cfg = self.config
        if self.x0 is not None:
            x = self.x0[0].copy()
        else:
            x = self.gaussian_point(self.problem.center, cfg.stepsize)
        fx = self.evaluate(x)
        if self.stop_nonfinite(fx):
            return False

        self.moves = cfg.stepsize * np.eye(self.n)
        self.origin = self.to_unit(self.best_x)
        self._reset_flags()
        return True

    def step(self) -> bool:
        """
        Try the current move vector once.

        Returns:
            True if an evaluation happened and the search may continue;
            False once the budget is spent or the run has stopped.

        Raises:
            RuntimeError: If :meth:`initialize` has not been called.
        """
        if not self.initialized:
            raise RuntimeError("Call initialize() before step().")
        if self.stopped or self.evalcount >= self.max_evals:
            return False

        if self.flags_sum == 2 * self.n:
            self._rotate()

        cfg = self.config
        d = self.direction
        u_best = self.to_unit(self.best_x)
        trial = self.repair(self.from_unit(np.clip(u_best + self.moves[d], 0.0, 1.0)))
        previous = self.best_fx
        fx = self.evaluate(trial)
        if self.stop_nonfinite(fx):
            return False

        if fx < previous:
            self.moves[d] *= cfg.alpha
            if not self.flag_success[d]:
                self.flag_success[d] = True
                self.flags_sum += 1
        else:
            self.moves[d] *= -cfg.beta
            if not self.flag_fail[d]:
                self.flag_fail[d] = True
                self.flags_sum += 1
        self.direction = (d + 1) % self.n
        return self.evalcount < self.max_evals

    def _rotate(self) -> None:
        u_best = self.to_unit(self.best_x)
        displacement = self.origin - u_best
        self.origin = u_best
        self.moves = self.config.stepsize * gram_schmidt(displacement, self.moves)
        if self.checks_enabled:
            assert_orthogonal(self.moves)
        self._reset_flags()
        self.nit += 1
        logger.debug("%s: basis rotated at evaluation %d", self.name, self.evalcount)

    def _reset_flags(self) -> None:
        self.flag_success = np.zeros(self.n, dtype=bool)
        self.flag_fail = np.zeros(self.n, dtype=bool)
        self.flags_sum = 0
        self.direction = 0


__all__ = ["Rosenbrock", "RosenbrockConfig", "gram_schmidt"]
