"""Abstract solver shared by every search algorithm in metaheur.

The base class owns everything that does not depend on the algorithm: the
problem, the evaluation counter and budget, the running best, the seeded
random generator and the bookkeeping that turns a run into a
:class:`~metaheur.core.problem.SolveResult`.

Subclasses implement :meth:`Solver._run`, calling :meth:`Solver.evaluate` for
every objective call and :meth:`Solver.stop_nonfinite` right after it.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, ClassVar, Mapping, Optional, Union

import numpy as np

from ..diagnostics import assert_integral, assert_within_bounds, resolve_debug
from ..logging import get_logger
from .config import SolverConfig
from .problem import Array, Problem, SolveResult, Status

logger = get_logger(__name__)

ConfigLike = Union[SolverConfig, Mapping[str, Any], None]


class Solver(ABC):
    """
    Base class for single-objective, box-constrained solvers.

    Args:
        problem: Problem definition (bounds, integrality, objective).
        max_evals: Evaluation budget; must be at least 1.
        seed: Seed of the solver-local ``np.random.Generator``.
        config: Config record of the solver's ``config_class``, a settings
            mapping (missing keys take defaults, unknown keys are ignored), or
            None for all defaults.
        x0: Optional starting point of shape (n,) or starting points of shape
            (m, n). Points are clamped and integer-rounded.
        debug: Check every evaluated point against the bounds and the
            integrality mask. None follows the package default at evaluation
            time (see :func:`~metaheur.diagnostics.resolve_debug`).

    Raises:
        ValueError: If ``max_evals < 1`` or ``x0`` has the wrong shape.
        TypeError: If ``config`` has the wrong type.
    """

    name: ClassVar[str] = "solver"
    config_class: ClassVar[type] = SolverConfig

    def __init__(
        self,
        problem: Problem,
        max_evals: int,
        seed: int = 0,
        config: ConfigLike = None,
        x0: Optional[Array] = None,
        debug: Optional[bool] = None,
    ) -> None:
        if not isinstance(problem, Problem):
            raise TypeError(f"problem must be a Problem, got {type(problem).__name__}")
        if int(max_evals) < 1:
            raise ValueError(f"max_evals must be at least 1, got {max_evals}")

        if config is None:
            config = self.config_class()
        elif isinstance(config, Mapping):
            config = self.config_class.from_settings(config)
        elif not isinstance(config, self.config_class):
            raise TypeError(
                f"{type(self).__name__} expects a {self.config_class.__name__} "
                f"or a settings mapping, got {type(config).__name__}"
            )

        self.problem = problem
        self.config = config
        self.seed = seed
        self.max_evals = int(max_evals)
        self.n = problem.dim
        self.lb = problem.lb
        self.ub = problem.ub
        self.integer = problem.integer
        self.rng = np.random.default_rng(seed)
        self.x0 = self._prepare_x0(x0)
        self.debug = debug

        self.evalcount = 0
        self.nit = 0
        self.best_x: Optional[Array] = None
        self.best_fx = float("inf")
        self.status = Status.NOT_STARTED
        self.message = ""
        self.history: list[tuple[int, float]] = []

    # ------------------------------------------------------------------
    # public contract
    # ------------------------------------------------------------------
    def solve(self) -> SolveResult:
        """
        Run the search until the budget is spent or the run stops early.

        Returns:
            The :class:`SolveResult` of the run. The same values are
            available afterwards via :meth:`get_best_x` and
            :meth:`get_best_cost`.

        Raises:
            RuntimeError: If the solver instance has already been run.
        """
        if self.status is not Status.NOT_STARTED:
            raise RuntimeError(f"{type(self).__name__} instances can only be solved once.")
        self.status = Status.RUNNING
        logger.debug(
            "%s: n=%d, max_evals=%d, seed=%s", self.name, self.n, self.max_evals, self.seed
        )
        self._run()
        if self.status is Status.RUNNING:
            self.status = Status.BUDGET_EXHAUSTED
            self.message = "Evaluation budget exhausted."
        logger.info(
            "%s finished (%s) after %d evaluations, best cost %.6g",
            self.name,
            self.status.value,
            self.evalcount,
            self.best_fx,
        )
        return self.result()

    def get_best_x(self) -> Optional[Array]:
        """Best point found, or None if no finite evaluation happened."""
        return None if self.best_x is None else self.best_x.copy()

    def get_best_cost(self) -> float:
        """Cost of the best point found (``inf`` if none)."""
        return self.best_fx

    def result(self) -> SolveResult:
        """Snapshot of the current run as a :class:`SolveResult`."""
        return SolveResult(
            x=self.get_best_x(),
            fun=float(self.best_fx),
            nfev=self.evalcount,
            nit=self.nit,
            status=self.status,
            message=self.message,
            history=list(self.history),
        )

    @property
    def checks_enabled(self) -> bool:
        """Whether evaluated points are validated right now."""
        return resolve_debug(self.debug)

    @property
    def stopped(self) -> bool:
        """True once the run reached a terminal state other than the budget loop."""
        return self.status not in (Status.NOT_STARTED, Status.RUNNING)

    # ------------------------------------------------------------------
    # evaluation and termination
    # ------------------------------------------------------------------
    def evaluate(self, x: Array) -> float:
        """
        Call the objective once and update the running best.

        The best point changes only on a strictly smaller finite cost, so the
        recorded best never increases and never becomes NaN.
        """
        x = np.asarray(x, dtype=float)
        if self.checks_enabled:
            assert_within_bounds(x, self.lb, self.ub)
            assert_integral(x, self.integer)
        fx = float(self.problem.fun(x.copy()))
        self.evalcount += 1
        if np.isfinite(fx) and fx < self.best_fx:
            self.best_fx = fx
            self.best_x = x.copy()
        self.history.append((self.evalcount, self.best_fx))
        return fx

    def budget_left(self) -> int:
        """Number of evaluations still available."""
        return max(self.max_evals - self.evalcount, 0)

    @staticmethod
    def is_nonfinite(fx: float) -> bool:
        """True if ``fx`` is NaN or +/-inf."""
        return not np.isfinite(fx)

    def stop_nonfinite(self, fx: float) -> bool:
        """
        Stop the run if ``fx`` is NaN or infinite.

        Returns:
            True if the run was stopped.
        """
        if not self.is_nonfinite(fx):
            return False
        self._stop(
            Status.NON_FINITE,
            f"Objective returned {fx} at evaluation {self.evalcount}.",
        )
        logger.info("%s: %s Keeping best cost %.6g.", self.name, self.message, self.best_fx)
        return True

    def _stop(self, status: Status, message: str) -> None:
        self.status = status
        self.message = message

    @abstractmethod
    def _run(self) -> None:
        """Algorithm main loop."""

    # ------------------------------------------------------------------
    # shared vector helpers
    # ------------------------------------------------------------------
    def check_bounds(self, x: Array) -> Array:
        """Clamp ``x`` in place to ``[lb, ub]`` and return it."""
        np.clip(x, self.lb, self.ub, out=x)
        return x

    def round_integers(self, x: Array) -> Array:
        """Round the integer variables of ``x`` in place and return it."""
        if self.integer.any():
            x[self.integer] = np.round(x[self.integer])
        return x

    def repair(self, x: Array) -> Array:
        """Round integer variables, then clamp; in place."""
        return self.check_bounds(self.round_integers(x))

    def uniform_point(self) -> Array:
        """Uniform sample of the box with integer variables rounded."""
        x = self.lb + self.rng.random(self.n) * self.problem.span
        return self.repair(x)

    def gaussian_point(self, center: Array, scale: Union[float, Array]) -> Array:
        """Sample ``center + N(0, scale) * (ub - lb)``, rounded and clamped."""
        x = center + self.rng.normal(0.0, 1.0, self.n) * scale * self.problem.span
        return self.repair(x)

    def to_unit(self, x: Array) -> Array:
        """Map a point of the box into the unit hypercube."""
        span = self.problem.span
        safe = np.where(span > 0, span, 1.0)
        return np.where(span > 0, (np.asarray(x, dtype=float) - self.lb) / safe, 0.0)

    def from_unit(self, u: Array) -> Array:
        """Map a unit-hypercube point back into the box (clamped)."""
        x = self.lb + np.asarray(u, dtype=float) * self.problem.span
        return self.check_bounds(x)

    def _prepare_x0(self, x0: Optional[Array]) -> Optional[Array]:
        if x0 is None:
            return None
        points = np.array(x0, dtype=float)
        if points.size == 0:
            return None
        if points.ndim == 1:
            points = points.reshape(1, -1)
        if points.ndim != 2 or points.shape[1] != self.n:
            raise ValueError(
                f"x0 must have shape ({self.n},) or (m, {self.n}), got {np.shape(x0)}"
            )
        if not np.all(np.isfinite(points)):
            raise ValueError("x0 must be finite.")
        for row in points:
            self.repair(row)
        return points


__all__ = ["Solver"]
