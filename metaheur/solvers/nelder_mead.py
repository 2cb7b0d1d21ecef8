"""Nelder-Mead downhill simplex.

Nelder & Mead (1965), *A simplex method for function minimization*. The
simplex of ``n + 1`` vertices is kept sorted by cost; each iteration reflects
the worst vertex through the centroid of the others and then expands,
accepts, contracts or shrinks depending on the reflected cost.

The budget is checked once per iteration, so a run may overshoot
``max_evals`` by up to ``n + 1`` evaluations (reflection, contraction and
``n`` shrink points).
"""

from __future__ import annotations

from dataclasses import dataclass

import numpy as np

from ..core.config import SolverConfig, check_positive
from ..core.problem import Array, Status
from ..core.solver import Solver
from ..logging import get_logger

logger = get_logger(__name__)


@dataclass(frozen=True)
class NelderMeadConfig(SolverConfig):
    """
    Settings of :class:`NelderMead`.

    Args:
        alpha: Reflection coefficient. Defaults to 1.0.
        gamma: Expansion coefficient. Defaults to 1.5.
        rho: Contraction coefficient. Defaults to 0.25.
        sigma: Shrink coefficient. Defaults to 0.2.
        step0: Spread of the initial simplex as a fraction of the range.
            Defaults to 0.02.
    """

    alpha: float = 1.0
    gamma: float = 1.5
    rho: float = 0.25
    sigma: float = 0.2
    step0: float = 0.02

    def __post_init__(self) -> None:
        for setting in ("alpha", "gamma", "rho", "sigma", "step0"):
            check_positive(getattr(self, setting), setting)


class NelderMead(Solver):
    """Downhill simplex with integer rounding and bound clamping of every vertex."""

    name = "nelder_mead"
    config_class = NelderMeadConfig

    def __init__(self, *args, **kwargs) -> None:
        super().__init__(*args, **kwargs)
        self.last_move = ""

    def _run(self) -> None:
        if not self._initial_simplex():
            return
        while self.evalcount < self.max_evals:
            if not self._iterate():
                return

    def _iterate(self) -> bool:
        """
        One simplex update; ``last_move`` names the branch taken.

        Returns:
            False if the run stopped during the update.
        """
        cfg = self.config
        n = self.n
        simplex, costs = self.simplex, self.costs
        centroid = simplex[:n].mean(axis=0)

        xr = self._point(centroid + cfg.alpha * (centroid - simplex[n]))
        fr = self.evaluate(xr)
        if self.stop_nonfinite(fr):
            return False

        if costs[0] < fr < costs[n - 1]:
            self.last_move = "reflect"
            self._replace_worst(xr, fr)
        elif fr < costs[0]:
            self.last_move = "expand"
            xe = self._point(centroid + cfg.gamma * (xr - centroid))
            fe = self.evaluate(xe)
            if self.stop_nonfinite(fe):
                return False
            if fe < fr:
                self._replace_worst(xe, fe)
            else:
                self._replace_worst(xr, fr)
        elif fr > costs[n - 1]:
            if fr < costs[n]:
                self.last_move = "contract_outside"
                compare, fcompare = xr, fr
            else:
                self.last_move = "contract_inside"
                compare, fcompare = simplex[n], costs[n]
            xc = self._point(centroid + cfg.rho * (compare - centroid))
            fc = self.evaluate(xc)
            if self.stop_nonfinite(fc):
                return False
            if fc < fcompare:
                self._replace_worst(xc, fc)
            else:
                self.last_move = "shrink"
                if not self._shrink():
                    return False
        else:
            self.last_move = "degenerate"
            self._stop(
                Status.DEGENERATE,
                f"Degenerate simplex at evaluation {self.evalcount}: "
                f"reflected cost {fr} ties a vertex cost.",
            )
            logger.warning("%s: %s", self.name, self.message)
            return False

        self._sort()
        self.nit += 1
        return True

    def _initial_simplex(self) -> bool:
        step0 = self.config.step0
        if self.x0 is not None:
            first = self.x0[0].copy()
        else:
            first = self.gaussian_point(self.problem.center, step0)
        self.simplex = np.empty((self.n + 1, self.n))
        self.costs = np.empty(self.n + 1)
        for p in range(self.n + 1):
            self.simplex[p] = first if p == 0 else self.gaussian_point(first, step0)
            self.costs[p] = self.evaluate(self.simplex[p])
            if self.stop_nonfinite(self.costs[p]):
                return False
        self._sort()
        return True

    def _point(self, x: Array) -> Array:
        return self.repair(np.asarray(x, dtype=float))

    def _replace_worst(self, x: Array, fx: float) -> None:
        self.simplex[self.n] = x
        self.costs[self.n] = fx

    def _shrink(self) -> bool:
        """Pull every vertex towards the best one; False if the run stopped."""
        best = self.simplex[0].copy()
        for p in range(1, self.n + 1):
            self.simplex[p] = self._point(best + self.config.sigma * (self.simplex[p] - best))
            self.costs[p] = self.evaluate(self.simplex[p])
            if self.stop_nonfinite(self.costs[p]):
                return False
        return True

    def _sort(self) -> None:
        order = np.argsort(self.costs, kind="stable")
        self.simplex = self.simplex[order]
        self.costs = self.costs[order]


__all__ = ["NelderMead", "NelderMeadConfig"]
