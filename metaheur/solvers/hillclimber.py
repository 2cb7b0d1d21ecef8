"""Stochastic hill-climbing.

Pseudocode from Brownlee, *Clever Algorithms: Nature-Inspired Programming
Recipes* (2011): perturb the current point with Gaussian noise and keep the
candidate only if it strictly improves the cost.
"""

from __future__ import annotations

from dataclasses import dataclass

from ..core.config import SolverConfig, check_positive
from ..core.solver import Solver


@dataclass(frozen=True)
class HillClimberConfig(SolverConfig):
    """
    Settings of :class:`HillClimber`.

    Args:
        stepsize: Standard deviation of the Gaussian move as a fraction of
            each variable's range. Defaults to 0.1.
    """

    stepsize: float = 0.1

    def __post_init__(self) -> None:
        check_positive(self.stepsize, "stepsize")


class HillClimber(Solver):
    """Single-point stochastic hill-climber."""

    name = "hillclimber"
    config_class = HillClimberConfig

    def _run(self) -> None:
        x = self.x0[0].copy() if self.x0 is not None else self.uniform_point()
        stdev = self.config.stepsize * self.problem.span

        fx = self.evaluate(x)
        if self.stop_nonfinite(fx):
            return

        while self.evalcount < self.max_evals:
            candidate = x + self.rng.normal(0.0, 1.0, self.n) * stdev
            self.repair(candidate)
            fcandidate = self.evaluate(candidate)
            if self.stop_nonfinite(fcandidate):
                return
            if fcandidate < fx:
                x, fx = candidate, fcandidate
            self.nit += 1


__all__ = ["HillClimber", "HillClimberConfig"]
