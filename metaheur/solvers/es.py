"""Self-adaptive (mu + lambda) evolution strategy.

Beyer & Schwefel (2002), *Evolution strategies: a comprehensive
introduction*. Every individual carries its own step-size vector ``s``, which
is recombined and log-normally mutated before it is used to mutate ``x``::

    s' = exp(tau0 * N(0, 1)) * s * exp(tau * N_i(0, 1))
    x' = x + s' * N_i(0, 1)

with ``tau = tauc / sqrt(2 * sqrt(n))`` and ``tau0 = tauc / sqrt(2 * n)``.
Integer variables are resampled uniformly within their bounds instead.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import ClassVar, Mapping, Optional

import numpy as np

from ..core.config import (
    SAMPLING_MODES,
    SolverConfig,
    check_positive,
    check_probability,
    normalize_mode,
)
from ..core.problem import Array
from ..core.solver import Solver
from ..logging import get_logger

logger = get_logger(__name__)

SELECTION_MODES = {0: "random", 1: "roulette"}


@dataclass(frozen=True)
class ESConfig(SolverConfig):
    """
    Settings of :class:`EvolutionStrategy`.

    Args:
        popsize: Parent population size ``mu``. Defaults to 20.
        lambda_: Offspring per generation (settings key ``"lambda"``).
            Defaults to ``popsize``.
        roh: Parents per offspring, capped at ``popsize``. Defaults to 2.
        selmode: ``"roulette"`` (rank weighted) or ``"random"`` (or 1/0)
            marriage.
        stepsize: Initial step size of every individual. Defaults to 0.5.
        stepsize0: Spread of the Gaussian initial sampling as a fraction of
            the range. Defaults to 0.5.
        tauc: Learning-rate constant. Defaults to 1.0.
        pmut_int: Probability to resample an integer variable. Defaults
            to 0.5.
        x0sampling: ``"uniform"`` or ``"gaussian"`` (or 0/1) initial
            population.
    """

    aliases: ClassVar[Mapping[str, str]] = {"lambda": "lambda_"}

    popsize: int = 20
    lambda_: Optional[int] = None
    roh: int = 2
    selmode: str = "roulette"
    stepsize: float = 0.5
    stepsize0: float = 0.5
    tauc: float = 1.0
    pmut_int: float = 0.5
    x0sampling: str = "uniform"

    def __post_init__(self) -> None:
        object.__setattr__(self, "popsize", int(self.popsize))
        if self.popsize < 1:
            raise ValueError(f"popsize must be at least 1, got {self.popsize}")
        lam = self.popsize if self.lambda_ is None else int(self.lambda_)
        if lam < 1:
            raise ValueError(f"lambda must be at least 1, got {lam}")
        object.__setattr__(self, "lambda_", lam)
        roh = int(self.roh)
        if roh < 1:
            raise ValueError(f"roh must be at least 1, got {roh}")
        object.__setattr__(self, "roh", min(roh, self.popsize))
        object.__setattr__(self, "selmode", normalize_mode(self.selmode, SELECTION_MODES, "selmode"))
        object.__setattr__(
            self, "x0sampling", normalize_mode(self.x0sampling, SAMPLING_MODES, "x0sampling")
        )
        check_positive(self.stepsize, "stepsize")
        check_positive(self.stepsize0, "stepsize0")
        check_positive(self.tauc, "tauc")
        check_probability(self.pmut_int, "pmut_int")


class EvolutionStrategy(Solver):
    """(mu + lambda) evolution strategy with self-adaptive step sizes."""

    name = "es"
    config_class = ESConfig

    def _run(self) -> None:
        cfg = self.config
        self.tau = cfg.tauc / math.sqrt(2.0 * math.sqrt(self.n))
        self.tau0 = cfg.tauc / math.sqrt(2.0 * self.n)
        logger.debug("%s: tau=%.4g, tau0=%.4g", self.name, self.tau, self.tau0)
        if not self._initial_population():
            return

        while self.evalcount < self.max_evals:
            x_new = np.empty((cfg.lambda_, self.n))
            s_new = np.empty((cfg.lambda_, self.n))
            fx_new = np.empty(cfg.lambda_)
            born = 0
            for child in range(cfg.lambda_):
                if self.evalcount >= self.max_evals:
                    break
                family = self._marriage()
                s_child = self._child_stepsize(family)
                x_child = self._mutate(self._recombine(family), s_child)
                fx_child = self.evaluate(x_child)
                x_new[child], s_new[child], fx_new[child] = x_child, s_child, fx_child
                born += 1
                if self.stop_nonfinite(fx_child):
                    return
            self._select(x_new[:born], s_new[:born], fx_new[:born])
            self.nit += 1

    def _initial_population(self) -> bool:
        cfg = self.config
        self.x_pop = np.empty((cfg.popsize, self.n))
        self.fx_pop = np.empty(cfg.popsize)
        self.s = np.full((cfg.popsize, self.n), cfg.stepsize)

        supplied = 0 if self.x0 is None else min(len(self.x0), cfg.popsize)
        base = self.x0[0] if supplied else self.uniform_point()
        for p in range(cfg.popsize):
            if p < supplied:
                self.x_pop[p] = self.x0[p]
            elif cfg.x0sampling == "uniform":
                self.x_pop[p] = self.uniform_point()
            else:
                self.x_pop[p] = self.gaussian_point(base, cfg.stepsize0)

        for p in range(cfg.popsize):
            if self.evalcount >= self.max_evals:
                return False
            self.fx_pop[p] = self.evaluate(self.x_pop[p])
            if self.stop_nonfinite(self.fx_pop[p]):
                return False

        order = np.argsort(self.fx_pop, kind="stable")
        self.x_pop, self.fx_pop = self.x_pop[order], self.fx_pop[order]
        return True

    def _marriage(self) -> np.ndarray:
        """Pick ``roh`` distinct parents from the cost-sorted population."""
        cfg = self.config
        if cfg.selmode == "roulette":
            weights = np.arange(cfg.popsize, 0, -1, dtype=float)
            return self.rng.choice(
                cfg.popsize, size=cfg.roh, replace=False, p=weights / weights.sum()
            )
        return self.rng.choice(cfg.popsize, size=cfg.roh, replace=False)

    def _recombine(self, family: np.ndarray) -> Array:
        x = self.x_pop[family].mean(axis=0)
        if self.integer.any():
            picks = family[self.rng.integers(0, len(family), size=self.n)]
            donor = self.x_pop[picks, np.arange(self.n)]
            x[self.integer] = donor[self.integer]
        return x

    def _child_stepsize(self, family: np.ndarray) -> Array:
        """Mean of the parents' step sizes, then log-normally mutated."""
        return self._mutate_stepsize(self.s[family].mean(axis=0))

    def _mutate_stepsize(self, s: Array) -> Array:
        shared = math.exp(self.tau0 * self.rng.normal())
        return shared * s * np.exp(self.tau * self.rng.normal(0.0, 1.0, self.n))

    def _mutate(self, x: Array, s: Array) -> Array:
        real = ~self.integer
        x[real] += s[real] * self.rng.normal(0.0, 1.0, int(real.sum()))
        if self.integer.any():
            resample = self.integer & (self.rng.random(self.n) < self.config.pmut_int)
            if resample.any():
                low = self.lb[resample].astype(np.int64)
                high = self.ub[resample].astype(np.int64) + 1
                x[resample] = self.rng.integers(low, high)
        return self.check_bounds(x)

    def _select(self, x_new: Array, s_new: Array, fx_new: Array) -> None:
        """Keep the best ``popsize`` of parents and offspring."""
        mu = self.config.popsize
        x_all = np.concatenate([self.x_pop, x_new])
        s_all = np.concatenate([self.s, s_new])
        fx_all = np.concatenate([self.fx_pop, fx_new])
        keep = np.argsort(fx_all, kind="stable")[:mu]
        self.x_pop, self.s, self.fx_pop = x_all[keep], s_all[keep], fx_all[keep]


__all__ = ["EvolutionStrategy", "ESConfig"]
