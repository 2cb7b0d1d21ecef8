"""Particle swarm optimization.

Two velocity rules are available:

- ``"fips"``: fully informed PSO. Every particle is attracted to the personal
  bests of its four von Neumann neighbours (Mendes, Kennedy & Neves, 2004)::

      v <- chi * (v + 1/K * sum_k U(0, phi) * (p_k - x))

- ``"inertia"`` / ``"constriction"``: the canonical rule with one attractor at
  the particle's own best and one at the global best (Poli, Kennedy &
  Blackwell, 2007). ``chi`` is the inertia weight or the constriction
  coefficient respectively.

Personal bests are refreshed either after a full sweep over the swarm
(``pxupdatemode="population"``) or right after every evaluation
(``pxupdatemode="particle"``).
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import ClassVar, Mapping

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

PSO_MODES = {0: "fips", 1: "inertia", 2: "constriction"}
UPDATE_MODES = {0: "population", 1: "particle"}


@dataclass(frozen=True)
class PSOConfig(SolverConfig):
    """
    Settings of :class:`ParticleSwarm`.

    Args:
        popsize: Number of particles. In ``"fips"`` mode it is rounded to a
            ``rows x cols`` grid and must be at least 4. Defaults to 24.
        chi: Constriction coefficient (inertia weight in ``"inertia"`` mode).
            Defaults to 0.1.
        phi: Upper bound of the uniform attraction factor in ``"fips"`` mode.
            Defaults to 4.0.
        phi1: Attraction to the particle's own best. Defaults to 2.05.
        phi2: Attraction to the global best. Defaults to 2.05.
        v0max: Scale of the initial velocity as a fraction of the range.
            Defaults to 0.2.
        psomode: ``"fips"``, ``"inertia"`` or ``"constriction"`` (or 0/1/2).
        pxupdatemode: ``"population"`` or ``"particle"`` (or 0/1).
        x0sampling: ``"uniform"`` or ``"gaussian"`` (or 0/1) initial swarm
            (settings key ``"x0sampling"`` or ``"x0samplingmode"``).
        s0: Spread of the Gaussian initial sampling as a fraction of the
            range. Defaults to 1.0.
        intmut: Probability to mutate an integer variable after a move.
            Defaults to 0.5.
        mutstdev: Spread of that mutation as a fraction of the range.
            Defaults to 0.3.
    """

    aliases: ClassVar[Mapping[str, str]] = {"x0samplingmode": "x0sampling"}

    popsize: int = 24
    chi: float = 0.1
    phi: float = 4.0
    phi1: float = 2.05
    phi2: float = 2.05
    v0max: float = 0.2
    psomode: str = "fips"
    pxupdatemode: str = "population"
    x0sampling: str = "uniform"
    s0: float = 1.0
    intmut: float = 0.5
    mutstdev: float = 0.3

    def __post_init__(self) -> None:
        object.__setattr__(self, "psomode", normalize_mode(self.psomode, PSO_MODES, "psomode"))
        object.__setattr__(
            self,
            "pxupdatemode",
            normalize_mode(self.pxupdatemode, UPDATE_MODES, "pxupdatemode"),
        )
        object.__setattr__(
            self, "x0sampling", normalize_mode(self.x0sampling, SAMPLING_MODES, "x0sampling")
        )
        object.__setattr__(self, "popsize", int(self.popsize))
        min_pop = 4 if self.psomode == "fips" else 1
        if self.popsize < min_pop:
            raise ValueError(
                f"popsize must be at least {min_pop} in {self.psomode!r} mode, got {self.popsize}"
            )
        check_positive(self.chi, "chi")
        check_probability(self.intmut, "intmut")
        if self.v0max < 0 or self.s0 < 0 or self.mutstdev < 0:
            raise ValueError("v0max, s0 and mutstdev must be non-negative.")


def von_neumann_neighbours(popsize: int) -> tuple[int, np.ndarray]:
    """
    Build a von Neumann (torus) neighbourhood.

    The swarm is laid out row-major on a grid with ``floor(sqrt(popsize))``
    columns; the number of rows is ``round(popsize / cols)``, so the swarm is
    resized to ``rows * cols`` particles.

    Args:
        popsize: Requested number of particles (at least 4).

    Returns:
        ``(size, neighbours)`` where ``neighbours[i]`` holds the indices of
        the particles above, left of, right of and below particle ``i``.
    """
    if popsize < 4:
        raise ValueError(f"A von Neumann neighbourhood needs popsize >= 4, got {popsize}")
    cols = int(math.floor(math.sqrt(popsize)))
    rows = int(round(popsize / cols))
    size = rows * cols
    neighbours = np.empty((size, 4), dtype=int)
    for idx in range(size):
        r, c = divmod(idx, cols)
        neighbours[idx] = (
            ((r - 1) % rows) * cols + c,
            r * cols + (c - 1) % cols,
            r * cols + (c + 1) % cols,
            ((r + 1) % rows) * cols + c,
        )
    return size, neighbours


class ParticleSwarm(Solver):
    """Particle swarm optimizer with fully informed and canonical update rules."""

    name = "pso"
    config_class = PSOConfig

    def _run(self) -> None:
        cfg = self.config
        if cfg.psomode == "fips":
            self.popsize, self.neighbours = von_neumann_neighbours(cfg.popsize)
        else:
            self.popsize, self.neighbours = cfg.popsize, None

        if not self._initial_swarm():
            return

        per_particle = cfg.pxupdatemode == "particle"
        while self.evalcount < self.max_evals:
            gbest = self.best_x.copy()
            for p in range(self.popsize):
                if self.evalcount >= self.max_evals:
                    return
                if per_particle:
                    gbest = self.best_x
                v_new, x_new = self._move(p, gbest)
                fx_new = self.evaluate(x_new)
                self.v[p] = v_new
                self.x[p] = x_new
                self.fx[p] = fx_new
                if self.stop_nonfinite(fx_new):
                    return
                if per_particle:
                    self._update_personal_best(np.array([p]))
            if not per_particle:
                self._update_personal_best(np.arange(self.popsize))
            self.nit += 1

    def _initial_swarm(self) -> bool:
        cfg = self.config
        span = self.problem.span
        self.x = np.empty((self.popsize, self.n))
        self.fx = np.empty(self.popsize)

        supplied = 0 if self.x0 is None else min(len(self.x0), self.popsize)
        if supplied:
            self.x[:supplied] = self.x0[:supplied]
            base = self.x0[0]
        else:
            base = self.uniform_point()
        for p in range(supplied, self.popsize):
            if cfg.x0sampling == "uniform":
                self.x[p] = self.uniform_point()
            else:
                self.x[p] = self.gaussian_point(base, cfg.s0)

        for p in range(self.popsize):
            if self.evalcount >= self.max_evals:
                return False
            self.fx[p] = self.evaluate(self.x[p])
            if self.stop_nonfinite(self.fx[p]):
                return False

        self.pbest_x = self.x.copy()
        self.pbest_fx = self.fx.copy()
        self.v = self.rng.normal(0.0, 1.0, (self.popsize, self.n)) * span * cfg.v0max
        logger.debug("%s: swarm of %d particles initialised", self.name, self.popsize)
        return True

    def _move(self, p: int, gbest: Array) -> tuple[Array, Array]:
        cfg = self.config
        span = self.problem.span
        x_old = self.x[p]
        v_old = self.v[p]

        if cfg.psomode == "fips":
            informants = self.neighbours[p]
            k = len(informants)
            pull = self.rng.random((k, self.n)) * cfg.phi * (self.pbest_x[informants] - x_old)
            v_new = cfg.chi * (v_old + pull.sum(axis=0) / k)
        else:
            pull = (
                self.rng.random(self.n) * cfg.phi1 * (self.pbest_x[p] - x_old)
                + self.rng.random(self.n) * cfg.phi2 * (gbest - x_old)
            )
            if cfg.psomode == "inertia":
                v_new = cfg.chi * v_old + pull
            else:
                v_new = cfg.chi * (v_old + pull)

        stalled = np.round(v_new, 5) == 0
        if stalled.any():
            v_new[stalled] = self.rng.normal(0.0, 1.0, int(stalled.sum())) * cfg.chi * span[stalled]

        x_new = x_old + v_new
        if self.integer.any():
            self.round_integers(x_new)
            mutate = self.integer & (self.rng.random(self.n) < cfg.intmut)
            if mutate.any():
                noise = self.rng.normal(0.0, 1.0, int(mutate.sum())) * cfg.mutstdev * span[mutate]
                x_new[mutate] = np.round(x_new[mutate] + noise)
        self.check_bounds(x_new)
        return v_new, x_new

    def _update_personal_best(self, idx: np.ndarray) -> None:
        improved = idx[self.fx[idx] < self.pbest_fx[idx]]
        self.pbest_x[improved] = self.x[improved]
        self.pbest_fx[improved] = self.fx[improved]


__all__ = ["ParticleSwarm", "PSOConfig", "von_neumann_neighbours"]
