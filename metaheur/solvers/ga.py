"""Simple genetic algorithm with a hybrid binary/real encoding.

Integer genes are handled as bit strings (one-point crossover plus bit-flip
mutation); real genes use extended intermediate recombination and an
occasional large step whose length decays exponentially. Parents are drawn by
roulette wheel on rank-based fitness, and the best ``elite`` individuals
survive unchanged.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Sequence

import numpy as np

from ..core.config import SolverConfig, check_positive, check_probability
from ..core.problem import Array, Status
from ..core.solver import Solver
from ..logging import get_logger

logger = get_logger(__name__)


def bits_required(span: float) -> int:
    """Number of bits needed to code every integer in ``[0, span]`` (at least 1)."""
    span = int(round(span))
    if span < 0:
        raise ValueError(f"span must be non-negative, got {span}")
    return max(span.bit_length(), 1)


def int_to_bits(value: int, length: int) -> np.ndarray:
    """
    Code a non-negative integer as a most-significant-bit-first bit array.

    Raises:
        ValueError: If ``value`` does not fit into ``length`` bits.
    """
    value = int(value)
    if value < 0 or value >= 1 << length:
        raise ValueError(f"{value} cannot be coded on {length} bits")
    return np.array([(value >> (length - 1 - j)) & 1 for j in range(length)], dtype=np.uint8)


def bits_to_int(bits: Sequence[int]) -> int:
    """Decode a most-significant-bit-first bit array."""
    value = 0
    for bit in bits:
        value = (value << 1) | int(bit)
    return value


def rank_fitness(costs: Array) -> Array:
    """Rank transform: the lowest cost gets ``len(costs)``, the highest 1."""
    size = len(costs)
    fitness = np.empty(size)
    fitness[np.argsort(costs, kind="stable")] = np.arange(size, 0, -1)
    return fitness


@dataclass(frozen=True)
class GAConfig(SolverConfig):
    """
    Settings of :class:`GeneticAlgorithm`.

    Args:
        popsize: Population size, at least 2. Defaults to 20.
        maxgen: Generation cap. Defaults to 100.
        pcross: Per-gene crossover probability. Defaults to 0.7.
        pmut: Mutation probability (per bit for integer genes, per gene for
            real genes). Defaults to 0.3.
        elite: Individuals copied unchanged into the next generation; must be
            smaller than ``popsize``. Defaults to 1.
        d: Extension of the intermediate recombination interval. Defaults
            to 0.1.
        r: Mutation range as a fraction of the variable's range. Defaults
            to 0.1.
        k: Mutation precision; step lengths scale with ``2**(-U*k)``.
            Defaults to 16.
    """

    popsize: int = 20
    maxgen: int = 100
    pcross: float = 0.7
    pmut: float = 0.3
    elite: int = 1
    d: float = 0.1
    r: float = 0.1
    k: float = 16.0

    def __post_init__(self) -> None:
        object.__setattr__(self, "popsize", int(self.popsize))
        object.__setattr__(self, "maxgen", int(self.maxgen))
        object.__setattr__(self, "elite", int(self.elite))
        if self.popsize < 2:
            raise ValueError(f"popsize must be at least 2, got {self.popsize}")
        if not 0 <= self.elite < self.popsize:
            raise ValueError(f"elite must lie in [0, popsize), got {self.elite}")
        check_positive(self.maxgen, "maxgen")
        check_probability(self.pcross, "pcross")
        check_probability(self.pmut, "pmut")
        if self.d < 0 or self.r < 0 or self.k < 0:
            raise ValueError("d, r and k must be non-negative.")


class GeneticAlgorithm(Solver):
    """Generational GA with rank-based roulette selection and elitism."""

    name = "ga"
    config_class = GAConfig

    def __init__(self, *args, **kwargs) -> None:
        super().__init__(*args, **kwargs)
        # chromosome length per integer gene, 0 for real genes
        self.lchrom = np.array(
            [bits_required(s) if is_int else 0 for s, is_int in zip(self.problem.span, self.integer)],
            dtype=int,
        )

    def _run(self) -> None:
        cfg = self.config
        if not self._initial_population():
            return

        gen = 0
        while gen < cfg.maxgen and self.evalcount < self.max_evals:
            order = np.argsort(self.fx_pop, kind="stable")
            self.x_pop = self.x_pop[order]
            self.fx_pop = self.fx_pop[order]
            wheel = np.cumsum(rank_fitness(self.fx_pop))

            x_new = np.empty_like(self.x_pop)
            fx_new = np.empty_like(self.fx_pop)
            x_new[: cfg.elite] = self.x_pop[: cfg.elite]
            fx_new[: cfg.elite] = self.fx_pop[: cfg.elite]
            filled = cfg.elite
            while filled < cfg.popsize:
                parent1 = self.x_pop[self._select(wheel)]
                parent2 = self.x_pop[self._select(wheel)]
                children = self._crossover_mutate(parent1, parent2)
                # with one slot left only the first child is kept
                for child in children[: cfg.popsize - filled]:
                    if self.evalcount >= self.max_evals:
                        return
                    fx = self.evaluate(child)
                    x_new[filled] = child
                    fx_new[filled] = fx
                    filled += 1
                    if self.stop_nonfinite(fx):
                        return

            self.x_pop, self.fx_pop = x_new, fx_new
            gen += 1
            self.nit = gen

        if gen >= cfg.maxgen and self.evalcount < self.max_evals:
            self._stop(Status.MAX_ITERATIONS, f"Reached maxgen={cfg.maxgen} generations.")

    def _initial_population(self) -> bool:
        popsize = self.config.popsize
        self.x_pop = np.empty((popsize, self.n))
        self.fx_pop = np.empty(popsize)
        supplied = 0 if self.x0 is None else min(len(self.x0), popsize)
        for p in range(popsize):
            if self.evalcount >= self.max_evals:
                return False
            self.x_pop[p] = self.x0[p] if p < supplied else self.uniform_point()
            self.fx_pop[p] = self.evaluate(self.x_pop[p])
            if self.stop_nonfinite(self.fx_pop[p]):
                return False
        logger.debug("%s: initial population of %d, %d from x0", self.name, popsize, supplied)
        return True

    def _select(self, wheel: Array) -> int:
        """Roulette wheel on the cumulative fitness ``wheel``."""
        spin = self.rng.random() * wheel[-1]
        return min(int(np.searchsorted(wheel, spin, side="left")), len(wheel) - 1)

    def _crossover_mutate(self, parent1: Array, parent2: Array) -> tuple[Array, Array]:
        cfg = self.config
        child1 = parent1.copy()
        child2 = parent2.copy()
        for i in range(self.n):
            if self.rng.random() > cfg.pcross:
                continue
            if self.integer[i]:
                length = self.lchrom[i]
                if length > 1:
                    cut = int(self.rng.integers(0, length))
                    bits1 = int_to_bits(round(parent1[i] - self.lb[i]), length)
                    bits2 = int_to_bits(round(parent2[i] - self.lb[i]), length)
                    code1 = np.concatenate([bits1[:cut], bits2[cut:]])
                    code2 = np.concatenate([bits2[:cut], bits1[cut:]])
                    code1 ^= (self.rng.random(length) <= cfg.pmut).astype(np.uint8)
                    code2 ^= (self.rng.random(length) <= cfg.pmut).astype(np.uint8)
                    child1[i] = min(bits_to_int(code1) + self.lb[i], self.ub[i])
                    child2[i] = min(bits_to_int(code2) + self.lb[i], self.ub[i])
                else:
                    child1[i], child2[i] = parent2[i], parent1[i]
            else:
                alpha = self.rng.uniform(-cfg.d, 1.0 + cfg.d)
                child1[i] = parent1[i] * alpha + parent2[i] * (1.0 - alpha)
                child2[i] = parent2[i] * alpha + parent1[i] * (1.0 - alpha)
                if self.rng.random() <= cfg.pmut:
                    scale = cfg.r * abs(self.ub[i] - self.lb[i])
                    child1[i] += self._mutation_step(scale)
                    child2[i] += self._mutation_step(scale)
        return self.check_bounds(child1), self.check_bounds(child2)

    def _mutation_step(self, scale: float) -> float:
        direction = 2.0 * self.rng.random() - 1.0
        return direction * scale * 2.0 ** (-self.rng.random() * self.config.k)


__all__ = [
    "GeneticAlgorithm",
    "GAConfig",
    "bits_required",
    "int_to_bits",
    "bits_to_int",
    "rank_fitness",
]
