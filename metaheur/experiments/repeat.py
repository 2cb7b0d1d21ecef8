"""Repeated seeded runs of one solver on one problem."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Mapping, Optional, Sequence

import numpy as np

from ..core.problem import Array, Problem
from ..logging import get_logger
from ..solvers.factory import create_solver

logger = get_logger(__name__)


@dataclass(frozen=True)
class RepeatResult:
    """
    Result container for :func:`repeat_solve`.

    Statistics are taken over the finite best costs only; they are NaN when no
    run produced a finite cost.

    Attributes:
        seeds: Seeds of the runs, in run order.
        costs: Best cost of every run, shape (n_runs,).
        best_x: Best point over all runs, or None.
        best_cost: Lowest cost over all runs (``inf`` if none is finite).
        mean: Mean of the finite best costs.
        median: Median of the finite best costs.
        std: Population standard deviation of the finite best costs.
    """

    seeds: tuple
    costs: Array
    best_x: Optional[Array]
    best_cost: float
    mean: float
    median: float
    std: float

    def __post_init__(self) -> None:
        """Validate RepeatResult invariants."""
        costs = np.asarray(self.costs, dtype=float)
        if costs.ndim != 1:
            raise ValueError(f"costs must be 1D, got shape {costs.shape}")
        if costs.shape[0] != len(self.seeds):
            raise ValueError(
                f"seeds and costs must have the same length, "
                f"got {len(self.seeds)} and {costs.shape[0]}"
            )
        object.__setattr__(self, "seeds", tuple(self.seeds))
        object.__setattr__(self, "costs", costs)


def repeat_solve(
    name: str,
    problem: Problem,
    max_evals: int,
    seeds: Sequence[int],
    settings: Optional[Mapping[str, Any]] = None,
) -> RepeatResult:
    """
    Run a fresh solver instance for every seed and summarize the best costs.

    Runs are independent and sequential; each one owns its generator, so the
    result is reproducible for a given seed list.

    Args:
        name: Solver name accepted by :func:`~metaheur.solvers.create_solver`.
        problem: Problem to minimize.
        max_evals: Evaluation budget per run.
        seeds: One seed per run; must be non-empty.
        settings: Algorithm settings shared by all runs.

    Returns:
        RepeatResult with per-run costs and summary statistics.

    Raises:
        ValueError: If ``seeds`` is empty or the solver name is unsupported.

    Example:
        >>> problem = Problem(lambda x: float(x @ x), lb=[-1, -1], ub=[1, 1])
        >>> result = repeat_solve("hillclimber", problem, 200, seeds=range(5))
        >>> assert result.costs.shape == (5,)
    """
    seeds = tuple(int(s) for s in seeds)
    if not seeds:
        raise ValueError("seeds must be non-empty")

    costs = np.empty(len(seeds))
    best_x: Optional[Array] = None
    best_cost = float("inf")
    for i, seed in enumerate(seeds):
        result = create_solver(name, problem, max_evals, seed=seed, settings=settings).solve()
        costs[i] = result.fun
        if result.x is not None and result.fun < best_cost:
            best_cost = result.fun
            best_x = result.x
        logger.debug("%s seed %d: best cost %.6g (%s)", name, seed, result.fun, result.status.value)

    finite = costs[np.isfinite(costs)]
    if finite.size:
        mean, median, std = float(finite.mean()), float(np.median(finite)), float(finite.std())
    else:
        mean = median = std = float("nan")
    logger.info(
        "%s over %d seeds: best %.6g, mean %.6g, median %.6g",
        name,
        len(seeds),
        best_cost,
        mean,
        median,
    )
    return RepeatResult(
        seeds=seeds,
        costs=costs,
        best_x=best_x,
        best_cost=best_cost,
        mean=mean,
        median=median,
        std=std,
    )


__all__ = ["RepeatResult", "repeat_solve"]
