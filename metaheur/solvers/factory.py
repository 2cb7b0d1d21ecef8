"""Factory for creating solvers by name."""

from __future__ import annotations

from typing import Any, Dict, Mapping, Optional, Type

from ..core.problem import Array, Problem
from ..core.solver import Solver
from .direct import Direct
from .es import EvolutionStrategy
from .ga import GeneticAlgorithm
from .hillclimber import HillClimber
from .nelder_mead import NelderMead
from .pso import ParticleSwarm
from .rosenbrock import Rosenbrock

SOLVERS: Dict[str, Type[Solver]] = {
    cls.name: cls
    for cls in (
        HillClimber,
        ParticleSwarm,
        GeneticAlgorithm,
        EvolutionStrategy,
        NelderMead,
        Rosenbrock,
        Direct,
    )
}


def create_solver(
    name: str,
    problem: Problem,
    max_evals: int,
    seed: int = 0,
    settings: Optional[Mapping[str, Any]] = None,
    x0: Optional[Array] = None,
    debug: Optional[bool] = None,
) -> Solver:
    """
    Create a solver from its name and a loosely keyed settings mapping.

    Args:
        name: Solver name. Supported values: "hillclimber", "pso", "ga", "es",
            "nelder_mead", "rosenbrock", "direct". Matching ignores case, and
            "-" is equivalent to "_".
        problem: Problem to minimize.
        max_evals: Evaluation budget.
        seed: Seed of the solver's random generator.
        settings: Algorithm settings; missing keys take defaults and unknown
            keys are ignored.
        x0: Optional starting point(s).
        debug: Per-solver feasibility checks; None follows the package
            default.

    Returns:
        An unsolved solver instance.

    Raises:
        ValueError: If the solver name is not supported or a setting is
            invalid.
    """
    key = name.lower().replace("-", "_")
    if key not in SOLVERS:
        raise ValueError(
            f"Unsupported solver name '{name}'. Supported names: {sorted(SOLVERS)}"
        )
    return SOLVERS[key](
        problem, max_evals, seed=seed, config=dict(settings or {}), x0=x0, debug=debug
    )


__all__ = ["SOLVERS", "create_solver"]
