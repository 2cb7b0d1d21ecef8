"""Tests for repeated seeded runs."""

import numpy as np
import pytest

from metaheur import Problem, RepeatResult, repeat_solve


def test_repeat_summary(sphere_problem) -> None:
    """Per-run costs and summary statistics are consistent."""
    result = repeat_solve("hillclimber", sphere_problem, 100, seeds=range(4))

    assert isinstance(result, RepeatResult)
    assert result.seeds == (0, 1, 2, 3)
    assert result.costs.shape == (4,)
    assert result.best_cost == result.costs.min()
    assert result.mean == pytest.approx(result.costs.mean())
    assert result.median == pytest.approx(np.median(result.costs))
    assert result.std == pytest.approx(result.costs.std())
    assert result.best_cost == pytest.approx(float(np.sum(result.best_x**2)))


def test_repeat_is_reproducible(mixed_problem) -> None:
    """The same seeds give the same costs and best point."""
    settings = {"popsize": 8}
    first = repeat_solve("pso", mixed_problem, 120, seeds=[5, 6], settings=settings)
    second = repeat_solve("pso", mixed_problem, 120, seeds=[5, 6], settings=settings)
    np.testing.assert_array_equal(first.costs, second.costs)
    np.testing.assert_array_equal(first.best_x, second.best_x)


def test_empty_seeds(sphere_problem) -> None:
    """At least one seed is required."""
    with pytest.raises(ValueError, match="non-empty"):
        repeat_solve("ga", sphere_problem, 50, seeds=[])


def test_unknown_solver(sphere_problem) -> None:
    """Unknown solver names are reported by the factory."""
    with pytest.raises(ValueError, match="Unsupported solver name"):
        repeat_solve("annealing", sphere_problem, 50, seeds=[0])


def test_all_runs_non_finite() -> None:
    """Statistics are NaN when no run produced a finite cost."""
    problem = Problem(lambda x: float("nan"), lb=[0.0], ub=[1.0])
    result = repeat_solve("es", problem, 20, seeds=[0, 1, 2])

    assert result.best_x is None
    assert result.best_cost == float("inf")
    assert np.all(np.isinf(result.costs))
    assert np.isnan(result.mean) and np.isnan(result.median) and np.isnan(result.std)


def test_result_validation() -> None:
    """Seeds and costs must have matching lengths."""
    with pytest.raises(ValueError, match="same length"):
        RepeatResult(
            seeds=(0, 1),
            costs=np.zeros(3),
            best_x=None,
            best_cost=0.0,
            mean=0.0,
            median=0.0,
            std=0.0,
        )
