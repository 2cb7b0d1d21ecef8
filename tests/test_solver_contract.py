"""Properties every solver must satisfy, checked across all algorithms."""

import numpy as np
import pytest

from metaheur import Problem, Status, create_solver, debug_context
from metaheur.solvers import SOLVERS

ALL_SOLVERS = sorted(SOLVERS)
EXACT_BUDGET = ["es", "ga", "hillclimber", "pso", "rosenbrock"]


def _budget_bound(name: str, max_evals: int, n: int) -> int:
    if name == "nelder_mead":
        return max(max_evals, n + 1) + n + 1
    if name == "direct":
        return max_evals + 2 * n - 1
    return max_evals


@pytest.mark.parametrize("name", ALL_SOLVERS)
def test_best_cost_is_monotone(name, sphere_problem) -> None:
    """The recorded best cost never increases."""
    result = create_solver(name, sphere_problem, 300, seed=5).solve()
    counts = [c for c, _ in result.history]
    costs = np.array([f for _, f in result.history])

    assert counts == list(range(1, result.nfev + 1))
    assert np.all(np.diff(costs) <= 0.0)
    assert costs[-1] == result.fun
    assert result.fun == pytest.approx(float(np.sum(result.x**2)))


@pytest.mark.parametrize("name", ALL_SOLVERS)
@pytest.mark.parametrize("max_evals", [1, 7, 150])
def test_evaluation_accounting(name, max_evals, recorder) -> None:
    """Every objective call is counted and the budget is respected."""
    objective = recorder(lambda x: float(np.sum((x - 0.3) ** 2)))
    problem = Problem(objective, lb=[-2.0, -2.0, -2.0], ub=[2.0, 2.0, 2.0])
    solver = create_solver(name, problem, max_evals, seed=1)
    result = solver.solve()

    assert result.nfev == objective.ncalls == solver.evalcount
    assert result.nfev <= _budget_bound(name, max_evals, problem.dim)
    if name in EXACT_BUDGET:
        assert result.nfev == max_evals
    else:
        assert result.nfev >= min(max_evals, problem.dim + 1 if name == "nelder_mead" else 1)


@pytest.mark.parametrize("name", ALL_SOLVERS)
def test_bounds_and_integrality(name, mixed_problem, recorder) -> None:
    """Every evaluated point is inside the box and integral where required."""
    objective = recorder(mixed_problem.fun)
    problem = Problem(objective, mixed_problem.lb, mixed_problem.ub, mixed_problem.integer)

    with debug_context(True):
        result = create_solver(name, problem, 400, seed=11).solve()

    points = np.array(objective.points)
    assert np.all(points >= problem.lb)
    assert np.all(points <= problem.ub)
    np.testing.assert_array_equal(points[:, 2], np.round(points[:, 2]))
    assert result.x[2] == round(result.x[2])


@pytest.mark.parametrize("name", ALL_SOLVERS)
def test_reproducible_for_equal_seeds(name, mixed_problem) -> None:
    """Equal seeds give identical runs."""
    first = create_solver(name, mixed_problem, 200, seed=42).solve()
    second = create_solver(name, mixed_problem, 200, seed=42).solve()

    np.testing.assert_array_equal(first.x, second.x)
    assert first.fun == second.fun
    assert first.history == second.history


@pytest.mark.parametrize("name", ["es", "ga", "hillclimber", "pso"])
def test_different_seeds_differ(name, sphere_problem) -> None:
    """Stochastic solvers depend on the seed."""
    first = create_solver(name, sphere_problem, 100, seed=1).solve()
    second = create_solver(name, sphere_problem, 100, seed=2).solve()
    assert first.history != second.history


@pytest.mark.parametrize("name", ALL_SOLVERS)
@pytest.mark.parametrize("bad_value", [float("nan"), float("inf")])
def test_non_finite_cost_stops_the_run(name, bad_value, sphere_problem, recorder) -> None:
    """A NaN or infinite cost stops the run and keeps the best finite point."""
    objective = recorder(sphere_problem.fun, nan_at=30, bad_value=bad_value)
    problem = Problem(objective, sphere_problem.lb, sphere_problem.ub)
    result = create_solver(name, problem, 500, seed=3).solve()

    assert result.status is Status.NON_FINITE
    assert result.nfev == 30
    assert np.isfinite(result.fun)
    assert result.fun == min(objective.values[:29])
    assert result.x is not None


@pytest.mark.parametrize("name", ALL_SOLVERS)
def test_non_finite_first_evaluation(name, sphere_problem) -> None:
    """A non-finite first cost leaves no best point."""
    problem = Problem(lambda x: float("nan"), sphere_problem.lb, sphere_problem.ub)
    solver = create_solver(name, problem, 50, seed=0)
    result = solver.solve()

    assert result.status is Status.NON_FINITE
    assert result.nfev == 1
    assert result.x is None
    assert solver.get_best_x() is None
    assert solver.get_best_cost() == float("inf")
    assert not result.success


@pytest.mark.parametrize("name", ALL_SOLVERS)
def test_x0_is_evaluated_first(name, sphere_problem, recorder) -> None:
    """A supplied start point is the first evaluation."""
    objective = recorder(sphere_problem.fun)
    problem = Problem(objective, sphere_problem.lb, sphere_problem.ub)
    x0 = np.array([1.5, -2.5])
    create_solver(name, problem, 60, seed=0, x0=x0).solve()

    if name == "direct":
        np.testing.assert_array_equal(objective.points[0], [0.0, 0.0])
    else:
        np.testing.assert_array_equal(objective.points[0], x0)


@pytest.mark.parametrize("name", ALL_SOLVERS)
def test_degenerate_box_dimension(name, recorder) -> None:
    """A zero-width dimension stays fixed."""
    objective = recorder(lambda x: float((x[0] - 1.0) ** 2 + x[1]))
    problem = Problem(objective, lb=[-3.0, 2.0], ub=[3.0, 2.0])
    result = create_solver(name, problem, 120, seed=7).solve()

    assert np.all(np.array(objective.points)[:, 1] == 2.0)
    assert np.isfinite(result.fun)
