"""Tests for the Nelder-Mead simplex solver."""

import numpy as np
import pytest

from metaheur import NelderMead, NelderMeadConfig, Problem, Status


def _shifted_sphere(x: np.ndarray) -> float:
    return float((x[0] - 1.3) ** 2 + (x[1] + 2.1) ** 2)


def test_converges_on_shifted_sphere() -> None:
    """The simplex contracts onto a shifted optimum."""
    problem = Problem(_shifted_sphere, lb=[-5.0, -5.0], ub=[5.0, 5.0])
    result = NelderMead(problem, 400, seed=2).solve()

    assert result.fun < 1e-4
    np.testing.assert_allclose(result.x, [1.3, -2.1], atol=1e-2)


def test_simplex_stays_sorted(sphere_problem) -> None:
    """Vertices stay ordered by cost after the run."""
    solver = NelderMead(sphere_problem, 80, seed=0)
    result = solver.solve()

    assert solver.simplex.shape == (3, 2)
    assert np.all(np.diff(solver.costs) >= 0.0)
    assert solver.costs[0] == result.fun


def test_flat_objective_is_degenerate(recorder) -> None:
    """A constant objective stops with DEGENERATE after one reflection."""
    objective = recorder(lambda x: 1.0)
    problem = Problem(objective, lb=[-1.0, -1.0], ub=[1.0, 1.0])
    result = NelderMead(problem, 100, seed=0).solve()

    assert result.status is Status.DEGENERATE
    assert result.nfev == 4
    assert result.nit == 0
    assert "Degenerate" in result.message


def test_initial_simplex_ignores_tiny_budget(sphere_problem) -> None:
    """The initial simplex is evaluated in full even on a budget of one."""
    result = NelderMead(sphere_problem, 1, seed=0).solve()
    assert result.nfev == 3
    assert result.status is Status.BUDGET_EXHAUSTED


def test_starts_from_x0(sphere_problem) -> None:
    """The start point is a vertex of the initial simplex."""
    solver = NelderMead(sphere_problem, 3, seed=0, x0=[2.0, 2.0])
    solver.solve()
    assert [2.0, 2.0] in solver.simplex.tolist()


@pytest.mark.parametrize("setting", ["alpha", "gamma", "rho", "sigma", "step0"])
def test_coefficients_must_be_positive(setting) -> None:
    """Every coefficient must be positive."""
    with pytest.raises(ValueError, match=setting):
        NelderMeadConfig(**{setting: 0.0})


def _seeded(fun, lb, ub, vertices) -> NelderMead:
    """Solver whose simplex is set to ``vertices`` (evaluated and sorted)."""
    solver = NelderMead(Problem(fun, lb=lb, ub=ub), 100, seed=0)
    solver.simplex = np.array(vertices, dtype=float)
    solver.costs = np.array([solver.evaluate(v) for v in solver.simplex])
    solver._sort()
    return solver


def _square(x: np.ndarray) -> float:
    return float(np.sum(x**2))


def test_reflection_is_accepted_between_best_and_second_worst() -> None:
    """A reflected point better than the second-worst vertex replaces the worst one."""
    solver = _seeded(_square, [-5.0, -5.0], [5.0, 5.0], [[0.0, 0.0], [2.0, 0.0], [2.0, 1.0]])
    assert solver._iterate()

    assert solver.last_move == "reflect"
    assert solver.evalcount == 4
    np.testing.assert_allclose(solver.simplex, [[0.0, 0.0], [0.0, -1.0], [2.0, 0.0]])


def test_expansion_keeps_the_better_of_both_points() -> None:
    """A reflection beating the best vertex triggers an expansion step."""
    solver = _seeded(_square, [-10.0], [10.0], [[3.0], [4.0]])
    assert solver._iterate()

    assert solver.last_move == "expand"
    assert solver.evalcount == 4
    np.testing.assert_allclose(solver.simplex[:, 0], [1.5, 3.0])


def test_outside_contraction() -> None:
    """A reflection between second-worst and worst is contracted towards the centroid."""
    solver = _seeded(_square, [-10.0], [10.0], [[1.0], [3.5]])
    assert solver._iterate()

    assert solver.last_move == "contract_outside"
    assert solver.evalcount == 4
    np.testing.assert_allclose(solver.simplex[:, 0], [0.375, 1.0])


def test_inside_contraction() -> None:
    """A reflection worse than the worst vertex contracts from the worst vertex."""
    solver = _seeded(_square, [-10.0], [10.0], [[1.0], [-1.5]])
    assert solver._iterate()

    assert solver.last_move == "contract_inside"
    assert solver.evalcount == 4
    np.testing.assert_allclose(solver.simplex[:, 0], [0.375, 1.0])


def test_failed_contraction_shrinks_towards_best() -> None:
    """When the contraction does not improve, every other vertex is pulled towards the best."""

    def bumpy(x: np.ndarray) -> float:
        return float((x[0] - 1.0) ** 2 + (10.0 if 0.2 < x[0] < 0.45 else 0.0))

    solver = _seeded(bumpy, [-10.0], [10.0], [[1.0], [-1.5]])
    assert solver._iterate()

    assert solver.last_move == "shrink"
    # reflection, contraction and one shrink point
    assert solver.evalcount == 2 + 3
    np.testing.assert_allclose(solver.simplex[:, 0], [1.0, 0.5])


def test_shrink_reevaluates_n_vertices() -> None:
    """Shrinking costs exactly n evaluations and leaves vertex 0 in place."""
    vertices = [[0.0, 0.0, 0.0], [1.0, 0.0, 0.0], [0.0, 2.0, 0.0], [0.0, 0.0, -3.0]]
    solver = _seeded(_square, [-5.0] * 3, [5.0] * 3, vertices)
    before = solver.simplex.copy()
    evals = solver.evalcount

    assert solver._shrink()

    assert solver.evalcount - evals == 3
    np.testing.assert_array_equal(solver.simplex[0], before[0])
    np.testing.assert_allclose(solver.simplex[1:], before[0] + 0.2 * (before[1:] - before[0]))
    np.testing.assert_allclose(solver.costs, [_square(v) for v in solver.simplex])
