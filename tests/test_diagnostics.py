"""Tests for diagnostics helpers and debug mode."""

import numpy as np
import pytest

from metaheur import Problem, Solver, SolverConfig
from metaheur.diagnostics import (
    assert_integral,
    assert_orthogonal,
    assert_within_bounds,
    debug_context,
    is_debug_enabled,
    is_integral,
    is_within_bounds,
    resolve_debug,
    set_debug_enabled,
)


def test_within_bounds() -> None:
    """Bound checks flag points outside the box and NaN entries."""
    lb = np.array([0.0, -1.0])
    ub = np.array([1.0, 1.0])
    assert is_within_bounds(np.array([0.0, 1.0]), lb, ub)
    assert not is_within_bounds(np.array([1.5, 0.0]), lb, ub)
    assert not is_within_bounds(np.array([np.nan, 0.0]), lb, ub)

    assert_within_bounds(np.array([0.5, 0.0]), lb, ub)
    with pytest.raises(ValueError, match="indices \\[1\\]"):
        assert_within_bounds(np.array([0.5, -2.0]), lb, ub)


def test_integral() -> None:
    """Integrality checks only look at masked variables."""
    mask = np.array([True, False])
    assert is_integral(np.array([3.0, 0.25]), mask)
    assert not is_integral(np.array([3.5, 0.25]), mask)
    with pytest.raises(ValueError, match="fractional"):
        assert_integral(np.array([3.5, 0.25]), mask)


def test_assert_orthogonal_accepts_scaled_rotation() -> None:
    """Orthogonality ignores the length of each row."""
    theta = 0.3
    rotation = np.array([[np.cos(theta), np.sin(theta)], [-np.sin(theta), np.cos(theta)]])
    assert_orthogonal(0.125 * rotation)
    assert_orthogonal(np.diag([2.0, 0.5, 1.0]))


def test_assert_orthogonal_rejects_bad_bases() -> None:
    """Skewed, rank-deficient and non-square bases are rejected."""
    with pytest.raises(ValueError, match="not orthogonal"):
        assert_orthogonal(np.array([[1.0, 0.0], [1.0, 1.0]]))
    with pytest.raises(ValueError, match="zero row"):
        assert_orthogonal(np.array([[1.0, 0.0], [0.0, 0.0]]))
    with pytest.raises(ValueError, match="square"):
        assert_orthogonal(np.ones((2, 3)))


def test_debug_mode_toggle_and_context() -> None:
    """Test debug mode toggling and context manager."""
    original = is_debug_enabled()

    try:
        set_debug_enabled(False)
        assert not is_debug_enabled()

        with debug_context(True):
            assert is_debug_enabled()

        assert not is_debug_enabled()

        set_debug_enabled(True)
        with debug_context(False):
            assert not is_debug_enabled()
        assert is_debug_enabled()
    finally:
        set_debug_enabled(original)


def test_debug_context_restores_after_exception() -> None:
    """The previous default is restored when the block raises."""
    original = is_debug_enabled()
    try:
        set_debug_enabled(False)
        with pytest.raises(RuntimeError):
            with debug_context(True):
                raise RuntimeError("boom")
        assert not is_debug_enabled()
    finally:
        set_debug_enabled(original)


class _OutOfBounds(Solver):
    """Deliberately broken solver that evaluates outside the box."""

    name = "out_of_bounds"
    config_class = SolverConfig

    def _run(self) -> None:
        self.evaluate(self.ub + 1.0)


def test_default_follows_debug_context() -> None:
    """Solvers without an explicit flag follow the package default at evaluation time."""
    problem = Problem(lambda x: float(x.sum()), lb=[0.0], ub=[1.0])
    solver = _OutOfBounds(problem, 5)

    with debug_context(True):
        assert solver.checks_enabled
        with pytest.raises(ValueError, match="box constraints"):
            solver.solve()

    with debug_context(False):
        result = _OutOfBounds(problem, 5).solve()
    assert result.nfev == 1


def test_explicit_flag_overrides_default() -> None:
    """An explicit debug flag wins over the package default in both directions."""
    problem = Problem(lambda x: float(x.sum()), lb=[0.0], ub=[1.0])

    with debug_context(False):
        with pytest.raises(ValueError, match="box constraints"):
            _OutOfBounds(problem, 5, debug=True).solve()

    with debug_context(True):
        result = _OutOfBounds(problem, 5, debug=False).solve()
    assert result.nfev == 1


def test_resolve_debug_and_previous_value() -> None:
    """set_debug_enabled hands back the previous default."""
    original = is_debug_enabled()
    try:
        set_debug_enabled(True)
        assert set_debug_enabled(False) is True
        assert resolve_debug(None) is False
        assert resolve_debug(True) is True
        assert resolve_debug(0) is False
    finally:
        set_debug_enabled(original)


@pytest.mark.parametrize(
    "value, expected",
    [("1", True), ("TRUE", True), (" yes ", True), ("on", True), ("0", False), ("", False)],
)
def test_environment_variable_parsing(monkeypatch, value, expected) -> None:
    """METAHEUR_DEBUG accepts the usual truthy spellings."""
    from metaheur.diagnostics.debug_mode import _flag_from_env

    monkeypatch.setenv("METAHEUR_DEBUG", value)
    assert _flag_from_env() is expected
