"""Pytest configuration and shared fixtures for metaheur tests.

This module provides:
- Deterministic RNG fixtures for numpy and torch
- Small benchmark problems shared by the solver tests
"""

import os

import numpy as np
import pytest
import torch

from metaheur import Problem


def sphere(x: np.ndarray) -> float:
    return float(np.sum(x**2))


class RecordingObjective:
    """Objective wrapper that keeps a copy of every evaluated point and cost.

    From call number ``nan_at`` on, ``bad_value`` is returned instead of the cost.
    """

    def __init__(self, fun, nan_at=None, bad_value=float("nan")):
        self.fun = fun
        self.nan_at = nan_at
        self.bad_value = bad_value
        self.points = []
        self.values = []

    def __call__(self, x: np.ndarray) -> float:
        self.points.append(np.array(x, copy=True))
        if self.nan_at is not None and len(self.points) >= self.nan_at:
            value = self.bad_value
        else:
            value = self.fun(x)
        self.values.append(value)
        return value

    @property
    def ncalls(self) -> int:
        return len(self.points)


@pytest.fixture(scope="function")
def rng() -> np.random.Generator:
    """Provide a deterministic numpy RNG for tests.

    Uses seed from TEST_RNG_SEED environment variable (default: 0).
    This ensures tests are reproducible while allowing override for debugging.

    Returns:
        A seeded numpy.random.Generator instance.
    """
    seed = int(os.environ.get("TEST_RNG_SEED", "0"))
    return np.random.default_rng(seed)


@pytest.fixture(scope="function", autouse=True)
def set_random_seeds() -> None:
    """Auto-use fixture to set global random seeds for reproducibility.

    Solvers never touch the global generators; this guards test helpers that do.
    """
    seed = int(os.environ.get("TEST_RNG_SEED", "0"))
    np.random.seed(seed)
    torch.manual_seed(seed)


@pytest.fixture
def sphere_problem() -> Problem:
    """Two-dimensional sphere on [-5, 5]^2."""
    return Problem(sphere, lb=[-5.0, -5.0], ub=[5.0, 5.0])


@pytest.fixture
def mixed_problem() -> Problem:
    """Two real variables and one integer variable with optimum (0, 0, 3)."""

    def fun(x: np.ndarray) -> float:
        return float(x[0] ** 2 + x[1] ** 2 + (x[2] - 3.0) ** 2)

    return Problem(
        fun,
        lb=[-5.0, -5.0, 0.0],
        ub=[5.0, 5.0, 10.0],
        integer=[False, False, True],
    )


@pytest.fixture
def recorder():
    """Factory for :class:`RecordingObjective` wrappers."""
    return RecordingObjective
