"""Feasibility and geometry checks for candidate vectors and search bases."""

from __future__ import annotations

import numpy as np


def is_within_bounds(
    x: np.ndarray,
    lb: np.ndarray,
    ub: np.ndarray,
) -> bool:
    """
    Return True if every component of ``x`` lies in ``[lb, ub]``.

    Parameters
    ----------
    x:
        Candidate vector of shape (n,).
    lb, ub:
        Lower and upper bounds of shape (n,).
    """
    x = np.asarray(x, dtype=float)
    return bool(np.all(x >= lb) and np.all(x <= ub))


def assert_within_bounds(
    x: np.ndarray,
    lb: np.ndarray,
    ub: np.ndarray,
) -> None:
    """
    Assert that ``x`` satisfies the box constraints.

    Raises
    ------
    ValueError
        If any component is outside its bounds or is NaN.
    """
    x = np.asarray(x, dtype=float)
    if not is_within_bounds(x, lb, ub):
        bad = np.flatnonzero(~((x >= lb) & (x <= ub)))
        raise ValueError(
            f"Point violates box constraints at indices {bad.tolist()}: "
            f"x={x[bad].tolist()}, lb={np.asarray(lb)[bad].tolist()}, "
            f"ub={np.asarray(ub)[bad].tolist()}"
        )


def is_integral(x: np.ndarray, mask: np.ndarray) -> bool:
    """Return True if ``x`` holds integer values wherever ``mask`` is set."""
    x = np.asarray(x, dtype=float)
    values = x[np.asarray(mask, dtype=bool)]
    return bool(np.all(values == np.round(values)))


def assert_integral(x: np.ndarray, mask: np.ndarray) -> None:
    """
    Assert that the integer-flagged components of ``x`` are whole numbers.

    Raises
    ------
    ValueError
        If a flagged component has a fractional part.
    """
    if not is_integral(x, mask):
        x = np.asarray(x, dtype=float)
        mask = np.asarray(mask, dtype=bool)
        bad = np.flatnonzero(mask & (x != np.round(x)))
        raise ValueError(
            f"Integer variables hold fractional values at indices {bad.tolist()}: "
            f"{x[bad].tolist()}"
        )


def assert_orthogonal(basis: np.ndarray, atol: float = 1e-8) -> None:
    """
    Assert that the rows of ``basis`` are non-zero and pairwise orthogonal.

    Row lengths are ignored: each row is normalized before the Gram matrix
    ``B B^T`` is compared with the identity.

    Parameters
    ----------
    basis:
        Square matrix of shape (n, n); each row is one direction.
    atol:
        Absolute tolerance on the entries of ``B B^T - I`` after row
        normalization.

    Raises
    ------
    ValueError
        If ``basis`` is not square, has a zero row, or two rows are not
        orthogonal within the tolerance.
    """
    basis = np.asarray(basis, dtype=float)
    if basis.ndim != 2 or basis.shape[0] != basis.shape[1]:
        raise ValueError(f"basis must be a square matrix, got shape {basis.shape}")
    norms = np.linalg.norm(basis, axis=1)
    if np.any(norms == 0.0):
        raise ValueError("basis contains a zero row.")
    unit = basis / norms[:, np.newaxis]
    gram = unit @ unit.T
    err = float(np.max(np.abs(gram - np.eye(basis.shape[0]))))
    if err > atol:
        raise ValueError(
            f"Rows are not orthogonal within tolerance {atol}; "
            f"max |B B^T - I| = {err:.3e}"
        )
