"""Process-wide default for the solver feasibility checks.

Every solver has a ``debug`` flag. When it is set, ``Solver.evaluate`` checks
each point against the box and the integrality mask before calling the
objective, and Rosenbrock checks its basis after each rotation. A solver built
with ``debug=None`` follows the default kept here, which starts from the
``METAHEUR_DEBUG`` environment variable.
"""

from __future__ import annotations

import os
from contextlib import contextmanager
from typing import Iterator, Optional

_TRUTHY = frozenset({"1", "true", "yes", "on"})


def _flag_from_env(var: str = "METAHEUR_DEBUG") -> bool:
    return os.environ.get(var, "").strip().lower() in _TRUTHY


_enabled: bool = _flag_from_env()


def is_debug_enabled() -> bool:
    """Current default for solvers without an explicit ``debug`` flag."""
    return _enabled


def set_debug_enabled(enabled: bool) -> bool:
    """
    Change the default and return the previous one.

    Parameters
    ----------
    enabled:
        New default for solvers built with ``debug=None``.
    """
    global _enabled
    previous, _enabled = _enabled, bool(enabled)
    return previous


def resolve_debug(flag: Optional[bool]) -> bool:
    """An explicit per-solver flag wins over the default."""
    return is_debug_enabled() if flag is None else bool(flag)


@contextmanager
def debug_context(enabled: bool = True) -> Iterator[None]:
    """
    Temporarily change the default inside a ``with`` block.

    Example
    -------
    >>> with debug_context(True):
    ...     result = create_solver("pso", problem, 500).solve()
    """
    previous = set_debug_enabled(enabled)
    try:
        yield
    finally:
        set_debug_enabled(previous)
