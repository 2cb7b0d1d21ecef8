"""Diagnostics and debugging utilities for metaheur."""

from .core import (
    assert_integral,
    assert_orthogonal,
    assert_within_bounds,
    is_integral,
    is_within_bounds,
)
from .debug_mode import (
    debug_context,
    is_debug_enabled,
    resolve_debug,
    set_debug_enabled,
)

__all__ = [
    "is_within_bounds",
    "assert_within_bounds",
    "is_integral",
    "assert_integral",
    "assert_orthogonal",
    "is_debug_enabled",
    "resolve_debug",
    "set_debug_enabled",
    "debug_context",
]
