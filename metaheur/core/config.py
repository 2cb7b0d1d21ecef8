"""Base class for the per-algorithm configuration records."""

from __future__ import annotations

import numbers
from dataclasses import dataclass, fields
from typing import Any, ClassVar, Mapping, Optional

import numpy as np

from ..logging import get_logger

logger = get_logger(__name__)

SAMPLING_MODES = {0: "uniform", 1: "gaussian"}


@dataclass(frozen=True)
class SolverConfig:
    """
    Frozen settings record for a solver.

    Subclasses declare one field per setting with its default. Validation and
    normalization of mode names happen in ``__post_init__``.

    ``aliases`` maps settings keys that are not valid Python identifiers (for
    example ``"lambda"``) onto field names.
    """

    aliases: ClassVar[Mapping[str, str]] = {}

    @classmethod
    def from_settings(cls, settings: Optional[Mapping[str, Any]] = None) -> "SolverConfig":
        """
        Build a config from a loosely keyed mapping.

        Missing keys fall back to the field defaults. Unknown keys are
        ignored and logged at DEBUG level.

        Args:
            settings: Mapping of setting name to value, or None.

        Returns:
            A validated config instance.

        Raises:
            ValueError: If a recognised setting has an invalid value.
        """
        if settings is None:
            return cls()
        names = {f.name for f in fields(cls)}
        kwargs: dict[str, Any] = {}
        for key, value in settings.items():
            name = cls.aliases.get(key, key)
            if name in names:
                kwargs[name] = value
            else:
                logger.debug("%s ignores unknown setting %r", cls.__name__, key)
        return cls(**kwargs)


def normalize_mode(value: Any, choices: Mapping[int, str], setting: str) -> str:
    """
    Map an integer code or a name onto a canonical mode name.

    Codes may be any real number with an integral value, numpy scalars
    included; booleans are rejected.

    Raises:
        ValueError: If ``value`` is neither a known code nor a known name.
    """
    if isinstance(value, str):
        name = value.lower()
        if name in choices.values():
            return name
    elif isinstance(value, numbers.Real) and not isinstance(value, (bool, np.bool_)):
        if float(value).is_integer() and int(value) in choices:
            return choices[int(value)]
    raise ValueError(
        f"Unsupported {setting} {value!r}. Supported values: "
        f"{sorted(choices.values())} or codes {sorted(choices)}"
    )


def check_probability(value: float, setting: str) -> None:
    """Raise ValueError unless ``0 <= value <= 1``."""
    if not 0.0 <= value <= 1.0:
        raise ValueError(f"{setting} must lie in [0, 1], got {value}")


def check_positive(value: float, setting: str) -> None:
    """Raise ValueError unless ``value > 0``."""
    if not value > 0:
        raise ValueError(f"{setting} must be positive, got {value}")


__all__ = [
    "SAMPLING_MODES",
    "SolverConfig",
    "normalize_mode",
    "check_probability",
    "check_positive",
]
