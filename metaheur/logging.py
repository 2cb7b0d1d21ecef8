"""Logging for metaheur.

Module loggers live under the ``metaheur`` namespace and carry no handlers of
their own; records propagate to the package logger, which owns the single
stderr handler and does not propagate to the root logger. Retuning the
package logger therefore retunes every solver at once.
"""

from __future__ import annotations

import logging
import sys
from typing import IO, Optional, Union

PACKAGE = "metaheur"
DEFAULT_FORMAT = "[%(levelname)s] %(name)s: %(message)s"

Level = Union[int, str]


def _package_logger() -> logging.Logger:
    logger = logging.getLogger(PACKAGE)
    if not logger.handlers:
        logger.addHandler(_stream_handler(sys.stderr, DEFAULT_FORMAT))
        logger.setLevel(logging.WARNING)
        logger.propagate = False
    return logger


def _stream_handler(stream: IO[str], format_string: str) -> logging.Handler:
    handler = logging.StreamHandler(stream)
    handler.setFormatter(logging.Formatter(format_string))
    return handler


def get_logger(name: Optional[str] = None) -> logging.Logger:
    """Logger for ``name`` (usually ``__name__``) inside the package namespace.

    Names outside the namespace are prefixed with ``metaheur.``; None returns
    the package logger itself.

    Example:
        >>> logger = get_logger(__name__)
        >>> logger.info("DIRECT iteration %d", 3)
    """
    package = _package_logger()
    if name is None or name == PACKAGE:
        return package
    if not name.startswith(PACKAGE + "."):
        name = f"{PACKAGE}.{name}"
    return logging.getLogger(name)


def set_log_level(level: Level) -> None:
    """Set the level of the package logger (``logging.INFO``, ``"DEBUG"``, ...)."""
    _package_logger().setLevel(level.upper() if isinstance(level, str) else level)


def configure_logging(
    level: Level = logging.WARNING,
    format_string: Optional[str] = None,
    stream: Optional[IO[str]] = None,
) -> None:
    """Replace the package handler and set the level.

    Args:
        level: Logging level (default: WARNING).
        format_string: Record format; defaults to ``[LEVEL] name: message``.
        stream: Output stream (default: sys.stderr).
    """
    package = _package_logger()
    for handler in list(package.handlers):
        package.removeHandler(handler)
    if stream is None:
        stream = sys.stderr
    package.addHandler(_stream_handler(stream, format_string or DEFAULT_FORMAT))
    set_log_level(level)


__all__ = ["get_logger", "set_log_level", "configure_logging"]
