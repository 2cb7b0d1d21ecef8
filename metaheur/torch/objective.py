"""Adapter turning a torch function into a numpy objective."""

from __future__ import annotations

from typing import Callable, Optional

import numpy as np
import torch

from ..logging import get_logger
from .utils import as_float_tensor, as_scalar, infer_device

logger = get_logger(__name__)


class TorchObjective:
    """
    Wrap ``fn(params: torch.Tensor) -> torch.Tensor`` as a solver objective.

    Each call converts the candidate vector into a 1-D tensor on ``device``,
    evaluates ``fn`` under ``torch.no_grad()`` and returns the scalar result
    as a Python float. Non-finite results pass through unchanged.

    Args:
        fn: Function of a 1-D tensor returning a scalar (0-dim or 1-element)
            tensor or a number.
        device: Device to evaluate on. Defaults to the CPU.
        dtype: Floating-point dtype of the parameter tensor. Defaults to
            torch.float64.

    Attributes:
        ncalls: Number of evaluations so far.

    Example:
        >>> objective = TorchObjective(lambda p: (p ** 2).sum())
        >>> objective(np.array([1.0, 2.0]))
        5.0
    """

    def __init__(
        self,
        fn: Callable[[torch.Tensor], torch.Tensor],
        device: Optional[torch.device] = None,
        dtype: torch.dtype = torch.float64,
    ) -> None:
        if not callable(fn):
            raise ValueError("fn must be callable.")
        if not dtype.is_floating_point:
            raise ValueError(f"dtype must be a floating-point dtype, got {dtype}")
        self.fn = fn
        self.device = infer_device(device)
        self.dtype = dtype
        self.ncalls = 0
        logger.debug("TorchObjective on %s with %s", self.device, self.dtype)

    def __call__(self, x: np.ndarray) -> float:
        params = as_float_tensor(x, device=self.device, dtype=self.dtype)
        with torch.no_grad():
            value = self.fn(params)
        self.ncalls += 1
        return as_scalar(value)


__all__ = ["TorchObjective"]
