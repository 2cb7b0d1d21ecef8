"""Tensor conversion helpers for torch-backed objectives."""

from __future__ import annotations

from typing import Optional

import numpy as np
import torch


def infer_device(device: Optional[torch.device | str]) -> torch.device:
    """
    Infer the PyTorch device to use.

    Parameters
    ----------
    device:
        Optional device or device string. If None, the CPU is used.

    Returns
    -------
    torch.device
        The device to evaluate on.
    """
    if device is None:
        return torch.device("cpu")
    return torch.device(device)


def as_float_tensor(
    x: np.ndarray,
    device: Optional[torch.device] = None,
    dtype: torch.dtype = torch.float64,
) -> torch.Tensor:
    """
    Convert a numpy vector into a fresh floating-point tensor.

    Parameters
    ----------
    x:
        Array of shape (n,).
    device:
        Optional device. If None, uses infer_device().
    dtype:
        Floating-point dtype. Defaults to torch.float64.

    Raises
    ------
    ValueError
        If ``dtype`` is not a floating-point dtype or ``x`` is not 1-D.
    """
    if not dtype.is_floating_point:
        raise ValueError(f"dtype must be a floating-point dtype, got {dtype}")
    x = np.asarray(x, dtype=float)
    if x.ndim != 1:
        raise ValueError(f"x must be 1D, got shape {x.shape}")
    return torch.tensor(x, dtype=dtype, device=infer_device(device))


def as_scalar(value: torch.Tensor | float) -> float:
    """
    Convert a single-element tensor (or a number) into a Python float.

    Raises
    ------
    ValueError
        If ``value`` holds more than one element.
    """
    if not torch.is_tensor(value):
        return float(value)
    if value.numel() != 1:
        raise ValueError(f"objective must return a scalar, got shape {tuple(value.shape)}")
    return float(value.detach().cpu().item())


__all__ = ["infer_device", "as_float_tensor", "as_scalar"]
