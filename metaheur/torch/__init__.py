"""PyTorch integration for metaheur.

Objectives written against torch tensors can be handed to any solver through
:class:`TorchObjective`.

Example:
    >>> import torch
    >>> from metaheur import Problem, create_solver
    >>> from metaheur.torch import TorchObjective
    >>>
    >>> objective = TorchObjective(lambda p: torch.sum((p - 1.0) ** 2))
    >>> problem = Problem(objective, lb=[-5.0, -5.0], ub=[5.0, 5.0])
    >>> result = create_solver("pso", problem, max_evals=500, seed=3).solve()
"""

from metaheur.torch.objective import TorchObjective
from metaheur.torch.utils import as_float_tensor, as_scalar, infer_device

__all__ = [
    "TorchObjective",
    "as_float_tensor",
    "as_scalar",
    "infer_device",
]
