"""
Example: Fitting a small torch model without gradients

The two weights of a saturating model ``a * (1 - exp(-b * t))`` are fitted
to noisy data by minimizing the mean squared error with PSO. The loss is
written with torch and wrapped in a TorchObjective.
"""

import torch

from metaheur import Problem, create_solver
from metaheur.torch import TorchObjective


def main() -> None:
    torch.manual_seed(0)
    t = torch.linspace(0.0, 5.0, 50, dtype=torch.float64)
    y = 2.5 * (1.0 - torch.exp(-1.3 * t)) + 0.05 * torch.randn(50, dtype=torch.float64)

    def loss(params: torch.Tensor) -> torch.Tensor:
        a, b = params
        return torch.mean((a * (1.0 - torch.exp(-b * t)) - y) ** 2)

    objective = TorchObjective(loss)
    problem = Problem(objective, lb=[0.0, 0.0], ub=[10.0, 5.0])
    result = create_solver("pso", problem, max_evals=1500, seed=1).solve()

    print(f"Status: {result.status.value}")
    print(f"Fitted a = {result.x[0]:.4f}, b = {result.x[1]:.4f} (true 2.5, 1.3)")
    print(f"MSE: {result.fun:.3e} after {objective.ncalls} evaluations")


if __name__ == "__main__":
    main()
