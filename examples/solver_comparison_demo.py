"""
Example: Comparing the metaheur solvers

Runs every solver several times on two benchmark problems and prints the
best, mean and median cost per solver:

1. Rastrigin on [-5.12, 5.12]^4, a multimodal continuous landscape.
2. A mixed-integer variant where two of the variables are integers.
"""

import numpy as np

from metaheur import SOLVERS, Problem, configure_logging, repeat_solve


def rastrigin(x: np.ndarray) -> float:
    return float(10.0 * x.size + np.sum(x**2 - 10.0 * np.cos(2.0 * np.pi * x)))


def mixed_quadratic(x: np.ndarray) -> float:
    # optimum at (0.5, -1.5, 3, -2)
    return float((x[0] - 0.5) ** 2 + (x[1] + 1.5) ** 2 + (x[2] - 3) ** 2 + (x[3] + 2) ** 2)


def compare(title: str, problem: Problem, max_evals: int, seeds: range) -> None:
    print("=" * 60)
    print(title)
    print("=" * 60)
    print(f"{'solver':<14}{'best':>12}{'mean':>12}{'median':>12}")
    for name in sorted(SOLVERS):
        summary = repeat_solve(name, problem, max_evals, seeds)
        print(f"{name:<14}{summary.best_cost:>12.4g}{summary.mean:>12.4g}{summary.median:>12.4g}")
    print()


if __name__ == "__main__":
    configure_logging()

    compare(
        "Example 1: Rastrigin, n=4",
        Problem(rastrigin, lb=[-5.12] * 4, ub=[5.12] * 4),
        max_evals=2000,
        seeds=range(5),
    )
    compare(
        "Example 2: Mixed-integer quadratic, n=4",
        Problem(
            mixed_quadratic,
            lb=[-4.0, -4.0, -5.0, -5.0],
            ub=[4.0, 4.0, 5.0, 5.0],
            integer=[False, False, True, True],
        ),
        max_evals=1000,
        seeds=range(5),
    )
