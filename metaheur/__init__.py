"""metaheur - derivative-free metaheuristics for box-constrained mixed-integer problems."""

__version__ = "0.1.0"

# Core abstractions
from .core import Array, Objective, Problem, SolveResult, Solver, SolverConfig, Status

# Diagnostics
from .diagnostics import (
    assert_integral,
    assert_orthogonal,
    assert_within_bounds,
    debug_context,
    is_debug_enabled,
    is_integral,
    is_within_bounds,
    set_debug_enabled,
)

# Experiments
from .experiments import RepeatResult, repeat_solve

# Logging
from .logging import configure_logging, get_logger, set_log_level

# Solvers
from .solvers import (
    SOLVERS,
    Direct,
    DirectConfig,
    ESConfig,
    EvolutionStrategy,
    GAConfig,
    GeneticAlgorithm,
    HillClimber,
    HillClimberConfig,
    NelderMead,
    NelderMeadConfig,
    ParticleSwarm,
    PSOConfig,
    Rosenbrock,
    RosenbrockConfig,
    create_solver,
)

__all__ = [
    "__version__",
    # Core
    "Array",
    "Objective",
    "Problem",
    "SolveResult",
    "Solver",
    "SolverConfig",
    "Status",
    # Diagnostics
    "assert_integral",
    "assert_orthogonal",
    "assert_within_bounds",
    "debug_context",
    "is_debug_enabled",
    "is_integral",
    "is_within_bounds",
    "set_debug_enabled",
    # Experiments
    "RepeatResult",
    "repeat_solve",
    # Logging
    "configure_logging",
    "get_logger",
    "set_log_level",
    # Solvers
    "SOLVERS",
    "Direct",
    "DirectConfig",
    "ESConfig",
    "EvolutionStrategy",
    "GAConfig",
    "GeneticAlgorithm",
    "HillClimber",
    "HillClimberConfig",
    "NelderMead",
    "NelderMeadConfig",
    "ParticleSwarm",
    "PSOConfig",
    "Rosenbrock",
    "RosenbrockConfig",
    "create_solver",
]
