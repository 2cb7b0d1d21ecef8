"""Derivative-free solvers for box-constrained mixed-integer problems."""

from .direct import Box, Direct, DirectConfig
from .es import ESConfig, EvolutionStrategy
from .factory import SOLVERS, create_solver
from .ga import GAConfig, GeneticAlgorithm, bits_required, bits_to_int, int_to_bits, rank_fitness
from .hillclimber import HillClimber, HillClimberConfig
from .nelder_mead import NelderMead, NelderMeadConfig
from .pso import ParticleSwarm, PSOConfig, von_neumann_neighbours
from .rosenbrock import Rosenbrock, RosenbrockConfig, gram_schmidt

__all__ = [
    "Box",
    "Direct",
    "DirectConfig",
    "ESConfig",
    "EvolutionStrategy",
    "GAConfig",
    "GeneticAlgorithm",
    "bits_required",
    "bits_to_int",
    "int_to_bits",
    "rank_fitness",
    "HillClimber",
    "HillClimberConfig",
    "NelderMead",
    "NelderMeadConfig",
    "ParticleSwarm",
    "PSOConfig",
    "von_neumann_neighbours",
    "Rosenbrock",
    "RosenbrockConfig",
    "gram_schmidt",
    "SOLVERS",
    "create_solver",
]
