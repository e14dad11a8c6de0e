"""
Stateless real-coded variation and selection operators.

Every operator takes an explicit ``numpy.random.Generator`` so runs are
reproducible from a single seed.
"""

from .crossover import SBX_EPS, sbx_crossover, single_point_crossover, uniform_crossover
from .mutation import gaussian_mutation, polynomial_mutation, uniform_mutation
from .selection import binary_tournament, roulette_wheel_selection, tournament_selection

__all__ = [
    "SBX_EPS",
    "sbx_crossover",
    "uniform_crossover",
    "single_point_crossover",
    "polynomial_mutation",
    "uniform_mutation",
    "gaussian_mutation",
    "binary_tournament",
    "tournament_selection",
    "roulette_wheel_selection",
]
