"""
Building blocks shared by the search strategies.
"""

from .archive import CrowdingDistanceArchive
from .hooks import RunCallbacks, invoke_safely
from .individual import Individual
from .lifecycle import AlgorithmLifecycle
from .population import Population, best_single_objective, crowding_distance, dominance_matrix, fast_non_dominated_sort
from .protocol import Optimizer, RunStatus
from .results import OptimizationResult
from .termination import StopReason, TerminationConfig

__all__ = [
    "AlgorithmLifecycle",
    "CrowdingDistanceArchive",
    "Individual",
    "OptimizationResult",
    "Optimizer",
    "Population",
    "RunCallbacks",
    "RunStatus",
    "StopReason",
    "TerminationConfig",
    "best_single_objective",
    "crowding_distance",
    "dominance_matrix",
    "fast_non_dominated_sort",
    "invoke_safely",
]
