"""
MAPO: multi-objective evolutionary optimization engine.

Black-box evaluators are driven by NSGA-II or PSO through a batch evaluation
coordinator with optional worker pools and result caching.
"""

from .engine.algorithm.components import (
    AlgorithmLifecycle,
    CrowdingDistanceArchive,
    Individual,
    OptimizationResult,
    Optimizer,
    Population,
    RunCallbacks,
    RunStatus,
    StopReason,
    TerminationConfig,
)
from .engine.algorithm.config import NSGAIIConfig, NSGAIIConfigData, PSOConfig, PSOConfigData
from .engine.algorithm.nsgaii import NSGAII
from .engine.algorithm.pso import PSO
from .engine.algorithm.registry import AlgorithmSpec, build_algorithm_registry
from .engine.config.loader import load_run_config
from .foundation.eval import FAILURE_PENALTY, EvaluationResult, EvaluatorProtocol
from .foundation.eval.backends import ParallelConfig
from .foundation.eval.manager import ParallelEvaluationManager
from .foundation.exceptions import MAPOError
from .foundation.logging import configure_mapo_logging
from .foundation.problem import Problem, ProblemProtocol
from .foundation.registry import Registry
from .optimize import optimize

__version__ = "0.3.0"

__all__ = [
    "optimize",
    "AlgorithmLifecycle",
    "AlgorithmSpec",
    "CrowdingDistanceArchive",
    "EvaluationResult",
    "EvaluatorProtocol",
    "FAILURE_PENALTY",
    "Individual",
    "MAPOError",
    "NSGAII",
    "NSGAIIConfig",
    "NSGAIIConfigData",
    "OptimizationResult",
    "Optimizer",
    "PSO",
    "PSOConfig",
    "PSOConfigData",
    "ParallelConfig",
    "ParallelEvaluationManager",
    "Population",
    "Problem",
    "ProblemProtocol",
    "Registry",
    "RunCallbacks",
    "RunStatus",
    "StopReason",
    "TerminationConfig",
    "build_algorithm_registry",
    "configure_mapo_logging",
    "load_run_config",
]
