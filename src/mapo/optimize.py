from __future__ import annotations

import logging
from typing import Any, Mapping

from mapo.engine.algorithm.components.hooks import RunCallbacks
from mapo.engine.algorithm.components.results import OptimizationResult
from mapo.engine.algorithm.registry import AlgorithmSpec, build_algorithm_registry, resolve_algorithm
from mapo.foundation.eval.manager import ParallelEvaluationManager
from mapo.foundation.problem.types import ProblemProtocol
from mapo.foundation.registry import Registry


def optimize(
    problem: ProblemProtocol,
    evaluator: Any,
    algorithm: str = "nsgaii",
    config: Any = None,
    *,
    registry: Registry[AlgorithmSpec] | None = None,
    callbacks: RunCallbacks | None = None,
    logger: logging.Logger | None = None,
    evaluation_manager: ParallelEvaluationManager | None = None,
) -> OptimizationResult:
    """
    Run a single optimization for the provided problem/evaluator pair.

    Args:
        problem: Bounds and objective / constraint counts (see ``ProblemProtocol``).
        evaluator: Object with ``evaluate(x)`` returning objectives (and optionally constraints).
        algorithm: Registered algorithm name or alias ("nsgaii", "nsga2", "pso", ...).
        config: The strategy's config object, a parameter mapping, or None for defaults.
        registry: Algorithm registry; a fresh built-in registry when omitted.
        callbacks: Optional per-iteration / end-of-run hooks.
        logger: Optional logger for run messages.
        evaluation_manager: Optional shared batch evaluator (e.g. to reuse a cache).
    """
    registry = registry if registry is not None else build_algorithm_registry()
    spec = resolve_algorithm(algorithm, registry)
    if isinstance(config, Mapping):
        config = dict(config)
    strategy = spec.create(config, evaluation_manager=evaluation_manager, logger=logger)
    return strategy.run(problem, evaluator, callbacks=callbacks)


__all__ = ["optimize"]
