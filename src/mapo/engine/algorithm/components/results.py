"""
Results record assembled once at the end of a run.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

import numpy as np

from .individual import Individual
from .population import Population


@dataclass
class OptimizationResult:
    """
    Structured outcome of one optimization run.

    ``history`` holds one dict per iteration. ``all_evaluated`` is filled by
    strategies that keep every evaluated individual (NSGA-II); ``archive`` by
    strategies with an external archive (PSO).
    """

    problem_name: str
    algorithm_name: str
    evaluations: int
    iterations: int
    elapsed_time: float
    stopped: bool
    stop_reason: str
    final_population: Population
    pareto_front: Population
    best_individual: Individual | None = None
    history: list[dict[str, Any]] = field(default_factory=list)
    all_evaluated: list[Individual] | None = None
    archive: Population | None = None
    extra: dict[str, Any] = field(default_factory=dict)

    @property
    def best_solution(self) -> np.ndarray | None:
        return None if self.best_individual is None else self.best_individual.variables.copy()

    @property
    def best_objectives(self) -> np.ndarray | None:
        return None if self.best_individual is None else self.best_individual.objectives.copy()

    @property
    def best_feasible(self) -> bool:
        return self.best_individual is not None and self.best_individual.is_feasible()

    @property
    def total_evaluated_solutions(self) -> int:
        return 0 if self.all_evaluated is None else len(self.all_evaluated)

    @property
    def X(self) -> np.ndarray:
        """Decision vectors of the Pareto front, shape (n_front, n_var)."""
        return self.pareto_front.variables_matrix()

    @property
    def F(self) -> np.ndarray:
        """Objectives of the Pareto front, shape (n_front, n_obj)."""
        return self.pareto_front.objectives_matrix()

    def summary(self) -> dict[str, Any]:
        """Scalar overview suitable for logging or JSON export."""
        return {
            "problem": self.problem_name,
            "algorithm": self.algorithm_name,
            "evaluations": self.evaluations,
            "iterations": self.iterations,
            "elapsed_time": self.elapsed_time,
            "stopped": self.stopped,
            "stop_reason": self.stop_reason,
            "final_population_size": len(self.final_population),
            "pareto_front_size": len(self.pareto_front),
            "best_objectives": None if self.best_objectives is None else self.best_objectives.tolist(),
            "best_feasible": self.best_feasible,
            "total_evaluated_solutions": self.total_evaluated_solutions,
        }


__all__ = ["OptimizationResult"]
