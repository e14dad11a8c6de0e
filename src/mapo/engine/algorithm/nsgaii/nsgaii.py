"""
NSGA-II evolutionary algorithm.

Elitist generational loop: binary-tournament mating, SBX + polynomial
mutation, non-dominated sorting with per-front crowding distance and
``(rank, -crowding)`` environmental selection over parents + offspring.
"""

from __future__ import annotations

import logging
from typing import Any

import numpy as np

from mapo.engine.algorithm.components.hooks import RunCallbacks
from mapo.engine.algorithm.components.individual import Individual
from mapo.engine.algorithm.components.lifecycle import AlgorithmLifecycle
from mapo.engine.algorithm.components.population import Population
from mapo.engine.algorithm.components.results import OptimizationResult
from mapo.engine.algorithm.config.nsgaii import NSGAIIConfigData
from mapo.foundation.eval.manager import ParallelEvaluationManager
from mapo.foundation.problem.types import ProblemProtocol, resolve_bounds, validate_problem
from .helpers import generation_record, make_offspring


def _logger() -> logging.Logger:
    return logging.getLogger(__name__)


class NSGAII:
    """
    Non-dominated Sorting Genetic Algorithm II.

    Parameters
    ----------
    config : NSGAIIConfigData, optional
        Strategy settings; defaults when omitted.
    evaluation_manager : ParallelEvaluationManager, optional
        Batch evaluator; built from ``config.parallel`` when omitted.
    logger : logging.Logger, optional
        Destination for run messages.
    """

    name = "NSGA-II"

    def __init__(
        self,
        config: NSGAIIConfigData | None = None,
        *,
        evaluation_manager: ParallelEvaluationManager | None = None,
        logger: logging.Logger | None = None,
    ) -> None:
        self.cfg = config or NSGAIIConfigData()
        self.log = logger or _logger()
        self.manager = evaluation_manager or ParallelEvaluationManager(self.cfg.parallel, logger=self.log)
        self.lifecycle = AlgorithmLifecycle(
            self.name,
            self.cfg.termination(),
            logger=self.log,
            verbose=self.cfg.verbose,
            log_every=self.cfg.log_every,
        )
        self.population: Population | None = None
        self.all_evaluated: list[Individual] = []

    def request_stop(self) -> None:
        self.lifecycle.request_stop()

    @property
    def status(self) -> dict[str, Any]:
        return self.lifecycle.status

    def run(
        self,
        problem: ProblemProtocol,
        evaluator: Any,
        *,
        callbacks: RunCallbacks | None = None,
    ) -> OptimizationResult:
        """Run NSGA-II until ``max_generations`` or an earlier stop condition."""
        validate_problem(problem)
        cfg = self.cfg
        lc = self.lifecycle
        lc.callbacks = callbacks or RunCallbacks()
        lc.begin(problem)
        if problem.n_obj == 1:
            self.log.warning("NSGA-II is designed for multi-objective problems; running with a single objective.")

        rng = np.random.default_rng(cfg.seed)
        lower, upper = resolve_bounds(problem)
        self.all_evaluated = []

        population = Population.random(cfg.pop_size, lower, upper, rng, name="population")
        self._evaluate(population, evaluator, problem)
        population.rank_and_crowd()
        lc.update_best_from_population(population)
        self.population = population

        generation = 0
        while generation < cfg.max_generations and not lc.should_stop():
            offspring = make_offspring(
                population,
                cfg.pop_size,
                lower,
                upper,
                rng,
                crossover_rate=cfg.crossover_rate,
                mutation_rate=cfg.mutation_rate,
                crossover_eta=cfg.crossover_eta,
                mutation_eta=cfg.mutation_eta,
            )
            self._evaluate(offspring, evaluator, problem)

            merged = population.merge(offspring)
            merged.rank_and_crowd()
            population = merged.environmental_selection(cfg.pop_size)
            self.population = population

            generation += 1
            lc.update_best_from_population(population)
            lc.record_iteration(generation, generation_record(population, problem.n_obj, lc.evaluations))

        front = population.get_pareto_front()
        return lc.finalize(
            population,
            front,
            all_evaluated=list(self.all_evaluated),
            extra={
                "generations": generation,
                "total_evaluated_solutions": len(self.all_evaluated),
                "evaluation_statistics": self.manager.get_statistics(),
            },
        )

    def _evaluate(self, population: Population, evaluator: Any, problem: ProblemProtocol) -> None:
        pending = [ind for ind in population if not ind.evaluated]
        results = self.manager.evaluate_individuals(pending, evaluator, n_obj=problem.n_obj, n_constr=problem.n_constr)
        self.lifecycle.add_evaluations(len(results))
        self.all_evaluated.extend(ind.clone() for ind in pending)


__all__ = ["NSGAII"]
