"""
Particle Swarm Optimization.

Single-objective runs follow the best personal best. Multi-objective runs keep
a bounded external archive of non-dominated particles and draw the leader for
each iteration uniformly from it.
"""

from __future__ import annotations

import logging
from typing import Any

import numpy as np

from mapo.engine.algorithm.components.archive import CrowdingDistanceArchive
from mapo.engine.algorithm.components.hooks import RunCallbacks
from mapo.engine.algorithm.components.individual import Individual
from mapo.engine.algorithm.components.lifecycle import AlgorithmLifecycle
from mapo.engine.algorithm.components.population import Population
from mapo.engine.algorithm.components.results import OptimizationResult
from mapo.engine.algorithm.config.pso import PSOConfigData
from mapo.foundation.eval.manager import ParallelEvaluationManager
from mapo.foundation.problem.types import ProblemProtocol, resolve_bounds, validate_problem
from .helpers import (
    apply_bounds,
    best_single_objective,
    improves,
    iteration_record,
    resolve_v_max,
    update_velocity,
)


def _logger() -> logging.Logger:
    return logging.getLogger(__name__)


class PSO:
    """
    Particle Swarm Optimizer.

    Parameters
    ----------
    config : PSOConfigData, optional
        Strategy settings; defaults when omitted.
    evaluation_manager : ParallelEvaluationManager, optional
        Batch evaluator; built from ``config.parallel`` when omitted.
    logger : logging.Logger, optional
        Destination for run messages.
    """

    name = "PSO"

    def __init__(
        self,
        config: PSOConfigData | None = None,
        *,
        evaluation_manager: ParallelEvaluationManager | None = None,
        logger: logging.Logger | None = None,
    ) -> None:
        self.cfg = config or PSOConfigData()
        self.log = logger or _logger()
        self.manager = evaluation_manager or ParallelEvaluationManager(self.cfg.parallel, logger=self.log)
        self.lifecycle = AlgorithmLifecycle(
            self.name,
            self.cfg.termination(),
            logger=self.log,
            verbose=self.cfg.verbose,
            log_every=self.cfg.log_every,
        )
        self.swarm: Population | None = None
        self.velocities: np.ndarray | None = None
        self.personal_best: list[Individual] = []
        self.global_best: Individual | None = None
        self.archive: CrowdingDistanceArchive | None = None

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
        """Run PSO until ``max_iterations`` or an earlier stop condition."""
        validate_problem(problem)
        cfg = self.cfg
        lc = self.lifecycle
        lc.callbacks = callbacks or RunCallbacks()
        lc.begin(problem)

        v_max = resolve_v_max(cfg.v_max, self.log)
        if cfg.w < 0:
            self.log.warning("Negative inertia weight w=%.4g may make the swarm diverge.", cfg.w)

        rng = np.random.default_rng(cfg.seed)
        lower, upper = resolve_bounds(problem)
        limit = v_max * (upper - lower)
        n_obj = problem.n_obj

        use_archive = bool(cfg.use_external_archive) or n_obj > 1
        if n_obj > 1 and not cfg.use_external_archive:
            self.log.debug("Multi-objective problem: enabling the external archive.")
        self.archive = CrowdingDistanceArchive(cfg.archive_factor * cfg.swarm_size) if use_archive else None

        self.log.info("Initializing swarm (size: %d, dimensions: %d)", cfg.swarm_size, problem.n_var)
        swarm = Population.random(cfg.swarm_size, lower, upper, rng, name="swarm")
        self.swarm = swarm
        self.velocities = rng.uniform(-limit, limit, size=(cfg.swarm_size, problem.n_var))
        self._evaluate(swarm, evaluator, problem)
        self.personal_best = [ind.clone() for ind in swarm]
        if self.archive is not None:
            self.archive.update(swarm)
        self._update_global_best(rng, n_obj)

        iteration = 0
        while iteration < cfg.max_iterations and not lc.should_stop():
            iteration += 1
            leader = self.global_best
            assert leader is not None
            for i, particle in enumerate(swarm):
                x = particle.variables
                v = update_velocity(
                    self.velocities[i],
                    x,
                    self.personal_best[i].variables,
                    leader.variables,
                    rng,
                    w=cfg.w,
                    c1=cfg.c1,
                    c2=cfg.c2,
                    limit=limit,
                )
                new_x, new_v = apply_bounds(x + v, v, lower, upper)
                self.velocities[i] = new_v
                particle.variables = new_x

            self._evaluate(swarm, evaluator, problem)
            for i, particle in enumerate(swarm):
                if improves(particle, self.personal_best[i]):
                    self.personal_best[i] = particle.clone()
            if self.archive is not None:
                self.archive.update(swarm)
            self._update_global_best(rng, n_obj)

            lc.record_iteration(
                iteration,
                iteration_record(
                    swarm,
                    self.global_best,
                    lc.evaluations,
                    None if self.archive is None else len(self.archive),
                ),
            )

        final = Population(ind.clone() for ind in swarm)
        archive_pop = None if self.archive is None else self.archive.population.copy()
        if archive_pop is not None and len(archive_pop) > 0:
            front = archive_pop.copy()
            front.rank_and_crowd()
        else:
            front = Population(ind.clone() for ind in self.personal_best).get_pareto_front()
        return lc.finalize(
            final,
            front,
            archive=archive_pop,
            extra={
                "iterations": iteration,
                "v_max": v_max,
                "personal_best": Population(ind.clone() for ind in self.personal_best),
                "evaluation_statistics": self.manager.get_statistics(),
            },
        )

    def _evaluate(self, swarm: Population, evaluator: Any, problem: ProblemProtocol) -> None:
        results = self.manager.evaluate_population(swarm, evaluator, n_obj=problem.n_obj, n_constr=problem.n_constr)
        self.lifecycle.add_evaluations(len(results))

    def _update_global_best(self, rng: np.random.Generator, n_obj: int) -> None:
        if n_obj > 1 and self.archive is not None and len(self.archive) > 0:
            self.global_best = self.archive.sample(rng).clone()
        else:
            self.global_best = best_single_objective(self.personal_best).clone()
        self.lifecycle.update_best(self.global_best)


__all__ = ["PSO"]
