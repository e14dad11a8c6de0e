"""
Run-state helper composed into every strategy.

Owns the Idle -> Running -> Completed | Stopped state machine, the evaluation
and iteration counters, stop-condition polling, best-individual tracking,
per-iteration history, progress logging and assembly of the results record.
"""

from __future__ import annotations

import logging
import time
from typing import TYPE_CHECKING, Any, Callable

import numpy as np

from mapo.foundation.exceptions import RunStateError
from .hooks import RunCallbacks, invoke_safely
from .individual import Individual
from .population import Population, best_single_objective, fast_non_dominated_sort
from .protocol import RunStatus
from .results import OptimizationResult
from .termination import StopReason, TerminationConfig

if TYPE_CHECKING:  # pragma: no cover
    from mapo.foundation.problem.types import ProblemProtocol


def _logger() -> logging.Logger:
    return logging.getLogger(__name__)


def _fmt(values: np.ndarray) -> str:
    return " ".join(f"{v:.6g}" for v in np.asarray(values).reshape(-1))


class AlgorithmLifecycle:
    """
    Shared run bookkeeping.

    Parameters
    ----------
    algorithm_name : str
        Name recorded in logs and in the results record.
    termination : TerminationConfig, optional
        Evaluation / time / target limits.
    logger : logging.Logger, optional
        Destination for run messages; the module logger when omitted.
    callbacks : RunCallbacks, optional
        Iteration and end-of-run hooks.
    verbose : bool
        Emit periodic progress lines.
    log_every : int
        Progress period in iterations.
    clock : callable, optional
        Monotonic time source in seconds.
    """

    def __init__(
        self,
        algorithm_name: str,
        termination: TerminationConfig | None = None,
        *,
        logger: logging.Logger | None = None,
        callbacks: RunCallbacks | None = None,
        verbose: bool = True,
        log_every: int = 10,
        clock: Callable[[], float] | None = None,
    ) -> None:
        self.algorithm_name = algorithm_name
        self.termination = termination or TerminationConfig()
        self.log = logger or _logger()
        self.callbacks = callbacks or RunCallbacks()
        self.verbose = bool(verbose)
        self.log_every = max(1, int(log_every))
        self._clock = clock or time.perf_counter
        self.reset()

    # ------------------------------------------------------------------ #
    # State
    # ------------------------------------------------------------------ #
    def reset(self) -> None:
        """Return to Idle and forget the previous run."""
        self.state = RunStatus.IDLE
        self.problem: ProblemProtocol | None = None
        self.evaluations = 0
        self.iteration = 0
        self.best: Individual | None = None
        self.history: list[dict[str, Any]] = []
        self.stop_reason: StopReason | None = None
        self._stop_requested = False
        self._start: float | None = None
        self._end: float | None = None
        self._finalized = False

    def begin(self, problem: "ProblemProtocol") -> None:
        """Enter Running: reset counters and log the run header."""
        if self.state is RunStatus.RUNNING:
            raise RunStateError("A run is already in progress.", state=str(self.state))
        self.reset()
        self.problem = problem
        self.state = RunStatus.RUNNING
        self._start = self._clock()

        term = self.termination
        self.log.info("=" * 40)
        self.log.info("Starting optimization: %s", getattr(problem, "name", type(problem).__name__))
        self.log.info("Algorithm: %s", self.algorithm_name)
        self.log.info("Variables: %d", problem.n_var)
        self.log.info("Objectives: %d", problem.n_obj)
        self.log.info("Constraints: %d", problem.n_constr)
        self.log.info("Max evaluations: %s", "unbounded" if term.max_evaluations is None else term.max_evaluations)
        self.log.info("Max time: %s", "unbounded" if term.max_time is None else f"{term.max_time:.1f}s")
        self.log.info("=" * 40)

    def request_stop(self) -> None:
        """Cooperative stop; honoured at the next iteration boundary."""
        self._stop_requested = True

    @property
    def running(self) -> bool:
        return self.state is RunStatus.RUNNING

    @property
    def elapsed(self) -> float:
        if self._start is None:
            return 0.0
        end = self._end if self._end is not None else self._clock()
        return float(end - self._start)

    @property
    def status(self) -> dict[str, Any]:
        """Snapshot of the current run."""
        problem = self.problem
        return {
            "state": str(self.state),
            "algorithm": self.algorithm_name,
            "evaluations": self.evaluations,
            "iteration": self.iteration,
            "elapsed_time": self.elapsed,
            "stop_requested": self._stop_requested,
            "stop_reason": None if self.stop_reason is None else str(self.stop_reason),
            "n_var": None if problem is None else problem.n_var,
            "n_obj": None if problem is None else problem.n_obj,
            "n_constr": None if problem is None else problem.n_constr,
            "best_objectives": None if self.best is None else self.best.objectives.tolist(),
        }

    # ------------------------------------------------------------------ #
    # Counters and stop conditions
    # ------------------------------------------------------------------ #
    def add_evaluations(self, count: int) -> None:
        self.evaluations += int(count)

    def should_stop(self) -> bool:
        """
        Poll stop conditions in precedence order.

        Manual stop, then evaluation budget, then wall time, then target
        objectives. The first condition that holds is recorded as the reason.
        """
        if self.stop_reason is not None:
            return True
        term = self.termination
        reason: StopReason | None = None
        if self._stop_requested:
            reason = StopReason.MANUAL
            self.log.info("Stop requested; leaving the main loop.")
        elif term.max_evaluations is not None and self.evaluations >= term.max_evaluations:
            reason = StopReason.MAX_EVALUATIONS
            self.log.info("Reached max evaluations: %d", self.evaluations)
        elif term.max_time is not None and self.elapsed >= term.max_time:
            reason = StopReason.MAX_TIME
            self.log.info("Reached max time: %.2fs", self.elapsed)
        elif self.best is not None and term.target_reached(self.best.objectives):
            reason = StopReason.TARGET_REACHED
            self.log.info("Reached target objectives.")
        if reason is None:
            return False
        self.stop_reason = reason
        return True

    # ------------------------------------------------------------------ #
    # Best tracking
    # ------------------------------------------------------------------ #
    def update_best(self, candidate: Individual) -> bool:
        """Store a clone of ``candidate`` if it improves on the current best."""
        if not candidate.evaluated:
            return False
        if self.best is None:
            self.best = candidate.clone()
            return True
        if candidate.dominates(self.best):
            self.best = candidate.clone()
            return True
        if candidate.n_obj == 1 and candidate.objective(0) < self.best.objective(0):
            self.best = candidate.clone()
            return True
        return False

    def update_best_from_population(self, population: Population) -> bool:
        """
        Offer the population's representative to :meth:`update_best`.

        Single-objective: the least-violating member, then the smallest objective. Otherwise the
        first member of the population's non-dominated front.
        """
        members = [ind for ind in population if ind.evaluated]
        if not members:
            return False
        if members[0].n_obj == 1:
            candidate = best_single_objective(members)
            return self.update_best(candidate)
        F = np.vstack([ind.objectives for ind in members])
        cv = np.array([ind.constraint_violation for ind in members])
        fronts, _ = fast_non_dominated_sort(F, cv)
        return self.update_best(members[fronts[0][0]])

    # ------------------------------------------------------------------ #
    # Iteration bookkeeping
    # ------------------------------------------------------------------ #
    def record_iteration(self, iteration: int, data: dict[str, Any] | None = None) -> None:
        """Append history, log progress every ``log_every`` iterations, fire the hook."""
        self.iteration = int(iteration)
        payload = dict(data or {})
        payload.setdefault("iteration", self.iteration)
        payload.setdefault("evaluations", self.evaluations)
        self.history.append(payload)

        if self.verbose and self.iteration % self.log_every == 0:
            if self.best is not None:
                self.log.info(
                    "Iter %d | Evals: %d | Time: %.2fs | Best: [%s]",
                    self.iteration,
                    self.evaluations,
                    self.elapsed,
                    _fmt(self.best.objectives),
                )
            else:
                self.log.info("Iter %d | Evals: %d | Time: %.2fs", self.iteration, self.evaluations, self.elapsed)

        invoke_safely(
            self.callbacks.on_iteration_end,
            self.iteration,
            payload,
            logger=self.log,
            name="on_iteration_end callback",
        )

    # ------------------------------------------------------------------ #
    # Results
    # ------------------------------------------------------------------ #
    def finalize(
        self,
        final_population: Population,
        pareto_front: Population | None = None,
        *,
        all_evaluated: list[Individual] | None = None,
        archive: Population | None = None,
        extra: dict[str, Any] | None = None,
    ) -> OptimizationResult:
        """Leave Running and assemble the results record. Valid once per run."""
        if self._finalized:
            raise RunStateError("Results were already finalized for this run.", state=str(self.state))
        if self.state is not RunStatus.RUNNING:
            raise RunStateError("finalize() called outside of a run.", state=str(self.state))
        self._finalized = True
        self._end = self._clock()

        if self.stop_reason is None:
            self.stop_reason = StopReason.COMPLETED
            self.state = RunStatus.COMPLETED
        else:
            self.state = RunStatus.STOPPED

        if pareto_front is None:
            pareto_front = final_population.get_pareto_front()

        problem = self.problem
        result = OptimizationResult(
            problem_name=str(getattr(problem, "name", type(problem).__name__)),
            algorithm_name=self.algorithm_name,
            evaluations=self.evaluations,
            iterations=self.iteration,
            elapsed_time=self.elapsed,
            stopped=self.state is RunStatus.STOPPED,
            stop_reason=str(self.stop_reason),
            final_population=final_population,
            pareto_front=pareto_front,
            best_individual=None if self.best is None else self.best.clone(),
            history=list(self.history),
            all_evaluated=all_evaluated,
            archive=archive,
            extra=dict(extra or {}),
        )

        self.log.info("=" * 40)
        self.log.info("Optimization finished (%s)", result.stop_reason)
        self.log.info("Total evaluations: %d", result.evaluations)
        self.log.info("Total iterations: %d", result.iterations)
        self.log.info("Elapsed time: %.2fs", result.elapsed_time)
        if self.best is not None:
            self.log.info("Best objectives: [%s]", _fmt(self.best.objectives))
            self.log.info("Best is feasible: %s", self.best.is_feasible())
        self.log.info("=" * 40)

        invoke_safely(self.callbacks.on_algorithm_end, result, logger=self.log, name="on_algorithm_end callback")
        return result


__all__ = ["AlgorithmLifecycle"]
