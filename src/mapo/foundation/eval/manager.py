"""
Batch evaluation coordinator.

Evaluates a matrix of decision vectors (or the unevaluated members of a
population) against a black-box evaluator. Parallel-safe evaluators are fanned
out to a worker pool for the duration of one call; anything the pool fails to
deliver is evaluated sequentially afterwards. Results always come back in the
input order.
"""

from __future__ import annotations

import logging
from concurrent.futures import as_completed
from typing import TYPE_CHECKING, Any, Iterable, Sequence

import numpy as np

from mapo.foundation.exceptions import EvaluationError
from . import EvaluationResult, failure_result
from .backends import ParallelConfig, _evaluate_chunk, create_executor, evaluate_one
from .cache import EvaluationCache

if TYPE_CHECKING:  # pragma: no cover
    from mapo.engine.algorithm.components.individual import Individual
    from mapo.engine.algorithm.components.population import Population

# Class-name fragments of evaluators wrapping a process-wide native resource.
_NOT_PARALLEL_SAFE_TOKENS = ("aspen", "simulator")


def _logger() -> logging.Logger:
    return logging.getLogger(__name__)


class ParallelEvaluationManager:
    """
    Coordinates batch evaluation with optional worker pools and caching.

    Parameters
    ----------
    config : ParallelConfig, optional
        Pool, cache and fallback settings. Defaults to sequential, uncached.
    logger : logging.Logger, optional
        Destination for diagnostics; the module logger when omitted.
    """

    def __init__(self, config: ParallelConfig | None = None, *, logger: logging.Logger | None = None) -> None:
        self.config = config or ParallelConfig()
        self._log = logger or _logger()
        self.cache: EvaluationCache | None = (
            EvaluationCache(self.config.cache_precision) if self.config.enable_cache else None
        )
        self.total_evaluations = 0
        self.parallel_evaluations = 0
        self.sequential_evaluations = 0
        self.failed_evaluations = 0
        self.fallback_count = 0

    # ------------------------------------------------------------------ #
    # Classification
    # ------------------------------------------------------------------ #
    def is_parallel_safe(self, evaluator: Any) -> bool:
        mode = self.config.evaluator_type
        if mode == "parallel":
            return True
        if mode == "serial":
            return False
        explicit = getattr(evaluator, "parallel_safe", None)
        if explicit is not None:
            return bool(explicit)
        name = type(evaluator).__name__.lower()
        return not any(token in name for token in _NOT_PARALLEL_SAFE_TOKENS)

    # ------------------------------------------------------------------ #
    # Public entry points
    # ------------------------------------------------------------------ #
    def evaluate_variables(
        self,
        X: np.ndarray | Sequence[Sequence[float]],
        evaluator: Any,
        *,
        n_obj: int | None = None,
        n_constr: int | None = None,
    ) -> list[EvaluationResult]:
        """
        Evaluate every row of ``X``.

        ``n_obj`` / ``n_constr`` size the penalty records of failed items; when
        omitted they are taken from the first successful result in the batch.
        """
        X = np.atleast_2d(np.asarray(X, dtype=float))
        n = X.shape[0] if X.size else 0
        results: list[EvaluationResult | None] = [None] * n
        if n == 0:
            return []

        pending: list[int] = []
        for i in range(n):
            hit = self.cache.get(X[i]) if self.cache is not None else None
            if hit is not None:
                results[i] = hit
            else:
                pending.append(i)

        if pending:
            fail_obj = 1 if n_obj is None else int(n_obj)
            fail_constr = 0 if n_constr is None else int(n_constr)
            use_pool = self.config.enable_parallel and len(pending) > 1 and self.is_parallel_safe(evaluator)
            if use_pool:
                pending = self._evaluate_parallel(X, pending, evaluator, fail_obj, fail_constr, results)
            if pending:
                self._evaluate_sequential(X, pending, evaluator, fail_obj, fail_constr, results)

        final = [r for r in results if r is not None]
        if n_obj is None or n_constr is None:
            _harmonize_failures(final, n_obj, n_constr)
        if self.cache is not None:
            for i, res in enumerate(final):
                self.cache.put(X[i], res)
        self.failed_evaluations += sum(1 for r in final if not r.success)
        return final

    def evaluate_individuals(
        self,
        individuals: Iterable["Individual"],
        evaluator: Any,
        *,
        n_obj: int | None = None,
        n_constr: int | None = None,
    ) -> list[EvaluationResult]:
        """Evaluate the given individuals and write the results back onto them."""
        targets = list(individuals)
        if not targets:
            return []
        X = np.vstack([ind.variables for ind in targets])
        results = self.evaluate_variables(X, evaluator, n_obj=n_obj, n_constr=n_constr)
        for ind, res in zip(targets, results):
            ind.set_evaluation(res.objectives, res.constraints)
            ind.user_data["evaluation_success"] = res.success
            if res.message:
                ind.user_data["evaluation_message"] = res.message
        return results

    def evaluate_population(
        self,
        population: "Population",
        evaluator: Any,
        *,
        n_obj: int | None = None,
        n_constr: int | None = None,
    ) -> list[EvaluationResult]:
        """Evaluate only the members of ``population`` that are not yet evaluated."""
        targets = [ind for ind in population if not ind.evaluated]
        if not targets:
            self._log.debug("Population has no unevaluated members; nothing to do.")
            return []
        return self.evaluate_individuals(targets, evaluator, n_obj=n_obj, n_constr=n_constr)

    # ------------------------------------------------------------------ #
    # Diagnostics
    # ------------------------------------------------------------------ #
    def get_statistics(self) -> dict[str, Any]:
        total = self.total_evaluations
        return {
            "total_evaluations": total,
            "parallel_evaluations": self.parallel_evaluations,
            "sequential_evaluations": self.sequential_evaluations,
            "failed_evaluations": self.failed_evaluations,
            "parallel_ratio": (self.parallel_evaluations / total) if total else 0.0,
            "fallback_count": self.fallback_count,
            "cache_enabled": self.cache is not None,
            "cache_size": len(self.cache) if self.cache is not None else 0,
            "cache_hits": self.cache.hits if self.cache is not None else 0,
        }

    def clear_cache(self) -> None:
        if self.cache is not None:
            self.cache.clear()
            self._log.debug("Evaluation cache cleared.")

    def reset_statistics(self) -> None:
        self.total_evaluations = 0
        self.parallel_evaluations = 0
        self.sequential_evaluations = 0
        self.failed_evaluations = 0
        self.fallback_count = 0

    # ------------------------------------------------------------------ #
    # Internals
    # ------------------------------------------------------------------ #
    def _evaluate_parallel(
        self,
        X: np.ndarray,
        indices: list[int],
        evaluator: Any,
        n_obj: int,
        n_constr: int,
        results: list[EvaluationResult | None],
    ) -> list[int]:
        """Run ``indices`` on a worker pool; return the indices it did not deliver."""
        chunk = int(self.config.chunk_size or 1)
        chunks = [indices[i : i + chunk] for i in range(0, len(indices), chunk)]
        self._log.debug(
            "Evaluating %d items on a %s pool (%d workers, %d tasks).",
            len(indices),
            self.config.backend,
            self.config.resolved_workers(),
            len(chunks),
        )
        remaining = set(indices)
        error: BaseException | None = None
        try:
            with create_executor(self.config) as executor:
                futures = {executor.submit(_evaluate_chunk, evaluator, X[c], n_obj, n_constr): c for c in chunks}
                for fut in as_completed(futures):
                    members = futures[fut]
                    try:
                        chunk_results = fut.result()
                    except Exception as exc:
                        error = error or exc
                        continue
                    for idx, res in zip(members, chunk_results):
                        results[idx] = res
                        remaining.discard(idx)
        except Exception as exc:
            error = error or exc

        delivered = len(indices) - len(remaining)
        self.total_evaluations += delivered
        self.parallel_evaluations += delivered
        if not remaining:
            return []

        if not self.config.fallback_to_sequential:
            raise EvaluationError(
                f"Parallel evaluation failed for {len(remaining)} item(s): {error}",
                solution=sorted(remaining),
            ) from error
        self.fallback_count += 1
        self._log.warning(
            "Parallel evaluation failed (%s); evaluating %d remaining item(s) sequentially.",
            error,
            len(remaining),
        )
        return sorted(remaining)

    def _evaluate_sequential(
        self,
        X: np.ndarray,
        indices: list[int],
        evaluator: Any,
        n_obj: int,
        n_constr: int,
        results: list[EvaluationResult | None],
    ) -> None:
        for idx in indices:
            results[idx] = evaluate_one(evaluator, X[idx], n_obj, n_constr)
        self.total_evaluations += len(indices)
        self.sequential_evaluations += len(indices)


def _harmonize_failures(results: list[EvaluationResult], n_obj: int | None, n_constr: int | None) -> None:
    """Resize penalty records to the arity reported by successful items of the batch."""
    reference = next((r for r in results if r.success), None)
    if reference is None:
        return
    target_obj = reference.objectives.size if n_obj is None else int(n_obj)
    target_constr = reference.constraints.size if n_constr is None else int(n_constr)
    for i, res in enumerate(results):
        if res.success:
            continue
        if res.objectives.size != target_obj or res.constraints.size != target_constr:
            results[i] = failure_result(res.message, target_obj, target_constr)


__all__ = ["ParallelEvaluationManager"]
