from __future__ import annotations

import logging
import os
from concurrent.futures import Executor, ProcessPoolExecutor, ThreadPoolExecutor
from dataclasses import asdict, dataclass
from typing import Any, Literal

import numpy as np

from mapo.foundation.exceptions import ConfigurationError
from . import EvaluationResult, coerce_result, failure_result

BackendName = Literal["thread", "process"]
EvaluatorType = Literal["auto", "parallel", "serial"]


def _logger() -> logging.Logger:
    return logging.getLogger(__name__)


@dataclass(frozen=True)
class ParallelConfig:
    """
    Settings for batch evaluation.

    Attributes:
        enable_parallel: Fan batches out to a worker pool when the evaluator allows it.
        n_workers: Pool size; ``None`` uses the CPU count.
        backend: ``"thread"`` or ``"process"`` (process pools need a picklable evaluator).
        chunk_size: Items submitted per task; ``None`` submits one task per item.
        fallback_to_sequential: Re-run unfinished items sequentially when the pool fails.
        enable_cache: Cache successful results keyed by the decision vector.
        cache_precision: Significant digits used to build cache keys.
        evaluator_type: ``"auto"`` classifies the evaluator, ``"parallel"`` / ``"serial"`` force a mode.
    """

    enable_parallel: bool = False
    n_workers: int | None = None
    backend: BackendName = "thread"
    chunk_size: int | None = None
    fallback_to_sequential: bool = True
    enable_cache: bool = False
    cache_precision: int = 8
    evaluator_type: EvaluatorType = "auto"

    def __post_init__(self) -> None:
        if self.backend not in ("thread", "process"):
            raise ConfigurationError(
                f"Unknown parallel backend '{self.backend}'.",
                suggestion="Use 'thread' or 'process'",
            )
        if self.evaluator_type not in ("auto", "parallel", "serial"):
            raise ConfigurationError(
                f"Unknown evaluator_type '{self.evaluator_type}'.",
                suggestion="Use 'auto', 'parallel' or 'serial'",
            )
        if self.n_workers is not None and int(self.n_workers) <= 0:
            raise ConfigurationError("n_workers must be positive when provided.")
        if self.chunk_size is not None and int(self.chunk_size) <= 0:
            raise ConfigurationError("chunk_size must be positive when provided.")
        if int(self.cache_precision) <= 0:
            raise ConfigurationError("cache_precision must be positive.")

    @classmethod
    def from_dict(cls, data: dict[str, Any] | None) -> "ParallelConfig":
        if not data:
            return cls()
        aliases = {
            "enableParallel": "enable_parallel",
            "numWorkers": "n_workers",
            "chunkSize": "chunk_size",
            "fallbackToSequential": "fallback_to_sequential",
            "enableCache": "enable_cache",
            "evaluatorType": "evaluator_type",
        }
        normalized = {aliases.get(k, k): v for k, v in data.items()}
        known = set(cls.__dataclass_fields__)
        unknown = sorted(set(normalized) - known)
        if unknown:
            raise ConfigurationError(f"Unknown parallel configuration keys: {', '.join(unknown)}")
        return cls(**normalized)

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)

    def resolved_workers(self) -> int:
        return max(1, int(self.n_workers or os.cpu_count() or 1))


def create_executor(config: ParallelConfig) -> Executor:
    """Build the worker pool described by *config*."""
    n_workers = config.resolved_workers()
    if config.backend == "process":
        return ProcessPoolExecutor(max_workers=n_workers)
    return ThreadPoolExecutor(max_workers=n_workers, thread_name_prefix="mapo-eval")


def evaluate_one(evaluator: Any, x: np.ndarray, n_obj: int, n_constr: int) -> EvaluationResult:
    """Evaluate a single vector, converting evaluator exceptions into a failure record."""
    try:
        return coerce_result(evaluator.evaluate(np.array(x, dtype=float)))
    except Exception as exc:  # evaluator errors never abort a batch
        _logger().warning("Evaluation failed for x=%s: %s", np.asarray(x).tolist(), exc)
        return failure_result(f"{type(exc).__name__}: {exc}", n_obj, n_constr)


def _evaluate_chunk(evaluator: Any, X_chunk: np.ndarray, n_obj: int, n_constr: int) -> list[EvaluationResult]:
    """Worker helper to evaluate a chunk; kept at module level for pickling."""
    return [evaluate_one(evaluator, x, n_obj, n_constr) for x in X_chunk]


__all__ = ["ParallelConfig", "create_executor", "evaluate_one", "BackendName", "EvaluatorType"]
