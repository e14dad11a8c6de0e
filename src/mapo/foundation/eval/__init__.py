from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Mapping, Protocol, runtime_checkable

import numpy as np

# Value written into every objective/constraint slot of a failed evaluation.
FAILURE_PENALTY = 1.0e10


def _logger() -> logging.Logger:
    return logging.getLogger(__name__)


@dataclass
class EvaluationResult:
    """Outcome of evaluating one decision vector."""

    objectives: np.ndarray
    constraints: np.ndarray = field(default_factory=lambda: np.empty(0, dtype=float))
    success: bool = True
    message: str = ""

    def __post_init__(self) -> None:
        self.objectives = np.asarray(self.objectives, dtype=float).reshape(-1)
        self.constraints = np.asarray(self.constraints, dtype=float).reshape(-1)


@runtime_checkable
class EvaluatorProtocol(Protocol):
    """
    Black-box evaluator contract.

    ``evaluate`` receives one decision vector and returns an
    :class:`EvaluationResult`, a mapping with ``objectives`` / ``constraints`` /
    ``success`` / ``message`` keys, or a bare sequence of objective values.

    Evaluators may expose ``parallel_safe = False`` when they wrap a resource
    that cannot be shared across concurrent workers.
    """

    def evaluate(self, x: np.ndarray) -> Any: ...


def failure_result(message: str, n_obj: int, n_constr: int) -> EvaluationResult:
    """Penalty-valued record for an evaluation that raised."""
    return EvaluationResult(
        objectives=np.full(max(int(n_obj), 1), FAILURE_PENALTY),
        constraints=np.full(max(int(n_constr), 0), FAILURE_PENALTY),
        success=False,
        message=message,
    )


def _replace_non_finite(values: np.ndarray, what: str) -> np.ndarray:
    bad = ~np.isfinite(values)
    if np.any(bad):
        _logger().warning("Evaluator returned non-finite %s %s; replacing with penalty.", what, values.tolist())
        values = values.copy()
        values[bad] = FAILURE_PENALTY
    return values


def coerce_result(raw: Any) -> EvaluationResult:
    """Normalize whatever an evaluator returned into an :class:`EvaluationResult`."""
    if isinstance(raw, EvaluationResult):
        result = EvaluationResult(raw.objectives, raw.constraints, bool(raw.success), str(raw.message))
    elif isinstance(raw, Mapping):
        objectives = raw.get("objectives", raw.get("F"))
        if objectives is None:
            raise ValueError("Evaluation result mapping is missing 'objectives'.")
        constraints = raw.get("constraints", raw.get("G"))
        result = EvaluationResult(
            objectives=objectives,
            constraints=np.empty(0) if constraints is None else constraints,
            success=bool(raw.get("success", True)),
            message=str(raw.get("message", "")),
        )
    elif hasattr(raw, "objectives"):
        constraints = getattr(raw, "constraints", None)
        result = EvaluationResult(
            objectives=getattr(raw, "objectives"),
            constraints=np.empty(0) if constraints is None else constraints,
            success=bool(getattr(raw, "success", True)),
            message=str(getattr(raw, "message", "")),
        )
    else:
        result = EvaluationResult(objectives=np.asarray(raw, dtype=float))

    result.objectives = _replace_non_finite(result.objectives, "objectives")
    result.constraints = _replace_non_finite(result.constraints, "constraints")
    return result


__all__ = [
    "FAILURE_PENALTY",
    "EvaluationResult",
    "EvaluatorProtocol",
    "coerce_result",
    "failure_result",
]
