"""
MAPO exception hierarchy.

Provides user-friendly exceptions with helpful error messages and suggestions.
All MAPO-specific exceptions inherit from MAPOError for easy catching.

Example:
    try:
        result = optimize(problem, evaluator, "nsgaii")
    except MAPOError as e:
        logger.error("Optimization failed: %s", e)
        logger.error("Suggestion: %s", e.suggestion)
"""

from __future__ import annotations

from typing import Any


class MAPOError(Exception):
    """
    Base exception for all MAPO errors.

    Attributes:
        message: Human-readable error description
        suggestion: Optional suggestion for fixing the error
        details: Optional dict with additional context
    """

    def __init__(
        self,
        message: str,
        suggestion: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        self.message = message
        self.suggestion = suggestion
        self.details = details or {}
        super().__init__(self._format_message())

    def _format_message(self) -> str:
        """Format the full error message with suggestion."""
        msg = self.message
        if self.suggestion:
            msg += f"\n\nSuggestion: {self.suggestion}"
        return msg


# =============================================================================
# Configuration Errors
# =============================================================================


class ConfigurationError(MAPOError):
    """Raised when configuration is invalid or incomplete."""

    pass


class InvalidAlgorithmError(ConfigurationError):
    """Raised when an unknown algorithm is requested from a registry."""

    def __init__(self, algorithm: str, available: list[str] | None = None) -> None:
        available = available or ["nsgaii", "pso"]
        message = f"Unknown algorithm '{algorithm}'."
        suggestion = f"Available algorithms: {', '.join(available)}"
        super().__init__(message, suggestion, {"algorithm": algorithm, "available": available})


class MissingConfigError(ConfigurationError):
    """Raised when required configuration is missing."""

    def __init__(self, field: str, config_class: str | None = None) -> None:
        message = f"Missing required configuration: '{field}'."
        suggestion = f"Add '{field}' to your configuration"
        if config_class:
            suggestion += f" or use {config_class}.default() for sensible defaults"
        super().__init__(message, suggestion, {"field": field})


# =============================================================================
# Problem Errors
# =============================================================================


class ProblemError(MAPOError):
    """Base class for problem-related errors."""

    pass


class ProblemDimensionError(ProblemError):
    """Raised when problem dimensions are invalid."""

    def __init__(
        self,
        message: str,
        n_var: int | None = None,
        n_obj: int | None = None,
    ) -> None:
        suggestion = "Check problem dimensions: n_var (variables), n_obj (objectives)"
        super().__init__(message, suggestion, {"n_var": n_var, "n_obj": n_obj})


class BoundsError(ProblemError):
    """Raised when bounds are invalid or inconsistent."""

    def __init__(self, message: str) -> None:
        suggestion = "Ensure bounds have shape (n_var, 2) with lower <= upper for every variable"
        super().__init__(message, suggestion)


# =============================================================================
# Runtime Errors
# =============================================================================


class OptimizationError(MAPOError):
    """Raised when optimization fails during execution."""

    pass


class EvaluationError(OptimizationError):
    """Raised when a batch evaluation cannot be completed."""

    def __init__(self, message: str, solution: Any = None) -> None:
        suggestion = "Enable fallback_to_sequential or check the worker pool configuration"
        super().__init__(message, suggestion, {"solution": solution})


class RunStateError(OptimizationError):
    """Raised when the optimizer lifecycle is driven out of order."""

    def __init__(self, message: str, state: str | None = None) -> None:
        suggestion = "Call run() once per optimizer instance, or reset() it before reuse"
        super().__init__(message, suggestion, {"state": state})


# =============================================================================
# Invariant (programming-contract) Errors
# =============================================================================


class InvariantError(MAPOError):
    """Raised when a core invariant is violated by the caller."""

    pass


class NotEvaluatedError(InvariantError):
    """Raised when objective data is required but the individual is unevaluated."""

    def __init__(self, message: str = "Individual has not been evaluated.") -> None:
        suggestion = "Evaluate the population before ranking or comparing individuals"
        super().__init__(message, suggestion)


class ArityMismatchError(InvariantError):
    """Raised when two individuals disagree on objective or variable counts."""

    def __init__(self, what: str, expected: int, actual: int) -> None:
        message = f"{what} count mismatch: expected {expected}, got {actual}."
        super().__init__(message, None, {"expected": expected, "actual": actual})


class IndexOutOfRangeError(InvariantError, IndexError):
    """Raised when an index falls outside a container or vector."""

    def __init__(self, index: int, size: int, what: str = "index") -> None:
        message = f"{what} {index} out of range for size {size}."
        super().__init__(message, None, {"index": index, "size": size})


# =============================================================================
# Exports
# =============================================================================

__all__ = [
    # Base
    "MAPOError",
    # Configuration
    "ConfigurationError",
    "InvalidAlgorithmError",
    "MissingConfigError",
    # Problem
    "ProblemError",
    "ProblemDimensionError",
    "BoundsError",
    # Runtime
    "OptimizationError",
    "EvaluationError",
    "RunStateError",
    # Invariants
    "InvariantError",
    "NotEvaluatedError",
    "ArityMismatchError",
    "IndexOutOfRangeError",
]
