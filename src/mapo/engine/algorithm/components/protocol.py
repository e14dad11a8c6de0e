"""
Optimizer protocol and run-state definitions.
"""

from __future__ import annotations

from enum import Enum
from typing import TYPE_CHECKING, Any, Protocol, runtime_checkable

if TYPE_CHECKING:  # pragma: no cover
    from mapo.foundation.problem.types import ProblemProtocol
    from .hooks import RunCallbacks
    from .results import OptimizationResult


class RunStatus(str, Enum):
    """Lifecycle states: Idle -> Running -> Completed | Stopped."""

    IDLE = "idle"
    RUNNING = "running"
    COMPLETED = "completed"
    STOPPED = "stopped"

    def __str__(self) -> str:
        return self.value

    @property
    def terminal(self) -> bool:
        return self in (RunStatus.COMPLETED, RunStatus.STOPPED)


@runtime_checkable
class Optimizer(Protocol):
    """
    Interface shared by every search strategy.

    Strategies are configured at construction time and driven by ``run``.
    ``request_stop`` may be called from a callback (or another thread); the
    flag is honoured at the next iteration boundary.
    """

    name: str

    def run(
        self,
        problem: "ProblemProtocol",
        evaluator: Any,
        *,
        callbacks: "RunCallbacks | None" = None,
    ) -> "OptimizationResult":
        """
        Run the optimization to completion or until a stop condition fires.

        Parameters
        ----------
        problem : ProblemProtocol
            Variable bounds and objective / constraint counts.
        evaluator : EvaluatorProtocol
            Black-box evaluation of a single decision vector.
        callbacks : RunCallbacks, optional
            Per-iteration and end-of-run hooks.

        Returns
        -------
        OptimizationResult
            Final population, Pareto front, best individual and run statistics.
        """
        ...

    def request_stop(self) -> None: ...


__all__ = ["Optimizer", "RunStatus"]
