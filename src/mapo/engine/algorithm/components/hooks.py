"""
Optional run callbacks.

Callbacks run synchronously on the thread driving the optimization loop. A
failing callback is logged and ignored; it never aborts the run.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Callable

if TYPE_CHECKING:  # pragma: no cover
    from .results import OptimizationResult

IterationCallback = Callable[[int, dict[str, Any]], Any]
EndCallback = Callable[["OptimizationResult"], Any]


def _logger() -> logging.Logger:
    return logging.getLogger(__name__)


@dataclass
class RunCallbacks:
    """
    Hooks invoked by a strategy during a run.

    Attributes:
        on_iteration_end: ``f(iteration, data)`` after every iteration.
        on_algorithm_end: ``f(result)`` once the results record is assembled.
    """

    on_iteration_end: IterationCallback | None = None
    on_algorithm_end: EndCallback | None = None


def invoke_safely(
    callback: Callable[..., Any] | None,
    *args: Any,
    logger: logging.Logger | None = None,
    name: str = "callback",
) -> bool:
    """
    Call ``callback(*args)`` and swallow any exception after logging it.

    Returns True when the callback ran without raising (or was absent).
    """
    if callback is None:
        return True
    try:
        callback(*args)
    except Exception:
        (logger or _logger()).exception("%s raised; continuing the run.", name)
        return False
    return True


__all__ = ["RunCallbacks", "invoke_safely", "IterationCallback", "EndCallback"]
