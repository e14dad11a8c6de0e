"""
Candidate solution with its evaluation outcome.

An :class:`Individual` owns copies of its arrays. Nothing is shared between
individuals; :meth:`Individual.clone` is the only way to duplicate one.
"""

from __future__ import annotations

from typing import Any, Iterable, Sequence

import numpy as np

from mapo.foundation.constraints.utils import total_violation
from mapo.foundation.exceptions import ArityMismatchError, IndexOutOfRangeError, NotEvaluatedError

# Default tolerance for decision-vector equality.
EQUALITY_TOL = 1.0e-10
# Default tolerance used by ``is_feasible``.
FEASIBILITY_TOL = 1.0e-6


def _readonly(values: Any) -> np.ndarray:
    arr = np.array(values, dtype=float).reshape(-1)
    arr.setflags(write=False)
    return arr


class Individual:
    """
    One point in decision space plus its objectives and constraints.

    Objectives are minimized. Constraint values follow the ``g <= 0``
    convention and ``constraint_violation`` is the sum of their positive parts.
    ``rank`` is 0 until a non-dominated sort assigns a 1-based front index.
    """

    def __init__(self, variables: Sequence[float] | np.ndarray) -> None:
        self._variables = _readonly(variables)
        self._objectives = _readonly(())
        self._constraints = _readonly(())
        self._violation = 0.0
        self._evaluated = False
        self.rank = 0
        self.crowding_distance = 0.0
        self.user_data: dict[str, Any] = {}

    # ------------------------------------------------------------------ #
    # Data
    # ------------------------------------------------------------------ #
    @property
    def variables(self) -> np.ndarray:
        return self._variables

    @variables.setter
    def variables(self, values: Sequence[float] | np.ndarray) -> None:
        self._variables = _readonly(values)
        self.invalidate()

    @property
    def objectives(self) -> np.ndarray:
        return self._objectives

    @property
    def constraints(self) -> np.ndarray:
        return self._constraints

    @property
    def constraint_violation(self) -> float:
        return self._violation

    @property
    def evaluated(self) -> bool:
        return self._evaluated

    @property
    def n_var(self) -> int:
        return int(self._variables.size)

    @property
    def n_obj(self) -> int:
        return int(self._objectives.size)

    def set_evaluation(self, objectives: Iterable[float], constraints: Iterable[float] | None = None) -> None:
        """Record the evaluator outcome. Call :meth:`invalidate` first to re-evaluate."""
        if self._evaluated:
            raise ValueError("Individual is already evaluated; call invalidate() before re-evaluating.")
        objs = _readonly(list(objectives))
        if objs.size == 0:
            raise ValueError("An evaluation must provide at least one objective.")
        cons = _readonly(() if constraints is None else list(constraints))
        self._objectives = objs
        self._constraints = cons
        self._violation = total_violation(cons)
        self._evaluated = True

    def invalidate(self) -> None:
        """Drop the evaluation outcome and ranking information."""
        self._objectives = _readonly(())
        self._constraints = _readonly(())
        self._violation = 0.0
        self._evaluated = False
        self.rank = 0
        self.crowding_distance = 0.0

    def objective(self, index: int) -> float:
        if not self._evaluated:
            raise NotEvaluatedError()
        if not 0 <= index < self._objectives.size:
            raise IndexOutOfRangeError(index, self._objectives.size, "objective index")
        return float(self._objectives[index])

    def is_feasible(self, tolerance: float = FEASIBILITY_TOL) -> bool:
        return self._violation <= tolerance

    # ------------------------------------------------------------------ #
    # Comparison
    # ------------------------------------------------------------------ #
    def dominates(self, other: "Individual") -> bool:
        """
        Constrained dominance.

        A feasible individual dominates an infeasible one. Between two
        infeasible individuals the smaller violation wins. Between two feasible
        individuals plain Pareto dominance applies.
        """
        if not self._evaluated or not other._evaluated:
            raise NotEvaluatedError("Both individuals must be evaluated before checking dominance.")
        if self._objectives.size != other._objectives.size:
            raise ArityMismatchError("Objective", self._objectives.size, other._objectives.size)

        self_feasible = self._violation <= 0
        other_feasible = other._violation <= 0
        if self_feasible and not other_feasible:
            return True
        if other_feasible and not self_feasible:
            return False
        if not self_feasible:
            return self._violation < other._violation

        a = self._objectives
        b = other._objectives
        return bool(np.all(a <= b) and np.any(a < b))

    def equals(self, other: "Individual", tolerance: float = EQUALITY_TOL) -> bool:
        """Decision-vector equality within ``tolerance``; objectives are ignored."""
        if self._variables.size != other._variables.size:
            return False
        return bool(np.all(np.abs(self._variables - other._variables) <= tolerance))

    def compare(self, other: "Individual", index: int) -> int:
        """Return -1, 0 or 1 comparing objective ``index`` of ``self`` with ``other``."""
        a = self.objective(index)
        b = other.objective(index)
        if a < b:
            return -1
        if a > b:
            return 1
        return 0

    def clone(self) -> "Individual":
        """Deep, independent copy."""
        twin = Individual(self._variables)
        twin._objectives = self._objectives
        twin._constraints = self._constraints
        twin._violation = self._violation
        twin._evaluated = self._evaluated
        twin.rank = self.rank
        twin.crowding_distance = self.crowding_distance
        twin.user_data = {k: (v.copy() if isinstance(v, (dict, list, np.ndarray)) else v) for k, v in self.user_data.items()}
        return twin

    def __repr__(self) -> str:
        if not self._evaluated:
            return f"Individual(n_var={self.n_var}, evaluated=False)"
        objs = np.array2string(self._objectives, precision=4, separator=", ")
        return (
            f"Individual(objectives={objs}, violation={self._violation:.4g}, "
            f"rank={self.rank}, crowding={self.crowding_distance:.4g})"
        )

    # ------------------------------------------------------------------ #
    # Sorting helpers
    # ------------------------------------------------------------------ #
    @staticmethod
    def sort_by_objective(individuals: Iterable["Individual"], index: int) -> list["Individual"]:
        return sorted(individuals, key=lambda ind: ind.objective(index))

    @staticmethod
    def sort_by_rank(individuals: Iterable["Individual"]) -> list["Individual"]:
        return sorted(individuals, key=lambda ind: ind.rank)

    @staticmethod
    def sort_by_crowding_distance(individuals: Iterable["Individual"], descending: bool = True) -> list["Individual"]:
        return sorted(individuals, key=lambda ind: ind.crowding_distance, reverse=descending)


__all__ = ["Individual", "EQUALITY_TOL", "FEASIBILITY_TOL"]
