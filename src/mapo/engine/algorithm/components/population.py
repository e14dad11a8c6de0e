"""
Population container with dominance ranking and crowding distance.

Structural operations that produce a new population (``merge``, ``split``,
``sample``, ``truncate``, filters, fronts) fill it with clones, so a
population never shares an :class:`Individual` with another one.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any, Iterable, Iterator, Sequence

import numpy as np

from mapo.foundation.exceptions import ArityMismatchError, IndexOutOfRangeError, NotEvaluatedError
from .individual import FEASIBILITY_TOL, Individual

if TYPE_CHECKING:  # pragma: no cover
    from mapo.foundation.eval.manager import ParallelEvaluationManager


def _logger() -> logging.Logger:
    return logging.getLogger(__name__)


# ---------------------------------------------------------------------- #
# Numeric kernels
# ---------------------------------------------------------------------- #
def dominance_matrix(F: np.ndarray, violation: np.ndarray) -> np.ndarray:
    """
    Boolean matrix ``D`` with ``D[i, j]`` true when solution ``i`` dominates ``j``.

    Same rule as :meth:`Individual.dominates`: feasibility first, then smaller
    violation among infeasible solutions, then Pareto dominance.
    """
    F = np.asarray(F, dtype=float)
    cv = np.asarray(violation, dtype=float).reshape(-1)
    feasible = cv <= 0.0
    less_equal = F[:, None, :] <= F[None, :, :]
    strictly_less = F[:, None, :] < F[None, :, :]
    pareto = np.all(less_equal, axis=2) & np.any(strictly_less, axis=2)

    both_feasible = feasible[:, None] & feasible[None, :]
    both_infeasible = ~feasible[:, None] & ~feasible[None, :]
    return (
        (feasible[:, None] & ~feasible[None, :])
        | (both_infeasible & (cv[:, None] < cv[None, :]))
        | (both_feasible & pareto)
    )


def fast_non_dominated_sort(F: np.ndarray, violation: np.ndarray) -> tuple[list[list[int]], np.ndarray]:
    """
    Deb's O(N^2) non-dominated sort.

    Returns
    -------
    fronts : list of list of int
        Member indices per front, best front first.
    rank : numpy.ndarray
        1-based front index per member.
    """
    N = int(np.asarray(F).shape[0])
    if N == 0:
        return [], np.empty(0, dtype=int)

    dom = dominance_matrix(F, violation)
    dominated_count = dom.sum(axis=0).astype(np.int64)
    rank = np.zeros(N, dtype=int)
    fronts: list[list[int]] = []

    current = np.flatnonzero(dominated_count == 0)
    level = 1
    while current.size > 0:
        fronts.append(current.tolist())
        rank[current] = level
        dominated_count -= dom[current].sum(axis=0)
        dominated_count[current] = -1
        dom[current] = False
        level += 1
        current = np.flatnonzero(dominated_count == 0)

    return fronts, rank


def crowding_distance(F: np.ndarray, fronts: Sequence[Sequence[int]] | None = None) -> np.ndarray:
    """
    Crowding distance computed independently inside each front.

    Boundary members of every axis get ``+inf``; an axis whose values are all
    equal contributes nothing. With ``fronts=None`` the whole matrix is treated
    as one front.
    """
    F = np.asarray(F, dtype=float)
    N = F.shape[0]
    crowding = np.zeros(N)
    if fronts is None:
        fronts = [list(range(N))]

    for front in fronts:
        if len(front) == 0:
            continue
        front_arr = np.asarray(front, dtype=int)
        if front_arr.size <= 2:
            crowding[front_arr] = np.inf
            continue

        fvals = F[front_arr]
        d = np.zeros(front_arr.size, dtype=float)
        for m in range(fvals.shape[1]):
            order = np.argsort(fvals[:, m], kind="mergesort")
            sorted_vals = fvals[order, m]
            d[order[0]] = np.inf
            d[order[-1]] = np.inf
            span = sorted_vals[-1] - sorted_vals[0]
            if span <= 0.0:
                continue
            d[order[1:-1]] += (sorted_vals[2:] - sorted_vals[:-2]) / span
        crowding[front_arr] = d

    return crowding


def best_single_objective(individuals: Sequence[Individual]) -> Individual:
    """
    Single-objective representative under constrained dominance.

    Ordered by total violation, then by objective value; the first member wins ties.
    Feasible members all carry zero violation, so any of them beats an infeasible one.
    """
    if not individuals:
        raise ValueError("Cannot pick a best member from an empty collection.")
    return min(individuals, key=lambda ind: (ind.constraint_violation, ind.objective(0)))


# ---------------------------------------------------------------------- #
# Container
# ---------------------------------------------------------------------- #
class Population:
    """
    Named, ordered collection of :class:`Individual` objects.

    Every member shares the decision-vector length of the first one added.
    """

    def __init__(self, individuals: Iterable[Individual] | None = None, name: str = "") -> None:
        self.name = name
        self._members: list[Individual] = []
        if individuals is not None:
            self.extend(individuals)

    # -- container protocol ---------------------------------------------
    def __len__(self) -> int:
        return len(self._members)

    def __iter__(self) -> Iterator[Individual]:
        return iter(self._members)

    def __getitem__(self, index: int) -> Individual:
        return self._members[self._check_index(index)]

    def __setitem__(self, index: int, individual: Individual) -> None:
        if not isinstance(individual, Individual):
            raise TypeError(f"Population members must be Individual, got {type(individual).__name__}.")
        idx = self._check_index(index)
        if len(self._members) > 1:
            self._check_n_var(individual)
        self._members[idx] = individual

    def __repr__(self) -> str:
        evaluated = sum(1 for ind in self._members if ind.evaluated)
        label = f"name={self.name!r}, " if self.name else ""
        return f"Population({label}size={len(self)}, evaluated={evaluated})"

    def _check_index(self, index: int) -> int:
        n = len(self._members)
        idx = int(index)
        if idx < 0:
            idx += n
        if not 0 <= idx < n:
            raise IndexOutOfRangeError(index, n, "population index")
        return idx

    def _check_n_var(self, individual: Individual) -> None:
        expected = self._members[0].n_var
        if individual.n_var != expected:
            raise ArityMismatchError("Variable", expected, individual.n_var)

    def _derive(self, individuals: Iterable[Individual]) -> "Population":
        return Population(individuals, name=self.name)

    @property
    def individuals(self) -> list[Individual]:
        """Shallow list of the current members."""
        return list(self._members)

    @property
    def size(self) -> int:
        return len(self._members)

    @property
    def n_var(self) -> int | None:
        """Decision-vector length shared by the members (``None`` when empty)."""
        return self._members[0].n_var if self._members else None

    def is_empty(self) -> bool:
        return not self._members

    def add(self, individual: Individual) -> None:
        if not isinstance(individual, Individual):
            raise TypeError(f"Population members must be Individual, got {type(individual).__name__}.")
        if self._members:
            self._check_n_var(individual)
        self._members.append(individual)

    def extend(self, individuals: Iterable[Individual]) -> None:
        for ind in individuals:
            self.add(ind)

    def remove(self, index: int) -> Individual:
        return self._members.pop(self._check_index(index))

    def clear(self) -> None:
        self._members.clear()

    def copy(self) -> "Population":
        return self._derive(ind.clone() for ind in self._members)

    # -- evaluation -------------------------------------------------------
    def evaluate(
        self,
        evaluator: Any,
        manager: "ParallelEvaluationManager | None" = None,
        *,
        n_obj: int | None = None,
        n_constr: int | None = None,
    ) -> int:
        """
        Evaluate every member that is not evaluated yet.

        Returns the number of members that were sent to the evaluator (cache
        hits included).
        """
        if manager is None:
            from mapo.foundation.eval.manager import ParallelEvaluationManager

            manager = ParallelEvaluationManager()
        return len(manager.evaluate_population(self, evaluator, n_obj=n_obj, n_constr=n_constr))

    def evaluate_all(
        self,
        evaluator: Any,
        manager: "ParallelEvaluationManager | None" = None,
        *,
        n_obj: int | None = None,
        n_constr: int | None = None,
    ) -> int:
        """Force re-evaluation of every member."""
        for ind in self._members:
            ind.invalidate()
        return self.evaluate(evaluator, manager, n_obj=n_obj, n_constr=n_constr)

    # -- matrices ---------------------------------------------------------
    def _require_evaluated(self) -> int:
        if not self._members:
            return 0
        n_obj = None
        for ind in self._members:
            if not ind.evaluated:
                raise NotEvaluatedError("All population members must be evaluated.")
            if n_obj is None:
                n_obj = ind.n_obj
            elif ind.n_obj != n_obj:
                raise ArityMismatchError("Objective", n_obj, ind.n_obj)
        return int(n_obj or 0)

    def variables_matrix(self) -> np.ndarray:
        if not self._members:
            return np.empty((0, 0))
        return np.vstack([ind.variables for ind in self._members])

    def objectives_matrix(self) -> np.ndarray:
        n_obj = self._require_evaluated()
        if not self._members:
            return np.empty((0, 0))
        out = np.empty((len(self._members), n_obj))
        for i, ind in enumerate(self._members):
            out[i] = ind.objectives
        return out

    def constraints_matrix(self) -> np.ndarray:
        self._require_evaluated()
        if not self._members:
            return np.empty((0, 0))
        widths = {ind.constraints.size for ind in self._members}
        if len(widths) > 1:
            raise ArityMismatchError("Constraint", min(widths), max(widths))
        return np.vstack([ind.constraints for ind in self._members])

    def violation_vector(self) -> np.ndarray:
        return np.array([ind.constraint_violation for ind in self._members], dtype=float)

    # -- ranking ----------------------------------------------------------
    def fast_non_dominated_sort(self) -> list[list[int]]:
        """Assign 1-based ``rank`` to every member; return member indices per front."""
        if not self._members:
            return []
        F = self.objectives_matrix()
        fronts, rank = fast_non_dominated_sort(F, self.violation_vector())
        for ind, r in zip(self._members, rank):
            ind.rank = int(r)
        return fronts

    def calculate_crowding_distance(self, fronts: Sequence[Sequence[int]] | None = None) -> None:
        """
        Assign ``crowding_distance`` to every member.

        Without ``fronts`` the whole population is treated as one front; pass
        the output of :meth:`fast_non_dominated_sort` to compute it per front.
        """
        if not self._members:
            return
        distances = crowding_distance(self.objectives_matrix(), fronts)
        for ind, d in zip(self._members, distances):
            ind.crowding_distance = float(d)

    def rank_and_crowd(self) -> list[list[int]]:
        """Non-dominated sort followed by per-front crowding distance."""
        fronts = self.fast_non_dominated_sort()
        self.calculate_crowding_distance(fronts)
        return fronts

    def get_pareto_front(self) -> "Population":
        if not self._members:
            return self._derive([])
        fronts = self.fast_non_dominated_sort()
        return self._derive(self._members[i].clone() for i in fronts[0])

    def get_all_fronts(self) -> list["Population"]:
        fronts = self.fast_non_dominated_sort()
        return [self._derive(self._members[i].clone() for i in front) for front in fronts]

    def environmental_selection(self, n: int) -> "Population":
        """
        Survivors by ``(rank ascending, crowding distance descending)``.

        Ranks and crowding distances must be current (see :meth:`rank_and_crowd`).
        The ordering is stable, so ties keep their population order.
        """
        if n < 0:
            raise ValueError("Survivor count cannot be negative.")
        order = sorted(
            range(len(self._members)),
            key=lambda i: (self._members[i].rank, -self._members[i].crowding_distance),
        )
        return self._derive(self._members[i].clone() for i in order[:n])

    # -- filters and ordering ---------------------------------------------
    def filter_by_rank(self, rank: int) -> "Population":
        return self._derive(ind.clone() for ind in self._members if ind.rank == rank)

    def filter_feasible(self, tolerance: float = FEASIBILITY_TOL) -> "Population":
        return self._derive(ind.clone() for ind in self._members if ind.evaluated and ind.is_feasible(tolerance))

    def sort_by_objective(self, index: int, ascending: bool = True) -> "Population":
        ordered = Individual.sort_by_objective(self._members, index)
        if not ascending:
            ordered.reverse()
        return self._derive(ind.clone() for ind in ordered)

    def sort_by_rank(self) -> "Population":
        return self._derive(ind.clone() for ind in Individual.sort_by_rank(self._members))

    def sort_by_crowding_distance(self, descending: bool = True) -> "Population":
        ordered = Individual.sort_by_crowding_distance(self._members, descending=descending)
        return self._derive(ind.clone() for ind in ordered)

    def best_individual(self, index: int = 0) -> Individual | None:
        """Member with the smallest value of objective ``index`` (first on ties)."""
        if not self._members or not all(ind.evaluated for ind in self._members):
            return None
        best = self._members[0]
        best_value = best.objective(index)
        for ind in self._members[1:]:
            value = ind.objective(index)
            if value < best_value:
                best, best_value = ind, value
        return best

    # -- structural -------------------------------------------------------
    def merge(self, other: "Population") -> "Population":
        return self._derive([ind.clone() for ind in self._members] + [ind.clone() for ind in other])

    def split(self, index: int) -> tuple["Population", "Population"]:
        """First ``index`` members and the rest."""
        n = len(self._members)
        if not 0 <= index <= n:
            raise IndexOutOfRangeError(index, n, "split index")
        head = self._derive(ind.clone() for ind in self._members[:index])
        tail = self._derive(ind.clone() for ind in self._members[index:])
        return head, tail

    def sample(self, n: int, rng: np.random.Generator, *, replace: bool = False) -> "Population":
        size = len(self._members)
        if n < 0:
            raise ValueError("Sample size cannot be negative.")
        if not replace and n > size:
            raise ValueError(f"Cannot sample {n} members without replacement from a population of {size}.")
        if n > 0 and size == 0:
            raise ValueError("Cannot sample from an empty population.")
        idx = rng.choice(size, size=n, replace=replace) if n else np.empty(0, dtype=int)
        return self._derive(self._members[int(i)].clone() for i in idx)

    def truncate(self, n: int) -> "Population":
        if n < 0:
            raise ValueError("Truncation size cannot be negative.")
        return self._derive(ind.clone() for ind in self._members[:n])

    # -- statistics -------------------------------------------------------
    def get_statistics(self) -> dict[str, Any]:
        stats: dict[str, Any] = {"size": len(self._members)}
        if not self._members:
            stats["evaluated"] = False
            return stats
        if not all(ind.evaluated for ind in self._members):
            stats["evaluated"] = False
            return stats

        F = self.objectives_matrix()
        feasible = sum(1 for ind in self._members if ind.is_feasible())
        ddof = 1 if F.shape[0] > 1 else 0
        stats.update(
            {
                "evaluated": True,
                "n_objectives": int(F.shape[1]),
                "objective_mean": F.mean(axis=0),
                "objective_std": F.std(axis=0, ddof=ddof),
                "objective_min": F.min(axis=0),
                "objective_max": F.max(axis=0),
                "feasible_count": feasible,
                "feasible_ratio": feasible / F.shape[0],
            }
        )
        return stats

    @classmethod
    def random(
        cls,
        n: int,
        lower: Sequence[float] | np.ndarray,
        upper: Sequence[float] | np.ndarray,
        rng: np.random.Generator,
        name: str = "",
    ) -> "Population":
        """``n`` unevaluated individuals drawn uniformly inside the bounds."""
        if n < 0:
            raise ValueError("Population size cannot be negative.")
        xl = np.asarray(lower, dtype=float).reshape(-1)
        xu = np.asarray(upper, dtype=float).reshape(-1)
        X = xl + rng.random((n, xl.size)) * (xu - xl)
        _logger().debug("Sampled %d random individuals in %d dimensions.", n, xl.size)
        return cls((Individual(row) for row in X), name=name)


__all__ = ["Population", "best_single_objective", "dominance_matrix", "fast_non_dominated_sort", "crowding_distance"]
