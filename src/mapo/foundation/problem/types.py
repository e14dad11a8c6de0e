from __future__ import annotations

from dataclasses import dataclass, field
from typing import Protocol, runtime_checkable

import numpy as np

from mapo.foundation.exceptions import BoundsError, ProblemDimensionError


@runtime_checkable
class ProblemProtocol(Protocol):
    """Read-only view of an optimization problem as seen by the core."""

    name: str
    n_var: int
    n_obj: int
    n_constr: int

    @property
    def bounds(self) -> np.ndarray: ...


@dataclass(frozen=True, eq=False)
class Problem:
    """
    Minimal concrete problem description.

    Attributes:
        name: Display name, carried into the results record.
        bounds: Array of shape (n_var, 2), one ``[lower, upper]`` row per variable.
        n_obj: Number of objectives (all minimized).
        n_constr: Number of constraints (g <= 0 satisfied).
    """

    name: str
    bounds: np.ndarray
    n_obj: int = 1
    n_constr: int = 0
    variable_names: tuple[str, ...] = field(default=())

    def __post_init__(self) -> None:
        arr = np.array(self.bounds, dtype=float)
        if arr.ndim == 1 and arr.size == 2:
            arr = arr.reshape(1, 2)
        arr.setflags(write=False)
        object.__setattr__(self, "bounds", arr)

    @classmethod
    def from_bounds(
        cls,
        name: str,
        lower: np.ndarray | list[float],
        upper: np.ndarray | list[float],
        *,
        n_obj: int = 1,
        n_constr: int = 0,
    ) -> "Problem":
        lower_arr = np.asarray(lower, dtype=float).reshape(-1)
        upper_arr = np.asarray(upper, dtype=float).reshape(-1)
        if lower_arr.shape != upper_arr.shape:
            raise BoundsError(f"lower has shape {lower_arr.shape}, upper has shape {upper_arr.shape}.")
        return cls(name=name, bounds=np.column_stack([lower_arr, upper_arr]), n_obj=n_obj, n_constr=n_constr)

    @property
    def n_var(self) -> int:
        return int(self.bounds.shape[0])


def resolve_bounds(problem: ProblemProtocol) -> tuple[np.ndarray, np.ndarray]:
    """Return ``(lower, upper)`` as float vectors of length ``n_var``."""
    bounds = np.asarray(problem.bounds, dtype=float)
    if bounds.ndim != 2 or bounds.shape[1] != 2:
        raise BoundsError(f"bounds must have shape (n_var, 2), got {bounds.shape}.")
    return bounds[:, 0].copy(), bounds[:, 1].copy()


def validate_problem(problem: ProblemProtocol | None) -> None:
    """Fail fast on structurally invalid problems."""
    if problem is None:
        raise ProblemDimensionError("No problem was supplied.")
    n_var = int(getattr(problem, "n_var", 0) or 0)
    n_obj = int(getattr(problem, "n_obj", 0) or 0)
    n_constr = int(getattr(problem, "n_constr", 0) or 0)
    if n_var <= 0:
        raise ProblemDimensionError("Problem must define at least one variable.", n_var=n_var, n_obj=n_obj)
    if n_obj <= 0:
        raise ProblemDimensionError("Problem must define at least one objective.", n_var=n_var, n_obj=n_obj)
    if n_constr < 0:
        raise ProblemDimensionError("Constraint count cannot be negative.", n_var=n_var, n_obj=n_obj)

    lower, upper = resolve_bounds(problem)
    if lower.shape[0] != n_var:
        raise BoundsError(f"bounds describe {lower.shape[0]} variables, problem declares {n_var}.")
    if not (np.all(np.isfinite(lower)) and np.all(np.isfinite(upper))):
        raise BoundsError("bounds must be finite.")
    if np.any(lower > upper):
        bad = np.flatnonzero(lower > upper).tolist()
        raise BoundsError(f"lower bound exceeds upper bound for variables {bad}.")


__all__ = ["ProblemProtocol", "Problem", "resolve_bounds", "validate_problem"]
