"""
PSO helper functions (velocity / position updates, leader selection).
"""

from __future__ import annotations

import logging
from typing import Any

import numpy as np

from mapo.engine.algorithm.components.individual import Individual
from mapo.engine.algorithm.components.population import Population, best_single_objective
from mapo.engine.algorithm.config.pso import DEFAULT_V_MAX

# Velocity factor applied to a component that hits a bound.
BOUNCE_DAMPING = -0.5


def resolve_v_max(v_max: Any, logger: logging.Logger) -> float:
    """Return ``v_max`` if usable, otherwise warn and fall back to the default."""
    try:
        value = float(v_max)
    except (TypeError, ValueError):
        value = float("nan")
    if not np.isfinite(value) or value <= 0.0 or value > 1.0:
        logger.warning("Invalid v_max %r; using %.2f of the variable range instead.", v_max, DEFAULT_V_MAX)
        return DEFAULT_V_MAX
    return value


def clamp_velocity(velocity: np.ndarray, limit: np.ndarray) -> np.ndarray:
    """Clamp each component to ``[-limit, limit]``."""
    return np.minimum(np.maximum(velocity, -limit), limit)


def update_velocity(
    velocity: np.ndarray,
    position: np.ndarray,
    personal_best: np.ndarray,
    global_best: np.ndarray,
    rng: np.random.Generator,
    *,
    w: float,
    c1: float,
    c2: float,
    limit: np.ndarray,
) -> np.ndarray:
    """
    Canonical velocity update followed by clamping.

    ``v = w*v + c1*r1*(pbest - x) + c2*r2*(gbest - x)`` with fresh uniform
    ``r1`` / ``r2`` per component.
    """
    r1 = rng.random(position.shape)
    r2 = rng.random(position.shape)
    new_v = w * velocity + c1 * r1 * (personal_best - position) + c2 * r2 * (global_best - position)
    return clamp_velocity(new_v, limit)


def apply_bounds(
    position: np.ndarray,
    velocity: np.ndarray,
    lower: np.ndarray,
    upper: np.ndarray,
) -> tuple[np.ndarray, np.ndarray]:
    """
    Damped bounce: components that leave the box are clamped to the bound and
    their velocity is reversed and halved.
    """
    x = position.copy()
    v = velocity.copy()
    below = x < lower
    above = x > upper
    x[below] = lower[below]
    x[above] = upper[above]
    out = below | above
    v[out] = BOUNCE_DAMPING * v[out]
    return x, v


def improves(candidate: Individual, incumbent: Individual) -> bool:
    """Dominance, or for one objective a strictly smaller value."""
    if candidate.dominates(incumbent):
        return True
    return candidate.n_obj == 1 and candidate.objective(0) < incumbent.objective(0)


def iteration_record(
    swarm: Population,
    leader: Individual | None,
    evaluations: int,
    archive_size: int | None,
) -> dict[str, Any]:
    record: dict[str, Any] = {"evaluations": evaluations}
    if leader is not None:
        record["best_objectives"] = leader.objectives.copy()
        record["best_feasible"] = leader.is_feasible()
    stats = swarm.get_statistics()
    if stats.get("evaluated"):
        record["feasible_ratio"] = stats["feasible_ratio"]
        record["objective_mean"] = stats["objective_mean"]
        record["objective_std"] = stats["objective_std"]
    if archive_size is not None:
        record["archive_size"] = archive_size
    return record


__all__ = [
    "BOUNCE_DAMPING",
    "resolve_v_max",
    "clamp_velocity",
    "update_velocity",
    "apply_bounds",
    "improves",
    "best_single_objective",
    "iteration_record",
]
