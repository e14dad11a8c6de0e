"""Real-valued crossover operators.

All operators are stateless: they take parent decision vectors, the variable
bounds and a ``numpy.random.Generator`` and return new arrays. Parents are
never modified in place.
"""

from __future__ import annotations

import numpy as np

from .utils import ArrayLike, check_pair, clip_to_bounds

# Parents closer than this on a variable are treated as identical.
SBX_EPS = 1.0e-14


def sbx_crossover(
    parent1: ArrayLike,
    parent2: ArrayLike,
    lower: ArrayLike,
    upper: ArrayLike,
    rng: np.random.Generator,
    *,
    eta: float = 20.0,
    prob_var: float = 0.5,
) -> tuple[np.ndarray, np.ndarray]:
    """
    Simulated Binary Crossover (Deb & Agrawal).

    Each variable is crossed independently with probability ``prob_var``.
    Variables on which the parents coincide are copied unchanged. Children are
    produced symmetrically around the parents' midpoint and clamped to bounds.

    Parameters
    ----------
    parent1, parent2 : array-like
        Parent decision vectors of equal length.
    lower, upper : array-like
        Variable bounds.
    rng : numpy.random.Generator
        Source of randomness.
    eta : float
        Distribution index (> 0); larger values keep children closer to parents.
    prob_var : float
        Per-variable crossover probability.

    Returns
    -------
    tuple of numpy.ndarray
        ``(child1, child2)``.
    """
    if eta <= 0:
        raise ValueError("SBX distribution index must be positive.")
    p1, p2, xl, xu = check_pair(parent1, parent2, lower, upper)
    child1 = p1.copy()
    child2 = p2.copy()
    n_var = p1.size
    if n_var == 0:
        return child1, child2

    active = (rng.random(n_var) <= prob_var) & (np.abs(p1 - p2) >= SBX_EPS)
    u = rng.random(n_var)
    if not np.any(active):
        return child1, child2

    inv = 1.0 / (eta + 1.0)
    betaq = np.where(
        u <= 0.5,
        np.power(2.0 * u, inv),
        np.power(1.0 / (2.0 * np.maximum(1.0 - u, SBX_EPS)), inv),
    )
    y1 = np.minimum(p1, p2)
    y2 = np.maximum(p1, p2)
    c1 = 0.5 * ((y1 + y2) - betaq * (y2 - y1))
    c2 = 0.5 * ((y1 + y2) + betaq * (y2 - y1))

    child1[active] = c1[active]
    child2[active] = c2[active]
    return clip_to_bounds(child1, xl, xu), clip_to_bounds(child2, xl, xu)


def uniform_crossover(
    parent1: ArrayLike,
    parent2: ArrayLike,
    lower: ArrayLike,
    upper: ArrayLike,
    rng: np.random.Generator,
) -> np.ndarray:
    """Each gene is inherited from either parent with probability 0.5."""
    p1, p2, xl, xu = check_pair(parent1, parent2, lower, upper)
    mask = rng.random(p1.size) < 0.5
    return clip_to_bounds(np.where(mask, p1, p2), xl, xu)


def single_point_crossover(
    parent1: ArrayLike,
    parent2: ArrayLike,
    lower: ArrayLike,
    upper: ArrayLike,
    rng: np.random.Generator,
) -> np.ndarray:
    """Head of ``parent1`` up to a random cut point, tail of ``parent2`` after it."""
    p1, p2, xl, xu = check_pair(parent1, parent2, lower, upper)
    n_var = p1.size
    if n_var < 2:
        return p1.copy()
    cut = int(rng.integers(1, n_var))
    child = np.concatenate([p1[:cut], p2[cut:]])
    return clip_to_bounds(child, xl, xu)


__all__ = ["sbx_crossover", "uniform_crossover", "single_point_crossover", "SBX_EPS"]
