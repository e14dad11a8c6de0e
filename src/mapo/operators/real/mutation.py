"""Real-valued mutation operators."""

from __future__ import annotations

import numpy as np

from .utils import ArrayLike, as_vector, clip_to_bounds, ensure_bounds


def polynomial_mutation(
    x: ArrayLike,
    lower: ArrayLike,
    upper: ArrayLike,
    rng: np.random.Generator,
    *,
    mutation_rate: float = 1.0,
    eta: float = 20.0,
) -> np.ndarray:
    """
    Polynomial mutation (Deb & Goyal).

    Each variable mutates with probability ``mutation_rate / n_var``. The
    perturbation uses the normalized distances to both bounds, so a mutated
    value never leaves ``[lower, upper]``.
    """
    if eta <= 0:
        raise ValueError("Polynomial mutation distribution index must be positive.")
    y = as_vector(x, name="x").copy()
    n_var = y.size
    if n_var == 0:
        return y
    xl, xu = ensure_bounds(lower, upper, n_var)

    prob = float(mutation_rate) / n_var
    span = xu - xl
    mask = (rng.random(n_var) < prob) & (span > 0)
    u = rng.random(n_var)
    if not np.any(mask):
        return y

    safe_span = np.where(span > 0, span, 1.0)
    delta1 = np.clip((y - xl) / safe_span, 0.0, 1.0)
    delta2 = np.clip((xu - y) / safe_span, 0.0, 1.0)
    pow_ = 1.0 / (eta + 1.0)

    left = u <= 0.5
    deltaq = np.empty(n_var)
    val = 2.0 * u + (1.0 - 2.0 * u) * np.power(1.0 - delta1, eta + 1.0)
    deltaq[left] = np.power(val[left], pow_) - 1.0
    val = 2.0 * (1.0 - u) + 2.0 * (u - 0.5) * np.power(1.0 - delta2, eta + 1.0)
    deltaq[~left] = 1.0 - np.power(val[~left], pow_)

    y[mask] = y[mask] + deltaq[mask] * span[mask]
    return clip_to_bounds(y, xl, xu)


def uniform_mutation(
    x: ArrayLike,
    lower: ArrayLike,
    upper: ArrayLike,
    rng: np.random.Generator,
    *,
    mutation_rate: float = 0.1,
) -> np.ndarray:
    """Replace each variable, with probability ``mutation_rate``, by a uniform draw in its bounds."""
    y = as_vector(x, name="x").copy()
    xl, xu = ensure_bounds(lower, upper, y.size)
    mask = rng.random(y.size) < mutation_rate
    draws = xl + rng.random(y.size) * (xu - xl)
    y[mask] = draws[mask]
    return y


def gaussian_mutation(
    x: ArrayLike,
    lower: ArrayLike,
    upper: ArrayLike,
    rng: np.random.Generator,
    *,
    mutation_rate: float = 0.1,
    sigma: float = 0.1,
) -> np.ndarray:
    """Add ``N(0, (sigma * range)^2)`` noise to each variable with probability ``mutation_rate``."""
    y = as_vector(x, name="x").copy()
    xl, xu = ensure_bounds(lower, upper, y.size)
    mask = rng.random(y.size) < mutation_rate
    noise = sigma * (xu - xl) * rng.standard_normal(y.size)
    y[mask] = y[mask] + noise[mask]
    return clip_to_bounds(y, xl, xu)


__all__ = ["polynomial_mutation", "uniform_mutation", "gaussian_mutation"]
