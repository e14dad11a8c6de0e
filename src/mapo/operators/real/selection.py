"""Parent selection operators working on ranked individuals."""

from __future__ import annotations

from typing import Any, Sequence, TypeVar

import numpy as np

T = TypeVar("T")


def _better(a: Any, b: Any) -> bool:
    """Crowded-comparison: lower rank first, then larger crowding distance."""
    if a.rank != b.rank:
        return a.rank < b.rank
    return a.crowding_distance > b.crowding_distance


def binary_tournament(individuals: Sequence[T], rng: np.random.Generator) -> T:
    """
    Pick two members uniformly with replacement and return the better one.

    Ties on both rank and crowding distance go to the second draw.
    """
    n = len(individuals)
    if n == 0:
        raise ValueError("Cannot run a tournament on an empty selection pool.")
    first = individuals[int(rng.integers(n))]
    second = individuals[int(rng.integers(n))]
    return first if _better(first, second) else second


def tournament_selection(individuals: Sequence[T], rng: np.random.Generator, tournament_size: int = 2) -> T:
    """k-ary tournament over distinct members (the pool size caps ``tournament_size``)."""
    n = len(individuals)
    if n == 0:
        raise ValueError("Cannot run a tournament on an empty selection pool.")
    if tournament_size < 1:
        raise ValueError("tournament_size must be at least 1.")
    k = min(int(tournament_size), n)
    picks = rng.choice(n, size=k, replace=False)
    winner = individuals[int(picks[0])]
    for idx in picks[1:]:
        challenger = individuals[int(idx)]
        if _better(challenger, winner):
            winner = challenger
    return winner


def roulette_wheel_selection(individuals: Sequence[T], fitness: Sequence[float], rng: np.random.Generator) -> T:
    """Fitness-proportional selection (larger fitness is better)."""
    n = len(individuals)
    if n == 0:
        raise ValueError("Cannot select from an empty pool.")
    weights = np.asarray(fitness, dtype=float).reshape(-1)
    if weights.size != n:
        raise ValueError(f"Expected {n} fitness values, got {weights.size}.")
    if np.any(weights < 0) or not np.all(np.isfinite(weights)):
        raise ValueError("Fitness values must be finite and non-negative.")
    total = weights.sum()
    if total == 0:
        return individuals[int(rng.integers(n))]
    cumulative = np.cumsum(weights / total)
    idx = int(np.searchsorted(cumulative, rng.random(), side="left"))
    return individuals[min(idx, n - 1)]


__all__ = ["binary_tournament", "tournament_selection", "roulette_wheel_selection"]
