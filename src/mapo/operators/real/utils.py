"""Shared helpers for real-coded operators."""

from __future__ import annotations

from typing import Sequence, Union

import numpy as np

ArrayLike = Union[np.ndarray, Sequence[float]]


def as_vector(values: ArrayLike, *, name: str = "vector") -> np.ndarray:
    arr = np.asarray(values, dtype=float)
    if arr.ndim != 1:
        arr = arr.reshape(-1)
    if not np.all(np.isfinite(arr)):
        raise ValueError(f"{name} contains non-finite values.")
    return arr


def ensure_bounds(lower: ArrayLike, upper: ArrayLike, n_var: int) -> tuple[np.ndarray, np.ndarray]:
    xl = np.asarray(lower, dtype=float).reshape(-1)
    xu = np.asarray(upper, dtype=float).reshape(-1)
    if xl.size == 1 and n_var > 1:
        xl = np.full(n_var, xl[0])
    if xu.size == 1 and n_var > 1:
        xu = np.full(n_var, xu[0])
    if xl.size != n_var or xu.size != n_var:
        raise ValueError(f"Bounds must have length {n_var}, got {xl.size} and {xu.size}.")
    if np.any(xl > xu):
        raise ValueError("Lower bounds must not exceed upper bounds.")
    return xl, xu


def check_pair(
    parent1: ArrayLike, parent2: ArrayLike, lower: ArrayLike, upper: ArrayLike
) -> tuple[np.ndarray, np.ndarray, np.ndarray, np.ndarray]:
    p1 = as_vector(parent1, name="parent1")
    p2 = as_vector(parent2, name="parent2")
    if p1.size != p2.size:
        raise ValueError(f"Parents must have the same length, got {p1.size} and {p2.size}.")
    xl, xu = ensure_bounds(lower, upper, p1.size)
    return p1, p2, xl, xu


def clip_to_bounds(x: np.ndarray, lower: np.ndarray, upper: np.ndarray) -> np.ndarray:
    return np.minimum(np.maximum(x, lower), upper)


__all__ = ["ArrayLike", "as_vector", "ensure_bounds", "check_pair", "clip_to_bounds"]
