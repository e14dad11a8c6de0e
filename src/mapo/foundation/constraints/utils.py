"""
Utility helpers for constraint handling.

Convention: a constraint value g <= 0 is satisfied, g > 0 is violated by g.
"""

from __future__ import annotations

import numpy as np


def total_violation(g: np.ndarray | None) -> float:
    """Sum of positive parts of a single constraint vector (0.0 when empty)."""
    if g is None:
        return 0.0
    arr = np.asarray(g, dtype=float).reshape(-1)
    if arr.size == 0:
        return 0.0
    return float(np.sum(np.maximum(arr, 0.0)))


__all__ = ["total_violation"]
