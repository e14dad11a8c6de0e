from __future__ import annotations

import threading
from typing import Iterable

import numpy as np

from . import EvaluationResult


def cache_key(x: Iterable[float], precision: int = 8) -> str:
    """Fixed-precision string key for a decision vector."""
    return "_".join(f"{float(v):.{precision}g}" for v in np.asarray(x, dtype=float).reshape(-1))


class EvaluationCache:
    """
    Result cache keyed by decision vector.

    Only successful results are stored. All access is serialized with a lock
    so one cache can be shared by concurrent batches.
    """

    def __init__(self, precision: int = 8) -> None:
        self.precision = int(precision)
        self._entries: dict[str, EvaluationResult] = {}
        self._lock = threading.Lock()
        self.hits = 0
        self.misses = 0

    def key(self, x: Iterable[float]) -> str:
        return cache_key(x, self.precision)

    def get(self, x: Iterable[float]) -> EvaluationResult | None:
        key = self.key(x)
        with self._lock:
            entry = self._entries.get(key)
            if entry is None:
                self.misses += 1
                return None
            self.hits += 1
        return EvaluationResult(entry.objectives.copy(), entry.constraints.copy(), entry.success, entry.message)

    def put(self, x: Iterable[float], result: EvaluationResult) -> bool:
        """Store *result* if it reports success; returns whether it was stored."""
        if not result.success:
            return False
        stored = EvaluationResult(result.objectives.copy(), result.constraints.copy(), True, result.message)
        key = self.key(x)
        with self._lock:
            self._entries[key] = stored
        return True

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()
            self.hits = 0
            self.misses = 0

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)

    def __contains__(self, x: object) -> bool:
        key = self.key(x)  # type: ignore[arg-type]
        with self._lock:
            return key in self._entries


__all__ = ["EvaluationCache", "cache_key"]
