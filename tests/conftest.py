from __future__ import annotations

import threading

import numpy as np
import pytest

from mapo.engine.algorithm.components.individual import Individual
from mapo.foundation.problem import Problem


class SphereEvaluator:
    """Single objective: sum of squares."""

    def __init__(self) -> None:
        self.calls = 0
        self._lock = threading.Lock()

    def evaluate(self, x):
        with self._lock:
            self.calls += 1
        return [float(np.sum(np.asarray(x) ** 2))]


class ZDT1Evaluator:
    def __init__(self) -> None:
        self.calls = 0
        self._lock = threading.Lock()

    def evaluate(self, x):
        with self._lock:
            self.calls += 1
        x = np.asarray(x, dtype=float)
        f1 = x[0]
        g = 1.0 + 9.0 * np.mean(x[1:])
        f2 = g * (1.0 - np.sqrt(f1 / g))
        return {"objectives": [f1, f2], "constraints": [], "success": True}


class ConstrainedEvaluator:
    """Two objectives on [0, 1]^2 with feasible region x0 + x1 >= 0.5."""

    def evaluate(self, x):
        x = np.asarray(x, dtype=float)
        return {
            "objectives": [x[0], x[1]],
            "constraints": [0.5 - x[0] - x[1]],
        }


class FailEveryThirdEvaluator:
    """Returns the row sum, but raises on every third call."""

    def __init__(self) -> None:
        self.calls = 0
        self._lock = threading.Lock()

    def evaluate(self, x):
        with self._lock:
            self.calls += 1
            call = self.calls
        if call % 3 == 0:
            raise RuntimeError(f"simulated failure on call {call}")
        return [float(np.sum(x))]


@pytest.fixture
def sphere_problem() -> Problem:
    return Problem.from_bounds("sphere", [-5.0] * 3, [5.0] * 3, n_obj=1)


@pytest.fixture
def zdt1_problem() -> Problem:
    return Problem.from_bounds("zdt1", [0.0] * 6, [1.0] * 6, n_obj=2)


@pytest.fixture
def constrained_problem() -> Problem:
    return Problem.from_bounds("constrained", [0.0, 0.0], [1.0, 1.0], n_obj=2, n_constr=1)


@pytest.fixture
def sphere_evaluator() -> SphereEvaluator:
    return SphereEvaluator()


@pytest.fixture
def zdt1_evaluator() -> ZDT1Evaluator:
    return ZDT1Evaluator()


@pytest.fixture
def constrained_evaluator() -> ConstrainedEvaluator:
    return ConstrainedEvaluator()


@pytest.fixture
def failing_evaluator() -> FailEveryThirdEvaluator:
    return FailEveryThirdEvaluator()


@pytest.fixture
def make_individual():
    """Factory for evaluated individuals: ``make_individual(objectives, constraints=(), variables=None)``."""

    def _make(objectives, constraints=(), variables=None) -> Individual:
        objectives = list(objectives)
        if variables is None:
            variables = [float(v) for v in objectives]
        ind = Individual(variables)
        ind.set_evaluation(objectives, list(constraints))
        return ind

    return _make


@pytest.fixture
def rng() -> np.random.Generator:
    return np.random.default_rng(12345)
