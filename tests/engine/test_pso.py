from __future__ import annotations

import logging

import numpy as np
import pytest

from mapo.engine.algorithm.config import PSOConfig
from mapo.engine.algorithm.pso import PSO
from mapo.engine.algorithm.pso.helpers import (
    apply_bounds,
    best_single_objective,
    clamp_velocity,
    improves,
    resolve_v_max,
    update_velocity,
)
from mapo.engine.algorithm.components import RunCallbacks


def _config(**overrides):
    base = {"swarm_size": 10, "max_iterations": 15, "seed": 11, "verbose": False}
    base.update(overrides)
    return PSOConfig.from_dict(base)


def test_sphere_run_counts_and_improvement(sphere_problem, sphere_evaluator):
    algo = PSO(_config())
    result = algo.run(sphere_problem, sphere_evaluator)

    assert result.algorithm_name == "PSO"
    assert result.evaluations == 10 * (15 + 1)
    assert sphere_evaluator.calls == 160
    assert result.iterations == 15
    assert result.stop_reason == "completed"
    assert result.archive is None
    assert len(result.history) == 15
    assert result.extra["v_max"] == pytest.approx(0.2)

    final_personal_best = min(ind.objective(0) for ind in result.extra["personal_best"])
    assert result.best_objectives[0] == pytest.approx(final_personal_best)
    assert result.best_objectives[0] < 10.0


def test_velocity_and_position_limits(sphere_problem, sphere_evaluator):
    algo = PSO(_config(v_max=0.1, max_iterations=20))
    result = algo.run(sphere_problem, sphere_evaluator)

    limit = 0.1 * 10.0
    assert np.all(np.abs(algo.velocities) <= limit + 1e-12)
    X = result.final_population.variables_matrix()
    assert np.all((X >= -5.0) & (X <= 5.0))


def test_personal_best_never_worsens(sphere_problem, sphere_evaluator):
    history = []
    algo = PSO(_config())

    def snapshot(iteration, data):
        history.append([ind.objective(0) for ind in algo.personal_best])

    algo.run(sphere_problem, sphere_evaluator, callbacks=RunCallbacks(on_iteration_end=snapshot))

    for before, after in zip(history, history[1:]):
        assert all(a <= b for a, b in zip(after, before))


def test_multi_objective_enables_bounded_archive(zdt1_problem, zdt1_evaluator):
    algo = PSO(_config(max_iterations=20))
    result = algo.run(zdt1_problem, zdt1_evaluator)

    assert result.archive is not None
    assert 0 < len(result.archive) <= 2 * 10
    members = list(result.archive)
    assert not any(a.dominates(b) for a in members for b in members if a is not b)
    assert len(result.pareto_front) == len(result.archive)
    assert all(ind.rank == 1 for ind in result.pareto_front)
    assert all("archive_size" in entry for entry in result.history)


def test_archive_factor_controls_capacity(zdt1_problem, zdt1_evaluator):
    result = PSO(_config(archive_factor=1, max_iterations=25)).run(zdt1_problem, zdt1_evaluator)
    assert len(result.archive) <= 10


def test_single_objective_archive_on_request(sphere_problem, sphere_evaluator):
    result = PSO(_config(use_external_archive=True)).run(sphere_problem, sphere_evaluator)
    assert result.archive is not None
    assert len(result.archive) == 1


def test_invalid_v_max_falls_back_with_warning(sphere_problem, sphere_evaluator, caplog):
    with caplog.at_level(logging.WARNING):
        result = PSO(_config(v_max=1.5, max_iterations=2)).run(sphere_problem, sphere_evaluator)
    assert result.extra["v_max"] == pytest.approx(0.2)
    assert any("Invalid v_max" in rec.getMessage() for rec in caplog.records)


def test_negative_inertia_warns(sphere_problem, sphere_evaluator, caplog):
    with caplog.at_level(logging.WARNING):
        PSO(_config(w=-0.2, max_iterations=2)).run(sphere_problem, sphere_evaluator)
    assert any("Negative inertia weight" in rec.getMessage() for rec in caplog.records)


def test_same_seed_same_result(sphere_problem, sphere_evaluator):
    first = PSO(_config()).run(sphere_problem, sphere_evaluator)
    second = PSO(_config()).run(sphere_problem, sphere_evaluator)
    np.testing.assert_array_equal(first.best_solution, second.best_solution)


def test_max_evaluations_stop(sphere_problem, sphere_evaluator):
    result = PSO(_config(max_evaluations=35)).run(sphere_problem, sphere_evaluator)
    assert result.stop_reason == "max_evaluations"
    assert result.iterations == 3
    assert result.evaluations == 40


def test_constrained_leader_prefers_feasible(constrained_problem, constrained_evaluator):
    result = PSO(_config(max_iterations=10)).run(constrained_problem, constrained_evaluator)
    assert all(ind.is_feasible() for ind in result.pareto_front)


class TestHelpers:
    def test_apply_bounds_bounces(self):
        x, v = apply_bounds(
            np.array([1.5, -0.2, 0.5]),
            np.array([1.0, -0.4, 0.3]),
            np.zeros(3),
            np.ones(3),
        )
        np.testing.assert_allclose(x, [1.0, 0.0, 0.5])
        np.testing.assert_allclose(v, [-0.5, 0.2, 0.3])

    def test_update_velocity_is_clamped(self, rng):
        limit = np.array([0.1, 0.1])
        v = update_velocity(
            np.array([5.0, -5.0]),
            np.zeros(2),
            np.ones(2),
            -np.ones(2),
            rng,
            w=1.0,
            c1=2.0,
            c2=2.0,
            limit=limit,
        )
        assert np.all(np.abs(v) <= limit)

    def test_update_velocity_without_attraction_keeps_inertia(self, rng):
        x = np.array([0.3, 0.6])
        v = update_velocity(np.array([0.02, -0.01]), x, x, x, rng, w=0.5, c1=1.5, c2=1.5, limit=np.ones(2))
        np.testing.assert_allclose(v, [0.01, -0.005])

    def test_clamp_velocity(self):
        np.testing.assert_array_equal(clamp_velocity(np.array([2.0, -2.0, 0.1]), np.array([1.0, 1.0, 1.0])), [1.0, -1.0, 0.1])

    @pytest.mark.parametrize("value", [0.0, -0.3, 1.5, float("nan"), "fast", None])
    def test_resolve_v_max_fallback(self, value):
        assert resolve_v_max(value, logging.getLogger("test")) == pytest.approx(0.2)

    def test_resolve_v_max_keeps_valid(self):
        assert resolve_v_max(0.5, logging.getLogger("test")) == 0.5

    def test_improves(self, make_individual):
        assert improves(make_individual([1.0]), make_individual([2.0]))
        assert not improves(make_individual([2.0]), make_individual([2.0]))
        assert improves(make_individual([3.0], [1.0]), make_individual([5.0], [0.0]))
        assert improves(make_individual([5.0], [0.0]), make_individual([5.0], [1.0]))
        assert improves(make_individual([0.5, 0.5]), make_individual([1.0, 1.0]))
        assert not improves(make_individual([0.5, 2.0]), make_individual([1.0, 1.0]))

    def test_best_single_objective(self, make_individual):
        pool = [make_individual([0.1], [1.0]), make_individual([3.0], [0.0]), make_individual([2.0], [0.0])]
        assert best_single_objective(pool).objective(0) == 2.0

    def test_best_single_objective_when_all_infeasible(self, make_individual):
        loose = make_individual([1.0], [5.0])
        tight = make_individual([2.0], [1.0])
        leader = best_single_objective([loose, tight])
        assert leader is tight
        assert not any(other.dominates(leader) for other in (loose, tight))
