import logging

import numpy as np
import pytest

import mapo
from mapo import NSGAIIConfig, OptimizationResult, ParallelConfig, ParallelEvaluationManager, PSOConfig, optimize
from mapo.foundation.exceptions import ConfigurationError, InvalidAlgorithmError


def _nsgaii_cfg():
    return NSGAIIConfig().pop_size(8).max_generations(3).seed(1).verbose(False).fixed()


def test_optimize_explicit_algorithm_nsga2(zdt1_problem, zdt1_evaluator):
    result = optimize(zdt1_problem, zdt1_evaluator, "nsga2", _nsgaii_cfg())
    assert isinstance(result, OptimizationResult)
    assert result.algorithm_name == "NSGA-II"
    assert result.F.shape[1] == zdt1_problem.n_obj
    assert result.X.shape[1] == zdt1_problem.n_var
    assert result.evaluations == 8 * 4


def test_optimize_pso_from_mapping(sphere_problem, sphere_evaluator):
    result = optimize(sphere_problem, sphere_evaluator, "pso", {"swarmSize": 6, "maxIterations": 4, "seed": 2})
    assert result.algorithm_name == "PSO"
    assert result.evaluations == 30
    assert result.best_solution.shape == (3,)


def test_optimize_defaults_to_nsgaii(zdt1_problem, zdt1_evaluator):
    result = optimize(zdt1_problem, zdt1_evaluator, config={"pop_size": 6, "max_generations": 1, "verbose": False})
    assert result.algorithm_name == "NSGA-II"


def test_optimize_unknown_algorithm(zdt1_problem, zdt1_evaluator):
    with pytest.raises(InvalidAlgorithmError):
        optimize(zdt1_problem, zdt1_evaluator, "moead")


def test_optimize_config_mismatch(zdt1_problem, zdt1_evaluator):
    with pytest.raises(ConfigurationError):
        optimize(zdt1_problem, zdt1_evaluator, "pso", _nsgaii_cfg())


def test_optimize_reuses_shared_manager(sphere_problem, sphere_evaluator):
    manager = ParallelEvaluationManager(ParallelConfig(enable_cache=True))
    cfg = PSOConfig().swarm_size(5).max_iterations(2).seed(3).verbose(False).fixed()

    optimize(sphere_problem, sphere_evaluator, "pso", cfg, evaluation_manager=manager)
    calls = sphere_evaluator.calls
    optimize(sphere_problem, sphere_evaluator, "pso", cfg, evaluation_manager=manager)

    assert sphere_evaluator.calls == calls
    assert manager.get_statistics()["cache_hits"] == 15


def test_optimize_uses_given_logger(zdt1_problem, zdt1_evaluator, caplog):
    logger = logging.getLogger("mapo.tests.custom")
    caplog.set_level(logging.INFO, logger="mapo.tests.custom")
    optimize(zdt1_problem, zdt1_evaluator, "nsgaii", _nsgaii_cfg(), logger=logger)
    assert any(rec.name == "mapo.tests.custom" and "Starting optimization" in rec.getMessage() for rec in caplog.records)


def test_result_summary(zdt1_problem, zdt1_evaluator):
    result = optimize(zdt1_problem, zdt1_evaluator, "nsgaii", _nsgaii_cfg())
    summary = result.summary()
    assert summary["problem"] == "zdt1"
    assert summary["final_population_size"] == 8
    assert summary["pareto_front_size"] == len(result.pareto_front)
    assert summary["total_evaluated_solutions"] == 32
    assert np.all(np.isfinite(result.F))


def test_public_api_exports():
    for name in mapo.__all__:
        assert hasattr(mapo, name), name
    assert mapo.__version__
