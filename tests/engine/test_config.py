from __future__ import annotations

import json

import pytest

from mapo.engine.algorithm.config import NSGAIIConfig, NSGAIIConfigData, PSOConfig, PSOConfigData
from mapo.foundation.eval.backends import ParallelConfig
from mapo.foundation.exceptions import ConfigurationError


def test_nsgaii_builder_roundtrip():
    cfg = (
        NSGAIIConfig()
        .pop_size(60)
        .max_generations(40)
        .crossover_rate(0.8)
        .mutation_rate(1.5)
        .crossover_eta(15.0)
        .mutation_eta(25.0)
        .max_evaluations(1000)
        .seed(7)
        .fixed()
    )
    assert isinstance(cfg, NSGAIIConfigData)
    assert cfg.pop_size == 60
    assert cfg.mutation_eta == 25.0
    assert NSGAIIConfig.from_dict(cfg.to_dict()) == cfg
    assert json.loads(cfg.to_json())["max_generations"] == 40


def test_nsgaii_defaults():
    cfg = NSGAIIConfig.default()
    assert (cfg.pop_size, cfg.max_generations, cfg.crossover_rate, cfg.mutation_rate) == (100, 250, 0.9, 1.0)
    assert NSGAIIConfig.from_dict(None) == cfg
    assert cfg.termination().max_evaluations is None


def test_nsgaii_from_dict_accepts_camel_case():
    cfg = NSGAIIConfig.from_dict(
        {
            "populationSize": 24,
            "maxGenerations": 5,
            "crossoverRate": 0.7,
            "mutationDistIndex": 30,
            "maxEvaluations": 500,
            "targetObjectives": [0.1, 0.2],
        }
    )
    assert cfg.pop_size == 24
    assert cfg.mutation_eta == 30
    assert cfg.target_objectives == (0.1, 0.2)
    assert cfg.termination().max_evaluations == 500


def test_from_dict_rejects_unknown_keys():
    with pytest.raises(ConfigurationError, match="populationSise"):
        NSGAIIConfig.from_dict({"populationSise": 10})
    with pytest.raises(ConfigurationError):
        PSOConfig.from_dict({"pop_size": 10})


@pytest.mark.parametrize(
    "kwargs",
    [
        {"pop_size": 0},
        {"pop_size": 2.5},
        {"max_generations": -1},
        {"crossover_rate": 1.5},
        {"mutation_rate": -0.1},
        {"crossover_eta": 0.0},
        {"max_evaluations": 0},
        {"max_time": 0.0},
        {"log_every": 0},
    ],
)
def test_nsgaii_invalid_values(kwargs):
    with pytest.raises(ConfigurationError):
        NSGAIIConfigData(**kwargs)


def test_pso_builder_and_aliases():
    built = PSOConfig().swarm_size(40).max_iterations(150).w(0.5).c1(2.0).c2(1.0).v_max(0.1).use_external_archive().fixed()
    parsed = PSOConfig.from_dict(
        {
            "swarmSize": 40,
            "maxIterations": 150,
            "inertiaWeight": 0.5,
            "cognitiveCoeff": 2.0,
            "socialCoeff": 1.0,
            "maxVelocityRatio": 0.1,
            "useExternalArchive": True,
        }
    )
    assert built == parsed
    assert parsed.archive_factor == 2


def test_pso_defaults():
    cfg = PSOConfig.default()
    assert cfg.swarm_size == 30
    assert cfg.w == pytest.approx(0.7298)
    assert cfg.c1 == cfg.c2 == pytest.approx(1.49618)
    assert cfg.v_max == pytest.approx(0.2)
    assert not cfg.use_external_archive


@pytest.mark.parametrize("kwargs", [{"c1": 0.0}, {"c2": -1.0}, {"swarm_size": 0}, {"archive_factor": 0}])
def test_pso_invalid_values(kwargs):
    with pytest.raises(ConfigurationError):
        PSOConfigData(**kwargs)


def test_pso_tolerates_unusual_velocity_and_inertia():
    cfg = PSOConfigData(v_max=5.0, w=-0.1)
    assert cfg.v_max == 5.0


def test_parallel_section_in_mapping():
    cfg = NSGAIIConfig.from_dict({"parallel": {"enableParallel": True, "numWorkers": 2}})
    assert isinstance(cfg.parallel, ParallelConfig)
    assert cfg.parallel.enable_parallel
    built = PSOConfig().parallel({"enable_cache": True}).fixed()
    assert built.parallel.enable_cache
