"""
Algorithm registry.

Maps algorithm names to an :class:`AlgorithmSpec` (strategy factory plus the
config class used to parse mappings). Registries are built explicitly with
:func:`build_algorithm_registry` and handed to whoever needs them.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from difflib import get_close_matches
from typing import Any, Callable, Mapping

from mapo.engine.algorithm.components.protocol import Optimizer
from mapo.engine.algorithm.config import NSGAIIConfig, NSGAIIConfigData, PSOConfig, PSOConfigData
from mapo.foundation.eval.manager import ParallelEvaluationManager
from mapo.foundation.exceptions import ConfigurationError, InvalidAlgorithmError
from mapo.foundation.registry import Registry

from .nsgaii import NSGAII
from .pso import PSO

OptimizerFactory = Callable[..., Optimizer]


@dataclass(frozen=True)
class AlgorithmSpec:
    """
    Registry entry.

    Attributes:
        factory: ``factory(config, evaluation_manager=None, logger=None)`` returning a strategy.
        config_from_dict: Parses a parameter mapping into the strategy's config object.
        config_type: Concrete config class accepted by ``factory``.
    """

    factory: OptimizerFactory
    config_from_dict: Callable[[Mapping[str, Any] | None], Any]
    config_type: type

    def parse_config(self, config: Any) -> Any:
        if config is None or isinstance(config, Mapping):
            return self.config_from_dict(config)
        if not isinstance(config, self.config_type):
            raise ConfigurationError(
                f"Expected {self.config_type.__name__}, got {type(config).__name__}.",
                suggestion="Pass a mapping or the strategy's own config object",
            )
        return config

    def create(
        self,
        config: Any = None,
        *,
        evaluation_manager: ParallelEvaluationManager | None = None,
        logger: logging.Logger | None = None,
    ) -> Optimizer:
        return self.factory(self.parse_config(config), evaluation_manager=evaluation_manager, logger=logger)


def _suggest_names(name: str, options: list[str]) -> list[str]:
    if not name or not options:
        return []
    return get_close_matches(name.lower(), options, n=3, cutoff=0.6)


def build_algorithm_registry() -> Registry[AlgorithmSpec]:
    """Fresh registry holding the built-in strategies."""
    registry: Registry[AlgorithmSpec] = Registry("algorithms")
    registry.register(
        "nsgaii",
        AlgorithmSpec(NSGAII, NSGAIIConfig.from_dict, NSGAIIConfigData),
        aliases=("nsga2", "nsga-ii"),
    )
    registry.register("pso", AlgorithmSpec(PSO, PSOConfig.from_dict, PSOConfigData))
    return registry


def resolve_algorithm(name: str, registry: Registry[AlgorithmSpec]) -> AlgorithmSpec:
    """Look ``name`` up, raising :class:`InvalidAlgorithmError` with suggestions."""
    spec = registry.get(name, None)
    if spec is None:
        options = registry.list()
        error = InvalidAlgorithmError(name, options)
        suggestions = _suggest_names(name, options)
        if suggestions:
            error.details["did_you_mean"] = suggestions
        raise error
    return spec


__all__ = ["AlgorithmSpec", "build_algorithm_registry", "resolve_algorithm"]
