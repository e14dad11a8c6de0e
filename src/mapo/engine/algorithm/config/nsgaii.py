"""NSGA-II configuration."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Mapping

from mapo.foundation.exceptions import ConfigurationError
from .base import RunConfigData, _normalize_keys, _positive_int, _RunConfigBuilder, _unit_interval

_ALIASES = {
    "populationSize": "pop_size",
    "popSize": "pop_size",
    "maxGenerations": "max_generations",
    "crossoverRate": "crossover_rate",
    "mutationRate": "mutation_rate",
    "crossoverDistIndex": "crossover_eta",
    "mutationDistIndex": "mutation_eta",
    "crossoverEta": "crossover_eta",
    "mutationEta": "mutation_eta",
}


@dataclass(frozen=True)
class NSGAIIConfigData(RunConfigData):
    pop_size: int = 100
    max_generations: int = 250
    crossover_rate: float = 0.9
    mutation_rate: float = 1.0
    crossover_eta: float = 20.0
    mutation_eta: float = 20.0

    def __post_init__(self) -> None:
        self._validate_run_fields()
        _positive_int(self.pop_size, "pop_size")
        _positive_int(self.max_generations, "max_generations")
        _unit_interval(self.crossover_rate, "crossover_rate")
        if float(self.mutation_rate) < 0:
            raise ConfigurationError(f"mutation_rate cannot be negative, got {self.mutation_rate!r}.")
        if float(self.crossover_eta) <= 0 or float(self.mutation_eta) <= 0:
            raise ConfigurationError("Distribution indices must be positive.")


class NSGAIIConfig(_RunConfigBuilder):
    """
    Declarative configuration holder for NSGA-II settings.

    Examples:
        cfg = NSGAIIConfig().pop_size(60).max_generations(100).crossover_rate(0.9).fixed()
    """

    def pop_size(self, value: int) -> "NSGAIIConfig":
        self._cfg["pop_size"] = value
        return self

    def max_generations(self, value: int) -> "NSGAIIConfig":
        self._cfg["max_generations"] = value
        return self

    def crossover_rate(self, value: float) -> "NSGAIIConfig":
        self._cfg["crossover_rate"] = value
        return self

    def mutation_rate(self, value: float) -> "NSGAIIConfig":
        self._cfg["mutation_rate"] = value
        return self

    def crossover_eta(self, value: float) -> "NSGAIIConfig":
        self._cfg["crossover_eta"] = value
        return self

    def mutation_eta(self, value: float) -> "NSGAIIConfig":
        self._cfg["mutation_eta"] = value
        return self

    def fixed(self) -> NSGAIIConfigData:
        return NSGAIIConfigData(**self._cfg)

    @classmethod
    def default(cls) -> NSGAIIConfigData:
        return NSGAIIConfigData()

    @classmethod
    def from_dict(cls, data: Mapping[str, Any] | None) -> NSGAIIConfigData:
        """Build from a mapping; both snake_case and camelCase keys are accepted."""
        if not data:
            return cls.default()
        values: Dict[str, Any] = _normalize_keys(data, _ALIASES, NSGAIIConfigData)
        return NSGAIIConfigData(**values)


__all__ = ["NSGAIIConfig", "NSGAIIConfigData"]
