"""PSO configuration."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Mapping

from mapo.foundation.exceptions import ConfigurationError
from .base import RunConfigData, _normalize_keys, _positive_int, _RunConfigBuilder

_ALIASES = {
    "swarmSize": "swarm_size",
    "maxIterations": "max_iterations",
    "inertiaWeight": "w",
    "cognitiveCoeff": "c1",
    "socialCoeff": "c2",
    "maxVelocityRatio": "v_max",
    "vMax": "v_max",
    "useExternalArchive": "use_external_archive",
    "archiveFactor": "archive_factor",
}

# Fallback velocity limit (fraction of the variable range).
DEFAULT_V_MAX = 0.2


@dataclass(frozen=True)
class PSOConfigData(RunConfigData):
    swarm_size: int = 30
    max_iterations: int = 200
    w: float = 0.7298
    c1: float = 1.49618
    c2: float = 1.49618
    v_max: float = DEFAULT_V_MAX
    use_external_archive: bool = False
    archive_factor: int = 2

    def __post_init__(self) -> None:
        self._validate_run_fields()
        _positive_int(self.swarm_size, "swarm_size")
        _positive_int(self.max_iterations, "max_iterations")
        _positive_int(self.archive_factor, "archive_factor")
        if float(self.c1) <= 0 or float(self.c2) <= 0:
            raise ConfigurationError(
                f"Acceleration coefficients must be positive, got c1={self.c1!r}, c2={self.c2!r}.",
                suggestion="Typical values are c1 = c2 = 1.49618",
            )


class PSOConfig(_RunConfigBuilder):
    """
    Declarative configuration holder for PSO settings.

    Examples:
        cfg = PSOConfig().swarm_size(40).max_iterations(150).v_max(0.1).fixed()
    """

    def swarm_size(self, value: int) -> "PSOConfig":
        self._cfg["swarm_size"] = value
        return self

    def max_iterations(self, value: int) -> "PSOConfig":
        self._cfg["max_iterations"] = value
        return self

    def w(self, value: float) -> "PSOConfig":
        self._cfg["w"] = value
        return self

    def c1(self, value: float) -> "PSOConfig":
        self._cfg["c1"] = value
        return self

    def c2(self, value: float) -> "PSOConfig":
        self._cfg["c2"] = value
        return self

    def v_max(self, value: float) -> "PSOConfig":
        self._cfg["v_max"] = value
        return self

    def use_external_archive(self, enabled: bool = True) -> "PSOConfig":
        self._cfg["use_external_archive"] = bool(enabled)
        return self

    def archive_factor(self, value: int) -> "PSOConfig":
        self._cfg["archive_factor"] = value
        return self

    def fixed(self) -> PSOConfigData:
        return PSOConfigData(**self._cfg)

    @classmethod
    def default(cls) -> PSOConfigData:
        return PSOConfigData()

    @classmethod
    def from_dict(cls, data: Mapping[str, Any] | None) -> PSOConfigData:
        """Build from a mapping; both snake_case and camelCase keys are accepted."""
        if not data:
            return cls.default()
        values: Dict[str, Any] = _normalize_keys(data, _ALIASES, PSOConfigData)
        return PSOConfigData(**values)


__all__ = ["PSOConfig", "PSOConfigData", "DEFAULT_V_MAX"]
