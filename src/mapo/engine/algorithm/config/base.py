"""Base utilities for algorithm configuration."""

from __future__ import annotations

import json
from dataclasses import asdict, dataclass, fields
from typing import Any, Dict, Mapping, Optional, Tuple

from mapo.engine.algorithm.components.termination import TerminationConfig
from mapo.foundation.eval.backends import ParallelConfig
from mapo.foundation.exceptions import ConfigurationError

# camelCase spellings accepted by every ``from_dict``.
_RUN_ALIASES: Dict[str, str] = {
    "maxEvaluations": "max_evaluations",
    "maxTime": "max_time",
    "targetObjectives": "target_objectives",
    "targetObjective": "target_objectives",
    "logEvery": "log_every",
}


class _SerializableConfig:
    """Mixin to serialize dataclass configs."""

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    def to_json(self) -> str:
        return json.dumps(self.to_dict(), sort_keys=True)


def _normalize_keys(data: Mapping[str, Any], aliases: Mapping[str, str], cls: type) -> Dict[str, Any]:
    """Map camelCase aliases onto field names and reject unknown keys."""
    table = {**_RUN_ALIASES, **aliases}
    out: Dict[str, Any] = {}
    for key, value in data.items():
        out[table.get(key, key)] = value
    known = {f.name for f in fields(cls)}
    unknown = sorted(set(out) - known)
    if unknown:
        raise ConfigurationError(
            f"Unknown {cls.__name__} keys: {', '.join(unknown)}",
            suggestion=f"Valid keys: {', '.join(sorted(known))}",
        )
    if isinstance(out.get("parallel"), Mapping):
        out["parallel"] = ParallelConfig.from_dict(dict(out["parallel"]))
    if out.get("target_objectives") is not None:
        out["target_objectives"] = tuple(float(v) for v in out["target_objectives"])
    return out


def _positive_int(value: Any, name: str) -> None:
    if isinstance(value, bool) or int(value) != value or int(value) <= 0:
        raise ConfigurationError(f"{name} must be a positive integer, got {value!r}.")


def _unit_interval(value: Any, name: str) -> None:
    if not 0.0 <= float(value) <= 1.0:
        raise ConfigurationError(f"{name} must lie in [0, 1], got {value!r}.")


@dataclass(frozen=True)
class RunConfigData(_SerializableConfig):
    """
    Run-limit fields shared by every strategy.

    ``max_evaluations`` / ``max_time`` / ``target_objectives`` are optional
    early-stop limits; the strategy's own iteration count is the natural end.
    """

    max_evaluations: Optional[int] = None
    max_time: Optional[float] = None
    target_objectives: Optional[Tuple[float, ...]] = None
    verbose: bool = True
    log_every: int = 10
    seed: Optional[int] = None
    parallel: Optional[ParallelConfig] = None

    def _validate_run_fields(self) -> None:
        if self.max_evaluations is not None:
            _positive_int(self.max_evaluations, "max_evaluations")
        if self.max_time is not None and float(self.max_time) <= 0:
            raise ConfigurationError(f"max_time must be positive, got {self.max_time!r}.")
        _positive_int(self.log_every, "log_every")

    def termination(self) -> TerminationConfig:
        return TerminationConfig(
            max_evaluations=self.max_evaluations,
            max_time=self.max_time,
            target_objectives=self.target_objectives,
        )


class _RunConfigBuilder:
    """Fluent setters for the shared run-limit fields."""

    def __init__(self) -> None:
        self._cfg: Dict[str, Any] = {}

    def max_evaluations(self, value: int | None):
        self._cfg["max_evaluations"] = value
        return self

    def max_time(self, seconds: float | None):
        self._cfg["max_time"] = seconds
        return self

    def target_objectives(self, values: Tuple[float, ...] | list[float] | None):
        self._cfg["target_objectives"] = None if values is None else tuple(float(v) for v in values)
        return self

    def verbose(self, enabled: bool = True):
        self._cfg["verbose"] = bool(enabled)
        return self

    def log_every(self, value: int):
        self._cfg["log_every"] = value
        return self

    def seed(self, value: int | None):
        self._cfg["seed"] = value
        return self

    def parallel(self, config: ParallelConfig | Mapping[str, Any] | None):
        if isinstance(config, Mapping):
            config = ParallelConfig.from_dict(dict(config))
        self._cfg["parallel"] = config
        return self


__all__ = ["RunConfigData", "_SerializableConfig"]
