"""
Config loading utilities for programmatic entrypoints.

A run file looks like::

    algorithm:
      type: nsgaii
      parameters:
        populationSize: 60
        maxGenerations: 100
    parallel:
      enable_parallel: true
      n_workers: 4
"""

from __future__ import annotations

import json
import logging
from dataclasses import replace
from pathlib import Path
from typing import TYPE_CHECKING, Any, Dict, Tuple

import yaml

from mapo.foundation.eval.backends import ParallelConfig
from mapo.foundation.exceptions import ConfigurationError, MissingConfigError

if TYPE_CHECKING:  # pragma: no cover
    from mapo.engine.algorithm.registry import AlgorithmSpec
    from mapo.foundation.registry import Registry


def _logger() -> logging.Logger:
    return logging.getLogger(__name__)


def load_config_file(path: str | Path) -> Dict[str, Any]:
    """
    Load a YAML or JSON mapping.
    """
    spec_path = Path(path).expanduser().resolve()
    if not spec_path.exists():
        raise FileNotFoundError(f"Config file '{spec_path}' does not exist.")
    suffix = spec_path.suffix.lower()
    with spec_path.open("r", encoding="utf-8") as fh:
        if suffix in {".yaml", ".yml"}:
            data = yaml.safe_load(fh) or {}
        else:
            data = json.load(fh)
    if not isinstance(data, dict):
        raise ConfigurationError(f"Config file '{spec_path}' must contain a mapping at the top level.")
    _logger().debug("Loaded config file %s", spec_path)
    return data


def parse_run_config(data: Dict[str, Any], registry: "Registry[AlgorithmSpec]") -> Tuple[str, Any]:
    """
    Resolve ``{"algorithm": {...}, "parallel": {...}}`` into ``(name, config)``.

    The returned name is the registry's canonical key.
    """
    from mapo.engine.algorithm.registry import resolve_algorithm

    algorithm = data.get("algorithm")
    if not isinstance(algorithm, dict):
        raise MissingConfigError("algorithm", "run config")
    name = algorithm.get("type")
    if not name:
        raise MissingConfigError("algorithm.type", "run config")

    spec = resolve_algorithm(str(name), registry)
    canonical = registry.resolve_key(str(name)) or str(name)
    parameters = algorithm.get("parameters") or {}
    if not isinstance(parameters, dict):
        raise ConfigurationError("algorithm.parameters must be a mapping.")
    config = spec.parse_config(parameters)

    parallel = data.get("parallel")
    if parallel:
        if not isinstance(parallel, dict):
            raise ConfigurationError("parallel must be a mapping.")
        config = replace(config, parallel=ParallelConfig.from_dict(parallel))
    return canonical, config


def load_run_config(path: str | Path, registry: "Registry[AlgorithmSpec]") -> Tuple[str, Any]:
    """Load a run file and resolve it through ``registry``."""
    return parse_run_config(load_config_file(path), registry)


__all__ = ["load_config_file", "parse_run_config", "load_run_config"]
