"""Typed configuration objects for the built-in strategies."""

from .base import RunConfigData
from .nsgaii import NSGAIIConfig, NSGAIIConfigData
from .pso import DEFAULT_V_MAX, PSOConfig, PSOConfigData

__all__ = [
    "RunConfigData",
    "NSGAIIConfig",
    "NSGAIIConfigData",
    "PSOConfig",
    "PSOConfigData",
    "DEFAULT_V_MAX",
]
