from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Sequence

import numpy as np

from mapo.foundation.exceptions import ConfigurationError


class StopReason(str, Enum):
    """Why a run left the Running state."""

    MANUAL = "manual_stop"
    MAX_EVALUATIONS = "max_evaluations"
    MAX_TIME = "max_time"
    TARGET_REACHED = "target_reached"
    COMPLETED = "completed"

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True)
class TerminationConfig:
    """
    Run limits polled once per iteration.

    ``None`` disables a limit. ``target_objectives`` is met when every
    objective of the current best individual is ``<=`` its target component.
    """

    max_evaluations: int | None = None
    max_time: float | None = None
    target_objectives: tuple[float, ...] | None = None

    def __post_init__(self) -> None:
        if self.max_evaluations is not None and int(self.max_evaluations) <= 0:
            raise ConfigurationError("max_evaluations must be positive when set.")
        if self.max_time is not None and float(self.max_time) <= 0:
            raise ConfigurationError("max_time must be positive when set.")
        if self.target_objectives is not None:
            target = tuple(float(v) for v in self.target_objectives)
            if not target:
                raise ConfigurationError("target_objectives cannot be empty.")
            object.__setattr__(self, "target_objectives", target)

    def target_reached(self, objectives: Sequence[float] | np.ndarray) -> bool:
        if self.target_objectives is None:
            return False
        values = np.asarray(objectives, dtype=float).reshape(-1)
        target = np.asarray(self.target_objectives, dtype=float)
        if values.size != target.size:
            return False
        return bool(np.all(values <= target))


__all__ = ["StopReason", "TerminationConfig"]
