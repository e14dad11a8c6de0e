from __future__ import annotations

import logging
from typing import Iterable

import numpy as np

from .individual import Individual
from .population import Population


def _logger() -> logging.Logger:
    return logging.getLogger(__name__)


class CrowdingDistanceArchive:
    """
    Bounded external archive of non-dominated individuals.

    Each update merges the incoming individuals with the current contents,
    keeps the first non-dominated front and, when that front exceeds
    ``capacity``, drops the lowest-crowding members first.
    """

    def __init__(self, capacity: int) -> None:
        if capacity <= 0:
            raise ValueError("Archive capacity must be positive.")
        self.capacity = int(capacity)
        self._members = Population(name="archive")

    def __len__(self) -> int:
        return len(self._members)

    def __iter__(self):
        return iter(self._members)

    @property
    def population(self) -> Population:
        return self._members

    def update(self, incoming: Iterable[Individual]) -> Population:
        candidates = self._members.merge(Population(ind for ind in incoming if ind.evaluated))
        if len(candidates) == 0:
            return self._members
        front = candidates.get_pareto_front()
        front.calculate_crowding_distance()
        if len(front) > self.capacity:
            _logger().debug("Archive front has %d members; truncating to %d.", len(front), self.capacity)
            front = front.sort_by_crowding_distance(descending=True).truncate(self.capacity)
        self._members = front
        return self._members

    def sample(self, rng: np.random.Generator) -> Individual:
        """Uniformly random archive member."""
        if len(self._members) == 0:
            raise ValueError("Cannot sample from an empty archive.")
        return self._members[int(rng.integers(len(self._members)))]

    def clear(self) -> None:
        self._members = Population(name="archive")


__all__ = ["CrowdingDistanceArchive"]
