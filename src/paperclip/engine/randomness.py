"""Random sources for the engine.

The engine only ever calls ``rng.uniform(low, high)``, so a
``numpy.random.Generator`` works directly and tests can pass anything with
that method.
"""

from typing import Optional, Protocol

import numpy as np


class RandomSource(Protocol):
    def uniform(self, low: float, high: float) -> float: ...


def make_rng(seed: Optional[int] = None) -> np.random.Generator:
    """Create the default generator (seeded when ``seed`` is given)."""
    return np.random.default_rng(seed)


class MidpointRandom:
    """Deterministic source returning the midpoint of every interval.

    Demand noise becomes 0 and wire jitter becomes ``wire_jitter / 2``.
    """

    def uniform(self, low: float, high: float) -> float:
        return (low + high) / 2.0
