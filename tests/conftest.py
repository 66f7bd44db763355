"""
Shared pytest fixtures for the RPS CFR solver tests.

Provides a seeded generator and a helper for building distributions.
"""

from __future__ import annotations

import numpy as np
import pytest


def dist(*probs: float) -> np.ndarray:
    """Build a float64 distribution from positional probabilities.

    Examples:
        >>> dist(1, 0, 0)
        array([1., 0., 0.])
    """
    return np.array(probs, dtype=np.float64)


class FixedRng:
    """Stand-in generator whose random() returns queued values in order."""

    def __init__(self, *values: float) -> None:
        self._values = list(values)

    def random(self) -> float:
        return self._values.pop(0)


@pytest.fixture
def rng() -> np.random.Generator:
    """Return a generator seeded for reproducibility."""
    return np.random.default_rng(12345)


@pytest.fixture
def d():
    """Expose the dist() helper as a fixture for convenience."""
    return dist
