"""Randomized placement helpers.

Every random draw in the scene goes through ``rng.random()``, a uniform
float in [0, 1). A ``numpy.random.Generator`` satisfies that, and so does
any test double that replays a fixed sequence.
"""

from __future__ import annotations

from typing import Protocol

import numpy as np


class UniformSource(Protocol):
    """Anything with a ``random()`` method returning a float in [0, 1)."""

    def random(self) -> float: ...


def random_int(rng: UniformSource, a: int, b: int) -> int:
    """Uniform integer in the closed range [a, b]."""
    return int(np.floor(rng.random() * (b - a + 1))) + a


def uniform(rng: UniformSource, lo: float, hi: float) -> float:
    """Uniform float in [lo, hi)."""
    return lo + float(rng.random()) * (hi - lo)


def random_sign(rng: UniformSource) -> int:
    """One of -1, 0, 1 with equal probability."""
    return random_int(rng, -1, 1)


def sample_outside_radius(
    rng: UniformSource,
    initial_range: int,
    resample_range: int,
    min_radius: float,
) -> tuple[int, int]:
    """Rejection-sample an integer (x, z) at least min_radius from the origin.

    The first candidate comes from [-initial_range, initial_range]^2; every
    redraw comes from [-resample_range, resample_range]^2. The two ranges are
    allowed to differ.
    """
    x = random_int(rng, -initial_range, initial_range)
    z = random_int(rng, -initial_range, initial_range)
    while np.hypot(x, z) < min_radius:
        x = random_int(rng, -resample_range, resample_range)
        z = random_int(rng, -resample_range, resample_range)
    return x, z
