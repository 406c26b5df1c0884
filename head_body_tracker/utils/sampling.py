"""
Random number sources for particle diffusion.

One GaussianSampler per state dimension keeps the noise uncorrelated
across dimensions. Sampler seeds are drawn from a uniform integer seeder,
which is itself seeded from wall-clock time unless a seed is given.
"""

import time
import numpy as np
from typing import Optional
from numpy.random import Generator, default_rng

from ..errors import ConfigurationError


SEED_UPPER = 2**31 - 1


def make_seeder(seed: Optional[int] = None) -> Generator:
    """
    Create the uniform integer seeder used to seed per-dimension samplers.

    Args:
        seed: Explicit seed. If None, wall-clock time (ns) is used.

    Returns:
        NumPy random generator to draw sampler seeds from
    """
    if seed is None:
        seed = time.time_ns()
    return default_rng(seed)


def draw_seed(seeder: Generator) -> int:
    """Draw one sampler seed from a seeder."""
    return int(seeder.integers(0, SEED_UPPER, endpoint=True))


class GaussianSampler:
    """
    Zero-mean normal sampler with its own generator state.

    Not thread-safe on its own; HeadBodyParticleGenerator serializes access.
    """

    def __init__(self, sigma: float, seed: Optional[int] = None):
        """
        Args:
            sigma: Standard deviation (>= 0)
            seed: Seed for the internal generator

        Raises:
            ConfigurationError: If sigma is negative or not finite
        """
        sigma = float(sigma)
        if not np.isfinite(sigma) or sigma < 0.0:
            raise ConfigurationError(
                f"Standard deviation must be finite and >= 0, got {sigma}"
            )
        self.sigma = sigma
        self._rng = default_rng(seed)

    def seed(self, seed: int) -> None:
        """Reset the internal generator from a new seed."""
        self._rng = default_rng(seed)

    def __call__(self) -> float:
        """Draw a single sample."""
        if self.sigma == 0.0:
            return 0.0
        return float(self._rng.normal(0.0, self.sigma))

    def draw(self, n: int) -> np.ndarray:
        """
        Draw n samples.

        Args:
            n: Number of samples

        Returns:
            samples: [n] normal samples
        """
        if self.sigma == 0.0:
            return np.zeros(n)
        return self._rng.normal(0.0, self.sigma, size=n)

    def __repr__(self) -> str:
        return f"GaussianSampler(sigma={self.sigma})"
