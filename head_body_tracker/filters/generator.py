"""
Head/body particle generator.

Implements the diffusion kernel and the weighted state estimate for
HeadBodyParticle:

  Propagation (per dimension d):
    dst.d = src.d + e_d,   e_d ~ N(0, sigma_d^2), independent across d

  Estimation:
    x, y, s : weighted arithmetic mean
    dh, db  : weighted circular mean with modulus 8
              V = sum_i w_i (cos theta_i, sin theta_i),  theta_i = v_i * 2pi / 8
              mean = atan2(V_y, V_x) * 8 / 2pi
              undefined if |V|^2 <= degeneracy_threshold
"""

import threading
import warnings
import numpy as np
from dataclasses import dataclass, replace
from typing import List, Optional, Sequence

from .base import EstimationErrorKind, EstimationResult, ParticleGeneratorInterface
from ..errors import ConfigurationError
from ..models.particle import HeadBodyParticle, particles_to_array
from ..utils.sampling import GaussianSampler, draw_seed, make_seeder
from ..utils.circular import (
    chunked_weighted_sums,
    circular_mean_from_resultant,
    resultant_length,
)


DEFAULT_DEGENERACY_THRESHOLD = 1e-10


@dataclass
class GeneratorConfig:
    """
    Diffusion and estimation settings.

    Attributes:
        sigma_x, sigma_y, sigma_s: Noise std of position and scale
        sigma_dh, sigma_db: Noise std of head / body orientation (sectors)
        degeneracy_threshold: |V|^2 at or below which a circular mean is undefined
        concentration_warning: Warn when the normalized resultant length
            of a circular dimension falls below this value
        seed: Seeder seed (None: wall-clock time)
    """
    sigma_x: float = 0.0
    sigma_y: float = 0.0
    sigma_s: float = 0.0
    sigma_dh: float = 0.0
    sigma_db: float = 0.0
    degeneracy_threshold: float = DEFAULT_DEGENERACY_THRESHOLD
    concentration_warning: float = 0.05
    seed: Optional[int] = None

    def __post_init__(self):
        for name, sigma in zip(("sigma_x", "sigma_y", "sigma_s", "sigma_dh", "sigma_db"),
                               self.sigmas()):
            if not np.isfinite(sigma) or sigma < 0.0:
                raise ConfigurationError(
                    f"{name} must be finite and >= 0, got {sigma}"
                )
        if not np.isfinite(self.degeneracy_threshold) or self.degeneracy_threshold <= 0.0:
            raise ConfigurationError(
                f"degeneracy_threshold must be finite and > 0, "
                f"got {self.degeneracy_threshold}"
            )
        if not 0.0 <= self.concentration_warning <= 1.0:
            raise ConfigurationError(
                f"concentration_warning must be in [0, 1], "
                f"got {self.concentration_warning}"
            )

    def sigmas(self) -> np.ndarray:
        """[5] noise std in state order x, y, s, dh, db."""
        return np.array([self.sigma_x, self.sigma_y, self.sigma_s,
                         self.sigma_dh, self.sigma_db], dtype=float)


class HeadBodyParticleGenerator(ParticleGeneratorInterface[HeadBodyParticle]):
    """
    Generator of HeadBodyParticle.

    Holds one GaussianSampler per dimension. Samplers are shared mutable
    state: each generate() call takes its five draws under a lock, so the
    generator can be used from several threads at once.
    """

    def __init__(
        self,
        sigma_x: float = 0.0,
        sigma_y: float = 0.0,
        sigma_s: float = 0.0,
        sigma_dh: float = 0.0,
        sigma_db: float = 0.0,
        degeneracy_threshold: float = DEFAULT_DEGENERACY_THRESHOLD,
        concentration_warning: float = 0.05,
        seed: Optional[int] = None,
        config: Optional[GeneratorConfig] = None,
    ):
        """
        Args:
            sigma_x, sigma_y, sigma_s, sigma_dh, sigma_db: Noise std per dimension
            degeneracy_threshold: Cutoff on |V|^2 for circular means
            concentration_warning: Warn below this normalized resultant length
            seed: Seeder seed (None: wall-clock time)
            config: Full configuration; overrides the other arguments

        Raises:
            ConfigurationError: If any sigma is negative
        """
        if config is None:
            config = GeneratorConfig(
                sigma_x=sigma_x,
                sigma_y=sigma_y,
                sigma_s=sigma_s,
                sigma_dh=sigma_dh,
                sigma_db=sigma_db,
                degeneracy_threshold=degeneracy_threshold,
                concentration_warning=concentration_warning,
                seed=seed,
            )
        self.config = config

        # One seeder draw per dimension -> five distinct streams
        self._seeder = make_seeder(config.seed)
        self._rand_x = GaussianSampler(config.sigma_x, draw_seed(self._seeder))
        self._rand_y = GaussianSampler(config.sigma_y, draw_seed(self._seeder))
        self._rand_s = GaussianSampler(config.sigma_s, draw_seed(self._seeder))
        self._rand_dh = GaussianSampler(config.sigma_dh, draw_seed(self._seeder))
        self._rand_db = GaussianSampler(config.sigma_db, draw_seed(self._seeder))

        self._lock = threading.Lock()

    @property
    def samplers(self) -> tuple:
        return (self._rand_x, self._rand_y, self._rand_s, self._rand_dh, self._rand_db)

    # -------------------------------------------------------------------------
    # Propagation
    # -------------------------------------------------------------------------

    def generate(
        self,
        src: HeadBodyParticle,
        dst: Optional[HeadBodyParticle] = None,
    ) -> HeadBodyParticle:
        """
        Diffuse src by additive Gaussian noise.

        Args:
            src: Source particle (not modified)
            dst: Destination to overwrite; a new particle if None

        Returns:
            The destination particle
        """
        with self._lock:
            ex = self._rand_x()
            ey = self._rand_y()
            es = self._rand_s()
            edh = self._rand_dh()
            edb = self._rand_db()

        x, y, s, dh, db = src.x, src.y, src.s, src.dh, src.db
        if dst is None:
            dst = HeadBodyParticle()
        dst.x = float(x) + ex
        dst.y = float(y) + ey
        dst.s = float(s) + es
        dst.set_dh_continuous(float(dh) + edh)
        dst.set_db_continuous(float(db) + edb)
        return dst

    def spawn(self, n: int) -> List["HeadBodyParticleGenerator"]:
        """
        Create n independent generators with the same noise settings.

        Child seeds are drawn from this generator's seeder, so children
        started from a seeded parent are reproducible.
        """
        if n < 0:
            raise ValueError(f"n must be >= 0, got {n}")
        with self._lock:
            seeds = [draw_seed(self._seeder) for _ in range(n)]
        return [
            HeadBodyParticleGenerator(config=replace(self.config, seed=seed))
            for seed in seeds
        ]

    # -------------------------------------------------------------------------
    # Estimation
    # -------------------------------------------------------------------------

    def get_weighted_mean(
        self,
        particles: Sequence[HeadBodyParticle],
        weights: Sequence[float],
        mean_out: Optional[HeadBodyParticle] = None,
        n_workers: int = 1,
    ) -> EstimationResult[HeadBodyParticle]:
        """
        Weighted mean with circular averaging of dh and db.

        Args:
            particles: Particle set of length N
            weights: [N] non-negative weights with positive sum
            mean_out: Particle to overwrite with the estimate (only on success)
            n_workers: Threads for the partial-sum reduction

        Returns:
            EstimationResult holding the mean or the failure kind
        """
        weights = np.asarray(weights, dtype=float).ravel()
        problem = _check_preconditions(len(particles), weights)
        if problem is not None:
            return EstimationResult.failure(EstimationErrorKind.PRECONDITION, problem)

        states = particles_to_array(particles)
        if not np.all(np.isfinite(states)):
            return EstimationResult.failure(
                EstimationErrorKind.PRECONDITION, "Particle states must be finite"
            )
        sums = chunked_weighted_sums(states, weights, n_workers=n_workers)

        threshold = self.config.degeneracy_threshold
        head_sq, head_r = resultant_length(sums.head, sums.weight)
        if head_sq <= threshold:
            return EstimationResult.failure(
                EstimationErrorKind.DEGENERATE_HEAD,
                "Failed to calculate head direction average.",
            )
        body_sq, body_r = resultant_length(sums.body, sums.weight)
        if body_sq <= threshold:
            return EstimationResult.failure(
                EstimationErrorKind.DEGENERATE_BODY,
                "Failed to calculate body direction average.",
            )

        for name, r_bar in (("head", head_r), ("body", body_r)):
            if r_bar < self.config.concentration_warning:
                warnings.warn(
                    f"Weak {name} direction concentration (R={r_bar:.3g}). "
                    "Circular mean is poorly determined.",
                    RuntimeWarning,
                )

        linear = sums.linear / sums.weight
        if not np.all(np.isfinite(linear)):
            return EstimationResult.failure(
                EstimationErrorKind.PRECONDITION,
                "Weighted sums of x, y, s overflow",
            )
        if mean_out is None:
            mean_out = HeadBodyParticle()
        mean_out.x = float(linear[0])
        mean_out.y = float(linear[1])
        mean_out.s = float(linear[2])
        mean_out.set_dh_continuous(circular_mean_from_resultant(sums.head))
        mean_out.set_db_continuous(circular_mean_from_resultant(sums.body))
        return EstimationResult(mean=mean_out)

    def __repr__(self) -> str:
        c = self.config
        return (
            f"HeadBodyParticleGenerator(sigma_x={c.sigma_x}, sigma_y={c.sigma_y}, "
            f"sigma_s={c.sigma_s}, sigma_dh={c.sigma_dh}, sigma_db={c.sigma_db})"
        )


def _check_preconditions(n_particles: int, weights: np.ndarray) -> Optional[str]:
    """Return a description of the first violated precondition, or None."""
    if n_particles != weights.shape[0]:
        return (
            f"Particle/weight length mismatch: {n_particles} particles, "
            f"{weights.shape[0]} weights"
        )
    if n_particles == 0:
        return "Empty particle population"
    if not np.all(np.isfinite(weights)):
        return "Weights must be finite"
    if np.any(weights < 0.0):
        return "Weights must be non-negative"
    total = np.sum(weights)
    if not np.isfinite(total):
        return "Sum of weights must be finite"
    if not total > 0.0:
        return "Sum of weights must be positive"
    return None
