"""
Data-parallel propagation of a particle population.

Strategies:
  "serial" : single-threaded loop
  "locked" : index-range chunks on a thread pool sharing one generator;
             sampler access is serialized per generate() call
  "arena"  : like "locked", but each chunk gets its own child generator
             from HeadBodyParticleGenerator.spawn(), so no lock contention
"""

import warnings
from concurrent.futures import ThreadPoolExecutor
from typing import List, Literal, Optional, Sequence

from ..filters.generator import HeadBodyParticleGenerator
from ..models.particle import HeadBodyParticle


class ConcurrencyDispatcher:
    """
    Fan generate() out over a particle population.

    Index i of the source maps to index i of the result.
    """

    def __init__(
        self,
        generator: HeadBodyParticleGenerator,
        strategy: Literal["serial", "locked", "arena"] = "locked",
        n_workers: int = 4,
        chunk_size: int = 256,
    ):
        """
        Args:
            generator: Generator used for propagation
            strategy: Execution strategy ("serial", "locked", "arena")
            n_workers: Worker threads (ignored for "serial")
            chunk_size: Particles per work item
        """
        if strategy not in ("serial", "locked", "arena"):
            raise ValueError(f"Unknown dispatch strategy: {strategy}")
        if n_workers < 1:
            raise ValueError(f"n_workers must be >= 1, got {n_workers}")
        if chunk_size < 1:
            raise ValueError(f"chunk_size must be >= 1, got {chunk_size}")
        self.generator = generator
        self.strategy = strategy
        self.n_workers = n_workers
        self.chunk_size = chunk_size

    def propagate(
        self,
        particles: Sequence[HeadBodyParticle],
        dst: Optional[List[HeadBodyParticle]] = None,
    ) -> List[HeadBodyParticle]:
        """
        Propagate every particle once.

        Args:
            particles: Source population (not modified)
            dst: Destination population to overwrite, same length as particles

        Returns:
            Propagated population
        """
        N = len(particles)
        if dst is None:
            dst = [HeadBodyParticle() for _ in range(N)]
        elif len(dst) != N:
            raise ValueError(
                f"Destination length {len(dst)} does not match source length {N}"
            )
        if N == 0:
            return dst

        if self.strategy == "serial":
            self._run_chunk(self.generator, particles, dst, 0, N)
            return dst

        bounds = [(i, min(i + self.chunk_size, N)) for i in range(0, N, self.chunk_size)]
        if self.n_workers > len(bounds):
            warnings.warn(
                f"n_workers={self.n_workers} exceeds the number of chunks "
                f"({len(bounds)}); some workers will idle.",
                RuntimeWarning,
            )

        if self.strategy == "arena":
            generators = self.generator.spawn(len(bounds))
        else:
            generators = [self.generator] * len(bounds)

        with ThreadPoolExecutor(max_workers=self.n_workers) as pool:
            futures = [
                pool.submit(self._run_chunk, gen, particles, dst, start, end)
                for gen, (start, end) in zip(generators, bounds)
            ]
            for future in futures:
                future.result()

        return dst

    @staticmethod
    def _run_chunk(
        generator: HeadBodyParticleGenerator,
        particles: Sequence[HeadBodyParticle],
        dst: List[HeadBodyParticle],
        start: int,
        end: int,
    ) -> None:
        """Propagate particles[start:end] into dst[start:end]."""
        for i in range(start, end):
            generator.generate(particles[i], dst[i])
