"""
Particle propagation and estimation.
"""

from .base import EstimationErrorKind, EstimationResult, ParticleGeneratorInterface
from .generator import GeneratorConfig, HeadBodyParticleGenerator

__all__ = [
    "EstimationErrorKind",
    "EstimationResult",
    "ParticleGeneratorInterface",
    "GeneratorConfig",
    "HeadBodyParticleGenerator",
]
