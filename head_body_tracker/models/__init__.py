"""
Particle state definitions.
"""

from .particle import (
    CircularValue,
    HeadBodyParticle,
    particles_to_array,
    particles_from_array,
    N_SECTORS,
    STATE_DIM,
)

__all__ = [
    "CircularValue",
    "HeadBodyParticle",
    "particles_to_array",
    "particles_from_array",
    "N_SECTORS",
    "STATE_DIM",
]
