"""
Utility functions.
"""

from .sampling import (
    GaussianSampler,
    make_seeder,
    draw_seed,
)

from .circular import (
    sector_to_angle,
    angle_to_sector,
    resultant_vector,
    weighted_linear_mean,
    circular_spread,
    weighted_sums,
    chunked_weighted_sums,
)

__all__ = [
    "GaussianSampler",
    "make_seeder",
    "draw_seed",
    "sector_to_angle",
    "angle_to_sector",
    "resultant_vector",
    "weighted_linear_mean",
    "circular_spread",
    "weighted_sums",
    "chunked_weighted_sums",
]
