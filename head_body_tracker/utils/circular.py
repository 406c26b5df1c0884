"""
Circular statistics on eighths-of-a-turn orientation values.

A circular value v (in sectors) maps to the angle theta = v * 2pi / 8.
Weighted samples are summed as vectors (w cos theta, w sin theta); the
resultant direction is the circular mean and its length measures how
concentrated the directions are.
"""

import numpy as np
from dataclasses import dataclass
from concurrent.futures import ThreadPoolExecutor
from typing import Optional, Tuple
from scipy.stats import circstd

from ..models.particle import N_SECTORS


def sector_to_angle(values: np.ndarray) -> np.ndarray:
    """Sector units -> radians."""
    return np.asarray(values, dtype=float) * 2.0 * np.pi / N_SECTORS


def angle_to_sector(angle: np.ndarray) -> np.ndarray:
    """Radians -> sector units."""
    return np.asarray(angle, dtype=float) * N_SECTORS / (2.0 * np.pi)


def resultant_vector(values: np.ndarray, weights: np.ndarray) -> np.ndarray:
    """
    Weighted vector sum of directions.

    Args:
        values: [N] orientations in sectors
        weights: [N] non-negative weights

    Returns:
        V: [2] (sum w cos theta, sum w sin theta)
    """
    theta = sector_to_angle(values)
    weights = np.asarray(weights, dtype=float)
    return np.array([np.sum(weights * np.cos(theta)),
                     np.sum(weights * np.sin(theta))])


def weighted_linear_mean(values: np.ndarray, weights: np.ndarray) -> float:
    """sum(v * w) / sum(w). Caller guarantees sum(w) > 0."""
    values = np.asarray(values, dtype=float)
    weights = np.asarray(weights, dtype=float)
    return float(np.sum(values * weights) / np.sum(weights))


def circular_spread(values: np.ndarray) -> float:
    """
    Circular standard deviation of an unweighted population, in sectors.

    Useful on a resampled population, where weights are uniform.
    """
    return float(circstd(np.asarray(values, dtype=float), high=N_SECTORS, low=0.0))


@dataclass
class WeightedSums:
    """
    Partial sums for weighted-mean estimation.

    Attributes:
        weight: sum of weights
        linear: [3] weighted sums of x, y, s
        head: [2] resultant vector of dh
        body: [2] resultant vector of db
    """
    weight: float
    linear: np.ndarray
    head: np.ndarray
    body: np.ndarray

    def __add__(self, other: "WeightedSums") -> "WeightedSums":
        return WeightedSums(
            weight=self.weight + other.weight,
            linear=self.linear + other.linear,
            head=self.head + other.head,
            body=self.body + other.body,
        )


def weighted_sums(states: np.ndarray, weights: np.ndarray) -> WeightedSums:
    """
    Accumulate the sums for a block of particles.

    Args:
        states: [N, 5] particle states (x, y, s, dh, db)
        weights: [N] weights

    Returns:
        WeightedSums for the block
    """
    states = np.asarray(states, dtype=float)
    weights = np.asarray(weights, dtype=float)
    return WeightedSums(
        weight=float(np.sum(weights)),
        linear=weights @ states[:, :3] if states.shape[0] else np.zeros(3),
        head=resultant_vector(states[:, 3], weights),
        body=resultant_vector(states[:, 4], weights),
    )


def chunked_weighted_sums(
    states: np.ndarray,
    weights: np.ndarray,
    n_workers: int = 1,
    chunk_size: Optional[int] = None,
) -> WeightedSums:
    """
    Partial-sum-then-combine reduction over index chunks.

    With n_workers > 1 the chunks are reduced in a thread pool. The result
    matches the serial reduction up to floating-point reassociation.

    Args:
        states: [N, 5] particle states
        weights: [N] weights
        n_workers: Number of worker threads
        chunk_size: Particles per chunk (default: split evenly over workers)

    Returns:
        Combined WeightedSums
    """
    N = states.shape[0]
    if n_workers <= 1 or N == 0:
        return weighted_sums(states, weights)

    if chunk_size is None:
        chunk_size = max(1, -(-N // n_workers))
    bounds = _chunk_bounds(N, chunk_size)

    with ThreadPoolExecutor(max_workers=n_workers) as pool:
        parts = list(pool.map(
            lambda b: weighted_sums(states[b[0]:b[1]], weights[b[0]:b[1]]),
            bounds,
        ))

    total = parts[0]
    for part in parts[1:]:
        total = total + part
    return total


def _chunk_bounds(n: int, chunk_size: int) -> list:
    """[(start, end), ...] covering range(n)."""
    return [(i, min(i + chunk_size, n)) for i in range(0, n, chunk_size)]


def circular_mean_from_resultant(V: np.ndarray) -> float:
    """atan2 of a resultant vector, in sectors within (-4, 4]."""
    return float(angle_to_sector(np.arctan2(V[1], V[0])))


def resultant_length(V: np.ndarray, total_weight: float) -> Tuple[float, float]:
    """
    Squared norm of V and normalized resultant length |V| / sum(w).

    The normalized length lies in [0, 1]: 1 for identical directions,
    near 0 when the directions cancel.
    """
    r = float(np.hypot(V[0], V[1]))
    return r * r, r / total_weight
