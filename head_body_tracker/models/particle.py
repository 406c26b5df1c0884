"""
Head/body particle state.

State: [x, y, s, dh, db]
  x, y, s : position and scale (unbounded reals)
  dh, db  : head / body orientation deltas in eighths of a turn

dh and db are stored as plain floats. Their circularity (modulus 8) is only
applied when averaging or when viewed through CircularValue.
"""

import math
import numpy as np
from dataclasses import dataclass
from typing import List, Sequence


N_SECTORS = 8
STATE_DIM = 5


@dataclass(frozen=True)
class CircularValue:
    """
    A value on a circle with a fixed modulus.

    Attributes:
        value: Raw value (not wrapped)
        modulus: Length of one full turn in value units
    """
    value: float
    modulus: float = N_SECTORS

    def wrapped(self) -> float:
        """Value reduced into [0, modulus)."""
        return float(self.value % self.modulus)

    def to_radians(self) -> float:
        """Angle in radians, value * 2pi / modulus."""
        return self.value * 2.0 * math.pi / self.modulus

    def distance(self, other: "CircularValue") -> float:
        """
        Shortest signed difference self - other, in (-modulus/2, modulus/2].
        """
        if other.modulus != self.modulus:
            raise ValueError(
                f"Modulus mismatch: {self.modulus} vs {other.modulus}"
            )
        half = self.modulus / 2.0
        d = (self.value - other.value) % self.modulus
        if d > half:
            d -= self.modulus
        return float(d)


def _as_sector_index(value) -> int:
    """Validate an integral sector index."""
    if isinstance(value, (bool, np.bool_)):
        raise TypeError("Sector index must be an integer, got bool")
    if isinstance(value, (int, np.integer)):
        return int(value)
    raise TypeError(
        f"Sector index must be an integer, got {type(value).__name__}"
    )


@dataclass
class HeadBodyParticle:
    """
    One hypothesis of the tracked target.

    Fields are independent scalars; none is bounded.
    """
    x: float = 0.0
    y: float = 0.0
    s: float = 0.0
    dh: float = 0.0
    db: float = 0.0

    # -------------------------------------------------------------------------
    # Explicit conversions for the orientation fields
    # -------------------------------------------------------------------------

    def set_dh_continuous(self, value: float) -> None:
        self.dh = float(value)

    def set_db_continuous(self, value: float) -> None:
        self.db = float(value)

    def set_dh_sector(self, index: int) -> None:
        """Store an integral head sector index."""
        self.dh = float(_as_sector_index(index))

    def set_db_sector(self, index: int) -> None:
        """Store an integral body sector index."""
        self.db = float(_as_sector_index(index))

    def dh_sector(self) -> int:
        """Nearest head sector index in [0, 8)."""
        return int(round(self.dh)) % N_SECTORS

    def db_sector(self) -> int:
        """Nearest body sector index in [0, 8)."""
        return int(round(self.db)) % N_SECTORS

    def head_direction(self) -> CircularValue:
        return CircularValue(self.dh, N_SECTORS)

    def body_direction(self) -> CircularValue:
        return CircularValue(self.db, N_SECTORS)

    # -------------------------------------------------------------------------
    # Copy / array views
    # -------------------------------------------------------------------------

    def copy(self) -> "HeadBodyParticle":
        return HeadBodyParticle(self.x, self.y, self.s, self.dh, self.db)

    def as_array(self) -> np.ndarray:
        """Return [x, y, s, dh, db]."""
        return np.array([self.x, self.y, self.s, self.dh, self.db], dtype=float)

    @classmethod
    def from_array(cls, values: np.ndarray) -> "HeadBodyParticle":
        """
        Build a particle from a length-5 vector [x, y, s, dh, db].

        Raises:
            ValueError: If values does not have 5 entries
        """
        values = np.asarray(values, dtype=float).ravel()
        if values.shape[0] != STATE_DIM:
            raise ValueError(
                f"Expected {STATE_DIM} values, got {values.shape[0]}"
            )
        return cls(*(float(v) for v in values))


def particles_to_array(particles: Sequence[HeadBodyParticle]) -> np.ndarray:
    """
    Stack a particle set into an array.

    Args:
        particles: Particle set of length N

    Returns:
        array: [N, 5] with columns x, y, s, dh, db
    """
    if len(particles) == 0:
        return np.zeros((0, STATE_DIM))
    return np.array(
        [[p.x, p.y, p.s, p.dh, p.db] for p in particles], dtype=float
    )


def particles_from_array(array: np.ndarray) -> List[HeadBodyParticle]:
    """
    Inverse of particles_to_array.

    Args:
        array: [N, 5] particle states

    Returns:
        List of N particles
    """
    array = np.asarray(array, dtype=float)
    if array.ndim != 2 or array.shape[1] != STATE_DIM:
        raise ValueError(
            f"Expected array of shape [N, {STATE_DIM}], got {array.shape}"
        )
    return [HeadBodyParticle(*row) for row in array.tolist()]
