"""
Particle generator interface and estimation result container.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum
from typing import Generic, Optional, Sequence, TypeVar

from ..errors import AveragingDegenerateError, PreconditionError


P = TypeVar("P")


class EstimationErrorKind(Enum):
    """Why a weighted-mean estimate could not be produced."""
    PRECONDITION = "precondition"
    DEGENERATE_HEAD = "degenerate_head"
    DEGENERATE_BODY = "degenerate_body"


@dataclass
class EstimationResult(Generic[P]):
    """
    Outcome of a weighted-mean estimation.

    Exactly one of `mean` and `error_kind` is set.

    Attributes:
        mean: Estimated particle (None on failure)
        error_kind: Failure kind (None on success)
        message: Human-readable failure description
    """
    mean: Optional[P] = None
    error_kind: Optional[EstimationErrorKind] = None
    message: str = ""

    @property
    def ok(self) -> bool:
        return self.error_kind is None

    def unwrap(self) -> P:
        """
        Return the mean, or raise the exception matching the failure kind.

        Raises:
            PreconditionError: For EstimationErrorKind.PRECONDITION
            AveragingDegenerateError: For DEGENERATE_HEAD / DEGENERATE_BODY
        """
        if self.error_kind is None:
            return self.mean
        if self.error_kind is EstimationErrorKind.PRECONDITION:
            raise PreconditionError(self.message)
        if self.error_kind is EstimationErrorKind.DEGENERATE_HEAD:
            raise AveragingDegenerateError("head", self.message)
        raise AveragingDegenerateError("body", self.message)

    @classmethod
    def failure(cls, kind: EstimationErrorKind, message: str) -> "EstimationResult[P]":
        return cls(mean=None, error_kind=kind, message=message)


class ParticleGeneratorInterface(ABC, Generic[P]):
    """
    Propagation and estimation primitives of a particle filter.

    The enclosing filter loop owns the iteration:
    propagate -> weight -> estimate -> resample -> repeat.
    """

    @abstractmethod
    def generate(self, src: P, dst: Optional[P] = None) -> P:
        """Diffuse one particle into dst (or a new particle)."""

    @abstractmethod
    def get_weighted_mean(
        self,
        particles: Sequence[P],
        weights: Sequence[float],
        mean_out: Optional[P] = None,
    ) -> EstimationResult[P]:
        """Reduce a weighted population to one estimate."""
