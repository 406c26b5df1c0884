"""
Head/Body Particle Tracking Core.

A NumPy-based library for the particle filter of a head/body tracker:
- Gaussian diffusion of (x, y, s, head, body) particles
- Weighted state estimation with circular averaging of orientations
- Thread-parallel propagation over particle populations
"""

from . import models
from . import filters
from . import parallel
from . import utils
from .errors import ConfigurationError, PreconditionError, AveragingDegenerateError

__version__ = "0.1.0"
