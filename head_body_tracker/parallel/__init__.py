"""
Concurrent propagation.
"""

from .dispatcher import ConcurrencyDispatcher

__all__ = [
    "ConcurrencyDispatcher",
]
