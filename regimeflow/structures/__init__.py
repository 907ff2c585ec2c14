"""
Bounded-history structures and pattern detectors.
"""

from .primitives import MonotonicDeque, RingBuffer, RollingWindow
from .detectors import IncrementalWilliamsFractal

__all__ = [
    "MonotonicDeque",
    "RingBuffer",
    "RollingWindow",
    "IncrementalWilliamsFractal",
]
