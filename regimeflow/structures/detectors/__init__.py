"""
Incremental pattern detectors.

Available Detectors:
- fractal: Williams fractal (local extreme) detection with delayed
  confirmation over any scalar stream
"""

from .fractal import IncrementalWilliamsFractal

__all__ = [
    "IncrementalWilliamsFractal",
]
