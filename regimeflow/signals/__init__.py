"""
Signal generation: regime adapters, crossover edges and the anti-overlap gate.
"""

from .adapter import (
    AdaptiveAlphaAdapter,
    MAFamily,
    RegimeMAAdapter,
    apply_distance_filter,
    ma_family_for,
)
from .crossover import (
    AntiOverlapGate,
    CrossoverDetector,
    crossover,
    crossunder,
    detect_crossovers,
)

__all__ = [
    "AdaptiveAlphaAdapter",
    "MAFamily",
    "RegimeMAAdapter",
    "apply_distance_filter",
    "ma_family_for",
    "AntiOverlapGate",
    "CrossoverDetector",
    "crossover",
    "crossunder",
    "detect_crossovers",
]
