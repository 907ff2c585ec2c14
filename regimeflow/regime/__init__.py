"""
Regime classification: decision table, enums and the incremental classifier.
"""

from .classifier import (
    Regime,
    RegimeClassifier,
    RegimeInputs,
    TrendStrength,
    classify_regime,
    classify_trend_strength,
)

__all__ = [
    "Regime",
    "RegimeClassifier",
    "RegimeInputs",
    "TrendStrength",
    "classify_regime",
    "classify_trend_strength",
]
