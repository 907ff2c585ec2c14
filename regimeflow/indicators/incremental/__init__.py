"""
Incremental indicator computation.

O(1) (or O(length) for FIR windows) per-bar updates. The windowed
statistics match pandas rolling/ewm computation within floating point
tolerance.

Usage:
    from regimeflow.indicators.incremental import IncrementalEMA, create_smoother

    ema = IncrementalEMA(length=20)
    for price in historical_closes:
        ema.update(source=price)

    smoother = create_smoother("super_smoother", 10)
    smoother.update(source=new_close)
    current_value = smoother.value
"""

from __future__ import annotations

# Base class
from .base import IncrementalIndicator

# Rolling statistics
from .core import (
    IncrementalSMA,
    IncrementalSum,
    IncrementalStdev,
    IncrementalEMA,
    IncrementalRMA,
    IncrementalTrueRange,
    IncrementalATR,
    IncrementalADX,
    IncrementalCorrelation,
    IncrementalCum,
    IncrementalOBV,
    IncrementalHighest,
    IncrementalLowest,
    IncrementalWMA,
    IncrementalVWMA,
)

# Recursive and FIR smoothing filters
from .filters import (
    IncrementalMcGinley,
    IncrementalSuperSmoother,
    IncrementalButterworth2,
    IncrementalButterworth3,
    IncrementalZLEMA,
    IncrementalInstantaneousTrendline,
    IncrementalCosineWMA,
    IncrementalCosineATR,
    IncrementalHammingMA,
)

# Factory
from .factory import create_smoother, list_smoothers

# Composite indices
from .composite import (
    FAITH_COMPONENTS,
    IncrementalFaithIndex,
    IncrementalAsymmetricVolatility,
    IncrementalFourierConvergence,
)
from .fractal_dimension import IncrementalFDI, IncrementalLHEA

__all__ = [
    "IncrementalIndicator",
    "IncrementalSMA",
    "IncrementalSum",
    "IncrementalStdev",
    "IncrementalEMA",
    "IncrementalRMA",
    "IncrementalTrueRange",
    "IncrementalATR",
    "IncrementalADX",
    "IncrementalCorrelation",
    "IncrementalCum",
    "IncrementalOBV",
    "IncrementalHighest",
    "IncrementalLowest",
    "IncrementalWMA",
    "IncrementalVWMA",
    "IncrementalMcGinley",
    "IncrementalSuperSmoother",
    "IncrementalButterworth2",
    "IncrementalButterworth3",
    "IncrementalZLEMA",
    "IncrementalInstantaneousTrendline",
    "IncrementalCosineWMA",
    "IncrementalCosineATR",
    "IncrementalHammingMA",
    "create_smoother",
    "list_smoothers",
    "FAITH_COMPONENTS",
    "IncrementalFaithIndex",
    "IncrementalAsymmetricVolatility",
    "IncrementalFourierConvergence",
    "IncrementalFDI",
    "IncrementalLHEA",
]
