"""
Regime-to-parameter adapters.

- ma_family_for / RegimeMAAdapter: pick the fast/slow MA family from the
  regime label, with an optional distance-filter veto
- AdaptiveAlphaAdapter: scale EMA smoothing factors by faith index and
  ADX trend strength
"""

from __future__ import annotations

from enum import Enum

import numpy as np

from ..config import constants as C
from ..indicators.incremental.base import clamp, is_na
from ..indicators.incremental.core import IncrementalEMA, IncrementalSMA, IncrementalVWMA
from ..regime.classifier import Regime, TrendStrength


class MAFamily(str, Enum):
    EMA = "ema"
    SMA = "sma"
    VWMA = "vwma"


def ma_family_for(regime: Regime) -> MAFamily | None:
    """
    Regime -> MA family.

    Trending regimes use EMA, ranging ones SMA, volatile ones VWMA.
    UNDEFINED gets no family (no MA, no signal).
    """
    if regime.is_trending:
        return MAFamily.EMA
    if regime.is_ranging:
        return MAFamily.SMA
    if regime.is_volatile:
        return MAFamily.VWMA
    return None


def apply_distance_filter(price: float, ma: float, threshold: float) -> float:
    """
    Veto an MA value that sits too close to price.

    Returns NaN when |price - ma| / |ma| < threshold or ma is 0; the MA
    unchanged otherwise. A threshold of 0 disables the filter.
    """
    if is_na(ma) or threshold <= 0:
        return ma
    if ma == 0:
        return np.nan
    if abs(price - ma) / abs(ma) < threshold:
        return np.nan
    return ma


class RegimeMAAdapter:
    """
    Fast/slow MAs selected per bar by regime.

    All three families are updated every bar so whichever one the regime
    selects is already warm.
    """

    def __init__(self, fast_length: int, slow_length: int, distance_threshold: float = 0.0) -> None:
        self.fast_length = fast_length
        self.slow_length = slow_length
        self.distance_threshold = distance_threshold
        self._fast = {
            MAFamily.EMA: IncrementalEMA(fast_length),
            MAFamily.SMA: IncrementalSMA(fast_length),
            MAFamily.VWMA: IncrementalVWMA(fast_length),
        }
        self._slow = {
            MAFamily.EMA: IncrementalEMA(slow_length),
            MAFamily.SMA: IncrementalSMA(slow_length),
            MAFamily.VWMA: IncrementalVWMA(slow_length),
        }
        self.family: MAFamily | None = None

    def update(self, source: float, volume: float, regime: Regime) -> tuple[float, float]:
        """Update every MA and return the (fast, slow) pair for ``regime``."""
        for ma in (*self._fast.values(), *self._slow.values()):
            ma.update(source=source, volume=volume)

        self.family = ma_family_for(regime)
        if self.family is None:
            return np.nan, np.nan

        fast = apply_distance_filter(source, self._fast[self.family].value, self.distance_threshold)
        slow = apply_distance_filter(source, self._slow[self.family].value, self.distance_threshold)
        return fast, slow

    def reset(self) -> None:
        for ma in (*self._fast.values(), *self._slow.values()):
            ma.reset()
        self.family = None


class AdaptiveAlphaAdapter:
    """
    Faith-weighted adaptive EMAs.

    Per bar:
        w = 1 / 0.5 / 0.2 for strong / weak / no trend
        fast_alpha = clamp(2/(fast+1) * (1 + faith * w), 0.01, 1)
        slow_alpha = clamp(2/(slow+1) * (1 - faith * w), 0.01, 1)
        ma = alpha * close + (1 - alpha) * ma[1]

    Both MAs are NaN until faith and trend strength are defined, then
    seeded with that bar's close.
    """

    def __init__(self, fast_length: int, slow_length: int) -> None:
        self.base_fast_alpha = 2.0 / (fast_length + 1)
        self.base_slow_alpha = 2.0 / (slow_length + 1)
        self.fast = np.nan
        self.slow = np.nan
        self.fast_alpha = np.nan
        self.slow_alpha = np.nan

    @staticmethod
    def trend_weight(strength: TrendStrength) -> float:
        if strength is TrendStrength.UNDEFINED:
            return np.nan
        return C.TREND_STRENGTH_WEIGHTS[strength.value]

    def update(self, close: float, faith: float, strength: TrendStrength) -> tuple[float, float]:
        weight = self.trend_weight(strength)
        if is_na(faith) or is_na(weight) or is_na(close):
            self.fast_alpha = np.nan
            self.slow_alpha = np.nan
            return self.fast, self.slow

        self.fast_alpha = clamp(self.base_fast_alpha * (1 + faith * weight), C.ALPHA_MIN, C.ALPHA_MAX)
        self.slow_alpha = clamp(self.base_slow_alpha * (1 - faith * weight), C.ALPHA_MIN, C.ALPHA_MAX)

        if is_na(self.fast):
            self.fast = close
            self.slow = close
        else:
            self.fast = self.fast_alpha * close + (1 - self.fast_alpha) * self.fast
            self.slow = self.slow_alpha * close + (1 - self.slow_alpha) * self.slow
        return self.fast, self.slow

    def reset(self) -> None:
        self.fast = np.nan
        self.slow = np.nan
        self.fast_alpha = np.nan
        self.slow_alpha = np.nan
