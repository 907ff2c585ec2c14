"""
Market regime classification.

classify_regime() is a pure decision table over one bar's indicator
values. Rules are evaluated in priority order and the first match wins:

    1. high vol, close > long MA, ADX > strong  -> STRONG_UPTREND
    2. high vol, close < long MA, ADX > strong  -> STRONG_DOWNTREND
    3. high vol, ADX <= weak                    -> HIGH_VOLATILITY_CHOPPY
    4. low vol, ADX <= weak                     -> FLAT_MARKET
    5. ADX <= weak                              -> CHOPPY_MARKET
    6. weak < ADX <= strong                     -> WEAK_TREND
    7. high vol, close > prior N-bar high       -> PARABOLIC_SPIKE
    8. otherwise                                -> UNDEFINED

Volatility is relative to an "ATR of ATR" baseline (SMA of ATR):
    high vol: atr > baseline * high_vol_multiplier
    low vol:  atr < baseline * low_vol_multiplier

Any unavailable input means no rule matches. RegimeClassifier owns the
indicators that feed the table and optionally carries the last regime
forward over unmatched bars.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

import numpy as np

from ..config.models import RegimeThresholds
from ..indicators.incremental.base import is_na
from ..indicators.incremental.core import IncrementalADX, IncrementalATR, IncrementalSMA
from ..structures.primitives import RollingWindow


class Regime(str, Enum):
    """Market regime label. UNDEFINED means no rule matched."""
    STRONG_UPTREND = "strong_uptrend"
    STRONG_DOWNTREND = "strong_downtrend"
    HIGH_VOLATILITY_CHOPPY = "high_volatility_choppy"
    FLAT_MARKET = "flat_market"
    CHOPPY_MARKET = "choppy_market"
    WEAK_TREND = "weak_trend"
    PARABOLIC_SPIKE = "parabolic_spike"
    UNDEFINED = "undefined"

    @property
    def is_trending(self) -> bool:
        return self in (Regime.STRONG_UPTREND, Regime.STRONG_DOWNTREND, Regime.WEAK_TREND)

    @property
    def is_ranging(self) -> bool:
        return self in (Regime.FLAT_MARKET, Regime.CHOPPY_MARKET)

    @property
    def is_volatile(self) -> bool:
        return self in (Regime.HIGH_VOLATILITY_CHOPPY, Regime.PARABOLIC_SPIKE)


class TrendStrength(str, Enum):
    """ADX-only trend strength label."""
    STRONG_TREND = "strong_trend"
    WEAK_TREND = "weak_trend"
    NO_TREND = "no_trend"
    UNDEFINED = "undefined"


@dataclass(frozen=True, slots=True)
class RegimeInputs:
    """One bar's values for the regime decision table (NaN = unavailable)."""
    close: float
    adx: float
    atr: float
    atr_baseline: float
    long_ma: float
    prior_high: float

    def has_na(self) -> bool:
        return any(
            is_na(v)
            for v in (self.close, self.adx, self.atr, self.atr_baseline, self.long_ma, self.prior_high)
        )


def classify_regime(inputs: RegimeInputs, thresholds: RegimeThresholds) -> Regime:
    """
    Classify one bar. Pure function, first matching rule wins.

    Args:
        inputs: Indicator values for the bar
        thresholds: ADX thresholds and volatility multipliers

    Returns:
        The matched Regime, or Regime.UNDEFINED
    """
    if inputs.has_na():
        return Regime.UNDEFINED

    adx = inputs.adx
    strong = thresholds.strong_threshold
    weak = thresholds.weak_threshold
    high_vol = inputs.atr > inputs.atr_baseline * thresholds.high_vol_multiplier
    low_vol = inputs.atr < inputs.atr_baseline * thresholds.low_vol_multiplier

    if high_vol and inputs.close > inputs.long_ma and adx > strong:
        return Regime.STRONG_UPTREND
    if high_vol and inputs.close < inputs.long_ma and adx > strong:
        return Regime.STRONG_DOWNTREND
    if high_vol and adx <= weak:
        return Regime.HIGH_VOLATILITY_CHOPPY
    if low_vol and adx <= weak:
        return Regime.FLAT_MARKET
    if adx <= weak:
        return Regime.CHOPPY_MARKET
    if weak < adx <= strong:
        return Regime.WEAK_TREND
    if high_vol and inputs.close > inputs.prior_high:
        return Regime.PARABOLIC_SPIKE
    return Regime.UNDEFINED


def classify_trend_strength(adx: float, strong_threshold: float, weak_threshold: float) -> TrendStrength:
    """ADX > strong: STRONG_TREND, ADX > weak: WEAK_TREND, else NO_TREND."""
    if is_na(adx):
        return TrendStrength.UNDEFINED
    if adx > strong_threshold:
        return TrendStrength.STRONG_TREND
    if adx > weak_threshold:
        return TrendStrength.WEAK_TREND
    return TrendStrength.NO_TREND


class RegimeClassifier:
    """
    Incremental regime classifier.

    Owns ADX, ATR, the ATR baseline, the long-term SMA of close and the
    prior N-bar high, updates them once per bar and runs the decision table.

    With ``thresholds.carry_forward`` an unmatched bar keeps the previous
    regime instead of reporting UNDEFINED.
    """

    def __init__(self, thresholds: RegimeThresholds | None = None) -> None:
        self.thresholds = thresholds or RegimeThresholds()
        t = self.thresholds
        self._adx = IncrementalADX(t.adx_length)
        self._atr = IncrementalATR(t.atr_length)
        self._atr_baseline = IncrementalSMA(t.atr_baseline_length)
        self._long_ma = IncrementalSMA(t.long_ma_length)
        self._highs = RollingWindow(t.breakout_length)
        self.regime = Regime.UNDEFINED
        self.inputs: RegimeInputs | None = None

    def update(self, high: float, low: float, close: float) -> Regime:
        # Prior N-bar high excludes the current bar
        prior_high = self._highs.max if self._highs.is_full() else np.nan
        if not is_na(high):
            self._highs.push(high)

        self._adx.update(high=high, low=low, close=close)
        self._atr.update(high=high, low=low, close=close)
        self._atr_baseline.update(source=self._atr.value)
        self._long_ma.update(source=close)

        self.inputs = RegimeInputs(
            close=close,
            adx=self._adx.value,
            atr=self._atr.value,
            atr_baseline=self._atr_baseline.value,
            long_ma=self._long_ma.value,
            prior_high=prior_high,
        )
        matched = classify_regime(self.inputs, self.thresholds)
        if matched is Regime.UNDEFINED and self.thresholds.carry_forward:
            return self.regime
        self.regime = matched
        return matched

    def reset(self) -> None:
        self._adx.reset()
        self._atr.reset()
        self._atr_baseline.reset()
        self._long_ma.reset()
        self._highs.clear()
        self.regime = Regime.UNDEFINED
        self.inputs = None

    @property
    def adx(self) -> float:
        return self._adx.value

    @property
    def atr(self) -> float:
        return self._atr.value
