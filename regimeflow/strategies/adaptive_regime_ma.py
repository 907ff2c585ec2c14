"""
Adaptive regime MA strategy.

Two EMAs whose smoothing factors are scaled every bar by the faith index
and by the ADX trend strength:
- strong trend (ADX > strong): faith weight 1.0
- weak trend (ADX > weak): faith weight 0.5
- no trend: faith weight 0.2

A bullish crossover of fast over slow is a long entry and a short exit;
a bearish crossover the reverse. The anti-overlap gate keeps at most one
open entry per side. OBV and its SMA are reported in extras.
"""

from __future__ import annotations

from ..config.models import AdaptiveRegimeMAParams
from ..engine.interfaces import Bar, BarOutput
from ..indicators.incremental import (
    IncrementalADX,
    IncrementalFaithIndex,
    IncrementalOBV,
    IncrementalSMA,
)
from ..regime.classifier import classify_trend_strength
from ..signals.adapter import AdaptiveAlphaAdapter
from ..signals.crossover import AntiOverlapGate, CrossoverDetector
from .base import BaseStrategy
from .registry import register_strategy


@register_strategy("adaptive_regime_ma")
class AdaptiveRegimeMAStrategy(BaseStrategy):

    DESCRIPTION = "Faith-index adaptive EMA crossover scaled by ADX trend strength"
    PARAMS_CLASS = AdaptiveRegimeMAParams

    def __init__(self, params: AdaptiveRegimeMAParams | dict | None = None) -> None:
        super().__init__(params)
        p = self.params
        self._faith = IncrementalFaithIndex(
            trust_length=p.trust_length,
            correlation_length=p.correlation_length,
            resilience_threshold=p.resilience_threshold,
            content_multiplier=p.content_multiplier,
            purpose_weight=p.purpose_weight,
            components=p.faith_components,
        )
        self._adx = IncrementalADX(p.adx_length)
        self._obv = IncrementalOBV()
        self._obv_signal = IncrementalSMA(p.obv_ma_length)
        self._adapter = AdaptiveAlphaAdapter(p.fast_length, p.slow_length)
        self._cross = CrossoverDetector()
        self._gate = AntiOverlapGate()

    def _step(self, bar: Bar, bar_index: int) -> BarOutput:
        p = self.params
        self._faith.update(close=bar.close)
        self._adx.update(high=bar.high, low=bar.low, close=bar.close)
        self._obv.update(close=bar.close, volume=bar.volume)
        self._obv_signal.update(source=self._obv.value)

        strength = classify_trend_strength(self._adx.value, p.strong_threshold, p.weak_threshold)
        fast, slow = self._adapter.update(bar.close, self._faith.value, strength)

        bullish, bearish = self._cross.update(fast, slow)
        entry_long, exit_long, entry_short, exit_short = self._gate.step(
            entry_long=bullish,
            exit_long=bearish,
            entry_short=bearish,
            exit_short=bullish,
        )

        return BarOutput(
            bar_index=bar_index,
            timestamp=bar.timestamp,
            fast=fast,
            slow=slow,
            entry_long=entry_long,
            exit_long=exit_long,
            entry_short=entry_short,
            exit_short=exit_short,
            extras={
                "faith": self._faith.value,
                "trust": self._faith.trust,
                "resilience": self._faith.resilience,
                "content": self._faith.content,
                "purpose": self._faith.purpose,
                "adx": self._adx.value,
                "trend_strength": strength.value,
                "fast_alpha": self._adapter.fast_alpha,
                "slow_alpha": self._adapter.slow_alpha,
                "obv": self._obv.value,
                "obv_signal": self._obv_signal.value,
            },
        )

    def _reset_state(self) -> None:
        self._faith.reset()
        self._adx.reset()
        self._obv.reset()
        self._obv_signal.reset()
        self._adapter.reset()
        self._cross.reset()
        self._gate.reset()
