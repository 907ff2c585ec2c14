"""
Regime-selected MA crossover strategy.

The regime classifier labels every bar; the label picks the MA family
(EMA when trending, SMA when ranging, VWMA when volatile, nothing when
UNDEFINED). Fast/slow MAs of that family, after the optional distance
filter, feed crossover detection and the anti-overlap gate.
"""

from __future__ import annotations

from ..config.models import RegimeMAParams
from ..engine.interfaces import Bar, BarOutput
from ..regime.classifier import RegimeClassifier
from ..signals.adapter import RegimeMAAdapter
from ..signals.crossover import AntiOverlapGate, CrossoverDetector
from .base import BaseStrategy
from .registry import register_strategy


@register_strategy("regime_ma")
class RegimeMAStrategy(BaseStrategy):

    DESCRIPTION = "Regime classifier selects EMA/SMA/VWMA family for a fast/slow crossover"
    PARAMS_CLASS = RegimeMAParams

    def __init__(self, params: RegimeMAParams | dict | None = None) -> None:
        super().__init__(params)
        p = self.params
        self._classifier = RegimeClassifier(p.regime)
        self._adapter = RegimeMAAdapter(p.fast_length, p.slow_length, p.distance_threshold)
        self._cross = CrossoverDetector()
        self._gate = AntiOverlapGate()

    def _step(self, bar: Bar, bar_index: int) -> BarOutput:
        source = bar.source(self.params.source)
        regime = self._classifier.update(bar.high, bar.low, bar.close)
        fast, slow = self._adapter.update(source, bar.volume, regime)

        bullish, bearish = self._cross.update(fast, slow)
        entry_long, exit_long, entry_short, exit_short = self._gate.step(
            entry_long=bullish,
            exit_long=bearish,
            entry_short=bearish,
            exit_short=bullish,
        )

        family = self._adapter.family
        return BarOutput(
            bar_index=bar_index,
            timestamp=bar.timestamp,
            fast=fast,
            slow=slow,
            regime=regime,
            entry_long=entry_long,
            exit_long=exit_long,
            entry_short=entry_short,
            exit_short=exit_short,
            extras={
                "adx": self._classifier.adx,
                "atr": self._classifier.atr,
                "ma_family": family.value if family is not None else None,
            },
        )

    def _reset_state(self) -> None:
        self._classifier.reset()
        self._adapter.reset()
        self._cross.reset()
        self._gate.reset()
