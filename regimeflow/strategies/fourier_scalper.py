"""
Fourier convergence scalper.

Long entry when:
- the adaptive slope of the Fourier convergence line is positive
- close is above convergence + volatility_buffer * ATR
- more than ``cooldown`` bars have passed since the last trade
- SMA(momentum_fast) > SMA(momentum_slow)

Short entry mirrors each condition. There are no exit edges: positions are
left to the stop/target levels published in extras. ``trade_direction``
decides which sides may trade; only an emitted entry restarts the cooldown.
"""

from __future__ import annotations

from ..config.models import FourierScalperParams
from ..engine.interfaces import Bar, BarOutput
from ..indicators.incremental import IncrementalFourierConvergence, IncrementalSMA
from ..indicators.incremental.base import is_na
from .base import BaseStrategy
from .registry import register_strategy


STOP_LOSS_SCALE = 50.0
TAKE_PROFIT_SCALE = 100.0
TRAILING_SCALE = 50.0


@register_strategy("fourier_scalper")
class FourierScalperStrategy(BaseStrategy):

    DESCRIPTION = "Fourier convergence breakout with slope, momentum filter and cooldown"
    PARAMS_CLASS = FourierScalperParams

    def __init__(self, params: FourierScalperParams | dict | None = None) -> None:
        super().__init__(params)
        p = self.params
        self._fourier = IncrementalFourierConvergence(
            cycles=p.cycles, lookback=p.lookback, atr_length=p.atr_length
        )
        self._momentum_fast = IncrementalSMA(p.momentum_fast)
        self._momentum_slow = IncrementalSMA(p.momentum_slow)
        self.last_trade: int | None = None

    @property
    def long_enabled(self) -> bool:
        return self.params.trade_direction in ("long", "both")

    @property
    def short_enabled(self) -> bool:
        return self.params.trade_direction in ("short", "both")

    def _step(self, bar: Bar, bar_index: int) -> BarOutput:
        p = self.params
        fourier = self._fourier
        fourier.update(high=bar.high, low=bar.low, close=bar.close)
        self._momentum_fast.update(source=bar.close)
        self._momentum_slow.update(source=bar.close)

        fast = self._momentum_fast.value
        slow = self._momentum_slow.value
        slope = fourier.adaptive_slope
        convergence = fourier.convergence
        atr = fourier.atr

        entry_long = entry_short = False
        if not any(is_na(v) for v in (fast, slow, slope, convergence, atr)):
            cooled = self.last_trade is None or bar_index - self.last_trade > p.cooldown
            momentum_up = fast > slow
            buffer = p.volatility_buffer * atr
            entry_long = (
                slope > 0 and bar.close > convergence + buffer and cooled and momentum_up
            )
            entry_short = (
                slope < 0 and bar.close < convergence - buffer and cooled and not momentum_up
            )

        entry_long = entry_long and self.long_enabled
        entry_short = entry_short and self.short_enabled
        if entry_long or entry_short:
            self.last_trade = bar_index

        risk = abs(slope) + atr * p.risk_scale
        reach = risk * abs(fourier.weighted_slope)
        return BarOutput(
            bar_index=bar_index,
            timestamp=bar.timestamp,
            fast=fast,
            slow=slow,
            entry_long=entry_long,
            entry_short=entry_short,
            extras={
                "convergence": convergence,
                "weighted_slope": fourier.weighted_slope,
                "adaptive_slope": slope,
                "adjustment_factor": fourier.adjustment_factor,
                "atr": atr,
                "dynamic_risk_factor": risk,
                "long_stop_loss": bar.close - reach * STOP_LOSS_SCALE,
                "long_take_profit": bar.close + reach * TAKE_PROFIT_SCALE,
                "short_stop_loss": bar.close + reach * STOP_LOSS_SCALE,
                "short_take_profit": bar.close - reach * TAKE_PROFIT_SCALE,
                "trailing_points": risk * TRAILING_SCALE,
            },
        )

    def _reset_state(self) -> None:
        self._fourier.reset()
        self._momentum_fast.reset()
        self._momentum_slow.reset()
        self.last_trade = None
