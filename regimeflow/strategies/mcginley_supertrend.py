"""
McGinley-smoothed supertrend.

Bands:
    adj = multiplier * (1 - max(clustering_factor, 0.5 - perf / 100))
    up  = McGinley(price - adj * atr),  dn = McGinley(price + adj * atr)
where perf is an EMA of |close - close[1]| and atr is either Wilder's ATR
or the cosine-weighted ATR. The up band only ratchets higher (and dn lower)
while the previous price stays on the right side of the previous band.

The trend flips to -1 when price breaks below the previous up band and to
+1 when it breaks above the previous down band. A long setup is trend +1
with price above the cosine WMA; it emits an entry only once the same setup
has been seen on an earlier bar. The band midpoint drives partial-close
flags in extras.
"""

from __future__ import annotations

import math

import numpy as np

from ..config.models import McGinleySupertrendParams
from ..engine.interfaces import Bar, BarOutput
from ..indicators.incremental import (
    IncrementalATR,
    IncrementalCosineATR,
    IncrementalCosineWMA,
    IncrementalEMA,
    IncrementalMcGinley,
)
from ..indicators.incremental.base import is_na
from ..signals.crossover import AntiOverlapGate
from .base import BaseStrategy
from .registry import register_strategy


@register_strategy("mcginley_supertrend")
class McGinleySupertrendStrategy(BaseStrategy):

    DESCRIPTION = "Supertrend bands smoothed by McGinley Dynamic with cosine-weighted filters"
    PARAMS_CLASS = McGinleySupertrendParams

    def __init__(self, params: McGinleySupertrendParams | dict | None = None) -> None:
        super().__init__(params)
        p = self.params
        if p.atr_type == "cosine":
            self._atr = IncrementalCosineATR(p.atr_length)
        else:
            self._atr = IncrementalATR(p.atr_length)
        self._cwma = IncrementalCosineWMA(p.cwma_length)
        self._perf = IncrementalEMA(p.perf_memory)
        self._up_md = IncrementalMcGinley(p.mcginley_length, p.mcginley_k, p.mcginley_exponent)
        self._dn_md = IncrementalMcGinley(p.mcginley_length, p.mcginley_k, p.mcginley_exponent)
        self._gate = AntiOverlapGate()
        self._init_state()

    def _init_state(self) -> None:
        self._prev_close = np.nan
        self._prev_price = np.nan
        self.up = np.nan
        self.dn = np.nan
        self.trend = 1
        self._long_setup_seen = False
        self._short_setup_seen = False
        self._down_trend_seen = False
        self._up_trend_seen = False

    def _multiplier(self) -> float:
        p = self.params
        perf = self._perf.value
        if is_na(perf):
            return np.nan
        return p.multiplier * (1.0 - max(p.clustering_factor, 0.5 - perf / 100.0))

    def _step(self, bar: Bar, bar_index: int) -> BarOutput:
        price = bar.source(self.params.source)

        self._atr.update(high=bar.high, low=bar.low, close=bar.close)
        self._cwma.update(source=price)
        if not is_na(self._prev_close):
            self._perf.update(source=abs(bar.close - self._prev_close))

        adj = self._multiplier()
        atr = self._atr.value
        self._up_md.update(source=price - adj * atr)
        self._dn_md.update(source=price + adj * atr)

        up = self._up_md.value
        dn = self._dn_md.value
        up1 = dn1 = np.nan
        if not is_na(up):
            up1 = up if is_na(self.up) else self.up
            if self._prev_price > up1:
                up = max(up, up1)
        if not is_na(dn):
            dn1 = dn if is_na(self.dn) else self.dn
            if self._prev_price < dn1:
                dn = min(dn, dn1)

        if self.trend == -1 and price > dn1:
            self.trend = 1
        elif self.trend == 1 and price < up1:
            self.trend = -1

        cwma = self._cwma.value
        long_setup = self.trend == 1 and price > cwma
        short_setup = self.trend == -1 and price < cwma
        entry_long = long_setup and self._long_setup_seen
        entry_short = short_setup and self._short_setup_seen
        exit_long = self.trend == -1 and self._down_trend_seen
        exit_short = self.trend == 1 and self._up_trend_seen

        self._long_setup_seen |= long_setup
        self._short_setup_seen |= short_setup
        self._down_trend_seen |= self.trend == -1
        self._up_trend_seen |= self.trend == 1

        entry_long, exit_long, entry_short, exit_short = self._gate.step(
            entry_long=entry_long,
            exit_long=exit_long,
            entry_short=entry_short,
            exit_short=exit_short,
        )

        self.up = up
        self.dn = dn
        self._prev_price = price
        self._prev_close = bar.close

        midpoint = (up + dn) / 2.0
        has_mid = not math.isnan(midpoint)
        return BarOutput(
            bar_index=bar_index,
            timestamp=bar.timestamp,
            fast=up if self.trend == 1 else dn,
            slow=cwma,
            entry_long=entry_long,
            exit_long=exit_long,
            entry_short=entry_short,
            exit_short=exit_short,
            extras={
                "up": up,
                "dn": dn,
                "midpoint": midpoint,
                "trend": self.trend,
                "cwma": cwma,
                "atr": atr,
                "multiplier": adj,
                "partial_close_long": (
                    has_mid and bar.close < midpoint and self._gate.long_open and self.long_enabled
                ),
                "partial_close_short": (
                    has_mid and bar.close > midpoint and self._gate.short_open and self.short_enabled
                ),
                "partial_close_percent": self.params.partial_close_percent,
            },
        )

    def _reset_state(self) -> None:
        self._atr.reset()
        self._cwma.reset()
        self._perf.reset()
        self._up_md.reset()
        self._dn_md.reset()
        self._gate.reset()
        self._init_state()
