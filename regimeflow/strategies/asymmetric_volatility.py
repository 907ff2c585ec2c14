"""
Asymmetric volatility strategy.

Long while upward volatility exceeds downward volatility, exit when it
falls below; the short side mirrors this. Conditions are levels, so the
anti-overlap gate turns them into single entry/exit edges.
"""

from __future__ import annotations

from ..config.models import AsymmetricVolatilityParams
from ..engine.interfaces import Bar, BarOutput
from ..indicators.incremental import IncrementalAsymmetricVolatility
from ..indicators.incremental.base import is_na
from ..signals.crossover import AntiOverlapGate
from .base import BaseStrategy
from .registry import register_strategy


@register_strategy("asymmetric_volatility")
class AsymmetricVolatilityStrategy(BaseStrategy):

    DESCRIPTION = "Up vs down volatility (optionally McGinley-smoothed) regime switch"
    PARAMS_CLASS = AsymmetricVolatilityParams

    def __init__(self, params: AsymmetricVolatilityParams | dict | None = None) -> None:
        super().__init__(params)
        p = self.params
        self._volatility = IncrementalAsymmetricVolatility(
            length=p.length,
            measure=p.measure,
            prc_scale=p.prc_scale,
            use_mcginley=p.use_mcginley,
            mcginley_length=p.mcginley_length,
            mcginley_k=p.mcginley_k,
            mcginley_exponent=p.mcginley_exponent,
            cluster_lookback=p.cluster_lookback,
            clustering_adjustment=p.clustering_adjustment,
        )
        self._gate = AntiOverlapGate()

    def _step(self, bar: Bar, bar_index: int) -> BarOutput:
        self._volatility.update(source=bar.source(self.params.source))
        up = self._volatility.up
        down = self._volatility.down

        if is_na(up) or is_na(down):
            rising = falling = False
        else:
            rising = up > down
            falling = up < down

        entry_long, exit_long, entry_short, exit_short = self._gate.step(
            entry_long=rising,
            exit_long=falling,
            entry_short=falling,
            exit_short=rising,
        )

        return BarOutput(
            bar_index=bar_index,
            timestamp=bar.timestamp,
            fast=up,
            slow=down,
            entry_long=entry_long,
            exit_long=exit_long,
            entry_short=entry_short,
            exit_short=exit_short,
            extras={
                "up_volatility": up,
                "down_volatility": down,
                "adjustment_factor": self._volatility.adjustment_factor,
            },
        )

    def _reset_state(self) -> None:
        self._volatility.reset()
        self._gate.reset()
