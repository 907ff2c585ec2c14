"""
FDI / LHEA fractal study.

Produces no edges. Each bar reports the inverted fractal dimension index
and the Hurst-style LHEA estimate (optionally smoothed), plus Williams
fractal flags on both series. ``fast`` carries FDI and ``slow`` LHEA.
"""

from __future__ import annotations

from ..config.models import FractalDimensionParams
from ..engine.interfaces import Bar, BarOutput
from ..indicators.incremental import IncrementalFDI, IncrementalLHEA, create_smoother
from ..structures.detectors import IncrementalWilliamsFractal
from .base import BaseStrategy
from .registry import register_strategy


@register_strategy("fractal_dimension")
class FractalDimensionStrategy(BaseStrategy):

    DESCRIPTION = "Fractal dimension index and LHEA with Williams fractals (study, no edges)"
    PARAMS_CLASS = FractalDimensionParams

    def __init__(self, params: FractalDimensionParams | dict | None = None) -> None:
        super().__init__(params)
        p = self.params
        self._fdi = IncrementalFDI(p.length)
        self._lhea = IncrementalLHEA(p.length, p.smoothing)
        self._fdi_smooth = None
        self._lhea_smooth = None
        if p.use_smoothing:
            self._fdi_smooth = create_smoother(p.smoothing, p.smoothing_length)
            self._lhea_smooth = create_smoother(p.smoothing, p.smoothing_length)
        self._fdi_fractal = IncrementalWilliamsFractal(p.fractal_period)
        self._lhea_fractal = IncrementalWilliamsFractal(p.fractal_period)

    def _step(self, bar: Bar, bar_index: int) -> BarOutput:
        self._fdi.update(close=bar.close)
        self._lhea.update(high=bar.high, low=bar.low, close=bar.close)

        fdi = self._fdi.value
        lhea = self._lhea.value
        if self._fdi_smooth is not None:
            self._fdi_smooth.update(source=fdi)
            self._lhea_smooth.update(source=lhea)
            fdi = self._fdi_smooth.value
            lhea = self._lhea_smooth.value

        self._fdi_fractal.update(fdi)
        self._lhea_fractal.update(lhea)

        return BarOutput(
            bar_index=bar_index,
            timestamp=bar.timestamp,
            fast=fdi,
            slow=lhea,
            extras={
                "fdi": fdi,
                "fdi_raw": self._fdi.raw,
                "lhea": lhea,
                "fdi_up_fractal": bool(self._fdi_fractal.up),
                "fdi_down_fractal": bool(self._fdi_fractal.down),
                "lhea_up_fractal": bool(self._lhea_fractal.up),
                "lhea_down_fractal": bool(self._lhea_fractal.down),
                "fractal_center": self._fdi_fractal.center_index,
            },
        )

    def _reset_state(self) -> None:
        self._fdi.reset()
        self._lhea.reset()
        if self._fdi_smooth is not None:
            self._fdi_smooth.reset()
            self._lhea_smooth.reset()
        self._fdi_fractal.reset()
        self._lhea_fractal.reset()
