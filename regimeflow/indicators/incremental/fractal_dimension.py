"""
Fractal dimension and Hurst-style exponent indicators.

IncrementalFDI measures how "space filling" the recent close path is:
values near 1 mean a smooth trend, near 2 a jagged range. It is exposed
normalised and inverted to 0..1 (1 = trending).

IncrementalLHEA estimates a Hurst-style exponent from the ratio of the
N-bar range to a smoothed True Range.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import Any

import numpy as np

from ...structures.primitives import RollingWindow
from .base import IncrementalIndicator, is_na, require_length
from .core import IncrementalHighest, IncrementalLowest, IncrementalTrueRange
from .factory import create_smoother


@dataclass
class IncrementalFDI(IncrementalIndicator):
    """
    Fractal Dimension Index on closes.

    Over the last ``length`` closes with hh/ll their highest/lowest:
        d_i = (close[i] - ll) / (hh - ll)
        path = sum_{i=1}^{length-1} sqrt((d_i - d_{i+1})**2 + 1 / length**2)
        fdi = 1 + (ln(path) + ln(2)) / ln(2 * length)
    value = 1 - (fdi - 1). A flat window (hh == ll) normalises every
    close to 0.
    """

    length: int = 30
    _closes: RollingWindow = field(init=False)
    _raw: float = field(default=np.nan, init=False)

    def __post_init__(self) -> None:
        require_length("IncrementalFDI", self.length, minimum=2)
        # close[length] is read as the older neighbour of close[length - 1]
        self._closes = RollingWindow(self.length + 1)

    def update(self, close: float, **kwargs: Any) -> None:
        if is_na(close):
            return
        self._closes.push(close)
        if not self._closes.is_full():
            return

        newest_first = self._closes.to_array()[::-1]
        recent = newest_first[: self.length]
        hh = recent.max()
        ll = recent.min()
        span = hh - ll
        if span == 0:
            normalised = np.zeros_like(newest_first)
        else:
            normalised = (newest_first - ll) / span

        steps = normalised[1:self.length] - normalised[2:self.length + 1]
        path = float(np.sqrt(steps ** 2 + 1.0 / self.length ** 2).sum())
        self._raw = 1.0 + (math.log(path) + math.log(2.0)) / math.log(2.0 * self.length)

    def reset(self) -> None:
        self._closes.clear()
        self._raw = np.nan

    @property
    def raw(self) -> float:
        return self._raw

    @property
    def value(self) -> float:
        if is_na(self._raw):
            return np.nan
        return 1.0 - (self._raw - 1.0)

    @property
    def is_ready(self) -> bool:
        return not is_na(self._raw)


@dataclass
class IncrementalLHEA(IncrementalIndicator):
    """
    Hurst-style exponent estimate.

        atr = smoother(true_range, length)
        H = (ln(highest(high) - lowest(low)) - ln(atr)) / ln(length)

    ``smoothing`` names a method from the smoother factory. A non-positive
    range or ATR yields 0.
    """

    length: int = 30
    smoothing: str = "zlema"
    _tr: IncrementalTrueRange = field(init=False)
    _atr: IncrementalIndicator = field(init=False)
    _highest: IncrementalHighest = field(init=False)
    _lowest: IncrementalLowest = field(init=False)

    def __post_init__(self) -> None:
        require_length("IncrementalLHEA", self.length, minimum=2)
        self._tr = IncrementalTrueRange()
        self._atr = create_smoother(self.smoothing, self.length)
        self._highest = IncrementalHighest(self.length)
        self._lowest = IncrementalLowest(self.length)

    def update(self, high: float, low: float, close: float, **kwargs: Any) -> None:
        self._tr.update(high=high, low=low, close=close)
        self._atr.update(source=self._tr.value)
        self._highest.update(source=high)
        self._lowest.update(source=low)

    def reset(self) -> None:
        self._tr.reset()
        self._atr.reset()
        self._highest.reset()
        self._lowest.reset()

    @property
    def value(self) -> float:
        atr = self._atr.value
        hh = self._highest.value
        ll = self._lowest.value
        if is_na(atr) or is_na(hh) or is_na(ll):
            return np.nan
        span = hh - ll
        if span <= 0 or atr <= 0:
            return 0.0
        return (math.log(span) - math.log(atr)) / math.log(self.length)

    @property
    def is_ready(self) -> bool:
        return not is_na(self.value)
