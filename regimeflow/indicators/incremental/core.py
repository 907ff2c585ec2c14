"""
Rolling statistics: the windowed and recursive building blocks.

Includes SMA, Sum, Stdev, EMA, RMA, True Range, ATR, ADX/DMI, Correlation,
cumulative sum, OBV, Highest/Lowest, WMA and VWMA.

Conventions shared by every class here:
- A NaN input is ignored (state untouched), so an unavailable upstream
  value delays the downstream warm-up instead of poisoning it.
- ``value`` is NaN until the indicator has seen enough samples.
- Degenerate divisions (zero range, zero DI sum, zero variance) return
  a defined fallback, never inf or NaN.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import Any

import numpy as np

from ...structures.primitives import RollingWindow
from .base import IncrementalIndicator, is_na, require_length, safe_div


@dataclass
class IncrementalSMA(IncrementalIndicator):
    """
    Simple Moving Average over a RollingWindow running sum.

    NaN until ``length`` samples have been seen.
    """

    length: int
    _window: RollingWindow = field(init=False)

    def __post_init__(self) -> None:
        require_length("IncrementalSMA", self.length)
        self._window = RollingWindow(self.length)

    def update(self, source: float, **kwargs: Any) -> None:
        if is_na(source):
            return
        self._window.push(source)

    def reset(self) -> None:
        self._window.clear()

    @property
    def value(self) -> float:
        if not self._window.is_full():
            return np.nan
        return self._window.mean

    @property
    def is_ready(self) -> bool:
        return self._window.is_full()


@dataclass
class IncrementalSum(IncrementalIndicator):
    """Windowed sum over the last ``length`` samples."""

    length: int
    _window: RollingWindow = field(init=False)

    def __post_init__(self) -> None:
        require_length("IncrementalSum", self.length)
        self._window = RollingWindow(self.length)

    def update(self, source: float, **kwargs: Any) -> None:
        if is_na(source):
            return
        self._window.push(source)

    def reset(self) -> None:
        self._window.clear()

    @property
    def value(self) -> float:
        if not self._window.is_full():
            return np.nan
        return self._window.sum

    @property
    def is_ready(self) -> bool:
        return self._window.is_full()


@dataclass
class IncrementalStdev(IncrementalIndicator):
    """
    Population standard deviation over ``length`` samples.

    Uses the biased estimator (divide by n), the convention of charting
    platforms' ``stdev`` built-in.
    """

    length: int
    _window: RollingWindow = field(init=False)

    def __post_init__(self) -> None:
        require_length("IncrementalStdev", self.length)
        self._window = RollingWindow(self.length)

    def update(self, source: float, **kwargs: Any) -> None:
        if is_na(source):
            return
        self._window.push(source)

    def reset(self) -> None:
        self._window.clear()

    @property
    def mean(self) -> float:
        if not self._window.is_full():
            return np.nan
        return self._window.mean

    @property
    def value(self) -> float:
        if not self._window.is_full():
            return np.nan
        return self._window.stdev

    @property
    def is_ready(self) -> bool:
        return self._window.is_full()


@dataclass
class IncrementalEMA(IncrementalIndicator):
    """
    Exponential Moving Average with O(1) updates.

    Formula:
        alpha = 2 / (length + 1)
        ema = alpha * source + (1 - alpha) * ema_prev

    The first value is the SMA of the first ``length`` samples.
    """

    length: int
    _alpha: float = field(init=False)
    _ema: float = field(default=np.nan, init=False)
    _count: int = field(default=0, init=False)
    _warmup_sum: float = field(default=0.0, init=False)

    def __post_init__(self) -> None:
        require_length("IncrementalEMA", self.length)
        self._alpha = 2.0 / (self.length + 1)

    def update(self, source: float, **kwargs: Any) -> None:
        if is_na(source):
            return
        self._count += 1

        if self._count <= self.length:
            self._warmup_sum += source
            if self._count == self.length:
                self._ema = self._warmup_sum / self.length
        else:
            self._ema = self._alpha * source + (1 - self._alpha) * self._ema

    def reset(self) -> None:
        self._ema = np.nan
        self._count = 0
        self._warmup_sum = 0.0

    @property
    def value(self) -> float:
        return self._ema

    @property
    def is_ready(self) -> bool:
        return self._count >= self.length


@dataclass
class IncrementalRMA(IncrementalIndicator):
    """
    Wilder's smoothed moving average.

    Formula:
        rma = rma_prev + (source - rma_prev) / length

    Seeded by the first sample, so the output is defined from the first
    update on. The decay is 1/length, slower than an EMA of the same length.
    """

    length: int
    _rma: float = field(default=np.nan, init=False)
    _count: int = field(default=0, init=False)

    def __post_init__(self) -> None:
        require_length("IncrementalRMA", self.length)

    def update(self, source: float, **kwargs: Any) -> None:
        if is_na(source):
            return
        self._count += 1
        if self._count == 1:
            self._rma = source
        else:
            self._rma = self._rma + (source - self._rma) / self.length

    def reset(self) -> None:
        self._rma = np.nan
        self._count = 0

    @property
    def value(self) -> float:
        return self._rma

    @property
    def is_ready(self) -> bool:
        return self._count >= 1


@dataclass
class IncrementalTrueRange(IncrementalIndicator):
    """
    True Range of the latest bar.

    tr = max(high - low, |high - prev_close|, |low - prev_close|)

    The first bar has no previous close and uses high - low. A bar with a
    NaN field yields NaN and keeps the previous close.
    """

    _prev_close: float = field(default=np.nan, init=False)
    _tr: float = field(default=np.nan, init=False)

    def update(self, high: float, low: float, close: float, **kwargs: Any) -> None:
        if is_na(high) or is_na(low) or is_na(close):
            self._tr = np.nan
            return
        self._tr = true_range(high, low, self._prev_close)
        self._prev_close = close

    def reset(self) -> None:
        self._prev_close = np.nan
        self._tr = np.nan

    @property
    def value(self) -> float:
        return self._tr

    @property
    def is_ready(self) -> bool:
        return not is_na(self._tr)


@dataclass
class IncrementalATR(IncrementalIndicator):
    """Average True Range: RMA of True Range."""

    length: int = 14
    _tr: IncrementalTrueRange = field(init=False)
    _rma: IncrementalRMA = field(init=False)

    def __post_init__(self) -> None:
        require_length("IncrementalATR", self.length)
        self._tr = IncrementalTrueRange()
        self._rma = IncrementalRMA(self.length)

    def update(self, high: float, low: float, close: float, **kwargs: Any) -> None:
        self._tr.update(high=high, low=low, close=close)
        self._rma.update(source=self._tr.value)

    def reset(self) -> None:
        self._tr.reset()
        self._rma.reset()

    @property
    def true_range(self) -> float:
        return self._tr.value

    @property
    def value(self) -> float:
        return self._rma.value

    @property
    def is_ready(self) -> bool:
        return self._rma.is_ready


@dataclass
class IncrementalADX(IncrementalIndicator):
    """
    Average Directional Index with the DI+/DI- lines.

    Per bar:
        up = high - prev_high, down = prev_low - low
        dm_plus = max(up, 0) if up > down else 0
        dm_minus = max(down, 0) if down > up else 0
        di_plus = 100 * rma(dm_plus) / rma(tr)      (0 when rma(tr) == 0)
        di_minus = 100 * rma(dm_minus) / rma(tr)    (0 when rma(tr) == 0)
        dx = 100 * |di_plus - di_minus| / (di_plus + di_minus)   (0 when the sum is 0)
        adx = rma(dx)

    The first bar has no previous high/low, so both directional movements
    are 0 there. A flat series therefore gives DI+ = DI- = DX = ADX = 0.
    """

    length: int = 14
    _tr: IncrementalTrueRange = field(init=False)
    _smoothed_tr: IncrementalRMA = field(init=False)
    _smoothed_plus_dm: IncrementalRMA = field(init=False)
    _smoothed_minus_dm: IncrementalRMA = field(init=False)
    _smoothed_dx: IncrementalRMA = field(init=False)
    _prev_high: float = field(default=np.nan, init=False)
    _prev_low: float = field(default=np.nan, init=False)
    _plus_di: float = field(default=np.nan, init=False)
    _minus_di: float = field(default=np.nan, init=False)
    _dx: float = field(default=np.nan, init=False)

    def __post_init__(self) -> None:
        require_length("IncrementalADX", self.length)
        self._tr = IncrementalTrueRange()
        self._smoothed_tr = IncrementalRMA(self.length)
        self._smoothed_plus_dm = IncrementalRMA(self.length)
        self._smoothed_minus_dm = IncrementalRMA(self.length)
        self._smoothed_dx = IncrementalRMA(self.length)

    def update(self, high: float, low: float, close: float, **kwargs: Any) -> None:
        if is_na(high) or is_na(low) or is_na(close):
            return
        self._tr.update(high=high, low=low, close=close)

        if is_na(self._prev_high):
            plus_dm = 0.0
            minus_dm = 0.0
        else:
            up_move = high - self._prev_high
            down_move = self._prev_low - low
            plus_dm = max(up_move, 0.0) if up_move > down_move else 0.0
            minus_dm = max(down_move, 0.0) if down_move > up_move else 0.0

        self._prev_high = high
        self._prev_low = low

        self._smoothed_tr.update(source=self._tr.value)
        self._smoothed_plus_dm.update(source=plus_dm)
        self._smoothed_minus_dm.update(source=minus_dm)

        smoothed_tr = self._smoothed_tr.value
        self._plus_di = safe_div(self._smoothed_plus_dm.value, smoothed_tr) * 100.0
        self._minus_di = safe_div(self._smoothed_minus_dm.value, smoothed_tr) * 100.0

        di_sum = self._plus_di + self._minus_di
        self._dx = safe_div(abs(self._plus_di - self._minus_di), di_sum) * 100.0
        self._smoothed_dx.update(source=self._dx)

    def reset(self) -> None:
        self._tr.reset()
        self._smoothed_tr.reset()
        self._smoothed_plus_dm.reset()
        self._smoothed_minus_dm.reset()
        self._smoothed_dx.reset()
        self._prev_high = np.nan
        self._prev_low = np.nan
        self._plus_di = np.nan
        self._minus_di = np.nan
        self._dx = np.nan

    @property
    def value(self) -> float:
        """Returns ADX value."""
        return self._smoothed_dx.value

    @property
    def plus_di(self) -> float:
        return self._plus_di

    @property
    def minus_di(self) -> float:
        return self._minus_di

    @property
    def dx(self) -> float:
        return self._dx

    @property
    def is_ready(self) -> bool:
        return self._smoothed_dx.is_ready


@dataclass
class IncrementalCorrelation(IncrementalIndicator):
    """
    Pearson correlation of two aligned streams over ``length`` pairs.

    A pair is only consumed when both sides are defined. When either side
    has zero variance over the window the correlation is 0.
    """

    length: int
    _x: RollingWindow = field(init=False)
    _y: RollingWindow = field(init=False)
    _xy: RollingWindow = field(init=False)

    def __post_init__(self) -> None:
        require_length("IncrementalCorrelation", self.length, minimum=2)
        self._x = RollingWindow(self.length)
        self._y = RollingWindow(self.length)
        self._xy = RollingWindow(self.length)

    def update(self, x: float, y: float, **kwargs: Any) -> None:
        if is_na(x) or is_na(y):
            return
        self._x.push(x)
        self._y.push(y)
        self._xy.push(x * y)

    def reset(self) -> None:
        self._x.clear()
        self._y.clear()
        self._xy.clear()

    @property
    def value(self) -> float:
        if not self._x.is_full():
            return np.nan
        std_x = self._x.stdev
        std_y = self._y.stdev
        if std_x == 0.0 or std_y == 0.0:
            return 0.0
        covariance = self._xy.mean - self._x.mean * self._y.mean
        return max(-1.0, min(1.0, covariance / (std_x * std_y)))

    @property
    def is_ready(self) -> bool:
        return self._x.is_full()


@dataclass
class IncrementalCum(IncrementalIndicator):
    """Cumulative sum since the first sample."""

    _total: float = field(default=0.0, init=False)
    _count: int = field(default=0, init=False)

    def update(self, source: float, **kwargs: Any) -> None:
        if is_na(source):
            return
        self._total += source
        self._count += 1

    def reset(self) -> None:
        self._total = 0.0
        self._count = 0

    @property
    def value(self) -> float:
        if self._count == 0:
            return np.nan
        return self._total

    @property
    def is_ready(self) -> bool:
        return self._count > 0


@dataclass
class IncrementalOBV(IncrementalIndicator):
    """
    On Balance Volume: cumulative signed volume.

    The first bar has no previous close and contributes 0.
    """

    _prev_close: float = field(default=np.nan, init=False)
    _cum: IncrementalCum = field(default_factory=IncrementalCum, init=False)

    def update(self, close: float, volume: float, **kwargs: Any) -> None:
        if is_na(close) or is_na(volume):
            return
        if is_na(self._prev_close) or close == self._prev_close:
            signed_volume = 0.0
        elif close > self._prev_close:
            signed_volume = volume
        else:
            signed_volume = -volume
        self._prev_close = close
        self._cum.update(source=signed_volume)

    def reset(self) -> None:
        self._prev_close = np.nan
        self._cum.reset()

    @property
    def value(self) -> float:
        return self._cum.value

    @property
    def is_ready(self) -> bool:
        return self._cum.is_ready


@dataclass
class IncrementalHighest(IncrementalIndicator):
    """Highest value over the last ``length`` samples."""

    length: int
    _window: RollingWindow = field(init=False)

    def __post_init__(self) -> None:
        require_length("IncrementalHighest", self.length)
        self._window = RollingWindow(self.length)

    def update(self, source: float, **kwargs: Any) -> None:
        if is_na(source):
            return
        self._window.push(source)

    def reset(self) -> None:
        self._window.clear()

    @property
    def value(self) -> float:
        if not self._window.is_full():
            return np.nan
        return self._window.max

    @property
    def is_ready(self) -> bool:
        return self._window.is_full()


@dataclass
class IncrementalLowest(IncrementalIndicator):
    """Lowest value over the last ``length`` samples."""

    length: int
    _window: RollingWindow = field(init=False)

    def __post_init__(self) -> None:
        require_length("IncrementalLowest", self.length)
        self._window = RollingWindow(self.length)

    def update(self, source: float, **kwargs: Any) -> None:
        if is_na(source):
            return
        self._window.push(source)

    def reset(self) -> None:
        self._window.clear()

    @property
    def value(self) -> float:
        if not self._window.is_full():
            return np.nan
        return self._window.min

    @property
    def is_ready(self) -> bool:
        return self._window.is_full()


@dataclass
class IncrementalWMA(IncrementalIndicator):
    """
    Linearly weighted moving average with O(1) updates.

    Newest sample has weight ``length``, oldest weight 1. On each push the
    weighted sum loses one copy of the previous plain sum (every weight
    drops by one) and gains ``source * length``.
    """

    length: int = 20
    _window: RollingWindow = field(init=False)
    _weighted_sum: float = field(default=0.0, init=False)
    _weight_divisor: int = field(default=0, init=False)

    def __post_init__(self) -> None:
        require_length("IncrementalWMA", self.length)
        self._window = RollingWindow(self.length)
        self._weight_divisor = self.length * (self.length + 1) // 2

    def update(self, source: float, **kwargs: Any) -> None:
        if is_na(source):
            return
        if self._window.is_full():
            self._weighted_sum = self._weighted_sum - self._window.sum + source * self.length
        else:
            self._weighted_sum += source * (len(self._window) + 1)
        self._window.push(source)

    def reset(self) -> None:
        self._window.clear()
        self._weighted_sum = 0.0

    @property
    def value(self) -> float:
        if not self._window.is_full():
            return np.nan
        return self._weighted_sum / self._weight_divisor

    @property
    def is_ready(self) -> bool:
        return self._window.is_full()


@dataclass
class IncrementalVWMA(IncrementalIndicator):
    """
    Volume-weighted moving average.

    vwma = sum(source * volume) / sum(volume) over ``length`` bars.
    A window with zero total volume falls back to the plain SMA.
    """

    length: int = 20
    _weighted: RollingWindow = field(init=False)
    _volume: RollingWindow = field(init=False)
    _source: RollingWindow = field(init=False)

    def __post_init__(self) -> None:
        require_length("IncrementalVWMA", self.length)
        self._weighted = RollingWindow(self.length)
        self._volume = RollingWindow(self.length)
        self._source = RollingWindow(self.length)

    def update(self, source: float, volume: float, **kwargs: Any) -> None:
        if is_na(source) or is_na(volume):
            return
        self._weighted.push(source * volume)
        self._volume.push(volume)
        self._source.push(source)

    def reset(self) -> None:
        self._weighted.clear()
        self._volume.clear()
        self._source.clear()

    @property
    def value(self) -> float:
        if not self._source.is_full():
            return np.nan
        return safe_div(self._weighted.sum, self._volume.sum, fallback=self._source.mean)

    @property
    def is_ready(self) -> bool:
        return self._source.is_full()


def true_range(high: float, low: float, prev_close: float | None) -> float:
    """Single-bar True Range; ``prev_close`` of None/NaN gives high - low."""
    if prev_close is None or math.isnan(prev_close):
        return high - low
    return max(high - low, abs(high - prev_close), abs(low - prev_close))
