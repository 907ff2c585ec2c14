"""
Recursive smoothing filters and windowed FIR smoothers.

Each filter consumes one sample per bar and keeps its own lags:
- IncrementalMcGinley: self-adjusting MA, zero lag on the first sample
- IncrementalSuperSmoother: 2-pole Ehlers super smoother
- IncrementalButterworth2 / IncrementalButterworth3: 2- and 3-pole IIR
- IncrementalZLEMA: EMA of the de-lagged source
- IncrementalInstantaneousTrendline: Ehlers iTrend
- IncrementalCosineWMA / IncrementalCosineATR: cosine-weighted FIR
- IncrementalHammingMA: Ehlers Hamming-windowed FIR

IIR coefficients are computed once at construction.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import Any

import numpy as np

from ...structures.primitives import RollingWindow
from .base import IncrementalIndicator, is_na, require_length
from .core import IncrementalEMA, IncrementalTrueRange


def _require_positive(name: str, param: str, value: float) -> None:
    if isinstance(value, bool) or not isinstance(value, (int, float)) or not value > 0:
        raise ValueError(
            f"{name} {param} must be a positive number, got {value!r}\n"
            f"\n"
            f"Fix: {name}({param}=14)"
        )


@dataclass
class IncrementalMcGinley(IncrementalIndicator):
    """
    McGinley Dynamic.

    Formula:
        prior = previous output (the source itself on the first sample)
        divisor = clamp(k * period * (src / prior) ** exponent, 1, period)
        md = prior + (src - prior) / divisor

    ``length`` may be fractional. A zero prior uses a price ratio of 1.
    """

    length: float = 14.0
    k: float = 0.6
    exponent: float = 2.0
    _md: float = field(default=np.nan, init=False)
    _count: int = field(default=0, init=False)

    def __post_init__(self) -> None:
        _require_positive("IncrementalMcGinley", "length", self.length)
        _require_positive("IncrementalMcGinley", "k", self.k)
        if isinstance(self.exponent, bool) or not isinstance(self.exponent, (int, float)):
            raise ValueError(
                f"IncrementalMcGinley exponent must be a number, got {self.exponent!r}\n"
                f"\n"
                f"Fix: IncrementalMcGinley(length=14, k=0.6, exponent=2.0)"
            )

    def update(self, source: float, **kwargs: Any) -> None:
        if is_na(source):
            return
        self._count += 1
        period = max(1.0, float(self.length))
        prior = source if is_na(self._md) else self._md

        ratio = 1.0 if prior == 0 else source / prior
        try:
            speed = self.k * period * ratio ** self.exponent
        except (OverflowError, ZeroDivisionError):
            speed = period
        if isinstance(speed, complex) or math.isnan(speed):
            # Negative ratio with a fractional exponent
            speed = period
        divisor = min(period, max(1.0, speed))
        self._md = prior + (source - prior) / divisor

    def reset(self) -> None:
        self._md = np.nan
        self._count = 0

    @property
    def value(self) -> float:
        return self._md

    @property
    def is_ready(self) -> bool:
        return self._count >= 1


@dataclass
class IncrementalSuperSmoother(IncrementalIndicator):
    """
    Ehlers 2-pole super smoother.

    Formula:
        a1 = exp(-sqrt(2) * pi / length)
        c2 = 2 * a1 * cos(sqrt(2) * pi / length)
        c3 = -a1 ** 2
        c1 = 1 - c2 - c3
        ss = c1 * (src + src[1]) / 2 + c2 * ss[1] + c3 * ss[2]

    The first output equals the source. Missing lags count as 0.
    """

    length: int = 10
    _c1: float = field(init=False)
    _c2: float = field(init=False)
    _c3: float = field(init=False)
    _prev_src: float = field(default=np.nan, init=False)
    _ss1: float = field(default=np.nan, init=False)
    _ss2: float = field(default=np.nan, init=False)

    def __post_init__(self) -> None:
        require_length("IncrementalSuperSmoother", self.length)
        a1 = math.exp(-math.sqrt(2) * math.pi / self.length)
        self._c2 = 2 * a1 * math.cos(math.sqrt(2) * math.pi / self.length)
        self._c3 = -a1 * a1
        self._c1 = 1 - self._c2 - self._c3

    def update(self, source: float, **kwargs: Any) -> None:
        if is_na(source):
            return
        if is_na(self._ss1):
            out = source
        else:
            prev_src = 0.0 if is_na(self._prev_src) else self._prev_src
            ss2 = 0.0 if is_na(self._ss2) else self._ss2
            out = self._c1 * (source + prev_src) / 2 + self._c2 * self._ss1 + self._c3 * ss2
        self._ss2 = self._ss1
        self._ss1 = out
        self._prev_src = source

    def reset(self) -> None:
        self._prev_src = np.nan
        self._ss1 = np.nan
        self._ss2 = np.nan

    @property
    def value(self) -> float:
        return self._ss1

    @property
    def is_ready(self) -> bool:
        return not is_na(self._ss1)


@dataclass
class IncrementalButterworth2(IncrementalIndicator):
    """
    2-pole Butterworth low-pass filter.

    Formula:
        a = exp(-sqrt(2) * pi / length)
        b = 2 * a * cos(sqrt(2) * pi / length)
        bf = b * bf[1] - a**2 * bf[2] + (1 - b + a**2) / 4 * (src + 2 * src[1] + src[2])

    Missing lags count as 0. Output is NaN until 3 samples have been seen.
    """

    length: int = 10
    _b: float = field(init=False)
    _a2: float = field(init=False)
    _gain: float = field(init=False)
    _src: list[float] = field(default_factory=lambda: [0.0, 0.0], init=False)
    _out: list[float] = field(default_factory=lambda: [0.0, 0.0], init=False)
    _count: int = field(default=0, init=False)

    def __post_init__(self) -> None:
        require_length("IncrementalButterworth2", self.length)
        a = math.exp(-math.sqrt(2) * math.pi / self.length)
        self._b = 2 * a * math.cos(math.sqrt(2) * math.pi / self.length)
        self._a2 = a * a
        self._gain = (1 - self._b + self._a2) / 4

    def update(self, source: float, **kwargs: Any) -> None:
        if is_na(source):
            return
        src1, src2 = self._src
        bf1, bf2 = self._out
        bf = self._b * bf1 - self._a2 * bf2 + self._gain * (source + 2 * src1 + src2)
        self._src = [source, src1]
        self._out = [bf, bf1]
        self._count += 1

    def reset(self) -> None:
        self._src = [0.0, 0.0]
        self._out = [0.0, 0.0]
        self._count = 0

    @property
    def value(self) -> float:
        if self._count < 3:
            return np.nan
        return self._out[0]

    @property
    def is_ready(self) -> bool:
        return self._count >= 3


@dataclass
class IncrementalButterworth3(IncrementalIndicator):
    """
    3-pole Butterworth low-pass filter.

    Formula:
        a = exp(-pi / length)
        b = 2 * a * cos(1.738 * pi / length)
        c = a**2
        bf = (b + c) * bf[1] - (c + b*c) * bf[2] + c**2 * bf[3]
             + (1 - b + c) * (1 - c) / 8 * (src + 3*src[1] + 3*src[2] + src[3])

    Missing lags count as 0. Output is NaN until 4 samples have been seen.
    """

    length: int = 10
    _k1: float = field(init=False)
    _k2: float = field(init=False)
    _k3: float = field(init=False)
    _gain: float = field(init=False)
    _src: list[float] = field(default_factory=lambda: [0.0, 0.0, 0.0], init=False)
    _out: list[float] = field(default_factory=lambda: [0.0, 0.0, 0.0], init=False)
    _count: int = field(default=0, init=False)

    def __post_init__(self) -> None:
        require_length("IncrementalButterworth3", self.length)
        a = math.exp(-math.pi / self.length)
        b = 2 * a * math.cos(1.738 * math.pi / self.length)
        c = a * a
        self._k1 = b + c
        self._k2 = c + b * c
        self._k3 = c * c
        self._gain = (1 - b + c) * (1 - c) / 8

    def update(self, source: float, **kwargs: Any) -> None:
        if is_na(source):
            return
        src1, src2, src3 = self._src
        bf1, bf2, bf3 = self._out
        bf = (
            self._k1 * bf1
            - self._k2 * bf2
            + self._k3 * bf3
            + self._gain * (source + 3 * src1 + 3 * src2 + src3)
        )
        self._src = [source, src1, src2]
        self._out = [bf, bf1, bf2]
        self._count += 1

    def reset(self) -> None:
        self._src = [0.0, 0.0, 0.0]
        self._out = [0.0, 0.0, 0.0]
        self._count = 0

    @property
    def value(self) -> float:
        if self._count < 4:
            return np.nan
        return self._out[0]

    @property
    def is_ready(self) -> bool:
        return self._count >= 4


@dataclass
class IncrementalZLEMA(IncrementalIndicator):
    """
    Zero-lag EMA: EMA of ``2 * src - src[length]``.

    Needs ``length + 1`` samples before the first de-lagged input exists,
    then the usual EMA warm-up on top.
    """

    length: int = 20
    _history: RollingWindow = field(init=False)
    _ema: IncrementalEMA = field(init=False)

    def __post_init__(self) -> None:
        require_length("IncrementalZLEMA", self.length)
        self._history = RollingWindow(self.length + 1)
        self._ema = IncrementalEMA(self.length)

    def update(self, source: float, **kwargs: Any) -> None:
        if is_na(source):
            return
        self._history.push(source)
        if self._history.is_full():
            lagged = self._history.ago(self.length)
            self._ema.update(source=2 * source - lagged)

    def reset(self) -> None:
        self._history.clear()
        self._ema.reset()

    @property
    def value(self) -> float:
        return self._ema.value

    @property
    def is_ready(self) -> bool:
        return self._ema.is_ready


@dataclass
class IncrementalInstantaneousTrendline(IncrementalIndicator):
    """
    Ehlers Instantaneous Trendline.

    First 7 samples (bootstrap):
        it = (src + 2 * src[1] + src[2]) / 4
    Afterwards:
        it = (a - a**2/4) * src + a**2/2 * src[1] - (a - 0.75*a**2) * src[2]
             + 2 * (1 - a) * it[1] - (1 - a)**2 * it[2]
    with a = 2 / (length + 1). Output is NaN until 3 samples.
    """

    length: int = 20
    _alpha: float = field(init=False)
    _src: list[float] = field(default_factory=lambda: [0.0, 0.0], init=False)
    _out: list[float] = field(default_factory=lambda: [0.0, 0.0], init=False)
    _count: int = field(default=0, init=False)

    BOOTSTRAP_BARS = 7

    def __post_init__(self) -> None:
        require_length("IncrementalInstantaneousTrendline", self.length)
        self._alpha = 2.0 / (self.length + 1)

    def update(self, source: float, **kwargs: Any) -> None:
        if is_na(source):
            return
        src1, src2 = self._src
        it1, it2 = self._out
        a = self._alpha

        if self._count < self.BOOTSTRAP_BARS:
            it = (source + 2 * src1 + src2) / 4
        else:
            it = (
                (a - a * a / 4) * source
                + 0.5 * a * a * src1
                - (a - 0.75 * a * a) * src2
                + 2 * (1 - a) * it1
                - (1 - a) ** 2 * it2
            )

        self._src = [source, src1]
        self._out = [it, it1]
        self._count += 1

    def reset(self) -> None:
        self._src = [0.0, 0.0]
        self._out = [0.0, 0.0]
        self._count = 0

    @property
    def value(self) -> float:
        if self._count < 3:
            return np.nan
        return self._out[0]

    @property
    def is_ready(self) -> bool:
        return self._count >= 3


def cosine_weights(length: int) -> np.ndarray:
    """
    Normalised cosine weights, newest sample first.

    Raw weight i is cos(pi * (i + 1) / length) + 1, so the oldest sample in
    the window gets weight 0 and the raw weights sum to ``length - 1``.
    """
    raw = np.cos(np.pi * (np.arange(length) + 1) / length) + 1.0
    return raw / raw.sum()


def hamming_weights(length: int, pedestal: float = 3.0) -> np.ndarray:
    """Ehlers Hamming window weights (unnormalised), newest sample first."""
    i = np.arange(length)
    return np.sin(pedestal + (np.pi - 2 * pedestal) * i / (length - 1))


@dataclass
class IncrementalCosineWMA(IncrementalIndicator):
    """
    Cosine-weighted moving average (FIR).

    NaN until ``length`` samples are available. Requires length >= 2.
    """

    length: int = 14
    _weights: np.ndarray = field(init=False, repr=False)
    _window: RollingWindow = field(init=False)

    def __post_init__(self) -> None:
        require_length("IncrementalCosineWMA", self.length, minimum=2)
        self._weights = cosine_weights(self.length)
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
        newest_first = self._window.to_array()[::-1]
        return float(np.dot(self._weights, newest_first))

    @property
    def is_ready(self) -> bool:
        return self._window.is_full()


@dataclass
class IncrementalCosineATR(IncrementalIndicator):
    """Cosine-weighted MA of True Range."""

    length: int = 14
    _tr: IncrementalTrueRange = field(init=False)
    _cwma: IncrementalCosineWMA = field(init=False)

    def __post_init__(self) -> None:
        require_length("IncrementalCosineATR", self.length, minimum=2)
        self._tr = IncrementalTrueRange()
        self._cwma = IncrementalCosineWMA(self.length)

    def update(self, high: float, low: float, close: float, **kwargs: Any) -> None:
        self._tr.update(high=high, low=low, close=close)
        self._cwma.update(source=self._tr.value)

    def reset(self) -> None:
        self._tr.reset()
        self._cwma.reset()

    @property
    def value(self) -> float:
        return self._cwma.value

    @property
    def is_ready(self) -> bool:
        return self._cwma.is_ready


@dataclass
class IncrementalHammingMA(IncrementalIndicator):
    """
    Ehlers Hamming-windowed moving average (FIR).

    filt = sum(w[i] * src[i]) / sum(w[i]) with
    w[i] = sin(pedestal + (pi - 2 * pedestal) * i / (length - 1)).
    A zero weight sum gives 0. Requires length >= 2.
    """

    length: int = 20
    pedestal: float = 3.0
    _weights: np.ndarray = field(init=False, repr=False)
    _coef: float = field(init=False)
    _window: RollingWindow = field(init=False)

    def __post_init__(self) -> None:
        require_length("IncrementalHammingMA", self.length, minimum=2)
        self._weights = hamming_weights(self.length, self.pedestal)
        self._coef = float(self._weights.sum())
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
        if self._coef == 0:
            return 0.0
        newest_first = self._window.to_array()[::-1]
        return float(np.dot(self._weights, newest_first)) / self._coef

    @property
    def is_ready(self) -> bool:
        return self._window.is_full()
