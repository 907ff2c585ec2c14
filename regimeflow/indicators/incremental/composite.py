"""
Composite indices built from the rolling statistics and filters.

- IncrementalFaithIndex: blend of trust/resilience/content/purpose scores
- IncrementalAsymmetricVolatility: split of price movement into up and
  down volatility, optionally McGinley-smoothed with a clustering factor
- IncrementalFourierConvergence: weighted harmonic averages of price,
  their slope and a volatility-clustering adjusted slope

Each sub-score has its own warm-up; a composite is NaN while any input it
needs is NaN.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

import numpy as np

from ...structures.primitives import RollingWindow
from .base import IncrementalIndicator, clamp, is_na, require_length, safe_div
from .core import (
    IncrementalATR,
    IncrementalCorrelation,
    IncrementalEMA,
    IncrementalSMA,
    IncrementalStdev,
    IncrementalSum,
)
from .filters import IncrementalMcGinley


FAITH_COMPONENTS = ("trust", "resilience", "content", "purpose")


@dataclass
class IncrementalFaithIndex(IncrementalIndicator):
    """
    Faith index: arithmetic mean of up to four confidence sub-scores.

    Sub-scores (sma/stdev over ``trust_length`` closes):
        trust      = 1 - stdev / sma
        resilience = 1 - outliers / trust_length,
                     outlier = |close - sma| > resilience_threshold * stdev
        content    = max(0, 1 - |close - sma| / (upper - lower)),
                     upper/lower = sma +/- content_multiplier * stdev
        purpose    = purpose_weight * corr(close, sma, correlation_length)

    ``components`` selects which sub-scores enter the blend; the reduced
    two-term variant is ``("trust", "purpose")``.
    """

    trust_length: int = 288
    correlation_length: int = 288
    resilience_threshold: float = 2.0
    content_multiplier: float = 1.0
    purpose_weight: float = 1.0
    components: tuple[str, ...] = FAITH_COMPONENTS

    _sma: IncrementalSMA = field(init=False)
    _stdev: IncrementalStdev = field(init=False)
    _outliers: IncrementalSum = field(init=False)
    _correlation: IncrementalCorrelation = field(init=False)
    _scores: dict[str, float] = field(init=False)

    def __post_init__(self) -> None:
        require_length("IncrementalFaithIndex", self.trust_length)
        require_length("IncrementalFaithIndex", self.correlation_length, minimum=2)
        self.components = tuple(self.components)
        unknown = [c for c in self.components if c not in FAITH_COMPONENTS]
        if not self.components or unknown:
            raise ValueError(
                f"Invalid faith index components {self.components!r}\n"
                f"\n"
                f"Fix: choose a non-empty subset of {FAITH_COMPONENTS}"
            )
        self._sma = IncrementalSMA(self.trust_length)
        self._stdev = IncrementalStdev(self.trust_length)
        self._outliers = IncrementalSum(self.trust_length)
        self._correlation = IncrementalCorrelation(self.correlation_length)
        self._scores = dict.fromkeys(FAITH_COMPONENTS, np.nan)

    def update(self, close: float, **kwargs: Any) -> None:
        if is_na(close):
            return
        self._sma.update(source=close)
        self._stdev.update(source=close)

        sma = self._sma.value
        stdev = self._stdev.value
        if is_na(sma):
            # no deviation yet: counted as a non-outlier
            self._outliers.update(source=0.0)
            return

        deviation = abs(close - sma)
        self._outliers.update(source=1.0 if deviation > self.resilience_threshold * stdev else 0.0)
        self._correlation.update(x=close, y=sma)

        self._scores["trust"] = 1.0 - safe_div(stdev, sma)

        outliers = self._outliers.value
        self._scores["resilience"] = (
            np.nan if is_na(outliers) else 1.0 - outliers / self.trust_length
        )

        width = 2.0 * self.content_multiplier * stdev
        if width == 0:
            self._scores["content"] = 1.0 if deviation == 0 else 0.0
        else:
            self._scores["content"] = max(0.0, 1.0 - deviation / width)

        corr = self._correlation.value
        self._scores["purpose"] = np.nan if is_na(corr) else self.purpose_weight * corr

    def reset(self) -> None:
        self._sma.reset()
        self._stdev.reset()
        self._outliers.reset()
        self._correlation.reset()
        self._scores = dict.fromkeys(FAITH_COMPONENTS, np.nan)

    @property
    def trust(self) -> float:
        return self._scores["trust"]

    @property
    def resilience(self) -> float:
        return self._scores["resilience"]

    @property
    def content(self) -> float:
        return self._scores["content"]

    @property
    def purpose(self) -> float:
        return self._scores["purpose"]

    @property
    def value(self) -> float:
        selected = [self._scores[name] for name in self.components]
        if any(is_na(score) for score in selected):
            return np.nan
        return sum(selected) / len(selected)

    @property
    def is_ready(self) -> bool:
        return not is_na(self.value)


@dataclass
class IncrementalAsymmetricVolatility(IncrementalIndicator):
    """
    Upward vs downward volatility.

    measure="bps":
        up = sum(max(src - src[1], 0), length) / length
        down = sum(max(src[1] - src, 0), length) / length
    measure="prc":
        up/down as above, divided by sum(|src - src[1]|, length), times 20,
        times ``prc_scale``. Zero total movement gives 0.

    With ``use_mcginley`` each leg is McGinley-smoothed and multiplied by
        clamp(1 - clustering_adjustment * ema(|src - src[1]|, cluster_lookback) / 100, 0, 1)
    """

    length: int = 15
    measure: str = "bps"
    prc_scale: float = 2.0
    use_mcginley: bool = True
    mcginley_length: float = 5.0
    mcginley_k: float = 0.6
    mcginley_exponent: float = 3.0
    cluster_lookback: int = 1
    clustering_adjustment: float = 0.0

    _prev_source: float = field(default=np.nan, init=False)
    _up_sum: IncrementalSum = field(init=False)
    _down_sum: IncrementalSum = field(init=False)
    _total_sum: IncrementalSum = field(init=False)
    _up_md: IncrementalMcGinley = field(init=False)
    _down_md: IncrementalMcGinley = field(init=False)
    _move_ema: IncrementalEMA = field(init=False)
    _up: float = field(default=np.nan, init=False)
    _down: float = field(default=np.nan, init=False)

    def __post_init__(self) -> None:
        require_length("IncrementalAsymmetricVolatility", self.length)
        require_length("IncrementalAsymmetricVolatility", self.cluster_lookback)
        self.measure = self.measure.lower()
        if self.measure not in ("bps", "prc"):
            raise ValueError(
                f"measure must be 'bps' or 'prc', got '{self.measure}'\n"
                f"\n"
                f"Fix: IncrementalAsymmetricVolatility(length=15, measure='bps')"
            )
        if not 0.0 <= self.clustering_adjustment <= 1.0:
            raise ValueError(
                f"clustering_adjustment must be in [0, 1], got {self.clustering_adjustment}\n"
                f"\n"
                f"Fix: IncrementalAsymmetricVolatility(clustering_adjustment=0.0)"
            )
        self._up_sum = IncrementalSum(self.length)
        self._down_sum = IncrementalSum(self.length)
        self._total_sum = IncrementalSum(self.length)
        self._up_md = IncrementalMcGinley(self.mcginley_length, self.mcginley_k, self.mcginley_exponent)
        self._down_md = IncrementalMcGinley(self.mcginley_length, self.mcginley_k, self.mcginley_exponent)
        self._move_ema = IncrementalEMA(self.cluster_lookback)

    def update(self, source: float, **kwargs: Any) -> None:
        if is_na(source):
            return
        prev = self._prev_source
        self._prev_source = source
        if is_na(prev):
            return

        change = source - prev
        self._up_sum.update(source=max(change, 0.0))
        self._down_sum.update(source=max(-change, 0.0))
        self._total_sum.update(source=abs(change))
        self._move_ema.update(source=abs(change))

        if not self._up_sum.is_ready:
            return

        up = self._up_sum.value / self.length
        down = self._down_sum.value / self.length
        if self.measure == "prc":
            total = self._total_sum.value
            scale = 20.0 * self.prc_scale
            up = safe_div(up, total) * scale
            down = safe_div(down, total) * scale

        if not self.use_mcginley:
            self._up, self._down = up, down
            return

        self._up_md.update(source=up)
        self._down_md.update(source=down)
        factor = self.adjustment_factor
        if is_na(factor):
            self._up, self._down = np.nan, np.nan
            return
        self._up = self._up_md.value * factor
        self._down = self._down_md.value * factor

    def reset(self) -> None:
        self._prev_source = np.nan
        self._up_sum.reset()
        self._down_sum.reset()
        self._total_sum.reset()
        self._up_md.reset()
        self._down_md.reset()
        self._move_ema.reset()
        self._up = np.nan
        self._down = np.nan

    @property
    def adjustment_factor(self) -> float:
        perf = self._move_ema.value
        if is_na(perf):
            return np.nan
        return clamp(1.0 - self.clustering_adjustment * perf / 100.0, 0.0, 1.0)

    @property
    def up(self) -> float:
        return self._up

    @property
    def down(self) -> float:
        return self._down

    @property
    def value(self) -> float:
        """Up minus down volatility."""
        if is_na(self._up) or is_na(self._down):
            return np.nan
        return self._up - self._down

    @property
    def is_ready(self) -> bool:
        return not is_na(self.value)


@dataclass
class IncrementalFourierConvergence(IncrementalIndicator):
    """
    Weighted harmonic decomposition of price.

    For harmonic i in 0..cycles-1 at bar t:
        f_i = sma(close * cos(2 * pi * i * t / lookback), lookback)
    Weights are cycles - i (lower frequencies dominate):
        convergence = sum(w_i * f_i) / sum(w_i)
        slope       = sum(w_i * (f_i - f_i[1])) / sum(w_i)
    Clustering adjustment:
        ci = clamp(stdev(close, lookback) / atr, 0.1, 1)
        factor = clamp(1 - ci * ema(|close - close[1]|, lookback) / atr, 0, 1)
        adaptive_slope = slope * factor
    A zero ATR turns both ratios into 0.
    """

    cycles: int = 10
    lookback: int = 50
    atr_length: int = 14

    _bar: int = field(default=0, init=False)
    _harmonics: np.ndarray = field(init=False, repr=False)
    _weights: np.ndarray = field(init=False, repr=False)
    _components: list[RollingWindow] = field(init=False, repr=False)
    _prev_components: np.ndarray | None = field(default=None, init=False, repr=False)
    _atr: IncrementalATR = field(init=False)
    _stdev: IncrementalStdev = field(init=False)
    _move_ema: IncrementalEMA = field(init=False)
    _prev_close: float = field(default=np.nan, init=False)
    _convergence: float = field(default=np.nan, init=False)
    _slope: float = field(default=np.nan, init=False)

    def __post_init__(self) -> None:
        require_length("IncrementalFourierConvergence", self.cycles)
        require_length("IncrementalFourierConvergence", self.lookback)
        require_length("IncrementalFourierConvergence", self.atr_length)
        self._harmonics = np.arange(self.cycles, dtype=np.float64)
        self._weights = self.cycles - self._harmonics
        self._components = [RollingWindow(self.lookback) for _ in range(self.cycles)]
        self._atr = IncrementalATR(self.atr_length)
        self._stdev = IncrementalStdev(self.lookback)
        self._move_ema = IncrementalEMA(self.lookback)

    def update(self, high: float, low: float, close: float, **kwargs: Any) -> None:
        if is_na(close):
            return
        t = self._bar
        self._bar += 1

        basis = np.cos(2.0 * np.pi * self._harmonics * t / self.lookback)
        for window, projected in zip(self._components, close * basis):
            window.push(float(projected))

        self._atr.update(high=high, low=low, close=close)
        self._stdev.update(source=close)
        if not is_na(self._prev_close):
            self._move_ema.update(source=abs(close - self._prev_close))
        self._prev_close = close

        if not self._components[0].is_full():
            return

        levels = np.array([window.mean for window in self._components])
        weight_sum = self._weights.sum()
        self._convergence = float(np.dot(self._weights, levels) / weight_sum)
        if self._prev_components is None:
            self._slope = np.nan
        else:
            self._slope = float(np.dot(self._weights, levels - self._prev_components) / weight_sum)
        self._prev_components = levels

    def reset(self) -> None:
        self._bar = 0
        for window in self._components:
            window.clear()
        self._prev_components = None
        self._atr.reset()
        self._stdev.reset()
        self._move_ema.reset()
        self._prev_close = np.nan
        self._convergence = np.nan
        self._slope = np.nan

    @property
    def atr(self) -> float:
        return self._atr.value

    @property
    def convergence(self) -> float:
        return self._convergence

    @property
    def weighted_slope(self) -> float:
        return self._slope

    @property
    def adjustment_factor(self) -> float:
        atr = self._atr.value
        stdev = self._stdev.value
        perf = self._move_ema.value
        if is_na(atr) or is_na(stdev) or is_na(perf):
            return np.nan
        clustering_input = clamp(safe_div(stdev, atr), 0.1, 1.0)
        return clamp(1.0 - clustering_input * safe_div(perf, atr), 0.0, 1.0)

    @property
    def adaptive_slope(self) -> float:
        factor = self.adjustment_factor
        if is_na(self._slope) or is_na(factor):
            return np.nan
        return self._slope * factor

    @property
    def value(self) -> float:
        return self._convergence

    @property
    def is_ready(self) -> bool:
        return not is_na(self.adaptive_slope)
