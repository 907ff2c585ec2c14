"""
Tests for the rolling statistics in indicators.incremental.core.

Validates that:
1. SMA/EMA/RMA/WMA/Stdev match pandas references
2. RMA and EMA converge to a constant input
3. ADX on a flat series gives DI+ = DI- = DX = 0 (never NaN)
4. NaN inputs are ignored instead of poisoning state
5. Degenerate windows (zero variance, zero volume) use their fallbacks
"""

import math

import numpy as np
import pandas as pd
import pytest

from regimeflow.indicators.incremental import (
    IncrementalADX,
    IncrementalATR,
    IncrementalCorrelation,
    IncrementalEMA,
    IncrementalHighest,
    IncrementalLowest,
    IncrementalOBV,
    IncrementalRMA,
    IncrementalSMA,
    IncrementalStdev,
    IncrementalSum,
    IncrementalTrueRange,
    IncrementalVWMA,
    IncrementalWMA,
)
from regimeflow.indicators.incremental.core import true_range
from tests.conftest import random_walk


def _feed(indicator, values):
    out = []
    for v in values:
        indicator.update(source=v)
        out.append(indicator.value)
    return np.array(out, dtype=float)


class TestMovingAveragesParity:
    """Incremental results against pandas rolling/ewm."""

    data = random_walk(300, seed=11)

    def test_sma(self):
        got = _feed(IncrementalSMA(20), self.data)
        expected = pd.Series(self.data).rolling(20).mean().to_numpy()
        np.testing.assert_allclose(got, expected, rtol=1e-9, equal_nan=True)

    def test_stdev_population(self):
        got = _feed(IncrementalStdev(20), self.data)
        expected = pd.Series(self.data).rolling(20).std(ddof=0).to_numpy()
        np.testing.assert_allclose(got, expected, rtol=1e-6, equal_nan=True)

    def test_sum(self):
        got = _feed(IncrementalSum(10), self.data)
        expected = pd.Series(self.data).rolling(10).sum().to_numpy()
        np.testing.assert_allclose(got, expected, rtol=1e-9, equal_nan=True)

    def test_ema_sma_seeded(self):
        length = 12
        got = _feed(IncrementalEMA(length), self.data)
        s = pd.Series(self.data)
        seeded = s.copy()
        seeded.iloc[: length - 1] = np.nan
        seeded.iloc[length - 1] = s.iloc[:length].mean()
        expected = seeded.ewm(span=length, adjust=False, ignore_na=True).mean()
        expected.iloc[: length - 1] = np.nan
        np.testing.assert_allclose(got, expected.to_numpy(), rtol=1e-9, equal_nan=True)

    def test_rma_first_sample_seeded(self):
        length = 14
        got = _feed(IncrementalRMA(length), self.data)
        expected = pd.Series(self.data).ewm(alpha=1.0 / length, adjust=False).mean().to_numpy()
        np.testing.assert_allclose(got, expected, rtol=1e-9)

    def test_wma(self):
        length = 10
        got = _feed(IncrementalWMA(length), self.data)
        weights = np.arange(1, length + 1, dtype=float)
        expected = (
            pd.Series(self.data)
            .rolling(length)
            .apply(lambda w: np.dot(w, weights) / weights.sum(), raw=True)
            .to_numpy()
        )
        np.testing.assert_allclose(got, expected, rtol=1e-9, equal_nan=True)

    def test_highest_lowest(self):
        hi = _feed(IncrementalHighest(7), self.data)
        lo = _feed(IncrementalLowest(7), self.data)
        roll = pd.Series(self.data).rolling(7)
        np.testing.assert_allclose(hi, roll.max().to_numpy(), equal_nan=True)
        np.testing.assert_allclose(lo, roll.min().to_numpy(), equal_nan=True)


class TestConvergence:
    """Constant inputs."""

    def test_rma_converges_to_constant(self):
        rma = IncrementalRMA(14)
        rma.update(source=50.0)
        for _ in range(500):
            rma.update(source=10.0)
        assert rma.value == pytest.approx(10.0, abs=1e-9)

    def test_ema_converges_to_constant(self):
        ema = IncrementalEMA(14)
        for _ in range(14):
            ema.update(source=50.0)
        for _ in range(500):
            ema.update(source=10.0)
        assert ema.value == pytest.approx(10.0, abs=1e-9)

    def test_identical_values_sma_and_zero_stdev(self):
        sma, stdev = IncrementalSMA(30), IncrementalStdev(30)
        for _ in range(100):
            sma.update(source=42.5)
            stdev.update(source=42.5)
        assert sma.value == pytest.approx(42.5)
        assert stdev.value == 0.0


class TestWarmupAndNaN:
    """Warm-up lengths and NaN handling."""

    def test_sma_nan_until_full(self):
        sma = IncrementalSMA(3)
        sma.update(source=1.0)
        sma.update(source=2.0)
        assert math.isnan(sma.value)
        assert not sma.is_ready
        sma.update(source=3.0)
        assert sma.value == 2.0

    def test_nan_input_ignored(self):
        sma = IncrementalSMA(2)
        sma.update(source=1.0)
        sma.update(source=np.nan)
        sma.update(source=None)
        assert math.isnan(sma.value)
        sma.update(source=3.0)
        assert sma.value == 2.0

    def test_reset_restores_initial_state(self):
        ema = IncrementalEMA(2)
        for v in (1.0, 2.0, 3.0):
            ema.update(source=v)
        ema.reset()
        assert math.isnan(ema.value)
        assert not ema.is_ready

    def test_invalid_length_raises(self):
        with pytest.raises(ValueError, match="Fix"):
            IncrementalSMA(0)


class TestTrueRangeAndATR:
    """True range and Wilder ATR."""

    def test_first_bar_uses_high_low(self):
        tr = IncrementalTrueRange()
        tr.update(high=12.0, low=10.0, close=11.0)
        assert tr.value == 2.0

    def test_gap_uses_previous_close(self):
        tr = IncrementalTrueRange()
        tr.update(high=12.0, low=10.0, close=11.0)
        tr.update(high=20.0, low=19.0, close=19.5)
        assert tr.value == 9.0

    def test_true_range_function(self):
        assert true_range(5.0, 3.0, None) == 2.0
        assert true_range(5.0, 3.0, float("nan")) == 2.0
        assert true_range(5.0, 3.0, 1.0) == 4.0

    def test_atr_constant_range(self):
        atr = IncrementalATR(5)
        for _ in range(50):
            atr.update(high=101.0, low=99.0, close=100.0)
        assert atr.value == pytest.approx(2.0)
        assert atr.true_range == pytest.approx(2.0)


class TestADX:
    """ADX/DMI."""

    def test_flat_series_all_zero(self):
        adx = IncrementalADX(14)
        for _ in range(60):
            adx.update(high=100.0, low=100.0, close=100.0)
        assert adx.plus_di == 0.0
        assert adx.minus_di == 0.0
        assert adx.dx == 0.0
        assert adx.value == 0.0

    def test_steady_uptrend_plus_di_dominates(self):
        adx = IncrementalADX(14)
        for i in range(100):
            c = 100.0 + i
            adx.update(high=c + 1.0, low=c - 1.0, close=c)
        assert adx.plus_di > adx.minus_di
        assert adx.minus_di == 0.0
        assert adx.value > 50.0

    def test_values_within_bounds(self):
        adx = IncrementalADX(14)
        for c in random_walk(300, seed=5):
            adx.update(high=c + 0.7, low=c - 0.7, close=c)
            assert 0.0 <= adx.value <= 100.0


class TestCorrelationAndVolume:
    """Correlation, OBV and VWMA edge cases."""

    def test_perfect_correlation(self):
        corr = IncrementalCorrelation(10)
        for i in range(10):
            corr.update(x=float(i), y=2.0 * i + 1.0)
        assert corr.value == pytest.approx(1.0)

    def test_zero_variance_gives_zero(self):
        corr = IncrementalCorrelation(5)
        for i in range(5):
            corr.update(x=float(i), y=3.0)
        assert corr.value == 0.0

    def test_obv_signed_volume(self):
        obv = IncrementalOBV()
        for close, volume in [(10.0, 5.0), (11.0, 7.0), (10.5, 3.0), (10.5, 9.0)]:
            obv.update(close=close, volume=volume)
        assert obv.value == 4.0

    def test_obv_skips_nan_bar(self):
        """A NaN close or volume leaves the running total and previous close alone."""
        obv = IncrementalOBV()
        obv.update(close=100.0, volume=10.0)
        obv.update(close=101.0, volume=10.0)
        assert obv.value == 10.0
        obv.update(close=float("nan"), volume=10.0)
        assert obv.value == 10.0
        obv.update(close=102.0, volume=float("nan"))
        assert obv.value == 10.0
        obv.update(close=102.0, volume=5.0)
        assert obv.value == 15.0

    def test_vwma_weighted(self):
        vwma = IncrementalVWMA(2)
        vwma.update(source=10.0, volume=1.0)
        vwma.update(source=20.0, volume=3.0)
        assert vwma.value == pytest.approx(17.5)

    def test_vwma_zero_volume_falls_back_to_sma(self):
        vwma = IncrementalVWMA(2)
        vwma.update(source=10.0, volume=0.0)
        vwma.update(source=20.0, volume=0.0)
        assert vwma.value == pytest.approx(15.0)
