"""
Tests for the recursive filters, FIR smoothers and the smoother factory.

Validates that:
1. McGinley's first value equals the source
2. Every smoother settles on a constant input (unit DC gain)
3. Warm-up lengths are respected (NaN before, defined after)
4. create_smoother resolves names case-insensitively and rejects bad input
"""

import math

import numpy as np
import pytest

from regimeflow.indicators.incremental import (
    IncrementalButterworth2,
    IncrementalButterworth3,
    IncrementalCosineATR,
    IncrementalCosineWMA,
    IncrementalHammingMA,
    IncrementalInstantaneousTrendline,
    IncrementalMcGinley,
    IncrementalSuperSmoother,
    IncrementalZLEMA,
    create_smoother,
    list_smoothers,
)
from regimeflow.indicators.incremental.filters import cosine_weights


def _settle(indicator, value: float, n: int = 400) -> float:
    for _ in range(n):
        indicator.update(source=value)
    return indicator.value


class TestMcGinley:
    """McGinley Dynamic."""

    def test_first_value_equals_source(self):
        md = IncrementalMcGinley(14)
        md.update(source=123.45)
        assert md.value == 123.45
        assert md.is_ready

    def test_tracks_toward_source(self):
        md = IncrementalMcGinley(10)
        md.update(source=100.0)
        md.update(source=110.0)
        assert 100.0 < md.value < 110.0

    def test_fractional_length_allowed(self):
        md = IncrementalMcGinley(length=5.5, k=0.6, exponent=3.0)
        assert _settle(md, 7.0) == pytest.approx(7.0)

    def test_zero_prior_does_not_divide_by_zero(self):
        md = IncrementalMcGinley(5)
        md.update(source=0.0)
        md.update(source=1.0)
        assert math.isfinite(md.value)

    def test_negative_ratio_with_fractional_exponent(self):
        md = IncrementalMcGinley(5, exponent=2.5)
        md.update(source=10.0)
        md.update(source=-10.0)
        assert math.isfinite(md.value)

    def test_non_positive_length_raises(self):
        with pytest.raises(ValueError, match="length"):
            IncrementalMcGinley(0)


class TestRecursiveFilters:
    """IIR filters and their warm-up."""

    def test_super_smoother_first_value_is_source(self):
        ss = IncrementalSuperSmoother(10)
        ss.update(source=50.0)
        assert ss.value == 50.0

    @pytest.mark.parametrize("cls", [
        IncrementalSuperSmoother,
        IncrementalButterworth2,
        IncrementalButterworth3,
        IncrementalInstantaneousTrendline,
    ])
    def test_unit_dc_gain(self, cls):
        assert _settle(cls(10), 25.0) == pytest.approx(25.0, rel=1e-6)

    def test_butterworth2_warmup(self):
        bf = IncrementalButterworth2(10)
        bf.update(source=1.0)
        bf.update(source=1.0)
        assert math.isnan(bf.value)
        bf.update(source=1.0)
        assert not math.isnan(bf.value)

    def test_butterworth3_warmup(self):
        bf = IncrementalButterworth3(10)
        for _ in range(3):
            bf.update(source=1.0)
        assert math.isnan(bf.value)
        bf.update(source=1.0)
        assert bf.is_ready

    def test_itrend_warmup(self):
        it = IncrementalInstantaneousTrendline(20)
        it.update(source=4.0)
        it.update(source=4.0)
        assert math.isnan(it.value)
        it.update(source=4.0)
        assert it.value == pytest.approx(4.0)

    def test_zlema_warmup_is_twice_length(self):
        length = 5
        z = IncrementalZLEMA(length)
        for i in range(2 * length - 1):
            z.update(source=float(i))
        assert math.isnan(z.value)
        z.update(source=float(2 * length - 1))
        assert not math.isnan(z.value)

    def test_zlema_constant(self):
        assert _settle(IncrementalZLEMA(8), 3.0) == pytest.approx(3.0)

    def test_reset(self):
        ss = IncrementalSuperSmoother(10)
        _settle(ss, 5.0, n=20)
        ss.reset()
        assert math.isnan(ss.value)


class TestFIRSmoothers:
    """Cosine and Hamming weighted averages."""

    def test_cosine_weights_normalised_oldest_zero(self):
        w = cosine_weights(14)
        assert w.sum() == pytest.approx(1.0)
        assert w[-1] == pytest.approx(0.0, abs=1e-12)

    def test_cosine_wma_constant(self):
        cw = IncrementalCosineWMA(14)
        for _ in range(13):
            cw.update(source=9.0)
        assert math.isnan(cw.value)
        cw.update(source=9.0)
        assert cw.value == pytest.approx(9.0)

    def test_cosine_wma_weights_newest_first(self):
        cw = IncrementalCosineWMA(3)
        for v in (1.0, 2.0, 3.0):
            cw.update(source=v)
        w = cosine_weights(3)
        assert cw.value == pytest.approx(w[0] * 3.0 + w[1] * 2.0 + w[2] * 1.0)

    def test_cosine_atr_constant_range(self):
        catr = IncrementalCosineATR(5)
        for _ in range(10):
            catr.update(high=11.0, low=9.0, close=10.0)
        assert catr.value == pytest.approx(2.0)

    def test_hamming_constant(self):
        assert _settle(IncrementalHammingMA(20), 12.0, n=30) == pytest.approx(12.0)

    def test_length_one_rejected(self):
        with pytest.raises(ValueError, match="Fix"):
            IncrementalCosineWMA(1)


class TestSmootherFactory:
    """create_smoother / list_smoothers."""

    def test_all_registered_methods_build(self):
        for name in list_smoothers():
            smoother = create_smoother(name, 10)
            value = _settle(smoother, 2.0, n=100)
            assert value == pytest.approx(2.0, rel=1e-6), name

    def test_case_insensitive(self):
        assert isinstance(create_smoother("ZLEMA", 10), IncrementalZLEMA)

    def test_method_params(self):
        md = create_smoother("mg", 10, k=0.8, exponent=3.0)
        assert md.k == 0.8
        ham = create_smoother("hamming", 10, pedestal=2.0)
        assert ham.pedestal == 2.0

    def test_unknown_method_raises(self):
        with pytest.raises(ValueError, match="Unknown smoothing method"):
            create_smoother("kalman", 10)

    def test_unknown_param_raises(self):
        with pytest.raises(ValueError, match="does not accept"):
            create_smoother("sma", 10, pedestal=3.0)

    def test_output_is_numpy_friendly(self):
        values = []
        sm = create_smoother("sma", 3)
        for v in (1.0, 2.0, 3.0, 4.0):
            sm.update(source=v)
            values.append(sm.value)
        np.testing.assert_allclose(values, [np.nan, np.nan, 2.0, 3.0], equal_nan=True)
