"""
Tests for regime classification.

Validates that:
1. Each decision-table rule is reachable and rules are applied in priority order
2. Any NaN input gives UNDEFINED
3. Trend strength buckets follow the ADX thresholds
4. RegimeClassifier warms up to a defined regime and honours carry_forward
5. Regime flags (trending/ranging/volatile) map to the MA families
"""

import math

import pytest

from regimeflow.config.models import RegimeThresholds
from regimeflow.regime import (
    Regime,
    RegimeClassifier,
    RegimeInputs,
    TrendStrength,
    classify_regime,
    classify_trend_strength,
)
from tests.conftest import bars_from_closes


T = RegimeThresholds()


def _inputs(**overrides) -> RegimeInputs:
    base = dict(close=100.0, adx=25.0, atr=1.0, atr_baseline=1.0, long_ma=100.0, prior_high=200.0)
    base.update(overrides)
    return RegimeInputs(**base)


class TestDecisionTable:
    """classify_regime rule by rule."""

    def test_strong_uptrend(self):
        r = classify_regime(_inputs(atr=2.0, close=110.0, adx=40.0), T)
        assert r is Regime.STRONG_UPTREND

    def test_strong_downtrend(self):
        r = classify_regime(_inputs(atr=2.0, close=90.0, adx=40.0), T)
        assert r is Regime.STRONG_DOWNTREND

    def test_high_volatility_choppy(self):
        r = classify_regime(_inputs(atr=2.0, adx=10.0), T)
        assert r is Regime.HIGH_VOLATILITY_CHOPPY

    def test_flat_market(self):
        r = classify_regime(_inputs(atr=0.5, adx=10.0), T)
        assert r is Regime.FLAT_MARKET

    def test_choppy_market(self):
        r = classify_regime(_inputs(atr=1.0, adx=10.0), T)
        assert r is Regime.CHOPPY_MARKET

    def test_weak_trend(self):
        r = classify_regime(_inputs(adx=25.0), T)
        assert r is Regime.WEAK_TREND

    def test_parabolic_spike(self):
        r = classify_regime(_inputs(atr=2.0, adx=40.0, close=100.0, long_ma=100.0, prior_high=95.0), T)
        assert r is Regime.PARABOLIC_SPIKE

    def test_undefined_when_no_rule_matches(self):
        r = classify_regime(_inputs(atr=1.0, adx=40.0), T)
        assert r is Regime.UNDEFINED

    def test_strong_uptrend_wins_over_parabolic_spike(self):
        r = classify_regime(_inputs(atr=2.0, adx=40.0, close=120.0, long_ma=100.0, prior_high=110.0), T)
        assert r is Regime.STRONG_UPTREND

    def test_high_volatility_choppy_wins_over_choppy(self):
        r = classify_regime(_inputs(atr=5.0, adx=0.0), T)
        assert r is Regime.HIGH_VOLATILITY_CHOPPY

    def test_adx_equal_weak_is_no_trend_side(self):
        r = classify_regime(_inputs(adx=T.weak_threshold), T)
        assert r is Regime.CHOPPY_MARKET

    def test_adx_equal_strong_is_weak_trend(self):
        r = classify_regime(_inputs(adx=T.strong_threshold), T)
        assert r is Regime.WEAK_TREND

    def test_strong_uptrend_wins_over_high_volatility_choppy(self):
        """With overlapping thresholds both rules match; the strong trend rule comes first."""
        overlapping = RegimeThresholds(strong_threshold=20.0, weak_threshold=30.0)
        inputs = _inputs(adx=25.0, atr=2.0, atr_baseline=1.0, close=110.0, long_ma=100.0)
        assert classify_regime(inputs, overlapping) is Regime.STRONG_UPTREND
        assert classify_regime(_inputs(adx=25.0, atr=2.0), overlapping) is Regime.HIGH_VOLATILITY_CHOPPY

    @pytest.mark.parametrize("field_name", ["close", "adx", "atr", "atr_baseline", "long_ma", "prior_high"])
    def test_any_nan_is_undefined(self, field_name):
        r = classify_regime(_inputs(**{field_name: float("nan")}), T)
        assert r is Regime.UNDEFINED


class TestTrendStrength:
    """ADX-only buckets."""

    def test_buckets(self):
        assert classify_trend_strength(40.0, 35.0, 15.0) is TrendStrength.STRONG_TREND
        assert classify_trend_strength(20.0, 35.0, 15.0) is TrendStrength.WEAK_TREND
        assert classify_trend_strength(15.0, 35.0, 15.0) is TrendStrength.NO_TREND

    def test_nan_is_undefined(self):
        assert classify_trend_strength(math.nan, 35.0, 15.0) is TrendStrength.UNDEFINED


class TestRegimeFlags:
    """Regime groupings used by the MA adapter."""

    def test_groups_are_disjoint(self):
        for regime in Regime:
            flags = [regime.is_trending, regime.is_ranging, regime.is_volatile]
            assert sum(flags) <= 1
        assert not any([Regime.UNDEFINED.is_trending, Regime.UNDEFINED.is_ranging, Regime.UNDEFINED.is_volatile])


class TestRegimeClassifier:
    """Incremental classifier."""

    small = RegimeThresholds(
        adx_length=5, atr_length=5, atr_baseline_length=5, long_ma_length=10, breakout_length=5
    )

    def test_undefined_during_warmup(self):
        clf = RegimeClassifier(self.small)
        bars = bars_from_closes([100.0 + i for i in range(12)])
        regimes = [clf.update(b.high, b.low, b.close) for b in bars]
        assert regimes[0] is Regime.UNDEFINED
        assert regimes[8] is Regime.UNDEFINED
        assert clf.inputs is not None
        assert not clf.inputs.has_na()

    def test_flat_bars_are_choppy(self, flat_bars):
        clf = RegimeClassifier(self.small)
        for b in flat_bars:
            regime = clf.update(b.high, b.low, b.close)
        assert regime is Regime.CHOPPY_MARKET
        assert clf.adx == 0.0
        assert clf.atr == pytest.approx(2.0)

    def test_prior_high_excludes_current_bar(self):
        clf = RegimeClassifier(self.small)
        bars = bars_from_closes([100.0] * 20 + [150.0])
        for b in bars:
            clf.update(b.high, b.low, b.close)
        assert clf.inputs.prior_high == pytest.approx(101.0)

    def test_carry_forward_keeps_last_regime(self):
        thresholds = RegimeThresholds(
            adx_length=5, atr_length=5, atr_baseline_length=5, long_ma_length=10,
            breakout_length=5, carry_forward=True,
        )
        clf = RegimeClassifier(thresholds)
        bars = bars_from_closes([100.0] * 30)
        for b in bars:
            clf.update(b.high, b.low, b.close)
        assert clf.regime is Regime.CHOPPY_MARKET
        nan_regime = clf.update(float("nan"), float("nan"), float("nan"))
        assert nan_regime is Regime.CHOPPY_MARKET

    def test_reset(self, flat_bars):
        clf = RegimeClassifier(self.small)
        for b in flat_bars:
            clf.update(b.high, b.low, b.close)
        clf.reset()
        assert clf.regime is Regime.UNDEFINED
        assert clf.inputs is None
