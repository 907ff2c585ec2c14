"""
Tests for the bounded-window primitives.

Validates that:
1. MonotonicDeque tracks the sliding min/max and evicts expired indices
2. RingBuffer overwrites the oldest sample once full
3. RollingWindow aggregates match pandas rolling references
4. Constant windows give zero stdev without negative-variance noise
"""

import math

import numpy as np
import pandas as pd
import pytest

from regimeflow.structures.primitives import MonotonicDeque, RingBuffer, RollingWindow
from tests.conftest import random_walk


class TestMonotonicDeque:
    """Sliding min/max."""

    def test_min_window_evicts_expired(self):
        dq = MonotonicDeque(window_size=3, mode="min")
        dq.push(0, 5.0)
        dq.push(1, 3.0)
        dq.push(2, 4.0)
        assert dq.get() == 3.0
        dq.push(3, 6.0)
        assert dq.get() == 3.0
        dq.push(4, 7.0)
        assert dq.get() == 4.0

    def test_max_window(self):
        dq = MonotonicDeque(window_size=2, mode="max")
        for idx, v in enumerate([1.0, 9.0, 2.0, 3.0]):
            dq.push(idx, v)
        assert dq.get() == 3.0

    def test_empty_returns_none(self):
        assert MonotonicDeque(5, "max").get() is None

    def test_invalid_mode_raises(self):
        with pytest.raises(ValueError, match="mode"):
            MonotonicDeque(3, "median")

    def test_invalid_window_raises(self):
        with pytest.raises(ValueError, match="window_size"):
            MonotonicDeque(0, "min")


class TestRingBuffer:
    """Circular buffer ordering."""

    def test_overwrites_oldest(self):
        buf = RingBuffer(3)
        for v in (1.0, 2.0, 3.0, 4.0):
            buf.push(v)
        assert buf.is_full()
        assert [buf[i] for i in range(3)] == [2.0, 3.0, 4.0]
        assert list(buf.to_array()) == [2.0, 3.0, 4.0]

    def test_partial_fill(self):
        buf = RingBuffer(4)
        buf.push(1.0)
        buf.push(2.0)
        assert len(buf) == 2
        assert not buf.is_full()
        assert list(buf.to_array()) == [1.0, 2.0]

    def test_out_of_range_raises(self):
        buf = RingBuffer(2)
        buf.push(1.0)
        with pytest.raises(IndexError):
            buf[1]

    def test_clear(self):
        buf = RingBuffer(2)
        buf.push(1.0)
        buf.clear()
        assert len(buf) == 0
        assert buf.to_array().size == 0


class TestRollingWindow:
    """Windowed aggregates."""

    def test_doc_example(self):
        w = RollingWindow(3)
        for v in (1.0, 2.0, 3.0, 4.0):
            w.push(v)
        assert (w.sum, w.mean, w.max, w.min) == (9.0, 3.0, 4.0, 2.0)
        assert w.ago(0) == 4.0
        assert w.ago(2) == 2.0
        assert math.isnan(w.ago(3))

    def test_length_never_exceeds_capacity(self):
        w = RollingWindow(5)
        for i in range(20):
            w.push(float(i))
            assert len(w) <= 5
        assert len(w) == 5

    def test_constant_values_zero_stdev(self):
        w = RollingWindow(50)
        for _ in range(500):
            w.push(0.1)
        assert w.stdev == 0.0
        assert w.mean == pytest.approx(0.1)

    def test_matches_pandas_rolling(self):
        data = random_walk(200, seed=3)
        length = 14
        w = RollingWindow(length)
        means, stdevs, maxes, mins = [], [], [], []
        for v in data:
            w.push(v)
            full = w.is_full()
            means.append(w.mean if full else np.nan)
            stdevs.append(w.stdev if full else np.nan)
            maxes.append(w.max if full else np.nan)
            mins.append(w.min if full else np.nan)

        s = pd.Series(data)
        roll = s.rolling(length)
        np.testing.assert_allclose(means, roll.mean().to_numpy(), rtol=1e-9, equal_nan=True)
        np.testing.assert_allclose(stdevs, roll.std(ddof=0).to_numpy(), rtol=1e-6, equal_nan=True)
        np.testing.assert_allclose(maxes, roll.max().to_numpy(), equal_nan=True)
        np.testing.assert_allclose(mins, roll.min().to_numpy(), equal_nan=True)

    def test_empty_mean_is_nan(self):
        w = RollingWindow(3)
        assert math.isnan(w.mean)
        assert math.isnan(w.max)

    def test_invalid_capacity_raises(self):
        with pytest.raises(ValueError, match="capacity"):
            RollingWindow(0)
