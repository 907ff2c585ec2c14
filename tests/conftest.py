"""
Pytest configuration and shared bar builders.
"""

from __future__ import annotations

import math
from datetime import datetime, timedelta, timezone

import numpy as np
import pytest

from regimeflow.engine.interfaces import Bar


START = datetime(2024, 1, 1, tzinfo=timezone.utc)


def make_bar(i: int, close: float, spread: float = 1.0, volume: float = 100.0, open_: float | None = None) -> Bar:
    """Bar ``i`` minutes after START with high/low ``spread`` around close."""
    return Bar(
        timestamp=START + timedelta(minutes=i),
        open=close if open_ is None else open_,
        high=close + spread,
        low=close - spread,
        close=close,
        volume=volume,
    )


def bars_from_closes(closes, spread: float = 1.0, volume: float = 100.0) -> list[Bar]:
    return [make_bar(i, float(c), spread, volume) for i, c in enumerate(closes)]


def trend_closes(n: int, start: float = 100.0, step: float = 1.0) -> list[float]:
    return [start + step * i for i in range(n)]


def wave_closes(n: int, base: float = 100.0, amplitude: float = 10.0, period: int = 40) -> list[float]:
    """Sine wave around ``base``: crosses up and down every half period."""
    return [base + amplitude * math.sin(2 * math.pi * i / period) for i in range(n)]


def random_walk(n: int, seed: int = 7, start: float = 100.0) -> list[float]:
    rng = np.random.default_rng(seed)
    steps = rng.normal(0.0, 1.0, n)
    return list(start + np.cumsum(steps))


@pytest.fixture
def flat_bars() -> list[Bar]:
    """60 identical bars (close 100, high 101, low 99)."""
    return bars_from_closes([100.0] * 60)


@pytest.fixture
def wave_bars() -> list[Bar]:
    """400 bars of a sine wave with a mild upward drift."""
    closes = [c + 0.02 * i for i, c in enumerate(wave_closes(400))]
    return bars_from_closes(closes, spread=0.8)


@pytest.fixture
def walk_bars() -> list[Bar]:
    """500 bars of a seeded random walk."""
    return bars_from_closes(random_walk(500), spread=0.5)
