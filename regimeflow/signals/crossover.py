"""
Crossover edge detection and the anti-overlap gate.

Edges are level-triggered: a bullish crossover fires only on the bar
where fast goes from <= slow to > slow, with both series defined on that
bar and the previous one.
"""

from __future__ import annotations

from collections.abc import Sequence

import numpy as np

from ..engine.interfaces import EdgeKind, Side, SignalEdge
from ..indicators.incremental.base import is_na


def crossover(prev_a: float, prev_b: float, a: float, b: float) -> bool:
    """a crosses above b: prev_a <= prev_b and a > b. Any NaN gives False."""
    if is_na(prev_a) or is_na(prev_b) or is_na(a) or is_na(b):
        return False
    return prev_a <= prev_b and a > b


def crossunder(prev_a: float, prev_b: float, a: float, b: float) -> bool:
    """a crosses below b: prev_a >= prev_b and a < b. Any NaN gives False."""
    if is_na(prev_a) or is_na(prev_b) or is_na(a) or is_na(b):
        return False
    return prev_a >= prev_b and a < b


class CrossoverDetector:
    """
    Incremental crossover detection between two series.

    Example:
        >>> det = CrossoverDetector()
        >>> [det.update(f, 2.0) for f in (1.0, 3.0, 5.0)]
        [(False, False), (True, False), (False, False)]
    """

    __slots__ = ("_prev_fast", "_prev_slow")

    def __init__(self) -> None:
        self._prev_fast = np.nan
        self._prev_slow = np.nan

    def update(self, fast: float, slow: float) -> tuple[bool, bool]:
        """Consume one bar; returns (bullish, bearish)."""
        bullish = crossover(self._prev_fast, self._prev_slow, fast, slow)
        bearish = crossunder(self._prev_fast, self._prev_slow, fast, slow)
        self._prev_fast = np.nan if fast is None else fast
        self._prev_slow = np.nan if slow is None else slow
        return bullish, bearish

    def reset(self) -> None:
        self._prev_fast = np.nan
        self._prev_slow = np.nan


def detect_crossovers(fast: Sequence[float], slow: Sequence[float]) -> list[SignalEdge]:
    """
    Find crossover edges over two aligned sequences.

    A bullish crossover is reported as a long entry edge and a bearish one
    as a short entry edge, at the index where it fires.

    Raises:
        ValueError: Sequences of different length
    """
    if len(fast) != len(slow):
        raise ValueError(
            f"fast and slow must be aligned. Got lengths {len(fast)} and {len(slow)}"
        )
    detector = CrossoverDetector()
    edges = []
    for idx, (f, s) in enumerate(zip(fast, slow)):
        bullish, bearish = detector.update(f, s)
        if bullish:
            edges.append(SignalEdge(EdgeKind.ENTRY, Side.LONG, idx))
        if bearish:
            edges.append(SignalEdge(EdgeKind.ENTRY, Side.SHORT, idx))
    return edges


class AntiOverlapGate:
    """
    Suppress repeated entries/exits of the same side.

    Per side, an entry passes only if the previous passed edge of that side
    was not an entry, and an exit passes only if the previous passed edge
    was not an exit. Before any edge both are armed.
    """

    __slots__ = ("_in_long", "_exited_long", "_in_short", "_exited_short")

    def __init__(self) -> None:
        self.reset()

    def step(
        self,
        entry_long: bool,
        exit_long: bool,
        entry_short: bool,
        exit_short: bool,
    ) -> tuple[bool, bool, bool, bool]:
        """Filter one bar's raw conditions; returns the gated four flags."""
        fire_entry_long = entry_long and not self._in_long
        fire_exit_long = exit_long and not self._exited_long
        fire_entry_short = entry_short and not self._in_short
        fire_exit_short = exit_short and not self._exited_short

        if fire_entry_long:
            self._in_long = True
            self._exited_long = False
        if fire_exit_long:
            self._in_long = False
            self._exited_long = True
        if fire_entry_short:
            self._in_short = True
            self._exited_short = False
        if fire_exit_short:
            self._in_short = False
            self._exited_short = True

        return fire_entry_long, fire_exit_long, fire_entry_short, fire_exit_short

    def reset(self) -> None:
        self._in_long = False
        self._exited_long = False
        self._in_short = False
        self._exited_short = False

    @property
    def long_open(self) -> bool:
        return self._in_long

    @property
    def short_open(self) -> bool:
        return self._in_short
