"""
Incremental Williams fractal detector over any scalar stream.

The candidate is the value ``period`` samples ago. It is an up-fractal
when it is strictly greater than each of the ``period`` newer values and
strictly greater than the one value before it; a down-fractal mirrors
this with strict less-than. Confirmation is therefore delayed by
``period`` bars: at bar N the verdict is about bar N - period.

Outputs:
    up: True/False, or None until period + 2 samples have been seen or
        while any sample in the window is NaN.
    down: Same as ``up`` for down-fractals.
    center_index: Bar index of the candidate (-1 before the window fills).
    last_up_index / last_down_index: Most recent confirmed fractal bars.

Ties never qualify, so ``up`` and ``down`` are never both True.

Example:
    >>> det = IncrementalWilliamsFractal(period=2)
    >>> for v in (0.0, 1.0, 2.0, 5.0, 2.0, 1.0):
    ...     det.update(v)
    >>> det.up, det.down, det.center_index
    (True, False, 3)
"""

from __future__ import annotations

import math

from ..primitives import RingBuffer


class IncrementalWilliamsFractal:
    """
    Williams fractal detection with delayed confirmation.

    Uses one RingBuffer of size period + 2. Logical index 0 is the value
    before the candidate, index 1 the candidate, and indices 2.. the
    ``period`` newer values.
    """

    def __init__(self, period: int = 2) -> None:
        if not isinstance(period, int) or isinstance(period, bool) or period < 1:
            raise ValueError(
                f"period must be an integer >= 1, got {period!r}\n"
                f"\n"
                f"Fix: IncrementalWilliamsFractal(period=2)"
            )
        self.period = period
        self._buffer = RingBuffer(period + 2)
        self._seen = 0
        self._last_nan_at = -1
        self.up: bool | None = None
        self.down: bool | None = None
        self.center_index = -1
        self.last_up_index = -1
        self.last_down_index = -1

    def update(self, value: float | None) -> None:
        if value is None:
            value = math.nan
        bar_idx = self._seen
        self._seen += 1
        self._buffer.push(value)
        if math.isnan(value):
            self._last_nan_at = bar_idx

        if not self._buffer.is_full():
            self.up = None
            self.down = None
            return

        self.center_index = bar_idx - self.period
        if self._last_nan_at > bar_idx - self._buffer.size:
            self.up = None
            self.down = None
            return

        before = self._buffer[0]
        candidate = self._buffer[1]
        newer = [self._buffer[i] for i in range(2, self._buffer.size)]

        self.up = candidate > before and all(v < candidate for v in newer)
        self.down = candidate < before and all(v > candidate for v in newer)

        if self.up:
            self.last_up_index = self.center_index
        if self.down:
            self.last_down_index = self.center_index

    def reset(self) -> None:
        self._buffer.clear()
        self._seen = 0
        self._last_nan_at = -1
        self.up = None
        self.down = None
        self.center_index = -1
        self.last_up_index = -1
        self.last_down_index = -1

    @property
    def is_ready(self) -> bool:
        return self.up is not None
