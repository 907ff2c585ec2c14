"""
Bounded-window primitives for bar-by-bar computation.

Provides the only history access the indicators are allowed to use:
- MonotonicDeque: O(1) amortized sliding window min/max
- RingBuffer: fixed-size circular buffer with positional access
- RollingWindow: bounded FIFO with running sum/mean/stdev/max/min and
  nth-previous lookup

No component keeps an unbounded history. Every "look N bars back" access
in the indicators goes through one of these classes.

Performance Contract:
- MonotonicDeque.push(): O(1) amortized
- RingBuffer.push() / __getitem__(): O(1)
- RollingWindow.push(): O(1) amortized
- RollingWindow.sum / mean / stdev / max / min / ago(): O(1)
"""

from __future__ import annotations

import math
from collections import deque
from typing import Literal

import numpy as np


class MonotonicDeque:
    """
    Sliding window min or max in O(1) amortized time.

    The deque holds (index, value) pairs whose values are monotonic, so
    the front is always the extreme of the live window:
    - MIN mode: values increase from front to back
    - MAX mode: values decrease from front to back

    Example:
        >>> window_min = MonotonicDeque(window_size=3, mode="min")
        >>> window_min.push(0, 5.0)
        >>> window_min.push(1, 3.0)
        >>> window_min.push(2, 4.0)
        >>> window_min.get()
        3.0
        >>> window_min.push(4, 6.0)  # index 1 falls out of the window
        >>> window_min.get()
        4.0
    """

    __slots__ = ("window_size", "mode", "_deque")

    def __init__(self, window_size: int, mode: Literal["min", "max"]) -> None:
        if window_size < 1:
            raise ValueError(
                f"window_size must be >= 1, got {window_size}\n"
                f"\n"
                f"Fix: MonotonicDeque(window_size=20, mode='max')"
            )
        if mode not in ("min", "max"):
            raise ValueError(
                f"mode must be 'min' or 'max', got '{mode}'\n"
                f"\n"
                f"Fix: MonotonicDeque(window_size=20, mode='max')"
            )
        self.window_size = window_size
        self.mode = mode
        self._deque: deque[tuple[int, float]] = deque()

    def push(self, idx: int, value: float) -> None:
        """
        Add a value observed at bar ``idx``.

        Indices must increase across calls. Entries older than the window
        are evicted before the new value is inserted.
        """
        while self._deque and self._deque[0][0] <= idx - self.window_size:
            self._deque.popleft()

        if self.mode == "min":
            while self._deque and self._deque[-1][1] >= value:
                self._deque.pop()
        else:
            while self._deque and self._deque[-1][1] <= value:
                self._deque.pop()

        self._deque.append((idx, value))

    def get(self) -> float | None:
        """Current window extreme, or None when nothing has been pushed."""
        if not self._deque:
            return None
        return self._deque[0][1]

    def __len__(self) -> int:
        return len(self._deque)

    def clear(self) -> None:
        self._deque.clear()


class RingBuffer:
    """
    Fixed-size circular buffer over float samples.

    Logical index 0 is the oldest stored sample and ``len - 1`` the newest.
    Once full, each push overwrites the oldest sample.

    Example:
        >>> buf = RingBuffer(size=3)
        >>> for v in (1.0, 2.0, 3.0, 4.0):
        ...     buf.push(v)
        >>> buf[0], buf[2]
        (2.0, 4.0)
    """

    __slots__ = ("size", "_buffer", "_head", "_count")

    def __init__(self, size: int) -> None:
        if size < 1:
            raise ValueError(
                f"size must be >= 1, got {size}\n"
                f"\n"
                f"Fix: RingBuffer(size=5)"
            )
        self.size = size
        self._buffer = np.full(size, np.nan, dtype=np.float64)
        self._head = 0  # next write slot
        self._count = 0

    def push(self, value: float) -> None:
        self._buffer[self._head] = value
        self._head = (self._head + 1) % self.size
        if self._count < self.size:
            self._count += 1

    def __getitem__(self, idx: int) -> float:
        if idx < 0 or idx >= self._count:
            raise IndexError(
                f"Index {idx} out of range [0, {self._count})\n"
                f"\n"
                f"Buffer has {self._count} elements."
            )
        physical = (self._head - self._count + idx) % self.size
        return float(self._buffer[physical])

    def is_full(self) -> bool:
        return self._count == self.size

    def __len__(self) -> int:
        return self._count

    def clear(self) -> None:
        self._buffer.fill(np.nan)
        self._head = 0
        self._count = 0

    def to_array(self) -> np.ndarray:
        """Contents in logical order (oldest first), length == current count."""
        if self._count == 0:
            return np.array([], dtype=np.float64)
        start = (self._head - self._count) % self.size
        idx = (start + np.arange(self._count)) % self.size
        return self._buffer[idx].copy()


class RollingWindow:
    """
    Bounded FIFO over a scalar stream with O(1) windowed aggregates.

    Keeps running sums of x and x^2 for sum/mean/stdev and a pair of
    monotonic deques for max/min. NaN samples are rejected by the callers
    (indicators do not push while their input is unavailable), so the
    running sums never get poisoned.

    Invariant: ``len(window) <= capacity``; once ``capacity`` samples have
    been pushed, ``len(window) == capacity``.

    Example:
        >>> w = RollingWindow(3)
        >>> for v in (1.0, 2.0, 3.0, 4.0):
        ...     w.push(v)
        >>> w.sum, w.mean, w.max, w.min, w.ago(0), w.ago(2)
        (9.0, 3.0, 4.0, 2.0, 4.0, 2.0)
    """

    __slots__ = ("capacity", "_ring", "_sum", "_sq_sum", "_max", "_min", "_pushed")

    def __init__(self, capacity: int) -> None:
        if capacity < 1:
            raise ValueError(
                f"capacity must be >= 1, got {capacity}\n"
                f"\n"
                f"Fix: RollingWindow(capacity=14)"
            )
        self.capacity = capacity
        self._ring = RingBuffer(capacity)
        self._max = MonotonicDeque(capacity, "max")
        self._min = MonotonicDeque(capacity, "min")
        self._sum = 0.0
        self._sq_sum = 0.0
        self._pushed = 0

    def push(self, value: float) -> None:
        if self._ring.is_full():
            oldest = self._ring[0]
            self._sum -= oldest
            self._sq_sum -= oldest * oldest
        self._ring.push(value)
        self._sum += value
        self._sq_sum += value * value
        self._max.push(self._pushed, value)
        self._min.push(self._pushed, value)
        self._pushed += 1

    def ago(self, n: int) -> float:
        """Value pushed ``n`` steps before the newest (0 = newest); NaN if absent."""
        if n < 0 or n >= len(self._ring):
            return np.nan
        return self._ring[len(self._ring) - 1 - n]

    def is_full(self) -> bool:
        return self._ring.is_full()

    @property
    def sum(self) -> float:
        return self._sum

    @property
    def mean(self) -> float:
        if not self._ring:
            return np.nan
        return self._sum / len(self._ring)

    @property
    def stdev(self) -> float:
        """Population standard deviation of the current contents."""
        n = len(self._ring)
        if n == 0:
            return np.nan
        if self.max == self.min:
            return 0.0
        mean = self._sum / n
        variance = self._sq_sum / n - mean * mean
        # Rounding on long constant runs can leave a tiny negative residue
        if variance <= 0.0:
            return 0.0
        return math.sqrt(variance)

    @property
    def max(self) -> float:
        top = self._max.get()
        return np.nan if top is None else top

    @property
    def min(self) -> float:
        bottom = self._min.get()
        return np.nan if bottom is None else bottom

    def to_array(self) -> np.ndarray:
        return self._ring.to_array()

    def __len__(self) -> int:
        return len(self._ring)

    def clear(self) -> None:
        self._ring.clear()
        self._max.clear()
        self._min.clear()
        self._sum = 0.0
        self._sq_sum = 0.0
        self._pushed = 0
