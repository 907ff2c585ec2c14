"""
Base class and shared helpers for incremental indicators.

Every incremental indicator owns its own filter state and exposes the
same per-bar interface: update(), reset(), value, is_ready. Until its
warm-up completes, ``value`` is NaN.
"""

from __future__ import annotations

import math
from abc import ABC, abstractmethod
from typing import Any


def is_na(value: float | None) -> bool:
    """True for the "unavailable" marker (None or NaN)."""
    return value is None or math.isnan(value)


def safe_div(numerator: float, denominator: float, fallback: float = 0.0) -> float:
    """Divide, returning ``fallback`` instead of inf/NaN on a zero denominator."""
    if denominator == 0:
        return fallback
    return numerator / denominator


def clamp(value: float, lower: float, upper: float) -> float:
    return max(lower, min(upper, value))


def require_length(name: str, length: int, minimum: int = 1) -> None:
    """Reject window lengths below ``minimum`` at construction time."""
    if not isinstance(length, int) or isinstance(length, bool) or length < minimum:
        raise ValueError(
            f"{name} length must be an integer >= {minimum}, got {length!r}\n"
            f"\n"
            f"Fix: {name}(length={max(minimum, 14)})"
        )


class IncrementalIndicator(ABC):
    """Base class for incremental indicators."""

    @abstractmethod
    def update(self, **kwargs: Any) -> None:
        """Consume one new bar (or one new sample of a derived series)."""
        ...

    @abstractmethod
    def reset(self) -> None:
        """Reset state to initial."""
        ...

    @property
    @abstractmethod
    def value(self) -> float:
        """Current output, NaN while unavailable."""
        ...

    @property
    @abstractmethod
    def is_ready(self) -> bool:
        """True when warmup period complete."""
        ...
