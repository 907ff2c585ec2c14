"""
Smoother factory.

Builds a single-source smoothing indicator by method name, so that
strategies can take the smoothing choice from configuration.
"""

from __future__ import annotations

from typing import Any, Callable

from .base import IncrementalIndicator
from .core import IncrementalEMA, IncrementalRMA, IncrementalSMA, IncrementalWMA
from .filters import (
    IncrementalButterworth2,
    IncrementalButterworth3,
    IncrementalCosineWMA,
    IncrementalHammingMA,
    IncrementalInstantaneousTrendline,
    IncrementalMcGinley,
    IncrementalSuperSmoother,
    IncrementalZLEMA,
)


# method name -> (class, extra keyword parameters it accepts)
SMOOTHER_REGISTRY: dict[str, tuple[Callable[..., IncrementalIndicator], frozenset[str]]] = {
    "mg": (IncrementalMcGinley, frozenset({"k", "exponent"})),
    "rma": (IncrementalRMA, frozenset()),
    "sma": (IncrementalSMA, frozenset()),
    "ema": (IncrementalEMA, frozenset()),
    "wma": (IncrementalWMA, frozenset()),
    "zlema": (IncrementalZLEMA, frozenset()),
    "super_smoother": (IncrementalSuperSmoother, frozenset()),
    "butterworth_2": (IncrementalButterworth2, frozenset()),
    "butterworth_3": (IncrementalButterworth3, frozenset()),
    "hamming": (IncrementalHammingMA, frozenset({"pedestal"})),
    "itrend": (IncrementalInstantaneousTrendline, frozenset()),
    "cwma": (IncrementalCosineWMA, frozenset()),
}


def list_smoothers() -> list[str]:
    return sorted(SMOOTHER_REGISTRY)


def create_smoother(method: str, length: int, **params: Any) -> IncrementalIndicator:
    """
    Create a smoothing indicator by name.

    Args:
        method: One of ``list_smoothers()`` (case-insensitive)
        length: Smoothing length
        **params: Method-specific parameters (k/exponent for "mg",
            pedestal for "hamming")

    Raises:
        ValueError: Unknown method or a parameter the method does not take
    """
    key = method.lower()
    if key not in SMOOTHER_REGISTRY:
        raise ValueError(
            f"Unknown smoothing method '{method}'\n"
            f"\n"
            f"Valid methods: {', '.join(list_smoothers())}"
        )
    cls, accepted = SMOOTHER_REGISTRY[key]
    unknown = set(params) - accepted
    if unknown:
        raise ValueError(
            f"Smoothing method '{key}' does not accept {sorted(unknown)}\n"
            f"\n"
            f"Accepted parameters: {sorted(accepted) or 'none'}"
        )
    return cls(length, **params)
