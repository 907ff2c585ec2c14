"""
Base strategy interface.

A strategy is a bar-by-bar step function: advance(bar) updates every
indicator it owns and returns one BarOutput. Each instance owns its own
state, so one instance per symbol stream.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, ClassVar

from ..engine.interfaces import Bar, BarOutput


class BaseStrategy(ABC):
    """
    Abstract base class for signal strategies.

    Subclasses set STRATEGY_ID, DESCRIPTION and PARAMS_CLASS and implement
    _step() and _reset_state(). advance() handles the bar counter and the
    long/short enable flags: a disabled side never emits entry edges, its
    exits still pass through.
    """

    STRATEGY_ID: ClassVar[str] = ""
    DESCRIPTION: ClassVar[str] = ""
    PARAMS_CLASS: ClassVar[type] = object

    def __init__(self, params: Any = None) -> None:
        if params is None:
            params = self.PARAMS_CLASS()
        elif isinstance(params, dict):
            params = self.PARAMS_CLASS.from_dict(params)
        elif not isinstance(params, self.PARAMS_CLASS):
            raise TypeError(
                f"{type(self).__name__} expects {self.PARAMS_CLASS.__name__} or dict params, "
                f"got {type(params).__name__}"
            )
        self.params = params
        self.bar_index = -1

    @property
    def long_enabled(self) -> bool:
        return getattr(self.params, "long_enabled", True)

    @property
    def short_enabled(self) -> bool:
        return getattr(self.params, "short_enabled", True)

    def advance(self, bar: Bar) -> BarOutput:
        """Consume one bar and return its output."""
        self.bar_index += 1
        output = self._step(bar, self.bar_index)
        if not self.long_enabled:
            output.entry_long = False
        if not self.short_enabled:
            output.entry_short = False
        return output

    def reset(self) -> None:
        """Return to the initial (no history) state."""
        self.bar_index = -1
        self._reset_state()

    @abstractmethod
    def _step(self, bar: Bar, bar_index: int) -> BarOutput:
        """Strategy-specific per-bar computation."""
        ...

    @abstractmethod
    def _reset_state(self) -> None:
        """Reset every owned indicator."""
        ...
