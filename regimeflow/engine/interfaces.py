"""
Protocol and data type definitions for the signal engine.

- Bar: one OHLCV sample with derived price sources
- SignalEdge / BarOutput: what a strategy emits per bar
- ExecutionInterface: the consumer of BarOutputs (order management lives
  behind it, outside this package)
- RecordingExecution: in-memory ExecutionInterface for replays and tests
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Protocol, runtime_checkable

from ..regime.classifier import Regime


# =============================================================================
# Data Types
# =============================================================================


@dataclass(slots=True, frozen=True)
class Bar:
    """OHLCV bar. ``timestamp`` is a datetime or an epoch number."""

    timestamp: datetime | float
    open: float
    high: float
    low: float
    close: float
    volume: float = 0.0

    @property
    def hl2(self) -> float:
        """Average of HL (midpoint)."""
        return (self.high + self.low) / 2

    @property
    def hlc3(self) -> float:
        """Average of HLC (typical price)."""
        return (self.high + self.low + self.close) / 3

    @property
    def ohlc4(self) -> float:
        """Average of OHLC."""
        return (self.open + self.high + self.low + self.close) / 4

    @property
    def oc2(self) -> float:
        return (self.open + self.close) / 2

    @property
    def occ3(self) -> float:
        return (self.open + 2 * self.close) / 3

    @property
    def hlcc4(self) -> float:
        return (self.high + self.low + 2 * self.close) / 4

    def source(self, name: str) -> float:
        """
        Select a price source by name.

        Raises:
            ValueError: Unknown source name
        """
        if name not in _SOURCES:
            raise ValueError(
                f"Unknown price source '{name}'\n"
                f"\n"
                f"Valid sources: {', '.join(_SOURCES)}"
            )
        return getattr(self, name)


_SOURCES = ("open", "high", "low", "close", "hl2", "hlc3", "ohlc4", "oc2", "occ3", "hlcc4")


class Side(str, Enum):
    LONG = "long"
    SHORT = "short"


class EdgeKind(str, Enum):
    ENTRY = "entry"
    EXIT = "exit"


@dataclass(slots=True, frozen=True)
class SignalEdge:
    """A single fired signal: entry or exit, long or short, at a bar."""

    kind: EdgeKind
    side: Side
    bar_index: int

    def __str__(self) -> str:
        return f"{self.kind.value}_{self.side.value}@{self.bar_index}"


@dataclass(slots=True)
class BarOutput:
    """
    Per-bar strategy output handed to the execution interface.

    ``fast``/``slow`` are NaN when unavailable. ``extras`` carries
    strategy-specific series (faith index, bands, partial-close flags...).
    """

    bar_index: int
    timestamp: datetime | float
    fast: float
    slow: float
    regime: Regime | None = None
    entry_long: bool = False
    exit_long: bool = False
    entry_short: bool = False
    exit_short: bool = False
    extras: dict[str, Any] = field(default_factory=dict)

    @property
    def edges(self) -> list[SignalEdge]:
        """Edges fired on this bar, exits before entries."""
        fired = []
        if self.exit_long:
            fired.append(SignalEdge(EdgeKind.EXIT, Side.LONG, self.bar_index))
        if self.exit_short:
            fired.append(SignalEdge(EdgeKind.EXIT, Side.SHORT, self.bar_index))
        if self.entry_long:
            fired.append(SignalEdge(EdgeKind.ENTRY, Side.LONG, self.bar_index))
        if self.entry_short:
            fired.append(SignalEdge(EdgeKind.ENTRY, Side.SHORT, self.bar_index))
        return fired

    @property
    def has_signal(self) -> bool:
        return self.entry_long or self.exit_long or self.entry_short or self.exit_short


# =============================================================================
# Protocols
# =============================================================================


@runtime_checkable
class ExecutionInterface(Protocol):
    """
    Protocol for consumers of strategy output.

    Implementations translate BarOutputs into position changes; take
    profit, stop loss and partial closes are their concern.
    """

    def on_bar(self, symbol: str, output: BarOutput) -> None:
        """Receive the output for one bar of ``symbol``."""
        ...


class RecordingExecution:
    """ExecutionInterface that keeps every output and edge in memory."""

    def __init__(self) -> None:
        self.outputs: dict[str, list[BarOutput]] = {}
        self.edges: dict[str, list[SignalEdge]] = {}

    def on_bar(self, symbol: str, output: BarOutput) -> None:
        self.outputs.setdefault(symbol, []).append(output)
        fired = output.edges
        if fired:
            self.edges.setdefault(symbol, []).extend(fired)

    def edges_for(self, symbol: str) -> list[SignalEdge]:
        return list(self.edges.get(symbol, []))
