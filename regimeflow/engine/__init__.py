"""
Signal engine: bar types, execution interface and the bar-by-bar driver.
"""

from .interfaces import (
    Bar,
    BarOutput,
    EdgeKind,
    ExecutionInterface,
    RecordingExecution,
    Side,
    SignalEdge,
)
from .driver import BarOrderError, SignalEngine, SymbolRunResult, run_symbols_parallel
from .data import bars_from_dataframe, load_bars_csv

__all__ = [
    "Bar",
    "BarOutput",
    "EdgeKind",
    "ExecutionInterface",
    "RecordingExecution",
    "Side",
    "SignalEdge",
    "BarOrderError",
    "SignalEngine",
    "SymbolRunResult",
    "run_symbols_parallel",
    "bars_from_dataframe",
    "load_bars_csv",
]
