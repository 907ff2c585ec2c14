"""
Bar-by-bar driver.

SignalEngine feeds one symbol's bars, strictly in timestamp order, through
a strategy and hands each BarOutput to an ExecutionInterface. Fired edges
and regime transitions are logged.

run_symbols_parallel replays several independent symbol streams in
separate processes. Strategy state is per instance, so streams never share
anything; each worker builds its own strategy from the registry.

Usage:
    from regimeflow.engine.driver import SignalEngine
    from regimeflow.strategies import create_strategy

    engine = SignalEngine("BTCUSDT", create_strategy("regime_ma"))
    outputs = engine.run(bars)
"""

from __future__ import annotations

import multiprocessing as mp
import time
from concurrent.futures import ProcessPoolExecutor, as_completed
from dataclasses import dataclass, field
from typing import Any, Iterable, TYPE_CHECKING

from ..regime.classifier import Regime
from ..utils.logger import get_logger
from .interfaces import Bar, BarOutput, ExecutionInterface, RecordingExecution

if TYPE_CHECKING:
    from ..strategies.base import BaseStrategy


class BarOrderError(ValueError):
    """A bar arrived with a timestamp not after the previous bar's."""


class SignalEngine:
    """
    Drives one strategy over one symbol stream.

    Args:
        symbol: Stream identifier used in logs and execution callbacks
        strategy: A fresh strategy instance (owned by this engine)
        execution: Receiver of every BarOutput (default: RecordingExecution)
    """

    def __init__(
        self,
        symbol: str,
        strategy: BaseStrategy,
        execution: ExecutionInterface | None = None,
    ) -> None:
        self.symbol = symbol
        self.strategy = strategy
        self.execution = execution if execution is not None else RecordingExecution()
        self.logger = get_logger()
        self._last_timestamp: Any = None
        self._last_regime: Regime | None = None
        self.bars_processed = 0

    def advance(self, bar: Bar) -> BarOutput:
        """
        Process one bar.

        Raises:
            BarOrderError: Timestamp is not strictly after the previous bar
        """
        if self._last_timestamp is not None and not bar.timestamp > self._last_timestamp:
            raise BarOrderError(
                f"Out-of-order bar for {self.symbol}: {bar.timestamp} after {self._last_timestamp}\n"
                f"\n"
                f"Fix: sort bars by timestamp and drop duplicates before replay"
            )
        self._last_timestamp = bar.timestamp

        output = self.strategy.advance(bar)
        self.bars_processed += 1

        if output.regime is not None and output.regime != self._last_regime:
            if self._last_regime is not None:
                self.logger.regime(
                    self.symbol,
                    self._last_regime.value,
                    output.regime.value,
                    output.bar_index,
                )
            self._last_regime = output.regime

        for edge in output.edges:
            self.logger.signal(
                edge.kind.value,
                self.symbol,
                edge.side.value,
                edge.bar_index,
                price=bar.close,
                strategy=self.strategy.STRATEGY_ID,
            )

        self.execution.on_bar(self.symbol, output)
        return output

    def run(self, bars: Iterable[Bar]) -> list[BarOutput]:
        """Process every bar in order; returns all outputs."""
        return [self.advance(bar) for bar in bars]

    def reset(self) -> None:
        self.strategy.reset()
        self._last_timestamp = None
        self._last_regime = None
        self.bars_processed = 0


# =============================================================================
# Parallel replay
# =============================================================================


@dataclass
class SymbolRunResult:
    """
    Result of replaying one symbol in a worker process.

    ``edges`` holds plain dicts (kind, side, bar_index, timestamp, price).
    """
    symbol: str
    success: bool
    bars: int = 0
    edges: list[dict[str, Any]] = field(default_factory=list)
    error: str | None = None
    duration_seconds: float = 0.0


def _bar_rows(bars: Iterable[Bar]) -> list[tuple]:
    return [(b.timestamp, b.open, b.high, b.low, b.close, b.volume) for b in bars]


def _run_symbol_process(
    symbol: str,
    rows: list[tuple],
    strategy_name: str,
    params: dict[str, Any] | None,
) -> SymbolRunResult:
    """Replay one symbol inside a worker process."""
    start_time = time.time()
    try:
        # Imported here: strategies import the engine package
        from ..strategies import create_strategy

        engine = SignalEngine(symbol, create_strategy(strategy_name, params))
        edges = []
        for row in rows:
            bar = Bar(*row)
            output = engine.advance(bar)
            for edge in output.edges:
                edges.append({
                    "kind": edge.kind.value,
                    "side": edge.side.value,
                    "bar_index": edge.bar_index,
                    "timestamp": bar.timestamp,
                    "price": bar.close,
                })
        return SymbolRunResult(
            symbol=symbol,
            success=True,
            bars=engine.bars_processed,
            edges=edges,
            duration_seconds=time.time() - start_time,
        )
    except Exception as e:
        return SymbolRunResult(
            symbol=symbol,
            success=False,
            error=f"{type(e).__name__}: {e}",
            duration_seconds=time.time() - start_time,
        )


def run_symbols_parallel(
    streams: dict[str, Iterable[Bar]],
    strategy_name: str,
    params: dict[str, Any] | None = None,
    max_workers: int | None = None,
) -> list[SymbolRunResult]:
    """
    Replay independent symbol streams in separate processes.

    Args:
        streams: symbol -> bars in timestamp order
        strategy_name: Registered strategy name
        params: Raw params dict passed to create_strategy
        max_workers: Max processes (default: CPU count - 1, min 1)

    Returns:
        One SymbolRunResult per symbol, in the order of ``streams``
    """
    if not streams:
        return []

    if max_workers is None:
        max_workers = max(1, mp.cpu_count() - 1)
    max_workers = max(1, min(max_workers, len(streams)))

    logger = get_logger()
    results_map: dict[str, SymbolRunResult] = {}

    with ProcessPoolExecutor(max_workers=max_workers) as executor:
        future_to_symbol = {
            executor.submit(
                _run_symbol_process,
                symbol,
                _bar_rows(bars),
                strategy_name,
                params,
            ): symbol
            for symbol, bars in streams.items()
        }

        for future in as_completed(future_to_symbol):
            symbol = future_to_symbol[future]
            try:
                result = future.result()
            except Exception as e:
                result = SymbolRunResult(symbol=symbol, success=False, error=f"Process error: {e}")
            results_map[symbol] = result
            if result.success:
                logger.info(
                    f"[REPLAY] symbol={symbol} | bars={result.bars} | "
                    f"edges={len(result.edges)} | {result.duration_seconds:.2f}s"
                )
            else:
                logger.error(f"[REPLAY] symbol={symbol} | FAILED | {result.error}")

    return [results_map[symbol] for symbol in streams]
