"""
Tests for the bar driver, the execution interface and bar loading.

Validates that:
1. Bars must arrive in strictly increasing timestamp order
2. Every BarOutput reaches the execution interface
3. Fired edges are logged once per edge
4. CSV / DataFrame loading normalizes columns and sorts by timestamp
5. Parallel replay returns one result per symbol, in input order
"""

import logging

import pandas as pd
import pytest

from regimeflow.engine import (
    Bar,
    BarOrderError,
    BarOutput,
    ExecutionInterface,
    RecordingExecution,
    SignalEngine,
    bars_from_dataframe,
    load_bars_csv,
    run_symbols_parallel,
)
from regimeflow.strategies import create_strategy
from regimeflow.utils.logger import setup_logger
from tests.conftest import bars_from_closes, make_bar, wave_closes


REGIME_MA_FAST = {
    "fast_length": 5,
    "slow_length": 20,
    "regime": {"long_ma_length": 20, "atr_baseline_length": 10, "breakout_length": 5, "carry_forward": True},
}


class ListHandler(logging.Handler):
    def __init__(self):
        super().__init__()
        self.messages = []

    def emit(self, record):
        self.messages.append(record.getMessage())


@pytest.fixture
def signal_records():
    """Capture lines written by the signal logger."""
    setup_logger(log_level="DEBUG")
    handler = ListHandler()
    logger = logging.getLogger("regimeflow.signals")
    logger.addHandler(handler)
    yield handler.messages
    logger.removeHandler(handler)


class TestBarOrder:
    """Timestamp ordering."""

    def test_duplicate_timestamp_rejected(self):
        engine = SignalEngine("TEST", create_strategy("regime_ma"))
        engine.advance(make_bar(0, 100.0))
        with pytest.raises(BarOrderError, match="Out-of-order"):
            engine.advance(make_bar(0, 101.0))

    def test_backwards_timestamp_rejected(self):
        engine = SignalEngine("TEST", create_strategy("regime_ma"))
        engine.advance(make_bar(5, 100.0))
        with pytest.raises(ValueError, match="Fix: sort bars"):
            engine.advance(make_bar(4, 100.0))
        assert engine.bars_processed == 1

    def test_numeric_timestamps(self):
        engine = SignalEngine("TEST", create_strategy("regime_ma"))
        for ts in (1.0, 2.0, 3.5):
            engine.advance(Bar(ts, 1.0, 2.0, 0.5, 1.5, 10.0))
        assert engine.bars_processed == 3

    def test_reset_allows_replay(self):
        bars = bars_from_closes([100.0] * 5)
        engine = SignalEngine("TEST", create_strategy("regime_ma"))
        engine.run(bars)
        engine.reset()
        assert engine.bars_processed == 0
        engine.run(bars)
        assert engine.bars_processed == 5


class TestExecution:
    """Outputs handed to the execution interface."""

    def test_recording_execution_is_an_execution_interface(self):
        assert isinstance(RecordingExecution(), ExecutionInterface)

    def test_every_output_recorded(self, wave_bars):
        execution = RecordingExecution()
        engine = SignalEngine("WAVE", create_strategy("regime_ma", REGIME_MA_FAST), execution)
        outputs = engine.run(wave_bars)
        assert execution.outputs["WAVE"] == outputs
        expected = [edge for out in outputs for edge in out.edges]
        assert execution.edges_for("WAVE") == expected
        assert expected

    def test_custom_execution(self, wave_bars):
        class Counter:
            def __init__(self):
                self.calls = 0

            def on_bar(self, symbol: str, output: BarOutput) -> None:
                self.calls += 1

        counter = Counter()
        SignalEngine("WAVE", create_strategy("fractal_dimension"), counter).run(wave_bars[:50])
        assert counter.calls == 50

    def test_edges_logged(self, wave_bars, signal_records):
        execution = RecordingExecution()
        SignalEngine("WAVE", create_strategy("regime_ma", REGIME_MA_FAST), execution).run(wave_bars)
        edges = execution.edges_for("WAVE")
        assert len(signal_records) == len(edges)
        first = signal_records[0]
        assert first.startswith(f"[{edges[0].kind.value.upper()}]")
        assert "symbol=WAVE" in first
        assert f"bar={edges[0].bar_index}" in first
        assert "strategy=regime_ma" in first


class TestBarLoading:
    """DataFrame and CSV loading."""

    def test_columns_case_insensitive(self):
        df = pd.DataFrame({
            "Timestamp": ["2024-01-01 00:02", "2024-01-01 00:00", "2024-01-01 00:01"],
            "Open": [3.0, 1.0, 2.0],
            "HIGH": [3.5, 1.5, 2.5],
            "low": [2.5, 0.5, 1.5],
            "Close": [3.0, 1.0, 2.0],
            "Volume": [30, 10, 20],
        })
        bars = bars_from_dataframe(df)
        assert [b.close for b in bars] == [1.0, 2.0, 3.0]
        assert [b.volume for b in bars] == [10.0, 20.0, 30.0]
        assert bars[0].timestamp < bars[1].timestamp

    def test_volume_and_timestamp_optional(self):
        df = pd.DataFrame({"open": [1.0, 2.0], "high": [2.0, 3.0], "low": [0.5, 1.5], "close": [1.5, 2.5]})
        bars = bars_from_dataframe(df)
        assert [b.timestamp for b in bars] == [0, 1]
        assert all(b.volume == 0.0 for b in bars)

    def test_missing_column(self):
        df = pd.DataFrame({"open": [1.0], "high": [2.0], "close": [1.5]})
        with pytest.raises(ValueError, match="Missing OHLC columns"):
            bars_from_dataframe(df)

    def test_load_csv(self, tmp_path):
        path = tmp_path / "BTCUSDT.csv"
        path.write_text(
            "time,open,high,low,close,volume\n"
            "2024-01-01T00:00:00Z,100,101,99,100.5,5\n"
            "2024-01-01T00:01:00Z,100.5,102,100,101.5,7\n"
        )
        bars = load_bars_csv(path)
        assert len(bars) == 2
        assert bars[1].high == 102.0
        assert bars[1].timestamp > bars[0].timestamp

    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            load_bars_csv(tmp_path / "nope.csv")

    def test_loaded_bars_replay(self, tmp_path):
        closes = wave_closes(120)
        df = pd.DataFrame({
            "timestamp": pd.date_range("2024-01-01", periods=120, freq="min"),
            "open": closes,
            "high": [c + 1 for c in closes],
            "low": [c - 1 for c in closes],
            "close": closes,
        })
        path = tmp_path / "wave.csv"
        df.to_csv(path, index=False)
        outputs = SignalEngine("WAVE", create_strategy("asymmetric_volatility")).run(load_bars_csv(path))
        assert len(outputs) == 120


class TestParallelReplay:
    """Process-pool replay of independent streams."""

    def test_results_match_single_process(self, wave_bars, walk_bars):
        streams = {"WAVE": wave_bars, "WALK": walk_bars}
        results = run_symbols_parallel(streams, "regime_ma", REGIME_MA_FAST, max_workers=2)
        assert [r.symbol for r in results] == ["WAVE", "WALK"]
        assert all(r.success for r in results)

        execution = RecordingExecution()
        SignalEngine("WAVE", create_strategy("regime_ma", REGIME_MA_FAST), execution).run(wave_bars)
        expected = [(e.kind.value, e.side.value, e.bar_index) for e in execution.edges_for("WAVE")]
        got = [(e["kind"], e["side"], e["bar_index"]) for e in results[0].edges]
        assert got == expected
        assert results[0].bars == len(wave_bars)

    def test_failure_is_reported(self, wave_bars):
        bad = list(reversed(wave_bars[:10]))
        results = run_symbols_parallel({"OK": wave_bars[:10], "BAD": bad}, "regime_ma", max_workers=1)
        ok, failed = results
        assert ok.success
        assert not failed.success
        assert "BarOrderError" in failed.error

    def test_empty(self):
        assert run_symbols_parallel({}, "regime_ma") == []
