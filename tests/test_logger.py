"""
Tests for the signal logger.

Validates that:
1. Signal edges are written as one pipe-separated line
2. Regime transitions go to DEBUG on the main logger
3. log_dir adds a plain-text dated file handler
4. setup_logger replaces the singleton
"""

import logging

import pytest

from regimeflow.utils.logger import SignalLogger, get_logger, setup_logger


class ListHandler(logging.Handler):
    def __init__(self):
        super().__init__()
        self.records = []

    def emit(self, record):
        self.records.append(record)


@pytest.fixture
def capture():
    """Attach list handlers to both loggers after a fresh setup."""
    setup_logger(log_level="DEBUG")
    main, signals = ListHandler(), ListHandler()
    logging.getLogger("regimeflow").addHandler(main)
    logging.getLogger("regimeflow.signals").addHandler(signals)
    yield main.records, signals.records
    logging.getLogger("regimeflow").removeHandler(main)
    logging.getLogger("regimeflow.signals").removeHandler(signals)


class TestSignalLines:
    """Structured record format."""

    def test_signal_line(self, capture):
        _, signals = capture
        get_logger().signal("entry", "BTCUSDT", "long", 42, price=101.5, strategy="regime_ma")
        assert signals[0].getMessage() == (
            "[ENTRY] | symbol=BTCUSDT | side=LONG | bar=42 | price=101.5000 | strategy=regime_ma"
        )
        assert signals[0].levelno == logging.INFO

    def test_signal_without_price(self, capture):
        _, signals = capture
        get_logger().signal("exit", "ETHUSDT", "short", 3)
        assert signals[0].getMessage() == "[EXIT] | symbol=ETHUSDT | side=SHORT | bar=3"

    def test_regime_line(self, capture):
        main, _ = capture
        get_logger().regime("BTCUSDT", "choppy_market", "weak_trend", 17)
        assert main[0].getMessage() == "[REGIME] | symbol=BTCUSDT | choppy_market -> weak_trend | bar=17"
        assert main[0].levelno == logging.DEBUG

    def test_regime_hidden_at_info(self):
        setup_logger(log_level="INFO")
        handler = ListHandler()
        logging.getLogger("regimeflow").addHandler(handler)
        try:
            get_logger().regime("BTCUSDT", "a", "b", 1)
        finally:
            logging.getLogger("regimeflow").removeHandler(handler)
        assert handler.records == []


class TestLoggerSetup:
    """Singleton and file output."""

    def test_setup_replaces_instance(self):
        first = setup_logger()
        second = setup_logger()
        assert first is not second
        assert get_logger() is second
        assert SignalLogger() is second

    def test_file_handler(self, tmp_path):
        log_dir = tmp_path / "logs"
        logger = setup_logger(str(log_dir))
        logger.signal("entry", "BTCUSDT", "long", 1, price=1.0)
        for handler in logging.getLogger("regimeflow.signals").handlers:
            handler.flush()
        files = list(log_dir.glob("signals_*.log"))
        assert len(files) == 1
        text = files[0].read_text()
        assert "[ENTRY] | symbol=BTCUSDT" in text
        assert "\033[" not in text
        setup_logger()

    def test_no_file_without_log_dir(self):
        setup_logger()
        handlers = logging.getLogger("regimeflow").handlers
        assert not any(isinstance(h, logging.FileHandler) for h in handlers)
