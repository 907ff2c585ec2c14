"""
Logging system for regimeflow.
Provides structured, human-readable logs with console and optional file output.
"""

import copy
import logging
from datetime import datetime
from pathlib import Path
from typing import Optional


# ANSI color codes for terminal output
class Colors:
    RESET = "\033[0m"
    RED = "\033[91m"
    GREEN = "\033[92m"
    YELLOW = "\033[93m"
    BLUE = "\033[94m"
    MAGENTA = "\033[95m"
    CYAN = "\033[96m"
    WHITE = "\033[97m"
    BOLD = "\033[1m"


class ColoredFormatter(logging.Formatter):
    """Custom formatter with colors for console output."""

    LEVEL_COLORS = {
        logging.DEBUG: Colors.CYAN,
        logging.INFO: Colors.GREEN,
        logging.WARNING: Colors.YELLOW,
        logging.ERROR: Colors.RED,
        logging.CRITICAL: Colors.BOLD + Colors.RED,
    }

    def format(self, record):
        # Colour a copy so the file handler still gets plain text
        record = copy.copy(record)
        color = self.LEVEL_COLORS.get(record.levelno, Colors.WHITE)
        record.levelname = f"{color}{record.levelname}{Colors.RESET}"
        record.msg = f"{color}{record.msg}{Colors.RESET}"
        return super().format(record)


class SignalLogger:
    """
    Central logging system for the signal engine.

    Features:
    - Console output with colors
    - Optional dated log file (plain text) when ``log_dir`` is set
    - Structured one-line records for signals and regime changes
    """

    _instance: Optional['SignalLogger'] = None
    _initialized: bool = False

    def __new__(cls, *args, **kwargs):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __init__(self, log_dir: Optional[str] = None, log_level: str = "INFO"):
        if SignalLogger._initialized:
            return

        self.log_dir = Path(log_dir) if log_dir else None
        if self.log_dir is not None:
            self.log_dir.mkdir(parents=True, exist_ok=True)

        self.main_logger = self._create_logger("regimeflow", log_level)
        self.signal_logger = self._create_logger("regimeflow.signals", log_level, "signals")

        SignalLogger._initialized = True

    def _create_logger(self, name: str, level: str, file_prefix: str = None) -> logging.Logger:
        """Create a configured logger instance."""
        logger = logging.getLogger(name)
        logger.setLevel(getattr(logging, level.upper()))
        logger.handlers.clear()
        logger.propagate = False

        # Console handler with colors
        console_handler = logging.StreamHandler()
        console_handler.setFormatter(ColoredFormatter(
            "%(asctime)s | %(levelname)s | %(message)s",
            datefmt="%H:%M:%S"
        ))
        logger.addHandler(console_handler)

        if self.log_dir is None:
            return logger

        # File handler (plain text, no colors)
        prefix = file_prefix or "regimeflow"
        log_file = self.log_dir / f"{prefix}_{datetime.now().strftime('%Y%m%d')}.log"
        file_handler = logging.FileHandler(log_file, encoding='utf-8')
        file_handler.setFormatter(logging.Formatter(
            "%(asctime)s | %(levelname)s | %(name)s | %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S"
        ))
        logger.addHandler(file_handler)

        return logger

    def info(self, msg: str, *args, **kwargs):
        """Log info message."""
        self.main_logger.info(msg, *args, **kwargs)

    def debug(self, msg: str, *args, **kwargs):
        """Log debug message."""
        self.main_logger.debug(msg, *args, **kwargs)

    def warning(self, msg: str, *args, **kwargs):
        """Log warning message."""
        self.main_logger.warning(msg, *args, **kwargs)

    def error(self, msg: str, *args, **kwargs):
        """Log error message."""
        self.main_logger.error(msg, *args, **kwargs)

    def signal(self, kind: str, symbol: str, side: str, bar_index: int,
               price: float = None, **kwargs):
        """
        Log a fired signal edge with structured format.

        Args:
            kind: ENTRY or EXIT
            symbol: Stream symbol (e.g., BTCUSDT)
            side: LONG or SHORT
            bar_index: Bar the edge fired on
            price: Close of that bar (optional)
            **kwargs: Additional fields
        """
        parts = [
            f"[{kind.upper()}]",
            f"symbol={symbol}",
            f"side={side.upper()}",
            f"bar={bar_index}",
        ]
        if price is not None:
            parts.append(f"price={price:.4f}")
        for key, value in kwargs.items():
            parts.append(f"{key}={value}")

        self.signal_logger.info(" | ".join(parts))

    def regime(self, symbol: str, previous: str, current: str, bar_index: int, **kwargs):
        """Log a regime transition."""
        parts = ["[REGIME]", f"symbol={symbol}", f"{previous} -> {current}", f"bar={bar_index}"]
        for key, value in kwargs.items():
            parts.append(f"{key}={value}")
        self.main_logger.debug(" | ".join(parts))


# Global logger instance
_logger: Optional[SignalLogger] = None


def get_logger(log_dir: Optional[str] = None, log_level: str = "INFO") -> SignalLogger:
    """Get or create the global logger instance."""
    global _logger
    if _logger is None:
        _logger = SignalLogger(log_dir, log_level)
    return _logger


def setup_logger(log_dir: Optional[str] = None, log_level: str = "INFO") -> SignalLogger:
    """Initialize the logger with custom settings."""
    global _logger
    SignalLogger._initialized = False
    SignalLogger._instance = None
    _logger = SignalLogger(log_dir, log_level)
    return _logger
