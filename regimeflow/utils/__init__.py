"""Utility modules."""

from .logger import SignalLogger, get_logger, setup_logger

__all__ = ["SignalLogger", "get_logger", "setup_logger"]
