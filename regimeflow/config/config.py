"""
Runtime configuration for regimeflow.

Loads settings from environment variables (and a .env file via
python-dotenv) and provides typed access. Strategy parameters are not
environment settings: they come from YAML strategy files, see
``load_strategy_config``.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Optional

import yaml
from dotenv import load_dotenv

from . import constants as C


@dataclass
class LogConfig:
    """Logging configuration. ``log_dir`` of None disables the file handler."""
    level: str = C.DEFAULT_LOG_LEVEL
    log_dir: Optional[str] = None


@dataclass
class RuntimeConfig:
    """Replay runtime configuration."""
    max_workers: int = C.DEFAULT_MAX_WORKERS

    def __post_init__(self):
        if self.max_workers < 1:
            raise ValueError(f"max_workers must be >= 1. Got: {self.max_workers}")


class Config:
    """
    Central configuration manager.

    Environment variables:
        REGIMEFLOW_LOG_LEVEL: DEBUG/INFO/WARNING/ERROR (default INFO)
        REGIMEFLOW_LOG_DIR: Directory for dated log files (default: no file)
        REGIMEFLOW_MAX_WORKERS: Process pool size for multi-symbol replay
    """

    _instance: Optional['Config'] = None

    def __new__(cls, *args, **kwargs):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
            cls._instance._initialized = False
        return cls._instance

    def __init__(self, env_file: str = ".env"):
        if self._initialized:
            return

        env_path = Path(env_file)
        if env_path.exists():
            load_dotenv(env_path, override=True)

        self.log = self._load_log_config()
        self.runtime = self._load_runtime_config()

        self._initialized = True

    def _load_log_config(self) -> LogConfig:
        """Load logging configuration from environment."""
        return LogConfig(
            level=os.getenv("REGIMEFLOW_LOG_LEVEL", C.DEFAULT_LOG_LEVEL).upper(),
            log_dir=os.getenv("REGIMEFLOW_LOG_DIR") or None,
        )

    def _load_runtime_config(self) -> RuntimeConfig:
        """Load runtime configuration from environment."""
        raw = os.getenv("REGIMEFLOW_MAX_WORKERS", str(C.DEFAULT_MAX_WORKERS))
        try:
            max_workers = int(raw)
        except ValueError:
            raise ValueError(
                f"REGIMEFLOW_MAX_WORKERS must be an integer. Got: '{raw}'\n"
                f"\n"
                f"Fix: REGIMEFLOW_MAX_WORKERS=4"
            ) from None
        return RuntimeConfig(max_workers=max_workers)

    def reload(self, env_file: str = ".env"):
        """Force reload configuration."""
        self._initialized = False
        self.__init__(env_file)

    def summary_short(self) -> str:
        log_dir = self.log.log_dir or "-"
        return f"log={self.log.level} | log_dir={log_dir} | workers={self.runtime.max_workers}"


def get_config(env_file: str = ".env") -> Config:
    """Get or create the global config instance."""
    return Config(env_file)


@dataclass(frozen=True)
class StrategyConfig:
    """A strategy name and its raw parameter mapping, as read from YAML."""
    strategy: str
    params: dict[str, Any]


def load_strategy_config(path: str | Path) -> StrategyConfig:
    """
    Load a strategy configuration file.

    Expected layout:
        strategy: regime_ma
        params:
          fast_length: 9
          slow_length: 21

    Raises:
        FileNotFoundError: File does not exist
        ValueError: Empty file, missing ``strategy`` key or non-mapping params
    """
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Strategy config not found: {path}")

    with open(path, "r", encoding="utf-8") as f:
        raw = yaml.safe_load(f)

    if not raw or not isinstance(raw, dict):
        raise ValueError(f"Empty or invalid YAML in {path}")
    if "strategy" not in raw:
        raise ValueError(
            f"Missing 'strategy' key in {path}\n"
            f"\n"
            f"Fix: add 'strategy: regime_ma' at the top level"
        )
    params = raw.get("params") or {}
    if not isinstance(params, dict):
        raise ValueError(f"'params' must be a mapping in {path}. Got: {type(params).__name__}")

    return StrategyConfig(strategy=str(raw["strategy"]), params=params)
