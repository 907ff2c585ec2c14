"""Configuration module."""

from .config import (
    Config,
    LogConfig,
    RuntimeConfig,
    StrategyConfig,
    get_config,
    load_strategy_config,
)
from .models import (
    RegimeThresholds,
    AdaptiveRegimeMAParams,
    RegimeMAParams,
    AsymmetricVolatilityParams,
    FourierScalperParams,
    McGinleySupertrendParams,
    FractalDimensionParams,
)

__all__ = [
    "Config",
    "LogConfig",
    "RuntimeConfig",
    "StrategyConfig",
    "get_config",
    "load_strategy_config",
    "RegimeThresholds",
    "AdaptiveRegimeMAParams",
    "RegimeMAParams",
    "AsymmetricVolatilityParams",
    "FourierScalperParams",
    "McGinleySupertrendParams",
    "FractalDimensionParams",
]
