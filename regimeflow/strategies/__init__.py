"""
Signal strategies.

Importing this package registers every built-in strategy in
STRATEGY_REGISTRY.
"""

from .base import BaseStrategy
from .registry import (
    STRATEGY_REGISTRY,
    create_strategy,
    get_strategy_info,
    list_strategies,
    register_strategy,
)

from .adaptive_regime_ma import AdaptiveRegimeMAStrategy
from .asymmetric_volatility import AsymmetricVolatilityStrategy
from .fourier_scalper import FourierScalperStrategy
from .fractal_dimension import FractalDimensionStrategy
from .mcginley_supertrend import McGinleySupertrendStrategy
from .regime_ma import RegimeMAStrategy

__all__ = [
    "BaseStrategy",
    "STRATEGY_REGISTRY",
    "register_strategy",
    "create_strategy",
    "get_strategy_info",
    "list_strategies",
    "AdaptiveRegimeMAStrategy",
    "AsymmetricVolatilityStrategy",
    "FourierScalperStrategy",
    "FractalDimensionStrategy",
    "McGinleySupertrendStrategy",
    "RegimeMAStrategy",
]
