"""
Centralized constants for regimeflow.

Default parameter values for the indicators, the regime classifier and
the strategies. The parameter dataclasses in ``regimeflow.config.models``
read their defaults from here, so a value is changed in one place only.
"""

# ==================== Price sources ====================

PRICE_SOURCES = ("open", "high", "low", "close", "hl2", "hlc3", "ohlc4", "oc2", "occ3", "hlcc4")


# ==================== Regime classifier ====================

REGIME_ADX_LENGTH = 14
REGIME_ATR_LENGTH = 14
REGIME_ATR_BASELINE_LENGTH = 50
REGIME_LONG_MA_LENGTH = 200
REGIME_BREAKOUT_LENGTH = 20
REGIME_STRONG_THRESHOLD = 35.0
REGIME_WEAK_THRESHOLD = 15.0
REGIME_HIGH_VOL_MULTIPLIER = 1.2
REGIME_LOW_VOL_MULTIPLIER = 0.8

# Trend-strength weights applied to the faith index in the adaptive-alpha adapter
TREND_STRENGTH_WEIGHTS = {"strong_trend": 1.0, "weak_trend": 0.5, "no_trend": 0.2}

ALPHA_MIN = 0.01
ALPHA_MAX = 1.0


# ==================== Faith index ====================

FAITH_TRUST_LENGTH = 288
FAITH_CORRELATION_LENGTH = 288
FAITH_RESILIENCE_THRESHOLD = 2.0
FAITH_CONTENT_MULTIPLIER = 1.0
FAITH_PURPOSE_WEIGHT = 1.0


# ==================== Strategies ====================

ADAPTIVE_FAST_LENGTH = 12
ADAPTIVE_SLOW_LENGTH = 26
OBV_MA_LENGTH = 14

REGIME_MA_FAST_LENGTH = 9
REGIME_MA_SLOW_LENGTH = 21

ASYM_VOL_LENGTH = 15
ASYM_VOL_PRC_SCALE = 2.0
ASYM_VOL_MCGINLEY_LENGTH = 5.0
ASYM_VOL_MCGINLEY_K = 0.6
ASYM_VOL_MCGINLEY_EXPONENT = 3.0
ASYM_VOL_CLUSTER_LOOKBACK = 1
ASYM_VOL_CLUSTERING_ADJUSTMENT = 0.0

FOURIER_CYCLES = 10
FOURIER_LOOKBACK = 50
FOURIER_COOLDOWN = 20
FOURIER_VOLATILITY_BUFFER = 0.01
FOURIER_RISK_SCALE = 0.8
FOURIER_ATR_LENGTH = 14
FOURIER_MOMENTUM_FAST = 10
FOURIER_MOMENTUM_SLOW = 20

SUPERTREND_ATR_LENGTH = 14
SUPERTREND_PERF_MEMORY = 10
SUPERTREND_MULTIPLIER = 6.0
SUPERTREND_MCGINLEY_LENGTH = 14.0
SUPERTREND_MCGINLEY_K = 0.6
SUPERTREND_MCGINLEY_EXPONENT = 2.0
SUPERTREND_CWMA_LENGTH = 14
SUPERTREND_CLUSTERING_FACTOR = 0.85
SUPERTREND_PARTIAL_CLOSE_PERCENT = 50.0

FRACTAL_LENGTH = 30
FRACTAL_SMOOTHING = "zlema"
FRACTAL_SMOOTHING_LENGTH = 1
FRACTAL_PERIOD = 9


# ==================== Runtime ====================

DEFAULT_LOG_LEVEL = "INFO"
DEFAULT_MAX_WORKERS = 4
