"""
Configuration models for strategies and the regime classifier.

Contains:
- RegimeThresholds: regime classifier lengths, thresholds and multipliers
- AdaptiveRegimeMAParams: faith-index adaptive EMA crossover
- RegimeMAParams: regime-selected MA family crossover
- AsymmetricVolatilityParams: up/down volatility crossover
- FourierScalperParams: Fourier convergence scalper
- McGinleySupertrendParams: McGinley-smoothed supertrend
- FractalDimensionParams: FDI/LHEA fractal study

All models are frozen and validated in __post_init__, so a malformed
configuration is rejected before any bar is processed.
"""

from __future__ import annotations

from dataclasses import asdict, dataclass, field, fields
from typing import Any

from . import constants as C


def _check_length(owner: str, name: str, value: Any, minimum: int = 1) -> None:
    if not isinstance(value, int) or isinstance(value, bool) or value < minimum:
        raise ValueError(
            f"{owner}.{name} must be an integer >= {minimum}. Got: {value!r}\n"
            f"\n"
            f"Fix: set {name}: {max(minimum, 14)} in the params block"
        )


def _check_positive(owner: str, name: str, value: Any) -> None:
    if isinstance(value, bool) or not isinstance(value, (int, float)) or value <= 0:
        raise ValueError(f"{owner}.{name} must be a positive number. Got: {value!r}")


def _check_choice(owner: str, name: str, value: Any, choices: tuple[str, ...]) -> None:
    if value not in choices:
        raise ValueError(
            f"{owner}.{name} must be one of {list(choices)}. Got: {value!r}"
        )


class ParamsMixin:
    """Dict conversion shared by the parameter models."""

    def to_dict(self) -> dict[str, Any]:
        """Convert to dict for serialization."""
        return asdict(self)

    @classmethod
    def from_dict(cls, d: dict[str, Any] | None):
        """
        Create from dict, rejecting unknown keys.

        Missing keys fall back to the field defaults.
        """
        d = dict(d or {})
        known = {f.name for f in fields(cls)}
        unknown = sorted(set(d) - known)
        if unknown:
            raise ValueError(
                f"Unknown {cls.__name__} parameters: {unknown}\n"
                f"\n"
                f"Valid parameters: {sorted(known)}"
            )
        return cls(**d)


@dataclass(frozen=True)
class RegimeThresholds(ParamsMixin):
    """
    Regime classifier configuration.

    Attributes:
        adx_length: ADX/DMI smoothing length
        atr_length: ATR length
        atr_baseline_length: SMA length of ATR used as the volatility baseline
        long_ma_length: Long-term SMA of close ("above/below average")
        breakout_length: Prior N-bar high for the parabolic-spike rule
        strong_threshold: ADX above this is a strong trend
        weak_threshold: ADX at or below this is no trend
        high_vol_multiplier: ATR > baseline * this is high volatility
        low_vol_multiplier: ATR < baseline * this is low volatility
        carry_forward: Keep the previous regime when no rule matches

    weak_threshold may exceed strong_threshold; the decision table's rule
    order then settles the overlap.
    """
    adx_length: int = C.REGIME_ADX_LENGTH
    atr_length: int = C.REGIME_ATR_LENGTH
    atr_baseline_length: int = C.REGIME_ATR_BASELINE_LENGTH
    long_ma_length: int = C.REGIME_LONG_MA_LENGTH
    breakout_length: int = C.REGIME_BREAKOUT_LENGTH
    strong_threshold: float = C.REGIME_STRONG_THRESHOLD
    weak_threshold: float = C.REGIME_WEAK_THRESHOLD
    high_vol_multiplier: float = C.REGIME_HIGH_VOL_MULTIPLIER
    low_vol_multiplier: float = C.REGIME_LOW_VOL_MULTIPLIER
    carry_forward: bool = False

    def __post_init__(self):
        """Validate regime thresholds."""
        owner = "RegimeThresholds"
        for name in ("adx_length", "atr_length", "atr_baseline_length", "long_ma_length", "breakout_length"):
            _check_length(owner, name, getattr(self, name))
        _check_positive(owner, "high_vol_multiplier", self.high_vol_multiplier)
        _check_positive(owner, "low_vol_multiplier", self.low_vol_multiplier)
        if self.low_vol_multiplier > self.high_vol_multiplier:
            raise ValueError(
                f"low_vol_multiplier ({self.low_vol_multiplier}) must not exceed "
                f"high_vol_multiplier ({self.high_vol_multiplier})"
            )


@dataclass(frozen=True)
class AdaptiveRegimeMAParams(ParamsMixin):
    """Faith-index adaptive EMA crossover with ADX trend strength."""
    fast_length: int = C.ADAPTIVE_FAST_LENGTH
    slow_length: int = C.ADAPTIVE_SLOW_LENGTH
    trust_length: int = C.FAITH_TRUST_LENGTH
    correlation_length: int = C.FAITH_CORRELATION_LENGTH
    resilience_threshold: float = C.FAITH_RESILIENCE_THRESHOLD
    content_multiplier: float = C.FAITH_CONTENT_MULTIPLIER
    purpose_weight: float = C.FAITH_PURPOSE_WEIGHT
    faith_components: tuple[str, ...] = ("trust", "resilience", "content", "purpose")
    adx_length: int = C.REGIME_ADX_LENGTH
    strong_threshold: float = C.REGIME_STRONG_THRESHOLD
    weak_threshold: float = C.REGIME_WEAK_THRESHOLD
    obv_ma_length: int = C.OBV_MA_LENGTH
    long_enabled: bool = True
    short_enabled: bool = False

    def __post_init__(self):
        owner = "AdaptiveRegimeMAParams"
        for name in ("fast_length", "slow_length", "trust_length", "adx_length", "obv_ma_length"):
            _check_length(owner, name, getattr(self, name))
        _check_length(owner, "correlation_length", self.correlation_length, minimum=2)
        # YAML gives lists
        object.__setattr__(self, "faith_components", tuple(self.faith_components))
        if self.weak_threshold > self.strong_threshold:
            raise ValueError(
                f"weak_threshold ({self.weak_threshold}) must not exceed "
                f"strong_threshold ({self.strong_threshold})"
            )


@dataclass(frozen=True)
class RegimeMAParams(ParamsMixin):
    """
    Regime-selected MA family crossover.

    distance_threshold of 0 disables the distance filter.
    """
    fast_length: int = C.REGIME_MA_FAST_LENGTH
    slow_length: int = C.REGIME_MA_SLOW_LENGTH
    source: str = "close"
    distance_threshold: float = 0.0
    regime: RegimeThresholds = field(default_factory=RegimeThresholds)
    long_enabled: bool = True
    short_enabled: bool = False

    def __post_init__(self):
        owner = "RegimeMAParams"
        _check_length(owner, "fast_length", self.fast_length)
        _check_length(owner, "slow_length", self.slow_length)
        _check_choice(owner, "source", self.source, C.PRICE_SOURCES)
        if self.distance_threshold < 0:
            raise ValueError(f"distance_threshold cannot be negative. Got: {self.distance_threshold}")
        if isinstance(self.regime, dict):
            object.__setattr__(self, "regime", RegimeThresholds.from_dict(self.regime))


@dataclass(frozen=True)
class AsymmetricVolatilityParams(ParamsMixin):
    """Up/down volatility crossover."""
    length: int = C.ASYM_VOL_LENGTH
    measure: str = "bps"
    prc_scale: float = C.ASYM_VOL_PRC_SCALE
    source: str = "close"
    use_mcginley: bool = True
    mcginley_length: float = C.ASYM_VOL_MCGINLEY_LENGTH
    mcginley_k: float = C.ASYM_VOL_MCGINLEY_K
    mcginley_exponent: float = C.ASYM_VOL_MCGINLEY_EXPONENT
    cluster_lookback: int = C.ASYM_VOL_CLUSTER_LOOKBACK
    clustering_adjustment: float = C.ASYM_VOL_CLUSTERING_ADJUSTMENT
    long_enabled: bool = True
    short_enabled: bool = False

    def __post_init__(self):
        owner = "AsymmetricVolatilityParams"
        _check_length(owner, "length", self.length)
        _check_length(owner, "cluster_lookback", self.cluster_lookback)
        _check_choice(owner, "measure", self.measure, ("bps", "prc"))
        _check_choice(owner, "source", self.source, C.PRICE_SOURCES)
        _check_positive(owner, "mcginley_length", self.mcginley_length)
        _check_positive(owner, "mcginley_k", self.mcginley_k)
        if not 0.0 <= self.clustering_adjustment <= 1.0:
            raise ValueError(
                f"clustering_adjustment must be in [0, 1]. Got: {self.clustering_adjustment}"
            )


@dataclass(frozen=True)
class FourierScalperParams(ParamsMixin):
    """Fourier convergence scalper with cooldown."""
    cycles: int = C.FOURIER_CYCLES
    lookback: int = C.FOURIER_LOOKBACK
    cooldown: int = C.FOURIER_COOLDOWN
    volatility_buffer: float = C.FOURIER_VOLATILITY_BUFFER
    risk_scale: float = C.FOURIER_RISK_SCALE
    trade_direction: str = "both"
    atr_length: int = C.FOURIER_ATR_LENGTH
    momentum_fast: int = C.FOURIER_MOMENTUM_FAST
    momentum_slow: int = C.FOURIER_MOMENTUM_SLOW

    def __post_init__(self):
        owner = "FourierScalperParams"
        for name in ("cycles", "lookback", "atr_length", "momentum_fast", "momentum_slow"):
            _check_length(owner, name, getattr(self, name))
        _check_length(owner, "cooldown", self.cooldown, minimum=0)
        _check_choice(owner, "trade_direction", self.trade_direction, ("long", "short", "both"))
        if self.volatility_buffer < 0:
            raise ValueError(f"volatility_buffer cannot be negative. Got: {self.volatility_buffer}")


@dataclass(frozen=True)
class McGinleySupertrendParams(ParamsMixin):
    """McGinley-smoothed supertrend with cosine-weighted filters."""
    atr_length: int = C.SUPERTREND_ATR_LENGTH
    atr_type: str = "cosine"
    perf_memory: int = C.SUPERTREND_PERF_MEMORY
    multiplier: float = C.SUPERTREND_MULTIPLIER
    mcginley_length: float = C.SUPERTREND_MCGINLEY_LENGTH
    mcginley_k: float = C.SUPERTREND_MCGINLEY_K
    mcginley_exponent: float = C.SUPERTREND_MCGINLEY_EXPONENT
    cwma_length: int = C.SUPERTREND_CWMA_LENGTH
    source: str = "close"
    clustering_factor: float = C.SUPERTREND_CLUSTERING_FACTOR
    partial_close_percent: float = C.SUPERTREND_PARTIAL_CLOSE_PERCENT
    long_enabled: bool = True
    short_enabled: bool = False

    def __post_init__(self):
        owner = "McGinleySupertrendParams"
        _check_length(owner, "atr_length", self.atr_length, minimum=2)
        _check_length(owner, "cwma_length", self.cwma_length, minimum=2)
        _check_length(owner, "perf_memory", self.perf_memory)
        _check_choice(owner, "atr_type", self.atr_type, ("normal", "cosine"))
        _check_choice(owner, "source", self.source, C.PRICE_SOURCES)
        _check_positive(owner, "multiplier", self.multiplier)
        _check_positive(owner, "mcginley_length", self.mcginley_length)
        _check_positive(owner, "mcginley_k", self.mcginley_k)
        if not 0.0 < self.partial_close_percent <= 100.0:
            raise ValueError(
                f"partial_close_percent must be in (0, 100]. Got: {self.partial_close_percent}"
            )


@dataclass(frozen=True)
class FractalDimensionParams(ParamsMixin):
    """FDI/LHEA study with Williams fractals."""
    length: int = C.FRACTAL_LENGTH
    smoothing: str = C.FRACTAL_SMOOTHING
    smoothing_length: int = C.FRACTAL_SMOOTHING_LENGTH
    use_smoothing: bool = False
    fractal_period: int = C.FRACTAL_PERIOD

    def __post_init__(self):
        owner = "FractalDimensionParams"
        _check_length(owner, "length", self.length, minimum=2)
        _check_length(owner, "smoothing_length", self.smoothing_length)
        _check_length(owner, "fractal_period", self.fractal_period)
