"""
regimeflow - incremental technical-analysis signal engine.

Bar-by-bar indicators, market regime classification and crossover signal
strategies. Every component advances one bar at a time in O(1) or
O(window) work and never looks ahead.

Subpackages:
- structures: ring buffers, rolling windows, Williams fractal detector
- indicators: incremental moving averages, filters and composite indices
- regime: ADX/ATR regime classifier
- signals: crossover edges, anti-overlap gate, MA adapters
- strategies: registered signal strategies
- engine: bar types, execution interface and the driver
"""

__version__ = "0.1.0"
