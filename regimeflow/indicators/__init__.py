"""
Indicator Module: bar-by-bar technical indicators.

All indicators live in ``regimeflow.indicators.incremental`` and share the
IncrementalIndicator interface (update / reset / value / is_ready).
"""

from .incremental import *  # noqa: F401,F403
from .incremental import __all__
