"""
Strategy registry.

Provides:
- STRATEGY_REGISTRY: Global registry of strategy classes by name
- register_strategy: Decorator to register strategy classes
- create_strategy: Build a fresh strategy instance from a name and params
- list_strategies / get_strategy_info: Discovery for the CLI

Strategies are registered at import time via @register_strategy; importing
``regimeflow.strategies`` loads all built-in strategies.
"""

from __future__ import annotations

from typing import Any

from .base import BaseStrategy


# Global registry: maps strategy name to strategy class
STRATEGY_REGISTRY: dict[str, type[BaseStrategy]] = {}


def register_strategy(name: str):
    """
    Decorator to register a strategy class.

    Raises:
        TypeError: Class does not inherit from BaseStrategy
        ValueError: Name already registered
    """

    def decorator(cls: type[BaseStrategy]) -> type[BaseStrategy]:
        if not issubclass(cls, BaseStrategy):
            raise TypeError(
                f"Cannot register '{name}': class '{cls.__name__}' must inherit from BaseStrategy\n"
                f"\n"
                f"Fix:\n"
                f"  from regimeflow.strategies.base import BaseStrategy\n"
                f"\n"
                f"  @register_strategy('{name}')\n"
                f"  class {cls.__name__}(BaseStrategy):\n"
                f"      ..."
            )
        if name in STRATEGY_REGISTRY:
            raise ValueError(
                f"Strategy '{name}' is already registered by {STRATEGY_REGISTRY[name].__name__}"
            )
        cls.STRATEGY_ID = name
        STRATEGY_REGISTRY[name] = cls
        return cls

    return decorator


def list_strategies() -> list[str]:
    """List all registered strategy names."""
    return sorted(STRATEGY_REGISTRY)


def get_strategy_info(name: str) -> dict[str, Any]:
    """Name, description and default params of a registered strategy."""
    cls = _get_class(name)
    return {
        "name": name,
        "description": cls.DESCRIPTION,
        "defaults": cls.PARAMS_CLASS().to_dict(),
    }


def create_strategy(name: str, params: Any = None) -> BaseStrategy:
    """
    Create a new strategy instance.

    Args:
        name: Registered strategy name
        params: Params dataclass instance, a plain dict, or None for defaults

    Raises:
        ValueError: Unknown strategy name or invalid params
    """
    return _get_class(name)(params)


def _get_class(name: str) -> type[BaseStrategy]:
    if name not in STRATEGY_REGISTRY:
        raise ValueError(
            f"Unknown strategy '{name}'\n"
            f"\n"
            f"Available: {', '.join(list_strategies())}"
        )
    return STRATEGY_REGISTRY[name]
