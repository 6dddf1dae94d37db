"""Registry of indicator series resolvers.

Usage:
    @register_indicator(IndicatorRef.PRICE)
    def _price(candles, context, ref):
        ...

    resolver = get_resolver(IndicatorRef.PRICE)
    refs = list_indicators()

The registry is filled once at import time and only read afterwards.
"""

from __future__ import annotations

import logging
from typing import Callable

from chartcore.errors import UnsupportedIndicatorError
from chartcore.strategy.models import IndicatorRef

logger = logging.getLogger(__name__)

# Global registry: indicator -> resolver function
_REGISTRY: dict[IndicatorRef, Callable] = {}


def register_indicator(*refs: IndicatorRef):
    """Decorator to register a series resolver for one or more indicators.

    Args:
        refs: Indicators the decorated function computes.

    Returns:
        Decorator that registers the function and returns it unchanged.

    Raises:
        ValueError: If an indicator already has a resolver, or is not
            marked as supported.
    """

    def decorator(func):
        for ref in refs:
            if ref in _REGISTRY:
                raise ValueError(
                    f"Indicator '{ref.value}' is already registered by {_REGISTRY[ref].__name__}"
                )
            if not ref.supported:
                raise ValueError(f"Indicator '{ref.value}' is not marked as supported")
            _REGISTRY[ref] = func
            logger.debug("Registered indicator: %s -> %s", ref.value, func.__name__)
        return func

    return decorator


def get_resolver(ref: IndicatorRef) -> Callable:
    """Get the series resolver for an indicator.

    Raises:
        UnsupportedIndicatorError: If nothing computes this indicator.
    """
    resolver = _REGISTRY.get(ref)
    if resolver is None:
        available = ", ".join(sorted(r.value for r in _REGISTRY)) or "(none)"
        raise UnsupportedIndicatorError(
            f"Indicator '{ref.value}' has no computation. Available: {available}"
        )
    return resolver


def list_indicators() -> list[IndicatorRef]:
    """Return registered indicators in declaration order."""
    return [ref for ref in IndicatorRef if ref in _REGISTRY]
