"""Data models."""

from chartcore.models.candle import Candle, is_ascending
from chartcore.models.config import (
    AnchoredVwapConfig,
    LineStyle,
    SmaConfig,
    SmaPeriod,
    VwapAnchor,
    VwapConfig,
    VwapSource,
    default_anchored_vwap_configs,
    default_sma_configs,
    default_vwap_configs,
    new_anchored_vwap_config,
    new_vwap_config,
)
from chartcore.models.interval import (
    DEFAULT_INTERVAL_MINUTES,
    interval_to_minutes,
    interval_to_ms,
)
from chartcore.models.series import (
    AnchoredVwapData,
    AnchoredVwapDataPoint,
    SmaData,
    SmaDataPoint,
    VwapData,
    VwapDataPoint,
    series_document,
)

__all__ = [
    # Input
    "Candle",
    "is_ascending",
    # Configuration
    "AnchoredVwapConfig",
    "LineStyle",
    "SmaConfig",
    "SmaPeriod",
    "VwapAnchor",
    "VwapConfig",
    "VwapSource",
    "default_anchored_vwap_configs",
    "default_sma_configs",
    "default_vwap_configs",
    "new_anchored_vwap_config",
    "new_vwap_config",
    # Intervals
    "DEFAULT_INTERVAL_MINUTES",
    "interval_to_minutes",
    "interval_to_ms",
    # Output
    "AnchoredVwapData",
    "AnchoredVwapDataPoint",
    "SmaData",
    "SmaDataPoint",
    "VwapData",
    "VwapDataPoint",
    "series_document",
]
