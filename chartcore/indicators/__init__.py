"""Technical indicators (pure math, no I/O)."""

from chartcore.indicators.anchored_vwap import (
    anchor_range,
    compute_all_anchored_vwaps,
    compute_anchored_vwap,
)
from chartcore.indicators.indicators import (
    cumulative_vwap,
    partial_sma,
    source_prices,
    typical_prices,
)
from chartcore.indicators.sma import (
    DEFAULT_WARMUP,
    SMA_WARMUP_FRACTION,
    SMA_WARMUP_MAX_CANDLES,
    SmaWarmup,
    compute_all_sma,
    compute_sma,
    period_candles,
)
from chartcore.indicators.vwap import (
    anchor_period_start,
    compute_all_vwaps,
    compute_vwap,
)

__all__ = [
    "anchor_range",
    "compute_all_anchored_vwaps",
    "compute_anchored_vwap",
    "cumulative_vwap",
    "partial_sma",
    "source_prices",
    "typical_prices",
    "DEFAULT_WARMUP",
    "SMA_WARMUP_FRACTION",
    "SMA_WARMUP_MAX_CANDLES",
    "SmaWarmup",
    "compute_all_sma",
    "compute_sma",
    "period_candles",
    "anchor_period_start",
    "compute_all_vwaps",
    "compute_vwap",
]
