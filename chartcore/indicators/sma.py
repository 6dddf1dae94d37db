"""Period-based simple moving averages.

The look-back of each average is a calendar period (200 days, 50/100/200
weeks). It is converted to a candle count from the chart interval, so the
same config covers the same stretch of time on a 15 minute chart and on a
daily chart.
"""

import logging
import math
from dataclasses import dataclass
from typing import Sequence

import numpy as np

from chartcore.indicators.indicators import closes, partial_sma
from chartcore.models.candle import Candle
from chartcore.models.config import SmaConfig, SmaPeriod
from chartcore.models.interval import DEFAULT_INTERVAL_MINUTES
from chartcore.models.series import SmaData, SmaDataPoint

logger = logging.getLogger(__name__)

# Warm-up: a point is emitted once the partial window holds
# min(SMA_WARMUP_MAX_CANDLES, window * SMA_WARMUP_FRACTION) candles.
SMA_WARMUP_MAX_CANDLES = 20
SMA_WARMUP_FRACTION = 0.1


@dataclass(frozen=True, slots=True)
class SmaWarmup:
    """Minimum history before a partial-window average is shown."""

    max_candles: float = SMA_WARMUP_MAX_CANDLES
    fraction: float = SMA_WARMUP_FRACTION

    def min_candles(self, window: int) -> float:
        return min(self.max_candles, window * self.fraction)


DEFAULT_WARMUP = SmaWarmup()


def period_candles(period: SmaPeriod, interval_minutes: float) -> int:
    """
    Number of candles covering ``period`` at the given chart interval.

    Args:
        period: Calendar period of the average
        interval_minutes: Candle interval in minutes

    Returns:
        ceil(period_minutes / interval_minutes), at least 1
    """
    if interval_minutes <= 0:
        raise ValueError(f"interval_minutes must be positive, got {interval_minutes}")
    return max(1, math.ceil(period.minutes / interval_minutes))


def compute_sma(
    candles: Sequence[Candle],
    config: SmaConfig,
    interval_minutes: float = DEFAULT_INTERVAL_MINUTES,
    warmup: SmaWarmup = DEFAULT_WARMUP,
) -> SmaData | None:
    """
    Calculate the rolling close-price SMA for one config.

    Args:
        candles: Candles in ascending timestamp order
        config: SMA configuration
        interval_minutes: Candle interval in minutes
        warmup: Warm-up threshold for partial windows

    Returns:
        SmaData with one point per qualifying candle, or None if the config
        is disabled, there are no candles, or no candle passes warm-up
    """
    if not config.enabled or not candles:
        return None

    window = period_candles(config.period, interval_minutes)
    min_count = warmup.min_candles(window)
    averages = partial_sma(closes(candles), window, min_count)

    values = [
        SmaDataPoint(timestamp=candle.timestamp, value=float(avg))
        for candle, avg in zip(candles, averages)
        if not np.isnan(avg)
    ]

    if not values:
        logger.debug(
            "SMA %s: no point after warm-up (window=%d, candles=%d)",
            config.period.value, window, len(candles),
        )
        return None

    return SmaData(
        period=config.period,
        values=values,
        color=config.color,
        line_width=config.line_width,
    )


def compute_all_sma(
    candles: Sequence[Candle],
    configs: Sequence[SmaConfig],
    interval_minutes: float = DEFAULT_INTERVAL_MINUTES,
    warmup: SmaWarmup = DEFAULT_WARMUP,
) -> list[SmaData]:
    """Calculate every enabled SMA, keeping config order and dropping empty results."""
    if not candles:
        return []

    results = []
    for config in configs:
        data = compute_sma(candles, config, interval_minutes, warmup)
        if data is not None:
            results.append(data)
    return results
