"""Anchored VWAP.

Accumulates typical-price turnover and volume from a user-picked start
candle up to an optional end candle. With bands enabled, a running
volume-weighted deviation is carried alongside the VWAP.
"""

import bisect
import logging
from typing import Sequence

import numpy as np

from chartcore.indicators.indicators import (
    cumulative_vwap,
    timestamps,
    typical_prices,
    volumes,
)
from chartcore.models.candle import Candle
from chartcore.models.config import AnchoredVwapConfig
from chartcore.models.series import AnchoredVwapData, AnchoredVwapDataPoint

logger = logging.getLogger(__name__)


def anchor_range(
    times: Sequence[int],
    start_time: int,
    end_time: int | None,
) -> tuple[int, int] | None:
    """
    Resolve anchor timestamps to a half-open candle index range.

    The range starts at the first candle with timestamp >= start_time and
    stops before the first candle with timestamp > end_time. Without an
    end time (or with one past the last candle) it runs to the end.

    Returns:
        (start, stop) indices, or None if the range is empty
    """
    start = bisect.bisect_left(times, start_time)
    if start >= len(times):
        return None

    stop = len(times)
    if end_time is not None:
        stop = bisect.bisect_right(times, end_time)

    if stop <= start:
        return None
    return start, stop


def compute_anchored_vwap(
    candles: Sequence[Candle],
    config: AnchoredVwapConfig,
) -> AnchoredVwapData | None:
    """
    Calculate the anchored VWAP for one config.

    Args:
        candles: Candles in ascending timestamp order
        config: Anchored VWAP configuration

    Returns:
        AnchoredVwapData, or None if the config is disabled or unanchored,
        there are no candles, or the anchor range holds no volume
    """
    if not config.enabled or config.start_time is None or not candles:
        return None

    times = timestamps(candles)
    bounds = anchor_range(times, config.start_time, config.end_time)
    if bounds is None:
        logger.debug(
            "Anchored VWAP %s: anchor outside series (start=%s, end=%s)",
            config.id, config.start_time, config.end_time,
        )
        return None

    start, stop = bounds
    in_range = candles[start:stop]
    multiplier = config.band_multiplier if config.show_bands else None
    vwap, upper, lower = cumulative_vwap(
        typical_prices(in_range), volumes(in_range), multiplier
    )

    values = []
    for i, candle in enumerate(in_range):
        if np.isnan(vwap[i]):
            continue
        point = AnchoredVwapDataPoint(timestamp=candle.timestamp, value=float(vwap[i]))
        if upper is not None and lower is not None:
            point.upper_band = float(upper[i])
            point.lower_band = float(lower[i])
        values.append(point)

    if not values:
        return None

    return AnchoredVwapData(
        id=config.id,
        name=config.name,
        values=values,
        color=config.color,
        show_bands=config.show_bands,
    )


def compute_all_anchored_vwaps(
    candles: Sequence[Candle],
    configs: Sequence[AnchoredVwapConfig],
) -> list[AnchoredVwapData]:
    """Calculate every config, keeping config order and dropping empty results."""
    if not candles:
        return []

    results = []
    for config in configs:
        data = compute_anchored_vwap(candles, config)
        if data is not None:
            results.append(data)
    return results
