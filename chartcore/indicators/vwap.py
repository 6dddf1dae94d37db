"""Session VWAP.

A VWAP that restarts at every UTC session, week, month, quarter or year
boundary. Bands are the volume-weighted standard deviation of every price
in the current period around the current VWAP.
"""

import logging
from datetime import datetime, timedelta, timezone
from typing import Sequence

import numpy as np

from chartcore.indicators.indicators import source_prices, weighted_std
from chartcore.models.candle import Candle
from chartcore.models.config import VwapAnchor, VwapConfig
from chartcore.models.series import VwapData, VwapDataPoint

logger = logging.getLogger(__name__)

_EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)


def _to_datetime(timestamp_ms: int) -> datetime:
    return _EPOCH + timedelta(milliseconds=timestamp_ms)


def _to_ms(dt: datetime) -> int:
    return (dt - _EPOCH) // timedelta(milliseconds=1)


def anchor_period_start(timestamp_ms: int, anchor: VwapAnchor) -> int:
    """
    Start of the anchor period containing ``timestamp_ms`` (UTC, ms).

    Session -> 00:00 of the day
    Week    -> Monday 00:00
    Month   -> 1st of the month
    Quarter -> 1st of Jan/Apr/Jul/Oct
    Year    -> 1st of January
    """
    day = _to_datetime(timestamp_ms).replace(hour=0, minute=0, second=0, microsecond=0)

    if anchor is VwapAnchor.WEEK:
        day -= timedelta(days=day.weekday())
    elif anchor is VwapAnchor.MONTH:
        day = day.replace(day=1)
    elif anchor is VwapAnchor.QUARTER:
        day = day.replace(month=(day.month - 1) // 3 * 3 + 1, day=1)
    elif anchor is VwapAnchor.YEAR:
        day = day.replace(month=1, day=1)

    return _to_ms(day)


def compute_vwap(candles: Sequence[Candle], config: VwapConfig) -> VwapData | None:
    """
    Calculate a periodically resetting VWAP for one config.

    Args:
        candles: Candles in ascending timestamp order
        config: Session VWAP configuration

    Returns:
        VwapData, or None if the config is disabled, there are no candles,
        or no period carries volume
    """
    if not config.enabled or not candles:
        return None

    prices = source_prices(candles, config.source)
    multipliers = config.band_multipliers

    values: list[VwapDataPoint] = []
    period_start = None
    sum_pv = 0.0
    sum_vol = 0.0
    period_prices: list[float] = []
    period_vols: list[float] = []

    for i, candle in enumerate(candles):
        start = anchor_period_start(candle.timestamp, config.anchor)
        if start != period_start:
            period_start = start
            sum_pv = 0.0
            sum_vol = 0.0
            period_prices = []
            period_vols = []

        price = float(prices[i])
        sum_pv += price * candle.volume
        sum_vol += candle.volume

        if sum_vol == 0:
            continue

        current = sum_pv / sum_vol
        period_prices.append(price)
        period_vols.append(candle.volume)
        point = VwapDataPoint(timestamp=candle.timestamp, value=current)

        if config.show_bands and len(period_prices) > 1:
            std_dev = weighted_std(
                np.asarray(period_prices), np.asarray(period_vols), current
            )
            for band, (enabled, mult) in enumerate(zip(config.bands_enabled, multipliers), 1):
                if not enabled:
                    continue
                setattr(point, f"upper_band{band}", current + std_dev * mult)
                setattr(point, f"lower_band{band}", current - std_dev * mult)

        values.append(point)

    if not values:
        logger.debug("VWAP %s: no volume in any %s period", config.id, config.anchor.value)
        return None

    return VwapData(
        id=config.id,
        anchor=config.anchor,
        values=values,
        color=config.color,
        show_bands=config.show_bands,
    )


def compute_all_vwaps(
    candles: Sequence[Candle],
    configs: Sequence[VwapConfig],
) -> list[VwapData]:
    """Calculate every enabled VWAP, keeping config order and dropping empty results."""
    if not candles:
        return []

    results = []
    for config in configs:
        data = compute_vwap(candles, config)
        if data is not None:
            results.append(data)
    return results
