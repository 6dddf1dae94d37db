"""Indicator series aligned to candle indices.

The engines emit sparse point lists (warm-up gaps, anchor ranges, zero
volume). The evaluator needs one value per candle, so each resolver here
maps an indicator to a float array of the candle series' length with NaN
where the engine produced nothing.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Iterable, Sequence

import numpy as np

from chartcore.indicators.anchored_vwap import compute_anchored_vwap
from chartcore.indicators.indicators import closes, volumes
from chartcore.indicators.sma import DEFAULT_WARMUP, SmaWarmup, compute_sma
from chartcore.indicators.vwap import compute_vwap
from chartcore.models.candle import Candle
from chartcore.models.config import (
    AnchoredVwapConfig,
    SmaConfig,
    SmaPeriod,
    VwapAnchor,
    VwapConfig,
)
from chartcore.models.interval import DEFAULT_INTERVAL_MINUTES
from chartcore.strategy.models import IndicatorRef
from chartcore.strategy.registry import get_resolver, list_indicators, register_indicator

logger = logging.getLogger(__name__)

IndicatorSeries = dict[IndicatorRef, np.ndarray]


@dataclass(frozen=True)
class SeriesContext:
    """Configuration snapshot used to build series for one candle set."""

    sma_configs: Sequence[SmaConfig] = ()
    vwap_configs: Sequence[VwapConfig] = ()
    anchored_vwap_configs: Sequence[AnchoredVwapConfig] = ()
    interval_minutes: float = DEFAULT_INTERVAL_MINUTES
    warmup: SmaWarmup = field(default=DEFAULT_WARMUP)


def align_points(candles: Sequence[Candle], points: Iterable) -> np.ndarray:
    """Place ``points`` (objects with timestamp/value) on candle indices."""
    index = {c.timestamp: i for i, c in enumerate(candles)}
    result = np.full(len(candles), np.nan, dtype=np.float64)
    for point in points:
        i = index.get(point.timestamp)
        if i is not None:
            result[i] = point.value
    return result


@register_indicator(IndicatorRef.PRICE)
def _price(candles: Sequence[Candle], context: SeriesContext, ref: IndicatorRef):
    return closes(candles)


@register_indicator(IndicatorRef.VOLUME)
def _volume(candles: Sequence[Candle], context: SeriesContext, ref: IndicatorRef):
    return volumes(candles)


_VWAP_ANCHORS = {
    IndicatorRef.VWAP_1D: VwapAnchor.SESSION,
    IndicatorRef.VWAP_1W: VwapAnchor.WEEK,
    IndicatorRef.VWAP_1M: VwapAnchor.MONTH,
}


@register_indicator(*_VWAP_ANCHORS)
def _session_vwap(candles: Sequence[Candle], context: SeriesContext, ref: IndicatorRef):
    anchor = _VWAP_ANCHORS[ref]
    config = next(
        (c for c in context.vwap_configs if c.enabled and c.anchor is anchor),
        None,
    )
    if config is None:
        # Conditions may reference a period the chart does not display
        config = VwapConfig(id=ref.value, anchor=anchor)
    data = compute_vwap(candles, config.model_copy(update={"show_bands": False}))
    if data is None:
        return None
    return align_points(candles, data.values)


_SMA_PERIODS = {
    IndicatorRef.SMA_200D: SmaPeriod.D200,
    IndicatorRef.SMA_50W: SmaPeriod.W50,
    IndicatorRef.SMA_100W: SmaPeriod.W100,
    IndicatorRef.SMA_200W: SmaPeriod.W200,
}


@register_indicator(*_SMA_PERIODS)
def _sma(candles: Sequence[Candle], context: SeriesContext, ref: IndicatorRef):
    period = _SMA_PERIODS[ref]
    config = next((c for c in context.sma_configs if c.period is period), None)
    if config is None:
        config = SmaConfig(period=period, enabled=True)
    data = compute_sma(
        candles,
        config.model_copy(update={"enabled": True}),
        context.interval_minutes,
        context.warmup,
    )
    if data is None:
        return None
    return align_points(candles, data.values)


@register_indicator(IndicatorRef.ANCHORED_VWAP)
def _anchored_vwap(candles: Sequence[Candle], context: SeriesContext, ref: IndicatorRef):
    for config in context.anchored_vwap_configs:
        data = compute_anchored_vwap(candles, config)
        if data is not None:
            return align_points(candles, data.values)
    return None


def collect_indicator_series(
    candles: Sequence[Candle],
    context: SeriesContext | None = None,
    refs: Iterable[IndicatorRef] | None = None,
) -> IndicatorSeries:
    """
    Build aligned series for the requested indicators.

    Args:
        candles: Candles in ascending timestamp order
        context: Indicator configuration snapshot (defaults if None)
        refs: Indicators to build; all computable ones if None

    Returns:
        Mapping of indicator -> float array (len(candles), NaN for gaps).
        Indicators that produce nothing at all are left out.

    Raises:
        UnsupportedIndicatorError: If ``refs`` names an indicator with no
            computation.
    """
    context = context or SeriesContext()
    wanted = list(refs) if refs is not None else list_indicators()

    series: IndicatorSeries = {}
    if not candles:
        return series

    for ref in dict.fromkeys(wanted):
        resolver = get_resolver(ref)
        values = resolver(candles, context, ref)
        if values is None:
            logger.debug("Indicator %s produced no series", ref.value)
            continue
        series[ref] = values
    return series
