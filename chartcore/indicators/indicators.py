"""Numeric building blocks shared by the indicator engines.

Everything here works on NumPy float64 arrays aligned to the candle
sequence, with NaN marking indices that produce no value.
"""

from typing import Sequence

import numpy as np

from chartcore.models.candle import Candle
from chartcore.models.config import VwapSource


def timestamps(candles: Sequence[Candle]) -> list[int]:
    """Candle open times, in input order."""
    return [c.timestamp for c in candles]


def closes(candles: Sequence[Candle]) -> np.ndarray:
    """Close prices as a float array."""
    return np.array([c.close for c in candles], dtype=np.float64)


def volumes(candles: Sequence[Candle]) -> np.ndarray:
    """Volumes as a float array."""
    return np.array([c.volume for c in candles], dtype=np.float64)


def source_prices(candles: Sequence[Candle], source: VwapSource) -> np.ndarray:
    """
    Per-candle price for the given source.

    hlc3  = (high + low + close) / 3
    hl2   = (high + low) / 2
    ohlc4 = (open + high + low + close) / 4
    close = close

    Args:
        candles: Candle sequence
        source: Price source

    Returns:
        Float array, one price per candle
    """
    if not candles:
        return np.empty(0, dtype=np.float64)

    ohlc = np.array(
        [(c.open, c.high, c.low, c.close) for c in candles], dtype=np.float64
    )
    open_, high, low, close = ohlc[:, 0], ohlc[:, 1], ohlc[:, 2], ohlc[:, 3]

    if source is VwapSource.HL2:
        return (high + low) / 2
    if source is VwapSource.OHLC4:
        return (open_ + high + low + close) / 4
    if source is VwapSource.CLOSE:
        return close.copy()
    return (high + low + close) / 3


def typical_prices(candles: Sequence[Candle]) -> np.ndarray:
    """(high + low + close) / 3 for every candle."""
    return source_prices(candles, VwapSource.HLC3)


def partial_sma(values: np.ndarray, window: int, min_count: float) -> np.ndarray:
    """
    Right-aligned rolling mean that starts from a partial window.

    At index i the mean covers values[max(0, i - window + 1) : i + 1], so
    the window grows from the head of the series until it reaches full
    width. Indices whose window holds fewer than ``min_count`` values
    are NaN.

    Args:
        values: Float array of prices
        window: Full window width in samples (>= 1)
        min_count: Minimum samples before a value is produced

    Returns:
        Float array, same length as input
    """
    if window < 1:
        raise ValueError(f"window must be >= 1, got {window}")

    n = len(values)
    result = np.full(n, np.nan, dtype=np.float64)

    for i in range(n):
        start = max(0, i - window + 1)
        if i + 1 - start < min_count:
            continue
        result[i] = np.mean(values[start : i + 1])

    return result


def cumulative_vwap(
    prices: np.ndarray,
    vols: np.ndarray,
    band_multiplier: float | None = None,
) -> tuple[np.ndarray, np.ndarray | None, np.ndarray | None]:
    """
    Running volume-weighted average price with optional deviation bands.

    vwap_i     = sum(p * v) / sum(v) over [0, i]
    sq_diff_i  = sq_diff_{i-1} + (p_i - vwap_i)^2 * v_i
    bands_i    = vwap_i +/- sqrt(sq_diff_i / sum(v)) * band_multiplier

    Indices where cumulative volume is still zero have no VWAP (NaN).
    The deviation accumulates across the whole range and never resets.

    Args:
        prices: Per-candle price (typically hlc3)
        vols: Per-candle volume
        band_multiplier: Band width in deviations, or None for no bands

    Returns:
        Tuple of (vwap, upper, lower); upper/lower are None without bands
    """
    n = len(prices)
    vwap = np.full(n, np.nan, dtype=np.float64)
    upper = np.full(n, np.nan, dtype=np.float64) if band_multiplier is not None else None
    lower = np.full(n, np.nan, dtype=np.float64) if band_multiplier is not None else None

    sum_pv = 0.0
    sum_vol = 0.0
    sum_sq_diff = 0.0

    for i in range(n):
        price = float(prices[i])
        vol = float(vols[i])
        sum_pv += price * vol
        sum_vol += vol

        if sum_vol == 0:
            continue

        current = sum_pv / sum_vol
        vwap[i] = current

        if band_multiplier is not None:
            sum_sq_diff += (price - current) ** 2 * vol
            std_dev = np.sqrt(sum_sq_diff / sum_vol)
            upper[i] = current + std_dev * band_multiplier
            lower[i] = current - std_dev * band_multiplier

    return vwap, upper, lower


def weighted_std(prices: np.ndarray, vols: np.ndarray, mean: float) -> float:
    """Volume-weighted population standard deviation around ``mean``."""
    total = float(np.sum(vols))
    if total == 0:
        return 0.0
    return float(np.sqrt(np.sum((prices - mean) ** 2 * vols) / total))
