"""Candle (OHLCV) data model."""

from typing import Sequence

from pydantic import BaseModel, ConfigDict, Field


class Candle(BaseModel):
    """Candlestick keyed by its open time in milliseconds since the epoch."""

    model_config = ConfigDict(frozen=True)

    timestamp: int
    open: float
    high: float
    low: float
    close: float
    volume: float = Field(default=0.0, ge=0)


def is_ascending(candles: Sequence[Candle]) -> bool:
    """Check that timestamps are strictly increasing.

    The engines rely on this ordering but do not verify it themselves.
    """
    return all(
        candles[i].timestamp < candles[i + 1].timestamp
        for i in range(len(candles) - 1)
    )
