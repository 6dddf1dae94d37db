"""Indicator configuration models.

Colors, line widths and styles are carried for the chart and ignored by
the engines. Configs are frozen; edit them with ``model_copy(update=...)``
and hand the new list to the next computation.
"""

from __future__ import annotations

import time
from enum import Enum
from typing import Sequence

from pydantic import Field

from chartcore.models.base import CamelModel

MINUTES_PER_DAY = 24 * 60
MINUTES_PER_WEEK = 7 * MINUTES_PER_DAY


class LineStyle(str, Enum):
    """Line style for rendering."""

    SOLID = "solid"
    DASHED = "dashed"
    DOTTED = "dotted"


# =============================================================================
# SMA
# =============================================================================

class SmaPeriod(str, Enum):
    """Calendar look-back of a moving average."""

    D200 = "200D"
    W50 = "50W"
    W100 = "100W"
    W200 = "200W"

    @property
    def minutes(self) -> int:
        """Length of the period in calendar minutes."""
        return _SMA_PERIOD_MINUTES[self]


_SMA_PERIOD_MINUTES = {
    SmaPeriod.D200: 200 * MINUTES_PER_DAY,
    SmaPeriod.W50: 50 * MINUTES_PER_WEEK,
    SmaPeriod.W100: 100 * MINUTES_PER_WEEK,
    SmaPeriod.W200: 200 * MINUTES_PER_WEEK,
}

SMA_DEFAULT_COLORS: dict[SmaPeriod, str] = {
    SmaPeriod.D200: "#F59E0B",
    SmaPeriod.W50: "#3B82F6",
    SmaPeriod.W100: "#8B5CF6",
    SmaPeriod.W200: "#EF4444",
}


class SmaConfig(CamelModel):
    """One moving average per calendar period."""

    period: SmaPeriod
    enabled: bool = False
    color: str = "#F59E0B"
    line_width: int = Field(default=2, ge=1)
    line_style: LineStyle = LineStyle.SOLID


def default_sma_configs() -> list[SmaConfig]:
    """One config per period; only the 200 day average starts enabled."""
    return [
        SmaConfig(
            period=period,
            enabled=period is SmaPeriod.D200,
            color=SMA_DEFAULT_COLORS[period],
            line_width=3 if period is SmaPeriod.W200 else 2,
        )
        for period in SmaPeriod
    ]


# =============================================================================
# Anchored VWAP
# =============================================================================

ANCHORED_VWAP_COLORS = [
    "#FF6B6B",
    "#4ECDC4",
    "#45B7D1",
    "#96CEB4",
    "#FFEAA7",
    "#DDA0DD",
    "#98D8C8",
    "#F7DC6F",
]


class AnchoredVwapConfig(CamelModel):
    """VWAP accumulated from a user-picked start candle.

    ``start_time`` None means the anchor has not been placed yet.
    ``end_time`` None means the range runs to the latest candle.
    """

    id: str
    name: str
    start_time: int | None = None
    end_time: int | None = None
    color: str = ANCHORED_VWAP_COLORS[0]
    show_bands: bool = False
    band_multiplier: float = Field(default=2.0, gt=0)
    enabled: bool = True

    @property
    def is_anchored(self) -> bool:
        return self.start_time is not None

    @property
    def is_open_ended(self) -> bool:
        return self.end_time is None


def default_anchored_vwap_configs() -> list[AnchoredVwapConfig]:
    """A single unanchored config, waiting for the user to pick a start."""
    return [AnchoredVwapConfig(id="avwap_1", name="Anchored VWAP 1")]


def new_anchored_vwap_config(
    existing: Sequence[AnchoredVwapConfig],
    now_ms: int | None = None,
) -> AnchoredVwapConfig:
    """Build the next unanchored config, cycling through the palette."""
    now_ms = now_ms if now_ms is not None else int(time.time() * 1000)
    return AnchoredVwapConfig(
        id=f"avwap_{now_ms}",
        name=f"Anchored VWAP {len(existing) + 1}",
        color=ANCHORED_VWAP_COLORS[len(existing) % len(ANCHORED_VWAP_COLORS)],
    )


# =============================================================================
# Session VWAP
# =============================================================================

class VwapAnchor(str, Enum):
    """Period after which a session VWAP resets (UTC boundaries)."""

    SESSION = "Session"
    WEEK = "Week"
    MONTH = "Month"
    QUARTER = "Quarter"
    YEAR = "Year"


class VwapSource(str, Enum):
    """Per-candle price fed into the VWAP."""

    HLC3 = "hlc3"
    HL2 = "hl2"
    OHLC4 = "ohlc4"
    CLOSE = "close"


VWAP_DEFAULT_COLORS = ["#2962FF", "#E91E63", "#00BCD4", "#FF9800", "#9C27B0"]


class VwapConfig(CamelModel):
    """Periodically resetting VWAP with up to three deviation bands."""

    id: str
    enabled: bool = True
    anchor: VwapAnchor = VwapAnchor.SESSION
    source: VwapSource = VwapSource.HLC3
    color: str = VWAP_DEFAULT_COLORS[0]
    line_width: int = Field(default=2, ge=1)
    show_bands: bool = False
    band_multiplier1: float = Field(default=1.0, gt=0)
    band_multiplier2: float = Field(default=2.0, gt=0)
    band_multiplier3: float = Field(default=3.0, gt=0)
    bands_enabled: tuple[bool, bool, bool] = (True, True, False)

    @property
    def band_multipliers(self) -> tuple[float, float, float]:
        return (self.band_multiplier1, self.band_multiplier2, self.band_multiplier3)


def default_vwap_configs() -> list[VwapConfig]:
    """A single enabled daily session VWAP."""
    return [VwapConfig(id="vwap-1")]


def new_vwap_config(
    existing: Sequence[VwapConfig],
    now_ms: int | None = None,
) -> VwapConfig:
    """Build the next session VWAP config, cycling through the palette."""
    now_ms = now_ms if now_ms is not None else int(time.time() * 1000)
    return VwapConfig(
        id=f"vwap-{now_ms}",
        color=VWAP_DEFAULT_COLORS[len(existing) % len(VWAP_DEFAULT_COLORS)],
    )
