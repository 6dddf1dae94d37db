"""Indicator output series.

Output points are plain slotted dataclasses with float values: series can
hold one point per candle and are rebuilt on every computation pass, so
they stay off the pydantic validation path. ``series_document`` turns a series
into a dict with the chart's camelCase field names for orjson.
"""

from dataclasses import asdict, dataclass, field

from pydantic.alias_generators import to_camel

from chartcore.models.config import SmaPeriod, VwapAnchor


@dataclass(slots=True)
class SmaDataPoint:
    timestamp: int
    value: float


@dataclass(slots=True)
class SmaData:
    """Moving average for one period, ascending by timestamp."""

    period: SmaPeriod
    values: list[SmaDataPoint] = field(default_factory=list)
    color: str = ""
    line_width: int = 2


@dataclass(slots=True)
class AnchoredVwapDataPoint:
    timestamp: int
    value: float
    upper_band: float | None = None
    lower_band: float | None = None


@dataclass(slots=True)
class AnchoredVwapData:
    """Anchored VWAP for one config, one point per candle in range."""

    id: str
    name: str
    values: list[AnchoredVwapDataPoint] = field(default_factory=list)
    color: str = ""
    show_bands: bool = False


@dataclass(slots=True)
class VwapDataPoint:
    timestamp: int
    value: float
    upper_band1: float | None = None
    lower_band1: float | None = None
    upper_band2: float | None = None
    lower_band2: float | None = None
    upper_band3: float | None = None
    lower_band3: float | None = None


@dataclass(slots=True)
class VwapData:
    """Session VWAP for one config."""

    id: str
    anchor: VwapAnchor
    values: list[VwapDataPoint] = field(default_factory=list)
    color: str = ""
    show_bands: bool = False


def _camel_keys(value):
    if isinstance(value, dict):
        return {to_camel(k): _camel_keys(v) for k, v in value.items()}
    if isinstance(value, list):
        return [_camel_keys(v) for v in value]
    return value


def series_document(data: SmaData | AnchoredVwapData | VwapData) -> dict:
    """Series as a JSON-ready dict keyed like the chart (``lineWidth``, ``upperBand1``...)."""
    return _camel_keys(asdict(data))
