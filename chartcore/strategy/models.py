"""Strategy data model.

A strategy is a named set of conditions combined with AND/OR. Records are
frozen; every edit produces a new record with a refreshed ``updated_at``.
Serialized field names follow the chart's document format (camelCase).
"""

from __future__ import annotations

import random
import string
import time
from enum import Enum
from typing import Literal, Mapping

from pydantic import BaseModel, Field, field_validator, model_validator

from chartcore.errors import StrategyValidationError
from chartcore.models.base import CamelModel

# Marker used in place of an indicator when comparing against a fixed number
CONSTANT = "value"

_ID_ALPHABET = string.ascii_lowercase + string.digits

STRATEGY_COLORS = [
    "#22c55e", "#3b82f6", "#f59e0b", "#ef4444",
    "#8b5cf6", "#ec4899", "#06b6d4", "#84cc16",
]


def now_ms() -> int:
    """Current time in milliseconds since the epoch."""
    return int(time.time() * 1000)


def generate_id(timestamp_ms: int | None = None) -> str:
    """Generate a record id: "<ms>_<9 random base36 chars>"."""
    ts = timestamp_ms if timestamp_ms is not None else now_ms()
    suffix = "".join(random.choices(_ID_ALPHABET, k=9))
    return f"{ts}_{suffix}"


def check_field_names(model: type[BaseModel], changes: Mapping[str, object]) -> None:
    """Raise StrategyValidationError if ``changes`` names a field ``model`` lacks."""
    unknown = sorted(set(changes) - set(model.model_fields))
    if unknown:
        raise StrategyValidationError(
            f"Unknown {model.__name__} field(s): {', '.join(unknown)}"
        )


class IndicatorRef(str, Enum):
    """Indicator a condition can refer to."""

    PRICE = "price"
    VWAP_1D = "vwap_1D"
    VWAP_1W = "vwap_1W"
    VWAP_1M = "vwap_1M"
    ANCHORED_VWAP = "anchored_vwap"
    SMA_200D = "sma_200D"
    SMA_50W = "sma_50W"
    SMA_100W = "sma_100W"
    SMA_200W = "sma_200W"
    FIB_0 = "fib_0"
    FIB_236 = "fib_236"
    FIB_382 = "fib_382"
    FIB_5 = "fib_5"
    FIB_618 = "fib_618"
    FIB_786 = "fib_786"
    FIB_1 = "fib_1"
    VOLUME = "volume"
    RSI = "rsi"

    @property
    def category(self) -> str:
        return _CATEGORIES[self]

    @property
    def supported(self) -> bool:
        """Whether the engine computes a series for this indicator."""
        return self.category not in _NOT_COMPUTED


_CATEGORIES = {
    IndicatorRef.PRICE: "price",
    IndicatorRef.VWAP_1D: "vwap",
    IndicatorRef.VWAP_1W: "vwap",
    IndicatorRef.VWAP_1M: "vwap",
    IndicatorRef.ANCHORED_VWAP: "vwap",
    IndicatorRef.SMA_200D: "sma",
    IndicatorRef.SMA_50W: "sma",
    IndicatorRef.SMA_100W: "sma",
    IndicatorRef.SMA_200W: "sma",
    IndicatorRef.FIB_0: "fibonacci",
    IndicatorRef.FIB_236: "fibonacci",
    IndicatorRef.FIB_382: "fibonacci",
    IndicatorRef.FIB_5: "fibonacci",
    IndicatorRef.FIB_618: "fibonacci",
    IndicatorRef.FIB_786: "fibonacci",
    IndicatorRef.FIB_1: "fibonacci",
    IndicatorRef.VOLUME: "other",
    IndicatorRef.RSI: "oscillator",
}

# Categories that are selectable in conditions but have no computation yet
_NOT_COMPUTED = {"fibonacci", "oscillator"}


class ComparisonOperator(str, Enum):
    CROSSES_ABOVE = "crosses_above"
    CROSSES_BELOW = "crosses_below"
    ABOVE = "above"
    BELOW = "below"
    EQUALS = "equals"
    BETWEEN = "between"


class Logic(str, Enum):
    """How condition results are combined."""

    AND = "AND"
    OR = "OR"


class StrategyCondition(CamelModel):
    """Comparison between two indicators, or an indicator and constants.

    ``between`` always compares ``indicator1`` against the closed range
    [value, value2]; the other operators compare against ``indicator2``,
    or against ``value`` when ``indicator2`` is the constant marker.
    """

    id: str = Field(default_factory=generate_id)
    indicator1: IndicatorRef = IndicatorRef.PRICE
    operator: ComparisonOperator = ComparisonOperator.CROSSES_ABOVE
    indicator2: IndicatorRef | Literal["value"] = IndicatorRef.VWAP_1D
    value: float | None = None
    value2: float | None = None
    enabled: bool = True

    @field_validator("indicator2", mode="before")
    @classmethod
    def _normalize_constant(cls, v):
        if v == "constant":
            return CONSTANT
        return v

    @property
    def compares_constant(self) -> bool:
        return self.operator is ComparisonOperator.BETWEEN or self.indicator2 == CONSTANT

    @property
    def indicators(self) -> list[IndicatorRef]:
        """Indicators whose series this condition reads."""
        refs = [self.indicator1]
        if not self.compares_constant:
            refs.append(self.indicator2)
        return refs


class Strategy(CamelModel):
    """Named combination of conditions with alert preferences."""

    id: str
    name: str
    description: str = ""
    conditions: tuple[StrategyCondition, ...] = ()
    logic: Logic = Logic.AND
    alert_enabled: bool = True
    alert_sound: bool = True
    alert_popup: bool = True
    color: str = STRATEGY_COLORS[0]
    enabled: bool = True
    created_at: int
    updated_at: int

    @model_validator(mode="after")
    def _check_timestamps(self):
        if self.updated_at < self.created_at:
            raise ValueError(
                f"updatedAt ({self.updated_at}) is earlier than createdAt ({self.created_at})"
            )
        return self

    @property
    def active_conditions(self) -> list[StrategyCondition]:
        return [c for c in self.conditions if c.enabled]

    def touched(self, timestamp_ms: int | None = None, **changes) -> Strategy:
        """Return a copy with ``changes`` applied and ``updated_at`` refreshed.

        Unknown field names raise StrategyValidationError; the copy is
        re-validated, so invalid values raise ValidationError.
        """
        check_field_names(Strategy, changes)
        ts = timestamp_ms if timestamp_ms is not None else now_ms()
        data = self.model_dump()
        data.update(changes)
        data["updated_at"] = max(ts, self.created_at)
        return Strategy.model_validate(data)


def new_strategy(timestamp_ms: int | None = None) -> Strategy:
    """Fresh strategy with no conditions and all alerts switched on."""
    ts = timestamp_ms if timestamp_ms is not None else now_ms()
    return Strategy(
        id=generate_id(ts),
        name="New Strategy",
        color=random.choice(STRATEGY_COLORS),
        created_at=ts,
        updated_at=ts,
    )


def new_condition() -> StrategyCondition:
    """Default condition: price crosses above the daily VWAP."""
    return StrategyCondition()
