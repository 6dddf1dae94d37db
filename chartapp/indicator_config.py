"""Indicator configuration loaded from indicators.yaml.

Example:

    interval: "60"
    sma:
      - period: 200D
        enabled: true
        color: "#F59E0B"
    vwap:
      - id: vwap-1
        anchor: Week
        showBands: true
    anchored_vwap:
      - id: avwap_1
        name: Swing low
        startTime: 1717200000000

Missing sections fall back to the chart defaults; a missing file yields
the defaults for everything.
"""

import logging
from pathlib import Path

import yaml
from pydantic import BaseModel, Field, field_validator, model_validator

from chartcore.indicators.sma import DEFAULT_WARMUP, SmaWarmup
from chartcore.models.config import (
    AnchoredVwapConfig,
    SmaConfig,
    VwapConfig,
    default_anchored_vwap_configs,
    default_sma_configs,
    default_vwap_configs,
)
from chartcore.models.interval import interval_to_minutes
from chartcore.strategy.series import SeriesContext

logger = logging.getLogger(__name__)


class IndicatorSettings(BaseModel):
    """Top-level indicators.yaml configuration."""

    interval: str = "15"
    sma: list[SmaConfig] = Field(default_factory=default_sma_configs)
    vwap: list[VwapConfig] = Field(default_factory=default_vwap_configs)
    anchored_vwap: list[AnchoredVwapConfig] = Field(default_factory=default_anchored_vwap_configs)

    @field_validator("interval", mode="before")
    @classmethod
    def _interval_as_str(cls, v):
        # YAML reads `interval: 60` as an int
        return str(v) if isinstance(v, int) else v

    @model_validator(mode="after")
    def _validate(self):
        periods = [c.period for c in self.sma]
        if len(periods) != len(set(periods)):
            raise ValueError("sma: each period may appear only once")
        for name, configs in (("vwap", self.vwap), ("anchored_vwap", self.anchored_vwap)):
            ids = [c.id for c in configs]
            if len(ids) != len(set(ids)):
                raise ValueError(f"{name}: config ids must be unique")
        return self

    @property
    def interval_minutes(self) -> float:
        return interval_to_minutes(self.interval)

    def series_context(self, warmup: SmaWarmup = DEFAULT_WARMUP) -> SeriesContext:
        """Configuration snapshot for building evaluator series."""
        return SeriesContext(
            sma_configs=tuple(self.sma),
            vwap_configs=tuple(self.vwap),
            anchored_vwap_configs=tuple(self.anchored_vwap),
            interval_minutes=self.interval_minutes,
            warmup=warmup,
        )


def load_indicator_config(path: Path, default_interval: str = "15") -> IndicatorSettings:
    """Load indicator config from a YAML file.

    Falls back to defaults if the file doesn't exist.
    """
    if not path.exists():
        logger.info("No indicator config at %s, using defaults", path)
        return IndicatorSettings(interval=default_interval)

    with open(path) as f:
        raw = yaml.safe_load(f) or {}

    if not isinstance(raw, dict):
        raise ValueError(f"{path}: expected a mapping at the top level")

    raw.setdefault("interval", default_interval)
    config = IndicatorSettings(**raw)
    logger.info(
        "Loaded indicator config: interval=%s, %d/%d SMA, %d/%d VWAP, %d/%d anchored VWAP enabled",
        config.interval,
        sum(c.enabled for c in config.sma), len(config.sma),
        sum(c.enabled for c in config.vwap), len(config.vwap),
        sum(c.enabled for c in config.anchored_vwap), len(config.anchored_vwap),
    )
    return config
