"""Application configuration."""

from functools import lru_cache
from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from chartcore.indicators.sma import SMA_WARMUP_FRACTION, SMA_WARMUP_MAX_CANDLES, SmaWarmup
from chartcore.strategy.evaluator import EQUALS_REL_TOL


class Settings(BaseSettings):
    """Application settings loaded from environment variables (CHART_*)."""

    model_config = SettingsConfigDict(
        env_prefix="CHART_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    log_level: str = "INFO"

    # Chart interval code used when the indicator file does not set one
    default_interval: str = "15"

    # Files
    indicator_config_path: Path = Path("indicators.yaml")
    strategies_path: Path = Path("strategies.json")

    # SMA warm-up: min(max_candles, window * fraction) candles before the first point
    sma_warmup_max_candles: float = Field(default=SMA_WARMUP_MAX_CANDLES, ge=0)
    sma_warmup_fraction: float = Field(default=SMA_WARMUP_FRACTION, ge=0)

    # Relative tolerance of the "equals" operator
    equals_rel_tol: float = Field(default=EQUALS_REL_TOL, ge=0)

    @property
    def sma_warmup(self) -> SmaWarmup:
        return SmaWarmup(
            max_candles=self.sma_warmup_max_candles,
            fraction=self.sma_warmup_fraction,
        )


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
