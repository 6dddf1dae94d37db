"""Tests for the period-based SMA engine."""

import pytest

from chartcore.indicators import (
    SmaWarmup,
    compute_all_sma,
    compute_sma,
    period_candles,
)
from chartcore.models import Candle, SmaConfig, SmaPeriod

DAY_MS = 86_400_000
DAILY = 1440  # interval minutes


def _candles(closes: list[float], step_ms: int = DAY_MS) -> list[Candle]:
    return [
        Candle(
            timestamp=i * step_ms,
            open=c,
            high=c + 1,
            low=c - 1,
            close=c,
            volume=100,
        )
        for i, c in enumerate(closes)
    ]


def _config(period: SmaPeriod = SmaPeriod.D200, enabled: bool = True) -> SmaConfig:
    return SmaConfig(period=period, enabled=enabled)


class TestPeriodCandles:
    """Tests for converting calendar periods to candle counts."""

    def test_200_day_on_15_minute_chart(self):
        assert period_candles(SmaPeriod.D200, 15) == 19_200

    def test_weekly_periods_on_daily_chart(self):
        assert period_candles(SmaPeriod.W50, DAILY) == 350
        assert period_candles(SmaPeriod.W100, DAILY) == 700
        assert period_candles(SmaPeriod.W200, DAILY) == 1400

    def test_rounds_up(self):
        # 200 days = 288000 minutes; 288000 / 7 is not whole
        assert period_candles(SmaPeriod.D200, 7) == 41_143

    def test_one_candle_window(self):
        assert period_candles(SmaPeriod.D200, 200 * DAILY) == 1

    def test_non_positive_interval_raises(self):
        with pytest.raises(ValueError, match="positive"):
            period_candles(SmaPeriod.D200, 0)


class TestComputeSma:
    """Tests for a single SMA config."""

    def test_disabled_config_returns_none(self):
        assert compute_sma(_candles([1.0] * 50), _config(enabled=False), DAILY) is None

    def test_empty_candles_returns_none(self):
        assert compute_sma([], _config(), DAILY) is None

    def test_warmup_skips_leading_candles(self):
        """50W on a daily chart: window 350, first point after 20 candles."""
        candles = _candles([float(i) for i in range(1, 31)])
        result = compute_sma(candles, _config(SmaPeriod.W50), DAILY)

        assert result is not None
        assert len(result.values) == 11
        assert [p.timestamp for p in result.values] == [c.timestamp for c in candles[19:]]

        # Partial window covers everything so far: mean(1..20) = 10.5
        assert result.values[0].value == pytest.approx(10.5)
        assert result.values[-1].value == pytest.approx(15.5)

    def test_no_point_when_series_shorter_than_warmup(self):
        candles = _candles([100.0] * 10)
        assert compute_sma(candles, _config(SmaPeriod.W200), DAILY) is None

    def test_small_window_rolls(self):
        """200D on a 20-day chart interval gives a 10 candle window."""
        closes = [float(i) for i in range(1, 16)]
        candles = _candles(closes, step_ms=20 * DAY_MS)
        result = compute_sma(candles, _config(), 20 * DAILY)

        assert result is not None
        # min(20, 10 * 0.1) = 1 -> every candle qualifies
        assert len(result.values) == 15
        assert result.values[0].value == 1.0
        assert result.values[9].value == pytest.approx(5.5)  # mean(1..10)
        assert result.values[10].value == pytest.approx(6.5)  # mean(2..11)
        assert result.values[14].value == pytest.approx(10.5)  # mean(6..15)

    def test_window_of_one_is_identity(self):
        closes = [10.0, 8.5, 7.25, 6.0, 6.75, 9.1, 12.3]
        candles = _candles(closes)
        result = compute_sma(candles, _config(), 200 * DAILY)

        assert result is not None
        assert [p.value for p in result.values] == closes

    def test_custom_warmup(self):
        candles = _candles([1.0] * 30)
        result = compute_sma(
            candles, _config(SmaPeriod.W50), DAILY, warmup=SmaWarmup(max_candles=5)
        )

        assert result is not None
        assert result.values[0].timestamp == candles[4].timestamp

    def test_output_carries_config_metadata(self):
        config = SmaConfig(period=SmaPeriod.W100, enabled=True, color="#123456", line_width=4)
        result = compute_sma(_candles([5.0] * 25), config, DAILY)

        assert result is not None
        assert result.period is SmaPeriod.W100
        assert result.color == "#123456"
        assert result.line_width == 4


class TestComputeAllSma:
    """Tests for the batch helper."""

    def test_keeps_config_order_and_drops_disabled(self):
        candles = _candles([float(i) for i in range(60)])
        configs = [
            _config(SmaPeriod.W200),
            _config(SmaPeriod.W50, enabled=False),
            _config(SmaPeriod.D200),
        ]
        results = compute_all_sma(candles, configs, DAILY)

        assert [r.period for r in results] == [SmaPeriod.W200, SmaPeriod.D200]

    def test_drops_configs_without_output(self):
        # 10-day candles: 200D -> window 20 (warm-up 2), 200W -> window 140 (warm-up 14)
        candles = _candles([1.0] * 10, step_ms=10 * DAY_MS)
        results = compute_all_sma(
            candles, [_config(SmaPeriod.W200), _config(SmaPeriod.D200)], 10 * DAILY
        )

        assert [r.period for r in results] == [SmaPeriod.D200]

    def test_empty_candles(self):
        assert compute_all_sma([], [_config()], DAILY) == []
