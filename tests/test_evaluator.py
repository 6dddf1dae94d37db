"""Tests for strategy condition evaluation."""

import numpy as np
import pytest

from chartcore.errors import ConditionError, UnsupportedIndicatorError
from chartcore.indicators import typical_prices
from chartcore.models import AnchoredVwapConfig, Candle, SmaConfig, SmaPeriod
from chartcore.strategy import (
    IndicatorRef,
    Logic,
    SeriesContext,
    Strategy,
    StrategyCondition,
    collect_indicator_series,
    evaluate,
    evaluate_condition,
    evaluate_series,
    list_indicators,
)

P = IndicatorRef.PRICE
V = IndicatorRef.VWAP_1D
VOL = IndicatorRef.VOLUME

DAY_MS = 86_400_000


def _series(price, vwap=None, volume=None) -> dict:
    series = {P: np.array(price, dtype=np.float64)}
    if vwap is not None:
        series[V] = np.array(vwap, dtype=np.float64)
    if volume is not None:
        series[VOL] = np.array(volume, dtype=np.float64)
    return series


def _cond(operator, indicator2="vwap_1D", **kwargs) -> StrategyCondition:
    return StrategyCondition(operator=operator, indicator2=indicator2, **kwargs)


def _strategy(*conditions, logic=Logic.AND, enabled=True) -> Strategy:
    return Strategy(
        id="s",
        name="S",
        conditions=conditions,
        logic=logic,
        enabled=enabled,
        created_at=0,
        updated_at=0,
    )


class TestOperators:
    """Tests for individual comparison operators."""

    def test_above_below_strict(self):
        series = _series([10, 11, 12], vwap=[11, 11, 11])

        assert [evaluate_condition(_cond("above"), series, i) for i in range(3)] == [False, False, True]
        assert [evaluate_condition(_cond("below"), series, i) for i in range(3)] == [True, False, False]

    def test_constant_comparison(self):
        series = _series([10, 20])
        condition = _cond("above", indicator2="value", value=15)

        assert not evaluate_condition(condition, series, 0)
        assert evaluate_condition(condition, series, 1)

    def test_equals_uses_relative_tolerance(self):
        series = _series([100.0, 100.00001, 100.1])
        condition = _cond("equals", indicator2="value", value=100)

        assert evaluate_condition(condition, series, 0)
        assert evaluate_condition(condition, series, 1)
        assert not evaluate_condition(condition, series, 2)
        assert evaluate_condition(condition, series, 2, rel_tol=1e-2)

    def test_between_inclusive_any_order(self):
        series = _series([89, 90, 100, 110, 111])
        condition = _cond("between", value=110, value2=90)

        assert [evaluate_condition(condition, series, i) for i in range(5)] == [
            False, True, True, True, False,
        ]

    def test_crosses_above(self):
        #            below  touch  above  above  below  above
        series = _series([9, 10, 11, 12, 9, 12], vwap=[10] * 6)
        condition = _cond("crosses_above")

        hits = [i for i in range(6) if evaluate_condition(condition, series, i)]
        assert hits == [2, 5]

    def test_crosses_below(self):
        series = _series([11, 9, 8, 11, 10, 9], vwap=[10] * 6)
        condition = _cond("crosses_below")

        hits = [i for i in range(6) if evaluate_condition(condition, series, i)]
        assert hits == [1, 5]

    def test_crossing_never_at_first_candle(self):
        series = _series([20], vwap=[10])
        assert not evaluate_condition(_cond("crosses_above"), series, 0)

    def test_crossing_against_constant(self):
        series = _series([99, 101])
        condition = _cond("crosses_above", indicator2="value", value=100)
        assert evaluate_condition(condition, series, 1)

    def test_nan_operand_is_false(self):
        series = _series([10, 11, 12], vwap=[np.nan, np.nan, 11])

        assert not evaluate_condition(_cond("above"), series, 0)
        # previous value missing: no crossing
        assert not evaluate_condition(_cond("crosses_above"), series, 2)

    def test_missing_series_is_false(self):
        assert not evaluate_condition(_cond("above"), _series([10]), 0)

    def test_missing_constant_raises(self):
        with pytest.raises(ConditionError):
            evaluate_condition(_cond("above", indicator2="value"), _series([1]), 0)
        with pytest.raises(ConditionError):
            evaluate_condition(_cond("between", value=1), _series([1]), 0)

    def test_index_out_of_range(self):
        with pytest.raises(IndexError):
            evaluate_condition(_cond("above", indicator2="value", value=1), _series([1]), 3)


class TestEvaluate:
    """Tests for combining conditions."""

    def test_and_or(self):
        series = _series([10, 20], volume=[5, 50])
        price_up = _cond("above", indicator2="value", value=15)
        volume_up = StrategyCondition(indicator1="volume", operator="above", indicator2="value", value=100)

        assert not evaluate(_strategy(price_up, volume_up), series, 1)
        assert evaluate(_strategy(price_up, volume_up, logic=Logic.OR), series, 1)

    def test_disabled_conditions_are_skipped(self):
        series = _series([10])
        passing = _cond("above", indicator2="value", value=5)
        failing = _cond("above", indicator2="value", value=50, enabled=False)

        assert evaluate(_strategy(passing, failing), series, 0)

    def test_disabled_strategy_is_false(self):
        series = _series([10])
        condition = _cond("above", indicator2="value", value=5)
        assert not evaluate(_strategy(condition, enabled=False), series, 0)

    def test_no_active_conditions_is_false(self):
        series = _series([10])
        condition = _cond("above", indicator2="value", value=5, enabled=False)

        assert not evaluate(_strategy(), series, 0)
        assert not evaluate(_strategy(condition, logic=Logic.OR), series, 0)

    def test_unsupported_indicator_raises(self):
        series = _series([10])
        condition = _cond("above", indicator2="fib_618")

        with pytest.raises(UnsupportedIndicatorError, match="fib_618"):
            evaluate(_strategy(condition), series, 0)

    def test_unsupported_in_disabled_condition_is_ignored(self):
        series = _series([10])
        ok = _cond("above", indicator2="value", value=5)
        rsi = StrategyCondition(indicator1="rsi", operator="above", indicator2="value", value=70, enabled=False)

        assert evaluate(_strategy(ok, rsi), series, 0)

    def test_evaluate_series(self):
        series = _series([9, 11, 9, 11], vwap=[10] * 4)
        assert evaluate_series(_strategy(_cond("crosses_above")), series) == [1, 3]


class TestCollectIndicatorSeries:
    """Tests for building candle-aligned series."""

    def _candles(self, n: int) -> list[Candle]:
        return [
            Candle(timestamp=i * DAY_MS, open=10 + i, high=11 + i, low=9 + i, close=10 + i, volume=100)
            for i in range(n)
        ]

    def test_registered_indicators(self):
        refs = list_indicators()

        assert IndicatorRef.PRICE in refs
        assert IndicatorRef.ANCHORED_VWAP in refs
        assert all(r.supported for r in refs)
        assert IndicatorRef.RSI not in refs

    def test_series_are_candle_aligned(self):
        candles = self._candles(30)
        context = SeriesContext(interval_minutes=1440)
        series = collect_indicator_series(candles, context)

        for values in series.values():
            assert len(values) == 30
        np.testing.assert_array_equal(series[IndicatorRef.PRICE], [c.close for c in candles])
        # Daily VWAP on daily candles is each candle's typical price
        np.testing.assert_allclose(series[IndicatorRef.VWAP_1D], typical_prices(candles))

    def test_sma_gap_is_nan(self):
        candles = self._candles(30)
        series = collect_indicator_series(
            candles, SeriesContext(interval_minutes=1440), refs=[IndicatorRef.SMA_50W]
        )

        sma = series[IndicatorRef.SMA_50W]
        assert np.isnan(sma[:19]).all()
        assert sma[19] == pytest.approx(np.mean([c.close for c in candles[:20]]))

    def test_sma_uses_configured_period_even_when_hidden(self):
        candles = self._candles(30)
        context = SeriesContext(
            sma_configs=(SmaConfig(period=SmaPeriod.W50, enabled=False),),
            interval_minutes=1440,
        )
        series = collect_indicator_series(candles, context, refs=[IndicatorRef.SMA_50W])

        assert IndicatorRef.SMA_50W in series

    def test_anchored_vwap_skipped_when_unanchored(self):
        candles = self._candles(5)
        context = SeriesContext(
            anchored_vwap_configs=(AnchoredVwapConfig(id="a", name="a"),),
        )
        series = collect_indicator_series(candles, context, refs=[IndicatorRef.ANCHORED_VWAP])
        assert series == {}

    def test_anchored_vwap_from_start(self):
        candles = self._candles(5)
        context = SeriesContext(
            anchored_vwap_configs=(AnchoredVwapConfig(id="a", name="a", start_time=2 * DAY_MS),),
        )
        values = collect_indicator_series(candles, context, refs=[IndicatorRef.ANCHORED_VWAP])[
            IndicatorRef.ANCHORED_VWAP
        ]

        assert np.isnan(values[:2]).all()
        assert values[2] == pytest.approx(typical_prices(candles)[2])

    def test_unsupported_ref_raises(self):
        with pytest.raises(UnsupportedIndicatorError):
            collect_indicator_series(self._candles(2), refs=[IndicatorRef.FIB_0])

    def test_empty_candles(self):
        assert collect_indicator_series([]) == {}

    def test_end_to_end(self):
        closes = [10, 10, 10, 12, 12, 8]
        candles = [
            Candle(timestamp=i * DAY_MS, open=c, high=c, low=c, close=c, volume=1)
            for i, c in enumerate(closes)
        ]
        strategy = _strategy(_cond("above", indicator2="value", value=11))
        series = collect_indicator_series(candles, SeriesContext(interval_minutes=1440))

        assert evaluate_series(strategy, series) == [3, 4]
