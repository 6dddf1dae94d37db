"""Tests for the command line entry point."""

import orjson
import pytest

from chartapp.__main__ import main
from chartapp.config import get_settings
from chartapp.strategy_store import StrategyStore
from chartcore.strategy import Strategy, StrategyBook, StrategyCondition

DAY_MS = 86_400_000


@pytest.fixture(autouse=True)
def _isolated_settings(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


def _write_candles(path, closes):
    rows = [[i * DAY_MS, c, c + 1, c - 1, c, 10] for i, c in enumerate(closes)]
    path.write_bytes(orjson.dumps(rows))
    return path


def _write_strategies(path):
    book = StrategyBook.of([
        Strategy(
            id="1_strategy1",
            name="Breakout",
            conditions=(
                StrategyCondition(id="c", operator="crosses_above", indicator2="value", value=11),
            ),
            created_at=1,
            updated_at=1,
        ),
    ])
    StrategyStore(path).save(book)


class TestCli:
    def test_indicators(self, tmp_path, capsys):
        candles = _write_candles(tmp_path / "candles.json", [10.0] * 25)

        assert main(["indicators", str(candles), "--interval", "D"]) == 0

        output = orjson.loads(capsys.readouterr().out)
        assert output["interval"] == "D"
        (sma,) = output["sma"]
        assert sma["period"] == "200D"
        assert len(sma["values"]) == 6
        assert sma["lineWidth"] == 2
        assert "line_width" not in sma
        (vwap,) = output["vwap"]
        assert vwap["showBands"] is False
        assert set(vwap["values"][0]) >= {"timestamp", "value", "upperBand1", "lowerBand3"}
        assert output["anchoredVwap"] == []

    def test_evaluate(self, tmp_path, capsys):
        candles = _write_candles(tmp_path / "candles.json", [10, 10, 12, 12, 10, 13])
        _write_strategies(tmp_path / "strategies.json")

        assert main(["evaluate", str(candles), "--interval", "D"]) == 0

        (signal,) = orjson.loads(capsys.readouterr().out)
        assert signal["name"] == "Breakout"
        assert signal["timestamps"] == [2 * DAY_MS, 5 * DAY_MS]

    def test_strategies_toggle_and_list(self, tmp_path, capsys):
        _write_strategies(tmp_path / "strategies.json")

        assert main(["strategies", "toggle", "1_strategy1"]) == 0
        assert main(["strategies", "list"]) == 0

        assert "[off] 1_strategy1  Breakout" in capsys.readouterr().out

    def test_unknown_strategy_fails(self, tmp_path):
        _write_strategies(tmp_path / "strategies.json")
        assert main(["strategies", "delete", "nope"]) == 1

    def test_unordered_candles_fail(self, tmp_path):
        path = tmp_path / "candles.json"
        path.write_bytes(orjson.dumps([[2, 1, 1, 1, 1, 1], [1, 1, 1, 1, 1, 1]]))
        assert main(["indicators", str(path)]) == 1
