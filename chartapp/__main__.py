"""Command line entry point.

Usage:
    python -m chartapp indicators candles.json
    python -m chartapp indicators candles.json --config indicators.yaml --interval 60
    python -m chartapp evaluate candles.json --strategies strategies.json
    python -m chartapp strategies list
    python -m chartapp strategies export backup.json
    python -m chartapp strategies import shared.json
    python -m chartapp strategies toggle 1717200000000_abc123xyz
"""

import argparse
import logging
import sys
from pathlib import Path

import orjson
from pydantic import ValidationError

from chartapp.candles import load_candles
from chartapp.config import Settings, get_settings
from chartapp.indicator_config import IndicatorSettings, load_indicator_config
from chartapp.strategy_store import StrategyStore
from chartcore.errors import ChartCoreError
from chartcore.indicators import compute_all_anchored_vwaps, compute_all_sma, compute_all_vwaps
from chartcore.models import series_document
from chartcore.strategy import collect_indicator_series, evaluate_series

logger = logging.getLogger(__name__)


def configure_logging(level: str) -> None:
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(asctime)s - %(levelname)s - %(message)s",
        stream=sys.stderr,
    )


def _dump(obj) -> None:
    sys.stdout.write(orjson.dumps(obj, option=orjson.OPT_INDENT_2).decode("utf-8"))
    sys.stdout.write("\n")


def _indicator_config(args: argparse.Namespace, settings: Settings) -> IndicatorSettings:
    config = load_indicator_config(
        args.config or settings.indicator_config_path,
        default_interval=settings.default_interval,
    )
    if args.interval:
        config = config.model_copy(update={"interval": args.interval})
    return config


def cmd_indicators(args: argparse.Namespace, settings: Settings) -> int:
    candles = load_candles(args.candles)
    config = _indicator_config(args, settings)

    sma = compute_all_sma(candles, config.sma, config.interval_minutes, settings.sma_warmup)
    vwap = compute_all_vwaps(candles, config.vwap)
    anchored = compute_all_anchored_vwaps(candles, config.anchored_vwap)

    _dump({
        "interval": config.interval,
        "sma": [series_document(s) for s in sma],
        "vwap": [series_document(v) for v in vwap],
        "anchoredVwap": [series_document(a) for a in anchored],
    })
    return 0


def cmd_evaluate(args: argparse.Namespace, settings: Settings) -> int:
    candles = load_candles(args.candles)
    config = _indicator_config(args, settings)
    store = StrategyStore(args.strategies or settings.strategies_path)
    book = store.load()

    series = collect_indicator_series(candles, config.series_context(settings.sma_warmup))

    signals = []
    for strategy in book.active():
        try:
            hits = evaluate_series(strategy, series, settings.equals_rel_tol)
        except ChartCoreError as e:
            logger.warning("Skipping strategy %s: %s", strategy.name, e)
            continue
        signals.append({
            "id": strategy.id,
            "name": strategy.name,
            "timestamps": [candles[i].timestamp for i in hits],
        })

    _dump(signals)
    return 0


def cmd_strategies(args: argparse.Namespace, settings: Settings) -> int:
    store = StrategyStore(args.strategies or settings.strategies_path)

    if args.action == "list":
        for strategy in store.load():
            state = "on " if strategy.enabled else "off"
            print(
                f"[{state}] {strategy.id}  {strategy.name}  "
                f"({len(strategy.conditions)} conditions, {strategy.logic.value})"
            )
        return 0

    if args.action == "export":
        count = store.export_to(args.target)
        print(f"Exported {count} strategies to {args.target}")
        return 0

    if args.action == "import":
        before = len(store.load())
        book = store.import_from(args.target)
        print(f"Imported {len(book) - before} strategies")
        return 0

    book = store.load()
    if args.action == "toggle":
        book = book.toggle(args.target)
    elif args.action == "delete":
        book = book.delete(args.target)
    elif args.action == "duplicate":
        book, _ = book.duplicate(args.target)
    store.save(book)
    return 0


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="python -m chartapp",
        description="Compute chart indicators and evaluate strategies",
    )
    parser.add_argument("--log-level", help="Override CHART_LOG_LEVEL")
    sub = parser.add_subparsers(dest="command", required=True)

    p = sub.add_parser("indicators", help="Compute SMA / VWAP / anchored VWAP series")
    p.add_argument("candles", type=Path, help="JSON candle file")
    p.add_argument("--config", type=Path, help="indicators.yaml path")
    p.add_argument("--interval", help="Chart interval code (e.g. 15, 60, D)")
    p.set_defaults(handler=cmd_indicators)

    p = sub.add_parser("evaluate", help="List candles where active strategies fire")
    p.add_argument("candles", type=Path, help="JSON candle file")
    p.add_argument("--config", type=Path, help="indicators.yaml path")
    p.add_argument("--interval", help="Chart interval code (e.g. 15, 60, D)")
    p.add_argument("--strategies", type=Path, help="Strategy file")
    p.set_defaults(handler=cmd_evaluate)

    p = sub.add_parser("strategies", help="Manage the strategy file")
    p.add_argument(
        "action",
        choices=["list", "export", "import", "toggle", "delete", "duplicate"],
    )
    p.add_argument("target", nargs="?", help="File (export/import) or strategy id")
    p.add_argument("--strategies", type=Path, help="Strategy file")
    p.set_defaults(handler=cmd_strategies)

    args = parser.parse_args(argv)
    if args.command == "strategies" and args.action != "list" and not args.target:
        parser.error(f"'{args.action}' needs a target")
    return args


def main(argv: list[str] | None = None) -> int:
    args = parse_args(argv)
    settings = get_settings()
    configure_logging(args.log_level or settings.log_level)

    try:
        return args.handler(args, settings)
    except (ChartCoreError, ValidationError, ValueError, OSError) as e:
        logger.error("%s", e)
        return 1


if __name__ == "__main__":
    sys.exit(main())
