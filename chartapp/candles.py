"""Candle files for the command line.

Accepts a JSON array of either objects
({"timestamp", "open", "high", "low", "close", "volume"}) or rows
[timestamp, open, high, low, close, volume].
"""

import logging
from pathlib import Path

import orjson
from pydantic import TypeAdapter

from chartcore.models.candle import Candle, is_ascending

logger = logging.getLogger(__name__)

_CANDLE_LIST = TypeAdapter(list[Candle])
_ROW_FIELDS = ("timestamp", "open", "high", "low", "close", "volume")


def parse_candles(data: bytes | str) -> list[Candle]:
    """Parse a candle document.

    Raises:
        ValueError: If the document is malformed or not in ascending order
    """
    raw = orjson.loads(data)
    if not isinstance(raw, list):
        raise ValueError("Candle document must be a JSON array")

    rows = [
        dict(zip(_ROW_FIELDS, item)) if isinstance(item, list) else item
        for item in raw
    ]
    candles = _CANDLE_LIST.validate_python(rows)

    if not is_ascending(candles):
        raise ValueError("Candles must be in strictly ascending timestamp order")
    return candles


def load_candles(path: Path) -> list[Candle]:
    candles = parse_candles(Path(path).read_bytes())
    logger.info("Loaded %d candles from %s", len(candles), path)
    return candles
