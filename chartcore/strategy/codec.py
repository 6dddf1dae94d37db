"""Strategy export/import.

The document is a JSON array of strategy objects with the chart's field
names (``alertEnabled``, ``createdAt``...). Import re-assigns ids and
timestamps so imported records never collide with existing ones.
"""

from __future__ import annotations

import logging
from typing import Iterable

import orjson
from pydantic import TypeAdapter, ValidationError

from chartcore.errors import StrategyImportError
from chartcore.strategy.models import Strategy, generate_id, now_ms

logger = logging.getLogger(__name__)

_STRATEGY_LIST = TypeAdapter(list[Strategy])


def export_strategies(strategies: Iterable[Strategy]) -> str:
    """Serialize strategies to an indented JSON array."""
    documents = [s.to_document() for s in strategies]
    return orjson.dumps(documents, option=orjson.OPT_INDENT_2).decode("utf-8")


def _load_array(text: str | bytes) -> list:
    try:
        raw = orjson.loads(text)
    except orjson.JSONDecodeError as e:
        raise StrategyImportError(f"Invalid strategy document: {e}") from e

    if not isinstance(raw, list):
        raise StrategyImportError(
            f"Strategy document must be a JSON array, got {type(raw).__name__}"
        )
    return raw


def _validate(raw: list) -> list[Strategy]:
    try:
        return _STRATEGY_LIST.validate_python(raw)
    except ValidationError as e:
        raise StrategyImportError(
            f"Strategy document does not match the expected shape: {e.error_count()} error(s)\n{e}"
        ) from e


def parse_strategies(text: str | bytes) -> list[Strategy]:
    """
    Parse an exported document without touching ids or timestamps.

    Raises:
        StrategyImportError: If the text is not a JSON array of strategies
    """
    return _validate(_load_array(text))


def import_strategies(
    text: str | bytes,
    existing: Iterable[Strategy] = (),
    timestamp_ms: int | None = None,
) -> list[Strategy]:
    """
    Import strategies and append them to ``existing``.

    Every imported record gets a new id and created/updated timestamps set
    to the import time before it is validated, so the ids and timestamps
    written in the document are neither required nor checked. All other
    fields are kept as written.

    Args:
        text: Exported strategy document
        existing: Strategies already held by the caller
        timestamp_ms: Import time (defaults to now)

    Returns:
        existing + imported, as a new list

    Raises:
        StrategyImportError: If the document is malformed (nothing is applied)
    """
    raw = _load_array(text)
    ts = timestamp_ms if timestamp_ms is not None else now_ms()

    current = list(existing)
    taken = {s.id for s in current}
    stamped = []
    for item in raw:
        if isinstance(item, dict):
            new_id = generate_id(ts)
            while new_id in taken:
                new_id = generate_id(ts)
            taken.add(new_id)
            item = {
                k: v for k, v in item.items()
                if k not in ("id", "created_at", "createdAt", "updated_at", "updatedAt")
            }
            item.update(id=new_id, createdAt=ts, updatedAt=ts)
        stamped.append(item)

    imported = _validate(stamped)
    logger.info("Imported %d strategies (%d existing)", len(imported), len(current))
    return current + imported
