"""File-backed strategy persistence.

The store file uses the same JSON document as export, so a store file can
be imported elsewhere and vice versa. Saving writes to a temporary file
and renames it over the target.
"""

import logging
import os
from pathlib import Path

from chartcore.strategy.book import StrategyBook
from chartcore.strategy.codec import export_strategies, import_strategies, parse_strategies

logger = logging.getLogger(__name__)


class StrategyStore:
    """Load and save a StrategyBook at a fixed path."""

    def __init__(self, path: Path):
        self.path = Path(path)

    def load(self) -> StrategyBook:
        """Load the book; a missing file is an empty book."""
        if not self.path.exists():
            logger.info("No strategy file at %s, starting empty", self.path)
            return StrategyBook()

        strategies = parse_strategies(self.path.read_bytes())
        logger.info("Loaded %d strategies from %s", len(strategies), self.path)
        return StrategyBook.of(strategies)

    def save(self, book: StrategyBook) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        tmp = self.path.with_name(self.path.name + ".tmp")
        tmp.write_text(export_strategies(book), encoding="utf-8")
        os.replace(tmp, self.path)
        logger.info("Saved %d strategies to %s", len(book), self.path)

    def export_to(self, target: Path, book: StrategyBook | None = None) -> int:
        """Write the book (or the stored one) to ``target``; returns the count."""
        book = book if book is not None else self.load()
        Path(target).write_text(export_strategies(book), encoding="utf-8")
        logger.info("Exported %d strategies to %s", len(book), target)
        return len(book)

    def import_from(self, source: Path, timestamp_ms: int | None = None) -> StrategyBook:
        """Append strategies from ``source`` to the stored book and save it.

        A malformed document raises StrategyImportError before anything is
        written.
        """
        book = self.load()
        merged = StrategyBook.of(
            import_strategies(Path(source).read_bytes(), book, timestamp_ms)
        )
        self.save(merged)
        return merged
