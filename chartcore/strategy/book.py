"""Strategy collection and editing session.

``StrategyBook`` is a value: every operation returns a new book and leaves
the original untouched, so the owner replaces its reference in one step.
``StrategyEditor`` stages changes to a single strategy; nothing reaches a
book until ``commit``.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Iterable, Iterator

from chartcore.errors import StrategyNotFoundError, StrategyValidationError
from chartcore.strategy.models import (
    Strategy,
    StrategyCondition,
    check_field_names,
    generate_id,
    new_condition,
    new_strategy,
    now_ms,
)

logger = logging.getLogger(__name__)

COPY_SUFFIX = " (Copy)"

# Managed by the book and editor, never set by callers
_PROTECTED_FIELDS = ("id", "created_at", "updated_at")


@dataclass(frozen=True)
class StrategyBook:
    """Ordered, immutable collection of strategies."""

    strategies: tuple[Strategy, ...] = ()

    @classmethod
    def of(cls, strategies: Iterable[Strategy]) -> StrategyBook:
        return cls(tuple(strategies))

    def __iter__(self) -> Iterator[Strategy]:
        return iter(self.strategies)

    def __len__(self) -> int:
        return len(self.strategies)

    def __contains__(self, strategy_id: object) -> bool:
        return any(s.id == strategy_id for s in self.strategies)

    def get(self, strategy_id: str) -> Strategy:
        for strategy in self.strategies:
            if strategy.id == strategy_id:
                return strategy
        raise StrategyNotFoundError(strategy_id)

    def active(self) -> list[Strategy]:
        """Enabled strategies, in book order."""
        return [s for s in self.strategies if s.enabled]

    # ------------------------------------------------------------------
    # Mutations (each returns a new book)
    # ------------------------------------------------------------------

    def create(self, timestamp_ms: int | None = None) -> tuple[StrategyBook, Strategy]:
        """Append a fresh, empty strategy and return it with the new book."""
        strategy = new_strategy(timestamp_ms)
        return StrategyBook(self.strategies + (strategy,)), strategy

    def save(self, strategy: Strategy, timestamp_ms: int | None = None) -> StrategyBook:
        """Replace the strategy with the same id, or append it if new.

        Replacing refreshes ``updated_at``; a new strategy is stored as is.
        """
        if strategy.id not in self:
            logger.debug("Adding strategy %s (%s)", strategy.id, strategy.name)
            return StrategyBook(self.strategies + (strategy,))

        saved = strategy.touched(timestamp_ms)
        logger.debug("Replacing strategy %s (%s)", strategy.id, strategy.name)
        return StrategyBook(tuple(saved if s.id == strategy.id else s for s in self.strategies))

    def update(self, strategy_id: str, timestamp_ms: int | None = None, **changes) -> StrategyBook:
        """Overlay ``changes`` on a strategy and refresh ``updated_at``."""
        current = self.get(strategy_id)
        for protected in _PROTECTED_FIELDS:
            if protected in changes:
                raise StrategyValidationError(f"'{protected}' cannot be edited")
        updated = current.touched(timestamp_ms, **changes)
        return StrategyBook(tuple(updated if s.id == strategy_id else s for s in self.strategies))

    def delete(self, strategy_id: str) -> StrategyBook:
        self.get(strategy_id)
        return StrategyBook(tuple(s for s in self.strategies if s.id != strategy_id))

    def toggle(self, strategy_id: str, timestamp_ms: int | None = None) -> StrategyBook:
        """Flip ``enabled`` on a strategy."""
        current = self.get(strategy_id)
        return self.update(strategy_id, timestamp_ms, enabled=not current.enabled)

    def duplicate(
        self, strategy_id: str, timestamp_ms: int | None = None
    ) -> tuple[StrategyBook, Strategy]:
        """Append a copy with a new id, fresh timestamps and a decorated name."""
        source = self.get(strategy_id)
        ts = timestamp_ms if timestamp_ms is not None else now_ms()
        copy = source.model_copy(
            update={
                "id": generate_id(ts),
                "name": f"{source.name}{COPY_SUFFIX}",
                "created_at": ts,
                "updated_at": ts,
            }
        )
        return StrategyBook(self.strategies + (copy,)), copy


class StrategyEditor:
    """Editing session over a staged copy of one strategy.

    Usage:
        editor = StrategyEditor(book.get(strategy_id))
        editor.update(name="VWAP reclaim")
        editor.add_condition()
        book = editor.commit(book)
    """

    def __init__(self, strategy: Strategy | None = None):
        self._original = strategy
        self._staged = (strategy or new_strategy()).model_copy(deep=True)

    @property
    def staged(self) -> Strategy:
        return self._staged

    @property
    def is_new(self) -> bool:
        return self._original is None

    @property
    def is_dirty(self) -> bool:
        return self._original is None or self._staged != self._original

    def _stage(self, **changes) -> None:
        # Timestamps are refreshed when the book saves the strategy
        check_field_names(Strategy, changes)
        data = self._staged.model_dump()
        data.update(changes)
        self._staged = Strategy.model_validate(data)

    def update(self, **changes) -> Strategy:
        """Overlay top-level fields (name, logic, alert flags, color...)."""
        for protected in _PROTECTED_FIELDS:
            if protected in changes:
                raise StrategyValidationError(f"'{protected}' cannot be edited")
        self._stage(**changes)
        return self._staged

    def add_condition(self, condition: StrategyCondition | None = None) -> StrategyCondition:
        condition = condition or new_condition()
        self._stage(conditions=self._staged.conditions + (condition,))
        return condition

    def update_condition(self, condition_id: str, **changes) -> StrategyCondition:
        check_field_names(StrategyCondition, changes)
        if "id" in changes:
            raise StrategyValidationError("'id' cannot be edited")
        conditions = list(self._staged.conditions)
        for i, condition in enumerate(conditions):
            if condition.id == condition_id:
                data = condition.model_dump()
                data.update(changes)
                conditions[i] = StrategyCondition.model_validate(data)
                self._stage(conditions=tuple(conditions))
                return conditions[i]
        raise KeyError(f"Unknown condition id: {condition_id!r}")

    def remove_condition(self, condition_id: str) -> None:
        remaining = tuple(c for c in self._staged.conditions if c.id != condition_id)
        if len(remaining) == len(self._staged.conditions):
            raise KeyError(f"Unknown condition id: {condition_id!r}")
        self._stage(conditions=remaining)

    def validate(self) -> None:
        """Check the staged strategy can be saved."""
        if not self._staged.name.strip():
            raise StrategyValidationError("Strategy name must not be blank")
        if not self._staged.conditions:
            raise StrategyValidationError("Strategy needs at least one condition")

    def commit(self, book: StrategyBook, timestamp_ms: int | None = None) -> StrategyBook:
        """Validate and write the staged strategy into ``book`` as a whole."""
        self.validate()
        result = book.save(self._staged, timestamp_ms)
        logger.info("Saved strategy %s (%s)", self._staged.id, self._staged.name)
        self._original = result.get(self._staged.id)
        self._staged = self._original
        return result
