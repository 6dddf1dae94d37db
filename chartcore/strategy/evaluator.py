"""Strategy condition evaluation.

Conditions are evaluated at a candle index against series aligned to the
candle sequence (see ``series.collect_indicator_series``):

- above / below: strict comparison at the index
- equals: relative tolerance comparison (``EQUALS_REL_TOL``)
- between: value <= indicator1 <= value2 (bounds in either order)
- crosses_above: A was at or below B on the previous candle and is above
  it now; crosses_below is the mirror image. Never true at index 0.

A missing series or a NaN operand makes the condition false. Referencing
an indicator with no computation raises ``UnsupportedIndicatorError``
before anything is evaluated.
"""

from __future__ import annotations

import logging
import math
from typing import Mapping

import numpy as np

from chartcore.errors import ConditionError, UnsupportedIndicatorError
from chartcore.strategy.models import (
    ComparisonOperator,
    IndicatorRef,
    Logic,
    Strategy,
    StrategyCondition,
)

logger = logging.getLogger(__name__)

EQUALS_REL_TOL = 1e-6

_CROSSING = (ComparisonOperator.CROSSES_ABOVE, ComparisonOperator.CROSSES_BELOW)


def check_supported(strategy: Strategy) -> None:
    """Raise if any enabled condition references an uncomputed indicator."""
    for condition in strategy.active_conditions:
        for ref in condition.indicators:
            if not ref.supported:
                raise UnsupportedIndicatorError(
                    f"Strategy '{strategy.name}' condition {condition.id} uses "
                    f"'{ref.value}', which has no computation"
                )


def _value_at(
    series: Mapping[IndicatorRef, np.ndarray],
    ref: IndicatorRef,
    index: int,
) -> float:
    values = series.get(ref)
    if values is None:
        return math.nan
    if index < 0 or index >= len(values):
        raise IndexError(f"index {index} out of range for '{ref.value}' ({len(values)} values)")
    return float(values[index])


def _operands(
    condition: StrategyCondition,
    series: Mapping[IndicatorRef, np.ndarray],
    index: int,
) -> tuple[float, float]:
    a = _value_at(series, condition.indicator1, index)
    if condition.compares_constant:
        if condition.value is None:
            raise ConditionError(f"Condition {condition.id} compares against a constant but has no value")
        return a, condition.value
    return a, _value_at(series, condition.indicator2, index)


def evaluate_condition(
    condition: StrategyCondition,
    series: Mapping[IndicatorRef, np.ndarray],
    index: int,
    rel_tol: float = EQUALS_REL_TOL,
) -> bool:
    """
    Evaluate a single condition at ``index``.

    Args:
        condition: Condition to evaluate (its ``enabled`` flag is ignored)
        series: Aligned indicator series
        index: Candle index
        rel_tol: Relative tolerance for ``equals``

    Returns:
        True if the condition holds
    """
    for ref in condition.indicators:
        if not ref.supported:
            raise UnsupportedIndicatorError(f"Indicator '{ref.value}' has no computation")

    op = condition.operator

    if op is ComparisonOperator.BETWEEN:
        if condition.value is None or condition.value2 is None:
            raise ConditionError(f"Condition {condition.id} needs value and value2 for 'between'")
        a = _value_at(series, condition.indicator1, index)
        if math.isnan(a):
            return False
        low, high = sorted((condition.value, condition.value2))
        return low <= a <= high

    a, b = _operands(condition, series, index)
    if math.isnan(a) or math.isnan(b):
        return False

    if op is ComparisonOperator.ABOVE:
        return a > b
    if op is ComparisonOperator.BELOW:
        return a < b
    if op is ComparisonOperator.EQUALS:
        return math.isclose(a, b, rel_tol=rel_tol)

    # Crossings compare the previous and current relative position
    if index == 0:
        return False
    prev_a, prev_b = _operands(condition, series, index - 1)
    if math.isnan(prev_a) or math.isnan(prev_b):
        return False
    if op is ComparisonOperator.CROSSES_ABOVE:
        return prev_a <= prev_b and a > b
    return prev_a >= prev_b and a < b


def evaluate(
    strategy: Strategy,
    series: Mapping[IndicatorRef, np.ndarray],
    index: int,
    rel_tol: float = EQUALS_REL_TOL,
) -> bool:
    """
    Evaluate a strategy at a candle index.

    Args:
        strategy: Strategy to evaluate
        series: Aligned indicator series
        index: Candle index
        rel_tol: Relative tolerance for ``equals``

    Returns:
        False if the strategy is disabled or has no enabled condition;
        otherwise the AND/OR combination of its enabled conditions

    Raises:
        UnsupportedIndicatorError: If a condition uses an uncomputed indicator
        ConditionError: If a condition lacks the constants it needs
    """
    if not strategy.enabled:
        return False

    conditions = strategy.active_conditions
    if not conditions:
        return False

    check_supported(strategy)

    results = (evaluate_condition(c, series, index, rel_tol) for c in conditions)
    if strategy.logic is Logic.AND:
        return all(results)
    return any(results)


def evaluate_series(
    strategy: Strategy,
    series: Mapping[IndicatorRef, np.ndarray],
    rel_tol: float = EQUALS_REL_TOL,
) -> list[int]:
    """Return every candle index at which the strategy fires."""
    length = max((len(v) for v in series.values()), default=0)
    hits = [i for i in range(length) if evaluate(strategy, series, i, rel_tol)]
    logger.debug("Strategy %s fired %d times over %d candles", strategy.name, len(hits), length)
    return hits
