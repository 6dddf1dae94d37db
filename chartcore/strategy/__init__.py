"""Strategy model, editing and evaluation.

Public API:
- Strategy / StrategyCondition: declarative strategy records
- StrategyBook / StrategyEditor: value-style collection and staging session
- export_strategies / import_strategies: document codec
- collect_indicator_series: candle-aligned series for the evaluator
- evaluate / evaluate_series: condition evaluation

Importing this package registers the built-in indicator resolvers.
"""

from chartcore.strategy.book import StrategyBook, StrategyEditor
from chartcore.strategy.codec import (
    export_strategies,
    import_strategies,
    parse_strategies,
)
from chartcore.strategy.evaluator import (
    EQUALS_REL_TOL,
    evaluate,
    evaluate_condition,
    evaluate_series,
)
from chartcore.strategy.models import (
    CONSTANT,
    ComparisonOperator,
    IndicatorRef,
    Logic,
    Strategy,
    StrategyCondition,
    new_condition,
    new_strategy,
)
from chartcore.strategy.registry import list_indicators, register_indicator
from chartcore.strategy.series import (
    IndicatorSeries,
    SeriesContext,
    align_points,
    collect_indicator_series,
)

__all__ = [
    "StrategyBook",
    "StrategyEditor",
    "export_strategies",
    "import_strategies",
    "parse_strategies",
    "EQUALS_REL_TOL",
    "evaluate",
    "evaluate_condition",
    "evaluate_series",
    "CONSTANT",
    "ComparisonOperator",
    "IndicatorRef",
    "Logic",
    "Strategy",
    "StrategyCondition",
    "new_condition",
    "new_strategy",
    "list_indicators",
    "register_indicator",
    "IndicatorSeries",
    "SeriesContext",
    "align_points",
    "collect_indicator_series",
]
