"""Exception types raised by the core.

Indicator engines never raise for missing input; they return ``None``.
These exceptions cover the strategy side, where a caller asked for
something that cannot be honoured.
"""


class ChartCoreError(Exception):
    """Base class for all core errors."""


class StrategyImportError(ChartCoreError, ValueError):
    """Raised when an imported strategy document has the wrong shape.

    The import is rejected as a whole; existing strategies are untouched.
    """


class StrategyNotFoundError(ChartCoreError, KeyError):
    """Raised when a strategy id is not present in a book."""

    def __str__(self) -> str:
        return f"Unknown strategy id: {self.args[0]!r}" if self.args else "Unknown strategy"


class StrategyValidationError(ChartCoreError, ValueError):
    """Raised when a staged strategy cannot be committed."""


class UnsupportedIndicatorError(ChartCoreError, ValueError):
    """Raised when a condition references an indicator with no computation."""


class ConditionError(ChartCoreError, ValueError):
    """Raised when a condition is missing the operands its operator needs."""
