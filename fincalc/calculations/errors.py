"""
Calculation Errors

Exceptions raised by the calculation engine. All of them derive from
ValueError so API handlers can map any calculation failure to a 400.
"""


class CalculationError(ValueError):
    """Base class for calculation failures."""


class InvalidCashFlowError(CalculationError):
    """Cash flows lack at least one positive and one negative value."""


class MismatchedLengthError(CalculationError):
    """Cash flow and date series have different lengths."""


class RootFindingError(CalculationError):
    """Raised when a root finder cannot produce a result."""


class NoBracketFoundError(RootFindingError):
    """No sign-changing interval could be found for the objective."""


class EvaluationBudgetExceededError(RootFindingError):
    """The objective was evaluated more times than allowed."""
