"""
IRR and NPV Calculations

IRR is solved by bisection over percentage-scaled rates after growing the
search interval until the NPV changes sign. XIRR is solved by
Newton-Raphson over decimal rates, with cash flows discounted by the
elapsed time in 365-day years since the first date.
"""

import logging
from datetime import date, datetime
from typing import Callable, List, Optional, Sequence, Tuple, Union

import numpy as np

from fincalc.calculations.errors import InvalidCashFlowError, MismatchedLengthError
from fincalc.calculations.rounding import round_half_up
from fincalc.calculations.solvers import (
    DEFAULT_MAX_EVALUATIONS,
    EvaluationCounter,
    bisect,
    expand_bracket,
    newton_raphson,
)

logger = logging.getLogger(__name__)

DateLike = Union[date, datetime]

IRR_LOW = -100.0
IRR_HIGH = 100.0
IRR_PRECISION = 1e-5
IRR_DECIMALS = 6
XIRR_DECIMALS = 2
DAYS_PER_YEAR = 365.0
SECONDS_PER_YEAR = DAYS_PER_YEAR * 24 * 3600


def validate_cash_flows(cash_flows: Sequence[float]) -> None:
    """
    Check that cash flows contain both an outflow and an inflow.

    Raises:
        InvalidCashFlowError: If there is no positive or no negative value
    """
    has_positive = any(cf > 0 for cf in cash_flows)
    has_negative = any(cf < 0 for cf in cash_flows)

    if not has_positive or not has_negative:
        raise InvalidCashFlowError(
            "Cash flows must contain at least one positive and one negative value"
        )


def npv_objective(
    cash_flows: Sequence[float], counter: EvaluationCounter
) -> Callable[[float], float]:
    """
    Build the periodic NPV as a function of a percentage rate.

    f(r) = cf[0] + sum(cf[i] / (1 + r/100) ** i)

    Each call ticks the counter. Uses float64 arithmetic, so a rate of
    -100% gives an infinite (or nan) value instead of raising.
    """
    values = np.asarray(cash_flows, dtype=np.float64)
    periods = np.arange(len(values), dtype=np.float64)

    @counter.counted
    def npv(rate: float) -> float:
        with np.errstate(divide="ignore", over="ignore", invalid="ignore"):
            factors = (1.0 + rate / 100.0) ** periods
            return float(np.sum(values / factors))

    return npv


def calculate_irr(
    cash_flows: Sequence[float], max_evaluations: int = DEFAULT_MAX_EVALUATIONS
) -> float:
    """
    Calculate IRR (Internal Rate of Return) for periodic cash flows.

    Args:
        cash_flows: Periodic cash flows, first one at period 0
        max_evaluations: Upper bound on NPV evaluations

    Returns:
        IRR in percent (e.g., 15.0 for 15%), rounded to 6 decimals

    Raises:
        InvalidCashFlowError: If cash flows do not change sign
        NoBracketFoundError: If no interval with a sign change is found
        EvaluationBudgetExceededError: If max_evaluations is exceeded
    """
    validate_cash_flows(cash_flows)

    counter = EvaluationCounter(max_evaluations)
    npv = npv_objective(cash_flows, counter)

    low, high = expand_bracket(npv, IRR_LOW, IRR_HIGH)
    result = bisect(npv, low, high, IRR_PRECISION, counter)

    logger.debug(
        "IRR %s found in %s evaluations (bracket [%s, %s])",
        result.root,
        counter.count,
        low,
        high,
    )
    return round_half_up(result.root, IRR_DECIMALS)


def _to_datetime(value: DateLike) -> datetime:
    if isinstance(value, datetime):
        return value
    return datetime(value.year, value.month, value.day)


def elapsed_years(dates: Sequence[DateLike]) -> List[float]:
    """
    Convert dates to elapsed years since the first date.

    Uses a 365-day year and absolute differences, so the first entry is
    always 0 and every entry is non-negative.
    """
    if not dates:
        return []
    first = _to_datetime(dates[0])
    return [
        abs((_to_datetime(d) - first).total_seconds()) / SECONDS_PER_YEAR
        for d in dates
    ]


def xnpv_objective(
    cash_flows: Sequence[float], years: Sequence[float]
) -> Callable[[float], Tuple[float, float]]:
    """
    Build the date-weighted NPV and its derivative for a decimal rate.

    f(g)  = sum(cf[i] / (1 + g) ** t[i])
    f'(g) = sum(-cf[i] * t[i] * (1 + g) ** (-1 - t[i]))

    Rates with 1 + g <= 0 give nan or inf rather than raising.
    """
    values = np.asarray(cash_flows, dtype=np.float64)
    times = np.asarray(years, dtype=np.float64)

    def xnpv(rate: float) -> Tuple[float, float]:
        with np.errstate(divide="ignore", over="ignore", invalid="ignore"):
            base = 1.0 + rate
            value = np.sum(values / base**times)
            deriv = np.sum(-values * times * base ** (-1.0 - times))
        return float(value), float(deriv)

    return xnpv


def calculate_xirr(
    cash_flows: Sequence[float],
    dates: Sequence[DateLike],
    guess: Optional[float] = 0.0,
) -> Optional[float]:
    """
    Calculate XIRR (IRR with specific dates).

    Args:
        cash_flows: Array of cash flows
        dates: Array of dates corresponding to each cash flow
        guess: Initial guess for the rate as decimal (default 0)

    Returns:
        Annual IRR in percent rounded to 2 decimals, or None if the
        iteration does not converge

    Raises:
        MismatchedLengthError: If cash flows and dates differ in length
        InvalidCashFlowError: If cash flows do not change sign
    """
    if len(cash_flows) != len(dates):
        raise MismatchedLengthError("Number of cash flows and dates should match")

    validate_cash_flows(cash_flows)

    xnpv = xnpv_objective(cash_flows, elapsed_years(dates))
    result = newton_raphson(xnpv, guess or 0.0)

    if not result.converged:
        logger.info(
            "XIRR did not converge after %s iterations (guess=%s)",
            result.iterations,
            guess,
        )
        return None

    return round_half_up(result.root * 100, XIRR_DECIMALS)


def calculate_xnpv(
    cash_flows: Sequence[float], dates: Sequence[DateLike], discount_rate: float
) -> float:
    """Calculate XNPV (NPV with specific dates) at a decimal rate."""
    if len(cash_flows) != len(dates):
        raise MismatchedLengthError("Cash flows and dates arrays must have same length")

    value, _ = xnpv_objective(cash_flows, elapsed_years(dates))(discount_rate)
    return round_half_up(value, 2)


def calculate_multiple(cash_flows: Sequence[float]) -> float:
    """
    Calculate equity multiple.

    Args:
        cash_flows: Array of cash flows (investments are negative)

    Returns:
        Multiple (e.g., 2.0 = 2.0x return)
    """
    total_inflows = sum(cf for cf in cash_flows if cf > 0)
    total_outflows = abs(sum(cf for cf in cash_flows if cf < 0))

    if total_outflows == 0:
        raise InvalidCashFlowError("No investment (outflows) found")

    return total_inflows / total_outflows


def calculate_profit(cash_flows: Sequence[float]) -> float:
    """Calculate profit (total inflows minus total outflows)."""
    return sum(cash_flows)
