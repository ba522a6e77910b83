"""
Root-Finding Solvers

Generic single-variable solvers used by the rate-of-return calculations:

- bisect: narrows a bracketing interval until it is below a precision
- expand_bracket: grows the upper bound of an interval until the objective
  turns negative, following a fixed step ladder then a doubling ladder
- newton_raphson: iterates x - f(x)/f'(x) until successive guesses agree
  to a fixed number of decimals

Objectives are plain callables. Work limits are explicit: bisection and
bracket expansion share an EvaluationCounter, Newton-Raphson has an
iteration cap.
"""

import logging
import math
from dataclasses import dataclass
from typing import Callable, Optional, Tuple

from fincalc.calculations.errors import (
    EvaluationBudgetExceededError,
    NoBracketFoundError,
)

logger = logging.getLogger(__name__)

Func = Callable[[float], float]
FuncDeriv = Callable[[float], Tuple[float, float]]

DEFAULT_MAX_EVALUATIONS = 1000
NEWTON_MAX_ITERATIONS = 100
NEWTON_DECIMALS = 5
MAX_STEP_HALVINGS = 60

# Bracket expansion ladder (percentage-scaled rates)
STEP_SIZE = 100.0
STEP_CEILING = 10_000.0
DOUBLING_CEILING = 1_000_000.0


class EvaluationCounter:
    """Counts objective evaluations and enforces an upper limit."""

    def __init__(self, limit: int = DEFAULT_MAX_EVALUATIONS):
        self.limit = limit
        self.count = 0

    def tick(self) -> None:
        self.count += 1
        if self.count > self.limit:
            raise EvaluationBudgetExceededError(
                f"Objective evaluated more than {self.limit} times without a result"
            )

    def counted(self, func: Func) -> Func:
        """Wrap func so every call is counted."""

        def wrapper(x: float) -> float:
            self.tick()
            return func(x)

        return wrapper


@dataclass
class RootResult:
    root: Optional[float]
    iterations: int
    converged: bool
    method: str
    evaluations: int = 0


def bisect(
    func: Func,
    low: float,
    high: float,
    precision: float,
    counter: Optional[EvaluationCounter] = None,
) -> RootResult:
    """
    Find a zero of func inside [low, high] by repeated halving.

    Args:
        func: Continuous objective
        low: Lower end of the interval
        high: Upper end of the interval
        precision: Stop once the interval is no wider than this
        counter: Optional counter reported back in the result

    Returns:
        RootResult with the midpoint of the final interval

    Raises:
        NoBracketFoundError: If func does not change sign over the interval.
            A nan at the lower end is not a sign; low moves up until it has one.
    """
    start_count = counter.count if counter is not None else 0

    def _result(root: float, iterations: int) -> RootResult:
        used = counter.count - start_count if counter is not None else 0
        return RootResult(root, iterations, True, "bisect", used)

    f_low = func(low)
    f_high = func(high)
    if f_low == 0.0:
        return _result(low, 0)
    if f_high == 0.0:
        return _result(high, 0)

    iteration = 0

    # An undefined value at the lower end (e.g. NPV at -100%) carries no sign;
    # move low up to the midpoint until it does
    while math.isnan(f_low) and (high - low) > precision:
        iteration += 1
        low = (low + high) / 2
        f_low = func(low)
        if f_low == 0.0:
            return _result(low, iteration)

    if not f_low * f_high < 0:
        raise NoBracketFoundError(
            f"No sign change between {low} and {high}, cannot find zero"
        )

    while (high - low) > precision:
        iteration += 1
        mid = (low + high) / 2
        f_mid = func(mid)

        if f_mid == 0.0:
            return _result(mid, iteration)
        if f_low * f_mid < 0:
            high, f_high = mid, f_mid
        else:
            low, f_low = mid, f_mid

    logger.debug("Bisection finished after %s iterations on [%s, %s]", iteration, low, high)
    return _result((low + high) / 2, iteration)


def expand_bracket(
    func: Func,
    low: float,
    high: float,
    step: float = STEP_SIZE,
    step_ceiling: float = STEP_CEILING,
    doubling_ceiling: float = DOUBLING_CEILING,
) -> Tuple[float, float]:
    """
    Grow the upper bound until func(high) is no longer positive.

    The upper bound moves in fixed steps up to step_ceiling, then restarts
    from step_ceiling and doubles until it passes doubling_ceiling. The returned interval is not checked
    for a sign change; bisect does that.
    """
    f_high = func(high)

    while f_high > 0 and high < step_ceiling:
        high += step
        f_high = func(high)

    if f_high > 0:
        logger.debug("Step ladder exhausted at %s, switching to doubling", high)
        high = step_ceiling
        f_high = func(high)
        while f_high > 0 and high < doubling_ceiling:
            high *= 2
            f_high = func(high)

    return low, high


def newton_raphson(
    func_and_deriv: FuncDeriv,
    initial_guess: float,
    *,
    max_iter: int = NEWTON_MAX_ITERATIONS,
    decimals: int = NEWTON_DECIMALS,
) -> RootResult:
    """
    Newton-Raphson root finder.

    Stops when the previous and current guesses agree once rounded to
    `decimals` places. If an update lands where the objective is not
    finite, the step is halved until it lands back inside the domain.

    Parameters
    ----------
    func_and_deriv:
        Callable returning (value, derivative) at a given point.
    initial_guess:
        Starting point for the iteration.
    max_iter:
        Maximum number of updates before giving up.
    decimals:
        Number of decimal places two successive guesses must agree on.
    """
    x = float(initial_guess)
    value, deriv = func_and_deriv(x)
    evaluations = 1
    iteration = 0

    for iteration in range(1, max_iter + 1):
        logger.debug("Newton iter %s: x=%s value=%s deriv=%s", iteration, x, value, deriv)

        if not (math.isfinite(value) and math.isfinite(deriv)) or deriv == 0.0:
            logger.debug("Newton stopped at iter %s: unusable value or derivative", iteration)
            break

        step = value / deriv
        x_new = x - step
        for _ in range(MAX_STEP_HALVINGS):
            new_value, new_deriv = func_and_deriv(x_new)
            evaluations += 1
            if math.isfinite(new_value):
                break
            step /= 2
            x_new = x - step
        else:
            logger.debug("Newton step could not be brought back into the domain")
            break

        if round(x, decimals) == round(x_new, decimals):
            return RootResult(x_new, iteration, True, "newton", evaluations)
        # The pair computed for the domain check is the next iteration's input
        x, value, deriv = x_new, new_value, new_deriv

    return RootResult(None, iteration, False, "newton", evaluations)
