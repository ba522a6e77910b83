"""
Time Value of Money and Return Metrics

Closed-form formulas. Rates are in percent (e.g., 5 for 5%) unless a
function says otherwise, and results are rounded the way the metric is
usually quoted.
"""

import math
from typing import List, Optional, Sequence

from fincalc.calculations.rounding import round_half_up


def calculate_pv(rate: float, cash_flow: float, num_periods: int = 1) -> float:
    """
    Calculate present value of a single future cash flow.

    Args:
        rate: Discount rate per period in percent
        cash_flow: Cash flow received after num_periods
        num_periods: Number of periods (default 1)

    Returns:
        Present value rounded to cents
    """
    pv = cash_flow / (1 + rate / 100) ** num_periods
    return round_half_up(pv, 2)


def calculate_fv(rate: float, cash_flow: float, num_periods: int) -> float:
    """Calculate future value of a present cash flow, rounded to cents."""
    fv = cash_flow * (1 + rate / 100) ** num_periods
    return round_half_up(fv, 2)


def calculate_npv(cash_flows: Sequence[float], rate: float) -> float:
    """
    Calculate NPV (Net Present Value) of periodic cash flows.

    Args:
        cash_flows: Cash flows, the first one at period 0 (undiscounted)
        rate: Discount rate per period in percent

    Returns:
        NPV rounded to cents
    """
    if not cash_flows:
        return 0.0

    npv = cash_flows[0]
    for period, cf in enumerate(cash_flows[1:], start=1):
        npv += cf / (1 + rate / 100) ** period
    return round_half_up(npv, 2)


def payback_period(num_periods: int, cash_flows: Sequence[float]) -> Optional[float]:
    """
    Calculate payback period.

    With num_periods == 0 the cash flows are even: cash_flows holds the
    initial investment and the constant per-period inflow. Otherwise
    cash_flows holds the initial investment followed by each period's
    inflow.

    Returns:
        Number of periods to recover the investment, or None if it is
        never recovered
    """
    if len(cash_flows) < 2:
        raise ValueError("Payback period needs an investment and at least one inflow")

    if num_periods == 0:
        if cash_flows[1] == 0:
            raise ValueError("Even cash flow must be non-zero")
        return abs(cash_flows[0]) / cash_flows[1]

    cumulative = cash_flows[0]
    periods = 1.0
    for cf in cash_flows[1:]:
        cumulative += cf
        if cumulative > 0:
            # Fraction of this period still needed, counted back from its end
            return periods + (cumulative - cf) / cf
        periods += 1
    return None


def calculate_roi(initial_investment: float, earnings: float) -> float:
    """Calculate return on investment in percent, rounded to 2 decimals."""
    cost = abs(initial_investment)
    if cost == 0:
        raise ValueError("Initial investment must be non-zero")
    return round_half_up((earnings - cost) / cost * 100, 2)


def profitability_index(rate: float, cash_flows: Sequence[float]) -> float:
    """
    Calculate profitability index.

    Args:
        rate: Discount rate in percent
        cash_flows: Initial investment followed by the periodic inflows

    Returns:
        Present value of inflows divided by the investment, 2 decimals
    """
    if not cash_flows or cash_flows[0] == 0:
        raise ValueError("Initial investment must be non-zero")

    total_pv = sum(
        cf / (1 + rate / 100) ** period
        for period, cf in enumerate(cash_flows[1:], start=1)
    )
    return round_half_up(total_pv / abs(cash_flows[0]), 2)


def discount_factors(rate: float, num_periods: int) -> List[float]:
    """
    Discount factors for periods 0 .. num_periods - 2.

    Each factor is rounded up to 3 decimals.
    """
    return [
        math.ceil(1 / (1 + rate / 100) ** period * 1000) / 1000
        for period in range(num_periods - 1)
    ]


def compound_interest(
    rate: float, compoundings: int, principal: float, num_periods: float
) -> float:
    """
    Calculate the compounded balance.

    Args:
        rate: Annual rate in percent
        compoundings: Compounding events per period
        principal: Starting balance
        num_periods: Number of periods

    Returns:
        Ending balance rounded to cents
    """
    balance = principal * (1 + (rate / 100) / compoundings) ** (compoundings * num_periods)
    return round_half_up(balance, 2)


def calculate_cagr(beginning_value: float, ending_value: float, num_periods: float) -> float:
    """Calculate compound annual growth rate in percent, 2 decimals."""
    if beginning_value == 0 or num_periods == 0:
        raise ValueError("Beginning value and number of periods must be non-zero")
    cagr = (ending_value / beginning_value) ** (1 / num_periods) - 1
    return round_half_up(cagr * 100, 2)


def leverage_ratio(total_liabilities: float, total_debts: float, total_income: float) -> float:
    """Calculate leverage ratio ((liabilities + debts) / income)."""
    if total_income == 0:
        raise ValueError("Total income must be non-zero")
    return (total_liabilities + total_debts) / total_income


def rule_of_72(rate: float) -> float:
    """Approximate number of periods to double at a rate in percent."""
    if rate == 0:
        raise ValueError("Rate must be non-zero")
    return 72 / rate


def calculate_wacc(
    equity_value: float,
    debt_value: float,
    cost_of_equity: float,
    cost_of_debt: float,
    tax_rate: float,
) -> float:
    """
    Calculate weighted average cost of capital.

    Args:
        equity_value: Market value of equity
        debt_value: Market value of debt
        cost_of_equity: Cost of equity in percent
        cost_of_debt: Pre-tax cost of debt in percent
        tax_rate: Corporate tax rate in percent

    Returns:
        WACC in percent rounded to 1 decimal
    """
    total_value = equity_value + debt_value
    if total_value == 0:
        raise ValueError("Total capital must be non-zero")

    equity_weight = equity_value / total_value
    debt_weight = debt_value / total_value
    wacc = equity_weight * cost_of_equity / 100 + (
        debt_weight * cost_of_debt / 100
    ) * (1 - tax_rate / 100)
    return round_half_up(wacc * 100, 1)


def inflation_adjusted_return(investment_return: float, inflation_rate: float) -> float:
    """
    Calculate inflation-adjusted return.

    Args:
        investment_return: Nominal return as decimal (0.08 for 8%)
        inflation_rate: Inflation as decimal

    Returns:
        Real return in percent (unrounded)
    """
    return 100 * (((1 + investment_return) / (1 + inflation_rate)) - 1)


def calculate_capm(risk_free_rate: float, beta: float, market_return: float) -> float:
    """Expected return as decimal from rates given in percent."""
    return risk_free_rate / 100 + beta * (market_return / 100 - risk_free_rate / 100)


def stock_pv(growth_rate: float, cost_of_equity: float, dividend: float) -> int:
    """
    Value a stock whose dividend grows at a constant rate forever.

    Rates are in percent; dividend is the most recent one paid. Result is
    rounded to a whole currency unit.
    """
    if cost_of_equity == growth_rate:
        raise ValueError("Cost of equity must differ from growth rate")
    value = (dividend * (1 + growth_rate / 100)) / (cost_of_equity / 100 - growth_rate / 100)
    return int(round_half_up(value))
