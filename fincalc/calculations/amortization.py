"""
Loan Amortization Calculations

Level-payment loan formulas and the matching amortization schedule.
Rates are in percent.
"""

from datetime import date
from typing import Dict, List, Optional

from dateutil.relativedelta import relativedelta

from fincalc.calculations.rounding import round_half_up


def _payment_factor(rate_per_period: float, num_payments: int, pay_at_beginning: bool) -> float:
    """Payment per unit of principal for a level-payment loan."""
    if rate_per_period == 0:
        return 1 / num_payments

    # Paying at the start of each period skips one interest accrual
    accruals = num_payments - 1 if pay_at_beginning else num_payments
    numerator = rate_per_period * (1 + rate_per_period) ** accruals
    denominator = (1 + rate_per_period) ** num_payments - 1
    return numerator / denominator


def amortization_payment(
    principal: float,
    rate: float,
    period: int,
    in_months: bool = False,
    pay_at_beginning: bool = False,
) -> float:
    """
    Calculate the monthly payment that amortizes a loan.

    Args:
        principal: Loan principal amount
        rate: Annual interest rate in percent (e.g., 7.5)
        period: Loan term, in years unless in_months is set
        in_months: Whether period is expressed in months
        pay_at_beginning: Payments are made at the start of each month

    Returns:
        Monthly payment rounded to cents
    """
    num_payments = period if in_months else period * 12
    if num_payments <= 0:
        raise ValueError("Loan term must be positive")

    monthly_rate = rate / 12 / 100
    payment = principal * _payment_factor(monthly_rate, num_payments, pay_at_beginning)
    return round_half_up(payment, 2)


def calculate_pmt(rate: float, num_payments: int, principal: float) -> float:
    """
    Calculate loan payment with a cash-flow sign convention.

    A loan received (positive principal) gives a negative payment.

    Args:
        rate: Interest rate per period in percent
        num_payments: Number of payments
        principal: Loan amount

    Returns:
        Payment per period rounded to cents
    """
    if num_payments <= 0:
        raise ValueError("Number of payments must be positive")

    rate = rate / 100
    if rate == 0:
        return round_half_up(-principal / num_payments, 2)

    pmt = -(principal * rate) / (1 - (1 + rate) ** -num_payments)
    return round_half_up(pmt, 2)


def generate_amortization_schedule(
    principal: float,
    rate: float,
    num_payments: int,
    start_date: Optional[date] = None,
    pay_at_beginning: bool = False,
) -> List[Dict]:
    """
    Generate a monthly amortization schedule.

    Args:
        principal: Loan principal amount
        rate: Annual interest rate in percent
        num_payments: Number of monthly payments
        start_date: Date of first payment (defaults to today)
        pay_at_beginning: Payments are made at the start of each month

    Returns:
        List of amortization rows
    """
    if num_payments <= 0:
        raise ValueError("Number of payments must be positive")

    monthly_rate = rate / 12 / 100
    payment = principal * _payment_factor(monthly_rate, num_payments, pay_at_beginning)

    if start_date is None:
        start_date = date.today()

    schedule = []
    balance = principal

    for period in range(1, num_payments + 1):
        # No interest has accrued yet when the first payment is up front
        if pay_at_beginning and period == 1:
            interest = 0.0
        else:
            interest = balance * monthly_rate

        principal_pmt = min(payment - interest, balance)
        if period == num_payments:
            principal_pmt = balance
        ending_balance = balance - principal_pmt

        schedule.append(
            {
                "period": period,
                "date": (start_date + relativedelta(months=period - 1)).isoformat(),
                "beginning_balance": round_half_up(balance, 2),
                "payment": round_half_up(principal_pmt + interest, 2),
                "interest": round_half_up(interest, 2),
                "principal": round_half_up(principal_pmt, 2),
                "ending_balance": round_half_up(max(0.0, ending_balance), 2),
            }
        )

        balance = max(0.0, ending_balance)

    return schedule


def calculate_total_interest(schedule: List[Dict]) -> float:
    """Calculate total interest paid over loan term."""
    return round_half_up(sum(row["interest"] for row in schedule), 2)
