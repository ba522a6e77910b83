"""
Financial Calculation Engine

Closed-form time-value-of-money formulas plus the numerical solvers behind
IRR and XIRR.
"""

from fincalc.calculations import amortization, errors, irr, rounding, solvers, tvm

__all__ = ["amortization", "errors", "irr", "rounding", "solvers", "tvm"]
