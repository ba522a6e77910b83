"""
Financial calculation API endpoints.

These endpoints accept inputs and return calculated results.
Rates follow the library conventions: percent for IRR, NPV, PV, FV and
loans, decimal for the XIRR guess.
"""

from fastapi import APIRouter, HTTPException
from pydantic import BaseModel
from typing import List, Optional
from datetime import date

from fincalc.calculations import amortization, irr, tvm
from fincalc.calculations.rounding import round_half_up
from fincalc.config import get_settings

router = APIRouter()
settings = get_settings()


class IRRInput(BaseModel):
    """Input for IRR calculation."""

    cash_flows: List[float]
    max_evaluations: Optional[int] = None


class IRRResponse(BaseModel):
    """Response with IRR calculation."""

    irr: float
    multiple: float
    profit: float


@router.post("/irr", response_model=IRRResponse)
async def calculate_irr_endpoint(inputs: IRRInput):
    """Calculate IRR for periodic cash flows."""
    max_evaluations = inputs.max_evaluations or settings.irr_max_evaluations

    try:
        irr_val = irr.calculate_irr(inputs.cash_flows, max_evaluations)
        return IRRResponse(
            irr=irr_val,
            multiple=irr.calculate_multiple(inputs.cash_flows),
            profit=irr.calculate_profit(inputs.cash_flows),
        )
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))


class XIRRInput(BaseModel):
    """Input for XIRR calculation."""

    cash_flows: List[float]
    dates: List[date]
    guess: Optional[float] = None


class XIRRResponse(BaseModel):
    """Response with XIRR calculation; xirr is null when it did not converge."""

    xirr: Optional[float] = None
    converged: bool


@router.post("/xirr", response_model=XIRRResponse)
async def calculate_xirr_endpoint(inputs: XIRRInput):
    """Calculate XIRR for dated cash flows."""
    guess = settings.xirr_default_guess if inputs.guess is None else inputs.guess

    try:
        xirr_val = irr.calculate_xirr(inputs.cash_flows, inputs.dates, guess)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))

    return XIRRResponse(xirr=xirr_val, converged=xirr_val is not None)


class NPVInput(BaseModel):
    """Input for NPV calculation."""

    rate: float
    cash_flows: List[float]


@router.post("/npv")
async def calculate_npv_endpoint(inputs: NPVInput):
    """Calculate NPV of periodic cash flows."""
    return {"npv": tvm.calculate_npv(inputs.cash_flows, inputs.rate)}


class SingleCashFlowInput(BaseModel):
    """Input for PV / FV of a single cash flow."""

    rate: float
    cash_flow: float
    num_periods: int = 1


@router.post("/pv")
async def calculate_pv_endpoint(inputs: SingleCashFlowInput):
    """Discount a single cash flow to present value."""
    return {"pv": tvm.calculate_pv(inputs.rate, inputs.cash_flow, inputs.num_periods)}


@router.post("/fv")
async def calculate_fv_endpoint(inputs: SingleCashFlowInput):
    """Compound a single cash flow to future value."""
    return {"fv": tvm.calculate_fv(inputs.rate, inputs.cash_flow, inputs.num_periods)}


class PMTInput(BaseModel):
    """Input for loan payment calculation."""

    rate: float
    num_payments: int
    principal: float


@router.post("/pmt")
async def calculate_pmt_endpoint(inputs: PMTInput):
    """Calculate payment per period with cash-flow sign convention."""
    try:
        pmt = amortization.calculate_pmt(inputs.rate, inputs.num_payments, inputs.principal)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return {"pmt": pmt}


class AmortizationInput(BaseModel):
    """Input for amortization calculation."""

    principal: float
    annual_rate: float
    term_months: int
    start_date: Optional[date] = None
    pay_at_beginning: bool = False


@router.post("/amortization")
async def calculate_amortization(inputs: AmortizationInput):
    """Generate loan amortization schedule."""
    try:
        payment = amortization.amortization_payment(
            inputs.principal,
            inputs.annual_rate,
            inputs.term_months,
            in_months=True,
            pay_at_beginning=inputs.pay_at_beginning,
        )
        schedule = amortization.generate_amortization_schedule(
            principal=inputs.principal,
            rate=inputs.annual_rate,
            num_payments=inputs.term_months,
            start_date=inputs.start_date,
            pay_at_beginning=inputs.pay_at_beginning,
        )
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))

    return {
        "payment": payment,
        "schedule": schedule,
        "total_interest": amortization.calculate_total_interest(schedule),
        "total_principal": round_half_up(sum(row["principal"] for row in schedule), 2),
    }
