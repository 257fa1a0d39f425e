"""
Summary indicators derived from a completed schedule: TCEA, VAN and TIR.
"""
import math
from typing import Tuple

from app.core.config import settings
from app.simulador.exceptions import ComputationFailure, PreconditionViolation
from app.simulador.rates import tea_to_tem
from app.simulador.schedule import money
from app.simulador.schemas import RateKind, SimulationRecord


def effective_annual_cost_rate(record: SimulationRecord) -> float:
    """
    Simplified all-in cost ratio: everything the borrower pays against the property price.
    Not an annualized rate over cash-flow timing.
    """
    installments = math.fsum(entry.total_installment for entry in record.amortization_schedule)
    total_cash_out = installments + record.upfront_costs + record.down_payment
    return (total_cash_out / record.property_value - 1) * 100


def net_present_value(record: SimulationRecord, annual_discount_rate: float) -> float:
    """Installments discounted monthly at a fixed policy rate, net of the financed amount."""
    monthly_discount = annual_discount_rate / 12
    van = -record.financed_amount
    for entry in record.amortization_schedule:
        van += entry.total_installment / (1 + monthly_discount) ** entry.period_number
    return van


def internal_rate_of_return(record: SimulationRecord) -> float:
    """
    Annualized approximation of the loan's own periodic rate.

    This does not solve the IRR equation over the cash flows; callers must not
    treat it as a root-solved internal rate of return.
    """
    if record.rate_kind == RateKind.ANNUAL_EFFECTIVE:
        return tea_to_tem(record.interest_rate) * 12 * 100
    return record.interest_rate * 12


def compute(record: SimulationRecord) -> Tuple[float, float, float]:
    """Returns (tcea, van, tir), each rounded to two decimals."""
    if not record.amortization_schedule:
        raise PreconditionViolation("Indicators requested before the schedule was generated")

    try:
        tcea = effective_annual_cost_rate(record)
        van = net_present_value(record, settings.VAN_ANNUAL_DISCOUNT_RATE)
        tir = internal_rate_of_return(record)
    except (OverflowError, ZeroDivisionError) as e:
        raise ComputationFailure("indicators", str(e)) from e

    for name, value in (("tcea", tcea), ("van", van), ("tir", tir)):
        if not math.isfinite(value):
            raise ComputationFailure("indicators", f"{name} is not finite")

    return money(tcea), money(van), money(tir)
