"""
Fixed-installment (French / Price table) amortization schedule.

Formula: I = P * [r * (1+r)^n] / [(1+r)^n - 1]

Principal amortizes over the full term; during a leading grace period only
interest is paid and the balance stays put. Reported figures are rounded to
cents, while the running balance carries full precision into the next period.
"""
import math
from typing import List, Tuple

from dateutil.relativedelta import relativedelta

from app.core.logger import logger
from app.simulador.exceptions import ComputationFailure, PreconditionViolation
from app.simulador.schemas import ScheduleEntry, SimulationRecord


def money(value: float) -> float:
    """Rounds to cents and normalizes negative zero."""
    return round(value, 2) + 0.0


def calculate_installment(principal: float, rate: float, periods: int) -> float:
    """Constant installment for `principal` over `periods` at periodic `rate`."""
    if periods <= 0:
        raise PreconditionViolation(f"Installment requested for {periods} periods")
    if rate == 0:
        return principal / periods

    try:
        factor = (1 + rate) ** periods
    except OverflowError as e:
        raise ComputationFailure("schedule", f"(1+r)^n overflows for r={rate}, n={periods}") from e

    if factor == 1:
        # Rate too small to register in floating point
        return principal / periods

    installment = principal * (rate * factor) / (factor - 1)
    if not math.isfinite(installment):
        raise ComputationFailure("schedule", f"installment is not finite for r={rate}, n={periods}")
    return installment


def generate(
    record: SimulationRecord,
    periodic_rate: float,
) -> Tuple[float, Tuple[ScheduleEntry, ...], float]:
    """
    Builds the period-by-period schedule.

    Returns (monthly_installment, schedule, total_interest). The reported
    monthly installment already includes the recurring insurance add-on.
    """
    if record.payment_start_date is None or record.term_months <= 0:
        raise PreconditionViolation("Schedule requested for a record that did not pass validation")

    principal = record.financed_amount
    periods = record.term_months
    grace = record.grace_period_months
    installment = calculate_installment(principal, periodic_rate, periods)
    add_on = record.monthly_add_on

    schedule: List[ScheduleEntry] = []
    balance = principal

    for period in range(1, periods + 1):
        interest = balance * periodic_rate

        if period <= grace:
            base = interest
            amortization = 0.0
        else:
            base = installment
            amortization = installment - interest

        closing = balance - amortization
        if not math.isfinite(closing):
            raise ComputationFailure("schedule", f"balance is not finite at period {period}")

        schedule.append(ScheduleEntry(
            period_number=period,
            due_date=record.payment_start_date + relativedelta(months=period),
            opening_balance=money(balance),
            base_installment=money(base),
            interest_portion=money(interest),
            principal_portion=money(amortization),
            insurance_add_on=money(add_on),
            total_installment=money(base + add_on),
            closing_balance=money(closing),
        ))

        # Unrounded balance feeds the next period
        balance = closing

    total_interest = money(math.fsum(entry.interest_portion for entry in schedule))
    monthly_installment = money(installment + add_on)

    logger.debug(
        f"Schedule generated: principal={principal}, rate={periodic_rate:.8f}, "
        f"periods={periods}, grace={grace}, installment={monthly_installment}"
    )

    return monthly_installment, tuple(schedule), total_interest
