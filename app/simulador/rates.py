"""
Interest rate conversion to the effective monthly rate used by the schedule.
"""
import math

from app.simulador.exceptions import ComputationFailure, PreconditionViolation
from app.simulador.schemas import RateKind


def tea_to_tem(annual_rate_percent: float) -> float:
    """Effective annual rate (percent) to effective monthly rate (fraction)."""
    return (1 + annual_rate_percent / 100) ** (1 / 12) - 1


def to_periodic_rate(rate_percent: float, kind: RateKind) -> float:
    """
    Returns the periodic (monthly) rate as a unitless fraction.

    With MONTHLY_EFFECTIVE the supplied figure is already the monthly percentage
    and is used as-is.
    """
    try:
        kind = RateKind(kind)
    except ValueError:
        raise PreconditionViolation(f"Unsupported rate kind: {kind!r}")

    if kind == RateKind.MONTHLY_EFFECTIVE:
        rate = rate_percent / 100
    else:
        try:
            rate = tea_to_tem(rate_percent)
        except (OverflowError, ValueError) as e:
            raise ComputationFailure("rate", f"cannot convert annual rate {rate_percent}: {e}") from e

    if isinstance(rate, complex) or not math.isfinite(rate):
        raise ComputationFailure("rate", f"periodic rate is not finite for {rate_percent}% ({kind.value})")
    return rate
