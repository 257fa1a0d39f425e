"""
Input validation for simulation records.
Every rule is evaluated; the caller receives all violations at once.
"""
from typing import Callable, List, Tuple

from app.simulador.schemas import SimulationRecord, ValidationResult


def _filled(value: str) -> bool:
    return bool(value and value.strip())


def _grace_within_term(record: SimulationRecord) -> bool:
    # Only meaningful once the term itself is valid
    if record.term_months <= 0:
        return True
    return 0 <= record.grace_period_months < record.term_months


# (message, predicate) pairs, checked in order
RULES: List[Tuple[str, Callable[[SimulationRecord], bool]]] = [
    ("Client name is required", lambda r: _filled(r.client_name)),
    ("Target program is required", lambda r: _filled(r.target_program)),
    ("Property value must be greater than 0", lambda r: r.property_value > 0),
    ("Down payment cannot be negative", lambda r: r.down_payment >= 0),
    ("Down payment must be smaller than the property value", lambda r: r.down_payment < r.property_value),
    ("Payment start date is required", lambda r: r.payment_start_date is not None),
    ("Interest rate must be greater than 0", lambda r: r.interest_rate > 0),
    ("Loan term must be greater than 0", lambda r: r.term_months > 0),
    ("Financial entity is required", lambda r: _filled(r.financial_entity)),
    ("Grace period must be shorter than the loan term", _grace_within_term),
]


def validate(record: SimulationRecord) -> ValidationResult:
    """Checks a candidate record. Never raises."""
    errors = [message for message, check in RULES if not check(record)]
    return ValidationResult(valid=not errors, errors=errors)
