"""
Unit tests for the simulation engine.
Validates rate conversion, schedule generation, grace periods and indicators.
"""
import math
from datetime import date

import pytest

from app.simulador import indicators, schedule
from app.simulador.exceptions import ComputationFailure, PreconditionViolation, ValidationFailure
from app.simulador.rates import to_periodic_rate
from app.simulador.schemas import RateKind, SimulationRecord, SimulationRequest
from app.simulador.service import calculate_simulation
from app.simulador.validator import validate


def make_record(**overrides) -> SimulationRecord:
    data = {
        "client_name": "María Quispe",
        "target_program": "miVivienda",
        "financial_entity": "bcp",
        "property_value": 1000.0,
        "down_payment": 0.0,
        "rate_kind": RateKind.MONTHLY_EFFECTIVE,
        "interest_rate": 1.0,
        "term_months": 2,
        "payment_start_date": date(2024, 1, 15),
    }
    data.update(overrides)
    return SimulationRecord(**data)


def test_two_period_reference_scenario():
    """1000 at 1% monthly over two periods."""
    result = calculate_simulation(make_record())
    first, second = result.amortization_schedule

    assert result.financed_amount == 1000.0
    assert result.monthly_installment == 507.51

    assert first.opening_balance == 1000.00
    assert first.interest_portion == 10.00
    assert first.principal_portion == 497.51
    assert first.closing_balance == 502.49

    assert second.opening_balance == 502.49
    assert second.interest_portion == 5.02
    assert second.principal_portion == 502.49
    assert second.closing_balance == 0.0

    assert result.total_interest == 15.02


def test_reference_scenario_indicators():
    result = calculate_simulation(make_record())

    # (1015.02 / 1000 - 1) * 100
    assert result.effective_annual_cost_rate == 1.5
    assert result.net_present_value == pytest.approx(2.47, abs=0.01)
    assert result.internal_rate_of_return == 12.0


def test_financed_amount_subtracts_down_payment_and_subsidy():
    result = calculate_simulation(make_record(
        property_value=300000.0, down_payment=30000.0, subsidy_amount=25000.0,
        rate_kind=RateKind.ANNUAL_EFFECTIVE, interest_rate=9.5, term_months=240,
    ))
    assert result.financed_amount == 245000.0
    assert result.amortization_schedule[0].opening_balance == 245000.0


@pytest.mark.parametrize("principal, kind, rate, term", [
    (1000.0, RateKind.MONTHLY_EFFECTIVE, 1.0, 2),
    (50000.0, RateKind.ANNUAL_EFFECTIVE, 15.0, 12),
    (180000.0, RateKind.ANNUAL_EFFECTIVE, 9.5, 240),
    (250000.0, RateKind.MONTHLY_EFFECTIVE, 0.8, 360),
])
def test_schedule_chains_and_fully_amortizes(principal: float, kind: RateKind, rate: float, term: int):
    result = calculate_simulation(make_record(
        property_value=principal, rate_kind=kind, interest_rate=rate, term_months=term,
    ))
    entries = result.amortization_schedule

    assert len(entries) == term
    assert [e.period_number for e in entries] == list(range(1, term + 1))
    for current, following in zip(entries, entries[1:]):
        assert current.closing_balance == following.opening_balance
    for entry in entries:
        assert entry.closing_balance == pytest.approx(entry.opening_balance - entry.principal_portion, abs=0.02)
        assert entry.base_installment == pytest.approx(entry.interest_portion + entry.principal_portion, abs=0.02)
    assert abs(entries[-1].closing_balance) <= 0.01


def test_total_interest_is_sum_of_interest_portions():
    result = calculate_simulation(make_record(
        property_value=120000.0, rate_kind=RateKind.ANNUAL_EFFECTIVE, interest_rate=11.0, term_months=180,
    ))
    assert result.total_interest == round(math.fsum(e.interest_portion for e in result.amortization_schedule), 2)


def test_grace_period_pays_interest_only():
    result = calculate_simulation(make_record(
        property_value=100000.0, rate_kind=RateKind.ANNUAL_EFFECTIVE, interest_rate=10.0,
        term_months=24, grace_period_months=6,
    ))
    entries = result.amortization_schedule

    for entry in entries[:6]:
        assert entry.principal_portion == 0.0
        assert entry.base_installment == entry.interest_portion
        assert entry.opening_balance == entry.closing_balance == 100000.0

    after_grace = {e.base_installment for e in entries[6:]}
    assert len(after_grace) == 1
    for current, following in zip(entries, entries[1:]):
        assert current.closing_balance == following.opening_balance


def test_grace_period_does_not_shorten_amortizing_term():
    base = make_record(property_value=100000.0, interest_rate=1.0, term_months=24)
    without_grace = calculate_simulation(base)
    with_grace = calculate_simulation(base.model_copy(update={"grace_period_months": 3}))

    assert with_grace.monthly_installment == without_grace.monthly_installment
    assert with_grace.amortization_schedule[3].base_installment == without_grace.amortization_schedule[0].base_installment


def test_insurance_is_added_to_every_installment():
    result = calculate_simulation(make_record(life_insurance=20.0, property_insurance=15.0))

    assert result.monthly_installment == 542.51
    for entry in result.amortization_schedule:
        assert entry.insurance_add_on == 35.0
        assert entry.total_installment == pytest.approx(entry.base_installment + 35.0, abs=0.02)


def test_upfront_costs_and_down_payment_raise_tcea():
    plain = calculate_simulation(make_record(property_value=2000.0, down_payment=1000.0))
    loaded = calculate_simulation(make_record(
        property_value=2000.0, down_payment=1000.0,
        appraisal_fee=50.0, notarial_fee=30.0, disbursement_commission=20.0,
    ))
    # (1015.02 + 1000) / 2000 - 1
    assert plain.effective_annual_cost_rate == 0.75
    # (1015.02 + 100 + 1000) / 2000 - 1
    assert loaded.effective_annual_cost_rate == 5.75


def test_tir_from_annual_effective_rate():
    result = calculate_simulation(make_record(
        property_value=100000.0, rate_kind=RateKind.ANNUAL_EFFECTIVE, interest_rate=12.0, term_months=120,
    ))
    # (1.12^(1/12) - 1) * 12 * 100
    assert result.internal_rate_of_return == 11.39


def test_due_dates_advance_by_calendar_month():
    result = calculate_simulation(make_record(term_months=3, payment_start_date=date(2024, 1, 31)))
    assert [e.due_date for e in result.amortization_schedule] == [
        date(2024, 2, 29),
        date(2024, 3, 31),
        date(2024, 4, 30),
    ]


def test_pipeline_is_deterministic():
    record = make_record(
        property_value=350000.0, down_payment=50000.0, subsidy_amount=10000.0,
        rate_kind=RateKind.ANNUAL_EFFECTIVE, interest_rate=8.75, term_months=300, grace_period_months=2,
        life_insurance=45.5, property_insurance=30.25, appraisal_fee=400.0,
    )
    assert calculate_simulation(record).model_dump() == calculate_simulation(record).model_dump()


def test_pipeline_accepts_request_payload():
    request = SimulationRequest(
        client_name="Jorge Salas",
        target_program="techoPropio",
        financial_entity="interbank",
        property_value=1000.0,
        rate_kind=RateKind.MONTHLY_EFFECTIVE,
        interest_rate=1.0,
        term_months=2,
        payment_start_date=date(2024, 5, 1),
    )
    result = calculate_simulation(request, correlation_id="corr-test")
    assert result.monthly_installment == 507.51
    assert result.is_calculated


def test_input_record_is_left_untouched():
    record = make_record()
    calculate_simulation(record)
    assert record.monthly_installment is None
    assert record.amortization_schedule == ()


# Validation

def test_valid_record_passes():
    verdict = validate(make_record())
    assert verdict.valid is True
    assert verdict.errors == []


def test_zero_down_payment_is_valid():
    assert validate(make_record(down_payment=0.0)).valid is True


def test_empty_record_reports_every_violation_in_order():
    verdict = validate(SimulationRecord())
    assert verdict.valid is False
    assert verdict.errors == [
        "Client name is required",
        "Target program is required",
        "Property value must be greater than 0",
        "Down payment must be smaller than the property value",
        "Payment start date is required",
        "Interest rate must be greater than 0",
        "Loan term must be greater than 0",
        "Financial entity is required",
    ]


@pytest.mark.parametrize("overrides", [
    {},
    {"client_name": "   "},
    {"interest_rate": 0.0, "term_months": 0},
    {"financial_entity": "", "payment_start_date": None},
])
def test_down_payment_not_below_property_value_always_flagged(overrides):
    verdict = validate(make_record(down_payment=20000.0, property_value=10000.0, **overrides))
    assert verdict.valid is False
    assert "Down payment must be smaller than the property value" in verdict.errors


def test_invalid_input_stops_pipeline():
    with pytest.raises(ValidationFailure) as exc_info:
        calculate_simulation(make_record(down_payment=20000.0, property_value=10000.0))
    assert exc_info.value.errors == ["Down payment must be smaller than the property value"]
    assert "Down payment must be smaller" in str(exc_info.value)


def test_blank_client_name_rejected():
    verdict = validate(make_record(client_name="  "))
    assert verdict.errors == ["Client name is required"]


def test_negative_down_payment_rejected():
    assert "Down payment cannot be negative" in validate(make_record(down_payment=-1.0)).errors


@pytest.mark.parametrize("grace, expected_valid", [
    (0, True),
    (11, True),
    (12, False),
    (-1, False),
])
def test_grace_period_must_be_shorter_than_term(grace: int, expected_valid: bool):
    verdict = validate(make_record(term_months=12, grace_period_months=grace))
    assert verdict.valid is expected_valid


# Stage contracts

def test_monthly_effective_rate_used_as_is():
    assert to_periodic_rate(1.5, RateKind.MONTHLY_EFFECTIVE) == 0.015


def test_annual_effective_rate_converted_to_monthly():
    monthly = to_periodic_rate(12.0, RateKind.ANNUAL_EFFECTIVE)
    assert (1 + monthly) ** 12 == pytest.approx(1.12)


def test_unknown_rate_kind_is_programming_error():
    with pytest.raises(PreconditionViolation):
        to_periodic_rate(12.0, "NOMINAL")


def test_zero_rate_installment_splits_principal_evenly():
    assert schedule.calculate_installment(1200.0, 0.0, 12) == 100.0


def test_schedule_requires_validated_record():
    with pytest.raises(PreconditionViolation):
        schedule.generate(SimulationRecord(), 0.01)


def test_indicators_require_schedule():
    with pytest.raises(PreconditionViolation):
        indicators.compute(make_record())


@pytest.mark.parametrize("overrides, stage", [
    ({"interest_rate": float("inf")}, "rate"),
    ({"rate_kind": RateKind.ANNUAL_EFFECTIVE, "interest_rate": float("inf")}, "rate"),
    ({"property_value": 1e6, "interest_rate": 1000.0, "term_months": 5000}, "schedule"),
    ({"life_insurance": float("inf")}, "indicators"),
])
def test_computation_failure_names_its_stage(overrides, stage: str):
    with pytest.raises(ComputationFailure) as exc_info:
        calculate_simulation(make_record(**overrides))
    assert exc_info.value.stage == stage


def test_plain_string_rate_kind_is_accepted():
    assert to_periodic_rate(1.5, "TEM") == 0.015
    with pytest.raises(ComputationFailure) as exc_info:
        to_periodic_rate(float("inf"), "TEM")
    assert exc_info.value.stage == "rate"


def test_money_normalizes_negative_zero():
    assert math.copysign(1.0, schedule.money(-1e-12)) == 1.0
