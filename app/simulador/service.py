"""
Simulation pipeline and history persistence.

calculate_simulation runs Validate -> DeriveFinancedAmount -> ConvertRate ->
GenerateSchedule -> ComputeIndicators. It is a pure function of its input:
no I/O, no shared state. Persistence helpers take the owner explicitly.
"""
import json
from typing import Any, Dict, List, Optional, Union

from sqlalchemy.orm import Session

from app.core.logger import logger, audit_log, get_logger_with_correlation
from app.simulador import indicators, schedule
from app.simulador.exceptions import ComputationFailure, PreconditionViolation, ValidationFailure
from app.simulador.models import Simulation
from app.simulador.rates import to_periodic_rate
from app.simulador.schemas import (
    ScheduleEntry,
    SimulationRecord,
    SimulationRequest,
    SimulationResponse,
)
from app.simulador.validator import validate


def derive_financed_amount(record: SimulationRecord) -> float:
    return schedule.money(record.property_value - record.down_payment - record.subsidy_amount)


def calculate_simulation(
    data: Union[SimulationRequest, SimulationRecord],
    correlation_id: Optional[str] = None,
) -> SimulationRecord:
    """
    Runs the full pipeline and returns a populated copy of the record.

    Raises ValidationFailure with every violated rule when the input is
    invalid, or ComputationFailure when arithmetic breaks down. No partial
    result is ever returned.
    """
    log = get_logger_with_correlation(correlation_id) if correlation_id else logger
    record = data.to_record() if isinstance(data, SimulationRequest) else data

    verdict = validate(record)
    if not verdict.valid:
        log.warning(f"Simulation rejected: {verdict.errors}")
        raise ValidationFailure(verdict.errors)

    record = record.model_copy(update={"financed_amount": derive_financed_amount(record)})

    try:
        rate = to_periodic_rate(record.interest_rate, record.rate_kind)
        installment, entries, total_interest = schedule.generate(record, rate)
        record = record.model_copy(update={
            "monthly_installment": installment,
            "amortization_schedule": entries,
            "total_interest": total_interest,
        })

        tcea, van, tir = indicators.compute(record)
    except ComputationFailure as e:
        log.error(f"Simulation computation failed at stage '{e.stage}': {e.message}")
        raise

    log.info(
        f"Simulation calculated: financed_amount={record.financed_amount}, "
        f"term={record.term_months}, installment={installment}, tcea={tcea}"
    )

    return record.model_copy(update={
        "effective_annual_cost_rate": tcea,
        "net_present_value": van,
        "internal_rate_of_return": tir,
    })


def to_full_dict(record: SimulationRecord) -> Dict[str, Any]:
    """JSON-ready projection of every field, schedule included."""
    return record.model_dump(mode="json")


def to_persisted_dict(record: SimulationRecord, user_id: str) -> Dict[str, Any]:
    """Projection handed to storage or export: the full record tagged with its owner."""
    payload = to_full_dict(record)
    payload.pop("simulation_id", None)
    payload.pop("created_at", None)
    payload["user_id"] = user_id
    return payload


def record_from_model(simulation: Simulation) -> SimulationResponse:
    """Rebuilds the result record from a stored row."""
    entries = tuple(ScheduleEntry(**item) for item in json.loads(simulation.amortization_schedule))
    return SimulationResponse(
        simulation_id=simulation.id,
        created_at=simulation.created_at,
        client_id=simulation.client_id,
        client_name=simulation.client_name,
        target_program=simulation.target_program,
        financial_entity=simulation.financial_entity,
        property_value=simulation.property_value,
        down_payment=simulation.down_payment,
        subsidy_amount=simulation.subsidy_amount,
        financed_amount=simulation.financed_amount,
        rate_kind=simulation.rate_kind,
        interest_rate=simulation.interest_rate,
        term_months=simulation.term_months,
        grace_period_months=simulation.grace_period_months,
        payment_start_date=simulation.payment_start_date,
        life_insurance=simulation.life_insurance,
        property_insurance=simulation.property_insurance,
        appraisal_fee=simulation.appraisal_fee,
        notarial_fee=simulation.notarial_fee,
        disbursement_commission=simulation.disbursement_commission,
        monthly_installment=simulation.monthly_installment,
        total_interest=simulation.total_interest,
        amortization_schedule=entries,
        effective_annual_cost_rate=simulation.effective_annual_cost_rate,
        net_present_value=simulation.net_present_value,
        internal_rate_of_return=simulation.internal_rate_of_return,
    )


def save_simulation(
    db: Session,
    record: SimulationRecord,
    user_id: str,
    correlation_id: Optional[str] = None,
) -> Simulation:
    """
    Persists a calculated simulation for its owner.
    """
    verdict = validate(record)
    if not verdict.valid:
        raise ValidationFailure(verdict.errors)
    if not record.is_calculated:
        raise PreconditionViolation("Only calculated simulations can be saved")

    simulation = Simulation(
        user_id=user_id,
        client_id=record.client_id,
        client_name=record.client_name.strip(),
        target_program=record.target_program,
        financial_entity=record.financial_entity,
        property_value=record.property_value,
        down_payment=record.down_payment,
        subsidy_amount=record.subsidy_amount,
        financed_amount=record.financed_amount,
        rate_kind=record.rate_kind.value,
        interest_rate=record.interest_rate,
        term_months=record.term_months,
        grace_period_months=record.grace_period_months,
        payment_start_date=record.payment_start_date,
        life_insurance=record.life_insurance,
        property_insurance=record.property_insurance,
        appraisal_fee=record.appraisal_fee,
        notarial_fee=record.notarial_fee,
        disbursement_commission=record.disbursement_commission,
        monthly_installment=record.monthly_installment,
        total_interest=record.total_interest,
        effective_annual_cost_rate=record.effective_annual_cost_rate,
        net_present_value=record.net_present_value,
        internal_rate_of_return=record.internal_rate_of_return,
        amortization_schedule=json.dumps(to_full_dict(record)["amortization_schedule"]),
        correlation_id=correlation_id,
    )

    db.add(simulation)
    db.commit()
    db.refresh(simulation)

    audit_log(
        action="simulation_saved",
        user=user_id,
        resource=f"simulation_id={simulation.id}",
        details={"correlation_id": correlation_id, "financed_amount": record.financed_amount}
    )
    logger.info(f"Simulation persisted: id={simulation.id}")

    return simulation


def list_simulations(db: Session, user_id: str) -> List[Simulation]:
    """Owner's history, newest first."""
    return db.query(Simulation).filter(
        Simulation.user_id == user_id
    ).order_by(Simulation.created_at.desc(), Simulation.id.desc()).all()


def get_simulation(db: Session, simulation_id: int, user_id: str) -> Optional[Simulation]:
    """Returns None when the simulation does not exist or belongs to someone else."""
    return db.query(Simulation).filter(
        Simulation.id == simulation_id,
        Simulation.user_id == user_id
    ).first()


def delete_simulation(db: Session, simulation_id: int, user_id: str) -> Optional[Simulation]:
    simulation = get_simulation(db, simulation_id, user_id)
    if simulation:
        db.delete(simulation)
        db.commit()
        audit_log(action="simulation_deleted", user=user_id, resource=f"simulation_id={simulation_id}")
    return simulation
