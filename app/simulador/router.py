"""
FastAPI router for payment-plan simulations.
"""
from typing import Any, Dict, List
from uuid import uuid4

from fastapi import APIRouter, Depends, HTTPException, Header, Response
from sqlalchemy.orm import Session

from app.auth.dependencies import get_current_user
from app.auth.models import User
from app.core.database import get_db
from app.simulador.catalog import list_financial_entities, list_housing_programs
from app.simulador.exceptions import ComputationFailure, ValidationFailure
from app.simulador.schemas import (
    CatalogItem,
    SimulationRecord,
    SimulationRequest,
    SimulationResponse,
    SimulationSummary,
)
from app.simulador.service import (
    calculate_simulation,
    delete_simulation,
    get_simulation,
    list_simulations,
    record_from_model,
    save_simulation,
    to_persisted_dict,
)

router = APIRouter(tags=["Simulator"])


def _run_pipeline(data: SimulationRequest, correlation_id: str) -> SimulationRecord:
    try:
        return calculate_simulation(data, correlation_id)
    except ValidationFailure as e:
        raise HTTPException(status_code=422, detail=e.errors)
    except ComputationFailure as e:
        raise HTTPException(status_code=422, detail={"stage": e.stage, "message": e.message})


@router.post("/calcular", response_model=SimulationRecord)
def calculate(
    data: SimulationRequest,
    x_correlation_id: str = Header(default=None)
) -> SimulationRecord:
    """
    Calculates a payment plan without saving it.

    Returns the fixed installment (insurance included), the full amortization
    schedule, total interest, TCEA, VAN and TIR.
    """
    return _run_pipeline(data, x_correlation_id or str(uuid4()))


@router.post("/simulaciones", response_model=SimulationResponse, status_code=201)
def create_simulation(
    data: SimulationRequest,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
    x_correlation_id: str = Header(default=None)
) -> SimulationResponse:
    """Calculates a payment plan and stores it in the current user's history."""
    correlation_id = x_correlation_id or str(uuid4())
    record = _run_pipeline(data, correlation_id)
    simulation = save_simulation(db, record, current_user.id, correlation_id)
    return record_from_model(simulation)


@router.get("/simulaciones", response_model=List[SimulationSummary])
def history(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
) -> List[SimulationSummary]:
    return [
        SimulationSummary(
            simulation_id=s.id,
            client_name=s.client_name,
            target_program=s.target_program,
            financial_entity=s.financial_entity,
            financed_amount=s.financed_amount,
            monthly_installment=s.monthly_installment,
            term_months=s.term_months,
            created_at=s.created_at,
        )
        for s in list_simulations(db, current_user.id)
    ]


@router.get("/simulaciones/{simulation_id}", response_model=SimulationResponse)
def get_one(
    simulation_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
) -> SimulationResponse:
    simulation = get_simulation(db, simulation_id, current_user.id)
    if not simulation:
        raise HTTPException(status_code=404, detail="Simulation not found")
    return record_from_model(simulation)


@router.get("/simulaciones/{simulation_id}/export")
def export_one(
    simulation_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
) -> Dict[str, Any]:
    """Persisted projection of a saved simulation, ready for download."""
    simulation = get_simulation(db, simulation_id, current_user.id)
    if not simulation:
        raise HTTPException(status_code=404, detail="Simulation not found")
    return to_persisted_dict(record_from_model(simulation), current_user.id)


@router.delete("/simulaciones/{simulation_id}", status_code=204)
def delete_one(
    simulation_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
) -> Response:
    if not delete_simulation(db, simulation_id, current_user.id):
        raise HTTPException(status_code=404, detail="Simulation not found")
    return Response(status_code=204)


@router.get("/entidades-financieras", response_model=List[CatalogItem])
def financial_entities() -> List[CatalogItem]:
    return list_financial_entities()


@router.get("/programas-vivienda", response_model=List[CatalogItem])
def housing_programs() -> List[CatalogItem]:
    return list_housing_programs()
