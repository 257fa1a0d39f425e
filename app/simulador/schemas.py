"""
Pydantic schemas for mortgage payment-plan simulations.
SimulationRecord is the value type carried through the calculation pipeline;
every stage returns a new copy instead of mutating its input.
"""
from datetime import date, datetime
from enum import Enum
from typing import List, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field

from app.core.config import settings


class RateKind(str, Enum):
    """How the supplied interest rate is expressed."""
    ANNUAL_EFFECTIVE = "TEA"
    MONTHLY_EFFECTIVE = "TEM"


class ScheduleEntry(BaseModel):
    """One period of the amortization schedule. All amounts rounded to cents."""
    period_number: int = Field(..., ge=1, description="1-based period number")
    due_date: date
    opening_balance: float
    base_installment: float = Field(..., description="Interest-only during grace, full installment after")
    interest_portion: float
    principal_portion: float
    insurance_add_on: float = Field(..., description="Life plus property insurance for the period")
    total_installment: float
    closing_balance: float

    model_config = ConfigDict(frozen=True)


class SimulationRecord(BaseModel):
    """Inputs, intermediate values and results of one simulation."""

    # Identity / context
    client_id: Optional[int] = None
    client_name: str = ""
    target_program: str = ""
    financial_entity: str = ""

    # Principal inputs
    property_value: float = 0.0
    down_payment: float = 0.0
    subsidy_amount: float = 0.0
    financed_amount: float = 0.0

    # Loan terms
    rate_kind: RateKind = RateKind.ANNUAL_EFFECTIVE
    interest_rate: float = Field(0.0, description="Percentage points, 12 means 12%")
    term_months: int = 0
    grace_period_months: int = 0
    payment_start_date: Optional[date] = None

    # Recurring monthly costs
    life_insurance: float = 0.0
    property_insurance: float = 0.0

    # Upfront one-time costs
    appraisal_fee: float = 0.0
    notarial_fee: float = 0.0
    disbursement_commission: float = 0.0

    # Results
    monthly_installment: Optional[float] = None
    total_interest: Optional[float] = None
    amortization_schedule: Tuple[ScheduleEntry, ...] = ()
    effective_annual_cost_rate: Optional[float] = None
    net_present_value: Optional[float] = None
    internal_rate_of_return: Optional[float] = None

    model_config = ConfigDict(frozen=True)

    @property
    def monthly_add_on(self) -> float:
        return self.life_insurance + self.property_insurance

    @property
    def upfront_costs(self) -> float:
        return self.appraisal_fee + self.notarial_fee + self.disbursement_commission

    @property
    def is_calculated(self) -> bool:
        return (
            self.monthly_installment is not None
            and len(self.amortization_schedule) == self.term_months
            and self.internal_rate_of_return is not None
        )


class ValidationResult(BaseModel):
    """Verdict of the input validator. Errors keep the order in which rules are checked."""
    valid: bool
    errors: List[str] = Field(default_factory=list)


class SimulationRequest(BaseModel):
    """
    Simulation request payload.
    Business preconditions are checked by the validator so every violation is
    reported at once; only structural bounds are enforced here.
    """
    client_id: Optional[int] = Field(None, description="Registered client reference")
    client_name: str = Field("", max_length=200, description="Client display name")
    target_program: str = Field("", max_length=100, description="Housing program code")
    financial_entity: str = Field("", max_length=100, description="Financial entity code")

    property_value: float = Field(0.0, description="Property price")
    down_payment: float = Field(0.0, description="Down payment")
    subsidy_amount: float = Field(0.0, ge=0, description="Government subsidy (bono)")

    rate_kind: RateKind = Field(RateKind.ANNUAL_EFFECTIVE, description="TEA or TEM")
    interest_rate: float = Field(0.0, description="Rate in percentage points")
    term_months: int = Field(0, le=settings.MAX_TERM_MONTHS, description="Loan term in months")
    grace_period_months: int = Field(0, ge=0, description="Leading interest-only months")
    payment_start_date: Optional[date] = Field(None, description="First due date is one month after this")

    life_insurance: float = Field(0.0, ge=0, description="Monthly credit life insurance (desgravamen)")
    property_insurance: float = Field(0.0, ge=0, description="Monthly property insurance")

    appraisal_fee: float = Field(0.0, ge=0, description="Appraisal (tasación)")
    notarial_fee: float = Field(0.0, ge=0, description="Notarial and legal fees")
    disbursement_commission: float = Field(0.0, ge=0, description="Disbursement commission")

    def to_record(self) -> SimulationRecord:
        return SimulationRecord(**self.model_dump())


class SimulationResponse(SimulationRecord):
    """Simulation result payload, optionally tagged with its persisted identity."""
    simulation_id: Optional[int] = Field(None, description="Persisted simulation ID")
    created_at: Optional[datetime] = Field(None, description="Persistence timestamp")

    model_config = ConfigDict(frozen=True, from_attributes=True)


class SimulationSummary(BaseModel):
    """History listing row."""
    simulation_id: int
    client_name: str
    target_program: str
    financial_entity: str
    financed_amount: float
    monthly_installment: float
    term_months: int
    created_at: datetime


class CatalogItem(BaseModel):
    value: str
    label: str
