"""
Persisted simulations.
Keeps inputs, results and the serialized schedule for each owner's history.
"""
from sqlalchemy import Integer, Float, String, DateTime, Date, Text, ForeignKey
from sqlalchemy.orm import Mapped, mapped_column
from datetime import date, datetime, timezone
from typing import Optional
from app.core.database import Base


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Simulation(Base):
    """Entity representing a saved payment-plan simulation."""

    __tablename__ = "simulaciones"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, index=True)
    user_id: Mapped[str] = mapped_column(String(36), ForeignKey("users.id"), index=True, nullable=False)

    client_id: Mapped[Optional[int]] = mapped_column("cliente_id", Integer, nullable=True)
    client_name: Mapped[str] = mapped_column("cliente_nombre", String(200), nullable=False)
    target_program: Mapped[str] = mapped_column("programa_objetivo", String(100), nullable=False)
    financial_entity: Mapped[str] = mapped_column("entidad_financiera", String(100), nullable=False)

    property_value: Mapped[float] = mapped_column("valor_vivienda", Float, nullable=False)
    down_payment: Mapped[float] = mapped_column("cuota_inicial", Float, nullable=False)
    subsidy_amount: Mapped[float] = mapped_column("monto_bono", Float, nullable=False, default=0.0)
    financed_amount: Mapped[float] = mapped_column("monto_financiado", Float, nullable=False)

    rate_kind: Mapped[str] = mapped_column("tipo_tasa", String(3), nullable=False)
    interest_rate: Mapped[float] = mapped_column("tasa_interes", Float, nullable=False)
    term_months: Mapped[int] = mapped_column("plazo_meses", Integer, nullable=False)
    grace_period_months: Mapped[int] = mapped_column("periodo_gracia", Integer, nullable=False, default=0)
    payment_start_date: Mapped[date] = mapped_column("fecha_inicio_pago", Date, nullable=False)

    life_insurance: Mapped[float] = mapped_column("seguro_desgravamen", Float, nullable=False, default=0.0)
    property_insurance: Mapped[float] = mapped_column("seguro_inmueble", Float, nullable=False, default=0.0)
    appraisal_fee: Mapped[float] = mapped_column("tasacion", Float, nullable=False, default=0.0)
    notarial_fee: Mapped[float] = mapped_column("gastos_notariales", Float, nullable=False, default=0.0)
    disbursement_commission: Mapped[float] = mapped_column("comision_desembolso", Float, nullable=False, default=0.0)

    monthly_installment: Mapped[float] = mapped_column("cuota_mensual", Float, nullable=False)
    total_interest: Mapped[float] = mapped_column("total_intereses", Float, nullable=False)
    effective_annual_cost_rate: Mapped[float] = mapped_column("tcea", Float, nullable=False)
    net_present_value: Mapped[float] = mapped_column("van", Float, nullable=False)
    internal_rate_of_return: Mapped[float] = mapped_column("tir", Float, nullable=False)
    amortization_schedule: Mapped[str] = mapped_column("cronograma_pagos", Text, nullable=False)  # Serialized JSON

    correlation_id: Mapped[Optional[str]] = mapped_column(String(100), index=True, nullable=True)
    created_at: Mapped[datetime] = mapped_column("creado_en", DateTime, default=_utcnow)
    updated_at: Mapped[datetime] = mapped_column("actualizado_en", DateTime, default=_utcnow, onupdate=_utcnow)

    def __repr__(self):
        return f"<Simulation(id={self.id}, user_id={self.user_id}, financed_amount={self.financed_amount})>"
