"""
Registered clients a user runs simulations for.
"""
from sqlalchemy import Integer, Float, String, DateTime, ForeignKey
from sqlalchemy.orm import Mapped, mapped_column
from datetime import datetime, timezone
from typing import Optional
from app.core.database import Base


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Client(Base):
    __tablename__ = "clientes"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, index=True)
    user_id: Mapped[str] = mapped_column(String(36), ForeignKey("users.id"), index=True, nullable=False)
    full_name: Mapped[str] = mapped_column("nombres_apellidos", String(200), nullable=False)
    dni: Mapped[str] = mapped_column(String(8), nullable=False, index=True)
    marital_status: Mapped[str] = mapped_column("estado_civil", String(20), nullable=False)
    email: Mapped[Optional[str]] = mapped_column(String(100), nullable=True)
    phone: Mapped[Optional[str]] = mapped_column("telefono", String(20), nullable=True)
    monthly_income: Mapped[Optional[float]] = mapped_column("ingreso_mensual", Float, nullable=True)
    created_at: Mapped[datetime] = mapped_column("creado_en", DateTime, default=_utcnow)
    updated_at: Mapped[datetime] = mapped_column("actualizado_en", DateTime, default=_utcnow, onupdate=_utcnow)

    def __repr__(self):
        return f"<Client(id={self.id}, dni={self.dni})>"
