"""
Pydantic schemas for client management.
"""
from datetime import datetime
from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator


class MaritalStatus(str, Enum):
    SINGLE = "soltero"
    MARRIED = "casado"
    DIVORCED = "divorciado"
    WIDOWED = "viudo"
    COHABITING = "conviviente"


class ClientCreate(BaseModel):
    full_name: str = Field(..., min_length=3, max_length=200)
    dni: str = Field(..., pattern=r"^\d{8}$", description="National ID, 8 digits")
    marital_status: MaritalStatus
    email: Optional[EmailStr] = None
    phone: Optional[str] = Field(None, max_length=20)
    monthly_income: Optional[float] = Field(None, ge=0)

    @field_validator('full_name')
    @classmethod
    def strip_name(cls, v: str) -> str:
        v = v.strip()
        if len(v) < 3:
            raise ValueError('Full name must have at least 3 characters')
        return v


class ClientUpdate(BaseModel):
    """Partial update; omitted fields keep their stored value."""
    full_name: Optional[str] = Field(None, min_length=3, max_length=200)
    dni: Optional[str] = Field(None, pattern=r"^\d{8}$")
    marital_status: Optional[MaritalStatus] = None
    email: Optional[EmailStr] = None
    phone: Optional[str] = Field(None, max_length=20)
    monthly_income: Optional[float] = Field(None, ge=0)


class ClientResponse(BaseModel):
    id: int
    full_name: str
    dni: str
    marital_status: str
    email: Optional[str] = None
    phone: Optional[str] = None
    monthly_income: Optional[float] = None
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)
