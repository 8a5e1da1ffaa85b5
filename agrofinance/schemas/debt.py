"""
Schemas for the debt ledger.
"""

from datetime import datetime
from decimal import Decimal
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from agrofinance.models.debt import DebtType
from agrofinance.services.ranges import to_local_naive


class DebtCreate(BaseModel):
    """Schema for creating a debt."""

    model_config = ConfigDict(str_strip_whitespace=True)

    type: DebtType = Field(..., description="BORROWED or LENT")
    party: str = Field(..., min_length=1, max_length=200, description="Lender or borrower")
    principal: Decimal = Field(..., ge=0, decimal_places=2)
    interest_rate: Decimal = Field(Decimal("0"), ge=0, description="Annual rate in percent")
    start_date: Optional[datetime] = Field(None, description="Defaults to now")
    due_date: Optional[datetime] = None
    notes: Optional[str] = None

    @field_validator("start_date", "due_date", mode="after")
    @classmethod
    def localize_dates(cls, v):
        return to_local_naive(v)


class DebtUpdate(BaseModel):
    """Schema for updating a debt."""

    model_config = ConfigDict(str_strip_whitespace=True)

    type: Optional[DebtType] = None
    party: Optional[str] = Field(None, min_length=1, max_length=200)
    principal: Optional[Decimal] = Field(None, ge=0, decimal_places=2)
    interest_rate: Optional[Decimal] = Field(None, ge=0)
    start_date: Optional[datetime] = None
    due_date: Optional[datetime] = None
    notes: Optional[str] = None

    @field_validator("start_date", "due_date", mode="after")
    @classmethod
    def localize_dates(cls, v):
        return to_local_naive(v)


class DebtResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    type: DebtType
    party: str
    principal: Decimal
    interest_rate: Decimal
    start_date: datetime
    due_date: Optional[datetime] = None
    notes: Optional[str] = None
    created_by: Optional[int] = None
    created_at: datetime
    updated_at: datetime


class DebtSummary(BaseModel):
    """Outstanding principal both ways. A positive net means more is lent than borrowed."""

    total_borrowed: Decimal
    total_lent: Decimal
    net_position: Decimal
