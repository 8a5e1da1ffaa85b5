"""
Schemas for recurring transaction definitions.
"""

from datetime import datetime
from decimal import Decimal
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from agrofinance.models.recurring import Cadence
from agrofinance.models.transaction import TransactionType
from agrofinance.services.ranges import to_local_naive


class RecurringCreate(BaseModel):
    model_config = ConfigDict(str_strip_whitespace=True)

    title: str = Field(..., min_length=1, max_length=200)
    type: TransactionType
    amount: Decimal = Field(..., ge=0, decimal_places=2)
    cadence: Cadence = Cadence.MONTHLY
    next_run_at: Optional[datetime] = Field(None, description="Defaults to now")
    category: Optional[str] = Field(None, max_length=100)
    active: bool = True

    @field_validator("next_run_at", mode="after")
    @classmethod
    def localize_next_run(cls, v):
        return to_local_naive(v)


class RecurringUpdate(BaseModel):
    model_config = ConfigDict(str_strip_whitespace=True)

    title: Optional[str] = Field(None, min_length=1, max_length=200)
    type: Optional[TransactionType] = None
    amount: Optional[Decimal] = Field(None, ge=0, decimal_places=2)
    cadence: Optional[Cadence] = None
    next_run_at: Optional[datetime] = None
    category: Optional[str] = Field(None, max_length=100)
    active: Optional[bool] = None

    @field_validator("next_run_at", mode="after")
    @classmethod
    def localize_next_run(cls, v):
        return to_local_naive(v)


class RecurringResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    title: str
    type: TransactionType
    amount: Decimal
    cadence: Cadence
    next_run_at: datetime
    category: Optional[str] = None
    active: bool
    created_by: Optional[int] = None
    created_at: datetime
    updated_at: datetime
