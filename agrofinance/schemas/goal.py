"""
Schemas for savings goals.
"""

from datetime import datetime
from decimal import Decimal
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, computed_field, field_validator

from agrofinance.services.aggregation import percent_of
from agrofinance.services.ranges import to_local_naive


class GoalCreate(BaseModel):
    model_config = ConfigDict(str_strip_whitespace=True)

    title: str = Field(..., min_length=1, max_length=200)
    target_amount: Decimal = Field(..., ge=0, decimal_places=2)
    current_amount: Decimal = Field(Decimal("0"), ge=0, decimal_places=2)
    due_date: Optional[datetime] = None

    @field_validator("due_date", mode="after")
    @classmethod
    def localize_due_date(cls, v):
        return to_local_naive(v)


class GoalUpdate(BaseModel):
    model_config = ConfigDict(str_strip_whitespace=True)

    title: Optional[str] = Field(None, min_length=1, max_length=200)
    target_amount: Optional[Decimal] = Field(None, ge=0, decimal_places=2)
    current_amount: Optional[Decimal] = Field(None, ge=0, decimal_places=2)
    due_date: Optional[datetime] = None

    @field_validator("due_date", mode="after")
    @classmethod
    def localize_due_date(cls, v):
        return to_local_naive(v)


class GoalResponse(BaseModel):
    """Goal with its progress. The current amount may exceed the target."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    title: str
    target_amount: Decimal
    current_amount: Decimal
    due_date: Optional[datetime] = None
    created_by: Optional[int] = None
    created_at: datetime
    updated_at: datetime

    @computed_field
    @property
    def progress_percent(self) -> int:
        return percent_of(self.current_amount, self.target_amount)
