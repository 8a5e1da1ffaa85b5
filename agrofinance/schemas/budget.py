"""
Schemas for budgets and budget utilization.
"""

from datetime import datetime
from decimal import Decimal
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator, model_validator

from agrofinance.models.budget import BudgetPeriod
from agrofinance.services.ranges import to_local_naive


def _clean_categories(value: Optional[List[str]]) -> Optional[List[str]]:
    if value is None:
        return value
    return [c.strip() for c in value if c and c.strip()]


class BudgetBase(BaseModel):
    """Base budget schema."""

    model_config = ConfigDict(str_strip_whitespace=True)

    name: str = Field(..., min_length=1, max_length=100)
    period: BudgetPeriod = Field(BudgetPeriod.MONTHLY, description="MONTHLY or WEEKLY")
    amount: Decimal = Field(..., ge=0, decimal_places=2, description="Spending limit per period")
    categories: List[str] = Field(default_factory=list, description="Empty means every expense")
    start_date: Optional[datetime] = None
    end_date: Optional[datetime] = None
    alert_threshold: Decimal = Field(Decimal("0.8"), ge=0, le=1, description="Fraction of amount")
    notify_email: Optional[EmailStr] = None

    @field_validator("categories", mode="after")
    @classmethod
    def strip_categories(cls, v):
        return _clean_categories(v)

    @field_validator("start_date", "end_date", mode="after")
    @classmethod
    def localize_dates(cls, v):
        return to_local_naive(v)

    @model_validator(mode="after")
    def check_dates(self):
        if self.start_date and self.end_date and self.start_date > self.end_date:
            raise ValueError("start_date must not be after end_date")
        return self


class BudgetCreate(BudgetBase):
    """Schema for creating a budget."""
    pass


class BudgetUpdate(BaseModel):
    """Schema for updating a budget."""

    model_config = ConfigDict(str_strip_whitespace=True)

    name: Optional[str] = Field(None, min_length=1, max_length=100)
    period: Optional[BudgetPeriod] = None
    amount: Optional[Decimal] = Field(None, ge=0, decimal_places=2)
    categories: Optional[List[str]] = None
    start_date: Optional[datetime] = None
    end_date: Optional[datetime] = None
    alert_threshold: Optional[Decimal] = Field(None, ge=0, le=1)
    notify_email: Optional[EmailStr] = None

    @field_validator("categories", mode="after")
    @classmethod
    def strip_categories(cls, v):
        return _clean_categories(v)

    @field_validator("start_date", "end_date", mode="after")
    @classmethod
    def localize_dates(cls, v):
        return to_local_naive(v)


class BudgetResponse(BaseModel):
    """Schema for budget response."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    period: BudgetPeriod
    amount: Decimal
    categories: List[str]
    start_date: Optional[datetime] = None
    end_date: Optional[datetime] = None
    alert_threshold: Decimal
    notify_email: Optional[str] = None
    created_by: Optional[int] = None
    created_at: datetime
    updated_at: datetime


class BudgetUtilizationResponse(BaseModel):
    """Spend against a budget within its current period."""

    id: int
    name: str
    period: BudgetPeriod
    amount: Decimal
    categories: List[str]
    spent: Decimal
    remaining: Decimal
    utilization: float = Field(..., description="spent / amount, not clamped")
    percent: int
    bar_percent: int = Field(..., description="percent capped at 100 for display")
    alert_threshold: float
    near_limit: bool
    window_start: Optional[datetime] = None
    window_end: Optional[datetime] = None


class BudgetAlertResponse(BaseModel):
    """A budget at or over its alert threshold."""

    model_config = ConfigDict(from_attributes=True)

    budget_id: int
    budget_name: str
    period: BudgetPeriod
    amount: Decimal
    spent: Decimal
    utilization: float
    notify_email: Optional[str] = None
