"""
Schemas for finance transactions.
"""

from datetime import datetime
from decimal import Decimal
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from agrofinance.models.transaction import TransactionType
from agrofinance.schemas.budget import BudgetAlertResponse
from agrofinance.services.ranges import to_local_naive


class TransactionBase(BaseModel):
    """Base transaction schema."""

    model_config = ConfigDict(str_strip_whitespace=True)

    type: TransactionType = Field(..., description="INCOME or EXPENSE")
    amount: Decimal = Field(..., ge=0, decimal_places=2, description="Non-negative magnitude")
    date: Optional[datetime] = Field(None, description="Defaults to now")
    category: Optional[str] = Field(None, max_length=100)
    description: Optional[str] = None
    source: Optional[str] = Field(None, max_length=100)
    receipt_url: Optional[str] = Field(None, max_length=500)
    receipt_public_id: Optional[str] = Field(None, max_length=255)

    @field_validator("date", mode="after")
    @classmethod
    def localize_date(cls, v):
        return to_local_naive(v)


class TransactionCreate(TransactionBase):
    """Schema for creating a transaction."""
    pass


class TransactionUpdate(BaseModel):
    """Schema for updating a transaction."""

    model_config = ConfigDict(str_strip_whitespace=True)

    type: Optional[TransactionType] = None
    amount: Optional[Decimal] = Field(None, ge=0, decimal_places=2)
    date: Optional[datetime] = None
    category: Optional[str] = Field(None, max_length=100)
    description: Optional[str] = None
    source: Optional[str] = Field(None, max_length=100)
    receipt_url: Optional[str] = Field(None, max_length=500)
    receipt_public_id: Optional[str] = Field(None, max_length=255)
    remove_receipt: bool = Field(False, description="Clear the stored receipt reference")

    @field_validator("date", mode="after")
    @classmethod
    def localize_date(cls, v):
        return to_local_naive(v)


class TransactionResponse(BaseModel):
    """Schema for transaction response."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    type: TransactionType
    amount: Decimal
    date: datetime
    category: Optional[str] = None
    description: Optional[str] = None
    source: Optional[str] = None
    receipt_url: Optional[str] = None
    receipt_public_id: Optional[str] = None
    created_by: Optional[int] = None
    created_at: datetime
    updated_at: datetime


class TransactionCreateResponse(TransactionResponse):
    """Created transaction plus any budget alerts it triggered."""

    budget_alerts: List[BudgetAlertResponse] = Field(default_factory=list)


class SummaryResponse(BaseModel):
    """All-time totals."""

    income: Decimal
    expenses: Decimal
    balance: Decimal
