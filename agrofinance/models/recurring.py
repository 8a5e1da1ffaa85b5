"""
Recurring transaction model.

Rows only describe a cadence and the next run date; nothing executes them.
"""

from datetime import datetime
from decimal import Decimal
from enum import Enum as PyEnum
from typing import Optional

from sqlalchemy import Boolean, DateTime, Enum, ForeignKey, Numeric, String
from sqlalchemy.orm import Mapped, mapped_column

from agrofinance.models.base import BaseModel
from agrofinance.models.transaction import TransactionType


class Cadence(str, PyEnum):
    """How often a recurring transaction repeats."""

    DAILY = "DAILY"
    WEEKLY = "WEEKLY"
    MONTHLY = "MONTHLY"
    YEARLY = "YEARLY"


class RecurringTransaction(BaseModel):
    """Declarative description of a repeating income or expense."""

    __tablename__ = "finance_recurring"

    title: Mapped[str] = mapped_column(String(200), nullable=False)
    type: Mapped[TransactionType] = mapped_column(Enum(TransactionType), nullable=False)
    amount: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False)
    cadence: Mapped[Cadence] = mapped_column(
        Enum(Cadence),
        nullable=False,
        default=Cadence.MONTHLY,
    )
    next_run_at: Mapped[datetime] = mapped_column(
        DateTime,
        nullable=False,
        default=datetime.now,
        index=True,
    )
    category: Mapped[Optional[str]] = mapped_column(String(100), nullable=True)
    active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)

    created_by: Mapped[Optional[int]] = mapped_column(
        ForeignKey("users.id", ondelete="SET NULL"),
        nullable=True,
    )

    def __repr__(self) -> str:
        return f"<RecurringTransaction(id={self.id}, title='{self.title}', cadence={self.cadence})>"
