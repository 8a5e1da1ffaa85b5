"""
Debt ledger model.
"""

from datetime import datetime
from decimal import Decimal
from enum import Enum as PyEnum
from typing import Optional

from sqlalchemy import DateTime, Enum, ForeignKey, Numeric, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from agrofinance.models.base import BaseModel


class DebtType(str, PyEnum):
    """Direction of a debt."""

    BORROWED = "BORROWED"
    LENT = "LENT"


class Debt(BaseModel):
    """Money borrowed from or lent to a counterparty."""

    __tablename__ = "finance_debts"

    type: Mapped[DebtType] = mapped_column(Enum(DebtType), nullable=False)
    party: Mapped[str] = mapped_column(String(200), nullable=False)
    principal: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False)
    interest_rate: Mapped[Decimal] = mapped_column(
        Numeric(6, 3),
        nullable=False,
        default=Decimal("0"),
        comment="Annual interest rate in percent",
    )
    start_date: Mapped[datetime] = mapped_column(
        DateTime,
        nullable=False,
        default=datetime.now,
    )
    due_date: Mapped[Optional[datetime]] = mapped_column(DateTime, nullable=True)
    notes: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    created_by: Mapped[Optional[int]] = mapped_column(
        ForeignKey("users.id", ondelete="SET NULL"),
        nullable=True,
    )

    def __repr__(self) -> str:
        return f"<Debt(id={self.id}, type={self.type}, party='{self.party}', principal={self.principal})>"
