"""
Finance transaction model for manually booked income and expenses.
"""

from datetime import datetime
from decimal import Decimal
from enum import Enum as PyEnum
from typing import Optional

from sqlalchemy import DateTime, Enum, ForeignKey, Numeric, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from agrofinance.models.base import BaseModel


class TransactionType(str, PyEnum):
    """Transaction type enumeration."""

    INCOME = "INCOME"
    EXPENSE = "EXPENSE"


class FinanceTransaction(BaseModel):
    """A single income or expense record.

    ``amount`` is always a non-negative magnitude; the sign is implied by ``type``.
    """

    __tablename__ = "finance_transactions"

    type: Mapped[TransactionType] = mapped_column(
        Enum(TransactionType),
        nullable=False,
        index=True,
    )
    amount: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False)
    date: Mapped[datetime] = mapped_column(
        DateTime,
        nullable=False,
        default=datetime.now,
        index=True,
    )
    category: Mapped[Optional[str]] = mapped_column(String(100), nullable=True)
    description: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    source: Mapped[Optional[str]] = mapped_column(String(100), nullable=True)

    # Receipt reference, stored as given by the uploader
    receipt_url: Mapped[Optional[str]] = mapped_column(String(500), nullable=True)
    receipt_public_id: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)

    created_by: Mapped[Optional[int]] = mapped_column(
        ForeignKey("users.id", ondelete="SET NULL"),
        nullable=True,
    )

    @property
    def signed_amount(self) -> Decimal:
        """Amount with the sign implied by the transaction type."""
        return self.amount if self.type == TransactionType.INCOME else -self.amount

    def __repr__(self) -> str:
        """String representation of the transaction."""
        return f"<FinanceTransaction(id={self.id}, type={self.type}, amount={self.amount}, date={self.date})>"
