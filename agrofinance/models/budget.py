"""
Budget model for spending limits per period.
"""

from datetime import datetime
from decimal import Decimal
from enum import Enum as PyEnum
from typing import List, Optional

from sqlalchemy import JSON, DateTime, Enum, ForeignKey, Numeric, String
from sqlalchemy.orm import Mapped, mapped_column

from agrofinance.models.base import BaseModel


class BudgetPeriod(str, PyEnum):
    """Budget period enumeration."""

    MONTHLY = "MONTHLY"
    WEEKLY = "WEEKLY"


class Budget(BaseModel):
    """Named spending limit scoped to a set of expense categories."""

    __tablename__ = "finance_budgets"

    name: Mapped[str] = mapped_column(String(100), nullable=False)
    period: Mapped[BudgetPeriod] = mapped_column(
        Enum(BudgetPeriod),
        nullable=False,
        default=BudgetPeriod.MONTHLY,
    )
    amount: Mapped[Decimal] = mapped_column(
        Numeric(12, 2),
        nullable=False,
        comment="Spending limit per period",
    )
    categories: Mapped[List[str]] = mapped_column(
        JSON,
        nullable=False,
        default=list,
        comment="Expense categories counted against the budget; empty matches all",
    )
    start_date: Mapped[Optional[datetime]] = mapped_column(DateTime, nullable=True)
    end_date: Mapped[Optional[datetime]] = mapped_column(DateTime, nullable=True)
    alert_threshold: Mapped[Decimal] = mapped_column(
        Numeric(4, 3),
        nullable=False,
        default=Decimal("0.8"),
        comment="Fraction of amount at which the budget is near its limit",
    )
    notify_email: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)

    created_by: Mapped[Optional[int]] = mapped_column(
        ForeignKey("users.id", ondelete="SET NULL"),
        nullable=True,
    )

    def matches_category(self, category: Optional[str]) -> bool:
        """Whether an expense in ``category`` counts against this budget."""
        if not self.categories:
            return True
        return category in self.categories

    def __repr__(self) -> str:
        """String representation of the budget."""
        return f"<Budget(id={self.id}, name='{self.name}', amount={self.amount})>"
