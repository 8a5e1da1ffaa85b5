"""
Service layer for budgets and budget utilization.
"""

from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from typing import Any, Dict, Iterable, List, Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from agrofinance.core.exceptions import NotFoundError
from agrofinance.core.logging import get_logger
from agrofinance.models.budget import Budget, BudgetPeriod
from agrofinance.models.transaction import FinanceTransaction, TransactionType
from agrofinance.schemas.budget import BudgetCreate, BudgetUpdate
from agrofinance.services.aggregation import ZERO, percent_of, to_decimal
from agrofinance.services.income import within_range
from agrofinance.services.ranges import DateRange, resolve_range

logger = get_logger(__name__)


@dataclass
class BudgetAlert:
    """A budget that reached its alert threshold."""

    budget_id: int
    budget_name: str
    period: BudgetPeriod
    amount: Decimal
    spent: Decimal
    utilization: float
    notify_email: Optional[str]


def budget_window(budget: Budget, now: Optional[datetime] = None) -> DateRange:
    """Current period of a budget, clamped by its optional start and end dates."""
    window = resolve_range("week" if budget.period == BudgetPeriod.WEEKLY else "month", now)
    start, end = window.start, window.end
    if budget.start_date is not None and budget.start_date > start:
        start = budget.start_date
    if budget.end_date is not None and budget.end_date < end:
        end = budget.end_date
    return DateRange(start, end)


def compute_utilization(budget: Budget, expenses: Iterable[FinanceTransaction]) -> Dict[str, Any]:
    """Utilization of ``budget`` given expenses already restricted to its window.

    The ratio is not clamped; only ``bar_percent`` is capped at 100 for display.
    """
    amount = to_decimal(budget.amount)
    spent = sum(
        (to_decimal(tx.amount) for tx in expenses
         if TransactionType(tx.type) == TransactionType.EXPENSE and budget.matches_category(tx.category)),
        ZERO,
    )
    ratio = spent / amount if amount > 0 else ZERO
    threshold = to_decimal(budget.alert_threshold)
    percent = percent_of(spent, amount)
    return {
        "id": budget.id,
        "name": budget.name,
        "period": budget.period,
        "amount": amount,
        "categories": list(budget.categories or []),
        "spent": spent,
        "remaining": amount - spent,
        "utilization": float(ratio),
        "percent": percent,
        "bar_percent": min(percent, 100),
        "alert_threshold": float(threshold),
        "near_limit": ratio >= threshold,
    }


class BudgetService:
    """Service for managing budgets."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def create_budget(self, data: BudgetCreate, created_by: Optional[int] = None) -> Budget:
        budget = Budget(created_by=created_by, **data.model_dump())
        self.db.add(budget)
        await self.db.commit()
        await self.db.refresh(budget)
        logger.info("budget_created", budget_id=budget.id, name=budget.name)
        return budget

    async def get_budget(self, budget_id: int) -> Budget:
        budget = await self.db.get(Budget, budget_id)
        if budget is None:
            raise NotFoundError("Budget")
        return budget

    async def list_budgets(self) -> List[Budget]:
        result = await self.db.execute(
            select(Budget).order_by(Budget.created_at.desc(), Budget.id.desc())
        )
        return list(result.scalars().all())

    async def update_budget(self, budget_id: int, data: BudgetUpdate) -> Budget:
        budget = await self.get_budget(budget_id)
        budget.apply_changes(data.model_dump(exclude_unset=True))
        await self.db.commit()
        await self.db.refresh(budget)
        logger.info("budget_updated", budget_id=budget_id)
        return budget

    async def delete_budget(self, budget_id: int) -> None:
        budget = await self.get_budget(budget_id)
        await self.db.delete(budget)
        await self.db.commit()
        logger.info("budget_deleted", budget_id=budget_id)

    async def get_utilization(
        self,
        budget: Budget,
        now: Optional[datetime] = None,
    ) -> Dict[str, Any]:
        """Spend against ``budget`` within its current period."""
        window = budget_window(budget, now)
        query = select(FinanceTransaction).where(
            FinanceTransaction.type == TransactionType.EXPENSE,
            *within_range(FinanceTransaction.date, window),
        )
        if budget.categories:
            query = query.where(FinanceTransaction.category.in_(budget.categories))
        result = await self.db.execute(query)

        row = compute_utilization(budget, result.scalars().all())
        row["window_start"] = window.start
        row["window_end"] = window.end
        return row

    async def list_utilization(self, now: Optional[datetime] = None) -> List[Dict[str, Any]]:
        return [await self.get_utilization(budget, now) for budget in await self.list_budgets()]

    async def evaluate_alerts(
        self,
        category: Optional[str],
        now: Optional[datetime] = None,
    ) -> List[BudgetAlert]:
        """Budgets covering ``category`` that are at or over their alert threshold.

        Only budgets with a notification address produce an alert.
        """
        alerts = []
        for budget in await self.list_budgets():
            if not budget.notify_email or not budget.matches_category(category):
                continue
            row = await self.get_utilization(budget, now)
            if not row["near_limit"]:
                continue
            alert = BudgetAlert(
                budget_id=budget.id,
                budget_name=budget.name,
                period=budget.period,
                amount=row["amount"],
                spent=row["spent"],
                utilization=row["utilization"],
                notify_email=budget.notify_email,
            )
            logger.warning(
                "budget_alert_triggered",
                budget_id=alert.budget_id,
                budget_name=alert.budget_name,
                period=alert.period.value,
                spent=str(alert.spent),
                amount=str(alert.amount),
                utilization=round(alert.utilization, 4),
                notify_email=alert.notify_email,
            )
            alerts.append(alert)
        return alerts
