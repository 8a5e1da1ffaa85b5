"""
Debt ledger service.
"""

from decimal import Decimal
from typing import Dict, List, Optional

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from agrofinance.core.exceptions import NotFoundError
from agrofinance.core.logging import get_logger
from agrofinance.models.debt import Debt, DebtType
from agrofinance.schemas.debt import DebtCreate, DebtUpdate
from agrofinance.services.aggregation import ZERO, to_decimal

logger = get_logger(__name__)


class DebtService:
    """Service for managing borrowed and lent money."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def create_debt(self, data: DebtCreate, created_by: Optional[int] = None) -> Debt:
        debt = Debt(created_by=created_by, **data.model_dump(exclude_none=True))
        self.db.add(debt)
        await self.db.commit()
        await self.db.refresh(debt)
        logger.info("debt_created", debt_id=debt.id, type=debt.type.value)
        return debt

    async def get_debt(self, debt_id: int) -> Debt:
        debt = await self.db.get(Debt, debt_id)
        if debt is None:
            raise NotFoundError("Debt")
        return debt

    async def list_debts(self, type: Optional[DebtType] = None) -> List[Debt]:
        query = select(Debt)
        if type is not None:
            query = query.where(Debt.type == type)
        result = await self.db.execute(query.order_by(Debt.created_at.desc(), Debt.id.desc()))
        return list(result.scalars().all())

    async def update_debt(self, debt_id: int, data: DebtUpdate) -> Debt:
        debt = await self.get_debt(debt_id)
        debt.apply_changes(data.model_dump(exclude_unset=True))
        await self.db.commit()
        await self.db.refresh(debt)
        return debt

    async def delete_debt(self, debt_id: int) -> None:
        """Hard delete a debt."""
        debt = await self.get_debt(debt_id)
        await self.db.delete(debt)
        await self.db.commit()
        logger.info("debt_deleted", debt_id=debt_id)

    async def get_summary(self) -> Dict[str, Decimal]:
        """Principal owed by and to the company; positive net means more is lent out."""
        result = await self.db.execute(
            select(Debt.type, func.coalesce(func.sum(Debt.principal), 0)).group_by(Debt.type)
        )
        totals = {DebtType.BORROWED: ZERO, DebtType.LENT: ZERO}
        for debt_type, total in result.all():
            totals[DebtType(debt_type)] = to_decimal(total)
        return {
            "total_borrowed": totals[DebtType.BORROWED],
            "total_lent": totals[DebtType.LENT],
            "net_position": totals[DebtType.LENT] - totals[DebtType.BORROWED],
        }
