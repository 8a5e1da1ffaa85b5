"""
Service layer for recurring transaction definitions.
"""

from typing import List, Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from agrofinance.core.exceptions import NotFoundError
from agrofinance.core.logging import get_logger
from agrofinance.models.recurring import RecurringTransaction
from agrofinance.schemas.recurring import RecurringCreate, RecurringUpdate

logger = get_logger(__name__)


class RecurringService:
    """CRUD for recurring entries. Nothing here runs them."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def create_recurring(
        self,
        data: RecurringCreate,
        created_by: Optional[int] = None,
    ) -> RecurringTransaction:
        entry = RecurringTransaction(created_by=created_by, **data.model_dump(exclude_none=True))
        self.db.add(entry)
        await self.db.commit()
        await self.db.refresh(entry)
        logger.info("recurring_created", recurring_id=entry.id, cadence=entry.cadence.value)
        return entry

    async def get_recurring(self, recurring_id: int) -> RecurringTransaction:
        entry = await self.db.get(RecurringTransaction, recurring_id)
        if entry is None:
            raise NotFoundError("Recurring transaction")
        return entry

    async def list_recurring(self, active_only: bool = False) -> List[RecurringTransaction]:
        query = select(RecurringTransaction)
        if active_only:
            query = query.where(RecurringTransaction.active.is_(True))
        query = query.order_by(RecurringTransaction.created_at.desc(), RecurringTransaction.id.desc())
        result = await self.db.execute(query)
        return list(result.scalars().all())

    async def update_recurring(self, recurring_id: int, data: RecurringUpdate) -> RecurringTransaction:
        entry = await self.get_recurring(recurring_id)
        entry.apply_changes(data.model_dump(exclude_unset=True))
        await self.db.commit()
        await self.db.refresh(entry)
        return entry

    async def delete_recurring(self, recurring_id: int) -> None:
        entry = await self.get_recurring(recurring_id)
        await self.db.delete(entry)
        await self.db.commit()
        logger.info("recurring_deleted", recurring_id=recurring_id)
