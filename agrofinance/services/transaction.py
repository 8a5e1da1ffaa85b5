"""
Service layer for finance transactions.
"""

from datetime import datetime
from typing import Any, Dict, List, Optional

from sqlalchemy import func, or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from agrofinance.core.exceptions import NotFoundError
from agrofinance.core.logging import get_logger
from agrofinance.models.transaction import FinanceTransaction, TransactionType
from agrofinance.schemas.transaction import TransactionCreate, TransactionUpdate
from agrofinance.services.aggregation import ZERO, net_profit, to_decimal
from agrofinance.services.income import within_range
from agrofinance.services.ranges import DateRange

logger = get_logger(__name__)


class TransactionService:
    """Service for booking and querying income/expense transactions."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def create_transaction(
        self,
        data: TransactionCreate,
        created_by: Optional[int] = None,
    ) -> FinanceTransaction:
        """Create a new transaction."""
        values = data.model_dump(exclude_none=True)
        values.setdefault("date", datetime.now())
        transaction = FinanceTransaction(created_by=created_by, **values)

        self.db.add(transaction)
        await self.db.commit()
        await self.db.refresh(transaction)

        logger.info(
            "transaction_created",
            transaction_id=transaction.id,
            type=transaction.type.value,
            amount=str(transaction.amount),
        )
        return transaction

    async def get_transaction(self, transaction_id: int) -> FinanceTransaction:
        transaction = await self.db.get(FinanceTransaction, transaction_id)
        if transaction is None:
            raise NotFoundError("Transaction")
        return transaction

    async def update_transaction(
        self,
        transaction_id: int,
        data: TransactionUpdate,
    ) -> FinanceTransaction:
        """Update an existing transaction.

        ``remove_receipt`` clears the stored receipt reference; a new
        ``receipt_url`` replaces it.
        """
        transaction = await self.get_transaction(transaction_id)

        changes = data.model_dump(exclude_unset=True)
        if changes.pop("remove_receipt", False):
            transaction.receipt_url = None
            transaction.receipt_public_id = None
        applied = transaction.apply_changes(changes)

        await self.db.commit()
        await self.db.refresh(transaction)

        logger.info("transaction_updated", transaction_id=transaction_id, fields=sorted(applied))
        return transaction

    async def delete_transaction(self, transaction_id: int) -> None:
        """Hard delete a transaction."""
        transaction = await self.get_transaction(transaction_id)
        await self.db.delete(transaction)
        await self.db.commit()
        logger.info("transaction_deleted", transaction_id=transaction_id)

    async def list_transactions(
        self,
        type: Optional[TransactionType] = None,
        date_range: DateRange = DateRange(),
        search: Optional[str] = None,
    ) -> List[FinanceTransaction]:
        """Transactions matching the filters, newest first."""
        query = select(FinanceTransaction).where(
            *within_range(FinanceTransaction.date, date_range)
        )
        if type is not None:
            query = query.where(FinanceTransaction.type == type)
        if search:
            pattern = f"%{search}%"
            query = query.where(
                or_(
                    FinanceTransaction.category.ilike(pattern),
                    FinanceTransaction.description.ilike(pattern),
                    FinanceTransaction.source.ilike(pattern),
                )
            )

        query = query.order_by(
            FinanceTransaction.date.desc(),
            FinanceTransaction.created_at.desc(),
            FinanceTransaction.id.desc(),
        )
        result = await self.db.execute(query)
        return list(result.scalars().all())

    async def get_summary(self) -> Dict[str, Any]:
        """All-time income, expenses and balance."""
        query = select(
            FinanceTransaction.type,
            func.coalesce(func.sum(FinanceTransaction.amount), 0),
        ).group_by(FinanceTransaction.type)
        result = await self.db.execute(query)

        totals = {TransactionType.INCOME: ZERO, TransactionType.EXPENSE: ZERO}
        for tx_type, total in result.all():
            totals[TransactionType(tx_type)] = to_decimal(total)

        income = totals[TransactionType.INCOME]
        expenses = totals[TransactionType.EXPENSE]
        return {
            "income": income,
            "expenses": expenses,
            "balance": net_profit(income, expenses),
        }
