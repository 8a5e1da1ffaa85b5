"""
Tests for goals, debts and recurring entries.
"""

from datetime import datetime, timedelta, timezone
from decimal import Decimal

import pytest
from sqlalchemy.ext.asyncio import AsyncSession

from agrofinance.core.exceptions import NotFoundError
from agrofinance.models.debt import DebtType
from agrofinance.models.recurring import Cadence
from agrofinance.models.transaction import TransactionType
from agrofinance.schemas.budget import BudgetCreate
from agrofinance.schemas.debt import DebtCreate, DebtUpdate
from agrofinance.schemas.goal import GoalCreate, GoalResponse, GoalUpdate
from agrofinance.schemas.recurring import RecurringCreate, RecurringUpdate
from agrofinance.services.debt import DebtService
from agrofinance.services.goal import GoalService
from agrofinance.services.recurring import RecurringService


@pytest.mark.asyncio
async def test_debt_summary_net_position(db_session: AsyncSession) -> None:
    service = DebtService(db_session)
    await service.create_debt(DebtCreate(type=DebtType.BORROWED, party="Bank", principal=Decimal("5000")))
    await service.create_debt(DebtCreate(type=DebtType.LENT, party="Co-op", principal=Decimal("1200")))
    await service.create_debt(DebtCreate(type=DebtType.LENT, party="Supplier", principal=Decimal("300")))

    summary = await service.get_summary()

    assert summary["total_borrowed"] == Decimal("5000.00")
    assert summary["total_lent"] == Decimal("1500.00")
    assert summary["net_position"] == Decimal("-3500.00")


@pytest.mark.asyncio
async def test_debt_defaults_and_filter(db_session: AsyncSession) -> None:
    service = DebtService(db_session)
    debt = await service.create_debt(DebtCreate(type=DebtType.BORROWED, party="Bank", principal=Decimal("100")))

    assert debt.start_date is not None
    assert debt.interest_rate == Decimal("0")
    assert await service.list_debts(DebtType.LENT) == []

    updated = await service.update_debt(debt.id, DebtUpdate(notes="Renegotiated"))
    assert updated.notes == "Renegotiated"

    await service.delete_debt(debt.id)
    with pytest.raises(NotFoundError):
        await service.get_debt(debt.id)


@pytest.mark.asyncio
async def test_goal_progress_is_not_clamped(db_session: AsyncSession) -> None:
    service = GoalService(db_session)
    goal = await service.create_goal(GoalCreate(title="Cold room", target_amount=Decimal("2000")))
    assert GoalResponse.model_validate(goal).progress_percent == 0

    goal = await service.update_goal(goal.id, GoalUpdate(current_amount=Decimal("2500")))
    assert GoalResponse.model_validate(goal).progress_percent == 125


@pytest.mark.asyncio
async def test_recurring_entries_can_be_paused(db_session: AsyncSession) -> None:
    service = RecurringService(db_session)
    entry = await service.create_recurring(RecurringCreate(
        title="Warehouse rent", type=TransactionType.EXPENSE, amount=Decimal("15000"),
    ))
    assert entry.cadence == Cadence.MONTHLY
    assert entry.active is True

    await service.update_recurring(entry.id, RecurringUpdate(active=False))

    assert await service.list_recurring(active_only=True) == []
    assert len(await service.list_recurring()) == 1


def test_offset_dates_in_payloads_become_local_naive() -> None:
    aware = datetime(2024, 3, 1, 23, 30, tzinfo=timezone(timedelta(hours=-5)))
    local = aware.astimezone().replace(tzinfo=None)

    budget = BudgetCreate(name="Fuel", amount=Decimal("1000"), start_date=aware, end_date=datetime(2024, 12, 31))
    debt = DebtCreate(type=DebtType.LENT, party="Co-op", principal=Decimal("10"), start_date=aware, due_date=aware)
    goal = GoalUpdate(due_date=aware)
    entry = RecurringCreate(title="Rent", type=TransactionType.EXPENSE, amount=Decimal("1"), next_run_at=aware)

    assert budget.start_date == local and budget.start_date.tzinfo is None
    assert debt.start_date == local and debt.due_date == local
    assert goal.due_date == local
    assert entry.next_run_at == local
