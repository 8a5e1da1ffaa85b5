"""
Tests for budget utilization and alerts.
"""

from datetime import datetime
from decimal import Decimal

import pytest
from sqlalchemy.ext.asyncio import AsyncSession

from agrofinance.core.exceptions import NotFoundError
from agrofinance.models.budget import Budget, BudgetPeriod
from agrofinance.models.transaction import FinanceTransaction, TransactionType
from agrofinance.schemas.budget import BudgetCreate, BudgetUpdate
from agrofinance.services.budget import BudgetService, budget_window, compute_utilization


def expense(amount: str, category: str = "Fuel") -> FinanceTransaction:
    return FinanceTransaction(
        type=TransactionType.EXPENSE,
        amount=Decimal(amount),
        date=datetime(2024, 3, 10),
        category=category,
    )


def fuel_budget(**overrides) -> Budget:
    values = dict(
        id=1,
        name="Fuel",
        period=BudgetPeriod.MONTHLY,
        amount=Decimal("1000.00"),
        categories=["Fuel"],
        alert_threshold=Decimal("0.8"),
    )
    values.update(overrides)
    return Budget(**values)


def test_just_below_threshold_is_not_near_limit() -> None:
    row = compute_utilization(fuel_budget(), [expense("799")])
    assert row["utilization"] == pytest.approx(0.799)
    assert row["percent"] == 80
    assert row["near_limit"] is False


def test_threshold_is_inclusive() -> None:
    row = compute_utilization(fuel_budget(), [expense("800")])
    assert row["near_limit"] is True


def test_overspend_is_not_clamped_but_bar_is() -> None:
    row = compute_utilization(fuel_budget(), [expense("1500")])
    assert row["utilization"] == pytest.approx(1.5)
    assert row["percent"] == 150
    assert row["bar_percent"] == 100
    assert row["remaining"] == Decimal("-500.00")


def test_other_categories_do_not_count() -> None:
    row = compute_utilization(fuel_budget(), [expense("500", "Seeds"), expense("100")])
    assert row["spent"] == Decimal("100")


def test_empty_categories_match_every_expense() -> None:
    row = compute_utilization(fuel_budget(categories=[]), [expense("500", "Seeds"), expense("100")])
    assert row["spent"] == Decimal("600")


def test_zero_amount_budget_has_zero_utilization() -> None:
    row = compute_utilization(fuel_budget(amount=Decimal("0")), [expense("10")])
    assert row["utilization"] == 0
    assert row["percent"] == 0


def test_weekly_window_is_clamped_by_start_date() -> None:
    now = datetime(2024, 3, 13, 12, 0)
    budget = fuel_budget(period=BudgetPeriod.WEEKLY, start_date=datetime(2024, 3, 12))
    window = budget_window(budget, now)
    assert window.start == datetime(2024, 3, 12)
    assert window.end == now

    monthly = budget_window(fuel_budget(end_date=datetime(2024, 3, 5)), now)
    assert monthly.start == datetime(2024, 3, 1)
    assert monthly.end == datetime(2024, 3, 5)


@pytest.mark.asyncio
async def test_utilization_reads_current_period_expenses(db_session: AsyncSession) -> None:
    service = BudgetService(db_session)
    budget = await service.create_budget(BudgetCreate(name="Fuel", amount=Decimal("1000"), categories=["Fuel"]))
    now = datetime(2024, 3, 13, 12, 0)
    db_session.add_all([
        FinanceTransaction(type=TransactionType.EXPENSE, amount=Decimal("300"), date=datetime(2024, 3, 2), category="Fuel"),
        FinanceTransaction(type=TransactionType.EXPENSE, amount=Decimal("900"), date=datetime(2024, 2, 28), category="Fuel"),
        FinanceTransaction(type=TransactionType.INCOME, amount=Decimal("900"), date=datetime(2024, 3, 3), category="Fuel"),
    ])
    await db_session.commit()

    row = await service.get_utilization(budget, now)

    assert row["spent"] == Decimal("300.00")
    assert row["window_start"] == datetime(2024, 3, 1)
    assert row["near_limit"] is False


@pytest.mark.asyncio
async def test_alerts_require_notify_email_and_threshold(db_session: AsyncSession) -> None:
    service = BudgetService(db_session)
    now = datetime(2024, 3, 13, 12, 0)
    await service.create_budget(BudgetCreate(
        name="Fuel", amount=Decimal("1000"), categories=["Fuel"], notify_email="ops@agrolink.org",
    ))
    await service.create_budget(BudgetCreate(name="Silent", amount=Decimal("1000"), categories=["Fuel"]))
    db_session.add(
        FinanceTransaction(type=TransactionType.EXPENSE, amount=Decimal("850"), date=datetime(2024, 3, 12), category="Fuel")
    )
    await db_session.commit()

    alerts = await service.evaluate_alerts("Fuel", now)

    assert [a.budget_name for a in alerts] == ["Fuel"]
    assert alerts[0].spent == Decimal("850.00")
    assert await service.evaluate_alerts("Seeds", now) == []


@pytest.mark.asyncio
async def test_update_and_delete_budget(db_session: AsyncSession) -> None:
    service = BudgetService(db_session)
    budget = await service.create_budget(BudgetCreate(name="Feed", amount=Decimal("200")))

    updated = await service.update_budget(budget.id, BudgetUpdate(amount=Decimal("250"), period=BudgetPeriod.WEEKLY))
    assert updated.amount == Decimal("250")
    assert updated.period == BudgetPeriod.WEEKLY

    await service.delete_budget(budget.id)
    with pytest.raises(NotFoundError):
        await service.get_budget(budget.id)
