"""
Tests for company income derived from orders.
"""

from datetime import datetime, timedelta
from decimal import Decimal

import pytest
from sqlalchemy.ext.asyncio import AsyncSession

from agrofinance.models.recurring import RecurringTransaction
from agrofinance.models.transaction import FinanceTransaction, TransactionType
from agrofinance.services.income import IncomeService, rental_days, split_listing_line
from agrofinance.services.overview import OverviewService
from agrofinance.services.ranges import DateRange


def test_split_listing_line_without_commission() -> None:
    assert split_listing_line(Decimal("500.00"), Decimal("0")) == (Decimal("500.00"), Decimal("0"))


def test_rental_days_counts_both_ends_and_has_a_floor() -> None:
    start = datetime(2024, 3, 1, 18, 0)
    assert rental_days(start, datetime(2024, 3, 3, 8, 0)) == 3
    assert rental_days(start, start) == 1
    assert rental_days(start, datetime(2024, 2, 1)) == 1
    assert rental_days(None, None) == 1


@pytest.mark.asyncio
async def test_order_income_by_type(db_session: AsyncSession, marketplace) -> None:
    income = await IncomeService(db_session).get_order_income(DateRange())

    totals = income["totals_by_type"]
    assert totals["inventory"] == Decimal("1000.00")
    assert totals["rental"] == Decimal("3000.00")
    assert totals["listing_commission"] == Decimal("150.00")
    assert totals["listing_pass_through"] == Decimal("1000.00")
    assert income["total_income"] == Decimal("4150.00")
    assert {row["order_number"] for row in income["items"]} == {"ORD-1", "ORD-2"}


@pytest.mark.asyncio
async def test_delivery_fee_income_skips_cancelled_orders(db_session: AsyncSession, marketplace) -> None:
    fees = await IncomeService(db_session).get_delivery_fee_income(DateRange())
    assert fees["total"] == Decimal("500.00")
    assert fees["count"] == 2


@pytest.mark.asyncio
async def test_range_outside_orders_is_empty(db_session: AsyncSession, marketplace) -> None:
    past = DateRange(datetime(2000, 1, 1), datetime(2000, 1, 31))
    income = await IncomeService(db_session).get_order_income(past)
    assert income["total_income"] == Decimal("0")
    assert income["items"] == []


@pytest.mark.asyncio
async def test_income_by_source_includes_manual_and_recurring(db_session: AsyncSession, marketplace) -> None:
    now = marketplace["now"]
    db_session.add_all([
        FinanceTransaction(type=TransactionType.INCOME, amount=Decimal("250.00"), date=now - timedelta(minutes=5)),
        FinanceTransaction(type=TransactionType.EXPENSE, amount=Decimal("75.00"), date=now - timedelta(minutes=5)),
        RecurringTransaction(
            title="Stall rent",
            type=TransactionType.INCOME,
            amount=Decimal("100.00"),
            next_run_at=now - timedelta(minutes=1),
            active=True,
        ),
        RecurringTransaction(
            title="Paused",
            type=TransactionType.INCOME,
            amount=Decimal("999.00"),
            next_run_at=now - timedelta(minutes=1),
            active=False,
        ),
    ])
    await db_session.commit()

    sources = await IncomeService(db_session).get_income_by_source(
        DateRange(now - timedelta(days=1)), now=now + timedelta(minutes=1)
    )

    assert sources["delivery_fees"] == Decimal("500.00")
    assert sources["listing_commission"] == Decimal("150.00")
    assert sources["rental_fees"] == Decimal("0")
    assert sources["manual_income"] == Decimal("250.00")
    assert sources["recurring_income"] == Decimal("100.00")
    assert sources["total"] == Decimal("1000.00")


@pytest.mark.asyncio
async def test_overview_net_equals_income_minus_expenses(db_session: AsyncSession, marketplace) -> None:
    overview = await OverviewService(db_session).get_overview(DateRange())

    income = overview["income_by_source"]
    assert income["inventory_sales"] == Decimal("1000.00")
    assert income["equipment_rental"] == Decimal("3000.00")
    assert income["platform_listing_fees"] == Decimal("1150.00")
    assert income["delivery_income"] == Decimal("500.00")
    assert overview["expenses_by_category"] == {
        "driver_payments": Decimal("600"),
        "farmer_payments": Decimal("1000.00"),
    }
    assert overview["net_profit"] == (
        sum(income.values()) - sum(overview["expenses_by_category"].values())
    )
    assert overview["net_profit"] == Decimal("4050.00")
    assert len(overview["monthly"]) == 6
    assert len(overview["daily"]) == 7
