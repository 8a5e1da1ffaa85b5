"""
Dashboard overview: income by source, expenses by category and time series.
"""

from datetime import datetime
from decimal import Decimal
from typing import Any, Dict, Optional

from dateutil.relativedelta import relativedelta
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from agrofinance.core.config import settings
from agrofinance.core.logging import get_logger
from agrofinance.models.transaction import FinanceTransaction
from agrofinance.services.aggregation import (
    ZERO,
    daily_buckets,
    monthly_buckets,
    net_profit,
)
from agrofinance.services.income import fetch_billable_orders, summarize_delivery_fees, summarize_order_income
from agrofinance.services.payouts import PayoutService, summarize_farmer_payouts
from agrofinance.services.ranges import DateRange, start_of_day, start_of_month

logger = get_logger(__name__)

SERIES_MONTHS = 6
SERIES_DAYS = 7


def build_overview(
    order_income: Dict[str, Any],
    delivery_income: Decimal,
    driver_payments: Decimal,
    farmer_payments: Decimal,
) -> Dict[str, Any]:
    """Combine income and payout figures so that income minus expenses is the net."""
    totals = order_income["totals_by_type"]
    income_by_source = {
        "inventory_sales": totals["inventory"],
        "equipment_rental": totals["rental"],
        "platform_listing_fees": totals["listing_commission"] + totals["listing_pass_through"],
        "delivery_income": delivery_income,
    }
    expenses_by_category = {
        "driver_payments": driver_payments,
        "farmer_payments": farmer_payments,
    }
    total_income = sum(income_by_source.values(), ZERO)
    total_expenses = sum(expenses_by_category.values(), ZERO)
    return {
        "income_by_source": income_by_source,
        "expenses_by_category": expenses_by_category,
        "total_income": total_income,
        "total_expenses": total_expenses,
        "net_profit": net_profit(total_income, total_expenses),
    }


class OverviewService:
    """Service assembling the finance dashboard for a date range."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def get_overview(
        self,
        date_range: DateRange,
        now: Optional[datetime] = None,
    ) -> Dict[str, Any]:
        now = now or datetime.now()
        orders = await fetch_billable_orders(self.db, date_range)
        order_income = summarize_order_income(orders, settings.commission_rate)
        delivery_income = summarize_delivery_fees(orders)["total"]
        farmer = summarize_farmer_payouts(orders, settings.commission_rate)
        drivers = await PayoutService(self.db).get_driver_payouts(date_range)

        overview = build_overview(order_income, delivery_income, drivers["total"], farmer["total"])
        overview["monthly"] = await self._series(
            start_of_month(now) - relativedelta(months=SERIES_MONTHS - 1), now, monthly=True
        )
        overview["daily"] = await self._series(
            start_of_day(now) - relativedelta(days=SERIES_DAYS - 1), now, monthly=False
        )

        logger.debug(
            "overview_computed",
            total_income=str(overview["total_income"]),
            total_expenses=str(overview["total_expenses"]),
        )
        return overview

    async def _series(self, start: datetime, now: datetime, monthly: bool):
        result = await self.db.execute(
            select(FinanceTransaction).where(
                FinanceTransaction.date >= start,
                FinanceTransaction.date <= now,
            )
        )
        transactions = result.scalars().all()
        if monthly:
            return monthly_buckets(transactions, now, SERIES_MONTHS)
        return daily_buckets(transactions, now, SERIES_DAYS)
