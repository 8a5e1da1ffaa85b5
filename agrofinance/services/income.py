"""
Company income derived from marketplace orders and manual bookkeeping.
"""

from datetime import datetime
from decimal import Decimal
from typing import Any, Dict, Iterable, List, Optional, Tuple

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from agrofinance.core.config import settings
from agrofinance.core.logging import get_logger
from agrofinance.models.order import ItemType, Order, OrderItem, OrderStatus
from agrofinance.models.recurring import RecurringTransaction
from agrofinance.models.transaction import FinanceTransaction, TransactionType
from agrofinance.services.aggregation import ZERO, round_half_up, to_decimal
from agrofinance.services.ranges import DateRange

logger = get_logger(__name__)


def split_listing_line(buyer_line_total: Decimal, commission_rate: Decimal) -> Tuple[Decimal, Decimal]:
    """Split a listing line into the farmer's base amount and the platform commission.

    Listing prices carry the commission as a markup (``final = base * (1 + rate)``),
    so the base is recovered by dividing the markup back out.
    """
    if commission_rate > 0:
        base = round_half_up(buyer_line_total / (1 + commission_rate))
    else:
        base = buyer_line_total
    commission = max(ZERO, buyer_line_total - base)
    return base, commission


def rental_days(start: Optional[datetime], end: Optional[datetime]) -> int:
    """Number of calendar days a rental spans, both ends included, at least 1."""
    if start is None or end is None:
        return 1
    return max(1, (end.date() - start.date()).days + 1)


def rental_rate(item: OrderItem) -> Decimal:
    return to_decimal(item.rental_per_day if item.rental_per_day is not None else item.price)


def order_line_total(item: OrderItem) -> Decimal:
    """What the buyer pays for a line: rentals are charged per day."""
    qty = item.quantity or 1
    if item.item_type == ItemType.RENTAL:
        return rental_rate(item) * rental_days(item.rental_start_date, item.rental_end_date) * qty
    return to_decimal(item.price) * qty


def summarize_order_income(orders: Iterable[Order], commission_rate: Decimal) -> Dict[str, Any]:
    """Income per item type across orders.

    Only listing commission counts towards company income from listings; the
    pass-through part belongs to the farmer and is reported separately.
    """
    totals = {
        "inventory": ZERO,
        "rental": ZERO,
        "listing_commission": ZERO,
        "listing_pass_through": ZERO,
    }
    items: List[Dict[str, Any]] = []

    for order in orders:
        for item in order.items:
            qty = item.quantity or 1
            line_total = order_line_total(item)
            row = {
                "order_id": order.id,
                "order_number": order.order_number,
                "created_at": order.created_at,
                "item_type": item.item_type,
                "title": item.title,
                "quantity": qty,
                "unit_price": rental_rate(item) if item.item_type == ItemType.RENTAL else to_decimal(item.price),
                "line_total": line_total,
            }
            if item.item_type == ItemType.RENTAL:
                totals["rental"] += line_total
            elif item.item_type == ItemType.LISTING:
                base, commission = split_listing_line(line_total, commission_rate)
                totals["listing_commission"] += commission
                totals["listing_pass_through"] += base
                row["listing_commission"] = commission
                row["listing_base"] = base
            else:
                totals["inventory"] += line_total
            items.append(row)

    total_income = totals["inventory"] + totals["rental"] + totals["listing_commission"]
    return {"totals_by_type": totals, "total_income": total_income, "items": items}


def summarize_delivery_fees(orders: Iterable[Order]) -> Dict[str, Any]:
    items = []
    total = ZERO
    for order in orders:
        fee = to_decimal(order.delivery_fee)
        if not fee:
            continue
        total += fee
        items.append({
            "order_id": order.id,
            "order_number": order.order_number,
            "created_at": order.created_at,
            "delivery_fee": fee,
        })
    return {"total": total, "count": len(items), "items": items}


def within_range(column, date_range: DateRange) -> list:
    """WHERE clauses bounding ``column`` to ``date_range``, both ends inclusive."""
    clauses = []
    if date_range.start is not None:
        clauses.append(column >= date_range.start)
    if date_range.end is not None:
        clauses.append(column <= date_range.end)
    return clauses


async def fetch_billable_orders(db: AsyncSession, date_range: DateRange) -> List[Order]:
    """Orders created in range, cancelled ones excluded, with their items loaded."""
    query = select(Order).where(
        Order.status != OrderStatus.CANCELLED,
        *within_range(Order.created_at, date_range),
    )
    result = await db.execute(query)
    return list(result.scalars().all())


class IncomeService:
    """Service computing company income for a date range."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def get_order_income(self, date_range: DateRange) -> Dict[str, Any]:
        orders = await fetch_billable_orders(self.db, date_range)
        return summarize_order_income(orders, settings.commission_rate)

    async def get_delivery_fee_income(self, date_range: DateRange) -> Dict[str, Any]:
        orders = await fetch_billable_orders(self.db, date_range)
        return summarize_delivery_fees(orders)

    async def get_income_by_source(
        self,
        date_range: DateRange,
        now: Optional[datetime] = None,
    ) -> Dict[str, Decimal]:
        """Income split by where it came from.

        An open upper bound is closed at ``now``. Rental platform fees have no
        fee model yet and are always zero.
        """
        if date_range.end is None:
            date_range = DateRange(date_range.start, now or datetime.now())

        orders = await fetch_billable_orders(self.db, date_range)
        delivery_fees = sum((to_decimal(o.delivery_fee) for o in orders), ZERO)
        order_income = summarize_order_income(orders, settings.commission_rate)
        listing_commission = order_income["totals_by_type"]["listing_commission"]
        rental_fees = ZERO

        manual_income = await self._scalar_sum(
            select(func.coalesce(func.sum(FinanceTransaction.amount), 0)).where(
                FinanceTransaction.type == TransactionType.INCOME,
                *within_range(FinanceTransaction.date, date_range),
            )
        )
        recurring_income = await self._scalar_sum(
            select(func.coalesce(func.sum(RecurringTransaction.amount), 0)).where(
                RecurringTransaction.type == TransactionType.INCOME,
                RecurringTransaction.active.is_(True),
                *within_range(RecurringTransaction.next_run_at, date_range),
            )
        )

        total = delivery_fees + listing_commission + rental_fees + manual_income + recurring_income
        return {
            "delivery_fees": delivery_fees,
            "listing_commission": listing_commission,
            "rental_fees": rental_fees,
            "manual_income": manual_income,
            "recurring_income": recurring_income,
            "total": total,
        }

    async def _scalar_sum(self, query) -> Decimal:
        result = await self.db.execute(query)
        return to_decimal(result.scalar())
