"""
Driver and farmer payout computation.
"""

from decimal import Decimal
from enum import Enum
from typing import Any, Dict, Iterable, List, Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from agrofinance.core.config import settings
from agrofinance.core.exceptions import ValidationError
from agrofinance.core.logging import get_logger
from agrofinance.models.delivery import Delivery, DeliveryStatus
from agrofinance.models.order import ItemType, Order
from agrofinance.services.aggregation import ZERO, round_half_up, to_decimal
from agrofinance.services.income import fetch_billable_orders, order_line_total, split_listing_line, within_range
from agrofinance.services.ranges import DateRange

logger = get_logger(__name__)

UNASSIGNED = "—"


class RateType(str, Enum):
    """How a driver's per-delivery payout is derived."""

    FLAT = "flat"
    PERCENT = "percent"


def delivery_payout(rate_type: RateType, rate_value: Decimal, delivery_fee: Decimal) -> Decimal:
    """Payout for one completed delivery.

    Flat mode pays ``rate_value`` per delivery. Percent mode pays
    ``rate_value`` percent of the order's delivery fee.
    """
    if rate_type == RateType.PERCENT:
        return delivery_fee * rate_value / 100
    return rate_value


def summarize_driver_payouts(
    deliveries: Iterable[Delivery],
    rate_type: RateType,
    rate_value: Decimal,
) -> Dict[str, Any]:
    items: List[Dict[str, Any]] = []
    by_driver: Dict[str, Dict[str, Any]] = {}
    total = ZERO

    for delivery in deliveries:
        fee = to_decimal(delivery.order.delivery_fee if delivery.order else None)
        payout = delivery_payout(rate_type, rate_value, fee)
        total += payout

        driver = delivery.driver
        driver_name = (driver.full_name if driver else None) or UNASSIGNED
        driver_email = (driver.email if driver else None) or ""
        items.append({
            "delivery_id": delivery.id,
            "order_number": delivery.order.order_number if delivery.order else None,
            "created_at": delivery.created_at,
            "delivery_fee": fee,
            "payout": payout,
            "driver_id": delivery.driver_id,
            "driver_name": driver_name,
            "driver_email": driver_email,
        })

        key = str(delivery.driver_id) if delivery.driver_id is not None else "unknown"
        row = by_driver.setdefault(key, {
            "driver_id": delivery.driver_id,
            "driver_name": driver_name,
            "driver_email": driver_email,
            "deliveries": 0,
            "total_payout": ZERO,
        })
        row["deliveries"] += 1
        row["total_payout"] += payout

    return {
        "total": total,
        "count": len(items),
        "rate_type": rate_type,
        "rate_value": rate_value,
        "items": items,
        "totals_by_driver": list(by_driver.values()),
    }


def summarize_farmer_payouts(orders: Iterable[Order], commission_rate: Decimal) -> Dict[str, Any]:
    """Per listing line, the farmer is paid the line total minus the platform commission."""
    items: List[Dict[str, Any]] = []
    by_farmer: Dict[str, Dict[str, Any]] = {}
    total = ZERO

    for order in orders:
        for item in order.items:
            if item.item_type != ItemType.LISTING:
                continue
            line_total = order_line_total(item)
            payout, commission = split_listing_line(line_total, commission_rate)
            total += payout

            farmer = item.supplier
            farmer_name = (farmer.full_name if farmer else None) or UNASSIGNED
            farmer_email = (farmer.email if farmer else None) or ""
            items.append({
                "order_id": order.id,
                "order_number": order.order_number,
                "created_at": order.created_at,
                "title": item.title,
                "quantity": item.quantity or 1,
                "unit_price": to_decimal(item.price),
                "line_total": line_total,
                "commission": commission,
                "payout": payout,
                "farmer_id": item.supplier_id,
                "farmer_name": farmer_name,
                "farmer_email": farmer_email,
            })

            key = str(item.supplier_id) if item.supplier_id is not None else "unknown"
            row = by_farmer.setdefault(key, {
                "farmer_id": item.supplier_id,
                "farmer_name": farmer_name,
                "farmer_email": farmer_email,
                "lines": 0,
                "total_payout": ZERO,
            })
            row["lines"] += 1
            row["total_payout"] += payout

    return {
        "total": total,
        "commission_percent": int(round_half_up(commission_rate * 100, Decimal("1"))),
        "items": items,
        "totals_by_farmer": list(by_farmer.values()),
    }


class PayoutService:
    """Service computing what the platform owes drivers and farmers."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def get_driver_payouts(
        self,
        date_range: DateRange,
        rate_type: RateType = RateType.FLAT,
        rate_value: Optional[Decimal] = None,
    ) -> Dict[str, Any]:
        if rate_value is None:
            rate_value = settings.driver_flat_rate if rate_type == RateType.FLAT else ZERO
        if rate_value < 0:
            raise ValidationError("rateValue must not be negative")

        query = select(Delivery).where(
            Delivery.status == DeliveryStatus.COMPLETED,
            *within_range(Delivery.created_at, date_range),
        ).order_by(Delivery.created_at.desc(), Delivery.id.desc())
        result = await self.db.execute(query)
        deliveries = list(result.scalars().all())

        summary = summarize_driver_payouts(deliveries, rate_type, rate_value)
        logger.debug(
            "driver_payouts_computed",
            deliveries=summary["count"],
            rate_type=rate_type.value,
            total=str(summary["total"]),
        )
        return summary

    async def get_farmer_payouts(self, date_range: DateRange) -> Dict[str, Any]:
        orders = await fetch_billable_orders(self.db, date_range)
        return summarize_farmer_payouts(orders, settings.commission_rate)
