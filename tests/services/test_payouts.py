"""
Tests for driver and farmer payout computation.
"""

from decimal import Decimal
from types import SimpleNamespace

import pytest
from sqlalchemy.ext.asyncio import AsyncSession

from agrofinance.core.exceptions import ValidationError
from agrofinance.models.order import ItemType
from agrofinance.services.payouts import (
    UNASSIGNED,
    PayoutService,
    RateType,
    delivery_payout,
    summarize_driver_payouts,
    summarize_farmer_payouts,
)
from agrofinance.services.ranges import DateRange


def make_delivery(id_, driver, fee="250.00"):
    order = SimpleNamespace(delivery_fee=Decimal(fee), order_number=f"ORD-{id_}")
    return SimpleNamespace(
        id=id_,
        order=order,
        driver=driver,
        driver_id=driver.id if driver else None,
        created_at=None,
    )


def test_flat_rate_total_is_count_times_rate() -> None:
    driver = SimpleNamespace(id=7, full_name="Driver Dias", email="d@example.com")
    deliveries = [make_delivery(i, driver) for i in range(5)]

    summary = summarize_driver_payouts(deliveries, RateType.FLAT, Decimal("300"))

    assert summary["total"] == Decimal("1500")
    assert summary["count"] == 5
    assert summary["totals_by_driver"] == [{
        "driver_id": 7,
        "driver_name": "Driver Dias",
        "driver_email": "d@example.com",
        "deliveries": 5,
        "total_payout": Decimal("1500"),
    }]


def test_percent_rate_pays_share_of_delivery_fee() -> None:
    assert delivery_payout(RateType.PERCENT, Decimal("10"), Decimal("250.00")) == Decimal("25")


def test_unassigned_driver_uses_placeholder() -> None:
    summary = summarize_driver_payouts([make_delivery(1, None)], RateType.FLAT, Decimal("300"))
    assert summary["items"][0]["driver_name"] == UNASSIGNED
    assert summary["totals_by_driver"][0]["driver_id"] is None


def test_farmer_payout_reverses_commission_markup() -> None:
    farmer = SimpleNamespace(full_name="Farmer Fernando", email="f@example.com")
    order = SimpleNamespace(
        id=1,
        order_number="ORD-1",
        created_at=None,
        items=[
            SimpleNamespace(
                item_type=ItemType.LISTING, quantity=2, price=Decimal("575.00"),
                title="Carrots", supplier=farmer, supplier_id=3,
                rental_per_day=None, rental_start_date=None, rental_end_date=None,
            ),
            SimpleNamespace(
                item_type=ItemType.INVENTORY, quantity=1, price=Decimal("100.00"),
                title="Seeds", supplier=None, supplier_id=None,
                rental_per_day=None, rental_start_date=None, rental_end_date=None,
            ),
        ],
    )

    summary = summarize_farmer_payouts([order], Decimal("0.15"))

    assert summary["commission_percent"] == 15
    assert summary["total"] == Decimal("1000.00")
    line = summary["items"][0]
    assert line["line_total"] == Decimal("1150.00")
    assert line["commission"] == Decimal("150.00")
    assert line["payout"] + line["commission"] == line["line_total"]
    assert summary["totals_by_farmer"][0]["farmer_name"] == "Farmer Fernando"


@pytest.mark.parametrize("rate,percent", [("0.125", 13), ("0.145", 15), ("0.15", 15)])
def test_commission_percent_rounds_half_up(rate, percent) -> None:
    assert summarize_farmer_payouts([], Decimal(rate))["commission_percent"] == percent


@pytest.mark.asyncio
async def test_driver_payouts_count_only_completed_deliveries(
    db_session: AsyncSession,
    marketplace,
) -> None:
    service = PayoutService(db_session)

    flat = await service.get_driver_payouts(DateRange())
    assert flat["count"] == 2
    assert flat["total"] == Decimal("600")

    percent = await service.get_driver_payouts(DateRange(), RateType.PERCENT, Decimal("10"))
    assert percent["total"] == Decimal("50")


@pytest.mark.asyncio
async def test_negative_rate_is_rejected(db_session: AsyncSession) -> None:
    with pytest.raises(ValidationError):
        await PayoutService(db_session).get_driver_payouts(DateRange(), RateType.FLAT, Decimal("-1"))


@pytest.mark.asyncio
async def test_farmer_payouts_from_orders(db_session: AsyncSession, marketplace) -> None:
    summary = await PayoutService(db_session).get_farmer_payouts(DateRange())

    assert summary["total"] == Decimal("1000.00")
    assert summary["totals_by_farmer"][0]["farmer_id"] == marketplace["farmer"].id
    assert summary["totals_by_farmer"][0]["lines"] == 1
