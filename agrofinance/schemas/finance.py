"""
Response schemas for income, payouts and the dashboard overview.
"""

from datetime import date, datetime
from decimal import Decimal
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field

from agrofinance.models.order import ItemType
from agrofinance.services.payouts import RateType


# Income
class IncomeByType(BaseModel):
    inventory: Decimal
    rental: Decimal
    listing_commission: Decimal
    listing_pass_through: Decimal


class OrderIncomeLine(BaseModel):
    order_id: int
    order_number: Optional[str] = None
    created_at: Optional[datetime] = None
    item_type: ItemType
    title: Optional[str] = None
    quantity: int
    unit_price: Decimal
    line_total: Decimal
    listing_commission: Optional[Decimal] = None
    listing_base: Optional[Decimal] = None


class OrderIncomeResponse(BaseModel):
    """Company income from orders. Listing pass-through is not part of ``total_income``."""

    totals_by_type: IncomeByType
    total_income: Decimal
    items: List[OrderIncomeLine]


class DeliveryFeeLine(BaseModel):
    order_id: int
    order_number: Optional[str] = None
    created_at: Optional[datetime] = None
    delivery_fee: Decimal


class DeliveryFeeIncomeResponse(BaseModel):
    total: Decimal
    count: int
    items: List[DeliveryFeeLine]


class IncomeBySourceResponse(BaseModel):
    delivery_fees: Decimal
    listing_commission: Decimal
    rental_fees: Decimal
    manual_income: Decimal
    recurring_income: Decimal
    total: Decimal


# Payouts
class DriverPayoutLine(BaseModel):
    delivery_id: int
    order_number: Optional[str] = None
    created_at: Optional[datetime] = None
    delivery_fee: Decimal
    payout: Decimal
    driver_id: Optional[int] = None
    driver_name: str
    driver_email: str


class DriverTotals(BaseModel):
    driver_id: Optional[int] = None
    driver_name: str
    driver_email: str
    deliveries: int
    total_payout: Decimal


class DriverPayoutResponse(BaseModel):
    total: Decimal
    count: int
    rate_type: RateType
    rate_value: Decimal
    items: List[DriverPayoutLine]
    totals_by_driver: List[DriverTotals]


class FarmerPayoutLine(BaseModel):
    order_id: int
    order_number: Optional[str] = None
    created_at: Optional[datetime] = None
    title: Optional[str] = None
    quantity: int
    unit_price: Decimal
    line_total: Decimal
    commission: Decimal
    payout: Decimal
    farmer_id: Optional[int] = None
    farmer_name: str
    farmer_email: str


class FarmerTotals(BaseModel):
    farmer_id: Optional[int] = None
    farmer_name: str
    farmer_email: str
    lines: int
    total_payout: Decimal


class FarmerPayoutResponse(BaseModel):
    total: Decimal
    commission_percent: int
    items: List[FarmerPayoutLine]
    totals_by_farmer: List[FarmerTotals]


# Overview
class BucketResponse(BaseModel):
    """Income and expenses for one month or day of a series."""

    model_config = ConfigDict(from_attributes=True)

    label: str
    start: date
    year: int
    month: int
    income: Decimal
    expenses: Decimal
    net: Decimal


class IncomeBySource(BaseModel):
    inventory_sales: Decimal
    equipment_rental: Decimal
    platform_listing_fees: Decimal = Field(..., description="Commission plus pass-through")
    delivery_income: Decimal


class ExpensesByCategory(BaseModel):
    driver_payments: Decimal
    farmer_payments: Decimal


class OverviewResponse(BaseModel):
    income_by_source: IncomeBySource
    expenses_by_category: ExpensesByCategory
    total_income: Decimal
    total_expenses: Decimal
    net_profit: Decimal
    monthly: List[BucketResponse]
    daily: List[BucketResponse]
