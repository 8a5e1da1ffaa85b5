"""
Marketplace order models read by the finance service.
"""

from datetime import datetime
from decimal import Decimal
from enum import Enum as PyEnum
from typing import List, Optional

from sqlalchemy import DateTime, Enum, ForeignKey, Integer, Numeric, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from agrofinance.models.base import BaseModel


class OrderStatus(str, PyEnum):
    """Order status enumeration."""

    NOT_READY = "NOT READY"
    READY = "READY"
    CANCELLED = "CANCELLED"


class ItemType(str, PyEnum):
    """What an order line sells."""

    LISTING = "listing"
    INVENTORY = "inventory"
    RENTAL = "rental"


class Order(BaseModel):
    """Customer order with its line items and delivery fee."""

    __tablename__ = "orders"

    order_number: Mapped[str] = mapped_column(String(32), unique=True, nullable=False)
    customer_id: Mapped[Optional[int]] = mapped_column(
        ForeignKey("users.id", ondelete="SET NULL"),
        nullable=True,
        index=True,
    )
    status: Mapped[OrderStatus] = mapped_column(
        Enum(OrderStatus, values_callable=lambda e: [m.value for m in e]),
        nullable=False,
        default=OrderStatus.NOT_READY,
        index=True,
    )
    subtotal: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False, default=Decimal("0"))
    delivery_fee: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False, default=Decimal("0"))
    total: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False, default=Decimal("0"))

    items: Mapped[List["OrderItem"]] = relationship(
        back_populates="order",
        cascade="all, delete-orphan",
        lazy="selectin",
    )

    def __repr__(self) -> str:
        return f"<Order(id={self.id}, number='{self.order_number}', status={self.status})>"


class OrderItem(BaseModel):
    """A single line of an order.

    For listing lines ``price`` is the buyer unit price, commission markup
    included. For rentals ``rental_per_day`` (falling back to ``price``) is the
    daily rate.
    """

    __tablename__ = "order_items"

    order_id: Mapped[int] = mapped_column(
        ForeignKey("orders.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    item_type: Mapped[ItemType] = mapped_column(
        Enum(ItemType, values_callable=lambda e: [m.value for m in e]),
        nullable=False,
    )
    title: Mapped[str] = mapped_column(String(255), nullable=False)
    quantity: Mapped[int] = mapped_column(Integer, nullable=False, default=1)
    price: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False, default=Decimal("0"))

    # Farmer who supplied a listing line
    supplier_id: Mapped[Optional[int]] = mapped_column(
        ForeignKey("users.id", ondelete="SET NULL"),
        nullable=True,
        index=True,
    )

    # Rental-specific fields
    rental_start_date: Mapped[Optional[datetime]] = mapped_column(DateTime, nullable=True)
    rental_end_date: Mapped[Optional[datetime]] = mapped_column(DateTime, nullable=True)
    rental_per_day: Mapped[Optional[Decimal]] = mapped_column(Numeric(12, 2), nullable=True)

    order: Mapped[Order] = relationship(back_populates="items")
    supplier = relationship("User", lazy="selectin")

    def __repr__(self) -> str:
        return f"<OrderItem(id={self.id}, type={self.item_type}, title='{self.title}')>"
