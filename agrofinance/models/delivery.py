"""
Delivery model read by the finance service for driver payouts.
"""

from enum import Enum as PyEnum
from typing import Optional

from sqlalchemy import Enum, ForeignKey
from sqlalchemy.orm import Mapped, mapped_column, relationship

from agrofinance.models.base import BaseModel
from agrofinance.models.order import Order
from agrofinance.models.user import User


class DeliveryStatus(str, PyEnum):
    """Delivery lifecycle states."""

    PENDING = "PENDING"
    ASSIGNMENT_PENDING = "ASSIGNMENT_PENDING"
    ASSIGNED = "ASSIGNED"
    PREPARING = "PREPARING"
    COLLECTED = "COLLECTED"
    IN_TRANSIT = "IN_TRANSIT"
    COMPLETED = "COMPLETED"
    CANCELLED = "CANCELLED"


class Delivery(BaseModel):
    """Delivery of an order, optionally assigned to a driver."""

    __tablename__ = "deliveries"

    order_id: Mapped[int] = mapped_column(
        ForeignKey("orders.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    driver_id: Mapped[Optional[int]] = mapped_column(
        ForeignKey("users.id", ondelete="SET NULL"),
        nullable=True,
        index=True,
    )
    status: Mapped[DeliveryStatus] = mapped_column(
        Enum(DeliveryStatus),
        nullable=False,
        default=DeliveryStatus.PENDING,
        index=True,
    )

    order: Mapped[Order] = relationship(lazy="selectin")
    driver: Mapped[Optional[User]] = relationship(lazy="selectin")

    def __repr__(self) -> str:
        return f"<Delivery(id={self.id}, order_id={self.order_id}, status={self.status})>"
