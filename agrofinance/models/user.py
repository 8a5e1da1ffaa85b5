"""
User database model.
"""

from enum import Enum as PyEnum
from typing import Optional

from sqlalchemy import Boolean, Enum, String
from sqlalchemy.orm import Mapped, mapped_column

from agrofinance.models.base import BaseModel


class UserRole(str, PyEnum):
    """Marketplace roles."""

    ADMIN = "ADMIN"
    FARMER = "FARMER"
    BUYER = "BUYER"
    DRIVER = "DRIVER"


class User(BaseModel):
    """Marketplace account. Finance only reads drivers and farmers and authenticates admins."""

    __tablename__ = "users"

    email: Mapped[str] = mapped_column(String(255), unique=True, index=True, nullable=False)
    full_name: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    hashed_password: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    role: Mapped[UserRole] = mapped_column(
        Enum(UserRole),
        nullable=False,
        default=UserRole.BUYER,
    )
    is_active: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)

    @property
    def is_admin(self) -> bool:
        return self.role == UserRole.ADMIN

    def __repr__(self) -> str:
        """String representation of the user."""
        return f"<User(id={self.id}, email={self.email}, role={self.role})>"
