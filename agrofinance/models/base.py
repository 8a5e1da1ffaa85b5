"""
Declarative base and shared columns for all models.
"""

from datetime import datetime
from typing import Any, Dict, List

from sqlalchemy import DateTime, Integer
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column


class Base(DeclarativeBase):
    """Declarative base holding the metadata of every table."""


class BaseModel(Base):
    """Abstract model with a surrogate key and timestamps.

    Timestamps are naive local datetimes, the same clock the range filters use.
    """

    __abstract__ = True

    id: Mapped[int] = mapped_column(Integer, primary_key=True, index=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime,
        nullable=False,
        default=datetime.now,
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime,
        nullable=False,
        default=datetime.now,
        onupdate=datetime.now,
    )

    def apply_changes(self, changes: Dict[str, Any]) -> List[str]:
        """Copy ``changes`` onto the row, ignoring nulls for NOT NULL columns.

        Returns the names of the fields that were written.
        """
        columns = self.__table__.columns
        applied = []
        for field, value in changes.items():
            if value is None and field in columns and not columns[field].nullable:
                continue
            setattr(self, field, value)
            applied.append(field)
        return applied
