"""
Named date ranges used by every finance filter.

All datetimes are naive local time, matching how records are stored.
"""

from dataclasses import dataclass
from datetime import datetime, time, timedelta
from typing import Optional

from agrofinance.core.exceptions import ValidationError

RANGE_NAMES = ("day", "week", "month", "lastMonth")


@dataclass(frozen=True)
class DateRange:
    """Inclusive ``[start, end]`` window; ``None`` on either side means unbounded."""

    start: Optional[datetime] = None
    end: Optional[datetime] = None

    @property
    def is_unbounded(self) -> bool:
        return self.start is None and self.end is None

    def contains(self, moment: datetime) -> bool:
        if self.start is not None and moment < self.start:
            return False
        if self.end is not None and moment > self.end:
            return False
        return True


def to_local_naive(value: Optional[datetime]) -> Optional[datetime]:
    """Stored dates are naive local time; convert aware values to match."""
    if value is None or value.tzinfo is None:
        return value
    return value.astimezone().replace(tzinfo=None)


def start_of_day(moment: datetime) -> datetime:
    return datetime.combine(moment.date(), time.min)


def start_of_week(moment: datetime) -> datetime:
    """Monday 00:00 of the ISO week containing ``moment``."""
    return start_of_day(moment) - timedelta(days=moment.isoweekday() - 1)


def start_of_month(moment: datetime) -> datetime:
    return datetime(moment.year, moment.month, 1)


def resolve_range(name: Optional[str], now: Optional[datetime] = None) -> DateRange:
    """Resolve a range shorthand to a concrete window.

    ``day``, ``week`` and ``month`` run from the start of the current period
    to ``now``; ``lastMonth`` covers the whole previous calendar month. An
    empty name means no date filter.
    """
    if not name:
        return DateRange()

    now = now or datetime.now()

    if name == "day":
        return DateRange(start_of_day(now), now)
    if name == "week":
        return DateRange(start_of_week(now), now)
    if name == "month":
        return DateRange(start_of_month(now), now)
    if name == "lastMonth":
        this_month = start_of_month(now)
        last_day = this_month - timedelta(days=1)
        end = datetime.combine(last_day.date(), time(23, 59, 59, 999000))
        return DateRange(start_of_month(last_day), end)

    raise ValidationError(
        f"Unknown range '{name}', expected one of: {', '.join(RANGE_NAMES)}"
    )


def build_range(
    range_name: Optional[str] = None,
    start: Optional[datetime] = None,
    end: Optional[datetime] = None,
    now: Optional[datetime] = None,
) -> DateRange:
    """Combine explicit bounds with a named range; explicit bounds win."""
    if start is not None or end is not None:
        if start is not None and end is not None and start > end:
            raise ValidationError("'from' must not be after 'to'")
        return DateRange(start, end)
    return resolve_range(range_name, now)
