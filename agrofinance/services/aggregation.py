"""
Pure reductions over transaction-like records.

Everything here is recomputed on each call from the records passed in; no
state is kept between calls.
"""

from collections import OrderedDict
from dataclasses import dataclass
from datetime import date, datetime, timedelta
from decimal import ROUND_HALF_UP, Decimal
from typing import Any, Callable, Dict, Iterable, List, Optional

from dateutil.relativedelta import relativedelta

from agrofinance.models.transaction import TransactionType
from agrofinance.services.ranges import start_of_day, start_of_month

ZERO = Decimal("0")
CENT = Decimal("0.01")


@dataclass
class Bucket:
    """Income and expense sums for one labelled time slot."""

    label: str
    start: date
    income: Decimal = ZERO
    expenses: Decimal = ZERO

    @property
    def year(self) -> int:
        return self.start.year

    @property
    def month(self) -> int:
        return self.start.month

    @property
    def net(self) -> Decimal:
        return self.income - self.expenses


def to_decimal(value: Any) -> Decimal:
    """Coerce a stored or user-supplied amount to ``Decimal``; missing means zero."""
    if value is None or value == "":
        return ZERO
    if isinstance(value, Decimal):
        return value
    return Decimal(str(value))


def round_half_up(value: Decimal, places: Decimal = CENT) -> Decimal:
    return value.quantize(places, rounding=ROUND_HALF_UP)


def percent_of(part: Decimal, whole: Decimal) -> int:
    """``part / whole`` as a whole percent, rounded half-up; 0 when ``whole`` is 0."""
    if not whole:
        return 0
    return int(round_half_up(part / whole * 100, Decimal("1")))


def sum_amounts(records: Iterable[Any], amount: Callable[[Any], Any] = lambda r: r.amount) -> Decimal:
    return sum((to_decimal(amount(r)) for r in records), ZERO)


def totals_by_key(
    records: Iterable[Any],
    key: Callable[[Any], Optional[str]],
    amount: Callable[[Any], Any] = lambda r: r.amount,
) -> Dict[str, Decimal]:
    """Sum amounts grouped by a caller-supplied classification key.

    Keys appear in first-seen order; records whose key is ``None`` are
    grouped under ``"uncategorized"``.
    """
    totals: Dict[str, Decimal] = OrderedDict()
    for record in records:
        group = key(record) or "uncategorized"
        totals[group] = totals.get(group, ZERO) + to_decimal(amount(record))
    return totals


def split_by_type(transactions: Iterable[Any]) -> Dict[TransactionType, Decimal]:
    totals = {TransactionType.INCOME: ZERO, TransactionType.EXPENSE: ZERO}
    for tx in transactions:
        totals[TransactionType(tx.type)] += to_decimal(tx.amount)
    return totals


def net_profit(income: Decimal, expenses: Decimal) -> Decimal:
    """Income minus expenses. May be negative."""
    return income - expenses


def _add(bucket: Bucket, tx: Any) -> None:
    if TransactionType(tx.type) == TransactionType.INCOME:
        bucket.income += to_decimal(tx.amount)
    else:
        bucket.expenses += to_decimal(tx.amount)


def monthly_buckets(
    transactions: Iterable[Any],
    now: Optional[datetime] = None,
    months: int = 6,
) -> List[Bucket]:
    """Trailing ``months`` calendar months including the current one, oldest first."""
    now = now or datetime.now()
    first = start_of_month(now)
    buckets: Dict[tuple, Bucket] = OrderedDict()
    for offset in range(months - 1, -1, -1):
        month_start = first - relativedelta(months=offset)
        buckets[(month_start.year, month_start.month)] = Bucket(
            label=month_start.strftime("%b %y"),
            start=month_start.date(),
        )

    for tx in transactions:
        bucket = buckets.get((tx.date.year, tx.date.month))
        if bucket is not None:
            _add(bucket, tx)
    return list(buckets.values())


def daily_buckets(
    transactions: Iterable[Any],
    now: Optional[datetime] = None,
    days: int = 7,
) -> List[Bucket]:
    """Today minus ``days - 1`` through today, oldest first.

    The window is fixed to ``now`` and ignores any range filter.
    """
    now = now or datetime.now()
    today = start_of_day(now).date()
    buckets: Dict[date, Bucket] = OrderedDict()
    for offset in range(days - 1, -1, -1):
        day = today - timedelta(days=offset)
        buckets[day] = Bucket(label=day.strftime("%a %d"), start=day)

    for tx in transactions:
        bucket = buckets.get(tx.date.date())
        if bucket is not None:
            _add(bucket, tx)
    return list(buckets.values())
