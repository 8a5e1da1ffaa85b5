"""
Tests for named date ranges.
"""

from datetime import datetime, timedelta, timezone

import pytest

from agrofinance.core.exceptions import ValidationError
from agrofinance.services.ranges import DateRange, build_range, resolve_range, to_local_naive

# Wednesday
NOW = datetime(2024, 3, 13, 15, 30, 0)


def test_day_starts_at_midnight() -> None:
    window = resolve_range("day", NOW)
    assert window.start == datetime(2024, 3, 13, 0, 0, 0)
    assert window.end == NOW


def test_week_starts_on_monday() -> None:
    window = resolve_range("week", NOW)
    assert window.start == datetime(2024, 3, 11)
    assert window.end == NOW


def test_week_on_sunday_goes_back_six_days() -> None:
    sunday = datetime(2024, 3, 17, 9, 0)
    assert resolve_range("week", sunday).start == datetime(2024, 3, 11)


def test_week_on_monday_starts_today() -> None:
    monday = datetime(2024, 3, 11, 8, 15)
    assert resolve_range("week", monday).start == datetime(2024, 3, 11, 0, 0)


def test_month_starts_on_the_first() -> None:
    assert resolve_range("month", NOW).start == datetime(2024, 3, 1)


def test_last_month_covers_whole_previous_month() -> None:
    window = resolve_range("lastMonth", NOW)
    assert window.start == datetime(2024, 2, 1)
    assert window.end == datetime(2024, 2, 29, 23, 59, 59, 999000)


@pytest.mark.parametrize("now", [NOW, datetime(2024, 1, 5), datetime(2024, 3, 1, 0, 0)])
def test_last_month_ends_before_this_month_starts(now) -> None:
    assert resolve_range("lastMonth", now).end < resolve_range("month", now).start


def test_last_month_in_january_wraps_year() -> None:
    window = resolve_range("lastMonth", datetime(2024, 1, 5))
    assert window.start == datetime(2023, 12, 1)
    assert window.end.date() == datetime(2023, 12, 31).date()


@pytest.mark.parametrize("name", [None, ""])
def test_empty_name_is_unbounded(name) -> None:
    assert resolve_range(name, NOW).is_unbounded


def test_unknown_name_is_rejected() -> None:
    with pytest.raises(ValidationError):
        resolve_range("fortnight", NOW)


def test_explicit_bounds_win_over_named_range() -> None:
    start = datetime(2024, 1, 1)
    window = build_range("day", start=start, now=NOW)
    assert window == DateRange(start, None)


def test_inverted_bounds_are_rejected() -> None:
    with pytest.raises(ValidationError):
        build_range(start=datetime(2024, 2, 1), end=datetime(2024, 1, 1))


def test_contains_is_inclusive() -> None:
    window = DateRange(datetime(2024, 3, 1), datetime(2024, 3, 31))
    assert window.contains(datetime(2024, 3, 1))
    assert window.contains(datetime(2024, 3, 31))
    assert not window.contains(datetime(2024, 4, 1))


def test_aware_datetime_becomes_local_naive() -> None:
    aware = datetime(2024, 3, 1, 23, 30, tzinfo=timezone(timedelta(hours=-5)))
    local = to_local_naive(aware)
    assert local.tzinfo is None
    assert local == aware.astimezone().replace(tzinfo=None)


def test_naive_datetime_is_left_alone() -> None:
    assert to_local_naive(NOW) is NOW
    assert to_local_naive(None) is None
