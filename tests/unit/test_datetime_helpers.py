"""Unit tests for Datetime Helpers (quest_tracker/utils/datetime_helpers.py)"""
from datetime import date, datetime, timezone
from zoneinfo import ZoneInfo

import pytest

from quest_tracker.utils.datetime_helpers import (
    Clock,
    FixedClock,
    SystemClock,
    day_index,
    end_of_day,
    end_of_week,
    get_timezone,
    is_weekend,
    today_iso,
    week_start,
    week_start_iso,
)


# ============================================================================
# Clock Tests
# ============================================================================

def test_clock_is_abstract():
    """Test the base Clock cannot be instantiated"""
    with pytest.raises(TypeError):
        Clock()


def test_system_clock_is_timezone_aware():
    """Test SystemClock returns aware datetimes in its zone"""
    result = SystemClock("Europe/Stockholm").now()

    assert result.tzinfo == ZoneInfo("Europe/Stockholm")


def test_fixed_clock_naive_is_utc():
    """Test naive instants are treated as UTC"""
    clock = FixedClock(datetime(2024, 1, 10, 8, 0))

    assert clock.now().tzinfo is not None
    assert clock.now().utcoffset().total_seconds() == 0


def test_fixed_clock_set_and_advance():
    """Test moving a fixed clock"""
    clock = FixedClock(datetime(2024, 1, 10, 8, 0, tzinfo=timezone.utc))

    clock.advance(days=1, hours=2)
    assert clock.now() == datetime(2024, 1, 11, 10, 0, tzinfo=timezone.utc)

    clock.set(datetime(2024, 2, 1, tzinfo=timezone.utc))
    assert today_iso(clock.now()) == "2024-02-01"


def test_get_timezone_invalid_falls_back():
    """Test unknown zones fall back to UTC"""
    assert get_timezone("Not/AZone") == ZoneInfo("UTC")


# ============================================================================
# Calendar Tests
# ============================================================================

@pytest.mark.parametrize("value,expected", [
    (date(2024, 1, 8), 0),   # Monday
    (date(2024, 1, 10), 2),  # Wednesday
    (date(2024, 1, 14), 6),  # Sunday
    (datetime(2024, 1, 13, 23, 59, tzinfo=timezone.utc), 5),
])
def test_day_index_monday_first(value, expected):
    """Test Monday=0 .. Sunday=6"""
    assert day_index(value) == expected


def test_week_start_is_monday():
    """Test the week starts on Monday, also for Sundays"""
    assert week_start(date(2024, 1, 10)) == date(2024, 1, 8)
    assert week_start(date(2024, 1, 14)) == date(2024, 1, 8)
    assert week_start(date(2024, 1, 8)) == date(2024, 1, 8)
    assert week_start_iso(date(2024, 1, 1)) == "2024-01-01"


def test_is_weekend():
    """Test Saturday and Sunday only"""
    assert is_weekend(date(2024, 1, 13)) is True
    assert is_weekend(date(2024, 1, 14)) is True
    assert is_weekend(date(2024, 1, 12)) is False


def test_today_uses_local_date():
    """Test 'today' follows the clock's timezone"""
    late_utc = datetime(2024, 1, 10, 23, 30, tzinfo=timezone.utc)

    assert today_iso(late_utc) == "2024-01-10"
    assert today_iso(late_utc.astimezone(ZoneInfo("Europe/Stockholm"))) == "2024-01-11"


def test_end_of_day_and_week():
    """Test period ends"""
    now = datetime(2024, 1, 10, 10, 0, tzinfo=timezone.utc)

    assert end_of_day(now).date() == date(2024, 1, 10)
    assert end_of_day(now).hour == 23
    assert end_of_week(now).date() == date(2024, 1, 14)
