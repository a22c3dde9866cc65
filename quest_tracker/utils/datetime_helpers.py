"""
Standardized Date/Time Handling Utilities

Every temporal rule in the engine (daily rollover, weekday slots, week
start, time-of-day achievements) reads time through a Clock so tests can
pin "now".

RULES:
- Clocks return timezone-aware datetimes in the configured timezone
- Dates are persisted as ISO strings (YYYY-MM-DD)
- Weekday indexes are Monday-first: Monday=0 .. Sunday=6
"""

import logging
from abc import ABC, abstractmethod
from datetime import datetime, date, time, timedelta
from typing import Optional, Union
from zoneinfo import ZoneInfo

from quest_tracker.config import QUEST_TIMEZONE

logger = logging.getLogger(__name__)

# Default timezone if the configured one is unknown
DEFAULT_TIMEZONE = "UTC"

SATURDAY = 5
SUNDAY = 6


def get_timezone(tz_name: Optional[str] = None) -> ZoneInfo:
    """
    Resolve an IANA timezone name, falling back to UTC

    Args:
        tz_name: Timezone name (defaults to QUEST_TIMEZONE)

    Returns:
        ZoneInfo object
    """
    tz_str = tz_name or QUEST_TIMEZONE or DEFAULT_TIMEZONE
    try:
        return ZoneInfo(tz_str)
    except Exception as e:
        logger.error(f"Invalid timezone '{tz_str}': {e}")
        return ZoneInfo(DEFAULT_TIMEZONE)


class Clock(ABC):
    """Source of the current instant"""

    @abstractmethod
    def now(self) -> datetime:
        """Current timezone-aware instant"""


class SystemClock(Clock):
    """Wall clock in a fixed timezone"""

    def __init__(self, tz_name: Optional[str] = None):
        self.tz = get_timezone(tz_name)

    def now(self) -> datetime:
        return datetime.now(self.tz)


class FixedClock(Clock):
    """
    Clock pinned to a given instant

    Naive datetimes are interpreted as UTC. Use set() / advance() to move it.
    """

    def __init__(self, instant: datetime):
        self._instant = _ensure_aware(instant)

    def now(self) -> datetime:
        return self._instant

    def set(self, instant: datetime) -> None:
        self._instant = _ensure_aware(instant)

    def advance(self, **kwargs) -> None:
        """Move the clock forward by a timedelta built from kwargs"""
        self._instant = self._instant + timedelta(**kwargs)


def _ensure_aware(instant: datetime) -> datetime:
    if instant.tzinfo is None:
        return instant.replace(tzinfo=ZoneInfo(DEFAULT_TIMEZONE))
    return instant


def _as_date(value: Union[datetime, date]) -> date:
    if isinstance(value, datetime):
        return value.date()
    return value


def today_iso(now: Union[datetime, date]) -> str:
    """Today's date as YYYY-MM-DD"""
    return _as_date(now).isoformat()


def day_index(value: Union[datetime, date]) -> int:
    """Monday-first weekday index (Monday=0 .. Sunday=6)"""
    return _as_date(value).weekday()


def week_start(value: Union[datetime, date]) -> date:
    """Monday of the week containing value"""
    d = _as_date(value)
    return d - timedelta(days=d.weekday())


def week_start_iso(value: Union[datetime, date]) -> str:
    return week_start(value).isoformat()


def is_weekend(value: Union[datetime, date]) -> bool:
    return day_index(value) in (SATURDAY, SUNDAY)


def end_of_day(now: datetime) -> datetime:
    """Last instant of now's day, in now's timezone"""
    return datetime.combine(now.date(), time.max, tzinfo=now.tzinfo)


def end_of_week(now: datetime) -> datetime:
    """Last instant of the Sunday closing now's week"""
    sunday = week_start(now) + timedelta(days=6)
    return datetime.combine(sunday, time.max, tzinfo=now.tzinfo)
