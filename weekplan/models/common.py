# File: weekplan/models/common.py
"""
Clock-time and week-window arithmetic.

Clock times are "HH:mm" strings, dates are "YYYY-MM-DD" strings. Weeks are
ISO weeks starting on Monday.
"""

import datetime
import re
from typing import List, Optional, Union

import pytz

from .api import InputValidationError

TIME_PATTERN = re.compile(r"^(\d{2,}):([0-5]\d)$")
DATE_FORMAT = "%Y-%m-%d"
WINDOW_DAYS = 7

DateLike = Union[str, datetime.date]


def time_to_minutes(clock: str) -> int:
    """Minutes since midnight for an "HH:mm" string.

    Hours above 23 are accepted so that overflowed end times produced by
    minutes_to_time can be read back.
    """
    if not isinstance(clock, str):
        raise InputValidationError(f"Clock time must be a string, got {clock!r}")
    match = TIME_PATTERN.match(clock.strip())
    if not match:
        raise InputValidationError(f"Invalid clock time {clock!r} (expected HH:mm)")
    return int(match.group(1)) * 60 + int(match.group(2))


def minutes_to_time(minutes: int) -> str:
    """Format minutes since midnight as "HH:mm". No wrapping past 23:59."""
    hours, mins = divmod(int(minutes), 60)
    return f"{hours:02d}:{mins:02d}"


def parse_date(value: DateLike) -> datetime.date:
    """Parse an exact "YYYY-MM-DD" string (or pass a date through)."""
    if isinstance(value, datetime.datetime):
        return value.date()
    if isinstance(value, datetime.date):
        return value
    if not isinstance(value, str):
        raise InputValidationError(f"Date must be a YYYY-MM-DD string, got {value!r}")
    try:
        return datetime.datetime.strptime(value.strip(), DATE_FORMAT).date()
    except ValueError as e:
        raise InputValidationError(f"Invalid date {value!r} (expected YYYY-MM-DD)") from e


def format_date(value: datetime.date) -> str:
    return value.strftime(DATE_FORMAT)


def week_start(any_date: DateLike) -> str:
    """Monday of the ISO week containing any_date."""
    day = parse_date(any_date)
    return format_date(day - datetime.timedelta(days=day.isoweekday() - 1))


def week_window_dates(week_start_date: DateLike) -> List[str]:
    """The 7 dates of the window, starting at week_start_date."""
    start = parse_date(week_start_date)
    return [format_date(start + datetime.timedelta(days=i)) for i in range(WINDOW_DAYS)]


def shift_week(week_start_date: DateLike, weeks: int) -> str:
    """Move a window start by whole weeks (week navigation)."""
    start = parse_date(week_start_date)
    return format_date(start + datetime.timedelta(weeks=weeks))


def current_week_start(timezone: str, now: Optional[datetime.datetime] = None) -> str:
    """Monday of the current week in the given timezone."""
    tz = pytz.timezone(timezone)
    if now is None:
        local_now = datetime.datetime.now(tz)
    elif now.tzinfo is None:
        local_now = tz.localize(now)
    else:
        local_now = now.astimezone(tz)
    return week_start(local_now.date())
