"""
Timezone and datetime utilities.

Provides utilities for handling timezone-aware datetime operations and the
locale-style date renderings used by exports.
"""

from datetime import date, datetime, time, timezone

import pytz
from dateutil import parser


def make_timezone_aware(
    dt: datetime, timezone_str: str = "UTC", assume_local: bool = False
) -> datetime:
    """
    Make a datetime object timezone-aware.

    Args:
        dt: Datetime object (may be naive or aware).
        timezone_str: Timezone string (e.g., "America/New_York").
        assume_local: If True and dt is naive, assume it's in timezone_str.

    Returns:
        Timezone-aware datetime object.
    """
    tz = pytz.timezone(timezone_str)

    if dt.tzinfo is None:
        if assume_local:
            return tz.localize(dt)
        else:
            return pytz.utc.localize(dt).astimezone(tz)
    else:
        return dt.astimezone(tz)


def to_utc(dt: datetime) -> datetime:
    """Normalize a datetime to UTC, treating naive values as UTC."""
    if dt.tzinfo is None:
        return dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc)


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def parse_datetime(value: str, timezone_str: str = "UTC") -> datetime:
    """
    Parse a user-supplied date/time string into an aware datetime.

    Args:
        value: Date string (various formats supported).
        timezone_str: Timezone assumed when the string carries no offset.

    Returns:
        Timezone-aware datetime object.
    """
    dt = parser.parse(value)
    return make_timezone_aware(dt, timezone_str, assume_local=True)


def parse_day(value: str) -> date:
    """Parse a calendar day such as ``2026-10-19`` or ``10/19/2026``."""
    return parser.parse(value).date()


def day_bounds(start_day: date, end_day: date, timezone_str: str) -> tuple[datetime, datetime]:
    """
    Return the first and last instants of an inclusive day range.

    Args:
        start_day: First day of the range.
        end_day: Last day of the range.
        timezone_str: Timezone the days are interpreted in.

    Returns:
        Tuple of (start of start_day, end of end_day) as aware datetimes.
    """
    tz = pytz.timezone(timezone_str)
    start = tz.localize(datetime.combine(start_day, time.min))
    end = tz.localize(datetime.combine(end_day, time.max))
    return start, end


def format_full_date(dt: datetime, timezone_str: str = "UTC") -> str:
    """``Monday, October 19, 2026``"""
    local = make_timezone_aware(dt, timezone_str)
    return f"{local:%A, %B} {local.day}, {local.year}"


def format_medium_date(dt: datetime, timezone_str: str = "UTC") -> str:
    """``Oct 19, 2026``"""
    local = make_timezone_aware(dt, timezone_str)
    return f"{local:%b} {local.day}, {local.year}"


def format_short_date(dt: datetime | date, timezone_str: str = "UTC") -> str:
    """``10/19/26``"""
    local = make_timezone_aware(dt, timezone_str) if isinstance(dt, datetime) else dt
    return f"{local.month}/{local.day}/{local:%y}"


def format_timestamp(dt: datetime, timezone_str: str = "UTC") -> str:
    """``Oct 19, 2026 at 3:04 PM``"""
    local = make_timezone_aware(dt, timezone_str)
    hour = local.hour % 12 or 12
    return f"{format_medium_date(local, timezone_str)} at {hour}:{local:%M %p}"
