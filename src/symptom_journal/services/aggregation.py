"""
Period aggregation service.

Derives time-window subsets of entries, integer-truncated per-symptom
averages, and sparse bucketed trend series. All functions are pure: they
take the entry collection and a reference ``now`` and never mutate either.
Naive reference times are treated as UTC, matching stored entry dates.
"""

import logging
from collections.abc import Iterable, Sequence
from datetime import date, datetime, timedelta
from enum import Enum

from dateutil.relativedelta import relativedelta
from pydantic import BaseModel, Field

from symptom_journal.domain.catalog import HEADLINE_FIELDS
from symptom_journal.domain.entry import SymptomEntry
from symptom_journal.utils.timezone_utils import (
    day_bounds,
    format_medium_date,
    format_short_date,
    make_timezone_aware,
    to_utc,
)

logger = logging.getLogger(__name__)

Window = tuple[datetime, datetime]


class Period(str, Enum):
    """Export and summary periods."""

    WEEK = "week"
    MONTH = "month"
    YEAR = "year"
    ALL = "all"
    CUSTOM = "custom"


class BucketKind(str, Enum):
    """Bucket widths for trend series."""

    DAY = "day"
    WEEK = "week"
    MONTH = "month"


_BUCKET_STEPS: dict[BucketKind, relativedelta] = {
    BucketKind.DAY: relativedelta(days=1),
    BucketKind.WEEK: relativedelta(weeks=1),
    BucketKind.MONTH: relativedelta(months=1),
}


class SeriesPoint(BaseModel):
    """One point of a trend series: the averages over a time bucket."""

    start: datetime = Field(description="Bucket start (exclusive for buckets)")
    end: datetime = Field(description="Bucket end (inclusive)")
    entry_count: int = Field(ge=1, description="Entries contributing to this point")
    averages: dict[str, int] = Field(description="Integer-truncated average per field")


# ----------------------------------------------------------------------
# Windows
# ----------------------------------------------------------------------


def weekly_window(now: datetime) -> Window:
    now = to_utc(now)
    return now - timedelta(days=7), now


def monthly_window(now: datetime) -> Window:
    now = to_utc(now)
    return now - relativedelta(months=1), now


def yearly_window(now: datetime) -> Window:
    now = to_utc(now)
    return now - relativedelta(years=1), now


def custom_window(start_day: date, end_day: date, timezone_str: str = "UTC") -> Window:
    """
    Inclusive calendar-day range interpreted in the display timezone.

    Args:
        start_day: First day included.
        end_day: Last day included.
        timezone_str: Timezone the days are interpreted in.

    Returns:
        (start of start_day, end of end_day).
    """
    return day_bounds(start_day, end_day, timezone_str)


def period_window(
    period: Period,
    now: datetime,
    start_day: date | None = None,
    end_day: date | None = None,
    timezone_str: str = "UTC",
) -> Window | None:
    """
    Resolve a period into a window.

    Returns:
        The window, or None for ``Period.ALL``.

    Raises:
        ValueError: If a custom period lacks its days.
    """
    if period == Period.WEEK:
        return weekly_window(now)
    if period == Period.MONTH:
        return monthly_window(now)
    if period == Period.YEAR:
        return yearly_window(now)
    if period == Period.CUSTOM:
        if start_day is None or end_day is None:
            raise ValueError("Custom period requires start and end days")
        return custom_window(start_day, end_day, timezone_str)
    return None


def period_title(
    period: Period,
    start_day: date | None = None,
    end_day: date | None = None,
) -> str:
    """Human-readable period name used in report titles and file names."""
    if period == Period.CUSTOM and start_day is not None and end_day is not None:
        return f"{format_short_date(start_day)} to {format_short_date(end_day)}"
    return {
        Period.WEEK: "Week",
        Period.MONTH: "Month",
        Period.YEAR: "Year",
        Period.ALL: "All Time",
    }.get(period, "Custom Range")


# ----------------------------------------------------------------------
# Filtering
# ----------------------------------------------------------------------


def sort_entries(entries: Iterable[SymptomEntry], descending: bool = True) -> list[SymptomEntry]:
    return sorted(entries, key=lambda e: e.date, reverse=descending)


def filter_by_window(
    entries: Iterable[SymptomEntry],
    start: datetime,
    end: datetime,
    descending: bool = True,
) -> list[SymptomEntry]:
    """
    Entries dated within [start, end], both ends inclusive.

    Args:
        entries: Entries to filter.
        start: Window start.
        end: Window end.
        descending: Newest first when True (list views), oldest first
            otherwise (series construction).

    Returns:
        Sorted list of matching entries.
    """
    start, end = to_utc(start), to_utc(end)
    selected = [e for e in entries if start <= e.date <= end]
    return sort_entries(selected, descending=descending)


def entries_for_period(
    entries: Iterable[SymptomEntry],
    period: Period,
    now: datetime,
    start_day: date | None = None,
    end_day: date | None = None,
    timezone_str: str = "UTC",
    descending: bool = True,
) -> list[SymptomEntry]:
    """Entries belonging to a period, newest first by default."""
    window = period_window(period, now, start_day, end_day, timezone_str)
    if window is None:
        return sort_entries(entries, descending=descending)
    return filter_by_window(entries, window[0], window[1], descending=descending)


# ----------------------------------------------------------------------
# Aggregates
# ----------------------------------------------------------------------


def _truncated_mean(total: int, count: int) -> int:
    quotient = abs(total) // count
    return quotient if total >= 0 else -quotient


def averages(
    entries: Sequence[SymptomEntry], fields: Iterable[str] = HEADLINE_FIELDS
) -> dict[str, int]:
    """
    Integer-truncated mean per field.

    Seven entries summing to 22 on a field average to 3. An empty input
    yields zero for every field.

    Args:
        entries: Entries to average.
        fields: Integer entry attributes to average.

    Returns:
        Mapping of field name to truncated mean.
    """
    fields = tuple(fields)
    count = len(entries)
    if count == 0:
        return {name: 0 for name in fields}

    return {
        name: _truncated_mean(sum(getattr(e, name) for e in entries), count) for name in fields
    }


def bucketed_series(
    entries: Iterable[SymptomEntry],
    bucket_kind: BucketKind,
    bucket_count: int,
    now: datetime,
    fields: Iterable[str] = HEADLINE_FIELDS,
) -> list[SeriesPoint]:
    """
    Averages over consecutive buckets counting back from now.

    Bucket k covers ``(now - (k+1)*step, now - k*step]`` with a calendar
    aware step. Buckets without entries are dropped, so the series is
    sparse; points are returned oldest first.

    Args:
        entries: Entries to bucket.
        bucket_kind: Width of each bucket.
        bucket_count: Number of buckets to examine.
        now: Reference time, the inclusive end of the newest bucket.
        fields: Fields to average in each bucket.

    Returns:
        Chronological list of non-empty buckets.
    """
    fields = tuple(fields)
    pool = list(entries)
    now = to_utc(now)
    step = _BUCKET_STEPS[bucket_kind]
    points: list[SeriesPoint] = []

    for k in range(bucket_count):
        end = now - step * k
        start = now - step * (k + 1)
        members = [e for e in pool if start < e.date <= end]
        if not members:
            continue
        points.append(
            SeriesPoint(
                start=start,
                end=end,
                entry_count=len(members),
                averages=averages(members, fields),
            )
        )

    points.reverse()
    logger.debug(f"Built {len(points)} of {bucket_count} {bucket_kind.value} buckets")
    return points


def entry_series(
    entries: Iterable[SymptomEntry],
    limit: int,
    fields: Iterable[str] = HEADLINE_FIELDS,
) -> list[SeriesPoint]:
    """One point per entry for the most recent ``limit`` entries, oldest first."""
    fields = tuple(fields)
    recent = sort_entries(entries, descending=False)[-limit:] if limit > 0 else []
    return [
        SeriesPoint(
            start=e.date,
            end=e.date,
            entry_count=1,
            averages={name: getattr(e, name) for name in fields},
        )
        for e in recent
    ]


def trend_series(
    entries: Iterable[SymptomEntry],
    period: Period,
    now: datetime,
    fields: Iterable[str] = HEADLINE_FIELDS,
) -> list[SeriesPoint]:
    """
    The trend series shown for a period.

    Week: the last 7 entries. Month: weekly averages over 4 weeks. Year,
    all time and custom ranges: monthly averages over 12 months.
    """
    if period == Period.WEEK:
        return entry_series(entries, 7, fields)
    if period == Period.MONTH:
        return bucketed_series(entries, BucketKind.WEEK, 4, now, fields)
    return bucketed_series(entries, BucketKind.MONTH, 12, now, fields)


def describe_date_range(entries: Iterable[SymptomEntry], timezone_str: str = "UTC") -> str:
    """
    Text describing the span of the given entries.

    Returns:
        ``"Oct 19, 2026"`` for a single day, ``"Oct 1 - Oct 19, 2026"`` for
        a span, or an empty string when there are no entries.
    """
    ordered = sort_entries(entries, descending=False)
    if not ordered:
        return ""

    first = make_timezone_aware(ordered[0].date, timezone_str)
    last = make_timezone_aware(ordered[-1].date, timezone_str)

    if first.date() == last.date():
        return format_medium_date(first, timezone_str)
    return f"{first:%b} {first.day} - {format_medium_date(last, timezone_str)}"
