"""Unit tests for period aggregation."""

from datetime import date, datetime, timedelta, timezone

import pytest

from symptom_journal.domain.entry import SymptomEntry
from symptom_journal.services.aggregation import (
    BucketKind,
    Period,
    averages,
    bucketed_series,
    custom_window,
    describe_date_range,
    entries_for_period,
    entry_series,
    filter_by_window,
    monthly_window,
    period_title,
    period_window,
    trend_series,
    weekly_window,
    yearly_window,
)

NOW = datetime(2026, 10, 19, 12, 0, tzinfo=timezone.utc)


def days_ago(days: float, **fields: object) -> SymptomEntry:
    return SymptomEntry(date=NOW - timedelta(days=days), **fields)


def test_weekly_window_boundaries() -> None:
    """Test that the weekly window is inclusive at exactly seven days back."""
    start, end = weekly_window(NOW)
    edge = days_ago(7)
    outside = days_ago(8)
    inside = days_ago(0)

    selected = filter_by_window([edge, outside, inside], start, end)

    if edge not in selected or inside not in selected:
        raise AssertionError("Entries at both window ends should be included")
    if outside in selected:
        raise AssertionError("Entry eight days back should be excluded")


def test_calendar_aware_windows() -> None:
    """Test that month and year windows step by calendar units."""
    march_end = datetime(2026, 3, 31, 8, 0, tzinfo=timezone.utc)
    leap_day = datetime(2028, 2, 29, 8, 0, tzinfo=timezone.utc)

    if monthly_window(march_end)[0] != datetime(2026, 2, 28, 8, 0, tzinfo=timezone.utc):
        raise AssertionError(f"Unexpected month start {monthly_window(march_end)[0]}")
    if yearly_window(leap_day)[0] != datetime(2027, 2, 28, 8, 0, tzinfo=timezone.utc):
        raise AssertionError(f"Unexpected year start {yearly_window(leap_day)[0]}")


def test_custom_window_is_inclusive_in_display_timezone() -> None:
    """Test that a custom range covers whole local days."""
    start, end = custom_window(date(2026, 9, 1), date(2026, 9, 30), "America/New_York")
    late_last_day = SymptomEntry(date=datetime(2026, 10, 1, 3, 0, tzinfo=timezone.utc))
    day_before = SymptomEntry(date=datetime(2026, 9, 1, 3, 0, tzinfo=timezone.utc))

    selected = filter_by_window([late_last_day, day_before], start, end)

    if selected != [late_last_day]:
        raise AssertionError(f"Expected only the late entry, got {selected}")


def test_custom_period_requires_days() -> None:
    """Test that a custom period without days is rejected."""
    with pytest.raises(ValueError):
        period_window(Period.CUSTOM, NOW)


def test_all_period_has_no_window() -> None:
    """Test that all-time returns every entry, newest first."""
    old, new = days_ago(900), days_ago(1)

    if period_window(Period.ALL, NOW) is not None:
        raise AssertionError("All-time should have no window")
    if entries_for_period([old, new], Period.ALL, NOW) != [new, old]:
        raise AssertionError("Expected newest first")


def test_filter_sort_order() -> None:
    """Test descending and ascending ordering of filtered entries."""
    entries = [days_ago(3), days_ago(1), days_ago(2)]
    start, end = weekly_window(NOW)

    newest_first = filter_by_window(entries, start, end)
    oldest_first = filter_by_window(entries, start, end, descending=False)

    if [e.date for e in newest_first] != sorted((e.date for e in entries), reverse=True):
        raise AssertionError("Expected newest first")
    if oldest_first != list(reversed(newest_first)):
        raise AssertionError("Expected oldest first")


@pytest.mark.parametrize(
    "values, expected",
    [
        ([], 0),
        ([1] * 7, 1),
        ([0] * 6 + [1], 0),
        ([4, 4, 3, 3, 3, 3, 2], 3),
        ([10, 9], 9),
    ],
)
def test_averages_truncate(values: list[int], expected: int) -> None:
    """Test integer-truncated means."""
    entries = [days_ago(i, headache_severity=v) for i, v in enumerate(values)]

    result = averages(entries)

    if result["headache_severity"] != expected:
        raise AssertionError(f"Expected {expected}, got {result['headache_severity']}")


def test_averages_empty_yields_zero_for_every_field() -> None:
    """Test that averaging nothing gives zeros, not an error."""
    result = averages([])

    if set(result) != {"headache_severity", "fatigue_level", "back_pain_severity", "mood_severity"}:
        raise AssertionError(f"Unexpected fields {sorted(result)}")
    if any(value != 0 for value in result.values()):
        raise AssertionError(f"Expected zeros, got {result}")


def test_weekly_buckets_are_sparse_and_chronological() -> None:
    """Test three populated weeks out of four produce three ordered points."""
    offsets = [0, 1, 3, 5, 8, 9, 11, 15, 17, 20]
    entries = [days_ago(d, headache_severity=5) for d in offsets]

    points = bucketed_series(entries, BucketKind.WEEK, 4, NOW)

    if len(points) != 3:
        raise AssertionError(f"Expected 3 points, got {len(points)}")
    if [p.start for p in points] != sorted(p.start for p in points):
        raise AssertionError("Points should be oldest first")
    if [p.entry_count for p in points] != [3, 3, 4]:
        raise AssertionError(f"Unexpected counts {[p.entry_count for p in points]}")
    if any(p.averages["headache_severity"] != 5 for p in points):
        raise AssertionError("Every bucket should average 5")
    if points[-1].end != NOW:
        raise AssertionError("Newest bucket should end at now")


def test_bucket_boundary_belongs_to_newer_bucket() -> None:
    """Test that an entry exactly one step back falls in the newer bucket."""
    boundary = days_ago(7, fatigue_level=8)
    older = days_ago(10, fatigue_level=2)

    points = bucketed_series([boundary, older], BucketKind.WEEK, 2, NOW)

    if len(points) != 2:
        raise AssertionError(f"Expected 2 points, got {len(points)}")
    if points[-1].averages["fatigue_level"] != 8:
        raise AssertionError("Boundary entry should be in the newest bucket")


def test_year_trend_uses_monthly_buckets() -> None:
    """Test the year trend groups entries by month."""
    entries = [
        days_ago(2, mood_severity=4),
        days_ago(5, mood_severity=6),
        days_ago(100, mood_severity=1),
        days_ago(400, mood_severity=9),
    ]

    points = trend_series(entries, Period.YEAR, NOW)

    if len(points) != 2:
        raise AssertionError(f"Expected 2 monthly points, got {len(points)}")
    if points[0].averages["mood_severity"] != 1 or points[1].averages["mood_severity"] != 5:
        raise AssertionError(f"Unexpected averages {[p.averages for p in points]}")


def test_week_trend_uses_last_seven_entries() -> None:
    """Test the week trend plots the seven most recent entries oldest first."""
    entries = [days_ago(d, back_pain_severity=d) for d in range(10)]

    points = trend_series(entries, Period.WEEK, NOW)

    if len(points) != 7:
        raise AssertionError(f"Expected 7 points, got {len(points)}")
    if [p.averages["back_pain_severity"] for p in points] != [6, 5, 4, 3, 2, 1, 0]:
        raise AssertionError(f"Unexpected series {[p.averages for p in points]}")


def test_entry_series_with_no_limit() -> None:
    """Test that a zero limit yields an empty series."""
    if entry_series([days_ago(1)], 0) != []:
        raise AssertionError("Expected empty series")


def test_period_titles() -> None:
    """Test period names used in report titles."""
    if period_title(Period.WEEK) != "Week":
        raise AssertionError("Week title")
    if period_title(Period.ALL) != "All Time":
        raise AssertionError("All-time title")
    custom = period_title(Period.CUSTOM, date(2026, 9, 1), date(2026, 9, 30))
    if custom != "9/1/26 to 9/30/26":
        raise AssertionError(f"Unexpected custom title {custom}")


def test_describe_date_range() -> None:
    """Test the span description of a set of entries."""
    first = SymptomEntry(date=datetime(2026, 10, 1, 15, 0, tzinfo=timezone.utc))
    last = SymptomEntry(date=datetime(2026, 10, 19, 15, 0, tzinfo=timezone.utc))

    if describe_date_range([]) != "":
        raise AssertionError("Expected empty description")
    if describe_date_range([last]) != "Oct 19, 2026":
        raise AssertionError(f"Unexpected single-day text {describe_date_range([last])}")
    if describe_date_range([last, first]) != "Oct 1 - Oct 19, 2026":
        raise AssertionError(f"Unexpected span text {describe_date_range([last, first])}")


def test_naive_reference_times_are_utc() -> None:
    """Test that naive now/start/end values are read as UTC instead of failing."""
    naive_now = NOW.replace(tzinfo=None)
    inside = days_ago(2, headache_severity=4)
    outside = days_ago(9, headache_severity=8)

    start, end = weekly_window(naive_now)
    selected = filter_by_window([inside, outside], start, end)
    naive_selected = filter_by_window(
        [inside, outside], start.replace(tzinfo=None), end.replace(tzinfo=None)
    )
    points = bucketed_series([inside, outside], BucketKind.WEEK, 2, naive_now)

    if (start, end) != weekly_window(NOW):
        raise AssertionError("Naive now should give the same window as UTC now")
    if selected != [inside] or naive_selected != [inside]:
        raise AssertionError(f"Unexpected selection {selected}, {naive_selected}")
    if [p.averages["headache_severity"] for p in points] != [8, 4]:
        raise AssertionError(f"Unexpected buckets {[p.averages for p in points]}")
    if monthly_window(naive_now) != monthly_window(NOW):
        raise AssertionError("Naive now should give the same monthly window")
    if yearly_window(naive_now) != yearly_window(NOW):
        raise AssertionError("Naive now should give the same yearly window")
