"""Unit tests for day and week boundary helpers (progression/utils/datetime_helpers.py)"""
from datetime import date, datetime, timezone
from zoneinfo import ZoneInfo

import pytest

from progression.utils.datetime_helpers import (
    current_week_start,
    default_clock,
    js_day_of_week,
    today_key,
    yesterday,
)


@pytest.mark.parametrize("day,expected_monday", [
    (date(2025, 1, 6), date(2025, 1, 6)),   # Monday
    (date(2025, 1, 8), date(2025, 1, 6)),   # Wednesday
    (date(2025, 1, 12), date(2025, 1, 6)),  # Sunday
    (date(2025, 1, 13), date(2025, 1, 13)),
    (date(2025, 3, 2), date(2025, 2, 24)),  # across a month boundary
])
def test_current_week_start(day, expected_monday):
    """Test weeks run Monday to Sunday"""
    now = datetime(day.year, day.month, day.day, 12, 0, tzinfo=timezone.utc)

    assert current_week_start(now) == expected_monday


def test_today_key_uses_clock_timezone():
    """Test the local calendar date is used, not UTC"""
    late_evening = datetime(2025, 1, 8, 23, 30, tzinfo=ZoneInfo("America/New_York"))

    assert today_key(late_evening) == date(2025, 1, 8)


def test_yesterday_across_year_boundary():
    """Test yesterday on New Year's Day"""
    assert yesterday(datetime(2025, 1, 1, 8, 0, tzinfo=timezone.utc)) == date(2024, 12, 31)


@pytest.mark.parametrize("day,expected", [
    (date(2025, 1, 12), 0),  # Sunday
    (date(2025, 1, 13), 1),  # Monday
    (date(2025, 1, 18), 6),  # Saturday
])
def test_js_day_of_week(day, expected):
    """Test Sunday-first numbering"""
    assert js_day_of_week(datetime(day.year, day.month, day.day, tzinfo=timezone.utc)) == expected


def test_default_clock_is_timezone_aware():
    """Test the default clock returns aware datetimes"""
    assert default_clock().tzinfo is not None
