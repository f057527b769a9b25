"""
Day and week boundary helpers

All progression rules read time through a clock callable so that
"today" and "the current week" come from the same reading:

- today_key(now): the calendar date of now
- current_week_start(now): the Monday of the week containing now
  (weeks run Monday-Sunday)
"""

import logging
from datetime import date, datetime, timedelta
from typing import Callable
from zoneinfo import ZoneInfo

from progression.config import PROGRESS_TIMEZONE

logger = logging.getLogger(__name__)

Clock = Callable[[], datetime]


def default_clock() -> datetime:
    """Current time in the configured progress timezone"""
    return datetime.now(ZoneInfo(PROGRESS_TIMEZONE))


def today_key(now: datetime) -> date:
    """Calendar date used as the key for daily counters"""
    return now.date()


def yesterday(now: datetime) -> date:
    return today_key(now) - timedelta(days=1)


def current_week_start(now: datetime) -> date:
    """
    Monday of the week containing now

    Walks back (day_of_week + 6) % 7 days with Sunday counted as day 7,
    which is what date.weekday() already gives (Monday=0 ... Sunday=6).
    """
    today = today_key(now)
    return today - timedelta(days=today.weekday())


def js_day_of_week(now: datetime) -> int:
    """Day of week numbered Sunday=0 ... Saturday=6"""
    return now.isoweekday() % 7
