"""
Day Streak Tracking and Snapshot Normalization

A streak counts consecutive calendar days with at least one completion.

Normalization brings a stored snapshot up to date with the clock:
- Missed a day (last training neither today nor yesterday): streak -> 0
- Last training not today: drills_completed_today -> 0
- New week (stored week start != current Monday): weekly counters -> 0
- sessions_this_week is always recounted from session_dates
- level is always recomputed from xp

normalize() is pure and idempotent.
"""

from datetime import date, datetime, timedelta
from typing import Optional
import logging

from progression.gamification.xp_system import level_from_xp
from progression.models.progress import ProgressSnapshot
from progression.utils.datetime_helpers import current_week_start, today_key

logger = logging.getLogger(__name__)


def is_streak_alive(last_training_date: Optional[date], today: date) -> bool:
    """Streak survives if the player trained today or yesterday"""
    if last_training_date is None:
        return False
    return last_training_date in (today, today - timedelta(days=1))


def next_streak(streak: int, last_training_date: Optional[date], today: date) -> int:
    """
    Streak after a completion on `today`

    Logic:
    - Already trained today: no change
    - Trained yesterday: continue streak
    - Anything else: chain broken, start again at 1
    """
    if last_training_date == today:
        return streak
    if is_streak_alive(last_training_date, today):
        return streak + 1
    return 1


def new_snapshot(now: datetime) -> ProgressSnapshot:
    """Default snapshot anchored to the current week"""
    return ProgressSnapshot(week_start_date=current_week_start(now))


def is_new_week(snapshot: ProgressSnapshot, now: datetime) -> bool:
    return snapshot.week_start_date != current_week_start(now)


def normalize(snapshot: ProgressSnapshot, now: datetime) -> ProgressSnapshot:
    """
    Reset expired day/week counters and validate streak continuity

    Args:
        snapshot: Snapshot as loaded or as currently held in memory
        now: Clock reading to normalize against

    Returns:
        New snapshot; the input is not modified
    """
    today = today_key(now)
    week_start = current_week_start(now)
    updates = {}

    if snapshot.streak and not is_streak_alive(snapshot.last_training_date, today):
        logger.info(
            f"Streak broken: was {snapshot.streak}, "
            f"last training {snapshot.last_training_date}, today {today}"
        )
        updates["streak"] = 0

    if snapshot.last_training_date != today:
        updates["drills_completed_today"] = 0

    session_dates = set(snapshot.session_dates)
    if snapshot.week_start_date != week_start:
        logger.debug(f"New week: {snapshot.week_start_date} -> {week_start}")
        updates.update(
            week_start_date=week_start,
            weekly_minutes=0,
            weekly_progress=0,
            app_open_minutes_this_week=0,
        )
        session_dates = set()

    # Self-heal: only dates inside the current week count as sessions
    week_end = week_start + timedelta(days=7)
    session_dates = {d for d in session_dates if week_start <= d < week_end}
    updates["session_dates"] = session_dates
    updates["sessions_this_week"] = len(session_dates)
    updates["level"] = level_from_xp(snapshot.xp)

    return snapshot.model_copy(update=updates, deep=True)
